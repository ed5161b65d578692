"""Tests for Shopify variant validation."""

import pytest

from app.models.variants import InventoryItem, SelectedOption, UnitCost
from app.models.validation import ValidationError, ValidationReport, ValidationResult
from app.shopify.validation import SeenKeys, format_validation_results, validate_product_variants


def _codes(result):
    return [e.code for e in result.errors]


def test_valid_batch_passes(make_variant):
    report = validate_product_variants([make_variant(), make_variant()])
    assert report.ok is True
    assert [r.errors for r in report.results] == [[], []]


def test_results_keep_input_order_and_identity(make_variant):
    variants = [make_variant(), make_variant(price=None), make_variant()]
    report = validate_product_variants(variants)
    assert [r.id for r in report.results] == [v.id for v in variants]
    assert report.results[1].product_id == variants[1].product_id
    assert report.results[1].title == variants[1].title
    assert report.ok is False


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"price": None}, 100),
        ({"price": ""}, 100),
        ({"price": " "}, 100),
        ({"inventory_item": InventoryItem()}, 101),
        ({"inventory_item": InventoryItem(unit_cost=UnitCost(amount=""))}, 101),
        ({"inventory_item": InventoryItem(unit_cost=UnitCost(amount="  "))}, 101),
        ({"vendor": None}, 102),
        ({"vendor": ""}, 102),
        ({"title": None}, 103),
        ({"sku": None}, 107),
        ({"sku": ""}, 107),
        ({"barcode": None}, 109),
    ],
)
def test_missing_field_yields_single_code(make_variant, overrides, code):
    report = validate_product_variants([make_variant(**overrides)])
    assert _codes(report.results[0]) == [code]
    assert report.ok is False


def test_missing_vendor_and_title_skip_name_checks(make_variant):
    first = make_variant(vendor="Acme", title="Salsa")
    # same title, would collide on name if a name could be generated
    second = make_variant(vendor=None, title="Salsa")
    third = make_variant(vendor=None, title=None)
    report = validate_product_variants([first, second, third])
    assert _codes(report.results[1]) == [102]
    assert _codes(report.results[2]) == [102, 103]


def test_several_errors_on_one_variant(make_variant):
    variant = make_variant(price="", sku="", barcode="", inventory_item=InventoryItem())
    report = validate_product_variants([variant])
    assert _codes(report.results[0]) == [100, 101, 107, 109]


def test_duplicate_name_flags_later_variant(make_variant):
    first = make_variant(vendor="Acme", title="Salsa", selected_options=[SelectedOption(value="Hot")])
    second = make_variant(vendor="Acme", title="Salsa", selected_options=[SelectedOption(value="Hot")])
    report = validate_product_variants([first, second])
    assert report.results[0].errors == []
    assert _codes(report.results[1]) == [106]
    message = report.results[1].errors[0].message
    assert message == (
        f"duplicate name: Acme Salsa Hot; the name is already in use by product variant with id: {first.id}"
    )


def test_default_title_option_counts_as_same_name(make_variant):
    first = make_variant(vendor="Acme", title="Salsa", selected_options=[])
    second = make_variant(vendor="Acme", title="Salsa", selected_options=[SelectedOption(value="Default Title")])
    report = validate_product_variants([first, second])
    assert _codes(report.results[1]) == [106]


def test_reserved_prefix(make_variant):
    report = validate_product_variants([make_variant(vendor="_Acme")])
    assert _codes(report.results[0]) == [104]
    assert report.results[0].errors[0].message == 'invalid name: name can\'t start with "_"'


def test_long_name_is_never_checked_for_duplicates(make_variant):
    vendor, title = "V" * 50, "T" * 50  # "V... T..." is 101 characters
    first = make_variant(vendor=vendor, title=title)
    second = make_variant(vendor=vendor, title=title)
    report = validate_product_variants([first, second])
    assert _codes(report.results[0]) == [105]
    assert _codes(report.results[1]) == [105]


def test_name_of_exactly_100_characters_is_allowed(make_variant):
    variant = make_variant(vendor="V" * 49, title="T" * 50)
    report = validate_product_variants([variant])
    assert report.ok is True


def test_reserved_prefix_and_too_long_together(make_variant):
    report = validate_product_variants([make_variant(vendor="_" + "V" * 60, title="T" * 60)])
    assert _codes(report.results[0]) == [104, 105]


def test_duplicate_sku_and_barcode(make_variant):
    first = make_variant(sku="SKU-A", barcode="111")
    second = make_variant(sku="SKU-A", barcode="111")
    third = make_variant(sku="SKU-A", barcode="222")
    report = validate_product_variants([first, second, third])
    assert _codes(report.results[1]) == [108, 110]
    assert _codes(report.results[2]) == [108]
    assert first.id in report.results[2].errors[0].message
    assert report.results[1].errors[1].message == (
        f"duplicate barcode: 111; the barcode is already in use by product variant with id: {first.id}"
    )


def test_first_occurrence_wins_even_when_it_has_other_errors(make_variant):
    first = make_variant(sku="SKU-A", price=None)
    second = make_variant(sku="SKU-A")
    report = validate_product_variants([first, second])
    assert _codes(report.results[0]) == [100]
    assert _codes(report.results[1]) == [108]


def test_empty_batch_is_ok():
    report = validate_product_variants([])
    assert report.ok is True
    assert report.results == []


def test_format_validation_results():
    report = ValidationReport(
        ok=False,
        results=[
            ValidationResult(id="v1", product_id="p1", title="Salsa"),
            ValidationResult(
                id="v2", product_id="p2", title="Chips",
                errors=[ValidationError(code=107, message="invalid sku: sku can't be empty")],
            ),
        ],
    )
    lines = format_validation_results(report)
    assert lines[:5] == [
        "   [v1]",
        "       product id: p1",
        "       product name: Salsa",
        "       status: PASSED",
        "",
    ]
    assert "       status: FAILED" in lines
    assert "           107 invalid sku: sku can't be empty" in lines
    assert lines[-1] == "   some variants did not pass validation"


def test_format_validation_results_all_passed():
    lines = format_validation_results(ValidationReport(ok=True, results=[]))
    assert lines == ["   all variants passed validation"]


def test_seen_keys_claim_tracks_each_kind_separately():
    seen = SeenKeys()
    assert seen.claim("skus", "S1", "gid://shopify/ProductVariant/1") is None
    assert seen.claim("skus", "S1", "gid://shopify/ProductVariant/2") == "gid://shopify/ProductVariant/1"
    # the same key under another kind is unclaimed
    assert seen.claim("barcodes", "S1", "gid://shopify/ProductVariant/2") is None
    assert seen.skus == {"S1": "gid://shopify/ProductVariant/1"}
    assert seen.claim("names", "Acme Salsa", None) is None
    assert seen.claim("names", "Acme Salsa", "gid://shopify/ProductVariant/3") == ""
