from pydantic import BaseModel, Field
from typing import Optional, List


class ValidationError(BaseModel):
    code: int
    message: str


class ValidationResult(BaseModel):
    id: Optional[str] = None
    product_id: Optional[str] = None
    title: Optional[str] = None
    errors: List[ValidationError] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors


class ValidationReport(BaseModel):
    ok: bool
    results: List[ValidationResult] = Field(default_factory=list)
