"""
Scan Schemas

Result models shared by every part of the scan engine. All of them are frozen
and serialize with camelCase aliases, so ``model_dump(by_alias=True)`` can be
stored or returned by an API as-is.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel


class Impact(str, Enum):
    critical = "critical"
    serious = "serious"
    moderate = "moderate"
    minor = "minor"

    @property
    def weight(self) -> int:
        """Severity weight used by the page score."""
        return _IMPACT_WEIGHTS[self]


_IMPACT_WEIGHTS = {
    Impact.critical: 4,
    Impact.serious: 3,
    Impact.moderate: 2,
    Impact.minor: 1,
}


class Principle(str, Enum):
    perceivable = "Perceivable"
    operable = "Operable"
    understandable = "Understandable"
    robust = "Robust"
    not_applicable = "N/A"  # synthetic scan-error records only


class ScanModel(BaseModel):
    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


class Violation(ScanModel):
    """A single failed check, with how many elements on the page failed it."""
    id: str
    description: str
    impact: Impact
    count: int = Field(ge=0)
    wcag_level: str
    principle: Principle
    code_example: Optional[str] = None
    recommendation: Optional[str] = None
    fix_example: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": "image-alt",
                "description": "Images Without Alt Text",
                "impact": "critical",
                "count": 3,
                "wcagLevel": "1.1.1 (Level A)",
                "principle": "Perceivable",
                "recommendation": "Add descriptive alt text to images that convey information."
            }
        }


class PageResult(ScanModel):
    url: str
    score: int = Field(ge=0, le=100)
    passed_checks: int = Field(ge=0)
    violations: List[Violation] = []
    inconclusive_checks: List[str] = []

    @computed_field(alias="issueCount")
    @property
    def issue_count(self) -> int:
        return sum(v.count for v in self.violations)


class ScanResult(ScanModel):
    """
    Site-level report returned to the caller.

    ``degraded`` is True when the result was produced without a real browser.
    """
    score: int = Field(ge=0, le=100)
    passed_checks: int = Field(ge=0)
    violations: List[Violation] = []
    is_multi_page: bool = False
    pages_scanned: List[str]
    page_results: Optional[List[PageResult]] = None
    degraded: bool = False

    @computed_field(alias="issueCount")
    @property
    def issue_count(self) -> int:
        return sum(v.count for v in self.violations)
