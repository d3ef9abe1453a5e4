from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

FIELD_HASHTAGS = "hashtags"
FIELD_DESCRIPTION = "description"


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of validating a single form field. ``message`` is empty when valid.
    """
    field: str
    valid: bool
    message: str = ""


@dataclass(frozen=True)
class ValidationReport:
    """
    Collection of field results for the upload form. Submission is allowed only if ``passed``.
    """
    passed: bool
    results: list[ValidationResult]

    def for_field(self, field: str) -> Optional[ValidationResult]:
        for r in self.results:
            if r.field == field:
                return r
        return None
