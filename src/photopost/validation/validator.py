from __future__ import annotations

import re
from typing import List

from photopost.validation.report import (
    FIELD_DESCRIPTION,
    FIELD_HASHTAGS,
    ValidationReport,
    ValidationResult,
)

MAX_HASHTAGS = 5
MAX_DESCRIPTION_LENGTH = 140

# '#' then 2..19 Latin/Cyrillic letters or digits
HASHTAG_PATTERN = re.compile(r"^#[A-Za-zА-Яа-яЁё0-9]{2,19}$")

MSG_TOO_MANY = f"No more than {MAX_HASHTAGS} hashtags allowed."
MSG_DUPLICATE = "Hashtags must not repeat (case is ignored)."
MSG_BAD_FORMAT = "A hashtag starts with # followed by 2-19 letters or digits."
MSG_DESCRIPTION_TOO_LONG = f"Description must not exceed {MAX_DESCRIPTION_LENGTH} characters."


def split_hashtags(value: str) -> List[str]:
    return [t.lower() for t in (value or "").split()]


def validate_hashtags(value: str) -> ValidationResult:
    """
    Whitespace-separated hashtag list. Empty is fine; otherwise at most 5 tags,
    no case-insensitive duplicates, each tag matching HASHTAG_PATTERN.
    """
    tags = split_hashtags(value)
    if not tags:
        return ValidationResult(FIELD_HASHTAGS, True)

    if len(tags) > MAX_HASHTAGS:
        return ValidationResult(FIELD_HASHTAGS, False, MSG_TOO_MANY)
    if len(set(tags)) != len(tags):
        return ValidationResult(FIELD_HASHTAGS, False, MSG_DUPLICATE)
    if not all(HASHTAG_PATTERN.match(t) for t in tags):
        return ValidationResult(FIELD_HASHTAGS, False, MSG_BAD_FORMAT)
    return ValidationResult(FIELD_HASHTAGS, True)


def description_length(value: str) -> int:
    """Length in UTF-16 code units: characters outside the BMP (most emoji) count twice."""
    return len((value or "").encode("utf-16-le")) // 2


def validate_description(value: str) -> ValidationResult:
    if description_length(value) > MAX_DESCRIPTION_LENGTH:
        return ValidationResult(FIELD_DESCRIPTION, False, MSG_DESCRIPTION_TOO_LONG)
    return ValidationResult(FIELD_DESCRIPTION, True)


def validate_form(hashtags: str, description: str) -> ValidationReport:
    results = [validate_hashtags(hashtags), validate_description(description)]
    return ValidationReport(passed=all(r.valid for r in results), results=results)


def format_report_text(report: ValidationReport) -> str:
    lines: List[str] = []
    lines.append(f"Overall: {'PASS' if report.passed else 'FAIL'}")
    for r in report.results:
        mark = "ok" if r.valid else "FAIL"
        lines.append(f"[{mark}] {r.field}" + (f": {r.message}" if r.message else ""))
    return "\n".join(lines)
