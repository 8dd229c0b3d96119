"""
Pure input validators for console prompts.

Each validator takes the raw line and returns a Validation: either a parsed
value or the message to show before asking again. Nothing here reads input.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

DATE_FORMAT = "%m-%d-%Y"
DATE_PATTERN_LABEL = "MM-dd-yyyy"

EMPTY_TEXT_ERROR = "Input cannot be empty. Please try again."
AMOUNT_ERROR = "Invalid input. Please enter a positive number."
DATE_ERROR = f"Invalid date format. Please enter the date in {DATE_PATTERN_LABEL} format."


@dataclass(frozen=True)
class Validation:
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any) -> "Validation":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "Validation":
        return cls(error=error)


def range_error(lo: int, hi: int) -> str:
    return f"Invalid input. Please enter a number between {lo} and {hi}."


def validate_text(raw: str) -> Validation:
    text = raw.strip()
    if not text:
        return Validation.failure(EMPTY_TEXT_ERROR)
    return Validation.success(text)


def validate_amount(raw: str, floor: float = 0.0) -> Validation:
    """Real number strictly greater than floor."""
    try:
        value = float(raw.strip())
    except ValueError:
        return Validation.failure(AMOUNT_ERROR)
    if not math.isfinite(value) or value <= floor:
        return Validation.failure(AMOUNT_ERROR)
    return Validation.success(value)


def validate_int_in_range(raw: str, lo: int, hi: int) -> Validation:
    """Integer within the inclusive range [lo, hi]. An empty range never validates."""
    try:
        value = int(raw.strip())
    except ValueError:
        return Validation.failure(range_error(lo, hi))
    if not (lo <= value <= hi):
        return Validation.failure(range_error(lo, hi))
    return Validation.success(value)


def validate_date(raw: str, fmt: str = DATE_FORMAT) -> Validation:
    try:
        value: date = datetime.strptime(raw.strip(), fmt).date()
    except ValueError:
        return Validation.failure(DATE_ERROR)
    return Validation.success(value)
