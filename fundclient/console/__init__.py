from .display import ConsoleDisplay
from .prompts import ConsolePrompter
from .validators import (
    DATE_FORMAT,
    DATE_PATTERN_LABEL,
    Validation,
    validate_amount,
    validate_date,
    validate_int_in_range,
    validate_text,
)

__all__ = [
    "ConsoleDisplay", "ConsolePrompter",
    "Validation", "DATE_FORMAT", "DATE_PATTERN_LABEL",
    "validate_text", "validate_amount", "validate_int_in_range", "validate_date",
]
