from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from fundclient.interfaces.display_sink import DisplaySink

from .display import ConsoleDisplay
from .validators import (
    Validation,
    validate_amount,
    validate_date,
    validate_int_in_range,
    validate_text,
)


class ConsolePrompter:
    """
    Blocking prompts that ask again until the validator accepts the line.

    EOFError / KeyboardInterrupt from read_line propagate to the caller.
    """

    def __init__(
        self,
        read_line: Callable[[str], str] = input,
        display: Optional[DisplaySink] = None,
    ):
        self._read = read_line
        self._display = display or ConsoleDisplay()

    def _ask(self, prompt: str, validate: Callable[[str], Validation]):
        while True:
            result = validate(self._read(prompt))
            if result.ok:
                return result.value
            self._display.show(result.error)

    def ask_text(self, prompt: str) -> str:
        return self._ask(prompt, validate_text)

    def ask_amount(self, prompt: str, floor: float = 0.0) -> float:
        return self._ask(prompt, lambda raw: validate_amount(raw, floor))

    def ask_int(self, prompt: str, lo: int, hi: int) -> int:
        if lo > hi:
            raise ValueError(f"empty range [{lo}, {hi}]")
        return self._ask(prompt, lambda raw: validate_int_in_range(raw, lo, hi))

    def ask_date(self, prompt: str) -> date:
        return self._ask(prompt, validate_date)
