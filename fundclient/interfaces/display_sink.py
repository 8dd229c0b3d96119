from typing import Protocol


class DisplaySink(Protocol):
    """Receives preformatted, human-readable text. Nothing flows back."""
    def show(self, text: str) -> None: ...
