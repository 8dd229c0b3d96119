from __future__ import annotations

import sys
from typing import Optional, TextIO


class ConsoleDisplay:
    """
    Print display sink.

    Characters the stream cannot encode (lone surrogates from server text,
    for example) are printed as '?'.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def show(self, text: str) -> None:
        stream = self._stream or sys.stdout
        encoding = getattr(stream, "encoding", None) or "utf-8"
        safe = text.encode(encoding, "replace").decode(encoding, "replace")
        print(safe, file=stream, flush=True)
