"""Transport and sink interfaces."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from hpglctl.core.model import SerialSettings


class ByteSink(Protocol):
    def write(self, data: bytes, /) -> int | None:
        """Write ``data`` and return the number of bytes accepted, or raise.

        A short count makes the encoder write the remainder; ``None`` means
        everything was accepted, as buffered streams do.
        """


class Transport(Protocol):
    def open(self, port: str, settings: SerialSettings) -> AbstractContextManager[ByteSink]:
        """Open a plotter connection; the sink is valid until the context exits."""
