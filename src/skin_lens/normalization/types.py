"""Intermediate types for reading resolution."""

from dataclasses import dataclass
from typing import Literal

ReadingKind = Literal["number", "string", "object", "missing", "malformed"]


@dataclass(frozen=True)
class ResolvedReading:
    """Result of resolving one raw upstream field.

    ``value`` is set only for ``number``, ``string`` and ``object`` kinds;
    ``confidence`` only when the upstream supplied a finite one.
    """

    kind: ReadingKind
    value: float | None = None
    confidence: float | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None
