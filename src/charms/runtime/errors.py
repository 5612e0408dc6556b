from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class EngineError(Exception):
    """Canonical error type for structural failures outside the modeled checks.

    Expected domain failures (conservation, uniqueness, authorization,
    transitions) are never raised; they are reported in CheckResult.errors.
    """

    code: str
    reason: str
    details: Any | None = None

    def __str__(self) -> str:  # pragma: no cover
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


@dataclass
class CodecError(EngineError):
    """Malformed JSON at the engine boundary (bad hex, lengths, ranges, types)."""
