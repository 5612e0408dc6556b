from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, Tuple

Json = Dict[str, Any]


class AppKind(str, Enum):
    """Application families, parsed once from the tag namespace."""

    TOKEN = "token"
    NFT = "nft"
    ESCROW = "escrow"
    BOUNTY = "bounty"
    STABLECOIN = "stablecoin"
    UNKNOWN = "unknown"

    @staticmethod
    def from_tag(tag: str) -> "AppKind":
        t = str(tag or "").lower()
        head, sep, _ = t.partition(":")
        if not sep:
            return AppKind.UNKNOWN
        return _PREFIXES.get(head, AppKind.UNKNOWN)


# Namespace prefix (without the colon) -> kind. "bollar" is the stablecoin app.
_PREFIXES: Dict[str, AppKind] = {
    "token": AppKind.TOKEN,
    "nft": AppKind.NFT,
    "escrow": AppKind.ESCROW,
    "bounty": AppKind.BOUNTY,
    "bollar": AppKind.STABLECOIN,
}


@dataclass(frozen=True)
class CheckResult:
    valid: bool
    app_type: AppKind
    details: Json = field(default_factory=dict)
    errors: Tuple[str, ...] = ()

    @staticmethod
    def from_errors(app_type: AppKind, details: Json, errors: Iterable[str]) -> "CheckResult":
        errs = tuple(str(e) for e in errors)
        return CheckResult(valid=(len(errs) == 0), app_type=app_type, details=dict(details), errors=errs)

    def relabel(self, app_type: AppKind) -> "CheckResult":
        return replace(self, app_type=app_type)

    def with_prior_errors(self, errors: Iterable[str]) -> "CheckResult":
        """Prepend errors found before the app checker ran; `valid` is re-derived."""
        return CheckResult.from_errors(self.app_type, self.details, tuple(errors) + self.errors)

    def to_json(self) -> Json:
        return {
            "valid": self.valid,
            "applicationType": self.app_type.value,
            "details": dict(self.details),
            "errors": list(self.errors),
        }


__all__ = ["AppKind", "CheckResult"]
