# src/charms/runtime/check/__init__.py
"""Per-application spell checkers.

Each module exposes `check_<app>(app, tx, x, w) -> CheckResult` and is pure:
it reads the immutable Transaction and never raises for modeled domain
failures.
"""

from __future__ import annotations

__all__ = [
    "bounty",
    "escrow",
    "nft",
    "stablecoin",
    "token",
]
