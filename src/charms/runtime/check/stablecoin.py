# src/charms/runtime/check/stablecoin.py
from __future__ import annotations

"""Collateralized stablecoin ("bollar") checker.

Uses the token conservation/mint/burn rules unchanged. Collateral-ratio
policy is enforced by whoever decides to mint, not here.
"""

from charms.data.types import App, Transaction
from charms.data.value import EMPTY, Value
from charms.runtime.check.token import check_token
from charms.runtime.check_types import AppKind, CheckResult


def check_stablecoin(app: App, tx: Transaction, x: Value = EMPTY, w: Value = EMPTY) -> CheckResult:
    return check_token(app, tx, x, w).relabel(AppKind.STABLECOIN)


__all__ = ["check_stablecoin"]
