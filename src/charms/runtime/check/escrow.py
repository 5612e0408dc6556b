# src/charms/runtime/check/escrow.py
from __future__ import annotations

from charms.data.types import App, Transaction
from charms.data.value import EMPTY, Value
from charms.runtime.check.common import check_transition
from charms.runtime.check_types import AppKind, CheckResult
from charms.runtime.transitions import ESCROW, StateValue


def check_escrow(app: App, tx: Transaction, x: Value = EMPTY, w: Value = EMPTY) -> CheckResult:
    """Validate an escrow lifecycle step (Created/Funded/Released/Disputed/Refunded + milestones)."""
    return check_transition(AppKind.ESCROW, ESCROW, app, tx)


def escrow_state_name(v: StateValue) -> str:
    return ESCROW.state_name(v)


__all__ = ["check_escrow", "escrow_state_name"]
