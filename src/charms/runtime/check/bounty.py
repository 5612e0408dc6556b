# src/charms/runtime/check/bounty.py
from __future__ import annotations

from charms.data.types import App, Transaction
from charms.data.value import EMPTY, Value
from charms.runtime.check.common import check_transition
from charms.runtime.check_types import AppKind, CheckResult
from charms.runtime.transitions import BOUNTY, StateValue


def check_bounty(app: App, tx: Transaction, x: Value = EMPTY, w: Value = EMPTY) -> CheckResult:
    return check_transition(AppKind.BOUNTY, BOUNTY, app, tx)


def bounty_state_name(v: StateValue) -> str:
    return BOUNTY.state_name(v)


__all__ = ["bounty_state_name", "check_bounty"]
