# src/charms/runtime/check/common.py
from __future__ import annotations

from typing import Iterable, Iterator, Optional, Union

from charms.data.types import App, Transaction, TxInput, TxOutput
from charms.data.value import Value
from charms.runtime.check_types import AppKind, CheckResult
from charms.runtime.transitions import StateMachine

Slot = Union[TxInput, TxOutput]


def app_values(slots: Iterable[Slot], tag: str) -> Iterator[Value]:
    """Yield the state stored under `tag` on each input/output that has one."""
    for s in slots:
        v = s.app_state(tag)
        if v is not None:
            yield v


def first_u64(slots: Iterable[Slot], tag: str) -> Optional[int]:
    for v in app_values(slots, tag):
        n = v.as_u64()
        if n is not None:
            return n
    return None


def check_transition(kind: AppKind, sm: StateMachine, app: App, tx: Transaction) -> CheckResult:
    """Shared read-and-validate path for the FSM-backed apps (escrow, bounty)."""
    cur = first_u64(tx.inputs, app.tag)
    nxt = first_u64(tx.outputs, app.tag)

    cur_name = sm.state_name(cur)
    nxt_name = sm.state_name(nxt)
    ok = sm.is_valid(cur, nxt)

    errors: list[str] = []
    if not ok:
        errors.append(f"Invalid {sm.name} transition: {cur_name} -> {nxt_name}")

    details = {
        "currentState": cur_name,
        "nextState": nxt_name,
        "stateTransitionValid": ok,
    }
    return CheckResult.from_errors(kind, details, errors)
