# src/charms/runtime/check/token.py
from __future__ import annotations

"""Fungible token checker.

Rules:
  - conservation: sum(inputs) == sum(outputs), unless the transaction is
    shaped as a mint (no input amount, some output amount) or a burn
    (inputs exceed outputs)
  - a witness that declares the operation as "transfer" opts out of the
    mint/burn exemption, so any mismatch is a conservation failure
  - an explicit empty-bytes authorization (x == Bytes(b"")) is rejected;
    an absent authorization (Empty) is accepted
  - sums are u64; exceeding 2**64-1 is an error, never a wraparound
"""

import logging
from typing import Iterable, Optional, Tuple

from charms.data.types import App, Transaction
from charms.data.value import EMPTY, U64_MAX, Value
from charms.runtime.check.common import Slot, app_values
from charms.runtime.check_types import AppKind, CheckResult

log = logging.getLogger("charms.check.token")

OP_TRANSFER = "transfer"


def _sum_u64(slots: Iterable[Slot], tag: str) -> Tuple[int, bool]:
    """Return (sum, overflowed). Non-U64 states contribute 0."""
    total = 0
    for v in app_values(slots, tag):
        n = v.as_u64()
        if n is not None:
            total += n
    return total, total > U64_MAX


def declared_op(w: Value) -> Optional[str]:
    """Operation declared by the witness: Text("transfer") or Map{"op": Text(...)}."""
    t = w.as_text()
    if t is None:
        m = w.as_map()
        if m is not None and m.get("op") is not None:
            t = m["op"].as_text()
    if t is None:
        return None
    t = t.strip().lower()
    return t or None


def check_token(app: App, tx: Transaction, x: Value = EMPTY, w: Value = EMPTY) -> CheckResult:
    tag = app.tag
    errors: list[str] = []

    input_sum, in_overflow = _sum_u64(tx.inputs, tag)
    output_sum, out_overflow = _sum_u64(tx.outputs, tag)

    if in_overflow:
        errors.append("Token amount overflow: input sum exceeds u64")
    if out_overflow:
        errors.append("Token amount overflow: output sum exceeds u64")

    is_mint = input_sum == 0 and output_sum > 0
    is_burn = input_sum > output_sum

    op = declared_op(w)
    exempt = (is_mint or is_burn) and op != OP_TRANSFER

    if input_sum != output_sum and not exempt:
        errors.append(f"Token conservation failed: input={input_sum} != output={output_sum}")

    auth = x.as_bytes()
    if auth is not None and len(auth) == 0:
        errors.append("Empty authorization data")

    details = {
        "inputSum": input_sum,
        "outputSum": output_sum,
        "isMint": is_mint,
        "isBurn": is_burn,
    }
    res = CheckResult.from_errors(AppKind.TOKEN, details, errors)
    log.debug("token check tag=%s in=%d out=%d valid=%s", tag, input_sum, output_sum, res.valid)
    return res


def is_mint(app: App, tx: Transaction) -> bool:
    """True when no input carries this app's state but some output does."""
    has_in = any(i.app_state(app.tag) is not None for i in tx.inputs)
    has_out = any(o.app_state(app.tag) is not None for o in tx.outputs)
    return (not has_in) and has_out


def is_burn(app: App, tx: Transaction) -> bool:
    input_sum, _ = _sum_u64(tx.inputs, app.tag)
    output_sum, _ = _sum_u64(tx.outputs, app.tag)
    return input_sum > output_sum


__all__ = ["OP_TRANSFER", "check_token", "declared_op", "is_burn", "is_mint"]
