# src/charms/runtime/spell_dispatch.py

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from charms.data.types import App, Transaction
from charms.data.value import EMPTY, Value
from charms.runtime.check_types import AppKind, CheckResult
from charms.runtime.spell_verify import verify_spell

# Per-application checkers (each returns a CheckResult; none raise for domain failures)
from charms.runtime.check.bounty import check_bounty
from charms.runtime.check.escrow import check_escrow
from charms.runtime.check.nft import check_nft
from charms.runtime.check.stablecoin import check_stablecoin
from charms.runtime.check.token import check_token

log = logging.getLogger("charms.dispatch")

CheckFn = Callable[[App, Transaction, Value, Value], CheckResult]


_CHECKERS: Dict[AppKind, CheckFn] = {
    AppKind.TOKEN: check_token,
    AppKind.NFT: check_nft,
    AppKind.ESCROW: check_escrow,
    AppKind.BOUNTY: check_bounty,
    AppKind.STABLECOIN: check_stablecoin,
}

# Every known application family must have a checker; only UNKNOWN is unrouted.
_missing = {k for k in AppKind if k is not AppKind.UNKNOWN} - set(_CHECKERS)
if _missing:  # pragma: no cover
    raise RuntimeError(f"no checker registered for: {sorted(k.value for k in _missing)}")


def checker_for(kind: AppKind) -> Optional[CheckFn]:
    return _CHECKERS.get(kind)


def supported_types() -> list[str]:
    return [k.value for k in AppKind if k in _CHECKERS]


def unknown_app(app: App) -> CheckResult:
    return CheckResult.from_errors(AppKind.UNKNOWN, {}, [f"Unknown app type: {app.tag}"])


def check_spell(app: App, tx: Transaction, x: Optional[Value] = None, w: Optional[Value] = None) -> CheckResult:
    """Route a check request to the checker named by the app tag namespace.

    `x` is public auxiliary data, `w` private witness data; both default to Empty.
    When the transaction embeds a spell manifest it is verified first and its
    errors lead the result. Pure function of its inputs.
    """

    x = EMPTY if x is None else x
    w = EMPTY if w is None else w

    spell_errors = verify_spell(tx.spell).errors if tx.spell is not None else ()

    kind = app.kind
    fn = _CHECKERS.get(kind)
    if fn is None:
        log.debug("unknown app namespace tag=%s", app.tag)
        return unknown_app(app).with_prior_errors(spell_errors)

    res = fn(app, tx, x, w)
    if spell_errors:
        res = res.with_prior_errors(spell_errors)
    log.debug("spell checked tag=%s kind=%s valid=%s errors=%d", app.tag, kind.value, res.valid, len(res.errors))
    return res


__all__ = ["CheckFn", "check_spell", "checker_for", "supported_types", "unknown_app"]
