from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Request

from charms.api.errors import ApiError
from charms.api.metrics import inc_counter
from charms.api.schemas import (
    BuildLifecycleRequest,
    BuildNftRequest,
    BuildTokenRequest,
    CheckRequest,
    VerifySpellRequest,
)
from charms.api.structured_logging import annotate_request, log_event
from charms.data.codec import decode_app, decode_spell, decode_transaction, decode_value, encode_app, encode_transaction
from charms.data.value import EMPTY, Bytes, Value
from charms.runtime.check_types import CheckResult
from charms.runtime.errors import CodecError
from charms.runtime.spell_dispatch import check_spell
from charms.runtime.spell_verify import verify_spell
from charms.tx.builders import (
    BuiltSpell,
    build_bounty_transaction,
    build_escrow_transaction,
    build_nft_transaction,
    build_stablecoin_transaction,
    build_token_transaction,
)

from charms.api.routes_public_parts.common import _decode

router = APIRouter()

log = logging.getLogger("charms.api.spell")

Json = Dict[str, Any]

# Builder demo authorization: non-empty public data so mints pass.
BUILD_AUTH = Bytes(bytes.fromhex("deadbeef"))


def _optional_value(j: Any, *, what: str) -> Value:
    if j is None:
        return EMPTY
    return _decode(decode_value, j, what=what)


def _record(res: CheckResult) -> None:
    inc_counter("spell_checks_total")
    inc_counter("spell_checks_valid_total" if res.valid else "spell_checks_invalid_total")
    inc_counter(f"spell_checks_{res.app_type.value}_total")


def run_check(req: CheckRequest, request: Request) -> CheckResult:
    """Decode a check request and route it through the dispatcher."""
    app = _decode(decode_app, req.app, what="app")
    tx = _decode(decode_transaction, req.tx, what="tx")
    x = _optional_value(req.x, what="x")
    w = _optional_value(req.w, what="w")

    res = check_spell(app, tx, x, w)
    _record(res)
    annotate_request(request, app_tag=app.tag, app_type=res.app_type.value, valid=res.valid)
    log_event(
        log,
        "spell_check",
        tag=app.tag,
        app_type=res.app_type.value,
        valid=res.valid,
        errors=len(res.errors),
    )
    return res


def _build(fn: Callable[..., BuiltSpell], *args: Any, **kwargs: Any) -> BuiltSpell:
    try:
        return fn(*args, **kwargs)
    except CodecError as e:
        raise ApiError.bad_request(e.code, f"invalid build request: {e.reason}", dict(e.details or {}))
    except ValueError as e:
        raise ApiError.bad_request("invalid_build_request", str(e), {})


def _built_response(built: BuiltSpell, x: Value = EMPTY) -> Json:
    res = check_spell(built.app, built.tx, x, EMPTY)
    _record(res)
    inc_counter("spell_builds_total")
    return {
        "ok": True,
        "app": encode_app(built.app),
        "tx": encode_transaction(built.tx),
        "checkResult": res.to_json(),
    }


@router.post("/spell/check")
def spell_check(req: CheckRequest, request: Request) -> Json:
    return run_check(req, request).to_json()


@router.post("/spell/build/token")
def spell_build_token(req: BuildTokenRequest) -> Json:
    built = _build(build_token_transaction, req.appTag, req.vkHash, req.inputAmounts, req.outputAmounts)
    return _built_response(built, BUILD_AUTH)


@router.post("/spell/build/stablecoin")
def spell_build_stablecoin(req: BuildTokenRequest) -> Json:
    built = _build(build_stablecoin_transaction, req.appTag, req.vkHash, req.inputAmounts, req.outputAmounts)
    return _built_response(built, BUILD_AUTH)


@router.post("/spell/build/nft")
def spell_build_nft(req: BuildNftRequest) -> Json:
    built = _build(build_nft_transaction, req.appTag, req.vkHash, req.inputIds, req.outputIds)
    return _built_response(built, BUILD_AUTH)


@router.post("/spell/build/escrow")
def spell_build_escrow(req: BuildLifecycleRequest) -> Json:
    built = _build(
        build_escrow_transaction,
        req.appTag,
        req.nextState,
        req.amount,
        req.currentState,
        vk_hash_hex=req.vkHash,
    )
    return _built_response(built)


@router.post("/spell/build/bounty")
def spell_build_bounty(req: BuildLifecycleRequest) -> Json:
    built = _build(
        build_bounty_transaction,
        req.appTag,
        req.nextState,
        req.amount,
        req.currentState,
        vk_hash_hex=req.vkHash,
    )
    return _built_response(built)


@router.post("/spell/verify")
def spell_verify(req: VerifySpellRequest) -> Json:
    spell = _decode(decode_spell, req.spell, what="spell")
    verdict = verify_spell(spell)
    inc_counter("spell_verifications_total")
    return verdict.to_json()
