from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Request

from charms.api.errors import ApiError
from charms.api.metrics import inc_counter
from charms.api.schemas import CheckRequest, ProofVerifyRequest
from charms.api.structured_logging import log_event
from charms.runtime.commitment import verify_commitment, wrap_check_result

from charms.api.routes_public_parts.common import _proof_config
from charms.api.routes_public_parts.spell import run_check

router = APIRouter()

log = logging.getLogger("charms.api.proof")

Json = Dict[str, Any]


@router.post("/proof/wrap")
def proof_wrap(req: CheckRequest, request: Request) -> Json:
    """Check a spell, then wrap the result in a deterministic commitment."""
    res = run_check(req, request)
    proof = wrap_check_result(res, config=_proof_config(request))
    inc_counter("proofs_wrapped_total")
    log_event(log, "proof_wrap", valid=proof.valid, seal=proof.proof_seal)
    return {"checkResult": res.to_json(), "proof": proof.to_json()}


@router.post("/proof/verify")
def proof_verify(req: ProofVerifyRequest, request: Request) -> Json:
    data = str(req.data or "").strip().lower()
    if data.startswith("0x"):
        data = data[2:]
    try:
        committed = bytes.fromhex(data)
    except ValueError:
        raise ApiError.bad_request("invalid_payload", "data must be hex", {"field": "data"})

    pc = _proof_config(request)
    vk = tuple(req.vk) if req.vk is not None else pc.spell_checker_vk
    if len(vk) != 8 or any(w < 0 or w > 0xFFFFFFFF for w in vk):
        raise ApiError.bad_request("invalid_vk", "vk must be 8 u32 words", {"len": len(vk)})

    ver = verify_commitment(committed, vk=vk, config=pc)
    inc_counter("proofs_verified_total")
    return ver.to_json()


@router.get("/proof/vk")
def proof_vk(request: Request) -> Json:
    pc = _proof_config(request)
    return {"vk": list(pc.spell_checker_vk), "vkHex": pc.vk_hex}
