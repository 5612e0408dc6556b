# src/charms/runtime/commitment.py
from __future__ import annotations

"""Hash-based stand-in for the spell proof wrapper.

This is NOT a proving system. It wraps check results in SHA-256 commitments
so callers get stable identifiers for display. The only guarantee is
determinism: identical inputs produce identical bytes (no timestamps, no
randomness).

The verification key is always passed in via ProofConfig; nothing here reads
a module-level mutable value.
"""

import hashlib
import json
import struct
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from charms.runtime.check_types import CheckResult
from charms.runtime.engine_config import DEFAULT_SPELL_CHECKER_VK, EngineConfig

Json = Dict[str, Any]

SEAL_PREFIX = "risc0_seal_v1_"


@dataclass(frozen=True)
class ProofConfig:
    spell_checker_vk: Tuple[int, ...] = DEFAULT_SPELL_CHECKER_VK

    @staticmethod
    def from_engine_config(cfg: EngineConfig) -> "ProofConfig":
        return ProofConfig(spell_checker_vk=tuple(cfg.spell_checker_vk))

    @property
    def vk_hex(self) -> str:
        return vk_to_hex(self.spell_checker_vk)


@dataclass(frozen=True)
class ProofVerification:
    valid: bool
    vk_hash: str
    public_values_hash: str
    proof_commitment: str
    errors: Tuple[str, ...] = ()

    def to_json(self) -> Json:
        return {
            "valid": self.valid,
            "vkHash": self.vk_hash,
            "publicValuesHash": self.public_values_hash,
            "proofCommitment": self.proof_commitment,
            "errors": list(self.errors),
        }


@dataclass(frozen=True)
class WrappedProof:
    valid: bool
    input_commitment: str
    output_commitment: str
    vk_hash: str
    proof_seal: str
    errors: Tuple[str, ...] = ()

    def to_json(self) -> Json:
        return {
            "valid": self.valid,
            "inputCommitment": self.input_commitment,
            "outputCommitment": self.output_commitment,
            "vkHash": self.vk_hash,
            "proofSeal": self.proof_seal,
            "errors": list(self.errors),
        }


def _json_canonical(obj: Any) -> bytes:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def vk_to_bytes(vk: Sequence[int]) -> bytes:
    """Big-endian u32 words."""
    return b"".join(struct.pack(">I", int(w)) for w in vk)


def vk_to_hex(vk: Sequence[int]) -> str:
    return vk_to_bytes(vk).hex()


def verify_commitment(committed: bytes, *, vk: Sequence[int], config: ProofConfig) -> ProofVerification:
    """Commit to `committed` under `vk` and check `vk` against the configured key."""
    errors: list[str] = []
    pv = _sha256(committed)

    if tuple(int(w) for w in vk) != tuple(config.spell_checker_vk):
        errors.append("Verification key does not match spell checker VK")

    vk_bytes = vk_to_bytes(vk)
    commitment = _sha256(pv + vk_bytes)

    return ProofVerification(
        valid=len(errors) == 0,
        vk_hash=vk_bytes.hex(),
        public_values_hash=pv.hex(),
        proof_commitment=commitment.hex(),
        errors=tuple(errors),
    )


def wrap_payload(payload: bytes, *, config: ProofConfig, vk: Optional[Sequence[int]] = None) -> WrappedProof:
    errors: list[str] = []
    if not payload:
        errors.append("Missing spell data")

    use_vk = tuple(vk) if vk is not None else tuple(config.spell_checker_vk)
    input_commitment = _sha256(payload)
    ver = verify_commitment(payload, vk=use_vk, config=config)
    seal = _sha256(input_commitment + bytes.fromhex(ver.public_values_hash))

    all_errors = tuple(errors) + ver.errors
    return WrappedProof(
        valid=len(all_errors) == 0,
        input_commitment=input_commitment.hex(),
        output_commitment=ver.public_values_hash,
        vk_hash=ver.vk_hash,
        proof_seal=SEAL_PREFIX + seal.hex(),
        errors=all_errors,
    )


def wrap_check_result(result: CheckResult, *, config: ProofConfig) -> WrappedProof:
    """Wrap a checker result. An invalid result still gets a (valid) wrapper;
    callers look at result.valid for the verdict."""
    return wrap_payload(_json_canonical(result.to_json()), config=config)


__all__ = [
    "ProofConfig",
    "ProofVerification",
    "SEAL_PREFIX",
    "WrappedProof",
    "verify_commitment",
    "vk_to_bytes",
    "vk_to_hex",
    "wrap_check_result",
    "wrap_payload",
]
