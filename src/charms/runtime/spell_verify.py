# src/charms/runtime/spell_verify.py
from __future__ import annotations

"""Normalized spell manifest checks.

A spell is the declared set of per-app state changes across a transaction's
inputs and outputs. Before any per-application checker runs, the manifest
itself must be well-formed: a positive version, at least one input and at
least one output.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from charms.data.types import NormalizedSpell, SpellInput, SpellOutput, Transaction

Json = Dict[str, Any]

CURRENT_SPELL_VERSION = 1


@dataclass(frozen=True)
class SpellVerdict:
    valid: bool
    version: int
    input_count: int
    output_count: int
    errors: Tuple[str, ...] = ()

    def to_json(self) -> Json:
        return {
            "valid": self.valid,
            "version": self.version,
            "inputCount": self.input_count,
            "outputCount": self.output_count,
            "errors": list(self.errors),
        }


def normalize_spell(tx: Transaction, *, version: int = CURRENT_SPELL_VERSION) -> NormalizedSpell:
    """Derive the spell manifest implied by a transaction's charm states."""
    return NormalizedSpell(
        version=int(version),
        ins=tuple(SpellInput(utxo_ref=i.utxo_ref, charms=i.charm_state) for i in tx.inputs),
        outs=tuple(SpellOutput(index=o.index, charms=o.charm_state) for o in tx.outputs),
    )


def verify_spell(spell: NormalizedSpell) -> SpellVerdict:
    ok = spell.version > 0 and len(spell.ins) > 0 and len(spell.outs) > 0
    return SpellVerdict(
        valid=ok,
        version=spell.version,
        input_count=len(spell.ins),
        output_count=len(spell.outs),
        errors=() if ok else ("Invalid spell structure",),
    )


def verify_transaction_spell(tx: Transaction) -> bool:
    # No embedded spell means no charm constraints to check at this level.
    if tx.spell is None:
        return True
    return verify_spell(tx.spell).valid


__all__ = ["CURRENT_SPELL_VERSION", "SpellVerdict", "normalize_spell", "verify_spell", "verify_transaction_spell"]
