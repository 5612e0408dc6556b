# src/charms/tx/builders.py
from __future__ import annotations

"""Synthetic transaction builders.

Builders always produce structurally valid (App, Transaction) pairs: the tag
carries the right namespace and hashes are 32 bytes. They do NOT promise the
transaction passes its checker; e.g. building a token transfer with
mismatched amounts is allowed so callers can exercise the failure path.
"""

import secrets
from dataclasses import dataclass
from typing import Optional, Sequence

from charms.data.codec import decode_hex
from charms.data.types import HASH_LEN, App, CharmState, Transaction, TxInput, TxOutput, UtxoRef
from charms.data.value import U64, Bytes, Value

DUST_SATS = 546
P2WPKH_PREFIX = bytes.fromhex("0014")
ZERO_HASH = bytes(HASH_LEN)


@dataclass(frozen=True)
class BuiltSpell:
    app: App
    tx: Transaction


def _vk_hash(vk_hash_hex: Optional[str]) -> bytes:
    """Left-pad a short hex key to 32 bytes; None -> random placeholder."""
    if vk_hash_hex is None:
        return secrets.token_bytes(HASH_LEN)
    return decode_hex(vk_hash_hex.strip().lower().rjust(HASH_LEN * 2, "0"), field="vk_hash", length=HASH_LEN)


def _txid(txid: Optional[bytes]) -> bytes:
    return secrets.token_bytes(HASH_LEN) if txid is None else txid


def _with_tag(prefix: str, app_tag: str) -> str:
    tag = str(app_tag or "").strip()
    if not tag.lower().startswith(prefix + ":"):
        tag = f"{prefix}:{tag}"
    return tag


def _state(tag: str, v: Value) -> CharmState:
    return CharmState.of({tag: v})


def _fungible(app: App, input_amounts: Sequence[int], output_amounts: Sequence[int], txid: Optional[bytes]) -> BuiltSpell:
    tx = Transaction(
        txid=_txid(txid),
        inputs=tuple(
            TxInput(utxo_ref=UtxoRef(txid=ZERO_HASH, vout=i), charm_state=_state(app.tag, U64(int(a))))
            for i, a in enumerate(input_amounts)
        ),
        outputs=tuple(
            TxOutput(index=i, value=DUST_SATS, script_pubkey=P2WPKH_PREFIX, charm_state=_state(app.tag, U64(int(a))))
            for i, a in enumerate(output_amounts)
        ),
    )
    return BuiltSpell(app=app, tx=tx)


def build_token_transaction(
    app_tag: str,
    vk_hash_hex: Optional[str],
    input_amounts: Sequence[int],
    output_amounts: Sequence[int],
    *,
    txid: Optional[bytes] = None,
) -> BuiltSpell:
    """One input/output per amount, each carrying U64(amount) under the tag."""
    app = App(tag=_with_tag("token", app_tag), vk_hash=_vk_hash(vk_hash_hex))
    return _fungible(app, input_amounts, output_amounts, txid)


def build_stablecoin_transaction(
    app_tag: str,
    vk_hash_hex: Optional[str],
    input_amounts: Sequence[int],
    output_amounts: Sequence[int],
    *,
    txid: Optional[bytes] = None,
) -> BuiltSpell:
    app = App(tag=_with_tag("bollar", app_tag), vk_hash=_vk_hash(vk_hash_hex))
    return _fungible(app, input_amounts, output_amounts, txid)


def _lifecycle(
    prefix: str,
    app_tag: str,
    next_state: int,
    amount: int,
    current_state: Optional[int],
    vk_hash_hex: Optional[str],
    txid: Optional[bytes],
) -> BuiltSpell:
    app = App(tag=_with_tag(prefix, app_tag), vk_hash=_vk_hash(vk_hash_hex))
    # Creation still spends a (charm-less) funding input.
    inp = TxInput(
        utxo_ref=UtxoRef(txid=ZERO_HASH, vout=0),
        charm_state=None if current_state is None else _state(app.tag, U64(int(current_state))),
    )
    out = TxOutput(
        index=0,
        value=int(amount),
        script_pubkey=P2WPKH_PREFIX,
        charm_state=_state(app.tag, U64(int(next_state))),
    )
    return BuiltSpell(app=app, tx=Transaction(txid=_txid(txid), inputs=(inp,), outputs=(out,)))


def build_escrow_transaction(
    app_tag: str,
    next_state: int,
    amount: int,
    current_state: Optional[int] = None,
    *,
    vk_hash_hex: Optional[str] = None,
    txid: Optional[bytes] = None,
) -> BuiltSpell:
    return _lifecycle("escrow", app_tag, next_state, amount, current_state, vk_hash_hex, txid)


def build_bounty_transaction(
    app_tag: str,
    next_state: int,
    amount: int,
    current_state: Optional[int] = None,
    *,
    vk_hash_hex: Optional[str] = None,
    txid: Optional[bytes] = None,
) -> BuiltSpell:
    return _lifecycle("bounty", app_tag, next_state, amount, current_state, vk_hash_hex, txid)


def build_nft_transaction(
    app_tag: str,
    vk_hash_hex: Optional[str],
    input_ids: Sequence[str],
    output_ids: Sequence[str],
    *,
    txid: Optional[bytes] = None,
) -> BuiltSpell:
    """NFT ids are hex strings; each becomes Bytes on its own input/output."""
    app = App(tag=_with_tag("nft", app_tag), vk_hash=_vk_hash(vk_hash_hex))
    tx = Transaction(
        txid=_txid(txid),
        inputs=tuple(
            TxInput(utxo_ref=UtxoRef(txid=ZERO_HASH, vout=i), charm_state=_state(app.tag, Bytes(decode_hex(nid, field="nft_id"))))
            for i, nid in enumerate(input_ids)
        ),
        outputs=tuple(
            TxOutput(
                index=i,
                value=DUST_SATS,
                script_pubkey=P2WPKH_PREFIX,
                charm_state=_state(app.tag, Bytes(decode_hex(nid, field="nft_id"))),
            )
            for i, nid in enumerate(output_ids)
        ),
    )
    return BuiltSpell(app=app, tx=tx)


__all__ = [
    "BuiltSpell",
    "DUST_SATS",
    "build_bounty_transaction",
    "build_escrow_transaction",
    "build_nft_transaction",
    "build_stablecoin_transaction",
    "build_token_transaction",
]
