# src/charms/data/codec.py
from __future__ import annotations

"""JSON boundary codec.

Wire conventions:
  - binary values (txid, vk_hash, NFT ids, byte payloads, script_pubkey) are
    lower-case hex strings of even length
  - U64/I64 are plain JSON integers; Python ints are arbitrary precision so
    nothing above 2**53 is lost, and ranges are checked on decode
  - values are tagged: {"type": "u64", "value": 1000}

Every decode failure raises CodecError(code="invalid_payload", reason=..., details=...).
"""

from typing import Any, Dict, List as TList, Optional

from charms.data.types import (
    HASH_LEN,
    App,
    CharmState,
    NormalizedSpell,
    SpellInput,
    SpellOutput,
    Transaction,
    TxInput,
    TxOutput,
    UtxoRef,
)
from charms.data.value import EMPTY, I64, U64, Bool, Bytes, Empty, List, Map, Text, Value
from charms.runtime.errors import CodecError

Json = Dict[str, Any]

_HEX = set("0123456789abcdefABCDEF")


def _fail(reason: str, **details: Any) -> CodecError:
    return CodecError("invalid_payload", reason, details or None)


def _as_obj(j: Any, *, what: str) -> Json:
    if not isinstance(j, dict):
        raise _fail(f"{what}_not_object", got=type(j).__name__)
    return j


def decode_hex(s: Any, *, field: str, length: Optional[int] = None) -> bytes:
    if not isinstance(s, str):
        raise _fail("hex_not_string", field=field, got=type(s).__name__)
    if len(s) % 2 != 0 or any(c not in _HEX for c in s):
        raise _fail("malformed_hex", field=field)
    b = bytes.fromhex(s)
    if length is not None and len(b) != length:
        raise _fail("bad_length", field=field, expected=length, got=len(b))
    return b


def encode_hex(b: bytes) -> str:
    return bytes(b).hex()


def _decode_int(v: Any, *, field: str) -> int:
    # bool is an int subclass and floats lose precision; both are rejected
    if isinstance(v, bool) or not isinstance(v, int):
        raise _fail("not_integer", field=field, got=type(v).__name__)
    return v


# ---------------------------------------------------------------------------
# Value
# ---------------------------------------------------------------------------


def decode_value(j: Any) -> Value:
    if j is None:
        return EMPTY
    obj = _as_obj(j, what="value")
    t = str(obj.get("type") or "").strip().lower()
    v = obj.get("value")
    try:
        if t == "empty":
            return EMPTY
        if t == "bool":
            if not isinstance(v, bool):
                raise _fail("not_bool", got=type(v).__name__)
            return Bool(v)
        if t == "u64":
            return U64(_decode_int(v, field="u64"))
        if t == "i64":
            return I64(_decode_int(v, field="i64"))
        if t == "bytes":
            return Bytes(decode_hex(v, field="bytes"))
        if t in {"string", "text"}:
            if not isinstance(v, str):
                raise _fail("not_string", got=type(v).__name__)
            return Text(v)
        if t == "list":
            if not isinstance(v, list):
                raise _fail("not_list", got=type(v).__name__)
            return List(tuple(decode_value(it) for it in v))
        if t == "map":
            m = _as_obj(v, what="map")
            return Map(tuple((str(k), decode_value(x)) for k, x in m.items()))
    except ValueError as e:
        raise _fail("value_out_of_range", type=t, error=str(e)) from e
    raise _fail("unknown_value_type", type=t)


def encode_value(v: Value) -> Json:
    if isinstance(v, Empty):
        return {"type": "empty"}
    if isinstance(v, Bool):
        return {"type": "bool", "value": v.value}
    if isinstance(v, U64):
        return {"type": "u64", "value": v.value}
    if isinstance(v, I64):
        return {"type": "i64", "value": v.value}
    if isinstance(v, Bytes):
        return {"type": "bytes", "value": encode_hex(v.value)}
    if isinstance(v, Text):
        return {"type": "string", "value": v.value}
    if isinstance(v, List):
        return {"type": "list", "value": [encode_value(it) for it in v.items]}
    if isinstance(v, Map):
        return {"type": "map", "value": {k: encode_value(x) for k, x in v.entries}}
    raise TypeError(f"not a Value: {type(v).__name__}")


# ---------------------------------------------------------------------------
# Structural types
# ---------------------------------------------------------------------------


def decode_app(j: Any) -> App:
    obj = _as_obj(j, what="app")
    tag = obj.get("tag")
    if not isinstance(tag, str) or not tag.strip():
        raise _fail("missing_tag")
    vk = decode_hex(obj.get("vk_hash"), field="vk_hash", length=HASH_LEN)
    return App(tag=tag, vk_hash=vk, params=decode_value(obj.get("params")))


def encode_app(app: App) -> Json:
    return {"tag": app.tag, "vk_hash": encode_hex(app.vk_hash), "params": encode_value(app.params)}


def decode_utxo_ref(j: Any) -> UtxoRef:
    obj = _as_obj(j, what="utxo_ref")
    txid = decode_hex(obj.get("txid"), field="utxo_ref.txid", length=HASH_LEN)
    vout = _decode_int(obj.get("vout"), field="utxo_ref.vout")
    try:
        return UtxoRef(txid=txid, vout=vout)
    except ValueError as e:
        raise _fail("bad_utxo_ref", error=str(e)) from e


def encode_utxo_ref(r: UtxoRef) -> Json:
    return {"txid": encode_hex(r.txid), "vout": r.vout}


def decode_charm_state(j: Any) -> Optional[CharmState]:
    if j is None:
        return None
    obj = _as_obj(j, what="charm_state")
    apps = obj.get("apps", {})
    apps = _as_obj(apps, what="charm_state.apps")
    return CharmState.of({str(tag): decode_value(v) for tag, v in apps.items()})


def encode_charm_state(s: Optional[CharmState]) -> Optional[Json]:
    if s is None:
        return None
    return {"apps": {tag: encode_value(v) for tag, v in s.apps}}


def decode_tx_input(j: Any) -> TxInput:
    obj = _as_obj(j, what="input")
    return TxInput(
        utxo_ref=decode_utxo_ref(obj.get("utxo_ref")),
        charm_state=decode_charm_state(obj.get("charm_state")),
    )


def decode_tx_output(j: Any) -> TxOutput:
    obj = _as_obj(j, what="output")
    try:
        return TxOutput(
            index=_decode_int(obj.get("index"), field="output.index"),
            value=_decode_int(obj.get("value", 0), field="output.value"),
            script_pubkey=decode_hex(obj.get("script_pubkey") or "", field="output.script_pubkey"),
            charm_state=decode_charm_state(obj.get("charm_state")),
        )
    except ValueError as e:
        raise _fail("bad_output", error=str(e)) from e


def decode_spell(j: Any) -> NormalizedSpell:
    obj = _as_obj(j, what="spell")
    ins_raw = obj.get("ins") or []
    outs_raw = obj.get("outs") or []
    if not isinstance(ins_raw, list) or not isinstance(outs_raw, list):
        raise _fail("spell_ins_outs_not_lists")
    ins: TList[SpellInput] = []
    for it in ins_raw:
        o = _as_obj(it, what="spell_input")
        ins.append(SpellInput(utxo_ref=decode_utxo_ref(o.get("utxo_ref")), charms=decode_charm_state(o.get("charms"))))
    outs: TList[SpellOutput] = []
    for it in outs_raw:
        o = _as_obj(it, what="spell_output")
        try:
            outs.append(SpellOutput(index=_decode_int(o.get("index"), field="spell_output.index"), charms=decode_charm_state(o.get("charms"))))
        except ValueError as e:
            raise _fail("bad_spell_output", error=str(e)) from e
    return NormalizedSpell(version=_decode_int(obj.get("version"), field="spell.version"), ins=tuple(ins), outs=tuple(outs))


def encode_spell(s: NormalizedSpell) -> Json:
    return {
        "version": s.version,
        "ins": [{"utxo_ref": encode_utxo_ref(i.utxo_ref), "charms": encode_charm_state(i.charms)} for i in s.ins],
        "outs": [{"index": o.index, "charms": encode_charm_state(o.charms)} for o in s.outs],
    }


def decode_transaction(j: Any) -> Transaction:
    obj = _as_obj(j, what="tx")
    inputs = obj.get("inputs") or []
    outputs = obj.get("outputs") or []
    if not isinstance(inputs, list) or not isinstance(outputs, list):
        raise _fail("tx_inputs_outputs_not_lists")
    spell_raw = obj.get("spell")
    return Transaction(
        txid=decode_hex(obj.get("txid"), field="txid", length=HASH_LEN),
        inputs=tuple(decode_tx_input(i) for i in inputs),
        outputs=tuple(decode_tx_output(o) for o in outputs),
        spell=decode_spell(spell_raw) if spell_raw is not None else None,
    )


def encode_transaction(tx: Transaction) -> Json:
    out: Json = {
        "txid": encode_hex(tx.txid),
        "inputs": [
            {"utxo_ref": encode_utxo_ref(i.utxo_ref), "charm_state": encode_charm_state(i.charm_state)} for i in tx.inputs
        ],
        "outputs": [
            {
                "index": o.index,
                "value": o.value,
                "script_pubkey": encode_hex(o.script_pubkey),
                "charm_state": encode_charm_state(o.charm_state),
            }
            for o in tx.outputs
        ],
    }
    if tx.spell is not None:
        out["spell"] = encode_spell(tx.spell)
    return out


__all__ = [
    "decode_app",
    "decode_charm_state",
    "decode_hex",
    "decode_spell",
    "decode_transaction",
    "decode_utxo_ref",
    "decode_value",
    "encode_app",
    "encode_charm_state",
    "encode_hex",
    "encode_spell",
    "encode_transaction",
    "encode_utxo_ref",
    "encode_value",
]
