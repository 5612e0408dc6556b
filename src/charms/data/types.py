# src/charms/data/types.py
from __future__ import annotations

"""Structural transaction/spell types.

All types are frozen: a Transaction handed to a checker is an immutable value
and nothing downstream may mutate it.
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Tuple, Union

from charms.data.value import EMPTY, U64_MAX, Value
from charms.runtime.check_types import AppKind

U32_MAX = (1 << 32) - 1
HASH_LEN = 32


def _require_hash32(v: bytes, *, field: str) -> bytes:
    if isinstance(v, bytearray):
        v = bytes(v)
    if not isinstance(v, bytes):
        raise ValueError(f"{field} must be bytes (got {type(v).__name__})")
    if len(v) != HASH_LEN:
        raise ValueError(f"{field} must be exactly {HASH_LEN} bytes (got {len(v)})")
    return v


def _require_range(v: int, *, field: str, hi: int) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise ValueError(f"{field} must be int (got {type(v).__name__})")
    if v < 0 or v > hi:
        raise ValueError(f"{field} out of range: {v}")
    return v


@dataclass(frozen=True)
class App:
    """Application identity: namespaced tag + verification-key hash + params."""

    tag: str
    vk_hash: bytes
    params: Value = EMPTY

    def __post_init__(self) -> None:
        if not isinstance(self.tag, str):
            raise ValueError(f"app tag must be str (got {type(self.tag).__name__})")
        object.__setattr__(self, "vk_hash", _require_hash32(self.vk_hash, field="vk_hash"))
        if not isinstance(self.params, Value):
            raise ValueError("app params must be a Value")

    @property
    def kind(self) -> AppKind:
        return AppKind.from_tag(self.tag)

    @property
    def namespace(self) -> str:
        """Lower-cased prefix before the first ':' ('' if the tag has none)."""
        head, sep, _ = self.tag.partition(":")
        return head.lower() if sep else ""

    @property
    def identifier(self) -> str:
        _, sep, rest = self.tag.partition(":")
        return rest if sep else ""


@dataclass(frozen=True)
class UtxoRef:
    txid: bytes
    vout: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "txid", _require_hash32(self.txid, field="utxo txid"))
        _require_range(self.vout, field="vout", hi=U32_MAX)


@dataclass(frozen=True)
class CharmState:
    """Per-application state attached to one input/output, keyed by app tag."""

    apps: Tuple[Tuple[str, Value], ...] = ()

    def __post_init__(self) -> None:
        items = self.apps.items() if isinstance(self.apps, Mapping) else self.apps
        out: dict[str, Value] = {}
        for tag, v in items:
            if not isinstance(tag, str):
                raise ValueError("charm state keys must be app tags (str)")
            if not isinstance(v, Value):
                raise ValueError(f"charm state for {tag!r} must be a Value")
            if tag in out:
                raise ValueError(f"duplicate charm state tag: {tag!r}")
            out[tag] = v
        object.__setattr__(self, "apps", tuple(sorted(out.items(), key=lambda kv: kv[0])))

    @classmethod
    def of(cls, apps: Union[Mapping[str, Value], Iterable[Tuple[str, Value]], None] = None) -> "CharmState":
        if apps is None:
            return cls(())
        if isinstance(apps, Mapping):
            return cls(tuple(apps.items()))
        return cls(tuple(apps))

    def get(self, tag: str) -> Optional[Value]:
        for k, v in self.apps:
            if k == tag:
                return v
        return None

    def with_app(self, tag: str, state: Value) -> "CharmState":
        d = dict(self.apps)
        d[tag] = state
        return CharmState(tuple(d.items()))

    def tags(self) -> Tuple[str, ...]:
        return tuple(k for k, _ in self.apps)


@dataclass(frozen=True)
class TxInput:
    utxo_ref: UtxoRef
    charm_state: Optional[CharmState] = None

    def app_state(self, tag: str) -> Optional[Value]:
        if self.charm_state is None:
            return None
        return self.charm_state.get(tag)


@dataclass(frozen=True)
class TxOutput:
    index: int
    value: int
    script_pubkey: bytes = b""
    charm_state: Optional[CharmState] = None

    def __post_init__(self) -> None:
        _require_range(self.index, field="output index", hi=U32_MAX)
        _require_range(self.value, field="output value", hi=U64_MAX)
        if isinstance(self.script_pubkey, bytearray):
            object.__setattr__(self, "script_pubkey", bytes(self.script_pubkey))
        if not isinstance(self.script_pubkey, bytes):
            raise ValueError("script_pubkey must be bytes")

    def app_state(self, tag: str) -> Optional[Value]:
        if self.charm_state is None:
            return None
        return self.charm_state.get(tag)


@dataclass(frozen=True)
class SpellInput:
    utxo_ref: UtxoRef
    charms: Optional[CharmState] = None


@dataclass(frozen=True)
class SpellOutput:
    index: int
    charms: Optional[CharmState] = None

    def __post_init__(self) -> None:
        _require_range(self.index, field="spell output index", hi=U32_MAX)


@dataclass(frozen=True)
class NormalizedSpell:
    """Declared multi-app state-change manifest for a transaction."""

    version: int
    ins: Tuple[SpellInput, ...] = ()
    outs: Tuple[SpellOutput, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "ins", tuple(self.ins))
        object.__setattr__(self, "outs", tuple(self.outs))


@dataclass(frozen=True)
class Transaction:
    txid: bytes
    inputs: Tuple[TxInput, ...] = ()
    outputs: Tuple[TxOutput, ...] = ()
    spell: Optional[NormalizedSpell] = field(default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "txid", _require_hash32(self.txid, field="txid"))
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))


__all__ = [
    "App",
    "CharmState",
    "HASH_LEN",
    "NormalizedSpell",
    "SpellInput",
    "SpellOutput",
    "Transaction",
    "TxInput",
    "TxOutput",
    "U32_MAX",
    "UtxoRef",
]
