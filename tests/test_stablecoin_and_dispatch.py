from __future__ import annotations

import pytest

from charms.data.types import App, CharmState, Transaction, TxInput, TxOutput, UtxoRef
from charms.data.value import EMPTY, Text, U64
from charms.runtime.check_types import AppKind
from charms.runtime.spell_dispatch import check_spell, checker_for, supported_types


def _app(tag: str) -> App:
    return App(tag=tag, vk_hash=bytes(32))


def _fungible_tx(tag: str, a_in: int, a_out: int) -> Transaction:
    return Transaction(
        txid=b"\x05" * 32,
        inputs=(TxInput(utxo_ref=UtxoRef(txid=bytes(32), vout=0), charm_state=CharmState.of({tag: U64(a_in)})),),
        outputs=(TxOutput(index=0, value=546, charm_state=CharmState.of({tag: U64(a_out)})),),
    )


def test_stablecoin_uses_token_rules_with_own_label() -> None:
    tag = "bollar:USD"
    res = check_spell(_app(tag), _fungible_tx(tag, 500, 400), EMPTY, Text("transfer"))
    assert res.app_type is AppKind.STABLECOIN
    assert res.valid is False
    assert res.errors == ("Token conservation failed: input=500 != output=400",)
    assert res.to_json()["applicationType"] == "stablecoin"


@pytest.mark.parametrize(
    "tag,kind",
    [
        ("token:A", AppKind.TOKEN),
        ("TOKEN:A", AppKind.TOKEN),
        ("nft:A", AppKind.NFT),
        ("escrow:A", AppKind.ESCROW),
        ("Bounty:A", AppKind.BOUNTY),
        ("bollar:A", AppKind.STABLECOIN),
        ("unknown:x", AppKind.UNKNOWN),
        ("token", AppKind.UNKNOWN),
        ("", AppKind.UNKNOWN),
    ],
)
def test_tag_namespace_parsing(tag, kind) -> None:
    assert AppKind.from_tag(tag) is kind


def test_unknown_app_type_reported() -> None:
    res = check_spell(_app("unknown:x"), Transaction(txid=b"\x05" * 32))
    assert res.valid is False
    assert res.app_type is AppKind.UNKNOWN
    assert res.errors == ("Unknown app type: unknown:x",)


def test_every_known_kind_has_a_checker() -> None:
    for k in AppKind:
        assert (checker_for(k) is None) is (k is AppKind.UNKNOWN)
    assert supported_types() == ["token", "nft", "escrow", "bounty", "stablecoin"]


def test_dispatch_is_idempotent_and_defaults_to_empty() -> None:
    tag = "token:A"
    tx = _fungible_tx(tag, 10, 10)
    a = check_spell(_app(tag), tx)
    b = check_spell(_app(tag), tx, None, None)
    assert a == b
    assert a.valid is True


def test_embedded_spell_verified_before_app_checker() -> None:
    from dataclasses import replace

    from charms.data.types import NormalizedSpell, SpellInput, SpellOutput

    tag = "token:A"
    tx = _fungible_tx(tag, 10, 10)

    bad = check_spell(_app(tag), replace(tx, spell=NormalizedSpell(version=0)))
    assert bad.valid is False
    assert bad.errors == ("Invalid spell structure",)
    assert bad.details["inputSum"] == 10

    good_spell = NormalizedSpell(
        version=1,
        ins=(SpellInput(utxo_ref=UtxoRef(txid=bytes(32), vout=0)),),
        outs=(SpellOutput(index=0),),
    )
    assert check_spell(_app(tag), replace(tx, spell=good_spell)).valid is True


def test_embedded_spell_errors_accumulate_with_checker_errors() -> None:
    from dataclasses import replace

    from charms.data.types import NormalizedSpell

    tag = "token:A"
    res = check_spell(_app(tag), replace(_fungible_tx(tag, 100, 150), spell=NormalizedSpell(version=0)))
    assert res.errors == ("Invalid spell structure", "Token conservation failed: input=100 != output=150")

    unknown = check_spell(_app("unknown:x"), Transaction(txid=bytes(32), spell=NormalizedSpell(version=0)))
    assert unknown.errors == ("Invalid spell structure", "Unknown app type: unknown:x")
