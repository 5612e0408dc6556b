from __future__ import annotations

import pytest

from charms.data.value import Bytes, U64
from charms.runtime.check_types import AppKind
from charms.runtime.errors import CodecError
from charms.runtime.spell_dispatch import check_spell
from charms.tx.builders import (
    DUST_SATS,
    build_bounty_transaction,
    build_escrow_transaction,
    build_nft_transaction,
    build_stablecoin_transaction,
    build_token_transaction,
)

AUTH = Bytes(bytes.fromhex("deadbeef"))


def test_token_builder_shape_and_prefix() -> None:
    built = build_token_transaction("MYTOKEN", "abcd", [], [1_000_000])
    assert built.app.tag == "token:MYTOKEN"
    assert built.app.vk_hash == bytes.fromhex("abcd".rjust(64, "0"))
    assert len(built.tx.txid) == 32
    assert built.tx.inputs == ()
    (out,) = built.tx.outputs
    assert out.value == DUST_SATS
    assert out.app_state("token:MYTOKEN") == U64(1_000_000)

    res = check_spell(built.app, built.tx, AUTH)
    assert res.valid is True
    assert res.details["isMint"] is True


def test_builder_keeps_existing_prefix_and_fixed_txid() -> None:
    built = build_token_transaction("token:X", None, [5], [5], txid=b"\x09" * 32)
    assert built.app.tag == "token:X"
    assert built.tx.txid == b"\x09" * 32


def test_builders_do_not_promise_validity() -> None:
    built = build_token_transaction("T", "01", [100], [150])
    assert check_spell(built.app, built.tx).valid is False


def test_stablecoin_builder_uses_bollar_namespace() -> None:
    built = build_stablecoin_transaction("USD", None, [10], [10])
    assert built.app.tag == "bollar:USD"
    assert check_spell(built.app, built.tx).app_type is AppKind.STABLECOIN


def test_escrow_creation_builder() -> None:
    built = build_escrow_transaction("DEAL", 0, 50_000)
    assert built.app.tag == "escrow:DEAL"
    (inp,) = built.tx.inputs
    assert inp.charm_state is None
    assert built.tx.outputs[0].value == 50_000

    res = check_spell(built.app, built.tx)
    assert res.valid is True
    assert res.details["currentState"] == "None"


def test_bounty_builder_transition() -> None:
    built = build_bounty_transaction("B1", 2, 1000, current_state=4)
    res = check_spell(built.app, built.tx)
    assert res.valid is True
    assert res.details["nextState"] == "Completed"


def test_nft_builder_detects_duplicates() -> None:
    built = build_nft_transaction("ART", "ff", [], ["ab12", "ab12"])
    res = check_spell(built.app, built.tx, AUTH)
    assert res.valid is False
    assert res.details["duplicateNfts"] == ["ab12"]


def test_builder_rejects_bad_hex() -> None:
    with pytest.raises(CodecError):
        build_nft_transaction("ART", None, [], ["xyz"])
    with pytest.raises(ValueError):
        build_token_transaction("T", None, [-1], [])
