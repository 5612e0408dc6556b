from __future__ import annotations

from typing import Optional

import pytest

from charms.data.types import App, CharmState, Transaction, TxInput, TxOutput, UtxoRef
from charms.data.value import U64, Bytes, Text
from charms.runtime.check.bounty import bounty_state_name, check_bounty
from charms.runtime.transitions import BOUNTY

TAG = "bounty:BUG-42"
APP = App(tag=TAG, vk_hash=bytes(32))


def _tx(cur: Optional[int], nxt: Optional[int]) -> Transaction:
    def st(v: Optional[int]) -> Optional[CharmState]:
        return None if v is None else CharmState.of({TAG: U64(v)})

    return Transaction(
        txid=b"\x04" * 32,
        inputs=(TxInput(utxo_ref=UtxoRef(txid=bytes(32), vout=0), charm_state=st(cur)),),
        outputs=(TxOutput(index=0, value=50_000, charm_state=st(nxt)),),
    )


def test_completion_via_dispute() -> None:
    res = check_bounty(APP, _tx(4, 2))
    assert res.valid is True
    assert res.details["currentState"] == "Disputed"
    assert res.details["nextState"] == "Completed"


def test_reopen_completed_rejected() -> None:
    res = check_bounty(APP, _tx(2, 0))
    assert res.valid is False
    assert res.errors == ("Invalid bounty transition: Completed -> Open",)


def test_no_milestones_for_bounty() -> None:
    assert bounty_state_name(100) == "Unknown(100)"
    assert check_bounty(APP, _tx(1, 100)).valid is False


_ALLOWED = {(None, 0), (0, 1), (1, 2), (0, 3), (1, 4), (4, 2), (4, 3)}


@pytest.mark.parametrize("cur", [None, 0, 1, 2, 3, 4])
@pytest.mark.parametrize("nxt", [None, 0, 1, 2, 3, 4])
def test_transition_table_is_complete(cur, nxt) -> None:
    assert BOUNTY.is_valid(cur, nxt) is ((cur, nxt) in _ALLOWED)


def test_first_u64_input_and_output_win() -> None:
    tx = Transaction(
        txid=b"\x04" * 32,
        inputs=(
            TxInput(utxo_ref=UtxoRef(txid=bytes(32), vout=0)),
            TxInput(utxo_ref=UtxoRef(txid=bytes(32), vout=1), charm_state=CharmState.of({TAG: Bytes(b"\x01")})),
            TxInput(utxo_ref=UtxoRef(txid=bytes(32), vout=2), charm_state=CharmState.of({TAG: U64(4)})),
            TxInput(utxo_ref=UtxoRef(txid=bytes(32), vout=3), charm_state=CharmState.of({TAG: U64(2)})),
        ),
        outputs=(
            TxOutput(index=0, value=1000, charm_state=CharmState.of({TAG: Text("done")})),
            TxOutput(index=1, value=1000, charm_state=CharmState.of({TAG: U64(2)})),
            TxOutput(index=2, value=1000, charm_state=CharmState.of({TAG: U64(0)})),
        ),
    )
    res = check_bounty(APP, tx)
    assert res.details["currentState"] == "Disputed"
    assert res.details["nextState"] == "Completed"
    assert res.valid is True
