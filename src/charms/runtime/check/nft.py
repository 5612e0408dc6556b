# src/charms/runtime/check/nft.py
from __future__ import annotations

"""Non-fungible item checker: output uniqueness + mint authorization."""

from typing import Iterable

from charms.data.types import App, Transaction
from charms.data.value import EMPTY, Value
from charms.runtime.check.common import Slot, app_values
from charms.runtime.check_types import AppKind, CheckResult


def _collect_ids(slots: Iterable[Slot], tag: str) -> list[str]:
    out: list[str] = []
    for v in app_values(slots, tag):
        b = v.as_bytes()
        if b is not None:
            out.append(b.hex())
    return out


def check_nft(app: App, tx: Transaction, x: Value = EMPTY, w: Value = EMPTY) -> CheckResult:
    tag = app.tag
    errors: list[str] = []

    input_ids = _collect_ids(tx.inputs, tag)
    output_ids = _collect_ids(tx.outputs, tag)

    seen: set[str] = set()
    duplicates: list[str] = []
    for nid in output_ids:
        if nid in seen and nid not in duplicates:
            duplicates.append(nid)
            errors.append(f"Duplicate NFT in outputs: {nid}")
        seen.add(nid)

    known = set(input_ids)
    if x.is_empty():
        reported: set[str] = set()
        for nid in output_ids:
            if nid in known or nid in reported:
                continue
            reported.add(nid)
            errors.append(f"NFT mint without authorization: {nid}")

    details = {
        "nftIds": output_ids,
        "duplicateNfts": duplicates,
    }
    return CheckResult.from_errors(AppKind.NFT, details, errors)


__all__ = ["check_nft"]
