# src/charms/runtime/transitions.py
from __future__ import annotations

"""Finite-state-machine tables for the escrow and bounty applications.

State values are the raw U64 stored in the charm; `None` means "no state for
this app on that side of the transaction" (creation when it is the current
state). Tables are module-level frozensets and never mutated.
"""

from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional, Tuple

StateValue = Optional[int]
Transition = Tuple[StateValue, StateValue]

# Escrow
ESCROW_CREATED = 0
ESCROW_FUNDED = 1
ESCROW_RELEASED = 2
ESCROW_DISPUTED = 3
ESCROW_REFUNDED = 4
ESCROW_MILESTONE_BASE = 100

# Bounty
BOUNTY_OPEN = 0
BOUNTY_IN_PROGRESS = 1
BOUNTY_COMPLETED = 2
BOUNTY_CANCELLED = 3
BOUNTY_DISPUTED = 4


@dataclass(frozen=True)
class StateMachine:
    name: str
    names: Mapping[int, str]
    table: FrozenSet[Transition]
    # Values >= milestone_base are milestone sub-states (index = value - base).
    milestone_base: Optional[int] = None
    # Milestone rules: entering a milestone is allowed from `milestone_from`,
    # leaving one is allowed into `milestone_to`.
    milestone_from: Optional[int] = None
    milestone_to: Optional[int] = None

    def is_milestone(self, v: StateValue) -> bool:
        return self.milestone_base is not None and v is not None and v >= self.milestone_base

    def state_name(self, v: StateValue) -> str:
        if v is None:
            return "None"
        if self.is_milestone(v):
            return f"Milestone({v - int(self.milestone_base or 0)})"
        return self.names.get(v, f"Unknown({v})")

    def is_valid(self, cur: StateValue, nxt: StateValue) -> bool:
        if (cur, nxt) in self.table:
            return True
        if self.milestone_base is None:
            return False
        if cur == self.milestone_from and self.is_milestone(nxt):
            return True
        if self.is_milestone(cur) and nxt == self.milestone_to:
            return True
        return False


ESCROW = StateMachine(
    name="escrow",
    names={
        ESCROW_CREATED: "Created",
        ESCROW_FUNDED: "Funded",
        ESCROW_RELEASED: "Released",
        ESCROW_DISPUTED: "Disputed",
        ESCROW_REFUNDED: "Refunded",
    },
    table=frozenset(
        {
            (None, ESCROW_CREATED),
            (ESCROW_CREATED, ESCROW_FUNDED),
            (ESCROW_FUNDED, ESCROW_RELEASED),
            (ESCROW_FUNDED, ESCROW_DISPUTED),
            (ESCROW_DISPUTED, ESCROW_REFUNDED),
            (ESCROW_DISPUTED, ESCROW_RELEASED),
        }
    ),
    milestone_base=ESCROW_MILESTONE_BASE,
    milestone_from=ESCROW_FUNDED,
    milestone_to=ESCROW_RELEASED,
)

BOUNTY = StateMachine(
    name="bounty",
    names={
        BOUNTY_OPEN: "Open",
        BOUNTY_IN_PROGRESS: "InProgress",
        BOUNTY_COMPLETED: "Completed",
        BOUNTY_CANCELLED: "Cancelled",
        BOUNTY_DISPUTED: "Disputed",
    },
    table=frozenset(
        {
            (None, BOUNTY_OPEN),
            (BOUNTY_OPEN, BOUNTY_IN_PROGRESS),
            (BOUNTY_IN_PROGRESS, BOUNTY_COMPLETED),
            (BOUNTY_OPEN, BOUNTY_CANCELLED),
            (BOUNTY_IN_PROGRESS, BOUNTY_DISPUTED),
            (BOUNTY_DISPUTED, BOUNTY_COMPLETED),
            (BOUNTY_DISPUTED, BOUNTY_CANCELLED),
        }
    ),
)


__all__ = [
    "BOUNTY",
    "BOUNTY_CANCELLED",
    "BOUNTY_COMPLETED",
    "BOUNTY_DISPUTED",
    "BOUNTY_IN_PROGRESS",
    "BOUNTY_OPEN",
    "ESCROW",
    "ESCROW_CREATED",
    "ESCROW_DISPUTED",
    "ESCROW_FUNDED",
    "ESCROW_MILESTONE_BASE",
    "ESCROW_REFUNDED",
    "ESCROW_RELEASED",
    "StateMachine",
]
