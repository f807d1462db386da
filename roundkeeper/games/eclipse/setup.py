"""
Eclipse Game Setup - Builds the starting roster.

This module handles:
- Parsing seat descriptions ("Name:color[:faction]")
- Validating player count and faction IDs
- Producing ADD_PLAYER actions in seating order
- Creating a GameStore ready for the first round

ADD_PLAYER puts each new player at the front of the first round,
so seats are added last-to-first to make seat 1 act first.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from ...engine_core.action import AddPlayer
from ...engine_core.history import GameStore
from ...engine_core.reducer import apply_action
from ...engine_core.state import default_state
from .factions import get_faction


ECLIPSE_ROUNDS = 8
MAX_PLAYERS = 6


@dataclass(frozen=True)
class SeatSpec:
    """One seat at the table."""
    name: str
    color: str
    faction_id: str | None = None


DEFAULT_SEATS: list[SeatSpec] = [
    SeatSpec(name="Sean", color="gray"),
    SeatSpec(name="Ryan", color="red"),
    SeatSpec(name="Alan", color="blue"),
]


def parse_seat(text: str) -> SeatSpec:
    """
    Parse "Name:color" or "Name:color:faction_id".

    Raises:
        ValueError: if the text is malformed or the faction is unknown
    """
    parts = [p.strip() for p in text.split(":")]
    if len(parts) not in (2, 3) or not parts[0] or not parts[1]:
        raise ValueError(f"Invalid player '{text}', expected NAME:COLOR[:FACTION]")

    faction_id = parts[2] if len(parts) == 3 and parts[2] else None
    if faction_id and get_faction(faction_id) is None:
        raise ValueError(f"Unknown faction: {faction_id}")

    return SeatSpec(name=parts[0], color=parts[1], faction_id=faction_id)


def setup_actions(seats: Iterable[SeatSpec]) -> list[AddPlayer]:
    """
    Build ADD_PLAYER actions for the given seating order.

    Raises:
        ValueError: on an unsupported player count or unknown faction
    """
    seats = list(seats)
    if not 1 <= len(seats) <= MAX_PLAYERS:
        raise ValueError(f"Eclipse supports 1-{MAX_PLAYERS} players, got {len(seats)}")

    for seat in seats:
        if seat.faction_id and get_faction(seat.faction_id) is None:
            raise ValueError(f"Unknown faction: {seat.faction_id}")

    return [
        AddPlayer(name=seat.name, color=seat.color, faction_id=seat.faction_id)
        for seat in reversed(seats)
    ]


def create_store(
    seats: Iterable[SeatSpec] | None = None,
    max_rounds: int = ECLIPSE_ROUNDS,
    history_limit: int | None = None,
) -> GameStore:
    """
    Create a store holding a fresh game with the given seats.

    Roster setup is not undoable: the store starts from the seated state.
    """
    if max_rounds < 1:
        raise ValueError("max_rounds must be at least 1")

    state = default_state(max_rounds=max_rounds)
    for action in setup_actions(seats if seats is not None else DEFAULT_SEATS):
        state = apply_action(state, action)

    return GameStore(initial_state=state, history_limit=history_limit)
