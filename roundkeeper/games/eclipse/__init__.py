"""
Eclipse - The default game

Eclipse is a space strategy game played over a fixed number of rounds.
Key mechanics tracked here:
- Players take turns in order until they pass
- A passed player keeps reacting when their turn comes around
- The first player to pass starts the next round
- Up to six players, each leading a faction

This module contains:
- The faction catalog
- Default seating and round count
- Setup helpers
"""

from .factions import FACTIONS, Faction, get_faction
from .setup import (
    ECLIPSE_ROUNDS,
    DEFAULT_SEATS,
    MAX_PLAYERS,
    SeatSpec,
    parse_seat,
    setup_actions,
    create_store,
)

__all__ = [
    "FACTIONS",
    "Faction",
    "get_faction",
    "ECLIPSE_ROUNDS",
    "DEFAULT_SEATS",
    "MAX_PLAYERS",
    "SeatSpec",
    "parse_seat",
    "setup_actions",
    "create_store",
]
