"""
Roundkeeper - Turn and round clock for tabletop strategy games

A deterministic state machine for multi-round games where players take
turns until they pass, and pass order sets the next round's order.
The engine provides:
- Immutable state for players, rounds and turns
- A pure reducer for round/turn/pass transitions
- Selectors for active round, player, turn and time totals
- Undo/redo history around any reducer
"""

__version__ = "0.1.0"
