"""
Roundkeeper CLI - Command-line interface for the tracker.

Usage:
    roundkeeper play [--player NAME:COLOR[:FACTION] ...] [--rounds N]
    roundkeeper serve [--host HOST] [--port PORT]
    roundkeeper factions

Keys during play (press Enter after each):
    <enter> / d   Done: end turn (action, or reaction once passed); start round between rounds
    p             Pass
    u / r         Undo / redo
    s             Time summary
    q             Quit
"""

from __future__ import annotations
from typing import Callable
import argparse
import logging
import sys
import time

from .engine_core import selectors
from .engine_core.action import Action, EndPlayerTurn, Redo, StartRound, Undo
from .engine_core.history import GameStore
from .engine_core.state import GamePhase, GameState, TurnKind


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Roundkeeper - Turn and round clock for tabletop games",
        prog="roundkeeper",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Run the clock in the terminal")
    play_parser.add_argument(
        "--player", "-p",
        action="append",
        dest="players",
        metavar="NAME:COLOR[:FACTION]",
        help="Player in first-round order (repeatable)",
    )
    play_parser.add_argument("--rounds", type=int, default=None, help="Number of rounds")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    # Factions command
    subparsers.add_parser("factions", help="List factions")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "serve":
        cmd_serve(args)
    elif args.command == "factions":
        cmd_factions(args)
    else:
        parser.print_help()
        sys.exit(1)


def format_duration(seconds: float) -> str:
    """Format seconds as HH:MM:SS."""
    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def parse_command(line: str, state: GameState, now: float) -> Action | None:
    """
    Map one line of input to an action.

    Returns None for unknown input and for quit/summary keys,
    which the loop handles itself.
    """
    key = line.strip().lower()
    if key in ("", "d"):
        if selectors.active_turn(state) is not None:
            return EndPlayerTurn(timestamp=now, kind=selectors.suggested_turn_kind(state))
        return StartRound(timestamp=now)
    if key == "p":
        return EndPlayerTurn(timestamp=now, kind=TurnKind.PASS)
    if key == "u":
        return Undo()
    if key == "r":
        return Redo()
    return None


def render_status(state: GameState, now: float) -> str:
    """One-screen status for the terminal."""
    phase = selectors.game_phase(state)
    if phase == GamePhase.GAME_OVER:
        return "GAME OVER\n" + render_summary(state, now)

    if phase == GamePhase.ROUND_IN_PROGRESS:
        number = state.active_round_index + 1
    else:
        number = selectors.next_round_index(state) + 1
    lines = [f"Round {number} of {state.max_rounds}"]

    round_ = selectors.active_round(state)
    if round_ is not None and phase == GamePhase.ROUND_IN_PROGRESS:
        markers = []
        for index, player_id in enumerate(round_.player_order):
            player = selectors.get_player(state, player_id)
            mark = ">" if index == state.active_player_index else " "
            passed = " (passed)" if selectors.has_player_passed(state, player_id) else ""
            markers.append(f"{mark} {player.name}{passed}")
        lines.extend(markers)

    open_turn = selectors.active_turn(state)
    player = selectors.active_player(state)
    if open_turn is not None and player is not None:
        lines.append(
            f"{player.name}, you're up  [{format_duration(selectors.turn_duration(open_turn, now))}]"
        )
    else:
        lines.append("Ready to play? Press Enter to start the round.")

    upcoming = [
        selectors.get_player(state, pid).name
        for pid in selectors.next_round(state).player_order
    ]
    if upcoming:
        lines.append("Next round: " + ", ".join(upcoming))
    return "\n".join(lines)


def render_summary(state: GameState, now: float) -> str:
    return "\n".join(
        f"  {p.name:<16} {format_duration(selectors.total_player_time(state, p.player_id, now))}"
        for p in selectors.seating_order(state)
    )


def run_interactive(
    store: GameStore,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
    clock: Callable[[], float] = time.time,
) -> GameState:
    """
    Read keys until quit, end of input or game over.

    Returns the final state.
    """
    write(render_status(store.state, clock()))
    while selectors.game_phase(store.state) != GamePhase.GAME_OVER:
        try:
            line = read_line("> ")
        except EOFError:
            break

        key = line.strip().lower()
        if key == "q":
            break
        if key == "s":
            write(render_summary(store.state, clock()))
            continue

        action = parse_command(line, store.state, clock())
        if action is None:
            write(f"Unknown key: {key!r}")
            continue

        before = store.state
        store.dispatch(action)
        if store.state is before:
            write("Nothing to do.")
        write(render_status(store.state, clock()))

    return store.state


def cmd_play(args):
    """Run the clock in the terminal."""
    from .games.eclipse import ECLIPSE_ROUNDS, create_store, parse_seat

    try:
        seats = [parse_seat(p) for p in args.players] if args.players else None
        rounds = args.rounds if args.rounds is not None else ECLIPSE_ROUNDS
        store = create_store(seats, max_rounds=rounds)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print("Roundkeeper: Enter=done, p=pass, u=undo, r=redo, s=summary, q=quit")
    run_interactive(store)


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run("roundkeeper.api.app:app", host=args.host, port=args.port)


def cmd_factions(args):
    """List factions."""
    from .games.eclipse import FACTIONS

    for faction in FACTIONS:
        print(f"{faction.id:<16} {faction.name:<26} {faction.color}")


if __name__ == "__main__":
    main()
