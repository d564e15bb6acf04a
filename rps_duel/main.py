"""CLI entry point for the Rock-Paper-Scissors game."""

import argparse
import logging
import threading

from .config import GameConfig
from .engine import GameError
from .session import GameSession
from .stats import format_score, format_streak, print_history, print_round

COMMANDS = {
    "r": "rock",
    "p": "paper",
    "s": "scissors",
}

HELP_TEXT = ("  Controls: r (rock), p (paper), s (scissors), Enter or 'space' (random),\n"
             "            h (history), reset, q (quit)")


def _session_from_args(args) -> GameSession:
    config = GameConfig.from_env()
    if getattr(args, "seed", None) is not None:
        config.seed = args.seed
    if getattr(args, "history", None) is not None:
        config.history_size = args.history
    if getattr(args, "period_ms", None) is not None:
        config.auto_play_ms = args.period_ms
    return GameSession.from_config(config)


def interactive_rounds(session: GameSession, read=input):
    """Run the console game until the player quits or input ends."""
    print(HELP_TEXT)
    while True:
        try:
            line = read("Your move: ")
        except EOFError:
            print()
            break
        command = line.strip().lower()

        if command in ("q", "quit", "exit"):
            break
        if command == "h":
            print_history(session.history)
            continue
        if command == "reset":
            session.reset()
            print("  Game reset successfully! 🎮")
            continue

        try:
            if command in ("", "space", "random"):
                result = session.play_random_round()
                print(f"  Random choice: {result.player_move.value.upper()}! 🎲")
            else:
                result = session.play_round(COMMANDS.get(command, command))
        except GameError as exc:
            print(f"  ✗ {exc}")
            continue
        print_round(result)

    print("\nFinal score:")
    print(f"  {format_score(session.score)}")
    return session.score


def cmd_play(args):
    """Run the interactive console game."""
    session = _session_from_args(args)
    print("\n🎮 Rock Paper Scissors")
    interactive_rounds(session)


def run_auto(session: GameSession, rounds: int, period_ms=None):
    """Auto-play ``rounds`` rounds (0 = until Ctrl-C) and print each one."""
    done = threading.Event()
    played = [0]

    def on_round(result):
        played[0] += 1
        print(f"\n  Round {result.round_id}")
        print_round(result)
        if rounds and played[0] >= rounds:
            session.stop_auto_play()
            done.set()

    session.add_listener(on_round)
    session.start_auto_play(period_ms)
    try:
        while not done.wait(0.1):
            if not session.is_auto_playing():
                break
    except KeyboardInterrupt:
        print("\n  Auto-play interrupted.")
    finally:
        session.stop_auto_play()
        session.remove_listener(on_round)
    return played[0]


def cmd_auto(args):
    """Run auto-play mode in the console."""
    session = _session_from_args(args)
    period = session.auto_play_ms
    print(f"\n🤖 Auto Play  |  every {period} ms"
          + (f"  |  {args.rounds} rounds" if args.rounds else "  |  Ctrl-C to stop")
          + (f"  |  seed={args.seed}" if args.seed is not None else ""))
    run_auto(session, args.rounds, period)

    print("\nFinal score:")
    print(f"  {format_score(session.score)}")
    banner = format_streak(session.streak)
    if banner:
        print(f"  {banner}")


def cmd_web(args):
    """Serve the web UI."""
    from .web import main as web_main

    config = GameConfig.from_env()
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.seed is not None:
        config.seed = args.seed
    web_main(config, debug=args.debug)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rps-duel",
        description="🎮 Rock-Paper-Scissors against the computer",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every round (DEBUG)")

    subparsers = parser.add_subparsers(dest="command")

    play = subparsers.add_parser("play", help="Play in the console")
    play.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")
    play.add_argument("--history", type=int, default=None, help="Rounds kept in history (default: 10)")

    auto = subparsers.add_parser("auto", help="Let the computer play both sides")
    auto.add_argument("--rounds", type=int, default=10, help="Rounds to play, 0 for no limit (default: 10)")
    auto.add_argument("--period-ms", type=int, default=None, help="Delay between rounds (default: 1500)")
    auto.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")

    web = subparsers.add_parser("web", help="Serve the browser UI")
    web.add_argument("--host", default=None, help="Bind address (default: 127.0.0.1)")
    web.add_argument("--port", type=int, default=None, help="Port (default: 5000)")
    web.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")
    web.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if getattr(args, "history", None) is not None and args.history < 1:
        parser.error("--history must be at least 1")
    if getattr(args, "period_ms", None) is not None and args.period_ms < 1:
        parser.error("--period-ms must be a positive number of milliseconds")
    if getattr(args, "rounds", 0) < 0:
        parser.error("--rounds must not be negative")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "auto":
        cmd_auto(args)
    elif args.command == "web":
        cmd_web(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
