"""Entry point for challenge-roulette.

Usage:
    challenge-roulette                  # run the terminal UI
    challenge-roulette --pick           # one headless spin
    challenge-roulette --stats          # show history statistics
    challenge-roulette --reset          # forget the recent history

Exit codes:
    0 = ok
    2 = challenges unavailable or invalid configuration
"""

import argparse
import asyncio
import sys
from typing import Optional

import structlog

from .challenges.engine import RouletteEngine
from .config.settings import RouletteConfig, load_config
from .errors import ConfigError, DataUnavailable
from .utils.logging import setup_logging

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="challenge-roulette",
        description="Spin a roulette of challenges, never repeating the last three",
    )
    parser.add_argument("--config", type=str, help="YAML configuration file")
    parser.add_argument("--data", type=str, help="Challenge deck path or http(s) URL")
    parser.add_argument("--db", type=str, help="SQLite file holding the recent history")
    parser.add_argument("--lang", type=str, help="Preferred text language (e.g. en, es)")
    parser.add_argument("--no-sound", action="store_true", help="Disable tones")
    parser.add_argument("--debug", action="store_true", help="Debug logging")

    action = parser.add_mutually_exclusive_group()
    action.add_argument("--pick", action="store_true", help="Spin once without the UI")
    action.add_argument("--stats", action="store_true", help="Print selector statistics")
    action.add_argument("--reset", action="store_true", help="Clear the recent history")
    return parser


def _overrides(args: argparse.Namespace) -> dict:
    overrides = {
        "data_source": args.data,
        "db_path": args.db,
        "language": args.lang,
    }
    if args.no_sound:
        overrides["sound_enabled"] = False
    if args.debug:
        overrides["log_level"] = "DEBUG"
    return overrides


async def run_headless(config: RouletteConfig, args: argparse.Namespace) -> int:
    """Run one of the non-interactive actions."""
    engine = RouletteEngine(config)
    try:
        if args.reset:
            # Clearing the slot does not need the deck
            await engine.history_store.open()
            await engine.reset()
            print("History cleared")
            return 0

        try:
            await engine.start()
        except DataUnavailable as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

        if args.pick:
            challenge = await engine.spin()
            print(f"#{challenge.id} {challenge.text_in(config.language, config.fallback_language)}")
        else:
            stats = engine.stats()
            recent = ", ".join(str(i) for i in stats.recent_ids) or "none"
            print(f"Recent challenges:    {recent}")
            print(f"Available challenges: {stats.available_count}")
            print(f"Total challenges:     {stats.total_count}")
        return 0
    finally:
        await engine.close()


def main(argv: Optional[list[str]] = None) -> int:
    """Run the challenge-roulette application."""
    args = build_parser().parse_args(argv)
    headless = args.pick or args.stats or args.reset

    try:
        config = load_config(args.config, overrides=_overrides(args))
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if headless:
        # Quiet console unless --debug
        setup_logging(config.log_level if args.debug else "WARNING", None)
        return asyncio.run(run_headless(config, args))

    setup_logging(config.log_level, config.log_file)

    from .ui.app import RouletteApp

    app = RouletteApp(config)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
