"""
Entry point for the Imposter party game.
"""

import argparse
import logging

from dotenv import load_dotenv

from imposter.cli import TerminalGame
from imposter.config import apply_env_overrides, configure_logging, load_config
from imposter.core import ConfigurationDraft, ManualScheduler, SessionController
from imposter.options import OptionsProvider
from imposter.web import EventEmitter, GameServer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the Imposter party game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                              # Serve the web API on 127.0.0.1:5000
  python main.py --config configs/party.yaml  # Use a YAML config file
  python main.py --cli                        # Play in this terminal
  python main.py --cli --seed 42              # Reproducible imposter/item draw
        """
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file (default: use default config)"
    )
    parser.add_argument(
        "--seed",
        "-s",
        type=int,
        default=None,
        help="Random seed for reproducible role assignment"
    )
    parser.add_argument(
        "--cli",
        action="store_true",
        help="Play in the terminal instead of serving the web API"
    )
    parser.add_argument("--host", type=str, default=None, help="Web server host")
    parser.add_argument("--port", "-p", type=int, default=None, help="Web server port")
    parser.add_argument("--options-url", type=str, default=None, help="Override the game options URL")
    return parser


def main(argv=None):
    """Entry point for running a game."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    config = apply_env_overrides(load_config(args.config))
    if args.seed is not None:
        config.random_seed = args.seed
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.options_url is not None:
        config.options_url = args.options_url

    configure_logging(config.log_level)
    provider = OptionsProvider(config.options_url, timeout=config.options_timeout)
    draft = ConfigurationDraft(
        player_count=config.default_players,
        imposter_count=config.min_imposters,
        min_players=config.min_players,
        max_players=config.max_players,
    )

    if args.cli:
        scheduler = ManualScheduler()
        controller = SessionController.from_config(config, scheduler=scheduler)
        controller.options_loaded(provider.load())
        TerminalGame(controller, scheduler, draft=draft).run()
        return

    emitter = EventEmitter()
    controller = SessionController.from_config(config, event_emitter=emitter)
    server = GameServer(
        controller,
        event_emitter=emitter,
        port=config.port,
        host=config.host,
        draft_bounds={"min_players": draft.min_players, "max_players": draft.max_players},
    )
    server.load_options_in_background(provider)
    server.start()


if __name__ == "__main__":
    main()
