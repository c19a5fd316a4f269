"""
Command-line interface for Betting AI
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import List

from bettingai.config import LOG_LEVELS, Settings, setup_logging
from bettingai.engine import MAX_BATCH_SIZE, PredictionEngine
from bettingai.exceptions import PredictionError
from bettingai.models import Prediction

logger = logging.getLogger(__name__)


def _print_predictions(predictions: List[Prediction], as_json: bool) -> None:
    if as_json:
        payload = [prediction.to_dict() for prediction in predictions]
        print(json.dumps(payload[0] if len(payload) == 1 else payload,
                         ensure_ascii=False, indent=2))
        return

    for prediction in predictions:
        print("\n" + "=" * 60)
        print(prediction)
    print("=" * 60 + "\n")


def predict_command(args, settings: Settings):
    """Handle predict command"""
    engine = PredictionEngine(seed=args.seed if args.seed is not None else settings.seed)
    _print_predictions([engine.generate()], args.json)
    return 0


def batch_command(args, settings: Settings):
    """Handle batch command"""
    engine = PredictionEngine(seed=args.seed if args.seed is not None else settings.seed)
    try:
        predictions = engine.generate_multiple(args.count)
    except PredictionError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    _print_predictions(predictions, args.json)
    return 0


def serve_command(args, settings: Settings):
    """Handle serve command"""
    from bettingai.web import create_web_app, serve

    app = create_web_app(settings=settings)
    logger.info("Server starting on http://%s:%d (%s)",
                settings.host, settings.port, settings.environment)
    asyncio.run(serve(app, settings))
    return 0


def bot_command(args, settings: Settings):
    """Handle bot command"""
    from bettingai.bot import run_bot

    settings.require_bot_token()
    asyncio.run(run_bot(settings))
    return 0


def run_command(args, settings: Settings):
    """Handle run command: HTTP server and bot in one event loop"""
    from bettingai.bot import run_bot
    from bettingai.web import create_web_app, serve

    settings.require_bot_token()
    engine = PredictionEngine(seed=settings.seed)
    app = create_web_app(engine=engine, settings=settings)

    async def start_everything():
        await asyncio.gather(serve(app, settings), run_bot(settings, engine.spawn()))

    asyncio.run(start_everything())
    return 0


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Entertainment sports prediction generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One random prediction
  bettingai predict

  # Five reproducible predictions as JSON
  bettingai batch --count 5 --seed 42 --json

  # HTTP API for the mini app, and the Telegram bot
  bettingai serve --port 3000
  bettingai bot
        """
    )
    parser.add_argument("--log-level", default=None, type=str.upper, choices=LOG_LEVELS,
                        help="Logging level (default: LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Predict command
    predict_parser = subparsers.add_parser("predict", help="Generate one prediction")
    predict_parser.add_argument("--seed", type=int, default=None,
                                help="Random seed for reproducible output")
    predict_parser.add_argument("--json", action="store_true",
                                help="Print the API JSON representation")
    predict_parser.set_defaults(func=predict_command)

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Generate several predictions")
    batch_parser.add_argument("--count", type=int, default=3,
                              help=f"Number of predictions (1-{MAX_BATCH_SIZE}, default: 3)")
    batch_parser.add_argument("--seed", type=int, default=None,
                              help="Random seed for reproducible output")
    batch_parser.add_argument("--json", action="store_true",
                              help="Print the API JSON representation")
    batch_parser.set_defaults(func=batch_command)

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: HOST)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: PORT)")
    serve_parser.set_defaults(func=serve_command)

    # Bot command
    bot_parser = subparsers.add_parser("bot", help="Run the Telegram bot")
    bot_parser.set_defaults(func=bot_command)

    # Run command
    run_parser = subparsers.add_parser("run", help="Run the HTTP API and the bot together")
    run_parser.set_defaults(func=run_command)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = Settings.from_env()
        if getattr(args, "host", None):
            settings.host = args.host
        if getattr(args, "port", None):
            settings.port = args.port
        setup_logging(args.log_level or settings.log_level)
        return args.func(args, settings)
    except RuntimeError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 0


if __name__ == "__main__":
    sys.exit(main())
