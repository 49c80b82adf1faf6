"""Main entry point for the token server."""

import argparse
import os
import sys
from collections.abc import Callable

import uvicorn

from token_server.config import (
    PURGE_INTERVAL_RANGE,
    TOKEN_LIFETIME_RANGE,
    ServerOptions,
    load_config,
    validate_port,
)
from token_server.duration.errors import DurationError
from token_server.duration.human import HumanDuration
from token_server.duration.validator import DurationRangeValidator
from token_server.logging import get_logger, setup_logging
from token_server.server import create_app
from token_server.store import TokenStore

HOST = "127.0.0.1"

logger = get_logger("main")


def duration_in(validator: DurationRangeValidator) -> Callable[[str], HumanDuration]:
    """Build an argparse type that parses and range-checks a duration."""

    def parse(value: str) -> HumanDuration:
        try:
            return validator.parse_and_validate(value)
        except DurationError as e:
            raise argparse.ArgumentTypeError(str(e))

    return parse


def port_number(value: str) -> int:
    try:
        return validate_port(int(value))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="token-server",
        description="Server to provide one-time access tokens for some set of metadata",
    )
    parser.add_argument(
        "--config",
        default=os.environ.get("CONFIG_PATH"),
        help="YAML file with server options (default: $CONFIG_PATH)",
    )
    parser.add_argument(
        "--dump-enabled",
        action="store_true",
        default=None,
        help="allow for HEAD /dump endpoint to log all metadata",
    )
    parser.add_argument(
        "--shutdown-enabled",
        action="store_true",
        default=None,
        help="allow for GET /shutdown endpoint to shutdown this server",
    )
    parser.add_argument(
        "-p", "--port",
        type=port_number,
        help="Which port to listen on (default: 3666)",
    )
    parser.add_argument(
        "--purge-interval",
        type=duration_in(PURGE_INTERVAL_RANGE),
        help=(
            f"What frequency to remove expired tokens, {PURGE_INTERVAL_RANGE} "
            f"(default: {PURGE_INTERVAL_RANGE.default})"
        ),
    )
    parser.add_argument(
        "--token-lifetime",
        type=duration_in(TOKEN_LIFETIME_RANGE),
        help=(
            f"How long does a token remain valid, {TOKEN_LIFETIME_RANGE} "
            f"(default: {TOKEN_LIFETIME_RANGE.default})"
        ),
    )
    return parser


def resolve_options(args: argparse.Namespace) -> ServerOptions:
    """Combine config file and flags; flags win over the config file."""
    if args.config:
        if not os.path.exists(args.config):
            raise FileNotFoundError(f"Config file not found at {args.config}")
        options = load_config(args.config)
    else:
        options = ServerOptions()

    for name in ("port", "purge_interval", "token_lifetime", "dump_enabled", "shutdown_enabled"):
        value = getattr(args, name)
        if value is not None:
            setattr(options, name, value)

    return options


def main(argv: list[str] | None = None):
    """Run the token server."""
    setup_logging()
    args = build_parser().parse_args(argv)

    try:
        options = resolve_options(args)
    except (OSError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("Token server listening: %s", options)

    store = TokenStore(token_lifetime=options.token_lifetime)
    app = create_app(options, store)

    server = uvicorn.Server(uvicorn.Config(app, host=HOST, port=options.port))
    store.with_shutdown(lambda: setattr(server, "should_exit", True))
    server.run()


if __name__ == "__main__":
    main()
