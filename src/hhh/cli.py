"""Command-line entry point: flags over environment, then serve."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

import uvicorn
from pydantic import ValidationError

from hhh.exceptions import ConfigError
from hhh.logging import configure_logging
from hhh.server import create_app
from hhh.settings import Settings

logger = logging.getLogger(__name__)

# settings field -> command-line flag
FLAGS = {
    "hc_key": "--hc-key",
    "hc_room": "--hc-room",
    "hc_notify": "--hc-notify",
    "hc_url": "--hc-url",
    "hc_timeout": "--hc-timeout",
    "hhh_bind": "--bind",
    "hhh_auth": "--auth",
    "hhh_log_level": "--log-level",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hhh",
        description="Relay Docker Hub build webhooks to a HipChat room.",
    )
    # Defaults stay None so unset flags fall through to the environment.
    parser.add_argument("-k", "--hc-key", dest="hc_key", help="HipChat API key [$HC_KEY]")
    parser.add_argument("-r", "--hc-room", dest="hc_room", help="HipChat room to send notices to [$HC_ROOM]")
    parser.add_argument(
        "-n",
        "--hc-notify",
        dest="hc_notify",
        action="store_true",
        default=None,
        help="Trigger a notification for people in the room [$HC_NOTIFY]",
    )
    parser.add_argument("--hc-url", dest="hc_url", help="HipChat API base URL [$HC_URL]")
    parser.add_argument("--hc-timeout", dest="hc_timeout", type=float, help="HipChat request timeout in seconds [$HC_TIMEOUT]")
    parser.add_argument("-b", "--bind", dest="hhh_bind", help="Bind address to listen on [$HHH_BIND]")
    parser.add_argument("-a", "--auth", dest="hhh_auth", help="Token POST requests must include [$HHH_AUTH]")
    parser.add_argument("--log-level", dest="hhh_log_level", help="Logging level [$HHH_LOG_LEVEL]")
    return parser


def load_settings(argv: Sequence[str] | None = None) -> Settings:
    """Parse flags and merge them over the environment.

    Raises:
        ConfigError: If the merged configuration does not validate.
    """
    args = build_parser().parse_args(argv)
    overrides = {name: value for name, value in vars(args).items() if value is not None}
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else ""
            flag = FLAGS.get(field, field)
            problems.append(f"{flag} / ${field.upper()}: {error['msg']}")
        raise ConfigError("invalid configuration:\n  " + "\n  ".join(problems)) from e


def main(argv: Sequence[str] | None = None) -> None:
    configure_logging()
    try:
        settings = load_settings(argv)
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    configure_logging(settings.hhh_log_level)
    app = create_app(settings)
    logger.info(f"Listening on {settings.hhh_bind}")
    uvicorn.run(app, host=settings.bind_host, port=settings.bind_port, log_config=None)


if __name__ == "__main__":
    main()
