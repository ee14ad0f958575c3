"""Rich-based logging configuration for hhh.

Colored console output when attached to a terminal, plain single-line
records everywhere else (docker, systemd, log shippers).
"""

from __future__ import annotations

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

HHH_THEME = Theme({
    "logging.level.debug": "blue",
    "logging.level.info": "green",
    "logging.level.warning": "yellow",
    "logging.level.error": "red bold",
    "logging.level.critical": "red bold reverse",
})


def is_tty() -> bool:
    """Check if stdout is a TTY (interactive terminal)."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def should_use_rich() -> bool:
    """Determine if Rich logging should be used.

    Returns True if:
    - HHH_RICH_LOGS=1 is set (force enable)
    - Running in a TTY and HHH_RICH_LOGS is not explicitly disabled
    """
    env_value = os.environ.get("HHH_RICH_LOGS", "").lower()

    if env_value in ("1", "true", "yes"):
        return True
    if env_value in ("0", "false", "no"):
        return False

    return is_tty()


def configure_logging(
    level: int | str = logging.INFO,
    force_rich: bool | None = None,
) -> None:
    """Configure root logging.

    Args:
        level: Logging level (default: INFO)
        force_rich: Override auto-detection. None = auto-detect.
    """
    use_rich = force_rich if force_rich is not None else should_use_rich()

    root = logging.getLogger()
    root.handlers.clear()

    if use_rich:
        console = Console(theme=HHH_THEME, force_terminal=True)

        handler: logging.Handler = RichHandler(
            console=console,
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root.addHandler(handler)
    root.setLevel(level)

    # Silence noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # hhh.cli logs the listen address itself; uvicorn.error only repeats startup banners
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
