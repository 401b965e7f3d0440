import logging
import os
from typing import Optional

from rich.logging import RichHandler

from .config import load_config

log = logging.getLogger("wpfleet")

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

# httpx logs every request at INFO, urllib3 every retry.
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3")


def _level_from_name(name: str) -> int:
    return logging._nameToLevel.get(str(name).upper(), logging.INFO)


def resolve_log_level() -> int:
    env_level = os.getenv("WPFLEET_LOG_LEVEL")
    if env_level:
        return _level_from_name(env_level)

    cfg = load_config()
    return _level_from_name(cfg.get("logging", {}).get("level", "INFO"))


def configure_logging(level: Optional[int] = None, *, interactive: bool = False) -> None:
    """Set up root logging once per entry module.

    Interactive tools share the terminal with rich prompts, so their log
    records go through a RichHandler instead of the plain line format.
    """
    resolved = level if level is not None else resolve_log_level()
    if interactive:
        logging.basicConfig(
            level=resolved,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(show_path=False, markup=False)],
        )
    else:
        logging.basicConfig(level=resolved, format=DEFAULT_LOG_FORMAT)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
