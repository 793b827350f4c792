"""Runtime settings and logging setup for portkill."""

import argparse
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(slots=True)
class Settings:
    """Settings for the outer application; the state machine takes none."""

    refresh_interval: float = 0.0  # seconds, 0 disables auto-refresh
    log_file: Path | None = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.refresh_interval = max(0.0, self.refresh_interval)
        self.log_level = self.log_level.upper()


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Build Settings from command line arguments."""
    parser = argparse.ArgumentParser(
        prog="portkill",
        description="List processes bound to network ports and kill them interactively.",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=0.0,
        help="auto-refresh every N seconds while browsing (default: off)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="write diagnostics to this file (the terminal is taken by the UI)",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        type=str.upper,
        help="minimum level written to the log file (default: WARNING)",
    )
    args = parser.parse_args(argv)
    return Settings(
        refresh_interval=args.interval,
        log_file=args.log_file,
        log_level=args.log_level,
    )


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configure the "portkill" logger.

    Records go to settings.log_file when one is given. Otherwise they are
    discarded: anything written to stderr would corrupt the TUI.
    """
    logger = logging.getLogger("portkill")
    logger.setLevel(settings.log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if settings.log_file is not None:
        handler: logging.Handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = logging.NullHandler()
    logger.addHandler(handler)
    logger.propagate = False
    return logger
