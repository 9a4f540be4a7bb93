"""Configuration utilities for the krantor CLI.

This module provides shared setup functions used across CLI commands.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from krantor.core.config import WatchConfig, validate_watch_folder
from krantor.core.errors import KrantorError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure logging to stdout and optionally to a file.

    Args:
        verbose: Log every file system event and debug details.
        log_file: Optional path of a log file.
    """
    formatter = logging.Formatter(LOG_FORMAT)

    krantor_logger = logging.getLogger("krantor")
    krantor_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in krantor_logger.handlers[:]:
        krantor_logger.removeHandler(handler)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    krantor_logger.addHandler(stdout_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        krantor_logger.addHandler(file_handler)


def load_watch_config(
    timeout: float | None = None,
    warmup: float | None = None,
    max_concurrent: int | None = None,
) -> WatchConfig:
    """Load the configuration from the environment and check the watch folder.

    Exits with status 1 on any configuration or directory error.
    """
    try:
        config = WatchConfig.from_env().with_overrides(
            timeout=timeout,
            warmup=warmup,
            max_concurrent=max_concurrent,
        )
        watch_folder = validate_watch_folder(config.watch_folder)
    except KrantorError as e:
        fail(e)

    return config.with_overrides(watch_folder=watch_folder)


def fail(error: Exception) -> NoReturn:
    """Print an error and exit with status 1."""
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)
