"""Watch and sweep commands for the krantor CLI.

Commands:
- watch: Sweep the watch folder, then forward every new file
- sweep: Forward the files already in the watch folder and exit
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from krantor.client.api import PutioClient
from krantor.client.cli.config import fail, load_watch_config, setup_logging
from krantor.client.dispatch import Dispatcher
from krantor.client.intake import Intake
from krantor.client.sweep import sweep as run_sweep
from krantor.client.watcher import FileWatcher
from krantor.core.errors import KrantorError

logger = logging.getLogger(__name__)


_COMMON_OPTIONS = (
    click.option("--verbose", "-v", is_flag=True, help="Log every file system event."),
    click.option(
        "--log-file",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Also write logs to this file.",
    ),
    click.option(
        "--timeout",
        type=click.FloatRange(min=0, min_open=True),
        default=None,
        help="Deadline in seconds for each remote call (default 5).",
    ),
    click.option(
        "--warmup",
        type=click.FloatRange(min=0),
        default=None,
        help="Seconds to wait before reading a new file (default 0.1).",
    ),
)


def common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Apply the options shared by watch and sweep."""
    for option in reversed(_COMMON_OPTIONS):
        func = option(func)
    return func


@click.command()
@common_options
@click.option(
    "--max-concurrent",
    type=click.IntRange(min=1),
    default=None,
    help="Limit the number of files processed at once (unbounded by default).",
)
def watch(
    verbose: bool,
    log_file: Path | None,
    timeout: float | None,
    warmup: float | None,
    max_concurrent: int | None,
) -> None:
    """Forward existing and new torrent/magnet files to put.io.

    Configuration is read from WATCH_FOLDER, API_TOKEN and
    DOWNLOAD_FOLDER_ID. Runs until interrupted with Ctrl+C.
    """
    setup_logging(verbose, log_file)
    logger.info("Krantor started")

    config = load_watch_config(timeout=timeout, warmup=warmup, max_concurrent=max_concurrent)

    with PutioClient.from_config(config) as client:
        intake = Intake(client, config)
        dispatcher = Dispatcher(intake, max_concurrent=config.max_concurrent)

        try:
            # Sweep before subscribing so files are not processed twice
            run_sweep(intake)
            watcher = FileWatcher(config.watch_folder, dispatcher.submit)
            watcher.start()
        except KrantorError as e:
            fail(e)

        try:
            watcher.wait()
        except KeyboardInterrupt:
            click.echo("\nStopping...")
        except KrantorError as e:
            logger.error(f"Watcher failed: {e}")
            fail(e)
        finally:
            watcher.stop()


@click.command()
@common_options
def sweep(
    verbose: bool,
    log_file: Path | None,
    timeout: float | None,
    warmup: float | None,
) -> None:
    """Forward the files already in the watch folder, then exit.

    Exits with status 1 if any file could not be forwarded.
    """
    setup_logging(verbose, log_file)

    config = load_watch_config(timeout=timeout, warmup=warmup)

    with PutioClient.from_config(config) as client:
        try:
            outcomes = run_sweep(Intake(client, config))
        except KrantorError as e:
            fail(e)

    failed = [outcome for outcome in outcomes if not outcome.success]
    click.echo(f"Forwarded {len(outcomes) - len(failed)} file(s), {len(failed)} failed")
    if failed:
        sys.exit(1)
