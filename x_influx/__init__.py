"""
x-influx: import tabular time-series records into InfluxDB.

Public API surface:

- ``run_import(config, ...)`` -- **recommended entry point**. Builds the
  layout, starts the background writer, runs the configured mapper
  (delimited files or interactive entry) and shuts the writer down.
  Returns an ``ImportSummary``.

- ``load_config(path)`` / ``save_config(config, path)`` -- YAML I/O for
  ``ImportConfig``.

Building blocks (``Layout``, ``Message``, ``Writer``, the mappers and
stores) are re-exported for callers that wire things up themselves.
"""

from __future__ import annotations

import logging
from typing import Callable

from x_influx.config import ImportConfig, load_config, save_config
from x_influx.exceptions import JoinError, SendError
from x_influx.layout import Layout
from x_influx.mappers import BaseMapper, DelimitedMapper, ImportSummary, InteractiveMapper
from x_influx.message import Message, Record
from x_influx.store import InfluxStore, NoopStore, RecordStore
from x_influx.writer import Writer

__version__ = "0.5.0"

__all__ = [
    "run_import",
    "build_mapper",
    "load_config",
    "save_config",
    "ImportConfig",
    "ImportSummary",
    "Layout",
    "Message",
    "Record",
    "Writer",
    "InfluxStore",
    "NoopStore",
    "DelimitedMapper",
    "InteractiveMapper",
]


def build_mapper(
    config: ImportConfig,
    prompt: Callable[[str], str] | None = None,
    logger: logging.Logger | None = None,
) -> BaseMapper:
    """Pick the mapper for the configured source mode."""
    source = config.source
    if source.mode == "interactive":
        return InteractiveMapper(prompt=prompt or input, logger=logger)
    return DelimitedMapper(
        source.files,
        delimiter=source.delimiter,
        skip_rows=source.skip_rows,
        encoding=source.encoding,
        logger=logger,
    )


def run_import(
    config: ImportConfig,
    *,
    store_factory: Callable[[], RecordStore] | None = None,
    prompt: Callable[[str], str] | None = None,
    logger: logging.Logger | None = None,
) -> ImportSummary:
    """Run one complete import.

    Orchestration:
      1. ``LayoutConfig.to_layout()`` -> ``Layout``
      2. ``Writer.start()`` (``InfluxStore`` unless *store_factory* is given)
      3. ``mapper.import_data(layout, writer)``
      4. ``writer.join()`` -- drains every queued message

    Args:
        config: The validated ImportConfig.
        store_factory: Builds the database store inside the writer
            thread.  Defaults to an ``InfluxStore`` for ``config.database``.
        prompt: Prompt function for interactive mode (``input`` by default).
        logger: Logger handed to every component.

    Returns:
        ImportSummary of the mapper run.

    Raises:
        StartupError: If the writer thread cannot be started.
    """
    log = logger or logging.getLogger(__name__)
    db = config.database
    layout = config.layout.to_layout()
    log.debug("Layout: %s", layout)

    def influx_store() -> RecordStore:
        return InfluxStore(db.server, db.user, db.password, db.database, logger=logger)

    writer = Writer(store_factory or influx_store, db.series, logger=logger)
    writer.start()
    log.info("Influx client created.")

    mapper = build_mapper(config, prompt=prompt, logger=logger)
    try:
        summary = mapper.import_data(layout, writer)
    finally:
        try:
            writer.join()
        except (JoinError, SendError) as exc:
            log.warning("Failed to gracefully shut down the writer: %s", exc)
            ok = False
        else:
            ok = True
    summary.writes_failed = writer.failed

    if ok and writer.failed == 0 and summary.files_failed == 0:
        log.info(
            "Successfully imported new data: %d rows sent, %d skipped.",
            summary.rows_sent, summary.rows_skipped,
        )
    else:
        log.error(
            "Import finished with errors: %d/%d files failed, %d rows skipped, "
            "%d writes failed.",
            summary.files_failed, summary.files_total, summary.rows_skipped,
            writer.failed,
        )
    return summary
