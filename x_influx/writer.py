"""
Background writer for x-influx.

A ``Writer`` owns one unbounded FIFO queue and one worker thread.  Mappers
call ``send()`` from the importing thread; the worker turns each
``Message`` into a ``Record`` and performs one synchronous
``store.write()`` per message, in enqueue order.

Shutdown goes through the same queue: ``join()`` enqueues a ``None``
sentinel and waits for the worker to drain everything queued before it.
After that the writer is closed for good -- a second ``join()`` or a
late ``send()`` raises ``SendError`` instead of blocking.

Lifecycle::

    created --start()--> running --join()--> draining --> terminated

A failed write is logged and dropped; it never stops the worker.  The
store is created inside the worker thread, so a bad endpoint only shows
up as logged write failures, not as an exception from ``start()``.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable

from x_influx.exceptions import JoinError, SendError, StartupError, StoreError
from x_influx.message import Message
from x_influx.store import InfluxStore, RecordStore


class Writer:
    """Serializes messages into database writes on a single thread."""

    def __init__(
        self,
        store_factory: Callable[[], RecordStore],
        series: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self.series = series
        self.logger = logger or logging.getLogger(__name__)
        self.written = 0
        self.failed = 0
        self._store_factory = store_factory
        self._queue: queue.SimpleQueue[Message | None] = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._closed = False
        self._thread: threading.Thread | None = None
        self._failure: BaseException | None = None

    @classmethod
    def connect(
        cls,
        server: str,
        user: str,
        password: str,
        database: str,
        series: str,
        logger: logging.Logger | None = None,
    ) -> Writer:
        """Build a writer backed by ``InfluxStore`` and start it."""
        writer = cls(
            lambda: InfluxStore(server, user, password, database, logger=logger),
            series,
            logger=logger,
        )
        writer.start()
        return writer

    # -- Lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Spawn the worker thread.

        Raises:
            StartupError: If the writer was already started or the thread
                cannot be created.
        """
        if self._thread is not None:
            raise StartupError("Writer already started")
        thread = threading.Thread(target=self._run, name="x-influx-writer")
        try:
            thread.start()
        except RuntimeError as exc:
            raise StartupError(f"Failed to start writer thread: {exc}") from exc
        self._thread = thread
        self.logger.info("Writer started for series '%s'", self.series)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def send(self, message: Message) -> None:
        """Enqueue *message* for writing.

        Raises:
            SendError: If the writer is not running or already shut down.
        """
        with self._lock:
            if self._closed or not self.running:
                raise SendError("Writer is not running; message dropped")
            self._queue.put(message)

    def join(self) -> None:
        """Send the shutdown signal and wait for the worker to finish.

        Everything sent before this call is written (or logged as
        failed) before it returns.

        Raises:
            SendError: If the writer was never started or already joined.
            JoinError: If the worker thread died on an unexpected error.
        """
        with self._lock:
            if self._thread is None:
                raise SendError("Writer was never started")
            if self._closed:
                raise SendError("Writer already shut down")
            self._closed = True
            self._queue.put(None)
        self._thread.join()
        if self._failure is not None:
            raise JoinError(
                f"Writer terminated abnormally: {self._failure}"
            ) from self._failure
        self.logger.info(
            "Writer stopped: %d written, %d failed", self.written, self.failed
        )

    def __enter__(self) -> Writer:
        if self._thread is None:
            self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self._closed:
            self.join()

    # -- Worker --------------------------------------------------------------

    def _run(self) -> None:
        try:
            store = self._store_factory()
        except Exception as exc:  # surfaced by join()
            self._failure = exc
            self.logger.error("Failed to open database store: %s", exc)
            return

        try:
            self._loop(store)
        except Exception as exc:
            self._failure = exc
            self.logger.exception("Writer loop crashed")
        finally:
            try:
                store.close()
            except Exception as exc:
                if self._failure is None:
                    self._failure = exc
                self.logger.exception("Failed to close database store")

    def _loop(self, store: RecordStore) -> None:
        while True:
            msg = self._queue.get()
            if msg is None:
                break

            self.logger.debug("Incoming: %s", msg)
            try:
                record = msg.to_record(self.series)
            except (AttributeError, TypeError, ValueError) as exc:
                self.logger.error("Can't receive message %r: %s", msg, exc)
                continue

            try:
                store.write(record)
            except StoreError as exc:
                self.failed += 1
                self.logger.error(
                    "Failed to write %s=%s at %d %s: %s",
                    record.field[0], record.field[1], record.timestamp_ns,
                    list(record.tags), exc,
                )
            except Exception:  # pylint: disable=broad-except
                self.failed += 1
                self.logger.exception("Unexpected error writing %s", record)
            else:
                self.written += 1
