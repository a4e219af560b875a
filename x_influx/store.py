"""
Database write capability for x-influx.

The writer only needs ``write(record)`` and ``close()``; anything
satisfying ``RecordStore`` can be plugged in.  Two stores ship:

- ``InfluxStore``: one HTTP POST per record to the InfluxDB 1.x
  ``/write`` endpoint, line protocol body, nanosecond precision.
  No retries -- a failed write raises ``StoreError`` and the caller
  decides what to do (the writer logs and drops it).
- ``NoopStore``: discards records; used for dry runs.
"""

from __future__ import annotations

import logging
from typing import Protocol

import requests

from x_influx.exceptions import StoreError
from x_influx.message import Record


class RecordStore(Protocol):
    """Protocol for database backends."""

    def write(self, record: Record) -> None:
        ...

    def close(self) -> None:
        ...


class InfluxStore:
    """Writes records to InfluxDB using line protocol over HTTP."""

    def __init__(
        self,
        server: str,
        user: str,
        password: str,
        database: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.url = server.rstrip("/") + "/write"
        self.params = {"db": database, "precision": "ns", "u": user, "p": password}
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    def write(self, record: Record) -> None:
        payload = record.to_line().encode("utf-8")
        try:
            resp = self.session.post(
                self.url,
                params=self.params,
                data=payload,
                headers={"Content-Type": "text/plain; charset=utf-8"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise StoreError(f"Request to {self.url} failed: {exc}") from exc
        if resp.status_code >= 300:
            raise StoreError(
                f"InfluxDB rejected write (HTTP {resp.status_code}): {resp.text.strip()}"
            )
        self.logger.debug("Wrote %s", payload)

    def close(self) -> None:
        self.session.close()


class NoopStore:
    """Do nothing store implementation."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def write(self, record: Record) -> None:
        self.logger.debug("Dry run, not writing: %s", record.to_line())

    def close(self) -> None:
        return
