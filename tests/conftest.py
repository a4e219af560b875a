"""
Shared test fixtures for x-influx tests.

No test talks to a real InfluxDB.  Writers are backed by in-memory
stores defined here; input files are written to ``tmp_path``.
"""

from __future__ import annotations

import threading

import pytest

from x_influx.exceptions import StoreError
from x_influx.message import Record
from x_influx.writer import Writer

# ---------------------------------------------------------------------------
# Sample inputs -- edit here if the canonical examples change
# ---------------------------------------------------------------------------
SIMPLE_CSV = "timestamp,data\n2017-10-10 00:00:00,0\n2017-10-10 00:01:00,1\n"

TAGGED_CSV = (
    "datum,,stand in kw/h,test,bereich,halle,plz\n"
    "2017-10-10 00:00:00,,12.5,x,nord,h1,10115\n"
    "2017-10-10 00:15:00,,13.0,y,sued,h2,10117\n"
)


class RecordingStore:
    """Keeps every written record in memory."""

    def __init__(self) -> None:
        self.records: list[Record] = []
        self.closed = False
        self.thread_name: str | None = None

    def write(self, record: Record) -> None:
        self.thread_name = threading.current_thread().name
        self.records.append(record)

    def close(self) -> None:
        self.closed = True


class FlakyStore(RecordingStore):
    """Rejects records whose field value is in ``reject``."""

    def __init__(self, reject: set[str]) -> None:
        super().__init__()
        self.reject = reject

    def write(self, record: Record) -> None:
        if record.field[1] in self.reject:
            raise StoreError(f"rejected {record.field[1]}")
        super().write(record)


@pytest.fixture()
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def writer(store):
    """A running writer backed by ``store``; joined on teardown if needed."""
    w = Writer(lambda: store, "series")
    w.start()
    yield w
    if w.running:
        w.join()


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs the full import pipeline)",
    )
