"""
Base mapper ABC for x-influx.

All mappers implement ``import_data(layout, writer)``.  The contract is:

1. Read from the mapper's source, resolving the layout against the
   source's header (or using its field names as prompts).
2. Send one ``Message`` per usable row or entry to the writer.
3. Contain row-level and source-level failures (log and count them)
   and return an ``ImportSummary``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from x_influx.layout import Layout
from x_influx.writer import Writer


@dataclass
class ImportSummary:
    """Counts collected by one ``import_data`` call."""

    files_total: int = 0
    files_failed: int = 0
    rows_sent: int = 0
    rows_skipped: int = 0
    writes_failed: int = 0

    def merge(self, other: ImportSummary) -> None:
        self.files_total += other.files_total
        self.files_failed += other.files_failed
        self.rows_sent += other.rows_sent
        self.rows_skipped += other.rows_skipped
        self.writes_failed += other.writes_failed


class BaseMapper(ABC):
    """Abstract base class for data source mappers."""

    @abstractmethod
    def import_data(self, layout: Layout, writer: Writer) -> ImportSummary:
        """Map the source into messages and send them to *writer*.

        Args:
            layout: Column names and timestamp format for this run.
            writer: A running writer.

        Returns:
            ImportSummary with file and row counts.
        """
