"""
Delimited text file mapper for x-influx.

Input structure (per file):
  - Lines 0 .. skip_rows-1: ignored (free-form preamble)
  - Line skip_rows: header row, split on the delimiter
  - Remaining lines: data rows, split on the same delimiter

The layout is resolved once against the header; every data row is then
mapped positionally:

  value  <- cell at measure_index (verbatim)
  time   <- cell at time_index, parsed with layout.tformat
  tags   <- cell at each resolved tag index, paired with its tag name

Failure containment:
  - Undecodable line, short row, bad timestamp: log, skip the row.
  - File cannot be opened, no header, header lacks measure/time:
    log, skip the file, continue with the next one.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Iterator, Sequence

from x_influx.exceptions import NotFoundError, SendError, SourceImportError
from x_influx.layout import Layout, ResolvedColumns
from x_influx.mappers.base import BaseMapper, ImportSummary
from x_influx.message import Message
from x_influx.timefmt import parse_timestamp
from x_influx.writer import Writer


class DelimitedMapper(BaseMapper):
    """Maps CSV-like text files, in the order given, onto messages."""

    def __init__(
        self,
        files: Sequence[str | Path],
        delimiter: str = ",",
        skip_rows: int = 0,
        encoding: str = "utf-8-sig",
        logger: logging.Logger | None = None,
    ) -> None:
        if len(delimiter) != 1:
            raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")
        if skip_rows < 0:
            raise ValueError(f"skip_rows must be >= 0, got {skip_rows}")
        self.files = list(files)
        self.delimiter = delimiter
        self.skip_rows = skip_rows
        self.encoding = encoding
        self.logger = logger or logging.getLogger(__name__)

    def import_data(self, layout: Layout, writer: Writer) -> ImportSummary:
        summary = ImportSummary()
        for path in self.files:
            summary.files_total += 1
            try:
                file_summary = self.import_file(path, layout, writer)
            except (NotFoundError, SourceImportError) as exc:
                summary.files_failed += 1
                self.logger.error("Failed to import file %s. Reason: %s", path, exc)
                continue
            summary.merge(file_summary)
            self.logger.info(
                "Imported %s: %d rows sent, %d skipped",
                path, file_summary.rows_sent, file_summary.rows_skipped,
            )
        return summary

    def import_file(
        self, path: str | Path, layout: Layout, writer: Writer
    ) -> ImportSummary:
        """Import a single file.

        Returns:
            ImportSummary with row counts for this file.

        Raises:
            SourceImportError: If the file cannot be opened or read, or
                ends before the header row.
            NotFoundError: If the header lacks the measure or time column.
        """
        try:
            fh = open(path, "rb")
        except OSError as exc:
            raise SourceImportError(f"Failed to open file {path}: {exc}") from exc

        summary = ImportSummary()
        with fh:
            try:
                lines = self._lines(fh)
                header = self._read_header(lines, path)
                columns = layout.apply(header)
                self.logger.debug("Resolved columns for %s: %s", path, columns)
                for lineno, text in lines:
                    self._import_row(lineno, text, path, columns, layout, writer, summary)
            except OSError as exc:
                raise SourceImportError(f"Failed to read file {path}: {exc}") from exc
        return summary

    # -- Helpers -------------------------------------------------------------

    def _import_row(
        self,
        lineno: int,
        text: str | None,
        path: str | Path,
        columns: ResolvedColumns,
        layout: Layout,
        writer: Writer,
        summary: ImportSummary,
    ) -> None:
        if text is None:
            self.logger.warning("Failed to read row %d in %s", lineno, path)
            summary.rows_skipped += 1
            return
        if not text:
            self.logger.debug("Skipping blank row %d in %s", lineno, path)
            return
        try:
            msg = self._row_to_message(text, columns, layout)
        except ValueError as exc:
            self.logger.warning("Skipping row %d in %s: %s", lineno, path, exc)
            summary.rows_skipped += 1
            return
        try:
            writer.send(msg)
        except SendError as exc:
            self.logger.error("Failed to send message. %s", exc)
            summary.rows_skipped += 1
            return
        summary.rows_sent += 1

    def _lines(self, fh: BinaryIO) -> Iterator[tuple[int, str | None]]:
        """Yield ``(line_number, text)``; text is ``None`` if undecodable."""
        for lineno, raw in enumerate(fh):
            try:
                text = raw.decode(self.encoding)
            except UnicodeDecodeError:
                yield lineno, None
                continue
            yield lineno, text.rstrip("\r\n")

    def _read_header(
        self, lines: Iterator[tuple[int, str | None]], path: str | Path
    ) -> list[str]:
        for _ in range(self.skip_rows):
            if next(lines, None) is None:
                break
        entry = next(lines, None)
        if entry is None:
            raise SourceImportError(
                f"No header row found in {path} after skipping {self.skip_rows} rows"
            )
        lineno, text = entry
        if text is None:
            raise SourceImportError(f"Failed to decode header row {lineno} in {path}")
        return text.split(self.delimiter)

    def _row_to_message(
        self, text: str, columns: ResolvedColumns, layout: Layout
    ) -> Message:
        cells = text.split(self.delimiter)
        if len(cells) <= columns.max_index:
            raise ValueError(
                f"expected at least {columns.max_index + 1} columns, got {len(cells)}"
            )
        time_text = cells[columns.time_index]
        try:
            time = parse_timestamp(time_text, layout.tformat)
        except ValueError as exc:
            raise ValueError(f"failed to parse time {time_text!r}: {exc}") from exc
        return Message(
            time=time,
            value=(layout.measure, cells[columns.measure_index]),
            tags=tuple((name, cells[idx]) for name, idx in columns.tags),
        )
