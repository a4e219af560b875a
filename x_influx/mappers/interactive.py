"""
Interactive mapper for x-influx.

Prompts for one entry at a time until end of input (Ctrl-D):

    Measurement [data]: 21.5
    Time [timestamp][%F %H:%M:%S]: 2017-10-10 00:00:00
    Tags [room,floor]: kitchen,1

Typed tag values are paired with the layout's non-empty tag names in
order; surplus values or surplus names are dropped without complaint.
An unparsable time discards the entry and prompts again.
"""

from __future__ import annotations

import logging
from typing import Callable

from x_influx.exceptions import SendError
from x_influx.layout import Layout
from x_influx.mappers.base import BaseMapper, ImportSummary
from x_influx.message import Message
from x_influx.timefmt import parse_timestamp
from x_influx.writer import Writer


class InteractiveMapper(BaseMapper):
    """Reads entries from a prompt function (``input`` by default)."""

    def __init__(
        self,
        prompt: Callable[[str], str] = input,
        echo: Callable[[str], object] = print,
        logger: logging.Logger | None = None,
    ) -> None:
        self.prompt = prompt
        self.echo = echo
        self.logger = logger or logging.getLogger(__name__)

    def read_entry(self, layout: Layout) -> tuple[str, str, list[str]]:
        """Prompt for one ``(value, time, tag_values)`` entry.

        Raises:
            EOFError: On end of input.
        """
        value = self.prompt(f"Measurement [{layout.measure}]: ").strip()
        time = self.prompt(f"Time [{layout.time}][{layout.tformat}]: ").strip()
        tags = self.prompt(f"Tags [{','.join(layout.tag_names)}]: ").strip().split(",")
        return value, time, tags

    def import_data(self, layout: Layout, writer: Writer) -> ImportSummary:
        self.echo("Interactive mode...")
        self.echo("Insert tags comma separated.\nExit with C-d")

        summary = ImportSummary()
        while True:
            try:
                value, time_text, tag_values = self.read_entry(layout)
            except EOFError:
                break
            except OSError as exc:
                self.logger.error("Failure: %s", exc)
                summary.rows_skipped += 1
                continue

            try:
                time = parse_timestamp(time_text, layout.tformat)
            except ValueError as exc:
                self.logger.error("Parsing time failed: %s", exc)
                summary.rows_skipped += 1
                continue

            tags = tuple(zip(layout.tag_names, tag_values))
            self.logger.debug("%s,%s,%s", value, time, tags)
            msg = Message(time=time, value=(layout.measure, value), tags=tags)
            try:
                writer.send(msg)
            except SendError as exc:
                self.logger.error("Sending to background client failed: %s", exc)
                summary.rows_skipped += 1
                continue
            summary.rows_sent += 1

        self.logger.info(
            "Interactive import finished: %d sent, %d discarded",
            summary.rows_sent, summary.rows_skipped,
        )
        return summary
