"""
Message and Record types for x-influx.

- ``Message``: one normalized record produced by a mapper.  It knows
  nothing about the database: value and tags are plain strings, the
  time is an aware ``datetime``.
- ``Record``: the database-facing form of a message -- series name
  attached, timestamp converted to integer nanoseconds.  ``to_line()``
  renders it as InfluxDB line protocol.

Values and tag values pass through unchanged from message to record;
only the timestamp changes unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from x_influx.timefmt import to_nanoseconds


@dataclass(frozen=True)
class Message:
    """One normalized record ready for the writer.

    Attributes:
        time: Timezone-aware timestamp.  Naive values are taken as UTC.
        value: ``(field_name, field_value)``; the name is the layout's
            measure column.
        tags: ``(tag_name, tag_value)`` pairs, in layout order.
    """

    time: datetime
    value: tuple[str, str]
    tags: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        if self.time.tzinfo is None:
            object.__setattr__(self, "time", self.time.replace(tzinfo=timezone.utc))
        object.__setattr__(self, "value", tuple(self.value))
        object.__setattr__(self, "tags", tuple(tuple(t) for t in self.tags))

    def to_record(self, series: str) -> Record:
        return Record(
            series=series,
            field=self.value,
            timestamp_ns=to_nanoseconds(self.time),
            tags=self.tags,
        )


# -- Line protocol escaping ------------------------------------------------

def _escape_measurement(text: str) -> str:
    return text.replace("\\", "\\\\").replace(",", "\\,").replace(" ", "\\ ")


def _escape_key(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(",", "\\,")
        .replace("=", "\\=")
        .replace(" ", "\\ ")
    )


def _quote_field_value(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


@dataclass(frozen=True)
class Record:
    """One database write: a single string field, a timestamp and tags."""

    series: str
    field: tuple[str, str]
    timestamp_ns: int
    tags: tuple[tuple[str, str], ...] = ()

    def to_line(self) -> str:
        """Render as one line of InfluxDB line protocol.

        Tags with an empty value are omitted; the protocol has no way
        to express them.
        """
        head = _escape_measurement(self.series)
        tag_part = "".join(
            f",{_escape_key(k)}={_escape_key(v)}" for k, v in self.tags if k and v
        )
        name, value = self.field
        return (
            f"{head}{tag_part} "
            f"{_escape_key(name)}={_quote_field_value(value)} "
            f"{self.timestamp_ns}"
        )
