"""
Timestamp parsing for x-influx.

Layouts carry strftime-style patterns.  A few composite directives that
users are used to from other tools (``%F``, ``%T``, ...) are not
understood by Python's ``strptime`` family, so they are expanded before
handing the pattern to ``pandas.to_datetime``.

All parsed timestamps are timezone-aware UTC: naive text is taken as
UTC, text carrying an offset (``%z``) is converted.  A bare ``%s``
pattern reads integer seconds since the epoch.  Results are
``pandas.Timestamp`` values, so digits below the microsecond (``%f``
with more than six digits) survive into the nanosecond conversion.
"""

from __future__ import annotations

from datetime import datetime

import pandas as pd

EPOCH_SECONDS = "%s"

_SHORTHANDS = {
    "%F": "%Y-%m-%d",
    "%T": "%H:%M:%S",
    "%D": "%m/%d/%y",
    "%R": "%H:%M",
}


def expand_format(tformat: str) -> str:
    """Replace composite directives with their strptime equivalents.

    ``%%`` is kept intact so a literal percent sign is never mistaken
    for the start of a shorthand.
    """
    out: list[str] = []
    i = 0
    while i < len(tformat):
        pair = tformat[i:i + 2]
        if pair == "%%":
            out.append(pair)
            i += 2
        elif pair in _SHORTHANDS:
            out.append(_SHORTHANDS[pair])
            i += 2
        else:
            out.append(tformat[i])
            i += 1
    return "".join(out)


def parse_timestamp(text: str, tformat: str) -> pd.Timestamp:
    """Parse *text* with *tformat* into an aware UTC ``pandas.Timestamp``.

    Raises:
        ValueError: If the text is empty or does not match the pattern.
    """
    text = text.strip()
    if not text:
        raise ValueError("empty timestamp")
    if tformat.strip() == EPOCH_SECONDS:
        try:
            seconds = int(text)
        except ValueError:
            raise ValueError(f"not an integer epoch timestamp: {text!r}") from None
        ts = pd.to_datetime(seconds, unit="s", utc=True)
    else:
        ts = pd.to_datetime(text, format=expand_format(tformat), utc=True)
    if pd.isna(ts):
        raise ValueError(f"unparsable timestamp {text!r}")
    return ts


def to_nanoseconds(ts: datetime) -> int:
    """Nanoseconds since the Unix epoch for an aware ``datetime``.

    A ``pandas.Timestamp`` keeps its sub-microsecond digits.
    """
    return int(pd.Timestamp(ts).value)
