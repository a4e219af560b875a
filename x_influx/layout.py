"""
Column layout for x-influx.

A ``Layout`` names the columns that carry the semantic parts of a record:

- measure: the column whose cell becomes the measurement value
- time: the column holding the timestamp, parsed with ``tformat``
- tags: optional columns attached to each record as tags

``Layout.apply()`` resolves those names against one header row and
returns a ``ResolvedColumns`` that the mappers reuse for every data row
of the same source.  Tag indices are carried together with their tag
name, so a tag that is missing from the header never shifts the pairing
of the ones that are present.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from x_influx.exceptions import NotFoundError

DEFAULT_TIME_FORMAT = "%F %H:%M:%S"


@dataclass(frozen=True)
class ResolvedColumns:
    """Column indices of one header row.

    Attributes:
        measure_index: Position of the measure column.
        time_index: Position of the time column.
        tags: ``(tag_name, index)`` pairs in layout order, only for tags
            present in the header.
    """

    measure_index: int
    time_index: int
    tags: tuple[tuple[str, int], ...] = field(default_factory=tuple)

    @property
    def tag_indices(self) -> list[int]:
        return [idx for _, idx in self.tags]

    @property
    def max_index(self) -> int:
        """Highest index a data row must reach to be usable."""
        return max([self.measure_index, self.time_index, *self.tag_indices])


def _first_index(header: Sequence[str], name: str) -> int | None:
    for idx, column in enumerate(header):
        if column == name:
            return idx
    return None


class Layout(BaseModel):
    """Mapping from record fields to header column names.

    Immutable once built; shared by every mapper invocation of a run.
    """

    model_config = ConfigDict(frozen=True)

    measure: str = "data"
    tags: tuple[str, ...] = Field(default_factory=tuple)
    time: str = "timestamp"
    tformat: str = DEFAULT_TIME_FORMAT

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: object) -> object:
        """Accept ``"a,b"`` as well as ``["a", "b"]``."""
        if value is None:
            return ()
        if isinstance(value, str):
            return tuple(value.split(","))
        return value

    @property
    def tag_names(self) -> list[str]:
        """Configured tag names without empty entries."""
        return [t for t in self.tags if t]

    def apply(self, header: Sequence[str]) -> ResolvedColumns:
        """Locate the layout's columns in *header*.

        The first occurrence of a repeated column name wins.  Tags that
        do not appear in the header are left out.

        Raises:
            NotFoundError: If the measure or time column is absent.
        """
        measure_index = _first_index(header, self.measure)
        if measure_index is None:
            raise NotFoundError(self.measure, "measure")

        time_index = _first_index(header, self.time)
        if time_index is None:
            raise NotFoundError(self.time, "time")

        tags: list[tuple[str, int]] = []
        for name in self.tag_names:
            idx = _first_index(header, name)
            if idx is not None:
                tags.append((name, idx))

        return ResolvedColumns(
            measure_index=measure_index,
            time_index=time_index,
            tags=tuple(tags),
        )
