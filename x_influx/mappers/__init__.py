"""
Mappers sub-package for x-influx.

A mapper turns one kind of data source into a stream of ``Message``
objects under a ``Layout`` and hands each one to the ``Writer``.

Design: Strategy Pattern
- base.py defines the BaseMapper ABC and the ImportSummary result.
- delimited.py implements DelimitedMapper for CSV-like text files.
- interactive.py implements InteractiveMapper for keyboard entry.

The driver picks the mapper from the configured source mode.
"""

from x_influx.mappers.base import BaseMapper, ImportSummary
from x_influx.mappers.delimited import DelimitedMapper
from x_influx.mappers.interactive import InteractiveMapper

__all__ = ["BaseMapper", "ImportSummary", "DelimitedMapper", "InteractiveMapper"]
