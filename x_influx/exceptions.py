"""
Custom exception hierarchy for x-influx.

Row-level problems (an unparsable timestamp, a short row) are never
raised -- mappers log and skip them.  Everything that *is* raised lives
here so callers can tell a per-source failure from a writer-lifecycle
failure:

- Per source (fatal to one file only): ``NotFoundError``,
  ``SourceImportError``.
- Writer lifecycle: ``StartupError`` (fatal to the run), ``SendError``,
  ``JoinError``.
- Database: ``StoreError`` (one record lost, logged by the writer).
"""


class XInfluxError(Exception):
    """Base exception for all x-influx errors."""


class ConfigValidationError(XInfluxError):
    """Raised when a configuration file is empty or cannot be used."""


class NotFoundError(XInfluxError):
    """Raised when a required column is missing from a header row.

    Attributes:
        column: The configured column name that was looked up.
        role: Which layout field it belongs to (``"measure"`` or ``"time"``).
    """

    def __init__(self, column: str, role: str) -> None:
        self.column = column
        self.role = role
        super().__init__(f"Header '{column}' ({role}) not found in top row.")


class SourceImportError(XInfluxError):
    """Raised when a source cannot be opened or has no header row."""


class StartupError(XInfluxError):
    """Raised when the background writer thread cannot be spawned."""


class SendError(XInfluxError):
    """Raised when a message or shutdown signal is sent to a stopped writer."""


class JoinError(XInfluxError):
    """Raised when the writer thread terminated abnormally."""


class StoreError(XInfluxError):
    """Raised when the database rejects or fails to receive a record."""
