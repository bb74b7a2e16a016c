"""
Exception classes for stat collection and scraping.

Two families:
- NfsSourceError: raised by the readers when a kernel file exists but
  cannot be used (bad record, permission denied, I/O error). An absent
  file is never an error.
- ScrapeError: raised by the assembler and the exporter when a whole
  scrape has to be abandoned.

Each exception keeps its context in attributes so callers can log and
label failures without parsing the message.
"""

from pathlib import Path


class NfsSourceError(Exception):
    """
    Base class for problems with a kernel-exposed source file.

    Attributes:
        path: The file or directory that could not be used
    """

    def __init__(self, path: Path | str, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")


class MalformedRecordError(NfsSourceError):
    """
    Raised when a recognized line holds a value that is not an int64, or a
    source file is not valid UTF-8.

    Attributes:
        path: Source file
        line_number: 1-based line number in the source file
        line: The offending line, verbatim
    """

    def __init__(self, path: Path | str, line_number: int, line: str, reason: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(path, f"malformed record at line {line_number} ({reason}): {line!r}")


class UnreadableSourceError(NfsSourceError):
    """
    Raised when a source exists but reading it fails (permissions, EIO, ...).

    Attributes:
        path: Source file or directory
        cause: The underlying OSError
    """

    def __init__(self, path: Path | str, cause: OSError) -> None:
        self.cause = cause
        super().__init__(path, f"unreadable source: {cause.strerror or cause}")


class ScrapeError(Exception):
    """Base class for scrape-level failures."""


class ScrapeFailedError(ScrapeError):
    """
    Raised when a reader fails and the scrape is abandoned.

    Attributes:
        component: Which collection step failed ("reply_cache", "clients",
            "exports", "client_info")
        source_error: The reader error that caused the failure
    """

    def __init__(self, component: str, source_error: NfsSourceError) -> None:
        self.component = component
        self.source_error = source_error
        super().__init__(f"scrape failed in {component}: {source_error}")


class ScrapeTimeoutError(ScrapeError):
    """
    Raised when a scrape does not finish within the configured timeout.

    Attributes:
        timeout_seconds: The timeout that was exceeded
    """

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(f"scrape did not complete within {timeout_seconds:.1f}s")
