"""Filesystem access shared by the readers."""

import logging
import os
from pathlib import Path

from .exceptions import MalformedRecordError, UnreadableSourceError

logger = logging.getLogger(__name__)

# Errors that mean "the source is not there" rather than "the source is broken"
ABSENT_ERRORS = (FileNotFoundError, NotADirectoryError)


def read_lines(path: Path) -> list[str] | None:
    """
    Read a pseudo-file fully and return its lines.

    The file is opened, read and closed before any parsing happens. Content
    must be valid UTF-8; client ids and addresses are exported verbatim, so
    undecodable bytes are rejected instead of being replaced.

    Returns:
        The file's lines without line terminators, or None if it does not exist

    Raises:
        UnreadableSourceError: On any other OSError (permissions, EIO, ...)
        MalformedRecordError: If the content is not valid UTF-8
    """
    try:
        with path.open("rb") as f:
            data = f.read()
    except ABSENT_ERRORS:
        logger.debug(f"{path} is absent")
        return None
    except OSError as e:
        raise UnreadableSourceError(path, e) from e
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        line_number = data.count(b"\n", 0, e.start) + 1
        raw_line = data.split(b"\n")[line_number - 1]
        line = raw_line.decode("utf-8", errors="backslashreplace")
        raise MalformedRecordError(path, line_number, line, "invalid UTF-8") from e
    return text.splitlines()


def list_entries(path: Path) -> list[Path] | None:
    """
    List a directory in enumeration order (unsorted).

    Returns:
        Paths of the directory's entries, or None if it does not exist

    Raises:
        UnreadableSourceError: On any other OSError
    """
    try:
        with os.scandir(path) as it:
            return [Path(entry.path) for entry in it]
    except ABSENT_ERRORS:
        logger.debug(f"{path} is absent")
        return None
    except OSError as e:
        raise UnreadableSourceError(path, e) from e
