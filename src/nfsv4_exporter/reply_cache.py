"""
Reader for /proc/net/rpc/nfsd.

The file holds one line per statistic family, each starting with a short
tag followed by space separated counters:

    rc 0 17 2983
    fh 0 0 0 0 0
    io 18432 253952
    th 8 0 0.000 ...
    net 3002 0 3002 6
    rpc 3000 0 0 0 0
    proc4ops 72 0 0 ...

Only the `rc`, `io` and `net` lines are exported. See tokenizer for how a
line is recognized and split.
"""

import logging
from pathlib import Path

from .exceptions import MalformedRecordError
from .sources import read_lines
from .tokenizer import (
    IO_SCHEMA,
    NETWORK_SCHEMA,
    REPLY_CACHE_SCHEMA,
    RPC_NFSD_SCHEMAS,
    RecordSchema,
    SchemaMismatch,
)
from .types import IOByteCounters, NetworkUsageCounters, NfsServerStats, ReplyCacheCounters

logger = logging.getLogger(__name__)

DEFAULT_PROC_RPC = Path("/proc/net/rpc")

_RECORD_TYPES = {
    REPLY_CACHE_SCHEMA.tag: ReplyCacheCounters,
    IO_SCHEMA.tag: IOByteCounters,
    NETWORK_SCHEMA.tag: NetworkUsageCounters,
}


class ReplyCacheReader:
    """
    Parses reply cache, IO and network counters from the nfsd RPC stats file.

    Example:
        stats = ReplyCacheReader(Path("/proc/net/rpc")).read()
        print(stats.reply_cache.hits)
    """

    def __init__(self, proc_rpc_path: Path = DEFAULT_PROC_RPC):
        self.path = Path(proc_rpc_path) / "nfsd"

    def read(self) -> NfsServerStats:
        """
        Read the current counters.

        Every line is checked against rc, io and net in that order; a line
        may feed more than one record. The last line matching a tag wins.
        A matched line that is too short resets that record to zeros.

        Returns:
            NfsServerStats, all zero if the file does not exist

        Raises:
            MalformedRecordError: If a matched line holds a non-integer value
            UnreadableSourceError: If the file exists but cannot be read
        """
        lines = read_lines(self.path)
        records = {tag: record_type() for tag, record_type in _RECORD_TYPES.items()}
        if lines is None:
            return _to_stats(records)

        for line_number, line in enumerate(lines, start=1):
            for schema in RPC_NFSD_SCHEMAS:
                if schema.matches(line):
                    records[schema.tag] = self._parse_record(schema, line_number, line)

        return _to_stats(records)

    def _parse_record(self, schema: RecordSchema, line_number: int, line: str):
        record_type = _RECORD_TYPES[schema.tag]
        try:
            return record_type(**schema.parse(line))
        except SchemaMismatch as e:
            logger.warning(f"{self.path}:{line_number}: {e}, using zeros: {line!r}")
            return record_type()
        except ValueError as e:
            raise MalformedRecordError(self.path, line_number, line, str(e)) from e


def _to_stats(records: dict) -> NfsServerStats:
    return NfsServerStats(
        reply_cache=records[REPLY_CACHE_SCHEMA.tag],
        io=records[IO_SCHEMA.tag],
        network=records[NETWORK_SCHEMA.tag],
    )
