"""
NFSv4 Exporter

Reads Linux NFSv4 server statistics from /proc and /var/lib/nfs and
publishes them in the Prometheus text format. This package provides:

- Readers: ReplyCacheReader (/proc/net/rpc/nfsd), ClientDirectoryReader
  (/proc/fs/nfsd/clients, /var/lib/nfs/etab)
- SnapshotAssembler: one fresh read of every source per scrape
- Data Types: NfsServerStats, NfsClient, ServerSnapshot, ...
- HTTP app and Typer CLI (nfsv4_exporter.main, nfsv4_exporter.cli)
"""

__version__ = "1.0.1"

from nfsv4_exporter.clients import ClientDirectoryReader
from nfsv4_exporter.config import Settings
from nfsv4_exporter.exceptions import (
    MalformedRecordError,
    NfsSourceError,
    ScrapeError,
    ScrapeFailedError,
    ScrapeTimeoutError,
    UnreadableSourceError,
)
from nfsv4_exporter.reply_cache import ReplyCacheReader
from nfsv4_exporter.snapshot import SnapshotAssembler
from nfsv4_exporter.types import (
    ClientOperationCounts,
    IOByteCounters,
    NetworkUsageCounters,
    NfsClient,
    NfsServerStats,
    ReplyCacheCounters,
    ServerSnapshot,
)

__all__ = [
    "__version__",
    # Readers
    "ReplyCacheReader",
    "ClientDirectoryReader",
    "SnapshotAssembler",
    "Settings",
    # Data Types
    "ReplyCacheCounters",
    "IOByteCounters",
    "NetworkUsageCounters",
    "NfsServerStats",
    "ClientOperationCounts",
    "NfsClient",
    "ServerSnapshot",
    # Errors
    "NfsSourceError",
    "MalformedRecordError",
    "UnreadableSourceError",
    "ScrapeError",
    "ScrapeFailedError",
    "ScrapeTimeoutError",
]
