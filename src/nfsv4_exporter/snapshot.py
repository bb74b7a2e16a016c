"""
Snapshot assembly - one fresh, synchronous read of every source per scrape.

The assembler composes the readers and never caches: two calls against an
unchanged filesystem return equal snapshots. If any reader fails the whole
scrape is abandoned; a partial snapshot is never returned.
"""

import logging
import time

from .clients import ClientDirectoryReader
from .config import Settings
from .exceptions import NfsSourceError, ScrapeFailedError
from .reply_cache import ReplyCacheReader
from .types import ServerSnapshot

logger = logging.getLogger(__name__)


class SnapshotAssembler:
    """Builds a ServerSnapshot from the reply cache and client readers."""

    def __init__(
        self,
        reply_cache_reader: ReplyCacheReader,
        client_reader: ClientDirectoryReader,
    ):
        self._reply_cache_reader = reply_cache_reader
        self._client_reader = client_reader

    @classmethod
    def from_settings(cls, settings: Settings) -> "SnapshotAssembler":
        """Create an assembler reading from the paths in settings."""
        return cls(
            ReplyCacheReader(settings.proc_rpc_path),
            ClientDirectoryReader(settings.proc_nfsd_path, settings.var_nfs_path),
        )

    def assemble(self, collect_per_client_ops: bool) -> ServerSnapshot:
        """
        Read every source once and return the combined snapshot.

        Args:
            collect_per_client_ops: Also walk the per-client info and states
                files. This is O(clients) and off by default.

        Returns:
            ServerSnapshot with `clients` empty unless collect_per_client_ops

        Raises:
            ScrapeFailedError: If any reader fails; names the failing step
        """
        started = time.perf_counter()

        stats = self._run("reply_cache", self._reply_cache_reader.read)
        client_count = self._run("clients", self._client_reader.count_clients)
        export_count = self._run("exports", self._client_reader.count_exports)
        clients = ()
        if collect_per_client_ops:
            clients = tuple(self._run("client_info", self._client_reader.list_clients))

        logger.debug(
            f"Snapshot assembled in {time.perf_counter() - started:.4f}s "
            f"(clients={client_count}, exports={export_count}, per_client={len(clients)})"
        )
        return ServerSnapshot(
            stats=stats,
            client_count=client_count,
            export_count=export_count,
            clients=clients,
        )

    @staticmethod
    def _run(component: str, read):
        try:
            return read()
        except NfsSourceError as e:
            logger.error(f"Scrape aborted in {component}: {e}")
            raise ScrapeFailedError(component, e) from e
