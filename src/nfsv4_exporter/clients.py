"""
Reader for the NFSv4 client directory and the exports table.

Since Linux 5.3 the server exposes one directory per active client:

    /proc/fs/nfsd/clients/<id>/info
        clientid: 0x6d0b6d6a5f5a0b3c
        address: "10.0.0.1:876"
        name: "Linux NFSv4.2 client-1"
        minor version: 2
        callback address: "10.0.0.1:0"

    /proc/fs/nfsd/clients/<id>/states
        - 0x...: { type: open, access: rw, deny: --, superblock: "fd:10:13649", ... }
        - 0x...: { type: lock, superblock: "fd:10:13649", ... }
        - 0x...: { type: deleg, access: r, superblock: "fd:10:13649", ... }

Clients come and go while the directory is walked. A client whose files
disappear mid-walk is still reported, with empty or zero values.

The exports table (/var/lib/nfs/etab) has one line per active export.
"""

import logging
from pathlib import Path

from .sources import list_entries, read_lines
from .tokenizer import classify_state_line, extract_address, extract_client_id
from .types import ClientOperationCounts, NfsClient

logger = logging.getLogger(__name__)

DEFAULT_PROC_NFSD = Path("/proc/fs/nfsd")
DEFAULT_VAR_NFS = Path("/var/lib/nfs")


class ClientDirectoryReader:
    """
    Counts clients and exports, and collects per-client state counts.

    `list_clients` reads two files per client and is only meant to be called
    when per-client collection has been enabled.
    """

    def __init__(
        self,
        proc_nfsd_path: Path = DEFAULT_PROC_NFSD,
        var_nfs_path: Path = DEFAULT_VAR_NFS,
    ):
        self.clients_root = Path(proc_nfsd_path) / "clients"
        self.etab_path = Path(var_nfs_path) / "etab"

    def count_clients(self) -> int:
        """
        Return the number of entries under the clients directory.

        Returns 0 if the directory does not exist (nfsd not running).

        Raises:
            UnreadableSourceError: If the directory cannot be listed
        """
        entries = list_entries(self.clients_root)
        return len(entries) if entries is not None else 0

    def count_exports(self) -> int:
        """
        Return the number of non-empty lines in the exports table.

        Raises:
            UnreadableSourceError: If etab exists but cannot be read
        """
        lines = read_lines(self.etab_path)
        if lines is None:
            return 0
        return sum(1 for line in lines if line.strip())

    def list_clients(self) -> list[NfsClient]:
        """
        Collect identity and state counts for every client directory.

        Order follows directory enumeration and is not stable across calls.

        Raises:
            UnreadableSourceError: If the directory or a client file cannot be read
        """
        entries = list_entries(self.clients_root)
        if entries is None:
            return []

        clients = []
        for entry in entries:
            client_id, address = self._read_info(entry / "info")
            clients.append(
                NfsClient(
                    client_id=client_id,
                    address=address,
                    operations=self._read_states(entry / "states"),
                )
            )
        logger.debug(f"Collected {len(clients)} clients from {self.clients_root}")
        return clients

    def _read_info(self, path: Path) -> tuple[str, str]:
        client_id = ""
        address = ""
        for line in read_lines(path) or []:
            value = extract_client_id(line)
            if value is not None:
                client_id = value
            value = extract_address(line)
            if value is not None:
                address = value
        return client_id, address

    def _read_states(self, path: Path) -> ClientOperationCounts:
        counts = {"open": 0, "lock": 0, "deleg": 0, "layout": 0}
        for line in read_lines(path) or []:
            kind = classify_state_line(line)
            if kind is not None:
                counts[kind] += 1
        return ClientOperationCounts(
            open_count=counts["open"],
            lock_count=counts["lock"],
            deleg_count=counts["deleg"],
            layout_count=counts["layout"],
        )
