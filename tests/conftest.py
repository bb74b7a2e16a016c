"""Fixtures that fabricate the kernel files read by the exporter."""

from pathlib import Path

import pytest

from nfsv4_exporter.config import Settings

RPC_NFSD_SAMPLE = """\
rc 10 2 1
fh 0 0 0 0 0
io 500 300
th 8 0 0.000 0.000 0.000 0.000 0.000 0.000 0.000 0.000 0.000 0.000
net 7 1 6 3
rpc 7 0 0 0 0
proc4 2 0 5
proc4ops 72 0 0 0 1 0 0 0 0 0 2 0 0 0 0 0 0 0 0 0 0 0 0 0 0
"""


class NfsTree:
    """A fake /proc + /var/lib/nfs layout rooted in a temporary directory."""

    def __init__(self, root: Path):
        self.root = root
        self.proc_rpc = root / "proc" / "net" / "rpc"
        self.proc_nfsd = root / "proc" / "fs" / "nfsd"
        self.var_nfs = root / "var" / "lib" / "nfs"

    @property
    def clients_root(self) -> Path:
        return self.proc_nfsd / "clients"

    def write_rpc_nfsd(self, content: str) -> Path:
        self.proc_rpc.mkdir(parents=True, exist_ok=True)
        path = self.proc_rpc / "nfsd"
        path.write_text(content)
        return path

    def write_etab(self, content: str) -> Path:
        self.var_nfs.mkdir(parents=True, exist_ok=True)
        path = self.var_nfs / "etab"
        path.write_text(content)
        return path

    def add_client(
        self,
        name: str,
        info: str | None = None,
        states: str | None = None,
    ) -> Path:
        client_dir = self.clients_root / name
        client_dir.mkdir(parents=True, exist_ok=True)
        if info is not None:
            (client_dir / "info").write_text(info)
        if states is not None:
            (client_dir / "states").write_text(states)
        return client_dir

    def settings(self, **overrides) -> Settings:
        return Settings(
            proc_rpc_path=self.proc_rpc,
            proc_nfsd_path=self.proc_nfsd,
            var_nfs_path=self.var_nfs,
            **overrides,
        )


@pytest.fixture
def nfs_tree(tmp_path: Path) -> NfsTree:
    """Empty fake tree; nothing exists until a test writes it."""
    return NfsTree(tmp_path)


@pytest.fixture
def populated_tree(nfs_tree: NfsTree) -> NfsTree:
    """Fake tree with rpc stats, two exports and one client."""
    nfs_tree.write_rpc_nfsd(RPC_NFSD_SAMPLE)
    nfs_tree.write_etab(
        "/srv/nfs\t10.0.0.0/24(rw,sync,wdelay,hide,nocrossmnt,secure,root_squash)\n"
        "/srv/home\t*(ro,sync,wdelay,hide,nocrossmnt,secure,root_squash)\n"
    )
    nfs_tree.add_client(
        "3",
        info=(
            "clientid: 0xabc123\n"
            'address: "10.0.0.1:876"\n'
            'name: "Linux NFSv4.2 client-1"\n'
            "minor version: 2\n"
            'callback address: "10.0.0.1:0"\n'
        ),
        states=(
            "- 0x01: { type: open, access: rw, deny: --, superblock: \"fd:10:13649\" }\n"
            "- 0x02: { type: open, access: r, deny: --, superblock: \"fd:10:13649\" }\n"
            "- 0x03: { type: lock, superblock: \"fd:10:13649\" }\n"
            "- 0x04: { type: deleg, access: r, superblock: \"fd:10:13649\" }\n"
        ),
    )
    return nfs_tree


@pytest.fixture
def rpc_nfsd_sample() -> str:
    """Contents of a typical /proc/net/rpc/nfsd."""
    return RPC_NFSD_SAMPLE
