"""
Data types for NFSv4 server statistics.

This module defines the value objects produced by the stat readers and
handed to the metrics publisher. Every type is created fresh for a single
scrape and discarded afterwards - nothing here is cached between scrapes.

All types are frozen dataclasses. Counters default to 0 so that an absent
kernel file always yields a fully populated (zeroed) record.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReplyCacheCounters:
    """
    Reply cache counters from the `rc` line of /proc/net/rpc/nfsd.

    Attributes:
        hits: Retransmitted requests answered from the cache.
        misses: Operations that required caching.
        nocache: Idempotent operations that bypass the cache.
    """

    hits: int = 0
    misses: int = 0
    nocache: int = 0


@dataclass(frozen=True)
class IOByteCounters:
    """
    Bytes read and written since the NFS server was last started (`io` line).
    """

    read: int = 0
    write: int = 0


@dataclass(frozen=True)
class NetworkUsageCounters:
    """
    Network usage from the `net` line of /proc/net/rpc/nfsd.

    Attributes:
        packets_total: Total amount of packets.
        udp_packets: Total amount of UDP packets.
        tcp_packets: Total amount of TCP packets.
        tcp_connections: Total amount of TCP connections.
    """

    packets_total: int = 0
    udp_packets: int = 0
    tcp_packets: int = 0
    tcp_connections: int = 0


@dataclass(frozen=True)
class NfsServerStats:
    """Aggregate of the three /proc/net/rpc/nfsd records."""

    reply_cache: ReplyCacheCounters = field(default_factory=ReplyCacheCounters)
    io: IOByteCounters = field(default_factory=IOByteCounters)
    network: NetworkUsageCounters = field(default_factory=NetworkUsageCounters)


@dataclass(frozen=True)
class ClientOperationCounts:
    """
    Per-client state counts derived from /proc/fs/nfsd/clients/<id>/states.

    Each line of the states file contributes to at most one counter.
    """

    open_count: int = 0
    lock_count: int = 0
    deleg_count: int = 0
    layout_count: int = 0


@dataclass(frozen=True)
class NfsClient:
    """
    A single NFSv4 client known to the server.

    Attributes:
        client_id: Value of the `clientid:` line (e.g., "0x6d0b6d6a5f5a0b3c"),
            empty if the info file has no such line.
        address: Client address with quotes stripped (e.g., "10.0.0.1:876"),
            empty if the info file has no such line.
        operations: Open/lock/delegation/layout state counts.
    """

    client_id: str = ""
    address: str = ""
    operations: ClientOperationCounts = field(default_factory=ClientOperationCounts)


@dataclass(frozen=True)
class ServerSnapshot:
    """
    Everything collected by one scrape.

    Attributes:
        stats: Reply cache, IO and network counters.
        client_count: Number of entries under the clients directory.
        export_count: Number of exports in the exports table.
        clients: Per-client records, only populated when per-client
            collection is enabled. Order follows directory enumeration.
    """

    stats: NfsServerStats = field(default_factory=NfsServerStats)
    client_count: int = 0
    export_count: int = 0
    clients: tuple[NfsClient, ...] = ()
