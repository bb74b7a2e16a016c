"""Prometheus metrics for the NFSv4 exporter.

Metric names and help strings are part of the exporter's public contract
and must not change. They live in a dedicated registry; `render` appends
the default registry (process and platform collectors) after it.
"""

import threading

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from .types import ServerSnapshot

CLIENT_LABEL = "client"


class NfsMetrics:
    """Gauges fed from ServerSnapshot values, plus scrape health metrics.

    The NFS gauges join the registry on the first successful publish, so a
    scrape that fails right after startup exposes only the health metrics
    instead of unmeasured zeros.

    Gauges hold floats: kernel counters above 2**53 are exported rounded to
    the nearest representable value.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self._lock = threading.Lock()
        self._nfs_gauges: list[Gauge] = []
        self._nfs_registered = False

        # Clients and exports
        self.number_of_nfsv4_clients = self._gauge(
            "number_of_nfsv4_clients", "Number of NFSv4 clients"
        )
        self.number_of_nfsv4_exports = self._gauge(
            "nfsv4_exports_total", "Number of NFSv4 exports"
        )

        # Operations per client, labeled by client address
        self.open_per_nfsv4_client = self._gauge(
            "nfsv4_op_open_per_client",
            "Number of open operations per NFSv4 client",
            [CLIENT_LABEL],
        )
        self.lock_per_nfsv4_client = self._gauge(
            "nfsv4_op_lock_per_client",
            "Number of lock operations per NFSv4 client",
            [CLIENT_LABEL],
        )
        self.deleg_per_nfsv4_client = self._gauge(
            "nfsv4_op_deleg_per_client",
            "Number of deleg operations per NFSv4 client",
            [CLIENT_LABEL],
        )
        self.layout_per_nfsv4_client = self._gauge(
            "nfsv4_op_layout_per_client",
            "Number of layout operations per NFSv4 client",
            [CLIENT_LABEL],
        )

        # Reply cache
        self.reply_cache_hits = self._gauge("nfs_reply_cache_hits", "Number of cache hits")
        self.reply_cache_misses = self._gauge("nfs_reply_cache_misses", "Number of cache misses")
        self.reply_cache_nocache = self._gauge("nfs_reply_cache_nocache", "Number of nocache")

        # IO bytes
        self.iobytes_read = self._gauge("nfs_iobytes_read", "Total of bytes read")
        self.iobytes_write = self._gauge("nfs_iobytes_write", "Total of bytes write")

        # Network
        self.network_netcount = self._gauge("nfs_network_netcount", "Total amount of packets")
        self.network_udpcount = self._gauge(
            "nfs_network_udpcount", "Total amount of UDP packets"
        )
        self.network_tcpcount = self._gauge(
            "nfs_network_tcpcount", "Total amount of TCP packets"
        )
        self.network_connections = self._gauge(
            "nfs_network_connections", "Total amount of network connections"
        )

        # Scrape health
        self.scrape_success = Gauge(
            "nfsv4_exporter_scrape_success",
            "Whether the last scrape succeeded (1) or failed (0)",
            registry=self.registry,
        )
        self.scrape_errors = Counter(
            "nfsv4_exporter_scrape_errors",
            "Total failed scrapes by failing component",
            ["component"],
            registry=self.registry,
        )
        self.scrape_duration = Histogram(
            "nfsv4_exporter_scrape_duration_seconds",
            "Time spent reading kernel statistics in seconds",
            buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0],
            registry=self.registry,
        )

    def _gauge(self, name: str, documentation: str, labelnames=()) -> Gauge:
        gauge = Gauge(name, documentation, labelnames, registry=None)
        self._nfs_gauges.append(gauge)
        return gauge

    def publish(self, snapshot: ServerSnapshot) -> None:
        """Set every NFS gauge from a snapshot.

        Per-client series are replaced wholesale, so clients that went away
        since the previous scrape stop being exported.
        """
        with self._lock:
            self.number_of_nfsv4_clients.set(snapshot.client_count)
            self.number_of_nfsv4_exports.set(snapshot.export_count)

            per_client = (
                self.open_per_nfsv4_client,
                self.lock_per_nfsv4_client,
                self.deleg_per_nfsv4_client,
                self.layout_per_nfsv4_client,
            )
            for gauge in per_client:
                gauge.clear()
            # Clients sharing an address collapse into one series, last one wins
            for client in snapshot.clients:
                ops = client.operations
                self.open_per_nfsv4_client.labels(client.address).set(ops.open_count)
                self.lock_per_nfsv4_client.labels(client.address).set(ops.lock_count)
                self.deleg_per_nfsv4_client.labels(client.address).set(ops.deleg_count)
                self.layout_per_nfsv4_client.labels(client.address).set(ops.layout_count)

            stats = snapshot.stats
            self.reply_cache_hits.set(stats.reply_cache.hits)
            self.reply_cache_misses.set(stats.reply_cache.misses)
            self.reply_cache_nocache.set(stats.reply_cache.nocache)

            self.iobytes_read.set(stats.io.read)
            self.iobytes_write.set(stats.io.write)

            self.network_netcount.set(stats.network.packets_total)
            self.network_udpcount.set(stats.network.udp_packets)
            self.network_tcpcount.set(stats.network.tcp_packets)
            self.network_connections.set(stats.network.tcp_connections)

            if not self._nfs_registered:
                for gauge in self._nfs_gauges:
                    self.registry.register(gauge)
                self._nfs_registered = True

            self.scrape_success.set(1)

    def record_failure(self, component: str) -> None:
        """Flag a failed scrape, leaving the NFS gauges at their last values."""
        with self._lock:
            self.scrape_success.set(0)
            self.scrape_errors.labels(component=component).inc()

    def observe_duration(self, seconds: float) -> None:
        self.scrape_duration.observe(seconds)

    def render(self) -> bytes:
        """Encode the NFS registry followed by the default registry."""
        with self._lock:
            output = generate_latest(self.registry)
        return output + generate_latest(REGISTRY)
