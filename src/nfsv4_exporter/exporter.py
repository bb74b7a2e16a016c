"""
Scrape orchestration: one bounded snapshot read per /metrics request.

The assembler does blocking file I/O, so it runs in the default executor and is
bounded by `scrape_timeout_seconds`. A failed or timed-out scrape leaves the
previously published values in place and raises the failed-scrape signal.
"""

import asyncio
import logging
import time

from .config import Settings
from .exceptions import ScrapeError, ScrapeFailedError, ScrapeTimeoutError
from .metrics import NfsMetrics
from .snapshot import SnapshotAssembler
from .types import ServerSnapshot

logger = logging.getLogger(__name__)


class Exporter:
    """
    Ties together settings, the snapshot assembler and the metrics registry.

    Example:
        exporter = Exporter(Settings(nfsv4_ops_clients=True))
        await exporter.scrape()
        body = exporter.metrics.render()
    """

    def __init__(
        self,
        settings: Settings,
        assembler: SnapshotAssembler | None = None,
        metrics: NfsMetrics | None = None,
    ):
        self.settings = settings
        self.assembler = assembler or SnapshotAssembler.from_settings(settings)
        self.metrics = metrics or NfsMetrics()

    async def collect(self) -> ServerSnapshot:
        """
        Assemble a snapshot off the event loop, bounded by the scrape timeout.

        Raises:
            ScrapeFailedError: If a reader failed
            ScrapeTimeoutError: If the read did not finish in time
        """
        loop = asyncio.get_running_loop()
        timeout = self.settings.scrape_timeout_seconds
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(
                    None, self.assembler.assemble, self.settings.nfsv4_ops_clients
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise ScrapeTimeoutError(timeout) from e

    async def scrape(self) -> bool:
        """
        Run one scrape and publish it.

        Returns:
            True if fresh values were published, False if the scrape failed
        """
        started = time.perf_counter()
        try:
            snapshot = await self.collect()
        except ScrapeError as e:
            component = e.component if isinstance(e, ScrapeFailedError) else "timeout"
            logger.error(f"Scrape failed, keeping previous values: {e}")
            self.metrics.record_failure(component)
            return False
        finally:
            self.metrics.observe_duration(time.perf_counter() - started)

        self.metrics.publish(snapshot)
        return True
