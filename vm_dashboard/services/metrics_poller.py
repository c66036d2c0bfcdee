import asyncio
import contextlib
import logging
from functools import lru_cache
from typing import List, Optional, Set, Tuple

import httpx

from vm_dashboard.config import Settings, get_settings
from vm_dashboard.models.metrics import HostTarget, ViewState
from vm_dashboard.services.prometheus_client import query_sample
from vm_dashboard.services.queries import liveness_query, metric_queries
from vm_dashboard.services.reconciler import is_online, reconcile

logger = logging.getLogger(__name__)


class UnknownHostError(ValueError):
    """Raised when a host is selected that is not part of Settings.hosts."""


async def run_cycle(
    client: httpx.AsyncClient,
    host: str,
    prometheus_url: str,
    exporter_port: int = 9182,
) -> ViewState:
    """
    Run one poll cycle for a host and return the resulting ViewState.

    The liveness query runs first; only an online host gets the five metric
    queries, which run concurrently. If any request or response parsing fails,
    the whole cycle degrades to the offline state. Errors never propagate.
    """
    logger.debug("Fetching metrics for host %s", host)
    try:
        liveness = await query_sample(
            client, prometheus_url, liveness_query(host, exporter_port)
        )
        if not is_online(liveness):
            logger.info("Host %s is offline", host)
            return reconcile(host, liveness)

        queries = metric_queries(host, exporter_port)
        values = await asyncio.gather(
            *(query_sample(client, prometheus_url, query) for query in queries.values())
        )
        return reconcile(host, liveness, dict(zip(queries.keys(), values)))
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("Prometheus API error for host %s: %s", host, exc)
        return ViewState.offline(host)


class MetricsPoller:
    """
    Polls the selected host on a fixed interval and keeps the latest ViewState.

    Exactly one timer task exists while the poller runs. Changing the selected
    host cancels that timer before a new one is started. A tick is skipped
    while the previous cycle of the same selection is still running, and
    cycles that finish after the selection changed are discarded.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> None:
        self._settings = settings
        self._hosts = {host.address: host for host in settings.hosts}
        self._selected = settings.hosts[0].address
        self._state = ViewState.initial(self._selected)

        self._client = client
        self._owns_client = client is None

        self._generation = 0
        self._timer: Optional[asyncio.Task] = None
        self._cycle: Optional[Tuple[int, asyncio.Task]] = None
        self._pending: Set[asyncio.Task] = set()
        # Serializes start, stop and host switches so no timer outlives stop().
        self._lifecycle = asyncio.Lock()

    @property
    def hosts(self) -> List[HostTarget]:
        return list(self._settings.hosts)

    @property
    def selected_host(self) -> HostTarget:
        return self._hosts[self._selected]

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def running(self) -> bool:
        return self._timer is not None

    async def start(self) -> None:
        async with self._lifecycle:
            if self._timer is not None:
                return
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=httpx.Timeout(self._settings.request_timeout_seconds)
                )
            logger.info(
                "Polling %s every %.1fs for host %s",
                self._settings.prometheus_url,
                self._settings.poll_interval_seconds,
                self._selected,
            )
            self._start_timer()

    async def stop(self) -> None:
        async with self._lifecycle:
            await self._cancel_timer()

            pending = list(self._pending)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

            if self._owns_client and self._client is not None:
                await self._client.aclose()
                self._client = None
        logger.info("Metrics poller stopped")

    async def select_host(self, address: str) -> HostTarget:
        """
        Switch the monitored host.

        Selecting the current host again changes nothing. Otherwise the view
        state is reset and, if the poller is running, its timer is replaced by
        a new one that polls the new host immediately.
        """
        if address not in self._hosts:
            raise UnknownHostError(f"unknown host {address!r}")

        async with self._lifecycle:
            if address == self._selected:
                return self._hosts[address]

            was_running = self._timer is not None
            await self._cancel_timer()

            self._generation += 1
            self._selected = address
            self._state = ViewState.initial(address)
            logger.info("Selected host %s (%s)", address, self._hosts[address].label)

            if was_running:
                self._start_timer()
            return self._hosts[address]

    def _start_timer(self) -> None:
        self._timer = asyncio.create_task(self._tick_loop(self._generation))

    async def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is None:
            return
        timer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await timer

    async def _tick_loop(self, generation: int) -> None:
        while True:
            self._tick(generation)
            await asyncio.sleep(self._settings.poll_interval_seconds)

    def _tick(self, generation: int) -> None:
        if self._cycle is not None:
            cycle_generation, task = self._cycle
            if cycle_generation == generation and not task.done():
                logger.debug("Previous cycle for %s still running, skipping tick", self._selected)
                return

        task = asyncio.create_task(self._run_and_store(self._selected, generation))
        self._cycle = (generation, task)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_and_store(self, host: str, generation: int) -> None:
        state = await run_cycle(
            self._client,
            host,
            self._settings.prometheus_url,
            self._settings.exporter_port,
        )
        if generation != self._generation:
            logger.debug("Discarding result for %s, selection changed meanwhile", host)
            return
        self._state = state


@lru_cache(maxsize=1)
def get_poller() -> MetricsPoller:
    return MetricsPoller(get_settings())
