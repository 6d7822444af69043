"""Stack discovery service - drives refresh cycles across clusters.

The service owns the only mutable state in the engine: the current
``StackSnapshot`` and the cache file behind it. Every change is published as
a new immutable snapshot to all subscribers, so consumers never share a
reference the service later changes.

Clusters are scanned one at a time and the published stack set is updated
after each of them, so a slow cluster never hides results from a fast one.
Only one refresh cycle runs at a time; a trigger that arrives while a cycle
is running is a no-op.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from contextlib import suppress
from datetime import datetime, timezone
from typing import cast

from stacklens.constants.limits import SUBSCRIPTION_QUEUE_SIZE
from stacklens.controllers.stacks.controller import (
    ClusterDiscoveryResult,
    StackController,
)
from stacklens.controllers.stacks.executor import KubectlExecutor
from stacklens.controllers.stacks.mergers import apply_cluster_stacks, sort_stacks
from stacklens.models.cache.stack_cache import CacheEnvelope, StackCacheStore
from stacklens.models.stacks.snapshot import StackSnapshot
from stacklens.models.state.app_settings import AppSettings
from stacklens.utils.demo_stacks import create_demo_stacks

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[str], StackController]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class StackSubscription:
    """Async iterator over published snapshots.

    The queue is bounded; when a slow consumer falls behind, the oldest
    pending snapshot is dropped so the newest one is always delivered.
    """

    _CLOSED = object()

    def __init__(
        self,
        service: StackDiscoveryService,
        maxsize: int = SUBSCRIPTION_QUEUE_SIZE,
    ) -> None:
        self._service = service
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=max(1, maxsize))
        self.closed = False

    def offer(self, snapshot: StackSnapshot | object) -> None:
        if self.closed and snapshot is not self._CLOSED:
            return
        if self._queue.full():
            with suppress(asyncio.QueueEmpty):
                self._queue.get_nowait()
        self._queue.put_nowait(snapshot)

    async def get(self) -> StackSnapshot:
        """Wait for the next snapshot.

        Raises:
            StopAsyncIteration: The subscription was closed.
        """
        item = await self._queue.get()
        if item is self._CLOSED:
            raise StopAsyncIteration
        return cast(StackSnapshot, item)

    def close(self) -> None:
        """Stop receiving snapshots and end iteration."""
        if self.closed:
            return
        self.closed = True
        self._service.unsubscribe(self)
        self.offer(self._CLOSED)

    def __aiter__(self) -> StackSubscription:
        return self

    async def __anext__(self) -> StackSnapshot:
        return await self.get()


class StackDiscoveryService:
    """Discovers stacks on an interval and publishes immutable snapshots."""

    def __init__(
        self,
        clusters: Sequence[str],
        controller_factory: ControllerFactory,
        cache_store: StackCacheStore,
        settings: AppSettings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the service.

        Args:
            clusters: Cluster (kubeconfig context) names, scanned in order.
            controller_factory: Builds the controller for one cluster.
            cache_store: Persistent store for the stack cache envelope.
            settings: Refresh cadence, cache TTL and demo mode.
            clock: Source of aware timestamps.
        """
        self.clusters = tuple(clusters)
        self.settings = settings or AppSettings()
        self._controller_factory = controller_factory
        self._cache_store = cache_store
        self._clock = clock
        self._controllers: dict[str, StackController] = {}
        self._subscriptions: list[StackSubscription] = []
        self._snapshot = StackSnapshot()
        self._refreshing = False
        self._task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(cls, settings: AppSettings) -> StackDiscoveryService:
        """Build a service that talks to clusters through kubectl."""
        executor = KubectlExecutor(kubeconfig=settings.kubeconfig)

        def factory(cluster: str) -> StackController:
            return StackController(
                cluster,
                executor,
                request_timeout=settings.request_timeout,
                command_timeout=settings.command_timeout,
            )

        return cls(
            settings.clusters,
            factory,
            StackCacheStore(settings.resolved_cache_path()),
            settings,
        )

    # ------------------------------------------------------------------
    # Published state
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> StackSnapshot:
        return self._snapshot

    @property
    def is_refreshing(self) -> bool:
        return self._refreshing

    def subscribe(self) -> StackSubscription:
        """Register a subscriber; it first receives the current snapshot."""
        subscription = StackSubscription(self)
        self._subscriptions.append(subscription)
        subscription.offer(self._snapshot)
        return subscription

    def unsubscribe(self, subscription: StackSubscription) -> None:
        with suppress(ValueError):
            self._subscriptions.remove(subscription)

    def _publish(self, **changes: object) -> StackSnapshot:
        self._snapshot = self._snapshot.model_copy(update=changes)
        for subscription in list(self._subscriptions):
            subscription.offer(self._snapshot)
        return self._snapshot

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load_cache(self) -> CacheEnvelope | None:
        """Seed the snapshot from the cache file, stale or not."""
        envelope = self._cache_store.load()
        if envelope is None or not envelope.stacks:
            self._publish(is_loading=True)
            return envelope

        logger.info("Loaded %d cached stack(s)", len(envelope.stacks))
        self._publish(
            stacks=sort_stacks(envelope.stacks),
            is_loading=False,
            last_refresh=datetime.fromtimestamp(
                envelope.timestamp / 1000, tz=timezone.utc
            ),
        )
        return envelope

    async def start(self) -> None:
        """Show cached stacks, then refresh now and on every interval."""
        if self._task is not None:
            return
        if self.settings.demo_mode:
            self._publish_demo()
            return

        envelope = self.load_cache()
        now = _to_epoch_ms(self._clock())
        silent = envelope is not None and (
            bool(envelope.stacks)
            or envelope.is_fresh(now, self.settings.cache_ttl_seconds)
        )
        self._task = asyncio.create_task(self._run(silent))

    async def stop(self) -> None:
        """Cancel the refresh loop and close every subscription."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        for subscription in list(self._subscriptions):
            subscription.close()

    async def __aenter__(self) -> StackDiscoveryService:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    async def _run(self, initial_silent: bool) -> None:
        await self.refresh(silent=initial_silent)
        while True:
            await asyncio.sleep(self.settings.refresh_interval_seconds)
            await self.refresh(silent=True)

    # ------------------------------------------------------------------
    # Refresh cycle
    # ------------------------------------------------------------------

    async def refetch(self) -> bool:
        """Refresh on request; shows loading only while nothing is displayed."""
        return await self.refresh(silent=bool(self._snapshot.stacks))

    async def refresh(self, silent: bool = False) -> bool:
        """Run one discovery cycle over every configured cluster.

        Args:
            silent: Leave the loading flag alone while the cycle runs. The
                flag is only raised while no stacks are shown.

        Returns:
            False when a cycle was already running or there is nothing to
            scan, True once a cycle has completed.
        """
        if self._refreshing:
            logger.debug("Refresh already in progress, skipping")
            return False
        if self.settings.demo_mode:
            self._publish_demo()
            return True
        if not self.clusters:
            logger.info("No clusters configured, skipping refresh")
            return False

        self._refreshing = True
        try:
            if not silent and not self._snapshot.stacks:
                self._publish(is_loading=True)
            failures: list[str] = []
            for cluster in self.clusters:
                result = await self._scan(cluster)
                if not result.reachable:
                    failures.append(f"{cluster}: {result.error}")
        except asyncio.CancelledError:
            if self._snapshot.is_loading:
                self._publish(is_loading=False)
            raise
        finally:
            self._refreshing = False

        if len(failures) == len(self.clusters):
            error = "Unable to reach any cluster: " + "; ".join(failures)
            logger.warning(error)
            self._publish(is_loading=False, error=error)
        else:
            self._publish(is_loading=False, error=None, last_refresh=self._clock())
        return True

    async def _scan(self, cluster: str) -> ClusterDiscoveryResult:
        """Run one cluster pass and publish its stacks."""
        try:
            result = await self._controller(cluster).discover()
        except Exception as exc:
            logger.exception("Cluster %s: discovery raised", cluster)
            return ClusterDiscoveryResult(
                cluster=cluster,
                reachable=False,
                error=str(exc) or type(exc).__name__,
            )

        if result.resource_errors:
            logger.debug(
                "Cluster %s: partial results, failed kinds %s",
                cluster,
                sorted(kind.value for kind in result.resource_errors),
            )
        if not result.reachable or not result.stacks:
            return result

        stacks = apply_cluster_stacks(self._snapshot.stacks, cluster, result.stacks)
        self._cache_store.save(stacks, _to_epoch_ms(self._clock()))
        self._publish(stacks=stacks)
        return result

    def _controller(self, cluster: str) -> StackController:
        controller = self._controllers.get(cluster)
        if controller is None:
            controller = self._controller_factory(cluster)
            self._controllers[cluster] = controller
        return controller

    def _publish_demo(self) -> None:
        self._publish(
            stacks=sort_stacks(create_demo_stacks()),
            is_loading=False,
            error=None,
            last_refresh=self._clock(),
        )
