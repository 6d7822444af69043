"""Stack controller - one discovery pass against one cluster.

A pass fans out the resource queries, assembles stacks per namespace and
reports the outcome as a ``ClusterDiscoveryResult``. Passes never raise into
the caller: connectivity failures and unexpected parse errors both come back
as an unreachable result so the scheduler can keep the cluster's cached stacks.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from stacklens.constants.enums import QueryFailure, ResourceKind
from stacklens.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_COMMAND_TIMEOUT,
)
from stacklens.controllers.base import BaseController
from stacklens.controllers.stacks.exceptions import ClusterUnreachableError
from stacklens.controllers.stacks.executor import (
    KubectlExecutor,
    KubectlResponse,
    classify_failure,
)
from stacklens.controllers.stacks.fetchers import ClusterResources, ResourceFetcher
from stacklens.controllers.stacks.parsers import StackAssembler
from stacklens.models.stacks.stack_info import Stack

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterDiscoveryResult:
    """Outcome of one cluster pass."""

    cluster: str
    stacks: tuple[Stack, ...] = ()
    reachable: bool = True
    error: str | None = None
    resource_errors: dict[ResourceKind, str] = field(default_factory=dict)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.reachable and self.error is None


class StackController(BaseController):
    """Discovers inference serving stacks in a single kubeconfig context."""

    def __init__(
        self,
        context: str,
        executor: KubectlExecutor | None = None,
        request_timeout: str = CLUSTER_REQUEST_TIMEOUT,
        command_timeout: float = KUBECTL_COMMAND_TIMEOUT,
    ) -> None:
        """Initialize the stack controller.

        Args:
            context: Kubernetes context name; also the cluster name on stacks.
            executor: kubectl transport, shared between controllers.
            request_timeout: kubectl --request-timeout for every query.
            command_timeout: Process timeout in seconds for every query.
        """
        super().__init__()
        self.context = context
        self.request_timeout = request_timeout
        self.command_timeout = command_timeout
        self._executor = executor or KubectlExecutor()
        self._fetcher = ResourceFetcher(
            self._run_kubectl,
            request_timeout=request_timeout,
            cluster=context,
        )
        self._assembler = StackAssembler(context)

    async def _run_kubectl(self, args: tuple[str, ...]) -> KubectlResponse:
        return await self._executor.execute(
            args, context=self.context, timeout=self.command_timeout
        )

    async def check_connection(self) -> bool:
        """Check whether the cluster API server answers."""
        response = await self._run_kubectl(
            ("version", "-o", "json", f"--request-timeout={self.request_timeout}")
        )
        return classify_failure(response) is QueryFailure.NONE

    async def fetch_resources(self) -> ClusterResources:
        """Fetch raw stack resources.

        Raises:
            ClusterUnreachableError: The cluster could not be reached.
        """
        return await self._fetcher.fetch_all()

    async def fetch_all(self) -> dict[str, Any]:
        """Fetch raw stack resources keyed by resource kind."""
        resources = await self.fetch_resources()
        data: dict[str, Any] = {
            kind.value: resources.items(kind) for kind in ResourceKind
        }
        data["errors"] = {kind.value: msg for kind, msg in resources.errors.items()}
        return data

    async def discover(self) -> ClusterDiscoveryResult:
        """Run one discovery pass and report its outcome."""
        started = time.monotonic()

        def elapsed_ms() -> int:
            return int((time.monotonic() - started) * 1000)

        try:
            resources = await self.fetch_resources()
            stacks = tuple(self._assembler.assemble(resources))
        except ClusterUnreachableError as exc:
            logger.warning("Skipping cluster %s: %s", self.context, exc.message)
            return ClusterDiscoveryResult(
                cluster=self.context,
                reachable=False,
                error=exc.message,
                duration_ms=elapsed_ms(),
            )
        except Exception as exc:
            logger.exception("Discovery pass failed for cluster %s", self.context)
            return ClusterDiscoveryResult(
                cluster=self.context,
                reachable=False,
                error=str(exc) or type(exc).__name__,
                duration_ms=elapsed_ms(),
            )

        if not stacks:
            logger.info("Cluster %s: no stacks found", self.context)
        else:
            logger.info("Cluster %s: found %d stack(s)", self.context, len(stacks))
        return ClusterDiscoveryResult(
            cluster=self.context,
            stacks=stacks,
            resource_errors=dict(resources.errors),
            duration_ms=elapsed_ms(),
        )
