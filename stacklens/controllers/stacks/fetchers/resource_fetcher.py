"""Resource fetcher for stack controller - reads stack resources from one cluster."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from stacklens.constants.enums import QueryFailure, ResourceKind
from stacklens.constants.timeouts import CLUSTER_REQUEST_TIMEOUT
from stacklens.constants.values import ROLE_LABEL
from stacklens.controllers.stacks.exceptions import ClusterUnreachableError
from stacklens.controllers.stacks.executor import (
    KubectlResponse,
    classify_failure,
    is_connectivity_message,
)

logger = logging.getLogger(__name__)

RunKubectlFunc = Callable[[tuple[str, ...]], Awaitable[KubectlResponse]]


@dataclass
class ClusterResources:
    """Raw resources read from one cluster, one list per kind.

    A kind whose query failed is empty and has an entry in ``errors``.
    """

    pods: list[dict[str, Any]] = field(default_factory=list)
    inference_pools: list[dict[str, Any]] = field(default_factory=list)
    services: list[dict[str, Any]] = field(default_factory=list)
    gateways: list[dict[str, Any]] = field(default_factory=list)
    hpas: list[dict[str, Any]] = field(default_factory=list)
    wvas: list[dict[str, Any]] = field(default_factory=list)
    vpas: list[dict[str, Any]] = field(default_factory=list)
    deployments: list[dict[str, Any]] = field(default_factory=list)
    errors: dict[ResourceKind, str] = field(default_factory=dict)

    def items(self, kind: ResourceKind) -> list[dict[str, Any]]:
        return getattr(self, kind.value)

    def set_items(self, kind: ResourceKind, items: list[dict[str, Any]]) -> None:
        setattr(self, kind.value, items)


class ResourceFetcher:
    """Fetches the eight stack-related resource kinds from a cluster in parallel."""

    _QUERIES: tuple[tuple[ResourceKind, tuple[str, ...]], ...] = (
        (ResourceKind.PODS, ("get", "pods", "-A", "-l", ROLE_LABEL)),
        (ResourceKind.INFERENCE_POOLS, ("get", "inferencepools", "-A")),
        (ResourceKind.SERVICES, ("get", "services", "-A")),
        (ResourceKind.GATEWAYS, ("get", "gateway", "-A")),
        (ResourceKind.HPAS, ("get", "hpa", "-A")),
        (ResourceKind.WVAS, ("get", "variantautoscalings", "-A")),
        (ResourceKind.VPAS, ("get", "vpa", "-A")),
        (ResourceKind.DEPLOYMENTS, ("get", "deployments", "-A")),
    )

    def __init__(
        self,
        run_kubectl_func: RunKubectlFunc,
        request_timeout: str = CLUSTER_REQUEST_TIMEOUT,
        cluster: str | None = None,
    ) -> None:
        """Initialize with kubectl runner function.

        Args:
            run_kubectl_func: Async function taking kubectl args and returning
                a KubectlResponse
            request_timeout: kubectl --request-timeout value for every query
            cluster: Cluster name, used in logs and errors
        """
        self._run_kubectl = run_kubectl_func
        self._request_timeout = request_timeout
        self.cluster = cluster

    def build_args(self, base_args: tuple[str, ...]) -> tuple[str, ...]:
        """Append JSON output and request timeout to a query."""
        return (
            *base_args,
            "-o",
            "json",
            f"--request-timeout={self._request_timeout}",
        )

    async def fetch_all(self) -> ClusterResources:
        """Run all queries concurrently and parse their results.

        Raises:
            ClusterUnreachableError: The pod query failed with a connectivity
                error; nothing from this pass should be used.
        """
        results = await asyncio.gather(
            *(self._run_kubectl(self.build_args(args)) for _, args in self._QUERIES),
            return_exceptions=True,
        )

        resources = ClusterResources()
        for (kind, _), result in zip(self._QUERIES, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if kind is ResourceKind.PODS:
                self._raise_if_unreachable(result)
            items, error = self._parse_result(kind, result)
            resources.set_items(kind, items)
            if error is not None:
                resources.errors[kind] = error

        logger.debug(
            "Cluster %s: pods=%d pools=%d deployments=%d failed_kinds=%s",
            self.cluster,
            len(resources.pods),
            len(resources.inference_pools),
            len(resources.deployments),
            sorted(kind.value for kind in resources.errors),
        )
        return resources

    def _raise_if_unreachable(self, result: KubectlResponse | BaseException) -> None:
        if isinstance(result, BaseException):
            timed_out = isinstance(result, (TimeoutError, asyncio.TimeoutError))
            if timed_out or is_connectivity_message(str(result)):
                raise ClusterUnreachableError(self.cluster, str(result) or "timeout")
            return
        if classify_failure(result) is QueryFailure.CONNECTIVITY:
            message = (result.error or result.output).strip()
            raise ClusterUnreachableError(self.cluster, message or "unreachable")

    def _parse_result(
        self,
        kind: ResourceKind,
        result: KubectlResponse | BaseException,
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Parse one query result into items, or empty items plus an error."""
        if isinstance(result, BaseException):
            logger.warning(
                "Cluster %s: %s query raised %s", self.cluster, kind.value, result
            )
            return [], str(result) or type(result).__name__

        failure = classify_failure(result)
        if failure is not QueryFailure.NONE:
            message = (result.error or result.output).strip()
            message = message or f"exit code {result.exit_code}"
            logger.debug(
                "Cluster %s: %s query failed (%s): %s",
                self.cluster,
                kind.value,
                failure.value,
                message,
            )
            return [], message

        try:
            data = json.loads(result.output)
        except json.JSONDecodeError as exc:
            logger.warning(
                "Cluster %s: malformed %s JSON: %s", self.cluster, kind.value, exc
            )
            return [], f"{QueryFailure.MALFORMED.value}: {exc}"

        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            return [], f"{QueryFailure.MALFORMED.value}: missing items"
        return [item for item in items if isinstance(item, dict)], None
