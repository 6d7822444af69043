"""Stack assembler - turns one cluster's raw resources into Stack values."""

from __future__ import annotations

import logging
from typing import Any

from stacklens.constants.enums import ComponentRole
from stacklens.constants.values import DEPLOYMENT_MODEL_LABEL, POD_MODEL_LABEL
from stacklens.controllers.stacks.fetchers.resource_fetcher import ClusterResources
from stacklens.controllers.stacks.parsers.autoscaler_parser import AutoscalerIndex
from stacklens.controllers.stacks.parsers.component_builder import (
    build_deployment_components,
    build_epp_from_service,
    build_gateway_component,
    build_pod_components,
)
from stacklens.controllers.stacks.parsers.role_classifier import (
    classify_pod_role,
    is_epp_name,
    is_serving_deployment,
    resource_labels,
    resource_name,
    resource_namespace,
    template_labels,
)
from stacklens.models.stacks.stack_info import Stack, StackComponents

logger = logging.getLogger(__name__)


def _group_by_namespace(
    resources: list[dict[str, Any]],
) -> dict[str, list[dict[str, Any]]]:
    grouped: dict[str, list[dict[str, Any]]] = {}
    for resource in resources:
        grouped.setdefault(resource_namespace(resource), []).append(resource)
    return grouped


def _last_by_namespace(resources: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    return {resource_namespace(resource): resource for resource in resources}


class StackAssembler:
    """Assembles per-namespace stacks for a single cluster."""

    def __init__(self, cluster: str) -> None:
        """Initialize assembler.

        Args:
            cluster: Cluster (context) name stamped on every stack.
        """
        self.cluster = cluster

    def assemble(self, resources: ClusterResources) -> list[Stack]:
        """Build one stack per namespace holding serving resources.

        Returns:
            Stacks in first-seen namespace order, or an empty list when the
            cluster has no labeled pods, inference pools or serving Deployments.
        """
        pods_by_namespace = _group_by_namespace(resources.pods)
        pools_by_namespace = _last_by_namespace(resources.inference_pools)
        serving_deployments = [
            d for d in resources.deployments if is_serving_deployment(d)
        ]
        deployments_by_namespace = _group_by_namespace(serving_deployments)

        if not pods_by_namespace and not pools_by_namespace and not serving_deployments:
            logger.info(
                "Cluster %s: no labeled pods, inference pools or serving deployments",
                self.cluster,
            )
            return []

        epp_services = _last_by_namespace(
            [s for s in resources.services if is_epp_name(resource_name(s))]
        )
        gateways = _last_by_namespace(resources.gateways)
        autoscalers = AutoscalerIndex.from_resources(
            resources.hpas, resources.wvas, resources.vpas
        )

        namespaces = list(
            dict.fromkeys(
                [*pods_by_namespace, *pools_by_namespace, *deployments_by_namespace]
            )
        )

        stacks: list[Stack] = []
        for namespace in namespaces:
            stack = self._assemble_namespace(
                namespace,
                pods=pods_by_namespace.get(namespace, []),
                deployments=deployments_by_namespace.get(namespace, []),
                pool=pools_by_namespace.get(namespace),
                epp_service=epp_services.get(namespace),
                gateway=gateways.get(namespace),
                autoscalers=autoscalers,
            )
            logger.debug(
                "Cluster %s: built stack %s (P:%d D:%d B:%d)",
                self.cluster,
                stack.id,
                len(stack.components.prefill),
                len(stack.components.decode),
                len(stack.components.both),
            )
            stacks.append(stack)
        return stacks

    def _assemble_namespace(
        self,
        namespace: str,
        *,
        pods: list[dict[str, Any]],
        deployments: list[dict[str, Any]],
        pool: dict[str, Any] | None,
        epp_service: dict[str, Any] | None,
        gateway: dict[str, Any] | None,
        autoscalers: AutoscalerIndex,
    ) -> Stack:
        model = resource_labels(pods[0]).get(POD_MODEL_LABEL) if pods else None

        pods_by_role: dict[ComponentRole, list[dict[str, Any]]] = {
            ComponentRole.PREFILL: [],
            ComponentRole.DECODE: [],
            ComponentRole.BOTH: [],
        }
        for pod in pods:
            pods_by_role[classify_pod_role(pod)].append(pod)

        prefill = build_pod_components(
            pods_by_role[ComponentRole.PREFILL],
            ComponentRole.PREFILL,
            namespace,
            self.cluster,
            model,
        )
        decode = build_pod_components(
            pods_by_role[ComponentRole.DECODE],
            ComponentRole.DECODE,
            namespace,
            self.cluster,
            model,
        )
        both = build_pod_components(
            pods_by_role[ComponentRole.BOTH],
            ComponentRole.BOTH,
            namespace,
            self.cluster,
            model,
        )

        epp = None
        if not pods and deployments:
            fallback = build_deployment_components(
                deployments, namespace, self.cluster, model
            )
            prefill.extend(fallback.prefill)
            decode.extend(fallback.decode)
            both.extend(fallback.both)
            epp = fallback.epp

        if not model and deployments:
            model = template_labels(deployments[0]).get(DEPLOYMENT_MODEL_LABEL)

        if epp is None and epp_service is not None:
            epp = build_epp_from_service(epp_service, namespace, self.cluster)

        components = StackComponents(
            prefill=tuple(prefill),
            decode=tuple(decode),
            both=tuple(both),
            epp=epp,
            gateway=(
                build_gateway_component(gateway, namespace, self.cluster)
                if gateway is not None
                else None
            ),
        )
        return Stack.build(
            namespace,
            self.cluster,
            components,
            inference_pool=(resource_name(pool) or None) if pool else None,
            model=model or None,
            autoscaler=autoscalers.detect(namespace),
        )
