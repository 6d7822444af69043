"""Fixed stacks published in demo mode, when no cluster is queried."""

from __future__ import annotations

from stacklens.constants.enums import AutoscalerKind, ComponentRole, ComponentStatus
from stacklens.constants.values import DEMO_MODEL_NAME
from stacklens.models.stacks.stack_info import (
    AutoscalerInfo,
    Stack,
    StackComponent,
    StackComponents,
    stack_id,
)


def _component(
    name: str,
    namespace: str,
    cluster: str,
    role: ComponentRole,
    replicas: int,
    status: ComponentStatus = ComponentStatus.RUNNING,
) -> StackComponent:
    return StackComponent(
        name=name,
        namespace=namespace,
        cluster=cluster,
        role=role,
        status=status,
        replicas=replicas,
        ready_replicas=replicas if status == ComponentStatus.RUNNING else 0,
        model=DEMO_MODEL_NAME,
    )


def _stack(
    namespace: str,
    cluster: str,
    components: StackComponents,
    *,
    model: str,
    inference_pool: str | None = None,
    autoscaler: AutoscalerInfo | None = None,
) -> Stack:
    # Demo stacks are named after their namespace even when a pool exists.
    return Stack(
        id=stack_id(namespace, cluster),
        name=namespace,
        namespace=namespace,
        cluster=cluster,
        inference_pool=inference_pool,
        components=components,
        model=model,
        autoscaler=autoscaler,
    )


def create_demo_stacks() -> list[Stack]:
    """Return the four demo stacks.

    - llm-inference: disaggregated, WVA managed
    - llm-idle: WVA managed and scaled to zero
    - vllm-prod: unified servers behind an HPA
    - inference-staging: manually scaled with a pending decode group
    """
    cluster_1 = "demo-cluster-1"
    cluster_2 = "demo-cluster-2"
    role = ComponentRole

    ns = "llm-inference"
    llm_inference = _stack(
        ns,
        cluster_1,
        StackComponents(
            prefill=(
                _component("prefill-server-0", ns, cluster_1, role.PREFILL, 2),
                _component("prefill-server-1", ns, cluster_1, role.PREFILL, 2),
            ),
            decode=(
                _component("decode-server-0", ns, cluster_1, role.DECODE, 3),
                _component("decode-server-1", ns, cluster_1, role.DECODE, 3),
            ),
            epp=_component("inference-epp", ns, cluster_1, role.EPP, 2),
            gateway=_component("inference-gateway", ns, cluster_1, role.GATEWAY, 1),
        ),
        model=DEMO_MODEL_NAME,
        inference_pool="llm-inference-pool",
        autoscaler=AutoscalerInfo(
            kind=AutoscalerKind.WVA,
            name="llm-inference-wva",
            min_replicas=4,
            max_replicas=16,
            current_replicas=12,
            desired_replicas=12,
        ),
    )

    ns = "llm-idle"
    llm_idle = _stack(
        ns,
        cluster_1,
        StackComponents(
            epp=_component("idle-epp", ns, cluster_1, role.EPP, 1),
            gateway=_component("idle-gateway", ns, cluster_1, role.GATEWAY, 1),
        ),
        model="Mistral-7B",
        inference_pool="llm-idle-pool",
        autoscaler=AutoscalerInfo(
            kind=AutoscalerKind.WVA,
            name="llm-idle-wva",
            min_replicas=0,
            max_replicas=8,
            current_replicas=0,
            desired_replicas=0,
        ),
    )

    ns = "vllm-prod"
    vllm_prod = _stack(
        ns,
        cluster_2,
        StackComponents(
            both=tuple(
                _component(f"vllm-server-{i}", ns, cluster_2, role.BOTH, 4)
                for i in range(3)
            ),
            epp=_component("vllm-epp", ns, cluster_2, role.EPP, 1),
            gateway=_component("vllm-gateway", ns, cluster_2, role.GATEWAY, 1),
        ),
        model="Granite-13B",
        inference_pool="vllm-prod-pool",
        autoscaler=AutoscalerInfo(
            kind=AutoscalerKind.HPA,
            name="vllm-prod-hpa",
            min_replicas=6,
            max_replicas=24,
            current_replicas=14,
            desired_replicas=14,
        ),
    )

    ns = "inference-staging"
    staging = _stack(
        ns,
        cluster_1,
        StackComponents(
            prefill=(_component("staging-prefill-0", ns, cluster_1, role.PREFILL, 1),),
            decode=(
                _component(
                    "staging-decode-0",
                    ns,
                    cluster_1,
                    role.DECODE,
                    1,
                    ComponentStatus.PENDING,
                ),
            ),
            epp=_component("staging-epp", ns, cluster_1, role.EPP, 1),
        ),
        model="Qwen-32B",
    )

    return [llm_inference, llm_idle, vllm_prod, staging]
