"""Inference serving stack models.

Every model here is frozen. A discovery cycle builds new values from raw
resource snapshots and never mutates a published one. Stack health, replica
totals and the disaggregation flag are computed fields, so they always agree
with the component set they are derived from.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from stacklens.constants.enums import (
    AutoscalerKind,
    ComponentRole,
    ComponentStatus,
    StackStatus,
)


def stack_id(namespace: str, cluster: str) -> str:
    """Return the stable identity string for a (namespace, cluster) pair."""
    return f"{namespace}@{cluster}"


class StackComponent(BaseModel):
    """A homogeneous group of serving replicas within one namespace/cluster."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    cluster: str
    role: ComponentRole
    status: ComponentStatus = ComponentStatus.UNKNOWN
    replicas: int = Field(default=0, ge=0)
    ready_replicas: int = Field(default=0, ge=0)
    model: str | None = None
    pod_names: tuple[str, ...] | None = None

    @model_validator(mode="after")
    def _ready_within_replicas(self) -> StackComponent:
        if self.ready_replicas > self.replicas:
            raise ValueError(
                f"ready_replicas ({self.ready_replicas}) exceeds "
                f"replicas ({self.replicas}) for component {self.name}"
            )
        return self

    @property
    def is_running(self) -> bool:
        return self.status == ComponentStatus.RUNNING


class AutoscalerInfo(BaseModel):
    """Autoscaler governing a stack's replica count."""

    model_config = ConfigDict(frozen=True)

    kind: AutoscalerKind
    name: str | None = None
    min_replicas: int | None = None
    max_replicas: int | None = None
    current_replicas: int | None = None
    desired_replicas: int | None = None


class StackComponents(BaseModel):
    """Fixed component slots of a stack."""

    model_config = ConfigDict(frozen=True)

    prefill: tuple[StackComponent, ...] = ()
    decode: tuple[StackComponent, ...] = ()
    both: tuple[StackComponent, ...] = ()
    epp: StackComponent | None = None
    gateway: StackComponent | None = None

    def serving(self) -> tuple[StackComponent, ...]:
        """Return prefill, decode and unified components in that order."""
        return (*self.prefill, *self.decode, *self.both)

    def present(self) -> tuple[StackComponent, ...]:
        """Return every component that exists, EPP and gateway included."""
        extras = tuple(c for c in (self.epp, self.gateway) if c is not None)
        return (*self.serving(), *extras)


def compute_stack_status(components: StackComponents) -> StackStatus:
    """Derive stack health from the readiness of all present components.

    - unknown: no components at all
    - healthy: every component is running
    - degraded: some but not all components are running
    - unhealthy: components exist but none is running
    """
    present = components.present()
    if not present:
        return StackStatus.UNKNOWN

    running = sum(1 for component in present if component.is_running)
    if running == len(present):
        return StackStatus.HEALTHY
    if running > 0:
        return StackStatus.DEGRADED
    return StackStatus.UNHEALTHY


class Stack(BaseModel):
    """One discovered inference serving deployment, keyed by namespace@cluster."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    namespace: str
    cluster: str
    inference_pool: str | None = None
    components: StackComponents = Field(default_factory=StackComponents)
    model: str | None = None
    autoscaler: AutoscalerInfo | None = None

    @model_validator(mode="after")
    def _id_matches_identity(self) -> Stack:
        expected = stack_id(self.namespace, self.cluster)
        if self.id != expected:
            raise ValueError(f"stack id {self.id!r} does not match {expected!r}")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> StackStatus:
        return compute_stack_status(self.components)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_disaggregation(self) -> bool:
        return bool(self.components.prefill) and bool(self.components.decode)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_replicas(self) -> int:
        return sum(c.replicas for c in self.components.serving())

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ready_replicas(self) -> int:
        return sum(c.ready_replicas for c in self.components.serving())

    @classmethod
    def build(
        cls,
        namespace: str,
        cluster: str,
        components: StackComponents,
        *,
        inference_pool: str | None = None,
        model: str | None = None,
        autoscaler: AutoscalerInfo | None = None,
    ) -> Stack:
        """Build a stack, deriving its identity and display name."""
        return cls(
            id=stack_id(namespace, cluster),
            name=inference_pool or namespace,
            namespace=namespace,
            cluster=cluster,
            inference_pool=inference_pool,
            components=components,
            model=model,
            autoscaler=autoscaler,
        )
