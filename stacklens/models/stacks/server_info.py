"""Per-server rows derived from a stack for visualisation consumers."""

from pydantic import BaseModel, ConfigDict


class ServerMetrics(BaseModel):
    """One serving process group as shown by flow and metrics views."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    namespace: str
    cluster: str
    model: str
    type: str = "llm-d"
    component_type: str
    status: str
    replicas: int
    ready_replicas: int
    gateway_status: str | None = None
    gateway_type: str | None = None
