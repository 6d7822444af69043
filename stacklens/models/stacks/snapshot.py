"""Published discovery state."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from stacklens.constants.enums import StackStatus
from stacklens.models.stacks.stack_info import Stack


class StackSnapshot(BaseModel):
    """Immutable view of the discovered stacks handed to consumers."""

    model_config = ConfigDict(frozen=True)

    stacks: tuple[Stack, ...] = ()
    is_loading: bool = False
    error: str | None = None
    last_refresh: datetime | None = None

    def get_stack(self, stack_id: str) -> Stack | None:
        for stack in self.stacks:
            if stack.id == stack_id:
                return stack
        return None

    def healthy_stacks(self) -> tuple[Stack, ...]:
        return tuple(s for s in self.stacks if s.status == StackStatus.HEALTHY)

    def disaggregated_stacks(self) -> tuple[Stack, ...]:
        return tuple(s for s in self.stacks if s.has_disaggregation)

    def preferred_stack(self) -> Stack | None:
        """Pick a default stack: healthy and disaggregated, then healthy, then first."""
        for stack in self.stacks:
            if stack.status == StackStatus.HEALTHY and stack.has_disaggregation:
                return stack
        healthy = self.healthy_stacks()
        if healthy:
            return healthy[0]
        return self.stacks[0] if self.stacks else None
