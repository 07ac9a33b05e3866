"""Per-user dialogue session models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from manualbot.app.models.common import FlowName


class RegistrationStep(str, Enum):
    """Registration flow steps."""

    start = "start"
    waiting_email = "waiting_email"
    waiting_name = "waiting_name"
    confirming = "confirming"
    registered = "registered"


class InquiryStep(str, Enum):
    """Inquiry flow steps."""

    type_selection = "type_selection"
    writing_content = "writing_content"
    confirming_content = "confirming_content"
    completed = "completed"


class FlowState(BaseModel):
    """Active flow, its current step and accumulated fields."""

    name: FlowName
    step: str
    fields: dict[str, str] = Field(default_factory=dict)


class Session(BaseModel):
    """Ephemeral per-user state. `flow is None` means no active flow."""

    user_key: str
    flow: FlowState | None = None
    created_at: datetime
    expires_at: datetime | None = None

    @property
    def in_flow(self) -> bool:
        return self.flow is not None

    def is_expired(self, now: datetime) -> bool:
        """Check the logical deadline; sessions without one never expire."""
        return self.expires_at is not None and now > self.expires_at
