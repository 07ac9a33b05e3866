"""Records exchanged with the external record store."""

from datetime import datetime

from pydantic import BaseModel, Field

from manualbot.app.models.common import InquiryType


class UserRecord(BaseModel):
    """Registered staff member."""

    email: str
    name: str
    permission: str = "一般"
    user_key: str
    registered_at: datetime | None = None
    active: bool = True


class NewUser(BaseModel):
    """Payload for RecordStore.create_user."""

    email: str
    name: str
    permission: str = "一般"
    user_key: str


class NewInquiry(BaseModel):
    """Payload for RecordStore.create_inquiry."""

    user_key: str
    user_name: str = ""
    email: str = ""
    inquiry_type: InquiryType
    content: str = Field(..., min_length=1)
    status: str = "pending"


class InquiryRecord(NewInquiry):
    """Persisted inquiry with its receipt id."""

    inquiry_id: str
    created_at: datetime


class AccessLogEntry(BaseModel):
    """Usage log line. Best-effort, never on the correctness path."""

    user_key: str
    user_name: str = ""
    action: str  # REGISTER | SEARCH | VIEW | INQUIRY
    keyword: str | None = None
    manual_id: str | None = None
    result_count: int | None = None
    created_at: datetime | None = None
