"""Models package - re-exports for convenience."""

from manualbot.app.models.common import FlowName, InquiryType, MatchKind, PermissionLevel
from manualbot.app.models.manual import CategoryPath, Manual, ScoredResult
from manualbot.app.models.records import (
    AccessLogEntry,
    InquiryRecord,
    NewInquiry,
    NewUser,
    UserRecord,
)
from manualbot.app.models.session import FlowState, InquiryStep, RegistrationStep, Session

__all__ = [
    # Common
    "FlowName",
    "InquiryType",
    "MatchKind",
    "PermissionLevel",
    # Manual
    "CategoryPath",
    "Manual",
    "ScoredResult",
    # Records
    "AccessLogEntry",
    "InquiryRecord",
    "NewInquiry",
    "NewUser",
    "UserRecord",
    # Session
    "FlowState",
    "InquiryStep",
    "RegistrationStep",
    "Session",
]
