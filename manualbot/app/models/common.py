"""Common types and enums shared across all models."""

from enum import Enum, IntEnum


class PermissionLevel(IntEnum):
    """Ordinal access level. Higher values see more documents."""

    general = 1
    general_affairs = 2
    executive = 3


class MatchKind(str, Enum):
    """Strongest signal that made a document match a query."""

    exact_title = "exact_title"
    partial_title = "partial_title"
    tag = "tag"
    content = "content"
    category = "category"


class FlowName(str, Enum):
    """Multi-step conversational procedures."""

    registration = "registration"
    inquiry = "inquiry"


class InquiryType(str, Enum):
    """Inquiry classification selected by number 1-4."""

    question = "question"
    request = "request"
    bug_report = "bug_report"
    other = "other"

    @property
    def display_name(self) -> str:
        return _INQUIRY_DISPLAY_NAMES[self]


_INQUIRY_DISPLAY_NAMES = {
    InquiryType.question: "質問・疑問",
    InquiryType.request: "要望・改善提案",
    InquiryType.bug_report: "不具合報告",
    InquiryType.other: "その他",
}
