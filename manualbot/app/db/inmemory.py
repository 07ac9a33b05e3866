"""In-memory implementations of repository interfaces."""

from datetime import datetime

from manualbot.app.models.manual import Manual
from manualbot.app.models.records import (
    AccessLogEntry,
    InquiryRecord,
    NewInquiry,
    NewUser,
    UserRecord,
)


class InMemoryRecordStore:
    """In-memory implementation of RecordStore."""

    def __init__(self, users: list[UserRecord] | None = None) -> None:
        self._users: list[UserRecord] = list(users or [])
        self._inquiries: list[InquiryRecord] = []
        self._access_logs: list[AccessLogEntry] = []

    @property
    def users(self) -> list[UserRecord]:
        return list(self._users)

    @property
    def inquiries(self) -> list[InquiryRecord]:
        return list(self._inquiries)

    @property
    def access_logs(self) -> list[AccessLogEntry]:
        return list(self._access_logs)

    async def find_by_email(self, email: str) -> UserRecord | None:
        """Find user by email."""
        wanted = email.strip().lower()
        for user in self._users:
            if user.email.lower() == wanted:
                return user
        return None

    async def find_by_user_key(self, user_key: str) -> UserRecord | None:
        """Find active user by user key."""
        for user in self._users:
            if user.user_key == user_key and user.active:
                return user
        return None

    async def create_user(self, fields: NewUser) -> UserRecord:
        """Create a new user."""
        record = UserRecord(
            email=fields.email,
            name=fields.name,
            permission=fields.permission,
            user_key=fields.user_key,
            registered_at=datetime.now(),
            active=True,
        )
        self._users.append(record)
        return record

    async def create_inquiry(self, fields: NewInquiry) -> str:
        """Create a new inquiry and return its receipt id."""
        now = datetime.now()
        inquiry_id = f"INQ-{now:%Y%m%d}-{len(self._inquiries) + 1:04d}"
        self._inquiries.append(
            InquiryRecord(**fields.model_dump(), inquiry_id=inquiry_id, created_at=now)
        )
        return inquiry_id

    async def log_access(self, entry: AccessLogEntry) -> None:
        """Append access log entry."""
        if entry.created_at is None:
            entry = entry.model_copy(update={"created_at": datetime.now()})
        self._access_logs.append(entry)


class InMemoryCorpus:
    """In-memory implementation of CorpusAccess."""

    def __init__(self, manuals: list[Manual] | None = None) -> None:
        self._manuals: list[Manual] = list(manuals or [])

    async def all_active(self) -> list[Manual]:
        """Return active manuals in insertion order."""
        return [manual for manual in self._manuals if manual.active]
