"""SQL implementations of repository interfaces."""

import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from manualbot.app.db.models import AccessLog, Inquiry, ManualRow, User
from manualbot.app.errors import PersistenceError, PersistenceErrorKind
from manualbot.app.models.manual import CategoryPath, Manual
from manualbot.app.models.records import AccessLogEntry, NewInquiry, NewUser, UserRecord
from manualbot.app.permissions import level_of

logger = logging.getLogger(__name__)


def _to_user_record(row: User) -> UserRecord:
    return UserRecord(
        email=row.email,
        name=row.name,
        permission=row.permission,
        user_key=row.user_key,
        registered_at=row.registered_at,
        active=row.is_active,
    )


def _to_manual(row: ManualRow) -> Manual:
    tags = frozenset(tag.strip() for tag in row.tags.split(",") if tag.strip())
    return Manual(
        id=row.id,
        category_path=CategoryPath(
            major=row.major_category,
            middle=row.middle_category,
            minor=row.minor_category,
        ),
        title=row.title,
        body=row.body,
        tags=tags,
        required_permission=level_of(row.view_permission),
        active=row.is_active,
        image_url=row.image_url,
        video_url=row.video_url,
        updated_at=row.updated_at,
    )


def _wrap(exc: SQLAlchemyError, action: str) -> PersistenceError:
    kind = (
        PersistenceErrorKind.permanent
        if isinstance(exc, IntegrityError)
        else PersistenceErrorKind.transient
    )
    return PersistenceError(f"{action} failed: {type(exc).__name__}", kind=kind)


class SqlRecordStore:
    """SQL implementation of RecordStore."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def find_by_email(self, email: str) -> UserRecord | None:
        """Find user by email."""
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        try:
            async with self._session_factory() as session:
                row = (await session.execute(stmt)).scalars().first()
        except SQLAlchemyError as e:
            raise _wrap(e, "find_by_email") from e
        return _to_user_record(row) if row else None

    async def find_by_user_key(self, user_key: str) -> UserRecord | None:
        """Find active user by user key."""
        stmt = select(User).where(User.user_key == user_key, User.is_active.is_(True))
        try:
            async with self._session_factory() as session:
                row = (await session.execute(stmt)).scalars().first()
        except SQLAlchemyError as e:
            raise _wrap(e, "find_by_user_key") from e
        return _to_user_record(row) if row else None

    async def create_user(self, fields: NewUser) -> UserRecord:
        """Create a new user."""
        row = User(
            email=fields.email,
            name=fields.name,
            permission=fields.permission,
            user_key=fields.user_key,
            registered_at=datetime.now(),
            is_active=True,
        )
        try:
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as e:
            raise _wrap(e, "create_user") from e
        return _to_user_record(row)

    async def create_inquiry(self, fields: NewInquiry) -> str:
        """Create a new inquiry and return its receipt id."""
        now = datetime.now()
        try:
            async with self._session_factory() as session:
                # Receipt ids are count + 1; two concurrent submissions can pick the
                # same id, and the loser fails with a permanent PersistenceError
                # (primary key violation) which aborts that user's flow.
                count = (await session.execute(select(func.count(Inquiry.inquiry_id)))).scalar_one()
                inquiry_id = f"INQ-{now:%Y%m%d}-{count + 1:04d}"
                session.add(
                    Inquiry(
                        inquiry_id=inquiry_id,
                        user_key=fields.user_key,
                        user_name=fields.user_name,
                        email=fields.email,
                        inquiry_type=fields.inquiry_type.value,
                        content=fields.content,
                        status=fields.status,
                        created_at=now,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise _wrap(e, "create_inquiry") from e
        return inquiry_id

    async def log_access(self, entry: AccessLogEntry) -> None:
        """Append access log entry."""
        try:
            async with self._session_factory() as session:
                session.add(
                    AccessLog(
                        user_key=entry.user_key,
                        user_name=entry.user_name,
                        action=entry.action,
                        keyword=entry.keyword,
                        manual_id=entry.manual_id,
                        result_count=entry.result_count,
                        created_at=entry.created_at or datetime.now(),
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise _wrap(e, "log_access") from e


class SqlCorpus:
    """SQL implementation of CorpusAccess."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def all_active(self) -> list[Manual]:
        """Return active manuals ordered by sheet position."""
        stmt = (
            select(ManualRow)
            .where(ManualRow.is_active.is_(True))
            .order_by(ManualRow.position, ManualRow.id)
        )
        try:
            async with self._session_factory() as session:
                rows = list((await session.execute(stmt)).scalars().all())
        except SQLAlchemyError as e:
            raise _wrap(e, "all_active") from e

        logger.debug("Loaded %d active manuals", len(rows))
        return [_to_manual(row) for row in rows]
