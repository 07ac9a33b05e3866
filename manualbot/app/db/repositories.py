"""Repository protocol interfaces for the external collaborators."""

import asyncio
from collections.abc import Awaitable
from typing import Any, Protocol, TypeVar

from manualbot.app.errors import PersistenceError, PersistenceErrorKind
from manualbot.app.models.manual import Manual
from manualbot.app.models.records import AccessLogEntry, NewInquiry, NewUser, UserRecord

T = TypeVar("T")


async def bounded_call(awaitable: Awaitable[T], timeout_s: float, operation: str) -> T:
    """Await a store call under a hard timeout.

    Raises:
        PersistenceError: On timeout (transient) or any error the store
            raised that is not already a PersistenceError.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_s)
    except PersistenceError:
        raise
    except asyncio.TimeoutError as e:
        raise PersistenceError(
            f"{operation} timed out after {timeout_s}s", kind=PersistenceErrorKind.transient
        ) from e
    except Exception as e:
        raise PersistenceError(
            f"{operation} failed: {type(e).__name__}", kind=PersistenceErrorKind.transient
        ) from e


class RecordStore(Protocol):
    """Persistence for users, inquiries and access logs.

    Implementations raise PersistenceError on failure; the dialogue core
    treats transient and permanent failures alike.
    """

    async def find_by_email(self, email: str) -> UserRecord | None:
        """Find a registered user by email address.

        Args:
            email: Email address (compared case-insensitively)

        Returns:
            User record or None if not registered
        """
        ...

    async def find_by_user_key(self, user_key: str) -> UserRecord | None:
        """Find a registered user by conversation user key.

        Args:
            user_key: Opaque conversation participant id

        Returns:
            User record or None if not registered
        """
        ...

    async def create_user(self, fields: NewUser) -> UserRecord:
        """Create a user record.

        Args:
            fields: Validated registration payload

        Returns:
            Stored user record
        """
        ...

    async def create_inquiry(self, fields: NewInquiry) -> str:
        """Create an inquiry record.

        Args:
            fields: Validated inquiry payload

        Returns:
            Inquiry receipt id
        """
        ...

    async def log_access(self, entry: AccessLogEntry) -> None:
        """Append an access log line."""
        ...


class CorpusAccess(Protocol):
    """Read-only view over stored manuals."""

    async def all_active(self) -> list[Manual]:
        """Return a snapshot of every active manual, in storage order."""
        ...


class NotificationSink(Protocol):
    """Best-effort fan-out to administrators."""

    async def notify(self, recipients: list[str], payload: dict[str, Any]) -> None:
        """Deliver payload to recipients. May raise; callers only log failures."""
        ...
