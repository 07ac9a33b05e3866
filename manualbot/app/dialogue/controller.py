"""Dialogue controller - drives Registration and Inquiry flows per user.

The controller owns no state of its own: every message loads the session
from the SessionStore, runs the current step descriptor, and replaces the
session (or clears it). Two concurrent messages for the same user race as
last-write-wins on the session record.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any

from manualbot.app.config import Settings, get_settings
from manualbot.app.db.repositories import NotificationSink, RecordStore, bounded_call
from manualbot.app.dialogue import messages
from manualbot.app.dialogue.classifier import CancelMatcher, Confirmation, ConfirmationClassifier
from manualbot.app.dialogue.flows import (
    FlowSpec,
    StepKind,
    StepSpec,
    build_inquiry_flow,
    build_registration_flow,
)
from manualbot.app.dialogue.session_store import SessionStore
from manualbot.app.dialogue.validators import Invalid, ValidationResult, validate_email
from manualbot.app.errors import (
    DuplicateError,
    PersistenceError,
    UnclearResponse,
    ValidationError,
)
from manualbot.app.models.common import FlowName, InquiryType
from manualbot.app.models.records import AccessLogEntry, NewInquiry, NewUser
from manualbot.app.models.session import FlowState, Session
from manualbot.app.utils.logging import StructuredDialogueLogger
from manualbot.app.utils.metrics import PrometheusDialogueMetrics

logger = logging.getLogger(__name__)


class DialogueOutcome(str, Enum):
    """What handling one message did to the session."""

    started = "started"
    advanced = "advanced"
    went_back = "went_back"
    reprompted = "reprompted"
    completed = "completed"
    cancelled = "cancelled"
    aborted = "aborted"
    expired = "expired"
    no_flow = "no_flow"


@dataclass(frozen=True)
class DialogueReply:
    """Reply text plus what happened to the session."""

    reply: str
    session_changed: bool
    outcome: DialogueOutcome
    flow: FlowName | None = None
    step: str | None = None
    error: str | None = None  # validation | duplicate | unclear | persistence
    record_id: str | None = None


class DialogueController:
    """Runs named flows on top of a SessionStore."""

    def __init__(
        self,
        session_store: SessionStore,
        record_store: RecordStore,
        *,
        settings: Settings | None = None,
        notification_sink: NotificationSink | None = None,
        classifier: ConfirmationClassifier | None = None,
        cancel_matcher: CancelMatcher | None = None,
        metrics: PrometheusDialogueMetrics | None = None,
        structured_logger: StructuredDialogueLogger | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._sessions = session_store
        self._records = record_store
        self._notifier = notification_sink
        self._classifier = classifier or ConfirmationClassifier(
            settings.positive_phrases, settings.negative_phrases
        )
        self._cancel = cancel_matcher or CancelMatcher(settings.cancel_phrases)
        self._metrics = metrics or PrometheusDialogueMetrics()
        self._log = structured_logger or StructuredDialogueLogger()

        self._store_timeout_s = settings.record_store_timeout_ms / 1000
        self._notify_timeout_s = settings.notification_timeout_ms / 1000
        self._allowed_domains = list(settings.allowed_email_domains)
        self._default_permission = settings.default_permission
        self._admin_recipients = list(settings.admin_recipients)
        self._background: set[asyncio.Task[None]] = set()

        self._flows: dict[FlowName, FlowSpec] = {
            FlowName.registration: build_registration_flow(
                ttl=timedelta(seconds=settings.registration_ttl_seconds),
                email_validator=self._validate_new_email,
            ),
            FlowName.inquiry: build_inquiry_flow(
                ttl=timedelta(seconds=settings.inquiry_ttl_seconds),
                min_length=settings.inquiry_min_length,
                max_length=settings.inquiry_max_length,
            ),
        }

    def start(
        self,
        flow_name: FlowName,
        user_key: str,
        seed: dict[str, Any] | None = None,
    ) -> DialogueReply:
        """Begin a flow, unconditionally discarding any prior flow state.

        Args:
            flow_name: Flow to start
            user_key: Conversation participant
            seed: Context carried into the flow (only the flow's declared
                seed fields are kept)

        Returns:
            Reply with the entry step's prompt
        """
        spec = self._flows[flow_name]
        self._sessions.clear(user_key)

        fields = {
            key: str(value)
            for key, value in (seed or {}).items()
            if key in spec.seed_fields and value is not None
        }

        fresh = self._sessions.get(user_key)
        entry = spec.entry
        self._sessions.set(
            user_key,
            fresh.model_copy(update={"flow": FlowState(name=flow_name, step=entry.name, fields=fields)}),
            spec.ttl,
        )

        self._record(user_key, flow_name, None, entry.name, DialogueOutcome.started)
        return DialogueReply(
            reply=self._prompt(entry, fields),
            session_changed=True,
            outcome=DialogueOutcome.started,
            flow=flow_name,
            step=entry.name,
        )

    async def handle(self, user_key: str, raw_text: str) -> DialogueReply:
        """Consume one message for a user who is mid-flow.

        Validation and classification errors are resolved here as re-prompts;
        persistence errors abort the flow and clear the session.
        """
        session = self._sessions.get(user_key)
        if session.flow is None:
            return DialogueReply(reply="", session_changed=False, outcome=DialogueOutcome.no_flow)

        flow = session.flow
        spec = self._flows.get(flow.name)
        step = spec.step(flow.step) if spec else None

        # Stale or inconsistent state (unknown step, or parked on a terminal one)
        if spec is None or step is None or step.kind == StepKind.terminal:
            self._sessions.clear(user_key)
            self._record(user_key, flow.name, flow.step, None, DialogueOutcome.expired)
            return DialogueReply(
                reply=messages.session_expired(),
                session_changed=True,
                outcome=DialogueOutcome.expired,
                flow=flow.name,
            )

        if self._cancel.matches(raw_text):
            self._sessions.clear(user_key)
            self._record(user_key, flow.name, flow.step, None, DialogueOutcome.cancelled)
            return DialogueReply(
                reply=messages.cancelled(),
                session_changed=True,
                outcome=DialogueOutcome.cancelled,
                flow=flow.name,
            )

        try:
            if step.kind == StepKind.input:
                return await self._advance(user_key, session, spec, step, raw_text)
            return await self._confirm(user_key, session, spec, step, raw_text)

        except DuplicateError as e:
            return self._reprompt(
                user_key, flow, "duplicate", messages.duplicate_email(e.example or "")
            )
        except ValidationError as e:
            return self._reprompt(
                user_key, flow, "validation", messages.invalid_input(e.reason, e.example)
            )
        except UnclearResponse:
            return self._reprompt(
                user_key, flow, "unclear", messages.unclear_confirmation(step.confirm_label)
            )
        except PersistenceError as e:
            self._sessions.clear(user_key)
            self._metrics.inc_store_failure(f"{flow.name.value}:{flow.step}", e.kind.value)
            self._record(
                user_key, flow.name, flow.step, None, DialogueOutcome.aborted, error_reason=str(e)
            )
            reply = (
                messages.registration_failed()
                if flow.name == FlowName.registration
                else messages.inquiry_failed()
            )
            return DialogueReply(
                reply=reply,
                session_changed=True,
                outcome=DialogueOutcome.aborted,
                flow=flow.name,
                error="persistence",
            )

    async def drain_background(self) -> None:
        """Wait for pending best-effort notifications (shutdown and tests)."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # -----------------------------------------------------
    # Step runners
    # -----------------------------------------------------

    async def _advance(
        self, user_key: str, session: Session, spec: FlowSpec, step: StepSpec, text: str
    ) -> DialogueReply:
        assert step.validator is not None and step.field_name and step.next_step

        result = step.validator(text)
        if inspect.isawaitable(result):
            result = await result

        if isinstance(result, Invalid):
            if result.duplicate:
                raise DuplicateError(result.reason, result.example)
            raise ValidationError(result.reason, result.example)

        fields = {**session.flow.fields, step.field_name: result.value}
        next_step = spec.step(step.next_step)
        assert next_step is not None

        self._sessions.set(
            user_key,
            session.model_copy(
                update={"flow": FlowState(name=spec.name, step=next_step.name, fields=fields)}
            ),
            spec.ttl,
        )

        self._record(user_key, spec.name, step.name, next_step.name, DialogueOutcome.advanced)
        return DialogueReply(
            reply=self._prompt(next_step, fields),
            session_changed=True,
            outcome=DialogueOutcome.advanced,
            flow=spec.name,
            step=next_step.name,
        )

    async def _confirm(
        self, user_key: str, session: Session, spec: FlowSpec, step: StepSpec, text: str
    ) -> DialogueReply:
        answer = self._classifier.classify(text)

        if answer == Confirmation.unclear:
            raise UnclearResponse(text)

        if answer == Confirmation.no:
            assert step.back_step is not None
            keep = spec.seed_fields + step.back_keeps
            fields = {k: v for k, v in session.flow.fields.items() if k in keep}
            back = spec.step(step.back_step)
            assert back is not None

            self._sessions.set(
                user_key,
                session.model_copy(
                    update={"flow": FlowState(name=spec.name, step=back.name, fields=fields)}
                ),
                spec.ttl,
            )

            self._record(user_key, spec.name, step.name, back.name, DialogueOutcome.went_back)
            prompt = step.back_prompt(fields) if step.back_prompt else self._prompt(back, fields)
            return DialogueReply(
                reply=prompt,
                session_changed=True,
                outcome=DialogueOutcome.went_back,
                flow=spec.name,
                step=back.name,
            )

        if spec.name == FlowName.registration:
            reply, record_id = await self._complete_registration(user_key, session.flow.fields)
        else:
            reply, record_id = await self._complete_inquiry(user_key, session.flow.fields)

        self._sessions.clear(user_key)
        self._record(user_key, spec.name, step.name, spec.completed_step, DialogueOutcome.completed)
        return DialogueReply(
            reply=reply,
            session_changed=True,
            outcome=DialogueOutcome.completed,
            flow=spec.name,
            step=spec.completed_step,
            record_id=record_id,
        )

    # -----------------------------------------------------
    # Completion steps
    # -----------------------------------------------------

    async def _complete_registration(
        self, user_key: str, fields: dict[str, str]
    ) -> tuple[str, str | None]:
        new_user = NewUser(
            email=fields["email"],
            name=fields["name"],
            permission=self._default_permission,
            user_key=user_key,
        )
        record = await bounded_call(
            self._records.create_user(new_user), self._store_timeout_s, "create_user"
        )

        await self._log_access(
            AccessLogEntry(user_key=user_key, user_name=record.name, action="REGISTER")
        )
        return (messages.registration_completed(record.name), None)

    async def _complete_inquiry(
        self, user_key: str, fields: dict[str, str]
    ) -> tuple[str, str | None]:
        inquiry_type = InquiryType(fields["inquiry_type"])
        new_inquiry = NewInquiry(
            user_key=user_key,
            user_name=fields.get("user_name", ""),
            email=fields.get("email", ""),
            inquiry_type=inquiry_type,
            content=fields["content"],
        )
        inquiry_id = await bounded_call(
            self._records.create_inquiry(new_inquiry), self._store_timeout_s, "create_inquiry"
        )

        await self._log_access(
            AccessLogEntry(user_key=user_key, user_name=new_inquiry.user_name, action="INQUIRY")
        )
        self._notify_admins(
            {
                "event": "inquiry_created",
                "inquiry_id": inquiry_id,
                "inquiry_type": inquiry_type.value,
                "user_name": new_inquiry.user_name,
                "summary": (
                    f"新しい問い合わせ {inquiry_id} ({inquiry_type.display_name}) "
                    f"from {new_inquiry.user_name or user_key}"
                ),
            }
        )
        return (messages.inquiry_completed(inquiry_type.display_name, inquiry_id), inquiry_id)

    # -----------------------------------------------------
    # Helpers
    # -----------------------------------------------------

    async def _validate_new_email(self, text: str) -> ValidationResult:
        """Format check, then reject addresses that are already registered."""
        result = validate_email(text, self._allowed_domains)
        if isinstance(result, Invalid):
            return result

        existing = await bounded_call(
            self._records.find_by_email(result.value), self._store_timeout_s, "find_by_email"
        )
        if existing is not None:
            return Invalid(
                "このメールアドレスは既に登録されています",
                "other@company.com",
                duplicate=True,
            )
        return result

    def _notify_admins(self, payload: dict[str, Any]) -> None:
        if self._notifier is None:
            return

        task = asyncio.create_task(self._deliver_notification(payload))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _deliver_notification(self, payload: dict[str, Any]) -> None:
        assert self._notifier is not None
        try:
            await asyncio.wait_for(
                self._notifier.notify(self._admin_recipients, payload),
                timeout=self._notify_timeout_s,
            )
        except Exception:
            # Notification is not part of the completion contract
            logger.warning("Administrator notification failed", exc_info=True)
            self._metrics.inc_notification_failure(FlowName.inquiry.value)

    async def _log_access(self, entry: AccessLogEntry) -> None:
        try:
            await bounded_call(self._records.log_access(entry), self._store_timeout_s, "log_access")
        except PersistenceError:
            logger.warning("Failed to write access log for %s", entry.user_key, exc_info=True)

    def _reprompt(self, user_key: str, flow: FlowState, reason: str, reply: str) -> DialogueReply:
        self._metrics.record_rejection(flow.name.value, flow.step, reason)
        self._record(
            user_key, flow.name, flow.step, flow.step, DialogueOutcome.reprompted, error_reason=reason
        )
        return DialogueReply(
            reply=reply,
            session_changed=False,
            outcome=DialogueOutcome.reprompted,
            flow=flow.name,
            step=flow.step,
            error=reason,
        )

    @staticmethod
    def _prompt(step: StepSpec, fields: dict[str, str]) -> str:
        return step.prompt(fields) if step.prompt else ""

    def _record(
        self,
        user_key: str,
        flow: FlowName,
        step_from: str | None,
        step_to: str | None,
        outcome: DialogueOutcome,
        error_reason: str | None = None,
    ) -> None:
        self._metrics.record_transition(flow.value, outcome.value)
        self._log.log_transition(
            user_key, flow.value, step_from, step_to, outcome.value, error_reason=error_reason
        )
