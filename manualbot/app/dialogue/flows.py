"""Flow definitions as ordered lists of step descriptors."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from manualbot.app.dialogue import messages
from manualbot.app.dialogue.validators import (
    ValidationResult,
    validate_email,
    validate_inquiry_content,
    validate_inquiry_type,
    validate_name,
)
from manualbot.app.models.common import FlowName
from manualbot.app.models.session import InquiryStep, RegistrationStep

Validator = Callable[[str], ValidationResult | Awaitable[ValidationResult]]
PromptBuilder = Callable[[dict[str, str]], str]


class StepKind(str, Enum):
    """How a step consumes input."""

    input = "input"  # validator -> store value -> advance
    confirm = "confirm"  # Yes/No/Unclear -> complete / go back / re-prompt
    terminal = "terminal"  # never consumes input


@dataclass(frozen=True)
class StepSpec:
    """One step of a flow.

    `prompt` is the question shown on entering this step. Input steps store
    the validated value under `field_name` and advance to `next_step`.
    Confirm steps go back to `back_step` on "No"; `back_keeps` names the
    fields that survive going back.
    """

    name: str
    kind: StepKind
    prompt: PromptBuilder | None = None
    validator: Validator | None = None
    field_name: str | None = None
    next_step: str | None = None
    back_step: str | None = None
    back_prompt: PromptBuilder | None = None
    back_keeps: tuple[str, ...] = ()
    confirm_label: str = "確定する"


@dataclass(frozen=True)
class FlowSpec:
    """Named flow: ordered steps, entry step and session TTL."""

    name: FlowName
    steps: tuple[StepSpec, ...]
    entry_step: str
    completed_step: str
    ttl: timedelta
    seed_fields: tuple[str, ...] = ()
    _index: dict[str, StepSpec] = field(default_factory=dict, init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        self._index.update({step.name: step for step in self.steps})

    def step(self, name: str) -> StepSpec | None:
        return self._index.get(name)

    @property
    def step_names(self) -> list[str]:
        return [step.name for step in self.steps]

    @property
    def entry(self) -> StepSpec:
        return self._index[self.entry_step]


def build_registration_flow(
    *,
    ttl: timedelta,
    email_validator: Validator | None = None,
    allowed_domains: list[str] | None = None,
) -> FlowSpec:
    """Start -> WaitingEmail -> WaitingName -> Confirming -> Registered.

    `email_validator` replaces the format-only check; the controller passes
    one that also rejects already-registered addresses.
    """
    domains = list(allowed_domains or [])

    def email_format(text: str) -> ValidationResult:
        return validate_email(text, domains)

    steps = (
        StepSpec(name=RegistrationStep.start.value, kind=StepKind.terminal),
        StepSpec(
            name=RegistrationStep.waiting_email.value,
            kind=StepKind.input,
            prompt=lambda fields: messages.registration_email_prompt(),
            validator=email_validator or email_format,
            field_name="email",
            next_step=RegistrationStep.waiting_name.value,
        ),
        StepSpec(
            name=RegistrationStep.waiting_name.value,
            kind=StepKind.input,
            prompt=messages.registration_name_prompt,
            validator=validate_name,
            field_name="name",
            next_step=RegistrationStep.confirming.value,
        ),
        StepSpec(
            name=RegistrationStep.confirming.value,
            kind=StepKind.confirm,
            prompt=messages.registration_confirm_prompt,
            back_step=RegistrationStep.waiting_email.value,
            back_prompt=lambda fields: messages.registration_restart_prompt(),
            confirm_label="登録する",
        ),
        StepSpec(name=RegistrationStep.registered.value, kind=StepKind.terminal),
    )

    return FlowSpec(
        name=FlowName.registration,
        steps=steps,
        entry_step=RegistrationStep.waiting_email.value,
        completed_step=RegistrationStep.registered.value,
        ttl=ttl,
    )


def build_inquiry_flow(
    *,
    ttl: timedelta,
    min_length: int = 10,
    max_length: int = 1000,
) -> FlowSpec:
    """TypeSelection -> WritingContent -> ConfirmingContent -> Completed."""
    timeout_minutes = max(1, int(ttl.total_seconds() // 60))

    steps = (
        StepSpec(
            name=InquiryStep.type_selection.value,
            kind=StepKind.input,
            prompt=lambda fields: messages.inquiry_type_prompt(fields, timeout_minutes),
            validator=validate_inquiry_type,
            field_name="inquiry_type",
            next_step=InquiryStep.writing_content.value,
        ),
        StepSpec(
            name=InquiryStep.writing_content.value,
            kind=StepKind.input,
            prompt=lambda fields: messages.inquiry_content_prompt(fields, min_length, max_length),
            validator=lambda text: validate_inquiry_content(text, min_length, max_length),
            field_name="content",
            next_step=InquiryStep.confirming_content.value,
        ),
        StepSpec(
            name=InquiryStep.confirming_content.value,
            kind=StepKind.confirm,
            prompt=messages.inquiry_confirm_prompt,
            back_step=InquiryStep.writing_content.value,
            back_prompt=lambda fields: messages.inquiry_rewrite_prompt(),
            back_keeps=("inquiry_type",),
            confirm_label="送信する",
        ),
        StepSpec(name=InquiryStep.completed.value, kind=StepKind.terminal),
    )

    return FlowSpec(
        name=FlowName.inquiry,
        steps=steps,
        entry_step=InquiryStep.type_selection.value,
        completed_step=InquiryStep.completed.value,
        ttl=ttl,
        seed_fields=("user_name", "email"),
    )
