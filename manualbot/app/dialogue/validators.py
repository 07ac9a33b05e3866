"""Input validators for dialogue steps."""

import re
from dataclasses import dataclass

from manualbot.app.dialogue.messages import EMAIL_EXAMPLE, INQUIRY_EXAMPLE, NAME_EXAMPLE
from manualbot.app.models.common import InquiryType

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMAIL_MAX_LENGTH = 254

NAME_PATTERN = re.compile(r"^[a-zA-Z0-9ぁ-んァ-ヶー一-龯々 　\-.]+$")
NAME_MAX_LENGTH = 50

INQUIRY_TYPE_CHOICES: dict[str, InquiryType] = {
    "1": InquiryType.question,
    "2": InquiryType.request,
    "3": InquiryType.bug_report,
    "4": InquiryType.other,
}


@dataclass(frozen=True)
class Valid:
    """Accepted input, normalized."""

    value: str


@dataclass(frozen=True)
class Invalid:
    """Rejected input with a user-facing reason."""

    reason: str
    example: str | None = None
    duplicate: bool = False


ValidationResult = Valid | Invalid


def validate_email(text: str, allowed_domains: list[str] | None = None) -> ValidationResult:
    email = (text or "").strip()

    if not email:
        return Invalid("メールアドレスが入力されていません", EMAIL_EXAMPLE)
    if not EMAIL_PATTERN.match(email):
        return Invalid("メールアドレスの形式が正しくありません", EMAIL_EXAMPLE)
    if len(email) > EMAIL_MAX_LENGTH:
        return Invalid("メールアドレスが長すぎます", EMAIL_EXAMPLE)

    if allowed_domains:
        domain = email.rsplit("@", 1)[1].lower()
        if domain not in {d.strip().lower() for d in allowed_domains}:
            return Invalid(
                "許可されていないドメインです。社内メールアドレスを入力してください。",
                EMAIL_EXAMPLE,
            )

    return Valid(email)


def validate_name(text: str) -> ValidationResult:
    name = (text or "").strip()

    if not name:
        return Invalid("お名前を入力してください", NAME_EXAMPLE)
    if len(name) > NAME_MAX_LENGTH:
        return Invalid(f"お名前が長すぎます（{NAME_MAX_LENGTH}文字以内）", NAME_EXAMPLE)
    if not NAME_PATTERN.match(name):
        return Invalid("使用できない文字が含まれています", NAME_EXAMPLE)

    return Valid(name)


def validate_inquiry_type(text: str) -> ValidationResult:
    # Full-width digits are common from Japanese IMEs
    choice = (text or "").strip().translate(str.maketrans("１２３４", "1234"))
    inquiry_type = INQUIRY_TYPE_CHOICES.get(choice)

    if inquiry_type is None:
        return Invalid("無効な選択です。1〜4の番号を入力してください。", "1")

    return Valid(inquiry_type.value)


def validate_inquiry_content(text: str, min_length: int = 10, max_length: int = 1000) -> ValidationResult:
    content = (text or "").strip()

    if len(content) < min_length:
        return Invalid(f"内容は{min_length}文字以上で入力してください", INQUIRY_EXAMPLE)
    if len(content) > max_length:
        return Invalid(f"内容は{max_length}文字以内で入力してください", INQUIRY_EXAMPLE)

    return Valid(content)
