"""Tests for dialogue step validators."""

import pytest

from manualbot.app.dialogue.validators import (
    Invalid,
    Valid,
    validate_email,
    validate_inquiry_content,
    validate_inquiry_type,
    validate_name,
)


class TestValidateEmail:
    """Email step."""

    @pytest.mark.parametrize("text", ["a@b.com", " yamada@company.co.jp ", "first.last+tag@example.org"])
    def test_accepts_valid_addresses(self, text: str) -> None:
        result = validate_email(text)
        assert isinstance(result, Valid)
        assert result.value == text.strip()

    @pytest.mark.parametrize("text", ["", "yamada", "yamada@", "@company.com", "ya mada@company.com", "a@b"])
    def test_rejects_malformed(self, text: str) -> None:
        result = validate_email(text)
        assert isinstance(result, Invalid)
        assert result.example == "yamada@company.com"

    def test_rejects_overlong(self) -> None:
        address = "a" * 250 + "@b.com"
        assert isinstance(validate_email(address), Invalid)

    def test_domain_allow_list(self) -> None:
        assert isinstance(validate_email("a@company.com", ["company.com"]), Valid)
        assert isinstance(validate_email("a@COMPANY.com", ["company.com"]), Valid)
        assert isinstance(validate_email("a@gmail.com", ["company.com"]), Invalid)


class TestValidateName:
    """Name step."""

    @pytest.mark.parametrize("text", ["山田太郎", "やまだ たろう", "ヤマダ", "John Smith", "Mary-Jane O.", "佐々木"])
    def test_accepts_names(self, text: str) -> None:
        assert isinstance(validate_name(text), Valid)

    def test_trims(self) -> None:
        result = validate_name("  山田太郎  ")
        assert isinstance(result, Valid)
        assert result.value == "山田太郎"

    @pytest.mark.parametrize("text", ["", "   ", "山田@太郎", "<script>", "a" * 51])
    def test_rejects(self, text: str) -> None:
        assert isinstance(validate_name(text), Invalid)

    def test_length_boundary(self) -> None:
        assert isinstance(validate_name("a" * 50), Valid)

    @pytest.mark.parametrize("text", ["山田\n太郎", "山田\t太郎", "山田\r\n太郎"])
    def test_rejects_line_breaks_and_tabs(self, text: str) -> None:
        assert isinstance(validate_name(text), Invalid)

    def test_accepts_full_width_space(self) -> None:
        result = validate_name("山田　太郎")
        assert isinstance(result, Valid)
        assert result.value == "山田　太郎"


class TestValidateInquiryType:
    """Type selection step."""

    @pytest.mark.parametrize(
        "text,value",
        [("1", "question"), ("2", "request"), ("3", "bug_report"), (" 4 ", "other"), ("３", "bug_report")],
    )
    def test_maps_choices(self, text: str, value: str) -> None:
        result = validate_inquiry_type(text)
        assert isinstance(result, Valid)
        assert result.value == value

    @pytest.mark.parametrize("text", ["0", "5", "質問", ""])
    def test_rejects_other_input(self, text: str) -> None:
        assert isinstance(validate_inquiry_type(text), Invalid)


class TestValidateInquiryContent:
    """Content step."""

    def test_bounds(self) -> None:
        assert isinstance(validate_inquiry_content("あ" * 9), Invalid)
        assert isinstance(validate_inquiry_content("あ" * 10), Valid)
        assert isinstance(validate_inquiry_content("あ" * 1000), Valid)
        assert isinstance(validate_inquiry_content("あ" * 1001), Invalid)

    def test_length_measured_after_trim(self) -> None:
        assert isinstance(validate_inquiry_content("   短い内容です   "), Invalid)

    def test_custom_bounds(self) -> None:
        assert isinstance(validate_inquiry_content("abc", min_length=3, max_length=5), Valid)
        assert isinstance(validate_inquiry_content("abcdef", min_length=3, max_length=5), Invalid)
