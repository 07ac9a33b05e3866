"""Integration tests for POST /messages."""

import pytest
from fastapi.testclient import TestClient

from manualbot.app.api.deps import get_request_router
from manualbot.app.config import Settings
from manualbot.app.db.inmemory import InMemoryCorpus, InMemoryRecordStore
from manualbot.app.db.seed_dev import SAMPLE_MANUALS
from manualbot.app.dialogue.controller import DialogueController
from manualbot.app.dialogue.session_store import InMemorySessionStore
from manualbot.app.main import app
from manualbot.app.router import RequestRouter
from manualbot.app.search.engine import SearchEngine


@pytest.fixture
def records() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def client(records: InMemoryRecordStore, settings: Settings) -> TestClient:
    """Test client whose router uses fresh in-memory stores."""
    controller = DialogueController(InMemorySessionStore(), records, settings=settings)
    router = RequestRouter(
        controller, records, InMemoryCorpus(SAMPLE_MANUALS), SearchEngine(), settings=settings
    )
    app.dependency_overrides[get_request_router] = lambda: router
    yield TestClient(app)
    app.dependency_overrides.clear()


def post(client: TestClient, user_key: str, text: str) -> dict:
    response = client.post("/messages", json={"user_key": user_key, "text": text})
    assert response.status_code == 200
    return response.json()


def test_registration_then_search(client: TestClient, records: InMemoryRecordStore) -> None:
    """A new user registers over several messages, then searches."""
    assert post(client, "U1", "経費")["action"] == "registration_prompt"
    assert post(client, "U1", "登録")["action"] == "registration_started"
    assert post(client, "U1", "yamada@company.com")["action"] == "registration_advanced"
    assert post(client, "U1", "山田太郎")["action"] == "registration_advanced"

    done = post(client, "U1", "はい")
    assert done["action"] == "registration_completed"
    assert "山田太郎" in done["reply"]
    assert len(records.users) == 1

    result = post(client, "U1", "申請")
    assert result["action"] == "search_results"
    assert "出張費申請ガイド" in result["reply"]


def test_cancel_mid_registration(client: TestClient, records: InMemoryRecordStore) -> None:
    post(client, "U1", "登録")
    post(client, "U1", "yamada@company.com")

    cancelled = post(client, "U1", "キャンセル")

    assert cancelled["action"] == "registration_cancelled"
    assert records.users == []
    assert post(client, "U1", "経費")["action"] == "registration_prompt"


def test_inquiry_after_registration(client: TestClient, records: InMemoryRecordStore) -> None:
    for text in ("登録", "yamada@company.com", "山田太郎", "はい"):
        post(client, "U1", text)

    assert post(client, "U1", "問い合わせ")["action"] == "inquiry_started"
    assert post(client, "U1", "1")["action"] == "inquiry_advanced"
    assert post(client, "U1", "パスワードを忘れた場合の手順を知りたいです")["action"] == "inquiry_advanced"
    done = post(client, "U1", "はい")

    assert done["action"] == "inquiry_completed"
    [inquiry] = records.inquiries
    assert inquiry.inquiry_id in done["reply"]
    assert inquiry.user_name == "山田太郎"


@pytest.mark.parametrize(
    "body",
    [{"user_key": "", "text": "hi"}, {"text": "hi"}, {"user_key": "U1"}, {"user_key": "U1", "text": "x" * 2001}],
)
def test_rejects_malformed_bodies(client: TestClient, body: dict) -> None:
    assert client.post("/messages", json=body).status_code == 422
