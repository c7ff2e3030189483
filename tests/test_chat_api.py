"""Tests for the chat endpoints via FastAPI TestClient."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from cardclone.core.conversation import ChatStage, GenerationError, OwnerNotFoundError
from cardclone.core.schemas_chat import ConversationTurn, OwnerProfile
from cardclone.main import app


@pytest.fixture
def client():
    return TestClient(app, raise_server_exceptions=False)


def _body(*contents):
    return {"messages": [{"role": "user", "content": c} for c in contents]}


class TestPostChat:
    @patch("cardclone.api.chat.generate_reply", new_callable=AsyncMock)
    def test_returns_reply(self, mock_generate, client):
        mock_generate.return_value = "안녕하세요!"

        response = client.post("/api/chat", json=_body("hello"))

        assert response.status_code == 200
        assert response.json() == {"response": "안녕하세요!"}
        messages, owner_id = mock_generate.call_args.args[:2]
        assert owner_id == "owner-1"
        assert [m.content for m in messages] == ["hello"]

    @patch("cardclone.api.chat.generate_reply", new_callable=AsyncMock)
    def test_missing_owner_is_generic_500(self, mock_generate, client):
        mock_generate.side_effect = OwnerNotFoundError("Owner not found: owner-1", ChatStage.RETRIEVING)

        response = client.post("/api/chat", json=_body("hello"))

        assert response.status_code == 500
        assert response.json() == {"error": "An error occurred"}

    @patch("cardclone.api.chat.generate_reply", new_callable=AsyncMock)
    def test_generation_failure_is_generic_500(self, mock_generate, client):
        mock_generate.side_effect = GenerationError("Generation failed", ChatStage.GENERATING)

        response = client.post("/api/chat", json=_body("hello"))

        assert response.status_code == 500
        assert response.json() == {"error": "An error occurred"}

    @patch("cardclone.api.chat.generate_reply", new_callable=AsyncMock)
    def test_unexpected_error_does_not_leak_detail(self, mock_generate, client):
        mock_generate.side_effect = RuntimeError("secret connection string")

        response = client.post("/api/chat", json=_body("hello"))

        assert response.status_code == 500
        assert "secret" not in response.text

    @pytest.mark.parametrize(
        "body",
        [
            {"messages": []},
            {},
            {"messages": "hello"},
            {"messages": [{"role": "robot", "content": "hi"}]},
            {"messages": [{"role": "user"}]},
        ],
    )
    @patch("cardclone.api.chat.generate_reply", new_callable=AsyncMock)
    def test_malformed_body_rejected_before_work(self, mock_generate, client, body):
        response = client.post("/api/chat", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}
        mock_generate.assert_not_called()

    def test_persistence_failure_still_returns_reply(self, client):
        with patch("cardclone.core.conversation.get_owner") as get_owner, patch(
            "cardclone.core.conversation.list_projects", return_value=[]
        ), patch("cardclone.core.conversation.list_experiences", return_value=[]), patch(
            "cardclone.core.conversation.search_relevant_snippets",
            new_callable=AsyncMock,
            return_value="",
        ), patch(
            "cardclone.core.conversation.resolve_mentioned_person",
            new_callable=AsyncMock,
            return_value=None,
        ), patch(
            "cardclone.core.conversation.generate_chat_completion",
            new_callable=AsyncMock,
            return_value="반갑습니다.",
        ), patch(
            "cardclone.core.conversation.append_turn", side_effect=RuntimeError("insert failed")
        ):
            get_owner.return_value = OwnerProfile(owner_id="owner-1", name="정이노")
            response = client.post("/api/chat", json=_body("hello"))

        assert response.status_code == 200
        assert response.json() == {"response": "반갑습니다."}


class TestGetChat:
    @patch("cardclone.api.chat.list_turns")
    def test_returns_turns_in_order(self, mock_list, client):
        mock_list.return_value = [
            ConversationTurn(role="user", content="hello", owner_id="owner-1", created_at="2025-01-01T00:00:00"),
            ConversationTurn(role="assistant", content="hi", owner_id="owner-1", created_at="2025-01-01T00:00:01"),
        ]

        response = client.get("/api/chat")

        assert response.status_code == 200
        assert [turn["content"] for turn in response.json()] == ["hello", "hi"]
        mock_list.assert_called_once_with("owner-1")

    @patch("cardclone.api.chat.list_turns")
    def test_store_failure_is_500(self, mock_list, client):
        mock_list.side_effect = RuntimeError("connection refused")

        response = client.get("/api/chat")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch messages"}
