"""Tests for the chat pipeline orchestration."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cardclone.core.conversation import (
    ChatStage,
    GenerationError,
    InvalidChatRequestError,
    OwnerNotFoundError,
    generate_reply,
    last_user_message,
    load_owner_context,
)
from cardclone.core.schemas_chat import ChatMessage, KnowledgeSnippet, OwnerProfile, Project

OWNER_ID = "owner-1"
OWNER = OwnerProfile(owner_id=OWNER_ID, name="정이노", age=27, hobbies=["러닝"], values="도전")


def _settings(**overrides):
    settings = MagicMock()
    settings.CHAT_MODEL = "gpt-4o-mini"
    settings.CHAT_TIMEOUT_SECONDS = 5.0
    settings.RETRIEVAL_TOP_K = 2
    settings.PERSONA_NAME = "정이노"
    settings.COMPANY_REPRESENTATIVE = "정민기"
    settings.DISPLAY_TIMEZONE = "Asia/Seoul"
    settings.PERSIST_ASSISTANT_TURNS = False
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


def _messages(*contents):
    return [ChatMessage(role="user", content=c) for c in contents]


@pytest.fixture
def pipeline():
    """Patch the store, the resolver/retriever reads and the provider."""
    with patch("cardclone.core.conversation.get_owner") as get_owner, patch(
        "cardclone.core.conversation.list_projects"
    ) as projects, patch("cardclone.core.conversation.list_experiences") as experiences, patch(
        "cardclone.core.conversation.append_turn"
    ) as append_turn, patch(
        "cardclone.core.conversation.generate_chat_completion", new_callable=AsyncMock
    ) as generate, patch(
        "cardclone.core.keyword_search.list_snippets_matching"
    ) as snippets, patch(
        "cardclone.core.entity_resolver.find_owner_by_name"
    ) as find_owner, patch(
        "cardclone.core.entity_resolver.list_owner_names_ending_with"
    ) as names:
        get_owner.return_value = OWNER
        projects.return_value = []
        experiences.return_value = []
        generate.return_value = "안녕하세요, 정이노입니다."
        snippets.return_value = []
        find_owner.return_value = None
        names.return_value = []
        yield {
            "get_owner": get_owner,
            "projects": projects,
            "experiences": experiences,
            "append_turn": append_turn,
            "generate": generate,
            "snippets": snippets,
            "find_owner": find_owner,
            "names": names,
        }


def test_last_user_message_picks_latest_user_turn():
    messages = [
        ChatMessage(role="user", content="첫 질문"),
        ChatMessage(role="assistant", content="답변"),
        ChatMessage(role="user", content="두 번째 질문"),
        ChatMessage(role="assistant", content="또 답변"),
    ]
    assert last_user_message(messages) == "두 번째 질문"
    assert last_user_message([ChatMessage(role="assistant", content="hi")]) == ""


@pytest.mark.asyncio
async def test_reply_is_generated_and_user_turn_stored(pipeline):
    reply = await generate_reply(_messages("hello"), OWNER_ID, _settings())

    assert reply == "안녕하세요, 정이노입니다."
    payload = pipeline["generate"].call_args.args[0]
    assert payload[0]["role"] == "system"
    assert "이름: 정이노" in payload[0]["content"]
    assert payload[1:] == [{"role": "user", "content": "hello"}]
    pipeline["append_turn"].assert_called_once_with(OWNER_ID, "user", "hello")


@pytest.mark.asyncio
async def test_full_history_follows_system_prompt(pipeline):
    messages = [
        ChatMessage(role="user", content="안녕"),
        ChatMessage(role="assistant", content="반가워요"),
        ChatMessage(role="user", content="취미가 뭐야"),
    ]

    await generate_reply(messages, OWNER_ID, _settings())

    payload = pipeline["generate"].call_args.args[0]
    assert [m["content"] for m in payload[1:]] == ["안녕", "반가워요", "취미가 뭐야"]
    pipeline["append_turn"].assert_called_once_with(OWNER_ID, "user", "취미가 뭐야")


@pytest.mark.asyncio
async def test_snippets_and_mentioned_person_ground_the_prompt(pipeline):
    pipeline["snippets"].return_value = [
        KnowledgeSnippet(content="재권님은 CTO입니다", keywords=["재권"])
    ]
    pipeline["names"].return_value = ["이재권"]
    pipeline["find_owner"].return_value = OwnerProfile(owner_id="owner-2", name="이재권", age=29)

    with patch("cardclone.core.entity_resolver.list_projects", return_value=[]), patch(
        "cardclone.core.entity_resolver.list_experiences", return_value=[]
    ):
        await generate_reply(_messages("재권님 프로젝트 알려줘"), OWNER_ID, _settings())

    system_prompt = pipeline["generate"].call_args.args[0][0]["content"]
    assert "재권님은 CTO입니다" in system_prompt
    assert "이재권님의 정보:" in system_prompt
    pipeline["find_owner"].assert_called_once_with("이재권")


@pytest.mark.asyncio
async def test_store_failures_in_optional_reads_still_reply(pipeline):
    pipeline["snippets"].side_effect = RuntimeError("pdf_chunks unavailable")
    pipeline["find_owner"].side_effect = RuntimeError("owners search failed")

    reply = await generate_reply(_messages("이재권 프로젝트 알려줘"), OWNER_ID, _settings())

    assert reply == "안녕하세요, 정이노입니다."
    system_prompt = pipeline["generate"].call_args.args[0][0]["content"]
    assert "이름: 정이노" in system_prompt
    assert "비공개 참조 정보" not in system_prompt


@pytest.mark.asyncio
async def test_missing_owner_fails_without_generating(pipeline):
    pipeline["get_owner"].return_value = None

    with pytest.raises(OwnerNotFoundError) as exc_info:
        await generate_reply(_messages("hello"), OWNER_ID, _settings())

    assert exc_info.value.stage == ChatStage.RETRIEVING
    pipeline["generate"].assert_not_called()
    pipeline["append_turn"].assert_not_called()


@pytest.mark.asyncio
async def test_owner_fetch_error_fails_without_generating(pipeline):
    pipeline["get_owner"].side_effect = RuntimeError("connection refused")

    with pytest.raises(OwnerNotFoundError):
        await generate_reply(_messages("hello"), OWNER_ID, _settings())

    pipeline["generate"].assert_not_called()


@pytest.mark.asyncio
async def test_generation_failure_is_not_degraded(pipeline):
    pipeline["generate"].side_effect = RuntimeError("provider outage")

    with pytest.raises(GenerationError) as exc_info:
        await generate_reply(_messages("hello"), OWNER_ID, _settings())

    assert exc_info.value.stage == ChatStage.GENERATING
    pipeline["append_turn"].assert_not_called()


@pytest.mark.asyncio
async def test_persistence_failure_still_returns_reply(pipeline):
    pipeline["append_turn"].side_effect = RuntimeError("insert failed")

    reply = await generate_reply(_messages("hello"), OWNER_ID, _settings())

    assert reply == "안녕하세요, 정이노입니다."


@pytest.mark.asyncio
async def test_assistant_turn_persisted_when_enabled(pipeline):
    await generate_reply(_messages("hello"), OWNER_ID, _settings(PERSIST_ASSISTANT_TURNS=True))

    calls = [c.args for c in pipeline["append_turn"].call_args_list]
    assert calls == [
        (OWNER_ID, "user", "hello"),
        (OWNER_ID, "assistant", "안녕하세요, 정이노입니다."),
    ]


@pytest.mark.asyncio
async def test_empty_message_list_is_rejected(pipeline):
    with pytest.raises(InvalidChatRequestError):
        await generate_reply([], OWNER_ID, _settings())

    pipeline["get_owner"].assert_not_called()


@pytest.mark.asyncio
async def test_load_owner_context_reads_records_for_owner(pipeline):
    context = await load_owner_context(OWNER_ID)

    assert context.owner == OWNER
    pipeline["projects"].assert_called_once_with(OWNER_ID)
    pipeline["experiences"].assert_called_once_with(OWNER_ID)


@pytest.mark.asyncio
@pytest.mark.parametrize("failing_read", ["projects", "experiences"])
async def test_owner_records_failure_degrades_to_empty(pipeline, failing_read):
    pipeline[failing_read].side_effect = RuntimeError(f"{failing_read} table unavailable")

    reply = await generate_reply(_messages("hello"), OWNER_ID, _settings())

    assert reply == "안녕하세요, 정이노입니다."
    system_prompt = pipeline["generate"].call_args.args[0][0]["content"]
    assert "이름: 정이노" in system_prompt


@pytest.mark.asyncio
async def test_load_owner_context_keeps_readable_records(pipeline):
    pipeline["projects"].return_value = [Project(owner_id=OWNER_ID, title="AI 명함")]
    pipeline["experiences"].side_effect = RuntimeError("experiences table unavailable")

    context = await load_owner_context(OWNER_ID)

    assert [p.title for p in context.projects] == ["AI 명함"]
    assert context.experiences == []
