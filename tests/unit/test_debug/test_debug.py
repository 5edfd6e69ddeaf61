"""Unit tests for condense.debug module."""

import logging

import pytest

from condense.compaction.virtual_context import build_prompt_context
from condense.core.config import get_debug_flags, set_debug_flags
from condense.core.errors import NothingToSummarizeError, RoundNotFoundError
from condense.debug import (
    clear_summaries,
    create_mock_conversation,
    dry_run_summarization,
    inspect_conversation,
    preview_split,
    toggle_tool_injection,
)
from condense.llm.endpoints.base import ChatResponse
from condense.rendering.prompts import SUMMARY_USER_PREFIX
from condense.store.conversation_store import InMemoryConversationStore
from condense.types.types import (
    RoundSummaryRecord,
    TurnResultMetadata,
    TurnStatus,
)

HISTORY_ROUND_IDS = [f"turn{turn}-round{index}" for turn in range(3) for index in range(2)]


class TestCreateMockConversation:
    """Tests for create_mock_conversation function."""

    def test_shape(self):
        conversation = create_mock_conversation()

        assert [turn.id for turn in conversation.turns] == ["turn0", "turn1", "turn2", "current"]
        assert [round_.id for round_ in conversation.all_rounds()] == HISTORY_ROUND_IDS + [
            "current-round0",
            "current-round1",
        ]
        assert conversation.latest_turn().status == TurnStatus.IN_PROGRESS
        assert all(turn.status == TurnStatus.SUCCESS for turn in conversation.turns[:-1])

    def test_rounds_call_read_file(self):
        round_ = create_mock_conversation().find_round("turn1-round0")
        assert round_.tool_calls[0].name == "read_file"
        assert round_.tool_calls[0].arguments == '{"path": "/test.txt"}'
        assert round_.summary is None


class TestInspectConversation:
    """Tests for inspect_conversation function."""

    def test_report(self):
        conversation = create_mock_conversation()
        conversation.find_round("turn0-round1").summary = "done"

        report = inspect_conversation(conversation)

        assert report.session_id == "mock-session"
        assert report.turn_count == 4
        assert report.total_rounds == 8
        assert report.unsummarized_rounds == 7
        assert report.pending_rounds == 6
        assert report.turns[0].rounds[1].has_summary is True
        assert report.turns[0].rounds[0].has_summary is False
        assert report.turns[3].rounds[0].tool_names == ["read_file"]
        assert report.turns[3].status == TurnStatus.IN_PROGRESS

    def test_long_request_is_truncated(self):
        conversation = create_mock_conversation()
        conversation.turns[0].request.message = "x" * 150
        report = inspect_conversation(conversation)
        assert report.turns[0].request_preview == "x" * 100 + "..."

    def test_logs_structure(self, caplog):
        with caplog.at_level(logging.INFO, logger="condense.debug"):
            inspect_conversation(create_mock_conversation())
        assert "Total turns: 4" in caplog.text
        assert "id=turn2-round1, tools=[read_file], summary=no" in caplog.text
        assert "Total rounds across all turns: 8" in caplog.text
        assert "Unsummarized rounds: 8 (8 pending after the last summary)" in caplog.text

    def test_does_not_mutate(self):
        conversation = create_mock_conversation()
        before = conversation.model_dump()
        inspect_conversation(conversation)
        assert conversation.model_dump() == before

    def test_reads_last_conversation_from_store(self):
        store = InMemoryConversationStore()
        store.put(create_mock_conversation("older"))
        store.put(create_mock_conversation("latest"))

        report = inspect_conversation(store)

        assert report.session_id == "latest"
        assert report.total_rounds == 8

    def test_empty_store_raises(self):
        with pytest.raises(ValueError, match="No conversation available in store"):
            inspect_conversation(InMemoryConversationStore())


class TestPreviewSplit:
    """Tests for preview_split function."""

    def test_preview(self):
        preview = preview_split(build_prompt_context(create_mock_conversation()))

        assert preview.summarized_round_id == "turn2-round1"
        assert preview.historic_round_ids == HISTORY_ROUND_IDS
        assert preview.current_round_ids == ["current-round0", "current-round1"]
        assert preview.has_prior_summary is False
        assert preview.is_continuation is True

    def test_keep_recent_rounds(self):
        context = build_prompt_context(create_mock_conversation())
        preview = preview_split(context, keep_recent_rounds=4)
        assert preview.summarized_round_id == "turn1-round1"
        assert preview.current_round_ids == [
            "turn2-round0",
            "turn2-round1",
            "current-round0",
            "current-round1",
        ]

    def test_nothing_to_summarize(self):
        conversation = create_mock_conversation()
        conversation.find_round("current-round0").summary = "s"
        with pytest.raises(NothingToSummarizeError):
            preview_split(build_prompt_context(conversation))


class TestDryRunSummarization:
    """Tests for dry_run_summarization function."""

    @pytest.mark.asyncio
    async def test_never_commits(self, renderer, fake_endpoint, caplog):
        conversation = create_mock_conversation()
        before = conversation.model_dump()

        with caplog.at_level(logging.INFO, logger="condense.debug"):
            result = await dry_run_summarization(conversation, renderer, fake_endpoint)

        assert result.boundary_round_id == "turn2-round1"
        assert result.summary_text == "Summary text"
        assert conversation.model_dump() == before
        assert "--- BEGIN SUMMARY ---" in caplog.text
        assert "NOT written" in caplog.text

    @pytest.mark.asyncio
    async def test_runs_against_store(self, renderer, fake_endpoint):
        store = InMemoryConversationStore()
        store.put(create_mock_conversation())

        result = await dry_run_summarization(store, renderer, fake_endpoint)

        assert result.boundary_round_id == "turn2-round1"
        assert store.last_conversation.find_round("turn2-round1").summary is None

    @pytest.mark.asyncio
    async def test_empty_store_raises_before_model_call(self, renderer, fake_endpoint):
        with pytest.raises(ValueError):
            await dry_run_summarization(InMemoryConversationStore(), renderer, fake_endpoint)
        fake_endpoint.invoke.assert_not_called()

    @pytest.mark.asyncio
    async def test_logs_summary_line_by_line(self, renderer, make_endpoint, caplog):
        endpoint = make_endpoint(ChatResponse.success("## Goal\nFix the bug"))

        with caplog.at_level(logging.INFO, logger="condense.debug"):
            await dry_run_summarization(create_mock_conversation(), renderer, endpoint)

        messages = [record.getMessage() for record in caplog.records]
        assert "## Goal" in messages
        assert "Fix the bug" in messages

    @pytest.mark.asyncio
    async def test_empty_summary_warns(self, renderer, make_endpoint, caplog):
        endpoint = make_endpoint(ChatResponse.success(""))

        with caplog.at_level(logging.WARNING, logger="condense.debug"):
            result = await dry_run_summarization(create_mock_conversation(), renderer, endpoint)

        assert result.is_empty is True
        assert "EMPTY summary" in caplog.text

    @pytest.mark.asyncio
    async def test_normalizes_metadata_summaries(self, renderer, fake_endpoint):
        conversation = create_mock_conversation()
        conversation.turns[1].result_metadata = TurnResultMetadata(
            summaries=[RoundSummaryRecord(round_id="turn1-round1", text="Earlier work")]
        )

        await dry_run_summarization(conversation, renderer, fake_endpoint)

        assert conversation.find_round("turn1-round1").summary == "Earlier work"
        messages = fake_endpoint.invoke.call_args.args[0]
        assert messages[1]["content"] == SUMMARY_USER_PREFIX + "Earlier work"

    @pytest.mark.asyncio
    async def test_uses_current_tool_injection_flag(self, renderer, fake_endpoint):
        from condense.tools.registry import StaticToolRegistry
        from condense.types.types import ToolInfo

        set_debug_flags(inject_tools=True)
        await dry_run_summarization(
            create_mock_conversation(),
            renderer,
            fake_endpoint,
            tool_registry=StaticToolRegistry([ToolInfo(name="read_file")]),
        )

        options = fake_endpoint.invoke.call_args.args[1]
        assert options.tool_choice == "none"

    @pytest.mark.asyncio
    async def test_nothing_to_summarize_is_logged_and_raised(
        self, renderer, fake_endpoint, caplog
    ):
        conversation = create_mock_conversation()
        conversation.find_round("current-round0").summary = "s"

        with caplog.at_level(logging.ERROR, logger="condense.debug"):
            with pytest.raises(NothingToSummarizeError):
                await dry_run_summarization(conversation, renderer, fake_endpoint)

        assert "Nothing to summarize" in caplog.text
        fake_endpoint.invoke.assert_not_called()


class TestToggleToolInjection:
    """Tests for toggle_tool_injection function."""

    def test_flips_flag(self):
        initial = get_debug_flags().inject_tools
        assert toggle_tool_injection() is (not initial)
        assert get_debug_flags().inject_tools is (not initial)
        assert toggle_tool_injection() is initial

    def test_sets_explicit_value(self):
        assert toggle_tool_injection(True) is True
        assert toggle_tool_injection(True) is True
        assert get_debug_flags().inject_tools is True
        assert toggle_tool_injection(False) is False


class TestClearSummaries:
    """Tests for clear_summaries function."""

    def test_clear_one(self):
        conversation = create_mock_conversation()
        conversation.find_round("turn0-round1").summary = "a"
        conversation.find_round("turn1-round1").summary = "b"

        assert clear_summaries(conversation, "turn1-round1") == 1
        assert conversation.find_round("turn1-round1").summary is None
        assert conversation.find_round("turn0-round1").summary == "a"

    def test_clear_one_without_summary(self):
        assert clear_summaries(create_mock_conversation(), "turn0-round0") == 0

    def test_clear_all(self, caplog):
        conversation = create_mock_conversation()
        conversation.find_round("turn0-round1").summary = "a"
        conversation.find_round("turn1-round1").summary = "b"

        with caplog.at_level(logging.INFO, logger="condense.debug"):
            assert clear_summaries(conversation) == 2
        assert "Cleared 2 round summary(ies)" in caplog.text

    def test_clear_unknown_round_raises(self):
        with pytest.raises(RoundNotFoundError):
            clear_summaries(create_mock_conversation(), "missing")

    def test_clear_through_store(self):
        store = InMemoryConversationStore()
        conversation = create_mock_conversation()
        conversation.find_round("turn0-round1").summary = "a"
        store.put(conversation)

        assert clear_summaries(store) == 1
        assert conversation.find_round("turn0-round1").summary is None
