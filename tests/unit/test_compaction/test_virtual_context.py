"""Unit tests for condense.compaction.virtual_context module."""

import pytest
from pydantic import ValidationError

from condense.compaction.split import select_split_point
from condense.compaction.virtual_context import (
    CURRENT_TURN_ID,
    PromptContext,
    RoundView,
    ToolsDescriptor,
    build_prompt_context,
    build_virtual_context,
)
from condense.core.errors import RoundNotFoundError
from condense.types.types import Conversation, Round, ToolInfo, TurnStatus


def round_ids(rounds) -> list[str]:
    return [round_.id for round_ in rounds]


class TestBuildPromptContext:
    """Tests for build_prompt_context function."""

    def test_latest_turn_is_current(self, conversation):
        context = build_prompt_context(conversation)
        assert context.query == "Request 2"
        assert [turn.id for turn in context.history] == ["turn-0", "turn-1"]
        assert round_ids(context.tool_call_rounds) == ["t2r0", "t2r1"]
        assert context.conversation is conversation
        assert context.is_continuation is False

    def test_always_includes_tools_descriptor(self, conversation):
        context = build_prompt_context(conversation)
        assert context.tools is not None
        assert context.tools.available_tools == ()

    def test_available_tools_are_attached(self, conversation):
        tool = ToolInfo(name="read_file", description="Read a file")
        context = build_prompt_context(conversation, [tool])
        assert context.tools.available_tools == (tool,)

    def test_latest_turn_without_rounds(self, make_conversation):
        context = build_prompt_context(make_conversation([2, 0]))
        assert context.tool_call_rounds is None
        assert round_ids(context.all_rounds()) == ["t0r0", "t0r1"]

    def test_empty_conversation_raises(self):
        with pytest.raises(ValueError):
            build_prompt_context(Conversation(session_id="empty"))

    def test_all_rounds_orders_history_then_current(self, conversation):
        context = build_prompt_context(conversation)
        assert round_ids(context.all_rounds()) == [
            "t0r0", "t0r1", "t1r0", "t1r1", "t2r0", "t2r1",
        ]


class TestBuildVirtualContext:
    """Tests for build_virtual_context function."""

    def test_three_turns_of_two_rounds(self, conversation):
        context = build_prompt_context(conversation)
        boundary = select_split_point(context.all_rounds())
        assert boundary == "t1r1"

        virtual = build_virtual_context(context, boundary)
        assert virtual.summarized_round_id == "t1r1"
        assert [turn.turn_index for turn in virtual.historic] == [0, 1]
        assert round_ids(virtual.historic_rounds()) == ["t0r0", "t0r1", "t1r0", "t1r1"]
        assert round_ids(virtual.current_rounds()) == ["t2r0", "t2r1"]
        assert virtual.current[0].is_current_turn is True
        assert virtual.prior_summary is None

    def test_marks_context_as_continuation(self, conversation):
        virtual = build_virtual_context(build_prompt_context(conversation), "t1r1")
        assert virtual.is_continuation is True
        assert virtual.query == "Request 2"

    def test_does_not_mutate_prompt_context(self, make_conversation):
        conversation = make_conversation([2, 3, 2], summaries={"t0r1": "Earlier work"})
        context = build_prompt_context(conversation)
        before = conversation.model_dump()
        context_before = context.model_dump()

        build_virtual_context(context, "t1r2")

        assert conversation.model_dump() == before
        assert context.model_dump() == context_before

    def test_prior_summary_replaces_summarized_span(self, make_conversation):
        conversation = make_conversation([2, 2, 2], summaries={"t0r1": "Earlier work"})
        context = build_prompt_context(conversation)
        boundary = select_split_point(context.all_rounds())
        assert boundary == "t1r1"

        virtual = build_virtual_context(context, boundary)
        assert virtual.prior_summary == "Earlier work"
        assert round_ids(virtual.historic_rounds()) == ["t1r0", "t1r1"]
        assert round_ids(virtual.current_rounds()) == ["t2r0", "t2r1"]

    def test_boundary_inside_current_turn(self, make_conversation):
        conversation = make_conversation([2, 4])
        virtual = build_virtual_context(build_prompt_context(conversation), "t1r1")
        assert round_ids(virtual.historic_rounds()) == ["t0r0", "t0r1", "t1r0", "t1r1"]
        assert round_ids(virtual.current_rounds()) == ["t1r2", "t1r3"]
        # The current turn is split across both partitions
        assert virtual.historic[-1].turn_index == virtual.current[0].turn_index == 1

    def test_turn_without_rounds_placed_by_position(self, make_conversation):
        conversation = make_conversation([2, 0, 2, 2])
        virtual = build_virtual_context(build_prompt_context(conversation), "t2r1")
        assert [turn.turn_index for turn in virtual.historic] == [0, 1, 2]
        assert virtual.historic[1].rounds == ()
        assert [turn.turn_index for turn in virtual.current] == [3]

    def test_unknown_boundary_raises(self, conversation):
        with pytest.raises(RoundNotFoundError) as exc_info:
            build_virtual_context(build_prompt_context(conversation), "missing")
        assert exc_info.value.round_id == "missing"

    def test_views_are_frozen(self, conversation):
        virtual = build_virtual_context(build_prompt_context(conversation), "t1r1")
        with pytest.raises(ValidationError):
            virtual.historic[0].rounds[0].summary = "overwrite"
        with pytest.raises(ValidationError):
            virtual.prior_summary = "overwrite"
        assert conversation.find_round("t0r0").summary is None

    def test_tools_descriptor_is_carried_over(self, conversation):
        tool = ToolInfo(name="read_file")
        virtual = build_virtual_context(build_prompt_context(conversation, [tool]), "t1r1")
        assert virtual.tools.available_tools == (tool,)

    def test_missing_tools_descriptor_defaults_to_empty(self, conversation):
        context = PromptContext(
            query="q",
            history=conversation.turns[:-1],
            tool_call_rounds=conversation.turns[-1].rounds,
        )
        virtual = build_virtual_context(context, "t0r1")
        assert virtual.tools == ToolsDescriptor()

    def test_current_turn_defaults_without_conversation(self, conversation):
        context = PromptContext(
            query="q",
            history=conversation.turns[:-1],
            tool_call_rounds=conversation.turns[-1].rounds,
        )
        virtual = build_virtual_context(context, "t1r1")
        current = virtual.current[0]
        assert current.turn_id == CURRENT_TURN_ID
        assert current.status == TurnStatus.IN_PROGRESS


class TestRoundView:
    """Tests for RoundView.from_round."""

    def test_copies_round(self):
        round_ = Round(id="r1", response="hello", summary="s")
        view = RoundView.from_round(round_)
        assert view.id == "r1"
        assert view.response == "hello"
        assert view.summary == "s"
        assert view.tool_calls == ()
