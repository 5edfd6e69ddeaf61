"""Summarization prompt text."""

from ..core.config import TemplateKind

SYSTEM_PROMPT = (
    "You are a helpful AI programming assistant. You are summarizing the history of "
    "a conversation between a user and an agent that uses tools, so that the agent "
    "can continue the work from the summary alone. Do not call any tools."
)

FULL_SUMMARY_PROMPT = (
    "Summarize the conversation history above. The summary replaces that history, "
    "so it must preserve everything needed to continue the task.\n"
    "\n"
    "Structure the summary with these sections:\n"
    "\n"
    "## Goal\n"
    "What the user is trying to accomplish, including the latest request:\n"
    "{query}\n"
    "\n"
    "## Instructions\n"
    "Explicit instructions, constraints and preferences the user gave.\n"
    "\n"
    "## Progress\n"
    "What has been done so far, which tools were called and what they revealed. "
    "Include file paths, identifiers, commands and error messages verbatim.\n"
    "\n"
    "## Current state\n"
    "What was happening right before this summary and what remains to be done.\n"
    "\n"
    "Be factual and specific. No pleasantries, no meta-commentary."
)

SIMPLE_SUMMARY_PROMPT = (
    "Summarize the conversation history above in a few short paragraphs. Keep the "
    "user's goal, the work completed, relevant file paths and identifiers, and the "
    "next steps. The latest user request was:\n"
    "{query}"
)

SUMMARY_USER_PREFIX = "[Prior conversation summary]\n"
SUMMARY_ASSISTANT_ACK = "Understood, I have context from our earlier conversation."

TEMPLATES: dict[TemplateKind, str] = {
    TemplateKind.FULL: FULL_SUMMARY_PROMPT,
    TemplateKind.SIMPLE: SIMPLE_SUMMARY_PROMPT,
}
