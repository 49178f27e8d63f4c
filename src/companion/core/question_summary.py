"""Parent-facing summary of the questions a student asked."""

from __future__ import annotations

import structlog

from companion.llm.client import LLMClient, LLMError
from companion.prompts.registry import get_prompt
from companion.utils.text_utils import normalize_whitespace, strip_think

logger = structlog.get_logger(__name__)

EMPTY_SUMMARY = "No questions were asked today."


class SummaryError(Exception):
    """Error summarizing questions."""

    pass


def summarize_questions(
    questions: list[str],
    client: LLMClient | None = None,
) -> str:
    """Summarize a day's questions for a parent.

    Args:
        questions: Questions asked by the student
        client: Pre-configured LLM client (for testing)

    Returns:
        Plain-text summary. With no questions, a fixed message and no LLM call.

    Raises:
        SummaryError: If the LLM fails or returns nothing
    """
    cleaned = [q for q in (normalize_whitespace(q) for q in questions) if q]
    if not cleaned:
        return EMPTY_SUMMARY

    if client is None:
        client = LLMClient()

    user_message = "Here are the questions the student asked:\n" + "\n".join(
        f"- {q}" for q in cleaned
    )

    try:
        summary = strip_think(
            client.simple_chat(
                system_prompt=get_prompt("summary/summarize"),
                user_message=user_message,
            )
        )
    except LLMError as e:
        raise SummaryError(f"Failed to generate summary: {e}") from e

    if not summary:
        raise SummaryError("Failed to generate summary.")

    logger.info("questions.summarized", questions=len(cleaned))
    return summary
