"""Curriculum relevance checks.

- filter_prompt_by_subject: relevance check with a friendly refusal and
  topic suggestions drawn from the student's study history
- handle_out_of_scope: syllabus check with suggested curriculum topics
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import structlog

from companion.llm.client import LLMClient, LLMError
from companion.prompts.registry import get_prompt
from companion.utils.text_utils import normalize_whitespace

logger = structlog.get_logger(__name__)

REFUSAL_RESPONSES = [
    "Uh‑oh, that’s in the ‘after‑homework’ zone.",
    "Hmm, that question isn’t in my notebook.",
    "If I answer that, your parents will scold me. Better stick to studies, okay?",
]


@dataclass
class ScopeDecision:
    """Whether a prompt belongs to the curriculum, with a reply if not."""

    is_relevant: bool
    response: str = ""
    suggested_topics: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_relevant": self.is_relevant,
            "response": self.response,
            "suggested_topics": self.suggested_topics,
        }


class ScopeCheckError(Exception):
    """Error checking prompt scope."""

    pass


def _as_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def _topics(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [str(t).strip() for t in raw if str(t).strip()]


def filter_prompt_by_subject(
    prompt: str,
    history: list[str] | None = None,
    client: LLMClient | None = None,
) -> ScopeDecision:
    """Decide whether a prompt is relevant to the CBSE 5-7 curriculum.

    Args:
        prompt: Student's prompt
        history: Chapters the student has practiced
        client: Pre-configured LLM client (for testing)

    Raises:
        ScopeCheckError: If the LLM fails or the verdict is missing
    """
    if client is None:
        client = LLMClient()

    system = get_prompt(
        "scope/filter_subject",
        refusals=json.dumps(REFUSAL_RESPONSES, ensure_ascii=False),
        history=", ".join(history) if history else "None",
    )

    try:
        data = client.simple_json(
            system_prompt=system,
            user_message=normalize_whitespace(prompt),
            temperature=0.0,
        )
    except LLMError as e:
        raise ScopeCheckError(f"Relevance check failed: {e}") from e

    relevant = _as_bool(data.get("isRelevant"))
    if relevant is None:
        raise ScopeCheckError(f"Relevance verdict missing: {data}")

    if relevant:
        return ScopeDecision(is_relevant=True)

    response = str(data.get("response") or "").strip() or REFUSAL_RESPONSES[0]
    logger.info("prompt.not_relevant", history=len(history or []))
    return ScopeDecision(
        is_relevant=False,
        response=response,
        suggested_topics=_topics(data.get("suggestedTopics")),
    )


def handle_out_of_scope(query: str, client: LLMClient | None = None) -> ScopeDecision:
    """Check a query against the syllabus and suggest topics if outside it.

    Raises:
        ScopeCheckError: If the LLM fails or the verdict is missing
    """
    if client is None:
        client = LLMClient()

    try:
        data = client.simple_json(
            system_prompt=get_prompt("scope/out_of_scope"),
            user_message=normalize_whitespace(query),
            temperature=0.0,
        )
    except LLMError as e:
        raise ScopeCheckError(f"Scope check failed: {e}") from e

    out_of_scope = _as_bool(data.get("isOutOfScope"))
    if out_of_scope is None:
        raise ScopeCheckError(f"Scope verdict missing: {data}")

    if not out_of_scope:
        return ScopeDecision(is_relevant=True)

    logger.info("query.out_of_scope")
    return ScopeDecision(
        is_relevant=False,
        response=str(data.get("response") or "").strip(),
        suggested_topics=_topics(data.get("suggestedTopics")),
    )
