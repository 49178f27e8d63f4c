"""Math problem explanations with a practice quiz.

The LLM returns a numbered step-by-step explanation and three practice
questions on the same concept.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from companion.llm.client import LLMClient, LLMError
from companion.prompts.registry import get_prompt
from companion.utils.text_utils import normalize_whitespace, strip_think

logger = structlog.get_logger(__name__)

QUIZ_SIZE = 3


@dataclass
class QuizItem:
    """A practice question with its answer."""

    question: str
    answer: str

    def to_dict(self) -> dict[str, str]:
        return {"question": self.question, "answer": self.answer}


@dataclass
class MathExplanation:
    """Step-by-step explanation plus practice quiz."""

    explanation: str
    practice_quiz: list[QuizItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "explanation": self.explanation,
            "practice_quiz": [q.to_dict() for q in self.practice_quiz],
        }


class MathExplanationError(Exception):
    """Error explaining a math problem."""

    pass


def _parse_quiz(raw: Any) -> list[QuizItem]:
    """Keep well-formed quiz entries, at most QUIZ_SIZE."""
    if not isinstance(raw, list):
        return []

    items = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        question = str(entry.get("question", "")).strip()
        answer = str(entry.get("answer", "")).strip()
        if question and answer:
            items.append(QuizItem(question=question, answer=answer))
    return items[:QUIZ_SIZE]


def explain_math_problem(
    question: str,
    client: LLMClient | None = None,
) -> MathExplanation:
    """Explain a math problem step by step.

    Args:
        question: Question containing the problem, e.g. "How do I compare 3/5 and 4/7?"
        client: Pre-configured LLM client (for testing)

    Returns:
        MathExplanation with explanation and practice quiz

    Raises:
        MathExplanationError: If the question is empty or the LLM fails
    """
    question = normalize_whitespace(question)
    if not question:
        raise MathExplanationError("Question is empty")

    if client is None:
        client = LLMClient()

    try:
        data = client.simple_json(
            system_prompt=get_prompt("math/explain"),
            user_message=question,
        )
    except LLMError as e:
        raise MathExplanationError(f"Failed to get explanation from AI: {e}") from e

    explanation = data.get("explanation")
    if not isinstance(explanation, str) or not explanation.strip():
        raise MathExplanationError("Explanation missing from LLM response")

    quiz = _parse_quiz(data.get("practiceQuiz", data.get("practice_quiz")))
    if len(quiz) < QUIZ_SIZE:
        logger.warning("math.short_quiz", expected=QUIZ_SIZE, got=len(quiz))

    logger.info("math.explained", steps=explanation.count("\n\n") + 1, quiz=len(quiz))
    return MathExplanation(explanation=strip_think(explanation), practice_quiz=quiz)
