"""Curriculum-locked question answering.

Pipeline:
1. classify_question: LLM maps the question to subject/class/chapter/concepts
2. match_notes: select the catalog notes for that classification
3. answer_from_notes: LLM answers from the matched notes and cites their IDs

Off-topic questions short-circuit after step 1 with a fixed refusal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from companion.core.curriculum import (
    ClassificationQuery,
    CurriculumRepository,
    MatchedNote,
)
from companion.core.note_matcher import match_notes
from companion.llm.client import LLMClient, LLMError
from companion.prompts.registry import get_prompt
from companion.utils.text_utils import normalize_whitespace, strip_think

logger = structlog.get_logger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

OFF_TOPIC_ANSWER = (
    "That does not sound like a question about your studies. "
    "I can only answer questions about school subjects."
)

OFF_TOPIC_SUBJECTS = {"", "none", "n/a", "other", "off-topic"}

NO_NOTES_PLACEHOLDER = "(no curriculum notes matched this question)"

# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class CurriculumAnswer:
    """Answer text plus the note IDs it cites."""

    answer: str
    citations: list[str] = field(default_factory=list)


@dataclass
class CurriculumQuestionResult:
    """Full result of the curriculum Q&A pipeline."""

    answer: str
    citations: list[str] = field(default_factory=list)
    subject: str | None = None
    class_level: int | None = None
    chapter: str | None = None
    concepts: list[str] = field(default_factory=list)
    off_topic: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "answer": self.answer,
            "citations": self.citations,
            "subject": self.subject,
            "class_level": self.class_level,
            "chapter": self.chapter,
            "concepts": self.concepts,
            "off_topic": self.off_topic,
        }


class CurriculumQAError(Exception):
    """Error answering a curriculum question."""

    pass


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def _parse_classification(data: dict[str, Any]) -> ClassificationQuery | None:
    """Build a ClassificationQuery from classifier JSON.

    Returns None when the classifier marks the question as off-topic.

    Raises:
        CurriculumQAError: If required fields are missing or invalid
    """
    subject = data.get("subject")
    if subject is None or not isinstance(subject, str):
        raise CurriculumQAError(f"Classification without subject: {data}")
    if subject.strip().lower() in OFF_TOPIC_SUBJECTS:
        return None

    raw_level = data.get("classLevel", data.get("class_level"))
    try:
        class_level = int(raw_level)
    except (TypeError, ValueError) as e:
        raise CurriculumQAError(f"Classification with invalid classLevel: {raw_level!r}") from e
    if class_level <= 0:
        return None

    chapter = data.get("chapter") or ""
    if not isinstance(chapter, str):
        chapter = str(chapter)

    concepts = data.get("concepts") or []
    if not isinstance(concepts, list):
        concepts = [concepts]

    return ClassificationQuery(
        subject=subject.strip(),
        class_level=class_level,
        chapter=chapter.strip(),
        concepts=[str(c).strip() for c in concepts if str(c).strip()],
    )


def _format_notes(notes: list[MatchedNote]) -> str:
    """Render matched notes as ``[id] content`` lines for the prompt."""
    if not notes:
        return NO_NOTES_PLACEHOLDER
    return "\n\n".join(f"[{note.id}] {note.content}" for note in notes)


# =============================================================================
# PIPELINE STEPS
# =============================================================================


def classify_question(
    question: str,
    client: LLMClient | None = None,
) -> ClassificationQuery | None:
    """Classify a free-text question against the curriculum.

    Args:
        question: Student's question
        client: Pre-configured LLM client (for testing)

    Returns:
        ClassificationQuery, or None if the question is off-topic

    Raises:
        CurriculumQAError: If the LLM call fails or returns invalid data
    """
    if client is None:
        client = LLMClient()

    try:
        data = client.simple_json(
            system_prompt=get_prompt("qa/classify"),
            user_message=question,
            temperature=0.0,
        )
    except LLMError as e:
        raise CurriculumQAError(f"Classification failed: {e}") from e

    query = _parse_classification(data)
    logger.info(
        "question.classified",
        off_topic=query is None,
        **(query.to_dict() if query else {}),
    )
    return query


def answer_from_notes(
    question: str,
    notes: list[MatchedNote],
    query: ClassificationQuery,
    client: LLMClient | None = None,
) -> CurriculumAnswer:
    """Answer a question grounded in matched notes.

    Citations that do not name one of ``notes`` are dropped.

    Raises:
        CurriculumQAError: If the LLM call fails or returns no answer
    """
    if client is None:
        client = LLMClient()

    system = get_prompt(
        "qa/answer",
        notes=_format_notes(notes),
        class_level=query.class_level,
        subject=query.subject,
    )

    try:
        data = client.simple_json(system_prompt=system, user_message=question)
    except LLMError as e:
        raise CurriculumQAError(f"Answer generation failed: {e}") from e

    answer = data.get("answer")
    if not isinstance(answer, str) or not answer.strip():
        raise CurriculumQAError("Failed to generate a text answer.")

    known_ids = [note.id for note in notes]
    raw_citations = data.get("citations") or []
    if not isinstance(raw_citations, list):
        raw_citations = [raw_citations]

    citations: list[str] = []
    dropped: list[str] = []
    for citation in raw_citations:
        citation = str(citation).strip()
        if citation in known_ids:
            if citation not in citations:
                citations.append(citation)
        else:
            dropped.append(citation)

    if dropped:
        logger.warning("answer.unknown_citations_dropped", dropped=dropped)

    return CurriculumAnswer(answer=strip_think(answer), citations=citations)


def ask_curriculum_question(
    question: str,
    repository: CurriculumRepository,
    client: LLMClient | None = None,
) -> CurriculumQuestionResult:
    """Answer a student's question from the curriculum catalog.

    Args:
        question: Student's free-text question
        repository: Curriculum catalog to ground the answer in
        client: Pre-configured LLM client (for testing)

    Returns:
        CurriculumQuestionResult with answer, citations and classification

    Raises:
        CurriculumQAError: If classification or answering fails
    """
    question = normalize_whitespace(question)
    if not question:
        raise CurriculumQAError("Question is empty")

    if client is None:
        client = LLMClient()

    query = classify_question(question, client=client)
    if query is None:
        return CurriculumQuestionResult(answer=OFF_TOPIC_ANSWER, off_topic=True)

    notes = match_notes(query, repository)
    answer = answer_from_notes(question, notes, query, client=client)

    logger.info(
        "question.answered",
        subject=query.subject,
        class_level=query.class_level,
        notes=len(notes),
        citations=answer.citations,
    )

    return CurriculumQuestionResult(
        answer=answer.answer,
        citations=answer.citations,
        subject=query.subject,
        class_level=query.class_level,
        chapter=query.chapter,
        concepts=query.concepts,
    )
