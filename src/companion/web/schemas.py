"""Pydantic schemas for the Web API.

Serialization models for notes, questions, learning flows and progress.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator


def _require_text(value: str) -> str:
    """Strip surrounding whitespace and reject blank text."""
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


# =============================================================================
# NOTE SCHEMAS
# =============================================================================


class NoteResponse(BaseModel):
    """A catalog note with its metadata."""

    id: str
    subject: str
    class_level: int
    chapter: str
    concepts: list[str]
    content: str


class NoteListResponse(BaseModel):
    """Response for the catalog listing."""

    notes: list[NoteResponse]
    count: int


class NoteMatchRequest(BaseModel):
    """Classification to match against the catalog."""

    subject: str = Field(..., min_length=1, max_length=100)
    class_level: int = Field(..., ge=1)
    chapter: str = Field(default="", max_length=200)
    concepts: list[str] = Field(default_factory=list)


class MatchedNoteResponse(BaseModel):
    """A matched note: citation id and content only."""

    id: str
    content: str


class NoteMatchResponse(BaseModel):
    """Matched notes in catalog order."""

    notes: list[MatchedNoteResponse]
    count: int


# =============================================================================
# QUESTION SCHEMAS
# =============================================================================


class AskRequest(BaseModel):
    """Request to answer a curriculum question."""

    question: str = Field(..., min_length=1, max_length=2000)
    history: list[str] = Field(default_factory=list)
    check_scope: bool = False

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        return _require_text(value)


class AskResponse(BaseModel):
    """Curriculum answer with citations and classification."""

    answer: str
    citations: list[str] = Field(default_factory=list)
    subject: str | None = None
    class_level: int | None = None
    chapter: str | None = None
    concepts: list[str] = Field(default_factory=list)
    off_topic: bool = False
    suggested_topics: list[str] = Field(default_factory=list)


class ScopeRequest(BaseModel):
    """Request to check whether a prompt is in the curriculum."""

    prompt: str = Field(..., min_length=1, max_length=2000)
    history: list[str] = Field(default_factory=list)

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        return _require_text(value)


class ScopeResponse(BaseModel):
    """Relevance verdict."""

    is_relevant: bool
    response: str = ""
    suggested_topics: list[str] = Field(default_factory=list)


# =============================================================================
# LEARNING FLOW SCHEMAS
# =============================================================================


class MathRequest(BaseModel):
    """Request to explain a math problem."""

    question: str = Field(..., min_length=1, max_length=2000)

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        return _require_text(value)


class QuizItemResponse(BaseModel):
    question: str
    answer: str


class MathResponse(BaseModel):
    """Step-by-step explanation and practice quiz."""

    explanation: str
    practice_quiz: list[QuizItemResponse]


class TranslateRequest(BaseModel):
    """Request to translate a phrase into Kannada."""

    query: str = Field(..., min_length=1, max_length=500)

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, value: str) -> str:
        return _require_text(value)


class TranslateResponse(BaseModel):
    """Translation with pronunciation."""

    source_text: str
    translated_text: str
    pronunciation: str
    refused: bool = False


class SummaryRequest(BaseModel):
    """Questions to summarize for a parent."""

    questions: list[str] = Field(default_factory=list, max_length=200)


class SummaryResponse(BaseModel):
    summary: str


# =============================================================================
# PROGRESS SCHEMAS
# =============================================================================


class PracticeRequest(BaseModel):
    """Record a practice session for a chapter."""

    chapter: str = Field(..., min_length=1, max_length=200)

    @field_validator("chapter")
    @classmethod
    def chapter_not_blank(cls, value: str) -> str:
        return _require_text(value)


class DayStatusResponse(BaseModel):
    date: str
    practiced: bool


class ProgressResponse(BaseModel):
    """Progress record with derived streak views."""

    chapters_practiced: list[str]
    last_practiced: str | None
    practice_dates: list[str]
    streak: int
    streak_data: list[DayStatusResponse]


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    notes: int = 0
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
