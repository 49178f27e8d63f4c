"""Curriculum note matcher.

Given a classification (subject, class level, chapter, concepts), selects the
catalog notes relevant to it. A note matches when subject and class level
agree AND either the chapter or at least one concept matches.

Matching rules:
- subject: case-insensitive equality (applied by the repository lookup)
- class level: exact equality (applied by the repository lookup)
- chapter: query chapter is a case-insensitive substring of the note chapter.
  An empty or whitespace-only query chapter never matches, so concepts alone
  decide in that case.
- concepts: any query concept equals any note concept, case-insensitively

Results keep catalog order and carry only ``id`` and ``content``.
"""

from __future__ import annotations

import structlog

from companion.core.curriculum import (
    ClassificationQuery,
    CurriculumNote,
    CurriculumRepository,
    MatchedNote,
)

logger = structlog.get_logger(__name__)


def chapter_matches(query_chapter: str, note_chapter: str) -> bool:
    """Check whether the query chapter is contained in the note chapter."""
    needle = query_chapter.strip().lower()
    if not needle:
        return False
    return needle in note_chapter.lower()


def concepts_match(query_concepts: list[str], note_concepts: tuple[str, ...]) -> bool:
    """Check whether any query concept equals any note concept."""
    if not query_concepts:
        return False
    wanted = {c.lower() for c in query_concepts}
    return any(c.lower() in wanted for c in note_concepts)


def note_matches(query: ClassificationQuery, note: CurriculumNote) -> bool:
    """Apply the full matching rule to a single note."""
    if note.subject.lower() != query.subject.lower():
        return False
    if note.class_level != query.class_level:
        return False
    return chapter_matches(query.chapter, note.chapter) or concepts_match(
        query.concepts, note.concepts
    )


def match_notes(
    query: ClassificationQuery,
    repository: CurriculumRepository,
) -> list[MatchedNote]:
    """Return the catalog notes relevant to a classification.

    Args:
        query: Classification produced for the user's question
        repository: Curriculum catalog

    Returns:
        Matched notes as (id, content) pairs in catalog order. Empty when
        nothing matches.
    """
    candidates = repository.lookup(query.subject, query.class_level)
    matched = [
        MatchedNote(id=note.id, content=note.content)
        for note in candidates
        if note_matches(query, note)
    ]

    logger.debug(
        "notes.matched",
        subject=query.subject,
        class_level=query.class_level,
        chapter=query.chapter,
        candidates=len(candidates),
        matched=[m.id for m in matched],
    )
    return matched


class NoteMatcher:
    """Note matcher bound to a single catalog repository."""

    def __init__(self, repository: CurriculumRepository):
        self.repository = repository

    def match(self, query: ClassificationQuery) -> list[MatchedNote]:
        """Match a classification against the bound catalog."""
        return match_notes(query, self.repository)
