"""Fixtures for F1 tests - Curriculum catalog and note matching."""

import pytest

from companion.core.curriculum import (
    SAMPLE_NOTES,
    CurriculumNote,
    InMemoryCurriculumRepository,
)


@pytest.fixture
def sample_repository() -> InMemoryCurriculumRepository:
    """Repository over the built-in sample catalog."""
    return InMemoryCurriculumRepository(SAMPLE_NOTES)


@pytest.fixture
def fractions_note() -> CurriculumNote:
    return CurriculumNote(
        id="C6-MATH-07-01",
        subject="Math",
        class_level=6,
        chapter="Fractions",
        concepts=("what is a fraction", "proper fractions"),
        content="A fraction is a number representing part of a whole.",
    )


@pytest.fixture
def mixed_repository(fractions_note) -> InMemoryCurriculumRepository:
    """Small catalog with notes sharing chapters and concepts across subjects."""
    return InMemoryCurriculumRepository(
        [
            fractions_note,
            CurriculumNote(
                id="C6-MATH-07-02",
                subject="Math",
                class_level=6,
                chapter="Fractions",
                concepts=("equivalent fractions",),
                content="Equivalent fractions name the same part of a whole.",
            ),
            CurriculumNote(
                id="C6-MATH-08-01",
                subject="Math",
                class_level=6,
                chapter="Decimals",
                concepts=("proper fractions", "tenths"),
                content="Decimals are another way to write fractions.",
            ),
            CurriculumNote(
                id="C7-MATH-02-01",
                subject="Math",
                class_level=7,
                chapter="Fractions and Decimals",
                concepts=("proper fractions",),
                content="Multiplying fractions.",
            ),
            CurriculumNote(
                id="C6-SCI-07-01",
                subject="Science",
                class_level=6,
                chapter="Fractions of Light",
                concepts=("proper fractions",),
                content="Not really a science chapter.",
            ),
        ]
    )
