"""Curriculum note catalog.

Responsibilities:
- Define the CurriculumNote / ClassificationQuery / MatchedNote records
- Provide a read-only repository interface over the catalog
- Ship the built-in CBSE sample catalog
- Load a catalog from a YAML file (data/config/curriculum_v1.yaml)

The catalog is loaded once at startup and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, Sequence

import structlog
import yaml

logger = structlog.get_logger(__name__)

# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class CurriculumNote:
    """A single curriculum note from the catalog."""

    id: str
    subject: str
    class_level: int
    chapter: str
    concepts: tuple[str, ...]
    content: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "subject": self.subject,
            "class_level": self.class_level,
            "chapter": self.chapter,
            "concepts": list(self.concepts),
            "content": self.content,
        }


@dataclass
class ClassificationQuery:
    """Subject/class/chapter/concepts metadata produced by classification."""

    subject: str
    class_level: int
    chapter: str = ""
    concepts: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "subject": self.subject,
            "class_level": self.class_level,
            "chapter": self.chapter,
            "concepts": list(self.concepts),
        }


@dataclass(frozen=True)
class MatchedNote:
    """A matched note: citation id and raw text only."""

    id: str
    content: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"id": self.id, "content": self.content}


class CurriculumLoadError(Exception):
    """Error loading a curriculum catalog."""

    pass


# =============================================================================
# REPOSITORY
# =============================================================================


class CurriculumRepository(Protocol):
    """Read-only access to the curriculum catalog."""

    def lookup(self, subject: str, class_level: int) -> list[CurriculumNote]:
        """Notes for a subject (case-insensitive) and class level, in catalog order."""
        ...

    def all_notes(self) -> list[CurriculumNote]:
        """Every note in catalog order."""
        ...


class InMemoryCurriculumRepository:
    """Catalog held in a fixed in-memory tuple."""

    def __init__(self, notes: Sequence[CurriculumNote]):
        seen: set[str] = set()
        for note in notes:
            if note.id in seen:
                raise CurriculumLoadError(f"Duplicate note id: {note.id}")
            seen.add(note.id)
        self._notes: tuple[CurriculumNote, ...] = tuple(notes)

    def __len__(self) -> int:
        return len(self._notes)

    def lookup(self, subject: str, class_level: int) -> list[CurriculumNote]:
        subject_key = subject.lower()
        return [
            note
            for note in self._notes
            if note.subject.lower() == subject_key and note.class_level == class_level
        ]

    def all_notes(self) -> list[CurriculumNote]:
        return list(self._notes)

    def get(self, note_id: str) -> CurriculumNote | None:
        """Get a note by id."""
        for note in self._notes:
            if note.id == note_id:
                return note
        return None


# =============================================================================
# SAMPLE CATALOG
# =============================================================================

SAMPLE_NOTES: tuple[CurriculumNote, ...] = (
    # Class 5 Science
    CurriculumNote(
        id="C5-SCI-01-01",
        subject="Science",
        class_level=5,
        chapter="Super Senses",
        concepts=("sense of smell", "sense of sight", "sense of hearing", "animals senses"),
        content=(
            "Animals have different super senses. Ants recognize their friends by their "
            "smell. Some male insects can recognize their females from many kilometers "
            "away by their smell. Dogs have a strong sense of smell and are used by police "
            "to catch thieves. Birds have eyes on either side of their head, which allows "
            "them to see two different things at a time."
        ),
    ),
    CurriculumNote(
        id="C5-SCI-02-01",
        subject="Science",
        class_level=5,
        chapter="A Snake Charmer’s Story",
        concepts=("snakes", "snake charmers", "kalbeliyas", "poisonous snakes"),
        content=(
            "Snake charmers (Kalbeliyas) are people who catch snakes and make them dance "
            "by playing the been. They know how to remove poisonous fangs from snakes. "
            "Most snakes are not poisonous. Only four types of snakes in India are "
            "poisonous: Cobra, Common Krait, Russell’s Viper (Duboiya), and Saw-scaled "
            "Viper (Afai)."
        ),
    ),
    # Class 6 Math
    CurriculumNote(
        id="C6-MATH-01-01",
        subject="Math",
        class_level=6,
        chapter="Knowing Our Numbers",
        concepts=("comparing numbers", "place value", "large numbers", "estimation"),
        content=(
            "To compare numbers, we first count the number of digits. The number with "
            "more digits is greater. If the digits are the same, we compare the leftmost "
            "digit. For example, 92 is greater than 8. 450 is greater than 352. The place "
            "value of a digit depends on its position in the number."
        ),
    ),
    CurriculumNote(
        id="C6-MATH-07-01",
        subject="Math",
        class_level=6,
        chapter="Fractions",
        concepts=(
            "what is a fraction",
            "fraction on number line",
            "proper fractions",
            "improper fractions",
            "mixed fractions",
        ),
        content=(
            "A fraction is a number representing part of a whole. It is written as a/b "
            "where b is not zero. A proper fraction is a fraction where the numerator is "
            "less than the denominator. An improper fraction is where the numerator is "
            "greater than or equal to the denominator. A mixed fraction is a whole number "
            "and a proper fraction combined."
        ),
    ),
    # Class 7 Science
    CurriculumNote(
        id="C7-SCI-01-01",
        subject="Science",
        class_level=7,
        chapter="Nutrition in Plants",
        concepts=("photosynthesis", "autotrophs", "heterotrophs", "stomata"),
        content=(
            "Plants prepare their own food by the process of photosynthesis. They use "
            "sunlight, water, carbon dioxide and minerals. This mode of nutrition is called "
            "autotrophic. The tiny pores on the surface of leaves through which gaseous "
            "exchange occurs are called stomata. Chlorophyll is the green pigment in leaves "
            "that helps capture sunlight."
        ),
    ),
    CurriculumNote(
        id="C7-SCI-05-01",
        subject="Science",
        class_level=7,
        chapter="Acids, Bases and Salts",
        concepts=("acids", "bases", "neutral substances", "indicators", "litmus paper"),
        content=(
            "Acids are sour to taste. Examples: curd, lemon juice. Bases are bitter to "
            "taste and soapy to touch. Examples: baking soda, soap. Indicators are "
            "substances used to test whether a substance is acidic or basic. Litmus is a "
            "natural indicator. Acids turn blue litmus red. Bases turn red litmus blue. "
            "Neutral substances do not change the color of litmus paper."
        ),
    ),
)


# =============================================================================
# LOADING
# =============================================================================


def _parse_note(data: dict[str, Any], index: int) -> CurriculumNote:
    """Build a CurriculumNote from a YAML mapping."""
    if not isinstance(data, dict):
        raise CurriculumLoadError(f"Note #{index} must be a mapping")

    missing = [k for k in ("id", "subject", "class_level", "chapter", "content") if k not in data]
    if missing:
        raise CurriculumLoadError(f"Note #{index} is missing fields: {', '.join(missing)}")

    try:
        class_level = int(data["class_level"])
    except (TypeError, ValueError) as e:
        raise CurriculumLoadError(
            f"Note #{index} has invalid class_level: {data['class_level']!r}"
        ) from e

    concepts = data.get("concepts") or []
    if not isinstance(concepts, list):
        raise CurriculumLoadError(f"Note #{index} concepts must be a list")

    return CurriculumNote(
        id=str(data["id"]),
        subject=str(data["subject"]),
        class_level=class_level,
        chapter=str(data["chapter"]),
        concepts=tuple(str(c) for c in concepts),
        content=str(data["content"]),
    )


def load_curriculum(path: Path | None = None) -> InMemoryCurriculumRepository:
    """Load the curriculum catalog.

    Args:
        path: YAML file with a top-level ``notes`` list. If None or missing,
            the built-in sample catalog is used.

    Returns:
        Read-only in-memory repository

    Raises:
        CurriculumLoadError: If the file exists but is malformed
    """
    if path is None or not path.exists():
        logger.info("curriculum.using_sample", notes=len(SAMPLE_NOTES))
        return InMemoryCurriculumRepository(SAMPLE_NOTES)

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (yaml.YAMLError, OSError) as e:
        raise CurriculumLoadError(f"Cannot read curriculum file {path}: {e}") from e

    notes_data = data.get("notes") if isinstance(data, dict) else None
    if not isinstance(notes_data, list):
        raise CurriculumLoadError(f"Curriculum file {path} has no 'notes' list")

    notes = [_parse_note(n, i) for i, n in enumerate(notes_data, 1)]
    repository = InMemoryCurriculumRepository(notes)

    logger.info("curriculum.loaded", path=str(path), notes=len(repository))
    return repository
