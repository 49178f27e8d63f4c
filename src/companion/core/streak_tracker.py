"""Practice streak tracking.

Responsibilities:
- Maintain the device-local progress record (chapters practiced, practice days)
- Persist the record through a ProgressStorage backend
- Derive the trailing 7-day calendar and the consecutive-day streak

Persisted layout (JSON under the key ``schoolCompanionProgress``):
    {"chaptersPracticed": [...], "lastPracticed": "YYYY-MM-DD" | null,
     "practiceDates": ["YYYY-MM-DD", ...]}

Progress tracking is best-effort: storage failures are logged and never
raised to callers.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Callable, Iterable

import structlog

from companion.core.progress_store import ProgressStorage, ProgressStorageError

logger = structlog.get_logger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

CALENDAR_DAYS = 7

# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class ProgressRecord:
    """Persisted practice progress."""

    chapters_practiced: list[str] = field(default_factory=list)
    last_practiced: str | None = None
    practice_dates: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.chapters_practiced and not self.practice_dates and self.last_practiced is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted JSON layout."""
        return {
            "chaptersPracticed": list(self.chapters_practiced),
            "lastPracticed": self.last_practiced,
            "practiceDates": list(self.practice_dates),
        }

    @classmethod
    def from_dict(cls, data: Any) -> ProgressRecord:
        """Rebuild a record from the persisted layout.

        Falls back to an empty record when ``chaptersPracticed`` is missing
        or not a list. Duplicates and non-string entries are dropped. Date
        stamps are rewritten as YYYY-MM-DD; unparsable ones are dropped.
        """
        if not isinstance(data, dict):
            return cls()

        chapters = data.get("chaptersPracticed")
        if not isinstance(chapters, list):
            return cls()

        dates = data.get("practiceDates")
        if not isinstance(dates, list):
            dates = []

        last_day = _to_date(data.get("lastPracticed"))

        return cls(
            chapters_practiced=_unique_strings(chapters),
            last_practiced=last_day.isoformat() if last_day else None,
            practice_dates=_normalize_dates(dates),
        )


@dataclass(frozen=True)
class DayStatus:
    """One cell of the practice calendar."""

    date: date
    practiced: bool

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date.isoformat(), "practiced": self.practiced}


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def _unique_strings(values: list[Any]) -> list[str]:
    """Keep string entries once each, in first-seen order."""
    result: list[str] = []
    for value in values:
        if isinstance(value, str) and value not in result:
            result.append(value)
    return result


def _to_date(stamp: Any) -> date | None:
    """Parse one ISO date stamp, or None if it is not one."""
    if not isinstance(stamp, str):
        return None
    try:
        return date.fromisoformat(stamp.strip())
    except ValueError:
        return None


def _normalize_dates(stamps: list[Any]) -> list[str]:
    """Canonical YYYY-MM-DD stamps, once each, in first-seen order."""
    result: list[str] = []
    skipped: list[Any] = []
    for stamp in stamps:
        day = _to_date(stamp)
        if day is None:
            skipped.append(stamp)
        elif day.isoformat() not in result:
            result.append(day.isoformat())

    if skipped:
        logger.warning("progress.invalid_dates_dropped", values=skipped)
    return result


def _parse_dates(stamps: Iterable[str]) -> set[date]:
    """Parse date stamps, skipping anything malformed."""
    return {day for day in map(_to_date, stamps) if day is not None}


def parse_progress(raw: str | None) -> ProgressRecord:
    """Deserialize a stored progress value.

    Args:
        raw: JSON text from storage, or None if absent

    Returns:
        ProgressRecord (empty if absent or corrupt)
    """
    if raw is None:
        return ProgressRecord()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("progress.corrupt_record", error=str(e))
        return ProgressRecord()
    return ProgressRecord.from_dict(data)


def calculate_streak(practice_dates: Iterable[str], today: date) -> int:
    """Count consecutive practice days ending today (or yesterday).

    If today has no practice the streak is 0, unless the most recent practice
    day is yesterday, in which case the count runs back from yesterday.
    Dates after ``today`` are ignored.

    Args:
        practice_dates: ISO date stamps
        today: Current local date

    Returns:
        Number of consecutive practice days
    """
    dates = sorted((d for d in _parse_dates(practice_dates) if d <= today), reverse=True)
    if not dates:
        return 0

    # A missed today keeps the streak alive only if yesterday was practiced
    if dates[0] != today and dates[0] != today - timedelta(days=1):
        return 0

    streak = 0
    for i, current in enumerate(dates):
        streak += 1
        if i + 1 < len(dates) and (current - dates[i + 1]).days > 1:
            break

    return streak


def build_calendar(practice_dates: Iterable[str], today: date, days: int = CALENDAR_DAYS) -> list[DayStatus]:
    """Trailing calendar of ``days`` entries, oldest first, ending today."""
    practiced = _parse_dates(practice_dates)
    cells = []
    for offset in range(days):
        day = today - timedelta(days=offset)
        cells.append(DayStatus(date=day, practiced=day in practiced))
    cells.reverse()
    return cells


# =============================================================================
# STREAK TRACKER
# =============================================================================


class StreakTracker:
    """Device-local practice tracker.

    Example:
        tracker = StreakTracker(JsonFileProgressStorage(Path("data/state")))
        tracker.record_practice("Fractions")
        tracker.streak()
    """

    def __init__(
        self,
        storage: ProgressStorage,
        today: Callable[[], date] = date.today,
    ):
        """Initialize tracker and load the persisted record.

        Args:
            storage: Backend holding the serialized record
            today: Clock returning the current local date
        """
        self.storage = storage
        self._today = today
        # Set while storage may still hold a record that reset_progress failed to erase
        self._reset_pending = False
        self._progress = self._load(fallback=ProgressRecord())

    @property
    def progress(self) -> ProgressRecord:
        """Current progress record."""
        return self._progress

    def _load(self, fallback: ProgressRecord) -> ProgressRecord:
        """Read the persisted record, using ``fallback`` if storage fails."""
        try:
            raw = self.storage.read()
        except ProgressStorageError as e:
            logger.warning("progress.load_failed", error=str(e))
            return fallback
        return parse_progress(raw)

    def _persist(self, record: ProgressRecord) -> bool:
        try:
            self.storage.write(json.dumps(record.to_dict(), ensure_ascii=False))
        except ProgressStorageError as e:
            logger.error("progress.save_failed", error=str(e))
            return False
        return True

    def reload(self) -> ProgressRecord:
        """Re-read the record from storage, trusting it again after a failed reset."""
        self._reset_pending = False
        self._progress = self._load(fallback=self._progress)
        return self._progress

    def record_practice(self, chapter: str) -> ProgressRecord:
        """Record a practice session for a chapter today.

        Idempotent within a day: repeating the same chapter adds nothing.

        Args:
            chapter: Chapter name

        Returns:
            Updated progress record
        """
        today = self._today().isoformat()
        if self._reset_pending:
            current = self._progress
        else:
            current = self._load(fallback=self._progress)

        chapters = current.chapters_practiced
        if chapter not in chapters:
            chapters = [*chapters, chapter]

        dates = current.practice_dates
        if today not in dates:
            dates = [*dates, today]

        updated = ProgressRecord(
            chapters_practiced=chapters,
            last_practiced=today,
            practice_dates=dates,
        )
        self._progress = updated
        saved = self._persist(updated)
        if saved:
            self._reset_pending = False

        logger.info("progress.recorded", chapter=chapter, date=today, saved=saved)
        return updated

    def reset_progress(self) -> None:
        """Erase all progress and remove the persisted record.

        If the record cannot be deleted it is overwritten with an empty one.
        If that fails too, later practice builds on the in-memory (empty)
        record instead of the stale stored one until a write succeeds.
        """
        self._progress = ProgressRecord()
        try:
            self.storage.delete()
        except ProgressStorageError as e:
            logger.error("progress.reset_failed", error=str(e))
            if not self._persist(self._progress):
                self._reset_pending = True
            return
        self._reset_pending = False
        logger.info("progress.reset")

    def streak_data(self) -> list[DayStatus]:
        """Practice calendar for the last 7 days, oldest first."""
        return build_calendar(self._progress.practice_dates, self._today())

    def streak(self) -> int:
        """Current consecutive-day practice streak."""
        return calculate_streak(self._progress.practice_dates, self._today())
