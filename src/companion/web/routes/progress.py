"""Practice progress endpoints.

Storage faults never surface here: the tracker logs them and keeps going.
"""

from fastapi import APIRouter, Depends, status

from companion.core.streak_tracker import StreakTracker
from companion.web.dependencies import get_streak_tracker
from companion.web.schemas import DayStatusResponse, PracticeRequest, ProgressResponse

router = APIRouter(prefix="/api/progress", tags=["progress"])


def _progress_response(tracker: StreakTracker) -> ProgressResponse:
    record = tracker.progress
    return ProgressResponse(
        chapters_practiced=record.chapters_practiced,
        last_practiced=record.last_practiced,
        practice_dates=record.practice_dates,
        streak=tracker.streak(),
        streak_data=[DayStatusResponse(**day.to_dict()) for day in tracker.streak_data()],
    )


@router.get("", response_model=ProgressResponse)
async def get_progress(
    tracker: StreakTracker = Depends(get_streak_tracker),
) -> ProgressResponse:
    """Current progress, streak and 7-day calendar."""
    return _progress_response(tracker)


@router.post("/practice", response_model=ProgressResponse)
async def record_practice(
    request: PracticeRequest,
    tracker: StreakTracker = Depends(get_streak_tracker),
) -> ProgressResponse:
    """Record practice of a chapter today."""
    tracker.record_practice(request.chapter)
    return _progress_response(tracker)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def reset_progress(
    tracker: StreakTracker = Depends(get_streak_tracker),
) -> None:
    """Erase all progress."""
    tracker.reset_progress()
