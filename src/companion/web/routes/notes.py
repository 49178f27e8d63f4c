"""Curriculum note endpoints."""

from fastapi import APIRouter, Depends

from companion.core.curriculum import ClassificationQuery, InMemoryCurriculumRepository
from companion.core.note_matcher import match_notes
from companion.web.dependencies import get_curriculum_repository
from companion.web.schemas import (
    MatchedNoteResponse,
    NoteListResponse,
    NoteMatchRequest,
    NoteMatchResponse,
    NoteResponse,
)

router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("", response_model=NoteListResponse)
async def list_notes(
    repository: InMemoryCurriculumRepository = Depends(get_curriculum_repository),
) -> NoteListResponse:
    """List the whole catalog."""
    notes = [NoteResponse(**note.to_dict()) for note in repository.all_notes()]
    return NoteListResponse(notes=notes, count=len(notes))


@router.post("/match", response_model=NoteMatchResponse)
async def match(
    request: NoteMatchRequest,
    repository: InMemoryCurriculumRepository = Depends(get_curriculum_repository),
) -> NoteMatchResponse:
    """Match a classification against the catalog."""
    query = ClassificationQuery(
        subject=request.subject,
        class_level=request.class_level,
        chapter=request.chapter,
        concepts=request.concepts,
    )
    notes = [MatchedNoteResponse(**m.to_dict()) for m in match_notes(query, repository)]
    return NoteMatchResponse(notes=notes, count=len(notes))
