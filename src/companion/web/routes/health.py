"""Health check endpoint."""

from fastapi import APIRouter, Depends

from companion import __version__
from companion.core.curriculum import InMemoryCurriculumRepository
from companion.web.dependencies import get_curriculum_repository
from companion.web.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    repository: InMemoryCurriculumRepository = Depends(get_curriculum_repository),
) -> HealthResponse:
    """Check API health status."""
    return HealthResponse(status="ok", version=__version__, notes=len(repository))
