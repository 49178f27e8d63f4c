"""Curriculum question endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from companion.core.curriculum import InMemoryCurriculumRepository
from companion.core.curriculum_qa import CurriculumQAError, ask_curriculum_question
from companion.core.scope_filter import ScopeCheckError, filter_prompt_by_subject
from companion.llm.client import LLMClient
from companion.web.dependencies import get_curriculum_repository, get_llm_client
from companion.web.schemas import AskRequest, AskResponse, ScopeRequest, ScopeResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["questions"])


@router.post("/ask", response_model=AskResponse)
def ask(
    request: AskRequest,
    repository: InMemoryCurriculumRepository = Depends(get_curriculum_repository),
    client: LLMClient = Depends(get_llm_client),
) -> AskResponse:
    """Answer a question from the curriculum notes."""
    try:
        if request.check_scope:
            decision = filter_prompt_by_subject(request.question, request.history, client=client)
            if not decision.is_relevant:
                return AskResponse(
                    answer=decision.response,
                    off_topic=True,
                    suggested_topics=decision.suggested_topics,
                )

        result = ask_curriculum_question(request.question, repository, client=client)
    except (CurriculumQAError, ScopeCheckError) as e:
        logger.error("ask_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to get an answer from the AI.",
        ) from e

    return AskResponse(**result.to_dict())


@router.post("/scope", response_model=ScopeResponse)
def check_scope(
    request: ScopeRequest,
    client: LLMClient = Depends(get_llm_client),
) -> ScopeResponse:
    """Check whether a prompt belongs to the curriculum."""
    try:
        decision = filter_prompt_by_subject(request.prompt, request.history, client=client)
    except ScopeCheckError as e:
        logger.error("scope_check_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to check the question with the AI.",
        ) from e

    return ScopeResponse(**decision.to_dict())
