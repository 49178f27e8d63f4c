"""Math, translation and summary endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from companion.core.math_explainer import MathExplanationError, explain_math_problem
from companion.core.question_summary import SummaryError, summarize_questions
from companion.core.translator import TranslationError, translate_text
from companion.llm.client import LLMClient
from companion.web.dependencies import get_llm_client
from companion.web.schemas import (
    MathRequest,
    MathResponse,
    SummaryRequest,
    SummaryResponse,
    TranslateRequest,
    TranslateResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["learning"])


def _upstream_failure(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


@router.post("/math/explain", response_model=MathResponse)
def explain_math(
    request: MathRequest,
    client: LLMClient = Depends(get_llm_client),
) -> MathResponse:
    """Explain a math problem step by step."""
    try:
        result = explain_math_problem(request.question, client=client)
    except MathExplanationError as e:
        logger.error("math_explain_failed", error=str(e))
        raise _upstream_failure("Failed to get explanation from AI.") from e

    return MathResponse(**result.to_dict())


@router.post("/translate", response_model=TranslateResponse)
def translate(
    request: TranslateRequest,
    client: LLMClient = Depends(get_llm_client),
) -> TranslateResponse:
    """Translate a phrase into Kannada."""
    try:
        result = translate_text(request.query, client=client)
    except TranslationError as e:
        logger.error("translate_failed", error=str(e))
        raise _upstream_failure("Failed to translate text.") from e

    return TranslateResponse(**result.to_dict())


@router.post("/summary", response_model=SummaryResponse)
def summary(
    request: SummaryRequest,
    client: LLMClient = Depends(get_llm_client),
) -> SummaryResponse:
    """Summarize a student's questions for a parent."""
    try:
        text = summarize_questions(request.questions, client=client)
    except SummaryError as e:
        logger.error("summary_failed", error=str(e))
        raise _upstream_failure("Failed to generate summary.") from e

    return SummaryResponse(summary=text)
