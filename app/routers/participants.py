"""
Participant Submission API Router
app/routers/participants.py

Endpoints:
  POST /api/v1/participants/{participant_id}/submit   - Submit answers and
                                                        compute the initial score summary
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
import logging

from app.core.dependencies import get_submission_service
from app.core.exceptions import EntityNotFoundException, RepositoryException, SubmissionRejectedException
from app.models.recalculation import ErrorResponse, SubmitRequest, SubmitResponse
from app.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Participants"])


@router.post(
    "/participants/{participant_id}/submit",
    response_model=SubmitResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields, already submitted, or assessment mismatch"},
        404: {"model": ErrorResponse, "description": "Participant not found"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
    summary="Submit assessment answers",
)
def submit_assessment(
    participant_id: str,
    request: SubmitRequest,
    service: SubmissionService = Depends(get_submission_service),
):
    """Record a participant's answers and score them."""
    try:
        result = service.submit(
            participant_id=participant_id,
            assessment_id=request.assessment_id,
            answers=request.answers,
            submission_type=request.submission_type,
        )
    except SubmissionRejectedException as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": e.message})
    except EntityNotFoundException:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "Participant not found"})
    except RepositoryException as e:
        logger.error(f"Submission failed for {participant_id}: {e}", exc_info=True)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(e)})

    return SubmitResponse(success=True, score_summary=result.score_summary)
