"""
Score Recalculation API Router
app/routers/recalculation.py

Endpoints:
  POST /api/v1/scoring/recalculate   - Recalculate score summaries for one
                                       participant, group or organization

Status mapping:
  400  missing or ambiguous scope (no work performed)
  200  report, including the zero-work case
  500  candidates could not be listed / unexpected store failure
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
import logging
import time

from app.core.dependencies import get_recalculation_service
from app.core.exceptions import InvalidScopeException, RepositoryException
from app.models.recalculation import ErrorResponse, RecalculateRequest, RecalculateResponse
from app.services.recalculation_service import RecalculationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Scoring"])


@router.post(
    "/scoring/recalculate",
    response_model=RecalculateResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or ambiguous scope"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
    summary="Recalculate participant score summaries",
    description="""
    Re-evaluates every response of each completed participant in the scope and
    overwrites their `scoreSummary`. Supply exactly one of `participantId`,
    `groupId` or `organizationId`. Participants of ungraded or pure trait
    assessments are counted as skipped.
    """,
)
def recalculate_scores(
    request: RecalculateRequest,
    service: RecalculationService = Depends(get_recalculation_service),
):
    """Recalculate scores for a scope."""
    start = time.time()
    try:
        report = service.recalculate(
            participant_id=request.participant_id,
            group_id=request.group_id,
            organization_id=request.organization_id,
        )
    except InvalidScopeException as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": e.message})
    except RepositoryException as e:
        logger.error(f"Recalculation failed: {e}", exc_info=True)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(e)})

    logger.info(
        f"Recalculated {report.recalculated_count} participants, skipped {report.skipped_count} "
        f"({report.failed_count} failed) in {time.time() - start:.2f}s"
    )
    return report.to_response()
