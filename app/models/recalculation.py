from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional

from app.models.enumerations import SubmissionType


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecalculateRequest(_CamelModel):
    """
    Scope of a recalculation run. Exactly one field must be set; the
    service rejects anything else with an input error.
    """

    participant_id: Optional[str] = Field(default=None, description="Recalculate one participant")
    group_id: Optional[str] = Field(default=None, description="Recalculate every completed participant in a group")
    organization_id: Optional[str] = Field(default=None, description="Recalculate a whole organization")


class RecalculationResult(_CamelModel):
    """Before/after summaries for one recalculated participant."""

    participant_id: str
    name: Optional[str] = None
    old_summary: Optional[Dict[str, Any]] = None
    new_summary: Dict[str, Any]


class RecalculateResponse(_CamelModel):
    """Report of a recalculation run."""

    success: bool = True
    recalculated_count: int = Field(..., ge=0)
    skipped_count: int = Field(..., ge=0)
    results: List[RecalculationResult] = Field(default_factory=list)


class SubmittedAnswer(_CamelModel):
    question_id: str
    value: Any = None


class SubmitRequest(_CamelModel):
    """Answers submitted by a participant at the end of an assessment."""

    assessment_id: Optional[str] = None
    answers: List[SubmittedAnswer] = Field(default_factory=list)
    submission_type: SubmissionType = SubmissionType.NORMAL


class SubmitResponse(_CamelModel):
    success: bool = True
    score_summary: Dict[str, Any]


class ErrorResponse(BaseModel):
    """Error body returned with 400/404/500."""

    error: str = Field(..., description="Human-readable error message")
