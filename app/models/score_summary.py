from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Any, Dict, Optional, Union


class _SummaryModel(BaseModel):
    """Persisted summaries use camelCase keys (totalScore, recalculatedAt, ...)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json_dict(self) -> Dict[str, Any]:
        """Shape written to participants.score_summary and returned by the API."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PercentageSummary(_SummaryModel):
    """
    Outcome of a graded assessment (ranked-option and/or choice questions).
    """

    total_score: Union[int, float] = Field(..., description="Sum of points earned")
    total_possible: Union[int, float] = Field(..., description="Sum of per-question maxima")
    correct_count: int = Field(..., ge=0, description="Responses marked correct")
    percentage: int = Field(..., description="round(100 * total_score / total_possible)")
    grade: str = Field(..., description="Letter grade for the percentage")
    recalculated_at: Optional[datetime] = Field(
        default=None,
        description="Set by the recalculation run that produced this summary"
    )


class TraitSummary(_SummaryModel):
    """
    Outcome of a trait/Likert assessment: average adjusted value per trait.
    """

    traits: Dict[str, float] = Field(default_factory=dict)


class MixedSummary(PercentageSummary):
    """
    Participant answered both percentage-scored and trait questions.
    Both sub-summaries are kept side by side.
    """

    traits: Dict[str, float] = Field(default_factory=dict)


ScoreSummary = Union[MixedSummary, PercentageSummary, TraitSummary]

