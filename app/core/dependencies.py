"""
Dependencies - HR Assessment Scoring Engine
app/core/dependencies.py

FastAPI dependency injection for repositories, scoring components and services.
"""

from functools import lru_cache

from app.config import get_settings
from app.repositories.participant_repository import ParticipantRepository
from app.repositories.question_repository import QuestionRepository
from app.repositories.response_repository import ResponseRepository
from app.scoring.aggregator import ParticipantAggregator
from app.scoring.grade_assigner import GradeAssigner
from app.scoring.option_scorer import OptionScorer, ScoreCategoryTable
from app.scoring.response_evaluator import ResponseEvaluator
from app.services.recalculation_service import RecalculationService
from app.services.submission_service import SubmissionService


@lru_cache()
def get_participant_repository() -> ParticipantRepository:
    """Get cached ParticipantRepository instance."""
    return ParticipantRepository()


@lru_cache()
def get_response_repository() -> ResponseRepository:
    """Get cached ResponseRepository instance."""
    return ResponseRepository()


@lru_cache()
def get_question_repository() -> QuestionRepository:
    """Get cached QuestionRepository instance."""
    return QuestionRepository()


@lru_cache()
def get_response_evaluator() -> ResponseEvaluator:
    """Evaluator wired with the configured category table and Likert scale."""
    settings = get_settings()
    scorer = OptionScorer(ScoreCategoryTable.from_mapping(settings.SCORE_CATEGORY_TABLE))
    return ResponseEvaluator(scorer, likert_scale_max=settings.LIKERT_SCALE_MAX)


@lru_cache()
def get_participant_aggregator() -> ParticipantAggregator:
    """Aggregator wired with the configured grade bands."""
    settings = get_settings()
    return ParticipantAggregator(GradeAssigner(settings.GRADE_BANDS, settings.FALLBACK_GRADE))


@lru_cache()
def get_recalculation_service() -> RecalculationService:
    """Get cached RecalculationService instance."""
    settings = get_settings()
    return RecalculationService(
        participant_repo=get_participant_repository(),
        response_repo=get_response_repository(),
        evaluator=get_response_evaluator(),
        aggregator=get_participant_aggregator(),
        max_participants=settings.RECALC_MAX_PARTICIPANTS,
        max_workers=settings.RECALC_MAX_WORKERS,
    )


@lru_cache()
def get_submission_service() -> SubmissionService:
    """Get cached SubmissionService instance."""
    return SubmissionService(
        participant_repo=get_participant_repository(),
        response_repo=get_response_repository(),
        question_repo=get_question_repository(),
        evaluator=get_response_evaluator(),
        aggregator=get_participant_aggregator(),
    )
