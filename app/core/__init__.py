"""
Core Package - HR Assessment Scoring Engine
app/core/__init__.py

Core infrastructure: dependencies, exceptions.
"""

from app.core.dependencies import (
    get_participant_aggregator,
    get_participant_repository,
    get_question_repository,
    get_recalculation_service,
    get_response_evaluator,
    get_response_repository,
    get_submission_service,
)
from app.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    EntityNotFoundException,
    ForeignKeyViolationException,
    InvalidScopeException,
    RepositoryException,
    ScoringException,
    SubmissionRejectedException,
)

__all__ = [
    # Dependencies
    "get_participant_aggregator",
    "get_participant_repository",
    "get_question_repository",
    "get_recalculation_service",
    "get_response_evaluator",
    "get_response_repository",
    "get_submission_service",
    # Exceptions
    "DatabaseConnectionException",
    "DuplicateEntityException",
    "EntityNotFoundException",
    "ForeignKeyViolationException",
    "InvalidScopeException",
    "RepositoryException",
    "ScoringException",
    "SubmissionRejectedException",
]
