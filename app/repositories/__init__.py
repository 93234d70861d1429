"""
Repositories Package - HR Assessment Scoring Engine
app/repositories/__init__.py

Data access layer for Snowflake database operations.
"""

from app.repositories.base import BaseRepository
from app.repositories.participant_repository import ParticipantRepository
from app.repositories.question_repository import QuestionRepository
from app.repositories.response_repository import ResponseRepository

__all__ = [
    "BaseRepository",
    "ParticipantRepository",
    "QuestionRepository",
    "ResponseRepository",
]
