"""
Custom Exceptions - HR Assessment Scoring Engine
app/core/exceptions.py

Custom exception classes for repository and scoring operations.
"""


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class EntityNotFoundException(RepositoryException):
    """Entity not found in database."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class DuplicateEntityException(RepositoryException):
    """Duplicate entity violation."""

    def __init__(self, message: str = "Entity already exists"):
        self.message = message
        super().__init__(message)


class DatabaseConnectionException(RepositoryException):
    """Database connection failure."""

    def __init__(self, message: str = "Database connection failed"):
        self.message = message
        super().__init__(message)


class ForeignKeyViolationException(RepositoryException):
    """Foreign key constraint violation."""

    def __init__(self, message: str = "Foreign key constraint violation"):
        self.message = message
        super().__init__(message)


class ScoringException(Exception):
    """Base exception for scoring engine operations."""

    pass


class InvalidScopeException(ScoringException):
    """Recalculation scope is missing or names more than one target."""

    def __init__(self, message: str = "Must provide exactly one of groupId, participantId, or organizationId"):
        self.message = message
        super().__init__(message)


class SubmissionRejectedException(ScoringException):
    """A submission cannot be accepted for the participant in its current state."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
