"""
Participant Repository - HR Assessment Scoring Engine
app/repositories/participant_repository.py

Data access layer for participants, joined through their assessment group to
the assessment they took.

Tables:
  - participants        (id, group_id, organization_id, full_name, status,
                         score_summary VARIANT, completed_at, submission_type)
  - assessment_groups   (id, assessment_id, organization_id)
  - assessments         (id, type, is_graded)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.models.enumerations import ParticipantStatus, SubmissionType
from app.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ParticipantRepository(BaseRepository):
    """Repository for participant reads and score summary writes."""

    TABLE_NAME = "PARTICIPANTS"

    _SELECT = """
        SELECT p.ID, p.GROUP_ID, p.ORGANIZATION_ID, p.FULL_NAME, p.STATUS,
               p.SCORE_SUMMARY, p.COMPLETED_AT,
               g.ASSESSMENT_ID, a.IS_GRADED, a.TYPE AS ASSESSMENT_TYPE
        FROM PARTICIPANTS p
        LEFT JOIN ASSESSMENT_GROUPS g ON p.GROUP_ID = g.ID
        LEFT JOIN ASSESSMENTS a ON g.ASSESSMENT_ID = a.ID
    """

    def get_by_id(self, participant_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve a participant (any status) with its assessment.

        Args:
            participant_id: Participant ID

        Returns:
            Participant dict or None if not found
        """
        sql = f"{self._SELECT} WHERE p.ID = %s"
        row = self.execute_query(sql, (participant_id,), fetch_one=True)
        if not row:
            return None
        return self._row_to_dict(row)

    def list_completed(
        self,
        participant_id: Optional[str] = None,
        group_id: Optional[str] = None,
        organization_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        List completed participants in one scope.

        Exactly one of participant_id / group_id / organization_id is
        expected; the caller validates the scope.

        Returns:
            List of participant dicts ordered by ID
        """
        where_clauses = ["p.STATUS = %s"]
        params: List[Any] = [ParticipantStatus.COMPLETED.value]

        if participant_id:
            where_clauses.append("p.ID = %s")
            params.append(participant_id)
        elif group_id:
            where_clauses.append("p.GROUP_ID = %s")
            params.append(group_id)
        elif organization_id:
            where_clauses.append("p.ORGANIZATION_ID = %s")
            params.append(organization_id)

        sql = f"{self._SELECT} WHERE {' AND '.join(where_clauses)} ORDER BY p.ID"
        if limit:
            sql += " LIMIT %s"
            params.append(limit)

        rows = self.execute_query(sql, tuple(params), fetch_all=True) or []
        return [self._row_to_dict(row) for row in rows]

    def update_score_summary(self, participant_id: str, score_summary: Dict[str, Any]) -> int:
        """Overwrite a participant's score summary. Returns affected row count."""
        sql = """
            UPDATE PARTICIPANTS
            SET SCORE_SUMMARY = PARSE_JSON(%s)
            WHERE ID = %s
        """
        return self.execute_query(sql, (self.to_variant(score_summary), participant_id), commit=True)

    def mark_completed(
        self,
        participant_id: str,
        score_summary: Dict[str, Any],
        submission_type: SubmissionType = SubmissionType.NORMAL,
    ) -> int:
        """Record a submission: completed status, timestamp and initial summary."""
        sql = """
            UPDATE PARTICIPANTS
            SET STATUS = %s,
                COMPLETED_AT = %s,
                SCORE_SUMMARY = PARSE_JSON(%s),
                SUBMISSION_TYPE = %s
            WHERE ID = %s
        """
        params = (
            ParticipantStatus.COMPLETED.value,
            datetime.now(timezone.utc),
            self.to_variant(score_summary),
            submission_type.value,
            participant_id,
        )
        return self.execute_query(sql, params, commit=True)

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Snowflake row to participant dict."""
        return {
            "id": row["ID"],
            "group_id": row["GROUP_ID"],
            "organization_id": row["ORGANIZATION_ID"],
            "full_name": row["FULL_NAME"],
            "status": row["STATUS"],
            "score_summary": self.parse_variant(row["SCORE_SUMMARY"]),
            "completed_at": self.normalize_timestamp(row["COMPLETED_AT"]),
            "assessment_id": row["ASSESSMENT_ID"],
            "is_graded": bool(row["IS_GRADED"]),
            "assessment_type": row["ASSESSMENT_TYPE"],
        }
