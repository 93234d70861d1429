"""
Response Repository - HR Assessment Scoring Engine
app/repositories/response_repository.py

Data access layer for responses and the questions they answer.

Tables:
  - responses   (id, participant_id, question_id, answer_data VARIANT,
                 is_correct, score_value)
  - questions   (id, assessment_id, type, options VARIANT, correct_answer VARIANT)
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import uuid4

from app.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ResponseRepository(BaseRepository):
    """Repository for response reads and evaluation write-back."""

    TABLE_NAME = "RESPONSES"

    def get_by_participant(self, participant_id: str) -> List[Dict[str, Any]]:
        """
        All responses for one participant, each with its question embedded.

        A response whose question no longer exists carries question=None.
        """
        sql = """
            SELECT r.ID, r.PARTICIPANT_ID, r.QUESTION_ID, r.ANSWER_DATA,
                   r.IS_CORRECT, r.SCORE_VALUE,
                   q.ID AS Q_ID, q.TYPE AS Q_TYPE, q.OPTIONS AS Q_OPTIONS,
                   q.CORRECT_ANSWER AS Q_CORRECT_ANSWER
            FROM RESPONSES r
            LEFT JOIN QUESTIONS q ON r.QUESTION_ID = q.ID
            WHERE r.PARTICIPANT_ID = %s
            ORDER BY r.ID
        """
        rows = self.execute_query(sql, (participant_id,), fetch_all=True) or []
        return [self._row_to_dict(row) for row in rows]

    def update_evaluation(
        self,
        response_id: str,
        is_correct: Optional[bool],
        score_value: Optional[float],
    ) -> int:
        """Write back the recomputed correctness flag and score."""
        sql = """
            UPDATE RESPONSES
            SET IS_CORRECT = %s, SCORE_VALUE = %s
            WHERE ID = %s
        """
        return self.execute_query(sql, (is_correct, score_value, response_id), commit=True)

    def delete_by_participant(self, participant_id: str) -> int:
        """Remove a participant's responses. Returns affected row count."""
        sql = "DELETE FROM RESPONSES WHERE PARTICIPANT_ID = %s"
        deleted = self.execute_query(sql, (participant_id,), commit=True) or 0
        if deleted:
            logger.warning(f"Deleted {deleted} responses left for participant {participant_id}")
        return deleted

    def insert_many(self, responses: List[Dict[str, Any]]) -> int:
        """
        Insert submitted responses.

        Each dict: participant_id, question_id, answer_data, is_correct, score_value.
        """
        sql = """
            INSERT INTO RESPONSES (ID, PARTICIPANT_ID, QUESTION_ID, ANSWER_DATA, IS_CORRECT, SCORE_VALUE)
            SELECT %s, %s, %s, PARSE_JSON(%s), %s, %s
        """
        rows = [
            (
                r.get("id") or str(uuid4()),
                r["participant_id"],
                r["question_id"],
                self.to_variant(r["answer_data"]),
                r.get("is_correct"),
                r.get("score_value"),
            )
            for r in responses
        ]
        inserted = self.execute_many(sql, rows)
        logger.info(f"Inserted {inserted} responses")
        return inserted

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Snowflake row to response dict with embedded question."""
        question = None
        if row["Q_ID"] is not None:
            question = {
                "id": row["Q_ID"],
                "type": row["Q_TYPE"],
                "options": self.parse_variant(row["Q_OPTIONS"]),
                "correct_answer": self.parse_variant(row["Q_CORRECT_ANSWER"]),
            }
        return {
            "id": row["ID"],
            "participant_id": row["PARTICIPANT_ID"],
            "question_id": row["QUESTION_ID"],
            "answer_data": self.parse_variant(row["ANSWER_DATA"]),
            "is_correct": row["IS_CORRECT"],
            "score_value": float(row["SCORE_VALUE"]) if row["SCORE_VALUE"] is not None else None,
            "question": question,
        }
