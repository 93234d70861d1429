"""
Question Repository - HR Assessment Scoring Engine
app/repositories/question_repository.py

Read-only access to an assessment's questions.
"""

from typing import Any, Dict, List

from app.repositories.base import BaseRepository


class QuestionRepository(BaseRepository):
    """Repository for question reads."""

    TABLE_NAME = "QUESTIONS"

    def get_by_assessment(self, assessment_id: str) -> List[Dict[str, Any]]:
        """
        Retrieve all questions of an assessment in display order.

        Args:
            assessment_id: Assessment ID

        Returns:
            List of question dicts (options / correct_answer decoded)
        """
        sql = """
            SELECT ID, ASSESSMENT_ID, TYPE, OPTIONS, CORRECT_ANSWER, ORDER_INDEX
            FROM QUESTIONS
            WHERE ASSESSMENT_ID = %s
            ORDER BY ORDER_INDEX, ID
        """
        rows = self.execute_query(sql, (assessment_id,), fetch_all=True) or []
        return [self._row_to_dict(row) for row in rows]

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": row["ID"],
            "assessment_id": row["ASSESSMENT_ID"],
            "type": row["TYPE"],
            "options": self.parse_variant(row["OPTIONS"]),
            "correct_answer": self.parse_variant(row["CORRECT_ANSWER"]),
            "order_index": row["ORDER_INDEX"],
        }
