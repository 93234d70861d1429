"""
Submission Service - Initial Scoring at Submission Time
app/services/submission_service.py

Scores a participant's submitted answers with the same evaluator and
aggregator the recalculation run uses, so recalculating unchanged data
reproduces the summary written here (apart from recalculatedAt).

  1. Validate the participant: exists, not yet completed, same assessment
  2. Load and classify the assessment's questions
  3. Evaluate each answer (ranked/choice only when the assessment is graded)
  4. Replace the participant's response rows (a retry after a failed step 5
     does not duplicate them)
  5. Mark the participant completed with the initial score summary
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.core.exceptions import EntityNotFoundException, SubmissionRejectedException
from app.models.enumerations import ParticipantStatus, SubmissionType
from app.models.recalculation import SubmittedAnswer
from app.repositories.participant_repository import ParticipantRepository
from app.repositories.question_repository import QuestionRepository
from app.repositories.response_repository import ResponseRepository
from app.scoring.aggregator import ParticipantAggregator
from app.scoring.question_classifier import classify_questions
from app.scoring.response_evaluator import ResponseEvaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    participant_id: str
    responses_saved: int
    score_summary: Dict[str, Any]


class SubmissionService:
    """Record and score a participant's submission."""

    def __init__(
        self,
        participant_repo: Optional[ParticipantRepository] = None,
        response_repo: Optional[ResponseRepository] = None,
        question_repo: Optional[QuestionRepository] = None,
        evaluator: Optional[ResponseEvaluator] = None,
        aggregator: Optional[ParticipantAggregator] = None,
    ):
        self.participant_repo = participant_repo or ParticipantRepository()
        self.response_repo = response_repo or ResponseRepository()
        self.question_repo = question_repo or QuestionRepository()
        self.evaluator = evaluator or ResponseEvaluator()
        self.aggregator = aggregator or ParticipantAggregator()

    def submit(
        self,
        participant_id: str,
        assessment_id: Optional[str],
        answers: List[SubmittedAnswer],
        submission_type: SubmissionType = SubmissionType.NORMAL,
    ) -> SubmissionResult:
        """
        Raises:
            SubmissionRejectedException: missing fields, already submitted, or assessment mismatch
            EntityNotFoundException: unknown participant
            RepositoryException: store failure
        """
        if not participant_id or not assessment_id or not answers:
            raise SubmissionRejectedException("Missing required fields")

        participant = self.participant_repo.get_by_id(participant_id)
        if participant is None:
            raise EntityNotFoundException("Participant", participant_id)
        if participant["status"] == ParticipantStatus.COMPLETED.value:
            raise SubmissionRejectedException("Assessment already submitted")
        if participant.get("assessment_id") != assessment_id:
            raise SubmissionRejectedException("Assessment mismatch")

        graded = bool(participant.get("is_graded"))
        questions = classify_questions(self.question_repo.get_by_assessment(assessment_id))

        rows = []
        evaluations = []
        for answer in answers:
            question = questions.get(answer.question_id)
            if question is None:
                logger.warning(f"Dropping answer for unknown question {answer.question_id}")
                continue
            evaluation = self.evaluator.evaluate_value(answer.value, question, graded=graded)
            evaluations.append(evaluation)
            rows.append({
                "participant_id": participant_id,
                "question_id": answer.question_id,
                "answer_data": {"value": answer.value},
                "is_correct": evaluation.is_correct if evaluation else None,
                "score_value": evaluation.score_value if evaluation else None,
            })

        # Rows left by an earlier attempt whose completion write failed
        self.response_repo.delete_by_participant(participant_id)
        saved = self.response_repo.insert_many(rows)

        summary = self.aggregator.aggregate(evaluations, graded=graded).to_json_dict()
        self.participant_repo.mark_completed(participant_id, summary, submission_type)

        logger.info(
            f"Assessment submitted: participant={participant_id} assessment={assessment_id} "
            f"responses={saved} summary={summary}"
        )
        return SubmissionResult(participant_id=participant_id, responses_saved=saved, score_summary=summary)
