"""
Recalculation Service - Score Summary Orchestrator
app/services/recalculation_service.py

Re-runs evaluation and aggregation over completed participants in one scope:

  1. Resolve scope (exactly one of participant / group / organization)
  2. List completed participants in that scope
  3. Per participant, independently:
       a. skip if the assessment is not graded
       b. fetch all responses (+ questions)
       c. skip if no ranked-option / choice questions (pure trait assessments)
       d. evaluate every response, aggregate into a fresh summary
       e. persist changed response evaluations, then the summary
  4. Report recalculated / skipped counts and before/after summaries

Each participant is committed on its own; a store failure for one
participant is recorded as a FAILED outcome and the run continues. Only a
bad scope or a failure to list candidates aborts the run.

Callers must not run overlapping scopes concurrently: there is no lock
around a participant's read-modify-write cycle.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import structlog

from app.core.exceptions import InvalidScopeException, RepositoryException
from app.models.enumerations import OutcomeStatus
from app.models.recalculation import RecalculateResponse, RecalculationResult
from app.repositories.participant_repository import ParticipantRepository
from app.repositories.response_repository import ResponseRepository
from app.scoring.aggregator import ParticipantAggregator
from app.scoring.question_classifier import ClassifiedQuestion, classify_question
from app.scoring.response_evaluator import Evaluation, ResponseEvaluator
from app.scoring.utils import Number

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RecalculationScope:
    """Which participants a run covers."""
    participant_id: Optional[str] = None
    group_id: Optional[str] = None
    organization_id: Optional[str] = None

    @property
    def label(self) -> str:
        if self.participant_id:
            return f"participant:{self.participant_id}"
        if self.group_id:
            return f"group:{self.group_id}"
        return f"organization:{self.organization_id}"


def resolve_scope(
    participant_id: Optional[str] = None,
    group_id: Optional[str] = None,
    organization_id: Optional[str] = None,
) -> RecalculationScope:
    """Validate that exactly one scope id is supplied (blank strings count as missing)."""
    supplied = {
        name: value.strip()
        for name, value in (
            ("participant_id", participant_id),
            ("group_id", group_id),
            ("organization_id", organization_id),
        )
        if isinstance(value, str) and value.strip()
    }
    if not supplied:
        raise InvalidScopeException("Must provide groupId, participantId, or organizationId")
    if len(supplied) > 1:
        raise InvalidScopeException(
            f"Provide exactly one of groupId, participantId, or organizationId (got {', '.join(sorted(supplied))})"
        )
    return RecalculationScope(**supplied)


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParticipantOutcome:
    """What happened to one candidate participant."""
    participant_id: str
    status: OutcomeStatus
    name: Optional[str] = None
    old_summary: Optional[Dict[str, Any]] = None
    new_summary: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None


@dataclass
class RecalculationReport:
    """All outcomes of one run, in candidate order."""
    scope: RecalculationScope
    outcomes: List[ParticipantOutcome] = field(default_factory=list)

    def _with_status(self, status: OutcomeStatus) -> List[ParticipantOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def recalculated(self) -> List[ParticipantOutcome]:
        return self._with_status(OutcomeStatus.RECALCULATED)

    @property
    def recalculated_count(self) -> int:
        return len(self.recalculated)

    @property
    def skipped_count(self) -> int:
        return len(self._with_status(OutcomeStatus.SKIPPED))

    @property
    def failed_count(self) -> int:
        return len(self._with_status(OutcomeStatus.FAILED))

    @property
    def candidate_count(self) -> int:
        return len(self.outcomes)

    def to_response(self) -> RecalculateResponse:
        """Failed participants appear in neither counter nor results."""
        return RecalculateResponse(
            success=True,
            recalculated_count=self.recalculated_count,
            skipped_count=self.skipped_count,
            results=[
                RecalculationResult(
                    participant_id=o.participant_id,
                    name=o.name,
                    old_summary=o.old_summary,
                    new_summary=o.new_summary,
                )
                for o in self.recalculated
            ],
        )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class RecalculationService:
    """
    Orchestrates score recalculation over a participant scope.

    Reads from:
      - participants (+ assessment_groups, assessments)
      - responses (+ questions)

    Writes to:
      - responses.is_correct / responses.score_value (only when changed)
      - participants.score_summary
    """

    def __init__(
        self,
        participant_repo: Optional[ParticipantRepository] = None,
        response_repo: Optional[ResponseRepository] = None,
        evaluator: Optional[ResponseEvaluator] = None,
        aggregator: Optional[ParticipantAggregator] = None,
        max_participants: Optional[int] = None,
        max_workers: int = 1,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.participant_repo = participant_repo or ParticipantRepository()
        self.response_repo = response_repo or ResponseRepository()
        self.evaluator = evaluator or ResponseEvaluator()
        self.aggregator = aggregator or ParticipantAggregator()
        self.max_participants = max_participants
        self.max_workers = max_workers
        self.clock = clock

    def recalculate(
        self,
        participant_id: Optional[str] = None,
        group_id: Optional[str] = None,
        organization_id: Optional[str] = None,
    ) -> RecalculationReport:
        """
        Recalculate every completed participant in the scope.

        Raises:
            InvalidScopeException: scope missing or ambiguous (nothing is read or written)
            RepositoryException: candidates could not be listed
        """
        scope = resolve_scope(participant_id, group_id, organization_id)

        candidates = self.participant_repo.list_completed(
            participant_id=scope.participant_id,
            group_id=scope.group_id,
            organization_id=scope.organization_id,
            # one extra row tells a truncated scope from an exact fit
            limit=self.max_participants + 1 if self.max_participants is not None else None,
        )
        if self.max_participants is not None and len(candidates) > self.max_participants:
            logger.warning(
                "recalculation_truncated",
                scope=scope.label,
                candidates=len(candidates),
                limit=self.max_participants,
            )
            candidates = candidates[: self.max_participants]

        logger.info("recalculation_started", scope=scope.label, candidates=len(candidates))

        question_cache: Dict[str, ClassifiedQuestion] = {}

        def process(participant: Mapping[str, Any]) -> ParticipantOutcome:
            try:
                return self.recalculate_participant(participant, question_cache)
            except Exception as e:
                return self._failed(participant, e, unexpected=True)

        if self.max_workers > 1 and len(candidates) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                outcomes = list(pool.map(process, candidates))
        else:
            outcomes = [process(p) for p in candidates]

        report = RecalculationReport(scope=scope, outcomes=outcomes)
        logger.info(
            "recalculation_complete",
            scope=scope.label,
            recalculated=report.recalculated_count,
            skipped=report.skipped_count,
            failed=report.failed_count,
        )
        return report

    def recalculate_participant(
        self,
        participant: Mapping[str, Any],
        question_cache: Optional[Dict[str, ClassifiedQuestion]] = None,
    ) -> ParticipantOutcome:
        """Run fetch → evaluate → aggregate → persist for one participant."""
        participant_id = str(participant["id"])
        name = participant.get("full_name")
        old_summary = participant.get("score_summary")
        cache = question_cache if question_cache is not None else {}

        def skipped(reason: str) -> ParticipantOutcome:
            logger.info("participant_skipped", participant_id=participant_id, reason=reason)
            return ParticipantOutcome(participant_id, OutcomeStatus.SKIPPED, name=name, reason=reason)

        if not participant.get("is_graded"):
            return skipped("assessment not graded")

        try:
            responses = self.response_repo.get_by_participant(participant_id)
        except RepositoryException as e:
            return self._failed(participant, e)

        if not responses:
            return skipped("no responses")

        questions = {
            r["question_id"]: self._classified(r.get("question"), cache)
            for r in responses
        }
        if not any(q is not None and q.is_percentage_scored for q in questions.values()):
            return skipped("no ranked-option or choice questions")

        evaluations: List[Optional[Evaluation]] = []
        changed: List[Tuple[Any, Optional[bool], Optional[Number]]] = []
        for response in responses:
            question = questions.get(response["question_id"])
            evaluation = self.evaluator.evaluate(response, question)
            evaluations.append(evaluation)
            if question is None:
                continue
            # Unanswered or unresolvable answers clear any stale stored values
            is_correct = evaluation.is_correct if evaluation else None
            score_value = evaluation.score_value if evaluation else None
            if self._evaluation_changed(response, is_correct, score_value):
                changed.append((response["id"], is_correct, score_value))

        summary = self.aggregator.aggregate(evaluations, graded=True, recalculated_at=self.clock())
        new_summary = summary.to_json_dict()

        try:
            for response_id, is_correct, score_value in changed:
                self.response_repo.update_evaluation(response_id, is_correct, score_value)
            self.participant_repo.update_score_summary(participant_id, new_summary)
        except RepositoryException as e:
            return self._failed(participant, e)

        logger.info(
            "participant_recalculated",
            participant_id=participant_id,
            responses_updated=len(changed),
            percentage=new_summary.get("percentage"),
            grade=new_summary.get("grade"),
        )
        return ParticipantOutcome(
            participant_id,
            OutcomeStatus.RECALCULATED,
            name=name,
            old_summary=old_summary,
            new_summary=new_summary,
        )

    @staticmethod
    def _classified(
        raw_question: Optional[Mapping[str, Any]],
        cache: Dict[str, ClassifiedQuestion],
    ) -> Optional[ClassifiedQuestion]:
        if not raw_question:
            return None
        question_id = str(raw_question.get("id"))
        if question_id not in cache:
            cache[question_id] = classify_question(raw_question)
        return cache[question_id]

    @staticmethod
    def _evaluation_changed(
        response: Mapping[str, Any],
        is_correct: Optional[bool],
        score_value: Optional[Number],
    ) -> bool:
        stored_score = response.get("score_value")
        if (stored_score is None) != (score_value is None):
            return True
        if score_value is not None and float(stored_score) != float(score_value):
            return True
        return response.get("is_correct") != is_correct

    @staticmethod
    def _failed(participant: Mapping[str, Any], error: Exception, unexpected: bool = False) -> ParticipantOutcome:
        participant_id = str(participant["id"])
        logger.error(
            "participant_failed",
            participant_id=participant_id,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=unexpected,
        )
        return ParticipantOutcome(
            participant_id,
            OutcomeStatus.FAILED,
            name=participant.get("full_name"),
            reason=str(error),
        )
