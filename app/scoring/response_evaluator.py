"""
Response Evaluator
app/scoring/response_evaluator.py

Scores one participant response against its classified question.

    RANKED   score = score_of(selected), possible = max score over options,
             correct = selected score equals that max (ties all count)
    CHOICE   correct = selection equals the correct index / index set,
             score = 1 if correct else 0, possible = 1
    TRAIT    no correctness; the (direction-adjusted) value feeds the
             question's trait average

Unanswered responses and data inconsistencies (unresolvable question,
index out of range, non-numeric answer) evaluate to None: they add nothing
to any total.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import structlog

from app.models.enumerations import ScoringKind, TraitDirection
from app.scoring.option_scorer import OptionScorer
from app.scoring.question_classifier import ClassifiedQuestion
from app.scoring.utils import Number, as_number, normalize_number, parse_index

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Evaluation:
    """Result of evaluating one response."""
    question_id: str
    kind: ScoringKind
    score_value: Number
    possible: Number = 0
    is_correct: Optional[bool] = None
    trait: Optional[str] = None

    @property
    def is_percentage_scored(self) -> bool:
        return self.kind in (ScoringKind.RANKED, ScoringKind.CHOICE)


def answer_value_of(response: Mapping[str, Any]) -> Any:
    """Extract the raw answer from a response row ({"answer_data": {"value": ...}})."""
    answer_data = response.get("answer_data", response.get("answerData"))
    if isinstance(answer_data, Mapping):
        return answer_data.get("value")
    return response.get("answer_value", response.get("answerValue"))


class ResponseEvaluator:
    """Evaluate responses against classified questions."""

    def __init__(self, option_scorer: Optional[OptionScorer] = None, likert_scale_max: int = 5):
        self.option_scorer = option_scorer or OptionScorer()
        self.likert_scale_max = likert_scale_max

    def evaluate(
        self,
        response: Mapping[str, Any],
        question: Optional[ClassifiedQuestion],
        graded: bool = True,
    ) -> Optional[Evaluation]:
        """
        Args:
            response: Response row carrying answer_data.value
            question: Classified question, or None if it could not be resolved
            graded: When False, ranked and choice questions are not scored

        Returns:
            Evaluation, or None when the response contributes nothing.
        """
        if question is None:
            logger.warning("response_question_unresolved", response_id=response.get("id"))
            return None

        answer = answer_value_of(response)
        if answer is None:
            return None

        if question.kind == ScoringKind.RANKED:
            return self._evaluate_ranked(answer, question) if graded else None
        if question.kind == ScoringKind.CHOICE:
            return self._evaluate_choice(answer, question) if graded else None
        return self._evaluate_trait(answer, question)

    def evaluate_value(self, answer: Any, question: ClassifiedQuestion, graded: bool = True) -> Optional[Evaluation]:
        """Evaluate a bare answer value (submission path)."""
        return self.evaluate({"answer_data": {"value": answer}}, question, graded=graded)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _evaluate_ranked(self, answer: Any, question: ClassifiedQuestion) -> Optional[Evaluation]:
        index = parse_index(answer)
        if index is None or not 0 <= index < len(question.options):
            logger.warning(
                "answer_index_out_of_range",
                question_id=question.id,
                answer=answer,
                option_count=len(question.options),
            )
            return None

        max_score = self.option_scorer.max_score(question.options)
        selected_score = self.option_scorer.score_of(question.options[index])

        return Evaluation(
            question_id=question.id,
            kind=ScoringKind.RANKED,
            score_value=normalize_number(selected_score),
            possible=normalize_number(max_score),
            is_correct=selected_score == max_score,
        )

    def _evaluate_choice(self, answer: Any, question: ClassifiedQuestion) -> Optional[Evaluation]:
        if question.is_multi:
            raw_selection = answer if isinstance(answer, list) else [answer]
            selection = [parse_index(v) for v in raw_selection]
            if any(s is None for s in selection):
                logger.warning("answer_not_an_index", question_id=question.id, answer=answer)
                return None
            is_correct = frozenset(selection) == question.correct_indices
        else:
            index = parse_index(answer)
            if index is None:
                logger.warning("answer_not_an_index", question_id=question.id, answer=answer)
                return None
            if question.options and not 0 <= index < len(question.options):
                logger.warning(
                    "answer_index_out_of_range",
                    question_id=question.id,
                    answer=answer,
                    option_count=len(question.options),
                )
                return None
            is_correct = question.correct_indices == frozenset([index])

        return Evaluation(
            question_id=question.id,
            kind=ScoringKind.CHOICE,
            score_value=1 if is_correct else 0,
            possible=1,
            is_correct=is_correct,
        )

    def _evaluate_trait(self, answer: Any, question: ClassifiedQuestion) -> Optional[Evaluation]:
        value = self._trait_value(answer, question)
        if value is None:
            logger.warning("trait_answer_unresolved", question_id=question.id, answer=answer)
            return None

        if question.trait_direction == TraitDirection.NEGATIVE:
            value = (self.likert_scale_max + 1) - value

        return Evaluation(
            question_id=question.id,
            kind=ScoringKind.TRAIT,
            score_value=normalize_number(value),
            trait=question.trait,
        )

    def _trait_value(self, answer: Any, question: ClassifiedQuestion) -> Optional[Number]:
        """
        The stored answer is the selected option's `value` (1..scale_max);
        when options carry values it must match one of them. Otherwise the
        answer is taken as the raw scale value.
        """
        number = as_number(answer)
        if number is None:
            number = parse_index(answer)
        if number is None:
            return None

        values = [o.value for o in question.options if o.value is not None]
        if values and number not in values:
            return None
        return number
