"""
Participant Aggregator
app/scoring/aggregator.py

Folds a participant's evaluations into one ScoreSummary.

Formula (percentage-scored responses):
    total_score    = Σ score_value
    total_possible = Σ possible          (max option score, or 1 for choice)
    correct_count  = count(is_correct)
    percentage     = round_half_up(100 × total_score / total_possible), 0 if no possible
    grade          = GradeAssigner(percentage)

Trait responses:
    traits[name] = round_half_up(mean(score_value), 2)

Variant chosen:
    percentage + trait responses  -> MixedSummary
    percentage responses only     -> PercentageSummary
    trait responses only          -> TraitSummary
    nothing scorable              -> PercentageSummary of zeros if graded, else empty TraitSummary
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

import structlog

from app.models.score_summary import MixedSummary, PercentageSummary, ScoreSummary, TraitSummary
from app.scoring.grade_assigner import GradeAssigner
from app.scoring.response_evaluator import Evaluation
from app.scoring.utils import Number, normalize_number, round_half_up

logger = structlog.get_logger(__name__)


@dataclass
class PercentageTotals:
    """Running totals over percentage-scored evaluations."""
    total_score: Number = 0
    total_possible: Number = 0
    correct_count: int = 0

    @property
    def percentage(self) -> int:
        if self.total_possible <= 0:
            return 0
        return round_half_up(100 * self.total_score / self.total_possible)


class ParticipantAggregator:
    """Build the canonical score summary for one participant."""

    def __init__(self, grade_assigner: Optional[GradeAssigner] = None):
        self.grade_assigner = grade_assigner or GradeAssigner()

    def aggregate(
        self,
        evaluations: Iterable[Optional[Evaluation]],
        graded: bool = True,
        recalculated_at: Optional[datetime] = None,
    ) -> ScoreSummary:
        """
        Args:
            evaluations: Output of ResponseEvaluator.evaluate; None entries are ignored
            graded: Whether the assessment is graded (decides the empty-case variant)
            recalculated_at: Timestamp stamped on percentage summaries, if any

        Returns:
            PercentageSummary, TraitSummary or MixedSummary
        """
        scored: List[Evaluation] = []
        trait_values: Dict[str, List[Number]] = defaultdict(list)

        for evaluation in evaluations:
            if evaluation is None:
                continue
            if evaluation.is_percentage_scored:
                scored.append(evaluation)
            elif evaluation.trait:
                trait_values[evaluation.trait].append(evaluation.score_value)

        traits = self.average_traits(trait_values)

        if not scored and (traits or not graded):
            return TraitSummary(traits=traits)

        totals = self.sum_percentage(scored)
        percentage = totals.percentage
        fields = dict(
            total_score=normalize_number(totals.total_score),
            total_possible=normalize_number(totals.total_possible),
            correct_count=totals.correct_count,
            percentage=percentage,
            grade=self.grade_assigner.grade_of(percentage),
            recalculated_at=recalculated_at,
        )

        if traits:
            logger.info("mixed_summary_built", traits=sorted(traits), scored_count=len(scored))
            return MixedSummary(traits=traits, **fields)
        return PercentageSummary(**fields)

    @staticmethod
    def sum_percentage(evaluations: Iterable[Evaluation]) -> PercentageTotals:
        totals = PercentageTotals()
        for e in evaluations:
            totals.total_score += e.score_value
            totals.total_possible += e.possible
            if e.is_correct:
                totals.correct_count += 1
        return totals

    @staticmethod
    def average_traits(trait_values: Dict[str, List[Number]]) -> Dict[str, float]:
        # Sorted keys keep the persisted JSON identical across runs
        return {
            name: round_half_up(sum(values) / len(values), 2)
            for name, values in sorted(trait_values.items())
            if values
        }
