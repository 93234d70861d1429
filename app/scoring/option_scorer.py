"""
Option Scorer
app/scoring/option_scorer.py

Resolves the point value of one answer option:

    1. explicit numeric `score`            -> used as-is
    2. legacy `score_category` label       -> looked up in the category table
    3. neither                             -> 0

The category table is injected so alternate tiering schemes can be used.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from app.config import DEFAULT_SCORE_CATEGORY_TABLE
from app.scoring.utils import Number


@dataclass(frozen=True)
class ScoreCategoryTable:
    """Immutable label -> points lookup for legacy effectiveness labels."""
    points: Mapping[str, Number] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_SCORE_CATEGORY_TABLE))
    )

    def __post_init__(self):
        # Copy so a caller mutating its dict afterwards can't change scoring
        object.__setattr__(self, "points", MappingProxyType(dict(self.points)))

    def lookup(self, label: str) -> Number:
        """Unknown labels score 0."""
        return self.points.get(label, 0)

    @classmethod
    def from_mapping(cls, points: Mapping[str, Number]) -> "ScoreCategoryTable":
        return cls(points=points)


@dataclass(frozen=True)
class ScoringOption:
    """One selectable choice within a question, as seen by the engine."""
    text: str = ""
    value: Optional[Number] = None
    score: Optional[Number] = None
    score_category: Optional[str] = None
    # the stored option had a `score` key, even if null or non-numeric
    score_declared: bool = field(default=False, compare=False)

    @property
    def carries_score(self) -> bool:
        """True if the option declares a score or has a score category."""
        return self.score_declared or self.score is not None or bool(self.score_category)


class OptionScorer:
    """Total function from option to point value."""

    def __init__(self, category_table: Optional[ScoreCategoryTable] = None):
        self.category_table = category_table or ScoreCategoryTable()

    def score_of(self, option: ScoringOption) -> Number:
        if option.score is not None:
            return option.score
        if option.score_category:
            return self.category_table.lookup(option.score_category)
        return 0

    def max_score(self, options) -> Number:
        """Highest point value among options (0 for an empty sequence)."""
        return max((self.score_of(o) for o in options), default=0)
