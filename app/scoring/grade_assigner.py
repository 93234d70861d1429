"""
Grade Assigner
app/scoring/grade_assigner.py

Step function from percentage to letter grade. Each band's lower bound is
inclusive:

    >= 90 -> A,  >= 80 -> B,  >= 70 -> C,  >= 60 -> D,  else F
"""

from typing import Optional, Sequence, Tuple

from app.config import DEFAULT_FALLBACK_GRADE, DEFAULT_GRADE_BANDS


class GradeAssigner:
    """Map an aggregate percentage to a letter grade band."""

    def __init__(
        self,
        bands: Optional[Sequence[Tuple[float, str]]] = None,
        fallback: str = DEFAULT_FALLBACK_GRADE,
    ):
        self.bands: Tuple[Tuple[float, str], ...] = tuple(
            sorted(bands or DEFAULT_GRADE_BANDS, key=lambda band: band[0], reverse=True)
        )
        self.fallback = fallback

    def grade_of(self, percentage: float) -> str:
        for threshold, letter in self.bands:
            if percentage >= threshold:
                return letter
        return self.fallback


def grade_of(percentage: float) -> str:
    """Grade with the default band table."""
    return GradeAssigner().grade_of(percentage)
