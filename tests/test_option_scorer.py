# tests/test_option_scorer.py

"""
Option Scorer Tests - explicit scores, legacy category labels, injected tables
"""

import pytest

from app.scoring.option_scorer import OptionScorer, ScoreCategoryTable, ScoringOption


class TestScoreOf:
    """Tests for OptionScorer.score_of()."""

    def setup_method(self):
        self.scorer = OptionScorer()

    def test_explicit_score_used(self):
        assert self.scorer.score_of(ScoringOption(text="a", score=3)) == 3

    def test_explicit_zero_score_is_not_missing(self):
        """score=0 must not fall through to the category label."""
        option = ScoringOption(score=0, score_category="Most Effective")
        assert self.scorer.score_of(option) == 0

    def test_explicit_score_wins_over_category(self):
        option = ScoringOption(score=1, score_category="Most Effective")
        assert self.scorer.score_of(option) == 1

    @pytest.mark.parametrize("label,expected", [
        ("Most Effective", 4),
        ("Effective", 3),
        ("Ineffective", 2),
        ("Least Effective", 1),
    ])
    def test_four_tier_labels(self, label, expected):
        assert self.scorer.score_of(ScoringOption(score_category=label)) == expected

    def test_unknown_label_scores_zero(self):
        assert self.scorer.score_of(ScoringOption(score_category="Somewhat Effective")) == 0

    def test_no_score_fields_scores_zero(self):
        assert self.scorer.score_of(ScoringOption(text="plain")) == 0

    def test_max_score(self):
        options = [ScoringOption(score=2), ScoringOption(score_category="Most Effective"), ScoringOption()]
        assert self.scorer.max_score(options) == 4

    def test_max_score_empty(self):
        assert self.scorer.max_score([]) == 0


class TestScoreCategoryTable:
    """Tests for the injected category table."""

    def test_alternate_tiering_scheme(self):
        table = ScoreCategoryTable.from_mapping({"Most Effective": 10, "Effective": 5})
        scorer = OptionScorer(table)
        assert scorer.score_of(ScoringOption(score_category="Most Effective")) == 10
        assert scorer.score_of(ScoringOption(score_category="Least Effective")) == 0

    def test_table_is_immutable(self):
        table = ScoreCategoryTable()
        with pytest.raises(TypeError):
            table.points["Most Effective"] = 99

    def test_table_copies_source_mapping(self):
        source = {"Most Effective": 4}
        table = ScoreCategoryTable.from_mapping(source)
        source["Most Effective"] = 100
        assert table.lookup("Most Effective") == 4
