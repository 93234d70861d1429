# tests/test_response_evaluator.py

"""
Response Evaluator Tests - ranked, choice and trait paths plus data inconsistencies
"""

import pytest

from app.models.enumerations import ScoringKind
from app.scoring.question_classifier import classify_question
from app.scoring.response_evaluator import ResponseEvaluator, answer_value_of

from tests.conftest import likert_question, mcq_question, sjt_question


def _answer(value):
    return {"id": "r1", "answer_data": {"value": value}}


@pytest.fixture
def evaluator():
    return ResponseEvaluator()


class TestRankedPath:
    """Ranked-option scoring: best-scoring option counts as correct."""

    @pytest.fixture
    def tied(self):
        return classify_question(sjt_question("q", [4, 4, 2, 1]))

    @pytest.mark.parametrize("index", [0, 1])
    def test_ties_at_maximum_are_correct(self, evaluator, tied, index):
        result = evaluator.evaluate(_answer(index), tied)
        assert result.is_correct is True
        assert result.score_value == 4
        assert result.possible == 4

    def test_below_maximum_is_incorrect(self, evaluator, tied):
        result = evaluator.evaluate(_answer(2), tied)
        assert result.is_correct is False
        assert result.score_value == 2
        assert result.possible == 4

    def test_string_index_parsed(self, evaluator, tied):
        assert evaluator.evaluate(_answer("3"), tied).score_value == 1

    def test_category_labels(self, evaluator):
        q = classify_question(sjt_question("q", ["Effective", "Most Effective"], tagged=False))
        result = evaluator.evaluate(_answer(0), q)
        assert result.kind == ScoringKind.RANKED
        assert (result.score_value, result.possible, result.is_correct) == (3, 4, False)

    @pytest.mark.parametrize("value", [4, -1, "abc", 1.5])
    def test_unresolvable_index_contributes_nothing(self, evaluator, tied, value):
        assert evaluator.evaluate(_answer(value), tied) is None

    def test_not_scored_when_ungraded(self, evaluator, tied):
        assert evaluator.evaluate(_answer(0), tied, graded=False) is None


class TestChoicePath:
    """Single/multi-choice scoring against correct_answer."""

    def test_single_correct(self, evaluator):
        q = classify_question(mcq_question("q", {"index": 2}))
        result = evaluator.evaluate(_answer(2), q)
        assert (result.is_correct, result.score_value, result.possible) == (True, 1, 1)

    def test_single_incorrect_still_counts_possible(self, evaluator):
        q = classify_question(mcq_question("q", {"index": 2}))
        result = evaluator.evaluate(_answer(0), q)
        assert (result.is_correct, result.score_value, result.possible) == (False, 0, 1)

    def test_multi_set_equality_ignores_order(self, evaluator):
        q = classify_question(mcq_question("q", [0, 2], multi=True))
        assert evaluator.evaluate(_answer([2, 0]), q).is_correct is True

    def test_multi_subset_is_incorrect(self, evaluator):
        q = classify_question(mcq_question("q", [0, 2], multi=True))
        assert evaluator.evaluate(_answer([0]), q).is_correct is False

    def test_multi_superset_is_incorrect(self, evaluator):
        q = classify_question(mcq_question("q", [0, 2], multi=True))
        assert evaluator.evaluate(_answer([0, 1, 2]), q).is_correct is False

    def test_out_of_range_single_contributes_nothing(self, evaluator):
        q = classify_question(mcq_question("q", {"index": 1}, option_count=3))
        assert evaluator.evaluate(_answer(7), q) is None


class TestTraitPath:
    """Likert scoring feeds trait values, never correctness."""

    def test_stored_option_value_used(self, evaluator):
        q = classify_question(likert_question("q", "openness"))
        result = evaluator.evaluate(_answer(4), q)
        assert result.kind == ScoringKind.TRAIT
        assert result.trait == "openness"
        assert result.score_value == 4
        assert result.is_correct is None
        assert result.possible == 0

    @pytest.mark.parametrize("value", [1, 5, "5"])
    def test_scale_ends_accepted(self, evaluator, value):
        q = classify_question(likert_question("q", "openness"))
        assert evaluator.evaluate(_answer(value), q).score_value == int(value)

    def test_value_not_among_options_contributes_nothing(self, evaluator):
        q = classify_question(likert_question("q", "openness"))
        assert evaluator.evaluate(_answer(0), q) is None
        assert evaluator.evaluate(_answer(6), q) is None

    def test_negative_direction_reverse_scored(self, evaluator):
        q = classify_question(likert_question("q", "openness", direction="negative"))
        assert evaluator.evaluate(_answer(1), q).score_value == 5
        assert evaluator.evaluate(_answer(5), q).score_value == 1

    def test_custom_scale_max(self):
        q = classify_question({"id": "q", "type": "likert", "options": [],
                               "correct_answer": {"trait": "grit", "direction": "negative"}})
        assert ResponseEvaluator(likert_scale_max=7).evaluate(_answer(1), q).score_value == 7

    def test_raw_scale_value_without_option_values(self, evaluator):
        q = classify_question({"id": "q", "type": "likert", "options": [],
                               "correct_answer": {"trait": "grit"}})
        assert evaluator.evaluate(_answer("4"), q).score_value == 4

    def test_trait_scored_even_when_ungraded(self, evaluator):
        q = classify_question(likert_question("q", "openness"))
        assert evaluator.evaluate(_answer(2), q, graded=False).score_value == 2


class TestUnansweredAndUnresolved:

    def test_null_answer(self, evaluator):
        q = classify_question(sjt_question("q", [4, 1]))
        assert evaluator.evaluate(_answer(None), q) is None

    def test_missing_answer_data(self, evaluator):
        q = classify_question(mcq_question("q", 0))
        assert evaluator.evaluate({"id": "r"}, q) is None

    def test_unresolved_question(self, evaluator):
        assert evaluator.evaluate(_answer(0), None) is None

    def test_answer_value_of_camel_case(self):
        assert answer_value_of({"answerData": {"value": 3}}) == 3
