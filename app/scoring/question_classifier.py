"""
Question Classifier
app/scoring/question_classifier.py

Normalizes a persisted question row into a ClassifiedQuestion once, at load
time, so the evaluator dispatches on an explicit ScoringKind instead of
re-inspecting option shapes for every response.

Dispatch rules:
    type == "sjt_ranking"                              -> RANKED
    type is another known tag                          -> tag decides (no sniffing)
    type missing/unknown (legacy), first option scored -> RANKED
    otherwise, correct_answer names indices            -> CHOICE
    otherwise                                          -> TRAIT

Accepted correct_answer shapes:
    {"index": 2} | 2                      single-choice
    [0, 2] | {"indices": [0, 2]}          multi-choice
    {"trait": "openness", "direction": "negative"}   trait key
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from app.models.enumerations import QuestionType, ScoringKind, TraitDirection
from app.scoring.option_scorer import ScoringOption
from app.scoring.utils import as_number, parse_index

logger = logging.getLogger(__name__)

_KNOWN_TAGS = {t.value for t in QuestionType}


@dataclass(frozen=True)
class ClassifiedQuestion:
    """A question with its scoring strategy resolved."""
    id: str
    kind: ScoringKind
    options: Tuple[ScoringOption, ...] = ()
    declared_type: Optional[str] = None
    correct_indices: Optional[FrozenSet[int]] = None
    is_multi: bool = False
    trait: Optional[str] = None
    trait_direction: TraitDirection = TraitDirection.POSITIVE
    legacy: bool = False                  # classified by shape, not by tag

    @property
    def is_percentage_scored(self) -> bool:
        return self.kind in (ScoringKind.RANKED, ScoringKind.CHOICE)


def option_from_raw(raw: Any) -> ScoringOption:
    """Build a ScoringOption from a persisted option dict (snake or camel case)."""
    if isinstance(raw, str):
        return ScoringOption(text=raw)
    if not isinstance(raw, Mapping):
        return ScoringOption()
    category = raw.get("score_category", raw.get("scoreCategory"))
    return ScoringOption(
        text=str(raw.get("text") or ""),
        value=as_number(raw.get("value")),
        score=as_number(raw.get("score")),
        score_category=category if isinstance(category, str) and category else None,
        score_declared="score" in raw,
    )


def _declared_tag(raw_question: Mapping[str, Any]) -> Optional[str]:
    tag = raw_question.get("type")
    if isinstance(tag, QuestionType):
        return tag.value
    if isinstance(tag, str) and tag in _KNOWN_TAGS:
        return tag
    return None


def _options(raw_question: Mapping[str, Any]) -> Tuple[ScoringOption, ...]:
    raw_options = raw_question.get("options")
    if not isinstance(raw_options, list):
        return ()
    return tuple(option_from_raw(o) for o in raw_options)


def is_ranked_scoring(raw_question: Mapping[str, Any]) -> bool:
    """
    True if the question uses ranked-option scoring.

    A known type tag is authoritative; untagged legacy rows are recognised
    by their first option carrying `score` or `score_category`.
    """
    tag = _declared_tag(raw_question)
    if tag is not None:
        return tag == QuestionType.SJT_RANKING.value
    options = _options(raw_question)
    return bool(options) and options[0].carries_score


def parse_correct_answer(
    correct_answer: Any,
) -> Tuple[Optional[FrozenSet[int]], bool, Optional[str], TraitDirection]:
    """
    Split a correct_answer payload into (indices, is_multi, trait, direction).
    """
    indices: Optional[FrozenSet[int]] = None
    is_multi = False
    trait: Optional[str] = None
    direction = TraitDirection.POSITIVE

    if isinstance(correct_answer, list):
        parsed = [parse_index(v) for v in correct_answer]
        if parsed and all(p is not None for p in parsed):
            indices = frozenset(parsed)
            is_multi = True
    elif isinstance(correct_answer, Mapping):
        if "indices" in correct_answer and isinstance(correct_answer["indices"], list):
            indices, is_multi, _, _ = parse_correct_answer(correct_answer["indices"])
        elif correct_answer.get("index") is not None:
            index = parse_index(correct_answer["index"])
            if index is not None:
                indices = frozenset([index])
        if isinstance(correct_answer.get("trait"), str) and correct_answer["trait"]:
            trait = correct_answer["trait"]
            if correct_answer.get("direction") == TraitDirection.NEGATIVE.value:
                direction = TraitDirection.NEGATIVE
    else:
        index = parse_index(correct_answer)
        if index is not None:
            indices = frozenset([index])

    return indices, is_multi, trait, direction


def classify_question(raw_question: Mapping[str, Any]) -> ClassifiedQuestion:
    """Normalize one persisted question row into a ClassifiedQuestion."""
    question_id = str(raw_question.get("id"))
    tag = _declared_tag(raw_question)
    options = _options(raw_question)
    indices, is_multi, trait, direction = parse_correct_answer(
        raw_question.get("correct_answer", raw_question.get("correctAnswer"))
    )

    if is_ranked_scoring(raw_question):
        return ClassifiedQuestion(
            id=question_id,
            kind=ScoringKind.RANKED,
            options=options,
            declared_type=tag,
            legacy=tag is None,
        )

    if indices is not None and tag != QuestionType.LIKERT.value:
        return ClassifiedQuestion(
            id=question_id,
            kind=ScoringKind.CHOICE,
            options=options,
            declared_type=tag,
            correct_indices=indices,
            is_multi=is_multi or tag == QuestionType.MCQ_MULTI.value,
            legacy=tag is None,
        )

    return ClassifiedQuestion(
        id=question_id,
        kind=ScoringKind.TRAIT,
        options=options,
        declared_type=tag,
        trait=trait,
        trait_direction=direction,
        legacy=tag is None,
    )


def classify_questions(raw_questions: List[Mapping[str, Any]]) -> Dict[str, ClassifiedQuestion]:
    """Classify a batch of question rows, keyed by question id."""
    classified = {}
    for raw in raw_questions:
        question = classify_question(raw)
        if question.legacy:
            logger.debug(f"Question {question.id} has no type tag, classified by shape as {question.kind.value}")
        classified[question.id] = question
    return classified
