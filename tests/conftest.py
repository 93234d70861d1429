# tests/conftest.py

"""
Pytest Fixtures - Shared fakes and sample data for the scoring engine

The Snowflake repositories are replaced by in-memory fakes with the same
method signatures, injected through constructor arguments (services) and
FastAPI dependency_overrides (API tests).

SAMPLE DATA ID REFERENCE:
- Organization: org-1
- Groups:       grp-sjt (graded SJT), grp-trait (ungraded Likert), grp-mcq (graded MCQ)
- Questions:    q-sjt-1..3, q-mcq-1, q-multi-1, q-lik-1..5
"""

import copy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_recalculation_service, get_submission_service
from app.core.exceptions import DatabaseConnectionException, RepositoryException
from app.main import app
from app.services.recalculation_service import RecalculationService
from app.services.submission_service import SubmissionService


FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# IN-MEMORY REPOSITORIES
# =============================================================================

class FakeParticipantRepository:
    """Stand-in for ParticipantRepository backed by a dict."""

    def __init__(self, participants: Optional[List[Dict[str, Any]]] = None):
        self.participants: Dict[str, Dict[str, Any]] = {
            p["id"]: copy.deepcopy(p) for p in participants or []
        }
        self.summary_writes: List[tuple] = []
        self.completed_writes: List[tuple] = []
        self.fail_list = False
        self.limits_requested: list = []
        self.fail_update_for: set = set()
        self.fail_complete_for: set = set()

    def get_by_id(self, participant_id):
        p = self.participants.get(participant_id)
        return copy.deepcopy(p) if p else None

    def list_completed(self, participant_id=None, group_id=None, organization_id=None, limit=None):
        self.limits_requested.append(limit)
        if self.fail_list:
            raise DatabaseConnectionException("Failed to connect to Snowflake: timeout")
        rows = []
        for p in sorted(self.participants.values(), key=lambda p: p["id"]):
            if p["status"] != "completed":
                continue
            if participant_id and p["id"] != participant_id:
                continue
            if group_id and p["group_id"] != group_id:
                continue
            if organization_id and p["organization_id"] != organization_id:
                continue
            rows.append(copy.deepcopy(p))
        return rows[:limit] if limit else rows

    def update_score_summary(self, participant_id, score_summary):
        if participant_id in self.fail_update_for:
            raise RepositoryException("Database error: write conflict")
        self.summary_writes.append((participant_id, copy.deepcopy(score_summary)))
        self.participants[participant_id]["score_summary"] = copy.deepcopy(score_summary)
        return 1

    def mark_completed(self, participant_id, score_summary, submission_type):
        if participant_id in self.fail_complete_for:
            raise RepositoryException("Database error: participant update failed")
        self.completed_writes.append((participant_id, copy.deepcopy(score_summary), submission_type))
        p = self.participants[participant_id]
        p["status"] = "completed"
        p["score_summary"] = copy.deepcopy(score_summary)
        p["submission_type"] = submission_type.value
        return 1

    @property
    def write_count(self) -> int:
        return len(self.summary_writes) + len(self.completed_writes)


class FakeResponseRepository:
    """Stand-in for ResponseRepository; questions are embedded like the JOIN does."""

    def __init__(self, responses: Optional[List[Dict[str, Any]]] = None,
                 questions: Optional[Dict[str, Dict[str, Any]]] = None):
        self.responses: List[Dict[str, Any]] = [copy.deepcopy(r) for r in responses or []]
        self.questions = questions or {}
        self.evaluation_writes: List[tuple] = []
        self.inserted: List[Dict[str, Any]] = []
        self.fail_fetch_for: set = set()

    def get_by_participant(self, participant_id):
        if participant_id in self.fail_fetch_for:
            raise RepositoryException("Database error: read timeout")
        rows = []
        for r in self.responses:
            if r["participant_id"] != participant_id:
                continue
            row = copy.deepcopy(r)
            question = self.questions.get(r["question_id"])
            row["question"] = copy.deepcopy(question) if question else None
            rows.append(row)
        return rows

    def update_evaluation(self, response_id, is_correct, score_value):
        self.evaluation_writes.append((response_id, is_correct, score_value))
        for r in self.responses:
            if r["id"] == response_id:
                r["is_correct"] = is_correct
                r["score_value"] = score_value
        return 1

    def delete_by_participant(self, participant_id):
        before = len(self.responses)
        self.responses = [r for r in self.responses if r["participant_id"] != participant_id]
        return before - len(self.responses)

    def insert_many(self, responses):
        for i, r in enumerate(responses):
            row = copy.deepcopy(r)
            row.setdefault("id", f"r-new-{len(self.inserted) + i}")
            self.inserted.append(row)
            self.responses.append(row)
        return len(responses)


class FakeQuestionRepository:
    def __init__(self, questions_by_assessment: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.questions_by_assessment = questions_by_assessment or {}

    def get_by_assessment(self, assessment_id):
        return copy.deepcopy(self.questions_by_assessment.get(assessment_id, []))


# =============================================================================
# QUESTION / RESPONSE BUILDERS
# =============================================================================

def sjt_question(qid: str, scores: List[Any], tagged: bool = True) -> Dict[str, Any]:
    """Ranked-option question; numbers become `score`, strings `score_category`."""
    options = []
    for i, s in enumerate(scores):
        if isinstance(s, str):
            options.append({"text": f"Option {i}", "score_category": s})
        else:
            options.append({"text": f"Option {i}", "score": s})
    question = {"id": qid, "options": options, "correct_answer": None}
    question["type"] = "sjt_ranking" if tagged else "situational"
    return question


def mcq_question(qid: str, correct: Any, option_count: int = 4, multi: bool = False) -> Dict[str, Any]:
    return {
        "id": qid,
        "type": "mcq_multi" if multi else "mcq_single",
        "options": [{"text": f"Choice {i}"} for i in range(option_count)],
        "correct_answer": correct,
    }


def likert_question(qid: str, trait: str, direction: str = "positive") -> Dict[str, Any]:
    return {
        "id": qid,
        "type": "likert",
        "options": [{"text": str(v), "value": v} for v in range(1, 6)],
        "correct_answer": {"trait": trait, "direction": direction},
    }


def response(rid: str, participant_id: str, question_id: str, value: Any,
             is_correct: Optional[bool] = None, score_value: Optional[float] = None) -> Dict[str, Any]:
    return {
        "id": rid,
        "participant_id": participant_id,
        "question_id": question_id,
        "answer_data": {"value": value},
        "is_correct": is_correct,
        "score_value": score_value,
    }


def participant(pid: str, group_id: str, is_graded: bool = True, status: str = "completed",
                score_summary: Optional[Dict[str, Any]] = None, assessment_id: str = "asm-1",
                organization_id: str = "org-1") -> Dict[str, Any]:
    return {
        "id": pid,
        "group_id": group_id,
        "organization_id": organization_id,
        "full_name": f"Participant {pid}",
        "status": status,
        "score_summary": score_summary,
        "assessment_id": assessment_id,
        "is_graded": is_graded,
        "assessment_type": "situational" if is_graded else "personality",
    }


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def sjt_questions():
    """Three ranked-option questions, each with a maximum of 4."""
    return {
        "q-sjt-1": sjt_question("q-sjt-1", [4, 3, 2, 1]),
        "q-sjt-2": sjt_question("q-sjt-2", [1, 4, 3, 2]),
        "q-sjt-3": sjt_question(
            "q-sjt-3", ["Least Effective", "Effective", "Most Effective", "Ineffective"], tagged=False
        ),
    }


@pytest.fixture
def likert_questions():
    """Five Likert questions across two traits."""
    return {
        "q-lik-1": likert_question("q-lik-1", "openness"),
        "q-lik-2": likert_question("q-lik-2", "openness"),
        "q-lik-3": likert_question("q-lik-3", "openness", direction="negative"),
        "q-lik-4": likert_question("q-lik-4", "conscientiousness"),
        "q-lik-5": likert_question("q-lik-5", "conscientiousness"),
    }


@pytest.fixture
def trait_summary():
    return {"traits": {"conscientiousness": 4.5, "openness": 3.33}}


@pytest.fixture
def store(sjt_questions, likert_questions, trait_summary):
    """
    Mixed organization:
      P  - graded SJT, selected scores [3, 4, 1] against maxima [4, 4, 4]
      P2 - graded SJT, all best options
      Q  - ungraded pure trait assessment
      R  - graded but only Likert questions
      S  - not completed (never a candidate)
    """
    questions = {**sjt_questions, **likert_questions}
    participants = [
        participant("P", "grp-sjt", score_summary={"totalScore": 0, "totalPossible": 12,
                                                   "correctCount": 0, "percentage": 0, "grade": "F"}),
        participant("P2", "grp-sjt"),
        participant("Q", "grp-trait", is_graded=False, score_summary=trait_summary),
        participant("R", "grp-trait", is_graded=True, score_summary=trait_summary),
        participant("S", "grp-sjt", status="started"),
    ]
    responses = [
        # P: index 1 on q1 (score 3), index 1 on q2 (score 4), index 0 on q3 (Least Effective = 1)
        response("r-p-1", "P", "q-sjt-1", 1, is_correct=True, score_value=3),
        response("r-p-2", "P", "q-sjt-2", 1, is_correct=True, score_value=4),
        response("r-p-3", "P", "q-sjt-3", "0", is_correct=False, score_value=1),
        response("r-p2-1", "P2", "q-sjt-1", 0),
        response("r-p2-2", "P2", "q-sjt-2", 1),
        response("r-p2-3", "P2", "q-sjt-3", 2),
    ]
    for pid in ("Q", "R"):
        for i, value in enumerate([4, 3, 2, 5, 4], start=1):
            responses.append(response(f"r-{pid.lower()}-{i}", pid, f"q-lik-{i}", value))
    return {
        "participants": FakeParticipantRepository(participants),
        "responses": FakeResponseRepository(responses, questions),
    }


@pytest.fixture
def recalculation_service(store):
    return RecalculationService(
        participant_repo=store["participants"],
        response_repo=store["responses"],
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def submission_store(sjt_questions, likert_questions):
    participants = [
        participant("N1", "grp-sjt", status="started", assessment_id="asm-sjt"),
        participant("N2", "grp-trait", is_graded=False, status="started", assessment_id="asm-lik"),
        participant("DONE", "grp-sjt", status="completed", assessment_id="asm-sjt"),
    ]
    return {
        "participants": FakeParticipantRepository(participants),
        "responses": FakeResponseRepository(),
        "questions": FakeQuestionRepository({
            "asm-sjt": list(sjt_questions.values()) + [mcq_question("q-mcq-1", {"index": 2})],
            "asm-lik": list(likert_questions.values()),
        }),
    }


@pytest.fixture
def submission_service(submission_store):
    return SubmissionService(
        participant_repo=submission_store["participants"],
        response_repo=submission_store["responses"],
        question_repo=submission_store["questions"],
    )


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def client(recalculation_service, submission_service):
    """TestClient with services wired to the in-memory stores."""
    app.dependency_overrides[get_recalculation_service] = lambda: recalculation_service
    app.dependency_overrides[get_submission_service] = lambda: submission_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
