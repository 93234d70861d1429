from enum import Enum

class QuestionType(str, Enum):
    MCQ_SINGLE = "mcq_single"        # One correct option index
    MCQ_MULTI = "mcq_multi"          # Set of correct option indices
    SJT_RANKING = "sjt_ranking"      # Situational judgment, options ranked by effectiveness
    LIKERT = "likert"                # Trait scale, no correctness

class ScoringKind(str, Enum):
    RANKED = "ranked"                # Best-scoring option counts as correct
    CHOICE = "choice"                # Compared against correct_answer
    TRAIT = "trait"                  # Feeds a trait average

class ParticipantStatus(str, Enum):
    INVITED = "invited"
    STARTED = "started"
    COMPLETED = "completed"

class SubmissionType(str, Enum):
    NORMAL = "normal"
    AUTO_SUBMITTED = "auto_submitted"
    TIME_EXPIRED = "time_expired"

class TraitDirection(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"

class OutcomeStatus(str, Enum):
    RECALCULATED = "recalculated"
    SKIPPED = "skipped"
    FAILED = "failed"
