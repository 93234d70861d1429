"""
scoring/ - Assessment Scoring Engine

Modules:
    utils.py                  - Rounding and number coercion helpers
    option_scorer.py          - Option point values + four-tier category table
    question_classifier.py    - Question normalization into ScoringKind variants
    response_evaluator.py     - Per-response correctness and score value
    aggregator.py             - Participant score summary (percentage / trait / mixed)
    grade_assigner.py         - Percentage -> letter grade bands
"""
