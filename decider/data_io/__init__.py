"""
Data I/O module for the decider framework.
"""
from .schema import (
    BENEFIT,
    COST,
    Criterion,
    DecisionProblem,
    as_criterion,
    as_criteria,
    coerce_weight,
    coerce_type,
    coerce_score,
    option_label,
    score_row,
    get_score,
    build_decision_matrix,
    validate_problem
)
from .loader import (
    read_decision_file,
    align_scores,
    problem_from_dict,
    load_decision,
    load_score_table,
    criteria_from_payload,
    save_results
)

__all__ = [
    'BENEFIT', 'COST', 'Criterion', 'DecisionProblem',
    'as_criterion', 'as_criteria', 'coerce_weight', 'coerce_type',
    'coerce_score', 'option_label', 'score_row', 'get_score',
    'build_decision_matrix', 'validate_problem',
    'read_decision_file', 'align_scores', 'problem_from_dict',
    'load_decision', 'load_score_table', 'criteria_from_payload',
    'save_results'
]
