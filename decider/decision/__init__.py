"""
Decision making module for the decider framework.
TOPSIS ranking, ranking explanations, what-if and sensitivity analysis.
"""
from .mcda import (
    TopsisResult,
    normalize_matrix,
    weight_matrix,
    ideal_solutions,
    separation_distances,
    closeness_coefficients,
    evaluate,
    results_to_frame
)
from .explanation import Explanation, explain, weight_label
from .sensitivity import (
    rank_map,
    with_weights,
    WhatIfComparison,
    compare_what_if,
    weight_sensitivity,
    criterion_removal_sensitivity,
    compute_rank_stability_score,
    option_key
)

__all__ = [
    'TopsisResult',
    'normalize_matrix',
    'weight_matrix',
    'ideal_solutions',
    'separation_distances',
    'closeness_coefficients',
    'evaluate',
    'results_to_frame',
    # Explanations
    'Explanation',
    'explain',
    'weight_label',
    # What-if and sensitivity analysis
    'rank_map',
    'with_weights',
    'WhatIfComparison',
    'compare_what_if',
    'weight_sensitivity',
    'criterion_removal_sensitivity',
    'compute_rank_stability_score',
    'option_key'
]
