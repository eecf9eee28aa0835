"""
TOPSIS scoring engine.

Ranks options by their relative closeness to the ideal-best and distance
from the ideal-worst point in weighted, vector-normalized criterion space.
"""
import numpy as np
import pandas as pd
from dataclasses import dataclass, asdict
from typing import Dict, List, Any, Sequence, Tuple

from ..core.logging_utils import get_logger
from ..data_io.schema import (
    Criterion,
    CriterionLike,
    as_criteria,
    build_decision_matrix,
    option_label
)


@dataclass(frozen=True)
class TopsisResult:
    """One ranked option."""
    name: str
    total: float  # closeness coefficient in [0, 1]
    s_plus: float  # distance to ideal best
    s_minus: float  # distance to ideal worst
    index: int  # position in the caller's option list

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def normalize_matrix(matrix: np.ndarray) -> np.ndarray:
    """
    Normalize decision matrix using vector normalization.

    An all-zero column keeps a norm of 1, so it normalizes to zeros.

    Args:
        matrix: Decision matrix (alternatives x criteria)

    Returns:
        Normalized matrix
    """
    matrix = np.asarray(matrix, dtype=float)
    with np.errstate(over='ignore'):
        norms = np.sqrt(np.sum(matrix ** 2, axis=0))
    norms[norms == 0] = 1.0
    return matrix / norms


def weight_matrix(norm_matrix: np.ndarray, weights: Sequence[float]) -> np.ndarray:
    """Scale each normalized column by its criterion weight."""
    return norm_matrix * np.asarray(weights, dtype=float)


def ideal_solutions(
    weighted_matrix: np.ndarray,
    criteria: Sequence[Criterion]
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Ideal best (A+) and ideal worst (A-) per criterion.

    Benefit criteria take the column max as best, cost criteria the min.
    """
    n_criteria = weighted_matrix.shape[1]
    ideal = np.zeros(n_criteria)
    anti_ideal = np.zeros(n_criteria)

    for j, c in enumerate(criteria):
        col = weighted_matrix[:, j]
        if c.is_benefit:
            ideal[j] = np.max(col)
            anti_ideal[j] = np.min(col)
        else:
            ideal[j] = np.min(col)
            anti_ideal[j] = np.max(col)

    return ideal, anti_ideal


def separation_distances(
    weighted_matrix: np.ndarray,
    ideal: np.ndarray,
    anti_ideal: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """Euclidean distances of every option to A+ (S+) and A- (S-)."""
    d_plus = np.sqrt(np.sum((weighted_matrix - ideal) ** 2, axis=1))
    d_minus = np.sqrt(np.sum((weighted_matrix - anti_ideal) ** 2, axis=1))
    return d_plus, d_minus


def closeness_coefficients(d_plus: np.ndarray, d_minus: np.ndarray) -> np.ndarray:
    """S- / (S+ + S-), or 0 where both distances are 0."""
    denom = d_plus + d_minus
    closeness = np.zeros_like(denom)
    np.divide(d_minus, denom, out=closeness, where=denom != 0)
    return closeness


def evaluate(
    criteria: Sequence[CriterionLike],
    options: Sequence[Any],
    scores: Any
) -> List[TopsisResult]:
    """
    TOPSIS (Technique for Order Preference by Similarity to Ideal Solution).

    Args:
        criteria: Criteria as Criterion objects or {name, weight, type} mappings
        options: Option labels, positionally aligned with score rows
        scores: Indexable by option position, each row mapping criterion
            name to raw score

    Returns:
        Results sorted by closeness coefficient, best first. Equal
        coefficients keep their input order.
    """
    logger = get_logger()

    criteria = as_criteria(criteria)
    options = list(options)
    if not criteria or not options:
        return []

    # Step 1: Raw decision matrix
    matrix = build_decision_matrix(criteria, options, scores)

    # Step 2: Normalize matrix
    norm_matrix = normalize_matrix(matrix)

    # Step 3: Weighted normalized matrix
    weighted = weight_matrix(norm_matrix, [c.weight for c in criteria])

    # Step 4: Ideal and anti-ideal solutions
    ideal, anti_ideal = ideal_solutions(weighted, criteria)

    # Step 5: Distance to ideal and anti-ideal
    d_plus, d_minus = separation_distances(weighted, ideal, anti_ideal)

    # Step 6: Relative closeness (higher is better)
    closeness = closeness_coefficients(d_plus, d_minus)

    results = [
        TopsisResult(
            name=option_label(name, i),
            total=float(closeness[i]),
            s_plus=float(d_plus[i]),
            s_minus=float(d_minus[i]),
            index=i
        )
        for i, name in enumerate(options)
    ]

    # Step 7: sort descending; sorted() is stable
    results = sorted(results, key=lambda r: r.total, reverse=True)

    logger.debug(f"TOPSIS ranking complete. Best: {results[0].name} ({results[0].total:.4f})")

    return results


def results_to_frame(results: Sequence[TopsisResult]) -> pd.DataFrame:
    """
    Tabulate ranked results.

    Returns:
        DataFrame with columns rank, name, total, s_plus, s_minus, index
    """
    columns = ['rank', 'name', 'total', 's_plus', 's_minus', 'index']
    rows = [dict(rank=i + 1, **r.to_dict()) for i, r in enumerate(results)]
    return pd.DataFrame(rows, columns=columns)
