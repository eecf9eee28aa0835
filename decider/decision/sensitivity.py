"""
What-if and sensitivity analysis for TOPSIS rankings.

Every scenario evaluates its own criteria snapshot; the caller's criteria
are never modified.
"""
import pandas as pd
from dataclasses import dataclass, field, replace
from typing import Dict, List, Any, Mapping, Optional, Sequence, Tuple

from ..core.logging_utils import get_logger
from ..data_io.schema import Criterion, CriterionLike, as_criteria
from .mcda import TopsisResult, evaluate


def rank_map(results: Sequence[TopsisResult]) -> Dict[int, int]:
    """Option index -> 1-based rank."""
    return {r.index: pos + 1 for pos, r in enumerate(results)}


def with_weights(
    criteria: Sequence[CriterionLike],
    weights: Mapping[str, Any]
) -> List[Criterion]:
    """
    Copy criteria, replacing the weights of those named in `weights`.

    Names not present among the criteria are ignored.
    """
    return [
        replace(c, weight=weights[c.name]) if c.name in weights else replace(c)
        for c in as_criteria(criteria)
    ]


@dataclass
class WhatIfComparison:
    """Committed ranking next to the ranking under sandbox weights."""
    baseline_criteria: List[Criterion]
    sandbox_criteria: List[Criterion]
    baseline: List[TopsisResult] = field(default_factory=list)
    live: List[TopsisResult] = field(default_factory=list)

    @property
    def baseline_ranks(self) -> Dict[int, int]:
        return rank_map(self.baseline)

    @property
    def live_ranks(self) -> Dict[int, int]:
        return rank_map(self.live)

    @property
    def rank_changes(self) -> Dict[int, int]:
        """Positive values mean the option moved down."""
        base = self.baseline_ranks
        return {idx: rank - base.get(idx, 0) for idx, rank in self.live_ranks.items()}

    @property
    def is_dirty(self) -> bool:
        return any(
            b.weight != s.weight
            for b, s in zip(self.baseline_criteria, self.sandbox_criteria)
        )

    @property
    def total_weight(self) -> float:
        return sum(c.weight for c in self.sandbox_criteria)

    @property
    def sandbox_weights(self) -> Dict[str, float]:
        return {c.name: c.weight for c in self.sandbox_criteria}

    @property
    def biggest_mover(self) -> Optional[Tuple[str, int]]:
        """Name and absolute rank shift of the option that moved most."""
        changes = self.rank_changes
        best = None
        best_delta = 0
        for r in self.live:
            delta = abs(changes.get(r.index, 0))
            if delta > best_delta:
                best, best_delta = r.name, delta
        return (best, best_delta) if best is not None else None

    def to_frame(self) -> pd.DataFrame:
        base_totals = {r.index: r.total for r in self.baseline}
        base_ranks = self.baseline_ranks
        rows = []
        for pos, r in enumerate(self.live):
            rows.append({
                'alternative': r.name,
                'index': r.index,
                'baseline_rank': base_ranks.get(r.index, 0),
                'live_rank': pos + 1,
                'rank_change': pos + 1 - base_ranks.get(r.index, 0),
                'baseline_total': base_totals.get(r.index, 0.0),
                'live_total': r.total
            })
        return pd.DataFrame(rows, columns=[
            'alternative', 'index', 'baseline_rank', 'live_rank',
            'rank_change', 'baseline_total', 'live_total'
        ])


def compare_what_if(
    criteria: Sequence[CriterionLike],
    options: Sequence[Any],
    scores: Any,
    sandbox_weights: Mapping[str, Any]
) -> WhatIfComparison:
    """
    Rank with committed weights and with sandbox weights side by side.

    Args:
        criteria: Committed criteria
        options: Option labels
        scores: Score matrix
        sandbox_weights: Criterion name -> trial weight

    Returns:
        WhatIfComparison holding both rankings
    """
    logger = get_logger()

    baseline_criteria = with_weights(criteria, {})
    sandbox_criteria = with_weights(criteria, sandbox_weights)

    comparison = WhatIfComparison(
        baseline_criteria=baseline_criteria,
        sandbox_criteria=sandbox_criteria,
        baseline=evaluate(baseline_criteria, options, scores),
        live=evaluate(sandbox_criteria, options, scores)
    )

    mover = comparison.biggest_mover
    if mover is not None:
        logger.info(f"What-if: biggest mover {mover[0]} ({mover[1]} places)")
    return comparison


def weight_sensitivity(
    criteria: Sequence[CriterionLike],
    options: Sequence[Any],
    scores: Any,
    perturbation: float = 0.2
) -> pd.DataFrame:
    """
    Analyze ranking sensitivity to weight perturbations.

    Tests how rankings change when each criterion weight is increased
    or decreased by the perturbation percentage. Perturbed weights are
    clamped to the usual [1, 10] range.

    Args:
        criteria: Criteria with base weights
        options: Option labels
        scores: Score matrix
        perturbation: Percentage perturbation (0.2 = +/-20%)

    Returns:
        DataFrame with perturbation analysis results
    """
    logger = get_logger()
    logger.info(f"Running weight sensitivity analysis (perturbation={perturbation*100}%)")

    criteria = as_criteria(criteria)
    base_ranking = evaluate(criteria, options, scores)
    base_ranks = rank_map(base_ranking)

    results = []
    for j, criterion in enumerate(criteria):
        for direction in ['increase', 'decrease']:
            factor = (1 + perturbation) if direction == 'increase' else (1 - perturbation)
            new_weight = criterion.weight * factor
            perturbed = with_weights(criteria, {criterion.name: new_weight})
            perturbed_ranking = evaluate(perturbed, options, scores)

            for pos, r in enumerate(perturbed_ranking):
                new_rank = pos + 1
                results.append({
                    'criterion': criterion.name,
                    'perturbation': direction,
                    'perturbation_pct': f"{'+' if direction == 'increase' else '-'}{int(round(perturbation*100))}%",
                    'base_weight': criterion.weight,
                    'new_weight': perturbed[j].weight,
                    'alternative': r.name,
                    'index': r.index,
                    'base_rank': base_ranks.get(r.index, 0),
                    'new_rank': new_rank,
                    'rank_change': new_rank - base_ranks.get(r.index, 0)
                })

    result_df = pd.DataFrame(results)
    logger.info(f"Weight sensitivity complete: {len(result_df)} records")
    return result_df


def criterion_removal_sensitivity(
    criteria: Sequence[CriterionLike],
    options: Sequence[Any],
    scores: Any
) -> pd.DataFrame:
    """
    Analyze ranking sensitivity to removing individual criteria.

    Tests rank stability by removing one criterion at a time. Needs at
    least two criteria.

    Returns:
        DataFrame with criterion removal analysis results
    """
    logger = get_logger()
    logger.info("Running criterion removal sensitivity analysis")

    criteria = as_criteria(criteria)
    if len(criteria) < 2:
        logger.warning("Criterion removal needs at least two criteria, skipping")
        return pd.DataFrame()

    base_ranks = rank_map(evaluate(criteria, options, scores))

    results = []
    for removed in range(len(criteria)):
        reduced = [c for j, c in enumerate(criteria) if j != removed]
        reduced_ranking = evaluate(reduced, options, scores)

        for pos, r in enumerate(reduced_ranking):
            new_rank = pos + 1
            base_rank = base_ranks.get(r.index, 0)
            results.append({
                'removed_criterion': criteria[removed].name,
                'alternative': r.name,
                'index': r.index,
                'base_rank': base_rank,
                'new_rank': new_rank,
                'rank_change': new_rank - base_rank,
                'rank_reversed': (base_rank == 1) != (new_rank == 1)
            })

    result_df = pd.DataFrame(results)
    logger.info(f"Criterion removal sensitivity complete: {len(result_df)} records")
    return result_df


def option_key(sensitivity_df: pd.DataFrame) -> str:
    """Column identifying an option: its position when present, else its label."""
    return 'index' if 'index' in sensitivity_df.columns else 'alternative'


def compute_rank_stability_score(sensitivity_df: pd.DataFrame) -> Dict[Any, float]:
    """
    Compute overall rank stability scores from sensitivity analysis.

    Options are told apart by their `index` column, so repeated labels
    are scored separately.

    Args:
        sensitivity_df: DataFrame from weight_sensitivity() or
            criterion_removal_sensitivity()

    Returns:
        Dict mapping option index (label for frames without an `index`
        column) to stability score (0-1, higher is more stable)
    """
    if 'rank_change' not in sensitivity_df.columns:
        return {}

    key = option_key(sensitivity_df)
    stability_scores = {}
    for value in sensitivity_df[key].unique():
        alt_data = sensitivity_df[sensitivity_df[key] == value]
        # Stability = proportion of scenarios with no rank change
        no_change = (alt_data['rank_change'] == 0).sum()
        total = len(alt_data)
        stability_scores[value.item() if hasattr(value, 'item') else value] = (
            float(no_change / total) if total > 0 else 0.0
        )

    return stability_scores
