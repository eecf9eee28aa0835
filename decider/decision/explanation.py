"""
Plain-language explanation of a TOPSIS ranking.

Narrates why the top-ranked option won from the same inputs the engine
used. The ranking itself is taken as given.
"""
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Any, Optional, Sequence

from ..core.logging_utils import get_logger
from ..core.utils import format_number, relative_gap
from ..data_io.schema import CriterionLike, as_criteria, get_score, option_label
from .mcda import TopsisResult


@dataclass
class Explanation:
    """Summary sentence plus strengths, weaknesses and tradeoffs of the winner."""
    summary: str
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    tradeoffs: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def weight_label(weight: float, high_priority_weight: float = 8.0,
                 min_statement_weight: float = 5.0) -> str:
    """Priority wording for a criterion weight ("high-priority", ...)."""
    if weight >= high_priority_weight:
        return "high-priority"
    if weight >= min_statement_weight:
        return "moderately weighted"
    return "lower-priority"


def _option_position(result: Any, options: Sequence[Any]) -> Optional[int]:
    """Score row of a result: its `index`, else the first option with its label."""
    index = getattr(result, 'index', None)
    if isinstance(index, int):
        return index
    name = str(result.name).strip()
    for i, option in enumerate(options):
        if option_label(option, i) == name:
            return i
    return None


def _summary(
    winner: TopsisResult,
    runner_up: Optional[TopsisResult],
    em: str
) -> str:
    head = f"{em}{winner.name}{em} ranked #1 with a TOPSIS score of {winner.total * 100:.1f}/100"
    if runner_up is None:
        return head + "."

    lead = f"leading {em}{runner_up.name}{em}"
    gap_pct = relative_gap(winner.total, runner_up.total)
    if gap_pct is not None:
        lead += f" by {gap_pct:.1f}%"

    return (
        f"{head}, {lead}. "
        f"It had the shortest distance to the ideal solution (S⁺ = {winner.s_plus:.3f}) "
        f"and the longest distance from the worst (S⁻ = {winner.s_minus:.3f}), "
        f"compared with S⁺ = {runner_up.s_plus:.3f} and S⁻ = {runner_up.s_minus:.3f} "
        f"for {em}{runner_up.name}{em}."
    )


def explain(
    results: Sequence[TopsisResult],
    criteria: Sequence[CriterionLike],
    options: Sequence[Any],
    scores: Any,
    min_statement_weight: float = 5.0,
    high_priority_weight: float = 8.0,
    n_tradeoff_criteria: int = 3,
    emphasis_marker: str = "**"
) -> Optional[Explanation]:
    """
    Explain why the top-ranked option won.

    Results need `name`, `total`, `s_plus` and `s_minus`. Scores are read
    by the result's `index`; results without one are matched to the first
    option with the same trimmed label, and unmatched ones score 0.

    Args:
        results: Ranked results from evaluate(), best first
        criteria: Criteria used for the ranking
        options: Option labels, positionally aligned with score rows
        scores: Score matrix used for the ranking
        min_statement_weight: Criteria weighted below this are not discussed
            as strengths or weaknesses
        high_priority_weight: Weight at which a criterion is "high-priority"
        n_tradeoff_criteria: How many top-weighted criteria to compare
            against the runner-up
        emphasis_marker: Delimiter wrapped around emphasized spans

    Returns:
        Explanation, or None when there is nothing ranked
    """
    if not results:
        return None

    logger = get_logger()
    em = emphasis_marker

    winner = results[0]
    runner_up = results[1] if len(results) > 1 else None
    winner_pos = _option_position(winner, options)
    runner_up_pos = _option_position(runner_up, options) if runner_up is not None else None

    # Most influential criteria first
    sorted_criteria = sorted(as_criteria(criteria), key=lambda c: c.weight, reverse=True)
    n_options = len(options)

    strengths = []
    weaknesses = []
    tradeoffs = []

    for c in sorted_criteria:
        if c.weight < min_statement_weight:
            continue

        winner_score = get_score(scores, winner_pos, c.name)
        column = [get_score(scores, i, c.name) for i in range(n_options)] or [winner_score]

        avg_score = sum(column) / len(column)
        is_top = winner_score == max(column)
        is_low = winner_score == min(column)

        label = weight_label(c.weight, high_priority_weight, min_statement_weight)
        score_txt = format_number(winner_score)
        weight_txt = format_number(c.weight)

        if c.is_benefit:
            if is_top:
                strengths.append(
                    f"Scored highest on {em}{c.name}{em} ({score_txt}) among all options, "
                    f"a {label} criterion (weight {weight_txt})."
                )
            elif winner_score > avg_score:
                strengths.append(
                    f"Performed above average on {em}{c.name}{em} ({score_txt} vs avg "
                    f"{avg_score:.1f}), a {label} factor."
                )
            elif is_low:
                weaknesses.append(
                    f"Scored lowest on {em}{c.name}{em} ({score_txt}), a {label} criterion, "
                    f"partially offset by stronger performance elsewhere."
                )
        else:
            if is_top:
                weaknesses.append(
                    f"Has the highest {em}{c.name}{em} ({score_txt}), which is undesirable "
                    f"for a cost criterion (weight {weight_txt})."
                )
            elif is_low:
                strengths.append(
                    f"Has the lowest {em}{c.name}{em} ({score_txt}), optimal for this "
                    f"cost criterion (weight {weight_txt})."
                )

    if runner_up is not None:
        for c in sorted_criteria[:n_tradeoff_criteria]:
            w_score = get_score(scores, winner_pos, c.name)
            r_score = get_score(scores, runner_up_pos, c.name)
            if w_score == r_score:
                continue

            winner_is_better = w_score > r_score if c.is_benefit else w_score < r_score
            if winner_is_better:
                tradeoffs.append(
                    f"Edges out {em}{runner_up.name}{em} on {em}{c.name}{em} "
                    f"({format_number(w_score)} vs {format_number(r_score)})."
                )
            else:
                tradeoffs.append(
                    f"{em}{runner_up.name}{em} beats it on {em}{c.name}{em} "
                    f"({format_number(r_score)} vs {format_number(w_score)}), "
                    f"but this was outweighed by other criteria."
                )

    logger.debug(
        f"Explanation for {winner.name}: {len(strengths)} strengths, "
        f"{len(weaknesses)} weaknesses, {len(tradeoffs)} tradeoffs"
    )

    return Explanation(
        summary=_summary(winner, runner_up, em),
        strengths=strengths,
        weaknesses=weaknesses,
        tradeoffs=tradeoffs
    )
