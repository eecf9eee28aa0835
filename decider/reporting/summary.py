"""
Markdown report of a ranking and its explanation.
"""
from pathlib import Path
from typing import Optional, Sequence, Union

from ..decision.explanation import Explanation
from ..decision.mcda import TopsisResult

SECTIONS = [
    ('strengths', 'Strengths'),
    ('weaknesses', 'Weaknesses'),
    ('tradeoffs', 'Trade-offs vs runner-up'),
]


def render_explanation_markdown(
    explanation: Optional[Explanation],
    results: Sequence[TopsisResult] = (),
    title: str = "Decision Report"
) -> str:
    """Assemble a markdown document; emphasis markers pass through as is."""
    lines = [f"# {title}", ""]

    if explanation is None:
        lines.append("No options were ranked.")
        return "\n".join(lines) + "\n"

    lines += [explanation.summary, ""]

    for attr, heading in SECTIONS:
        items = getattr(explanation, attr)
        if not items:
            continue
        lines += [f"## {heading}", ""]
        lines += [f"- {item}" for item in items]
        lines.append("")

    if results:
        lines += ["## Ranking", "", "| # | Option | Score | S+ | S- |", "|---|---|---|---|---|"]
        for i, r in enumerate(results):
            lines.append(
                f"| {i + 1} | {r.name} | {r.total * 100:.1f} | {r.s_plus:.3f} | {r.s_minus:.3f} |"
            )
        lines.append("")

    return "\n".join(lines)


def save_explanation_markdown(
    explanation: Optional[Explanation],
    path: Union[str, Path],
    results: Sequence[TopsisResult] = (),
    title: str = "Decision Report"
) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_explanation_markdown(explanation, results, title), encoding='utf-8')
    return path
