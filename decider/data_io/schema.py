"""
Decision data model and the default-substitution rules for loose input.

All coercion of caller-supplied values (weights, criterion types, option
labels, raw scores) happens here, so the engine and the explanation
generator see the same numbers.
"""
import math
from dataclasses import dataclass, field, replace
from typing import Dict, List, Any, Mapping, Optional, Sequence, Union
from pathlib import Path

import numpy as np
import yaml

BENEFIT = 'benefit'
COST = 'cost'

WEIGHT_MIN = 1.0
WEIGHT_MAX = 10.0
DEFAULT_WEIGHT = 1.0
MISSING_SCORE = 0.0


def coerce_weight(value: Any) -> float:
    """
    Coerce a raw weight to the [1, 10] range.

    Missing, non-numeric, NaN and zero weights become 1; everything else is
    clamped (so 15 -> 10 and -3 -> 1).
    """
    try:
        weight = float(value)
    except (TypeError, ValueError):
        return DEFAULT_WEIGHT
    if math.isnan(weight) or weight == 0:
        return DEFAULT_WEIGHT
    return max(WEIGHT_MIN, min(WEIGHT_MAX, weight))


def coerce_type(value: Any) -> str:
    """Anything other than 'benefit' is optimized as a cost criterion."""
    if value is None:
        return BENEFIT
    return BENEFIT if str(value).strip().lower() == BENEFIT else COST


def coerce_score(value: Any) -> float:
    """Missing, non-numeric and non-finite scores count as 0."""
    try:
        score = float(value)
    except (TypeError, ValueError):
        return MISSING_SCORE
    if not math.isfinite(score):
        return MISSING_SCORE
    return score


def option_label(name: Any, index: int) -> str:
    """Trimmed option label, or a positional placeholder when empty."""
    label = str(name).strip() if name is not None else ''
    return label or f"Option {index + 1}"


@dataclass
class Criterion:
    """
    A weighted decision criterion.

    The weight is coerced on construction, so a Criterion always carries the
    value the engine will use.
    """
    name: str
    weight: float = DEFAULT_WEIGHT
    type: str = BENEFIT

    def __post_init__(self):
        self.name = str(self.name)
        self.weight = coerce_weight(self.weight)
        self.type = coerce_type(self.type)

    @property
    def is_benefit(self) -> bool:
        return self.type == BENEFIT

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'weight': self.weight, 'type': self.type}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Criterion':
        return cls(
            name=data.get('name', ''),
            weight=data.get('weight', DEFAULT_WEIGHT),
            type=data.get('type', BENEFIT)
        )


CriterionLike = Union[Criterion, Mapping[str, Any]]


def as_criterion(value: CriterionLike) -> Criterion:
    """Accept a Criterion or a {name, weight, type} mapping."""
    if isinstance(value, Criterion):
        return value
    return Criterion.from_dict(value)


def as_criteria(values: Sequence[CriterionLike]) -> List[Criterion]:
    return [as_criterion(c) for c in values]


def score_row(scores: Any, index: int) -> Mapping[str, Any]:
    """Scores of one option, or an empty mapping if the row is absent."""
    if scores is None:
        return {}
    try:
        row = scores[index]
    except (IndexError, KeyError, TypeError):
        return {}
    if not isinstance(row, Mapping):
        return {}
    return row


def get_score(scores: Any, index: int, criterion_name: str) -> float:
    """Coerced raw score of option `index` on a criterion."""
    return coerce_score(score_row(scores, index).get(criterion_name))


def build_decision_matrix(
    criteria: Sequence[CriterionLike],
    options: Sequence[Any],
    scores: Any
) -> np.ndarray:
    """
    Build the raw decision matrix (options x criteria).

    Args:
        criteria: Criteria in column order
        options: Options in row order
        scores: Indexable by option position, each row mapping criterion
            name to raw score

    Returns:
        Float matrix with missing entries substituted by 0
    """
    criteria = as_criteria(criteria)
    matrix = np.zeros((len(options), len(criteria)), dtype=float)
    for i in range(len(options)):
        row = score_row(scores, i)
        for j, c in enumerate(criteria):
            matrix[i, j] = coerce_score(row.get(c.name))
    return matrix


@dataclass
class DecisionProblem:
    """Criteria, options and the score matrix of one decision."""
    criteria: List[Criterion] = field(default_factory=list)
    options: List[str] = field(default_factory=list)
    scores: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self):
        self.criteria = as_criteria(self.criteria)
        self.options = list(self.options)
        self.scores = list(self.scores)

    @property
    def labels(self) -> List[str]:
        return [option_label(o, i) for i, o in enumerate(self.options)]

    def with_weights(self, weights: Mapping[str, Any]) -> 'DecisionProblem':
        """Return a copy whose named criteria carry new weights."""
        criteria = [
            replace(c, weight=weights[c.name]) if c.name in weights else replace(c)
            for c in self.criteria
        ]
        return DecisionProblem(
            criteria=criteria,
            options=list(self.options),
            scores=[dict(row) for row in self.scores]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'criteria': [c.to_dict() for c in self.criteria],
            'options': list(self.options),
            'scores': [dict(row) for row in self.scores]
        }

    def save(self, path: Union[str, Path]):
        """Save problem to a YAML decision file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def _is_number(value: Any) -> bool:
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True


def _is_valid_score(value: Any) -> bool:
    return _is_number(value) and math.isfinite(float(value))


def validate_problem(problem: DecisionProblem, raw_criteria: Optional[Sequence[Any]] = None) -> Dict[str, Any]:
    """
    Validate a decision problem before evaluation.

    The engine itself accepts anything; this reports the caller-level errors
    (empty inputs, duplicate criterion names) and warns about values that
    will be coerced.

    Args:
        problem: DecisionProblem instance
        raw_criteria: Criteria as originally supplied (mappings), used to
            report weights and types that coercion changed

    Returns:
        Validation results dictionary
    """
    results = {
        'valid': True,
        'errors': [],
        'warnings': []
    }

    if not problem.criteria:
        results['errors'].append("At least one criterion is required")
    if not problem.options:
        results['errors'].append("At least one option is required")

    names = [c.name for c in problem.criteria]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        results['errors'].append(
            f"Criterion names must be unique, duplicated: {duplicates}"
        )

    for raw in raw_criteria or []:
        if not isinstance(raw, Mapping):
            continue
        name = raw.get('name', '')
        weight = raw.get('weight')
        if not _is_number(weight):
            results['warnings'].append(
                f"Criterion '{name}' has non-numeric weight {weight!r}, using {DEFAULT_WEIGHT:g}"
            )
        elif float(weight) != coerce_weight(weight):
            results['warnings'].append(
                f"Criterion '{name}' weight {weight} adjusted to {coerce_weight(weight):g}"
            )
        raw_type = raw.get('type')
        if raw_type is not None and str(raw_type).strip().lower() not in (BENEFIT, COST):
            results['warnings'].append(
                f"Criterion '{name}' has unknown type {raw_type!r}, treated as cost"
            )

    for i, option in enumerate(problem.options):
        if option is None or not str(option).strip():
            results['warnings'].append(f"Option {i + 1} has no name, using placeholder")

    if len(problem.scores) != len(problem.options):
        results['warnings'].append(
            f"{len(problem.scores)} score rows for {len(problem.options)} options"
        )

    known = set(names)
    missing = []
    for i, label in enumerate(problem.labels):
        row = score_row(problem.scores, i)
        for c in problem.criteria:
            if not _is_valid_score(row.get(c.name)):
                missing.append(f"{label}/{c.name}")
        unknown = [k for k in row if k not in known]
        if unknown:
            results['warnings'].append(f"Scores for unknown criteria on {label}: {unknown}")

    if missing:
        results['warnings'].append(
            f"{len(missing)} missing or non-numeric scores treated as 0: {missing[:5]}"
        )

    results['valid'] = not results['errors']
    return results
