"""
Loading utilities for decision files, score tables and suggested criteria.
"""
import json
import re
import pandas as pd
import yaml
from pathlib import Path
from typing import Optional, Tuple, Dict, Any, List, Sequence, Union

from ..core.logging_utils import get_logger
from .schema import Criterion, DecisionProblem, as_criteria

YAML_SUFFIXES = {'.yaml', '.yml'}
TABLE_SUFFIXES = {'.csv', '.xlsx', '.xls'}

_CODE_FENCE = re.compile(r"```(?:json)?")


def read_decision_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a raw decision file (YAML or JSON).

    A `score_table` entry is resolved relative to the decision file and
    replaces `options`/`scores` with the table contents.
    """
    logger = get_logger()
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Decision file not found: {path}")

    logger.info(f"Loading decision from: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(f)
        elif path.suffix.lower() == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported decision file format: {path.suffix}")

    if not isinstance(data, dict):
        raise ValueError(f"Decision file must contain a mapping, got {type(data).__name__}")

    data = dict(data)
    table = data.pop('score_table', None)
    if table is not None:
        table_path = Path(table)
        if not table_path.is_absolute():
            table_path = path.parent / table_path
        options, scores = load_score_table(table_path)
        data['options'] = options
        data['scores'] = scores

    data.setdefault('criteria', [])
    data.setdefault('options', [])
    data['scores'] = align_scores(data['options'], data.get('scores'))

    logger.info(f"Loaded {len(data['criteria'])} criteria, {len(data['options'])} options")
    return data


def align_scores(options: Sequence[Any], scores: Any) -> List[Dict[str, Any]]:
    """
    Turn scores into a list of rows aligned with options.

    Accepts a list of rows (positional) or a mapping keyed by option label.
    """
    if scores is None:
        return [{} for _ in options]
    if isinstance(scores, dict):
        by_label = {str(k).strip(): v for k, v in scores.items()}
        return [dict(by_label.get(str(o).strip()) or {}) for o in options]
    return [dict(row) if isinstance(row, dict) else {} for row in scores]


def problem_from_dict(data: Dict[str, Any]) -> DecisionProblem:
    """Build a DecisionProblem from raw decision data."""
    return DecisionProblem(
        criteria=as_criteria(data.get('criteria') or []),
        options=list(data.get('options') or []),
        scores=align_scores(data.get('options') or [], data.get('scores'))
    )


def load_decision(path: Union[str, Path]) -> DecisionProblem:
    """Load a decision problem from a YAML or JSON file."""
    return problem_from_dict(read_decision_file(path))


def load_score_table(path: Union[str, Path]) -> Tuple[List[str], List[Dict[str, float]]]:
    """
    Load a score table (CSV or Excel).

    The first column holds option labels, remaining columns are criteria.
    Empty cells are left out of the rows so they count as missing.

    Args:
        path: Path to the table

    Returns:
        Option labels and score rows in table order
    """
    logger = get_logger()
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Score table not found: {path}")

    suffix = path.suffix.lower()
    if suffix == '.csv':
        df = pd.read_csv(path, index_col=0)
    elif suffix in TABLE_SUFFIXES:
        df = pd.read_excel(path, index_col=0)
    else:
        raise ValueError(f"Unsupported score table format: {path.suffix}")

    options = ['' if pd.isna(o) else str(o) for o in df.index]
    scores = [
        {str(col): value.item() if hasattr(value, 'item') else value
         for col, value in row.items() if not pd.isna(value)}
        for _, row in df.iterrows()
    ]

    logger.info(f"Loaded score table: {len(df)} options x {len(df.columns)} criteria")
    return options, scores


def criteria_from_payload(
    payload: Union[str, bytes, Dict[str, Any]],
    count: Optional[Any] = None
) -> List[Criterion]:
    """
    Parse the criteria-suggestion service response.

    The response is a JSON object with a `criteria` array of
    {name, weight, type}; it may arrive wrapped in a markdown code fence.

    Args:
        payload: Response body, text or already-decoded mapping
        count: Requested number of criteria; extra entries are dropped

    Returns:
        List of criteria
    """
    logger = get_logger()

    limit = None
    if count is not None:
        try:
            limit = int(count)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid criteria count: {count!r}")
        if limit <= 0:
            raise ValueError(f"Invalid criteria count: {count!r}")

    if isinstance(payload, bytes):
        payload = payload.decode('utf-8')
    if isinstance(payload, str):
        cleaned = _CODE_FENCE.sub('', payload).strip()
        try:
            payload = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid criteria JSON: {cleaned[:200]}")
            raise ValueError(f"Invalid criteria JSON: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get('criteria'), list):
        raise ValueError("Invalid criteria structure: expected an object with a 'criteria' array")

    items = [c for c in payload['criteria'] if isinstance(c, dict)]
    if limit is not None:
        items = items[:limit]
    return as_criteria(items)


def save_results(results: Sequence[Any], path: Union[str, Path]) -> pd.DataFrame:
    """Save ranked results to CSV."""
    from ..decision.mcda import results_to_frame

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = results_to_frame(results)
    df.to_csv(path, index=False)
    get_logger().info(f"Saved ranking to: {path}")
    return df
