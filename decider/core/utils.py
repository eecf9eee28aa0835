"""
General utilities for the decider framework.
"""
import numpy as np
import pandas as pd
import json
import math
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Optional, Union


def load_json(path: Union[str, Path]) -> Any:
    """Load data from JSON file."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def relative_gap(value: float, reference: float) -> Optional[float]:
    """
    Percentage by which `value` exceeds `reference`.

    Returns None when the reference is zero, where a relative lead is
    undefined.
    """
    if reference == 0:
        return None
    return (value - reference) / reference * 100


def format_number(value: Any) -> str:
    """
    Format a number for narrative text.

    Whole numbers are printed without a decimal part (9.0 -> "9"), other
    finite values use the shortest round-trip representation.
    """
    value = float(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


class DecisionEncoder(json.JSONEncoder):
    """JSON encoder for numpy/pandas values and result dataclasses."""

    def default(self, obj):
        if is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.bool_):
            return bool(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, pd.DataFrame):
            return obj.to_dict(orient='records')
        elif isinstance(obj, pd.Series):
            return obj.to_dict()
        return super().default(obj)


def save_json(data: Any, path: Union[str, Path], indent: int = 2):
    """Save data to JSON, encoding numpy values and dataclasses."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, cls=DecisionEncoder, ensure_ascii=False)
