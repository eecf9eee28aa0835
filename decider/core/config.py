"""
Configuration management for the decider framework.

A run is configured by three YAML sections (`explanation`, `sensitivity`,
`output`); omitted keys keep their defaults.
"""
import yaml
from dataclasses import dataclass, field, asdict, fields
from typing import Dict, Any, Optional, Union
from pathlib import Path
from datetime import datetime

from .logging_utils import get_logger

RUN_PREFIX = "run_"


@dataclass
class ExplanationConfig:
    """Explanation generator configuration."""
    min_statement_weight: float = 5.0  # criteria below this get no strength/weakness
    high_priority_weight: float = 8.0
    n_tradeoff_criteria: int = 3
    emphasis_marker: str = "**"

    def __post_init__(self):
        if self.high_priority_weight < self.min_statement_weight:
            raise ValueError(
                f"high_priority_weight ({self.high_priority_weight}) must not be below "
                f"min_statement_weight ({self.min_statement_weight})"
            )
        if self.n_tradeoff_criteria < 0:
            raise ValueError(f"n_tradeoff_criteria must be >= 0, got {self.n_tradeoff_criteria}")


@dataclass
class SensitivityConfig:
    """What-if and sensitivity analysis configuration."""
    run_weight_sensitivity: bool = True
    run_criterion_removal: bool = True
    perturbation: float = 0.2  # +/-20% of each weight

    def __post_init__(self):
        if not 0 < self.perturbation < 1:
            raise ValueError(f"perturbation must be in (0, 1), got {self.perturbation}")


@dataclass
class OutputConfig:
    """Where and how run artifacts are written."""
    base_dir: str = "outputs"
    figure_dpi: int = 300
    figure_format: str = "png"
    save_figures: bool = True


def _section(cls, data: Any, name: str):
    """Build a config section, ignoring unknown keys."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        get_logger().warning(f"Ignoring unknown keys in '{name}': {unknown}")
    return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class Config:
    """Main configuration container."""
    explanation: ExplanationConfig = field(default_factory=ExplanationConfig)
    sensitivity: SensitivityConfig = field(default_factory=SensitivityConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    run_id: Optional[str] = None

    def __post_init__(self):
        if self.run_id is None:
            self.run_id = datetime.now().strftime(f"{RUN_PREFIX}%Y%m%d_%H%M%S")

    @property
    def run_dir(self) -> Path:
        return Path(self.output.base_dir) / "runs" / self.run_id

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        return cls(
            explanation=_section(ExplanationConfig, data.get('explanation'), 'explanation'),
            sensitivity=_section(SensitivityConfig, data.get('sensitivity'), 'sensitivity'),
            output=_section(OutputConfig, data.get('output'), 'output'),
            run_id=data.get('run_id')
        )

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the config as YAML; defaults to the run's snapshot directory."""
        path = Path(path) if path is not None else self.run_dir / "configs_snapshot" / "config.yaml"
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
        return path

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'Config':
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        return cls.from_dict(data)


def create_run_directories(config: Config) -> Dict[str, Path]:
    """Create the output tree of a run and return its directories by name."""
    run_dir = config.run_dir
    dirs = {'root': run_dir}
    for name in ('logs', 'tables', 'figures', 'reports', 'configs_snapshot'):
        dirs[name] = run_dir / name
    for d in dirs.values():
        d.mkdir(parents=True, exist_ok=True)
    return dirs


def get_latest_run_id(base_dir: Union[str, Path] = "outputs") -> Optional[str]:
    """Most recent run_id; timestamped ids sort chronologically."""
    runs_dir = Path(base_dir) / "runs"
    if not runs_dir.exists():
        return None
    run_ids = [d.name for d in runs_dir.iterdir() if d.is_dir() and d.name.startswith(RUN_PREFIX)]
    return max(run_ids) if run_ids else None


def get_default_config() -> Config:
    """Get default configuration."""
    return Config()
