"""
Core module for the decider framework.
"""
from .config import (
    Config,
    ExplanationConfig,
    SensitivityConfig,
    OutputConfig,
    create_run_directories,
    get_default_config,
    get_latest_run_id
)
from .logging_utils import (
    setup_logging,
    get_logger,
    log_validation,
    log_ranking,
    LogContext
)
from .utils import (
    load_json,
    save_json,
    relative_gap,
    format_number,
    DecisionEncoder
)

__all__ = [
    'Config', 'ExplanationConfig', 'SensitivityConfig', 'OutputConfig',
    'create_run_directories', 'get_default_config', 'get_latest_run_id',
    'setup_logging', 'get_logger', 'log_validation', 'log_ranking', 'LogContext',
    'load_json', 'save_json', 'relative_gap', 'format_number', 'DecisionEncoder'
]
