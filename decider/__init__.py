"""
Decider
=======

A small framework for ranking discrete options against weighted,
possibly conflicting criteria:
- TOPSIS scoring with benefit and cost criteria
- Deterministic plain-language explanation of the winner
- What-if comparison of committed vs sandbox weights
- Weight perturbation and criterion removal sensitivity
- High-resolution visualization and markdown reports

Modules:
    core: Configuration, logging and utilities
    data_io: Decision data model, validation and loading
    decision: TOPSIS engine, explanations, sensitivity analysis
    reporting: Visualization and reports
"""

__version__ = "1.0.0"

from . import core
from . import data_io
from . import decision
from . import reporting

from .decision import evaluate, explain, compare_what_if
