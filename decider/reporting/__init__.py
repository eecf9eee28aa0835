"""
Reporting module for the decider framework.
High-resolution plotting and markdown reports.
"""
from .plots import (
    set_plot_style,
    plot_closeness_ranking,
    plot_separation_distances,
    plot_what_if_comparison,
    plot_weight_sensitivity_heatmap
)
from .summary import render_explanation_markdown, save_explanation_markdown

__all__ = [
    'set_plot_style',
    'plot_closeness_ranking',
    'plot_separation_distances',
    'plot_what_if_comparison',
    'plot_weight_sensitivity_heatmap',
    'render_explanation_markdown',
    'save_explanation_markdown'
]
