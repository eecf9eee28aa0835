"""
High-resolution plotting for decision rankings.
"""
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from typing import Optional, Sequence, Tuple
from pathlib import Path

from ..decision.mcda import TopsisResult, results_to_frame
from ..decision.sensitivity import WhatIfComparison, option_key

# Set high-quality defaults with BIGGER, BOLDER text
plt.rcParams['figure.dpi'] = 300
plt.rcParams['savefig.dpi'] = 300
plt.rcParams['font.size'] = 14
plt.rcParams['font.weight'] = 'bold'
plt.rcParams['axes.labelsize'] = 16
plt.rcParams['axes.titlesize'] = 20
plt.rcParams['axes.labelweight'] = 'bold'
plt.rcParams['axes.titleweight'] = 'bold'
plt.rcParams['legend.fontsize'] = 12
plt.rcParams['xtick.labelsize'] = 12
plt.rcParams['ytick.labelsize'] = 12
plt.rcParams['axes.grid'] = True
plt.rcParams['grid.alpha'] = 0.3


def set_plot_style(style: str = 'seaborn-v0_8-whitegrid', dpi: int = 300):
    """Set matplotlib style and the resolution figures are saved at."""
    try:
        plt.style.use(style)
    except OSError:
        plt.style.use('default')
    plt.rcParams['savefig.dpi'] = dpi


def _save(fig: plt.Figure, output_path: Optional[Path]):
    if output_path:
        fig.savefig(output_path, dpi=plt.rcParams['savefig.dpi'],
                    bbox_inches='tight', facecolor='white')


def plot_closeness_ranking(
    results: Sequence[TopsisResult],
    title: str = "TOPSIS Ranking",
    output_path: Optional[Path] = None,
    figsize: Tuple[int, int] = (12, 6)
) -> plt.Figure:
    """
    Plot closeness coefficients as horizontal bars, best on top.

    Args:
        results: Ranked results, best first
        title: Plot title
        output_path: Path to save figure
        figsize: Figure size

    Returns:
        Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=figsize)

    df = results_to_frame(results).iloc[::-1]
    names = df['name'].values
    scores = df['total'].values

    # Best = green, worst = red
    colors = plt.cm.RdYlGn(np.linspace(0.2, 0.8, max(len(names), 1)))

    bars = ax.barh(names, scores, color=colors, edgecolor='black', alpha=0.8)

    for bar, score, rank in zip(bars, scores, df['rank'].values):
        ax.text(bar.get_width() + 0.01, bar.get_y() + bar.get_height()/2,
                f'#{rank} ({score:.3f})', ha='left', va='center', fontsize=10)

    ax.set_xlim(0, 1.15)
    ax.set_xlabel('Closeness Coefficient (higher is better)')
    ax.set_title(title, fontweight='bold')

    plt.tight_layout()
    _save(fig, output_path)
    return fig


def plot_separation_distances(
    results: Sequence[TopsisResult],
    title: str = "Distance to Ideal Best vs Ideal Worst",
    output_path: Optional[Path] = None,
    figsize: Tuple[int, int] = (10, 8)
) -> plt.Figure:
    """
    Scatter S+ against S- for every option; the winner is starred.

    Args:
        results: Ranked results, best first
        title: Plot title
        output_path: Path to save figure
        figsize: Figure size

    Returns:
        Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=figsize)
    df = results_to_frame(results)

    if len(df) > 1:
        rest = df.iloc[1:]
        ax.scatter(rest['s_plus'], rest['s_minus'], c='gray', alpha=0.7,
                   s=100, label='Other options', marker='o')
    if len(df) > 0:
        best = df.iloc[:1]
        ax.scatter(best['s_plus'], best['s_minus'], c='red', s=200,
                   label='Winner', marker='*', edgecolors='black', linewidths=1)

    for _, row in df.iterrows():
        ax.annotate(row['name'], (row['s_plus'], row['s_minus']),
                    textcoords="offset points", xytext=(5, 5), fontsize=9)

    ax.set_xlabel('S+ (distance to ideal best, lower is better)')
    ax.set_ylabel('S- (distance to ideal worst, higher is better)')
    ax.set_title(title, fontweight='bold')
    if len(df) > 0:
        ax.legend()

    plt.tight_layout()
    _save(fig, output_path)
    return fig


def plot_what_if_comparison(
    comparison: WhatIfComparison,
    title: str = "What-If: Committed vs Sandbox Weights",
    output_path: Optional[Path] = None,
    figsize: Tuple[int, int] = (12, 7)
) -> plt.Figure:
    """
    Grouped bars of closeness under committed and sandbox weights.

    Args:
        comparison: Result of compare_what_if()
        title: Plot title
        output_path: Path to save figure
        figsize: Figure size

    Returns:
        Matplotlib figure
    """
    df = comparison.to_frame()
    fig, ax = plt.subplots(figsize=figsize)

    x = np.arange(len(df))
    width = 0.4
    ax.bar(x - width/2, df['baseline_total'], width, label='Committed', color='steelblue')
    ax.bar(x + width/2, df['live_total'], width, label='Sandbox', color='darkorange')

    for i, change in enumerate(df['rank_change']):
        if change != 0:
            arrow = 'down' if change > 0 else 'up'
            ax.text(x[i], max(df['baseline_total'].iloc[i], df['live_total'].iloc[i]) + 0.02,
                    f'{arrow} {abs(change)}', ha='center', va='bottom', fontsize=9)

    ax.set_xticks(x)
    ax.set_xticklabels(df['alternative'], rotation=45, ha='right')
    ax.set_ylim(0, 1.15)
    ax.set_ylabel('Closeness Coefficient')
    ax.set_title(title, fontweight='bold')
    ax.legend()

    plt.tight_layout()
    _save(fig, output_path)
    return fig


def plot_weight_sensitivity_heatmap(
    sensitivity_df: pd.DataFrame,
    title: str = "Rank Stability Under Weight Perturbations",
    output_path: Optional[Path] = None,
    figsize: Optional[Tuple[int, int]] = None
) -> Optional[plt.Figure]:
    """
    Heatmap of rank shifts: options down the side, one column per
    criterion and perturbation direction (e.g. "Cost +20%"). Positive
    values mean the option dropped.

    Args:
        sensitivity_df: DataFrame from weight_sensitivity()
        title: Plot title
        output_path: Path to save figure
        figsize: Figure size, scaled to the table when omitted

    Returns:
        Matplotlib figure, or None for an empty analysis
    """
    if sensitivity_df.empty:
        return None

    # keep criterion order as analysed, not alphabetical
    columns = list(dict.fromkeys(
        zip(sensitivity_df['criterion'], sensitivity_df['perturbation_pct'])
    ))
    # rows keyed by option position; labels may repeat
    key = option_key(sensitivity_df)
    labels = sensitivity_df.drop_duplicates(key).set_index(key)['alternative']
    pivot = (
        sensitivity_df
        .set_index([key, 'criterion', 'perturbation_pct'])['rank_change']
        .unstack(['criterion', 'perturbation_pct'])
        .reindex(index=labels.index, columns=columns)
    )
    pivot.columns = [f"{criterion} {pct}" for criterion, pct in pivot.columns]
    pivot.index = labels.tolist()

    if figsize is None:
        figsize = (max(8, 1.2 * len(pivot.columns) + 4), max(4, 0.8 * len(pivot) + 3))
    fig, ax = plt.subplots(figsize=figsize)

    limit = max(1, int(np.nanmax(np.abs(pivot.values))))
    sns.heatmap(pivot, annot=True, fmt='+.0f', cmap='RdYlGn_r',
                vmin=-limit, vmax=limit, center=0, ax=ax,
                cbar_kws={'label': 'Rank Change (+ = dropped)'},
                annot_kws={'size': 11, 'weight': 'bold'},
                linewidths=0.5, linecolor='white')

    ax.set_title(title, fontweight='bold', pad=15)
    ax.set_xlabel('Criterion Weight Perturbation', fontweight='bold')
    ax.set_ylabel('Option', fontweight='bold')
    ax.tick_params(axis='x', labelrotation=45)

    plt.tight_layout()
    _save(fig, output_path)
    return fig
