#!/usr/bin/env python
"""
Rank Options with TOPSIS
========================
Load a decision file, rank its options and explain the winner.

Usage:
    python scripts/rank_options.py --decision PATH [--config CONFIG_PATH] [--run-id RUN_ID]
                                   [--no-plots] [--no-sensitivity] [--verbose]

Outputs:
    - outputs/runs/<run_id>/tables/ranking.csv
    - outputs/runs/<run_id>/tables/explanation.json
    - outputs/runs/<run_id>/tables/weight_sensitivity.csv
    - outputs/runs/<run_id>/tables/criterion_removal.csv
    - outputs/runs/<run_id>/reports/decision_report.md
    - outputs/runs/<run_id>/figures/closeness_ranking.png
    - outputs/runs/<run_id>/figures/separation_distances.png
    - outputs/runs/<run_id>/figures/sensitivity_weights.png
"""
import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib.pyplot as plt

from decider.core import (
    Config, get_default_config, create_run_directories, setup_logging,
    save_json, LogContext, log_validation, log_ranking
)
from decider.data_io import (
    read_decision_file, problem_from_dict, validate_problem, save_results
)
from decider.decision import (
    evaluate, explain, weight_sensitivity, criterion_removal_sensitivity,
    compute_rank_stability_score
)
from decider.reporting import (
    set_plot_style, plot_closeness_ranking, plot_separation_distances,
    plot_weight_sensitivity_heatmap, save_explanation_markdown
)


def parse_args():
    parser = argparse.ArgumentParser(description='Rank options with TOPSIS and explain the winner')
    parser.add_argument('--decision', type=str, required=True,
                        help='Decision file (YAML or JSON)')
    parser.add_argument('--config', type=str, default=None)
    parser.add_argument('--run-id', type=str, default=None)
    parser.add_argument('--no-plots', action='store_true',
                        help='Skip figure generation')
    parser.add_argument('--no-sensitivity', action='store_true',
                        help='Skip sensitivity analysis')
    parser.add_argument('--verbose', action='store_true',
                        help='Log intermediate TOPSIS steps')
    return parser.parse_args()


def main():
    args = parse_args()

    if args.config and Path(args.config).exists():
        config = Config.load(args.config)
    else:
        config = get_default_config()

    if args.run_id:
        config.run_id = args.run_id

    dirs = create_run_directories(config)
    logger = setup_logging(
        log_dir=dirs['logs'], run_id=config.run_id,
        level=logging.DEBUG if args.verbose else logging.INFO
    )
    config.save()

    logger.info("=" * 60)
    logger.info("Rank Options with TOPSIS")
    logger.info("=" * 60)

    try:
        raw = read_decision_file(args.decision)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    problem = problem_from_dict(raw)

    validation = validate_problem(problem, raw_criteria=raw.get('criteria'))
    if not log_validation(logger, validation):
        return 1

    # =========================================
    # Ranking
    # =========================================
    with LogContext(logger, "TOPSIS ranking"):
        results = evaluate(problem.criteria, problem.options, problem.scores)
        save_results(results, dirs['tables'] / 'ranking.csv')
        log_ranking(logger, results)

    # =========================================
    # Explanation
    # =========================================
    with LogContext(logger, "Explanation"):
        exp_cfg = config.explanation
        explanation = explain(
            results, problem.criteria, problem.options, problem.scores,
            min_statement_weight=exp_cfg.min_statement_weight,
            high_priority_weight=exp_cfg.high_priority_weight,
            n_tradeoff_criteria=exp_cfg.n_tradeoff_criteria,
            emphasis_marker=exp_cfg.emphasis_marker
        )
        logger.info(explanation.summary)
        save_json(
            {
                'explanation': explanation,
                'ranking': results,
                'criteria': problem.criteria
            },
            dirs['tables'] / 'explanation.json'
        )
        report_path = save_explanation_markdown(
            explanation, dirs['reports'] / 'decision_report.md', results=results
        )
        logger.info(f"Report saved to: {report_path}")

    # =========================================
    # Sensitivity Analysis
    # =========================================
    weight_sens = None
    if not args.no_sensitivity:
        with LogContext(logger, "Sensitivity analysis"):
            sens_cfg = config.sensitivity
            if sens_cfg.run_weight_sensitivity:
                weight_sens = weight_sensitivity(
                    problem.criteria, problem.options, problem.scores,
                    perturbation=sens_cfg.perturbation
                )
                weight_sens.to_csv(dirs['tables'] / 'weight_sensitivity.csv', index=False)
                names = {r.index: r.name for r in results}
                for idx, score in compute_rank_stability_score(weight_sens).items():
                    logger.info(f"  Weight stability {names[idx]}: {score:.2f}")

            if sens_cfg.run_criterion_removal:
                removal = criterion_removal_sensitivity(
                    problem.criteria, problem.options, problem.scores
                )
                if not removal.empty:
                    removal.to_csv(dirs['tables'] / 'criterion_removal.csv', index=False)
                    reversals = removal[removal['rank_reversed'] & (removal['new_rank'] == 1)]
                    for _, row in reversals.iterrows():
                        logger.info(
                            f"  Removing {row['removed_criterion']} makes {row['alternative']} the winner"
                        )

    # =========================================
    # Generate Plots
    # =========================================
    if config.output.save_figures and not args.no_plots:
        logger.info("-" * 40)
        logger.info("Generating plots...")
        set_plot_style(dpi=config.output.figure_dpi)
        fmt = config.output.figure_format

        fig = plot_closeness_ranking(
            results, output_path=dirs['figures'] / f'closeness_ranking.{fmt}'
        )
        plt.close(fig)
        fig = plot_separation_distances(
            results, output_path=dirs['figures'] / f'separation_distances.{fmt}'
        )
        plt.close(fig)
        if weight_sens is not None:
            fig = plot_weight_sensitivity_heatmap(
                weight_sens,
                title=f"Rank Stability Under Weight Perturbations "
                      f"(+/- {int(round(config.sensitivity.perturbation * 100))}%)",
                output_path=dirs['figures'] / f'sensitivity_weights.{fmt}'
            )
            if fig is not None:
                plt.close(fig)

    logger.info("=" * 60)
    logger.info("Ranking Complete!")
    logger.info(f"  Winner: {results[0].name} (score: {results[0].total:.4f})")
    logger.info(f"  Results saved to: {dirs['root']}")
    logger.info("=" * 60)

    return 0


if __name__ == '__main__':
    sys.exit(main())
