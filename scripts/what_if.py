#!/usr/bin/env python
"""
What-If Weight Sandbox
======================
Compare the committed ranking with the ranking under trial weights.
The decision file is only rewritten when --commit is given.

Usage:
    python scripts/what_if.py --decision PATH --weight NAME=VALUE [--weight NAME=VALUE ...]
                              [--commit] [--output PATH] [--config CONFIG_PATH] [--run-id RUN_ID]

Outputs:
    - outputs/runs/<run_id>/tables/what_if.csv
    - outputs/runs/<run_id>/figures/what_if.png
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib.pyplot as plt

from decider.core import (
    Config, get_default_config, create_run_directories, setup_logging,
    log_validation, log_ranking
)
from decider.data_io import read_decision_file, problem_from_dict, validate_problem
from decider.decision import compare_what_if
from decider.reporting import set_plot_style, plot_what_if_comparison


def parse_weight(text: str):
    name, sep, value = text.rpartition('=')
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got {text!r}")
    try:
        return name.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Weight for {name!r} is not a number: {value!r}")


def parse_args():
    parser = argparse.ArgumentParser(description='Compare rankings under trial weights')
    parser.add_argument('--decision', type=str, required=True,
                        help='Decision file (YAML or JSON)')
    parser.add_argument('--weight', type=parse_weight, action='append', default=[],
                        help='Trial weight, e.g. --weight Cost=8')
    parser.add_argument('--commit', action='store_true',
                        help='Write the trial weights back as the committed decision')
    parser.add_argument('--output', type=str, default=None,
                        help='Where to write the committed decision as YAML (default: the input '
                             'path with a .yaml suffix; a .json input is left as is and a sibling '
                             '.yaml is written). Scores from a score_table are written inline.')
    parser.add_argument('--config', type=str, default=None)
    parser.add_argument('--run-id', type=str, default=None)
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
    logger = setup_logging(log_dir=dirs['logs'], run_id=config.run_id)

    logger.info("=" * 60)
    logger.info("What-If Weight Sandbox")
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

    sandbox_weights = dict(args.weight)
    known = {c.name for c in problem.criteria}
    for name in sandbox_weights:
        if name not in known:
            logger.warning(f"Unknown criterion '{name}' ignored")

    comparison = compare_what_if(
        problem.criteria, problem.options, problem.scores, sandbox_weights
    )

    logger.info(f"Sandbox {'active' if comparison.is_dirty else 'idle'}, "
                f"total weight: {comparison.total_weight:g}")

    comparison.to_frame().to_csv(dirs['tables'] / 'what_if.csv', index=False)
    logger.info("Committed ranking:")
    log_ranking(logger, comparison.baseline)
    logger.info("Sandbox ranking:")
    log_ranking(logger, comparison.live)

    mover = comparison.biggest_mover
    if mover is not None:
        logger.info(f"Biggest mover: {mover[0]} ({mover[1]} places)")
    else:
        logger.info("Ranking unchanged")

    if config.output.save_figures:
        set_plot_style(dpi=config.output.figure_dpi)
        fig = plot_what_if_comparison(
            comparison,
            output_path=dirs['figures'] / f'what_if.{config.output.figure_format}'
        )
        plt.close(fig)

    if args.commit:
        committed = problem.with_weights(comparison.sandbox_weights)
        output = Path(args.output) if args.output else Path(args.decision).with_suffix('.yaml')
        committed.save(output)
        logger.info(f"Committed weights written to: {output}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
