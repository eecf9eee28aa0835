"""
Tests for what-if comparison and sensitivity analysis.
"""
import copy

import pytest
import pandas as pd

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from decider.data_io import Criterion
from decider.decision import (
    evaluate, rank_map, with_weights, compare_what_if, weight_sensitivity,
    criterion_removal_sensitivity, compute_rank_stability_score
)


@pytest.fixture
def opposed():
    """Two options that each win on one criterion."""
    criteria = [
        {'name': 'X', 'type': 'benefit', 'weight': 9},
        {'name': 'Y', 'type': 'benefit', 'weight': 1},
    ]
    options = ['P', 'Q']
    scores = [{'X': 10, 'Y': 1}, {'X': 1, 'Y': 10}]
    return criteria, options, scores


@pytest.fixture
def dominated():
    """Option A dominates on both criteria."""
    criteria = [
        {'name': 'Cost', 'type': 'cost', 'weight': 5},
        {'name': 'Quality', 'type': 'benefit', 'weight': 8},
    ]
    options = ['A', 'B', 'C']
    scores = [
        {'Cost': 3, 'Quality': 9},
        {'Cost': 7, 'Quality': 6},
        {'Cost': 5, 'Quality': 5},
    ]
    return criteria, options, scores


class TestWithWeights:
    """Tests for criteria snapshots."""

    def test_replaces_named_weights(self):
        """Test that only named criteria change."""
        criteria = [Criterion('X', 3), Criterion('Y', 4)]

        updated = with_weights(criteria, {'Y': 9, 'Unknown': 2})

        assert [c.weight for c in updated] == [3, 9]
        assert [c.weight for c in criteria] == [3, 4]

    def test_returns_copies(self):
        """Test that the snapshot does not share objects with the input."""
        criteria = [Criterion('X', 3)]
        updated = with_weights(criteria, {})

        assert updated == criteria
        assert updated[0] is not criteria[0]

    def test_sandbox_weights_are_clamped(self):
        """Test that trial weights follow the same coercion."""
        updated = with_weights([{'name': 'X', 'weight': 5}], {'X': 40})
        assert updated[0].weight == 10


class TestCompareWhatIf:
    """Tests for committed vs sandbox comparison."""

    def test_unchanged_weights(self, dominated):
        """Test that an untouched sandbox is idle and nothing moves."""
        comparison = compare_what_if(*dominated, {'Cost': 5})

        assert not comparison.is_dirty
        assert comparison.biggest_mover is None
        assert comparison.baseline == comparison.live
        assert all(change == 0 for change in comparison.rank_changes.values())

    def test_rank_reversal(self, opposed):
        """Test that flipping weights flips the ranking."""
        comparison = compare_what_if(*opposed, {'X': 1, 'Y': 9})

        assert comparison.is_dirty
        assert [r.name for r in comparison.baseline] == ['P', 'Q']
        assert [r.name for r in comparison.live] == ['Q', 'P']
        assert comparison.baseline_ranks == {0: 1, 1: 2}
        assert comparison.live_ranks == {1: 1, 0: 2}
        assert comparison.rank_changes == {1: -1, 0: 1}
        # first in live order wins ties
        assert comparison.biggest_mover == ('Q', 1)
        assert comparison.total_weight == 10

    def test_baseline_matches_direct_evaluation(self, opposed):
        """Test that the committed ranking is the plain evaluation."""
        comparison = compare_what_if(*opposed, {'X': 1})
        assert comparison.baseline == evaluate(*opposed)

    def test_inputs_not_mutated(self, opposed):
        """Test that the committed criteria keep their weights."""
        before = copy.deepcopy(opposed)
        compare_what_if(*opposed, {'X': 1, 'Y': 9})
        assert opposed == before

    def test_to_frame(self, opposed):
        """Test conversion to DataFrame."""
        df = compare_what_if(*opposed, {'X': 1, 'Y': 9}).to_frame()

        assert isinstance(df, pd.DataFrame)
        assert df['alternative'].tolist() == ['Q', 'P']
        assert df['baseline_rank'].tolist() == [2, 1]
        assert df['live_rank'].tolist() == [1, 2]
        assert df['rank_change'].tolist() == [-1, 1]

    def test_empty_problem(self):
        """Test that an empty problem compares cleanly."""
        comparison = compare_what_if([], [], [], {'X': 3})

        assert comparison.live == []
        assert comparison.biggest_mover is None
        assert comparison.to_frame().empty


class TestWeightSensitivity:
    """Tests for weight perturbation analysis."""

    def test_record_count(self, dominated):
        """Test one row per criterion, direction and option."""
        df = weight_sensitivity(*dominated, perturbation=0.2)
        assert len(df) == 2 * 2 * 3

    def test_perturbed_weights(self, dominated):
        """Test the perturbed weights, including clamping."""
        criteria, options, scores = dominated
        criteria = criteria + [{'name': 'Max', 'type': 'benefit', 'weight': 10}]
        scores = [dict(row, Max=1) for row in scores]

        df = weight_sensitivity(criteria, options, scores, perturbation=0.2)
        weights = df.groupby(['criterion', 'perturbation'])['new_weight'].first()

        assert weights[('Quality', 'increase')] == pytest.approx(9.6)
        assert weights[('Quality', 'decrease')] == pytest.approx(6.4)
        assert weights[('Cost', 'increase')] == pytest.approx(6.0)
        assert weights[('Max', 'increase')] == 10

    def test_dominant_option_is_stable(self, dominated):
        """Test that a dominating option never changes rank."""
        df = weight_sensitivity(*dominated)

        assert (df['rank_change'] == 0).all()
        assert compute_rank_stability_score(df) == {0: 1.0, 1: 1.0, 2: 1.0}


class TestCriterionRemoval:
    """Tests for criterion removal analysis."""

    def test_single_criterion_skipped(self):
        """Test that one criterion cannot be removed."""
        df = criterion_removal_sensitivity(
            [{'name': 'X', 'weight': 5}], ['A', 'B'], [{'X': 1}, {'X': 2}]
        )
        assert df.empty

    def test_reversal_detected(self, opposed):
        """Test that removing the dominant criterion flips the winner."""
        df = criterion_removal_sensitivity(*opposed)

        without_x = df[df['removed_criterion'] == 'X'].set_index('alternative')
        assert without_x.loc['Q', 'new_rank'] == 1
        assert without_x.loc['Q', 'rank_reversed']
        assert without_x.loc['P', 'rank_reversed']

        without_y = df[df['removed_criterion'] == 'Y']
        assert not without_y['rank_reversed'].any()


class TestStabilityScore:
    """Tests for rank stability scores."""

    def test_missing_column(self):
        """Test that frames without rank changes give no scores."""
        assert compute_rank_stability_score(pd.DataFrame({'x': [1]})) == {}

    def test_partial_stability(self):
        """Test the share of unchanged scenarios."""
        df = pd.DataFrame({
            'alternative': ['A', 'A', 'A', 'A', 'B', 'B'],
            'rank_change': [0, 0, 1, 0, 0, -1],
        })
        scores = compute_rank_stability_score(df)

        assert scores['A'] == pytest.approx(0.75)
        assert scores['B'] == pytest.approx(0.5)


class TestRepeatedLabels:
    """Tests for options that share a display name."""

    @pytest.fixture
    def twins(self):
        criteria = [
            {'name': 'X', 'type': 'benefit', 'weight': 9},
            {'name': 'Y', 'type': 'benefit', 'weight': 1},
        ]
        options = ['A', 'A', 'B']
        scores = [{'X': 10, 'Y': 1}, {'X': 1, 'Y': 10}, {'X': 5, 'Y': 5}]
        return criteria, options, scores

    def test_weight_sensitivity_keeps_options_apart(self, twins):
        """Test that each option is tracked by its position."""
        df = weight_sensitivity(*twins)

        assert sorted(df['index'].unique()) == [0, 1, 2]
        assert (df.groupby('index').size() == 4).all()
        assert set(compute_rank_stability_score(df)) == {0, 1, 2}

    def test_criterion_removal_keeps_options_apart(self, twins):
        """Test one row per option and removed criterion."""
        df = criterion_removal_sensitivity(*twins)

        for _, group in df.groupby('removed_criterion'):
            assert sorted(group['index']) == [0, 1, 2]
            assert sorted(group['alternative']) == ['A', 'A', 'B']


def test_rank_map(dominated):
    """Test option index to rank mapping."""
    results = evaluate(*dominated)
    assert rank_map(results) == {0: 1, 2: 2, 1: 3}


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
