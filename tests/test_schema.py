"""
Tests for the decision data model and input coercion.
"""
import math

import numpy as np
import pytest
import yaml

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from decider.data_io import (
    BENEFIT, COST, Criterion, DecisionProblem, as_criterion, coerce_weight,
    coerce_type, coerce_score, option_label, score_row, get_score,
    build_decision_matrix, validate_problem
)


class TestCoercion:
    """Tests for default substitution of loose values."""

    @pytest.mark.parametrize('raw,expected', [
        (5, 5.0),
        ('7', 7.0),
        (15, 10.0),
        (0, 1.0),
        (-3, 1.0),
        (0.5, 1.0),
        (None, 1.0),
        ('heavy', 1.0),
        (float('nan'), 1.0),
        (10, 10.0),
        (2.5, 2.5),
    ])
    def test_weight(self, raw, expected):
        assert coerce_weight(raw) == expected

    @pytest.mark.parametrize('raw,expected', [
        ('benefit', BENEFIT),
        (' Benefit ', BENEFIT),
        ('cost', COST),
        ('profit', COST),
        ('', COST),
        (None, BENEFIT),
    ])
    def test_type(self, raw, expected):
        assert coerce_type(raw) == expected

    @pytest.mark.parametrize('raw,expected', [
        (4, 4.0),
        ('6.5', 6.5),
        (-2, -2.0),
        (None, 0.0),
        ('n/a', 0.0),
        (float('nan'), 0.0),
        (float('inf'), 0.0),
    ])
    def test_score(self, raw, expected):
        assert coerce_score(raw) == expected

    def test_option_label(self):
        assert option_label('  Laptop ', 0) == 'Laptop'
        assert option_label('', 2) == 'Option 3'
        assert option_label('   ', 0) == 'Option 1'
        assert option_label(None, 4) == 'Option 5'


class TestCriterion:
    """Tests for the Criterion dataclass."""

    def test_coerced_on_construction(self):
        c = Criterion('Price', weight=42, type='expense')

        assert c.weight == 10
        assert c.type == COST
        assert not c.is_benefit

    def test_defaults(self):
        c = Criterion('Speed')

        assert c.weight == 1
        assert c.is_benefit

    def test_from_dict(self):
        c = Criterion.from_dict({'name': 'Cost', 'weight': '3', 'type': 'cost'})
        assert c == Criterion('Cost', 3, 'cost')

    def test_from_dict_missing_fields(self):
        c = Criterion.from_dict({})

        assert c.name == ''
        assert c.weight == 1
        assert c.type == BENEFIT

    def test_as_criterion_passthrough(self):
        c = Criterion('X', 4)
        assert as_criterion(c) is c

    def test_to_dict(self):
        assert Criterion('X', 4, 'cost').to_dict() == {'name': 'X', 'weight': 4, 'type': 'cost'}


class TestDecisionMatrix:
    """Tests for raw matrix assembly."""

    def test_positional_rows(self):
        criteria = [{'name': 'A'}, {'name': 'B'}]
        scores = [{'A': 1, 'B': 2}, {'B': 'x'}]

        matrix = build_decision_matrix(criteria, ['o1', 'o2', 'o3'], scores)

        np.testing.assert_array_equal(matrix, [[1, 2], [0, 0], [0, 0]])

    def test_row_lookup(self):
        scores = [{'A': 1}, None, 'junk']

        assert score_row(scores, 0) == {'A': 1}
        assert score_row(scores, 1) == {}
        assert score_row(scores, 2) == {}
        assert score_row(scores, 9) == {}
        assert score_row(None, 0) == {}

    def test_get_score(self):
        scores = [{'A': '2.5', 'B': float('nan')}]

        assert get_score(scores, 0, 'A') == 2.5
        assert get_score(scores, 0, 'B') == 0
        assert get_score(scores, 0, 'C') == 0


class TestDecisionProblem:
    """Tests for the DecisionProblem container."""

    @pytest.fixture
    def problem(self):
        return DecisionProblem(
            criteria=[{'name': 'Cost', 'weight': 5, 'type': 'cost'},
                      {'name': 'Quality', 'weight': 8}],
            options=['A', ''],
            scores=[{'Cost': 3, 'Quality': 9}, {'Cost': 7, 'Quality': 6}]
        )

    def test_labels(self, problem):
        assert problem.labels == ['A', 'Option 2']

    def test_with_weights_returns_copy(self, problem):
        updated = problem.with_weights({'Cost': 9})

        assert updated.criteria[0].weight == 9
        assert problem.criteria[0].weight == 5
        assert updated.criteria[1] is not problem.criteria[1]
        updated.scores[0]['Cost'] = 100
        assert problem.scores[0]['Cost'] == 3

    def test_save(self, problem, tmp_path):
        path = tmp_path / 'nested' / 'decision.yaml'
        problem.save(path)

        with open(path) as f:
            data = yaml.safe_load(f)

        assert data['criteria'][0] == {'name': 'Cost', 'weight': 5.0, 'type': 'cost'}
        assert data['options'] == ['A', '']
        assert data['scores'][1] == {'Cost': 7, 'Quality': 6}


class TestValidation:
    """Tests for validate_problem."""

    def test_valid_problem(self):
        problem = DecisionProblem(
            criteria=[{'name': 'X', 'weight': 5}],
            options=['A', 'B'],
            scores=[{'X': 1}, {'X': 2}]
        )
        results = validate_problem(problem)

        assert results['valid']
        assert results['errors'] == []
        assert results['warnings'] == []

    def test_empty_inputs(self):
        results = validate_problem(DecisionProblem())

        assert not results['valid']
        assert len(results['errors']) == 2

    def test_duplicate_names(self):
        problem = DecisionProblem(
            criteria=[{'name': 'X'}, {'name': 'X'}],
            options=['A'],
            scores=[{'X': 1}]
        )
        results = validate_problem(problem)

        assert not results['valid']
        assert "['X']" in results['errors'][0]

    def test_coerced_weight_warnings(self):
        raw = [
            {'name': 'Big', 'weight': 15},
            {'name': 'Word', 'weight': 'heavy'},
            {'name': 'Odd', 'weight': 4, 'type': 'profit'},
        ]
        problem = DecisionProblem(
            criteria=raw, options=['A'], scores=[{'Big': 1, 'Word': 1, 'Odd': 1}]
        )
        warnings = validate_problem(problem, raw_criteria=raw)['warnings']

        assert any("'Big' weight 15 adjusted to 10" in w for w in warnings)
        assert any("'Word' has non-numeric weight" in w for w in warnings)
        assert any("'Odd' has unknown type" in w for w in warnings)

    def test_score_warnings(self):
        problem = DecisionProblem(
            criteria=[{'name': 'X'}],
            options=['A', '', 'C'],
            scores=[{'X': 1, 'Y': 2}, {'X': 'n/a'}]
        )
        results = validate_problem(problem)
        warnings = results['warnings']

        assert results['valid']
        assert any('Option 2 has no name' in w for w in warnings)
        assert any('2 score rows for 3 options' in w for w in warnings)
        assert any("unknown criteria on A: ['Y']" in w for w in warnings)
        assert any('Option 2/X' in w and 'C/X' in w for w in warnings)

    def test_infinite_score_reported_missing(self):
        problem = DecisionProblem(
            criteria=[{'name': 'X'}], options=['A'], scores=[{'X': math.inf}]
        )
        warnings = validate_problem(problem)['warnings']

        assert any('A/X' in w for w in warnings)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
