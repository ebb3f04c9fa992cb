"""Tests for ruleset.py data classes and rule extraction."""

import numpy as np
import pytest

from tree_distill.ruleset import Condition, Rule, RuleSet, extract_rules
from tree_distill.tree import fit_tree


class TestCondition:
    def test_str(self):
        c = Condition("age", "<=", 42.5)
        assert str(c) == "age <= 42.5000"

    def test_frozen(self):
        c = Condition("f1", "<=", 1.0)
        with pytest.raises(AttributeError):
            c.feature = "f2"


class TestRule:
    def test_str_with_conditions(self):
        r = Rule(
            conditions=(
                Condition("f1", "<=", 1.0),
                Condition("f2", ">", 2.5),
            ),
            prediction_value=3.25,
            samples=50,
            leaf_id=3,
        )
        text = str(r)
        assert text.startswith("IF ")
        assert "f1 <= 1.0000 AND f2 > 2.5000" in text
        assert "THEN value = 3.2500" in text
        assert "samples=50" in text

    def test_str_no_conditions(self):
        r = Rule(conditions=(), prediction_value=1.0, samples=10, leaf_id=0)
        assert "IF TRUE THEN value = 1.0000" in str(r)


class TestRuleSet:
    @pytest.fixture()
    def sample_ruleset(self):
        rules = (
            Rule(
                conditions=(Condition("f1", "<=", 1.0),),
                prediction_value=0.5,
                samples=30,
                leaf_id=1,
            ),
            Rule(
                conditions=(Condition("f1", ">", 1.0), Condition("f2", "<=", 3.0)),
                prediction_value=1.5,
                samples=20,
                leaf_id=3,
            ),
            Rule(
                conditions=(Condition("f1", ">", 1.0), Condition("f2", ">", 3.0)),
                prediction_value=2.5,
                samples=10,
                leaf_id=4,
            ),
        )
        return RuleSet(rules=rules, feature_names=("f1", "f2", "f3", "f4"))

    def test_counts(self, sample_ruleset):
        assert sample_ruleset.num_rules == 3
        assert sample_ruleset.avg_conditions == pytest.approx(5 / 3)
        assert sample_ruleset.max_conditions == 2

    def test_avg_conditions_per_feature(self, sample_ruleset):
        assert sample_ruleset.avg_conditions_per_feature == pytest.approx(5 / 12)

    def test_interaction_strength(self, sample_ruleset):
        assert sample_ruleset.interaction_strength == pytest.approx(2 / 3)

    def test_features_used(self, sample_ruleset):
        assert sample_ruleset.features_used() == ("f1", "f2")

    def test_signatures_ignore_condition_order(self, sample_ruleset):
        rule = sample_ruleset.rules[1]
        swapped = Rule(
            conditions=tuple(reversed(rule.conditions)),
            prediction_value=rule.prediction_value,
            samples=rule.samples,
            leaf_id=rule.leaf_id,
        )
        other = RuleSet(rules=(swapped,), feature_names=sample_ruleset.feature_names)
        assert other.rule_signatures() <= sample_ruleset.rule_signatures()

    def test_to_text(self, sample_ruleset):
        text = sample_ruleset.to_text()
        assert text.count("Rule ") == 3
        assert str(sample_ruleset) == text

    def test_empty(self):
        rs = RuleSet(rules=(), feature_names=())
        assert rs.avg_conditions == 0.0
        assert rs.max_conditions == 0
        assert rs.interaction_strength == 0.0
        assert rs.avg_conditions_per_feature == 0.0


class TestExtractRules:
    def test_step_tree(self):
        X = np.array([[1.0], [2.0], [3.0], [4.0]])
        y = np.array([10.0, 10.0, 20.0, 20.0])
        tree = fit_tree(X, y, max_depth=1, min_node_size=1, feature_names=["dose"])
        rules = extract_rules(tree)

        assert rules.num_rules == 2
        first, second = rules.rules
        assert first.conditions == (Condition("dose", "<=", 2.5),)
        assert first.prediction_value == 10.0
        assert first.samples == 2
        assert second.conditions == (Condition("dose", ">", 2.5),)
        assert second.prediction_value == 20.0

    def test_one_rule_per_leaf(self):
        rng = np.random.RandomState(0)
        X = rng.uniform(size=(120, 3))
        y = X[:, 0] + 2 * X[:, 2] ** 2
        tree = fit_tree(X, y, max_depth=3, min_node_size=2)
        rules = extract_rules(tree)
        assert rules.num_rules == tree.get_n_leaves()
        assert sum(r.samples for r in rules.rules) == len(X)
        assert all(len(r.conditions) <= 3 for r in rules.rules)

    def test_single_leaf(self):
        tree = fit_tree(np.ones((3, 1)), [1.0, 2.0, 3.0], max_depth=2, min_node_size=1)
        rules = extract_rules(tree)
        assert rules.num_rules == 1
        assert rules.rules[0].conditions == ()
        assert rules.rules[0].prediction_value == pytest.approx(2.0)
