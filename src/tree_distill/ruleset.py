"""IF-THEN rules read off a surrogate tree's leaves."""

from __future__ import annotations

from dataclasses import dataclass

from .export import NodeRecord, export_tree
from .tree import Tree


@dataclass(frozen=True)
class Condition:
    """A single split condition, e.g. ``age <= 42.5``."""

    feature: str
    operator: str  # "<=" or ">"
    threshold: float

    def __str__(self) -> str:
        return f"{self.feature} {self.operator} {self.threshold:.4f}"


@dataclass(frozen=True)
class Rule:
    """The path to one leaf.

    Parameters
    ----------
    conditions : tuple of Condition
        Conjunction of split predicates from the root to the leaf.
    prediction_value : float
        Leaf value (mean black-box prediction of the rows in the leaf).
    samples : int
        Training rows that reached the leaf.
    leaf_id : int
        Pre-order node id of the leaf.
    """

    conditions: tuple[Condition, ...]
    prediction_value: float
    samples: int
    leaf_id: int

    def __str__(self) -> str:
        if self.conditions:
            antecedent = " AND ".join(str(c) for c in self.conditions)
        else:
            antecedent = "TRUE"
        return (
            f"IF {antecedent} THEN value = {self.prediction_value:.4f}"
            f"  [samples={self.samples}]"
        )


@dataclass(frozen=True)
class RuleSet:
    """Ordered collection of rules, one per leaf, left to right."""

    rules: tuple[Rule, ...]
    feature_names: tuple[str, ...]

    @property
    def num_rules(self) -> int:
        return len(self.rules)

    @property
    def avg_conditions(self) -> float:
        if not self.rules:
            return 0.0
        return sum(len(r.conditions) for r in self.rules) / len(self.rules)

    @property
    def max_conditions(self) -> int:
        if not self.rules:
            return 0
        return max(len(r.conditions) for r in self.rules)

    @property
    def avg_conditions_per_feature(self) -> float:
        """Average rule length normalised by the number of features."""
        n_features = len(self.feature_names)
        if not self.rules or n_features == 0:
            return 0.0
        return self.avg_conditions / n_features

    @property
    def interaction_strength(self) -> float:
        """Fraction of rules that reference more than one distinct feature."""
        if not self.rules:
            return 0.0
        multi = sum(
            1
            for r in self.rules
            if len({c.feature for c in r.conditions}) > 1
        )
        return multi / len(self.rules)

    def features_used(self) -> tuple[str, ...]:
        """Features appearing in any rule, in order of first appearance."""
        seen: dict[str, None] = {}
        for rule in self.rules:
            for c in rule.conditions:
                seen.setdefault(c.feature, None)
        return tuple(seen)

    def rule_signatures(self) -> frozenset:
        """Order-independent string form of each rule."""
        sigs: list[str] = []
        for rule in self.rules:
            parts = sorted(str(c) for c in rule.conditions)
            sigs.append(" AND ".join(parts) + f" -> {rule.prediction_value:.4f}")
        return frozenset(sigs)

    def to_text(self) -> str:
        lines: list[str] = []
        for i, rule in enumerate(self.rules, 1):
            lines.append(f"Rule {i}: {rule}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_text()


def extract_rules(tree: Tree) -> RuleSet:
    """Build one rule per leaf from the tree's exported records."""
    records = export_tree(tree)
    by_path: dict[tuple[str, ...], NodeRecord] = {r.path: r for r in records}

    rules: list[Rule] = []
    for rec in records:
        if not rec.is_leaf:
            continue
        conditions = []
        for k, step in enumerate(rec.path):
            parent = by_path[rec.path[:k]]
            conditions.append(
                Condition(
                    parent.feature_name,
                    "<=" if step == "L" else ">",
                    parent.threshold,
                )
            )
        rules.append(
            Rule(
                conditions=tuple(conditions),
                prediction_value=rec.leaf_value,
                samples=rec.n_samples,
                leaf_id=rec.node_id,
            )
        )
    return RuleSet(rules=tuple(rules), feature_names=tree.feature_names)
