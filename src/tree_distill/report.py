"""Fidelity reports: how well a surrogate tree mimics the black-box model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
from numpy.typing import ArrayLike

from .metrics import mean_squared_error, r2_score
from .ruleset import RuleSet, extract_rules
from .sweep import SweepResult
from .tree import Tree


# ── Fidelity Report ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class FidelityReport:
    """Quantitative summary of surrogate faithfulness.

    Attributes
    ----------
    fidelity_r2 : float
        R² of the surrogate against the black-box predictions.
    fidelity_mse : float
        MSE of the surrogate against the black-box predictions.
    num_rules : int
        Number of leaves (= rules).
    avg_rule_length : float
        Average number of conditions per rule.
    max_rule_length : int
    surrogate_depth : int
        Realised depth of the tree (may be below ``max_depth``).
    max_depth : int
        Depth limit the tree was grown with.
    num_samples : int
        Rows the report was computed on.
    evaluation_type : str
        Always ``"in_sample"`` for the sweep; the rows used for fitting are
        the rows scored.
    accuracy_r2 : float or None
        R² of the surrogate against the ground truth, when available.
    blackbox_r2 : float or None
        R² of the black box against the ground truth, when available.
    interaction_strength : float or None
        Fraction of rules combining more than one feature.
    """

    fidelity_r2: float
    fidelity_mse: float
    num_rules: int
    avg_rule_length: float
    max_rule_length: int
    surrogate_depth: int
    max_depth: int
    num_samples: int
    evaluation_type: str = "in_sample"
    accuracy_r2: Optional[float] = None
    blackbox_r2: Optional[float] = None
    interaction_strength: Optional[float] = None

    def __str__(self) -> str:
        lines = [
            "=== Fidelity Report ===",
            f"  Evaluation type: {self.evaluation_type}",
            f"  Fidelity R² (surrogate vs black-box): {self.fidelity_r2:.4f}",
            f"  Fidelity MSE: {self.fidelity_mse:.4f}",
        ]
        if self.accuracy_r2 is not None:
            lines.append(f"  Surrogate R² (vs true values): {self.accuracy_r2:.4f}")
        if self.blackbox_r2 is not None:
            lines.append(f"  Black-box R² (vs true values): {self.blackbox_r2:.4f}")
        lines += [
            f"  Number of rules: {self.num_rules}",
            f"  Avg rule length: {self.avg_rule_length:.2f}",
            f"  Max rule length: {self.max_rule_length}",
            f"  Surrogate depth: {self.surrogate_depth} (max {self.max_depth})",
            f"  Samples used: {self.num_samples}",
        ]
        if self.interaction_strength is not None:
            lines.append(f"  Interaction strength: {self.interaction_strength:.4f}")
        return "\n".join(lines)


def compute_fidelity_report(
    tree: Tree,
    X: ArrayLike,
    y_bb: ArrayLike,
    y_true: Optional[ArrayLike] = None,
    *,
    ruleset: Optional[RuleSet] = None,
    evaluation_type: str = "in_sample",
) -> FidelityReport:
    """Score *tree* against the black-box predictions (and ground truth if given)."""
    y_bb = np.asarray(y_bb, dtype=np.float64)
    y_surr = tree.predict(X)
    ruleset = ruleset if ruleset is not None else extract_rules(tree)

    accuracy_r2: Optional[float] = None
    blackbox_r2: Optional[float] = None
    if y_true is not None:
        accuracy_r2 = r2_score(y_true, y_surr)
        blackbox_r2 = r2_score(y_true, y_bb)

    return FidelityReport(
        fidelity_r2=r2_score(y_bb, y_surr),
        fidelity_mse=mean_squared_error(y_bb, y_surr),
        num_rules=ruleset.num_rules,
        avg_rule_length=ruleset.avg_conditions,
        max_rule_length=ruleset.max_conditions,
        surrogate_depth=tree.get_depth(),
        max_depth=tree.max_depth,
        num_samples=len(y_surr),
        evaluation_type=evaluation_type,
        accuracy_r2=accuracy_r2,
        blackbox_r2=blackbox_r2,
        interaction_strength=ruleset.interaction_strength,
    )


# ── Sweep Report ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SweepReport:
    """R² and tree size per candidate depth."""

    r2_by_depth: Dict[int, float]
    leaves_by_depth: Dict[int, int]
    min_node_size: int
    num_samples: int
    selected_depth: Optional[int] = None

    def __str__(self) -> str:
        lines = [
            f"=== Depth Sweep ({self.num_samples} samples, "
            f"min_node_size={self.min_node_size}) ===",
            "  depth      R²  leaves",
        ]
        for depth, r2 in self.r2_by_depth.items():
            marker = "  <- selected" if depth == self.selected_depth else ""
            lines.append(
                f"  {depth:>5}  {r2:6.4f}  {self.leaves_by_depth[depth]:>6}{marker}"
            )
        return "\n".join(lines)


def summarize_sweep(
    result: SweepResult, selected_depth: Optional[int] = None,
) -> SweepReport:
    return SweepReport(
        r2_by_depth=result.r2_by_depth(),
        leaves_by_depth={d: f.tree.get_n_leaves() for d, f in result.items()},
        min_node_size=result.min_node_size,
        num_samples=result.n_samples,
        selected_depth=selected_depth,
    )
