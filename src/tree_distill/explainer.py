"""Core explainer: distils any black-box regressor into a shallow tree."""

from __future__ import annotations

from typing import Optional, Sequence, Union

import numpy as np
from loguru import logger
from numpy.typing import ArrayLike

from .config import SurrogateConfig, resolve_config
from .dataset import Dataset, as_feature_matrix
from .exceptions import InvalidInputError
from .export import NodeRecord, export_tree
from .report import FidelityReport, SweepReport, compute_fidelity_report, summarize_sweep
from .ruleset import RuleSet, extract_rules
from .selection import PolicyLike, select_depth
from .sweep import SweepResult, sweep_depths
from .tree import Tree
from .visualization import export_dot, plot_fidelity_curve


class ExplanationResult:
    """Container returned by :meth:`SurrogateExplainer.explain`.

    Attributes
    ----------
    tree : Tree
        The selected surrogate tree.
    selected_depth : int
        Depth chosen by the selection policy.
    rules : RuleSet
        One IF-THEN rule per leaf.
    records : tuple of NodeRecord
        Flattened tree structure.
    sweep : SweepResult
        Every depth that was tried with its in-sample R².
    report : FidelityReport
        Fidelity metrics of the selected tree.
    """

    def __init__(
        self,
        tree: Tree,
        selected_depth: int,
        rules: RuleSet,
        records: tuple[NodeRecord, ...],
        sweep: SweepResult,
        report: FidelityReport,
    ) -> None:
        self.tree = tree
        self.selected_depth = selected_depth
        self.rules = rules
        self.records = records
        self.sweep = sweep
        self.report = report

    # ------------------------------------------------------------------
    # Convenience methods
    # ------------------------------------------------------------------

    @property
    def sweep_report(self) -> SweepReport:
        return summarize_sweep(self.sweep, selected_depth=self.selected_depth)

    def to_dot(self) -> str:
        """Export the selected tree as a Graphviz DOT string."""
        return export_dot(self.tree)

    def plot_fidelity_curve(self, *, save_path: Optional[str] = None, **kwargs):
        """R²-vs-depth plot (delegates to :func:`plot_fidelity_curve`)."""
        return plot_fidelity_curve(
            self.sweep, selected_depth=self.selected_depth, save_path=save_path, **kwargs,
        )

    def __str__(self) -> str:
        return "\n".join([str(self.rules), "", str(self.report), "", str(self.sweep_report)])


class SurrogateExplainer:
    """Model-agnostic surrogate-tree distiller.

    Parameters
    ----------
    model : object
        Any regressor exposing ``predict(X)``.
    feature_names : sequence of str
        Human-readable feature names (length must match ``X.shape[1]``).
    config : SurrogateConfig, str or None
        Sweep/selection settings or a preset name; defaults to
        :class:`SurrogateConfig`.
    """

    def __init__(
        self,
        model: object,
        feature_names: Sequence[str],
        *,
        config: Union[SurrogateConfig, str, None] = None,
    ) -> None:
        if not hasattr(model, "predict") or not callable(model.predict):
            raise TypeError(
                f"The model must expose a callable .predict() method, "
                f"got {type(model).__name__!r}."
            )
        self.model = model
        self.feature_names = tuple(feature_names)
        self.config = resolve_config(config)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def predict_blackbox(self, X: ArrayLike) -> np.ndarray:
        """Black-box predictions as a flat float vector aligned with *X*."""
        X = as_feature_matrix(X)
        y_bb = np.asarray(self.model.predict(X), dtype=np.float64)
        if y_bb.ndim == 2 and y_bb.shape[1] == 1:
            y_bb = y_bb.ravel()
        if y_bb.shape != (X.shape[0],):
            raise InvalidInputError(
                f"Black-box predictions have shape {y_bb.shape}, expected ({X.shape[0]},)"
            )
        return y_bb

    def sweep(
        self,
        X: ArrayLike,
        *,
        depths: Optional[Sequence[int]] = None,
        min_node_size: Optional[int] = None,
    ) -> SweepResult:
        """Predict with the black box once, then grow and score one tree per depth."""
        return self._sweep(X, self.predict_blackbox(X), depths, min_node_size)

    def _sweep(
        self,
        X: ArrayLike,
        y_bb: np.ndarray,
        depths: Optional[Sequence[int]],
        min_node_size: Optional[int],
    ) -> SweepResult:
        dataset = Dataset.from_arrays(X, y_bb, self.feature_names)
        return sweep_depths(
            dataset,
            dataset.y,
            self.config.depths if depths is None else depths,
            min_node_size=self.config.min_node_size if min_node_size is None else min_node_size,
            n_jobs=self.config.n_jobs,
        )

    def explain(
        self,
        X: ArrayLike,
        *,
        y: Optional[ArrayLike] = None,
        depths: Optional[Sequence[int]] = None,
        min_node_size: Optional[int] = None,
        policy: Optional[PolicyLike] = None,
    ) -> ExplanationResult:
        """Sweep depths, select one, and extract rules from the chosen tree.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Rows the surrogate is grown and scored on.
        y : array-like, optional
            Ground truth; only used for the accuracy figures of the report.
        depths, min_node_size, policy
            Override the corresponding :class:`SurrogateConfig` fields.

        Returns
        -------
        ExplanationResult
        """
        y_bb = self.predict_blackbox(X)
        result = self._sweep(X, y_bb, depths, min_node_size)
        depth = select_depth(result, self.config.policy if policy is None else policy)
        fit = result[depth]
        rules = extract_rules(fit.tree)
        report = compute_fidelity_report(fit.tree, X, y_bb, y, ruleset=rules)
        logger.info("Selected depth {} with {} rules", depth, rules.num_rules)
        return ExplanationResult(
            tree=fit.tree,
            selected_depth=depth,
            rules=rules,
            records=export_tree(fit.tree),
            sweep=result,
            report=report,
        )
