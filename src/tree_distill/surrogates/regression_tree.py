"""scikit-learn compatible estimator around :func:`tree_distill.tree.fit_tree`."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike
from sklearn.base import BaseEstimator, RegressorMixin
from sklearn.exceptions import NotFittedError

from ..tree import Tree, fit_tree


class RegressionTreeSurrogate(RegressorMixin, BaseEstimator):
    """Unpruned greedy regression tree usable in sklearn pipelines.

    Parameters
    ----------
    max_depth : int, default 3
    min_node_size : int, default 2
    """

    def __init__(self, max_depth: int = 3, min_node_size: int = 2) -> None:
        self.max_depth = max_depth
        self.min_node_size = min_node_size

    def fit(
        self,
        X: ArrayLike,
        y: ArrayLike,
        feature_names: Optional[Sequence[str]] = None,
    ) -> RegressionTreeSurrogate:
        self.tree_: Tree = fit_tree(
            X,
            y,
            max_depth=self.max_depth,
            min_node_size=self.min_node_size,
            feature_names=feature_names,
        )
        self.n_features_in_ = self.tree_.n_features
        return self

    def _check_fitted(self) -> Tree:
        tree = getattr(self, "tree_", None)
        if tree is None:
            raise NotFittedError(
                f"This {type(self).__name__} instance is not fitted yet."
            )
        return tree

    def predict(self, X: ArrayLike) -> np.ndarray:
        return self._check_fitted().predict(X)

    def apply(self, X: ArrayLike) -> np.ndarray:
        return self._check_fitted().apply(X)

    def get_depth(self) -> int:
        return self._check_fitted().get_depth()

    def get_n_leaves(self) -> int:
        return self._check_fitted().get_n_leaves()
