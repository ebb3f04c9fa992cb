"""Greedy regression-tree induction without cost-complexity pruning.

A node stops growing only when it reaches ``max_depth``, owns fewer than
``2 * min_node_size`` rows, or has no admissible split.  Any split that
exists is accepted, however small its error reduction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import numpy as np
from loguru import logger
from numpy.typing import ArrayLike

from .dataset import Dataset, as_feature_matrix
from .exceptions import InvalidInputError
from .splitter import find_best_split, sum_squared_error


@dataclass(frozen=True, eq=False)
class Node:
    """A node of a grown tree.

    Internal nodes carry ``feature``, ``threshold``, ``left`` and ``right``;
    leaves carry none of them.  ``value`` (mean target of the owned rows) is
    kept on every node; for a leaf it is the prediction.
    """

    rows: np.ndarray
    depth: int
    value: float
    sse: float
    feature: Optional[int] = None
    threshold: Optional[float] = None
    gain: float = 0.0
    left: Optional[Node] = None
    right: Optional[Node] = None

    def __post_init__(self) -> None:
        parts = (self.feature, self.threshold, self.left, self.right)
        if any(p is None for p in parts) and not all(p is None for p in parts):
            raise InvalidInputError(
                "A node is either a leaf or carries feature, threshold and both children"
            )

    @property
    def is_leaf(self) -> bool:
        return self.left is None

    @property
    def n_samples(self) -> int:
        return int(self.rows.size)

    @property
    def leaf_value(self) -> Optional[float]:
        return self.value if self.is_leaf else None


def _node_mean(values: np.ndarray) -> float:
    # constant targets keep their exact value so residuals are exactly zero
    if np.all(values == values[0]):
        return float(values[0])
    return float(values.mean())


def _check_params(max_depth: int, min_node_size: int) -> None:
    if isinstance(max_depth, bool) or not isinstance(max_depth, (int, np.integer)):
        raise InvalidInputError(f"max_depth must be an integer, got {max_depth!r}")
    if isinstance(min_node_size, bool) or not isinstance(min_node_size, (int, np.integer)):
        raise InvalidInputError(f"min_node_size must be an integer, got {min_node_size!r}")
    if max_depth < 0:
        raise InvalidInputError(f"max_depth must be >= 0, got {max_depth}")
    if min_node_size < 1:
        raise InvalidInputError(f"min_node_size must be >= 1, got {min_node_size}")


def grow(
    X: np.ndarray,
    y: np.ndarray,
    rows: ArrayLike,
    depth: int,
    max_depth: int,
    min_node_size: int,
) -> Node:
    """Recursively grow the subtree rooted at a node owning *rows*.

    All parameters are explicit; the function reads no global state and is
    deterministic for a given row order.
    """
    _check_params(max_depth, min_node_size)
    rows = np.array(rows, dtype=np.intp)
    rows.flags.writeable = False
    if rows.size == 0:
        raise InvalidInputError("Cannot grow a node from zero rows")
    if depth < 0 or depth > max_depth:
        raise InvalidInputError(f"depth must lie in [0, {max_depth}], got {depth}")

    targets = y[rows]
    value = _node_mean(targets)
    sse = sum_squared_error(targets)
    leaf = Node(rows=rows, depth=depth, value=value, sse=sse)

    if depth == max_depth or rows.size < 2 * min_node_size:
        return leaf

    split = find_best_split(X, y, rows, min_node_size=min_node_size)
    if split is None:
        return leaf

    logger.debug(
        "depth={} rows={} split x[{}] <= {:.6g} gain={:.6g}",
        depth, rows.size, split.feature, split.threshold, split.score_gain,
    )
    left = grow(X, y, split.left_rows, depth + 1, max_depth, min_node_size)
    right = grow(X, y, split.right_rows, depth + 1, max_depth, min_node_size)
    return Node(
        rows=rows,
        depth=depth,
        value=value,
        sse=sse,
        feature=split.feature,
        threshold=split.threshold,
        gain=split.score_gain,
        left=left,
        right=right,
    )


@dataclass(frozen=True, eq=False)
class Tree:
    """A fully grown regression tree plus the parameters it was grown with."""

    root: Node
    max_depth: int
    min_node_size: int
    feature_names: tuple[str, ...]

    @property
    def n_features(self) -> int:
        return len(self.feature_names)

    def iter_nodes(self) -> Iterator[Node]:
        """Pre-order traversal, left child before right child."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if not node.is_leaf:
                stack.append(node.right)
                stack.append(node.left)

    def leaves(self) -> list[Node]:
        return [n for n in self.iter_nodes() if n.is_leaf]

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    def get_depth(self) -> int:
        return max(n.depth for n in self.iter_nodes())

    def get_n_leaves(self) -> int:
        return len(self.leaves())

    def _route(self, X: ArrayLike) -> list[tuple[Node, np.ndarray]]:
        X = as_feature_matrix(X)
        if X.shape[1] != self.n_features:
            raise InvalidInputError(
                f"Tree was grown on {self.n_features} features, X has {X.shape[1]}"
            )
        assigned: list[tuple[Node, np.ndarray]] = []
        stack = [(self.root, np.arange(X.shape[0]))]
        while stack:
            node, idx = stack.pop()
            if node.is_leaf:
                assigned.append((node, idx))
                continue
            goes_left = X[idx, node.feature] <= node.threshold
            stack.append((node.right, idx[~goes_left]))
            stack.append((node.left, idx[goes_left]))
        return assigned

    def predict(self, X: ArrayLike) -> np.ndarray:
        """Leaf value of the leaf each row of *X* falls into."""
        X = as_feature_matrix(X)
        out = np.empty(X.shape[0], dtype=np.float64)
        for leaf, idx in self._route(X):
            out[idx] = leaf.value
        return out

    def apply(self, X: ArrayLike) -> np.ndarray:
        """Pre-order id of the leaf each row of *X* falls into."""
        X = as_feature_matrix(X)
        ids = {id(node): i for i, node in enumerate(self.iter_nodes())}
        out = np.empty(X.shape[0], dtype=np.intp)
        for leaf, idx in self._route(X):
            out[idx] = ids[id(leaf)]
        return out


def build_tree(dataset: Dataset, *, max_depth: int, min_node_size: int = 2) -> Tree:
    """Grow a tree over every row of an already validated :class:`Dataset`."""
    _check_params(max_depth, min_node_size)
    root = grow(
        dataset.X,
        dataset.y,
        np.arange(dataset.n_samples),
        0,
        int(max_depth),
        int(min_node_size),
    )
    tree = Tree(
        root=root,
        max_depth=int(max_depth),
        min_node_size=int(min_node_size),
        feature_names=dataset.feature_names,
    )
    logger.debug(
        "Grew tree max_depth={} min_node_size={}: depth={} leaves={}",
        max_depth, min_node_size, tree.get_depth(), tree.get_n_leaves(),
    )
    return tree


def fit_tree(
    X: ArrayLike,
    y: ArrayLike,
    *,
    max_depth: int,
    min_node_size: int = 2,
    feature_names: Optional[Sequence[str]] = None,
) -> Tree:
    """Validate ``(X, y)`` and grow a regression tree over all rows.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features)
    y : array-like of shape (n_samples,)
        Targets to approximate (the black-box predictions when distilling).
    max_depth : int
        Maximum depth; ``0`` yields a single leaf.
    min_node_size : int, default 2
        A node with fewer than ``2 * min_node_size`` rows is not split, and
        no split leaves fewer than ``min_node_size`` rows in a child.
    feature_names : sequence of str, optional

    Raises
    ------
    InvalidInputError
        Empty or malformed inputs, ``max_depth < 0`` or ``min_node_size < 1``.
    """
    _check_params(max_depth, min_node_size)
    dataset = Dataset.from_arrays(X, y, feature_names)
    return build_tree(dataset, max_depth=max_depth, min_node_size=min_node_size)
