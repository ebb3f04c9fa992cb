"""Flatten a grown tree into node records for diagrams and rule extraction.

Downstream renderers consume these records only; they never need to walk
:class:`~tree_distill.tree.Node` objects.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike

from .dataset import as_feature_matrix
from .exceptions import InvalidInputError
from .tree import Node, Tree


@dataclass(frozen=True)
class NodeRecord:
    """One node of an exported tree.

    Attributes
    ----------
    node_id : int
        Pre-order position (root is 0).
    path : tuple of str
        ``"L"``/``"R"`` steps from the root; empty for the root.
    depth : int
    is_leaf : bool
    feature : int or None
        Split feature index (internal nodes).
    feature_name : str or None
    threshold : float or None
        Split threshold (internal nodes); rows ``<= threshold`` go left.
    direction : str or None
        Edge taken from the parent: ``"<="`` (left) or ``">"`` (right);
        None for the root.
    leaf_value : float or None
        Prediction (leaves).
    value : float
        Mean target of the rows owned by the node.
    n_samples : int
        Rows owned by the node.
    """

    node_id: int
    path: tuple[str, ...]
    depth: int
    is_leaf: bool
    feature: Optional[int]
    feature_name: Optional[str]
    threshold: Optional[float]
    direction: Optional[str]
    leaf_value: Optional[float]
    value: float
    n_samples: int


def export_tree(tree: Tree) -> tuple[NodeRecord, ...]:
    """One record per node, parent before children, left before right."""
    records: list[NodeRecord] = []
    stack: list[tuple[Node, tuple[str, ...], Optional[str]]] = [(tree.root, (), None)]
    while stack:
        node, path, direction = stack.pop()
        records.append(
            NodeRecord(
                node_id=len(records),
                path=path,
                depth=node.depth,
                is_leaf=node.is_leaf,
                feature=node.feature,
                feature_name=None if node.is_leaf else tree.feature_names[node.feature],
                threshold=node.threshold,
                direction=direction,
                leaf_value=node.leaf_value,
                value=node.value,
                n_samples=node.n_samples,
            )
        )
        if not node.is_leaf:
            stack.append((node.right, path + ("R",), ">"))
            stack.append((node.left, path + ("L",), "<="))
    return tuple(records)


def records_to_dicts(records: Sequence[NodeRecord]) -> list[dict]:
    """Plain dicts (JSON / DataFrame friendly); paths become ``"LR"`` strings."""
    out = []
    for rec in records:
        row = asdict(rec)
        row["path"] = "".join(rec.path)
        out.append(row)
    return out


def predict_from_records(records: Sequence[NodeRecord], X: ArrayLike) -> np.ndarray:
    """Re-derive predictions by walking exported records only."""
    if not records:
        raise InvalidInputError("No records to predict from")
    by_path = {rec.path: rec for rec in records}
    X = as_feature_matrix(X)
    out = np.empty(X.shape[0], dtype=np.float64)
    for i, row in enumerate(X):
        rec = by_path[()]
        while not rec.is_leaf:
            step = "L" if row[rec.feature] <= rec.threshold else "R"
            try:
                rec = by_path[rec.path + (step,)]
            except KeyError as exc:
                raise InvalidInputError(
                    f"Records are missing the child at path {''.join(rec.path + (step,))!r}"
                ) from exc
        out[i] = rec.leaf_value
    return out
