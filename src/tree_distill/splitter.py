"""Exhaustive best-split search for regression trees (squared-error criterion)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike

from .exceptions import InvalidInputError

# SSE differences below this fraction of the parent SSE are float noise and
# are resolved as ties (first feature, then lowest threshold).
_TIE_RTOL = 1e-12


@dataclass(frozen=True, eq=False)
class Split:
    """Best binary split of a node.

    Attributes
    ----------
    feature : int
        Column index of the split feature.
    threshold : float
        Rows with ``X[:, feature] <= threshold`` go left, the rest go right.
    left_rows, right_rows : ndarray of int
        Row indices routed to each child, ascending.
    score_gain : float
        Parent SSE minus the summed SSE of both children (>= 0).
    sse : float
        Summed SSE of both children.
    """

    feature: int
    threshold: float
    left_rows: np.ndarray
    right_rows: np.ndarray
    score_gain: float
    sse: float


def sum_squared_error(values: np.ndarray) -> float:
    """Sum of squared deviations of *values* from their mean."""
    if values.size == 0:
        return 0.0
    centred = values - values.mean()
    return float(np.dot(centred, centred))


def _scan_feature(
    values: np.ndarray,
    centred: np.ndarray,
    min_node_size: int,
    tol: float,
) -> Optional[tuple[float, float]]:
    """Best (sse, threshold) for one feature, or None if it cannot split."""
    n = values.size
    order = np.argsort(values, kind="mergesort")
    xs = values[order]
    ys = centred[order]

    # A split between positions i and i+1 only exists where the value changes
    pos = np.flatnonzero(xs[1:] != xs[:-1])
    n_left = pos + 1
    pos = pos[(n_left >= min_node_size) & (n - n_left >= min_node_size)]
    if pos.size == 0:
        return None

    csum = np.cumsum(ys)
    csum2 = np.cumsum(ys * ys)
    n_left = (pos + 1).astype(np.float64)
    n_right = n - n_left

    left_sum = csum[pos]
    right_sum = csum[-1] - left_sum
    sse_left = csum2[pos] - left_sum * left_sum / n_left
    sse_right = (csum2[-1] - csum2[pos]) - right_sum * right_sum / n_right
    sse = np.maximum(sse_left, 0.0) + np.maximum(sse_right, 0.0)

    k = int(np.flatnonzero(sse <= sse.min() + tol)[0])
    i = int(pos[k])
    lo, hi = float(xs[i]), float(xs[i + 1])
    threshold = lo + (hi - lo) / 2.0
    if not lo <= threshold < hi:
        # midpoint rounded onto the upper value
        threshold = lo
    return float(sse[k]), threshold


def find_best_split(
    X: ArrayLike,
    y: ArrayLike,
    rows: Optional[ArrayLike] = None,
    *,
    min_node_size: int = 1,
) -> Optional[Split]:
    """Find the (feature, threshold) pair minimising the children's total SSE.

    Every feature is scanned; candidate thresholds are the midpoints between
    consecutive distinct sorted values among *rows*.  Ties go to the lowest
    feature index, then to the lowest threshold.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features)
    y : array-like of shape (n_samples,)
    rows : array-like of int, optional
        Rows owned by the node.  Defaults to all rows.
    min_node_size : int, default 1
        Candidates leaving fewer rows than this on either side are skipped.

    Returns
    -------
    Split or None
        None when the targets are constant, no feature has two distinct
        values, no candidate satisfies *min_node_size*, or the best
        candidate does not lower the SSE at all.
    """
    X = np.asarray(X, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    rows = np.arange(y.shape[0]) if rows is None else np.asarray(rows, dtype=np.intp)
    if rows.size == 0:
        raise InvalidInputError("Cannot split a node that owns no rows")
    if min_node_size < 1:
        raise InvalidInputError(f"min_node_size must be >= 1, got {min_node_size}")

    targets = y[rows]
    if np.all(targets == targets[0]) or rows.size < 2 * min_node_size:
        return None

    centred = targets - targets.mean()
    parent_sse = float(np.dot(centred, centred))
    tol = _TIE_RTOL * parent_sse

    best: Optional[tuple[float, int, float]] = None
    for feature in range(X.shape[1]):
        candidate = _scan_feature(X[rows, feature], centred, min_node_size, tol)
        if candidate is None:
            continue
        sse, threshold = candidate
        if best is None or sse < best[0] - tol:
            best = (sse, feature, threshold)

    if best is None:
        return None

    sse, feature, threshold = best
    if parent_sse - sse <= tol:
        # no candidate improves on the parent
        return None

    goes_left = X[rows, feature] <= threshold
    return Split(
        feature=feature,
        threshold=threshold,
        left_rows=rows[goes_left],
        right_rows=rows[~goes_left],
        score_gain=parent_sse - sse,
        sse=sse,
    )
