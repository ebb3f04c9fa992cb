"""Grow one surrogate tree per candidate depth and score each in-sample.

Every tree is fit to the black-box predictions, not to the ground truth, and
scored on the very rows it was grown from.  The resulting R² measures how
much of the black box's behaviour a tree of that depth *can* represent; it is
not a generalisation estimate.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Optional, Sequence, Union

import numpy as np
from joblib import Parallel, delayed
from loguru import logger
from numpy.typing import ArrayLike

from .dataset import Dataset
from .exceptions import InvalidInputError
from .metrics import r2_score
from .tree import Tree, build_tree


@dataclass(frozen=True, eq=False)
class DepthFit:
    """Outcome of growing and scoring the tree for one depth."""

    depth: int
    tree: Tree
    predictions: np.ndarray
    r2: float


class SweepResult(Mapping):
    """Read-only mapping ``depth -> DepthFit`` in ascending depth order."""

    def __init__(self, fits: Sequence[DepthFit], *, min_node_size: int, n_samples: int) -> None:
        ordered = sorted(fits, key=lambda f: f.depth)
        self._fits = MappingProxyType({f.depth: f for f in ordered})
        self.min_node_size = min_node_size
        self.n_samples = n_samples

    def __getitem__(self, depth: int) -> DepthFit:
        return self._fits[depth]

    def __iter__(self) -> Iterator[int]:
        return iter(self._fits)

    def __len__(self) -> int:
        return len(self._fits)

    @property
    def depths(self) -> tuple[int, ...]:
        return tuple(self._fits)

    def r2_by_depth(self) -> Dict[int, float]:
        """Depth -> in-sample R², for plotting fidelity against complexity."""
        return {d: f.r2 for d, f in self._fits.items()}

    def best_depth(self) -> int:
        """Depth with the highest R²; ties go to the shallowest depth."""
        return max(self._fits, key=lambda d: (self._fits[d].r2, -d))

    def __repr__(self) -> str:
        scores = ", ".join(f"{d}: {f.r2:.4f}" for d, f in self._fits.items())
        return f"SweepResult({{{scores}}})"


def _normalise_depths(depths: Sequence[int]) -> tuple[int, ...]:
    depths = tuple(depths)
    if not depths:
        raise InvalidInputError("candidate depths must not be empty")
    for d in depths:
        if isinstance(d, bool) or not isinstance(d, (int, np.integer)) or d < 1:
            raise InvalidInputError(f"candidate depths must be positive integers, got {d!r}")
    return tuple(sorted({int(d) for d in depths}))


def _fit_depth(dataset: Dataset, depth: int, min_node_size: int) -> DepthFit:
    tree = build_tree(dataset, max_depth=depth, min_node_size=min_node_size)
    predictions = tree.predict(dataset.X)
    predictions.flags.writeable = False
    score = r2_score(dataset.y, predictions)
    logger.debug(
        "depth={} leaves={} r2={:.4f}", depth, tree.get_n_leaves(), score,
    )
    return DepthFit(depth=depth, tree=tree, predictions=predictions, r2=score)


def sweep_depths(
    X: Union[ArrayLike, Dataset],
    y_bb: ArrayLike,
    depths: Sequence[int],
    *,
    min_node_size: int = 2,
    feature_names: Optional[Sequence[str]] = None,
    n_jobs: Optional[int] = None,
) -> SweepResult:
    """Grow and score one tree per candidate depth.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features) or Dataset
        Feature matrix.  When a :class:`Dataset` is given its feature names
        are used and its targets are ignored.
    y_bb : array-like of shape (n_samples,)
        Black-box predictions aligned with the rows of *X*.
    depths : sequence of int
        Candidate maximum depths (positive; duplicates collapse).
    min_node_size : int, default 2
    feature_names : sequence of str, optional
    n_jobs : int or None
        Depths are independent; when set they are grown on a joblib thread
        pool.  Results are identical to the sequential run.

    Returns
    -------
    SweepResult

    Raises
    ------
    InvalidInputError
        Empty depths, non-positive depths or mismatched lengths.
    """
    candidates = _normalise_depths(depths)
    if isinstance(X, Dataset):
        dataset = X.with_targets(y_bb)
    else:
        dataset = Dataset.from_arrays(X, y_bb, feature_names)

    logger.info(
        "Sweeping depths {} over {} rows, {} features (min_node_size={})",
        list(candidates), dataset.n_samples, dataset.n_features, min_node_size,
    )
    if n_jobs is None:
        fits = [_fit_depth(dataset, d, min_node_size) for d in candidates]
    else:
        fits = Parallel(n_jobs=n_jobs, backend="threading")(
            delayed(_fit_depth)(dataset, d, min_node_size) for d in candidates
        )

    result = SweepResult(fits, min_node_size=min_node_size, n_samples=dataset.n_samples)
    logger.info("Sweep R² by depth: {}", {d: round(r, 4) for d, r in result.r2_by_depth().items()})
    return result
