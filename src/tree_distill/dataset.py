"""Feature matrix / target vector container shared by every stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike

from .exceptions import InvalidInputError


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, dtype=np.float64, copy=True)
    arr.flags.writeable = False
    return arr


def as_feature_matrix(X: ArrayLike) -> np.ndarray:
    """Coerce *X* to a finite 2-D float array or raise :class:`InvalidInputError`."""
    try:
        X = np.asarray(X, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"X must be numeric: {exc}") from exc
    if X.ndim != 2:
        raise InvalidInputError(f"X must be 2-dimensional, got shape {X.shape}")
    if X.shape[0] == 0 or X.shape[1] == 0:
        raise InvalidInputError(f"X must have at least one row and one column, got shape {X.shape}")
    if not np.all(np.isfinite(X)):
        raise InvalidInputError("X contains NaN or infinite values")
    return X


def as_target_vector(y: ArrayLike, n_rows: Optional[int] = None) -> np.ndarray:
    """Coerce *y* to a finite 1-D float array, optionally checking its length."""
    try:
        y = np.asarray(y, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"y must be numeric: {exc}") from exc
    if y.ndim == 2 and y.shape[1] == 1:
        y = y.ravel()
    if y.ndim != 1:
        raise InvalidInputError(f"y must be 1-dimensional, got shape {y.shape}")
    if y.shape[0] == 0:
        raise InvalidInputError("y must not be empty")
    if n_rows is not None and y.shape[0] != n_rows:
        raise InvalidInputError(
            f"X has {n_rows} rows but y has {y.shape[0]} values"
        )
    if not np.all(np.isfinite(y)):
        raise InvalidInputError("y contains NaN or infinite values")
    return y


@dataclass(frozen=True, eq=False)
class Dataset:
    """Immutable, validated (X, y) pair with a named feature schema.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features)
        Fully numeric, finite feature matrix.
    y : array-like of shape (n_samples,)
        Targets.  For distillation these are the black-box predictions.
    feature_names : sequence of str, optional
        Column names; defaults to ``x0 .. x{p-1}``.
    """

    X: np.ndarray
    y: np.ndarray
    feature_names: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        X = as_feature_matrix(self.X)
        y = as_target_vector(self.y, n_rows=X.shape[0])
        names = tuple(str(n) for n in self.feature_names) or tuple(
            f"x{j}" for j in range(X.shape[1])
        )
        if len(names) != X.shape[1]:
            raise InvalidInputError(
                f"Expected {X.shape[1]} feature names, got {len(names)}"
            )
        if len(set(names)) != len(names):
            raise InvalidInputError(f"Feature names must be unique: {list(names)}")
        object.__setattr__(self, "X", _readonly(X))
        object.__setattr__(self, "y", _readonly(y))
        object.__setattr__(self, "feature_names", names)

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        feature_names: Optional[Sequence[str]] = None,
    ) -> Dataset:
        return cls(X=X, y=y, feature_names=tuple(feature_names or ()))

    @property
    def n_samples(self) -> int:
        return int(self.X.shape[0])

    @property
    def n_features(self) -> int:
        return int(self.X.shape[1])

    def with_targets(self, y: ArrayLike) -> Dataset:
        """Same rows and schema, different targets (e.g. black-box predictions)."""
        return Dataset(X=self.X, y=y, feature_names=self.feature_names)

    def __len__(self) -> int:
        return self.n_samples
