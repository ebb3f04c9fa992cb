"""Fit scoring between a surrogate's predictions and the black box's."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike
from sklearn.metrics import mean_squared_error as _sk_mse
from sklearn.metrics import r2_score as _sk_r2

from .exceptions import DegenerateInputError, InvalidInputError


def _paired(actual: ArrayLike, predicted: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    actual = np.asarray(actual, dtype=np.float64).ravel()
    predicted = np.asarray(predicted, dtype=np.float64).ravel()
    if actual.size == 0:
        raise InvalidInputError("Cannot score empty sequences")
    if actual.shape != predicted.shape:
        raise InvalidInputError(
            f"actual has {actual.size} values but predicted has {predicted.size}"
        )
    return actual, predicted


def r2_score(actual: ArrayLike, predicted: ArrayLike) -> float:
    """Coefficient of determination ``1 - SS_res / SS_tot``.

    When *actual* is constant, R² is 1.0 if every residual is zero and
    undefined otherwise.

    Raises
    ------
    InvalidInputError
        Empty inputs or mismatched lengths.
    DegenerateInputError
        *actual* is constant and *predicted* differs from it.
    """
    actual, predicted = _paired(actual, predicted)
    residuals = actual - predicted
    ss_res = float(np.dot(residuals, residuals))

    if np.all(actual == actual[0]):
        if ss_res == 0.0:
            return 1.0
        raise DegenerateInputError(
            "R² is undefined: actual values are constant but residuals are non-zero "
            f"(SS_res={ss_res:.6g})"
        )

    return float(_sk_r2(actual, predicted))


def mean_squared_error(actual: ArrayLike, predicted: ArrayLike) -> float:
    actual, predicted = _paired(actual, predicted)
    return float(_sk_mse(actual, predicted))
