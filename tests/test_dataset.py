"""Tests for dataset.py - validated (X, y) container."""

import numpy as np
import pytest

from tree_distill.dataset import Dataset
from tree_distill.exceptions import InvalidInputError


class TestDataset:
    def test_from_arrays(self):
        ds = Dataset.from_arrays([[1, 2], [3, 4], [5, 6]], [1, 2, 3], ["a", "b"])
        assert ds.n_samples == 3
        assert len(ds) == 3
        assert ds.n_features == 2
        assert ds.feature_names == ("a", "b")
        assert ds.X.dtype == np.float64

    def test_default_names(self):
        assert Dataset.from_arrays(np.ones((2, 3)), [1, 2]).feature_names == ("x0", "x1", "x2")

    def test_column_vector_target(self):
        ds = Dataset.from_arrays(np.ones((2, 1)), [[1.0], [2.0]])
        assert ds.y.shape == (2,)

    def test_arrays_are_copies_and_read_only(self):
        X = np.ones((2, 1))
        ds = Dataset.from_arrays(X, [1.0, 2.0])
        X[0, 0] = 5.0
        assert ds.X[0, 0] == 1.0
        with pytest.raises(ValueError):
            ds.y[0] = 0.0

    def test_with_targets(self):
        ds = Dataset.from_arrays(np.ones((2, 1)), [1.0, 2.0], ["f"])
        swapped = ds.with_targets([7.0, 8.0])
        assert swapped.feature_names == ("f",)
        np.testing.assert_array_equal(swapped.y, [7.0, 8.0])
        np.testing.assert_array_equal(ds.y, [1.0, 2.0])

    @pytest.mark.parametrize(
        "X,y,names",
        [
            (np.ones(3), [1, 2, 3], None),
            (np.ones((0, 2)), [], None),
            (np.ones((2, 2)), [1, 2, 3], None),
            (np.ones((2, 2)), [1, np.inf], None),
            (np.ones((2, 2)), [1, 2], ["a"]),
            (np.ones((2, 2)), [1, 2], ["a", "a"]),
            ([["a", "b"]], [1], None),
        ],
    )
    def test_invalid(self, X, y, names):
        with pytest.raises(InvalidInputError):
            Dataset.from_arrays(X, y, names)
