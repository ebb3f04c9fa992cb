"""Estimator wrappers around tree_distill trees."""

from .regression_tree import RegressionTreeSurrogate

__all__ = ["RegressionTreeSurrogate"]
