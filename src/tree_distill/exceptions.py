"""Exceptions raised by tree_distill.

All errors derive from :class:`TreeDistillError`.  Input validation errors
also subclass :class:`ValueError` so callers that already catch
``ValueError`` keep working.
"""

from __future__ import annotations

from typing import Sequence


class TreeDistillError(Exception):
    """Base class for all tree_distill errors."""


class InvalidInputError(TreeDistillError, ValueError):
    """Malformed rows, mismatched lengths or out-of-range parameters."""


class DegenerateInputError(TreeDistillError, ValueError):
    """R² is undefined: the reference values have zero variance but the
    residuals are non-zero."""


class DepthNotFoundError(TreeDistillError, KeyError):
    """Raised when a selection asks for a depth that was not swept.

    Attributes
    ----------
    depth : int
        The requested depth.
    available_depths : tuple of int
        Depths present in the sweep result.
    """

    def __init__(self, depth: int, available_depths: Sequence[int]) -> None:
        self.depth = depth
        self.available_depths = tuple(available_depths)
        super().__init__(
            f"Depth {depth} was not part of the sweep; "
            f"available depths: {list(self.available_depths)}"
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])
