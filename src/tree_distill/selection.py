"""Depth-selection policies applied to a :class:`SweepResult`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np
from loguru import logger

from .exceptions import DepthNotFoundError, InvalidInputError
from .sweep import SweepResult
from .tree import Tree


@dataclass(frozen=True)
class MaxR2Policy:
    """Pick the depth with the highest R²; ties go to the shallowest depth."""

    name: str = "max_r2"

    def __call__(self, result: SweepResult) -> int:
        return result.best_depth()


@dataclass(frozen=True)
class FixedDepthPolicy:
    """Pick a depth chosen by the caller, typically after inspecting the
    R²-vs-depth curve for an acceptable fidelity/interpretability trade-off."""

    depth: int

    def __call__(self, result: SweepResult) -> int:
        if self.depth not in result:
            raise DepthNotFoundError(self.depth, result.depths)
        return self.depth


@dataclass(frozen=True)
class TargetR2Policy:
    """Pick the shallowest depth whose R² reaches ``target``.

    Falls back to :class:`MaxR2Policy` when no depth reaches it.
    """

    target: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.target <= 1.0:
            raise InvalidInputError(f"target must lie in [0, 1], got {self.target}")

    def __call__(self, result: SweepResult) -> int:
        for depth, fit in result.items():
            if fit.r2 >= self.target:
                return depth
        logger.info(
            "No depth reaches R² >= {}; falling back to the maximum R²", self.target,
        )
        return result.best_depth()


Policy = Union[MaxR2Policy, FixedDepthPolicy, TargetR2Policy]
PolicyLike = Union[Policy, str, int]


def resolve_policy(policy: PolicyLike) -> Policy:
    """Turn a shorthand (``"max_r2"`` or an int depth) into a policy object."""
    if isinstance(policy, (MaxR2Policy, FixedDepthPolicy, TargetR2Policy)):
        return policy
    if isinstance(policy, str):
        if policy == "max_r2":
            return MaxR2Policy()
        raise InvalidInputError(
            f"Unknown selection policy {policy!r}. Use 'max_r2', an int depth "
            "or a policy object."
        )
    if isinstance(policy, (int, np.integer)) and not isinstance(policy, bool):
        return FixedDepthPolicy(int(policy))
    if callable(policy):
        return policy
    raise InvalidInputError(f"Unsupported selection policy {policy!r}")


def select_depth(result: SweepResult, policy: PolicyLike = "max_r2") -> int:
    """Depth chosen by *policy* for *result*."""
    if len(result) == 0:
        raise InvalidInputError("Cannot select from an empty sweep result")
    depth = resolve_policy(policy)(result)
    if depth not in result:
        raise DepthNotFoundError(depth, result.depths)
    return depth


def select_tree(result: SweepResult, policy: PolicyLike = "max_r2") -> Tree:
    """Return the surrogate tree at the depth chosen by *policy*.

    Raises
    ------
    DepthNotFoundError
        The policy asked for a depth missing from *result*.
    """
    depth = select_depth(result, policy)
    fit = result[depth]
    logger.info("Selected depth {} (R²={:.4f}, leaves={})", depth, fit.r2, fit.tree.get_n_leaves())
    return fit.tree
