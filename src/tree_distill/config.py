"""Sweep/selection settings and named presets."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional, Union

import numpy as np

from .exceptions import InvalidInputError
from .selection import FixedDepthPolicy, PolicyLike, resolve_policy


@dataclass(frozen=True)
class SurrogateConfig:
    """Parameters for a depth sweep and the subsequent selection.

    Attributes
    ----------
    depths : tuple of int
        Candidate maximum depths.
    min_node_size : int
        Minimum rows per child; nodes with fewer than twice this are leaves.
    policy : str, int or policy object
        How the final depth is chosen (see :mod:`tree_distill.selection`).
    n_jobs : int or None
        joblib workers for the sweep; None runs sequentially.
    """

    depths: tuple[int, ...] = tuple(range(1, 11))
    min_node_size: int = 2
    policy: PolicyLike = "max_r2"
    n_jobs: Optional[int] = None

    def __post_init__(self) -> None:
        depths = tuple(self.depths)
        if not depths:
            raise InvalidInputError("depths must not be empty")
        if any(
            isinstance(d, bool) or not isinstance(d, (int, np.integer)) or d < 1
            for d in depths
        ):
            raise InvalidInputError(f"depths must be positive integers, got {list(depths)}")
        if isinstance(self.min_node_size, bool) or self.min_node_size < 1:
            raise InvalidInputError(f"min_node_size must be >= 1, got {self.min_node_size}")
        resolve_policy(self.policy)
        object.__setattr__(self, "depths", depths)

    def replace(self, **changes) -> SurrogateConfig:
        return replace(self, **changes)


PRESETS: Dict[str, SurrogateConfig] = {
    "interpretable": SurrogateConfig(
        depths=(1, 2, 3, 4), min_node_size=5, policy=FixedDepthPolicy(3),
    ),
    "balanced": SurrogateConfig(depths=tuple(range(1, 7)), min_node_size=2),
    "faithful": SurrogateConfig(depths=tuple(range(1, 13)), min_node_size=1),
}


def get_preset(name: str) -> SurrogateConfig:
    """Return a named configuration.

    Raises
    ------
    InvalidInputError
        If the name is not recognised.
    """
    if name not in PRESETS:
        available = ", ".join(sorted(PRESETS))
        raise InvalidInputError(f"Unknown preset {name!r}. Available: {available}")
    return PRESETS[name]


def resolve_config(config: Union[SurrogateConfig, str, None]) -> SurrogateConfig:
    if config is None:
        return SurrogateConfig()
    if isinstance(config, str):
        return get_preset(config)
    return config
