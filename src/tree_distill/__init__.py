"""tree_distill - distil a black-box regressor into a shallow, readable regression tree."""

from loguru import logger

from .config import PRESETS, SurrogateConfig, get_preset
from .dataset import Dataset
from .exceptions import (
    DegenerateInputError,
    DepthNotFoundError,
    InvalidInputError,
    TreeDistillError,
)
from .explainer import ExplanationResult, SurrogateExplainer
from .export import NodeRecord, export_tree, predict_from_records, records_to_dicts
from .logging import PACKAGE_NAME, enable_logging
from .metrics import mean_squared_error, r2_score
from .report import FidelityReport, SweepReport, compute_fidelity_report, summarize_sweep
from .ruleset import Condition, Rule, RuleSet, extract_rules
from .selection import (
    FixedDepthPolicy,
    MaxR2Policy,
    TargetR2Policy,
    select_depth,
    select_tree,
)
from .splitter import Split, find_best_split
from .surrogates import RegressionTreeSurrogate
from .sweep import DepthFit, SweepResult, sweep_depths
from .tree import Node, Tree, fit_tree, grow
from .visualization import export_dot, plot_fidelity_curve

logger.disable(PACKAGE_NAME)

__all__ = [
    "SurrogateExplainer",
    "ExplanationResult",
    "Dataset",
    # Induction
    "Split",
    "find_best_split",
    "Node",
    "Tree",
    "grow",
    "fit_tree",
    "RegressionTreeSurrogate",
    # Sweep and scoring
    "DepthFit",
    "SweepResult",
    "sweep_depths",
    "r2_score",
    "mean_squared_error",
    # Selection
    "MaxR2Policy",
    "FixedDepthPolicy",
    "TargetR2Policy",
    "select_depth",
    "select_tree",
    # Export
    "NodeRecord",
    "export_tree",
    "records_to_dicts",
    "predict_from_records",
    "Condition",
    "Rule",
    "RuleSet",
    "extract_rules",
    "export_dot",
    "plot_fidelity_curve",
    # Reports
    "FidelityReport",
    "SweepReport",
    "compute_fidelity_report",
    "summarize_sweep",
    # Configuration
    "SurrogateConfig",
    "PRESETS",
    "get_preset",
    # Errors and logging
    "TreeDistillError",
    "InvalidInputError",
    "DegenerateInputError",
    "DepthNotFoundError",
    "enable_logging",
]
