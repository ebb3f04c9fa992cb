"""Surrogate-tree visualisation helpers."""

from __future__ import annotations

from typing import Optional

import matplotlib
matplotlib.use("Agg")  # non-interactive backend for safe headless rendering
import matplotlib.pyplot as plt

from .export import export_tree
from .sweep import SweepResult
from .tree import Tree


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def export_dot(tree: Tree, *, precision: int = 4) -> str:
    """Export the surrogate tree in Graphviz DOT format.

    Returns
    -------
    str
        DOT-language string that can be rendered by ``graphviz`` or ``dot``.
    """
    records = export_tree(tree)
    ids = {rec.path: rec.node_id for rec in records}
    lines = [
        "digraph Tree {",
        'node [shape=box, style="rounded", fontname="helvetica"] ;',
        'edge [fontname="helvetica"] ;',
    ]
    for rec in records:
        if rec.is_leaf:
            label = f"value = {rec.leaf_value:.{precision}f}\\nsamples = {rec.n_samples}"
        else:
            label = (
                f"{_escape(rec.feature_name)} <= {rec.threshold:.{precision}f}\\n"
                f"samples = {rec.n_samples}\\nvalue = {rec.value:.{precision}f}"
            )
        lines.append(f'{rec.node_id} [label="{label}"] ;')
        if rec.path:
            parent = ids[rec.path[:-1]]
            edge_label = "True" if rec.direction == "<=" else "False"
            lines.append(f'{parent} -> {rec.node_id} [label="{edge_label}"] ;')
    lines.append("}")
    return "\n".join(lines)


def plot_fidelity_curve(
    result: SweepResult,
    *,
    selected_depth: Optional[int] = None,
    figsize: tuple[int, int] = (7, 4),
    save_path: Optional[str] = None,
    dpi: int = 150,
):
    """Plot in-sample R² against tree depth.

    Parameters
    ----------
    result : SweepResult
        Output of :func:`~tree_distill.sweep.sweep_depths`.
    selected_depth : int, optional
        Highlighted with a marker when given.
    save_path : str or None
        If given, save the figure to this path (PNG, PDF, SVG, ...).

    Returns
    -------
    matplotlib.figure.Figure
    """
    scores = result.r2_by_depth()
    depths = list(scores)
    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.plot(depths, [scores[d] for d in depths], marker="o")
    if selected_depth is not None and selected_depth in scores:
        ax.scatter(
            [selected_depth], [scores[selected_depth]],
            s=120, facecolors="none", edgecolors="red", zorder=3,
            label=f"selected depth {selected_depth}",
        )
        ax.legend()
    ax.set_xlabel("Tree depth")
    ax.set_ylabel("R² vs black-box predictions")
    ax.set_xticks(depths)
    ax.set_ylim(0.0, 1.05)
    ax.set_title("Surrogate fidelity by depth")

    if save_path is not None:
        fig.savefig(save_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return fig
