"""Tests for visualization.py - DOT export and fidelity curve."""

import numpy as np
import pytest

from tree_distill.sweep import sweep_depths
from tree_distill.tree import fit_tree
from tree_distill.visualization import export_dot, plot_fidelity_curve


@pytest.fixture()
def step_data():
    X = np.array([[1.0], [2.0], [3.0], [4.0]])
    y = np.array([10.0, 10.0, 20.0, 20.0])
    return X, y


class TestExportDot:
    def test_structure(self, step_data):
        X, y = step_data
        dot = export_dot(fit_tree(X, y, max_depth=1, min_node_size=1, feature_names=["dose"]))

        assert dot.startswith("digraph Tree {")
        assert "dose <= 2.5000" in dot
        assert 'value = 10.0000' in dot
        assert '0 -> 1 [label="True"]' in dot
        assert '0 -> 2 [label="False"]' in dot

    def test_feature_names_are_escaped(self, step_data):
        X, y = step_data
        tree = fit_tree(X, y, max_depth=1, min_node_size=1, feature_names=['dose "mg"\\day'])
        dot = export_dot(tree)
        assert 'dose \\"mg\\"\\\\day <= 2.5000' in dot

    def test_single_leaf(self, step_data):
        X, y = step_data
        dot = export_dot(fit_tree(X, y, max_depth=0))
        assert "->" not in dot
        assert "value = 15.0000" in dot


class TestPlotFidelityCurve:
    def test_saves_figure(self, step_data, tmp_path):
        X, y = step_data
        result = sweep_depths(X, y, [1, 2, 3], min_node_size=1)
        path = tmp_path / "fidelity.png"
        fig = plot_fidelity_curve(result, selected_depth=2, save_path=str(path))

        assert path.exists()
        ax = fig.axes[0]
        assert ax.get_xlabel() == "Tree depth"
        np.testing.assert_array_equal(ax.lines[0].get_xdata(), [1, 2, 3])
