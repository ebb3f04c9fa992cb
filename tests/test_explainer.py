"""Tests for explainer.py - SurrogateExplainer and ExplanationResult."""

import numpy as np
import pytest
from sklearn.datasets import make_friedman1
from sklearn.neural_network import MLPRegressor
from sklearn.preprocessing import StandardScaler
from sklearn.pipeline import make_pipeline

from tree_distill import (
    ExplanationResult,
    FidelityReport,
    RuleSet,
    SurrogateConfig,
    SurrogateExplainer,
    SweepResult,
)
from tree_distill.exceptions import DepthNotFoundError, InvalidInputError


@pytest.fixture(scope="module")
def mlp_setup():
    X, y = make_friedman1(n_samples=300, n_features=5, noise=0.3, random_state=0)
    model = make_pipeline(
        StandardScaler(),
        MLPRegressor(hidden_layer_sizes=(32,), max_iter=800, random_state=0),
    ).fit(X, y)
    names = ["x_a", "x_b", "x_c", "x_d", "x_e"]
    return X, y, model, names


class _ColumnModel:
    def predict(self, X):
        return np.asarray(X)[:, :2]


class TestExplainerValidation:
    def test_no_predict_raises(self):
        with pytest.raises(TypeError, match="predict"):
            SurrogateExplainer(object(), feature_names=["f1"])

    def test_bad_prediction_shape(self):
        explainer = SurrogateExplainer(_ColumnModel(), feature_names=["a", "b"])
        with pytest.raises(InvalidInputError, match="shape"):
            explainer.predict_blackbox(np.ones((4, 2)))

    def test_feature_name_mismatch(self, mlp_setup):
        X, _, model, _ = mlp_setup
        explainer = SurrogateExplainer(model, feature_names=["only_one"])
        with pytest.raises(InvalidInputError, match="feature names"):
            explainer.sweep(X, depths=[1])

    def test_unknown_preset(self, mlp_setup):
        _, _, model, names = mlp_setup
        with pytest.raises(InvalidInputError, match="preset"):
            SurrogateExplainer(model, feature_names=names, config="nope")


class TestExplainerEndToEnd:
    def test_sweep_uses_blackbox_predictions(self, mlp_setup):
        X, y, model, names = mlp_setup
        explainer = SurrogateExplainer(model, feature_names=names)
        result = explainer.sweep(X, depths=[1, 2, 3])

        assert isinstance(result, SweepResult)
        y_bb = model.predict(X)
        assert result[1].tree.root.value == pytest.approx(y_bb.mean())

    def test_explain_max_r2(self, mlp_setup):
        X, y, model, names = mlp_setup
        explainer = SurrogateExplainer(model, feature_names=names)
        result = explainer.explain(X, y=y, depths=[1, 2, 3, 4, 5])

        assert isinstance(result, ExplanationResult)
        assert isinstance(result.rules, RuleSet)
        assert isinstance(result.report, FidelityReport)
        assert result.selected_depth == result.sweep.best_depth()
        assert result.tree is result.sweep[result.selected_depth].tree
        assert result.rules.num_rules == result.tree.get_n_leaves()
        assert len(result.records) == result.tree.node_count
        assert result.report.fidelity_r2 == pytest.approx(
            result.sweep[result.selected_depth].r2
        )
        assert result.report.accuracy_r2 is not None

    def test_explain_fixed_depth(self, mlp_setup):
        X, _, model, names = mlp_setup
        explainer = SurrogateExplainer(model, feature_names=names)
        result = explainer.explain(X, depths=[1, 2, 3, 4], policy=3)

        assert result.selected_depth == 3
        assert result.tree.max_depth == 3
        assert result.rules.max_conditions <= 3

    def test_explain_missing_depth(self, mlp_setup):
        X, _, model, names = mlp_setup
        explainer = SurrogateExplainer(model, feature_names=names)
        with pytest.raises(DepthNotFoundError):
            explainer.explain(X, depths=[1, 2], policy=3)

    def test_preset_config(self, mlp_setup):
        X, _, model, names = mlp_setup
        explainer = SurrogateExplainer(model, feature_names=names, config="interpretable")
        result = explainer.explain(X)

        assert result.sweep.depths == (1, 2, 3, 4)
        assert result.selected_depth == 3
        assert result.sweep.min_node_size == 5

    def test_config_object(self, mlp_setup):
        X, _, model, names = mlp_setup
        config = SurrogateConfig(depths=(2, 4), min_node_size=10, n_jobs=2)
        result = SurrogateExplainer(model, feature_names=names, config=config).explain(X)
        assert result.sweep.depths == (2, 4)
        for node in result.tree.iter_nodes():
            assert node.n_samples >= 10

    def test_fidelity_grows_with_depth(self, mlp_setup):
        X, _, model, names = mlp_setup
        scores = SurrogateExplainer(model, feature_names=names).sweep(
            X, depths=range(1, 7)
        ).r2_by_depth()
        values = [scores[d] for d in sorted(scores)]
        assert all(b >= a for a, b in zip(values, values[1:]))
        assert values[-1] > values[0]


class TestExplanationResult:
    @pytest.fixture()
    def result(self, mlp_setup):
        X, y, model, names = mlp_setup
        return SurrogateExplainer(model, feature_names=names).explain(
            X, y=y, depths=[1, 2, 3], policy=2
        )

    def test_to_dot(self, result):
        dot = result.to_dot()
        assert dot.startswith("digraph Tree {")
        assert dot.rstrip().endswith("}")

    def test_str(self, result):
        text = str(result)
        assert "Rule 1:" in text
        assert "Fidelity Report" in text
        assert "<- selected" in text

    def test_plot_fidelity_curve(self, result, tmp_path):
        path = tmp_path / "curve.png"
        result.plot_fidelity_curve(save_path=str(path))
        assert path.exists()
