#!/usr/bin/env python3
"""Demo: distil a neural-network regressor into a shallow regression tree.

Trains an MLP on the Friedman #1 benchmark, sweeps surrogate depths 1-8 over
the network's own predictions, and prints the rules of the depth-3 tree.
"""

import warnings

warnings.filterwarnings("ignore")

from sklearn.datasets import make_friedman1
from sklearn.model_selection import train_test_split
from sklearn.neural_network import MLPRegressor
from sklearn.pipeline import make_pipeline
from sklearn.preprocessing import StandardScaler

from tree_distill import SurrogateExplainer, TargetR2Policy, enable_logging

# ── Data ────────────────────────────────────────────────────────────────
X, y = make_friedman1(n_samples=2000, n_features=7, noise=1.0, random_state=0)
feature_names = [f"x{i}" for i in range(X.shape[1])]
X_train, X_test, y_train, y_test = train_test_split(X, y, random_state=0)

# ── Black box ───────────────────────────────────────────────────────────
model = make_pipeline(
    StandardScaler(),
    MLPRegressor(hidden_layer_sizes=(64, 32), max_iter=1000, random_state=0),
).fit(X_train, y_train)
print(f"MLP test R²: {model.score(X_test, y_test):.4f}")

# ── Surrogate ───────────────────────────────────────────────────────────
explainer = SurrogateExplainer(model, feature_names=feature_names)

with enable_logging(level="INFO"):
    result = explainer.explain(X_train, y=y_train, depths=range(1, 9), policy=3)

print()
print(result)

auto = explainer.explain(X_train, depths=range(1, 9), policy=TargetR2Policy(0.8))
print(f"\nShallowest depth with R² >= 0.80: {auto.selected_depth}")

result.plot_fidelity_curve(save_path="fidelity_curve.png")
with open("surrogate.dot", "w", encoding="utf-8") as fh:
    fh.write(result.to_dot())
