"""Tests for logging.py - loguru integration."""

import numpy as np
import pytest

from tree_distill.logging import LoggingHandle, enable_logging
from tree_distill.sweep import sweep_depths
from tree_distill.tree import fit_tree


@pytest.fixture()
def step_data():
    X = np.array([[1.0], [2.0], [3.0], [4.0]])
    y = np.array([10.0, 10.0, 20.0, 20.0])
    return X, y


class TestEnableLogging:
    def test_silent_by_default(self, step_data, capsys):
        X, y = step_data
        fit_tree(X, y, max_depth=1, min_node_size=1)
        assert capsys.readouterr().err == ""

    def test_debug_records_splits(self, step_data):
        X, y = step_data
        messages = []
        with enable_logging(level="DEBUG", sink=messages.append):
            fit_tree(X, y, max_depth=1, min_node_size=1)
        assert any("split x[0] <= 2.5" in m for m in messages)

    def test_info_records_sweep(self, step_data):
        X, y = step_data
        messages = []
        with enable_logging(level="INFO", sink=messages.append):
            sweep_depths(X, y, [1, 2], min_node_size=1)
        assert any("Sweeping depths [1, 2]" in m for m in messages)
        assert not any("split x[" in m for m in messages)

    def test_disable_stops_output(self, step_data):
        X, y = step_data
        messages = []
        handle = enable_logging(level="DEBUG", sink=messages.append)
        handle.disable()
        fit_tree(X, y, max_depth=1, min_node_size=1)
        assert messages == []
        handle.disable()  # idempotent

    def test_handle_count(self):
        before = LoggingHandle.get_active_handle_count()
        with enable_logging(sink=lambda _: None):
            assert LoggingHandle.get_active_handle_count() == before + 1
        assert LoggingHandle.get_active_handle_count() == before
