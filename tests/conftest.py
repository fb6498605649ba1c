# tests/conftest.py
"""
pytest conftest: ensure project root is on sys.path and force non-interactive mpl backend.

It runs early during pytest collection and:
 - inserts the project root (parent of tests/) into sys.path so tests can import
   `edge_tracking` and `run_edge_tracking` without installing the project.
 - sets matplotlib backend to 'Agg' so figures are rendered off-screen.
"""

import os
import sys
import pytest

# 1) Make sure project root (parent of tests/) is on sys.path
THIS_DIR = os.path.dirname(__file__)           # path/to/project/tests
PROJECT_ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# 2) Force matplotlib to use a non-interactive backend before pyplot is imported
os.environ.setdefault("MPLBACKEND", "Agg")
import matplotlib
matplotlib.use("Agg")

import numpy as np
np.set_printoptions(precision=6, suppress=True)


class RecordingSink:
    """Stand-in for ResultSink that records every call made by the sweep."""

    def __init__(self, fail_labels=()):
        self.fail_labels = set(fail_labels)
        self.calls = []
        self.saved = {}
        self.plotted = []

    def ensure_output_dir(self):
        self.calls.append('ensure_output_dir')

    def save_timeseries(self, label, X, t):
        self.calls.append('save_timeseries')
        if label in self.fail_labels:
            raise OSError(f"cannot write {label}")
        self.saved[label] = (np.array(X), np.array(t))

    def plot_trajectory(self, X):
        self.calls.append('plot_trajectory')
        self.plotted.append(np.array(X))

    def plot_reference_states(self):
        self.calls.append('plot_reference_states')

    def save_figure(self, filename=None):
        self.calls.append('save_figure')


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture(autouse=True)
def close_figures():
    """Close any figure a test leaves open."""
    yield
    import matplotlib.pyplot as plt
    plt.close('all')


@pytest.fixture
def make_recording_sink():
    """Factory for a RecordingSink that fails on the given labels."""
    return RecordingSink
