"""
Output of sweep results: per-trajectory time series files and the phase-plane plot.

Time series are written as .d text files, one line "t x y" per sample
("%.3e %.5e %.5e"). All trajectories share one figure in the (x, y) plane,
overlaid with the edge line y = 1 and the laminar, edge and turbulent states.
"""

from pathlib import Path
import numpy as np
import matplotlib.pyplot as plt

from edge_tracking.vector_field import (
    LAMINAR_STATE, EDGE_STATE, TURBULENT_STATE, EDGE_LINE_Y
)

SAMPLE_FORMAT = "%.3e %.5e %.5e"


def format_sample(t, x, y):
    """Format one sample as 't x y' (3 and 5 significant decimals)."""
    return SAMPLE_FORMAT % (t, x, y)


def load_timeseries(path):
    """
    Read a .d time series file back into (X, t).

    Returns
    -------
    X : array, shape (2, num_samples)
        X[:, n] = (x, y) at time t[n]
    t : array, shape (num_samples,)
    """
    data = np.loadtxt(path, dtype=float, ndmin=2)
    if data.shape[1] != 3:
        raise ValueError(f"{path}: expected 3 columns (t x y), got {data.shape[1]}")
    return data[:, 1:].T.copy(), data[:, 0].copy()


class ResultSink:
    """
    Persists trajectories under an explicit output directory and draws them
    on a shared phase-plane figure.

    Parameters
    ----------
    output_dir : str or Path
        Destination for .d files, the figure and the sweep summary
    prefix : str
        File name prefix (default: '2dsystem')
    verbose : bool
        If True, print the path of every file written
    """

    def __init__(self, output_dir, prefix='2dsystem', verbose=True):
        self.output_dir = Path(output_dir)
        self.prefix = prefix
        self.verbose = verbose
        self._fig = None
        self._ax = None

    def ensure_output_dir(self):
        """Create the output directory if needed (no-op when it exists)."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir

    def timeseries_path(self, label):
        return self.output_dir / f"{self.prefix}_{label}.d"

    def save_timeseries(self, label, X, t):
        """
        Write one trajectory to <output_dir>/<prefix>_<label>.d.

        X has shape (2, num_samples) and t shape (num_samples,).
        Returns the path written.
        """
        X = np.asarray(X, dtype=float)
        t = np.asarray(t, dtype=float)
        if X.shape != (2, t.size):
            raise ValueError(f"X must have shape (2, {t.size}); got {X.shape}")

        path = self.timeseries_path(label)
        with open(path, 'w') as f:
            for n in range(t.size):
                f.write(format_sample(t[n], X[0, n], X[1, n]) + "\n")

        if self.verbose:
            print(f"Save: {path}")
        return path

    @property
    def axes(self):
        """Shared phase-plane axes, created on first use."""
        if self._ax is None:
            self._fig, self._ax = plt.subplots()
            self._ax.set_xlabel(r'$x$')
            self._ax.set_ylabel(r'$y$')
        return self._ax

    def plot_trajectory(self, X):
        """Draw one trajectory as a curve in the (x, y) plane."""
        self.axes.plot(X[0, :], X[1, :], color='navy', zorder=1)

    def plot_reference_states(self):
        """Draw the edge line y = 1 and the laminar, edge and turbulent states."""
        ax = self.axes
        ax.axhline(y=EDGE_LINE_Y, color='gold', zorder=2)

        states = np.array([LAMINAR_STATE, EDGE_STATE, TURBULENT_STATE])
        ax.scatter(states[:, 0], states[:, 1], color='red', zorder=3)

    def save_figure(self, filename=None):
        """Save the phase-plane figure and close it. Returns the path written."""
        ax = self.axes
        path = self.output_dir / (filename or f"{self.prefix}.png")
        try:
            ax.figure.savefig(path)
        finally:
            plt.close(ax.figure)
            self._fig = None
            self._ax = None

        if self.verbose:
            print(f"Save: {path}")
        return path

    def save_sweep_results(self, results):
        """
        Save initial conditions, final states and outcomes of a sweep as .npz.

        results : list of dicts as returned by sweep.run_sweep
        """
        ic = np.array([r['ic'] for r in results], dtype=float).reshape((-1, 2))
        final_states = np.array([r['X'][:, -1] for r in results], dtype=float).reshape((-1, 2))
        labels = np.array([r['label'] for r in results], dtype=str)
        outcomes = np.array([r.get('outcome', '') for r in results], dtype=str)

        path = self.output_dir / f"{self.prefix}_sweep_results.npz"
        np.savez(path,
                 initial_conditions=ic,
                 final_states=final_states,
                 labels=labels,
                 outcomes=outcomes)

        if self.verbose:
            print(f"Save: {path}")
        return path
