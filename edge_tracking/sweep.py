"""
Sweep over a grid of initial conditions for the 2D edge-tracking system.

Each initial condition (x0, y0) in the Cartesian product of ic_x_list and
ic_y_list is integrated independently with fixed-step RK4. Every trajectory
is written to its own time series file and drawn on a shared phase-plane
plot, which finally gets the edge line y = 1 and the reference states.
"""

import itertools
import warnings
from concurrent.futures import ProcessPoolExecutor
import numpy as np

from edge_tracking.vector_field import (
    eval_f, LAMINAR_STATE, EDGE_STATE, TURBULENT_STATE
)
from edge_tracking.rk4 import rk4, check_time_span

# Default sweep configuration
DEFAULT_IC_X = [-3.0, 0.0, 3.0, 6.0, 9.0, 12.0, 15.0, 18.0]
DEFAULT_IC_Y = [-3.0, 0.99, 1.01]
DEFAULT_T_SPAN = (0.0, 50.0)
DEFAULT_DT = 0.002

REFERENCE_STATES = {
    'laminar': LAMINAR_STATE,
    'edge': EDGE_STATE,
    'turbulent': TURBULENT_STATE,
}


def initial_condition_grid(ic_x_list, ic_y_list):
    """All (x0, y0) pairs, x outer and y inner."""
    return [(float(x0), float(y0)) for x0, y0 in itertools.product(ic_x_list, ic_y_list)]


def make_label(x0, y0):
    """Identifier of an initial condition used in output file names."""
    return "ic=%.2f_%.2f" % (x0, y0)


def integrate_initial_condition(ic, t_span, dt):
    """
    Integrate a single initial condition.

    Parameters
    ----------
    ic : tuple (x0, y0)
    t_span : tuple (t_start, t_stop)
    dt : float

    Returns
    -------
    result : dict with keys
        - 'ic': (x0, y0)
        - 'label': output identifier
        - 'X': read-only array, shape (2, num_steps+1)
        - 't': read-only array, shape (num_steps+1,)
    """
    x0, y0 = ic
    X, t = rk4(eval_f, np.array([x0, y0]), t_span[0], t_span[1], dt)
    X.flags.writeable = False
    t.flags.writeable = False
    return {'ic': (x0, y0), 'label': make_label(x0, y0), 'X': X, 't': t}


def classify_final_state(X):
    """
    Name the reference state closest to the last sample of a trajectory.

    Returns 'laminar', 'edge' or 'turbulent', or 'diverged' if the final
    state is not finite.
    """
    final = np.asarray(X, dtype=float)[:, -1]
    if not np.all(np.isfinite(final)):
        return 'diverged'
    distances = {name: np.hypot(final[0] - s[0], final[1] - s[1])
                 for name, s in REFERENCE_STATES.items()}
    return min(distances, key=distances.get)


def run_sweep(ic_x_list=None, ic_y_list=None, t_span=None, dt=None,
              sink=None, workers=1, verbose=True):
    """
    Integrate every initial condition of the grid and hand the results to sink.

    Parameters
    ----------
    ic_x_list, ic_y_list : sequences of float
        Candidate x0 and y0 values (default: DEFAULT_IC_X, DEFAULT_IC_Y)
    t_span : tuple (t_start, t_stop)
        Integration interval shared by all initial conditions
    dt : float
        Fixed RK4 step size shared by all initial conditions
    sink : ResultSink or None
        Receives save_timeseries and plot_trajectory once per trajectory,
        then plot_reference_states and save_figure. If None, nothing is written.
    workers : int
        Number of worker processes integrating in parallel (default: 1,
        sequential). Sink calls stay in this process, in grid order.
    verbose : bool
        If True, print progress information

    Returns
    -------
    results : list of dict
        One entry per initial condition (see integrate_initial_condition),
        plus 'outcome' and, if writing its output failed, 'error'.

    Raises
    ------
    ValueError
        For an invalid time span or step size, before anything is written.
    """
    ic_x_list = DEFAULT_IC_X if ic_x_list is None else ic_x_list
    ic_y_list = DEFAULT_IC_Y if ic_y_list is None else ic_y_list
    t_span = DEFAULT_T_SPAN if t_span is None else t_span
    dt = DEFAULT_DT if dt is None else dt
    if workers < 1:
        raise ValueError(f"workers must be >= 1; got {workers}")

    t_start, t_stop = float(t_span[0]), float(t_span[1])
    check_time_span(t_start, t_stop, dt)

    tasks = initial_condition_grid(ic_x_list, ic_y_list)
    if verbose:
        print(f"Sweeping {len(tasks)} initial conditions "
              f"({len(ic_x_list)} x-values, {len(ic_y_list)} y-values)")
    _warn_duplicate_labels(tasks)

    if sink is not None:
        try:
            sink.ensure_output_dir()
        except OSError as e:
            # each save_timeseries then fails and is recorded per initial condition
            if verbose:
                print(f"  ERROR creating output directory: {e}")

    span = (t_start, t_stop)
    results = []
    if workers > 1 and len(tasks) > 1:
        with ProcessPoolExecutor(max_workers=workers) as ex:
            trajectories = ex.map(integrate_initial_condition, tasks,
                                  itertools.repeat(span), itertools.repeat(dt))
            for result in trajectories:
                results.append(_deliver(result, sink, verbose))
    else:
        for ic in tasks:
            result = integrate_initial_condition(ic, span, dt)
            results.append(_deliver(result, sink, verbose))

    if sink is not None:
        sink.plot_reference_states()
        try:
            sink.save_figure()
        except OSError as e:
            if verbose:
                print(f"  ERROR saving figure: {e}")

    return results


def _warn_duplicate_labels(tasks):
    """Warn when two initial conditions share a label (and so an output file)."""
    seen = set()
    for x0, y0 in tasks:
        label = make_label(x0, y0)
        if label in seen:
            warnings.warn(f"initial condition ({x0!r}, {y0!r}) has the same label "
                          f"{label!r} as an earlier one; its output overwrites it",
                          RuntimeWarning)
        seen.add(label)


def _deliver(result, sink, verbose):
    """Record the outcome of one trajectory and pass it on to the sink."""
    # arrays coming back from a worker process are writeable copies
    result['X'].flags.writeable = False
    result['t'].flags.writeable = False
    result['outcome'] = classify_final_state(result['X'])
    if verbose:
        print(f"  {result['label']}: {result['outcome']}")

    if sink is None:
        return result

    try:
        sink.save_timeseries(result['label'], result['X'], result['t'])
    except OSError as e:
        result['error'] = str(e)
        if verbose:
            print(f"  ERROR writing {result['label']}: {e}")
    sink.plot_trajectory(result['X'])
    return result


def summarize_sweep(results):
    """Count trajectories per outcome."""
    counts = {name: 0 for name in list(REFERENCE_STATES) + ['diverged']}
    for r in results:
        counts[r['outcome']] += 1
    return {
        'num_trajectories': len(results),
        'counts': counts,
        'outcomes': [(r['label'], r['outcome']) for r in results],
        'failed_writes': [r['label'] for r in results if 'error' in r],
    }


def print_summary_statistics(summary):
    """
    Print summary statistics from the sweep.
    """
    print("\n" + "="*70)
    print("EDGE TRACKING SWEEP - SUMMARY STATISTICS")
    print("="*70)

    print(f"\nTrajectories computed: {summary['num_trajectories']}")
    print(f"\nFinal state closest to:")
    for name, count in summary['counts'].items():
        print(f"  {name:<10s} {count}")

    print(f"\nPer initial condition:")
    for label, outcome in summary['outcomes']:
        print(f"  {label:<20s} {outcome}")

    if summary['failed_writes']:
        print(f"\nFailed to write: {', '.join(summary['failed_writes'])}")

    print("\n" + "="*70 + "\n")
