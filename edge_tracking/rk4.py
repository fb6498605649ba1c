"""
Classical Runge-Kutta (RK4) ODE integrator with a fixed time step.

Implements the explicit 4-stage method:
    k1 = f(x[n], t[n])
    k2 = f(x[n] + ∆t/2 * k1, t[n] + ∆t/2)
    k3 = f(x[n] + ∆t/2 * k2, t[n] + ∆t/2)
    k4 = f(x[n] + ∆t * k3, t[n] + ∆t)
    x[n+1] = x[n] + ∆t/6 * (k1 + 2 k2 + 2 k3 + k4)

For solving dx/dt = f(x, t)
"""

import math
import numpy as np
from typing import Callable, Tuple


def check_time_span(t_start: float, t_stop: float, dt: float) -> None:
    """
    Reject an invalid time span or step size before any work is done.

    Raises
    ------
    ValueError
        If any value is not finite, dt <= 0, or t_stop < t_start.
    """
    for name, value in (('t_start', t_start), ('t_stop', t_stop), ('dt', dt)):
        if not math.isfinite(value):
            raise ValueError(f"{name} must be finite; got {value}")
    if dt <= 0.0:
        raise ValueError(f"dt must be positive; got {dt}")
    if t_stop < t_start:
        raise ValueError(f"t_stop must be >= t_start; got ({t_start}, {t_stop})")


def num_steps(t_start: float, t_stop: float, dt: float) -> int:
    """
    Number of full steps of size dt that fit in [t_start, t_stop].

    N = floor((t_stop - t_start) / dt). A ratio that is an integer up to
    rounding (e.g. 50 / 0.002) counts as that integer.
    """
    ratio = (t_stop - t_start) / dt
    N = int(math.floor(ratio))
    if math.isclose(ratio, N + 1, rel_tol=1e-12, abs_tol=0.0):
        N += 1
    return N


def rk4_step(eval_f: Callable, x_n: np.ndarray, t_n: float, dt: float) -> np.ndarray:
    """Advance state x_n at time t_n by one RK4 step of size dt."""
    half = 0.5 * dt
    k1 = eval_f(x_n, t_n)
    k2 = eval_f(x_n + half * k1, t_n + half)
    k3 = eval_f(x_n + half * k2, t_n + half)
    k4 = eval_f(x_n + dt * k3, t_n + dt)
    return x_n + (dt / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)


def rk4(eval_f: Callable,
        x0: np.ndarray,
        t_start: float,
        t_stop: float,
        dt: float,
        verbose: bool = False) -> Tuple[np.ndarray, np.ndarray]:
    """
    RK4 integrator with fixed time step.

    Every step is accepted: there is no error control and no final partial
    step, so the last time point is t_start + N*dt, which may fall short of
    t_stop by less than dt. Non-finite states propagate without raising.

    Parameters
    ----------
    eval_f : callable
        Function that evaluates f(x, t) where dx/dt = f(x, t)
        Signature: f = eval_f(x, t), x and f of shape (N,)
    x0 : array
        Initial state vector, shape (N,) or (N,1)
    t_start : float
        Starting time
    t_stop : float
        Stopping time
    dt : float
        Fixed time step size (∆t), must be positive
    verbose : bool
        If True, print progress information

    Returns
    -------
    X : array, shape (N, num_steps+1)
        State trajectory, X[:, n] is state at time t[n]
    t : array, shape (num_steps+1,)
        Time points, t[n] = t_start + n*dt
    """
    check_time_span(t_start, t_stop, dt)

    # Ensure x0 is 1D
    x0_flat = np.asarray(x0, dtype=float).ravel()
    N = x0_flat.size

    steps = num_steps(t_start, t_stop, dt)

    # Pre-allocate arrays
    X = np.zeros((N, steps + 1))
    t = t_start + dt * np.arange(steps + 1, dtype=float)

    # num_steps may round up (e.g. 0.3/0.1); keep the last time <= t_stop
    t[-1] = min(t[-1], t_stop)

    # Set initial condition (t[0] == t_start)
    X[:, 0] = x0_flat

    if verbose:
        print(f"RK4: {steps} steps with dt = {dt:.6e}")

    # Integration loop
    with np.errstate(over='ignore', invalid='ignore'):
        for n in range(steps):
            x_next = rk4_step(eval_f, X[:, n], t[n], dt)
            X[:, n+1] = np.asarray(x_next, dtype=float).ravel()

            if verbose and (n + 1) % max(1, steps // 10) == 0:
                print(f"  Step {n+1}/{steps}, t = {t[n+1]:.4f}")

    if verbose:
        print(f"Integration complete. Final state: {X[:, -1]}")

    return X, t
