# vector_field.py
import numpy as np

# Reference states of the system in the (x, y) plane
LAMINAR_STATE = (0.0, 0.0)
EDGE_STATE = (10.0, 1.0)
TURBULENT_STATE = (14.0, 1.4)

# y = 1 is invariant: dy/dt vanishes there for every x
EDGE_LINE_Y = 1.0

PROBLEM_DESCRIPTION = (
    "dx/dt = -x + 10 y\n"
    "dy/dt = y (10 e^(-0.01 x^2) - y) (y - 1)"
)


def eval_f(x, t=None):
    """
    Evaluate f(x, t) for the 2D edge-tracking system

        dx/dt = -x + 10 y
        dy/dt = y (10 exp(-0.01 x^2) - y) (y - 1)

    The system is autonomous, so t is accepted and ignored.

    Compatible input shapes for x:
      - 1-D array shape (2,)     -> returns 1-D array shape (2,)
      - column array shape (2,1) -> returns column array shape (2,1)

    Values are computed in float64. Overflow is not trapped: a diverging
    state yields inf/nan components instead of raising.
    """
    # --- normalize input shapes ---
    x_in = np.asarray(x, dtype=float)
    was_column = (x_in.ndim == 2 and x_in.shape[1] == 1)
    x_flat = x_in.ravel()

    if x_flat.size != 2:
        raise ValueError(f"state must have length 2 (x, y); got {x_flat.size}")

    xs = x_flat[0]
    ys = x_flat[1]

    with np.errstate(over='ignore', invalid='ignore', under='ignore'):
        x_dot = -xs + 10.0 * ys
        y_dot = ys * (10.0 * np.exp(-0.01 * xs**2) - ys) * (ys - 1.0)

    f_flat = np.array([x_dot, y_dot], dtype=float)

    # return in matching shape: column if input was column, else 1-D
    if was_column:
        return f_flat.reshape((2, 1))
    return f_flat
