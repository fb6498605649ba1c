"""
edge_tracking: locating the edge state of a bistable 2D ODE

Integrates the system
    dx/dt = -x + 10 y
    dy/dt = y (10 exp(-0.01 x^2) - y) (y - 1)
with fixed-step RK4 from a grid of initial conditions, and writes each
trajectory plus a phase-plane plot with the laminar, edge and turbulent states.

Cf. R. Kerswell, "Edge Tracking - Walking the Tightrope".
"""

from edge_tracking.vector_field import eval_f
from edge_tracking.rk4 import rk4, rk4_step
from edge_tracking.output import ResultSink, load_timeseries
from edge_tracking.sweep import run_sweep

__all__ = ['eval_f', 'rk4', 'rk4_step', 'ResultSink', 'load_timeseries', 'run_sweep']
