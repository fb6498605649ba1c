#!/usr/bin/env python3
"""
Edge tracking for the 2D system

    dx/dt = -x + 10 y
    dy/dt = y (10 e^(-0.01 x^2) - y) (y - 1)

This script:
1. Integrates every initial condition of an (x0, y0) grid with fixed-step RK4
2. Saves each trajectory as <output-dir>/2dsystem_ic=<x0>_<y0>.d
3. Plots all trajectories with the edge line y = 1 and the laminar, edge and
   turbulent states into <output-dir>/2dsystem.png

The edge is read off the plot: initial conditions on one side decay to the
laminar state, those on the other side end up in the turbulent state.
"""

import argparse

from edge_tracking.vector_field import PROBLEM_DESCRIPTION
from edge_tracking.output import ResultSink
from edge_tracking.sweep import (
    run_sweep, summarize_sweep, print_summary_statistics,
    DEFAULT_IC_X, DEFAULT_IC_Y, DEFAULT_T_SPAN, DEFAULT_DT
)


def parse_float_list(text):
    """Parse a comma-separated list of floats, e.g. '-3,0.99,1.01'."""
    try:
        values = [float(v.strip()) for v in text.split(',') if v.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a comma-separated list of numbers: {text!r}")
    if not values:
        raise argparse.ArgumentTypeError("list of initial conditions is empty")
    return values


def build_parser():
    parser = argparse.ArgumentParser(
        description='Integrate the 2D edge-tracking system from a grid of initial conditions'
    )
    parser.add_argument('--ic-x', type=parse_float_list,
                       default=list(DEFAULT_IC_X),
                       help='Comma-separated x0 values (default: -3,0,...,18)')
    parser.add_argument('--ic-y', type=parse_float_list,
                       default=list(DEFAULT_IC_Y),
                       help='Comma-separated y0 values (default: -3,0.99,1.01)')
    parser.add_argument('--t-start', type=float, default=DEFAULT_T_SPAN[0],
                       help=f'Starting time (default: {DEFAULT_T_SPAN[0]})')
    parser.add_argument('--t-stop', type=float, default=DEFAULT_T_SPAN[1],
                       help=f'Stopping time (default: {DEFAULT_T_SPAN[1]})')
    parser.add_argument('--dt', type=float, default=DEFAULT_DT,
                       help=f'Fixed RK4 time step (default: {DEFAULT_DT})')
    parser.add_argument('--output-dir', type=str, default='result',
                       help='Directory for time series and figure (default: result)')
    parser.add_argument('--workers', type=int, default=1,
                       help='Number of parallel integration processes (default: 1)')
    parser.add_argument('--quiet', action='store_true',
                       help='Suppress progress output')
    return parser


def main(argv=None):
    """Main function to run the initial-condition sweep."""
    parser = build_parser()
    args = parser.parse_args(argv)
    verbose = not args.quiet

    if verbose:
        print("="*70)
        print("EDGE TRACKING: 2D SYSTEM")
        print("="*70)
        print(f"\nSolve:\n{PROBLEM_DESCRIPTION}\n")
        print(f"Time range: ({args.t_start}, {args.t_stop})")
        print(f"Time step: {args.dt}")
        print(f"Output directory: {args.output_dir}\n")

    sink = ResultSink(args.output_dir, verbose=verbose)
    try:
        results = run_sweep(
            ic_x_list=args.ic_x,
            ic_y_list=args.ic_y,
            t_span=(args.t_start, args.t_stop),
            dt=args.dt,
            sink=sink,
            workers=args.workers,
            verbose=verbose
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        sink.save_sweep_results(results)
    except OSError as e:
        if verbose:
            print(f"ERROR saving sweep results: {e}")

    summary = summarize_sweep(results)
    if verbose:
        print_summary_statistics(summary)

    return results


if __name__ == '__main__':
    main()
