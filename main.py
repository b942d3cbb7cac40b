#!/usr/bin/env python3
"""
FlowField entry point.

Animates a tracer particle advected through a generated vector field, either
in an interactive matplotlib window or headless until the tick limit.

Usage:
    python main.py
    python main.py --pattern CLOCKWISE --steps 16
    python main.py --headless --tick-limit 500 --seed 7
    python main.py --headless --save output
"""

import argparse
import sys

from flowfield import config
from flowfield.errors import FieldConfigurationError
from flowfield.physics.lookup import METHODS, METRICS
from flowfield.physics.patterns import available_patterns


def parse_arguments(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='FlowField - Animate a particle through a vector field',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                               # Sinusoidal field in a window
  python main.py --pattern CLOCKWISE           # Pick the field pattern
  python main.py --headless --tick-limit 500   # Run without a window
  python main.py --list-patterns               # List available patterns
        """
    )

    parser.add_argument('--pattern', '-p', type=str, default=config.DEFAULT_PATTERN,
                        help=f'Field pattern (default: {config.DEFAULT_PATTERN})')
    parser.add_argument('--steps', '-s', type=int, default=config.DEFAULT_FIELD_STEPS,
                        help=f'Field samples per axis, a power of 2 (default: {config.DEFAULT_FIELD_STEPS})')
    parser.add_argument('--width', type=int, default=config.DEFAULT_CANVAS_WIDTH,
                        help='Canvas width in pixels')
    parser.add_argument('--height', type=int, default=config.DEFAULT_CANVAS_HEIGHT,
                        help='Canvas height in pixels')
    parser.add_argument('--tick-limit', '-n', type=int, default=None,
                        help='Frames to run before stopping (default: derived from the frame rate)')
    parser.add_argument('--metric', choices=METRICS, default=config.DEFAULT_METRIC,
                        help='Distance metric of the nearest-point lookup')
    parser.add_argument('--lookup', choices=METHODS, default=config.DEFAULT_LOOKUP_METHOD,
                        help='Nearest-point search method')
    parser.add_argument('--cache', action='store_true',
                        help='Memoize lookups by quantized position')
    parser.add_argument('--interpolation', '-t', type=float, default=config.INTERPOLATION_FACTOR,
                        help='Advection blend factor in [0, 1]')
    parser.add_argument('--no-lerp', action='store_true',
                        help='Add the force term to the position instead of blending')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for particle placement and shuffles')
    parser.add_argument('--headless', action='store_true',
                        help='Run to completion without opening a window')
    parser.add_argument('--save', type=str, default=None, metavar='DIR',
                        help='Save the final frame as a PNG into DIR')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print simulation status messages')
    parser.add_argument('--list-patterns', '-l', action='store_true',
                        help='List all available patterns and exit')

    return parser.parse_args(argv)


def build_scheduler(args, host, sink=None):
    """Create a scheduler configured from parsed arguments."""
    from flowfield.core.scheduler import Scheduler

    if not 0.0 <= args.interpolation <= 1.0:
        raise FieldConfigurationError(
            f"Expected interpolation factor to be between 0.0 and 1.0. Got {args.interpolation}."
        )

    return Scheduler(
        host,
        sink=sink,
        width=args.width,
        height=args.height,
        pattern=args.pattern,
        steps=args.steps,
        tick_limit=args.tick_limit,
        interpolation_factor=args.interpolation,
        lerped=not args.no_lerp,
        metric=args.metric,
        method=args.lookup,
        use_cache=args.cache,
        seed=args.seed,
    )


def run_headless(args):
    """Drive the simulation with a manual frame host until it stops."""
    from flowfield.core.frame_host import ManualFrameHost

    host = ManualFrameHost()
    scheduler = build_scheduler(args, host)
    scheduler.start()
    host.run_until_idle()

    summary = scheduler.summary()
    print(f"Pattern {summary['pattern']}: {summary['frames_executed']} frames, "
          f"stopped at tick {summary['tick']} (limit {summary['tick_limit']}).")
    x, y = summary['particle']
    print(f"Final particle position: ({x:.2f}, {y:.2f})")
    if args.cache:
        print(f"Lookup cache: {summary['cache_size']} entries, {summary['cache_hits']} hits")

    if args.save:
        # Render only the final state; Agg would redraw on every frame otherwise
        import matplotlib
        matplotlib.use('Agg')
        from flowfield.visualization import visualization_core

        ctx = scheduler.context
        fig, ax = visualization_core.setup_figure_layout(ctx.width, ctx.height)
        sink = visualization_core.MatplotlibSink(fig, ax)
        sink.draw_field(ctx.field, ctx.scale_factor, ctx.extent)
        match = ctx.last_match.point if ctx.last_match is not None else None
        sink.draw_frame(ctx.particle, match, ctx.scale_factor)
        sink.on_stop(summary)
        path = visualization_core.save_final_figure(fig, args.save)
        print(f"Saved final frame to {path}")
    return scheduler


def run_interactive(args):
    """Open the matplotlib window and animate until closed."""
    import matplotlib.pyplot as plt
    from flowfield.core.frame_host import MatplotlibFrameHost
    from flowfield.ui.ui_controls import UIController
    from flowfield.visualization import visualization_core

    fig, ax = visualization_core.setup_figure_layout(args.width, args.height)
    if fig.canvas.manager is not None:
        fig.canvas.manager.set_window_title(f"{config.WINDOW_TITLE} - {args.pattern}")

    sink = visualization_core.MatplotlibSink(fig, ax)
    host = MatplotlibFrameHost(fig, config.FRAME_INTERVAL_MS)
    scheduler = build_scheduler(args, host, sink)
    ui_controller = UIController(fig, scheduler)

    scheduler.start()
    plt.show()

    if args.save:
        path = visualization_core.save_final_figure(fig, args.save)
        print(f"Saved final frame to {path}")
    return ui_controller


def main(argv=None):
    """Main function orchestrating the FlowField simulation."""
    args = parse_arguments(argv)
    config.VERBOSE = args.verbose

    if args.list_patterns:
        print("\nAvailable patterns:")
        print("-" * 40)
        for i, name in enumerate(available_patterns()):
            print(f"{i:3d}: {name}")
        print("-" * 40)
        return 0

    try:
        if args.headless:
            run_headless(args)
        else:
            run_interactive(args)
    except FieldConfigurationError as e:
        print(f"\nError: {e}")
        print("\nUse --list-patterns to see all available patterns.")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
