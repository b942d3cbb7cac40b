"""
Simulation scheduler for FlowField.

The scheduler owns every piece of mutable simulation state in a single
SimulationContext and drives the field -> lookup -> advection pipeline once
per frame through a frame host. It implements the IDLE -> RUNNING -> STOPPED
state machine, pausing, the debounced resize and the pattern shuffle.
"""

from dataclasses import dataclass, field as dataclass_field
from enum import Enum

import numpy as np

from .. import config
from ..errors import SchedulerStateError
from ..physics.grid_computation import generate_field
from ..physics.lookup import LookupCache
from ..physics.particle_system import (
    advance, create_particle, has_finite_position, respawn_particle,
)
from ..physics.patterns import resolve_pattern, shuffle_pattern
from .frame_host import Debouncer


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class SimulationClock:
    """Tick counter bounded by a fixed tick limit."""

    tick_limit: int
    tick: int = 1
    paused: bool = False

    @property
    def expired(self):
        return self.tick > self.tick_limit

    def advance(self):
        self.tick += 1
        return self.tick

    def reset(self):
        self.tick = 1


@dataclass
class SimulationContext:
    """All state of one simulation; owned and mutated by the Scheduler only."""

    field: object
    particle: object
    width: float
    height: float
    scale_factor: float
    clock: SimulationClock
    cache: object = None
    last_match: object = None
    field_rendered: bool = False
    frames_executed: int = 0
    pending_frame: object = dataclass_field(default=None, repr=False)

    @property
    def extent(self):
        return (self.width, self.height)


class RenderSink:
    """Receiver of the data the scheduler exposes for drawing. Does nothing."""

    def draw_field(self, field, scale_factor, extent):
        pass

    def draw_frame(self, particle, match, scale_factor):
        pass

    def on_stop(self, summary):
        pass


class Scheduler:
    """
    Tick-driven simulation loop.

    Args:
        host: Frame host (ManualFrameHost or MatplotlibFrameHost)
        sink (RenderSink, optional): Receives field and per-frame data
        width, height (float, optional): Initial canvas extent in pixels
        pattern (FieldPattern or str, optional): Initial field pattern
        steps (int, optional): Samples per field axis
        field_shape (float, optional): Field-space extent of each axis
        tick_limit (int, optional): Frames to run before stopping
        interpolation_factor (float, optional): Advection blend factor
        lerped (bool, optional): Blend (True) or add (False) the force term
        metric, method (str, optional): Spatial lookup options
        use_cache (bool, optional): Memoize lookups by quantized position
        debounce_ms (float, optional): Resize debounce window
        seed (int, optional): Seed for particle placement and shuffles
    """

    def __init__(self, host, sink=None, width=None, height=None, pattern=None, steps=None,
                 field_shape=None, tick_limit=None, interpolation_factor=None, lerped=None,
                 metric=None, method=None, use_cache=None, debounce_ms=None, seed=None):
        self.host = host
        self.sink = sink if sink is not None else RenderSink()
        self.pattern = resolve_pattern(pattern if pattern is not None else config.DEFAULT_PATTERN)
        self.steps = steps if steps is not None else config.DEFAULT_FIELD_STEPS
        self.field_shape = field_shape if field_shape is not None else config.N_FIELD_SHAPE
        self.interpolation_factor = (config.INTERPOLATION_FACTOR
                                     if interpolation_factor is None else interpolation_factor)
        self.lerped = config.LERP_ADVECTION if lerped is None else lerped
        self.metric = metric or config.DEFAULT_METRIC
        self.method = method or config.DEFAULT_LOOKUP_METHOD
        self.rng = np.random.default_rng(seed)
        self.state = SchedulerState.IDLE

        width = config.DEFAULT_CANVAS_WIDTH if width is None else width
        height = config.DEFAULT_CANVAS_HEIGHT if height is None else height
        if tick_limit is None:
            tick_limit = config.compute_tick_limit()
        if use_cache is None:
            use_cache = config.USE_LOOKUP_CACHE

        scale_factor = config.compute_scale_factor(width, self.field_shape)
        self.context = SimulationContext(
            field=self._build_field(),
            particle=create_particle(width, height, self.rng),
            width=width,
            height=height,
            scale_factor=scale_factor,
            clock=SimulationClock(tick_limit=tick_limit),
            cache=LookupCache(scale_factor) if use_cache else None,
        )

        if debounce_ms is None:
            debounce_ms = config.RESIZE_DEBOUNCE_MS
        self._resize_debouncer = Debouncer(host, debounce_ms, self._apply_resize)

    # ------------------------------------------------------------------
    # Read-only views for renderers and callers

    @property
    def field(self):
        return self.context.field

    @property
    def particle(self):
        return self.context.particle

    @property
    def clock(self):
        return self.context.clock

    @property
    def last_match(self):
        return self.context.last_match

    @property
    def paused(self):
        return self.context.clock.paused

    @property
    def resize_pending(self):
        return self._resize_debouncer.pending

    def _build_field(self):
        return generate_field(self.field_shape, self.field_shape, self.steps, self.pattern)

    # ------------------------------------------------------------------
    # State transitions

    def start(self):
        """Enter RUNNING from IDLE and schedule the first frame."""
        if self.state is not SchedulerState.IDLE:
            raise SchedulerStateError(
                f"Cannot start a simulation that is {self.state.value}; reset it first."
            )
        self.context.clock.reset()
        self.state = SchedulerState.RUNNING
        self._render_field_once()
        self._schedule_next()
        if config.VERBOSE:
            print(f"Simulation started: pattern {self.pattern.value}, "
                  f"{len(self.context.field)} field points, tick limit {self.context.clock.tick_limit}.")

    def stop(self):
        """Cancel the pending frame and enter the terminal STOPPED state."""
        self._cancel_pending_frame()
        if self.state is SchedulerState.STOPPED:
            return
        self.state = SchedulerState.STOPPED
        summary = self.summary()
        if config.VERBOSE:
            print(f"Simulation completed after {summary['tick']} ticks.")
            print(f"\tUnique scaled points collected = {summary['cache_size']}")
            if not summary['finite']:
                print("\tParticle position is no longer finite.")
        self.sink.on_stop(summary)

    def reset(self, restart=True):
        """
        Reset all simulation state and return to IDLE.

        Args:
            restart (bool): Start the simulation again afterwards
        """
        self._cancel_pending_frame()
        # A resize still waiting in the debouncer is applied, not dropped
        if not self._resize_debouncer.flush():
            self._reset_context(self.context.width, self.context.height)
        self.state = SchedulerState.IDLE
        if restart:
            self.start()

    def pause(self):
        self.context.clock.paused = True

    def resume(self):
        self.context.clock.paused = False

    def toggle_pause(self):
        self.context.clock.paused = not self.context.clock.paused
        return self.context.clock.paused

    def request_resize(self, width, height):
        """Debounced resize; only the last request of a burst is applied."""
        self._resize_debouncer.trigger(width, height)

    def shuffle_pattern(self):
        """
        Switch to a different random pattern and restart from IDLE.

        Returns:
            FieldPattern: The newly active pattern
        """
        self.pattern = shuffle_pattern(self.pattern, self.rng)
        self.context.field = self._build_field()
        if config.VERBOSE:
            print(f"Field pattern shuffled to {self.pattern.value}.")
        self.reset(restart=True)
        return self.pattern

    # ------------------------------------------------------------------
    # Frame loop

    def _schedule_next(self):
        self.context.pending_frame = self.host.request_frame(self._on_frame)

    def _cancel_pending_frame(self):
        if self.context.pending_frame is not None:
            self.host.cancel(self.context.pending_frame)
            self.context.pending_frame = None

    def _render_field_once(self):
        ctx = self.context
        if ctx.field_rendered:
            return
        self.sink.draw_field(ctx.field, ctx.scale_factor, ctx.extent)
        ctx.field_rendered = True

    def _on_frame(self):
        ctx = self.context
        ctx.pending_frame = None
        if self.state is not SchedulerState.RUNNING:
            return
        if ctx.clock.paused:
            self._schedule_next()
            return

        ctx.clock.advance()
        self._render_field_once()
        ctx.last_match = advance(
            ctx.particle, ctx.field, self.interpolation_factor,
            config.compute_resistance(ctx.scale_factor), ctx.scale_factor, ctx.extent,
            lerped=self.lerped, metric=self.metric, method=self.method, cache=ctx.cache,
        )
        ctx.frames_executed += 1
        self.sink.draw_frame(ctx.particle, ctx.last_match.point, ctx.scale_factor)

        if ctx.clock.expired:
            self.stop()
            return
        self._schedule_next()

    # ------------------------------------------------------------------
    # Resets

    def _reset_context(self, width, height):
        ctx = self.context
        ctx.width = width
        ctx.height = height
        ctx.scale_factor = config.compute_scale_factor(width, self.field_shape)
        respawn_particle(ctx.particle, width, height, self.rng)
        ctx.last_match = None
        ctx.clock.reset()
        ctx.frames_executed = 0
        if ctx.cache is not None:
            ctx.cache.clear(ctx.scale_factor)
        ctx.field_rendered = False

    def _apply_resize(self, width, height):
        self._reset_context(width, height)
        if config.VERBOSE:
            print(f"Canvas resized to {width}x{height}, scale factor {self.context.scale_factor:.2f}.")

    def summary(self):
        """Plain-data snapshot of the simulation progress."""
        ctx = self.context
        return {
            'state': self.state.value,
            'pattern': self.pattern.value,
            'tick': ctx.clock.tick,
            'tick_limit': ctx.clock.tick_limit,
            'frames_executed': ctx.frames_executed,
            'paused': ctx.clock.paused,
            'scale_factor': ctx.scale_factor,
            'particle': (ctx.particle.x, ctx.particle.y),
            'finite': has_finite_position(ctx.particle),
            'cache_size': len(ctx.cache) if ctx.cache is not None else 0,
            'cache_hits': ctx.cache.hits if ctx.cache is not None else 0,
        }
