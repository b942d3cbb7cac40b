"""
Frame scheduling primitives for FlowField.

A frame host runs callbacks "before the next frame" and after a delay, and
hands back cancellable handles. ManualFrameHost is deterministic and driven
explicitly (headless runs, tests); MatplotlibFrameHost uses figure canvas
timers. Debouncer coalesces bursts of calls into the last one.
"""

import heapq
import itertools


class FrameHandle:
    """Cancellable handle to a scheduled callback."""

    def __init__(self, callback, cancel_fn=None):
        self.callback = callback
        self.cancelled = False
        self.fired = False
        self._cancel_fn = cancel_fn

    @property
    def active(self):
        return not (self.cancelled or self.fired)

    def cancel(self):
        if not self.active:
            return
        self.cancelled = True
        if self._cancel_fn is not None:
            self._cancel_fn()

    def fire(self):
        if not self.active:
            return
        self.fired = True
        self.callback()


class ManualFrameHost:
    """
    Frame host driven by explicit calls.

    Frames are queued by request_frame and executed by run_frame; timers are
    queued by call_later and fired by advance_time against a virtual clock
    in milliseconds.
    """

    def __init__(self):
        self.now_ms = 0.0
        self.frames_run = 0
        self._frames = []
        self._timers = []
        self._order = itertools.count()

    def request_frame(self, callback):
        handle = FrameHandle(callback)
        self._frames.append(handle)
        return handle

    def call_later(self, delay_ms, callback):
        handle = FrameHandle(callback)
        heapq.heappush(self._timers, (self.now_ms + delay_ms, next(self._order), handle))
        return handle

    def cancel(self, handle):
        if handle is not None:
            handle.cancel()

    @property
    def pending_frames(self):
        return sum(1 for handle in self._frames if handle.active)

    @property
    def pending_timers(self):
        return sum(1 for _, _, handle in self._timers if handle.active)

    def run_frame(self):
        """
        Run the frames requested so far.

        Frames requested while running are left for the next call.

        Returns:
            int: Number of callbacks executed
        """
        frames, self._frames = self._frames, []
        executed = 0
        for handle in frames:
            if handle.active:
                handle.fire()
                executed += 1
        self.frames_run += executed
        return executed

    def advance_time(self, ms):
        """Move the virtual clock forward, firing due timers in order."""
        target = self.now_ms + ms
        while self._timers and self._timers[0][0] <= target:
            due, _, handle = heapq.heappop(self._timers)
            self.now_ms = due
            handle.fire()
        self.now_ms = target

    def run_until_idle(self, max_frames=None):
        """
        Run frames until none are pending.

        Args:
            max_frames (int, optional): Stop after this many frame batches

        Returns:
            int: Number of frame batches run
        """
        batches = 0
        while self.pending_frames:
            if max_frames is not None and batches >= max_frames:
                break
            self.run_frame()
            batches += 1
        return batches


class MatplotlibFrameHost:
    """Frame host backed by single-shot matplotlib canvas timers."""

    def __init__(self, fig, interval_ms=16):
        self.fig = fig
        self.interval_ms = interval_ms
        self._timers = {}

    def _start_timer(self, delay_ms, callback):
        timer = self.fig.canvas.new_timer(interval=max(1, int(delay_ms)))
        timer.single_shot = True
        handle = FrameHandle(callback, cancel_fn=timer.stop)

        def _on_timer():
            self._timers.pop(id(handle), None)
            handle.fire()

        timer.add_callback(_on_timer)
        self._timers[id(handle)] = timer
        timer.start()
        return handle

    def request_frame(self, callback):
        return self._start_timer(self.interval_ms, callback)

    def call_later(self, delay_ms, callback):
        return self._start_timer(delay_ms, callback)

    def cancel(self, handle):
        if handle is not None:
            handle.cancel()
            self._timers.pop(id(handle), None)


class Debouncer:
    """
    Run a function only for the last call of a burst.

    Holds at most one pending call. Each trigger cancels the pending call and
    arms a new one delay_ms later; firing clears the slot and then calls the
    function synchronously.
    """

    def __init__(self, host, delay_ms, fn):
        self.host = host
        self.delay_ms = delay_ms
        self.fn = fn
        self._pending = None
        self._fire = None

    @property
    def pending(self):
        return self._pending is not None and self._pending.active

    def trigger(self, *args, **kwargs):
        self.cancel()

        def _fire():
            self._pending = None
            self.fn(*args, **kwargs)

        self._fire = _fire
        self._pending = self.host.call_later(self.delay_ms, _fire)
        return self._pending

    def cancel(self):
        if self._pending is not None:
            self.host.cancel(self._pending)
            self._pending = None
        self._fire = None

    def flush(self):
        """
        Run the pending call now instead of waiting for its timer.

        Returns:
            bool: True if a pending call was run
        """
        if not self.pending:
            return False
        fire = self._fire
        self.cancel()
        fire()
        return True
