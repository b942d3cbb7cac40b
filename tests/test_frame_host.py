from flowfield.core.frame_host import Debouncer, FrameHandle, ManualFrameHost


def test_frames_requested_while_running_wait_for_next_call(host):
    calls = []

    def first():
        calls.append('first')
        host.request_frame(lambda: calls.append('second'))

    host.request_frame(first)
    assert host.run_frame() == 1
    assert calls == ['first']
    assert host.pending_frames == 1
    assert host.run_frame() == 1
    assert calls == ['first', 'second']
    assert host.frames_run == 2


def test_cancelled_frame_does_not_run(host):
    calls = []
    handle = host.request_frame(lambda: calls.append(1))
    host.cancel(handle)
    assert host.run_frame() == 0
    assert calls == []
    assert not handle.active


def test_handle_fires_once():
    calls = []
    handle = FrameHandle(lambda: calls.append(1))
    handle.fire()
    handle.fire()
    handle.cancel()
    assert calls == [1]
    assert handle.fired and not handle.cancelled


def test_timers_fire_in_due_order(host):
    calls = []
    host.call_later(300, lambda: calls.append('late'))
    host.call_later(100, lambda: calls.append('early'))
    host.advance_time(99)
    assert calls == []
    host.advance_time(1)
    assert calls == ['early']
    host.advance_time(500)
    assert calls == ['early', 'late']
    assert host.now_ms == 600


def test_run_until_idle_respects_limit(host):
    def again():
        host.request_frame(again)

    host.request_frame(again)
    assert host.run_until_idle(max_frames=10) == 10
    assert host.pending_frames == 1


def test_debouncer_runs_only_last_call_of_burst():
    host = ManualFrameHost()
    calls = []
    debouncer = Debouncer(host, 200, lambda *args: calls.append(args))

    debouncer.trigger(1)
    host.advance_time(50)
    debouncer.trigger(2)
    host.advance_time(50)
    debouncer.trigger(3)
    assert debouncer.pending
    assert host.pending_timers == 1

    host.advance_time(199)
    assert calls == []
    host.advance_time(1)
    assert calls == [(3,)]
    assert not debouncer.pending


def test_debouncer_cancel():
    host = ManualFrameHost()
    calls = []
    debouncer = Debouncer(host, 200, lambda: calls.append(1))
    debouncer.trigger()
    debouncer.cancel()
    host.advance_time(1000)
    assert calls == []


def test_separate_bursts_each_fire():
    host = ManualFrameHost()
    calls = []
    debouncer = Debouncer(host, 200, calls.append)
    debouncer.trigger('a')
    host.advance_time(250)
    debouncer.trigger('b')
    host.advance_time(250)
    assert calls == ['a', 'b']


def test_debouncer_flush_runs_pending_call_now():
    host = ManualFrameHost()
    calls = []
    debouncer = Debouncer(host, 200, lambda *args: calls.append(args))
    debouncer.trigger(1)
    debouncer.trigger(2)

    assert debouncer.flush() is True
    assert calls == [(2,)]
    assert not debouncer.pending
    assert host.pending_timers == 0

    host.advance_time(1000)
    assert calls == [(2,)]


def test_debouncer_flush_without_pending_call():
    host = ManualFrameHost()
    calls = []
    debouncer = Debouncer(host, 200, calls.append)
    assert debouncer.flush() is False

    debouncer.trigger('a')
    host.advance_time(200)
    assert calls == ['a']
    assert debouncer.flush() is False
    assert calls == ['a']
