"""Tests for animated playback."""

import asyncio

from graphlens.animation import DEFAULT_INTERVAL_S, Animator


def test_tick_calls_step_then_frame():
    calls = []
    animator = Animator(lambda: calls.append("step"), lambda: calls.append("frame"))
    animator.tick()
    assert calls == ["step", "frame"]
    assert animator.frames == 1


def test_run_bounded_frames():
    steps = []
    animator = Animator(lambda: steps.append(1), interval_s=0.001)
    played = asyncio.run(animator.run(frames=3))
    assert played == 3
    assert len(steps) == 3


def test_failing_step_stops_playback():
    def boom():
        raise RuntimeError("bad frame")

    animator = Animator(boom, interval_s=0.001)
    assert asyncio.run(animator.run(frames=5)) == 0
    assert animator.frames == 0


def test_start_stop():
    steps = []
    animator = Animator(lambda: steps.append(1), interval_s=0.001)

    async def scenario():
        task = animator.start()
        assert animator.start() is task
        assert animator.is_running
        await asyncio.sleep(0.05)
        animator.stop()
        assert not animator.is_running

    asyncio.run(scenario())
    assert steps


def test_toggle():
    animator = Animator(lambda: None, interval_s=0.001)

    async def scenario():
        assert animator.toggle() is True
        await asyncio.sleep(0)
        assert animator.toggle() is False

    asyncio.run(scenario())
    assert not animator.is_running


def test_invalid_interval_uses_default():
    assert Animator(lambda: None, interval_s=0).interval_s == DEFAULT_INTERVAL_S
