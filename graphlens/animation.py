"""Animated playback: a cancellable periodic task driving layout steps.

Ticks run on the caller's asyncio event loop, one at a time, at a fixed
interval with no delta-time compensation. Stopping cancels the task between
frames; a step is never interrupted half way.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_S = 0.05


class Animator:
    """
    Calls ``step()`` then ``on_frame()`` every ``interval_s`` seconds.

    Usage:
        animator = Animator(engine.step, redraw)
        animator.start()       # inside a running event loop
        ...
        animator.stop()
    """

    def __init__(
        self,
        step: Callable[[], None],
        on_frame: Optional[Callable[[], None]] = None,
        interval_s: float = DEFAULT_INTERVAL_S,
    ):
        self._step = step
        self.on_frame = on_frame
        self.interval_s = interval_s if interval_s > 0 else DEFAULT_INTERVAL_S
        self._task: Optional[asyncio.Task] = None
        self.frames = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> None:
        """Advance one frame synchronously."""
        self._step()
        if self.on_frame is not None:
            self.on_frame()
        self.frames += 1

    async def run(self, frames: Optional[int] = None) -> int:
        """Tick until cancelled, or for ``frames`` ticks. Returns frames played."""
        played = 0
        try:
            while frames is None or played < frames:
                try:
                    self.tick()
                except Exception:
                    logger.exception("Animation frame failed, stopping playback")
                    break
                played += 1
                if frames is not None and played >= frames:
                    break
                await asyncio.sleep(self.interval_s)
        except asyncio.CancelledError:
            logger.debug("Playback cancelled after %d frame(s)", played)
            raise
        return played

    def start(self, frames: Optional[int] = None) -> asyncio.Task:
        """Start playback on the running loop. Idempotent while running."""
        if self.is_running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self.run(frames))
        return self._task

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def toggle(self) -> bool:
        """Play/pause. Returns True if playing afterwards."""
        if self.is_running:
            self.stop()
            return False
        self.start()
        return True
