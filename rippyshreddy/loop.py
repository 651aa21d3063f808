# loop.py
# Fixed-step scheduler: the simulation runs on a fixed tick, drawing runs
# whenever the host gets a frame, and each frame is told how far past the
# last tick it is (`at`) so visuals can extrapolate.
#
# The scheduler never reads a clock itself. The host feeds it elapsed time,
# which keeps it testable with made-up numbers.

from __future__ import annotations
import logging
from typing import Callable
from . import settings

log = logging.getLogger(__name__)


class FixedStepScheduler:
    def __init__(
        self,
        tick: Callable[[float], None],
        frame: Callable[[float], None],
        step: float = settings.TICK,
        max_catchup: int = settings.MAX_CATCHUP_TICKS,
    ):
        if step <= 0:
            raise ValueError(f"Tick step must be positive, got {step}")

        self.tick = tick
        self.frame = frame
        self.step = step
        self.max_catchup = max_catchup

        self.since_tick = 0.0
        self.ticks = 0

    def advance(self, elapsed: float) -> int:
        """Run the ticks due after `elapsed` seconds, then one frame. Returns ticks run."""
        self.since_tick += max(0.0, elapsed)

        ran = 0
        while self.since_tick >= self.step:
            if ran == self.max_catchup:
                # Too far behind (debugger, window drag): drop the backlog
                log.debug("dropping %.3fs of simulation backlog", self.since_tick)
                self.since_tick %= self.step
                break
            self.tick(self.step)
            self.since_tick -= self.step
            ran += 1

        self.ticks += ran
        self.frame(self.since_tick)
        return ran
