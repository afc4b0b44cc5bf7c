import logging
import time

from chip8.constants import TIMER_PERIOD

logger = logging.getLogger(__name__)


class TimerDriver:
    """
    counts the delay and sound timers of a Chip8 down at 60 Hz of wall-clock time

    update() is meant to be called at least once per instruction cycle, the timers
    only move when more than `period` seconds went by since they last fired, whatever the
    instruction rate is; missed periods are not made up for
    """
    def __init__(self, chip, period=TIMER_PERIOD, clock=time.monotonic):
        self.chip = chip
        self.period = period
        self._clock = clock
        self._last = clock()

    def __repr__(self):
        return f"TimerDriver(period={self.period}, due={self.due})"

    @property
    def due(self):
        return self._clock() - self._last > self.period

    def update(self):
        """decrement DT and ST by one if a 60 Hz period elapsed, return True when the timers fired"""
        if not self.due:
            return False
        self._last = self._clock()
        self.countdown()
        return True

    def countdown(self):
        chip = self.chip
        if chip.dt > 0:
            chip.dt -= 1
        if chip.st > 0:
            chip.st -= 1
        if chip.st == 0 and chip.sound_enabled:
            chip.sound_enabled = False
            logger.debug("sound timer expired, tone off")
