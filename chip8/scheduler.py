import time

from chip8.constants import CPU_HZ
from chip8.timers import TimerDriver


class Scheduler:
    """
    drives a Chip8 at a fixed instruction rate

    each step runs the timer check and then exactly one fetch-decode-execute cycle,
    tick() only steps when a whole instruction period has elapsed since the previous step
    and never runs extra steps to catch up with missed ones
    """
    def __init__(self, chip, hz=CPU_HZ, timers=None, clock=time.monotonic):
        self.chip = chip
        self.period = 1.0 / hz
        self.timers = timers if timers is not None else TimerDriver(chip, clock=clock)
        self._clock = clock
        self._last = clock()

    def step(self):
        """advance the machine by one cycle, return the IllegalOpcode diagnostic if any"""
        self.timers.update()
        return self.chip.cycle()

    def tick(self):
        now = self._clock()
        if now - self._last < self.period:
            return None
        self._last = now
        return self.step()
