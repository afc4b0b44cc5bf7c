import unittest

from chip8.cpu import Chip8
from chip8.timers import TimerDriver

PERIOD_60HZ = 1 / 60


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestTimerDriver(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.chip = Chip8()
        self.timers = TimerDriver(self.chip, clock=self.clock)

    def test_delay_timer_counts_down_to_zero(self):
        self.chip.dt = 5
        for _ in range(5):
            self.clock.advance(PERIOD_60HZ)
            self.assertTrue(self.timers.update())
        self.assertEqual(self.chip.dt, 0)
        self.clock.advance(PERIOD_60HZ)
        self.timers.update()
        self.assertEqual(self.chip.dt, 0)

    def test_waits_for_a_whole_period(self):
        self.chip.dt = 3
        self.clock.advance(0.010)
        self.assertFalse(self.timers.due)
        self.assertFalse(self.timers.update())
        self.clock.advance(0.010)
        self.assertTrue(self.timers.due)
        self.assertTrue(self.timers.update())
        self.assertEqual(self.chip.dt, 2)

    def test_missed_periods_are_not_made_up(self):
        self.chip.dt = 10
        self.clock.advance(1.0)
        self.timers.update()
        self.assertEqual(self.chip.dt, 9)

    def test_sound_stops_with_the_sound_timer(self):
        self.chip.st = 2
        self.chip.sound_enabled = True
        self.clock.advance(PERIOD_60HZ)
        self.timers.update()
        self.assertTrue(self.chip.sound_enabled)
        self.clock.advance(PERIOD_60HZ)
        self.timers.update()
        self.assertEqual(self.chip.st, 0)
        self.assertFalse(self.chip.sound_enabled)


if __name__ == "__main__":
    unittest.main()
