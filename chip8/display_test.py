import unittest

from chip8.display import Framebuffer


class TestFramebuffer(unittest.TestCase):
    def test_flip_reports_erased_pixels(self):
        fb = Framebuffer()
        self.assertFalse(fb.flip_pixel(3, 4))
        self.assertEqual(fb.snapshot()[4][3], 1)
        self.assertTrue(fb.flip_pixel(3, 4))
        self.assertEqual(fb.snapshot()[4][3], 0)

    def test_snapshot_and_clear(self):
        fb = Framebuffer()
        fb.flip_pixel(63, 31)
        snap = fb.snapshot()
        self.assertEqual(len(snap), 32)
        self.assertTrue(all(len(row) == 64 for row in snap))
        self.assertEqual(snap[31][63], 1)
        self.assertEqual(sum(map(sum, snap)), 1)
        fb.clear()
        self.assertEqual(snap[31][63], 1)
        self.assertFalse(any(any(row) for row in fb.snapshot()))


if __name__ == "__main__":
    unittest.main()
