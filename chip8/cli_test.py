import os
import tempfile
import unittest

from chip8.cli import get_args, main, read_rom
from chip8.constants import CPU_HZ, MAX_ROM_SIZE, SCALE


class TestArgs(unittest.TestCase):
    def test_defaults(self):
        args = get_args(["-f", "pong.ch8"])
        self.assertEqual(args.file, "pong.ch8")
        self.assertEqual(args.hz, CPU_HZ)
        self.assertEqual(args.scale, SCALE)
        self.assertFalse(args.mute)

    def test_overrides(self):
        args = get_args(["--file", "pong.ch8", "--hz", "700", "--scale", "8", "--mute"])
        self.assertEqual((args.hz, args.scale, args.mute), (700, 8, True))

    def test_rom_is_required(self):
        with self.assertRaises(SystemExit):
            get_args([])

    def test_rate_must_be_positive(self):
        with self.assertRaises(SystemExit):
            get_args(["-f", "pong.ch8", "--hz", "0"])


class TestRomLoading(unittest.TestCase):
    def setUp(self):
        fd, self.path = tempfile.mkstemp(suffix=".ch8")
        os.close(fd)

    def tearDown(self):
        os.remove(self.path)

    def write(self, data):
        with open(self.path, mode='wb') as f:
            f.write(data)

    def test_read_rom(self):
        self.write(b"\x00\xE0\x12\x00")
        self.assertEqual(read_rom(self.path), b"\x00\xE0\x12\x00")

    def test_oversized_rom_refused(self):
        self.write(b"\x00" * (MAX_ROM_SIZE + 2))
        with self.assertRaises(SystemExit) as ctx:
            main(["-f", self.path])
        self.assertIn("error loading", str(ctx.exception.code))

    def test_missing_rom(self):
        with self.assertRaises(SystemExit) as ctx:
            main(["-f", self.path + ".missing"])
        self.assertIn("error reading", str(ctx.exception.code))


if __name__ == "__main__":
    unittest.main()
