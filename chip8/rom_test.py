import os
import tempfile
import unittest

from chip8.errors import RomFormatError
from chip8.rom import read_binary, read_hex, read_rom


PROGRAMS = os.path.join(os.path.dirname(__file__), "programs")

FONT_CYCLE = bytes([
    0x60, 0x00,     # LD V0, 0 (current character)
    0x61, 0x0A,     # LD V1, 10 (x position)
    0x62, 0x0A,     # LD V2, 10 (y position)
    0xF0, 0x29,     # LD F, V0
    0xD1, 0x25,     # DRW V1, V2, 5
    0x64, 0x1E,     # LD V4, 30 (half a second)
    0xF4, 0x15,     # LD DT, V4
    0xF5, 0x07,     # LD V5, DT
    0x35, 0x00,     # SE V5, 0
    0x12, 0x0E,     # JP 0x20e
    0x00, 0xE0,     # CLS
    0x65, 0x00,     # LD V5, 0
    0x70, 0x01,     # ADD V0, 1
    0x40, 0x10,     # SNE V0, 16
    0x60, 0x00,     # LD V0, 0
    0x12, 0x04,     # JP 0x204
])


class TestRomLoaders(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, name, data, mode='w'):
        path = os.path.join(self.tmp.name, name)
        with open(path, mode) as f:
            f.write(data)
        return path

    def test_hex_sample_program(self):
        self.assertEqual(read_hex(os.path.join(PROGRAMS, "font_cycle.hex")), FONT_CYCLE)

    def test_hex_tolerates_spacing_and_case(self):
        path = self.write("prog.hex", "a2 F0\n\n   d0 15  \n00\tE0\n")
        self.assertEqual(read_hex(path), bytes([0xA2, 0xF0, 0xD0, 0x15, 0x00, 0xE0]))

    def test_hex_rejects_garbage(self):
        path = self.write("bad.hex", "A2 F0\nZZ 00\n")
        with self.assertRaises(RomFormatError) as ctx:
            read_hex(path)
        self.assertIn(":2:", str(ctx.exception))

    def test_hex_rejects_binary_data(self):
        path = self.write("bad.hex", b"A2 F0\n\xff\xfe 00\n", mode='wb')
        with self.assertRaises(RomFormatError) as ctx:
            read_hex(path)
        self.assertIn("not a text hex ROM", str(ctx.exception))

    def test_hex_rejects_words(self):
        path = self.write("bad.hex", "A2F0\n")
        with self.assertRaises(RomFormatError):
            read_hex(path)

    def test_binary(self):
        path = self.write("prog.ch8", FONT_CYCLE, mode='wb')
        self.assertEqual(read_binary(path), FONT_CYCLE)

    def test_read_rom_picks_format_by_extension(self):
        text = self.write("prog.HEX", "12 00\n")
        raw = self.write("prog.ch8", b"12 00\n", mode='wb')
        self.assertEqual(read_rom(text), b"\x12\x00")
        self.assertEqual(read_rom(raw), b"12 00\n")


if __name__ == "__main__":
    unittest.main()
