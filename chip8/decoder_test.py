import unittest

from chip8.decoder import Instruction, decode, identify
from chip8.errors import IllegalOpcodeError


class TestDecode(unittest.TestCase):
    def test_fields(self):
        op = decode(0xD12A)
        self.assertEqual(op.kind, 0xD)
        self.assertEqual(op.nnn, 0x12A)
        self.assertEqual(op.nn, 0x2A)
        self.assertEqual(op.n, 0xA)
        self.assertEqual(op.x, 0x1)
        self.assertEqual(op.y, 0x2)

    def test_any_word_decodes(self):
        for word in (0x0000, 0xFFFF, 0x5A5A, 0x8F0E):
            with self.subTest(word=hex(word)):
                op = decode(word)
                self.assertEqual(op.word, word)
                self.assertEqual((op.kind << 12) | op.nnn, word)


class TestIdentify(unittest.TestCase):
    def test_every_instruction(self):
        words = {
            0x0123: Instruction.SYS, 0x00E0: Instruction.CLS, 0x00EE: Instruction.RET,
            0x1234: Instruction.JUMP, 0x2345: Instruction.CALL, 0x3456: Instruction.SE,
            0x4567: Instruction.SNE, 0x5670: Instruction.SER, 0x6789: Instruction.LOAD,
            0x789A: Instruction.ADD, 0x8120: Instruction.MOVE, 0x8121: Instruction.OR,
            0x8122: Instruction.AND, 0x8123: Instruction.XOR, 0x8124: Instruction.ADDR,
            0x8125: Instruction.SUB, 0x8126: Instruction.SHR, 0x8127: Instruction.SUBN,
            0x812E: Instruction.SHL, 0x9120: Instruction.SNER, 0xA123: Instruction.LOADI,
            0xB123: Instruction.JUMPI, 0xC1FF: Instruction.RAND, 0xD125: Instruction.DRAW,
            0xE39E: Instruction.SKPR, 0xE3A1: Instruction.SKUP, 0xF307: Instruction.MOVED,
            0xF30A: Instruction.KEYD, 0xF315: Instruction.LOADD, 0xF318: Instruction.LOADS,
            0xF31E: Instruction.ADDI, 0xF329: Instruction.LDSPR, 0xF333: Instruction.BCD,
            0xF355: Instruction.STOR, 0xF365: Instruction.READ,
        }
        self.assertEqual(len(set(words.values())), 35)
        for word, instruction in words.items():
            with self.subTest(word=hex(word)):
                self.assertIs(identify(decode(word)), instruction)

    def test_illegal_words(self):
        for word in (0x5121, 0x912F, 0x8128, 0x812F, 0xE100, 0xE19F, 0xF100, 0xF1FF):
            with self.subTest(word=hex(word)):
                with self.assertRaises(IllegalOpcodeError) as ctx:
                    identify(decode(word), 0x2F0)
                self.assertEqual(ctx.exception.opcode, word)
                self.assertEqual(ctx.exception.address, 0x2F0)


if __name__ == "__main__":
    unittest.main()
