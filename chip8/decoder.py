"""
opcode decoding

decode() splits a 16-bit instruction word in its operand fields and never fails,
identify() names the instruction the word stands for and raises IllegalOpcodeError
when the word is none of the 35 CHIP-8 instructions
"""
from collections import namedtuple
from enum import Enum
from typing import Optional

from chip8.errors import IllegalOpcodeError


Opcode = namedtuple("Opcode", ["word", "kind", "nnn", "nn", "n", "x", "y"])


class Instruction(Enum):
    SYS = "0nnn"
    CLS = "00E0"
    RET = "00EE"
    JUMP = "1nnn"
    CALL = "2nnn"
    SE = "3xnn"
    SNE = "4xnn"
    SER = "5xy0"
    LOAD = "6xnn"
    ADD = "7xnn"
    MOVE = "8xy0"
    OR = "8xy1"
    AND = "8xy2"
    XOR = "8xy3"
    ADDR = "8xy4"
    SUB = "8xy5"
    SHR = "8xy6"
    SUBN = "8xy7"
    SHL = "8xyE"
    SNER = "9xy0"
    LOADI = "Annn"
    JUMPI = "Bnnn"
    RAND = "Cxnn"
    DRAW = "Dxyn"
    SKPR = "Ex9E"
    SKUP = "ExA1"
    MOVED = "Fx07"
    KEYD = "Fx0A"
    LOADD = "Fx15"
    LOADS = "Fx18"
    ADDI = "Fx1E"
    LDSPR = "Fx29"
    BCD = "Fx33"
    STOR = "Fx55"
    READ = "Fx65"


# WATCH OUT: masks order is important!!!
# as the loop in identify() stops as soon as it finds a match
MASKS = (
    (0xFFFF, {0x00E0: Instruction.CLS, 0x00EE: Instruction.RET}),
    (0xF0FF, {0xE09E: Instruction.SKPR, 0xE0A1: Instruction.SKUP,
              0xF007: Instruction.MOVED, 0xF00A: Instruction.KEYD, 0xF015: Instruction.LOADD,
              0xF018: Instruction.LOADS, 0xF01E: Instruction.ADDI, 0xF029: Instruction.LDSPR,
              0xF033: Instruction.BCD, 0xF055: Instruction.STOR, 0xF065: Instruction.READ}),
    (0xF00F, {0x5000: Instruction.SER, 0x9000: Instruction.SNER,
              0x8000: Instruction.MOVE, 0x8001: Instruction.OR, 0x8002: Instruction.AND,
              0x8003: Instruction.XOR, 0x8004: Instruction.ADDR, 0x8005: Instruction.SUB,
              0x8006: Instruction.SHR, 0x8007: Instruction.SUBN, 0x800E: Instruction.SHL}),
    (0xF000, {0x0000: Instruction.SYS, 0x1000: Instruction.JUMP, 0x2000: Instruction.CALL,
              0x3000: Instruction.SE, 0x4000: Instruction.SNE, 0x6000: Instruction.LOAD,
              0x7000: Instruction.ADD, 0xA000: Instruction.LOADI, 0xB000: Instruction.JUMPI,
              0xC000: Instruction.RAND, 0xD000: Instruction.DRAW}),
)


def decode(word: int) -> Opcode:
    """split a 16-bit instruction word in its fields"""
    word &= 0xFFFF
    return Opcode(
        word=word,
        kind=(word & 0xF000) >> 12,
        nnn=word & 0x0FFF,
        nn=word & 0x00FF,
        n=word & 0x000F,
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
    )


def identify(opcode: Opcode, address: Optional[int] = None) -> Instruction:
    """return the instruction matching the opcode, raise IllegalOpcodeError if there's none"""
    for mask, instructions in MASKS:
        instruction = instructions.get(opcode.word & mask)
        if instruction is not None:
            return instruction
    raise IllegalOpcodeError(opcode.word, address)
