# CHIP-8 INFO
# https://chip-8.github.io/extensions/#chip-8
# https://chip-8.github.io/links/
#
# COWGOD'S TECHNICAL REFERENCE
# http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
#
# TEST SUITE
# https://github.com/Timendus/chip8-test-suite


import logging
import random
from collections import namedtuple
from enum import Enum
from functools import wraps

from chip8.constants import (
    FONT_START_ADDRESS, GLYPH_SIZE, REGISTER_COUNT, ROM_START_ADDRESS, SPRITE_WIDTH,
)
from chip8.decoder import Instruction, decode, identify
from chip8.display import Framebuffer
from chip8.errors import Chip8Error, IllegalOpcodeError, MachineHaltedError
from chip8.keypad import Keypad
from chip8.memory import Memory, Stack

logger = logging.getLogger(__name__)

IllegalOpcode = namedtuple("IllegalOpcode", ["opcode", "address"])


# ******************** UTILITIES SECTION
def asm(msg):
    """decorator to log the ASM of the instruction being called"""
    def decorator(fn):
        @wraps(fn)
        def wrapper_fn(*args, **kwargs):
            mem_addr = args[0].opcode_address   # args[0] equals self of the decorated method
            vals = fn(*args, **kwargs)          # use the locals() values of each decorated function in the message
            if logger.isEnabledFor(logging.DEBUG):
                vals['mem_addr'] = mem_addr
                logger.debug(msg.format(**vals))
        return wrapper_fn
    return decorator


class KeyWait(Enum):
    """state of the LD Vx, K latch"""
    IDLE = "idle"
    CAPTURED = "captured"


# ******************** CPU SECTION
class Chip8:
    def __init__(self, rom=b"", rng=None):
        self.mem = Memory(rom)
        self.stack = Stack()
        self.v_regs = bytearray(REGISTER_COUNT)
        self.pc = ROM_START_ADDRESS
        self.idx = 0    # specify where the sprites reside in memory
        self.dt = 0     # delay timer, active when non-zero
        self.st = 0     # sound timer, active when non-zero
        self.sound_enabled = False
        self.draw = False
        self.screen = Framebuffer()
        self.keypad = Keypad()
        self.key_wait = KeyWait.IDLE
        self.captured_key = None
        self.halted = False
        self.opcode_address = self.pc
        self.rng = rng if rng is not None else random.Random()
        self.instructions = {
            Instruction.SYS: self._sys,
            Instruction.CLS: self._clear_screen,
            Instruction.RET: self._return,
            Instruction.JUMP: self._jump,
            Instruction.CALL: self._call_addr,
            Instruction.SE: self._skip_if_eq,
            Instruction.SNE: self._skip_if_not_eq,
            Instruction.SER: self._skip_if_eq_regs,
            Instruction.LOAD: self._set_vk,
            Instruction.ADD: self._add_to_vk,
            Instruction.MOVE: self._set_vx_to_vy,
            Instruction.OR: self._set_vx_or_vy,
            Instruction.AND: self._set_vx_and_vy,
            Instruction.XOR: self._set_vx_xor_vy,
            Instruction.ADDR: self._add_vx_vy,
            Instruction.SUB: self._sub_vx_vy,
            Instruction.SHR: self._shr,
            Instruction.SUBN: self._subn_vx_vy,
            Instruction.SHL: self._shl,
            Instruction.SNER: self._skip_if_not_eq_regs,
            Instruction.LOADI: self._set_idx,
            Instruction.JUMPI: self._jump_plus,
            Instruction.RAND: self._random_byte_and,
            Instruction.DRAW: self._to_screen,
            Instruction.SKPR: self._skip_if_pressed,
            Instruction.SKUP: self._skip_if_not_pressed,
            Instruction.MOVED: self._set_vx_dt,
            Instruction.KEYD: self._wait_keypress,
            Instruction.LOADD: self._set_dt_vx,
            Instruction.LOADS: self._set_st,
            Instruction.ADDI: self._add_to_idx,
            Instruction.LDSPR: self._select_char,
            Instruction.BCD: self._bcd_repr,
            Instruction.STOR: self._store_vregs,
            Instruction.READ: self._load_vregs,
        }

    def __str__(self):
        registers = (f"PC_REGISTER:0x{self.pc:03x} | IDX_REGISTER:0x{self.idx:03x} | "
                     f"VARIABLE_REGISTERS:{list(self.v_regs)}")
        timers = f"DT:{self.dt} | ST:{self.st} | SOUND:{self.sound_enabled}"
        stack = f"STACK:{self.stack}"
        devices = f"SCREEN:{self.screen} | KEYPAD:{self.keypad} | KEY_WAIT:{self.key_wait.value}"
        flags = f"DRAW: {self.draw} | HALTED: {self.halted}"
        return f"{registers}\n{timers}\n{stack}\n{devices}\n{flags}"

    @property
    def sp(self):
        return self.stack.sp

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SYS 0x{address:04x}")
    def _sys(self, op):
        """jump to a machine code routine, ignored by modern interpreters"""
        address = op.nnn
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SKP V{x}")
    def _skip_if_pressed(self, op):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is pressed"""
        x = op.x
        key = self.v_regs[x]
        if self.keypad[key]:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SKNP V{x}")
    def _skip_if_not_pressed(self, op):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT pressed"""
        x = op.x
        key = self.v_regs[x]
        if not self.keypad[key]:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x}, K")
    def _wait_keypress(self, op):
        """
        wait for a key press and store its value in Vx

        the instruction completes only once the captured key is released again,
        until then the program counter is rewound so that this same instruction runs on the next cycle
        """
        x = op.x
        if self.key_wait is KeyWait.IDLE:
            key = self.keypad.first()
            if key is not None:
                self.v_regs[x] = key
                self.key_wait, self.captured_key = KeyWait.CAPTURED, key
                logger.debug("key 0x%X captured into V%X, waiting for its release", key, x)
            self.pc -= 0x2      # stay on the same instruction
        elif self.keypad[self.captured_key]:
            self.pc -= 0x2      # still held down
        else:
            logger.debug("key 0x%X released", self.captured_key)
            self.key_wait, self.captured_key = KeyWait.IDLE, None
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x}, DT")
    def _set_vx_dt(self, op):
        """set Vx = DT (delay timer) value"""
        x = op.x
        self.v_regs[x] = self.dt
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD DT, V{x}")
    def _set_dt_vx(self, op):
        """set DT (delay timer) = Vx"""
        x = op.x
        self.dt = self.v_regs[x]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: CLS")
    def _clear_screen(self, op):
        self.screen.clear()
        self.draw = True
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: RET")
    def _return(self, op):
        """return from a subroutine"""
        self.pc = self.stack.pop()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: JP 0x{address:04x}")
    def _jump(self, op):
        address = op.nnn
        self.pc = address
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: CALL 0x{address:04x}")
    def _call_addr(self, op):
        address = op.nnn
        self.stack.append(self.pc)
        self.pc = address
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SE V{x}, {comparison_value}")
    def _skip_if_eq(self, op):
        x, comparison_value = op.x, op.nn
        if self.v_regs[x] == comparison_value:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SNE V{x}, {comparison_value}")
    def _skip_if_not_eq(self, op):
        x, comparison_value = op.x, op.nn
        if self.v_regs[x] != comparison_value:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SE V{x}, V{y}")
    def _skip_if_eq_regs(self, op):
        x, y = op.x, op.y
        if self.v_regs[x] == self.v_regs[y]:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SNE V{x}, V{y}")
    def _skip_if_not_eq_regs(self, op):
        x, y = op.x, op.y
        if self.v_regs[x] != self.v_regs[y]:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x}, {value}")
    def _set_vk(self, op):
        """set the value of one of the 16 variable registers, Vx"""
        x, value = op.x, op.nn
        self.v_regs[x] = value
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x}, V{y}")
    def _set_vx_to_vy(self, op):
        """set the value of Vx equal to that of Vy"""
        x, y = op.x, op.y
        self.v_regs[x] = self.v_regs[y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: OR V{x}, V{y}")
    def _set_vx_or_vy(self, op):
        """set the value of Vx to Vx OR Vy"""
        x, y = op.x, op.y
        self.v_regs[x] |= self.v_regs[y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: AND V{x}, V{y}")
    def _set_vx_and_vy(self, op):
        """set the value of Vx to Vx AND Vy"""
        x, y = op.x, op.y
        self.v_regs[x] &= self.v_regs[y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: XOR V{x}, V{y}")
    def _set_vx_xor_vy(self, op):
        """set the value of Vx to Vx XOR Vy"""
        x, y = op.x, op.y
        self.v_regs[x] ^= self.v_regs[y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD V{x}, V{y}")
    def _add_vx_vy(self, op):
        """set the value of Vx to Vx + Vy, set VF = carry"""
        x, y = op.x, op.y
        total = self.v_regs[x] + self.v_regs[y]
        self.v_regs[0xF] = 1 if total > 0xFF else 0
        self.v_regs[x] = total & 0xFF   # keep only the lowest 8 bits from the result and store them in Vx
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SUB V{x}, V{y}")
    def _sub_vx_vy(self, op):
        """set the value of Vx to Vx - Vy, set VF = NOT borrow"""
        x, y = op.x, op.y
        self.v_regs[0xF] = 0 if self.v_regs[y] > self.v_regs[x] else 1
        self.v_regs[x] = (self.v_regs[x] - self.v_regs[y]) & 0xFF
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SHR V{x}")
    def _shr(self, op):
        """set Vx equal to Vx SHR 1, set VF = least significant bit"""
        x = op.x
        self.v_regs[0xF] = self.v_regs[x] & 0x1
        self.v_regs[x] >>= 1
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SUBN V{x}, V{y}")
    def _subn_vx_vy(self, op):
        """set the value of Vx to Vy - Vx, set VF = NOT borrow"""
        x, y = op.x, op.y
        self.v_regs[0xF] = 0 if self.v_regs[x] > self.v_regs[y] else 1
        self.v_regs[x] = (self.v_regs[y] - self.v_regs[x]) & 0xFF
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SHL V{x}")
    def _shl(self, op):
        """set Vx equal to Vx SHL 1, set VF = most significant bit"""
        x = op.x
        self.v_regs[0xF] = 1 if self.v_regs[x] & 0x80 else 0
        self.v_regs[x] = (self.v_regs[x] << 1) & 0xFF   # multiply by 2 and keep only the lowest 8 bits
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD V{x}, {value}")
    def _add_to_vk(self, op):
        """add to the value already present in one of the variable registers, VF is left alone"""
        x, value = op.x, op.nn
        self.v_regs[x] = (self.v_regs[x] + value) & 0xFF
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD I, 0x{value:04x}")
    def _set_idx(self, op):
        """set the value of the I register"""
        value = op.nnn
        self.idx = value
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: JP V0, 0x{address:04x}")
    def _jump_plus(self, op):
        address = op.nnn
        v0 = self.v_regs[0x0]
        self.pc = address + v0
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: RND V{x}, 0x{kk:02x}")
    def _random_byte_and(self, op):
        x, kk = op.x, op.nn
        rnd = self.rng.randint(0, 255)
        self.v_regs[x] = rnd & kk
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD ST, V{register}")
    def _set_st(self, op):
        """set ST = Vx, start the tone if ST ends up non-zero"""
        register = op.x
        self.st = self.v_regs[register]
        if self.st > 0:
            self.sound_enabled = True
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD I, V{register}")
    def _add_to_idx(self, op):
        """set I = I + Vx, VF is not touched on overflow"""
        register = op.x
        self.idx = (self.idx + self.v_regs[register]) & 0xFFFF
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD F, V{register}")
    def _select_char(self, op):
        """set I to location of sprite for digit Vx"""
        register = op.x
        self.idx = FONT_START_ADDRESS + self.v_regs[register] * GLYPH_SIZE
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD [I], V{x}")
    def _store_vregs(self, op):
        """store registers V0 through Vx (included) in memory starting at location I"""
        x = op.x
        self.mem.check_range(self.idx, x + 1)
        self.mem[self.idx:self.idx+x+1] = self.v_regs[:x+1]
        self.idx += x + 1
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x}, [I]")
    def _load_vregs(self, op):
        """read registers V0 through Vx (included) from memory starting at location I"""
        x = op.x
        self.mem.check_range(self.idx, x + 1)
        self.v_regs[:x+1] = self.mem[self.idx:self.idx+x+1]
        self.idx += x + 1
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD B, V{x}")
    def _bcd_repr(self, op):
        """store the hundreds digit of Vx in memory at I, the tens digit at I+1, the ones digit at I+2"""
        x = op.x
        value = self.v_regs[x]
        self.mem.check_range(self.idx, 3)
        self.mem[self.idx], self.mem[self.idx+1], self.mem[self.idx+2] = value // 100, (value // 10) % 10, value % 10
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: DRW V{x}, V{y}, {n_bytes}")
    def _to_screen(self, op):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        x, y, n_bytes = op.x, op.y, op.n
        self.mem.check_range(self.idx, n_bytes)
        self.v_regs[0xF] = 0
        # Vx and Vy are read per pixel, after VF is cleared
        for row in range(n_bytes):
            sprite_byte = self.mem[self.idx + row]
            # wrap around both axes, a sprite leaving the right/bottom edge comes back on the left/top one
            y_coordinate = (self.v_regs[y] + row) % self.screen.h
            for col in range(SPRITE_WIDTH):
                if not sprite_byte & (0x80 >> col):
                    continue
                x_coordinate = (self.v_regs[x] + col) % self.screen.w
                # sprites are XORed onto the existing screen and if this
                # causes any pixel to be erased then VF=1, otherwise VF=0
                if self.screen.flip_pixel(x_coordinate, y_coordinate):
                    self.v_regs[0xF] = 1
        self.draw = True
        return locals()

    def _goto_next_instruction(self):
        self.pc += 0x2

    def fetch(self):
        """read the two bytes instruction stored at PC"""
        self.mem.check_range(self.pc, 2)
        return self.mem[self.pc] << 8 | self.mem[self.pc + 1]

    def cycle(self):
        """
        fetch, decode and execute one instruction

        returns an IllegalOpcode diagnostic when the fetched word is not a CHIP-8 instruction
        (the word is skipped), None otherwise; any other Chip8Error halts the machine
        """
        if self.halted:
            raise MachineHaltedError("The machine stopped on a fatal error and cannot run anymore")
        try:
            self.opcode_address = self.pc
            # fetch (each instruction is two bytes long)
            op = decode(self.fetch())
            self._goto_next_instruction()
            # decode + execute
            try:
                instruction = identify(op, self.opcode_address)
            except IllegalOpcodeError as e:
                logger.error("%s", e)
                return IllegalOpcode(op.word, self.opcode_address)
            self.instructions[instruction](op)
        except Chip8Error:
            self.halted = True
            raise
        return None
