import logging

from chip8.constants import (
    C8_FONTS, FONT_START_ADDRESS, MAX_ROM_SIZE, MEMORY_SIZE, ROM_START_ADDRESS, STACK_SIZE,
)
from chip8.errors import (
    MemoryAccessError, RomTooLargeError, StackOverflowError, StackUnderflowError,
)

logger = logging.getLogger(__name__)


# ******************** MEMORY SECTION
# ********** WRAPS AN ARRAY TO REPRESENT A STACK WITH A LIMITED SIZE OF 16 ADDRESSES
class Stack:
    def __init__(self, capacity=STACK_SIZE):
        self.capacity = capacity
        self.addr_list = [0] * capacity
        self.sp = 0

    def __len__(self):
        return self.sp

    def __repr__(self):
        return f"Stack(sp={self.sp}, addresses={[hex(a) for a in self.addr_list[:self.sp]]})"

    def append(self, address):
        if self.sp >= self.capacity:
            raise StackOverflowError(f"The CHIP-8 stack can contain at most {self.capacity} addresses. Limit exceeded")
        self.addr_list[self.sp] = address
        self.sp += 1

    def pop(self):
        if self.sp == 0:
            raise StackUnderflowError("Return with an empty CHIP-8 stack, there is nowhere to go")
        self.sp -= 1
        return self.addr_list[self.sp]


# ********** WRAPS A BYTEARRAY TO REPRESENT THE MAIN MEMORY WITH A LIMITED SIZE OF 4KB
class Memory:
    """
    every read and write is bounds-checked: an address outside 0..4095 raises
    MemoryAccessError instead of wrapping around or being clamped
    """
    def __init__(self, rom=b""):
        self.inner = bytearray(MEMORY_SIZE)
        self.inner[FONT_START_ADDRESS:FONT_START_ADDRESS+len(C8_FONTS)] = bytes(C8_FONTS)
        self.load_rom(rom)

    def __len__(self):
        return len(self.inner)

    def _check(self, key):
        """validate an address or a slice of addresses, return the matching (start, stop) range"""
        if isinstance(key, slice):
            if key.step not in (None, 1):
                raise ValueError("CHIP-8 memory can only be sliced with a step of 1")
            start, stop = key.start, key.stop
            if start is None or stop is None:
                raise ValueError("CHIP-8 memory slices need explicit bounds")
            if start < 0:
                raise MemoryAccessError(start)
            if stop > MEMORY_SIZE:
                raise MemoryAccessError(stop - 1)
            return start, stop
        if not 0 <= key < MEMORY_SIZE:
            raise MemoryAccessError(key)
        return key, key + 1

    def __getitem__(self, key):
        self._check(key)
        return self.inner[key]

    def __setitem__(self, key, value):
        start, stop = self._check(key)
        if isinstance(key, slice):
            value = bytes(value)
            if len(value) != max(stop - start, 0):
                raise ValueError("Writing to CHIP-8 memory cannot change its size")
        self.inner[key] = value

    def check_range(self, address, length):
        """make sure the whole range [address, address+length) can be accessed before touching any of it"""
        if length > 0:
            self._check(slice(address, address + length))

    def load_rom(self, rom):
        """copy the program bytes into memory starting at 0x200, refuse programs that do not fit"""
        if len(rom) > MAX_ROM_SIZE:
            raise RomTooLargeError(len(rom), MAX_ROM_SIZE)
        self.inner[ROM_START_ADDRESS:ROM_START_ADDRESS+len(rom)] = bytes(rom)
        if rom:
            logger.debug("A ROM of %d bytes has been loaded at 0x%03x", len(rom), ROM_START_ADDRESS)
