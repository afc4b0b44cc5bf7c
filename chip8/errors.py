class Chip8Error(Exception):
    """base class for every error raised by the virtual machine"""


class IllegalOpcodeError(Chip8Error):
    """the fetched word is none of the 35 CHIP-8 instructions, execution can go on"""
    def __init__(self, opcode, address=None):
        self.opcode = opcode
        self.address = address
        where = "" if address is None else f" at 0x{address:03x}"
        super().__init__(f"Illegal opcode 0x{opcode:04x}{where}")


class StackOverflowError(Chip8Error):
    pass


class StackUnderflowError(Chip8Error):
    pass


class MemoryAccessError(Chip8Error):
    def __init__(self, address):
        self.address = address
        super().__init__(f"Memory access out of range at 0x{address:04x}")


class KeypadError(Chip8Error):
    def __init__(self, key):
        self.key = key
        super().__init__(f"There is no key 0x{key:x} on the CHIP-8 keypad")


class RomTooLargeError(Chip8Error):
    def __init__(self, size, limit):
        self.size = size
        self.limit = limit
        super().__init__(f"The ROM is {size} bytes long, at most {limit} bytes fit in memory")


class MachineHaltedError(Chip8Error):
    """raised when cycling a machine that already stopped on a fatal error"""
