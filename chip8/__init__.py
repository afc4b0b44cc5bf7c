from chip8.cpu import Chip8, IllegalOpcode, KeyWait
from chip8.errors import (
    Chip8Error, IllegalOpcodeError, KeypadError, MachineHaltedError, MemoryAccessError,
    RomTooLargeError, StackOverflowError, StackUnderflowError,
)
from chip8.scheduler import Scheduler
from chip8.timers import TimerDriver

__version__ = "1.0.0"
