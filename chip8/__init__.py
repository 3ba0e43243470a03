from .config import Quirks
from .cpu import Chip8
from .display import Display, HeadlessDisplay
from .errors import (
    Chip8Error, MemoryAccessError, ProgramTooLargeError, RomFormatError,
    StackError, UnknownOpcodeError,
)
from .machine import Machine
from .rom import read_rom
from .scheduler import Scheduler
