class Chip8Error(Exception):
    """base class of every error raised by the interpreter"""


class ProgramTooLargeError(Chip8Error):
    def __init__(self, size, limit):
        self.size, self.limit = size, limit
        super().__init__(f"The program is {size} bytes long but at most {limit} bytes fit in memory")


class UnknownOpcodeError(Chip8Error):
    def __init__(self, opcode, pc):
        self.opcode, self.pc = opcode, pc
        super().__init__(f"Unknown opcode 0x{opcode:04x} at address 0x{pc:04x}")


class MemoryAccessError(Chip8Error):
    """raised for any address, key or stack slot outside the machine bounds"""


class StackError(MemoryAccessError):
    pass


class RomFormatError(Chip8Error):
    pass
