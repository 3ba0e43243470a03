from .constants import (
    C8_FONTS, FONT_START_ADDRESS, KEYS, MAX_ROM_SIZE, MEMORY_SIZE,
    REGISTERS, ROM_START_ADDRESS, SCREEN_SIZE, STACK_SIZE,
)
from .errors import MemoryAccessError, ProgramTooLargeError, StackError


# ******************** MEMORY SECTION
# ********** WRAPS A LIST TO REPRESENT A STACK WITH A LIMITED SIZE OF 16 ADDRESSES
class Stack:
    def __init__(self):
        self.slots = [0] * STACK_SIZE
        self.sp = 0

    def __len__(self):
        return self.sp

    def __repr__(self):
        return f"Stack(sp={self.sp}, slots={[hex(a) for a in self.slots[:self.sp]]})"

    def push(self, address):
        if self.sp >= STACK_SIZE:
            raise StackError(f"The CHIP-8 stack can contain at most {STACK_SIZE} addresses. Limit exceeded")
        self.slots[self.sp] = address
        self.sp += 1

    def pop(self):
        if self.sp == 0:
            raise StackError("Return with an empty stack")
        self.sp -= 1
        return self.slots[self.sp]

    def reset(self):
        self.slots = [0] * STACK_SIZE
        self.sp = 0


# ********** WRAPS A LIST TO REPRESENT THE MAIN MEMORY WITH A LIMITED SIZE OF 4KB
class Memory:
    def __init__(self):
        self.inner = [0] * MEMORY_SIZE

    def __len__(self):
        return MEMORY_SIZE

    def __getitem__(self, address):
        self._check(address)
        return self.inner[address]

    def __setitem__(self, address, value):
        self._check(address)
        self.inner[address] = value & 0xFF

    @staticmethod
    def _check(address, length=1):
        # python lists accept negative indexes and slices, the machine does not: use read_block/write_block
        if not isinstance(address, int):
            raise TypeError(f"Memory addresses are integers, got {type(address).__name__}")
        if address < 0 or address + length > MEMORY_SIZE:
            raise MemoryAccessError(f"Access to 0x{address:04x}..+{length} is outside the 4KB memory")

    def read_block(self, address, length):
        self._check(address, length)
        return self.inner[address:address+length]

    def write_block(self, address, data):
        self._check(address, len(data))
        self.inner[address:address+len(data)] = [b & 0xFF for b in data]

    def clear(self):
        self.inner = [0] * MEMORY_SIZE


# ******************** REGISTER FILE SECTION
class Machine:
    """
    the whole CHIP-8 state: memory, registers, stack, timers, framebuffer and keypad
    every field is reset by initialize(), mutated afterwards only by the executed instructions
    """
    def __init__(self):
        self.mem = Memory()
        self.stack = Stack()
        self.initialize()

    def initialize(self):
        self.mem.clear()
        self.stack.reset()
        self.v = [0] * REGISTERS
        self.i = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.gfx = [0] * SCREEN_SIZE
        self.keys = [0] * KEYS
        self.mem.write_block(FONT_START_ADDRESS, C8_FONTS)
        self.pc = ROM_START_ADDRESS

    @property
    def sp(self):
        return self.stack.sp

    @property
    def sound_active(self):
        return self.sound_timer > 0

    def load(self, program):
        """copy the program at ROM_START_ADDRESS, nothing is written if it does not fit"""
        program = list(program)
        if len(program) > MAX_ROM_SIZE:
            raise ProgramTooLargeError(len(program), MAX_ROM_SIZE)
        for b in program:
            if not 0 <= b <= 0xFF:
                raise ValueError(f"{b!r} is not a byte value")
        self.mem.write_block(ROM_START_ADDRESS, program)

    def tick_timers(self):
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    def __str__(self):
        registers = f"PC_REGISTER:0x{self.pc:04x} | IDX_REGISTER:0x{self.i:04x} | VARIABLE_REGISTERS:{self.v}"
        timers = f"DELAY_TIMER:{self.delay_timer} | SOUND_TIMER:{self.sound_timer}"
        stack = f"STACK:{self.stack}"
        keys = f"KEYS:{self.keys}"
        return f"{registers}\n{timers}\n{stack}\n{keys}"
