import random
import sys
from functools import wraps

from . import config
from .config import Quirks
from .constants import (
    FONT_CHAR_SIZE, FONT_START_ADDRESS, KEYS, SCREEN_HEIGHT, SCREEN_SIZE,
    SCREEN_WIDTH, SPRITE_WIDTH,
)
from .decoder import decode, disassemble
from .errors import Chip8Error, MemoryAccessError, UnknownOpcodeError
from .machine import Machine


# ******************** UTILITIES SECTION
def asm(fn):
    """decorator to print out the ASM of the instruction being executed"""
    @wraps(fn)
    def wrapper_fn(self, ins):
        if config.DEBUG:
            print(f"mem_addr: 0x{self.debug_pc:04x}    instruction: {disassemble(ins.opcode)}")
        return fn(self, ins)
    return wrapper_fn


# ******************** CPU SECTION
class Chip8:
    """
    fetch-decode-execute engine
    every instruction handler checks its memory/key/stack accesses before mutating anything,
    so a cycle that raises leaves the machine exactly as it found it
    """
    def __init__(self, machine=None, quirks=None, rng=None):
        self.machine = machine if machine is not None else Machine()
        self.quirks = quirks if quirks is not None else Quirks()
        self.rng = rng if rng is not None else random.Random()
        self.debug_pc = self.machine.pc     # address of the instruction being executed
        self.vblank = True                  # cleared by the scheduler to hold back draws until the next frame
        self.drawn = False                  # framebuffer changed during the last cycle
        self.sprite_drawn = False           # a Dxyn went through during the last cycle
        self.draw_stalled = False
        self.error = None
        self.instructions = {
            0x00E0: self._clear_screen,
            0x00EE: self._return,
            0x1000: self._jump,
            0x2000: self._call_addr,
            0x3000: self._skip_if_eq,
            0x4000: self._skip_if_not_eq,
            0x5000: self._skip_if_eq_regs,
            0x6000: self._set_vx,
            0x7000: self._add_to_vx,
            0x8000: self._set_vx_to_vy,
            0x8001: self._set_vx_or_vy,
            0x8002: self._set_vx_and_vy,
            0x8003: self._set_vx_xor_vy,
            0x8004: self._add_vx_vy,
            0x8005: self._sub_vx_vy,
            0x8006: self._shr,
            0x8007: self._subn_vx_vy,
            0x800E: self._shl,
            0x9000: self._skip_if_not_eq_regs,
            0xA000: self._set_idx,
            0xB000: self._jump_plus,
            0xC000: self._random_byte_and,
            0xD000: self._to_screen,
            0xE09E: self._skip_if_pressed,
            0xE0A1: self._skip_if_not_pressed,
            0xF007: self._set_vx_dt,
            0xF00A: self._wait_keypress,
            0xF015: self._set_dt_vx,
            0xF018: self._set_st,
            0xF01E: self._add_to_idx,
            0xF029: self._select_char,
            0xF033: self._bcd_repr,
            0xF055: self._store_vregs,
            0xF065: self._load_vregs,
        }

    def __str__(self):
        return f"{self.machine}\nQUIRKS:{self.quirks}\nHALTED:{self.halted}"

    @property
    def halted(self):
        return self.error is not None

    def load(self, program):
        self.machine.load(program)

    def _goto_next_instruction(self):
        self.machine.pc += 0x2

    def _key(self, register):
        key = self.machine.v[register]
        if key >= KEYS:
            raise MemoryAccessError(f"Key 0x{key:02x} in V{register:X} is not on the keypad")
        return key

    # ********** SYSTEM / FLOW
    @asm
    def _clear_screen(self, ins):
        self.machine.gfx = [0] * SCREEN_SIZE
        self.drawn = True

    @asm
    def _return(self, ins):
        """return from a subroutine"""
        self.machine.pc = self.machine.stack.pop()

    @asm
    def _jump(self, ins):
        self.machine.pc = ins.nnn

    @asm
    def _call_addr(self, ins):
        self.machine.stack.push(self.machine.pc)
        self.machine.pc = ins.nnn

    @asm
    def _jump_plus(self, ins):
        self.machine.pc = ins.nnn + self.machine.v[0x0]

    # ********** CONDITIONAL SKIPS
    @asm
    def _skip_if_eq(self, ins):
        if self.machine.v[ins.x] == ins.nn:
            self._goto_next_instruction()

    @asm
    def _skip_if_not_eq(self, ins):
        if self.machine.v[ins.x] != ins.nn:
            self._goto_next_instruction()

    @asm
    def _skip_if_eq_regs(self, ins):
        if self.machine.v[ins.x] == self.machine.v[ins.y]:
            self._goto_next_instruction()

    @asm
    def _skip_if_not_eq_regs(self, ins):
        if self.machine.v[ins.x] != self.machine.v[ins.y]:
            self._goto_next_instruction()

    @asm
    def _skip_if_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is pressed"""
        if self.machine.keys[self._key(ins.x)] == 1:
            self._goto_next_instruction()

    @asm
    def _skip_if_not_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT pressed"""
        if self.machine.keys[self._key(ins.x)] == 0:
            self._goto_next_instruction()

    # ********** REGISTERS
    @asm
    def _set_vx(self, ins):
        self.machine.v[ins.x] = ins.nn

    @asm
    def _add_to_vx(self, ins):
        """add to the value already present in Vx, VF is left alone"""
        v = self.machine.v
        v[ins.x] = (v[ins.x] + ins.nn) & 0xFF

    @asm
    def _set_vx_to_vy(self, ins):
        self.machine.v[ins.x] = self.machine.v[ins.y]

    @asm
    def _set_vx_or_vy(self, ins):
        self.machine.v[ins.x] |= self.machine.v[ins.y]
        if self.quirks.logic_reset_vf:
            self.machine.v[0xF] = 0

    @asm
    def _set_vx_and_vy(self, ins):
        self.machine.v[ins.x] &= self.machine.v[ins.y]
        if self.quirks.logic_reset_vf:
            self.machine.v[0xF] = 0

    @asm
    def _set_vx_xor_vy(self, ins):
        self.machine.v[ins.x] ^= self.machine.v[ins.y]
        if self.quirks.logic_reset_vf:
            self.machine.v[0xF] = 0

    # the flag is always written last, so VF used as Vx ends up holding the flag
    @asm
    def _add_vx_vy(self, ins):
        v = self.machine.v
        total = v[ins.x] + v[ins.y]
        v[ins.x] = total & 0xFF     # keep only the lowest 8 bits
        v[0xF] = 1 if total > 0xFF else 0

    @asm
    def _sub_vx_vy(self, ins):
        """set Vx = Vx - Vy, VF = NOT borrow"""
        v = self.machine.v
        not_borrow = 1 if v[ins.x] >= v[ins.y] else 0
        v[ins.x] = (v[ins.x] - v[ins.y]) & 0xFF
        v[0xF] = not_borrow

    @asm
    def _subn_vx_vy(self, ins):
        """set Vx = Vy - Vx, VF = NOT borrow"""
        v = self.machine.v
        not_borrow = 1 if v[ins.y] >= v[ins.x] else 0
        v[ins.x] = (v[ins.y] - v[ins.x]) & 0xFF
        v[0xF] = not_borrow

    @asm
    def _shr(self, ins):
        v = self.machine.v
        source = v[ins.y] if self.quirks.shift_vy else v[ins.x]
        v[ins.x] = source >> 1
        v[0xF] = source & 0x1

    @asm
    def _shl(self, ins):
        v = self.machine.v
        source = v[ins.y] if self.quirks.shift_vy else v[ins.x]
        v[ins.x] = (source << 1) & 0xFF
        v[0xF] = (source >> 7) & 0x1

    @asm
    def _random_byte_and(self, ins):
        self.machine.v[ins.x] = self.rng.randint(0, 255) & ins.nn

    # ********** TIMERS / KEYPAD
    @asm
    def _set_vx_dt(self, ins):
        self.machine.v[ins.x] = self.machine.delay_timer

    @asm
    def _set_dt_vx(self, ins):
        self.machine.delay_timer = self.machine.v[ins.x]

    @asm
    def _set_st(self, ins):
        self.machine.sound_timer = self.machine.v[ins.x]

    @asm
    def _wait_keypress(self, ins):
        """wait for a key press and store the lowest pressed key in Vx"""
        pressed = [k for k, state in enumerate(self.machine.keys) if state]
        if not pressed:
            self.machine.pc -= 0x2      # stay on the same instruction until a key is pressed
        else:
            self.machine.v[ins.x] = pressed[0]

    # ********** INDEX REGISTER / MEMORY
    @asm
    def _set_idx(self, ins):
        self.machine.i = ins.nnn

    @asm
    def _add_to_idx(self, ins):
        """set I = I + Vx, VF is left alone"""
        self.machine.i = (self.machine.i + self.machine.v[ins.x]) & 0xFFFF

    @asm
    def _select_char(self, ins):
        """set I to location of sprite for digit Vx"""
        self.machine.i = self.machine.v[ins.x] * FONT_CHAR_SIZE + FONT_START_ADDRESS

    @asm
    def _bcd_repr(self, ins):
        """store the hundreds digit of Vx at I, the tens digit at I+1, the ones digit at I+2"""
        value = self.machine.v[ins.x]
        self.machine.mem.write_block(self.machine.i, [value // 100, value // 10 % 10, value % 10])

    @asm
    def _store_vregs(self, ins):
        """store registers V0 through Vx (included) in memory starting at location I"""
        self.machine.mem.write_block(self.machine.i, self.machine.v[:ins.x+1])
        if self.quirks.memory_increment:
            self.machine.i += ins.x + 1

    @asm
    def _load_vregs(self, ins):
        """read registers V0 through Vx (included) from memory starting at location I"""
        self.machine.v[:ins.x+1] = self.machine.mem.read_block(self.machine.i, ins.x + 1)
        if self.quirks.memory_increment:
            self.machine.i += ins.x + 1

    # ********** DISPLAY
    @asm
    def _to_screen(self, ins):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        if not self.vblank:
            # the original hardware drew only during vertical blank, wait for it
            self.machine.pc -= 0x2
            self.draw_stalled = True
            return
        m = self.machine
        sprite = m.mem.read_block(m.i, ins.n)
        # the origin wraps around the screen, the sprite itself is clipped at the edges
        x, y = m.v[ins.x] % SCREEN_WIDTH, m.v[ins.y] % SCREEN_HEIGHT
        width = min(SPRITE_WIDTH, SCREEN_WIDTH - x)
        height = min(ins.n, SCREEN_HEIGHT - y)
        m.v[0xF] = 0
        for row in range(height):
            sprite_byte = sprite[row]
            base = (y + row) * SCREEN_WIDTH + x
            for col in range(width):
                if sprite_byte & (0x80 >> col):
                    # sprites are XORed onto the screen, erasing a lit pixel is a collision
                    if m.gfx[base + col]:
                        m.v[0xF] = 1
                    m.gfx[base + col] ^= 1
        self.drawn = self.sprite_drawn = True

    # ********** FETCH / DECODE / EXECUTE
    def fetch(self):
        hi, lo = self.machine.mem.read_block(self.machine.pc, 2)
        return hi << 8 | lo

    def cycle(self):
        """
        execute one instruction
        return True to keep going, False when the instruction could not be executed:
        the machine is left untouched, pc still pointing at the faulty instruction
        """
        self.drawn = self.sprite_drawn = False
        self.draw_stalled = False
        self.debug_pc = self.machine.pc
        try:
            # fetch (each instruction is two bytes long)
            opcode = self.fetch()
            instruction = decode(opcode)
            if instruction is None:
                raise UnknownOpcodeError(opcode, self.debug_pc)
            self._goto_next_instruction()
            self.instructions[instruction.pattern](instruction)
        except Chip8Error as err:
            self.machine.pc = self.debug_pc
            self.error = err
            print(f"********** HALTED AT 0x{self.debug_pc:04x}: {err}", file=sys.stderr)
            return False
        self.error = None
        return True
