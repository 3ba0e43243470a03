import argparse
import os
import sys

from .config import CYCLES_PER_FRAME, SCALE, Quirks
from .cpu import Chip8
from .display import HeadlessDisplay
from .errors import ProgramTooLargeError, RomFormatError
from .rom import read_rom
from .scheduler import Scheduler


def get_args(argv=None):
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 interpreter")
    parser.add_argument("-f", "--file", required=True, help="input rom file (.ch8 binary or .hex text)")
    parser.add_argument("--cycles-per-frame", type=int, default=CYCLES_PER_FRAME,
                        help="instructions executed per 60Hz frame")
    parser.add_argument("--scale", type=int, default=SCALE, help="window pixels per CHIP-8 pixel")
    parser.add_argument("--headless", action="store_true", help="run without opening a window")
    parser.add_argument("--frames", type=int, default=None, help="stop after this many frames, only with --headless")
    quirks = parser.add_argument_group("quirks")
    quirks.add_argument("--shift-vx", action="store_true", help="8xy6/8xyE shift Vx in place, ignoring Vy")
    quirks.add_argument("--no-memory-increment", action="store_true", help="Fx55/Fx65 leave I unchanged")
    quirks.add_argument("--no-logic-reset", action="store_true", help="8xy1/8xy2/8xy3 leave VF unchanged")
    quirks.add_argument("--no-display-wait", action="store_true", help="allow more than one draw per frame")
    args = parser.parse_args(argv)
    if args.frames is not None and not args.headless:
        parser.error("--frames requires --headless")
    return args


def quirks_from_args(args):
    return Quirks(
        shift_vy=not args.shift_vx,
        memory_increment=not args.no_memory_increment,
        logic_reset_vf=not args.no_logic_reset,
        display_wait=not args.no_display_wait,
    )


def make_display(args):
    if args.headless:
        return HeadlessDisplay(frames=args.frames)
    from .screen import Screen, pygame
    pygame.init()
    return Screen(s=args.scale, caption=os.path.basename(args.file))


def main(argv=None):
    args = get_args(argv)
    chip = Chip8(quirks=quirks_from_args(args))
    try:
        chip.load(read_rom(args.file))
    except (OSError, ProgramTooLargeError, RomFormatError) as err:
        print(f"Cannot load {args.file}: {err}", file=sys.stderr)
        return 2
    display = make_display(args)
    # emulation loop
    try:
        Scheduler(chip, display, cycles_per_frame=args.cycles_per_frame).run()
    finally:
        display.close()
    if chip.halted:
        print(f"********** THE EMULATOR CRASHED WITH THE FOLLOWING STATE\n{chip}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
