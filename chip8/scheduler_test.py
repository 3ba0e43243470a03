import random
import unittest
from contextlib import redirect_stderr
from io import StringIO

from chip8.config import Quirks
from chip8.cpu import Chip8
from chip8.display import HeadlessDisplay
from chip8.scheduler import Scheduler


class FakeClock:
    """clock advancing by a fixed amount every time it's read"""
    def __init__(self, step=0.0):
        self.now = 0.0
        self.step = step
        self.slept = 0.0

    def __call__(self):
        self.now += self.step
        return self.now

    def sleep(self, seconds):
        self.slept += seconds
        self.now += seconds


def make_scheduler(*opcodes, quirks=None, frames=None, cycles_per_frame=10, step=0.0):
    chip = Chip8(quirks=quirks, rng=random.Random(1))
    program = []
    for op in opcodes:
        program += [op >> 8, op & 0xFF]
    chip.load(program)
    clock = FakeClock(step)
    display = HeadlessDisplay(frames=frames)
    sched = Scheduler(chip, display, cycles_per_frame=cycles_per_frame, clock=clock, sleep=clock.sleep)
    return sched, clock


class TestFrames(unittest.TestCase):
    def test_timers_tick_once_per_frame_and_stop_at_zero(self):
        sched, _ = make_scheduler(0x1200)
        sched.machine.delay_timer = 5
        sched.machine.sound_timer = 2
        for _ in range(8):
            sched.frame()
        self.assertEqual(sched.machine.delay_timer, 0)
        self.assertEqual(sched.machine.sound_timer, 0)
        self.assertEqual(sched.frames, 8)

    def test_frame_flushes_framebuffer(self):
        sched, _ = make_scheduler(0xF029, 0xD015, 0x1204)
        sched.step()
        sched.step()
        sched.frame()
        self.assertEqual(sched.display.framebuffer, sched.machine.gfx)
        self.assertEqual(sched.display.rows()[0][:5], "####.")
        self.assertEqual(sched.display.updates, 1)

    def test_frame_period_drives_frame_work(self):
        # every clock read advances 1/600s, 10 cycles per 1/60s frame
        sched, clock = make_scheduler(0x1200, step=1 / 600)
        sched.machine.delay_timer = 100
        sched.run(max_cycles=200)
        self.assertEqual(sched.cycles, 200)
        self.assertGreater(sched.frames, 0)
        self.assertEqual(sched.machine.delay_timer, 100 - sched.frames)
        self.assertEqual(sched.display.updates, sched.frames)

    def test_run_sleeps_to_throttle(self):
        sched, clock = make_scheduler(0x1200)
        sched.run(max_cycles=60)
        # a frozen clock means every cycle waits for its whole period
        self.assertAlmostEqual(clock.slept, 60 * sched.cycle_period)


class TestInput(unittest.TestCase):
    def test_keys_are_polled_before_each_cycle(self):
        sched, _ = make_scheduler(0xF30A, 0x1202)
        sched.step()
        self.assertEqual(sched.machine.pc, 0x200)
        sched.display.press(0xB)
        sched.display.press(0xE)
        sched.step()
        self.assertEqual(sched.machine.keys[0xB], 1)
        self.assertEqual(sched.machine.pc, 0x202)
        self.assertEqual(sched.machine.v[3], 0xB)
        sched.display.release(0xB)
        sched.poll_input()
        self.assertEqual(sched.machine.keys[0xB], 0)


class TestStopConditions(unittest.TestCase):
    def test_stops_when_display_closes(self):
        sched, _ = make_scheduler(0x1200, frames=3, step=1 / 600)
        cycles = sched.run()
        self.assertFalse(sched.display.is_open())
        self.assertEqual(sched.frames, 3)
        self.assertEqual(cycles, sched.cycles)

    def test_stops_on_unknown_opcode(self):
        sched, _ = make_scheduler(0x6001, 0x6102, 0x0123)
        with redirect_stderr(StringIO()):
            cycles = sched.run(max_cycles=100)
        self.assertEqual(cycles, 2)
        self.assertTrue(sched.cpu.halted)
        self.assertEqual(sched.machine.pc, 0x204)


class TestDisplayWait(unittest.TestCase):
    def test_second_draw_waits_for_next_frame(self):
        sched, _ = make_scheduler(0xF029, 0xD015, 0xD015, 0x1206)
        sched.step()
        sched.step()
        self.assertFalse(sched.cpu.vblank)
        for _ in range(5):
            sched.step()
            self.assertTrue(sched.cpu.draw_stalled)
            self.assertEqual(sched.machine.pc, 0x204)
        self.assertEqual(sum(sched.machine.gfx), 14)
        sched.frame()
        sched.step()
        self.assertEqual(sched.machine.pc, 0x206)
        self.assertEqual(sum(sched.machine.gfx), 0)
        self.assertEqual(sched.machine.v[0xF], 1)

    def test_no_wait_without_quirk(self):
        sched, _ = make_scheduler(0xF029, 0xD015, 0xD015, 0x1206, quirks=Quirks(display_wait=False))
        for _ in range(3):
            sched.step()
        self.assertTrue(sched.cpu.vblank)
        self.assertEqual(sched.machine.pc, 0x206)
        self.assertEqual(sum(sched.machine.gfx), 0)


if __name__ == "__main__":
    unittest.main()
