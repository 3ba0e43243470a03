import time

from . import config
from .config import CYCLES_PER_FRAME, TIMER_HZ
from .constants import KEYS, SCREEN_HEIGHT, SCREEN_WIDTH


class Scheduler:
    """
    drives the cpu at a fixed instruction rate
    every 1/frame_rate seconds the timers tick, the framebuffer is flushed to the display
    and, with the display_wait quirk, the cpu is allowed to draw again
    """
    def __init__(self, cpu, display, cycles_per_frame=CYCLES_PER_FRAME, frame_rate=TIMER_HZ,
                 clock=time.perf_counter, sleep=time.sleep):
        self.cpu = cpu
        self.display = display
        self.cycles_per_frame = cycles_per_frame
        self.frame_period = 1.0 / frame_rate
        self.cycle_period = self.frame_period / cycles_per_frame
        self.clock = clock
        self.sleep = sleep
        self.cycles = 0
        self.frames = 0
        self.last_frame = clock()

    def __repr__(self):
        return f"Scheduler(cycles={self.cycles}, frames={self.frames}, cycles_per_frame={self.cycles_per_frame})"

    @property
    def machine(self):
        return self.cpu.machine

    def poll_input(self):
        self.machine.keys = [1 if self.display.is_key_down(k) else 0 for k in range(KEYS)]

    def frame(self):
        self.machine.tick_timers()
        self.display.update(self.machine.gfx, SCREEN_WIDTH, SCREEN_HEIGHT)
        self.cpu.vblank = True
        self.frames += 1

    def step(self):
        """run a single cpu cycle, plus the frame work if a frame period has gone by"""
        self.poll_input()
        ok = self.cpu.cycle()
        if ok:
            self.cycles += 1
            if self.cpu.sprite_drawn and self.cpu.quirks.display_wait:
                self.cpu.vblank = False
        now = self.clock()
        if now - self.last_frame >= self.frame_period:
            self.frame()
            self.last_frame += self.frame_period
            if now - self.last_frame >= self.frame_period:
                # too far behind (host stalled), don't try to catch up with a burst of frames
                self.last_frame = now
        return ok

    def run(self, max_cycles=None):
        """loop until the display is closed or the cpu halts, return the number of executed cycles"""
        while self.display.is_open():
            if max_cycles is not None and self.cycles >= max_cycles:
                break
            start = self.clock()
            if not self.step():
                break
            delay = start + self.cycle_period - self.clock()
            if delay > 0:
                self.sleep(delay)
        if config.DEBUG:
            print(f"{self!r} stopped")
        return self.cycles
