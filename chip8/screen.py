import os
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_1, K_2, K_3, K_4,
    K_q, K_w, K_e, K_r,
    K_a, K_s, K_d, K_f,
    K_z, K_x, K_c, K_v,
)

from .config import SCALE
from .constants import KEYS, SCREEN_HEIGHT, SCREEN_WIDTH
from .display import Display


# COSMAC VIP keypad      keyboard
#   1 2 3 C              1 2 3 4
#   4 5 6 D              Q W E R
#   7 8 9 E              A S D F
#   A 0 B F              Z X C V
KEY_MAPPINGS = {
    0x0: K_x,
    0x1: K_1,
    0x2: K_2,
    0x3: K_3,
    0x4: K_q,
    0x5: K_w,
    0x6: K_e,
    0x7: K_a,
    0x8: K_s,
    0x9: K_d,
    0xA: K_z,
    0xB: K_c,
    0xC: K_4,
    0xD: K_r,
    0xE: K_f,
    0xF: K_v,
}

BLUE = pygame.Color(80,69,155,255)
LIGHT_BLUE = pygame.Color(136,126,203,255)


class Screen(Display):
    """pygame window, pygame.init() must have been called already"""
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT, s=SCALE, bg_color=BLUE, fg_color=LIGHT_BLUE, caption="CHIP-8"):
        self.w, self.h, self.scale = w, h, s
        self.background = bg_color
        self.foreground = fg_color
        self.surface = pygame.display.set_mode(
            (w * self.scale, h * self.scale),
        )
        pygame.display.set_caption(caption)
        self.surface.fill(self.background)
        self._open = True

    def write_pixel(self, x, y, color):
        """paint one scaled pixel, it becomes visible on the next flip"""
        pygame.draw.rect(
            self.surface,
            self.background if color==0 else self.foreground,
            (x * self.scale, y * self.scale, self.scale, self.scale)
        )

    def update(self, framebuffer, width=SCREEN_WIDTH, height=SCREEN_HEIGHT):
        self.surface.fill(self.background)
        for idx, pixel in enumerate(framebuffer[:width*height]):
            if pixel:
                self.write_pixel(idx % width, idx // width, 1)
        pygame.display.flip()

    def is_open(self):
        # loop through the event queue, pygame needs it drained to keep the window responsive
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._open = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self._open = False
        return self._open

    def is_key_down(self, code):
        if not 0 <= code < KEYS:
            return False
        return bool(pygame.key.get_pressed()[KEY_MAPPINGS[code]])

    def close(self):
        self._open = False
        pygame.quit()
