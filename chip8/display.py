import abc

from .constants import KEYS, SCREEN_HEIGHT, SCREEN_WIDTH


# ******************** I/O SECTION
class Display(abc.ABC):
    """what the scheduler needs from a window: show a framebuffer, report whether it's still open, read the keypad"""

    @abc.abstractmethod
    def update(self, framebuffer, width=SCREEN_WIDTH, height=SCREEN_HEIGHT):
        """render a row-major list of 0/1 pixels"""

    @abc.abstractmethod
    def is_open(self):
        pass

    @abc.abstractmethod
    def is_key_down(self, code):
        """return True if the keypad key 0x0..0xF is held down"""

    def close(self):
        pass


class HeadlessDisplay(Display):
    """display that renders nothing, keys are pressed and released programmatically"""
    def __init__(self, frames=None):
        self.frames = frames        # close after this many updates, never if None
        self.updates = 0
        self.framebuffer = [0] * SCREEN_WIDTH * SCREEN_HEIGHT
        self.keys = [False] * KEYS
        self._open = True

    def __repr__(self):
        return f"HeadlessDisplay(updates={self.updates}, open={self._open})"

    def update(self, framebuffer, width=SCREEN_WIDTH, height=SCREEN_HEIGHT):
        self.framebuffer = list(framebuffer[:width*height])
        self.updates += 1
        if self.frames is not None and self.updates >= self.frames:
            self._open = False

    def is_open(self):
        return self._open

    def is_key_down(self, code):
        return 0 <= code < KEYS and self.keys[code]

    # codes outside the keypad are ignored, as in is_key_down
    def press(self, code):
        if 0 <= code < KEYS:
            self.keys[code] = True

    def release(self, code):
        if 0 <= code < KEYS:
            self.keys[code] = False

    def close(self):
        self._open = False

    def rows(self):
        """framebuffer as text, one string per row, '#' for lit pixels"""
        return [
            "".join("#" if p else "." for p in self.framebuffer[y*SCREEN_WIDTH:(y+1)*SCREEN_WIDTH])
            for y in range(SCREEN_HEIGHT)
        ]
