import os


DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False

# ******************** TIMING
TIMER_HZ = 60               # delay/sound timers and display refresh rate
CYCLES_PER_FRAME = 11       # ~660 instructions per second

# ******************** RENDERING
SCALE = 15


class Quirks:
    """
    compatibility switches for the instructions whose behavior differs between interpreters
    the defaults match the original COSMAC VIP interpreter
    """
    def __init__(self, shift_vy=True, memory_increment=True, logic_reset_vf=True, display_wait=True):
        self.shift_vy = shift_vy                    # 8xy6/8xyE shift Vy into Vx, otherwise shift Vx in place
        self.memory_increment = memory_increment    # Fx55/Fx65 leave I pointing past the last register
        self.logic_reset_vf = logic_reset_vf        # 8xy1/8xy2/8xy3 reset VF
        self.display_wait = display_wait            # at most one Dxyn per frame

    def __repr__(self):
        flags = ", ".join(f"{k}={v}" for k, v in vars(self).items())
        return f"Quirks({flags})"

    def __eq__(self, other):
        return isinstance(other, Quirks) and vars(self) == vars(other)
