"""pygame window, keypad and beeper around the emulator core."""

import numpy as np
import pygame

from chip8vm.config import EmulatorConfig
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.emulator import run
from chip8vm.errors import Chip8Error
from chip8vm.logging import SessionLogger
from chip8vm.rendering import chip8_display_to_rgb, create_color_scheme
from chip8vm.state import EmulatorState, set_key, take_should_draw, take_should_sound

# COSMAC VIP keypad laid over the left block of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  <-  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

SAMPLE_RATE = 44100


def build_tone(frequency: int, duration_ms: int, volume: float, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Mono int16 square wave of the given length."""
    t = np.arange(int(sample_rate * duration_ms / 1000))
    wave = ((t * frequency * 2 / sample_rate) % 2 >= 1).astype(np.float32) * 2 - 1
    return (wave * volume * 32767).astype(np.int16)


class Beeper:
    """One-shot tone player. Silent when audio is disabled or unavailable.

    The tone is built for the format the mixer actually opened, which can
    differ from the one requested when something else started it first.
    """

    def __init__(self, config: EmulatorConfig, logger: SessionLogger):
        self.duration_ms = config.audio.duration_ms
        self.sound = None
        if not config.audio.enabled:
            return
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        except pygame.error as e:
            logger.warning(f"Audio unavailable, running silent: {e}")
            return
        sample_rate, size, channels = pygame.mixer.get_init()
        if size != -16:
            logger.warning(f"Mixer opened with sample size {size}, running silent")
            return
        tone = build_tone(config.audio.frequency, config.audio.duration_ms, config.audio.volume, sample_rate)
        # interleave one copy of each sample per channel
        self.sound = pygame.mixer.Sound(buffer=np.repeat(tone, channels).tobytes())

    def play(self):
        if self.sound is not None:
            self.sound.play(maxtime=self.duration_ms)


class Frontend:
    """Window loop: events -> keypad, cycles, sound edge, draw edge."""

    def __init__(self, config: EmulatorConfig, logger: SessionLogger):
        self.config = config
        self.logger = logger

        # mono 16-bit, set before pygame.init() opens the mixer with its defaults
        pygame.mixer.pre_init(SAMPLE_RATE, -16, 1)
        pygame.init()
        scale = config.display.scale
        self.screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
        pygame.display.set_caption(config.display.title)
        self.clock = pygame.time.Clock()
        self.on_color, self.off_color = create_color_scheme(config.display.color_scheme)
        self.beeper = Beeper(config, logger)

    def handle_events(self, state: EmulatorState) -> tuple[EmulatorState, bool]:
        """Apply pending key events. Returns the new state and whether to keep running."""
        running = True
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key in KEY_MAP:
                    state = set_key(state, KEY_MAP[event.key], event.type == pygame.KEYDOWN)
        return state, running

    def present(self, state: EmulatorState):
        frame = chip8_display_to_rgb(state.display, self.config.display.scale, self.on_color, self.off_color)
        # surfarray wants (width, height, 3)
        surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

    def run(self, state: EmulatorState) -> EmulatorState:
        """Run until the window closes. Faults are logged and re-raised."""
        cycles = 0
        running = True
        try:
            while running:
                self.clock.tick(self.config.fps)
                state, running = self.handle_events(state)
                if not running:
                    break

                try:
                    state = run(state, self.config.cycles_per_frame)
                except Chip8Error as e:
                    self.logger.log_fault(e, state)
                    raise
                cycles += self.config.cycles_per_frame

                state, sound = take_should_sound(state)
                if sound:
                    self.beeper.play()
                state, draw = take_should_draw(state)
                if draw:
                    self.present(state)
        finally:
            self.logger.log_session_end(cycles)
            pygame.quit()
        return state
