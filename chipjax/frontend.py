"""pygame collaborators: window, keyboard and tone.

None of these hold emulator state; they consume the framebuffer, produce a
keypad vector and follow the sound flag.
"""

import numpy as np
import pygame

from chipjax.constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, NUM_KEYS, DISPLAY_SCALE,
    TONE_FREQUENCY, TONE_SAMPLE_RATE, TONE_VOLUME,
)
from chipjax.logging import logger
from chipjax.rendering import framebuffer_to_rgb, create_color_scheme

# Host layout       CHIP-8 keypad
#   1 2 3 4    ->    1 2 3 C
#   Q W E R    ->    4 5 6 D
#   A S D F    ->    7 8 9 E
#   Z X C V    ->    A 0 B F
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


class Display:
    """Window that shows the framebuffer, one filled square per pixel."""

    def __init__(self, scale: int = DISPLAY_SCALE, color_scheme: str = "classic",
                 caption: str = "chipjax"):
        self.scale = max(1, int(scale))
        self.on_color, self.off_color = create_color_scheme(color_scheme)
        self.surface = pygame.display.set_mode(
            (SCREEN_WIDTH * self.scale, SCREEN_HEIGHT * self.scale))
        pygame.display.set_caption(caption)

    def draw(self, framebuffer):
        rgb = framebuffer_to_rgb(framebuffer, self.scale, self.on_color, self.off_color)
        # surfarray wants (width, height, 3)
        pygame.surfarray.blit_array(self.surface, rgb.swapaxes(0, 1))
        pygame.display.flip()


class Keypad:
    """Samples the host keyboard into a 16-key CHIP-8 keypad vector."""

    def __init__(self, key_map: dict = None):
        self.key_map = KEY_MAP if key_map is None else key_map
        self.quit_requested = False

    def poll(self) -> np.ndarray:
        """Drain pending window events and return the keys currently held."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit_requested = True
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.quit_requested = True

        pressed = pygame.key.get_pressed()
        keypad = np.zeros(NUM_KEYS, dtype=np.bool_)
        for host_key, chip8_key in self.key_map.items():
            keypad[chip8_key] = pressed[host_key]
        return keypad


def square_wave(frequency: float, sample_rate: int, volume: float,
                periods: int = 24) -> np.ndarray:
    """Signed 16-bit square wave holding a whole number of periods, so it loops cleanly."""
    period = max(2, int(round(sample_rate / frequency)))
    t = np.arange(period * periods)
    wave = np.where((t % period) < period // 2, 1.0, -1.0)
    return (wave * volume * 32767).astype(np.int16)


class Tone:
    """Continuous square-wave beep switched on and off by the sound flag."""

    def __init__(self, frequency: float = TONE_FREQUENCY, volume: float = TONE_VOLUME):
        self.frequency = frequency
        self.volume = volume
        self.active = False
        self.sound = None

        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=TONE_SAMPLE_RATE, size=-16, channels=1)
            sample_rate, _, channels = pygame.mixer.get_init()
            wave = square_wave(self.frequency, sample_rate, self.volume)
            if channels > 1:
                wave = np.repeat(wave[:, None], channels, axis=1)
            self.sound = pygame.sndarray.make_sound(np.ascontiguousarray(wave))
        except pygame.error as e:
            logger.warning(f"Audio disabled: {e}")

    def set_active(self, active: bool):
        """Start or stop the tone; repeated calls with the same value do nothing."""
        active = bool(active)
        if self.sound is None or active == self.active:
            self.active = active
            return
        if active:
            self.sound.play(loops=-1)
        else:
            self.sound.stop()
        self.active = active
