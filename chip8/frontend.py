import logging
import os
from array import array

os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_1, K_2, K_3, K_4,
    K_q, K_w, K_e, K_r,
    K_a, K_s, K_d, K_f,
    K_z, K_x, K_c, K_v,
)

from chip8.constants import (
    BLUE, LIGHT_BLUE, SAMPLE_RATE, SCALE, SCREEN_HEIGHT, SCREEN_WIDTH, TONE_AMPLITUDE, TONE_HZ,
)

logger = logging.getLogger(__name__)

# CHIP-8 keypad        keyboard
#   1 2 3 C               1 2 3 4
#   4 5 6 D               Q W E R
#   7 8 9 E               A S D F
#   A 0 B F               Z X C V
KEY_MAPPINGS = {
    K_1: 0x1, K_2: 0x2, K_3: 0x3, K_4: 0xC,
    K_q: 0x4, K_w: 0x5, K_e: 0x6, K_r: 0xD,
    K_a: 0x7, K_s: 0x8, K_d: 0x9, K_f: 0xE,
    K_z: 0xA, K_x: 0x0, K_c: 0xB, K_v: 0xF,
}


# ******************** I/O SECTION
class Screen:
    """window the framebuffer gets rasterized into, each CHIP-8 pixel is a scale*scale square"""
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT, s=SCALE, bg_color=BLUE, fg_color=LIGHT_BLUE):
        self.w, self.h, self.scale = w, h, s
        self.background = pygame.Color(*bg_color)
        self.foreground = pygame.Color(*fg_color)
        self.surface = pygame.display.set_mode(
            (w * self.scale, h * self.scale),
        )
        self.surface.fill(self.background)

    def render(self, snapshot):
        """paint a framebuffer snapshot (rows of 0/1 bytes), the change shows up at the next refresh"""
        self.surface.fill(self.background)
        for y, row in enumerate(snapshot):
            for x, pixel in enumerate(row):
                if pixel:
                    pygame.draw.rect(
                        self.surface,
                        self.foreground,
                        (x * self.scale, y * self.scale, self.scale, self.scale)
                    )

    @staticmethod
    def refresh():
        pygame.display.flip()


def square_wave(frequency=TONE_HZ, sample_rate=SAMPLE_RATE, amplitude=TONE_AMPLITUDE):
    """one period of a square wave as signed 16 bit mono samples, silent first half then loud"""
    samples = sample_rate // frequency
    half = samples // 2
    return array("h", [0] * half + [amplitude] * (samples - half))


class Buzzer:
    """plays the CHIP-8 tone while the sound timer is active"""
    def __init__(self):
        pygame.mixer.init(SAMPLE_RATE, -16, 1, 512)
        self.sound = pygame.mixer.Sound(buffer=square_wave().tobytes())
        self.playing = False

    def update(self, enabled):
        if enabled and not self.playing:
            self.sound.play(-1)     # loop until stopped
            logger.debug("tone on")
        elif not enabled and self.playing:
            self.sound.stop()
            logger.debug("tone off")
        self.playing = enabled


def handle_events(chip):
    """forward keyboard events to the chip keypad, return False when the user wants to quit"""
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            if event.key in KEY_MAPPINGS:
                chip.keypad[KEY_MAPPINGS[event.key]] = True     # register keypress
        elif event.type == pygame.KEYUP:
            if event.key in KEY_MAPPINGS:
                chip.keypad[KEY_MAPPINGS[event.key]] = False    # register key release
    return True
