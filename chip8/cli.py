import argparse
import logging
import os
import sys

import pygame

from chip8.constants import CPU_HZ, SCALE
from chip8.cpu import Chip8
from chip8.errors import Chip8Error, RomTooLargeError
from chip8.frontend import Buzzer, Screen, handle_events
from chip8.scheduler import Scheduler

logger = logging.getLogger(__name__)

DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False


# ******************** UTILITIES SECTION
def get_args(argv=None):
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 virtual machine")
    parser.add_argument("-f", "--file", required=True, help="input rom file")
    parser.add_argument("--hz", type=int, default=CPU_HZ, help=f"instructions per second (default: {CPU_HZ})")
    parser.add_argument("--scale", type=int, default=SCALE, help=f"window pixels per CHIP-8 pixel (default: {SCALE})")
    parser.add_argument("--mute", action="store_true", help="do not play the sound timer tone")
    args = parser.parse_args(argv)
    if args.hz <= 0:
        parser.error("--hz must be a positive number")
    if args.scale <= 0:
        parser.error("--scale must be a positive number")
    return args


def configure_logging(debug=DEBUG):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="[%(levelname)s]:  %(message)s",
        stream=sys.stdout,
    )


def read_rom(path):
    """read the whole ROM file, the machine itself refuses it if it doesn't fit in memory"""
    with open(path, mode='rb') as f:
        return f.read()


def make_buzzer():
    try:
        return Buzzer()
    except pygame.error as e:
        logger.warning("Sound is not available, running muted: %s", e)
        return None


# ******************** ENTRY POINT SECTION
def main(argv=None):
    args = get_args(argv)
    configure_logging()
    try:
        chip = Chip8(read_rom(args.file))
    except OSError as e:
        sys.exit(f"error reading [{args.file}]: {e.strerror}")
    except RomTooLargeError as e:
        sys.exit(f"error loading [{args.file}]: {e}")
    logger.info("The ROM at path %s has been loaded successfully", args.file)

    # pygame initialization
    pygame.init()
    pygame.display.set_caption(os.path.basename(args.file))
    pygame.mouse.set_visible(False)
    clock = pygame.time.Clock()
    # IO
    screen = Screen(s=args.scale)
    buzzer = None if args.mute else make_buzzer()
    # CPU
    scheduler = Scheduler(chip, hz=args.hz)
    # emulation loop, polled faster than the instruction rate so that no tick is missed
    run = True
    try:
        while run:
            clock.tick(2 * args.hz)
            run = handle_events(chip)
            scheduler.tick()
            if buzzer:
                buzzer.update(chip.sound_enabled)
            if chip.draw:
                chip.draw = False
                screen.render(chip.screen.snapshot())
                screen.refresh()
    except Chip8Error as e:
        sys.exit(f"********** THE EMULATOR CRASHED ({e}) WITH THE FOLLOWING STATE\n{chip}")
    finally:
        pygame.quit()
