"""Interactive driver loop and command-line entry point."""

import argparse
import sys
import time

import jax
import numpy as np
import pygame

from chipjax.constants import TICK_RATE, TONE_SAMPLE_RATE
from chipjax.disassemble import disassemble
from chipjax.emulator import fetch, load_rom, tick
from chipjax.errors import EmulatorFault, RomLoadError, check_fault
from chipjax.frontend import Display, Keypad, Tone
from chipjax.logging import logger, set_log_level
from chipjax.state import EmulatorState, create_state


def _log_next_instruction(state: EmulatorState):
    if bool(state.awaiting_key):
        logger.debug(f"0x{int(state.pc):03X}  waiting for key -> V{int(state.key_register):X}")
        return
    _, instruction = fetch(state)
    word = int(instruction)
    logger.instruction(int(state.pc), word, disassemble(word))


def run(rom_path: str, debug: bool = False, tick_rate: int = TICK_RATE) -> int:
    """Run a ROM until the window closes. Returns a process exit code."""
    if debug:
        set_log_level("DEBUG")

    state = create_state(jax.random.PRNGKey(int(time.time())))
    try:
        state = load_rom(state, rom_path)
    except RomLoadError as e:
        logger.error(str(e))
        return 1
    logger.info(f"Loaded ROM: {rom_path}")

    pygame.mixer.pre_init(TONE_SAMPLE_RATE, -16, 1)
    pygame.init()
    display = Display()
    keypad = Keypad()
    tone = Tone()
    clock = pygame.time.Clock()

    try:
        while True:
            keys = keypad.poll()
            if keypad.quit_requested:
                break

            if logger.enabled_for("DEBUG"):
                _log_next_instruction(state)
            state = tick(state, keys)

            try:
                check_fault(state)
            except EmulatorFault as e:
                logger.critical(str(e))
                return 2

            if bool(state.display_dirty):
                display.draw(np.asarray(state.display))
            tone.set_active(bool(state.sound_active))

            clock.tick(tick_rate)
    finally:
        tone.set_active(False)
        pygame.quit()

    logger.info("Window closed")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chipjax", description="CHIP-8 emulator on JAX")
    parser.add_argument("rom", help="Path to CHIP-8 ROM")
    parser.add_argument("--debug", action="store_true",
                        help="Log every executed instruction")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return run(args.rom, debug=args.debug)


if __name__ == "__main__":
    sys.exit(main())
