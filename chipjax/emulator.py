"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState, set_fault, in_memory
from chipjax.decode import decode
from chipjax.errors import RomLoadError
from chipjax.constants import PROGRAM_START, MAX_ROM_SIZE, FAULT_NONE, FAULT_MEMORY_BOUNDS
from chipjax.instructions.system import execute_system_instruction
from chipjax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_key_instruction
)
from chipjax.instructions.alu import execute_alu_operation
from chipjax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipjax.instructions.display import execute_display
from chipjax.instructions.misc import execute_misc_instruction


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Expects PC to already point past the instruction, as ``fetch`` leaves it.
    """
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_key_instruction,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    instruction = _pack_u16(state.memory[state.pc], state.memory[state.pc + 1])
    return state.replace(pc=state.pc + 2), instruction


def _fetch_and_execute(state: EmulatorState) -> EmulatorState:
    def _run(state):
        state, instruction = fetch(state)
        return execute(state, instruction)

    return jax.lax.cond(
        in_memory(state.pc, 2),
        _run,
        lambda state: set_fault(state, FAULT_MEMORY_BOUNDS),
        state
    )


def _resume_wait_for_key(state: EmulatorState) -> EmulatorState:
    """Complete a pending FX0A once the sampled keypad has a key down."""
    def _resume(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(
            V=state.V.at[state.key_register].set(pressed_key),
            awaiting_key=jnp.array(False)
        )

    return jax.lax.cond(jnp.any(state.keypad), _resume, lambda state: state, state)


def _update_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, never below zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
        sound_active=state.sound_timer > 0
    )


def _step(state: EmulatorState) -> EmulatorState:
    state = jax.lax.cond(state.awaiting_key, _resume_wait_for_key, _fetch_and_execute, state)
    return jax.lax.cond(state.fault == FAULT_NONE, _update_timers, lambda state: state, state)


@jax.jit
def tick(state: EmulatorState, keypad: jnp.ndarray) -> EmulatorState:
    """Run one instruction and one timer step with the given keypad sample.

    ``display_dirty`` and ``sound_active`` on the result describe this tick
    only. A faulted state is returned unchanged apart from those flags.
    """
    state = state.replace(
        keypad=jnp.asarray(keypad, dtype=jnp.bool_),
        display_dirty=jnp.array(False),
        sound_active=jnp.array(False)
    )
    return jax.lax.cond(state.fault == FAULT_NONE, _step, lambda state: state, state)


@partial(jax.jit, static_argnums=2)
def run_ticks(state: EmulatorState, keypad: jnp.ndarray, n: int) -> EmulatorState:
    """Run ``n`` ticks holding the same keypad sample."""
    def _tick(state, _):
        return tick(state, keypad), None

    state, _ = jax.lax.scan(_tick, state, length=n)
    return state


def load_rom_bytes(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Copy raw ROM bytes into CHIP-8 memory starting at 0x200."""
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomLoadError(
            f"ROM is {len(rom_data)} bytes, only {MAX_ROM_SIZE} fit above 0x{PROGRAM_START:03X}"
        )
    if not rom_data:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM file into CHIP-8 memory starting at 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        raise RomLoadError(f"Could not read ROM '{filename}': {e.strerror or e}") from e
    return load_rom_bytes(state, rom_data)
