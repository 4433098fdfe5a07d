"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState, fault_instruction, in_memory
from chipjax.decode import DecodedInstruction
from chipjax.constants import (
    FONT_START, FONT_GLYPH_SIZE, ADDRESS_MASK, INDEX_LIMIT, FLAG_REGISTER, NUM_REGISTERS,
    FAULT_MEMORY_BOUNDS,
)
from chipjax.instructions.system import execute_unknown


def _memory_fault(state: EmulatorState) -> EmulatorState:
    return fault_instruction(state, FAULT_MEMORY_BOUNDS)


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register.

    I is kept unmasked but saturates at INDEX_LIMIT, so it can never wrap back
    into low memory. VF reports overflow past 0xFFF only when the state was
    created with ``index_overflow_flag=True``.
    """
    total = jnp.astype(state.I, jnp.int32) + jnp.astype(state.V[instruction.x], jnp.int32)
    new_i = jnp.astype(jnp.minimum(total, INDEX_LIMIT), jnp.uint16)
    if not state.index_overflow_flag:
        return state.replace(I=new_i)
    overflow_flag = jnp.astype(new_i > ADDRESS_MASK, jnp.uint8)
    return state.replace(
        I=new_i,
        V=state.V.at[FLAG_REGISTER].set(overflow_flag)
    )


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Never spins: with no key held the machine enters the awaiting state and
    ``tick`` resolves it once a key shows up in a later keypad sample.
    """
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(V=state.V.at[instruction.x].set(pressed_key))

    def wait_action(state):
        return state.replace(
            awaiting_key=jnp.array(True),
            key_register=jnp.astype(instruction.x, jnp.uint8)
        )

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    glyph = jnp.astype(state.V[instruction.x], jnp.uint16)
    return state.replace(I=jnp.astype(FONT_START + glyph * FONT_GLYPH_SIZE, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    def _store_bcd(state):
        value = state.V[instruction.x]
        digits = jnp.array([
            value // 100,
            (value // 10) % 10,
            value % 10
        ], dtype=jnp.uint8)
        indices = jnp.arange(3) + jnp.astype(state.I, jnp.int32)
        return state.replace(memory=state.memory.at[indices].set(digits, mode="drop"))

    return jax.lax.cond(in_memory(state.I, 3), _store_bcd, _memory_fault, state)


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    def _store(state):
        register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
        base_indices = jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)
        current_memory_values = state.memory.at[base_indices].get(mode="clip")
        new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
        return state.replace(memory=state.memory.at[base_indices].set(new_memory_values, mode="drop"))

    return jax.lax.cond(in_memory(state.I, instruction.x + 1), _store, _memory_fault, state)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    def _load(state):
        register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
        base_indices = jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)
        memory_values = state.memory.at[base_indices].get(mode="clip")
        return state.replace(V=jnp.where(register_mask, memory_values, state.V))

    return jax.lax.cond(in_memory(state.I, instruction.x + 1), _load, _memory_fault, state)


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions using arithmetic switch."""
    is_0x07 = instruction.kk == 0x07
    is_0x0A = instruction.kk == 0x0A
    is_0x15 = instruction.kk == 0x15
    is_0x18 = instruction.kk == 0x18
    is_0x1E = instruction.kk == 0x1E
    is_0x29 = instruction.kk == 0x29
    is_0x33 = instruction.kk == 0x33
    is_0x55 = instruction.kk == 0x55
    is_0x65 = instruction.kk == 0x65

    switch_index = (
        is_0x07 * 0 +
        is_0x0A * 1 +
        is_0x15 * 2 +
        is_0x18 * 3 +
        is_0x1E * 4 +
        is_0x29 * 5 +
        is_0x33 * 6 +
        is_0x55 * 7 +
        is_0x65 * 8 +
        (~(is_0x07 | is_0x0A | is_0x15 | is_0x18 | is_0x1E | is_0x29 | is_0x33 | is_0x55 | is_0x65)) * 9
    )

    return jax.lax.switch(
        switch_index,
        [
            execute_get_delay_timer,
            execute_wait_for_key,
            execute_set_delay_timer,
            execute_set_sound_timer,
            execute_add_to_index,
            execute_font_character,
            execute_bcd_conversion,
            execute_store_registers,
            execute_load_registers,
            execute_unknown,
        ],
        state, instruction
    )
