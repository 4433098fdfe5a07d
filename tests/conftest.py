"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax
import jax.numpy as jnp
from chipjax import create_state, execute, load_rom_bytes

NO_KEYS = jnp.zeros(16, dtype=jnp.bool_)

# One compilation shared by tests that sweep many operand values
execute_jit = jax.jit(execute)


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def overflow_flag_state():
    """Provide a fresh state where FX1E reports overflow in VF."""
    return create_state(index_overflow_flag=True)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def write_program(state, words):
    """Helper to load a list of 16-bit instruction words at 0x200."""
    rom = b"".join(word.to_bytes(2, "big") for word in words)
    return load_rom_bytes(state, rom)


def press(*keys):
    """Keypad sample with the given keys held."""
    keypad = NO_KEYS
    for key in keys:
        keypad = keypad.at[key].set(True)
    return keypad
