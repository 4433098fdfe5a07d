"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipjax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
    SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE, FAULT_NONE,
)


@dataclass(frozen=True)
class StackState:
    """Return-address stack. ``pointer`` is the index of the next free slot."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Complete CHIP-8 machine state for one emulation session.

    ``display_dirty`` and ``sound_active`` are per-tick outputs: they describe
    the most recent call to ``tick``. ``fault`` is non-zero once the machine
    has halted on a fatal condition.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.uint8))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    display_dirty: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    sound_active: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    awaiting_key: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    key_register: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    fault: jnp.ndarray = field(default_factory=lambda: jnp.astype(FAULT_NONE, jnp.uint8))
    index_overflow_flag: bool = field(pytree_node=False, default=False)


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
                 index_overflow_flag: bool = False) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, index_overflow_flag=index_overflow_flag)
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def set_fault(state: EmulatorState, code: int) -> EmulatorState:
    """Halt the machine with the given fault code."""
    return state.replace(fault=jnp.astype(code, jnp.uint8))


def in_memory(start, length) -> jnp.ndarray:
    """True when ``length`` bytes starting at ``start`` fit inside memory."""
    return jnp.astype(start, jnp.int32) + length <= MEMORY_SIZE


def fault_instruction(state: EmulatorState, code: int) -> EmulatorState:
    """Halt on the instruction just fetched, leaving PC pointing at it."""
    return set_fault(state.replace(pc=state.pc - 2), code)
