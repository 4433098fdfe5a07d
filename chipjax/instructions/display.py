"""CHIP-8 display operations."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState, fault_instruction, in_memory
from chipjax.decode import DecodedInstruction
from chipjax.constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE, FLAG_REGISTER, FAULT_MEMORY_BOUNDS,
)

# Pre-computed coordinate grids for display operations, indexed [row, column]
rows, cols = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')


def _draw_sprite(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    # Offsets wrap, so a sprite leaving one edge re-enters on the opposite one
    col_offset = (cols - sprite_x) % SCREEN_WIDTH
    row_offset = (rows - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < 8) & (row_offset < instruction.n)

    addresses = jnp.clip(jnp.astype(state.I, jnp.int32) + row_offset, 0, MEMORY_SIZE - 1)
    sprite_bytes = jnp.astype(state.memory[addresses], jnp.int32)
    bits = (sprite_bytes >> jnp.clip(7 - col_offset, 0, 7)) & 1
    sprite = jnp.astype(jnp.where(in_sprite, bits, 0), jnp.uint8)

    collision = jnp.any((state.display & sprite) == 1)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        display_dirty=jnp.array(True)
    )


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    return jax.lax.cond(
        (instruction.n == 0) | in_memory(state.I, instruction.n),
        _draw_sprite,
        lambda state, instruction: fault_instruction(state, FAULT_MEMORY_BOUNDS),
        state, instruction
    )
