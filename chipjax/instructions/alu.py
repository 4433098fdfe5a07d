"""CHIP-8 ALU operations (8xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import FLAG_REGISTER
from chipjax.instructions.system import execute_unknown

# Indexed by the low nibble
VALID_OPS = jnp.array([1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=bool)
WRITES_FLAG = jnp.array([0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=bool)


def _no_flag() -> jnp.ndarray:
    return jnp.zeros((), dtype=jnp.uint8)


def alu_set(vx: int, vy: int) -> tuple[int, int]:
    """8XY0 - Set: VX = VY."""
    return vy, _no_flag()


def alu_or(vx: int, vy: int) -> tuple[int, int]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, _no_flag()


def alu_and(vx: int, vy: int) -> tuple[int, int]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, _no_flag()


def alu_xor(vx: int, vy: int) -> tuple[int, int]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, _no_flag()


def alu_add(vx: int, vy: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    not_borrow = jnp.astype(vx > vy, jnp.uint8)
    result = (jnp.astype(vx, jnp.int32) - jnp.astype(vy, jnp.int32)) & 0xFF
    return jnp.astype(result, jnp.uint8), not_borrow


def alu_shift_right(vx: int, vy: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX >>= 1."""
    shifted_bit = jnp.astype(vx & 1, jnp.uint8)
    return jnp.astype(vx >> 1, jnp.uint8), shifted_bit


def alu_sub_yx(vx: int, vy: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    not_borrow = jnp.astype(vy > vx, jnp.uint8)
    result = (jnp.astype(vy, jnp.int32) - jnp.astype(vx, jnp.int32)) & 0xFF
    return jnp.astype(result, jnp.uint8), not_borrow


def alu_shift_left(vx: int, vy: int) -> tuple[int, int]:
    """8XYE - Shift left: VX <<= 1."""
    shifted_bit = jnp.astype((vx >> 7) & 1, jnp.uint8)
    result = (jnp.astype(vx, jnp.int32) << 1) & 0xFF
    return jnp.astype(result, jnp.uint8), shifted_bit


def _apply_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]

    result, vf = jax.lax.switch(
        # Map only valid operations: 0,1,2,3,4,5,6,7,14 -> 0,1,2,3,4,5,6,7,8
        jnp.where(instruction.n == 14, 8, instruction.n),
        [alu_set, alu_or, alu_and, alu_xor, alu_add,
         alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left],
        vx, vy
    )

    # Result first, flag last: with X == F the flag wins
    new_V = state.V.at[instruction.x].set(result)
    new_V = new_V.at[FLAG_REGISTER].set(
        jnp.where(WRITES_FLAG[instruction.n], vf, new_V[FLAG_REGISTER])
    )
    return state.replace(V=new_V)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    return jax.lax.cond(
        VALID_OPS[instruction.n],
        _apply_alu_operation,
        execute_unknown,
        state, instruction
    )
