"""CHIP-8 system instructions (0x0xxx) and the unknown-opcode handler."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState, fault_instruction
from chipjax.decode import DecodedInstruction
from chipjax.stack import pop, is_empty
from chipjax.constants import FAULT_STACK_UNDERFLOW
from chipjax.logging import report_unknown_opcode


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Opcode with no handler: log it and continue with the next instruction."""
    jax.debug.callback(report_unknown_opcode, instruction.raw, state.pc - 2)
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display), display_dirty=jnp.array(True))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    def _return(state):
        stack, address = pop(state.stack)
        return state.replace(stack=stack, pc=address)

    return jax.lax.cond(
        is_empty(state.stack),
        lambda state: fault_instruction(state, FAULT_STACK_UNDERFLOW),
        _return,
        state
    )


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions."""
    return jax.lax.cond(
        0x00E0 == instruction.raw,
        execute_clear_screen,
        lambda state, instruction: jax.lax.cond(
            0x00EE == instruction.raw,
            execute_return,
            execute_unknown,
            state, instruction
        ),
        state, instruction
    )
