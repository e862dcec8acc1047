"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import Operation
from chip8vm.stack import pop


def execute_clear_screen(state: MachineState, operation: Operation) -> MachineState:
    """00E0 - Clear display."""
    return state.replace(framebuffer=jnp.zeros_like(state.framebuffer))


def execute_return(state: MachineState, operation: Operation) -> MachineState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=jnp.astype(address, jnp.uint16))
