"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import Operation
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, FLAG_REGISTER
from chip8vm.instructions import check_range

# Bit 7 of each sprite row is the leftmost pixel
columns = jnp.arange(SPRITE_WIDTH)


def sprite_mask(rows: jnp.ndarray, x: int, y: int) -> jnp.ndarray:
    """Rasterise sprite rows at (x, y) into a screen-sized mask, wrapping both axes."""
    rows = rows.astype(jnp.int32)
    bits = ((rows[:, None] >> (SPRITE_WIDTH - 1 - columns)) & 1).astype(jnp.bool_)
    xs = (x + columns) % SCREEN_WIDTH
    ys = (y + jnp.arange(rows.shape[0])) % SCREEN_HEIGHT
    mask = jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
    return mask.at[xs[None, :], ys[:, None]].set(bits)


def execute_display(state: MachineState, operation: Operation) -> MachineState:
    """DXYN - Draw N-row sprite from memory[I] at (VX, VY).

    Pixels are XORed onto the framebuffer. VF is 1 if any lit pixel was
    turned off, else 0.
    """
    address = int(state.i)
    check_range(address, operation.n)

    sprite_x = state.register(operation.x) % SCREEN_WIDTH
    sprite_y = state.register(operation.y) % SCREEN_HEIGHT
    sprite = sprite_mask(state.memory[address:address + operation.n], sprite_x, sprite_y)

    collision = jnp.any(state.framebuffer & sprite)
    return state.replace(
        framebuffer=state.framebuffer ^ sprite,
        registers=state.registers.at[FLAG_REGISTER].set(collision.astype(jnp.uint8)),
    )
