"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import Operation
from chip8vm.constants import FONT_START, FONT_GLYPH_SIZE
from chip8vm.instructions import advance_pc, as_word, check_range, set_register


def execute_get_delay_timer(state: MachineState, operation: Operation) -> MachineState:
    """FX07 - Set VX to delay timer value."""
    return set_register(state, operation.x, int(state.dt))


def execute_set_delay_timer(state: MachineState, operation: Operation) -> MachineState:
    """FX15 - Set delay timer to VX."""
    return state.replace(dt=state.registers[operation.x])


def execute_set_sound_timer(state: MachineState, operation: Operation) -> MachineState:
    """FX18 - Set sound timer to VX."""
    return state.replace(st=state.registers[operation.x])


def execute_add_to_index(state: MachineState, operation: Operation) -> MachineState:
    """FX1E - Add VX to I, wrapping at 16 bits. VF is untouched."""
    return state.replace(i=as_word(int(state.i) + state.register(operation.x)))


def execute_wait_for_key(state: MachineState, operation: Operation) -> MachineState:
    """FX0A - Wait for a key press.

    With no key down the pc is rewound onto this instruction and the state is
    marked as awaiting a key, so the next cycle polls again. Otherwise VX
    receives the lowest pressed key.
    """
    if not bool(jnp.any(state.keypad)):
        return advance_pc(state, -2).replace(awaiting_key=True)

    pressed_key = int(jnp.argmax(state.keypad))
    return set_register(state, operation.x, pressed_key).replace(awaiting_key=False)


def execute_font_character(state: MachineState, operation: Operation) -> MachineState:
    """FX29 - Set I to the glyph for digit VX."""
    font_address = FONT_START + state.register(operation.x) * FONT_GLYPH_SIZE
    check_range(font_address, FONT_GLYPH_SIZE)
    return state.replace(i=as_word(font_address))


def execute_bcd_conversion(state: MachineState, operation: Operation) -> MachineState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    address = int(state.i)
    check_range(address, 3)

    value = state.register(operation.x)
    digits = jnp.array([value // 100, (value // 10) % 10, value % 10], dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[address:address + 3].set(digits))


def _advance_index(state: MachineState, operation: Operation) -> MachineState:
    if state.quirks.increment_index:
        return state.replace(i=as_word(int(state.i) + operation.x + 1))
    return state


def execute_store_registers(state: MachineState, operation: Operation) -> MachineState:
    """FX55 - Store V0 through VX in memory starting at I."""
    address = int(state.i)
    count = operation.x + 1
    check_range(address, count)

    new_memory = state.memory.at[address:address + count].set(state.registers[:count])
    return _advance_index(state.replace(memory=new_memory), operation)


def execute_load_registers(state: MachineState, operation: Operation) -> MachineState:
    """FX65 - Load V0 through VX from memory starting at I."""
    address = int(state.i)
    count = operation.x + 1
    check_range(address, count)

    new_registers = state.registers.at[:count].set(state.memory[address:address + count])
    return _advance_index(state.replace(registers=new_registers), operation)
