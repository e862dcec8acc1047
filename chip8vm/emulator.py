"""Main CHIP-8 execution engine."""

from functools import partial
from typing import Optional, Union

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import Op, Operation, decode
from chip8vm.constants import PROGRAM_START, MAX_ROM_SIZE, MEMORY_SIZE
from chip8vm.errors import Chip8Error, MemoryFault, RomTooLarge, UnknownOpcode
from chip8vm.instructions import as_word
from chip8vm.instructions.system import execute_clear_screen, execute_return
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8vm.instructions.alu import execute_set_register, execute_alu_operation
from chip8vm.instructions.memory import (
    RandomSource, jax_random_byte, execute_set, execute_add, execute_set_index, execute_random
)
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)
from chip8vm.logging import TraceLogger, build_progress_bar


HANDLERS = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_BYTE: execute_skip_if_equal_immediate,
    Op.SNE_BYTE: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_BYTE: execute_set,
    Op.ADD_BYTE: execute_add,
    Op.LD_REG: execute_set_register,
    Op.OR: execute_alu_operation,
    Op.AND: execute_alu_operation,
    Op.XOR: execute_alu_operation,
    Op.ADD_REG: execute_alu_operation,
    Op.SUB: execute_alu_operation,
    Op.SHR: execute_alu_operation,
    Op.SUBN: execute_alu_operation,
    Op.SHL: execute_alu_operation,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I: execute_add_to_index,
    Op.LD_F: execute_font_character,
    Op.LD_B: execute_bcd_conversion,
    Op.STORE: execute_store_registers,
    Op.LOAD: execute_load_registers,
}


def execute(state: MachineState, operation: Union[Operation, int],
            random_source: RandomSource = jax_random_byte) -> MachineState:
    """Execute a single CHIP-8 instruction.

    ``operation`` is either a decoded Operation or a raw opcode. The pc is
    expected to already point past the instruction, as ``fetch`` leaves it.
    On any Chip8Error the input state is left as it was.
    """
    if not isinstance(operation, Operation):
        operation = decode(operation)

    handler = HANDLERS[operation.op]
    if operation.op is Op.RND:
        handler = partial(handler, random_source=random_source)
    return handler(state, operation)


def _pack_u16(high, low) -> int:
    """Pack two bytes into a big-endian 16-bit word."""
    return (int(high) << 8) | int(low)


def fetch(state: MachineState) -> tuple[MachineState, int]:
    """Fetch next opcode from memory and advance pc past it."""
    pc = int(state.pc)
    if pc + 1 >= MEMORY_SIZE:
        raise MemoryFault(pc, 2)
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=as_word(pc + 2)), instruction


def step(state: MachineState, random_source: RandomSource = jax_random_byte) -> MachineState:
    """Run one fetch-decode-execute cycle."""
    next_state, instruction = fetch(state)
    return execute(next_state, decode(instruction), random_source)


def tick_timers(state: MachineState) -> MachineState:
    """Decrement delay and sound timers toward zero. Call at 60 Hz."""
    return state.replace(
        dt=jnp.asarray(max(int(state.dt) - 1, 0), dtype=jnp.uint8),
        st=jnp.asarray(max(int(state.st) - 1, 0), dtype=jnp.uint8),
    )


def load_rom(state: MachineState, rom_data: bytes) -> MachineState:
    """Load ROM bytes into CHIP-8 memory starting at 0x200 and reset pc."""
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomTooLarge(len(rom_data), MAX_ROM_SIZE)
    end = PROGRAM_START + len(rom_data)
    new_memory = state.memory
    if rom_data:
        rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
        new_memory = new_memory.at[PROGRAM_START:end].set(rom_array)
    return state.replace(memory=new_memory, pc=as_word(PROGRAM_START))


def load_rom_file(state: MachineState, filename: str) -> MachineState:
    """Read a ROM image from disk and load it."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_rom(state, rom_data)


def run(
    state: MachineState,
    cycles: int,
    timer_every: Optional[int] = None,
    random_source: RandomSource = jax_random_byte,
    logger: Optional[TraceLogger] = None,
    progress: bool = False,
    skip_unknown: bool = False,
) -> MachineState:
    """Run ``cycles`` instructions without wall-clock pacing.

    Args:
        state: Machine to run
        cycles: Number of fetch-decode-execute cycles
        timer_every: Tick the timers after every this many cycles (None disables)
        random_source: Byte source for RND
        logger: Trace each executed instruction and any failure
        progress: Show a tqdm progress bar
        skip_unknown: Step over unknown opcodes instead of raising

    Raises:
        Chip8Error: with ``error.state`` holding the last state committed
            before the failing cycle.
    """
    update_progress, close_progress = build_progress_bar(cycles, enabled=progress)

    try:
        for cycle in range(cycles):
            next_state, instruction = fetch(state)
            try:
                operation = decode(instruction)
            except UnknownOpcode as error:
                if not skip_unknown:
                    raise
                if logger is not None:
                    logger.log_skip(int(state.pc), error)
                state = next_state
            else:
                if logger is not None:
                    logger.log_step(int(state.pc), instruction, operation)
                state = execute(next_state, operation, random_source)

            if timer_every and (cycle + 1) % timer_every == 0:
                state = tick_timers(state)
            update_progress(1)
    except Chip8Error as error:
        error.state = state
        if logger is not None:
            logger.log_fault(int(state.pc), error)
        raise
    finally:
        close_progress()

    return state
