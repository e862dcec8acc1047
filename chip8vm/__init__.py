"""CHIP-8 virtual machine core."""

from chip8vm.state import (
    MachineState, StackState, MachineSnapshot, create_state, load_font, with_keys,
    write_memory, snapshot,
)
from chip8vm.quirks import Quirks, COSMAC_VIP, SUPER_CHIP
from chip8vm.emulator import execute, fetch, step, tick_timers, load_rom, load_rom_file, run
from chip8vm.decode import Op, Operation, decode, format_operation
from chip8vm.errors import (
    Chip8Error, RomTooLarge, UnknownOpcode, Fault, MemoryFault, StackOverflow, StackUnderflow,
)
from chip8vm.instructions.memory import RandomSource, jax_random_byte
from chip8vm.constants import *

__all__ = [
    "MachineState",
    "StackState",
    "MachineSnapshot",
    "create_state",
    "load_font",
    "with_keys",
    "write_memory",
    "snapshot",
    "Quirks",
    "COSMAC_VIP",
    "SUPER_CHIP",
    "execute",
    "fetch",
    "step",
    "tick_timers",
    "load_rom",
    "load_rom_file",
    "run",
    "Op",
    "Operation",
    "decode",
    "format_operation",
    "Chip8Error",
    "RomTooLarge",
    "UnknownOpcode",
    "Fault",
    "MemoryFault",
    "StackOverflow",
    "StackUnderflow",
    "RandomSource",
    "jax_random_byte",
    "PROGRAM_START",
    "MEMORY_SIZE",
    "MAX_ROM_SIZE",
    "FONT_START",
    "FONT_DATA",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
