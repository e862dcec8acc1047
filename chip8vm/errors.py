"""
Error hierarchy for the CHIP-8 core.

Chip8Error (base)
├── RomTooLarge - ROM does not fit in program memory
├── UnknownOpcode - no instruction pattern matches an opcode
└── Fault - an instruction could not be executed
    ├── MemoryFault - computed address outside the 4096-byte memory
    ├── StackOverflow - CALL with all 16 stack slots in use
    └── StackUnderflow - RET with an empty stack

Every operation that raises one of these leaves the state it was given
untouched, so the host can report the failure, or skip the instruction and
carry on from the previous state.
"""

from typing import Optional


class Chip8Error(Exception):
    """Base exception for all interpreter errors.

    Attributes:
        state: Last committed machine state, filled in by ``run`` when it
            stops on this error
    """
    state = None


class RomTooLarge(Chip8Error):
    """ROM exceeds the memory available above the program start address."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ROM is {size} bytes, maximum is {limit} bytes")


class UnknownOpcode(Chip8Error):
    """Opcode does not match any instruction in the decode table."""

    def __init__(self, opcode: int):
        self.opcode = opcode
        super().__init__(f"Unknown opcode: 0x{opcode:04X}")


class Fault(Chip8Error):
    """Base class for failures raised while executing an operation."""
    pass


class MemoryFault(Fault):
    """Memory access outside the addressable range.

    Attributes:
        address: First address of the attempted access
        length: Number of bytes the access spans
    """

    def __init__(self, address: int, length: int = 1, message: Optional[str] = None):
        self.address = address
        self.length = length
        if message is None:
            end = address + length - 1
            message = f"Memory access 0x{address:04X}-0x{end:04X} out of bounds"
        super().__init__(message)


class StackOverflow(Fault):
    """Subroutine call nested deeper than the stack can hold."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Stack overflow calling 0x{address:03X}")


class StackUnderflow(Fault):
    """Return executed with no pending subroutine call."""

    def __init__(self):
        super().__init__("Stack underflow: RET with empty stack")
