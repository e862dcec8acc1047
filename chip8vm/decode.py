"""CHIP-8 instruction decoding.

Opcodes are decoded through a table keyed on the top nibble. Each family
entry holds a mask selecting the bits that tell its members apart, and a map
from those bits to the operation. Families with a single member use a zero
mask.
"""

import enum
from typing import Optional

from chex import dataclass

from chip8vm.errors import UnknownOpcode


class Op(enum.Enum):
    """Every CHIP-8 instruction, named after its Cowgod mnemonic and operands."""
    CLS = "00E0"
    RET = "00EE"
    JP = "1nnn"
    CALL = "2nnn"
    SE_BYTE = "3xkk"
    SNE_BYTE = "4xkk"
    SE_REG = "5xy0"
    LD_BYTE = "6xkk"
    ADD_BYTE = "7xkk"
    LD_REG = "8xy0"
    OR = "8xy1"
    AND = "8xy2"
    XOR = "8xy3"
    ADD_REG = "8xy4"
    SUB = "8xy5"
    SHR = "8xy6"
    SUBN = "8xy7"
    SHL = "8xyE"
    SNE_REG = "9xy0"
    LD_I = "Annn"
    JP_V0 = "Bnnn"
    RND = "Cxkk"
    DRW = "Dxyn"
    SKP = "Ex9E"
    SKNP = "ExA1"
    LD_VX_DT = "Fx07"
    LD_VX_K = "Fx0A"
    LD_DT_VX = "Fx15"
    LD_ST_VX = "Fx18"
    ADD_I = "Fx1E"
    LD_F = "Fx29"
    LD_B = "Fx33"
    STORE = "Fx55"
    LOAD = "Fx65"

    @property
    def operands(self) -> tuple[str, ...]:
        """Operand fields this instruction carries, read off its pattern."""
        pattern = self.value
        if "nnn" in pattern:
            return ("addr",)
        fields = []
        if "x" in pattern:
            fields.append("x")
        if "y" in pattern:
            fields.append("y")
        if "kk" in pattern:
            fields.append("byte")
        if pattern.endswith("n"):
            fields.append("n")
        return tuple(fields)


@dataclass(frozen=True)
class Operation:
    """Decoded CHIP-8 instruction carrying only the operands it uses."""
    op: Op
    raw: int
    x: Optional[int] = None     # VX register index
    y: Optional[int] = None     # VY register index
    byte: Optional[int] = None  # 8-bit immediate
    addr: Optional[int] = None  # 12-bit address
    n: Optional[int] = None     # 4-bit sprite height


# top nibble -> (discriminating mask, {masked bits: operation})
DECODE_TABLE: dict[int, tuple[int, dict[int, Op]]] = {
    0x0: (0x0FFF, {0x0E0: Op.CLS, 0x0EE: Op.RET}),
    0x1: (0x0000, {0x0: Op.JP}),
    0x2: (0x0000, {0x0: Op.CALL}),
    0x3: (0x0000, {0x0: Op.SE_BYTE}),
    0x4: (0x0000, {0x0: Op.SNE_BYTE}),
    0x5: (0x000F, {0x0: Op.SE_REG}),
    0x6: (0x0000, {0x0: Op.LD_BYTE}),
    0x7: (0x0000, {0x0: Op.ADD_BYTE}),
    0x8: (0x000F, {
        0x0: Op.LD_REG,
        0x1: Op.OR,
        0x2: Op.AND,
        0x3: Op.XOR,
        0x4: Op.ADD_REG,
        0x5: Op.SUB,
        0x6: Op.SHR,
        0x7: Op.SUBN,
        0xE: Op.SHL,
    }),
    0x9: (0x000F, {0x0: Op.SNE_REG}),
    0xA: (0x0000, {0x0: Op.LD_I}),
    0xB: (0x0000, {0x0: Op.JP_V0}),
    0xC: (0x0000, {0x0: Op.RND}),
    0xD: (0x0000, {0x0: Op.DRW}),
    0xE: (0x00FF, {0x9E: Op.SKP, 0xA1: Op.SKNP}),
    0xF: (0x00FF, {
        0x07: Op.LD_VX_DT,
        0x0A: Op.LD_VX_K,
        0x15: Op.LD_DT_VX,
        0x18: Op.LD_ST_VX,
        0x1E: Op.ADD_I,
        0x29: Op.LD_F,
        0x33: Op.LD_B,
        0x55: Op.STORE,
        0x65: Op.LOAD,
    }),
}


def nibbles(opcode: int) -> tuple[int, int, int, int]:
    """Split a 16-bit opcode into its four nibbles, highest first."""
    return (
        (opcode & 0xF000) >> 12,
        (opcode & 0x0F00) >> 8,
        (opcode & 0x00F0) >> 4,
        opcode & 0x000F,
    )


def decode(opcode: int) -> Operation:
    """Decode a 16-bit opcode into an Operation.

    Raises:
        UnknownOpcode: if no instruction pattern matches.
    """
    opcode = int(opcode)
    if not 0 <= opcode <= 0xFFFF:
        raise UnknownOpcode(opcode)

    family, x, y, n = nibbles(opcode)
    mask, variants = DECODE_TABLE[family]
    op = variants.get(opcode & mask)
    if op is None:
        raise UnknownOpcode(opcode)

    available = {
        "x": x,
        "y": y,
        "n": n,
        "byte": opcode & 0x00FF,
        "addr": opcode & 0x0FFF,
    }
    return Operation(op=op, raw=opcode, **{name: available[name] for name in op.operands})


_MNEMONICS = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{addr:03X}",
    Op.CALL: "CALL 0x{addr:03X}",
    Op.SE_BYTE: "SE V{x:X}, 0x{byte:02X}",
    Op.SNE_BYTE: "SNE V{x:X}, 0x{byte:02X}",
    Op.SE_REG: "SE V{x:X}, V{y:X}",
    Op.LD_BYTE: "LD V{x:X}, 0x{byte:02X}",
    Op.ADD_BYTE: "ADD V{x:X}, 0x{byte:02X}",
    Op.LD_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}, V{y:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}, V{y:X}",
    Op.SNE_REG: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, 0x{addr:03X}",
    Op.JP_V0: "JP V0, 0x{addr:03X}",
    Op.RND: "RND V{x:X}, 0x{byte:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I: "ADD I, V{x:X}",
    Op.LD_F: "LD F, V{x:X}",
    Op.LD_B: "LD B, V{x:X}",
    Op.STORE: "LD [I], V{x:X}",
    Op.LOAD: "LD V{x:X}, [I]",
}


def format_operation(operation: Operation) -> str:
    """Render an operation as assembly text, e.g. ``LD V1, 0x05``."""
    return _MNEMONICS[operation.op].format(
        x=operation.x, y=operation.y, byte=operation.byte, addr=operation.addr, n=operation.n
    )
