"""Tests for opcode decoding."""

import dataclasses

import pytest
from chip8vm import decode, format_operation, Op, UnknownOpcode
from chip8vm.decode import nibbles


@pytest.mark.parametrize("opcode,op,operands", [
    (0x00E0, Op.CLS, {}),
    (0x00EE, Op.RET, {}),
    (0x1ABC, Op.JP, {"addr": 0xABC}),
    (0x2ABC, Op.CALL, {"addr": 0xABC}),
    (0x3A42, Op.SE_BYTE, {"x": 0xA, "byte": 0x42}),
    (0x4A42, Op.SNE_BYTE, {"x": 0xA, "byte": 0x42}),
    (0x5AB0, Op.SE_REG, {"x": 0xA, "y": 0xB}),
    (0x6105, Op.LD_BYTE, {"x": 0x1, "byte": 0x05}),
    (0x7AFF, Op.ADD_BYTE, {"x": 0xA, "byte": 0xFF}),
    (0x8AB0, Op.LD_REG, {"x": 0xA, "y": 0xB}),
    (0x8AB1, Op.OR, {"x": 0xA, "y": 0xB}),
    (0x8AB2, Op.AND, {"x": 0xA, "y": 0xB}),
    (0x8AB3, Op.XOR, {"x": 0xA, "y": 0xB}),
    (0x8AB4, Op.ADD_REG, {"x": 0xA, "y": 0xB}),
    (0x8AB5, Op.SUB, {"x": 0xA, "y": 0xB}),
    (0x8AB6, Op.SHR, {"x": 0xA, "y": 0xB}),
    (0x8AB7, Op.SUBN, {"x": 0xA, "y": 0xB}),
    (0x8ABE, Op.SHL, {"x": 0xA, "y": 0xB}),
    (0x9AB0, Op.SNE_REG, {"x": 0xA, "y": 0xB}),
    (0xA123, Op.LD_I, {"addr": 0x123}),
    (0xB123, Op.JP_V0, {"addr": 0x123}),
    (0xC30F, Op.RND, {"x": 0x3, "byte": 0x0F}),
    (0xD125, Op.DRW, {"x": 0x1, "y": 0x2, "n": 0x5}),
    (0xE39E, Op.SKP, {"x": 0x3}),
    (0xE3A1, Op.SKNP, {"x": 0x3}),
    (0xF307, Op.LD_VX_DT, {"x": 0x3}),
    (0xF30A, Op.LD_VX_K, {"x": 0x3}),
    (0xF315, Op.LD_DT_VX, {"x": 0x3}),
    (0xF318, Op.LD_ST_VX, {"x": 0x3}),
    (0xF31E, Op.ADD_I, {"x": 0x3}),
    (0xF329, Op.LD_F, {"x": 0x3}),
    (0xF333, Op.LD_B, {"x": 0x3}),
    (0xF355, Op.STORE, {"x": 0x3}),
    (0xF365, Op.LOAD, {"x": 0x3}),
])
def test_decode_table(opcode, op, operands):
    operation = decode(opcode)

    assert operation.op is op
    assert operation.raw == opcode
    for name in ("x", "y", "byte", "addr", "n"):
        assert getattr(operation, name) == operands.get(name), name


def test_every_instruction_has_a_decode_case():
    assert len(Op) == 34


@pytest.mark.parametrize("opcode", [
    0x0000,  # SYS 000
    0x0123,  # SYS 123
    0x00E1,
    0x00FF,
    0x5121,
    0x8128,
    0x812F,
    0x9121,
    0xE09F,
    0xE0A2,
    0xF000,
    0xF0FF,
    0xF056,
])
def test_unknown_opcodes(opcode):
    with pytest.raises(UnknownOpcode) as info:
        decode(opcode)
    assert info.value.opcode == opcode


def test_unknown_opcode_message():
    with pytest.raises(UnknownOpcode, match="0x812F"):
        decode(0x812F)


def test_out_of_range_word_rejected():
    with pytest.raises(UnknownOpcode):
        decode(0x10000)


def test_decode_is_pure():
    assert decode(0xD125) == decode(0xD125)


def test_operation_is_immutable():
    operation = decode(0x6105)
    with pytest.raises(dataclasses.FrozenInstanceError):
        operation.x = 2


def test_nibbles():
    assert nibbles(0xD125) == (0xD, 0x1, 0x2, 0x5)


@pytest.mark.parametrize("opcode,text", [
    (0x00E0, "CLS"),
    (0x2ABC, "CALL 0xABC"),
    (0x6105, "LD V1, 0x05"),
    (0x8AB4, "ADD VA, VB"),
    (0xB123, "JP V0, 0x123"),
    (0xD125, "DRW V1, V2, 5"),
    (0xF30A, "LD V3, K"),
    (0xF355, "LD [I], V3"),
    (0xF365, "LD V3, [I]"),
])
def test_format_operation(opcode, text):
    assert format_operation(decode(opcode)) == text
