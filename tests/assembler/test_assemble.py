import pytest

import enaa.common.ops as ops
from enaa.common.ops import Opcode
from enaa.common.errors import AssemblyError
from enaa.sasm.asm import Insn, Target, Value, assemble, pretty_print
from enaa.runtime.programs import DECRYPTER


DECRYPTER_BYTES = bytes([
    0x08, 0x04,         # Push 4
    0x0C,               # Popa
    0x00,               # loop: In
    0x02,               # Dup
    0x05, 0x08,         # Bne decode
    0x07,               # Exit
    0x0B,               # decode: Pusha
    0x03,               # Add
    0x02,               # Dup
    0x08, 0x7A,         # Push 122
    0x0E, 0x12,         # Ble out
    0x08, 0x1A,         # Push 26
    0x04,               # Sub
    0x01,               # out: Out
    0x0B,               # Pusha
    0x08, 0x01,         # Push 1
    0x03,               # Add
    0x02,               # Dup
    0x08, 0x19,         # Push 25
    0x0D, 0x1F,         # Bgt wrap
    0x0C,               # Popa
    0x09, 0x03,         # Jmp loop
    0x08, 0x00,         # wrap: Push 0
    0x0C,               # Popa
    0x09, 0x03,         # Jmp loop
])


def test_decrypter_bytes():
    assert assemble(DECRYPTER) == DECRYPTER_BYTES


def test_length_is_sum_of_sizes():
    expected = sum(ops.encoded_size(insn.opcode) for insn in DECRYPTER)
    assert len(assemble(DECRYPTER)) == expected


def test_forward_reference():
    program = [
        Insn(Opcode.Jmp).set_target('end'),
        Insn(Opcode.Push).set_value(1),
        Insn(Opcode.Exit).set_label('end'),
    ]

    assert assemble(program) == bytes([0x09, 0x04, 0x08, 0x01, 0x07])


def test_backward_reference():
    program = [
        Insn(Opcode.Push).set_value(7),
        Insn(Opcode.In).set_label('top'),
        Insn(Opcode.Bne).set_target('top'),
        Insn(Opcode.Exit),
    ]

    assert assemble(program) == bytes([0x08, 0x07, 0x00, 0x05, 0x02, 0x07])


def test_unresolved_label():
    program = [
        Insn(Opcode.Jmp).set_target('nowhere'),
        Insn(Opcode.Exit),
    ]

    with pytest.raises(AssemblyError, match='nowhere'):
        assemble(program)


def test_duplicate_label():
    program = [
        Insn(Opcode.In).set_label('again'),
        Insn(Opcode.Out).set_label('again'),
        Insn(Opcode.Exit),
    ]

    with pytest.raises(AssemblyError, match='Duplicate label again'):
        assemble(program)


@pytest.mark.parametrize('insn', [
    Insn(Opcode.Push),
    Insn(Opcode.Jmp),
    Insn(Opcode.Jmp).set_value(3),
    Insn(Opcode.Push).set_target('x'),
    Insn(Opcode.Add).set_value(1),
    Insn(Opcode.Exit).set_target('x'),
])
def test_operand_mismatch(insn):
    with pytest.raises(AssemblyError, match='expects'):
        assemble([insn, Insn(Opcode.Exit).set_label('x')])


def test_immediate_range():
    with pytest.raises(ValueError):
        Insn(Opcode.Push).set_value(256)

    with pytest.raises(ValueError):
        Value(-1)


def test_program_size_limit():
    program = [Insn(Opcode.Push).set_value(0)] * 128
    assert len(assemble(program)) == 256

    with pytest.raises(AssemblyError, match='limit'):
        assemble(program + [Insn(Opcode.Exit)])


def test_insn_is_immutable():
    base = Insn(Opcode.Jmp)
    labelled = base.set_label('here').set_target('there')

    assert base.label is None
    assert base.operand is None
    assert labelled.label == 'here'
    assert labelled.operand == Target('there')


def test_pretty_print():
    program = [
        Insn(Opcode.Push).set_value(97),
        Insn(Opcode.Out).set_label('emit'),
        Insn(Opcode.Bne).set_target('emit'),
        Insn(Opcode.Exit),
    ]

    assert pretty_print(program) == '\tPush 97\nemit:\tOut\n\tBne emit\n\tExit\n'


def test_pretty_print_preserves_order():
    lines = pretty_print(DECRYPTER).splitlines()

    assert len(lines) == len(DECRYPTER)
    assert lines[0] == '\tPush 4'
    assert lines[2] == 'loop:\tIn'
    assert lines[-3] == 'wrap:\tPush 0'
    assert lines[-1] == '\tJmp loop'

    for line, insn in zip(lines, DECRYPTER):
        assert insn.opcode.name in line


def test_pretty_print_empty():
    assert pretty_print([]) == ''
