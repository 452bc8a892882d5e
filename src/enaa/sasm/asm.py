import logging as lg
from dataclasses import dataclass, replace
from typing import Dict, List, Sequence, Tuple

import enaa.common.ops as ops
from enaa.common.ops import Opcode
from enaa.common.errors import AssemblyError
from enaa.common.vmconf import BYTE_MASK, MAX_CODE_SIZE


@dataclass(frozen=True)
class Target:
    label: str


@dataclass(frozen=True)
class Value:
    value: int

    def __post_init__(self):
        if not (0 <= self.value <= BYTE_MASK):
            raise ValueError(f'Immediate must be 0-{BYTE_MASK}, got {self.value}')


Operand = Target | Value | None


@dataclass(frozen=True)
class Insn:
    ''' Single assembly instruction with optional label and operand '''

    opcode: Opcode
    label: str | None = None
    operand: Operand = None

    def set_label(self, label: str) -> 'Insn':
        return replace(self, label=label)

    def set_value(self, value: int) -> 'Insn':
        return replace(self, operand=Value(value))

    def set_target(self, label: str) -> 'Insn':
        return replace(self, operand=Target(label))


Program = Sequence[Insn]


def operand_kind(operand: Operand) -> str:
    if isinstance(operand, Target):
        return ops.TARGET

    if isinstance(operand, Value):
        return ops.VALUE

    return ops.NO_OPERAND


class FirstPass:
    code: bytearray
    label_dict: Dict[str, int]
    relocations: List[Tuple[int, str]]

    def __init__(self):
        self.code = bytearray()
        self.label_dict = dict()
        self.relocations = list()

    @property
    def offset(self) -> int:
        return len(self.code)

    def on_label(self, labelname: str):
        if labelname in self.label_dict:
            raise AssemblyError(f'Duplicate label {labelname}')

        lg.debug(f'New label {labelname} at {self.offset:X}')
        self.label_dict[labelname] = self.offset

    def issue_op(self, op: Opcode):
        self.code.append(op)

    def issue_byte(self, value: int):
        self.code.append(value)

    def on_ref(self, labelname: str):
        self.relocations.append((self.offset, labelname))
        self.issue_byte(0)  # placeholder-byte

    def issue(self, insn: Insn):
        expected = ops.operand_kind(insn.opcode)
        actual = operand_kind(insn.operand)

        if expected != actual:
            raise AssemblyError(
                f'{insn.opcode.name} expects {expected} operand, got {actual}'
            )

        if insn.label is not None:
            self.on_label(insn.label)

        self.issue_op(insn.opcode)

        match insn.operand:
            case Target(label=labelname):
                self.on_ref(labelname)
            case Value(value=value):
                self.issue_byte(value)


def resolve(first_pass: FirstPass) -> bytes:
    code = first_pass.code

    for (ref_offset, labelname) in first_pass.relocations:
        if labelname not in first_pass.label_dict:
            raise AssemblyError(f'Unknown label {labelname}')

        label_offset = first_pass.label_dict[labelname]
        lg.debug(f'Issuing offset {label_offset:X} of reference to {labelname}')
        code[ref_offset] = label_offset

    return bytes(code)


def assemble(source: Program) -> bytes:
    ''' Assemble a sequence of instructions into a sequence of bytecodes '''

    # First pass
    first_pass = FirstPass()

    for insn in source:
        first_pass.issue(insn)

    if first_pass.offset > MAX_CODE_SIZE:
        raise AssemblyError(
            f'Program is {first_pass.offset} bytes long, limit is {MAX_CODE_SIZE}'
        )

    # Second pass
    return resolve(first_pass)


def format_insn(insn: Insn) -> str:
    prefix = '\t' if insn.label is None else f'{insn.label}:\t'
    line = f'{prefix}{insn.opcode.name}'

    match insn.operand:
        case Target(label=labelname):
            line += f' {labelname}'
        case Value(value=value):
            line += f' {value}'

    return line + '\n'


def pretty_print(source: Program) -> str:
    return ''.join(format_insn(insn) for insn in source)
