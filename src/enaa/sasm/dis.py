''' Bytecode disassembler '''

import logging as lg
from typing import Dict, List, Tuple

import enaa.common.ops as ops
from enaa.common.ops import Opcode
from enaa.common.errors import AssemblyError, CodeOverrun, VMError
from enaa.sasm.asm import Insn


def label_name(offset: int) -> str:
    return f'L{offset}'


def decode_all(code: bytes) -> List[Tuple[int, Opcode, int | None]]:
    decoded = []
    offset = 0

    while offset < len(code):
        try:
            op = ops.decode(code[offset])
        except VMError as e:
            e.pc = offset
            raise

        operand = None

        if ops.encoded_size(op) == 2:
            if offset + 1 >= len(code):
                raise CodeOverrun(f'Truncated {op.name} at offset {offset}')

            operand = code[offset + 1]

        decoded.append((offset, op, operand))
        offset += ops.encoded_size(op)

    return decoded


def disassemble(code: bytes) -> List[Insn]:
    decoded = decode_all(code)
    starts = {offset for (offset, _, _) in decoded}

    targets = {
        operand for (_, op, operand) in decoded
        if ops.operand_kind(op) == ops.TARGET
    }

    for target in sorted(targets):
        if target not in starts:
            raise AssemblyError(f'Jump target {target} does not start an instruction')

    labels: Dict[int, str] = {t: label_name(t) for t in targets}
    lg.debug(f'Disassembling {len(code)} bytes, {len(labels)} labels')

    program = []

    for (offset, op, operand) in decoded:
        insn = Insn(op)

        match ops.operand_kind(op):
            case ops.TARGET:
                insn = insn.set_target(labels[operand])
            case ops.VALUE:
                insn = insn.set_value(operand)

        if offset in labels:
            insn = insn.set_label(labels[offset])

        program.append(insn)

    return program
