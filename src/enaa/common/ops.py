from enum import IntEnum

from enaa.common.errors import InvalidOpcode


class Opcode(IntEnum):
    In = 0x00       # IN -> [... X], 0 on end of input
    Out = 0x01      # [... X] -> OUT
    Dup = 0x02      # [... X] -> [... X X]
    Add = 0x03      # [... X Y] -> [... X+Y]
    Sub = 0x04      # [... X Y] -> [... X-Y]
    Bne = 0x05      # [... X] -> [...], jump if X != 0
    Blt = 0x06      # [... X Y] -> [...], jump if X < Y
    Exit = 0x07
    Push = 0x08     # [...] -> [... N]
    Jmp = 0x09
    Beq = 0x0A      # [... X Y] -> [...], jump if X == Y
    Pusha = 0x0B    # [...] -> [... AUX]
    Popa = 0x0C     # [... N] -> [...], N -> AUX
    Bgt = 0x0D      # [... X Y] -> [...], jump if X > Y
    Ble = 0x0E      # [... X Y] -> [...], jump if X <= Y


# Operand kinds
NO_OPERAND = 'none'
TARGET = 'target'
VALUE = 'value'

JUMPS = frozenset([
    Opcode.Bne,
    Opcode.Blt,
    Opcode.Bgt,
    Opcode.Ble,
    Opcode.Beq,
    Opcode.Jmp
])

IMMEDIATES = frozenset([Opcode.Push])


def operand_kind(op: Opcode) -> str:
    if op in JUMPS:
        return TARGET

    if op in IMMEDIATES:
        return VALUE

    return NO_OPERAND


def encoded_size(op: Opcode) -> int:
    ''' Opcode byte plus the operand byte, if any '''
    return 1 if operand_kind(op) == NO_OPERAND else 2


def decode(value: int) -> Opcode:
    try:
        return Opcode(value)
    except ValueError:
        raise InvalidOpcode(f'invalid opcode {value}') from None
