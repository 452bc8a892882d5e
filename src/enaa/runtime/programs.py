''' Built-in programs '''

from typing import List

from enaa.common.ops import Opcode
from enaa.common.vmconf import DEFAULT_SHIFT, ALPHABET_SIZE
from enaa.sasm.asm import Insn


# Rolling Caesar decoder: every character is shifted forward by the
# current shift, wrapping past 'z'. The shift starts at the given value
# and grows by one per character, wrapping from 25 back to 0.
def decrypter(shift: int = DEFAULT_SHIFT) -> List[Insn]:
    if not (0 <= shift < ALPHABET_SIZE):
        raise ValueError(f'Shift must be 0-{ALPHABET_SIZE - 1}, got {shift}')

    return [
        Insn(Opcode.Push).set_value(shift),
        Insn(Opcode.Popa),
        Insn(Opcode.In).set_label('loop'),
        Insn(Opcode.Dup),
        Insn(Opcode.Bne).set_target('decode'),
        Insn(Opcode.Exit),
        Insn(Opcode.Pusha).set_label('decode'),
        Insn(Opcode.Add),
        Insn(Opcode.Dup),
        Insn(Opcode.Push).set_value(ord('z')),
        Insn(Opcode.Ble).set_target('out'),
        Insn(Opcode.Push).set_value(ALPHABET_SIZE),
        Insn(Opcode.Sub),
        Insn(Opcode.Out).set_label('out'),
        Insn(Opcode.Pusha),
        Insn(Opcode.Push).set_value(1),
        Insn(Opcode.Add),
        Insn(Opcode.Dup),
        Insn(Opcode.Push).set_value(ALPHABET_SIZE - 1),
        Insn(Opcode.Bgt).set_target('wrap'),
        Insn(Opcode.Popa),
        Insn(Opcode.Jmp).set_target('loop'),
        Insn(Opcode.Push).set_value(0).set_label('wrap'),
        Insn(Opcode.Popa),
        Insn(Opcode.Jmp).set_target('loop'),
    ]


DECRYPTER = decrypter()
