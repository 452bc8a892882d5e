import logging as lg
from typing import Callable, Iterator, List

import enaa.common.ops as ops
from enaa.common.ops import Opcode
from enaa.common.errors import (
    VMError, StackUnderflow, InvalidCodePoint, CodeOverrun, StepLimitExceeded
)
from enaa.common.vmconf import WORD_MASK, END_OF_INPUT, MAX_CODE_POINT, SURROGATES


class Halt(Exception):
    pass


class VM():
    '''
    Stack machine over 32-bit unsigned words.

    The VM has:
    - a code segment storing bytecodes to execute (never modified);
    - a data stack used for computation and temporary storage;
    - an auxiliary register;
    - an input buffer, consumed one character at a time by In;
    - an output buffer, appended to by Out;
    - a program counter indexing into the code segment.
    '''

    code: bytes
    pc: int             # Program counter
    aux: int            # Auxiliary register
    stack: List[int]
    output: List[str]
    steps: int          # Executed instructions

    def __init__(self, code: bytes, input: str, trace: bool = False):
        self.code = bytes(code)
        self.input_chars: Iterator[str] = iter(input)
        self.trace = trace

        self.pc = 0
        self.aux = 0
        self.stack = []
        self.output = []
        self.steps = 0

    # - Helpers - #

    def debug_dump(self):
        lg.debug(f'PC:{self.pc:X} AUX:{self.aux:X} STACK:{self.stack}')

    def fetch(self, addr: int) -> int:
        if addr >= len(self.code):
            raise CodeOverrun(f'fetch at {addr} past end of code ({len(self.code)} bytes)')

        return self.code[addr]

    def operand(self) -> int:
        return self.fetch(self.pc + 1)

    def push(self, val: int):
        self.stack.append(val & WORD_MASK)

    def pop(self) -> int:
        if not self.stack:
            raise StackUnderflow('pop on empty stack')

        return self.stack.pop()

    def arithm_pair(self, op: Callable[[int, int], int]):
        rhs = self.pop()
        lhs = self.pop()
        self.push(op(lhs, rhs))
        self.pc += 1

    def branch_if(self, cmp: Callable[[int, int], bool]):
        rhs = self.pop()
        lhs = self.pop()

        if cmp(lhs, rhs):
            self.pc = self.operand()
        else:
            self.pc += 2

    # - Operations - #

    def in_(self):
        ch = next(self.input_chars, None)
        self.push(END_OF_INPUT if ch is None else ord(ch))
        self.pc += 1

    def out(self):
        val = self.pop()

        if val > MAX_CODE_POINT or val in SURROGATES:
            raise InvalidCodePoint(f'invalid code point {val:#x}')

        self.output.append(chr(val))
        self.pc += 1

    def dup(self):
        if not self.stack:
            raise StackUnderflow('dup on empty stack')

        self.push(self.stack[-1])
        self.pc += 1

    def add(self):
        self.arithm_pair(lambda a, b: a + b)

    def sub(self):
        self.arithm_pair(lambda a, b: a - b)

    def bne(self):
        if self.pop() != 0:
            self.pc = self.operand()
        else:
            self.pc += 2

    def blt(self):
        self.branch_if(lambda a, b: a < b)

    def bgt(self):
        self.branch_if(lambda a, b: a > b)

    def ble(self):
        self.branch_if(lambda a, b: a <= b)

    def beq(self):
        self.branch_if(lambda a, b: a == b)

    def exit(self):
        raise Halt()

    def push_imm(self):
        self.push(self.operand())
        self.pc += 2

    def jmp(self):
        self.pc = self.operand()

    def pusha(self):
        self.push(self.aux)
        self.pc += 1

    def popa(self):
        self.aux = self.pop()
        self.pc += 1

    HANDLERS = {
        Opcode.In: in_,
        Opcode.Out: out,
        Opcode.Dup: dup,
        Opcode.Add: add,
        Opcode.Sub: sub,
        Opcode.Bne: bne,
        Opcode.Blt: blt,
        Opcode.Exit: exit,
        Opcode.Push: push_imm,
        Opcode.Jmp: jmp,
        Opcode.Beq: beq,
        Opcode.Pusha: pusha,
        Opcode.Popa: popa,
        Opcode.Bgt: bgt,
        Opcode.Ble: ble
    }

    # -- Implementation -- #

    def exec_next(self):
        if self.trace:
            self.debug_dump()

        op = ops.decode(self.fetch(self.pc))
        handler = self.HANDLERS[op]
        self.steps += 1
        handler(self)

    def run(self, max_steps: int | None = None) -> str:
        try:
            while max_steps is None or self.steps < max_steps:
                self.exec_next()

            raise StepLimitExceeded(f'no Exit after {self.steps} steps')

        except Halt:
            lg.debug(f'Execution halted after {self.steps} steps')

        except VMError as e:
            e.pc = self.pc
            raise

        return ''.join(self.output)


def run(code: bytes, input: str, trace: bool = False, max_steps: int | None = None) -> str:
    ''' Execute specified program on specified input and return generated output '''
    vm = VM(code, input, trace=trace)
    return vm.run(max_steps)
