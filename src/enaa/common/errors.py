class EnaaError(Exception):
    pass


class AssemblyError(EnaaError):
    pass


class VMError(EnaaError):
    ''' Fatal runtime condition; execution stops at the failing instruction '''

    pc: int | None = None

    def __str__(self) -> str:
        message = super().__str__()

        if self.pc is None:
            return message

        return f'{message} (pc {self.pc})'


class InvalidOpcode(VMError):
    pass


class StackUnderflow(VMError):
    pass


class InvalidCodePoint(VMError):
    pass


class CodeOverrun(VMError):
    pass


class StepLimitExceeded(VMError):
    pass
