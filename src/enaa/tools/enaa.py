import sys
from pathlib import Path
import logging as lg
from typing import Callable

import click

from enaa.common.errors import AssemblyError, VMError
from enaa.common.settings import RunSettings
from enaa.common.vmconf import DEFAULT_SHIFT, ALPHABET_SIZE
from enaa.sasm.asm import assemble, pretty_print
from enaa.sasm.dis import disassemble
from enaa.sasm.grammar import parse_listing
from enaa.runtime.programs import DECRYPTER, decrypter
import enaa.runtime.vm as vm


EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_ASSEMBLY_ERROR = 3
EXIT_VM_ERROR = 4
EXIT_KEYBOARD = 5


def fail(message: str, code: int):
    click.echo(message, err=True)
    sys.exit(code)


def guarded(action: Callable[[], None], stage: str = 'Execution'):
    try:
        action()

    except (OSError, UnicodeDecodeError) as e:
        lg.debug('I/O failure', exc_info=True)
        fail(f'I/O error: {e}', EXIT_IO_ERROR)

    except AssemblyError as e:
        fail(f'Assembly failed: {e}', EXIT_ASSEMBLY_ERROR)

    except VMError as e:
        fail(f'{stage} halted on {type(e).__name__}: {e}', EXIT_VM_ERROR)

    except KeyboardInterrupt:
        fail('Execution halted by the user', EXIT_KEYBOARD)


def execute(settings: RunSettings, code: bytes, input: str):
    output = vm.run(code, input, trace=settings.trace, max_steps=settings.max_steps)
    click.echo(output)


@click.group()
@click.pass_context
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('--trace', is_flag=True, help='Log machine state before every instruction')
@click.option('--max-steps', type=click.IntRange(min=1), help='Abort after this many instructions')
def cli(ctx: click.Context, **params):
    ctx.ensure_object(RunSettings)
    ctx.obj.update(**params)

    lg.basicConfig(level=ctx.obj.log_level())


@cli.command(help='Print the listing of the built-in decrypter')
def dis():
    click.echo(pretty_print(DECRYPTER))


@cli.command(help='Decrypt the contents of PATH with the built-in decrypter')
@click.pass_obj
@click.option('--shift', type=click.IntRange(0, ALPHABET_SIZE - 1), default=DEFAULT_SHIFT,
              show_default=True, help='Initial shift')
@click.argument('path', type=Path)
def decrypt(settings: RunSettings, shift: int, path: Path):
    def action():
        code = assemble(decrypter(shift))
        cipher = path.read_text(encoding='utf-8')
        lg.info(f'Decrypting {path.name} with initial shift {shift}')
        execute(settings, code, cipher)

    guarded(action)


@cli.command(help='Assemble the listing in SOURCE into BINARY')
@click.argument('source', type=Path)
@click.argument('binary', type=Path)
def asm(source: Path, binary: Path):
    def action():
        code = assemble(parse_listing(source.read_text(encoding='utf-8')))
        binary.parent.mkdir(parents=True, exist_ok=True)
        binary.write_bytes(code)
        lg.info(f'Wrote {len(code)} bytes to {binary}')

    guarded(action)


@cli.command(help='Print the listing of bytecode in BINARY')
@click.argument('binary', type=Path)
def disasm(binary: Path):
    def action():
        click.echo(pretty_print(disassemble(binary.read_bytes())), nl=False)

    guarded(action, stage='Disassembly')


@cli.command(name='exec', help='Run bytecode in BINARY on the contents of PATH')
@click.pass_obj
@click.argument('binary', type=Path)
@click.argument('path', type=Path, required=False)
def exec_(settings: RunSettings, binary: Path, path: Path | None):
    def action():
        code = binary.read_bytes()
        input = path.read_text(encoding='utf-8') if path is not None else ''
        execute(settings, code, input)

    guarded(action)


if __name__ == '__main__':
    cli()
