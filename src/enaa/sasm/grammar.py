''' Grammar of textual listings, as produced by pretty_print '''

from typing import List

import pyparsing as pp

import enaa.common.ops as ops
from enaa.common.ops import Opcode
from enaa.common.errors import AssemblyError
from enaa.sasm.asm import Insn


def on_value(op: Opcode, literal: str) -> Insn:
    try:
        return Insn(op).set_value(int(literal))
    except ValueError as e:
        raise AssemblyError(str(e)) from e


def on_statement(tokens: pp.ParseResults) -> Insn:
    if len(tokens) == 2:
        (label, insn) = tokens
        return insn.set_label(label)

    return tokens[0]


def on_fail(source: str, loc: int, tokens: pp.ParseResults):
    raise AssemblyError(f'Unknown command at line {pp.lineno(loc, source)}: {tokens[0]}')


def g_cmd(op: Opcode) -> pp.ParserElement:
    literal = pp.Keyword(op.name).suppress()
    kind = ops.operand_kind(op)

    if kind == ops.TARGET:
        return (literal + id).set_parse_action(lambda r: Insn(op).set_target(r[0]))

    if kind == ops.VALUE:
        return (literal + us_dec_const).set_parse_action(lambda r: on_value(op, r[0]))

    return literal.set_parse_action(lambda: Insn(op))


# One statement per line: newlines are significant
DEFAULT_WHITE_CHARS = pp.ParserElement.DEFAULT_WHITE_CHARS
pp.ParserElement.set_default_whitespace_chars(' \t')

id = pp.Word(pp.alphas + '_', pp.alphanums + '_')
comment = pp.Suppress(pp.Regex('//[^\n]*'))
us_dec_const = pp.Regex('[0-9]+')
eol = pp.Suppress(pp.LineEnd())

label = id + pp.Suppress(':')
cmd = pp.MatchFirst([g_cmd(op) for op in Opcode])

statement = (pp.Optional(label) + cmd).set_parse_action(on_statement)
line = pp.Optional(statement) + pp.Optional(comment) + eol
unknown = pp.Regex('[^\n]+').set_parse_action(on_fail)

program = pp.ZeroOrMore(line | unknown)

pp.ParserElement.set_default_whitespace_chars(DEFAULT_WHITE_CHARS)


def parse_listing(text: str) -> List[Insn]:
    try:
        return list(program.parse_string(text, parse_all=True))
    except pp.ParseException as e:
        raise AssemblyError(f'Malformed listing: {e}') from e
