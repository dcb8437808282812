r"""
Declargs definition mini-language.

A definition is one line of text declaring a flag, a command or a positional
argument, e.g.:

    "-x, --xray num-rays ($XRAYS,32)\tNumber of ray tracing along x"
    "<list> [type]\t\tList items of the specified type"
    "[outfile] (x.out)\tThe file containing results"

Grammar (pieces in this order, each optional)
- short marker:    '-' + alphanumeric, not followed by another alphanumeric ("-x")
- long marker:     '--' + letter + (letters/digits/'-')*   ("--xray")
  or command:      quoted or bracketed name                  ("'add'", "<add>")
- argument name:   "[name]" (optional value) or "name" (mandatory value)
- default clause:  "(literal)", "($VAR)" or "($VAR,literal)"
- description:     free text after the first tab

Characters in SEPARATORS are skipped between pieces; the literal of a default
clause stops at end of text, tab, '(' or ')'.

Public API
- parse(text) -> Definition: a pure function; re-parsing Definition.text always
  reproduces the same Definition.
- OptionConfig: the registration record (definition, validator, validator arguments).
"""
import enum
from collections.abc import Callable
from typing import NamedTuple

SEPARATORS = frozenset(" .,|;:*?!@#/&%~=^")
TERMINATORS = frozenset("\t()")

# Longest name kept in a descriptor's span
NAME_LIMIT = 30


class Kind(enum.Flag):
    """
    Descriptor category. SHORT and LONG may be combined ("-v, --verbose").
    """
    SHORT = enum.auto()
    LONG = enum.auto()
    COMMAND = enum.auto()
    POSITIONAL = enum.auto()

    @property
    def flag(self):
        return bool(self & (Kind.SHORT | Kind.LONG))


class Requirement(enum.Enum):
    """
    Whether a matched descriptor carries a value.
    """
    NONE = "none"
    OPTIONAL = "optional"
    MANDATORY = "mandatory"


class Span(NamedTuple):
    offset: int = 0
    length: int = 0

    def of(self, text, /):
        return text[self.offset:self.offset + self.length]


class Letter(NamedTuple):
    symbol: str = ""
    present: bool = False


class DefaultClause(NamedTuple):
    variable: str | None = None
    literal: str | None = None


class Definition(NamedTuple):
    text: str
    kind: Kind
    span: Span
    letter: Letter
    requirement: Requirement
    clause: DefaultClause | None
    description: str

    @property
    def name(self):
        """
        Display name: the declared long/command/argument name, or "-x" for short-only flags.
        """
        return self.span.of(self.text)


class OptionConfig(NamedTuple):
    """
    Registration record for one descriptor.

    - definition: the mini-language text
    - validator: Callable[[str, *Any], str | None] or None; returns a rejection message
    - arguments: extra positional parameters forwarded to the validator
    """
    definition: str
    validator: Callable[..., str | None] | None = None
    arguments: tuple = ()


def _at(text, index):
    return text[index] if index < len(text) else ""


def _alnum(char):
    return char.isascii() and char.isalnum()


def _alpha(char):
    return char.isascii() and char.isalpha()


def _skip(text, index):
    while _at(text, index) in SEPARATORS and index < len(text):
        index += 1
    return index


def _word(text, index):
    # name tail: letters, digits and dashes
    while _at(text, index) == "-" or _alnum(_at(text, index)):
        index += 1
    return index


def _parse_short(text, index):
    index = _skip(text, index)
    if _at(text, index) != "-" or not _alnum(_at(text, index + 1)) or _alnum(_at(text, index + 2)):
        return None
    return Letter(text[index + 1], True), Span(index, 2), index + 2


def _parse_long(text, index):
    index = _skip(text, index)
    if text.startswith("--", index) and _alpha(_at(text, index + 2)):
        kind = Kind.LONG
        start, end = index, _word(text, index + 3)
    elif _at(text, index) in ("'", "<") and _alpha(_at(text, index + 1)):
        kind = Kind.COMMAND
        start, end = index + 1, _word(text, index + 2)
    else:
        return None
    after = end + 1 if _at(text, end) in ("'", ">") else end
    return kind, Span(start, end - start), after


def _parse_argname(text, index):
    index = _skip(text, index)
    requirement = Requirement.MANDATORY
    if _at(text, index) == "[":
        requirement = Requirement.OPTIONAL
        index += 1
    if not _alpha(_at(text, index)):
        return None
    end = _word(text, index + 1)
    after = end + 1 if _at(text, end) == "]" else end
    return requirement, Span(index, end - index), after


def _parse_default(text, index):
    index = _skip(text, index)
    if _at(text, index) != "(":
        return None
    index += 1
    while _at(text, index) == " ":
        index += 1

    variable = None
    if _at(text, index) == "$":
        start = index = index + 1
        while _at(text, index) == "_" or _alnum(_at(text, index)):
            index += 1
        variable = text[start:index] or None

    while _at(text, index) == "," or _at(text, index).isspace():
        index += 1

    start = index
    while index < len(text) and text[index] not in TERMINATORS:
        index += 1
    literal = text[start:index] if index > start else None

    return DefaultClause(variable, literal), index


def parse(text, /):
    """
    Parse one definition string into a Definition.

    Raises
    - TypeError: when text is not a string.
    - ValueError: when the text declares no flag, command or argument name.

    Notes
    - The span of a short-only flag covers its "-x" marker; for flags with a long
      marker or commands it covers the declared name; for positionals the argument name.
    - Spans are capped at NAME_LIMIT characters.
    """
    if not isinstance(text, str):
        raise TypeError("definition must be a string")

    kind = Kind(0)
    span = Span()
    letter = Letter()
    requirement = Requirement.NONE
    index = 0

    if short := _parse_short(text, index):
        letter, span, index = short
        kind |= Kind.SHORT

    if named := _parse_long(text, index):
        marker, span, index = named
        kind |= marker

    if argument := _parse_argname(text, index):
        requirement, name, index = argument
        if not kind:
            kind = Kind.POSITIONAL
            span = name

    if not kind:
        raise ValueError("definition %r declares no flag, command or argument name" % text)

    clause = None
    if default := _parse_default(text, index):
        clause, index = default

    return Definition(
        text,
        kind,
        Span(span.offset, min(span.length, NAME_LIMIT)),
        letter,
        requirement,
        clause,
        text.partition("\t")[2].strip(),
    )


__all__ = (
    "SEPARATORS",
    "TERMINATORS",
    "NAME_LIMIT",
    "Kind",
    "Requirement",
    "Span",
    "Letter",
    "DefaultClause",
    "Definition",
    "OptionConfig",
    "parse",
)
