r"""
Declargs descriptors.

Overview
- Descriptor: one registered flag, command or positional argument, built from a
  parsed Definition plus its validator and match handler.
  • Immutable after registration, except for the found/error flags the scanner
    mutates while a scan is running.
  • Callable: calling a descriptor forwards the MatchResult to its handler
    (no-op when no handler was bound).

- DescriptorType metaclass
  • Provides stable __repr__/__rich_repr__ implementations for diagnostics.
  • Exposes fields listed in __introspectable__ as read-only properties (via mirror()).
  • Seals Descriptor against subclassing.

Quick example:
    >>> from declargs.definitions import parse
    >>> descriptor = Descriptor(parse("-w, --width num\tOutput width"))
    >>> descriptor.name, descriptor.takes
    ('--width', True)
"""
import functools
import operator
import re

from .definitions import Kind, Requirement, Definition
from .utils import *


class DescriptorType(type):
    """
    Metaclass that turns descriptor classes into introspectable records.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages and reprs.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - descriptor(name='--width', kind=<Kind.SHORT|LONG: 3>, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


class Descriptor(metaclass=DescriptorType, sealed=True):
    """
    A registered flag, command or positional argument.

    Parameters
    - definition: the parsed Definition.
    - validator: Callable[[str, *Any], str | None] or None.
    - arguments: extra positional parameters forwarded to the validator.
    - handler: Callable[[MatchResult], Any] or None.
    - position: declaration rank among positionals (None for flags and commands).

    Scan state
    - found: set once the descriptor matched a token.
    - error: set when its value (default or scanned) was rejected.
    - default: resolved default value ("" when no default clause applies).
    """
    __introspectable__ = (
        "definition",
        "validator",
        "arguments",
        "handler",
        "position",
        "default",
        "found",
        "error",
    )
    __displayable__ = (
        "name",
        "kind",
        "requirement",
        "default",
        "found",
        "error",
    )

    def __init__(self, definition, /, validator=None, arguments=(), handler=None, *, position=None):
        if not isinstance(definition, Definition):
            raise TypeError("descriptor 'definition' must be a Definition")
        if validator is not None and not callable(validator):
            raise TypeError("descriptor 'validator' must be callable")
        if handler is not None and not callable(handler):
            raise TypeError("descriptor 'handler' must be callable")
        self._definition = definition
        self._validator = validator
        self._arguments = tuple(arguments)
        self._handler = handler
        self._position = position
        self._default = ""
        self._found = False
        self._error = False

    def __call__(self, result, /):
        if self._handler is None:
            return
        return self._handler(result)

    @property
    def text(self):
        return self._definition.text

    @property
    def name(self):
        return self._definition.name

    @property
    def kind(self):
        return self._definition.kind

    @property
    def requirement(self):
        return self._definition.requirement

    @property
    def letter(self):
        return self._definition.letter

    @property
    def description(self):
        return self._definition.description

    @property
    def takes(self):
        """
        Whether a match extracts a value (optional or mandatory argument).
        """
        return self._definition.requirement is not Requirement.NONE

    @property
    def mandatory(self):
        return self._definition.requirement is Requirement.MANDATORY

    @property
    def flag(self):
        return self._definition.kind.flag

    @property
    def command(self):
        return Kind.COMMAND in self._definition.kind

    @property
    def positional(self):
        return Kind.POSITIONAL in self._definition.kind

    def assign(self, default, /):
        if not isinstance(default, str):
            raise TypeError("descriptor default must be a string")
        self._default = default

    def mark_found(self):
        self._found = True

    def mark_error(self):
        self._error = True

    def clear_error(self):
        self._error = False


__all__ = (
    "DescriptorType",
    "Descriptor",
)
