r"""
Declargs scanner/matcher.

Walks argv[1:count] once, left to right, matching each token against the
registered descriptors (first success in declaration order wins).

Per-token precedence
1. Options (unless a bare "--" was already consumed) for tokens "-x...":
   • SHORT: the character at the current intra-token offset against each short letter.
     A no-argument short flag keeps the token and moves the offset ("-aux" -> a, u, x).
     A short flag taking an argument uses the rest of the token ("-c5"), or else the
     next token when it does not look like an option.
   • LONG (only at the start of a token): "--name" or "--name=value"; without "=",
     the next token is consumed under the same guard.
2. Commands: only as the very first token, only once, and only before any positional.
3. Positionals: the n-th positional descriptor takes the n-th free token.
4. Anything else goes to the registry fallback, when one is declared.

At the end of the vector, mandatory positionals that never matched are fatal.
That check is skipped when a handler requested stop().
"""
from typing import NamedTuple

from .definitions import Kind
from .faults import Origin, MissingValueError, MissingPositionalError, RejectedValueError, RejectedValueWarning, IgnoredValueWarning
from .validators import validate


class MatchResult(NamedTuple):
    """
    What a handler receives on a match.

    - value: extracted value ("" when none).
    - default: True on the registration-time call made with the resolved default.
    - error: True when the value was rejected in non-strict mode.
    - index: argv index of the matched token (0 for the default call).
    """
    value: str = ""
    default: bool = False
    error: bool = False
    index: int = 0


class ScanCursor:
    """
    Position in the argument vector.

    - index: current token.
    - offset: character within the token, used while unpacking bundled short flags.
    - literal: set for good once a bare "--" was consumed.
    """
    __slots__ = ("index", "offset", "literal")

    def __init__(self, index=1, offset=1, literal=False):
        self.index = index
        self.offset = offset
        self.literal = literal

    def __repr__(self):
        return f"scan-cursor(index={self.index!r}, offset={self.offset!r}, literal={self.literal!r})"

    def advance(self, steps=1, /):
        self.index += steps
        self.offset = 1


def _optional(token, /):
    return token.startswith("-") and len(token) > 1


class Scanner:
    """
    One scan of one argument vector against one registry.

    The registry supplies descriptors, the fallback and fault reporting
    (registry.fail for fatal faults, registry.report for the others).
    """

    def __init__(self, registry, argv, count, /):
        self.registry = registry
        self.argv = argv
        self.count = count
        self.cursor = ScanCursor()
        self.command = False
        self.positionals = 0
        self.stopped = False

    def stop(self):
        self.stopped = True

    def run(self):
        cursor = self.cursor
        while cursor.index < self.count and not self.stopped:
            token = self.argv[cursor.index]

            if not cursor.literal and cursor.offset == 1 and token == "--":
                cursor.literal = True
                cursor.advance()
                continue

            if not cursor.literal and _optional(token):
                if self._short(token) or (cursor.offset == 1 and self._long(token)):
                    continue
            elif self._command(token) or self._positional(token):
                continue

            self._unmatched(token)

        if not self.stopped:
            self._finalize()
        return cursor.index

    def _next(self):
        # value from the following token, unless it looks like an option
        index = self.cursor.index + 1
        if index < self.count and not _optional(self.argv[index]):
            return self.argv[index], 2
        return "", 1

    def _short(self, token):
        cursor = self.cursor
        symbol = token[cursor.offset]
        for descriptor in self.registry.descriptors:
            if Kind.SHORT not in descriptor.kind or descriptor.letter.symbol != symbol:
                continue
            index = cursor.index
            if not descriptor.takes:
                if cursor.offset + 1 < len(token):
                    cursor.offset += 1
                else:
                    cursor.advance()
                self._match(descriptor, "", index)
            elif rest := token[cursor.offset + 1:]:
                cursor.advance()
                self._match(descriptor, rest, index)
            else:
                value, steps = self._next()
                cursor.advance(steps)
                self._match(descriptor, value, index)
            return True
        return False

    def _long(self, token):
        cursor = self.cursor
        for descriptor in self.registry.descriptors:
            if Kind.LONG not in descriptor.kind:
                continue
            name = descriptor.name
            if not token.startswith(name) or token[len(name):len(name) + 1] not in ("", "="):
                continue
            index = cursor.index
            inline = token[len(name) + 1:] if len(token) > len(name) else None
            if not descriptor.takes:
                cursor.advance()
                if inline is not None:
                    self.registry.report(IgnoredValueWarning(self.registry.messages["ignored"], subject=name, value=inline))
                self._match(descriptor, "", index)
            elif inline is not None:
                cursor.advance()
                self._match(descriptor, inline, index)
            else:
                value, steps = self._next()
                cursor.advance(steps)
                self._match(descriptor, value, index)
            return True
        return False

    def _command(self, token):
        cursor = self.cursor
        if self.command or self.positionals or cursor.index != 1:
            return False
        name, separator, inline = token.partition("=")
        for descriptor in self.registry.descriptors:
            if not descriptor.command or descriptor.name != name:
                continue
            self.command = True
            index = cursor.index
            if not descriptor.takes:
                cursor.advance()
                if separator:
                    self.registry.report(IgnoredValueWarning(self.registry.messages["ignored"], subject=name, value=inline))
                self._match(descriptor, "", index)
            elif separator:
                cursor.advance()
                self._match(descriptor, inline, index)
            else:
                value, steps = self._next()
                cursor.advance(steps)
                self._match(descriptor, value, index)
            return True
        return False

    def _positional(self, token):
        for descriptor in self.registry.descriptors:
            if not descriptor.positional or descriptor.position != self.positionals:
                continue
            self.positionals += 1
            index = self.cursor.index
            self.cursor.advance()
            self._match(descriptor, token, index)
            return True
        return False

    def _unmatched(self, token):
        index = self.cursor.index
        self.cursor.advance()
        self.registry.unmatched(MatchResult(token, False, False, index))

    def _match(self, descriptor, value, index):
        registry = self.registry
        descriptor.mark_found()
        descriptor.clear_error()

        if descriptor.mandatory and not value:
            descriptor.mark_error()
            registry.fail(MissingValueError(registry.messages["missing"], subject=descriptor.name))

        error = False
        if (message := validate(descriptor, value)) is not None:
            descriptor.mark_error()
            options = {"subject": descriptor.name, "value": value, "origin": Origin.SCAN}
            if registry.strict:
                registry.fail(RejectedValueError(message, **options))
            registry.report(RejectedValueWarning(message, **options))
            error = True

        descriptor(MatchResult(value, False, error, index))

    def _finalize(self):
        for descriptor in self.registry.descriptors:
            if descriptor.positional and descriptor.mandatory and not descriptor.found:
                self.registry.fail(MissingPositionalError(self.registry.messages["missing"], subject=descriptor.name))


__all__ = (
    "MatchResult",
    "ScanCursor",
    "Scanner",
)
