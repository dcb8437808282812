"""
Declargs faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every diagnostic the
  engine can report (errors and warnings).
- Severity / Origin: how a fault affects the scan and where a rejected value came from.
- ArgumentException / ArgumentWarning: base types that carry message + options and
  know how to render themselves on the diagnostic console.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

Severities
- WARNING: reported, scan continues, no flag set.
- ERROR: reported, the descriptor's error flag is set, scan continues.
- FATAL: reported (after usage in shell mode), the process exits with status 1.

Rendering
- Plain form mirrors the classic one-liner:
      prog: ERROR: Missing or invalid value for '--width'
      prog: ERROR: Not an integer '-T' (default)
- fancy=True wraps the message into a rich Panel titled with the fault code.
- colorful=True styles the parts (palette overridable via __styles__ in __main__).

Integration
- The registry builds faults during registration/scanning and calls
  trigger(fault, **context). In non-shell mode, exceptions are raised and warnings
  go through warnings.warn; in shell mode, they are printed via rich.
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import Enum, IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)

MESSAGES = MappingProxyType({
    "error": "ERROR",
    "warning": "WARNING",
    "missing": "Missing or invalid value for",
    "default": " (default)",
    "usage": "USAGE",
    "commands": "COMMANDS",
    "options": "OPTIONS",
    "arguments": "ARGUMENTS",
    "ignored": "Value ignored for",
    "defaults": "Invalid default values",
})


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    this enumeration follows the Seralix Fault Codes convention:
    - 11xxx are fatal errors, 12xxx are warnings and recoverable errors.
    - spacing leaves room for future additions without reshuffling existing codes.
    - normalize() allows host remapping to custom labels while keeping code-stability.

    grouping
    - values (1111x): MISSING_VALUE, REJECTED_VALUE
    - positionals (1112x): MISSING_POSITIONAL
    - defaults (1114x): INVALID_DEFAULTS
    - delegated (11131 / 12131): DELEGATED_ERROR, DELEGATED_WARNING
    - warnings (1211x): REJECTED_VALUE_WARNING, IGNORED_VALUE
    """
    # --- value errors (11xxx) ---
    MISSING_VALUE               = 11111
    REJECTED_VALUE              = 11112

    # --- positional errors (11xxx) ---
    MISSING_POSITIONAL          = 11121

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR             = 11131

    # --- default resolution errors (11xxx) ---
    INVALID_DEFAULTS            = 11141

    # --- warnings (12xxx) ---
    REJECTED_VALUE_WARNING      = 12111
    IGNORED_VALUE               = 12112
    DELEGATED_WARNING           = 12131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class Severity(IntEnum):
    WARNING = 1
    ERROR = 2
    FATAL = 3


class Origin(Enum):
    """
    where a rejected value came from: the argument vector or a default clause.
    """
    SCAN = "scan"
    DEFAULT = "default"


def _messages(fault, /):
    return dict(MESSAGES) | dict(fault.options.get("messages", {}))


def _parts(fault, messages, /):
    # (fragment, style) pairs of the one-line message body
    yield fault.message or messages["missing"], "message"
    if (subject := fault.options.get("subject", Unset)) is not Unset:
        yield " '", ""
        yield subject, "subject"
        yield "'", ""
    if fault.options.get("origin") is Origin.DEFAULT:
        yield messages["default"], "default"


def _describe(fault, /):
    return "".join(str(fragment) for fragment, _ in _parts(fault, _messages(fault)))


def _render(fault, palette, /):
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)
    messages = _messages(fault)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    title = messages["warning" if fault.severity is Severity.WARNING else "error"]
    prog = text(getattr(main, "__prog__", options.get("prog", "")), "prog-name")

    message = Text.assemble(*(text(fragment, style) for fragment, style in _parts(fault, messages)))

    if fancy:
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(fault.code.normalize(), "code"),
            " | ",
            text(title, "title"),
            " ]",
        )
        return Panel(Group(message), title=header, title_align="left")

    return Text.assemble(prog, ": ", text(title, "title"), ": ", message)


class ArgumentException(Exception):
    """
    base type of fatal faults.

    options commonly carried
    - subject: display name of the offending descriptor (or the offending token).
    - value: the rejected value, when there is one.
    - origin: Origin.SCAN or Origin.DEFAULT.
    - prog, messages, console, shell, fancy, colorful: rendering context.
    """
    code = FaultCode.DELEGATED_ERROR
    severity = Severity.FATAL

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return _describe(self)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "subject": "bold #E6E6F0",
            "default": "italic #9CE19C",  # gentle green marker
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingValueError(ArgumentException):
    code = FaultCode.MISSING_VALUE


class MissingPositionalError(ArgumentException):
    code = FaultCode.MISSING_POSITIONAL


class RejectedValueError(ArgumentException):
    code = FaultCode.REJECTED_VALUE


class DefaultValueError(ArgumentException):
    code = FaultCode.INVALID_DEFAULTS


class DelegatedError(ArgumentException): ...


class ArgumentWarning(ABC, Warning):
    """
    base type of non-fatal faults (Warning and Error severities).
    """
    code = FaultCode.DELEGATED_WARNING
    severity = Severity.WARNING

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return _describe(self)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title
            "message": "#D6D6DE",  # slightly lighter gray body
            "subject": "bold #E6E6F0",
            "default": "italic #B8EFAF",  # softer green marker
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RejectedValueWarning(ArgumentWarning):
    code = FaultCode.REJECTED_VALUE_WARNING
    severity = Severity.ERROR


class IgnoredValueWarning(ArgumentWarning):
    code = FaultCode.IGNORED_VALUE


class DelegatedWarning(ArgumentWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, exceptions
      are raised and warnings are emitted through warnings.warn.

    typical options
    - prog, messages, console, shell, fancy, colorful, subject, value, origin.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "MESSAGES",
    "FaultCode",
    "Severity",
    "Origin",
    "ArgumentException",
    "MissingValueError",
    "MissingPositionalError",
    "RejectedValueError",
    "DefaultValueError",
    "DelegatedError",
    "ArgumentWarning",
    "RejectedValueWarning",
    "IgnoredValueWarning",
    "DelegatedWarning",
    "trigger",
)
