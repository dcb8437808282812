r"""
Declargs registry: declaration, scanning and diagnostics for one CLI surface.

Overview
- Registry
  • define(config, handler): parse a definition, count it, resolve and check its default.
  • @option(definition, validator, *arguments): decorator form of define().
  • @fallback: catch-all handler for tokens no descriptor matched.
  • scan(argv, count): match argv[1:count] and run the handlers; returns the index of
    the first argument not consumed.
  • From inside handlers: stop(), usage(status), error(message, subject),
    warning(message, subject).

- invoke(registry, prompt): scan a prompt given as Unset (sys.argv), a shell-like
  string, or an iterable of tokens.

A registry is meant to be built fresh for every invocation and scanned once.

Quick example:
    >>> from declargs import Registry, positive
    >>> cli = Registry("demo tool")
    >>> @cli.option("-v, --verbose\t\tIncrease verbosity")
    ... def verbose(match): ...
    >>> @cli.option("-x, --xrays n ($XRAYS,32)\tNumber of rays", positive)
    ... def xrays(match): ...
    >>> @cli.option("input\t\tInput file")
    ... def source(match): ...
    >>> cli.scan(["demo", "-v", "-x", "12", "data.txt"])
    5
"""
import os
import shlex
import sys
from collections.abc import Iterable, Mapping, Sequence

from .defaults import resolve, check
from .definitions import Kind, OptionConfig, parse
from .descriptors import DescriptorType, Descriptor
from .faults import (
    MESSAGES,
    console as stderr,
    Origin,
    DefaultValueError,
    DelegatedError,
    DelegatedWarning,
    RejectedValueWarning,
    trigger,
)
from .scanner import MatchResult, Scanner
from .usage import render
from .utils import *


class Registry(metaclass=DescriptorType, sealed=True):
    """
    Ordered collection of descriptors plus the settings of one scan.

    Parameters
    - header: Unset | str, first line of the usage text.
    - prog: Unset | str, program name (defaults to the basename of argv[0]).
    - messages: Mapping[str, str], overrides of the message templates (see faults.MESSAGES).
    - shell: bool, print faults and exit(1) on fatal ones (True), or raise/warn (False).
    - fancy: bool, render faults inside panels.
    - colorful: bool, style usage and faults.
    - strict: bool, make validator rejections fatal (True) or recoverable (False).
    - console: rich Console receiving all diagnostics (defaults to stderr).
    - environ: Mapping[str, str] used for $VAR defaults (defaults to os.environ).

    Host overrides (read from __main__)
    - __prog__, __messages__, __styles__, __codes__.
    """
    __introspectable__ = (
        "descriptors",
        "header",
        "shell",
        "fancy",
        "colorful",
        "strict",
        "failures",
    )
    __displayable__ = (
        "prog",
        "header",
        "descriptors",
    )

    def __init__(
            self,
            header=Unset,
            /,
            *,
            prog=Unset,
            messages=Unset,
            shell=True,
            fancy=False,
            colorful=False,
            strict=True,
            console=Unset,
            environ=Unset,
    ):
        if not isinstance(header, str | Unset):
            raise TypeError("registry 'header' must be a string")
        if not isinstance(prog, str | Unset):
            raise TypeError("registry 'prog' must be a string")
        if not isinstance(messages, Mapping | Unset):
            raise TypeError("registry 'messages' must be a mapping")
        if not isinstance(environ, Mapping | Unset):
            raise TypeError("registry 'environ' must be a mapping")
        if unknown := set(coalesce(messages, {})) - set(MESSAGES):
            raise ValueError(f"registry 'messages' has unknown templates: {", ".join(sorted(unknown))}")

        self._header = coalesce(header)
        self._prog = coalesce(prog)
        self._messages = (
            dict(MESSAGES) |
            dict(getattr(__import__("__main__"), "__messages__", {})) |
            dict(coalesce(messages, {}))
        )
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._strict = bool(strict)
        self._console = coalesce(console, stderr)
        self._environ = coalesce(environ, os.environ)
        self._descriptors = []
        self._fallback = None
        self._scanner = None
        self._failures = 0

    # --- counters ---

    @property
    def options(self):
        return sum(descriptor.flag for descriptor in self._descriptors)

    @property
    def commands(self):
        return sum(descriptor.command for descriptor in self._descriptors)

    @property
    def positionals(self):
        return sum(descriptor.positional for descriptor in self._descriptors)

    @property
    def prog(self):
        if self._prog is not None:
            name = self._prog
        else:
            name = basename(sys.argv[0]) if sys.argv else ""
        return getattr(__import__("__main__"), "__prog__", name)

    messages = mirror("messages")

    # --- declaration ---

    def define(self, config, /, handler=None):
        """
        Register one descriptor.

        Parameters
        - config: OptionConfig, or a bare definition string.
        - handler: Callable[[MatchResult], Any] called on every match.

        Behavior
        - The default clause (if any) is resolved and checked right away. A usable
          default is handed to the handler as MatchResult(default, default=True).
          A rejected one is reported and makes the next scan() abort.

        Raises
        - RuntimeError: when the registry was already scanned.
        - ValueError: for an empty definition or one declaring nothing.
        """
        if self._scanner is not None:
            raise RuntimeError("registry already scanned; build a fresh Registry per invocation")
        if isinstance(config, str):
            config = OptionConfig(config)
        if not isinstance(config, OptionConfig):
            raise TypeError("define() argument must be an OptionConfig or a definition string")
        if not isinstance(config.definition, str):
            raise TypeError("definition must be a string")
        if not config.definition.strip():
            raise ValueError("empty definition; use fallback() to catch unmatched tokens")

        definition = parse(config.definition)
        descriptor = Descriptor(
            definition,
            config.validator,
            config.arguments,
            handler,
            position=self.positionals if Kind.POSITIONAL in definition.kind else None,
        )
        self._descriptors.append(descriptor)

        if definition.clause is None:
            return descriptor

        descriptor.assign(resolve(definition.clause, self._environ))
        if (message := check(descriptor)) is not None:
            descriptor.mark_error()
            self._failures += 1
            self.report(RejectedValueWarning(
                message,
                subject=descriptor.name,
                value=descriptor.default,
                origin=Origin.DEFAULT,
            ))
        else:
            descriptor(MatchResult(descriptor.default, True, False, 0))
        return descriptor

    def option(self, definition, validator=None, /, *arguments):
        """
        Decorator form of define().

        Example
            @registry.option("-w, --width cols\tAssume screen width COLS", unsigned)
            def width(match): ...
        """
        config = OptionConfig(definition, validator, arguments)

        @rename("option")
        def decorator(handler):
            if not callable(handler):
                raise TypeError("@option() must be applied to a callable")
            return self.define(config, handler)

        return decorator

    def fallback(self, fallback, /):
        """
        Register the catch-all handler for unmatched tokens.

        Rules
        - Must be callable.
        - Can be set only once per registry.
        """
        if not callable(fallback):
            raise TypeError("registry fallback must be callable")
        if self._fallback is not None:
            raise TypeError("registry fallback cannot be overridden")
        self._fallback = fallback
        return fallback

    def unmatched(self, result, /):
        if self._fallback is not None:
            self._fallback(result)

    # --- scanning ---

    def scan(self, argv=Unset, count=Unset, /):
        """
        Match argv[1:count] against the registered descriptors.

        Returns
        - The index of the first argument not consumed (count unless a handler stopped the scan).

        Raises
        - RuntimeError: when called twice on the same registry.
        - In non-shell mode, the fatal ArgumentException subclasses.
        """
        if self._scanner is not None:
            raise RuntimeError("registry already scanned; build a fresh Registry per invocation")
        argv = coalesce(argv, sys.argv)
        if isinstance(argv, str) or not isinstance(argv, Sequence):
            raise TypeError("scan() argument must be a sequence of strings")
        count = coalesce(count, len(argv))
        if not isinstance(count, int) or not 0 <= count <= len(argv):
            raise ValueError("scan() count must be between 0 and len(argv)")

        if self._prog is None and argv:
            self._prog = basename(argv[0])
        self._scanner = Scanner(self, argv, count)

        if self._failures:
            self.fail(DefaultValueError(self._messages["defaults"]))
        return self._scanner.run()

    def stop(self):
        """
        End the scan after the current handler; the mandatory check is skipped.
        """
        if self._scanner is None:
            raise RuntimeError("stop() called outside of a scan")
        self._scanner.stop()

    def usage(self, status=None, /):
        """
        Print the usage text on the diagnostic console, then exit with status if given.
        """
        self._console.print(
            render(self._descriptors, self.prog, header=self._header, messages=self._messages, colorful=self._colorful),
            soft_wrap=True,
        )
        if status is not None:
            sys.exit(status)

    def error(self, message, /, subject=Unset):
        self.fail(DelegatedError(message, **({} if subject is Unset else {"subject": subject})))

    def warning(self, message, /, subject=Unset):
        self.report(DelegatedWarning(message, **({} if subject is Unset else {"subject": subject})))

    # --- diagnostics ---

    def _context(self):
        return {
            "prog": self.prog,
            "messages": self._messages,
            "console": self._console,
            "shell": self._shell,
            "fancy": self._fancy,
            "colorful": self._colorful,
        }

    def fail(self, fault, /, **options):
        """
        Surface a fatal fault: usage first in shell mode, then the fault itself.
        """
        if self._shell:
            self.usage()
        trigger(fault, **self._context() | options)

    def report(self, fault, /, **options):
        trigger(fault, **self._context() | options)


def invoke(registry, prompt=Unset, /):
    """
    Scan a registry with a prompt.

    prompt
    - Unset: sys.argv.
    - str: shell-style string, split via shlex.split.
    - Iterable[str]: pre-tokenized arguments.

    Returns
    - registry.scan(...) result, counted over the program name plus the tokens.
    """
    if not isinstance(registry, Registry):
        raise TypeError("invoke() first argument must be a Registry")
    if prompt is Unset:
        return registry.scan(sys.argv)
    program = sys.argv[0] if sys.argv else registry.prog
    if isinstance(prompt, str):
        return registry.scan([program, *shlex.split(prompt)])
    if isinstance(prompt, Iterable):
        tokens = [program]
        for item in prompt:
            if not isinstance(item, str):
                raise TypeError("invoke() argument must be a string or an iterable of strings")
            tokens.append(item)
        return registry.scan(tokens)
    raise TypeError("invoke() argument must be a string or an iterable of strings")


__all__ = (
    "Registry",
    "invoke",
)
