"""
Declargs usage/help rendering.

Layout (sections only appear when non-empty, descriptors in declaration order):

    <header>
    USAGE: prog COMMANDS OPTIONS input [output]

    COMMANDS:
      <add> item	Add a single item

    OPTIONS:
      -v, --verbose	Increase verbosity

    ARGUMENTS:
      input	Input file
      [output]	Output file
"""
from collections import defaultdict

from rich.text import Text

from .faults import MESSAGES

STYLES = {
    "header": "bold #E6E6F0",
    "usage": "bold #00E5FF",
    "prog-name": "bold #E6E6F0",
    "section": "bold #FF4DA6",
    "definition": "#C8C8D0",
}


def synopsis(descriptor, /):
    """
    Positional name as shown on the USAGE line ("name" or "[name]").
    """
    return descriptor.name if descriptor.mandatory else "[%s]" % descriptor.name


def render(descriptors, /, prog, *, header=None, messages=MESSAGES, colorful=False):
    """
    Build the help text for an ordered collection of descriptors.

    Returns
    - rich.text.Text (never interpreted as markup).
    """
    main = __import__("__main__")
    styles = defaultdict(str, STYLES | getattr(main, "__styles__", {}))

    def text(fragment, style):
        return Text(fragment, styles[style] if colorful else "")

    commands = [descriptor for descriptor in descriptors if descriptor.command]
    options = [descriptor for descriptor in descriptors if descriptor.flag]
    arguments = [descriptor for descriptor in descriptors if descriptor.positional]

    lines = []
    if header:
        lines.append(text(header, "header"))

    usage = [text(messages["usage"], "usage"), ": ", text(prog, "prog-name")]
    if commands:
        usage.append(" " + messages["commands"])
    if options:
        usage.append(" " + messages["options"])
    usage.extend(" " + synopsis(descriptor) for descriptor in arguments)
    lines.append(Text.assemble(*usage))

    for title, group in (
        (messages["commands"], commands),
        (messages["options"], options),
        (messages["arguments"], arguments),
    ):
        if not group:
            continue
        lines.append(Text(""))
        lines.append(Text.assemble(text(title, "section"), ":"))
        lines.extend(Text.assemble("  ", text(descriptor.text, "definition")) for descriptor in group)

    return Text("\n").join(lines)


__all__ = (
    "STYLES",
    "synopsis",
    "render",
)
