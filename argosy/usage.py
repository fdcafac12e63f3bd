"""
Argosy usage formatter.

Layout (sections are separated by one blank line; empty ones are skipped)

    <preamble>

    Usage: <program> -p <N> [option]... <P1> [P2] <SRC>...

    <prologue>

    Options:
      -x, --long=<VAL>    description wrapped at width
          --only-long     ...
    Parameters:
      SRC...              ...

    <epilogue>

Label forms
- options: "-x", "-x, --long", "    --long"; a value shows as "=<VAL>" after a
  long name and " <VAL>" after a lone short name, bracketed when optional;
  repeatable options end with "...".
- params: "NAME", "[NAME]", "NAME...", "[NAME]...".

Palette keys
- usage-label, program-name, section-label, option-name, value-name,
  param-name, argument-description, preamble, prologue, epilogue

Define a mapping named __styles__ in __main__ to override any palette entry.
"""
import io
from collections import defaultdict, deque

from rich.console import Console, Group
from rich.containers import Lines
from rich.text import Text

_PALETTE = {
    "usage-label": "bold #00E6FF",  # cyan headline
    "program-name": "bold #FF4D94",  # magenta-pink program
    "section-label": "bold #FFFFFF",  # white block headers
    "option-name": "bold #00E6FF",  # cyan options
    "value-name": "bold #FFD600",  # amber value names
    "param-name": "bold #22C55E",  # green params
    "argument-description": "#9CA3AF",  # muted gray
    "preamble": "bold #E5E7EB",
    "prologue": "italic #A3A3A3",
    "epilogue": "#737373",  # dim footer
}


def render_usage(args, program, preamble=None, prologue=None, epilogue=None, *, width=80, colorful=True):
    """
    Build the usage screen of `args` as a rich renderable.

    Parameters
    - args: Args
    - program: str
      Program name shown on the usage line.
    - preamble, prologue, epilogue: str | Text | None
      Free text placed before the usage line, after it, and at the very end.
    - width: int
      Target line width; descriptions and free text wrap to it.
    - colorful: bool
      When False, every style (including those of Text fragments) is dropped.
    """
    if not isinstance(program, str):
        raise TypeError("usage() program must be a string")
    if not isinstance(width, int) or width < 20:
        raise ValueError("usage() width must be an integer of at least 20")

    console = Console(file=io.StringIO(), width=width, color_system=None)
    styles = defaultdict(str, _PALETTE | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if isinstance(fragment, Text):
            return fragment.copy() if colorful else Text(fragment.plain)
        return Text(str(fragment), style)

    def paragraph(fragment, style):
        return Text("\n").join(text(fragment, styler(style)).wrap(console, width))

    def option_label(option):
        label = Text()
        if option.short is not None:
            label.append(text(option.short, styler("option-name")))
            if option.long is not None:
                label.append(", ")
        else:
            label.append(" " * 4)
        if option.long is not None:
            label.append(text(option.long, styler("option-name")))
        if option.takes_value:
            value = Text.assemble("<", text(option.valname, styler("value-name")), ">")
            if option.optional_value:
                value = Text.assemble("[=" if option.long is not None else " [", value, "]")
            else:
                value = Text.assemble("=" if option.long is not None else " ", value)
            label.append(value)
        if option.repeatable:
            label.append("...")
        return label

    def param_label(param, *, brackets=False):
        label = text(param.name, styler("param-name"))
        if param.optional:
            label = Text.assemble("[", label, "]")
        elif brackets:
            label = Text.assemble("<", label, ">")
        if param.repeatable:
            label.append("...")
        return label

    renders = []

    if preamble:
        renders.append(paragraph(preamble, "preamble"))

    # Usage line: required options, then a placeholder for the rest, then params
    usage = Text()
    usage.append("Usage", styler("usage-label")).append(":")
    usage.append(" ")
    usage.append(text(program, styler("program-name")))
    usage.append(" ")
    offset = len(usage)

    inputs = deque()
    for option in filter(lambda x: x.required, args.options):
        item = text(option.names[0], styler("option-name"))
        if option.takes_value:
            item.append(" <").append(text(option.valname, styler("value-name"))).append(">")
        if option.repeatable:
            item.append("...")
        inputs.append(item)
    if any(not option.required for option in args.options):
        inputs.append(Text("[option]..."))
    for param in args.params:
        inputs.append(param_label(param, brackets=True))

    try:
        lines = Lines([inputs.popleft()])
    except IndexError:
        lines = Lines()
    while inputs:
        if len(lines[-1]) + 1 + len(item := inputs.popleft()) > width - offset:
            lines.append(item)
        else:
            lines[-1].append(Text(" ") + item)

    try:
        usage.append(lines.pop(0))
    except IndexError:
        usage.rstrip()
    for line in lines:
        usage.append("\n").append(" " * offset).append(line)
    renders.append(usage)

    if prologue:
        renders.append(paragraph(prologue, "prologue"))

    # Options / Parameters blocks share one label column
    blocks = [
        ("Options", [(option_label(option), option.descr) for option in args.options]),
        ("Parameters", [(param_label(param), param.descr) for param in args.params]),
    ]
    labels = [label for _, rows in blocks for label, _ in rows]
    padding = 2
    indent = padding + max(map(len, labels), default=0) + 2
    hanging = indent if width - indent >= 20 else padding * 4

    body = Text()
    for title, rows in blocks:
        if not rows:
            continue
        body.append(text(title, styler("section-label"))).append(":").append("\n")
        for label, descr in rows:
            section = Text(" " * padding) + label
            if descr := descr and text(descr, styler("argument-description")):
                if hanging != indent:
                    section.append("\n").append(" " * hanging)
                else:
                    section.append(" " * (indent - len(section)))
                wrapped = descr.wrap(console, width - hanging)
                try:
                    section.append(wrapped.pop(0))
                except IndexError:
                    pass
                for line in wrapped:
                    section.append("\n").append(" " * hanging).append(line)
            body.append(section).append("\n")
    if body:
        body.rstrip()
        renders.append(body)

    if epilogue:
        renders.append(paragraph(epilogue, "epilogue"))

    for render in renders[:-1]:
        render.append("\n")
    return Group(*renders)


def print_usage(args, program, preamble=None, prologue=None, epilogue=None, *, console=None, colorful=True):
    """
    Print the usage screen through `console` (a stdout rich Console by default),
    wrapped to the console width.
    """
    console = console or Console()
    console.print(render_usage(
        args, program, preamble, prologue, epilogue, width=max(console.width, 20), colorful=colorful
    ))


def format_usage(args, program, preamble=None, prologue=None, epilogue=None, *, width=80):
    """
    Return the usage screen as plain text (no styles, no trailing spaces).
    """
    buffer = io.StringIO()
    console = Console(file=buffer, width=width, color_system=None, highlight=False)
    console.print(render_usage(args, program, preamble, prologue, epilogue, width=width, colorful=False))
    return "\n".join(line.rstrip() for line in buffer.getvalue().splitlines())


__all__ = (
    "format_usage",
    "render_usage",
    "print_usage",
)
