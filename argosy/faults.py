"""
Argosy faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain so hosts can branch on a kind without parsing text.
- ArgumentException / ArgumentWarning: base types that carry a message plus
  structured context (token, argument, hint) and know how to render themselves.
- trigger(): central entry point to surface a fault (raise, warn, or print and exit).

Taxonomy
- InvalidDefinitionError  → raised while building definitions or adding them to Args.
- InvalidArgumentError    → raised by parse() for bad input, and by lookups of unknown names.
- MissingArgumentError    → raised by parse() when something required never showed up.
- Out-of-range value access is a programming fault and raises the built-in IndexError.

Every concrete error subclasses one of the three families above, so a host can
catch broadly (except MissingArgumentError) or narrowly (except MissingParamError).

Integration
- The parser raises faults directly (fail-fast, no aggregation).
- A host that wants shell behavior calls parse(..., shell=True), or wraps parse() and
  calls trigger(fault, shell=True): the fault is printed to stderr through rich and,
  for errors, the process exits with status 1.
- The host may define __prog__, __codes__ and __styles__ in __main__ to customize
  the program name, code labels, and palette used in rendering.
"""
import inspect
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - definitions (110xx)
      • BAD_NAME, BAD_SPECIFIER, DUPLICATE_SPECIFIER, DUPLICATE_OPTION,
        DUPLICATE_PARAM, PARAM_ORDER, MULTIPLE_REPEATABLE
    - invalid input (111xx)
      • UNKNOWN_OPTION, EXTRA_VALUE, DUPLICATE_OPTION_USE, EXTRA_PARAM, UNKNOWN_ARGUMENT
    - missing input (112xx)
      • MISSING_OPTION, MISSING_VALUE, MISSING_PARAM
    - warnings (12xxx)
      • EMPTY_VALUE
    """
    # --- definition errors (110xx) ---
    BAD_NAME                = 11001
    BAD_SPECIFIER           = 11002
    DUPLICATE_SPECIFIER     = 11003
    DUPLICATE_OPTION        = 11004
    DUPLICATE_PARAM         = 11005
    PARAM_ORDER             = 11006
    MULTIPLE_REPEATABLE     = 11007

    # --- invalid input (111xx) ---
    UNKNOWN_OPTION          = 11101
    EXTRA_VALUE             = 11102
    DUPLICATE_OPTION_USE    = 11103
    EXTRA_PARAM             = 11104
    UNKNOWN_ARGUMENT        = 11105

    # --- missing input (112xx) ---
    MISSING_OPTION          = 11201
    MISSING_VALUE           = 11202
    MISSING_PARAM           = 11203

    # --- warnings (12xxx) ---
    EMPTY_VALUE             = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _renderer(fault, palette):
    """
    shared rich rendering for errors and warnings.

    layout
        [ prog — code | title ]
        message
         → hint
    """
    main = __import__("__main__")
    colorful = fault.options.get("colorful", True)
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), styles[style] if colorful else "")

    prog = getattr(main, "__prog__", fault.options.get("prog") or os.path.basename(sys.argv[0]))
    code = fault.code.normalize() if isinstance(fault.code, FaultCode) else "-"

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(code, "code"),
        " | ",
        text(fault.title, "title"),
        " ]"
    )
    renders = [header, text(fault.message, "message")]
    if fault.hint:
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(fault.hint, "hint")))
    return Group(*renders)


class ArgumentException(ValueError):
    """
    base type for every argosy error.

    carries
    - message: one-sentence, lowercased explanation (includes the offending token).
    - options: read-only mapping with structured context. well-known keys:
      code (FaultCode), token (str), argument (Option | Param), hint (str).

    str(exception) reads like "Invalid argument: option '-x' not defined."
    so it can be shown to an end user directly.
    """
    __title__ = "argument error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def token(self):
        return self.options.get("token")

    @property
    def argument(self):
        return self.options.get("argument")

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        if not self.message:
            return self.title.capitalize()
        return "%s: %s." % (self.title.capitalize(), self.message)

    def __rich__(self):
        return _renderer(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidDefinitionError(ArgumentException):
    __title__ = "invalid definition"


class InvalidArgumentError(ArgumentException):
    __title__ = "invalid argument"


class MissingArgumentError(ArgumentException):
    __title__ = "missing argument"


class UnknownOptionError(InvalidArgumentError): ...
class ExtraValueError(InvalidArgumentError): ...
class DuplicateOptionError(InvalidArgumentError): ...
class ExtraParamError(InvalidArgumentError): ...
class UnknownArgumentError(InvalidArgumentError): ...

class MissingOptionError(MissingArgumentError): ...
class MissingValueError(MissingArgumentError): ...
class MissingParamError(MissingArgumentError): ...


class ArgumentWarning(Warning):
    """
    base type for argosy warnings (parsing continues after these).
    """
    __title__ = "argument warning"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    title = ArgumentException.title
    code = ArgumentException.code
    token = ArgumentException.token
    argument = ArgumentException.argument
    hint = ArgumentException.hint

    def __str__(self):
        return self.message

    def __rich__(self):
        return _renderer(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyValueWarning(ArgumentWarning):
    __title__ = "empty value"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.

    typical options
    - shell: when True, render via the stderr rich console (errors then exit with 1);
      when False (default), raise errors and emit warnings through `warnings`.
    - colorful: when False, render without styles.
    - prog: program name shown in the header (overridden by __main__.__prog__).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "ArgumentException",
    "InvalidDefinitionError",
    "InvalidArgumentError",
    "MissingArgumentError",
    "UnknownOptionError",
    "ExtraValueError",
    "DuplicateOptionError",
    "ExtraParamError",
    "UnknownArgumentError",
    "MissingOptionError",
    "MissingValueError",
    "MissingParamError",
    "ArgumentWarning",
    "EmptyValueWarning",
    "trigger",
)
