"""
Argosy definition registry.

Args owns the ordered options and params of one program:

    args = Args(
        ("-a", "--addr", "IP", "address to bind"),
        ("-p", "--port", "N!", "port to listen on"),
        ("-h", "--help", "show this help"),
        ("FILE+", "files to serve"),
    )
    bindings = args.parse(sys.argv)
    port = bindings["--port"].value()

Invariants checked at add-time
- options: no two options share a short name, no two share a long name
  ("-x" vs "--x" is not a collision).
- params: unique names; at most one repeatable param; when strict (the
  default), no mandatory param after an optional one.

The registry is never mutated by parse(): each call returns fresh Bindings, so
one Args may be parsed any number of times.
"""
from collections.abc import Sequence

from .arguments import Option, Param, arg
from .faults import FaultCode, InvalidDefinitionError, UnknownArgumentError
from .parser import parse
from .usage import format_usage, render_usage, print_usage
from .utils import mirror


class Args:
    """
    Ordered registry of option and param definitions.

    Parameters
    - *definitions: Option | Param | tuple of arg() fields
    - strict: bool
      When True, a mandatory param may not follow an optional one. When False,
      optional params may sit anywhere and are filled left to right once every
      mandatory param has a value.
    """

    options = mirror("options")
    params = mirror("params")
    strict = mirror("strict")

    def __init__(self, *definitions, strict=True):
        self._options = []
        self._params = []
        self._names = {}
        self._strict = bool(strict)
        for definition in definitions:
            self.add(definition)

    def add(self, *fields):
        """
        Add one definition and return it.

        Accepts an Option/Param, any object providing __option__() or
        __param__() (the hook returns the definition to register), a sequence
        of arg() fields, or the arg() fields themselves:

            args.add(Option("-v", descr="verbose"))
            args.add(("-v", "--verbose", "verbose"))
            args.add("-v", "--verbose", "verbose")

        Raises InvalidDefinitionError on malformed or conflicting definitions.
        """
        if len(fields) == 1 and hasattr(type(fields[0]), "__option__"):
            definition = fields[0].__option__()
            if not isinstance(definition, Option):
                raise TypeError("__option__() must return an Option")
        elif len(fields) == 1 and hasattr(type(fields[0]), "__param__"):
            definition = fields[0].__param__()
            if not isinstance(definition, Param):
                raise TypeError("__param__() must return a Param")
        elif len(fields) == 1 and isinstance(fields[0], Sequence) and not isinstance(fields[0], str):
            definition = arg(*fields[0])
        else:
            definition = arg(*fields)

        if isinstance(definition, Option):
            self._add_option(definition)
        else:
            self._add_param(definition)
        return definition

    def _add_option(self, option):
        if option.short is not None and option.short in self._names:
            raise InvalidDefinitionError(
                "duplicate short option '%s'" % option.short,
                code=FaultCode.DUPLICATE_OPTION,
                token=option.short,
                argument=option,
            )
        if option.long is not None and option.long in self._names:
            raise InvalidDefinitionError(
                "duplicate long option '%s'" % option.long,
                code=FaultCode.DUPLICATE_OPTION,
                token=option.long,
                argument=option,
            )
        for name in option.names:
            self._names[name] = ("option", len(self._options))
        self._options.append(option)

    def _add_param(self, param):
        if param.name in self._names:
            raise InvalidDefinitionError(
                "duplicate param '%s'" % param.name,
                code=FaultCode.DUPLICATE_PARAM,
                token=param.name,
                argument=param,
            )
        if param.repeatable:
            for other in self._params:
                if other.repeatable:
                    raise InvalidDefinitionError(
                        "'%s' is a second multi-value param after '%s'" % (param.name, other.name),
                        code=FaultCode.MULTIPLE_REPEATABLE,
                        token=param.name,
                        argument=param,
                        hint="only one param may take multiple values",
                    )
        if self._strict and not param.optional:
            for other in self._params:
                if other.optional:
                    raise InvalidDefinitionError(
                        "non-optional '%s' after optional param '%s'" % (param.name, other.name),
                        code=FaultCode.PARAM_ORDER,
                        token=param.name,
                        argument=param,
                        hint="declare mandatory params first, or build Args(strict=False)",
                    )
        self._names[param.name] = ("param", len(self._params))
        self._params.append(param)

    def index(self, name, /):
        """
        Return (kind, position) of the definition named `name`.

        kind is "option" or "param"; position indexes self.options/self.params.
        """
        try:
            return self._names[name]
        except (KeyError, TypeError):
            raise UnknownArgumentError(
                "unrecognized option or param '%s'" % (name,),
                code=FaultCode.UNKNOWN_ARGUMENT,
                token=name,
            ) from None

    def lookup(self, name, /):
        """
        Return the Option (matched by short or long name) or Param named `name`.
        """
        kind, index = self.index(name)
        return self._options[index] if kind == "option" else self._params[index]

    def parse(self, argv=None, /, *, warn=True, shell=False, colorful=True):
        """
        Parse an argv-like sequence (argv[0] is the program name) into Bindings.

        None means sys.argv. `warn`, `shell` and `colorful` control how faults are
        reported; see argosy.parser for them and for the token rules.
        """
        return parse(self, argv, warn=warn, shell=shell, colorful=colorful)

    def usage(self, program, preamble=None, prologue=None, epilogue=None, *, width=80):
        """
        Return the plain-text usage screen; see argosy.usage.
        """
        return format_usage(self, program, preamble, prologue, epilogue, width=width)

    def render_usage(self, program, preamble=None, prologue=None, epilogue=None, *, width=80, colorful=True):
        """
        Return the usage screen as a rich renderable.
        """
        return render_usage(self, program, preamble, prologue, epilogue, width=width, colorful=colorful)

    def print_usage(self, program, preamble=None, prologue=None, epilogue=None, *, console=None, colorful=True):
        """
        Print the usage screen through a rich console (stdout by default).
        """
        print_usage(self, program, preamble, prologue, epilogue, console=console, colorful=colorful)

    def __contains__(self, name):
        return isinstance(name, str) and name in self._names

    def __iter__(self):
        yield from self._options
        yield from self._params

    def __len__(self):
        return len(self._options) + len(self._params)

    def __repr__(self):
        return "args(options=%r, params=%r, strict=%r)" % (self.options, self.params, self.strict)

    def __rich_repr__(self):
        yield "options", self.options
        yield "params", self.params
        yield "strict", self.strict


__all__ = (
    "Args",
)
