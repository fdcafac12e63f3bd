"""
Argosy parse results.

- ArgVal: read-only view over the values bound to one definition.
- Bindings: what Args.parse() returns; a side-table of value lists indexed like
  the registry, so the registry itself never changes while parsing.

Presence-only options (flags) bind an empty string per occurrence, so
`count()` tells how many times a flag was given:

    >>> bindings = Args(arg("-v", "+", "verbose")).parse(["prog", "-vvv"])
    >>> bindings["-v"].count()
    3
"""
from rich.text import Text

from .faults import FaultCode, UnknownArgumentError


class ArgVal:
    """
    Values bound to one option or param, in command-line order.

    Accessors
    - count() / len(): number of bound values.
    - is_present() / bool(): at least one value was bound.
    - value(n=0): the n-th value; IndexError when it does not exist.
    - value_or(default): first value, or default when nothing was bound.
    - values(): all values as a tuple.
    """
    __slots__ = ("_argument", "_values")

    def __init__(self, argument, values=()):
        self._argument = argument
        self._values = tuple(values)

    @property
    def argument(self):
        return self._argument

    def count(self):
        return len(self._values)

    def empty(self):
        return not self._values

    def is_present(self):
        return bool(self._values)

    def value(self, n=0, /):
        if not isinstance(n, int):
            raise TypeError("value() index must be an integer")
        if not 0 <= n < len(self._values):
            raise IndexError("%s %r has no value at index %d (%d bound)" % (
                type(self._argument).__typename__, self._argument.label, n, len(self._values)
            ))
        return self._values[n]

    def value_or(self, default, /):
        return self._values[0] if self._values else default

    def values(self):
        return self._values

    def __len__(self):
        return len(self._values)

    def __bool__(self):
        return bool(self._values)

    def __iter__(self):
        return iter(self._values)

    def __eq__(self, other):
        if not isinstance(other, ArgVal):
            return NotImplemented
        return self._argument is other._argument and self._values == other._values

    __hash__ = None

    def __repr__(self):
        return "argval(%s=%r)" % (self._argument.label, self._values)

    def __rich_repr__(self):
        yield "argument", self._argument.label
        yield "values", self._values

    def __rich__(self):
        return Text.assemble((self._argument.label, "bold"), " = ", repr(list(self._values)))


class Bindings:
    """
    Immutable result of one Args.parse() call.

    Values are stored per definition, at the same index the definition has in
    the registry; lookups resolve names through the registry. The definitions
    known at parse time are captured, so later additions to the registry are
    unknown to these bindings.
    """
    __slots__ = ("_args", "_definitions", "_options", "_params")

    def __init__(self, args, options, params):
        self._args = args
        self._definitions = {"option": args.options, "param": args.params}
        self._options = tuple(map(tuple, options))
        self._params = tuple(map(tuple, params))
        if len(self._options) != len(args.options) or len(self._params) != len(args.params):
            raise ValueError("bindings do not match the registry layout")

    @property
    def args(self):
        return self._args

    def lookup(self, name, /):
        """
        Return the ArgVal of the option (short or long name) or param named `name`.

        Raises UnknownArgumentError when no definition matches.
        """
        kind, index = self._args.index(name)
        definitions = self._definitions[kind]
        if index >= len(definitions):
            raise UnknownArgumentError(
                "%s '%s' was added after these bindings were parsed" % (kind, name),
                code=FaultCode.UNKNOWN_ARGUMENT,
                token=name,
                hint="parse again to bind it",
            )
        values = self._options if kind == "option" else self._params
        return ArgVal(definitions[index], values[index])

    __getitem__ = lookup

    def __contains__(self, name):
        try:
            self.lookup(name)
        except UnknownArgumentError:
            return False
        return True

    def __iter__(self):
        """
        Yield (definition, ArgVal) pairs: options first, then params.
        """
        for option, values in zip(self._definitions["option"], self._options):
            yield option, ArgVal(option, values)
        for param, values in zip(self._definitions["param"], self._params):
            yield param, ArgVal(param, values)

    def __len__(self):
        return len(self._options) + len(self._params)

    def __repr__(self):
        return "bindings(%s)" % ", ".join(repr(argval) for _, argval in self)

    def __rich_repr__(self):
        for definition, argval in self:
            yield definition.label, argval.values()


__all__ = (
    "ArgVal",
    "Bindings",
)
