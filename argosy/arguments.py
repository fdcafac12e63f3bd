r"""
Argosy argument definitions.

Overview
- Definitions (a tagged variant: every definition is exactly one of these)
  • Option: named flag introduced by "-x" and/or "--name", optionally value-bearing.
  • Param: positional parameter bound by order.

- Factory
  • arg(*names, descr): build an Option or a Param from 1-3 name-like strings
    followed by a description. Specifiers travel as trailing characters on the
    value name (options) or on the param name (params); see argosy.names.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ as read-only properties.

Construction shapes
    arg("-h", "show help")                       # short option
    arg("--dry-run", "do nothing")               # long option
    arg("FILE", "input file")                    # param
    arg("-v", "--verbose", "be chatty")          # short + long
    arg("-o", "PATH", "output path")             # short + value
    arg("--level", "N?", "log level")            # long + optional value
    arg("-p", "--port", "N!", "listen port")     # short + long + required value
    arg("-v", "+", "more verbose")               # repeatable option without value
    arg("SRC+", "sources")                       # repeatable param
    arg("DEST?", "destination")                  # optional param

Validation highlights
- Names are checked left to right; the first bad token raises
  InvalidDefinitionError naming the token and the category that was expected.
- Options need at least one of short/long; an optional value needs a value name.
- Definitions are immutable once built.
"""
import functools
import operator
import re

from rich.text import Text

from .faults import FaultCode, InvalidDefinitionError
from .names import *
from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns definitions into introspectable, read-only records.

    Responsibilities
    - Expose selected fields as read-only properties (mirror()) for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

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
            - option(short='-v', long='--verbose', valname=None, ...)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the description shared by every definition.

    - descr: str or rich Text; surrounding whitespace is trimmed. An empty
      description is allowed (the usage text simply shows none).
    """
    if not isinstance(descr := metadata["descr"], str | Text):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    if isinstance(descr, str):
        descr = descr.strip()
    metadata["descr"] = descr


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate the names and value name of an Option.

    Rules
    - short: Unset/None or a valid short option name ("-x").
    - long: Unset/None or a valid long option name ("--name").
    - at least one of short/long must be given.
    - valname: Unset/None/"" (no value) or a valid value name.
    - optional_value requires a valname.
    """
    for field, check, expected in (
            ("short", is_short_option, "short option name"),
            ("long", is_long_option, "long option name"),
            ("valname", is_value_name, "option value name"),
    ):
        value = coalesce(metadata[field])
        if value is not None and not isinstance(value, str):
            raise TypeError(f"{cls.__typename__} {field!r} must be a string")
        if field == "valname" and value == "":
            value = None
        if value is not None and not check(value):
            raise InvalidDefinitionError(
                "'%s' is not a valid %s" % (value, expected),
                code=FaultCode.BAD_NAME,
                token=value,
            )
        metadata[field] = value

    if metadata["short"] is None and metadata["long"] is None:
        raise InvalidDefinitionError(
            "option needs a short or a long name",
            code=FaultCode.BAD_NAME,
            hint="define it as '-x', '--name', or both",
        )
    if metadata["optional_value"] and metadata["valname"] is None:
        raise InvalidDefinitionError(
            "option '%s' has an optional value but no value name" % (metadata["long"] or metadata["short"]),
            code=FaultCode.BAD_SPECIFIER,
            token=metadata["long"] or metadata["short"],
        )


def _sanitize_param_metadata(cls, metadata, /):
    """
    Internal: validate the name of a Param (bare, specifiers already stripped).
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    if not is_param_name(name):
        raise InvalidDefinitionError(
            "'%s' is not a valid param name" % name,
            code=FaultCode.BAD_NAME,
            token=name,
        )


class Option(metaclass=ArgumentType):
    """
    Named option definition.

    An option has a short name ("-x"), a long name ("--name") or both, and may
    take a value (valname is set). Values are bound by the parser; the
    definition itself never changes.

    Flags
    - required: parsing fails unless the option appears at least once.
    - repeatable: the option may appear more than once; each occurrence adds a value.
    - optional_value: the value may be omitted ("--color" or "--color=always").
    """

    __introspectable__ = (
        "short",
        "long",
        "valname",
        "descr",
        "required",
        "repeatable",
        "optional_value",
    )

    def __new__(
            cls,
            short=Unset,
            long=Unset,
            valname=Unset,
            descr="",
            *,
            required=False,
            repeatable=False,
            optional_value=False,
    ):
        metadata = {
            "short": short,
            "long": long,
            "valname": valname,
            "descr": descr,
            "required": bool(required),
            "repeatable": bool(repeatable),
            "optional_value": bool(optional_value),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def names(self):
        """Defined names, short form first."""
        return tuple(name for name in (self.short, self.long) if name is not None)

    @property
    def label(self):
        """Identity used in messages: '-p/--port', '-p' or '--port'."""
        return "/".join(self.names)

    @property
    def takes_value(self):
        return self.valname is not None

    @property
    def spec(self):
        spec = Spec(0)
        if self.required:
            spec |= Spec.REQUIRED
        if self.repeatable:
            spec |= Spec.REPEATABLE
        if self.optional_value:
            spec |= Spec.OPTIONAL_VALUE
        return spec

    def __option__(self):
        """
        Introspection hook: identify this definition as an Option.
        """
        return self


class Param(metaclass=ArgumentType):
    """
    Positional parameter definition.

    Params are mandatory unless optional; a repeatable param takes one or more
    values (zero or more when it is also optional).
    """

    __introspectable__ = (
        "name",
        "descr",
        "optional",
        "repeatable",
    )

    def __new__(cls, name, descr="", *, optional=False, repeatable=False):
        metadata = {
            "name": name,
            "descr": descr,
            "optional": bool(optional),
            "repeatable": bool(repeatable),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_param_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def names(self):
        return (self.name,)

    @property
    def label(self):
        return self.name

    @property
    def spec(self):
        spec = Spec(0)
        if self.optional:
            spec |= Spec.OPTIONAL
        if self.repeatable:
            spec |= Spec.REPEATABLE
        return spec

    def __param__(self):
        """
        Introspection hook: identify this definition as a Param.
        """
        return self


def _option(short, long, token, descr, *, expected):
    """
    Internal: build an Option whose value slot is a raw (specifier-bearing) token.
    """
    valname, spec = parse_specifiers(token, "option", expected=expected)
    return Option(
        short,
        long,
        valname or None,
        descr,
        required=Spec.REQUIRED in spec,
        repeatable=Spec.REPEATABLE in spec,
        optional_value=Spec.OPTIONAL_VALUE in spec,
    )


def arg(*fields):
    """
    Build one definition from 1-3 names followed by a description.

    Shapes
    - arg(name, descr):
        short option, else long option, else param (param specifiers apply).
    - arg(short_or_long, long_or_value, descr):
        the second name is the long form (only after a short form) or a value
        name / specifier-only token.
    - arg(short, long, value, descr):
        all three in that order.

    Returns
    - Option | Param

    Raises
    - TypeError: wrong number of fields or a non-string field.
    - InvalidDefinitionError: the first invalid name token (left to right).
    """
    if not 2 <= len(fields) <= 4:
        raise TypeError("arg() takes 2 to 4 arguments but %d were given" % len(fields))
    *names, descr = fields
    for name in names:
        if not isinstance(name, str):
            raise TypeError("arg() names must be strings")

    match names:
        case [name]:
            if is_short_option(name):
                return Option(name, None, None, descr)
            if is_long_option(name):
                return Option(None, name, None, descr)
            name, spec = parse_specifiers(name, "param", expected="option or param name")
            return Param(
                name,
                descr,
                optional=Spec.OPTIONAL in spec,
                repeatable=Spec.REPEATABLE in spec,
            )

        case [first, second]:
            if is_short_option(first):
                if is_long_option(second):
                    return Option(first, second, None, descr)
                return _option(first, None, second, descr, expected="long option or option value name")
            if is_long_option(first):
                return _option(None, first, second, descr, expected="option value name")
            raise InvalidDefinitionError(
                "'%s' is not a valid short or long option name" % first,
                code=FaultCode.BAD_NAME,
                token=first,
            )

        case [short, long, value]:
            if not is_short_option(short):
                raise InvalidDefinitionError(
                    "'%s' is not a valid short option name" % short,
                    code=FaultCode.BAD_NAME,
                    token=short,
                )
            if not is_long_option(long):
                raise InvalidDefinitionError(
                    "'%s' is not a valid long option name" % long,
                    code=FaultCode.BAD_NAME,
                    token=long,
                )
            return _option(short, long, value, descr, expected="option value name")


__all__ = (
    "Option",
    "Param",
    "arg",
)

# Keep the metaclass out of star-imports; it is not part of the public API.
del ArgumentType
