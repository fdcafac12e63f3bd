r"""
Argosy name grammar: classifiers and the specifier parser.

Classifiers (pure predicates)
- is_short_option("-v")        → exactly "-" plus one ASCII letter or digit.
- is_long_option("--dry-run")  → "--" then an ASCII letter or digit, then letters, digits or "-".
- is_value_name("FILE")        → non-empty, no leading "-", printable, no whitespace,
                                 and none of the specifier characters (+ * ? !).
- is_param_name("SRC")         → same rules as value names.
- is_option_token(token)       → parse-time: does argv token look like an option?

Specifiers
Trailing characters on a value name (options) or on a param name change the
definition. They are stripped from the right, in any order, at most once each:

    +  *  ...   repeatable (option may be given many times / param takes many values)
    ?           optional value (options) / optional param (params)
    !           required option (options only)

The parsed result is a Spec flag set:

    >>> parse_specifiers("N!", "option")
    ('N', <Spec.REQUIRED: 1>)
    >>> parse_specifiers("+", "option")
    ('', <Spec.REPEATABLE: 2>)
    >>> parse_specifiers("SRC+", "param")
    ('SRC', <Spec.REPEATABLE: 2>)
"""
import re
from enum import IntFlag

from .faults import FaultCode, InvalidDefinitionError

_SHORT_OPTION = re.compile(r"-[^\W_]", re.ASCII)
_LONG_OPTION = re.compile(r"--[^\W_](?:[^\W_]|-)*", re.ASCII)

SPECIFIERS = frozenset("+*?!")


class Spec(IntFlag):
    """
    specifiers of one definition, as produced by parse_specifiers().

    - REQUIRED: the option must appear at least once.
    - REPEATABLE: the option may appear many times / the param takes many values.
    - OPTIONAL_VALUE: the option's value may be omitted.
    - OPTIONAL: the param may be omitted.
    """
    REQUIRED = 1
    REPEATABLE = 2
    OPTIONAL_VALUE = 4
    OPTIONAL = 8


def is_short_option(s):
    return isinstance(s, str) and _SHORT_OPTION.fullmatch(s) is not None


def is_long_option(s):
    return isinstance(s, str) and _LONG_OPTION.fullmatch(s) is not None


def is_value_name(s):
    return (
        isinstance(s, str)
        and len(s) > 0
        and s[0] != "-"
        and all(c.isprintable() and not c.isspace() and c not in SPECIFIERS for c in s)
    )


def is_param_name(s):
    return is_value_name(s)


def is_option_token(token):
    """
    Return True when an argv token must be treated as an option.

    "", "-" and anything not starting with "-" are positionals; everything
    else (including the "--" terminator) is option-like.
    """
    return bool(token) and token != "-" and token[0] == "-"


def _strip_marker(name):
    """
    Peel one specifier off the end of `name`.

    Returns (rest, flag, marker) or (name, None, None) when no marker is found.
    The "?" flag is reported as OPTIONAL_VALUE; callers translate it for params.
    """
    if name.endswith("..."):
        return name[:-3], Spec.REPEATABLE, "..."
    if name.endswith(("+", "*")):
        return name[:-1], Spec.REPEATABLE, name[-1]
    if name.endswith("?"):
        return name[:-1], Spec.OPTIONAL_VALUE, "?"
    if name.endswith("!"):
        return name[:-1], Spec.REQUIRED, "!"
    return name, None, None


def parse_specifiers(token, kind, /, expected="value name"):
    """
    Split a raw name token into its bare name and its Spec.

    Parameters
    - token: str
      The raw token, e.g. "LEVEL?!" or "SRC+".
    - kind: "option" | "param"
      Which definition the token belongs to; decides what "?" means and
      whether "!" is allowed.
    - expected: str
      Category named in error messages (e.g. "option value name").

    Returns
    - (name, spec): name is "" for a specifier-only option token such as "+".

    Raises
    - InvalidDefinitionError on an empty token, a repeated marker, "!" on a
      param, "?" on an option without a value name, or a name that fails its
      classifier.
    """
    if kind not in ("option", "param"):
        raise ValueError("parse_specifiers() kind must be 'option' or 'param'")
    if not isinstance(token, str):
        raise TypeError("parse_specifiers() token must be a string")
    if not token:
        raise InvalidDefinitionError(
            "empty %s" % expected,
            code=FaultCode.BAD_NAME,
            token=token,
            hint="names must not be empty; leave the value slot out for options without a value",
        )

    name = token
    spec = Spec(0)
    while True:
        name, flag, marker = _strip_marker(name)
        if flag is None:
            break
        if kind == "param":
            if flag is Spec.REQUIRED:
                raise InvalidDefinitionError(
                    "'%s' uses the required specifier '!' but params are required by default" % token,
                    code=FaultCode.BAD_SPECIFIER,
                    token=token,
                    hint="drop '!' or mark optional params with '?'",
                )
            if flag is Spec.OPTIONAL_VALUE:
                flag = Spec.OPTIONAL
        if flag in spec:
            raise InvalidDefinitionError(
                "duplicate specifier %r in '%s'" % (marker, token),
                code=FaultCode.DUPLICATE_SPECIFIER,
                token=token,
                hint="each specifier may appear at most once",
            )
        spec |= flag

    if not name:
        if kind == "param":
            raise InvalidDefinitionError(
                "'%s' is not a valid %s" % (token, expected),
                code=FaultCode.BAD_NAME,
                token=token,
                hint="params need a name, e.g. FILE or FILE+",
            )
        if Spec.OPTIONAL_VALUE in spec:
            raise InvalidDefinitionError(
                "'%s' marks an optional value but names no value" % token,
                code=FaultCode.BAD_SPECIFIER,
                token=token,
                hint="give the value a name, e.g. VALUE?",
            )
    elif not is_value_name(name):
        raise InvalidDefinitionError(
            "'%s' is not a valid %s" % (token, expected),
            code=FaultCode.BAD_NAME,
            token=token,
            hint="names must not start with '-' and must not contain spaces",
        )

    return name, spec


__all__ = (
    "Spec",
    "SPECIFIERS",
    "is_short_option",
    "is_long_option",
    "is_value_name",
    "is_param_name",
    "is_option_token",
    "parse_specifiers",
)
