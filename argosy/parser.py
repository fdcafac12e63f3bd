"""
Argosy parser engine: turn an argv vector into Bindings.

Token classes (checked in this order)
- positional: anything after "--", "", "-", or a token not starting with "-".
  Positionals are queued and distributed over the params at the end.
- terminator: exactly "--"; every later token is positional.
- option: "--name", "--name=value", "-x", "-xVALUE" or a short group "-abc".

Option values
- no value taken:  "-abc" is re-read as "-a -b -c"; "--flag=x" is an error.
                   Each occurrence binds "" (presence).
- optional value:  inline value, else the next token unless it looks like an
                   option, else "".
- required value:  inline value, else the next token unless it is missing or "--".

End of input
- every required option must have been seen.
- positionals are dealt to params in order: mandatory params first claim one
  token each, optional params get the surplus left to right, and a repeatable
  param soaks up what the params after it do not need.

The scan is a single pass with one token of lookahead; the only re-read is the
short-group split, which pushes the rest of the group back to the front.

Fault reporting
- default: errors are raised; an empty "--name=" value binds "" and warns
  through `warnings` (EmptyValueWarning).
- warn=False: the empty-value warning is not emitted at all.
- shell=True: faults go through trigger(..., shell=True); warnings print on
  the stderr console and errors print there and exit with status 1.
"""
import difflib
import os.path
import sys
from collections import deque
from collections.abc import Iterable

from .faults import *
from .names import is_option_token
from .utils import ordinal
from .values import Bindings


def _sanitized(argv):
    """
    Validate an argv-like iterable and return it as a list of strings.
    """
    if isinstance(argv, str) or not isinstance(argv, Iterable):
        raise TypeError("parse() argument must be an iterable of strings")
    tokens = list(argv)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parse() argument must be an iterable of strings")
    return tokens


def _split(token):
    """
    Split an option token into (name, value); value is None when absent.

    - long form: split at the first "=" ("--name=value" → ("--name", "value")).
    - short form: the first two characters are the name, the rest the value.
    """
    if token.startswith("--"):
        name, separator, value = token.partition("=")
        return name, (value if separator else None)
    return token[:2], (token[2:] or None)


def _suggest(args, name):
    """
    Hint with the closest known option names, or a generic pointer.
    """
    names = [name for option in args.options for name in option.names]
    suggestions = difflib.get_close_matches(name, names, 3)
    if suggestions:
        return "did you mean %r?" % suggestions[0], suggestions
    return "check the usage text for the available options", suggestions


def _distribute(args, positionals, prog):
    """
    Deal the queued positional (token, index) pairs over args.params.

    Returns one list of values per param, in registry order.
    """
    params = args.params
    bound = [[] for _ in params]
    mandatory = sum(1 for param in params if not param.optional)
    surplus = len(positionals) - mandatory

    for position, param in enumerate(params):
        if not param.optional:
            if not positionals:
                raise MissingParamError(
                    "param '%s' is required" % param.name,
                    code=FaultCode.MISSING_PARAM,
                    token=param.name,
                    argument=param,
                    prog=prog,
                    hint="add a value for '%s'" % param.name,
                )
        elif surplus > 0:
            surplus -= 1
        else:
            continue
        bound[position].append(positionals.popleft()[0])

        if param.repeatable:
            # later optional params keep their share of the surplus
            extra = surplus - sum(1 for later in params[position + 1:] if later.optional)
            for _ in range(max(extra, 0)):
                bound[position].append(positionals.popleft()[0])
                surplus -= 1

    if positionals:
        token, index = positionals[0]
        raise ExtraParamError(
            "extra param '%s' at %s position" % (token, ordinal(index)),
            code=FaultCode.EXTRA_PARAM,
            token=token,
            index=index,
            prog=prog,
            hint="remove the extra value or quote it if it belongs to another one",
        )
    return bound


def _scan(args, argv, *, warn, shell, colorful):
    """
    Internal: the single pass behind parse(); errors propagate as raised.
    """
    prog = os.path.basename(argv[0]) if argv else ""

    queue = deque((token, index) for index, token in enumerate(argv[1:], 1))
    positionals = deque()
    options = [[] for _ in args.options]
    terminated = False

    while queue:
        token, index = queue.popleft()

        if terminated or not is_option_token(token):
            positionals.append((token, index))
            continue

        if token == "--":
            terminated = True
            continue

        name, value = _split(token)
        inline = value is not None

        try:
            _, position = args.index(name)
        except UnknownArgumentError:
            hint, suggestions = _suggest(args, name)
            raise UnknownOptionError(
                "unrecognized option '%s' at %s position" % (name, ordinal(index)),
                code=FaultCode.UNKNOWN_OPTION,
                token=name,
                index=index,
                suggestions=suggestions,
                prog=prog,
                hint=hint,
            ) from None
        option = args.options[position]

        if not option.takes_value:
            if inline:
                if len(name) != 2:
                    raise ExtraValueError(
                        "option '%s' at %s position doesn't take values" % (name, ordinal(index)),
                        code=FaultCode.EXTRA_VALUE,
                        token=token,
                        index=index,
                        argument=option,
                        prog=prog,
                        hint="remove everything from '=' (for example: %s)" % name,
                    )
                # short group: "-abc" continues as "-bc"
                queue.appendleft(("-" + value, index))
            value = ""
        elif option.optional_value:
            if not inline:
                if queue and not is_option_token(queue[0][0]):
                    value = queue.popleft()[0]
                else:
                    value = ""
        elif not inline:
            if queue and queue[0][0] != "--":
                value = queue.popleft()[0]
            else:
                raise MissingValueError(
                    "option '%s' at %s position requires a value" % (name, ordinal(index)),
                    code=FaultCode.MISSING_VALUE,
                    token=name,
                    index=index,
                    argument=option,
                    prog=prog,
                    hint="pass it as %s%s<%s> or %s <%s>" % (
                        name, "=" if name.startswith("--") else "", option.valname, name, option.valname
                    ),
                )

        if options[position] and not option.repeatable:
            raise DuplicateOptionError(
                "duplicate option '%s' at %s position" % (name, ordinal(index)),
                code=FaultCode.DUPLICATE_OPTION_USE,
                token=name,
                index=index,
                argument=option,
                prog=prog,
                hint="keep a single '%s'; it can be given only once" % option.label,
            )

        if warn and inline and option.takes_value and not value:
            trigger(EmptyValueWarning(
                "empty inline value for option '%s' at %s position" % (name, ordinal(index)),
                code=FaultCode.EMPTY_VALUE,
                token=token,
                index=index,
                argument=option,
                prog=prog,
                hint="add a value after '=' (for example: %s=<%s>)" % (name, option.valname),
            ), shell=shell, colorful=colorful)

        options[position].append(value)

    for option, values in zip(args.options, options):
        if option.required and not values:
            raise MissingOptionError(
                "option '%s' is required" % option.label,
                code=FaultCode.MISSING_OPTION,
                token=option.label,
                argument=option,
                prog=prog,
                hint="add %s" % (
                    "%s <%s>" % (option.names[0], option.valname) if option.takes_value else option.names[0]
                ),
            )

    params = _distribute(args, positionals, prog)
    return Bindings(args, options, params)


def parse(args, argv=None, /, *, warn=True, shell=False, colorful=True):
    """
    Parse `argv` against the definitions of `args` and return Bindings.

    Parameters
    - args: Args
      The registry to parse against (not modified).
    - argv: Iterable[str] | None
      Argument vector; argv[0] is the program name and is skipped.
      None means sys.argv.
    - warn: bool
      When False, accepted-but-suspicious input (an empty "--name=" value)
      is bound silently instead of raising an EmptyValueWarning.
    - shell: bool
      When True, faults are reported the shell way: warnings are printed to
      stderr instead of going through `warnings`, and errors are printed
      before exiting with status 1.
    - colorful: bool
      Styling of shell-mode reports.

    Raises (shell=False)
    - UnknownOptionError, ExtraValueError, DuplicateOptionError, ExtraParamError
      (all InvalidArgumentError)
    - MissingValueError, MissingOptionError, MissingParamError
      (all MissingArgumentError)
    """
    argv = _sanitized(sys.argv if argv is None else argv)
    try:
        return _scan(args, argv, warn=warn, shell=shell, colorful=colorful)
    except ArgumentException as fault:
        if not shell:
            raise
        trigger(fault, shell=True, colorful=colorful)


__all__ = (
    "parse",
)
