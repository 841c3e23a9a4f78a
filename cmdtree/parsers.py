"""
Option parsers: the two strategies a command can be parsed with.

OptionParser is a closed sum type with two variants, picked once per command
when the command is constructed (see OptionParser.select):

- MinimalParser: the command declares no options. Only "-h"/"--help" are
  recognized; every other token, flag-shaped or not, is handed back untouched.
  Grouping commands and commands that forward their tokens to an external
  program rely on this: a real grammar would reject tokens meant for someone
  else.

- FullParser: the command declares options. Interspersed parsing over long
  ("--name", "--name=value", "--name value") and short ("-x", "-xVALUE",
  "-x=VALUE", "-x VALUE", clustered "-abc") forms.

Both variants
- stop option recognition at the first literal "--", drop it from the
  positionals and report it as `terminated`;
- raise HelpRequested (carrying the synopsis they were given) when a help
  token is seen before the terminator;
- are stateless: parse() returns a new Parsed tuple and never touches the
  command or the argument vector.
"""
import copy
import difflib
from collections import deque, namedtuple

from .arguments import Option, Flag
from .faults import (
    FlagParseError,
    HelpRequested,
    InvalidValueError,
    OptionValueRequiredError,
    UnknownSwitchError,
    getdoc,
)
from .utils import rename

TERMINATOR = "--"
HELP_TOKENS = frozenset({"-h", "--help"})

Parsed = namedtuple("Parsed", ("positionals", "values", "passed", "terminated"))
Parsed.__doc__ = """
Result of a successful parse.

- positionals: tuple of tokens left after removing flags (and the terminator).
- values: dest → value for every declaration (defaults for unset ones).
- passed: frozenset of dests the user supplied explicitly.
- terminated: whether a "--" ended option recognition.
"""


class OptionParser:
    """
    Base of the parser variants; not instantiated directly.
    """

    @staticmethod
    def select(options, /):
        """
        Pick the variant for a command's declarations.
        """
        return FullParser(options) if options else MinimalParser()

    def parse(self, tokens, /, synopsis=""):
        raise NotImplementedError


class MinimalParser(OptionParser):

    def __repr__(self):
        return "minimal-parser()"

    def parse(self, tokens, /, synopsis=""):
        positionals = []
        terminated = False
        helped = False

        for token in tokens:
            if terminated:
                positionals.append(token)
            elif token == TERMINATOR:
                terminated = True
            elif token in HELP_TOKENS:
                helped = True
            else:
                positionals.append(token)

        if helped:
            raise HelpRequested(synopsis)

        return Parsed(tuple(positionals), {}, frozenset(), terminated)


class FullParser(OptionParser):
    """
    Full grammar over a fixed set of Option/Flag declarations.

    Diagnostics use the classic getopt-style wording:
    - unknown flag: --name
    - unknown shorthand flag: 'x' in -xyz
    - flag needs an argument: --name / 'x' in -x
    - invalid argument "value" for "-x, --name" flag: reason
    """

    def __init__(self, options, /):
        self._options = tuple(options)
        self._long = {}
        self._short = {}

        if not self._options:
            raise ValueError("full parser requires at least one declaration")

        for option in self._options:
            if not isinstance(option, Option | Flag):
                raise TypeError("full parser declarations must be options or flags")
            for name in option.names:
                registry = self._long if name.startswith("--") else self._short
                if registry.setdefault(name.lstrip("-"), option) is not option:
                    raise ValueError(f"option name {name!r} is already in use")

        dests = [option.dest for option in self._options]
        if len(set(dests)) != len(dests):
            raise ValueError("option destinations cannot contain duplicates")

    def __repr__(self):
        return "full-parser(options=%r)" % (self._options,)

    @property
    def options(self):
        return self._options

    def _helps(self, token):
        """
        True when `token` asks for help and no declaration claims it.
        """
        if token == "--help":
            return "help" not in self._long
        if token == "-h":
            return "h" not in self._short
        return False

    def parse(self, tokens, /, synopsis=""):
        values = {option.dest: option.initial() for option in self._options}
        passed = set()
        positionals = []
        terminated = False
        fault = None
        tokens = deque(tokens)

        def store(option, value):
            """
            Convert and record one raw value for `option`.
            """
            try:
                converted = option.convert(value)
            except (ValueError, TypeError) as exception:
                raise InvalidValueError(
                    'invalid argument "%s" for "%s" flag: %s' % (value, option.label, exception),
                    hint="check the value passed to %s" % option.label,
                    docs=getdoc(InvalidValueError.code),
                ) from None
            if isinstance(option, Option) and option.multiple:
                values[option.dest].append(converted)
            else:
                values[option.dest] = converted
            passed.add(option.dest)

        def parse_long(token):
            name, equals, value = token[2:].partition("=")
            if name == "help" and self._helps("--help"):
                raise HelpRequested(synopsis)
            try:
                option = self._long[name]
            except KeyError:
                suggestions = difflib.get_close_matches(name, self._long.keys(), 1)
                raise UnknownSwitchError(
                    "unknown flag: --%s" % name,
                    hint="did you mean '--%s'?" % suggestions[0] if suggestions else "",
                    docs=getdoc(UnknownSwitchError.code),
                ) from None
            if equals:
                store(option, value)
            elif isinstance(option, Flag):
                values[option.dest] = True
                passed.add(option.dest)
            elif tokens:
                store(option, tokens.popleft())
            else:
                raise OptionValueRequiredError(
                    "flag needs an argument: --%s" % name,
                    hint="pass a value, e.g. --%s=<%s>" % (name, option.metavar),
                    docs=getdoc(OptionValueRequiredError.code),
                )

        def parse_short(token):
            shorthands = token[1:]
            while shorthands:
                letter, shorthands = shorthands[0], shorthands[1:]
                if letter == "h" and self._helps("-h"):
                    raise HelpRequested(synopsis)
                try:
                    option = self._short[letter]
                except KeyError:
                    raise UnknownSwitchError(
                        "unknown shorthand flag: '%s' in %s" % (letter, token),
                        docs=getdoc(UnknownSwitchError.code),
                    ) from None
                if shorthands.startswith("="):
                    store(option, shorthands[1:])
                    return
                if isinstance(option, Flag):
                    values[option.dest] = True
                    passed.add(option.dest)
                elif shorthands:
                    store(option, shorthands)
                    return
                elif tokens:
                    store(option, tokens.popleft())
                else:
                    raise OptionValueRequiredError(
                        "flag needs an argument: '%s' in %s" % (letter, token),
                        hint="pass a value after %s" % token,
                        docs=getdoc(OptionValueRequiredError.code),
                    )

        while tokens:
            token = tokens.popleft()

            if terminated:
                positionals.append(token)
            elif token == TERMINATOR:
                terminated = True
            elif fault is not None:
                # help still wins over an earlier failure; arity is unknown past it
                if self._helps(token):
                    raise HelpRequested(synopsis)
            elif token == "-" or not token.startswith("-"):
                positionals.append(token)
            else:
                try:
                    if token.startswith("--"):
                        parse_long(token)
                    else:
                        parse_short(token)
                except FlagParseError as exception:
                    fault = exception

        if fault is not None:
            raise copy.replace(fault, synopsis=synopsis)

        return Parsed(tuple(positionals), values, frozenset(passed), terminated)


# The variant set is closed: seal the base once both variants exist.
@rename("__init_subclass__")
def __init_subclass__(cls, **options):
    raise TypeError(f"type {OptionParser.__name__!r} is not an acceptable base type")


OptionParser.__init_subclass__ = classmethod(__init_subclass__)
del __init_subclass__


__all__ = (
    "OptionParser",
    "MinimalParser",
    "FullParser",
    "Parsed",
    "TERMINATOR",
    "HELP_TOKENS",
)
