"""
The argument vector of one invocation.

An ArgumentVector is created once per invocation from the raw tokens, consumed
from the front by subcommand resolution, finalized with the option parser's
result, handed to the run callback, and then discarded. It is never shared
between invocations.

Fields
- tokens: unconsumed tokens (positionals once the parser has run).
- flags: dest → value for every declared option (defaults included).
- passed: dests the user actually supplied.
- terminated: a literal "--" was recognized as end of options. Callbacks that
  forward tokens to an external program use it to decide whether to put "--"
  back in front of the forwarded positionals.
"""
from collections.abc import Iterable, Sequence

from .utils import Unset, coalesce


class ArgumentVector(Sequence):

    def __init__(self, tokens=(), /):
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("argument vector tokens must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("argument vector tokens must be an iterable of strings")
        self.tokens = tokens
        self.flags = {}
        self.passed = set()
        self.terminated = False

    def __getitem__(self, index):
        return self.tokens[index]

    def __len__(self):
        return len(self.tokens)

    def __repr__(self):
        return "argument-vector(tokens=%r, flags=%r, passed=%r, terminated=%r)" % (
            self.tokens, self.flags, sorted(self.passed), self.terminated
        )

    def first(self, default=None, /):
        """
        Leading token, or `default` when the vector is empty.
        """
        return self.tokens[0] if self.tokens else default

    def shift(self):
        """
        Remove and return the leading token.
        """
        if not self.tokens:
            raise IndexError("shift from an empty argument vector")
        return self.tokens.pop(0)

    def has_subcommand(self):
        """
        True when a leading token is present and does not look like a flag.

        An empty token still counts; resolution reports it as unknown.
        """
        return bool(self.tokens) and not self.tokens[0].startswith("-")

    def flag_passed(self, name, /):
        """
        True iff the user explicitly supplied the flag, even with its default value.
        """
        return name.lstrip("-") in self.passed

    def value(self, name, default=Unset, /):
        """
        Parsed value of a flag; `default` (or None) when it is not declared.
        """
        try:
            return self.flags[name.lstrip("-")]
        except KeyError:
            return coalesce(default)

    def apply(self, parsed, /):
        """
        Finalize the vector with a parser result (see parsers.Parsed).
        """
        self.tokens = list(parsed.positionals)
        self.flags.update(parsed.values)
        self.passed.update(parsed.passed)
        self.terminated = self.terminated or parsed.terminated
        return self


__all__ = (
    "ArgumentVector",
)
