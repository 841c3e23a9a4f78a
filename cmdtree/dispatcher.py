"""
Dispatcher: resolve a command in a tree, parse its options, and run it.

Flow of Dispatcher.call(root, tokens)
1. Resolution: while the current command has children and the leading token
   does not look like a flag, descend into the child it names and drop the
   token. A token naming no child raises UnknownSubcommandError.
2. Passthrough leaves skip option parsing; tokens are forwarded untouched.
3. Other leaves run their parser variant. Help raises HelpRequested with the
   leaf's synopsis; a bad flag raises the FlagParseError carrying diagnostic
   and synopsis; success finalizes the argument vector.
4. The leaf's callback runs with (command, args).

Tokens consumed by resolution are not given back when a later step fails.

Dispatcher.invoke() wraps call() for hosts: it renders help and faults with
rich and classifies the run as an Outcome. Exit codes are left to the host.
"""
import difflib
import logging
import shlex
import sys
from collections.abc import Iterable
from enum import Enum

from rich.console import Console

from . import faults
from .commands import Command
from .docs import DocRenderer
from .faults import CommandException, HelpRequested, UnknownSubcommandError, getdoc, trigger
from .utils import Unset, coalesce
from .vector import ArgumentVector

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """
    Classification of one invocation.
    """
    SUCCESS = "success"
    USAGE_ERROR = "usage-error"
    HELP = "help"


def _tokenize(prompt):
    """
    Normalize a prompt into a list of tokens.

    - Unset: the current process arguments (sys.argv[1:]).
    - str: shell-like string, split with shlex.
    - Iterable[str]: used as-is (every item must be a string).
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("invoke() argument must be a string or an iterable of strings")


class Dispatcher:
    """
    Explicit dispatching context, built once by the host and passed around.

    Parameters
    - program: str | Unset
      Program name used in synopses and fault headers (see DocRenderer).
    - fancy, colorful: bool
      Fault rendering style (panel chrome / colors) in invoke().
    - stdout, stderr: rich Console | Unset
      Where invoke() prints help and faults.
    """

    def __init__(self, program=Unset, *, fancy=False, colorful=False, stdout=Unset, stderr=Unset):
        self.renderer = DocRenderer(program)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)
        self.stdout = coalesce(stdout, Console())
        self.stderr = coalesce(stderr, faults.console)

    def __repr__(self):
        return "dispatcher(program=%r, fancy=%r, colorful=%r)" % (self.program, self.fancy, self.colorful)

    @property
    def program(self):
        return self.renderer.program

    def resolve(self, root, args, /):
        """
        Walk down from `root` following leading tokens; return the leaf.

        Consumed subcommand names are removed from `args`.
        """
        command = root
        while (children := command.children) and args.has_subcommand():
            name = args.first()
            try:
                command = children[name]
            except KeyError:
                route = " ".join(step.name for step in command.path)
                suggestions = difflib.get_close_matches(name, children.keys(), 1)
                if suggestions:
                    hint = "did you mean %r? you can also run '%s --help'" % (suggestions[0], route)
                else:
                    hint = "run '%s --help' to see available subcommands" % route
                raise UnknownSubcommandError(
                    "unknown subcommand %r" % name,
                    name=name,
                    suggestions=suggestions,
                    hint=hint,
                    docs=getdoc(UnknownSubcommandError.code),
                ) from None
            args.shift()
            logger.debug("resolved subcommand %r under %r", name, command.parent.name)
        return command

    def call(self, root, tokens, /):
        """
        Dispatch `tokens` against the tree rooted at `root`.

        Returns the finalized ArgumentVector after the callback ran. Raises
        HelpRequested, a FlagParseError subclass, or UnknownSubcommandError;
        faults raised by the callback itself propagate unchanged.
        """
        if not isinstance(root, Command):
            raise TypeError("call() first argument must be a command")
        args = tokens if isinstance(tokens, ArgumentVector) else ArgumentVector(tokens)

        command = self.resolve(root, args)

        if command.passthrough:
            logger.debug("forwarding %d token(s) to passthrough command %r", len(args), command.name)
        else:
            logger.debug("parsing %r with %r", command.name, command.parser)
            args.apply(command.parser.parse(args.tokens, synopsis=self.renderer.synopsis(command)))

        if not command.runnable:
            raise RuntimeError(f"command {command.name!r} has no callback and cannot run as a leaf")

        command.callback(command, args)
        return args

    def invoke(self, root, prompt=Unset, /):
        """
        Run call() and classify the result; help and faults are printed.
        """
        try:
            self.call(root, _tokenize(prompt))
        except HelpRequested as signal:
            trigger(signal, shell=True, stdout=self.stdout)
            outcome = Outcome.HELP
        except CommandException as fault:
            trigger(
                fault,
                shell=True,
                program=self.program,
                fancy=self.fancy,
                colorful=self.colorful,
                console=self.stderr,
            )
            outcome = Outcome.USAGE_ERROR
        else:
            outcome = Outcome.SUCCESS
        logger.debug("invocation of %r finished: %s", root.name, outcome.value)
        return outcome


def invoke(root, prompt=Unset, /, **options):
    """
    Convenience runner: build a Dispatcher from `options` and invoke `root`.
    """
    return Dispatcher(**options).invoke(root, prompt)


__all__ = (
    "Dispatcher",
    "Outcome",
    "invoke",
)
