"""
cmdtree command layer: build command trees for the dispatcher.

What this module provides
- Command: one node of a command tree, carrying
  • identity (explicit key, else the first word of its usage),
  • usage and long-description templates for the doc renderer,
  • its option declarations and the parser variant chosen for them,
  • an optional run callback (absent on pure grouping nodes),
  • named children, and a non-owning reference to its parent.

- command(...): create a Command or a decorator that produces one.

Quick start
    from cmdtree import command, Flag, Dispatcher

    @command(usage="tool <command> [<args>]")
    def tool(cmd, args): ...

    @tool.command(usage="clone [-v] <REPO>", long="Clone a repository.", options=[Flag("-v", "--verbose")])
    def clone(cmd, args):
        print(args.tokens, args.flag_passed("verbose"))

    Dispatcher(program="tool").invoke(tool, ["clone", "-v", "octocat/hello"])

Design notes
- The tree is built once and read-only afterwards; dispatching mutates only the
  argument vector of the current invocation.
- Children are owned by their parent's mapping; the parent is held through a
  weak reference so the tree has no ownership cycle.
"""
import functools
import operator
import re
import weakref

from .arguments import Option, Flag
from .docs import DocRenderer, usage_name
from .parsers import OptionParser
from .utils import *


class CommandType(type):
    """
    Metaclass giving commands a typename, read-only properties, and reprs.

    - __typename__ derives from the class name ("Command" → "command").
    - every name in __introspectable__ becomes a mirror() property.
    - __displayable__ narrows the fields shown by __repr__/__rich_repr__.
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Command(metaclass=CommandType):
    """
    A node of the command tree.

    Lifecycle
    - Constructed from an optional callback plus metadata; validated eagerly.
    - Attached under a parent either with parent=... or parent.use(child).
    - Read-only once dispatching starts.
    """

    __introspectable__ = (
        "key",
        "name",
        "usage",
        "long",
        "passthrough",
        "options",
        "children",
    )

    __displayable__ = (
        "name",
        "usage",
        "passthrough",
        "options",
        "children",
    )

    def __new__(
            cls,
            callback=Unset,
            /,
            key=Unset,
            usage=Unset,
            long=Unset,
            options=(),
            *,
            passthrough=False,
            parent=Unset
    ):
        """
        Construct a Command.

        Parameters
        - callback: Callable[[Command, ArgumentVector], Any] | Unset
          Run callback. Unset makes this a grouping node that must have children.
        - key: str | Unset
          Explicit identity; when Unset the first word of `usage` is used.
        - usage: str | Unset
          One usage form per line, without the program name (e.g., "clone [-p] <REPO>").
        - long: str | Unset
          Description: first line is the summary, the rest is the manual body.
        - options: Iterable[Option | Flag]
          Declarations; any declaration selects the full parser.
        - passthrough: bool
          Skip option parsing and forward every remaining token verbatim.
        - parent: Command | Unset
          Parent to attach to.

        Raises
        - TypeError/ValueError on invalid metadata, duplicate option names, a
          passthrough command with options, a missing name, or a name already
          used by a sibling.
        """
        if callback is not Unset and not callable(callback):
            raise TypeError(f"{cls.__typename__} 'callback' must be callable")
        if not isinstance(parent, Command | Unset):
            raise TypeError(f"{cls.__typename__} 'parent' must be a command")

        if not isinstance(key, str | Unset):
            raise TypeError(f"{cls.__typename__} 'key' must be a string")
        elif isinstance(key, str) and not (key := key.strip()):
            raise ValueError(f"{cls.__typename__} 'key' cannot be empty")

        for name, object in (("usage", usage), ("long", long)):
            if not isinstance(object, str | Unset):
                raise TypeError(f"{cls.__typename__} {name!r} must be a string")

        if isinstance(options, str) or not hasattr(options, "__iter__"):
            raise TypeError(f"{cls.__typename__} 'options' must be an iterable of options or flags")
        options = tuple(options)
        if not all(isinstance(option, Option | Flag) for option in options):
            raise TypeError(f"{cls.__typename__} 'options' must be an iterable of options or flags")

        if passthrough and options:
            raise ValueError(f"passthrough {cls.__typename__} cannot declare options")

        usage = coalesce(usage, "")
        if not (name := coalesce(key, "") or usage_name(usage)):
            raise ValueError(f"{cls.__typename__} must have a 'key' or a non-empty 'usage'")

        self = super().__new__(cls)
        self._callback = callback
        self._key = key
        self._name = name
        self._usage = usage
        self._long = coalesce(long, "")
        self._passthrough = bool(passthrough)
        self._options = options
        # Chosen once here; dispatch never inspects declarations again.
        self._parser = OptionParser.select(options)
        self._children = {}
        self._parent = None

        if parent:
            parent.use(self)
        return self

    @property
    def parent(self):
        """
        Parent command, or None for a root (or when the parent is gone).
        """
        return self._parent() if self._parent is not None else None

    @property
    def parser(self):
        return self._parser

    @property
    def callback(self):
        return coalesce(self._callback)

    @property
    def runnable(self):
        return self._callback is not Unset

    @property
    def root(self):
        """
        Topmost command of this command's tree.
        """
        child, parent = self, self.parent
        while parent:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Ancestry from root to this command, e.g. (tool, issue, label).
        """
        path = [command := self]
        while command.parent:
            path.append(command := command.parent)
        return tuple(reversed(path))

    def child(self, name, /):
        """
        Child registered under `name` (KeyError when absent).
        """
        return self._children[name]

    def use(self, child, /):
        """
        Attach `child` under this command, enforcing unique sibling names.

        Returns the child so calls can be chained or used as expressions.
        """
        if not isinstance(child, Command):
            raise TypeError(f"{type(self).__typename__} child must be a command")
        if child is self or child in self.path:
            raise ValueError(f"{type(self).__typename__} cannot be attached under itself")
        if child.parent is not None and child.parent is not self:
            raise ValueError(f"{type(self).__typename__} {child.name!r} is already attached elsewhere")

        if self._children.setdefault(child.name, child) is not child:
            typeof = "subcommand" if self.parent else "command"
            raise ValueError(f"{type(self).__typename__} {typeof} name {child.name!r} is already in use")

        child._parent = weakref.ref(self)
        return child

    def command(self, callback=Unset, /, *args, **kwargs):
        """
        Create a child command (direct or decorator form) attached to this one.
        """
        return command(callback, *args, parent=self, **kwargs)

    def synopsis(self, program=Unset, /):
        return DocRenderer(program).synopsis(self)

    def help_text(self, program=Unset, /):
        return DocRenderer(program).help_text(self)

    def usage_error(self, message="", /, program=Unset):
        """
        Build a UsageError for run callbacks: message, newline, synopsis.
        """
        return DocRenderer(program).usage_error(self, message)


def command(callback=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator that builds one.

    Invocation modes
    - Direct:     cmd = command(func, usage="x ...")
    - Decorator:  @command(usage="x ...")
                  def func(cmd, args): ...
    """
    @rename("command")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@command() must be applied to a callable")
        return Command(callback, *args, **kwargs)

    return wrapper(callback) if callback is not Unset else wrapper


__all__ = (
    "Command",
    "command",
)

# Remove the internal metaclass from the module namespace; not part of the public API.
del CommandType
