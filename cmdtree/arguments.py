r"""
cmdtree option declarations.

Overview
- Option[_T]: named, value-bearing option with one or more aliases (e.g., -n/--count).
- Flag: named, boolean presence switch (e.g., -v/--verbose).

Declarations are plain, immutable metadata consumed by the full option parser;
they never run code of their own. A command declaring at least one of them is
parsed with the full grammar, otherwise with the minimal help-only parser.

Metadata (sanitized on construction)
- names: one or more aliases, either a short "-x" (one character) or a long
  "--name" / "--long-name"; unicode letters are allowed, duplicates rejected.
- dest: key under which the parsed value is stored in the argument vector.
  Defaults to the first long name without dashes (else the short name).
- default: value used when the user does not pass the flag.
- descr: optional short description.
- Option only
  • type: converter applied to each raw value (ValueError/TypeError → invalid value).
  • metavar: label for the value in diagnostics/help.
  • multiple: collect every occurrence into a list instead of keeping the last.

Quick example:
    >>> from cmdtree.arguments import Option, Flag
    >>> Option("-n", "--count", type=int, default=1).dest
    'count'
    >>> Flag("-v", "--verbose").default
    False
"""
import functools
import operator
import re
from collections.abc import Iterable

from rich.text import Text

from .utils import *

_LONG = r"--[^\W\d_](-?[^\W_]+)*"
_SHORT = r"-[^\W_]"

_TRUE = frozenset({"1", "t", "true", "y", "yes", "on"})
_FALSE = frozenset({"0", "f", "false", "n", "no", "off"})


class ArgumentType(type):
    """
    Metaclass giving declarations a typename, read-only properties, and reprs.

    - __typename__ is derived from the class name (camel-case split with hyphens).
    - every name in __introspectable__ becomes a mirror() property over "_{name}".
    - __repr__/__rich_repr__ list the introspectable fields.
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
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate names, derive dest, and normalize descr.

    Raises
    - TypeError: no names, non-string names/dest/descr.
    - ValueError: empty or malformed names, duplicates, empty dest/descr.
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(_LONG, name) and not re.fullmatch(_SHORT, name):
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names ('-x' or '--name')")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)

    if not isinstance(dest := metadata["dest"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'dest' must be a string")
    elif isinstance(dest, str) and not (dest := dest.strip()):
        raise ValueError(f"{cls.__typename__} 'dest' cannot be empty")

    # First long name wins; a short-only declaration is keyed by its letter.
    longs = [name for name in names if name.startswith("--")]
    metadata["dest"] = coalesce(dest, (longs or names)[0].lstrip("-"))

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Option[_T](metaclass=ArgumentType):
    """
    Named, value-bearing option declaration.

    The parser accepts "--name value", "--name=value", "-x value", "-xvalue"
    and "-x=value". Each raw value is converted with `type`; conversion errors
    surface as invalid-value faults quoting the raw value.
    """

    __introspectable__ = (
        "names",
        "dest",
        "type",
        "default",
        "metavar",
        "descr",
        "multiple",
    )

    def __new__(
            cls,
            *names,
            dest=Unset,
            type=str,
            default=None,
            metavar=Unset,
            descr=Unset,
            multiple=False
    ):
        metadata = {
            "names": names,
            "dest": dest,
            "type": type,
            "default": default,
            "metavar": metavar,
            "descr": descr,
            "multiple": bool(multiple),
        }
        _sanitize_metadata(cls, metadata)

        if not callable(metadata["type"]):
            raise TypeError(f"{cls.__typename__} 'type' must be callable")

        if not isinstance(metavar := metadata["metavar"], str | Unset):
            raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
        elif isinstance(metavar, str) and not (metavar := metavar.strip()):
            raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
        metadata["metavar"] = coalesce(metavar, metadata["dest"].upper())

        if metadata["multiple"]:
            if metadata["default"] is None:
                metadata["default"] = []
            elif not isinstance(metadata["default"], Iterable) or isinstance(metadata["default"], str):
                raise TypeError(f"multiple {cls.__typename__} 'default' must be a non-string iterable")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def label(self):
        """
        Aliases as written in diagnostics, e.g. "-n, --count".
        """
        return ", ".join(self._names)

    def convert(self, value, /):
        return self._type(value)

    def initial(self):
        """
        Fresh default value (lists are copied for multiple options).
        """
        return list(self._default) if self._multiple else self._default


class Flag(metaclass=ArgumentType):
    """
    Named, boolean presence declaration.

    "--name" sets the flag to True; "--name=false" (or any usual boolean
    spelling) sets it explicitly. Short flags can be clustered ("-abc").
    """

    __introspectable__ = (
        "names",
        "dest",
        "default",
        "descr",
    )

    def __new__(cls, *names, dest=Unset, default=False, descr=Unset):
        metadata = {
            "names": names,
            "dest": dest,
            "default": bool(default),
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def label(self):
        return ", ".join(self._names)

    def convert(self, value, /):
        if (lowered := value.strip().lower()) in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError("invalid boolean value")

    def initial(self):
        return self._default


__all__ = (
    "Option",
    "Flag",
)

# Remove the internal metaclass from the module namespace; not part of the public API.
del ArgumentType
