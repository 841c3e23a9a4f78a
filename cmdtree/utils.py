"""
cmdtree helpers shared by declarations, commands and renderers.

- Unset: "not provided" marker for constructor keywords (Command key/usage,
  Option dest/metavar, DocRenderer program, Dispatcher consoles).
- coalesce(): resolves Unset to the fallback chosen by the constructor.
- rename(): names the wrappers generated by metaclasses and factories.
- mirror(): read-only public view of a "_field" (Command.children, Option.names).
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker; falsy, final, one instance per process.

    `str | Unset` works in isinstance checks through __or__/__ror__.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    `default` when `object` is Unset, else `object` (None and "" are kept).
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) sets __name__/__qualname__; rename(name) is the
    decorator form used for generated __repr__, __rich_repr__ and factories.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("@rename() argument must be a string")
        return rename(lambda callable: rename(callable, name), "rename")

    if len(parameters) != 2:
        raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))

    callable, name = parameters
    if not builtins.callable(callable):
        raise TypeError("rename() first argument must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() second argument must be a string")
    try:
        callable.__qualname__ = callable.__name__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() first argument must be a updatable callable") from None
    return callable


def _detach(object):
    # containers come back as fresh list/dict/set; Unset reads as None
    if isinstance(object, Sequence) and not isinstance(object, str):
        return [_detach(item) for item in object]
    if isinstance(object, Mapping):
        return {key: _detach(value) for key, value in object.items()}
    if isinstance(object, Set):
        return {_detach(item) for item in object}
    return coalesce(object)


def mirror(name, /):
    """
    Property returning a detached copy of "_{name}"; no setter.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
