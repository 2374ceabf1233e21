"""
Bindery utilities shared by the descriptor, schema and parser layers.

- Unset: "not provided" sentinel, distinct from None (falsy, final, singleton).
- coalesce(value, default=None): replace Unset, keep every other value.
- rename(callable, name) / @rename(name): stable names for generated callables.
- mirror(name): read-only property over self._<name>; containers are copied
  on the way out so callers cannot reach internal state.
- pluralize(text): pluralize the last word of a diagnostic label.

    >>> coalesce(Unset, ",")
    ','
    >>> pluralize("unknown argument")
    'unknown arguments'
"""
import builtins
import functools
import re
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    Option metadata defaults to Unset wherever None could be a deliberate value
    (a default of None is not the same as no default at all). The type can join
    PEP 604 unions, so isinstance(value, str | Unset) works.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
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

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object, or default when object is Unset.

    None, 0, "" and other falsy values are returned unchanged.
    """
    return default if object is Unset else object


def _rename(callable, name):
    if not builtins.callable(callable):
        raise TypeError("rename() first argument must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    try:
        callable.__name__ = callable.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() cannot rename %r" % (callable,)) from None
    return callable


def rename(*parameters):
    """
    Rename a callable in place, or build a decorator doing so.

    - rename(callable, name) -> callable
    - rename(name)           -> decorator
    """
    if len(parameters) == 2:
        return _rename(*parameters)
    if len(parameters) != 1:
        raise TypeError("rename() takes 1 or 2 arguments but %d were given" % len(parameters))
    if not isinstance(name := parameters[0], str):
        raise TypeError("@rename() argument must be a string")
    return _rename(functools.partial(_rename, name=name), "rename")


def _freeze(object):
    # strings are sequences too; leave them alone
    if isinstance(object, str):
        return object
    if isinstance(object, Mapping):
        return {key: _freeze(value) for key, value in object.items()}
    if isinstance(object, Sequence):
        return tuple(_freeze(item) for item in object)
    if isinstance(object, Set):
        return frozenset(_freeze(item) for item in object)
    return object


def mirror(name, /):
    """
    Read-only property returning a frozen copy of self._<name>.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, /):
    """
    Pluralize the last word of text, keeping the rest and the word's casing.

    Only regular English endings are handled (+s, +es, y -> ies), which is all
    the fault titles need.
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")
    if not (match := re.search(r"(\S+)(\s*)$", text)):
        return text

    word = match.group(1)
    lower = word.lower()
    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and lower[-2:-1] not in ("", "a", "e", "i", "o", "u"):
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if word.isupper():
        plural = plural.upper()
    elif word[0].isupper():
        plural = plural[0].upper() + plural[1:]
    return text[:match.start(1)] + plural + match.group(2)


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
