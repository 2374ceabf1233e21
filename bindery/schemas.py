"""
Bindery schemas and the schema registry.

A Schema is the ordered, read-only list of option specs (or verb specs) a target
type declares. It is derived once per type by a SchemaRegistry and reused by
every parse against that type.

Derivation
- Walk the type's MRO from the most basic class down, collecting Option and
  Verb class attributes in declaration order; a name redefined by a subclass
  keeps its first position but uses the subclass spec.
- A type must declare at least one option or verb, and must not mix both.
- Option names must be unique under exact comparison; verbs must have unique
  names. Names that only collide once case-folded are recorded in
  Schema.collisions and rejected by parsers using folded comparison.

Thread-safety
- SchemaRegistry.get() follows construct-once-publish-read: the cache is read
  without locking, and first-time construction for any type happens under a
  lock so every thread observes the same Schema object.
"""
import builtins
import threading
from types import MappingProxyType

from .arguments import Option, Verb
from .settings import Comparison
from .utils import *


class Schema:
    """
    Read-only description of the bindable fields of one type.

    Properties
    - type: the described class.
    - options: tuple of Option specs in declaration order.
    - verbs: tuple of Verb specs in declaration order.
    - collisions: tuple of names colliding only under folded comparison.
    """

    def __init__(self, type, /):
        if not isinstance(type, builtins.type):
            raise TypeError("schema argument must be a type")

        specs = {}
        for base in reversed(type.__mro__):
            for name, object in vars(base).items():
                if isinstance(object, Option | Verb):
                    specs[name] = object
                elif name in specs:
                    # shadowed by a plain attribute in a subclass
                    del specs[name]

        options = tuple(spec for spec in specs.values() if isinstance(spec, Option))
        verbs = tuple(spec for spec in specs.values() if isinstance(spec, Verb))

        if not options and not verbs:
            raise TypeError(f"type {type.__qualname__!r} declares no bindable options or verbs")
        if options and verbs:
            raise TypeError(f"type {type.__qualname__!r} cannot mix options and verbs at the same level")

        indexes = {comparison: {} for comparison in Comparison}
        collisions = []
        for option in options:
            for name in filter(None, (option.short, option.long)):
                if indexes[Comparison.EXACT].setdefault(name, option) is not option:
                    raise ValueError(f"type {type.__qualname__!r} declares option name {name!r} more than once")
                key = Comparison.FOLDED.normalize(name)
                if indexes[Comparison.FOLDED].setdefault(key, option) is not option and name not in collisions:
                    collisions.append(name)

        names = {}
        for verb in verbs:
            if names.setdefault(verb.name, verb) is not verb:
                raise ValueError(f"type {type.__qualname__!r} declares verb {verb.name!r} more than once")

        self._type = type
        self._options = options
        self._verbs = verbs
        self._collisions = tuple(collisions)
        self._indexes = MappingProxyType({
            comparison: MappingProxyType(index) for comparison, index in indexes.items()
        })
        self._names = MappingProxyType(names)

    type = mirror("type")
    options = mirror("options")
    verbs = mirror("verbs")
    collisions = mirror("collisions")

    def lookup(self, name, comparison, /):
        """
        Resolve a stripped flag name to its Option under comparison.

        Returns None when no option carries that name.
        """
        if not isinstance(comparison, Comparison):
            raise TypeError("lookup() second argument must be a comparison")
        return self._indexes[comparison].get(comparison.normalize(name))

    def verb(self, name, /):
        """
        Resolve a verb by its exact name; None when unknown.
        """
        return self._names.get(name)

    def __iter__(self):
        yield from self._verbs or self._options

    def __len__(self):
        return len(self._verbs or self._options)

    def __repr__(self):
        return "schema(type=%s, %s=%r)" % (
            self._type.__qualname__,
            "verbs" if self._verbs else "options",
            tuple(spec.field for spec in self),
        )


class SchemaRegistry:
    """
    Cache of schemas keyed by type identity.

    Construct one per hosting application and pass it to every ArgumentParser;
    parsers sharing a registry share derived schemas.
    """

    def __init__(self):
        self._schemas = {}
        self._lock = threading.Lock()

    def get(self, object, /):
        """
        Return the Schema of a type (or of an instance's type), deriving it once.

        Raises TypeError when the type declares nothing bindable.
        """
        type = object if isinstance(object, builtins.type) else builtins.type(object)
        try:
            return self._schemas[type]
        except KeyError:
            pass
        with self._lock:
            try:
                return self._schemas[type]
            except KeyError:
                schema = self._schemas[type] = Schema(type)
                return schema

    def __contains__(self, object):
        return object in self._schemas

    def __len__(self):
        return len(self._schemas)

    def clear(self):
        with self._lock:
            self._schemas.clear()


__all__ = (
    "Schema",
    "SchemaRegistry",
)
