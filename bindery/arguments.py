r"""
Bindery argument specifications.

Overview
- Option[_T]: a named, value-bearing field of a target type, reachable through a
  short name (-v) and/or a long name (--verbose).
- Verb[_T]: a named sub-command; selecting it materializes a nested object
  (through an explicit factory) whose own options become active.

Both are declared as class attributes of the target type and behave as
non-data descriptors: they learn their field name through __set_name__, read as
the field's empty value until the parser binds something, and are then shadowed
by the instance attribute.

    >>> class Options:
    ...     verbose = Option("-v", "--verbose", type=bool, descr="Set verbose mode.")
    ...     port = Option("-p", "--port", type=int, default=22)
    ...
    >>> Options().verbose, Options().port
    (False, None)

Metadata (sanitized on construction)
- Option
  • names: one short ("-x") and/or one long ("--name" or "-name") name.
  • type: bool, an Enum, a collection (list[T], tuple[T, ...], set[T]), or any
    callable taking the token.
  • required: bool.
  • default: any value; stored as the text a user would have typed (see
    coercion.textualize) and coerced like a value token when applied.
  • separator: single character splitting collection tokens (default ",").
  • descr: help text (non-empty when provided).
- Verb
  • name: shell-style word.
  • factory: callable returning a fresh nested instance.
  • descr: help text.

Public API
- Classes: Option, Verb
"""
import builtins
import functools
import operator
import re

from .coercion import textualize, validate
from .utils import *


class ArgumentType(type):
    """
    Metaclass giving specs stable representations and read-only fields.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      backed by the "_<name>" attribute (see mirror()).
    - Provide __repr__/__rich_repr__ built from __displayable__ (or
      __introspectable__ when unset).
    - Derive __typename__ from the class name ("Option" -> "option").
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


def _sanitize_descr(cls, metadata, /):
    """
    Internal: 'descr' must be Unset or a non-empty string; Unset becomes None.
    """
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_names(cls, metadata, /):
    r"""
    Internal: split option names into one short and one long name.

    Rules
    - each name is a string matching r"--?[^\W_](-?[^\W_]+)*" (unicode allowed).
    - a single character after the dashes is a short name, anything longer is a
      long name; one or two dashes are equivalent.
    - at most one short and one long name, and at least one of them.

    The dashes are stripped: metadata gains 'short' and 'long' (None when absent).
    """
    short = long = None
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")
    for name in metadata.pop("names"):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"--?[^\W_](-?[^\W_]+)*", name):
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names (unicodes are allowed)")
        stripped = name.lstrip("-")
        if len(stripped) == 1:
            if short is not None:
                raise ValueError(f"{cls.__typename__} cannot have more than one short name")
            short = stripped
        else:
            if long is not None:
                raise ValueError(f"{cls.__typename__} cannot have more than one long name")
            long = stripped
    metadata["short"] = short
    metadata["long"] = long


def _sanitize_value_metadata(cls, metadata, /):
    """
    Internal: validate type/required/separator and textualize the default.
    """
    try:
        validate(metadata["type"])
    except TypeError as exception:
        raise TypeError(f"{cls.__typename__} 'type' is not supported: {exception}") from None

    if not isinstance(metadata["required"], bool):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")

    if not isinstance(separator := metadata["separator"], str):
        raise TypeError(f"{cls.__typename__} 'separator' must be a string")
    elif len(separator) != 1 or separator.isspace():
        raise ValueError(f"{cls.__typename__} 'separator' must be a single visible character")

    # None behaves like "no default": there is no text a user could type for it.
    if (default := metadata["default"]) is None:
        default = Unset
    if default is not Unset:
        default = textualize(default, separator)
    metadata["default"] = default


class Option[_T](metaclass=ArgumentType):
    """
    Named, value-bearing field specification.

    Highlights
    - Generic over the payload type _T (declared via 'type').
    - bool options are presence-only: the flag alone binds True.
    - Defaults are held as text and go through the same coercion as user input,
      so a default that does not parse leaves the field untouched.

    Properties
    - short / long: names without dashes (None when absent).
    - type, required, default (text or None), separator, descr.
    - field / owner: attribute name and class, known once the option is
      assigned to a class attribute.
    """

    __introspectable__ = (
        "short",
        "long",
        "type",
        "required",
        "default",
        "separator",
        "descr",
        "field",
    )

    def __init__(
            self,
            *names,
            type=str,
            required=False,
            default=Unset,
            separator=",",
            descr=Unset,
    ):
        """
        Construct an Option spec.

        Parameters
        - names: "-x" and/or "--name" (also "-name").
        - type: semantic type of the field (default str).
        - required: the parse fails when no token nor default sets the field.
        - default: value applied when the option is absent from the tokens.
        - separator: element separator for collection types.
        - descr: help text for the usage screen.
        """
        metadata = {
            "names": names,
            "type": type,
            "required": required,
            "default": default,
            "separator": separator,
            "descr": descr,
        }
        _sanitize_descr(builtins.type(self), metadata)
        _sanitize_names(builtins.type(self), metadata)
        _sanitize_value_metadata(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))
        self._field = None
        self._owner = None

    def __set_name__(self, owner, name):
        if self._field is not None:
            raise TypeError(f"{type(self).__typename__} is already bound to {self._owner.__qualname__}.{self._field}")
        self._field = name
        self._owner = owner

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return self.empty

    @property
    def empty(self):
        """
        Value read from an instance whose field was never bound.
        """
        return False if self.type is bool else None

    @property
    def owner(self):
        return self._owner

    @property
    def flag(self):
        """
        True for presence-only (bool) options.
        """
        return self.type is bool

    @property
    def names(self):
        """
        Dashed names in display order: ("-v", "--verbose").
        """
        return tuple(prefix + name for prefix, name in (("-", self.short), ("--", self.long)) if name)

    @property
    def label(self):
        """
        Name used in diagnostics: the long name, else the short name.
        """
        return self.long or self.short

    @property
    def display(self):
        return self.names[-1]


class Verb[_T](metaclass=ArgumentType):
    """
    Named sub-command specification.

    A verb field reads as None until selected; selecting it calls the factory
    once (unless the root already holds an object) and the nested object's
    options are bound from the remaining tokens.
    """

    __introspectable__ = (
        "name",
        "factory",
        "descr",
        "field",
    )

    def __init__(self, name, factory, /, descr=Unset):
        """
        Construct a Verb spec.

        Parameters
        - name: verb word matched against the first token (exactly).
        - factory: callable returning a fresh nested object (a class works).
        - descr: help text listed with the valid verbs.
        """
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{type(self).__typename__} 'name' cannot be empty")
        elif not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", name):
            raise ValueError(f"{type(self).__typename__} 'name' must be a valid shell-style word")
        if not callable(factory):
            raise TypeError(f"{type(self).__typename__} 'factory' must be callable")

        metadata = {"descr": descr}
        _sanitize_descr(type(self), metadata)

        self._name = name
        self._factory = factory
        self._descr = metadata["descr"]
        self._field = None
        self._owner = None

    def __set_name__(self, owner, name):
        if self._field is not None:
            raise TypeError(f"{type(self).__typename__} is already bound to {self._owner.__qualname__}.{self._field}")
        self._field = name
        self._owner = owner

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return None

    @property
    def owner(self):
        return self._owner

    def materialize(self, instance, /):
        """
        Return the nested object held by instance, creating it when absent.
        """
        if (nested := getattr(instance, self.field)) is None:
            nested = self.factory()
            if nested is None:
                raise TypeError(f"{type(self).__typename__} {self.name!r} factory returned None")
            setattr(instance, self.field, nested)
        return nested


__all__ = (
    # Classes (specifications)
    "Option",
    "Verb",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
