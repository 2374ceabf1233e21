"""
Bindery type coercion engine.

Converts one value token (or one delimited group of elements) into the
semantic type declared by an option.

Rules, by priority
1. Enum targets: the token names a member (compared with the given Comparison),
   or is a decimal integer naming a member by value. Anything else raises
   InvalidEnumValueError: enum mismatches fail the parse.
2. Collection targets (list[T], tuple[T, ...], set[T], frozenset[T], or a bare
   list/tuple/set/frozenset meaning str elements): the token is split on the
   option separator and every element is parsed with rule 3. Elements that do
   not parse are dropped, so "1,2,x,3" -> [1, 2, 3] for list[int].
3. Primitive targets: locale-invariant parse. On failure coerce() returns Unset
   and the field keeps its current value.

Any other callable type is called with the token; ValueError/TypeError count as
a failed parse.
"""
import builtins
import datetime
import decimal
import enum
import re
import typing
from types import GenericAlias

from .faults import FaultCode, InvalidEnumValueError, getdoc
from .settings import Comparison
from .utils import *

_COLLECTIONS = (list, tuple, set, frozenset)

_INTEGER = re.compile(r"\s*[+-]?\d+\s*")
_FLOAT = re.compile(r"\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*|\s*[+-]?(inf|infinity|nan)\s*", re.IGNORECASE)


def _parse_bool(token):
    match token.strip().lower():
        case "true" | "1":
            return True
        case "false" | "0":
            return False
    return Unset


def _parse_int(token):
    if not _INTEGER.fullmatch(token):
        return Unset
    try:
        return int(token)
    except ValueError:
        # beyond sys.get_int_max_str_digits()
        return Unset


def _parse_float(token):
    return float(token) if _FLOAT.fullmatch(token) else Unset


def _parse_decimal(token):
    if not _FLOAT.fullmatch(token):
        return Unset
    return decimal.Decimal(token.strip())


def _parse_iso(type):
    def parser(token):
        try:
            return type.fromisoformat(token.strip())
        except ValueError:
            return Unset
    return rename(parser, "_parse_" + type.__name__)


# Invariant parsers for the basic types; everything else goes through the type itself.
_PARSERS = {
    str: lambda token: token,
    bool: _parse_bool,
    int: _parse_int,
    float: _parse_float,
    decimal.Decimal: _parse_decimal,
    datetime.datetime: _parse_iso(datetime.datetime),
    datetime.date: _parse_iso(datetime.date),
    datetime.time: _parse_iso(datetime.time),
}


def is_enum(type, /):
    return isinstance(type, builtins.type) and issubclass(type, enum.Enum)


def collection(type, /):
    """
    Decompose a collection annotation into (container, element type).

    Returns None when the type is not a collection.

    Examples
    - list[int]        -> (list, int)
    - tuple[str, ...]  -> (tuple, str)
    - list             -> (list, str)
    """
    if type in _COLLECTIONS:
        return type, str
    origin = typing.get_origin(type)
    if origin not in _COLLECTIONS:
        return None
    arguments = [argument for argument in typing.get_args(type) if argument is not Ellipsis]
    if origin is tuple and len(set(arguments)) > 1:
        raise TypeError("tuple options must be homogeneous (tuple[T, ...])")
    return origin, (arguments[0] if arguments else str)


def validate(type, /):
    """
    Check that a declared option type is something the engine can coerce into.

    Raises TypeError otherwise. Returns the type unchanged.
    """
    if (pair := collection(type)) is not None:
        element = pair[1]
        if collection(element) is not None:
            raise TypeError("nested collection types are not supported")
        if not callable(element):
            raise TypeError("collection element type must be callable")
        return type
    if isinstance(type, GenericAlias) or typing.get_origin(type) is not None:
        raise TypeError("unsupported generic type %r" % (type,))
    if not callable(type):
        raise TypeError("option type must be callable")
    return type


def parse(type, token, /):
    """
    Rule 3: invariant parse of a single token into a primitive type.

    Returns Unset when the token does not parse.
    """
    if (parser := _PARSERS.get(type)) is not None:
        return parser(token)
    try:
        return type(token)
    except (ValueError, TypeError, ArithmeticError):
        return Unset


def member(type, token, comparison, /):
    """
    Look an enum member up by name (under comparison) or by integer value.

    Returns Unset when nothing matches.
    """
    if not isinstance(comparison, Comparison):
        raise TypeError("member() third argument must be a comparison")
    for name, object in type.__members__.items():
        if comparison.equals(name, token.strip()):
            return object
    if (value := _parse_int(token)) is Unset:
        return Unset
    try:
        return type(value)
    except ValueError:
        return Unset


def coerce(option, token, comparison, /):
    """
    Convert token into option.type.

    Parameters
    - option: Option
      Provides type, separator and names (for diagnostics).
    - token: str
      Raw value token (or a default's text form).
    - comparison: Comparison
      Strategy for enum member names.

    Returns
    - the converted value, or Unset when a primitive parse failed.

    Raises
    - InvalidEnumValueError when an enum target does not name a member.
    """
    if not isinstance(token, str):
        raise TypeError("coerce() second argument must be a string")

    type = option.type

    if is_enum(type):
        if (object := member(type, token, comparison)) is Unset:
            choices = tuple(type.__members__)
            raise InvalidEnumValueError(
                "invalid value %r for option %r" % (token, option.display),
                title="invalid enum value",
                code=FaultCode.INVALID_ENUM_VALUE,
                hint="use one of: %s" % ", ".join(choices),
                input=token,
                argument=option,
                choices=choices,
                docs=getdoc(FaultCode.INVALID_ENUM_VALUE),
            )
        return object

    if (pair := collection(type)) is not None:
        container, element = pair
        values = []
        for part in token.split(option.separator):
            if is_enum(element):
                object = member(element, part, comparison)
            else:
                object = parse(element, part)
            if object is not Unset:
                values.append(object)
        return container(values)

    return parse(type, token)


def bind(instance, option, token, comparison, /):
    """
    Coerce token and assign it to the option's field on instance.

    Returns True when the value was applied, False when the primitive parse
    failed (the field is left untouched). Enum mismatches propagate.
    """
    if (value := coerce(option, token, comparison)) is Unset:
        return False
    setattr(instance, option.field, value)
    return True


def textualize(value, separator=",", /):
    """
    Render a default value as the text a user would have typed for it.

    Enum members become their names, collections are joined with the separator,
    dates/times use ISO 8601, and everything else uses str().
    """
    if isinstance(value, str):
        return value
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, datetime.date | datetime.time):
        return value.isoformat()
    if isinstance(value, _COLLECTIONS):
        return separator.join(textualize(item, separator) for item in value)
    return str(value)


__all__ = (
    "is_enum",
    "collection",
    "validate",
    "parse",
    "member",
    "coerce",
    "bind",
    "textualize",
)
