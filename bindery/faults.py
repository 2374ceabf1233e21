"""
Bindery faults (user-input problems) and their rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing problem
  a parse can report. Codes are grouped by domain so logs and searches stay
  predictable.
- BindingException: base type carrying a message plus options; it knows how to
  render itself through rich in a short, lowercased, actionable way.
- getdoc(): optional description lookup for a code from the host application.

Faults are never raised by the parser for user input: they are collected into
the ParseOutcome and rendered by bindery.usage.report() when the parse fails.
The only fault that travels as an exception is InvalidEnumValueError, raised by
the coercion engine and caught by the binder.

Host customization (read from __main__)
- __codes__: mapping FaultCode -> label, replacing the numeric id in headers.
- __docs__: mapping FaultCode -> short documentation line.
- __styles__: palette overrides.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - verbs (1110x)
      • MISSING_VERB, UNKNOWN_VERB
    - options (1111x/1112x)
      • UNKNOWN_ARGUMENT, INVALID_ENUM_VALUE, MISSING_REQUIRED

    numeric ranges leave room for future additions without reshuffling.
    """
    # --- verb errors (111xx) ---
    MISSING_VERB                = 11101
    UNKNOWN_VERB                = 11102

    # --- option errors (111xx) ---
    UNKNOWN_ARGUMENT            = 11112
    INVALID_ENUM_VALUE          = 11124
    MISSING_REQUIRED            = 11125

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(sys.modules.get("__main__"), "__codes__", {}).get(self, self.value))


class BindingException(Exception):
    """
    base class of every user-input fault.

    options commonly carried
    - title: short label shown in the header.
    - code: FaultCode.
    - hint: one actionable sentence.
    - docs: optional documentation line (see getdoc()).
    - prog: program name for the header.
    - colorful: style the rendering.
    plus fault-specific context (input, argument, choices, names...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#FF6B6B",  # soft red message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "underline #00E5FF dim",
        } | getattr(sys.modules.get("__main__"), "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        header = Text.assemble(
            "[ ",
            *((text(prog, "prog-name"), " — ") if (prog := self.options.get("prog")) else ()),
            text(self.options["code"].normalize(), "code"),
            " | ",
            text(self.options["title"].title(), "error-title"),
            " ]"
        )
        renders = [header, text(self.message, "error-message")]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        if docs := self.options.get("docs"):
            renders.append(Text.assemble(text(" ⓘ ", "hint-arrow"), text(docs, "docs")))
        return Group(*renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    @property
    def code(self):
        return self.options["code"]


class MissingVerbError(BindingException): ...
class UnknownVerbError(BindingException): ...
class UnknownArgumentsError(BindingException): ...
class InvalidEnumValueError(BindingException): ...
class MissingRequiredError(BindingException): ...


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(sys.modules.get("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "BindingException",
    "MissingVerbError",
    "UnknownVerbError",
    "UnknownArgumentsError",
    "InvalidEnumValueError",
    "MissingRequiredError",
    "FaultCode",
    "getdoc",
)
