"""
Bindery parser settings and comparison strategies.

Scope
- Comparison: the two-variant rule (EXACT / FOLDED) used to match option names
  and enum member names. It is threaded explicitly into every lookup and coercion
  instead of living in a hidden global.
- Settings: every recognized parser option plus the line-output sink (a rich
  Console) used for failure diagnostics.

Defaults mirror a forgiving command line:
- unknown arguments are ignored,
- enum values and option names are matched case-insensitively,
- a banner is written before the usage text on failure.

Host integration (all optional, read from __main__)
- __banner__: text written before the usage screen.
- __prog__ / __version__: used to synthesize a banner when __banner__ is absent.
- __styles__ / __codes__: palette and fault-code label overrides (see faults/usage).
"""
import os.path
import sys
from enum import Enum

from rich.console import Console

from .utils import *

console = Console(stderr=True)


class Comparison(Enum):
    """
    String comparison strategy for names and enum members.

    - EXACT: ordinal, case-sensitive comparison.
    - FOLDED: case-insensitive comparison (Unicode casefolding).
    """
    EXACT = "exact"
    FOLDED = "folded"

    def normalize(self, text, /):
        """
        return the comparison key of text under this strategy.
        """
        if not isinstance(text, str):
            raise TypeError("normalize() argument must be a string")
        return text.casefold() if self is Comparison.FOLDED else text

    def equals(self, left, right, /):
        return self.normalize(left) == self.normalize(right)


class Settings:
    """
    Immutable bag of parser options.

    Options
    - ignore_unknown: bool
      Unknown option names do not fail the parse (they are still reported in
      the outcome).
    - case_insensitive_enums: bool
      Enum member names are matched with Comparison.FOLDED instead of EXACT.
    - name_comparison: Comparison
      Rule used to match flag tokens against option short/long names.
    - write_banner: bool
      Write the banner line before the usage text when a parse fails.
    - banner: Unset | str
      Explicit banner text; resolved from __main__ when Unset.
    - console: Unset | rich.console.Console
      Line-output sink for diagnostics; a shared stderr console when Unset.
    - colorful: bool
      Style diagnostics; plain text otherwise.

    Derive variations with copy.replace(settings, **overrides).
    """

    __introspectable__ = (
        "ignore_unknown",
        "case_insensitive_enums",
        "name_comparison",
        "write_banner",
        "banner",
        "console",
        "colorful",
    )

    def __init__(
            self,
            *,
            ignore_unknown=True,
            case_insensitive_enums=True,
            name_comparison=Comparison.FOLDED,
            write_banner=True,
            banner=Unset,
            console=Unset,
            colorful=True,
    ):
        for name, object in (
                ("ignore_unknown", ignore_unknown),
                ("case_insensitive_enums", case_insensitive_enums),
                ("write_banner", write_banner),
                ("colorful", colorful),
        ):
            if not isinstance(object, bool):
                raise TypeError(f"settings {name!r} must be a boolean")

        if isinstance(name_comparison, str):
            try:
                name_comparison = Comparison(name_comparison.strip().lower())
            except ValueError:
                raise ValueError("settings 'name_comparison' must be 'exact' or 'folded'") from None
        if not isinstance(name_comparison, Comparison):
            raise TypeError("settings 'name_comparison' must be a comparison")

        if not isinstance(banner, str | Unset):
            raise TypeError("settings 'banner' must be a string")
        if not isinstance(console, Console | Unset):
            raise TypeError("settings 'console' must be a rich console")

        self._ignore_unknown = ignore_unknown
        self._case_insensitive_enums = case_insensitive_enums
        self._name_comparison = name_comparison
        self._write_banner = write_banner
        self._banner = banner
        self._console = console
        self._colorful = colorful

    ignore_unknown = mirror("ignore_unknown")
    case_insensitive_enums = mirror("case_insensitive_enums")
    name_comparison = mirror("name_comparison")
    write_banner = mirror("write_banner")
    colorful = mirror("colorful")

    @property
    def enum_comparison(self):
        """
        Comparison used for enum member names.
        """
        return Comparison.FOLDED if self.case_insensitive_enums else Comparison.EXACT

    @property
    def console(self):
        return coalesce(self._console, console)

    @property
    def banner(self):
        """
        Resolve the banner text.

        Order: explicit banner, __main__.__banner__, "<__prog__> <__version__>",
        then the running script name.
        """
        if self._banner is not Unset:
            return self._banner
        main = sys.modules.get("__main__")
        if (banner := getattr(main, "__banner__", None)) is not None:
            return str(banner)
        prog = getattr(main, "__prog__", None) or os.path.basename(sys.argv[0] if sys.argv and sys.argv[0] else "")
        version = getattr(main, "__version__", None)
        return " ".join(str(part) for part in (prog, version) if part)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        if unknown := overrides.keys() - set(type(self).__introspectable__):
            raise TypeError("unknown settings: %s" % ", ".join(sorted(unknown)))
        return type(self)(**{
            name: getattr(self, "_" + name) for name in type(self).__introspectable__
        } | overrides)

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, "_" + name)

    def __repr__(self):
        return "settings(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __eq__(self, other):
        if not isinstance(other, Settings):
            return NotImplemented
        return dict(self.__rich_repr__()) == dict(other.__rich_repr__())

    __hash__ = None


__all__ = (
    "Comparison",
    "Settings",
)
