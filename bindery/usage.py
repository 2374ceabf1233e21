"""
Bindery usage formatter and failure report.

usage(schema) is a pure function producing the help lines of a schema:
- option schemas: one line per option, then the fixed help line

      "  -p, --port\t\t(Default: 22) Set port."
      "  --help\t\tDisplay this help screen."

- verb schemas: one line per verb

      "  run\t\tRun verb."

report(outcome, schema, settings) writes the failure diagnostics of a parse to
the configured rich console: the banner (when enabled), the usage lines, then
every fault of the outcome. For verb schemas the fault comes first, then the
valid verbs. It is a no-op for successful outcomes.

Styling
- The palette can be overridden by a __styles__ mapping in __main__.
- When settings.colorful is False the output is plain text.
"""
import copy
import sys
from collections import defaultdict

from rich.text import Text

HELP = "  --help\t\tDisplay this help screen."


def usage(schema, /):
    """
    Render a schema into help lines (plain strings, no trailing newlines).
    """
    if schema.verbs:
        return [
            "  %s\t\t%s" % (verb.name, verb.descr or "") for verb in schema.verbs
        ]

    lines = []
    for option in schema.options:
        short = "-%s" % option.short if option.short else ""
        long = "--%s" % option.long if option.long else ""
        comma = ", " if short and long else ""
        default = "(Default: %s) " % option.default if option.default is not None else ""
        lines.append("  %s%s%s\t\t%s%s" % (short, comma, long, default, option.descr or ""))
    lines.append(HELP)
    return lines


def report(outcome, schema, settings, /):
    """
    Write the diagnostics of a failed outcome to settings.console.

    Order for option schemas: banner, usage lines (blank line before each
    option line, as on the classic help screen), then one rendered fault per
    problem. Verb schemas print the verb fault before the "Valid verbs:" list.
    """
    if outcome.success:
        return

    styles = defaultdict(str, {
        "banner": "bold #FF4D94",  # magenta-pink brand pop
        "usage-line": "#36C5F0",  # sky-blue usage lines
        "verbs-label": "bold #00E6FF",
    } | getattr(sys.modules.get("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        if not settings.colorful:
            return Text(fragment)
        return Text(fragment, styles[style])

    console = settings.console

    if settings.write_banner and (banner := settings.banner):
        console.print(text(banner, "banner"))

    faults = [copy.replace(fault, colorful=settings.colorful) for fault in outcome.faults]

    if schema.verbs:
        for fault in faults:
            console.print(fault)
        console.print(text("Valid verbs:", "verbs-label"))
        for line in usage(schema):
            console.print(text(line.expandtabs(), "usage-line"))
        return

    for line in usage(schema):
        console.print()
        console.print(text(line.expandtabs(), "usage-line"))
    console.print()

    for fault in faults:
        console.print(fault)


__all__ = (
    "HELP",
    "usage",
    "report",
)
