"""
Bindery parser: bind command-line tokens onto a target object.

What this module provides
- ArgumentParser: holds Settings and a SchemaRegistry and runs parses.
- ParseOutcome: the per-call result (success, unknown names, missing required
  names, invalid values, selected verb, collected faults).
- parse(): module-level convenience using a module-owned registry.

Phases of ArgumentParser.parse(tokens, instance)
1. verbs    if the schema declares verbs, the first token selects one; the
            verb's nested object becomes the binding target and its schema the
            active one. No token or an unknown verb ends the parse (failure).
2. binding  a two-state machine over the remaining tokens:
              Idle            tokens without a leading '-' are skipped; '-name'
                              and '--name' look the stripped name up. Unknown
                              names are recorded; bool options bind True at
                              once; other options wait for their value.
              Awaiting(opt)   the next token, whatever it looks like, is the
                              value of opt.
            a flag left waiting at the end of the stream counts as unknown.
3. validate options not updated take their default (coerced like input);
            required options still not updated are reported by long name (short
            name when there is none).

The parse succeeds iff (no unknown names or settings.ignore_unknown) and
nothing required is missing and no enum value was rejected. On failure the
diagnostics are written through bindery.usage.report().

Quick start
    from bindery import ArgumentParser, Option

    class Options:
        verbose = Option("-v", "--verbose", type=bool)
        username = Option("-u", required=True)
        port = Option("-p", "--port", type=int, default=22)

    options = Options()
    if not ArgumentParser().parse(["-v", "-u", "alice"], options):
        raise SystemExit(1)
"""
import copy
import shlex
import sys
from collections.abc import Iterable

from .coercion import bind
from .faults import *
from .schemas import SchemaRegistry
from .settings import Comparison, Settings
from .usage import report
from .utils import *


class ParseOutcome:
    """
    Result of one parse call; truthy iff the parse succeeded.

    Properties
    - success: bool
    - unknown: tuple[str, ...] stripped names matching no option (in order).
    - missing: tuple[str, ...] required options left unset.
    - invalid: tuple[str, ...] rejected enum value tokens.
    - verb: name of the selected verb, or None.
    - updated: tuple of the Option specs that received a value.
    - faults: tuple of BindingException describing every problem.
    """

    __introspectable__ = (
        "success",
        "unknown",
        "missing",
        "invalid",
        "verb",
        "updated",
        "faults",
    )

    def __init__(self, success, /, unknown=(), missing=(), invalid=(), verb=None, updated=(), faults=()):
        self._success = bool(success)
        self._unknown = tuple(unknown)
        self._missing = tuple(missing)
        self._invalid = tuple(invalid)
        self._verb = verb
        self._updated = tuple(updated)
        self._faults = tuple(faults)

    success = mirror("success")
    unknown = mirror("unknown")
    missing = mirror("missing")
    invalid = mirror("invalid")
    verb = mirror("verb")
    updated = mirror("updated")
    faults = mirror("faults")

    def __bool__(self):
        return self._success

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            if name != "faults":
                yield name, getattr(self, name)

    def __repr__(self):
        return "parse-outcome(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def _tokenize(prompt, /):
    """
    Normalize the accepted prompt forms into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like string, split with shlex.
    - Iterable[str]: used as-is (order preserved).
    """
    if prompt is Unset:
        return sys.argv[1:]
    if prompt is None:
        raise TypeError("parse() tokens must not be None")
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if not isinstance(prompt, Iterable):
        raise TypeError("parse() tokens must be a string or an iterable of strings")
    tokens = list(prompt)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parse() tokens must be a string or an iterable of strings")
    return tokens


class ArgumentParser:
    """
    Schema-driven command-line binder.

    Parameters
    - settings: Unset | Settings
      Parser options; default Settings() when Unset.
    - registry: Unset | SchemaRegistry
      Schema cache; a private registry when Unset. Share one registry across
      parsers to derive each schema once per application.
    - **overrides: individual settings fields replacing those of 'settings'.

    Example
        parser = ArgumentParser(registry=registry, ignore_unknown=False)
        outcome = parser.parse(["--port", "80"], options)
    """

    def __init__(self, settings=Unset, /, registry=Unset, **overrides):
        if not isinstance(settings, Settings | Unset):
            raise TypeError("ArgumentParser() first argument must be a settings object")
        if not isinstance(registry, SchemaRegistry | Unset):
            raise TypeError("ArgumentParser() 'registry' must be a schema registry")
        settings = coalesce(settings, Settings())
        self._settings = copy.replace(settings, **overrides) if overrides else settings
        self._registry = coalesce(registry, SchemaRegistry())

    settings = mirror("settings")
    registry = mirror("registry")

    def parse(self, tokens, instance, /):
        """
        Bind tokens onto instance (mutated in place) and return a ParseOutcome.

        Parameters
        - tokens: Iterable[str] | str | Unset (sys.argv[1:])
        - instance: object whose type declares Option or Verb specs.

        Raises
        - TypeError for programmer errors: None tokens or instance, non-string
          tokens, a type with nothing bindable, ambiguous folded names.
        User-input problems never raise; they are reported in the outcome.
        """
        tokens = _tokenize(tokens)
        if instance is None:
            raise TypeError("parse() instance must not be None")

        schema = self._registry.get(instance)

        verb = None
        if schema.verbs:
            try:
                verb, instance, schema, tokens = self._resolve_verb(schema, instance, tokens)
            except (MissingVerbError, UnknownVerbError) as fault:
                outcome = ParseOutcome(False, faults=[fault])
                report(outcome, schema, self._settings)
                return outcome

        comparison = self._settings.name_comparison
        if comparison is Comparison.FOLDED and schema.collisions:
            raise TypeError("type %r declares names colliding without case: %s" % (
                schema.type.__qualname__, ", ".join(schema.collisions)
            ))

        updated, unknown, invalid = self._populate(schema, instance, tokens)
        missing = self._validate(schema, instance, updated, invalid)

        faults = list(invalid)
        if unknown and not self._settings.ignore_unknown:
            faults.append(UnknownArgumentsError(
                "unknown arguments: %s" % ", ".join(unknown),
                title=pluralize("unknown argument") if len(unknown) > 1 else "unknown argument",
                code=FaultCode.UNKNOWN_ARGUMENT,
                hint="check the spelling or run with --help to see all options",
                names=tuple(unknown),
                docs=getdoc(FaultCode.UNKNOWN_ARGUMENT),
            ))
        if missing:
            faults.append(MissingRequiredError(
                "required arguments: %s" % ", ".join(missing),
                title=pluralize("missing argument") if len(missing) > 1 else "missing argument",
                code=FaultCode.MISSING_REQUIRED,
                hint="pass a value for %s" % ", ".join(missing),
                names=tuple(missing),
                docs=getdoc(FaultCode.MISSING_REQUIRED),
            ))

        outcome = ParseOutcome(
            not faults,
            unknown=unknown,
            missing=missing,
            invalid=[fault.options["input"] for fault in invalid],
            verb=verb.name if verb else None,
            updated=updated,
            faults=faults,
        )
        report(outcome, schema, self._settings)
        return outcome

    def _resolve_verb(self, schema, instance, tokens):
        """
        select the verb named by the first token.

        returns (verb, nested instance, nested schema, remaining tokens).
        raises MissingVerbError / UnknownVerbError when no verb is selected.
        """
        names = tuple(verb.name for verb in schema.verbs)
        if not tokens:
            raise MissingVerbError(
                "no verb was specified",
                title="missing verb",
                code=FaultCode.MISSING_VERB,
                hint="start with one of: %s" % ", ".join(names),
                choices=names,
                docs=getdoc(FaultCode.MISSING_VERB),
            )

        verb = schema.verb(input := tokens[0])
        if verb is None:
            raise UnknownVerbError(
                "unknown verb %r" % input,
                title="unknown verb",
                code=FaultCode.UNKNOWN_VERB,
                hint="start with one of: %s" % ", ".join(names),
                input=input,
                choices=names,
                docs=getdoc(FaultCode.UNKNOWN_VERB),
            )

        nested = verb.materialize(instance)
        return verb, nested, self._registry.get(nested), tokens[1:]

    def _populate(self, schema, instance, tokens):
        """
        run the Idle / Awaiting state machine over tokens.

        returns (updated options, unknown names, invalid-enum faults).
        """
        comparison = self._settings.name_comparison
        enums = self._settings.enum_comparison

        updated = []
        unknown = []
        invalid = []

        pending = None  # (option, stripped name) while awaiting a value
        for token in tokens:
            if pending is not None:
                option, _ = pending
                pending = None
                try:
                    if bind(instance, option, token, enums) and option not in updated:
                        updated.append(option)
                except InvalidEnumValueError as fault:
                    invalid.append(fault)
                continue

            if not token.strip() or not token.startswith("-"):
                continue

            name = token[1:]
            if name.startswith("-"):
                name = name[1:]
            if not name:
                continue

            option = schema.lookup(name, comparison)
            if option is None:
                unknown.append(name)
            elif option.flag:
                setattr(instance, option.field, True)
                if option not in updated:
                    updated.append(option)
            else:
                pending = option, name

        if pending is not None:
            unknown.append(pending[1])

        return updated, unknown, invalid

    def _validate(self, schema, instance, updated, invalid):
        """
        apply defaults to untouched options, then list missing required names.

        'updated' is extended in place with the options a default was applied to,
        'invalid' with the faults of enum defaults that name no member.
        """
        enums = self._settings.enum_comparison
        for option in schema.options:
            if option in updated or option.default is None:
                continue
            try:
                if bind(instance, option, option.default, enums):
                    updated.append(option)
            except InvalidEnumValueError as fault:
                invalid.append(fault)

        return [option.label for option in schema.options if option.required and option not in updated]


_registry = SchemaRegistry()


def parse(tokens, instance, /, **settings):
    """
    Convenience: parse with a module-owned registry and keyword settings.

    Equivalent to ArgumentParser(registry=<module registry>, **settings).parse(tokens, instance).
    """
    return ArgumentParser(registry=_registry, **settings).parse(tokens, instance)


__all__ = (
    "ArgumentParser",
    "ParseOutcome",
    "parse",
)
