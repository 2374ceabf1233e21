"""
Utilities module behavioral tests.

Scope
- Unset sentinel semantics (singleton, falsy, final, copy-stable).
- coalesce() only replaces Unset.
- rename() function and decorator forms.
- mirror() read-only properties hand out immutable copies.
- pluralize() on diagnostic labels.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from bindery.utils import Unset, UnsetType, coalesce, mirror, pluralize, rename


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndDistinctFromNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFinalClass(self):
        with self.assertRaises(TypeError):
            type("unset", (UnsetType,), {})

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(1, str | Unset)


class TestCoalesce(TestCase):
    """Behavioral tests for coalesce()."""

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, ","), ",")

    def testPreservesFalseyValues(self):
        self.assertIsNone(coalesce(None, ","))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "x"), "")

    def testDefaultIsNone(self):
        self.assertIsNone(coalesce(Unset))


class TestRename(TestCase):
    """Behavioral tests for rename()."""

    def testFunctionForm(self):
        def original():
            pass

        self.assertIs(rename(original, "renamed"), original)
        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")

    def testDecoratorForm(self):
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")

    def testRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            rename(42, "name")

    def testWrongArity(self):
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    """Behavioral tests for mirror() read-only properties."""

    def setUp(self):
        class Holder:
            names = mirror("names")
            mapping = mirror("mapping")
            value = mirror("value")

            def __init__(self):
                self._names = ["a", "b"]
                self._mapping = {"k": ["v"]}
                self._value = 3

        self.holder = Holder()

    def testSequencesBecomeTuples(self):
        self.assertEqual(self.holder.names, ("a", "b"))

    def testMappingValuesAreCopied(self):
        mapping = self.holder.mapping
        mapping["k"] = "changed"
        self.assertEqual(self.holder.mapping, {"k": ("v",)})

    def testScalarsPassThrough(self):
        self.assertEqual(self.holder.value, 3)

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.holder.names = ()


class TestPluralize(TestCase):
    """Behavioral tests for pluralize()."""

    def testRegular(self):
        self.assertEqual(pluralize("argument"), "arguments")

    def testPhraseKeepsHead(self):
        self.assertEqual(pluralize("unknown argument"), "unknown arguments")

    def testConsonantY(self):
        self.assertEqual(pluralize("entry"), "entries")

    def testSibilant(self):
        self.assertEqual(pluralize("switch"), "switches")

    def testCasingPreserved(self):
        self.assertEqual(pluralize("Valid verb"), "Valid verbs")
        self.assertEqual(pluralize("VERB"), "VERBS")

    def testEmpty(self):
        self.assertEqual(pluralize(""), "")

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            pluralize(3)


if __name__ == "__main__":
    unittest.main()
