from __future__ import annotations

import copy
import io
import sys
import unittest
from unittest import TestCase

from rich.console import Console

from bindery.settings import Comparison, Settings


class TestComparison(TestCase):

    def testExactKeepsCase(self):
        self.assertEqual(Comparison.EXACT.normalize("Verbose"), "Verbose")
        self.assertFalse(Comparison.EXACT.equals("verbose", "Verbose"))

    def testFoldedCasefolds(self):
        self.assertEqual(Comparison.FOLDED.normalize("Verbose"), "verbose")
        self.assertTrue(Comparison.FOLDED.equals("STRASSE", "straße"))

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            Comparison.FOLDED.normalize(None)


class TestSettings(TestCase):

    def testDefaults(self):
        settings = Settings()
        self.assertTrue(settings.ignore_unknown)
        self.assertTrue(settings.case_insensitive_enums)
        self.assertIs(settings.name_comparison, Comparison.FOLDED)
        self.assertTrue(settings.write_banner)
        self.assertTrue(settings.colorful)

    def testEnumComparison(self):
        self.assertIs(Settings().enum_comparison, Comparison.FOLDED)
        self.assertIs(Settings(case_insensitive_enums=False).enum_comparison, Comparison.EXACT)

    def testNameComparisonFromString(self):
        self.assertIs(Settings(name_comparison="exact").name_comparison, Comparison.EXACT)
        self.assertIs(Settings(name_comparison=" Folded ").name_comparison, Comparison.FOLDED)

    def testNameComparisonErrors(self):
        with self.assertRaises(ValueError):
            Settings(name_comparison="insensitive")
        with self.assertRaises(TypeError):
            Settings(name_comparison=1)

    def testBooleansAreValidated(self):
        for name in ("ignore_unknown", "case_insensitive_enums", "write_banner", "colorful"):
            with self.subTest(name=name):
                with self.assertRaises(TypeError):
                    Settings(**{name: 1})

    def testBannerAndConsoleValidated(self):
        with self.assertRaises(TypeError):
            Settings(banner=3)
        with self.assertRaises(TypeError):
            Settings(console=io.StringIO())

    def testKeywordOnly(self):
        with self.assertRaises(TypeError):
            Settings(True)

    def testExplicitBanner(self):
        self.assertEqual(Settings(banner="tool 1.0").banner, "tool 1.0")

    def testBannerFromMain(self):
        main = sys.modules["__main__"]
        missing = object()
        previous = getattr(main, "__banner__", missing)
        main.__banner__ = "hosted 2.0"
        try:
            self.assertEqual(Settings().banner, "hosted 2.0")
        finally:
            if previous is missing:
                del main.__banner__
            else:
                main.__banner__ = previous

    def testConsoleDefaultsToSharedConsole(self):
        self.assertIs(Settings().console, Settings().console)
        console = Console(file=io.StringIO())
        self.assertIs(Settings(console=console).console, console)

    def testReplace(self):
        settings = Settings()
        changed = copy.replace(settings, ignore_unknown=False)
        self.assertFalse(changed.ignore_unknown)
        self.assertTrue(settings.ignore_unknown)
        self.assertEqual(changed.name_comparison, settings.name_comparison)

    def testReplaceRejectsUnknownFields(self):
        with self.assertRaises(TypeError):
            copy.replace(Settings(), verbose=True)

    def testEquality(self):
        self.assertEqual(Settings(), Settings())
        self.assertNotEqual(Settings(), Settings(write_banner=False))

    def testRepr(self):
        self.assertTrue(repr(Settings()).startswith("settings(ignore_unknown=True"))


if __name__ == "__main__":
    unittest.main()
