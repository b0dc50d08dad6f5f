# python
"""
Sticky argument tests (file store and hook behavior).

Scope
- Loading: comments, separator-less lines, trimming, empty values, duplicates, missing file.
- Saving: whole-store flush, round trip through a fresh instance.
- Hook behavior inside a population pass: recall, re-persist, explicit override,
  precedence over DefaultValue, unwritable files.

Conventions
- Test method names follow CamelCase per project convention.
- Every test works inside its own temporary directory.
"""
import os
import tempfile
import unittest
from unittest import TestCase

from argstick import (
    Argument,
    StickyArg,
    DefaultValue,
    Priority,
    DuplicateStickyKeyError,
    HookFailureError,
    RevivalFailureError,
    parse,
)


class StickyTestCase(TestCase):
    def setUp(self) -> None:
        directory = tempfile.TemporaryDirectory()
        self.addCleanup(directory.cleanup)
        self.directory = directory.name
        self.path = os.path.join(self.directory, "sticky.txt")

    def write(self, text):
        with open(self.path, "w", encoding="utf-8") as stream:
            stream.write(text)

    def read(self):
        with open(self.path, encoding="utf-8") as stream:
            return stream.read()


class TestStickyStore(StickyTestCase):
    """The line-oriented key/value store."""

    def testMissingFileIsEmptyStore(self):
        store = StickyArg(self.path)
        self.assertEqual(dict(store.entries), {})
        self.assertFalse(os.path.exists(self.path))

    def testCommentAndSeparatorlessLinesAreSkipped(self):
        self.write("# comment\nnovalue\n")
        self.assertEqual(dict(StickyArg(self.path).entries), {})

    def testCommentWithSeparatorIsSkipped(self):
        self.write("   # color=red\ncolor=blue\n")
        self.assertEqual(dict(StickyArg(self.path).entries), {"color": "blue"})

    def testKeysAndValuesAreTrimmed(self):
        self.write("  color =  blue  \n")
        self.assertEqual(StickyArg(self.path).get("color"), "blue")

    def testEmptyValueIsKept(self):
        self.write("output=\n")
        self.assertEqual(StickyArg(self.path).get("output"), "")

    def testFirstSeparatorSplits(self):
        self.write("url=http://host/?a=b\n")
        self.assertEqual(StickyArg(self.path).get("url"), "http://host/?a=b")

    def testNoTrailingNewlineRequired(self):
        self.write("color=blue")
        self.assertEqual(StickyArg(self.path).get("color"), "blue")

    def testDuplicateKeyRaises(self):
        self.write("color=blue\ncolor=red\n")
        with self.assertRaises(DuplicateStickyKeyError) as caught:
            StickyArg(self.path)
        self.assertEqual(caught.exception.options["argument"], "color")
        self.assertEqual(caught.exception.options["line"], 2)

    def testUnknownKeyIsNone(self):
        self.assertIsNone(StickyArg(self.path).get("color"))

    def testRoundTrip(self):
        StickyArg(self.path).set("color", "blue")
        self.assertEqual(StickyArg(self.path).get("color"), "blue")

    def testSaveFlushesEveryEntryInOrder(self):
        self.write("b=2\na=1\n")
        store = StickyArg(self.path)
        store.set("c", "3")
        store.set("b", "20")
        self.assertEqual(self.read(), "b=20\na=1\nc=3\n")

    def testEntriesViewIsReadOnly(self):
        store = StickyArg(self.path)
        with self.assertRaises(TypeError):
            store.entries["color"] = "blue"  # NOQA: read-only mapping proxy

    def testAcceptsPathLike(self):
        import pathlib
        store = StickyArg(pathlib.Path(self.path))
        self.assertEqual(store.file, self.path)

    def testRejectsNonPath(self):
        with self.assertRaises(TypeError):
            StickyArg(42)

    def testHighBeforePriority(self):
        self.assertEqual(StickyArg(self.path).before_populate_property_priority, Priority.HIGH)
        self.assertGreater(StickyArg(self.path).before_populate_property_priority,
                           DefaultValue("x").before_populate_property_priority)


class TestStickyHook(StickyTestCase):
    """StickyArg inside population passes."""

    def options(self, **extra):
        sticky = StickyArg(self.path)

        class Options:
            color: str = Argument(hooks=[sticky], **extra)
            count: int = Argument()

        return Options

    def testRecalledValueIsUsedAndRepersisted(self):
        self.write("color=blue\n")
        options = parse(self.options(), [])
        self.assertEqual(options.color, "blue")
        self.assertEqual(self.read(), "color=blue\n")

    def testSuppliedValueWinsAndOverwrites(self):
        self.write("color=blue\n")
        options = parse(self.options(), ["--color", "red"])
        self.assertEqual(options.color, "red")
        self.assertEqual(StickyArg(self.path).get("color"), "red")

    def testValueRemembersAcrossRuns(self):
        parse(self.options(), ["-c", "green"])
        self.assertEqual(parse(self.options(), []).color, "green")

    def testNothingSuppliedNothingStored(self):
        options = parse(self.options(), [])
        self.assertIsNone(options.color)
        self.assertFalse(os.path.exists(self.path))

    def testStickyBeatsDefault(self):
        self.write("color=blue\n")
        self.assertEqual(parse(self.options(default="green"), []).color, "blue")

    def testDefaultUsedAndRememberedWithoutMemory(self):
        self.assertEqual(parse(self.options(default="green"), []).color, "green")
        self.assertEqual(self.read(), "color=green\n")

    def testKeyIsArgumentNameNotShortcut(self):
        sticky = StickyArg(self.path)

        class Options:
            palette: str = Argument("colour", shortcut="k", hooks=[sticky])

        options = parse(Options, ["-k", "teal"])
        self.assertEqual(options.palette, "teal")
        self.assertEqual(self.read(), "colour=teal\n")

    def testFailedRevivalIsNotPersisted(self):
        sticky = StickyArg(self.path)

        class Options:
            count: int = Argument(hooks=[sticky])

        with self.assertRaises(RevivalFailureError):
            parse(Options, ["--count", "many"])
        self.assertFalse(os.path.exists(self.path))

    def testLineBreaksAreRejected(self):
        store = StickyArg(self.path)
        with self.assertRaises(ValueError):
            store.set("color", "red\ncolor=blue")
        with self.assertRaises(ValueError):
            store.set("co\rlor", "red")
        self.assertEqual(dict(store.entries), {})
        self.assertFalse(os.path.exists(self.path))

    def testMultilineValueIsNotPersisted(self):
        self.write("color=blue\n")
        with self.assertRaises(HookFailureError) as caught:
            parse(self.options(), ["--color", "red\ncolor=blue"])
        self.assertEqual(caught.exception.options["argument"], "color")
        self.assertIsInstance(caught.exception.__cause__, ValueError)
        self.assertEqual(self.read(), "color=blue\n")
        self.assertEqual(StickyArg(self.path).get("color"), "blue")

    def testUnwritableFileIsHookFailure(self):
        self.path = os.path.join(self.directory, "missing", "sticky.txt")
        with self.assertRaises(HookFailureError) as caught:
            parse(self.options(), ["--color", "red"])
        self.assertEqual(caught.exception.options["argument"], "color")
        self.assertEqual(caught.exception.options["stage"], "after_populate_property")
        self.assertIsInstance(caught.exception.__cause__, OSError)


if __name__ == "__main__":
    unittest.main()
