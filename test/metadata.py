# python
"""
Metadata module behavioral tests (declarations and the derived descriptor table).

Scope
- Validate Argument construction, normalization and rejection of bad metadata.
- Validate describe(): declaration order, types from annotations, shortcut derivation,
  action properties, class hooks, ignore-case defaults, caching and validation.

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None where None is not a meaningful value.
"""
import gc
import unittest
import weakref
from typing import Optional
from unittest import TestCase

from argstick import Argument, Hook, DefaultValue, hook, describe


class TestArgument(TestCase):
    """Behavioral tests for Argument declarations."""

    def testNameStripsDashes(self):
        self.assertEqual(Argument("--output").name, "output")

    def testNameMustBeValid(self):
        with self.assertRaises(ValueError):
            Argument("  ")
        with self.assertRaises(ValueError):
            Argument("9lives")
        with self.assertRaises(TypeError):
            Argument(7)

    def testPositionMustBeNonNegativeInteger(self):
        with self.assertRaises(ValueError):
            Argument(position=-1)
        with self.assertRaises(TypeError):
            Argument(position=True)

    def testDescriptionCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Argument(description="   ")

    def testFlagsMustBeBooleans(self):
        with self.assertRaises(TypeError):
            Argument(required="yes")
        with self.assertRaises(TypeError):
            Argument(ignore_case=1)

    def testHooksMustBeHooks(self):
        with self.assertRaises(TypeError):
            Argument(hooks=[object()])
        with self.assertRaises(TypeError):
            Argument(hooks="sticky")

    def testTypeMustBeCallable(self):
        with self.assertRaises(TypeError):
            Argument(type=3)

    def testDefaultAppendsDefaultValueHook(self):
        marker = Hook()
        argument = Argument(hooks=[marker], default=5)
        self.assertIs(argument.hooks[0], marker)
        self.assertIsInstance(argument.hooks[1], DefaultValue)
        self.assertEqual(argument.hooks[1].value, 5)

    def testActionCannotDeclareShortcut(self):
        with self.assertRaises(TypeError):
            Argument(action=True, shortcut="a")

    def testInstanceReadsNoneUntilPopulated(self):
        class Options:
            name: str = Argument()

        options = Options()
        self.assertIsNone(options.name)
        self.assertIsInstance(Options.name, Argument)
        options.name = "set"
        self.assertEqual(options.name, "set")


class TestDescribe(TestCase):
    """Behavioral tests for the metadata table."""

    def testDeclarationOrderAndTypes(self):
        class Options:
            source: str = Argument(position=0)
            count: int = Argument()
            ratio: Optional[float] = Argument()
            limit: int | None = Argument()
            raw = Argument()
            label: int = Argument(type=str)

        metadata = describe(Options)
        self.assertEqual([d.name for d in metadata.descriptors], ["source", "count", "ratio", "limit", "raw", "label"])
        self.assertEqual([d.type for d in metadata.descriptors], [str, int, float, int, str, str])

    def testShortcutDerivation(self):
        class Options:
            count: int = Argument()
            color: str = Argument()
            kind: str = Argument(shortcut="x")
            quiet: bool = Argument(shortcut=None)
            command: str = Argument(action=True)

        shortcuts = {d.name: d.shortcut for d in describe(Options).descriptors}
        self.assertEqual(shortcuts, {"count": "c", "color": None, "kind": "x", "quiet": None, "command": None})

    def testDerivedShortcutYieldsToExplicitOne(self):
        class Options:
            count: int = Argument()
            verbose: bool = Argument(shortcut="c")

        shortcuts = {d.name: d.shortcut for d in describe(Options).descriptors}
        self.assertEqual(shortcuts, {"count": None, "verbose": "c"})

    def testExplicitShortcutCollisionRejected(self):
        class Options:
            alpha: str = Argument(shortcut="x")
            beta: str = Argument(shortcut="x")

        with self.assertRaises(ValueError):
            describe(Options)

    def testShortcutCollidingWithNameRejected(self):
        class Options:
            x: str = Argument()
            other: str = Argument(shortcut="x")

        with self.assertRaises(ValueError):
            describe(Options)

    def testDuplicateNamesRejected(self):
        class Options:
            first: str = Argument("name")
            second: str = Argument("name")

        with self.assertRaises(ValueError):
            describe(Options)

    def testDuplicatePositionsRejected(self):
        class Options:
            first: str = Argument(position=0)
            second: str = Argument(position=0)

        with self.assertRaises(ValueError):
            describe(Options)

    def testSingleActionAllowed(self):
        class Options:
            first: str = Argument(action=True)
            second: str = Argument(action=True)

        with self.assertRaises(TypeError):
            describe(Options)

    def testActionLookup(self):
        class Options:
            command: str = Argument(action=True, position=0)
            name: str = Argument()

        self.assertEqual(describe(Options).action.name, "command")
        self.assertEqual(describe(Options)["name"].attribute, "name")
        with self.assertRaises(KeyError):
            describe(Options)["missing"]

    def testCustomNameKeepsAttribute(self):
        class Options:
            output_path: str = Argument("out")

        descriptor, = describe(Options).descriptors
        self.assertEqual((descriptor.name, descriptor.attribute, descriptor.shortcut), ("out", "output_path", "o"))

    def testIgnoreCaseDefaultsToClass(self):
        class Options:
            __ignorecase__ = True
            name: str = Argument()
            exact: str = Argument(ignore_case=False)

        metadata = describe(Options)
        self.assertTrue(metadata.ignore_case)
        self.assertEqual([d.ignore_case for d in metadata.descriptors], [True, False])

    def testIgnoreCaseMustBeBoolean(self):
        class Options:
            __ignorecase__ = "yes"

        with self.assertRaises(TypeError):
            describe(Options)

    def testClassHooksFromMroAndDecorator(self):
        base, extra, child = Hook(), Hook(), Hook()

        class Base:
            __hooks__ = (base,)
            name: str = Argument()

        @hook(extra)
        class Child(Base):
            __hooks__ = (child,)
            count: int = Argument()

        metadata = describe(Child)
        self.assertEqual(metadata.hooks, (base, child, extra))
        self.assertEqual([d.name for d in metadata.descriptors], ["name", "count"])

    def testClassHooksMustBeHooks(self):
        class Options:
            __hooks__ = ("not a hook",)

        with self.assertRaises(TypeError):
            describe(Options)
        with self.assertRaises(TypeError):
            hook(object())

    def testDescriptorIsImmutable(self):
        class Options:
            name: str = Argument(hooks=[Hook()])

        descriptor, = describe(Options).descriptors
        self.assertIsInstance(descriptor.hooks, tuple)
        with self.assertRaises(AttributeError):
            descriptor.name = "other"

    def testTableIsCached(self):
        class Options:
            name: str = Argument()

        self.assertIs(describe(Options), describe(Options))

    def testTableIsDroppedWithClass(self):
        class Options:
            name: str = Argument()

        describe(Options)
        reference = weakref.ref(Options)
        del Options
        gc.collect()
        self.assertIsNone(reference())

    def testHookDecoratorRefreshesOnlyItsClass(self):
        extra = Hook()

        class Other:
            name: str = Argument()

        class Options:
            name: str = Argument()

        other = describe(Other)
        self.assertEqual(describe(Options).hooks, ())
        hook(extra)(Options)
        self.assertEqual(describe(Options).hooks, (extra,))
        self.assertIs(describe(Other), other)

    def testRequiresClass(self):
        with self.assertRaises(TypeError):
            describe(object())

    def testMatchesHonorsCase(self):
        class Options:
            __ignorecase__ = True
            name: str = Argument()
            exact: str = Argument(ignore_case=False)

        name, exact = describe(Options).descriptors
        self.assertTrue(name.matches("NAME"))
        self.assertTrue(name.matches("N"))
        self.assertFalse(exact.matches("EXACT"))
        self.assertTrue(exact.matches("e"))


if __name__ == "__main__":
    unittest.main()
