"""
Option schema tests.

Scope
- The required-xor-default invariant of OptionSpec.
- Exact-shape checks of plain mapping schemas in define_options().
- Name and short alias validation.

Conventions
- Test method names follow CamelCase per project convention.
"""
import time
import unittest
from types import MappingProxyType
from unittest import TestCase

from taskctr import OptionSpec, define_options


class OptionSpecTest(TestCase):
    """OptionSpec construction and read-only properties."""

    def testRequiredOption(self) -> None:
        spec = OptionSpec("string", "input file", short="i", required=True)
        self.assertEqual(spec.type, "string")
        self.assertEqual(spec.short, "i")
        self.assertTrue(spec.required)
        self.assertIsNone(spec.default)
        self.assertIs(spec.pytype, str)

    def testOptionalOptionKeepsFalsyDefault(self) -> None:
        spec = OptionSpec("boolean", "shout", default=False)
        self.assertFalse(spec.required)
        self.assertIs(spec.default, False)
        self.assertTrue(spec.boolean)
        self.assertIsNone(spec.short)

    def testRequiredWithDefaultRaises(self) -> None:
        with self.assertRaises(TypeError):
            OptionSpec("string", "input file", required=True, default="a.txt")

    def testOptionalWithoutDefaultRaises(self) -> None:
        with self.assertRaises(TypeError):
            OptionSpec("string", "input file")
        with self.assertRaises(TypeError):
            OptionSpec("string", "input file", required=False)

    def testDefaultOfWrongTypeRaises(self) -> None:
        with self.assertRaises(TypeError):
            OptionSpec("boolean", "shout", default="no")
        with self.assertRaises(TypeError):
            OptionSpec("string", "name", default=False)

    def testUnknownTypeRaises(self) -> None:
        with self.assertRaises(ValueError):
            OptionSpec("int", "count", default=1)

    def testBadShortRaises(self) -> None:
        with self.assertRaises(ValueError):
            OptionSpec("boolean", "shout", short="ab", default=False)
        with self.assertRaises(ValueError):
            OptionSpec("boolean", "shout", short="1", default=False)

    def testEmptyDescriptionRaises(self) -> None:
        with self.assertRaises(ValueError):
            OptionSpec("boolean", "   ", default=False)

    def testPropertiesAreReadOnly(self) -> None:
        spec = OptionSpec("boolean", "shout", default=False)
        with self.assertRaises(AttributeError):
            spec.default = True  # type: ignore[misc]

    def testAccepts(self) -> None:
        spec = OptionSpec("string", "name", default="world")
        self.assertTrue(spec.accepts("x"))
        self.assertFalse(spec.accepts(True))

    def testEqualityAndRepr(self) -> None:
        first = OptionSpec("boolean", "shout", short="l", default=False)
        second = OptionSpec("boolean", "shout", short="l", default=False)
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertTrue(repr(first).startswith("option-spec(type='boolean'"))


class DefineOptionsTest(TestCase):
    """define_options() validates whole schemas."""

    def testPlainMappingSchema(self) -> None:
        options = define_options({
            "input": {"type": "string", "short": "i", "description": "input file", "required": True},
            "dry-run": {"type": "boolean", "description": "do nothing", "default": False},
        })
        self.assertIsInstance(options, MappingProxyType)
        self.assertEqual(list(options), ["input", "dry-run"])
        self.assertIsInstance(options["input"], OptionSpec)
        self.assertTrue(options["input"].required)

    def testSchemaIsReadOnly(self) -> None:
        options = define_options({"loud": {"type": "boolean", "description": "shout", "default": False}})
        with self.assertRaises(TypeError):
            options["quiet"] = options["loud"]  # type: ignore[index]

    def testAcceptsOptionSpecs(self) -> None:
        spec = OptionSpec("boolean", "shout", default=False)
        self.assertIs(define_options({"loud": spec})["loud"], spec)

    def testEmptySchema(self) -> None:
        self.assertEqual(dict(define_options({})), {})

    def testUnknownFieldRaises(self) -> None:
        with self.assertRaises(TypeError) as context:
            define_options({"input": {"type": "string", "description": "input file", "requried": True}})
        self.assertIn("'requried'", str(context.exception))

    def testMissingFieldRaises(self) -> None:
        with self.assertRaises(TypeError):
            define_options({"input": {"type": "string", "required": True}})

    def testNonMappingRaises(self) -> None:
        with self.assertRaises(TypeError):
            define_options([("input", {"type": "string", "description": "x", "required": True})])
        with self.assertRaises(TypeError):
            define_options({"input": "string"})

    def testBadNameRaises(self) -> None:
        for name in ("1input", "-input", "in put", "input-", ""):
            with self.subTest(name=name), self.assertRaises(ValueError):
                define_options({name: {"type": "boolean", "description": "x", "default": False}})

    def testLongInvalidNameFailsFast(self) -> None:
        started = time.perf_counter()
        with self.assertRaises(ValueError):
            define_options({"a" * 64 + "!": {"type": "boolean", "description": "x", "default": False}})
        self.assertLess(time.perf_counter() - started, 1.0)

    def testHyphenatedNames(self) -> None:
        options = define_options({
            "dry-run": {"type": "boolean", "description": "x", "default": False},
            "log-level-2": {"type": "string", "description": "x", "default": "info"},
        })
        self.assertEqual(list(options), ["dry-run", "log-level-2"])
        with self.assertRaises(ValueError):
            define_options({"dry--run": {"type": "boolean", "description": "x", "default": False}})

    def testDuplicateShortRaises(self) -> None:
        with self.assertRaises(ValueError):
            define_options({
                "input": {"type": "string", "short": "i", "description": "input file", "required": True},
                "ignore": {"type": "boolean", "short": "i", "description": "ignore errors", "default": False},
            })


if __name__ == "__main__":
    unittest.main()
