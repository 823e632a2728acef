"""
Tokenizer tests: accepted option forms and the stable error codes.
"""
import unittest
from unittest import TestCase

from taskctr import define_options
from taskctr.tokenizer import *
from taskctr.tokenizer import _ordinal

OPTIONS = define_options({
    "input": {"type": "string", "short": "i", "description": "input file", "required": True},
    "output": {"type": "string", "short": "o", "description": "output file", "default": "out.txt"},
    "loud": {"type": "boolean", "short": "l", "description": "shout", "default": False},
    "verbose": {"type": "boolean", "short": "v", "description": "chatty", "default": False},
})


class TokenizeFormsTest(TestCase):

    def assertValues(self, args, expected) -> None:
        self.assertEqual(tokenize(OPTIONS, args).values, expected)

    def testLongSpaced(self) -> None:
        self.assertValues(["--input", "a.txt"], {"input": "a.txt"})

    def testLongInline(self) -> None:
        self.assertValues(["--input=a.txt"], {"input": "a.txt"})
        self.assertValues(["--input="], {"input": ""})
        self.assertValues(["--input=-weird"], {"input": "-weird"})

    def testShortForms(self) -> None:
        self.assertValues(["-i", "a.txt"], {"input": "a.txt"})
        self.assertValues(["-ia.txt"], {"input": "a.txt"})

    def testBooleans(self) -> None:
        self.assertValues(["--loud"], {"loud": True})
        self.assertValues(["-lv"], {"loud": True, "verbose": True})

    def testGroupEndingWithStringOption(self) -> None:
        self.assertValues(["-li", "a.txt"], {"loud": True, "input": "a.txt"})
        self.assertValues(["-lia.txt"], {"loud": True, "input": "a.txt"})

    def testLastOccurrenceWins(self) -> None:
        self.assertValues(["-i", "a.txt", "--input", "b.txt"], {"input": "b.txt"})

    def testOnlyGivenOptionsAppear(self) -> None:
        self.assertValues([], {})

    def testDashIsAValue(self) -> None:
        self.assertValues(["--input", "-"], {"input": "-"})

    def testTerminatorCollectsPositionals(self) -> None:
        tokenized = tokenize(OPTIONS, ["--loud", "--", "-x", "file"], positionals=True)
        self.assertEqual(tokenized.values, {"loud": True})
        self.assertEqual(tokenized.positionals, ("-x", "file"))


class TokenizeErrorsTest(TestCase):

    def assertFails(self, args, code, **options) -> TokenizerError:
        with self.assertRaises(TokenizerError) as context:
            tokenize(OPTIONS, args, **options)
        self.assertEqual(context.exception.code, code)
        return context.exception

    def testBooleanWithValue(self) -> None:
        error = self.assertFails(["--loud=yes"], INVALID_OPTION_VALUE)
        self.assertEqual(error.message, "option '--loud' does not take an argument at first position")
        self.assertEqual(error.token, "--loud=yes")
        self.assertEqual(error.index, 1)

    def testMissingValue(self) -> None:
        error = self.assertFails(["--loud", "--input"], INVALID_OPTION_VALUE)
        self.assertEqual(error.message, "option '--input <value>' argument missing at second position")

    def testAmbiguousValue(self) -> None:
        error = self.assertFails(["--input", "--output", "b.txt"], INVALID_OPTION_VALUE)
        self.assertIn("'--input=--output'", error.message)

    def testUnknownOption(self) -> None:
        error = self.assertFails(["--verbos"], UNKNOWN_OPTION)
        self.assertEqual(error.message, "unknown option '--verbos' for this task at first position")
        self.assertEqual(error.suggestions[0], "--verbose")

    def testUnknownShortOption(self) -> None:
        self.assertFails(["-q"], UNKNOWN_OPTION)

    def testUnknownOptionAllowedWhenNotStrict(self) -> None:
        self.assertEqual(tokenize(OPTIONS, ["--extra"], strict=False).values, {"extra": True})

    def testPositional(self) -> None:
        error = self.assertFails(["--loud", "file"], UNEXPECTED_POSITIONAL)
        self.assertEqual(
            error.message,
            "unexpected argument 'file', this task does not take positional arguments at second position",
        )

    def testPositionalAfterTerminator(self) -> None:
        self.assertFails(["--", "file"], UNEXPECTED_POSITIONAL)


class OrdinalTest(TestCase):

    def testWords(self) -> None:
        self.assertEqual(_ordinal(1), "first")
        self.assertEqual(_ordinal(10), "tenth")

    def testSuffixes(self) -> None:
        self.assertEqual(_ordinal(11), "11th")
        self.assertEqual(_ordinal(13), "13th")
        self.assertEqual(_ordinal(21), "21st")
        self.assertEqual(_ordinal(22), "22nd")
        self.assertEqual(_ordinal(103), "103rd")
        self.assertEqual(_ordinal(112), "112th")


if __name__ == "__main__":
    unittest.main()
