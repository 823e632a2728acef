"""
Fault tests: codes, usage in str(), rendering and trigger() propagation.
"""
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console
from rich.panel import Panel

from taskctr import (
    FaultCode,
    MissingTaskNameError,
    ParseError,
    TaskException,
    UnknownOptionError,
    console,
    trigger,
)


def _render(renderable) -> str:
    buffer = io.StringIO()
    Console(file=buffer, width=120, color_system=None).print(renderable)
    return buffer.getvalue()


class FaultTest(TestCase):

    def testCodesAndTitles(self) -> None:
        fault = MissingTaskNameError("missing task")
        self.assertIs(fault.code, FaultCode.MISSING_TASK_NAME)
        self.assertEqual(fault.title, "missing task")
        self.assertIs(UnknownOptionError().code, FaultCode.UNKNOWN_OPTION)
        self.assertIs(ParseError().code, FaultCode.PARSE_ERROR)

    def testOptionsOverrideClassDefaults(self) -> None:
        fault = ParseError("bad", title="custom", code=FaultCode.UNKNOWN_OPTION)
        self.assertEqual(fault.title, "custom")
        self.assertIs(fault.code, FaultCode.UNKNOWN_OPTION)

    def testStrAppendsUsage(self) -> None:
        fault = MissingTaskNameError("missing task", usage="\nUsage: tool <task> <options>")
        self.assertEqual(str(fault), "missing task\n\nUsage: tool <task> <options>")
        self.assertEqual(str(MissingTaskNameError("missing task")), "missing task")

    def testReplaceKeepsTypeAndMergesOptions(self) -> None:
        fault = UnknownOptionError("unknown", hint="did you mean '--loud'?")
        replaced = fault.__replace__(usage="usage")
        self.assertIs(type(replaced), UnknownOptionError)
        self.assertEqual(replaced.hint, "did you mean '--loud'?")
        self.assertEqual(replaced.usage, "usage")
        self.assertIsNone(fault.usage)

    def testOptionsAreReadOnly(self) -> None:
        with self.assertRaises(TypeError):
            TaskException("x").options["shell"] = True  # type: ignore[index]

    def testNormalizeUsesHostCodes(self) -> None:
        self.assertEqual(FaultCode.MISSING_TASK_NAME.normalize(), "21102")
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.MISSING_TASK_NAME: "E-TASK"}, create=True):
            self.assertEqual(FaultCode.MISSING_TASK_NAME.normalize(), "E-TASK")


class RenderTest(TestCase):

    def setUp(self) -> None:
        self.fault = MissingTaskNameError(
            "missing task, 'bulid' is not a registered task",
            hint="did you mean 'build'?",
            usage="Usage: tool <task> <options>",
        )

    def testPlainRendering(self) -> None:
        output = _render(self.fault)
        self.assertIn("21102", output)
        self.assertIn("Missing Task", output)
        self.assertIn("'bulid' is not a registered task", output)
        self.assertIn("did you mean 'build'?", output)
        self.assertIn("Usage: tool <task> <options>", output)

    def testFancyRenderingUsesPanel(self) -> None:
        self.assertIsInstance(self.fault.__replace__(fancy=True).__rich__(), Panel)

    def testProgramFromTool(self) -> None:
        tool = mock.Mock(program="mytool")
        self.assertIn("mytool", _render(self.fault.__replace__(tool=tool)))


class TriggerTest(TestCase):

    def testRaisesOutsideShell(self) -> None:
        with self.assertRaises(MissingTaskNameError) as context:
            trigger(MissingTaskNameError("missing task"), usage="usage")
        self.assertEqual(context.exception.usage, "usage")

    def testShellPrintsAndExits(self) -> None:
        with self.assertRaises(SystemExit) as context:
            with console.capture() as capture:
                trigger(MissingTaskNameError("missing task"), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("missing task", capture.get())

    def testRejectsNonFaults(self) -> None:
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testKeepsCause(self) -> None:
        cause = KeyError("token")
        try:
            raise ParseError("bad input") from cause
        except ParseError as fault:
            with self.assertRaises(ParseError) as context:
                trigger(fault, usage="usage")
        self.assertIs(context.exception.__cause__, cause)
        self.assertEqual(context.exception.usage, "usage")

    def testNoCauseStaysSuppressed(self) -> None:
        with self.assertRaises(ParseError) as context:
            trigger(ParseError("bad input"))
        self.assertIsNone(context.exception.__cause__)
        self.assertTrue(context.exception.__suppress_context__)


if __name__ == "__main__":
    unittest.main()
