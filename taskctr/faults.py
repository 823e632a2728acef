"""
taskctr faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing failure.
  Codes are grouped by phase (dispatch, options, validation) to keep copy
  consistent and make logs/searches predictable.
- TaskException: base type that carries a message plus options (title, code,
  hint, usage, runtime flags) and knows how to render itself with rich.
- ParseError: base for everything that goes wrong while turning the argv tail
  into validated options.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).

Propagation
- Outside shell mode (tests, embedding), faults are raised.
- In shell mode, faults are rendered to stderr and the process exits with status 1.

Every fault carries the usage text of the context it was raised in (the task
listing or the option listing of one task); str(fault) is message + usage.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .terminal import console
from .utils import Unset, coalesce


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - dispatch (2110x)
      • NO_TASKS_REGISTERED, MISSING_TASK_NAME, UNKNOWN_TASK_NAME
    - options (2111x)
      • INVALID_OPTION_VALUE, UNKNOWN_OPTION, UNEXPECTED_POSITIONAL
    - validation (2112x)
      • MISSING_REQUIRED_OPTIONS
    - fallback (2113x)
      • PARSE_ERROR, for tokenizer failures without a recognised code

    hosts can relabel codes through a __codes__ mapping in __main__ (see normalize()).
    """
    # --- dispatch errors ---
    NO_TASKS_REGISTERED      = 21101
    MISSING_TASK_NAME        = 21102
    UNKNOWN_TASK_NAME        = 21103

    # --- option errors ---
    INVALID_OPTION_VALUE     = 21111
    UNKNOWN_OPTION           = 21112
    UNEXPECTED_POSITIONAL    = 21113

    # --- validation errors ---
    MISSING_REQUIRED_OPTIONS = 21121

    # --- fallback ---
    PARSE_ERROR              = 21131

    def normalize(self):
        """
        return a host-normalized string for this code.

        when __main__ defines no __codes__ mapping the numeric value is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class TaskException(Exception):
    __code__ = Unset
    __title__ = "task error"

    def __init__(self, message="", /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", coalesce(type(self).__code__))

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def usage(self):
        return self.options.get("usage")

    def __str__(self):
        if self.usage:
            return f"{self.message}\n{self.usage}"
        return self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "usage": "#737373",  # dim footer gray
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        tool = self.options.get("tool")
        prog = text(getattr(main, "__prog__", getattr(tool, "program", "") or "taskctr"), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "-"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        body = [text(self.message, styler("error-message"))]
        if self.hint:
            body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))
        if self.usage:
            body.append(text(self.usage, styler("usage")))

        if fancy:
            return Panel(Group(*body), title=header, title_align="left")

        return Group(header, *body)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from self.__cause__
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        clone = type(self)(self.message, **{**self.options, **overrides})
        clone.__cause__ = self.__cause__
        return clone


class NoTasksRegisteredError(TaskException):
    __code__ = FaultCode.NO_TASKS_REGISTERED
    __title__ = "no tasks registered"


class MissingTaskNameError(TaskException):
    __code__ = FaultCode.MISSING_TASK_NAME
    __title__ = "missing task"


class UnknownTaskNameError(TaskException):
    __code__ = FaultCode.UNKNOWN_TASK_NAME
    __title__ = "unknown task"


class ParseError(TaskException):
    __code__ = FaultCode.PARSE_ERROR
    __title__ = "parse error"


class InvalidOptionValueError(ParseError):
    __code__ = FaultCode.INVALID_OPTION_VALUE
    __title__ = "invalid option value"


class UnknownOptionError(InvalidOptionValueError):
    __code__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"


class UnexpectedPositionalError(InvalidOptionValueError):
    __code__ = FaultCode.UNEXPECTED_POSITIONAL
    __title__ = "unexpected argument"


class MissingRequiredOptionsError(ParseError):
    __code__ = FaultCode.MISSING_REQUIRED_OPTIONS
    __title__ = "missing required options"

    @property
    def missing(self):
        """
        long names of every required option that was not supplied, in schema order.
        """
        return tuple(self.options.get("missing", ()))


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see TaskException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the fault is rendered and the process exits; otherwise it is raised.

    typical options
    - tool, shell, fancy, colorful, title, code, hint, usage.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "TaskException",
    "NoTasksRegisteredError",
    "MissingTaskNameError",
    "UnknownTaskNameError",
    "ParseError",
    "InvalidOptionValueError",
    "UnknownOptionError",
    "UnexpectedPositionalError",
    "MissingRequiredOptionsError",
    "trigger",
)
