"""
taskctr dispatcher: resolve a task from argv, validate its options, run it.

What this module provides
- Dispatcher: owns a Registry and drives one invocation per run() through
  Idle → Resolving → Parsing → Validating → Invoking → Done | Failed.
- create_dispatcher(program_or_base_task, ...): the factory tool authors call.

Quick start
    from taskctr import create_dispatcher, define_task

    build = define_task({
        "name": "build",
        "description": "compile the project",
        "options": {
            "target": {"type": "string", "short": "t", "description": "build target", "default": "debug"},
        },
    }, lambda options: print("building", options["target"]))

    tool = create_dispatcher("tool", shell=True)
    tool.register(build)
    tool.set_default(build)

    if __name__ == "__main__":
        tool.run()

Runtime flags
- shell: render faults with rich and exit(1) instead of raising them.
- fancy: draw faults inside a panel.
- colorful: style faults (palette overridable through __styles__ in __main__).

Failures always carry usage: the task listing when no task could be chosen,
the task's option listing when its options were wrong.
"""
import asyncio
import contextlib
import difflib
import enum
import inspect
import logging
import shlex
import sys
from collections.abc import Iterable

from .faults import *
from .parser import parse_and_validate, validate
from .registry import Registry
from .resolver import ResolvedInvocation, resolve
from .tasks import Task
from .usage import task_listing, task_usage
from .utils import *

logger = logging.getLogger(__name__)


class State(enum.Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    PARSING = "parsing"
    VALIDATING = "validating"
    INVOKING = "invoking"
    DONE = "done"
    FAILED = "failed"


async def _complete(awaitable):
    return await awaitable


class Dispatcher:
    """
    Registry owner and single-invocation runner.

    Parameters
    - program: name shown in usage and fault headers.
    - shell, fancy, colorful: runtime flags (see module docs).
    - scope: callable(task) -> context manager entered around the action call
      (e.g. a spinner). Defaults to a no-op scope.

    The registry must be fully built before run(); it is not thread-safe.
    """

    def __init__(self, program, /, *, shell=False, fancy=False, colorful=False, scope=Unset):
        if not isinstance(program, str):
            raise TypeError("dispatcher 'program' must be a string")
        if scope is not Unset and not callable(scope):
            raise TypeError("dispatcher 'scope' must be callable")

        self._program = program.strip()
        self._registry = Registry()
        self._scope = coalesce(scope, contextlib.nullcontext)
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)
        self.state = State.IDLE

    @property
    def program(self):
        return self._program

    @property
    def registry(self):
        return self._registry

    def __repr__(self):
        return f"dispatcher(program={self._program!r}, registry={self._registry!r}, state={self.state.value!r})"

    def __rich_repr__(self):
        yield "program", self._program
        yield "registry", self._registry
        yield "state", self.state.value

    def register(self, *tasks):
        """
        Register tasks (and their nested sub-tasks); later registrations of the
        same key overwrite earlier ones. Returns the registry.
        """
        for task in tasks:
            self._registry.register(task)
        return self._registry

    def set_default(self, task, /):
        """
        Run `task` (a Task or a registered key) when argv names no task.
        """
        self._registry.set_default(task)

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this dispatcher's runtime flags; marks the run failed.
        """
        self.state = State.FAILED
        trigger(fault, **options, tool=self, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def _tokens(self, argv):
        """
        Normalize run() input into a list of tokens.

        - Unset/None: sys.argv[1:]
        - str: shell-like string split with shlex
        - Iterable[str]: used as-is
        """
        if argv is Unset or argv is None:
            return sys.argv[1:]
        if isinstance(argv, str):
            return shlex.split(argv)
        if isinstance(argv, Iterable):
            tokens = list(argv)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("run() argument must be a string or an iterable of strings")
            return tokens
        raise TypeError("run() argument must be a string or an iterable of strings")

    def _resolve(self, tokens):
        self.state = State.RESOLVING
        listing = task_listing(self._program, self._registry)

        if self._registry.empty:
            return self.trigger(NoTasksRegisteredError("no tasks registered", usage=listing))

        if (resolved := resolve(tokens, self._registry)) is None:
            if self._registry.default is None:
                if not tokens:
                    return self.trigger(MissingTaskNameError("missing task", usage=listing))
                suggestions = difflib.get_close_matches(tokens[0], list(self._registry), 3)
                return self.trigger(MissingTaskNameError(
                    f"missing task, {tokens[0]!r} is not a registered task",
                    usage=listing,
                    input=tokens[0],
                    hint="did you mean %r?" % suggestions[0] if suggestions else None,
                ))
            resolved = ResolvedInvocation(None, 0, default=True)

        if (task := self._registry.lookup(resolved.key, default=resolved.default)) is None:
            return self.trigger(UnknownTaskNameError(
                f"unknown task {resolved.key or '(default)'!r}", usage=listing
            ))

        logger.debug("resolved %s task %r", "default" if resolved.default else "keyed", task.name)
        return resolved, task

    def _prepare(self, tokens):
        """
        Resolving → Parsing → Validating. Returns (task, validated args).
        """
        resolved, task = self._resolve(tokens)
        key = resolved.key or task.name
        usage = task_usage(self._program, task, key=key, default=resolved.default)

        self.state = State.PARSING
        try:
            args = parse_and_validate(task, tokens[resolved.consumed:], key=key, default=resolved.default)
        except ParseError as fault:
            return self.trigger(fault, usage=usage)

        self.state = State.VALIDATING
        try:
            args = validate(task, args)
        except ParseError as fault:
            return self.trigger(fault, usage=usage)

        return task, args

    def run(self, argv=Unset, /):
        """
        Run the task targeted by argv and return the action's result.

        Awaitable results are driven to completion with asyncio.run; use arun()
        when an event loop is already running.
        """
        task, args = self._prepare(self._tokens(argv))

        self.state = State.INVOKING
        logger.debug("invoking task %r", args.task)
        try:
            with self._scope(task):
                result = task.action(args.mask())
                if inspect.isawaitable(result):
                    try:
                        asyncio.get_running_loop()
                    except RuntimeError:
                        result = asyncio.run(_complete(result))
                    else:
                        if inspect.iscoroutine(result):
                            result.close()
                        raise RuntimeError("run() cannot await an action inside a running event loop, use arun()")
        except BaseException:
            self.state = State.FAILED
            raise

        self.state = State.DONE
        return result

    async def arun(self, argv=Unset, /):
        """
        Coroutine counterpart of run(); awaits asynchronous actions in the running loop.
        """
        task, args = self._prepare(self._tokens(argv))

        self.state = State.INVOKING
        logger.debug("invoking task %r", args.task)
        try:
            with self._scope(task):
                result = task.action(args.mask())
                if inspect.isawaitable(result):
                    result = await result
        except BaseException:
            self.state = State.FAILED
            raise

        self.state = State.DONE
        return result


def create_dispatcher(program, /, **options):
    """
    Create a Dispatcher for a program name or a base task.

    - str: the program name; tasks are registered afterwards.
    - Task: its name becomes the program name, it becomes the default task,
      and its sub-tasks are registered under their own names (the program
      name already stands for the base task on the command line).

    Keyword options (shell, fancy, colorful, scope) are forwarded to Dispatcher.
    """
    if isinstance(program, Task):
        dispatcher = Dispatcher(program.name, **options)
        for subtask in program.subtasks.values():
            dispatcher.register(subtask)
        dispatcher.set_default(program)
        return dispatcher
    if isinstance(program, str):
        return Dispatcher(program, **options)
    raise TypeError("create_dispatcher() argument must be a program name or a task")


__all__ = (
    "State",
    "Dispatcher",
    "create_dispatcher",
)
