"""
taskctr tasks: named actions with an option schema.

What this module provides
- Task: an immutable record (name, description, options, action) that can own
  nested sub-tasks. Sub-tasks are reachable from the command line as
  "<task> <subtask>" once the parent is registered with a dispatcher.
- define_task(data, action): build a Task from a plain data mapping, directly
  or as a decorator.

Quick example
    from taskctr import define_task, create_dispatcher

    @define_task({
        "name": "greet",
        "description": "say hello",
        "options": {
            "name": {"type": "string", "short": "n", "description": "who to greet", "required": True},
            "loud": {"type": "boolean", "short": "l", "description": "shout", "default": False},
        },
    })
    def greet(options):
        message = f"hello, {options['name']}"
        print(message.upper() if options["loud"] else message)

    create_dispatcher("tool").register(greet)

Notes
- Tasks are never mutated by the dispatcher. Marking a task as the default
  stores copy.replace(task, default=True) in a separate slot.
- The action receives a single mapping with exactly the declared options.
"""
import re
from collections.abc import Mapping

from rich.text import Text

from .internals import RecordType
from .options import define_options
from .utils import *

FIELDS = frozenset(("name", "description", "options"))


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the identity fields of a task.

    - name: starts with an ASCII letter; words separated by single spaces
      (multi-word names are how sub-task keys look once composed).
    - description: non-empty after trimming.
    - action: callable.
    - options: run through define_options().
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not re.fullmatch(r"[A-Za-z]\S*( \S+)*", name):
        raise ValueError(f"{cls.__typename__} 'name' must start with a letter, got {name!r}")

    if not isinstance(description := metadata["description"], str | Text):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    elif isinstance(description, str) and not (description := description.strip()):
        raise ValueError(f"{cls.__typename__} 'description' cannot be empty")
    metadata["description"] = description

    if not callable(metadata["action"]):
        raise TypeError(f"{cls.__typename__} 'action' must be callable")

    metadata["options"] = define_options(metadata["options"])


class Task(metaclass=RecordType):
    """
    A task that can be registered with a dispatcher and run.

    Properties (read-only)
    - name, description, options, action
    - subtasks: mapping of sub-task name → Task, in registration order
    - default: whether this record is the tagged copy stored as a dispatcher default
    """

    __introspectable__ = (
        "name",
        "description",
        "options",
        "action",
        "subtasks",
        "default",
    )

    __displayable__ = (
        "name",
        "description",
        "options",
        "subtasks",
        "default",
    )

    def __init__(self, name, description, options, action, /, *, default=False):
        metadata = {
            "name": name,
            "description": description,
            "options": options,
            "action": action,
        }
        _sanitize_metadata(Task, metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._subtasks = {}
        self._default = bool(default)

    def register(self, *subtasks):
        """
        Nest sub-tasks under this task.

        A sub-task named "bar" under a task named "foo" is registered with a
        dispatcher as "foo bar". Registering a sub-task under a name that is
        already taken replaces the previous one.

        Returns the (read-only) sub-task mapping.
        """
        for subtask in subtasks:
            if not isinstance(subtask, Task):
                raise TypeError(f"{Task.__typename__} register() arguments must be tasks")
            if subtask is self:
                raise ValueError(f"{Task.__typename__} {self.name!r} cannot be its own sub-task")
            self._subtasks[subtask.name] = subtask
        return self.subtasks

    def walk(self, prefix=""):
        """
        Yield (key, task) pairs for this task and every nested sub-task.

        Keys are the space-joined names from the outermost task down, so a task
        "foo" with a sub-task "bar" yields ("foo", foo) then ("foo bar", bar).
        """
        key = f"{prefix} {self.name}".strip()
        yield key, self
        for subtask in self._subtasks.values():
            yield from subtask.walk(key)

    def __call__(self, options, /):
        """
        Invoke the action directly with an options mapping (bypasses parsing).
        """
        return self._action(options)


def define_task(data, action=Unset, /):
    """
    Build a Task from a data mapping and an action.

    Invocation modes
    - Direct:    task = define_task(data, action)
    - Decorator: @define_task(data) over the action function

    Parameters
    - data: Mapping with exactly the keys "name", "description" and "options".
    - action: callable receiving the validated options mapping; may return an
      awaitable, which the dispatcher awaits.

    Raises
    - TypeError: data is not a mapping, has unknown or missing keys, or action
      is not callable.
    - ValueError: a field has an invalid value (see Task and define_options).
    """
    if not isinstance(data, Mapping):
        raise TypeError("define_task() first argument must be a mapping")
    if unknown := sorted(set(data) - FIELDS):
        raise TypeError(f"task data has unknown {pluralize("field", len(unknown))} {listify(map(repr, unknown))}")
    if missing := sorted(FIELDS - set(data)):
        raise TypeError(f"task data is missing {pluralize("field", len(missing))} {listify(map(repr, missing))}")

    @rename("define_task")
    def wrapper(action, /):
        if not callable(action):
            raise TypeError("@define_task() must be applied to a callable")
        return Task(data["name"], data["description"], data["options"], action)

    return wrapper(action) if action is not Unset else wrapper


__all__ = (
    "Task",
    "define_task",
)
