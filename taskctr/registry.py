"""
Task registry: task key → Task, plus a dedicated default slot.

Keys are task names, or "<task> <subtask>" for nested sub-tasks. The default
task does not live in the key space: it is stored in its own slot as a copy
tagged default=True, so a task literally named like a sentinel can never
collide with it, and marking a task default leaves its keyed entry in place.

Policies
- register() overwrites silently (last write wins).
- set_default() coexists with the original keyed entry.
- Iteration order is insertion order; it only matters for usage listings.
"""
import copy
import logging
from collections.abc import Mapping

from .faults import UnknownTaskNameError
from .tasks import Task

logger = logging.getLogger(__name__)


class Registry(Mapping):
    """
    Read-mostly mapping of registered tasks.

    Mapping protocol (len, iteration, membership, item access) covers keyed
    tasks only; the default lives in `default`.
    """

    def __init__(self):
        self._tasks = {}
        self._default = None

    def __getitem__(self, key):
        return self._tasks[key]

    def __iter__(self):
        return iter(self._tasks)

    def __len__(self):
        return len(self._tasks)

    def __repr__(self):
        return f"registry(tasks={list(self._tasks)!r}, default={getattr(self._default, "name", None)!r})"

    def __rich_repr__(self):
        yield "tasks", list(self._tasks)
        yield "default", getattr(self._default, "name", None)

    @property
    def default(self):
        """
        the tagged default task, or None when no default was set.
        """
        return self._default

    @property
    def empty(self):
        return not self._tasks and self._default is None

    def register(self, task, /):
        """
        Insert a task under its name, and every nested sub-task under its
        composed "<task> <subtask>" key.

        Returns the registry itself so calls can be chained or inspected.
        """
        if not isinstance(task, Task):
            raise TypeError("register() argument must be a task")
        for key, entry in task.walk():
            if key in self._tasks:
                logger.debug("overwriting task %r", key)
            else:
                logger.debug("registering task %r", key)
            self._tasks[key] = entry
        return self

    def set_default(self, task, /):
        """
        Mark a task as the default, by reference or by registered key.

        The stored default is copy.replace(task, default=True); the keyed entry,
        if any, is left untouched. Raises UnknownTaskNameError when given a key
        that is not registered.
        """
        if isinstance(task, str):
            try:
                task = self._tasks[task]
            except KeyError:
                raise UnknownTaskNameError(f"unknown task {task!r}", task=task) from None
        elif not isinstance(task, Task):
            raise TypeError("set_default() argument must be a task or a task name")

        logger.debug("setting default task %r", task.name)
        self._default = copy.replace(task, default=True)

    def lookup(self, key, /, *, default=False):
        """
        Return the task for a resolved key, or the default task when default is
        true. Returns None when nothing matches.
        """
        if default:
            return self._default
        return self._tasks.get(key)


__all__ = ("Registry",)
