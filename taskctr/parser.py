"""
Option parsing and validation for one task.

Pipeline
1. tokenize the argv tail against the task's option schema; tokenizer errors are
   re-raised as typed ParseError subclasses with the task name substituted in.
2. fill in defaults of optional options; collect every required option that is
   still absent.
3. fail once, naming all missing options ("a", "a" and "b", "a", "b", and "c").
4. return a ValidatedArgs mapping annotated with the task key and whether the
   task ran as the default.

validate() is the last gate before user code: it re-checks presence and the
runtime type of every declared option, whatever produced the mapping.
"""
import logging
from collections.abc import Mapping
from types import MappingProxyType

from .faults import *
from .tokenizer import *
from .utils import listify, pluralize

logger = logging.getLogger(__name__)

_FAULTS = MappingProxyType({
    INVALID_OPTION_VALUE: InvalidOptionValueError,
    UNKNOWN_OPTION: UnknownOptionError,
    UNEXPECTED_POSITIONAL: UnexpectedPositionalError,
})


class ValidatedArgs(Mapping):
    """
    Read-only option values of one invocation.

    Attributes
    - task: the resolved task key (the task name when it ran as the default).
    - default: whether the task ran as the default task.

    mask() returns a plain dict holding only the options the task declares,
    which is what the action receives.
    """

    def __init__(self, values, /, *, task, default=False, options=None):
        self._values = dict(values)
        self._options = options
        self.task = task
        self.default = bool(default)

    def __getitem__(self, key):
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return f"validated-args({self._values!r}, task={self.task!r}, default={self.default!r})"

    def __rich_repr__(self):
        yield self._values
        yield "task", self.task
        yield "default", self.default

    def mask(self):
        if self._options is None:
            return dict(self._values)
        return {name: self._values[name] for name in self._options if name in self._values}


def _quote(names):
    return listify(f'"{name}"' for name in names)


def _missing(names, **options):
    return MissingRequiredOptionsError(
        "missing required %s %s" % (pluralize("option", len(names)), _quote(names)),
        missing=tuple(names),
        hint="pass %s" % listify("--" + name for name in names),
        **options
    )


def parse_and_validate(task, argv, /, *, key=None, default=False, tokenizer=tokenize):
    """
    Turn the argv tail of a task into validated option values.

    Parameters
    - task: Task whose option schema applies.
    - argv: Sequence[str] remaining after the task name.
    - key: resolved registry key (defaults to task.name); used in messages.
    - default: whether the task is running as the default task.
    - tokenizer: callable(options, args) -> object with a `values` mapping,
      raising TokenizerError on bad input.

    Returns
    - ValidatedArgs.

    Raises
    - InvalidOptionValueError / UnknownOptionError / UnexpectedPositionalError
      for tokenizer rejections, ParseError for tokenizer errors without a known code.
    - MissingRequiredOptionsError naming every missing required option.
    """
    key = key or task.name
    try:
        tokenized = tokenizer(task.options, list(argv))
    except TokenizerError as error:
        fault = _FAULTS.get(error.code, ParseError)
        message = error.message.replace("this task", f'task "{key}"')
        hint = None
        if error.suggestions:
            hint = "did you mean %r?" % error.suggestions[0]
        raise fault(message, token=error.token, index=error.index, hint=hint) from error

    values = dict(tokenized.values)
    missing = []
    for name, spec in task.options.items():
        if name in values:
            continue
        if not spec.required:
            values[name] = spec.default
        else:
            missing.append(name)

    if missing:
        raise _missing(missing)

    logger.debug("parsed options for task %r: %r", key, values)
    return ValidatedArgs(values, task=key, default=default, options=task.options)


def validate(task, values, /):
    """
    Check an options mapping against a task's schema before it reaches user code.

    Every declared option must be present and hold a value of the declared
    type (str for "string", bool for "boolean"). Keys the task does not declare
    are ignored here and dropped by ValidatedArgs.mask().

    Returns the mapping as ValidatedArgs (annotations are kept when values
    already is one).
    """
    if not isinstance(values, Mapping):
        raise InvalidOptionValueError("options must be a mapping")

    if missing := [name for name in task.options if name not in values]:
        raise _missing(missing)

    for name, spec in task.options.items():
        if not spec.accepts(values[name]):
            raise InvalidOptionValueError(
                f'option "{name}" should be of type "{spec.type}"',
                hint=f"got {type(values[name]).__name__} {values[name]!r}",
            )

    if isinstance(values, ValidatedArgs):
        return ValidatedArgs(values, task=values.task, default=values.default, options=task.options)
    return ValidatedArgs(values, task=task.name, options=task.options)


__all__ = (
    "ValidatedArgs",
    "parse_and_validate",
    "validate",
)
