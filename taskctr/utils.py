"""
taskctr utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/False.

- @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) as an immutable view.

- pluralize(text, count)
  • English pluralization for fault messages ("option" → "options").

- listify(items)
  • Human list joining: "a", "a and b", "a, b, and c".

Stability and contract
- These utilities are re-exported via __all__; names not in __all__ are internal.
"""
import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType


class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used where None (or False, or "") is a legitimate user value and the API needs
    to tell “not provided” apart from “provided”. An option default of False is a
    real default; an option without a default is Unset.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and False.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or False are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(False, True)        -> False
    """
    return object if object is not Unset else default


def rename(name, /):
    """
    Decorator giving a generated function a stable __name__/__qualname__.

    Record methods built inside the metaclass and the define_task() decorator
    would otherwise show up as "wrapper" or "<locals>" in tracebacks.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("@rename() must be applied to a callable")
        function.__qualname__ = function.__name__ = name
        return function

    return decorator


def _freeze(object):
    """
    Shallow read-only view of a container value.

    - Mapping → MappingProxyType (keys and order preserved)
    - Sequence (non-string) → tuple
    - Set → frozenset
    - Anything else → returned as-is
    """
    if isinstance(object, MappingProxyType):
        return object
    if isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    if isinstance(object, Set) and not isinstance(object, frozenset):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The property reads "_{name}" from the instance and returns an immutable view
    for container types, so records such as tasks and option specs cannot be
    mutated through their public API.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, count=2, /):
    """
    Best-effort English pluralizer for the last word of a phrase.

    Returns the text unchanged when count is 1. Only the regular rules needed by
    fault copy are covered (s/sh/ch/x/z → +es, consonant+y → -ies, otherwise +s).

    Examples
    - pluralize("option", 1)          -> "option"
    - pluralize("option", 3)          -> "options"
    - pluralize("required option")    -> "required options"
    - pluralize("Task")               -> "Tasks"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")
    if count == 1 or not (match := re.search(r"(\S+)(\s*)$", text)):
        return text

    head, last, trail = text[:match.start(1)], match.group(1), match.group(2)
    lower = last.lower()

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if last.isupper():
        plural = plural.upper()
    elif last[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


def listify(items, /):
    """
    Join items the way a person would write them.

    - []              -> ""
    - ["a"]           -> "a"
    - ["a", "b"]      -> "a and b"
    - ["a", "b", "c"] -> "a, b, and c"
    """
    items = [str(item) for item in items]
    match len(items):
        case 0:
            return ""
        case 1:
            return items[0]
        case 2:
            return " and ".join(items)
        case _:
            return ", ".join(items[:-1]) + ", and " + items[-1]


Unset = UnsetType()


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "listify",
)
