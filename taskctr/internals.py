"""
Internal record plumbing shared by option specs and tasks.

RecordType is the metaclass behind OptionSpec and Task. It:
- derives a hyphenated __typename__ from the class name ("OptionSpec" → "option-spec")
  used as the subject of construction errors;
- exposes every name in __introspectable__ as a read-only property backed by a
  private "_name" field (see utils.mirror);
- provides stable __repr__/__rich_repr__ built from __displayable__ (or
  __introspectable__ when unset);
- wires the copy.replace() protocol so records can be copied with overrides
  (used to tag the default task) without ever being mutated in place.

Not part of the public API.
"""
import copy
import functools
import operator
import re

from .utils import *


class RecordType(type):
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__replace__")
        def __replace__(self, /, **overrides):
            """
            Return a shallow copy with some introspectable fields overridden.

            Unknown field names are rejected so typos cannot silently produce a
            copy identical to the original.
            """
            for name in overrides:
                if name not in type(self).__introspectable__:
                    raise TypeError(f"{type(self).__typename__} has no field {name!r}")
            clone = copy.copy(self)
            # containers owned by the record (sub-task tables) must not be shared
            for name, object in vars(self).items():
                if isinstance(object, (dict, list, set)):
                    setattr(clone, name, copy.copy(object))
            for name, object in overrides.items():
                setattr(clone, "_" + name, object)
            return clone
        self.__replace__ = __replace__

        return self


__all__ = ("RecordType",)
