r"""
taskctr option specifications.

Overview
- OptionSpec: one declared option of a task, either a string option or a
  boolean flag, reachable as --<long> and optionally -<short>.
- define_options(schema): validate a whole schema (long name → spec) and
  return it as a read-only, insertion-ordered mapping.

Metadata (sanitized on construction)
- type: "string" | "boolean"
- short: Unset | single ASCII letter
- description: non-empty str | Text
- required / default: exactly one of the two shapes
  • required=True with no default: the caller must supply the value.
  • required omitted/False with a default of matching type.
  Anything else (both, neither, default of the wrong type) is rejected.

Schemas may be written as plain mappings:

    >>> define_options({
    ...     "input": {"type": "string", "short": "i", "description": "input file", "required": True},
    ...     "loud": {"type": "boolean", "description": "shout", "default": False},
    ... })

Plain mappings must have exactly the documented keys; unknown keys are a
TypeError so that typos ("requried") are caught at definition time.
"""
import re
from collections.abc import Mapping
from types import MappingProxyType

from rich.text import Text

from .internals import RecordType
from .utils import *

# Declared type name → runtime Python type of the parsed value.
TYPES = MappingProxyType({
    "string": str,
    "boolean": bool,
})

FIELDS = frozenset(("type", "short", "description", "required", "default"))


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the descriptive fields of an option spec.

    - type: must be one of the keys of TYPES.
    - short: Unset or a single ASCII letter.
    - description: non-empty after trimming.

    Mutates metadata in place.
    """
    if not isinstance(type := metadata["type"], str):
        raise TypeError(f"{cls.__typename__} 'type' must be a string")
    elif type not in TYPES:
        raise ValueError(f"{cls.__typename__} 'type' must be one of {listify(map(repr, TYPES))}")

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and not re.fullmatch(r"[A-Za-z]", short):
        raise ValueError(f"{cls.__typename__} 'short' must be a single letter")
    metadata["short"] = coalesce(short)

    if not isinstance(description := metadata["description"], str | Text):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    elif isinstance(description, str) and not (description := description.strip()):
        raise ValueError(f"{cls.__typename__} 'description' cannot be empty")
    metadata["description"] = description


def _sanitize_requirement(cls, metadata, /):
    """
    Internal: enforce the required-xor-default invariant.

    - required=True  → default must be absent.
    - required=False or absent → default must be present and match 'type'.

    Booleans are checked strictly: 0/1 are not accepted as boolean defaults and a
    boolean is not accepted as a string default.
    """
    if not isinstance(required := metadata["required"], bool | Unset):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")

    default = metadata["default"]
    if required:
        if default is not Unset:
            raise TypeError(f"{cls.__typename__} required option cannot have a 'default'")
    else:
        if default is Unset:
            raise TypeError(f"{cls.__typename__} optional option must have a 'default'")
        if not isinstance(default, TYPES[metadata["type"]]):
            raise TypeError(f"{cls.__typename__} 'default' must be of type {metadata["type"]!r}")

    metadata["required"] = bool(required)
    metadata["default"] = coalesce(default)


class OptionSpec(metaclass=RecordType):
    """
    Immutable description of one task option.

    Properties
    - type, short, description, required, default (read-only).
    - pytype: the Python type a parsed value of this option has (str or bool).
    """

    __introspectable__ = (
        "type",
        "short",
        "description",
        "required",
        "default",
    )

    def __init__(self, type, /, description, *, short=Unset, required=Unset, default=Unset):
        metadata = {
            "type": type,
            "short": short,
            "description": description,
            "required": required,
            "default": default,
        }
        _sanitize_metadata(OptionSpec, metadata)
        _sanitize_requirement(OptionSpec, metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def pytype(self):
        return TYPES[self.type]

    @property
    def boolean(self):
        return self.type == "boolean"

    def accepts(self, value, /):
        """
        whether a parsed value has the runtime type this option declares.
        """
        return isinstance(value, self.pytype)

    def __eq__(self, other):
        if not isinstance(other, OptionSpec):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in OptionSpec.__introspectable__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in OptionSpec.__introspectable__))


def _resolve_spec(name, object):
    """
    Turn one schema entry into an OptionSpec, checking the exact shape of plain mappings.
    """
    if isinstance(object, OptionSpec):
        return object
    if not isinstance(object, Mapping):
        raise TypeError(f"option {name!r} must be an option-spec or a mapping")

    if unknown := sorted(set(object) - FIELDS):
        raise TypeError(f"option {name!r} has unknown {pluralize("field", len(unknown))} {listify(map(repr, unknown))}")
    if missing := [field for field in ("type", "description") if field not in object]:
        raise TypeError(f"option {name!r} is missing {pluralize("field", len(missing))} {listify(map(repr, missing))}")

    return OptionSpec(
        object["type"],
        object["description"],
        short=object.get("short", Unset),
        required=object.get("required", Unset),
        default=object.get("default", Unset),
    )


def define_options(schema, /):
    """
    Validate an option schema and return it as a read-only mapping.

    Parameters
    - schema: Mapping[str, OptionSpec | Mapping]
      Long option name → spec. Names start with a letter and may contain
      hyphen-separated segments of letters and digits ("output", "dry-run").

    Returns
    - MappingProxyType[str, OptionSpec] preserving the declaration order.

    Raises
    - TypeError: the schema or an entry has the wrong shape.
    - ValueError: a name is invalid, or a short alias is used twice.
    """
    if not isinstance(schema, Mapping):
        raise TypeError("define_options() argument must be a mapping")

    options = {}
    shorts = {}
    for name, object in schema.items():
        if not isinstance(name, str):
            raise TypeError("option names must be strings")
        elif not re.fullmatch(r"[^\W\d_][^\W_]*(-[^\W_]+)*", name):
            raise ValueError(f"option name {name!r} must start with a letter (hyphen-separated segments are allowed)")

        spec = options[name] = _resolve_spec(name, object)

        if spec.short is not None:
            if spec.short in shorts:
                raise ValueError(f"short alias {spec.short!r} is used by both {shorts[spec.short]!r} and {name!r}")
            shorts[spec.short] = name

    return MappingProxyType(options)


__all__ = (
    "OptionSpec",
    "define_options",
)
