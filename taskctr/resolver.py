"""
Task name resolution.

resolve() decides which registered task an argv targets and how many leading
tokens spell its name. Multi-word keys ("foo bar") are matched by joining
tokens with single spaces, so sub-tasks need no tree walk:

    >>> resolve(["foo", "bar", "--x", "1"], registry)  # registry has "foo bar"
    ResolvedInvocation(key='foo bar', consumed=2, default=False)

A parent task registered next to its sub-tasks ("remote", "remote add") does
not shadow them: "remote add" wins for argv ["remote", "add", ...], while
["remote", "--flag"] still runs "remote".

A failed resolution returns None; falling back to the default task is the
dispatcher's decision, not the resolver's.
"""
import logging
from typing import NamedTuple

logger = logging.getLogger(__name__)


class ResolvedInvocation(NamedTuple):
    key: str | None
    consumed: int
    default: bool = False


def _extended(name, keys):
    # whether some key continues `name` with further words
    prefix = name + " "
    return any(key.startswith(prefix) for key in keys)


def resolve(argv, registry, /):
    """
    Find the task targeted by argv.

    Steps
    1. empty argv → None.
    2. argv[0] is a key and no longer key starts with it → consumed 1.
    3. otherwise join argv[0], argv[0] + " " + argv[1], ... while some key
       still extends the joined name, and keep the longest joined prefix that
       is a key.
    4. no prefix matches → None.

    Returns ResolvedInvocation | None.
    """
    if not argv:
        return None

    keys = set(registry.keys())
    if argv[0] in keys and not _extended(argv[0], keys):
        logger.debug("resolved task %r from first token", argv[0])
        return ResolvedInvocation(argv[0], 1)

    resolved = None
    name = ""
    for index, token in enumerate(argv, start=1):
        name += token
        if name in keys:
            resolved = ResolvedInvocation(name, index)
        if not _extended(name, keys):
            break
        name += " "

    if resolved is None:
        logger.debug("no task matches %r", argv[0])
    else:
        logger.debug("resolved task %r from %d tokens", resolved.key, resolved.consumed)
    return resolved


__all__ = (
    "ResolvedInvocation",
    "resolve",
)
