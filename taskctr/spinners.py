"""
Terminal spinner as a scoped resource.

The spinner owns process-wide terminal state (cursor visibility, a live region
on stderr). It is only ever held inside a `with` block, so the cursor is
restored on every exit path, KeyboardInterrupt included.

Two ways to use it
- as a dispatcher scope, around every action:

    create_dispatcher("tool", scope=lambda task: spinner(f"running {task.name}..."))

- around one piece of work inside an action:

    text = await with_spinner("thinking...", fetch_answer)
"""
import contextlib

from rich.spinner import SPINNERS
from rich.status import Status

from .terminal import console


def _sanitize_sequence(sequence):
    if not isinstance(sequence, str):
        raise TypeError("spinner sequence must be a string")
    if sequence not in SPINNERS:
        raise ValueError(f"unknown spinner sequence {sequence!r}")
    return sequence


@contextlib.contextmanager
def spinner(text, /, sequence="dots", *, style="status.spinner"):
    """
    Show a spinner with text for the duration of a with block.

    Parameters
    - text: message shown next to the spinner.
    - sequence: name of a rich spinner ("dots", "simpleDots", "line", ...).
    - style: rich style of the spinner glyph.

    Yields the underlying rich Status so callers can update() the text.
    """
    status = Status(text, spinner=_sanitize_sequence(sequence), spinner_style=style, console=console)
    status.start()
    try:
        yield status
    finally:
        status.stop()


async def with_spinner(text, function, /, sequence="simpleDots"):
    """
    Await function() while a spinner is shown; the spinner stops however it ends.

    Parameters
    - text: message shown next to the spinner.
    - function: zero-argument callable returning an awaitable.
    - sequence: name of a rich spinner.

    Returns whatever the awaitable resolves to.
    """
    with spinner(text, sequence):
        return await function()


__all__ = (
    "spinner",
    "with_spinner",
)
