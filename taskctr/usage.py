"""
Usage text attached to faults.

Two shapes exist, matching the two places resolution can fail:

    Usage: tool <task> <options>
    Tasks:
      build: compile the project
      deploy: ship it

    Usage: tool build <options>
    Options:
      --target, -t: build target (default: debug)
      --verbose, -v: chatty output (default: false)
      --input, -i: input file

Optional options show their default; required ones do not.
"""


def _render(value):
    # lowercase booleans read like the command line, not like Python
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def task_listing(program, registry, /):
    """
    Usage for the whole program: one line per keyed task, then the default.
    """
    lines = ["", f"Usage: {program} <task> <options>", "Tasks:"]
    for key, task in registry.items():
        lines.append(f"  {key}: {task.description}")
    if (default := registry.default) is not None:
        lines.append(f"  {default.name} (default): {default.description}")
    return "\n".join(lines)


def task_usage(program, task, /, *, key=None, default=False):
    """
    Usage for one task: its options with long/short flags, descriptions and defaults.

    When the task ran as the default, the task name is omitted from the usage
    line since it is not typed on the command line.
    """
    route = program if default else f"{program} {key or task.name}".strip()
    lines = ["", f"Usage: {route} <options>", "Options:"]
    for name, spec in task.options.items():
        line = f"  --{name}"
        if spec.short:
            line += f", -{spec.short}"
        line += f": {spec.description}"
        if not spec.required:
            line += f" (default: {_render(spec.default)})"
        lines.append(line)
    return "\n".join(lines)


__all__ = (
    "task_listing",
    "task_usage",
)
