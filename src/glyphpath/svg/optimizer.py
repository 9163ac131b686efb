"""Redundant-segment removal for SVG path output.

The pass works subpath by subpath (split after every Close) and:
- drops a final LineTo that lands within one unit of the subpath start when the
  path ends without an explicit Close,
- drops a LineTo that repeats the previous point,
- turns ``M a, L b, ..., L a, Z`` into ``M b, ..., L a, Z`` so the explicit
  return to the start is the closing segment.
"""

from collections.abc import Sequence

from glyphpath.domain.commands import Close, LineTo, MoveTo, PathCommand

# Distance (per axis, in design units) under which a trailing line counts as
# returning to the subpath start.
CLOSE_EPSILON = 1


def _same_point(a: PathCommand, b: PathCommand) -> bool:
    return (
        not isinstance(a, Close)
        and not isinstance(b, Close)
        and a.x == b.x
        and a.y == b.y
    )


def optimize_commands(commands: Sequence[PathCommand]) -> list[PathCommand]:
    """Return a copy of the commands with redundant segments removed.

    Args:
        commands: Commands to optimize (not modified)

    Returns:
        New list of commands
    """
    subpaths: list[list[PathCommand]] = [[]]
    start_x = start_y = 0.0
    count = len(commands)

    for i, cmd in enumerate(commands):
        subpath = subpaths[-1]
        first = subpath[0] if subpath else None
        second = subpath[1] if len(subpath) > 1 else None
        previous = subpath[-1] if subpath else None
        is_last = i + 1 >= count
        subpath.append(cmd)

        if isinstance(cmd, MoveTo):
            start_x, start_y = cmd.x, cmd.y
        elif isinstance(cmd, LineTo) and is_last:
            if abs(cmd.x - start_x) <= CLOSE_EPSILON and abs(cmd.y - start_y) <= CLOSE_EPSILON:
                subpath.pop()
        elif isinstance(cmd, LineTo) and previous is not None and _same_point(previous, cmd):
            subpath.pop()
        elif isinstance(cmd, Close):
            if (
                isinstance(first, MoveTo)
                and isinstance(second, LineTo)
                and isinstance(previous, LineTo)
                and _same_point(previous, first)
            ):
                subpath.pop(0)
                subpath[0] = MoveTo(second.x, second.y)
            if not is_last:
                subpaths.append([])

    return [cmd for subpath in subpaths for cmd in subpath]
