"""SVG path data parsing.

Supports the ``M m L l H h V v Q q C c Z z`` subset. Tokenizing is an explicit
state machine: every character is classified, and ``transition`` maps
(state, character class) to the next state and the buffer action to take.
Numbers are collected into a list of token buffers; when a new command letter
(or the end of input) arrives, the pending command is applied by consuming its
numbers in fixed-size groups.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from glyphpath.config import SVGParseOptions
from glyphpath.domain.bbox import BoundingBox
from glyphpath.domain.commands import Close, CurveTo, LineTo, MoveTo, PathCommand, QuadTo
from glyphpath.exceptions import PathParseError
from glyphpath.svg.optimizer import optimize_commands
from glyphpath.svg.rounding import DecimalRounder, get_default_rounder

logger = logging.getLogger(__name__)

COMMAND_LETTERS = "MmLlQqCcZzHhVv"
SEPARATORS = " ,\t\n\r\f\v"

# Numbers consumed per repetition of each command.
ARITY: dict[str, int] = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "Q": 4, "Z": 0}


class CharClass(Enum):
    """Character classes the tokenizer distinguishes."""

    DIGIT = auto()
    MINUS = auto()
    PLUS = auto()
    DOT = auto()
    COMMAND = auto()
    SEPARATOR = auto()
    OTHER = auto()


class TokenizerState(Enum):
    """Tokenizer states.

    AWAITING_COMMAND: nothing seen yet but separators
    AWAITING_NUMBER: a command is pending and the current buffer is empty
    SIGN: the current buffer holds only '-'
    POINT: the current buffer holds '.' or '-.' with no digits yet
    INTEGER: the current buffer holds digits and no decimal point
    FRACTION: the current buffer holds digits and a decimal point
    FAULT: an unexpected character was seen
    """

    AWAITING_COMMAND = auto()
    AWAITING_NUMBER = auto()
    SIGN = auto()
    POINT = auto()
    INTEGER = auto()
    FRACTION = auto()
    FAULT = auto()


class Action(Enum):
    """What the tokenizer does with the character after a transition."""

    APPEND = auto()  # extend the current buffer
    SPLIT_APPEND = auto()  # start a new buffer with the character
    SPLIT = auto()  # start a new empty buffer
    COMMAND = auto()  # apply the pending command, then make this one pending
    IGNORE = auto()
    FAIL = auto()


_FAULT = (TokenizerState.FAULT, Action.FAIL)

_TRANSITIONS: dict[TokenizerState, dict[CharClass, tuple[TokenizerState, Action]]] = {
    TokenizerState.AWAITING_COMMAND: {
        CharClass.COMMAND: (TokenizerState.AWAITING_NUMBER, Action.COMMAND),
        CharClass.SEPARATOR: (TokenizerState.AWAITING_COMMAND, Action.IGNORE),
    },
    TokenizerState.AWAITING_NUMBER: {
        CharClass.DIGIT: (TokenizerState.INTEGER, Action.APPEND),
        CharClass.MINUS: (TokenizerState.SIGN, Action.APPEND),
        CharClass.PLUS: (TokenizerState.AWAITING_NUMBER, Action.IGNORE),
        CharClass.DOT: (TokenizerState.POINT, Action.APPEND),
        CharClass.COMMAND: (TokenizerState.AWAITING_NUMBER, Action.COMMAND),
        CharClass.SEPARATOR: (TokenizerState.AWAITING_NUMBER, Action.IGNORE),
    },
    TokenizerState.SIGN: {
        CharClass.DIGIT: (TokenizerState.INTEGER, Action.APPEND),
        CharClass.DOT: (TokenizerState.POINT, Action.APPEND),
    },
    TokenizerState.POINT: {
        CharClass.DIGIT: (TokenizerState.FRACTION, Action.APPEND),
    },
    TokenizerState.INTEGER: {
        CharClass.DIGIT: (TokenizerState.INTEGER, Action.APPEND),
        CharClass.DOT: (TokenizerState.FRACTION, Action.APPEND),
        CharClass.MINUS: (TokenizerState.SIGN, Action.SPLIT_APPEND),
        CharClass.COMMAND: (TokenizerState.AWAITING_NUMBER, Action.COMMAND),
        CharClass.SEPARATOR: (TokenizerState.AWAITING_NUMBER, Action.SPLIT),
    },
    TokenizerState.FRACTION: {
        CharClass.DIGIT: (TokenizerState.FRACTION, Action.APPEND),
        CharClass.MINUS: (TokenizerState.SIGN, Action.SPLIT_APPEND),
        CharClass.COMMAND: (TokenizerState.AWAITING_NUMBER, Action.COMMAND),
        CharClass.SEPARATOR: (TokenizerState.AWAITING_NUMBER, Action.SPLIT),
    },
    TokenizerState.FAULT: {},
}

# States in which the input may legally end.
_FINAL_STATES = frozenset(
    {
        TokenizerState.AWAITING_COMMAND,
        TokenizerState.AWAITING_NUMBER,
        TokenizerState.INTEGER,
        TokenizerState.FRACTION,
    }
)


def classify(char: str) -> CharClass:
    """Return the tokenizer class of a single character."""
    if char.isdigit() and char.isascii():
        return CharClass.DIGIT
    if char == "-":
        return CharClass.MINUS
    if char == "+":
        return CharClass.PLUS
    if char == ".":
        return CharClass.DOT
    if char in COMMAND_LETTERS:
        return CharClass.COMMAND
    if char in SEPARATORS:
        return CharClass.SEPARATOR
    return CharClass.OTHER


def transition(state: TokenizerState, char_class: CharClass) -> tuple[TokenizerState, Action]:
    """Next tokenizer state and buffer action for a character class.

    Args:
        state: Current state
        char_class: Class of the next character

    Returns:
        Tuple of (next state, action)
    """
    return _TRANSITIONS[state].get(char_class, _FAULT)


@dataclass
class _PendingCommand:
    letter: str
    offset: int
    buffers: list[str] = field(default_factory=lambda: [""])


class SVGPathParser:
    """Parses SVG path data into drawing commands.

    Example:
        parser = SVGPathParser(SVGParseOptions(flip_y=False))
        parser.parse("M0 0h10v10z")
        # [MoveTo(0, 0), LineTo(10, 0), LineTo(10, 10), Close()]
    """

    def __init__(
        self,
        options: SVGParseOptions | None = None,
        rounder: DecimalRounder | None = None,
    ) -> None:
        """Initialize the parser.

        Args:
            options: Parsing options (defaults if None)
            rounder: Rounding cache to use (shared default if None)
        """
        self.options = options or SVGParseOptions()
        self._rounder = rounder or get_default_rounder()

    def parse(self, path_data: str) -> list[PathCommand]:
        """Parse path data into a new list of commands.

        Args:
            path_data: SVG path ``d`` attribute value

        Returns:
            Parsed, optimized and transformed commands

        Raises:
            PathParseError: On an unexpected character or incomplete command
        """
        commands: list[PathCommand] = []
        self.parse_into(path_data, commands)
        return commands

    def parse_into(self, path_data: str, commands: list[PathCommand]) -> None:
        """Parse path data, appending commands to an existing list.

        On failure the list keeps whatever was appended before the fault.

        Args:
            path_data: SVG path ``d`` attribute value
            commands: List receiving the commands

        Raises:
            PathParseError: On an unexpected character or incomplete command
        """
        state = TokenizerState.AWAITING_COMMAND
        pending: _PendingCommand | None = None
        cursor = _Cursor()

        for offset, char in enumerate(path_data):
            state, action = transition(state, classify(char))

            if action is Action.FAIL:
                logger.debug("SVG path fault", extra={"character": char, "offset": offset})
                raise PathParseError(char, offset)
            if action is Action.APPEND:
                pending.buffers[-1] += char  # type: ignore[union-attr]
            elif action is Action.SPLIT_APPEND:
                pending.buffers.append(char)  # type: ignore[union-attr]
            elif action is Action.SPLIT:
                pending.buffers.append("")  # type: ignore[union-attr]
            elif action is Action.COMMAND:
                if pending is not None:
                    self._apply(pending, cursor, commands)
                pending = _PendingCommand(letter=char, offset=offset)

        if state not in _FINAL_STATES:
            raise PathParseError("", len(path_data), "Unexpected end of path data")
        if pending is not None:
            self._apply(pending, cursor, commands)

        self._finish(commands)

    def _numbers(self, pending: _PendingCommand) -> list[float]:
        places = self.options.decimal_places
        return [self._rounder.round(float(b), places) for b in pending.buffers if b]

    def _apply(
        self,
        pending: _PendingCommand,
        cursor: "_Cursor",
        commands: list[PathCommand],
    ) -> None:
        kind = pending.letter.upper()
        relative = pending.letter != kind
        numbers = self._numbers(pending)
        arity = ARITY[kind]

        if kind == "Z":
            if not commands or not isinstance(commands[-1], Close):
                commands.append(Close())
            cursor.close()
            return
        if not numbers:
            return
        if len(numbers) % arity:
            raise PathParseError(
                pending.letter,
                pending.offset,
                f"Expected a multiple of {arity} numbers for command",
            )

        for i in range(0, len(numbers), arity):
            group = numbers[i : i + arity]
            ox, oy = (cursor.x, cursor.y) if relative else (0.0, 0.0)

            if kind in "ML":
                x, y = ox + group[0], oy + group[1]
                if kind == "M" and i == 0:
                    commands.append(MoveTo(x, y))
                    cursor.move(x, y)
                    continue
                commands.append(LineTo(x, y))
            elif kind == "H":
                x, y = ox + group[0], cursor.y
                commands.append(LineTo(x, y))
            elif kind == "V":
                x, y = cursor.x, oy + group[0]
                commands.append(LineTo(x, y))
            elif kind == "C":
                x, y = ox + group[4], oy + group[5]
                commands.append(
                    CurveTo(ox + group[0], oy + group[1], ox + group[2], oy + group[3], x, y)
                )
            else:
                x, y = ox + group[2], oy + group[3]
                commands.append(QuadTo(ox + group[0], oy + group[1], x, y))
            cursor.x, cursor.y = x, y

    def _finish(self, commands: list[PathCommand]) -> None:
        opt = self.options
        result: Sequence[PathCommand] = commands
        if opt.optimize:
            result = optimize_commands(commands)

        flip_y = opt.flip_y
        base = opt.flip_y_base
        if flip_y and base is None:
            box = BoundingBox.of_commands(result)
            base = box.y1 + box.y2

        def fx(v: float) -> float:
            return opt.x + v * opt.scale

        def fy(v: float) -> float:
            return opt.y + ((base - v) if flip_y else v) * opt.scale  # type: ignore[operator]

        commands[:] = [cmd.map(fx, fy) for cmd in result]


class _Cursor:
    """Current point and subpath start while applying commands."""

    __slots__ = ("x", "y", "start_x", "start_y")

    def __init__(self) -> None:
        self.x = self.y = 0.0
        self.start_x = self.start_y = 0.0

    def move(self, x: float, y: float) -> None:
        self.x = self.start_x = x
        self.y = self.start_y = y

    def close(self) -> None:
        self.x, self.y = self.start_x, self.start_y


def parse_path_data(
    path_data: str,
    options: SVGParseOptions | None = None,
    rounder: DecimalRounder | None = None,
) -> list[PathCommand]:
    """Parse SVG path data into drawing commands.

    Args:
        path_data: SVG path ``d`` attribute value
        options: Parsing options
        rounder: Rounding cache to use

    Returns:
        List of commands

    Raises:
        PathParseError: On malformed path data
    """
    return SVGPathParser(options, rounder).parse(path_data)
