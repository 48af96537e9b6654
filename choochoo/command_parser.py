"""Parser for the console command language."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Union

from .bounded_string import MAX_STRING_LEN

SWITCH_COUNT = 22

_SPACE = " \t\n\v\f\r"


class SwitchMode(IntEnum):
    S = 33
    C = 34
    UNKNOWN = 420


TRACK_A_PLAN: tuple[SwitchMode, ...] = tuple(
    SwitchMode.S if ch == "S" else SwitchMode.C for ch in "SSSSCSSCCSCCSCCSSCSCSC"
)


class CommandType(Enum):
    TRAIN_SPEED = 0
    REVERSE = 1
    REVERSE_INITIAL = 2
    SWITCH = 3
    LIGHTS = 4
    PATH = 5
    CLEAR = 6
    RESET_TRACK = 7
    QUIT = 8
    START_RANDOMPATH = 9
    END_RANDOMPATH = 10
    START_PACMAN = 11
    END_PACMAN = 12
    ERROR = 13


@dataclass(frozen=True)
class TrainSpeedArgs:
    train: int
    speed: int


@dataclass(frozen=True)
class ReverseArgs:
    train: int


@dataclass(frozen=True)
class SwitchArgs:
    switch_id: int
    switch_mode: SwitchMode


@dataclass(frozen=True)
class LightArgs:
    train: int
    state: bool


@dataclass(frozen=True)
class PathArgs:
    train: int
    speed: int
    offset: int
    dest_node: str


@dataclass(frozen=True)
class PacmanArgs:
    pac_train: int
    ghost_1: int
    ghost_2: int
    ghost_3: int


CommandArgs = Union[TrainSpeedArgs, ReverseArgs, SwitchArgs, LightArgs, PathArgs, PacmanArgs]


@dataclass(frozen=True)
class CommandResult:
    command_type: CommandType
    args: Optional[CommandArgs] = None


_ERROR = CommandResult(CommandType.ERROR)

_BARE_COMMANDS = {
    "q": CommandType.QUIT,
    "rt": CommandType.RESET_TRACK,
    "clear": CommandType.CLEAR,
    "srp": CommandType.START_RANDOMPATH,
    "erp": CommandType.END_RANDOMPATH,
    "epm": CommandType.END_PACMAN,
}


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


class _Scanner:
    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def _peek(self) -> str:
        return self._text[self._pos] if self._pos < len(self._text) else ""

    def skip_whitespace(self) -> None:
        while (c := self._peek()) and c in _SPACE:
            self._pos += 1

    def word(self) -> str:
        """Alphanumerics up to the next whitespace; other characters are skipped."""
        chars = []
        while (c := self._peek()) and c not in _SPACE:
            if c.isascii() and c.isalnum() and len(chars) < MAX_STRING_LEN:
                chars.append(c)
            self._pos += 1
        return "".join(chars)

    def number(self) -> int:
        value = 0
        while _is_digit(c := self._peek()):
            value = value * 10 + int(c)
            self._pos += 1
        return value

    def signed_number(self) -> int:
        sign = 1
        c = self._peek()
        if c in ("+", "-") and c:
            sign = -1 if c == "-" else 1
            self._pos += 1
        return sign * self.number()

    def next_number(self) -> int:
        self.skip_whitespace()
        return self.number()

    def next_word(self) -> str:
        self.skip_whitespace()
        return self.word()


def _valid_train(train: int) -> bool:
    return 1 <= train <= 80


def parse_command(text: object) -> CommandResult:
    """Parse one console command line into a CommandResult."""
    scan = _Scanner(str(text)[:MAX_STRING_LEN])
    name = scan.word()

    if name in _BARE_COMMANDS:
        return CommandResult(_BARE_COMMANDS[name])

    if name == "tr":
        train = scan.next_number()
        speed = scan.next_number()
        if not 0 <= speed <= 14 or not _valid_train(train):
            return _ERROR
        return CommandResult(CommandType.TRAIN_SPEED, TrainSpeedArgs(train, speed))

    if name in ("rv", "rvi"):
        train = scan.next_number()
        if not _valid_train(train):
            return _ERROR
        kind = CommandType.REVERSE if name == "rv" else CommandType.REVERSE_INITIAL
        return CommandResult(kind, ReverseArgs(train))

    if name == "sw":
        switch_id = scan.next_number()
        if not (1 <= switch_id <= 18 or 153 <= switch_id <= 156):
            return _ERROR
        mode = scan.next_word()
        if mode == "S":
            return CommandResult(CommandType.SWITCH, SwitchArgs(switch_id, SwitchMode.S))
        if mode == "C":
            return CommandResult(CommandType.SWITCH, SwitchArgs(switch_id, SwitchMode.C))
        return _ERROR

    if name == "light":
        train = scan.next_number()
        if not _valid_train(train):
            return _ERROR
        state = scan.next_word()
        if state in ("on", "off"):
            return CommandResult(CommandType.LIGHTS, LightArgs(train, state == "on"))
        return _ERROR

    if name == "path":
        train = scan.next_number()
        speed = scan.next_number()
        dest_node = scan.next_word()
        scan.skip_whitespace()
        offset = scan.signed_number()
        if not 5 <= speed <= 14:
            return _ERROR
        return CommandResult(CommandType.PATH, PathArgs(train, speed, offset, dest_node))

    if name == "spm":
        pac_train = scan.next_number()
        ghost_1 = scan.next_number()
        ghost_2 = scan.next_number()
        ghost_3 = scan.next_number()
        return CommandResult(
            CommandType.START_PACMAN, PacmanArgs(pac_train, ghost_1, ghost_2, ghost_3)
        )

    return _ERROR