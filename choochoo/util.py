"""Number formatting helpers and a small printf-style formatter."""

from __future__ import annotations

from typing import Any, Iterable

_UINT32_MASK = 0xFFFFFFFF


def a2d(ch: str) -> int:
    """Value of a hexadecimal digit character, or -1 if it is not one."""
    if "0" <= ch <= "9":
        return ord(ch) - ord("0")
    if "a" <= ch <= "f":
        return ord(ch) - ord("a") + 10
    if "A" <= ch <= "F":
        return ord(ch) - ord("A") + 10
    return -1


def _digit(value: int) -> str:
    return chr(value + (ord("0") if value < 10 else ord("a") - 10))


def ui2a(num: int, base: int = 10) -> str:
    """Render a 32-bit unsigned integer in the given base."""
    if base < 2:
        raise ValueError(f"base must be at least 2, got {base}")
    num &= _UINT32_MASK
    digits = []
    while True:
        num, dgt = divmod(num, base)
        digits.append(_digit(dgt))
        if num == 0:
            break
    return "".join(reversed(digits))


def _to_int32(num: int) -> int:
    return ((num + 0x80000000) & _UINT32_MASK) - 0x80000000


def i2a(num: int) -> str:
    """Render a 32-bit signed integer in decimal."""
    num = _to_int32(num)
    if num < 0:
        return "-" + ui2a(-num, 10)
    return ui2a(num, 10)


def format_clock(time: int) -> str:
    """Render a count of tenths of a second as MM:SS:T, capping minutes at 60."""
    time &= _UINT32_MASK
    tenths = time % 10
    seconds = time // 10
    minutes, seconds = divmod(seconds, 60)
    tens_of_minutes = minutes // 10
    if tens_of_minutes > 5:
        mm = "60"
    else:
        mm = f"{tens_of_minutes}{minutes % 10}"
    return f"{mm}:{seconds // 10}{seconds % 10}:{tenths}"


def _expand(fmt: str, args: Iterable[Any]) -> str:
    """Expand %u, %d, %x, %s and %% in fmt; other specifiers are dropped."""
    out = []
    values = iter(args)
    chars = iter(fmt)
    for ch in chars:
        if ch != "%":
            out.append(ch)
            continue
        spec = next(chars, None)
        if spec is None:
            break
        if spec == "%":
            out.append("%")
            continue
        if spec not in "udxs":
            continue
        try:
            value = next(values)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None
        if spec == "u":
            out.append(ui2a(value, 10))
        elif spec == "d":
            out.append(i2a(value))
        elif spec == "x":
            out.append(ui2a(value, 16))
        else:
            out.append(str(value))
    return "".join(out)