"""Train controller commands sent through an I/O server."""

from __future__ import annotations

from typing import Any, Generator

from .command_parser import SwitchMode
from .io_server import putc, puts

RESET_MODE = 192
SENSOR_DUMP_BASE = 128
SENSOR_PICK_BASE = 192
SWITCH_OFF = 32
GO = 96
STOP = 97


def _bytes(*values: int) -> bytes:
    return bytes(value & 0xFF for value in values)


def set_train_bytes(train: int, speed: int) -> bytes:
    """Command bytes setting train to speed."""
    return _bytes(speed, train)


def reverse_train_bytes(train: int, speed: int, zero_speed: int) -> bytes:
    """Command bytes reversing train, then restoring speed."""
    return _bytes(zero_speed, train, speed, train)


def set_switch_bytes(switch_id: int, mode: SwitchMode) -> bytes:
    """Command bytes throwing switch_id to mode and releasing the solenoid."""
    return _bytes(int(mode), switch_id, SWITCH_OFF)


def init(io_server: int) -> Generator[Any, Any, None]:
    """Put the sensor modules into reset mode."""
    yield from putc(io_server, RESET_MODE)


def set_train(io_server: int, train: int, speed: int) -> Generator[Any, Any, None]:
    yield from puts(io_server, set_train_bytes(train, speed))


def reverse_train(
    io_server: int, train: int, speed: int, zero_speed: int
) -> Generator[Any, Any, None]:
    yield from puts(io_server, reverse_train_bytes(train, speed, zero_speed))


def set_switch(io_server: int, switch_id: int, mode: SwitchMode) -> Generator[Any, Any, None]:
    yield from puts(io_server, set_switch_bytes(switch_id, mode))


def dump_sensors(io_server: int, count: int) -> Generator[Any, Any, None]:
    """Request the readings of the first count sensor modules."""
    yield from putc(io_server, SENSOR_DUMP_BASE + count)


def get_sensor(io_server: int, index: int) -> Generator[Any, Any, None]:
    """Request the reading of sensor module index."""
    yield from putc(io_server, SENSOR_PICK_BASE + index)


def go(io_server: int) -> Generator[Any, Any, None]:
    yield from puts(io_server, _bytes(GO, GO))


def stop(io_server: int) -> Generator[Any, Any, None]:
    yield from puts(io_server, _bytes(STOP, STOP))