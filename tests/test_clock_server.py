from functools import partial

from choochoo.clock_server import (
    CLOCK_ADDRESS,
    clock_server,
    delay,
    delay_until,
    time,
)
from choochoo.kernel import Kernel
from choochoo.logger import Logger
from choochoo.nameserver import name_server, who_is
from choochoo.syscalls import IpcError
from choochoo.task import EventType, TaskStatus


def setup():
    k = Kernel(clock=lambda: 0, logger=Logger(write=lambda s: None))
    ns = k.create(3, name_server)
    cs = k.create(1, partial(clock_server, ns))
    return k, ns, cs


def tick(k, count):
    for _ in range(count):
        k.raise_event(EventType.CLOCK_TICK)
        k.run(200)


def _address_lookup(ns, log):
    log.append((yield from who_is(ns, CLOCK_ADDRESS)))


def _time_client(cs, log):
    log.append((yield from time(cs)))


def _delay_client(cs, log):
    start = yield from time(cs)
    woke = yield from delay(cs, 2)
    log.append((start, woke))


def _delay_until_client(cs, log):
    log.append((yield from delay_until(cs, 3)))


def _delay_n_client(cs, n, log):
    woke = yield from delay(cs, n)
    log.append((n, woke))


def _negative_client(cs, log):
    try:
        yield from delay(cs, -1)
    except ValueError:
        log.append("delay")
    try:
        yield from delay_until(cs, -5)
    except ValueError:
        log.append("until")


def _orphan_time_client(log):
    try:
        yield from time(99)
    except IpcError as exc:
        log.append(exc.code)


def test_server_registers_its_address():
    log = []
    k, ns, cs = setup()
    client = k.create(2, partial(_address_lookup, ns, log))
    k.run(200)
    assert log == [cs]
    assert k.tasks.get(client) is None


def test_time_counts_ticks():
    log = []
    k, ns, cs = setup()
    k.run(200)
    tick(k, 4)
    client = k.create(2, partial(_time_client, cs, log))
    k.run(200)
    assert log == [4]
    assert k.tasks.get(client) is None
    assert k.tasks.get(cs).status == TaskStatus.RECEIVE_WAIT


def test_delay_wakes_after_ticks():
    log = []
    k, ns, cs = setup()
    client = k.create(2, partial(_delay_client, cs, log))
    k.run(200)
    tick(k, 1)
    assert log == []
    assert k.tasks.get(client).status == TaskStatus.REPLY_WAIT
    tick(k, 1)
    assert log == [(0, 2)]
    assert k.tasks.get(client) is None


def test_delay_until_wakes_at_absolute_tick():
    log = []
    k, ns, cs = setup()
    client = k.create(2, partial(_delay_until_client, cs, log))
    k.run(200)
    tick(k, 2)
    assert log == []
    assert k.tasks.get(client).status == TaskStatus.REPLY_WAIT
    tick(k, 1)
    assert log == [3]
    assert k.tasks.get(client) is None


def test_waiters_released_independently():
    log = []
    k, ns, cs = setup()
    slow = k.create(2, partial(_delay_n_client, cs, 3, log))
    fast = k.create(2, partial(_delay_n_client, cs, 1, log))
    k.run(200)
    tick(k, 1)
    assert k.tasks.get(fast) is None
    assert k.tasks.get(slow).status == TaskStatus.REPLY_WAIT
    tick(k, 2)
    assert log == [(1, 1), (3, 3)]
    assert k.tasks.get(slow) is None


def test_negative_delay_rejected():
    log = []
    k, ns, cs = setup()
    client = k.create(2, partial(_negative_client, cs, log))
    k.run(200)
    assert log == ["delay", "until"]
    assert k.tasks.get(client) is None
    assert k.tasks.get(cs).status == TaskStatus.RECEIVE_WAIT


def test_time_from_missing_server_raises():
    log = []
    k = Kernel(clock=lambda: 0, logger=Logger(write=lambda s: None))
    client = k.create(2, partial(_orphan_time_client, log))
    k.run(50)
    assert log == [-1]
    assert k.tasks.get(client) is None
    assert k.step() is False