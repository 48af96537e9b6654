import itertools
from functools import partial

import pytest

from choochoo.kernel import Kernel, boot, idle_task
from choochoo.logger import Logger
from choochoo.syscalls import (
    AwaitEvent,
    Create,
    IpcError,
    Kill,
    MyParentTid,
    MyTid,
    Receive,
    Reply,
    Send,
    Yield,
    await_tid,
)
from choochoo.task import EventType, TaskStatus
from choochoo.timer import TICK_TIME


def make_kernel(clock=lambda: 0, sink=None):
    return Kernel(clock=clock, logger=Logger(write=sink if sink is not None else (lambda s: None)))


def _report_ids(log):
    log["me"] = yield MyTid()
    log["parent"] = yield MyParentTid()


def _spawner(log):
    log["parent_me"] = yield MyTid()
    log["child"] = yield Create(2, partial(_report_ids, log))


def _record_parent(log):
    log.append((yield MyParentTid()))


def _chatty(order, name):
    order.append(name)
    yield Yield()
    order.append(name)


def _create_bad_priority(log):
    try:
        yield Create(99, idle_task)
    except ValueError:
        log.append("rejected")


def _receiver(log, capacity):
    sender, msg = yield Receive(capacity)
    log["received"] = (sender, msg)
    log["reply_len"] = yield Reply(sender, b"pong!")


def _sender(log, rtid):
    log["reply"] = yield Send(rtid, b"ping", 3)


def _send_to_missing(log):
    try:
        yield Send(99, b"x", 4)
    except IpcError as exc:
        log.append(exc.code)


def _reply_to_self(log):
    me = yield MyTid()
    try:
        yield Reply(me, b"x")
    except IpcError as exc:
        log.append(exc.code)


def _wait_for(event, log):
    log.append((yield AwaitEvent(event)))


def _wait_for_tick(log):
    yield AwaitEvent(EventType.CLOCK_TICK)
    log.append("tick")


def _short_child(log):
    yield Yield()
    log.append("child done")


def _awaiting_parent(log):
    c = yield Create(2, partial(_short_child, log))
    yield from await_tid(c)
    log.append("parent done")


def _blocked_child(log):
    yield Receive(4)
    log["child resumed"] = True


def _killer(log):
    c = yield Create(2, partial(_blocked_child, log))
    log["child"] = c
    yield Yield()
    yield Kill(c)
    try:
        yield Kill(c)
    except KeyError:
        log["second kill"] = "rejected"


def _odd_request(log):
    log.append((yield object()))


def test_step_without_tasks_returns_false():
    assert make_kernel().step() is False


def test_child_sees_its_tid_and_parent():
    log = {}
    k = make_kernel()
    top = k.create(1, partial(_spawner, log))
    k.run(100)
    assert log["parent_me"] == top
    assert log["me"] == log["child"]
    assert log["parent"] == top
    assert k.tasks.get(top) is None
    assert k.step() is False


def test_top_level_task_parent_is_zero():
    log = []
    k = make_kernel()
    tid = k.create(1, partial(_record_parent, log))
    k.run(10)
    assert log == [0]
    assert k.tasks.get(tid) is None
    assert k.step() is False


def test_higher_priority_runs_first():
    order = []
    k = make_kernel()
    k.create(5, partial(_chatty, order, "low"))
    k.create(1, partial(_chatty, order, "high"))
    k.run(100)
    assert order == ["high", "high", "low", "low"]
    assert k.step() is False


def test_plain_function_entrypoint_runs_once():
    log = []
    k = make_kernel()
    tid = k.create(1, lambda: log.append("ran"))
    k.run(10)
    assert log == ["ran"]
    assert k.tasks.get(tid) is None


def test_invalid_priority_raises():
    k = make_kernel()
    with pytest.raises(ValueError):
        k.create(32, idle_task)


def test_create_syscall_with_invalid_priority_raises_in_task():
    log = []
    k = make_kernel()
    tid = k.create(1, partial(_create_bad_priority, log))
    k.run(10)
    assert log == ["rejected"]
    assert k.tasks.get(tid) is None
    assert k.step() is False


def _ping_pong(sender_priority, receiver_priority, receive_capacity=16):
    log = {}
    k = make_kernel()
    r = k.create(receiver_priority, partial(_receiver, log, receive_capacity))
    s = k.create(sender_priority, partial(_sender, log, r))
    k.run(100)
    return log, s


def test_send_first_round_trip():
    log, s = _ping_pong(1, 5)
    assert log["received"] == (s, b"ping")
    assert log["reply"] == b"pon"
    assert log["reply_len"] == 3


def test_receive_first_round_trip():
    log, s = _ping_pong(5, 1)
    assert log["received"] == (s, b"ping")
    assert log["reply"] == b"pon"


def test_message_truncated_to_receive_capacity():
    log, _ = _ping_pong(1, 5, receive_capacity=2)
    assert log["received"][1] == b"pi"


def test_send_to_missing_task_raises_minus_one():
    log = []
    k = make_kernel()
    k.create(1, partial(_send_to_missing, log))
    k.run(10)
    assert log == [-1]
    other = k.create(1, idle_task)
    with pytest.raises(IpcError) as info:
        k.send(k.tasks.get(other), 99, b"x", 4)
    assert info.value.code == -1


def test_reply_to_task_not_waiting_raises_minus_two():
    log = []
    k = make_kernel()
    k.create(1, partial(_reply_to_self, log))
    k.run(10)
    assert log == [-2]
    other = k.create(1, idle_task)
    with pytest.raises(IpcError) as info:
        k.reply(other, b"x")
    assert info.value.code == -2


def test_second_send_while_sending_is_rejected():
    k = make_kernel()
    a = k.create(1, idle_task)
    b = k.create(1, idle_task)
    sender = k.tasks.get(a)
    k.send(sender, b, b"hello", 4)
    assert sender.status == TaskStatus.SEND_WAIT
    with pytest.raises(IpcError) as info:
        k.send(sender, b, b"again", 4)
    assert info.value.code == -2


def test_receive_takes_queued_message():
    k = make_kernel()
    a = k.create(1, idle_task)
    b = k.create(1, idle_task)
    k.send(k.tasks.get(a), b, b"data", 8)
    assert k.receive(k.tasks.get(b), 8) == (a, b"data")
    assert k.tasks.get(a).status == TaskStatus.REPLY_WAIT
    assert k.reply(a, b"ok") == 2
    assert k.tasks.get(a).status == TaskStatus.READY


def test_raise_event_wakes_waiter():
    log = []
    k = make_kernel()
    tid = k.create(1, partial(_wait_for, EventType.CONSOLE_SEND, log))
    k.run(10)
    assert log == []
    assert k.tasks.get(tid).status == TaskStatus.EVENT_WAIT
    k.raise_event(EventType.CONSOLE_SEND)
    k.run(10)
    assert log == [0]
    assert k.tasks.get(tid) is None


def test_invalid_event_rejected():
    k = make_kernel()
    tid = k.create(1, idle_task)
    with pytest.raises(ValueError):
        k.await_event(k.tasks.get(tid), EventType.MAX)
    with pytest.raises(ValueError):
        k.await_event(k.tasks.get(tid), EventType.NONE)


def test_clock_advancing_fires_tick_event():
    now = [0]
    log = []
    k = make_kernel(clock=lambda: now[0])
    tid = k.create(1, partial(_wait_for_tick, log))
    k.run(10)
    assert log == []
    assert k.tasks.get(tid).status == TaskStatus.EVENT_WAIT
    now[0] = TICK_TIME
    k.run(10)
    assert log == ["tick"]
    assert k.tasks.get(tid) is None


def test_await_tid_returns_after_child_exits():
    log = []
    k = make_kernel()
    parent = k.create(1, partial(_awaiting_parent, log))
    k.run(100)
    assert log == ["child done", "parent done"]
    assert k.tasks.get(parent) is None
    assert k.step() is False


def test_kill_removes_blocked_task():
    log = {}
    k = make_kernel()
    k.create(3, partial(_killer, log))
    k.run(100)
    assert k.tasks.get(log["child"]) is None
    assert "child resumed" not in log
    assert log["second kill"] == "rejected"


def test_unknown_request_is_warned_and_ignored():
    lines = []
    log = []
    k = make_kernel(sink=lines.append)
    k.create(1, partial(_odd_request, log))
    k.run(10)
    assert log == [None]
    assert any(line.startswith("[WARN] ") for line in lines)


def test_idle_task_only_yields():
    assert next(idle_task()) == Yield()


def test_idle_percentage_requires_idle_task():
    with pytest.raises(RuntimeError):
        make_kernel().idle_percentage()


def test_boot_runs_init_before_idle():
    log = []
    counter = itertools.count()
    k = boot(partial(_record_parent, log), make_kernel(clock=lambda: next(counter)))
    assert k.run(20) == 20
    assert log == [0]
    assert 0 <= k.idle_percentage() <= 100