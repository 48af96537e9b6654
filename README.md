# choochoo

`choochoo` is a small message-passing microkernel written in plain Python,
together with a few user-space servers and the support library they use.
Tasks are Python generator functions. A task talks to the kernel by yielding
system-call objects. The kernel schedules tasks by priority and passes messages
between them with send/receive/reply. It also wakes tasks on events such as
clock ticks or serial-line activity.

The package uses only the standard library.

## What is inside

Support library

- `choochoo.byte_queue`: `ByteQueue`, a FIFO of bytes that holds at most
  1024 items. `push` returns `False` when the queue is full. `pop`, `front`
  and `back` raise `IndexError` on an empty queue.
- `choochoo.util`: number-to-text helpers (`ui2a`, `i2a`, `a2d`) and
  `format_clock`, which renders a count of tenths of a second as `MM:SS:T`.
- `choochoo.bounded_string`: `BoundedString`, mutable text of at most 128
  characters, and `string_format`, which formats with `%d %u %x %s %%`.
- `choochoo.rand`: `Lcg`, a linear congruential generator whose default seed
  is 17648103.
- `choochoo.perf_timing`: `PerfTimer`, which keeps start/end timing per
  `TimingType` together with the average and maximum.
- `choochoo.logger`: `Logger`, with levels from `LogLevel`. By default it
  writes to standard output at level `WARN`.
- `choochoo.linked_list`: `LinkedList`, a doubly linked list, and `Cursor`,
  an iterator over it that can also step back.
- `choochoo.hashmap`: `HashMap`, a chained hash table with 67 buckets keyed by
  short strings, and `bucket_hash`.
- `choochoo.command_parser`: `parse_command`, which turns a console line into
  a `CommandResult`. It understands `tr`, `rv`, `rvi`, `sw`, `light`, `path`,
  `spm`, `q`, `rt`, `clear`, `srp`, `erp` and `epm`. The module also defines
  `SwitchMode` and the `TRACK_A_PLAN` switch layout.

Kernel

- `choochoo.slab`: `SlabAllocator`, fixed-block allocation per
  `AllocationType`. It raises `AllocationError` when a partition is full or a
  free is invalid.
- `choochoo.addrspace`: `PageTable` and `AddrSpace`, one stack region per
  task. A full table raises `PageTableFull`.
- `choochoo.task`: `Task`, `TaskTable`, `TaskStatus`, `EventType` and
  `TaskLimitReached`.
- `choochoo.scheduler`: `Scheduler`, with a round-robin queue for each of 32
  priority levels. Level 0 runs first.
- `choochoo.idle_perf`: `IdleTimer`, the share of time spent in the idle task.
- `choochoo.timer`: `TickTimer` and `next_compare`, for a 10 ms periodic tick.
- `choochoo.syscalls`: the requests a task yields. These are `Create`,
  `MyTid`, `MyParentTid`, `Yield`, `Exit`, `Kill`, `Send`, `Receive`,
  `Reply`, `AwaitEvent` and `TaskExists`. The module also has the helper
  `await_tid` and the exception `IpcError`.
- `choochoo.kernel`: `Kernel`, which runs tasks, handles their requests and
  raises `CLOCK_TICK` events as the tick timer expires. It also provides
  `idle_task` and `boot`.

User-space servers

- `choochoo.nameserver`: the `name_server` task, with the client calls
  `register_as` and `who_is`.
- `choochoo.clock_server`: `clock_server` and its `clock_notifier`, with the
  client calls `time`, `delay` and `delay_until`.
- `choochoo.uart`: `Uart`, an in-memory model of one serial `Line`. Received
  bytes wait in a queue and bytes to transmit wait in a bounded FIFO.
  `drain` hands the waiting transmit bytes back to the caller.
- `choochoo.io_server`: `io_server` with its `receive_notifier` and
  `send_notifier`, and the client calls `getc`, `putc` and `puts`.
- `choochoo.marklin`: the byte sequences of the train controller protocol
  (`set_train_bytes`, `reverse_train_bytes`, `set_switch_bytes`). It also has
  the calls that send them through an I/O server: `init`, `set_train`,
  `reverse_train`, `set_switch`, `dump_sensors`, `get_sensor`, `go` and
  `stop`.

## A first look

```python
from choochoo.byte_queue import ByteQueue
from choochoo.rand import Lcg
from choochoo.util import format_clock

queue = ByteQueue()
queue.push(7)
queue.push(9)
assert len(queue) == 2
assert queue.pop() == 7

rng = Lcg()
first = rng.next_int()

print(format_clock(754))   # 01:15:4
```

## Tasks and the kernel

A task is a callable that returns a generator. It asks the kernel for
something by yielding a system-call object. The result comes back as the value
of the `yield` expression. When a call fails, its error (for example
`IpcError`) is raised inside the task. Client helpers such as `who_is` or
`delay` are generators themselves, so you use them with `yield from`.

`boot` creates the idle task at priority 31 and your first task at
priority 30, then returns the kernel. `Kernel.run` steps the tasks. The idle
task never finishes, so pass `max_steps`:

```python
from choochoo.kernel import boot
from choochoo.syscalls import Create, Receive, Reply, Send

def echo():
    while True:
        sender, message = yield Receive(64)
        yield Reply(sender, message.upper())

def init():
    server = yield Create(5, echo)
    reply = yield Send(server, b"hello", 64)
    print(reply)            # b'HELLO'

kernel = boot(init)
kernel.run(max_steps=20)
```

Servers such as `clock_server` and `io_server` take the tid of a running
`name_server` as their first argument. They register under their own names
(`"TICK-TOCK"`, `"CONSOLE-IO"`, `"MARKLIN-IO"`). Create them with
`functools.partial`, for example
`Create(1, partial(clock_server, ns_tid))`.

## What this package does not do

- It has no command-line program. Everything is used from Python.
- It does not talk to real hardware. `Uart` only buffers bytes in memory. To
  feed it input, call `receive_byte` and then `Kernel.raise_event` with the
  matching receive event. To see its output, call `drain`.
- It has no sensor, switch, track-layout, path-finding or screen-drawing
  servers. `parse_command` only parses console lines; nothing here carries the
  commands out on a track.

## Running the tests

The tests use pytest, which the `test` extra installs:

```
pip install -e .[test]
pytest
```