"""A message-passing microkernel with generator tasks, user-space servers and support library."""

__version__ = "0.1.0"

__all__ = [
    "addrspace",
    "bounded_string",
    "byte_queue",
    "clock_server",
    "command_parser",
    "hashmap",
    "idle_perf",
    "io_server",
    "kernel",
    "linked_list",
    "logger",
    "marklin",
    "nameserver",
    "perf_timing",
    "rand",
    "scheduler",
    "slab",
    "syscalls",
    "task",
    "timer",
    "uart",
    "util",
]