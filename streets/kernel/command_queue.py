from collections import deque
from typing import Deque, List
from streets.kernel.commands import Command

class CommandQueue:
    """Vehicle add/remove requests waiting for the next tick.

    The kernel drains the queue before any vehicle steps, so a vehicle added
    or removed between ticks is never seen half-way through a tick.
    """

    def __init__(self):
        self._pending: Deque[Command] = deque()

    def add(self, command: Command):
        self._pending.append(command)

    def pop_all(self) -> List[Command]:
        """Return every pending command in submission order and empty the queue."""
        commands = list(self._pending)
        self._pending.clear()
        return commands

    def pending(self) -> List[Command]:
        return list(self._pending)

    def clear(self):
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)
