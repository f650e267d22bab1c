from collections import deque
from typing import TYPE_CHECKING, Deque, Dict, Iterator, Optional

from streets.domain import config
from streets.domain.errors import EmptyQueueError

if TYPE_CHECKING:
    from streets.simulation.vehicle import Vehicle

class EdgeQueue:
    """
    FIFO of the vehicles currently occupying one edge, in arrival order.

    The deque is authoritative for ordering; the id index only answers
    membership questions. No locking: callers sharing an edge across threads
    must serialize access themselves.
    """

    def __init__(self):
        self._queue: Deque["Vehicle"] = deque()
        self._index: Dict[str, "Vehicle"] = {}

    def push(self, vehicle: "Vehicle") -> bool:
        if vehicle.id in self._index:
            return False
        self._queue.append(vehicle)
        self._index[vehicle.id] = vehicle
        return True

    def pop(self) -> "Vehicle":
        if not self._queue:
            raise EmptyQueueError("pop from an empty edge queue")
        vehicle = self._queue.popleft()
        del self._index[vehicle.id]
        return vehicle

    def remove(self, vehicle: "Vehicle") -> bool:
        if vehicle.id not in self._index:
            return False
        self._queue.remove(self._index.pop(vehicle.id))
        return True

    def position_of(self, vehicle: "Vehicle") -> int:
        if vehicle.id not in self._index:
            return config.NOT_IN_QUEUE
        for idx, queued in enumerate(self._queue):
            if queued.id == vehicle.id:
                return idx
        return config.NOT_IN_QUEUE

    def front(self) -> Optional["Vehicle"]:
        return self._queue[0] if self._queue else None

    def back(self) -> Optional["Vehicle"]:
        return self._queue[-1] if self._queue else None

    def contains_id(self, vehicle_id: str) -> bool:
        return vehicle_id in self._index

    def get(self, vehicle_id: str) -> Optional["Vehicle"]:
        return self._index.get(vehicle_id)

    def clear(self):
        self._queue.clear()
        self._index.clear()

    def __len__(self) -> int:
        return len(self._queue)

    def __contains__(self, vehicle: "Vehicle") -> bool:
        return vehicle.id in self._index

    def __iter__(self) -> Iterator["Vehicle"]:
        return iter(list(self._queue))

    def __repr__(self) -> str:
        return f"EdgeQueue([{', '.join(v.id for v in self._queue)}])"
