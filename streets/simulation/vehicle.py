import uuid
from collections import deque
from typing import Deque, List, Optional, Sequence, Tuple

from streets.domain import config
from streets.domain.errors import EdgeNotFoundError, InvalidSpeedError, PathNotConnectedError
from streets.domain.graph import Edge, RoadNetwork
from streets.domain.models import StepResult, Vertex
from streets.observers.base import SimulationObserver
from streets.observers.implementations import NullObserver

def new_vehicle_id() -> str:
    return f"{config.VEHICLE_ID_PREFIX}{uuid.uuid4().hex[:12]}"

class Vehicle:
    """
    A vehicle following a fixed path through the network, one step per tick.

    The ledger holds the unconsumed length of every non-zero edge of the path
    in reverse path order, so ``ledger[-1]`` is always the distance left on
    the edge being driven. A path with edge lengths ``[10, 5]`` starts with
    ``deque([5, 10])``.
    """

    def __init__(self, path: Sequence[Vertex], speed: float, network: RoadNetwork,
                 vehicle_id: Optional[str] = None, observer: Optional[SimulationObserver] = None):
        if speed <= 0:
            raise InvalidSpeedError(speed)

        self.id = vehicle_id or new_vehicle_id()
        self.speed = speed
        self.path: List[Vertex] = list(path)
        self.network = network
        self.observer = observer or NullObserver()
        self.parked = False
        self.current_edge: Optional[Edge] = None

        # Path index pairs of the edges that actually have to be driven
        self._legs: List[Tuple[int, int]] = []
        lengths: List[float] = []
        for i in range(len(self.path) - 1):
            edge = self._edge_between(i)
            if edge.length != 0:
                self._legs.append((i, i + 1))
                lengths.append(edge.length)

        self.ledger: Deque[float] = deque(reversed(lengths))

        # Nothing to drive: origin and destination coincide
        if not self.ledger:
            self.parked = True
            self.observer.vehicle_parked(self)

    def _edge_between(self, i: int) -> Edge:
        try:
            return self.network.get_corresponding_edge(self.path[i], self.path[i + 1])
        except EdgeNotFoundError as e:
            raise PathNotConnectedError(self.path[i].id, self.path[i + 1].id, self.id) from e

    def resolve_current_edge(self) -> Optional[Edge]:
        if self.parked:
            return None
        leg = len(self._legs) - len(self.ledger)
        return self._edge_between(self._legs[leg][0])

    def step(self) -> StepResult:
        if self.parked:
            return StepResult.IDLE

        # Resolve before touching any state so a broken path leaves the vehicle as it was
        edge = self.resolve_current_edge()

        if edge is not self.current_edge:
            if self.current_edge is not None:
                self.current_edge.queue.remove(self)
            self.current_edge = edge

        if edge.queue.position_of(self) == config.NOT_IN_QUEUE:
            edge.queue.push(self)
            self.observer.vehicle_entered_edge(self, edge, edge.queue.position_of(self))

        remaining = self.ledger[-1]

        if remaining <= self.speed and len(self.ledger) > 1:
            self.ledger.pop()
            next_length = self.ledger.pop()
            self.ledger.append(remaining + next_length)
            self.observer.vehicle_transitioned(self, edge)
            return StepResult.TRANSITIONED

        if remaining <= self.speed:
            self.ledger.pop()
            edge.queue.remove(self)
            self.current_edge = None
            self.parked = True
            self.observer.vehicle_parked(self)
            return StepResult.PARKED

        self.ledger.append(self.ledger.pop() - self.speed)
        return StepResult.ADVANCED

    def detach(self):
        """Leave the current edge's queue, e.g. when removed from the simulation."""
        if self.current_edge is not None:
            self.current_edge.queue.remove(self)
            self.current_edge = None

    def is_leading(self) -> bool:
        if self.current_edge is None:
            return False
        return self.current_edge.queue.front() is self

    def position(self) -> int:
        if self.current_edge is None:
            return config.NOT_IN_QUEUE
        return self.current_edge.queue.position_of(self)

    @property
    def remaining_distance(self) -> float:
        return sum(self.ledger)

    def path_lengths(self) -> List[float]:
        return [self._edge_between(i).length for i in range(len(self.path) - 1)]

    def describe(self) -> str:
        if self.current_edge is not None:
            return (f"Vehicle {self.id}: Speed={self.speed} m/tick, PathLength={list(self.ledger)} m, "
                    f"Edge={self.current_edge.id} (N={self.position() + 1}/{len(self.current_edge.queue)})")
        return (f"Vehicle {self.id}: Speed={self.speed} m/tick, PathLength={list(self.ledger)} m, "
                f"Edge=None (N={config.NOT_IN_QUEUE})")

    def print_info(self) -> str:
        message = self.describe()
        self.observer.vehicle_info(self, message)
        return message

    def __repr__(self) -> str:
        return f"Vehicle({self.id}, speed={self.speed}, parked={self.parked})"
