import logging
from typing import Iterable, List, Optional

from streets.domain.errors import DuplicateVehicleError, StreetsError, VehicleNotFoundError
from streets.domain.graph import RoadNetwork
from streets.domain.models import SimulationSnapshot, VehicleState
from streets.domain.state import SimulationState
from streets.kernel.command_queue import CommandQueue
from streets.kernel.commands import Command
from streets.kernel.snapshot_builder import SnapshotBuilder
from streets.observers.base import SimulationObserver
from streets.observers.implementations import NullObserver
from streets.simulation.vehicle import Vehicle
from streets.systems.vehicle_system import VehicleSystem

logger = logging.getLogger(__name__)

class SimulationKernel:
    """Single-threaded tick loop over one road network (or one partition of it)."""

    def __init__(self, network: RoadNetwork, observer: Optional[SimulationObserver] = None, name: str = "main"):
        self.name = name
        self.state = SimulationState(road_network=network)
        self.observer = observer or NullObserver()
        self.command_queue = CommandQueue()
        self.vehicle_system = VehicleSystem(self.observer)
        self.snapshot_builder = SnapshotBuilder()

    @property
    def network(self) -> RoadNetwork:
        return self.state.road_network

    @property
    def tick_id(self) -> int:
        return self.state.tick_id

    # Vehicles

    def add_vehicle(self, path: Iterable[int], speed: float, vehicle_id: Optional[str] = None) -> Vehicle:
        if vehicle_id is not None and vehicle_id in self.state.vehicles:
            raise DuplicateVehicleError(vehicle_id)
        vertices = self.network.path_from_ids(path)
        vehicle = Vehicle(vertices, speed, self.network, vehicle_id=vehicle_id, observer=self.observer)
        if vehicle.id in self.state.vehicles:
            raise DuplicateVehicleError(vehicle.id)
        self.state.vehicles[vehicle.id] = vehicle
        return vehicle

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self.state.vehicles.get(vehicle_id)
        if vehicle is None:
            raise VehicleNotFoundError(vehicle_id)
        return vehicle

    def remove_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self.get_vehicle(vehicle_id)
        vehicle.detach()
        del self.state.vehicles[vehicle_id]
        return vehicle

    def active_vehicles(self) -> List[Vehicle]:
        return [v for v in self.state.vehicles.values() if not v.parked]

    def parked_vehicles(self) -> List[Vehicle]:
        return [v for v in self.state.vehicles.values() if v.parked]

    # Ticking

    def queue_command(self, command: Command):
        self.command_queue.add(command)

    def run_tick(self):
        # 1. Consume Commands
        commands = self.command_queue.pop_all()
        while commands:
            cmd = commands.pop(0)
            try:
                cmd.execute(self)
            except StreetsError as e:
                logger.warning("[%s] Command %s rejected: %s", self.name, type(cmd).__name__, e)

        # 2. Move Vehicles
        faults = self.vehicle_system.update(self.active_vehicles())
        for vehicle_id, error in faults.items():
            del self.state.vehicles[vehicle_id]
            self.state.faulted[vehicle_id] = str(error)

        # 3. Advance Time
        self.state.tick_id += 1

    def run(self, ticks: int):
        for _ in range(ticks):
            self.run_tick()

    def is_idle(self) -> bool:
        return not self.active_vehicles() and not self.command_queue

    # Snapshots

    def get_state(self) -> SimulationSnapshot:
        return self.snapshot_builder.build(self.state)

    def get_vehicle_state(self, vehicle_id: str) -> VehicleState:
        return self.snapshot_builder.vehicle_state(self.get_vehicle(vehicle_id))
