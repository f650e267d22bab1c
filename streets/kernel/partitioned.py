from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from streets.domain import config
from streets.domain.errors import DuplicateVehicleError, PathCrossesPartitionError, VehicleNotFoundError
from streets.domain.graph import RoadNetwork
from streets.domain.models import Rect, SimulationSnapshot
from streets.kernel.simulation_kernel import SimulationKernel
from streets.observers.base import SimulationObserver
from streets.observers.implementations import NullObserver
from streets.partitioning.base import Partitioner
from streets.partitioning.column import ColumnPartitioner
from streets.simulation.vehicle import Vehicle

class PartitionedSimulation:
    """
    One independent kernel per partition of the network.

    Edges crossing a partition boundary do not exist in any region, so a
    vehicle is only accepted when its whole path lies inside one region.
    """

    def __init__(self, network: RoadNetwork, partitions: int = config.DEFAULT_PARTITIONS,
                 partitioner: Optional[Partitioner] = None, observer: Optional[SimulationObserver] = None):
        self.network = network
        self.observer = observer or NullObserver()
        self.partitioner = partitioner or ColumnPartitioner(self.observer)
        self.rects: List[Rect] = self.partitioner.divide_into_rects(partitions, network)

        edges = network.raw_edges()
        self.kernels: List[SimulationKernel] = [
            SimulationKernel(self.partitioner.subgraph_from_rect(edges, rect), self.observer, name=f"region-{i}")
            for i, rect in enumerate(self.rects)
        ]

    def locate(self, path: Sequence[int]) -> int:
        """Index of the first region holding every vertex and edge of the path."""
        self.network.path_from_ids(path)  # unknown vertices are a lookup miss, not a partition problem
        for i, kernel in enumerate(self.kernels):
            region = kernel.network
            if not all(region.has_vertex(vertex_id) for vertex_id in path):
                continue
            if all(region.graph.has_edge(s, t) for s, t in zip(path, path[1:])):
                return i
        raise PathCrossesPartitionError(list(path))

    def add_vehicle(self, path: Sequence[int], speed: float, vehicle_id: Optional[str] = None) -> Tuple[int, Vehicle]:
        if vehicle_id is not None and self._find(vehicle_id) is not None:
            raise DuplicateVehicleError(vehicle_id)
        region = self.locate(path)
        return region, self.kernels[region].add_vehicle(path, speed, vehicle_id)

    def _find(self, vehicle_id: str) -> Optional[SimulationKernel]:
        for kernel in self.kernels:
            if vehicle_id in kernel.state.vehicles:
                return kernel
        return None

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        kernel = self._find(vehicle_id)
        if kernel is None:
            raise VehicleNotFoundError(vehicle_id)
        return kernel.get_vehicle(vehicle_id)

    def run_tick(self, max_workers: Optional[int] = None):
        workers = min(max_workers or 1, len(self.kernels), config.MAX_PARTITION_WORKERS)
        if workers <= 1:
            for kernel in self.kernels:
                kernel.run_tick()
            return

        # Each region is only ever touched by one worker per tick
        with ThreadPoolExecutor(max_workers=workers) as pool:
            list(pool.map(lambda kernel: kernel.run_tick(), self.kernels))

    def run(self, ticks: int, max_workers: Optional[int] = None):
        for _ in range(ticks):
            self.run_tick(max_workers)

    def get_state(self) -> List[SimulationSnapshot]:
        return [kernel.get_state() for kernel in self.kernels]
