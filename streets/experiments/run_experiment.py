import json
import logging
import random
import time
from pathlib import Path
from typing import Any, Dict, List

from streets.domain import config
from streets.domain.errors import NoRouteError
from streets.domain.graph import RoadNetwork
from streets.kernel.simulation_kernel import SimulationKernel
from streets.observers.implementations import LoggingObserver, configure_logging

logger = logging.getLogger(__name__)

def spawn_random_vehicles(kernel: SimulationKernel, count: int, speed: float = config.DEFAULT_VEHICLE_SPEED) -> int:
    """Adds up to `count` vehicles on shortest paths between random vertex pairs."""
    vertex_ids = sorted(v.id for v in kernel.network.vertices_with_edges())
    if len(vertex_ids) < 2:
        return 0

    spawned = 0
    for i in range(count * 10):
        if spawned >= count:
            break
        origin, destination = random.sample(vertex_ids, 2)
        try:
            path = kernel.network.shortest_path(origin, destination)
        except NoRouteError:
            continue
        kernel.add_vehicle([v.id for v in path], speed, vehicle_id=f"{config.VEHICLE_ID_PREFIX}{i}")
        spawned += 1
    return spawned

def run_headless_experiment(network_path: str, output_path: str, vehicles: int = 20,
                            ticks: int = 100, seed: int = 42) -> List[Dict[str, Any]]:
    random.seed(seed)
    network = RoadNetwork.from_json(Path(network_path).read_bytes())
    kernel = SimulationKernel(network, LoggingObserver(), name="experiment")
    spawned = spawn_random_vehicles(kernel, vehicles)
    logger.info("Spawned %d vehicles", spawned)

    results = []

    start_time = time.time()
    for i in range(ticks):
        kernel.run_tick()
        results.append({
            "tick": i,
            "active": len(kernel.active_vehicles()),
            "parked": len(kernel.parked_vehicles()),
            "faulted": len(kernel.state.faulted),
        })
        if kernel.is_idle():
            break

    logger.info("Experiment finished in %.4fs", time.time() - start_time)

    with open(output_path, 'w') as f:
        json.dump(results, f, indent=2)
    return results

if __name__ == "__main__":
    import sys
    configure_logging()
    if len(sys.argv) > 2:
        run_headless_experiment(sys.argv[1], sys.argv[2])
    else:
        print("Usage: python -m streets.experiments.run_experiment <network.json> <output.json>")
