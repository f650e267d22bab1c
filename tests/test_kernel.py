import json
import os
import tempfile
import unittest

from streets.domain.errors import (
    DuplicateVehicleError, PathCrossesPartitionError, PathNotConnectedError,
    VehicleNotFoundError, VertexNotFoundError
)
from streets.domain.graph import RoadNetwork
from streets.domain.models import Vertex
from streets.experiments.run_experiment import run_headless_experiment
from streets.kernel.commands import AddVehicleCommand, RemoveVehicleCommand
from streets.kernel.partitioned import PartitionedSimulation
from streets.kernel.simulation_kernel import SimulationKernel
from streets.observers.implementations import NullObserver

def two_cluster_network() -> RoadNetwork:
    """0-1-2 on the left, 3-4-5 on the right, one bridge 2->3 across x = 50."""
    network = RoadNetwork()
    for vid, x in enumerate([0.0, 10.0, 20.0, 80.0, 90.0, 100.0]):
        network.add_vertex(Vertex(id=vid, x=x, y=0.0))
    for s, t, length in [(0, 1, 10), (1, 2, 10), (2, 3, 60), (3, 4, 10), (4, 5, 10)]:
        network.add_edge(s, t, length)
    return network

class FaultRecorder(NullObserver):
    def __init__(self):
        self.faults = []

    def vehicle_faulted(self, vehicle, error):
        self.faults.append((vehicle.id, type(error).__name__))

class TestDeterminism(unittest.TestCase):
    def _run(self):
        kernel = SimulationKernel(two_cluster_network())
        kernel.add_vehicle([0, 1, 2, 3, 4, 5], 7, "a")
        kernel.add_vehicle([1, 2, 3], 3, "b")
        kernel.add_vehicle([3, 4, 5], 4.5, "c")
        kernel.run(12)
        return kernel.get_state()

    def test_determinism(self):
        state1 = self._run()
        state2 = self._run()
        self.assertEqual(state1, state2)
        self.assertEqual(state1.tick, 12)

    def test_all_vehicles_eventually_park(self):
        kernel = SimulationKernel(two_cluster_network())
        kernel.add_vehicle([0, 1, 2, 3, 4, 5], 7, "a")
        kernel.add_vehicle([1, 2, 3], 3, "b")
        for _ in range(100):
            if kernel.is_idle():
                break
            kernel.run_tick()
        self.assertTrue(kernel.is_idle())
        self.assertEqual(len(kernel.parked_vehicles()), 2)
        for edge in kernel.network.edges():
            self.assertEqual(len(edge.queue), 0)

class TestKernelVehicles(unittest.TestCase):
    def setUp(self):
        self.recorder = FaultRecorder()
        self.kernel = SimulationKernel(two_cluster_network(), self.recorder)

    def test_add_vehicle_validates_path(self):
        with self.assertRaises(VertexNotFoundError):
            self.kernel.add_vehicle([0, 42], 5)
        with self.assertRaises(PathNotConnectedError):
            self.kernel.add_vehicle([0, 2], 5)
        self.assertEqual(self.kernel.state.vehicles, {})

    def test_duplicate_vehicle_id(self):
        self.kernel.add_vehicle([0, 1], 5, "dup")
        with self.assertRaises(DuplicateVehicleError):
            self.kernel.add_vehicle([1, 2], 5, "dup")

    def test_fault_isolated_to_one_vehicle(self):
        self.kernel.add_vehicle([0, 1, 2, 3], 5, "broken")
        self.kernel.add_vehicle([3, 4, 5], 1, "healthy")
        self.kernel.run_tick()

        self.kernel.network.graph.remove_edge(1, 2)
        self.kernel.run(3)

        self.assertNotIn("broken", self.kernel.state.vehicles)
        self.assertIn("broken", self.kernel.state.faulted)
        self.assertEqual(self.recorder.faults, [("broken", "PathNotConnectedError")])
        self.assertEqual(len(self.kernel.network.edge(0, 1).queue), 0)

        healthy = self.kernel.get_vehicle("healthy")
        self.assertEqual(list(healthy.ledger), [10, 6])
        self.assertEqual(self.kernel.get_state().faulted[0].id, "broken")

    def test_commands_run_at_start_of_tick(self):
        self.kernel.queue_command(AddVehicleCommand([0, 1, 2], 5, "queued"))
        self.assertNotIn("queued", self.kernel.state.vehicles)
        self.assertEqual(len(self.kernel.command_queue), 1)
        self.assertFalse(self.kernel.is_idle())
        self.kernel.run_tick()
        self.assertEqual(self.kernel.command_queue.pending(), [])
        vehicle = self.kernel.get_vehicle("queued")
        self.assertEqual(list(vehicle.ledger), [10, 5])

        self.kernel.queue_command(RemoveVehicleCommand("queued"))
        self.kernel.run_tick()
        with self.assertRaises(VehicleNotFoundError):
            self.kernel.get_vehicle("queued")
        self.assertEqual(len(self.kernel.network.edge(0, 1).queue), 0)

    def test_commands_drain_in_submission_order(self):
        self.kernel.queue_command(AddVehicleCommand([0, 1], 5, "twice"))
        self.kernel.queue_command(RemoveVehicleCommand("twice"))
        self.kernel.queue_command(AddVehicleCommand([3, 4], 5, "twice"))
        self.assertEqual([type(c).__name__ for c in self.kernel.command_queue.pending()],
                         ["AddVehicleCommand", "RemoveVehicleCommand", "AddVehicleCommand"])
        self.kernel.run_tick()
        vehicle = self.kernel.get_vehicle("twice")
        self.assertEqual(vehicle.current_edge.id, "3->4")
        self.assertEqual(len(self.kernel.network.edge(0, 1).queue), 0)

    def test_rejected_command_does_not_stop_tick(self):
        self.kernel.add_vehicle([3, 4], 4, "moving")
        self.kernel.queue_command(AddVehicleCommand([0, 5], 5, "bad"))
        self.kernel.queue_command(RemoveVehicleCommand("ghost"))
        self.kernel.run_tick()
        self.assertEqual(self.kernel.tick_id, 1)
        self.assertEqual(list(self.kernel.get_vehicle("moving").ledger), [6])

    def test_vehicle_state_snapshot(self):
        self.kernel.add_vehicle([0, 1], 4, "first")
        self.kernel.add_vehicle([0, 1], 2, "second")
        self.kernel.run_tick()

        first = self.kernel.get_vehicle_state("first")
        second = self.kernel.get_vehicle_state("second")
        self.assertEqual((first.edge, first.position, first.leading), ("0->1", 0, True))
        self.assertEqual((second.position, second.queueLength, second.leading), (1, 2, False))
        self.assertEqual(second.remainingDistance, 8)

class TestPartitionedSimulation(unittest.TestCase):
    def setUp(self):
        self.sim = PartitionedSimulation(two_cluster_network(), partitions=2)

    def test_regions_are_independent_subgraphs(self):
        self.assertEqual(len(self.sim.kernels), 2)
        left, right = (k.network for k in self.sim.kernels)
        self.assertEqual(sorted(e.id for e in left.edges()), ["0->1", "1->2"])
        self.assertEqual(sorted(e.id for e in right.edges()), ["3->4", "4->5"])

    def test_locate(self):
        self.assertEqual(self.sim.locate([0, 1, 2]), 0)
        self.assertEqual(self.sim.locate([3, 4, 5]), 1)
        with self.assertRaises(PathCrossesPartitionError):
            self.sim.locate([1, 2, 3])
        with self.assertRaises(VertexNotFoundError):
            self.sim.locate([0, 42])

    def test_run_in_parallel(self):
        self.sim.add_vehicle([0, 1, 2], 5, "left")
        self.sim.add_vehicle([3, 4, 5], 5, "right")
        with self.assertRaises(DuplicateVehicleError):
            self.sim.add_vehicle([3, 4], 5, "left")

        self.sim.run(6, max_workers=2)

        self.assertTrue(self.sim.get_vehicle("left").parked)
        self.assertTrue(self.sim.get_vehicle("right").parked)
        self.assertEqual([s.tick for s in self.sim.get_state()], [6, 6])
        with self.assertRaises(VehicleNotFoundError):
            self.sim.get_vehicle("nobody")

    def test_sequential_and_parallel_agree(self):
        other = PartitionedSimulation(two_cluster_network(), partitions=2)
        for sim in (self.sim, other):
            sim.add_vehicle([0, 1, 2], 3, "l")
            sim.add_vehicle([3, 4, 5], 4, "r")
        self.sim.run(3)
        other.run(3, max_workers=4)
        self.assertEqual(self.sim.get_state(), other.get_state())

class TestExperiment(unittest.TestCase):
    def test_headless_experiment(self):
        document = {
            "graph": {
                "vertices": [{"osmId": i, "x": float(i), "y": 0.0} for i in range(4)],
                "edges": (
                    [{"from": i, "to": i + 1, "length": 20.0, "maxSpeed": "50"} for i in range(3)]
                    + [{"from": i + 1, "to": i, "length": 20.0, "maxSpeed": "50"} for i in range(3)]
                ),
            }
        }
        with tempfile.TemporaryDirectory() as tmp:
            network_path = os.path.join(tmp, "network.json")
            output_path = os.path.join(tmp, "results.json")
            with open(network_path, "w") as f:
                json.dump(document, f)

            results = run_headless_experiment(network_path, output_path, vehicles=5, ticks=50, seed=7)
            with open(output_path) as f:
                written = json.load(f)

        self.assertEqual(results, written)
        self.assertLess(len(results), 50)
        self.assertEqual(results[-1]["active"], 0)
        self.assertEqual(results[-1]["parked"], 5)
        self.assertEqual(results[-1]["faulted"], 0)

if __name__ == '__main__':
    unittest.main()
