from streets.domain.models import SimulationSnapshot, VehicleFault, VehicleState
from streets.domain.state import SimulationState
from streets.simulation.vehicle import Vehicle

class SnapshotBuilder:
    def build(self, state: SimulationState) -> SimulationSnapshot:
        return SimulationSnapshot(
            tick=state.tick_id,
            vehicles=[self.vehicle_state(v) for v in state.vehicles.values()],
            faulted=[VehicleFault(id=vid, reason=reason) for vid, reason in state.faulted.items()],
        )

    def vehicle_state(self, vehicle: Vehicle) -> VehicleState:
        edge = vehicle.current_edge
        return VehicleState(
            id=vehicle.id,
            speed=vehicle.speed,
            parked=vehicle.parked,
            edge=edge.id if edge is not None else None,
            position=vehicle.position() if edge is not None else None,
            queueLength=len(edge.queue) if edge is not None else 0,
            leading=vehicle.is_leading(),
            remainingDistance=vehicle.remaining_distance,
            ledger=list(vehicle.ledger),
        )
