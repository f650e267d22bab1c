from typing import Dict, Iterable, Optional

from streets.domain.errors import StreetsError
from streets.observers.base import SimulationObserver
from streets.observers.implementations import NullObserver
from streets.simulation.vehicle import Vehicle

class VehicleSystem:
    def __init__(self, observer: Optional[SimulationObserver] = None):
        self.observer = observer or NullObserver()

    def update(self, vehicles: Iterable[Vehicle]) -> Dict[str, StreetsError]:
        """Step every vehicle once, in the given order. Returns the vehicles that faulted."""
        faults: Dict[str, StreetsError] = {}
        for vehicle in vehicles:
            try:
                vehicle.step()
            except StreetsError as e:
                vehicle.detach()
                self.observer.vehicle_faulted(vehicle, e)
                faults[vehicle.id] = e
        return faults
