from abc import ABC, abstractmethod
from typing import Any, List, Optional

class Command(ABC):
    @abstractmethod
    def execute(self, kernel: Any):
        pass

class AddVehicleCommand(Command):
    def __init__(self, path: List[int], speed: float, vehicle_id: Optional[str] = None):
        self.path = path
        self.speed = speed
        self.vehicle_id = vehicle_id

    def execute(self, kernel: Any):
        return kernel.add_vehicle(self.path, self.speed, self.vehicle_id)

class RemoveVehicleCommand(Command):
    def __init__(self, vehicle_id: str):
        self.vehicle_id = vehicle_id

    def execute(self, kernel: Any):
        return kernel.remove_vehicle(self.vehicle_id)
