from abc import ABC, abstractmethod
from typing import Any

class SimulationObserver(ABC):
    """Receives the notable state transitions of vehicles and partitioners."""

    @abstractmethod
    def vehicle_entered_edge(self, vehicle: Any, edge: Any, position: int):
        pass

    @abstractmethod
    def vehicle_transitioned(self, vehicle: Any, edge: Any):
        pass

    @abstractmethod
    def vehicle_parked(self, vehicle: Any):
        pass

    @abstractmethod
    def vehicle_faulted(self, vehicle: Any, error: Exception):
        pass

    @abstractmethod
    def vehicle_info(self, vehicle: Any, message: str):
        pass

    @abstractmethod
    def bounding_box_computed(self, bot_left: Any, top_right: Any):
        pass

    @abstractmethod
    def rect_created(self, index: int, rect: Any):
        pass
