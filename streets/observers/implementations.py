import logging
from typing import Any, Optional

from streets.domain import config
from streets.observers.base import SimulationObserver

class NullObserver(SimulationObserver):
    def vehicle_entered_edge(self, vehicle: Any, edge: Any, position: int):
        pass

    def vehicle_transitioned(self, vehicle: Any, edge: Any):
        pass

    def vehicle_parked(self, vehicle: Any):
        pass

    def vehicle_faulted(self, vehicle: Any, error: Exception):
        pass

    def vehicle_info(self, vehicle: Any, message: str):
        pass

    def bounding_box_computed(self, bot_left: Any, top_right: Any):
        pass

    def rect_created(self, index: int, rect: Any):
        pass

class LoggingObserver(SimulationObserver):
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(config.LOGGER_NAME)

    def vehicle_entered_edge(self, vehicle: Any, edge: Any, position: int):
        self.logger.info("Vehicle %s has entered edge %s at position %d", vehicle.id, edge.id, position)

    def vehicle_transitioned(self, vehicle: Any, edge: Any):
        self.logger.debug("Vehicle %s is leaving edge %s", vehicle.id, edge.id)

    def vehicle_parked(self, vehicle: Any):
        self.logger.info("Vehicle %s has arrived at destination", vehicle.id)

    def vehicle_faulted(self, vehicle: Any, error: Exception):
        self.logger.error("Vehicle %s removed from simulation: %s", vehicle.id, error)

    def vehicle_info(self, vehicle: Any, message: str):
        self.logger.info(message)

    def bounding_box_computed(self, bot_left: Any, top_right: Any):
        self.logger.debug("Bottom left vertex: (%s, %s)", bot_left.x, bot_left.y)
        self.logger.debug("Top right vertex: (%s, %s)", top_right.x, top_right.y)

    def rect_created(self, index: int, rect: Any):
        self.logger.debug("Rect %d: x=[%s, %s] with %d vertices",
                          index, rect.bot_left.x, rect.top_right.x, len(rect.vertices))

def configure_logging(level: str = config.LOG_LEVEL):
    logging.basicConfig(level=level, format=config.LOG_FORMAT)
