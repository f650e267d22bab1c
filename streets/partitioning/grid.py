from typing import List, Optional

from streets.domain.graph import RoadNetwork
from streets.domain.models import Point, Rect
from streets.observers.base import SimulationObserver
from streets.partitioning.base import Partitioner, split_interval, vertices_in_box

class GridPartitioner(Partitioner):
    """2-D variant: `rows` horizontal bands times n / rows columns, numbered row by row from the bottom."""

    def __init__(self, rows: int, observer: Optional[SimulationObserver] = None):
        super().__init__(observer)
        if rows < 1:
            raise ValueError(f"rows must be at least 1, got {rows}")
        self.rows = rows

    def divide_into_rects(self, n: int, network: RoadNetwork) -> List[Rect]:
        self._check_count(n)
        if n % self.rows != 0:
            raise ValueError(f"{n} partitions cannot be laid out on {self.rows} rows")
        cols = n // self.rows

        root_bot, root_top = self.bounding_box(network)
        vertices = network.vertices_with_edges()
        xs = split_interval(root_bot.x, root_top.x, cols)
        ys = split_interval(root_bot.y, root_top.y, self.rows)

        rects = []
        for row in range(self.rows):
            for col in range(cols):
                bot_left = Point(x=xs[col], y=ys[row])
                top_right = Point(x=xs[col + 1], y=ys[row + 1])
                rect = Rect(
                    bot_left=bot_left,
                    top_right=top_right,
                    vertices=vertices_in_box(vertices, bot_left, top_right),
                )
                self.observer.rect_created(len(rects), rect)
                rects.append(rect)
        return rects
