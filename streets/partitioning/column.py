from typing import List

from streets.domain.graph import RoadNetwork
from streets.domain.models import Point, Rect
from streets.partitioning.base import Partitioner, split_interval, vertices_in_box

class ColumnPartitioner(Partitioner):
    """
    Splits the bounding box into n equal-width vertical strips sharing the
    full y-extent. Bounds are inclusive, so a vertex sitting exactly on a
    strip boundary belongs to both neighbouring strips.
    """

    def divide_into_rects(self, n: int, network: RoadNetwork) -> List[Rect]:
        self._check_count(n)
        root_bot, root_top = self.bounding_box(network)
        vertices = network.vertices_with_edges()
        xs = split_interval(root_bot.x, root_top.x, n)

        rects = []
        for i in range(n):
            bot_left = Point(x=xs[i], y=root_bot.y)
            top_right = Point(x=xs[i + 1], y=root_top.y)
            rect = Rect(
                bot_left=bot_left,
                top_right=top_right,
                vertices=vertices_in_box(vertices, bot_left, top_right),
            )
            self.observer.rect_created(i, rect)
            rects.append(rect)
        return rects
