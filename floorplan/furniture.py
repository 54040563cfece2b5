"""Furniture placement against the room walls.

A piece of furniture is an axis-aligned rectangle (x, y, width, height)
turned by *rotation* radians about its centre. Dragged near a boundary
wall it lies flat against the wall's interior side; a placement that
would push it through a neighbouring wall is refused.
"""
import logging
import math
from typing import NamedTuple, Optional

import numpy as np

from shared.types import Point
from shared.geometry import segments_cross, point_in_polygon
from walls.boundary import segment_count
from walls.constants import DEFAULT_SOFA_WIDTH, DEFAULT_SOFA_HEIGHT, FURNITURE_NORMAL_PROBE

logger = logging.getLogger(__name__)


class Furniture(NamedTuple):
    x: float
    y: float
    width: float = DEFAULT_SOFA_WIDTH
    height: float = DEFAULT_SOFA_HEIGHT
    rotation: float = 0.0
    name: str = "sofa"

    @property
    def center(self) -> Point:
        return (self.x + self.width/2, self.y + self.height/2)

    def corners(self) -> list[Point]:
        """Rectangle corners after rotation, clockwise from top-left."""
        hw, hh = self.width/2, self.height/2
        local = np.array([(-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)])
        c, s = math.cos(self.rotation), math.sin(self.rotation)
        rot = np.array([[c, -s], [s, c]])
        world = local @ rot.T + np.array(self.center)
        return [(float(px), float(py)) for px, py in world]

    def is_point_inside(self, x: float, y: float) -> bool:
        if self.rotation == 0:
            return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height
        return point_in_polygon((x, y), self.corners())

    def moved_to(self, x: float, y: float) -> "Furniture":
        return self._replace(x=x, y=y)

    def centered_at(self, c: Point) -> "Furniture":
        return self._replace(x=c[0] - self.width/2, y=c[1] - self.height/2)


def center_in(item: Furniture, bounds: list[Point]) -> Furniture:
    """Place *item* at the centre of the bounding box of *bounds*."""
    if not bounds:
        return item
    xs = [p[0] for p in bounds]; ys = [p[1] for p in bounds]
    return item.centered_at(((min(xs)+max(xs))/2, (min(ys)+max(ys))/2))


def inward_normal(walls, angle: float, at: Point) -> tuple[float, float]:
    """Unit normal of the wall pointing into the room at *at*."""
    n = (math.cos(angle + math.pi/2), math.sin(angle + math.pi/2))
    probe = (at[0] + n[0]*FURNITURE_NORMAL_PROBE, at[1] + n[1]*FURNITURE_NORMAL_PROBE)
    if walls.is_point_in_polygon(probe):
        return n
    return (-n[0], -n[1])


def collides_with_walls(walls, item: Furniture, wall_index: int = -1) -> bool:
    """True if an edge of *item* crosses a boundary wall.

    With a wall_index only the two walls either side of it are checked;
    the wall the item rests against is skipped.
    """
    pts = walls.points
    total = segment_count(pts)
    if total == 0:
        return False
    if wall_index != -1:
        to_check = {(wall_index - 1) % total, (wall_index + 1) % total} - {wall_index}
    else:
        to_check = set(range(total))
    corners = item.corners()
    for i in sorted(to_check):
        a, b = pts[i], pts[i+1]
        for j in range(4):
            if segments_cross(corners[j], corners[(j+1) % 4], a, b):
                logger.debug("%s collides with wall %d", item.name, i)
                return True
    return False


def snap_to_wall(walls, item: Furniture, x: float, y: float,
                 magnet_distance: Optional[float] = None) -> Furniture:
    """Move *item* to top-left (x, y), snapping it against a nearby wall.

    Returns the placed item, or the unmoved *item* when the placement
    collides with the walls.
    """
    if magnet_distance is None:
        magnet_distance = walls.magnet_distance
    moved = item.moved_to(x, y)
    cx, cy = moved.center
    nearest = walls.find_nearest_wall(cx, cy)
    if nearest.point is not None and nearest.distance < magnet_distance:
        nx, ny = inward_normal(walls, nearest.angle, nearest.point)
        rotation = (math.atan2(ny, nx) - math.pi/2) % (2*math.pi)
        c = (nearest.point[0] + nx*item.height/2, nearest.point[1] + ny*item.height/2)
        placed = moved.centered_at(c)._replace(rotation=rotation)
        if collides_with_walls(walls, placed, nearest.wall_index):
            return item
        logger.debug("%s snapped to wall %d", item.name, nearest.wall_index)
        return placed
    placed = moved._replace(rotation=0.0)
    if collides_with_walls(walls, placed):
        return item
    return placed
