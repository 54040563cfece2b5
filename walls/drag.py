"""Wall drag algorithms.

A dragged wall only ever moves along its own normal. Boundary walls carry
their two vertices with them and the move is propagated to any other wall
the moved one now crosses; partitions are re-snapped between whatever
they cross after the move.
"""
import logging
from collections import deque

import numpy as np

from shared.types import Point, InnerWall, Attachment, Attachments
from shared.geometry import line_intersection, points_equal, distance
from walls.boundary import segment_count, wall_endpoints, set_vertex
from walls.constants import (
    MAX_PROPAGATION_PASSES, PARTITION_EXTEND, MIN_SEGMENT_LENGTH, SHARED_POINT_EPS,
)

logger = logging.getLogger(__name__)


def _pt(v) -> Point:
    return (float(v[0]), float(v[1]))


def normal_offset(s: Point, e: Point, p: Point) -> np.ndarray:
    """Component of p - s along the unit normal of s-e, as a displacement vector."""
    d = np.subtract(e, s, dtype=float)
    L = np.hypot(*d)
    if L == 0:
        return np.zeros(2)
    n = np.array([-d[1], d[0]])/L
    return np.dot(np.subtract(p, s, dtype=float), n)*n


def propagate_wall_move(points: list[Point], moved: int, closed: bool) -> set[int]:
    """Reconnect walls that the moved wall now crosses.

    Worklist over updated walls: any other wall crossing an updated one has
    its nearer endpoint pulled onto the crossing and becomes updated itself.
    Returns the set of updated wall indices.
    """
    updated = {moved}
    queue = deque([moved])
    passes = 0
    while queue and passes < MAX_PROPAGATION_PASSES:
        passes += 1
        u = queue.popleft()
        us, ue = wall_endpoints(points, u)
        for i in range(segment_count(points)):
            if i in updated:
                continue
            hit = line_intersection(points[i], points[i+1], us, ue)
            if not (hit and hit.on_line1 and hit.on_line2):
                continue
            vertex = i if hit.ua < 0.5 else i+1
            set_vertex(points, vertex, (hit.x, hit.y), closed)
            updated.add(i)
            queue.append(i)
    if queue:
        logger.warning("Wall move propagation stopped after %d passes", passes)
    return updated


def move_boundary_wall(points: list[Point], index: int, x: float, y: float,
                       closed: bool) -> list[Point]:
    """New point list with wall *index* slid along its normal through (x, y)."""
    pts = list(points)
    s, e = wall_endpoints(pts, index)
    move = normal_offset(s, e, (x, y))
    set_vertex(pts, index, _pt(np.add(s, move)), closed)
    set_vertex(pts, (index+1) % len(pts), _pt(np.add(e, move)), closed)
    propagate_wall_move(pts, index, closed)
    return pts


def drag_inner_wall(points: list[Point], inner_walls: list[InnerWall], index: int,
                    original: tuple[Point, Point], previous: tuple[Point, Point],
                    delta: tuple[float, float]) -> bool:
    """Slide partition *index* by the normal part of *delta* and re-snap its ends.

    original is the partition at selection time, previous its ends before
    this update. The translated line is extended both ways and the nearest
    crossing on each side of its midpoint becomes the new end. Partitions
    that shared an end with it follow. Returns False, leaving everything
    untouched, when there is no crossing on one side.
    """
    os_, oe = original
    d = np.subtract(oe, os_, dtype=float)
    L = np.hypot(*d)
    if L == 0:
        return False
    u = d/L
    move = normal_offset(os_, oe, np.add(os_, delta))
    mid = (np.add(os_, move) + np.add(oe, move))/2
    far_s = _pt(mid - u*PARTITION_EXTEND); far_e = _pt(mid + u*PARTITION_EXTEND)

    behind = []; ahead = []
    def _check(a, b, wall_index, is_outer):
        hit = line_intersection(far_s, far_e, a, b)
        if hit and hit.on_line2:
            p = (hit.x, hit.y)
            along = float(np.dot(np.subtract(p, mid), u))
            att = Attachment(p, wall_index, is_outer, False, hit.ub)
            (behind if along < 0 else ahead).append((abs(along), att))

    for i in range(segment_count(points)):
        _check(points[i], points[i+1], i, True)
    for j, other in enumerate(inner_walls):
        if j != index:
            _check(other.start, other.end, j, False)

    if not behind or not ahead:
        return False
    sa = min(behind, key=lambda c: c[0])[1]; ea = min(ahead, key=lambda c: c[0])[1]
    if distance(sa.point, ea.point) < MIN_SEGMENT_LENGTH:
        return False

    wall = inner_walls[index]
    inner_walls[index] = wall._replace(start=sa.point, end=ea.point, attachments=Attachments(sa, ea))

    prev_s, prev_e = previous
    def _follow(p, att):
        for old, new in ((prev_s, sa.point), (prev_e, ea.point)):
            if points_equal(p, old, SHARED_POINT_EPS):
                return new, (att._replace(point=new) if att else att)
        return p, att

    for j, other in enumerate(inner_walls):
        if j == index:
            continue
        ns, nsa = _follow(other.start, other.attachments.start)
        ne, nea = _follow(other.end, other.attachments.end)
        if (ns, ne) != (other.start, other.end):
            inner_walls[j] = other._replace(start=ns, end=ne, attachments=Attachments(nsa, nea))
    return True
