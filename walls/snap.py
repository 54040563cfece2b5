"""Magnetic snap resolution for raw cursor points.

Passes run in a fixed order: tangent points, endpoints, segment
interiors, then the orthogonal axis through the last placed point.
Endpoints compare at ENDPOINT_PRIORITY times their real distance, so a
vertex wins over a line that is nominally a little closer.
"""
import math
from typing import NamedTuple, Optional

from shared.types import Point, InnerWall
from shared.geometry import distance, point_to_line_distance
from walls.boundary import segment_count, is_point_on_wall_segment
from walls.constants import (
    ENDPOINT_PRIORITY, ENDPOINT_CATCH_FACTOR,
    TANGENT_RADIUS, TANGENT_CATCH_FACTOR, ORTHO_SNAP_DEG,
)


class Snap(NamedTuple):
    point: Point
    distance: float  # effective (weighted) distance


def _segments(points: list[Point], inner_walls: list[InnerWall]):
    for i in range(segment_count(points)):
        yield points[i], points[i+1]
    for w in inner_walls:
        yield w.start, w.end


def find_tangent_points(p: Point, points: list[Point], magnet_distance: float,
                        radius: float = TANGENT_RADIUS) -> list[Point]:
    """Points at *radius* from p along each boundary segment's normal that land on it."""
    out = []
    for i in range(segment_count(points)):
        s, e = points[i], points[i+1]
        dx = e[0]-s[0]; dy = e[1]-s[1]; L = math.hypot(dx, dy)
        if L == 0:
            continue
        px, py = -dy/L, dx/L
        for sign in (1, -1):
            cand = (p[0]+sign*px*radius, p[1]+sign*py*radius)
            if is_point_on_wall_segment(cand, s, e, magnet_distance):
                out.append(cand)
    return out


def find_regular_magnet_point(x: float, y: float, points: list[Point],
                              inner_walls: list[InnerWall],
                              magnet_distance: float) -> Optional[Snap]:
    """Endpoint snap, falling back to the nearest segment interior."""
    q = (x, y); best = None; min_d = math.inf
    catch = magnet_distance*ENDPOINT_CATCH_FACTOR
    for s, e in _segments(points, inner_walls):
        for end in (s, e):
            d = distance(q, end)
            if d < catch and d*ENDPOINT_PRIORITY < min_d:
                min_d = d*ENDPOINT_PRIORITY; best = end
    if best is not None:
        return Snap(best, min_d)

    for s, e in _segments(points, inner_walls):
        r = point_to_line_distance(x, y, s[0], s[1], e[0], e[1])
        if r.distance < magnet_distance and 0 <= r.param <= 1 and r.distance < min_d:
            min_d = r.distance; best = r.point
    return Snap(best, min_d) if best is not None else None


def ortho_point(origin: Point, q: Point) -> Point:
    """Nearest point to q on the horizontal or vertical axis through origin."""
    if abs(q[1]-origin[1]) <= abs(q[0]-origin[0]):
        return (q[0], origin[1])
    return (origin[0], q[1])


def ortho_align(start: Point, end: Point, threshold: float = ORTHO_SNAP_DEG,
                diagonals: bool = False) -> Point:
    """Square up *end* against *start* when the direction is nearly axis-aligned.

    With diagonals, directions within *threshold* of 45 degrees snap onto the
    diagonal at the same length. Otherwise end is returned as given.
    """
    dx = end[0]-start[0]; dy = end[1]-start[1]
    angle = math.degrees(math.atan2(dy, dx))
    if abs(angle) <= threshold or abs(angle) >= 180-threshold:
        return (end[0], start[1])
    if abs(angle-90) <= threshold or abs(angle+90) <= threshold:
        return (start[0], end[1])
    if diagonals and (abs(abs(angle)-45) <= threshold or abs(abs(angle)-135) <= threshold):
        unit = math.hypot(dx, dy)/math.sqrt(2)
        sign = 1 if angle > 0 else -1
        if abs(angle) < 90:
            return (start[0]+unit, start[1]+unit*sign)
        return (start[0]-unit, start[1]+unit*sign)
    return end


def find_magnet_point(x: float, y: float, points: list[Point],
                      inner_walls: list[InnerWall], magnet_distance: float,
                      use_ortho_snap: bool = False,
                      snap_to_tangent: bool = False) -> Point:
    """Resolve a raw cursor position to its snap target, or return it unchanged."""
    q = (x, y)
    if snap_to_tangent:
        best = None; min_d = math.inf
        for tp in find_tangent_points(q, points, magnet_distance):
            d = distance(q, tp)
            if d < magnet_distance:
                return tp
            if d < magnet_distance*TANGENT_CATCH_FACTOR and d < min_d:
                min_d = d; best = tp
        if best is not None:
            return best

    snap = find_regular_magnet_point(x, y, points, inner_walls, magnet_distance)
    if use_ortho_snap and points:
        op = ortho_point(points[-1], q)
        if snap is None or distance(op, q) < snap.distance:
            return op
    return snap.point if snap is not None else q
