"""Boundary polygon queries.

The boundary is a list of points; segment i runs from points[i] to
points[i+1]. A closed boundary repeats its first point at the end, so
vertex 0 and vertex n-1 are the same corner and move together.
"""
import math
from typing import Optional

from scipy.spatial import cKDTree

from shared.types import Point, WallLength, NearestWall, OnWall
from shared.geometry import distance, point_to_line_distance, point_in_polygon
from walls.constants import ON_WALL_TOLERANCE, MAX_THICKNESS, MIN_SEGMENT_LENGTH


def segment_count(points: list[Point]) -> int:
    return max(len(points)-1, 0)

def wall_endpoints(points: list[Point], i: int) -> tuple[Point, Point]:
    return points[i], points[(i+1) % len(points)]

def set_vertex(points: list[Point], i: int, p: Point, closed: bool) -> None:
    """Move vertex i in place, keeping the closing duplicate in sync."""
    n = len(points)
    points[i] = p
    if closed and n > 1:
        if i == 0:
            points[n-1] = p
        elif i == n-1:
            points[0] = p

def closes_polygon(p: Point, points: list[Point], magnet_distance: float) -> bool:
    """True if p is within the magnet box around the first point."""
    if not points:
        return False
    first = points[0]
    return abs(p[0]-first[0]) < magnet_distance and abs(p[1]-first[1]) < magnet_distance

def wall_lengths(points: list[Point]) -> list[WallLength]:
    return [WallLength(i, distance(points[i], points[i+1]), points[i], points[i+1])
            for i in range(segment_count(points))]

def parse_thickness(value) -> Optional[int]:
    """Parse a user thickness entry; None when it is not acceptable.

    Numbers and numeric strings are truncated to an integer and must fall
    in 1..MAX_THICKNESS.
    """
    if isinstance(value, bool):
        return None
    try:
        thickness = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    if 0 < thickness <= MAX_THICKNESS:
        return thickness
    return None

# ============================================================
# Nearest-feature queries
# ============================================================
def find_nearest_wall(x: float, y: float, points: list[Point]) -> NearestWall:
    """Closest boundary segment to (x, y) with its direction angle."""
    best = NearestWall(None, math.inf, 0.0, -1)
    for i in range(segment_count(points)):
        s, e = points[i], points[i+1]
        r = point_to_line_distance(x, y, s[0], s[1], e[0], e[1])
        if r.distance < best.distance:
            best = NearestWall(r.point, r.distance, math.atan2(e[1]-s[1], e[0]-s[0]), i)
    return best

def find_nearest_wall_point(p: Point, points: list[Point],
                            magnet_distance: float) -> Optional[tuple[Point, int]]:
    """Closest point on any boundary segment within the magnet distance."""
    best = None; min_d = math.inf
    for i in range(segment_count(points)):
        s, e = points[i], points[i+1]
        r = point_to_line_distance(p[0], p[1], s[0], s[1], e[0], e[1])
        if r.distance < magnet_distance and r.distance < min_d:
            min_d = r.distance; best = (r.point, i)
    return best

def find_nearest_polygon_point(p: Point, points: list[Point]) -> Optional[tuple[Point, int]]:
    """Nearest boundary vertex and its index."""
    if not points:
        return None
    tree = cKDTree(points)
    _, idx = tree.query(p)
    idx = int(idx)
    return points[idx], idx

def is_point_on_wall_segment(p: Point, a: Point, b: Point, magnet_distance: float) -> bool:
    r = point_to_line_distance(p[0], p[1], a[0], a[1], b[0], b[1])
    return r.distance < magnet_distance and 0 <= r.param <= 1

def is_point_on_polygon_wall(p: Point, points: list[Point],
                             tolerance: float = ON_WALL_TOLERANCE) -> Optional[OnWall]:
    """First boundary segment that p lies on, or None.

    is_endpoint marks a point close enough to a vertex that it should be
    anchored to the vertex rather than to the line.
    """
    for i in range(segment_count(points)):
        s, e = points[i], points[i+1]
        r = point_to_line_distance(p[0], p[1], s[0], s[1], e[0], e[1])
        if r.distance < tolerance and 0 <= r.param <= 1:
            near_vertex = min(distance(r.point, s), distance(r.point, e)) < MIN_SEGMENT_LENGTH
            return OnWall(i, r.param, r.point, near_vertex)
    return None

def is_point_in_polygon(p: Point, points: list[Point]) -> bool:
    return point_in_polygon(p, points)
