"""Thick-wall offset generation.

Turns a centerline point list into one filled band per segment. Each band
is offset toward the polygon exterior, and neighbouring offset lines are
intersected so closed polygons get mitred corners. The open tail of a
polygon still being drawn ends in a flat cap.
"""
from typing import Optional

from shared.types import Point, InnerWall, WallRegion, ThickWalls
from shared.geometry import (
    GeometryError, left_norm, off_pt, line_isect, signed_area, point_to_line_distance,
)


def offset_points(start: Point, end: Point, thickness: float,
                  alignment: str = "left") -> Optional[tuple[Point, Point]]:
    """Translate a segment by thickness along its right-hand normal.

    "right" alignment flips the side. None for a zero-length segment.
    """
    try:
        n = left_norm(start, end)
    except GeometryError:
        return None
    d = -thickness if alignment != "right" else thickness
    return off_pt(start, n, d), off_pt(end, n, d)


def offset_intersection(l1s: Point, l1e: Point, l2s: Point, l2e: Point) -> Point:
    """Meet point of two offset lines.

    Parallel lines fall back to the midpoint between the end of the first
    and the start of the second.
    """
    try:
        return line_isect(l1s, (l1e[0]-l1s[0], l1e[1]-l1s[1]),
                          l2s, (l2e[0]-l2s[0], l2e[1]-l2s[1]))
    except GeometryError:
        return ((l1e[0]+l2s[0])/2, (l1e[1]+l2s[1])/2)


def generate_thick_walls(points: list[Point], thickness: float,
                         closed: bool = False) -> ThickWalls:
    """Build a WallRegion for every non-degenerate segment of *points*.

    closed means the list is a finished polygon (first point repeated last)
    and the first and last bands are mitred against each other.
    """
    if len(points) < 2:
        return ThickWalls([], False)

    # Positive signed area is clockwise on screen; flip so bands face outward
    sign = 1 if signed_area(points) > 0 else -1

    segs = []
    for i in range(len(points)-1):
        off = offset_points(points[i], points[i+1], thickness*sign)
        if off is None:
            continue
        segs.append([i, points[i], points[i+1], off[0], off[1]])

    regions = []
    n = len(segs)
    for k in range(n):
        idx, s, e, os_, oe = segs[k]
        if closed or k < n-1:
            nxt = segs[(k+1) % n]
            outer_end = offset_intersection(os_, oe, nxt[3], nxt[4])
        else:
            outer_end = oe
        if k > 0:
            prv = segs[k-1]
            outer_start = offset_intersection(prv[3], prv[4], os_, oe)
        elif closed:
            last = segs[-1]
            outer_start = offset_intersection(last[3], last[4], os_, oe)
        else:
            outer_start = os_
        # Later bands mitre against the already-joined offset line
        segs[k][3], segs[k][4] = outer_start, outer_end
        regions.append(WallRegion(idx, [s, e, outer_end, outer_start],
                                  (s, e), (outer_start, outer_end)))
    return ThickWalls(regions, closed)


def inner_wall_region(wall: InnerWall, thickness: float) -> Optional[list[Point]]:
    """Filled band of a partition according to its alignment.

    left/right put the full thickness on one side of the centerline;
    center splits it half and half.
    """
    off = offset_points(wall.start, wall.end, thickness, wall.alignment)
    if off is None:
        return None
    os_, oe = off
    s, e = wall.start, wall.end
    if wall.alignment in ("left", "right"):
        return [s, e, oe, os_]
    hs = ((os_[0]-s[0])/2, (os_[1]-s[1])/2)
    he = ((oe[0]-e[0])/2, (oe[1]-e[1])/2)
    return [(s[0]-hs[0], s[1]-hs[1]), (e[0]-he[0], e[1]-he[1]),
            (e[0]+he[0], e[1]+he[1]), (s[0]+hs[0], s[1]+hs[1])]


def hovered_wall_index(x: float, y: float, walls: ThickWalls, thickness: float) -> int:
    """Index of the first band whose offset line is within thickness of (x, y)."""
    for region in walls.segments:
        (sx, sy), (ex, ey) = region.outer_line
        if point_to_line_distance(x, y, sx, sy, ex, ey).distance <= thickness:
            return region.index
    return -1
