"""Partition (inner wall) network.

Partitions are kept in a plain list that these functions edit in place.
A crossing between two partitions is always recorded by splitting the
older one, so the network never holds an unrecorded crossing.
"""
import logging
from typing import Optional

from shared.types import (
    Point, InnerWall, Attachment, Attachments, Helper, Intersection, OnWall,
)
from shared.geometry import (
    distance, lerp, line_intersection, point_to_line_distance, parametric_position,
)
from walls.boundary import (
    segment_count, is_point_on_polygon_wall, find_nearest_polygon_point,
)
from walls.constants import MIN_SEGMENT_LENGTH, ON_WALL_TOLERANCE, POINT_EPS

logger = logging.getLogger(__name__)


# ============================================================
# Queries
# ============================================================
def find_all_intersections(start: Point, end: Point, points: list[Point],
                           inner_walls: list[InnerWall]) -> list[Intersection]:
    """Crossings of segment start-end with the boundary and all partitions.

    Hits closer than MIN_SEGMENT_LENGTH to either end, or to the last kept
    hit, are dropped, so every piece between kept hits is long enough.
    Sorted by distance from start.
    """
    found: list[Intersection] = []

    def _add(a, b, index, is_outer):
        hit = line_intersection(start, end, a, b)
        if not (hit and hit.on_line1 and hit.on_line2):
            return
        p = (hit.x, hit.y)
        if distance(p, start) < MIN_SEGMENT_LENGTH or distance(p, end) < MIN_SEGMENT_LENGTH:
            return
        if any(abs(f.point[0]-p[0]) < POINT_EPS and abs(f.point[1]-p[1]) < POINT_EPS
               for f in found):
            return
        found.append(Intersection(p, index, is_outer, hit.ua))

    for i in range(segment_count(points)):
        _add(points[i], points[i+1], i, True)
    for i, w in enumerate(inner_walls):
        _add(w.start, w.end, i, False)

    found.sort(key=lambda f: distance(start, f.point))
    kept: list[Intersection] = []
    for f in found:
        if kept and distance(kept[-1].point, f.point) < MIN_SEGMENT_LENGTH:
            continue
        kept.append(f)
    return kept


def is_point_on_inner_wall(p: Point, inner_walls: list[InnerWall],
                           tolerance: float = ON_WALL_TOLERANCE) -> Optional[OnWall]:
    for i, w in enumerate(inner_walls):
        r = point_to_line_distance(p[0], p[1], w.start[0], w.start[1], w.end[0], w.end[1])
        if r.distance < tolerance and 0 <= r.param <= 1:
            near_end = min(distance(r.point, w.start), distance(r.point, w.end)) < MIN_SEGMENT_LENGTH
            return OnWall(i, r.param, r.point, near_end)
    return None


def recalculate_helper_points(wall: InnerWall, points: list[Point],
                              inner_walls: list[InnerWall]) -> tuple[Helper, ...]:
    """Junction markers where *wall* crosses other partitions; boundary hits are skipped."""
    return tuple(Helper(f.point[0], f.point[1])
                 for f in find_all_intersections(wall.start, wall.end, points, inner_walls)
                 if not f.is_outer)


def refresh_helpers(points: list[Point], inner_walls: list[InnerWall]) -> None:
    """Recompute junction markers of every partition against the current network."""
    for i, w in enumerate(inner_walls):
        inner_walls[i] = w._replace(helpers=recalculate_helper_points(w, points, inner_walls))

# ============================================================
# Splitting
# ============================================================
def _split(inner_walls: list[InnerWall], index: int, point: Point,
           is_point: bool) -> Optional[tuple[InnerWall, InnerWall]]:
    if not 0 <= index < len(inner_walls):
        return None
    wall = inner_walls[index]
    d_start = distance(point, wall.start); d_end = distance(point, wall.end)
    if d_start < MIN_SEGMENT_LENGTH or d_end < MIN_SEGMENT_LENGTH:
        return None
    first = InnerWall(
        wall.start, point, wall.alignment,
        Attachments(wall.attachments.start,
                    Attachment(point, None, False, is_point, 1.0, True)),
        tuple(h for h in wall.helpers if distance((h.x, h.y), wall.start) < d_start),
    )
    second = InnerWall(
        point, wall.end, wall.alignment,
        Attachments(Attachment(point, None, False, is_point, 0.0, True),
                    wall.attachments.end),
        tuple(h for h in wall.helpers if distance((h.x, h.y), wall.end) < d_end),
    )
    inner_walls[index:index+1] = [first, second]
    logger.debug("Split inner wall %d at (%.2f, %.2f)", index, point[0], point[1])
    return first, second


def split_inner_wall_at_point(inner_walls: list[InnerWall], index: int,
                              point: Point) -> Optional[tuple[InnerWall, InnerWall]]:
    """Split where another wall's end lands; the junction is a rigid vertex.

    Returns the two halves, or None if either would be shorter than
    MIN_SEGMENT_LENGTH.
    """
    return _split(inner_walls, index, point, True)


def split_inner_wall_at_intersection(inner_walls: list[InnerWall], index: int,
                                     point: Point) -> Optional[tuple[InnerWall, InnerWall]]:
    """Split where another wall crosses through."""
    return _split(inner_walls, index, point, False)

# ============================================================
# Construction
# ============================================================
def _hit_anchor(f: Intersection, points: list[Point],
                inner_walls: list[InnerWall]) -> Attachment:
    if f.is_outer:
        a, b = points[f.wall_index], points[f.wall_index+1]
    else:
        a, b = inner_walls[f.wall_index].start, inner_walls[f.wall_index].end
    t = parametric_position(f.point, a, b)
    at_vertex = f.is_outer and min(distance(f.point, a), distance(f.point, b)) < MIN_SEGMENT_LENGTH
    return Attachment(f.point, f.wall_index, f.is_outer, at_vertex, t)


def _boundary_anchor(p: Point, points: list[Point]) -> Optional[Attachment]:
    on = is_point_on_polygon_wall(p, points)
    if on is None:
        return None
    return Attachment(p, on.wall_index, True, on.is_endpoint, on.param)


def add_inner_wall(points: list[Point], inner_walls: list[InnerWall],
                   start: Point, end: Point, alignment: str = "center") -> list[InnerWall]:
    """Add a partition from start to end, split at everything it crosses.

    Existing partitions crossed by the new line are split first; an end
    lying on a partition splits it there and snaps onto the split point.
    Returns the new pieces in order from start to end.
    """
    if distance(start, end) < MIN_SEGMENT_LENGTH:
        logger.warning("Inner wall too short: %s -> %s", start, end)
        return []

    crossings = []
    for i, w in enumerate(inner_walls):
        hit = line_intersection(start, end, w.start, w.end)
        if not (hit and hit.on_line1 and hit.on_line2):
            continue
        p = (hit.x, hit.y)
        # Ends landing on a partition are handled as T-junctions below
        if distance(p, start) >= MIN_SEGMENT_LENGTH and distance(p, end) >= MIN_SEGMENT_LENGTH:
            crossings.append((i, p))
    # Highest index first so earlier indices stay valid
    for i, p in reversed(crossings):
        split_inner_wall_at_intersection(inner_walls, i, p)

    on_start = is_point_on_inner_wall(start, inner_walls)
    if on_start and split_inner_wall_at_point(inner_walls, on_start.wall_index, on_start.point):
        start = on_start.point
    on_end = is_point_on_inner_wall(end, inner_walls)
    if on_end and split_inner_wall_at_point(inner_walls, on_end.wall_index, on_end.point):
        end = on_end.point

    hits = find_all_intersections(start, end, points, inner_walls)
    knots = [start] + [f.point for f in hits] + [end]
    anchors = ([_boundary_anchor(start, points)]
               + [_hit_anchor(f, points, inner_walls) for f in hits]
               + [_boundary_anchor(end, points)])

    new_walls = [InnerWall(knots[k], knots[k+1], alignment, Attachments(anchors[k], anchors[k+1]))
                 for k in range(len(knots)-1)]
    inner_walls.extend(new_walls)
    refresh_helpers(points, inner_walls)
    logger.debug("Added inner wall in %d segment(s)", len(new_walls))
    return inner_walls[len(inner_walls)-len(new_walls):]

# ============================================================
# Boundary edits
# ============================================================
def _reanchor(p: Point, att: Optional[Attachment], old_points: list[Point],
              new_points: list[Point], closed: bool) -> tuple[Point, Optional[Attachment]]:
    if att is None or not att.is_outer or att.wall_index is None:
        return p, att
    if att.is_point:
        nearest = find_nearest_polygon_point(p, old_points)
        if nearest is None:
            return p, att
        idx = nearest[1]
        if closed and idx == len(old_points)-1:
            idx = 0
        q = new_points[idx]
        return q, att._replace(point=q, wall_index=idx)
    i = att.wall_index
    if i+1 >= len(old_points):
        return p, att
    t = parametric_position(p, old_points[i], old_points[i+1])
    q = lerp(new_points[i], new_points[i+1], t)
    return q, att._replace(point=q, t=t)


def reanchor_inner_walls(inner_walls: list[InnerWall], old_points: list[Point],
                         new_points: list[Point], closed: bool) -> None:
    """Carry boundary-anchored partition ends along with a boundary edit.

    Vertex anchors follow their vertex; line anchors keep their parametric
    position along the moved segment.
    """
    for i, w in enumerate(inner_walls):
        start, sa = _reanchor(w.start, w.attachments.start, old_points, new_points, closed)
        end, ea = _reanchor(w.end, w.attachments.end, old_points, new_points, closed)
        inner_walls[i] = w._replace(start=start, end=end, attachments=Attachments(sa, ea))
