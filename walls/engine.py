"""Wall engine state: boundary, partitions, selection and drag.

Walls owns the boundary point list and the partition list. Accessors hand
out copies, and every mutator either validates before committing or
leaves the previous state in place.
"""
import logging
from typing import Literal, Optional

from shared.types import (
    Point, InnerWall, Intersection, WallLength, NearestWall, OnWall, ThickWalls, Helper,
)
from shared.geometry import (
    distance, parametric_position, polygon_self_intersects, points_equal,
)
from walls import boundary, snap, offsets, partitions, drag
from walls.constants import (
    DEFAULT_THICKNESS, DEFAULT_MAGNET_DISTANCE, TANGENT_RADIUS, SHARED_POINT_EPS,
    MIN_SEGMENT_LENGTH, ORTHO_SNAP_DEG,
)

logger = logging.getLogger(__name__)

DragState = Literal["idle", "wall-selected", "dragging"]


def _is_positive_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


class Walls:
    """Closed room outline plus partition walls, editable by snapping and dragging."""

    def __init__(self, thickness: float = DEFAULT_THICKNESS,
                 magnet_distance: float = DEFAULT_MAGNET_DISTANCE,
                 snap_to_tangent: bool = False):
        self._points: list[Point] = []
        self._inner_walls: list[InnerWall] = []
        self._thickness = thickness if _is_positive_number(thickness) else DEFAULT_THICKNESS
        self._magnet_distance = (magnet_distance if _is_positive_number(magnet_distance)
                                 else DEFAULT_MAGNET_DISTANCE)
        self._is_complete = False
        self.snap_to_tangent = snap_to_tangent
        self.inner_wall_mode = False
        self._hovered_wall_index = -1
        self._selected_wall_index = -1
        self._selected_inner_wall_index = -1
        self._drag_start_point: Optional[Point] = None
        self._snapshot: Optional[tuple[list[Point], list[InnerWall]]] = None
        self._original_inner_wall: Optional[tuple[Point, Point]] = None

    # --- accessors ---

    @property
    def points(self) -> list[Point]:
        return list(self._points)

    @property
    def inner_walls(self) -> list[InnerWall]:
        return list(self._inner_walls)

    @property
    def is_complete(self) -> bool:
        return self._is_complete

    @property
    def thickness(self) -> float:
        return self._thickness

    @thickness.setter
    def thickness(self, value):
        if _is_positive_number(value):
            self._thickness = value
            self.log_state("Thickness updated")
        else:
            logger.warning("Ignored thickness %r", value)

    @property
    def magnet_distance(self) -> float:
        return self._magnet_distance

    @magnet_distance.setter
    def magnet_distance(self, value):
        if _is_positive_number(value):
            self._magnet_distance = value
            self.log_state("Magnet distance updated")
        else:
            logger.warning("Ignored magnet distance %r", value)

    @property
    def hovered_wall_index(self) -> int:
        return self._hovered_wall_index

    @property
    def selected_wall_index(self) -> int:
        return self._selected_wall_index

    @property
    def selected_inner_wall_index(self) -> int:
        return self._selected_inner_wall_index

    @property
    def drag_start_point(self) -> Optional[Point]:
        return self._drag_start_point

    @property
    def state(self) -> DragState:
        if self._selected_wall_index == -1 and self._selected_inner_wall_index == -1:
            return "idle"
        return "dragging" if self._drag_start_point is not None else "wall-selected"

    # --- boundary construction ---

    def add_point(self, x: float, y: float, use_ortho_snap: bool = False) -> bool:
        """Add a snapped point; returns True when it closes the polygon."""
        if self._is_complete:
            logger.warning("Boundary already closed, point (%s, %s) ignored", x, y)
            return False
        p = self.find_magnet_point(x, y, use_ortho_snap)
        if boundary.closes_polygon(p, self._points, self._magnet_distance):
            self._points.append(self._points[0])
            self._is_complete = True
            self.log_state("Wall completed")
            return True
        if any(points_equal(p, q) for q in self._points[1:-1]):
            logger.warning("Point (%s, %s) lands on an existing vertex, ignored", x, y)
            return False
        self._points.append(p)
        self.log_state("Point added")
        return False

    def reset(self) -> None:
        self._points = []
        self._inner_walls = []
        self._is_complete = False
        self._hovered_wall_index = -1
        self._selected_wall_index = -1
        self._selected_inner_wall_index = -1
        self._drag_start_point = None
        self._snapshot = None
        self._original_inner_wall = None
        self.log_state("Walls reset")

    def update_thickness(self, value) -> bool:
        """Set thickness from user input (number or string); False leaves it unchanged."""
        thickness = boundary.parse_thickness(value)
        if thickness is None:
            logger.warning("Rejected thickness %r", value)
            return False
        self._thickness = thickness
        self.log_state("Thickness updated")
        return True

    def get_wall_lengths(self) -> list[WallLength]:
        return boundary.wall_lengths(self._points)

    # --- snapping ---

    def find_magnet_point(self, x: float, y: float, use_ortho_snap: bool = False) -> Point:
        return snap.find_magnet_point(x, y, self._points, self._inner_walls,
                                      self._magnet_distance, use_ortho_snap,
                                      self.snap_to_tangent)

    def ortho_align(self, end: Point, start: Optional[Point] = None,
                    threshold: float = ORTHO_SNAP_DEG, diagonals: bool = False) -> Point:
        """Square up *end* against *start*, by default the last boundary point."""
        if start is None:
            if not self._points:
                return tuple(end)
            start = self._points[-1]
        return snap.ortho_align(tuple(start), tuple(end), threshold, diagonals)

    def find_tangent_points(self, point: Point, radius: float = TANGENT_RADIUS) -> list[Point]:
        return snap.find_tangent_points(point, self._points, self._magnet_distance, radius)

    # --- queries ---

    def find_nearest_wall(self, x: float, y: float) -> NearestWall:
        return boundary.find_nearest_wall(x, y, self._points)

    def find_nearest_wall_point(self, point: Point) -> Optional[tuple[Point, int]]:
        return boundary.find_nearest_wall_point(point, self._points, self._magnet_distance)

    def find_nearest_polygon_point(self, point: Point) -> Optional[tuple[Point, int]]:
        return boundary.find_nearest_polygon_point(point, self._points)

    def is_point_on_wall_segment(self, point: Point, start: Point, end: Point) -> bool:
        return boundary.is_point_on_wall_segment(point, start, end, self._magnet_distance)

    def get_parametric_position(self, point: Point, start: Point, end: Point) -> float:
        return parametric_position(point, start, end)

    def is_point_on_polygon_wall(self, point: Point) -> Optional[OnWall]:
        return boundary.is_point_on_polygon_wall(point, self._points)

    def is_point_on_inner_wall(self, point: Point) -> Optional[OnWall]:
        return partitions.is_point_on_inner_wall(point, self._inner_walls)

    def is_point_in_polygon(self, point: Point) -> bool:
        return boundary.is_point_in_polygon(point, self._points)

    def find_all_intersections(self, start: Point, end: Point) -> list[Intersection]:
        return partitions.find_all_intersections(start, end, self._points, self._inner_walls)

    def update_hovered_wall(self, x: float, y: float) -> int:
        """Set and return the boundary wall under the cursor, or -1."""
        if self.inner_wall_mode:
            self._hovered_wall_index = -1
        else:
            self._hovered_wall_index = offsets.hovered_wall_index(
                x, y, self.generate_thick_walls(), self._thickness)
        return self._hovered_wall_index

    # --- derived geometry ---

    def generate_thick_walls(self, points: Optional[list[Point]] = None) -> ThickWalls:
        """Wall bands for the boundary, or for a preview point list.

        Only the engine's own closed boundary is mitred all the way round.
        """
        if points is None:
            return offsets.generate_thick_walls(self._points, self._thickness, self._is_complete)
        return offsets.generate_thick_walls(list(points), self._thickness, False)

    def inner_wall_regions(self) -> list[list[Point]]:
        regions = []
        for w in self._inner_walls:
            region = offsets.inner_wall_region(w, self._thickness)
            if region is not None:
                regions.append(region)
        return regions

    # --- partitions ---

    def add_inner_wall(self, start: Point, end: Point, alignment: str = "center") -> list[InnerWall]:
        """Add a partition across the closed room; returns the pieces it was cut into."""
        if not self._is_complete:
            logger.warning("Inner walls need a closed boundary")
            return []
        if alignment not in ("left", "center", "right"):
            logger.warning("Unknown alignment %r", alignment)
            return []
        walls = list(self._inner_walls)
        added = partitions.add_inner_wall(self._points, walls, tuple(start), tuple(end), alignment)
        self._inner_walls = walls
        self.log_state("Inner wall added")
        return added

    def split_inner_wall_at_point(self, index: int, point: Point) -> Optional[tuple[InnerWall, InnerWall]]:
        return partitions.split_inner_wall_at_point(self._inner_walls, index, tuple(point))

    def split_inner_wall_at_intersection(self, index: int, point: Point) -> Optional[tuple[InnerWall, InnerWall]]:
        return partitions.split_inner_wall_at_intersection(self._inner_walls, index, tuple(point))

    def recalculate_helper_points(self, wall: InnerWall) -> tuple[Helper, ...]:
        return partitions.recalculate_helper_points(wall, self._points, self._inner_walls)

    # --- selection & drag ---

    def select_wall(self, index: int) -> bool:
        if not 0 <= index < boundary.segment_count(self._points):
            logger.warning("No boundary wall %d", index)
            return False
        self._selected_inner_wall_index = -1
        self._original_inner_wall = None
        self._selected_wall_index = index
        self._drag_start_point = None
        self._snapshot = (list(self._points), list(self._inner_walls))
        self.log_state("Wall selected")
        return True

    def deselect_wall(self) -> None:
        self._selected_wall_index = -1
        self._drag_start_point = None
        self._snapshot = None
        self.log_state("Wall deselected")

    def select_inner_wall(self, index: int) -> bool:
        if not 0 <= index < len(self._inner_walls):
            logger.warning("No inner wall %d", index)
            return False
        self._selected_wall_index = -1
        self._selected_inner_wall_index = index
        self._drag_start_point = None
        wall = self._inner_walls[index]
        self._original_inner_wall = (wall.start, wall.end)
        self._snapshot = (list(self._points), list(self._inner_walls))
        self.log_state("Inner wall selected")
        return True

    def deselect_inner_wall(self) -> None:
        self._selected_inner_wall_index = -1
        self._drag_start_point = None
        self._original_inner_wall = None
        self._snapshot = None
        self.log_state("Inner wall deselected")

    def start_dragging(self, point: Point) -> None:
        self._drag_start_point = tuple(point)
        self.log_state("Started dragging wall")

    def stop_dragging(self) -> None:
        self._drag_start_point = None
        self.log_state("Stopped dragging wall")

    def restore_snapshot(self) -> bool:
        """Put back the points and partitions captured at selection time."""
        if self._snapshot is None:
            return False
        pts, walls = self._snapshot
        self._points = list(pts)
        self._inner_walls = list(walls)
        logger.info("Restored pre-drag snapshot")
        return True

    def update_wall_position(self, x: float, y: float) -> bool:
        """Slide the selected boundary wall along its normal through (x, y).

        A move that would make the outline cross itself, or squash a
        partition below MIN_SEGMENT_LENGTH, is not applied and False is
        returned.
        """
        if self._selected_wall_index == -1 or self._drag_start_point is None:
            return False
        old = self._points
        new = drag.move_boundary_wall(old, self._selected_wall_index, x, y, self._is_complete)
        if self._is_complete and polygon_self_intersects(new):
            logger.info("Wall %d move to (%.1f, %.1f) rejected: outline would self-intersect",
                        self._selected_wall_index, x, y)
            return False
        walls = list(self._inner_walls)
        partitions.reanchor_inner_walls(walls, old, new, self._is_complete)
        short = [i for i, w in enumerate(walls) if distance(w.start, w.end) < MIN_SEGMENT_LENGTH]
        if short:
            logger.info("Wall %d move to (%.1f, %.1f) rejected: inner wall %d would collapse",
                        self._selected_wall_index, x, y, short[0])
            return False
        partitions.refresh_helpers(new, walls)
        self._points = new
        self._inner_walls = walls
        self.log_state("Wall position updated")
        return True

    def update_inner_wall_position(self, x: float, y: float) -> bool:
        """Slide the selected partition sideways by the drag so far and re-snap it."""
        index = self._selected_inner_wall_index
        if index == -1 or self._drag_start_point is None or self._original_inner_wall is None:
            return False
        walls = list(self._inner_walls)
        current = walls[index]
        delta = (x-self._drag_start_point[0], y-self._drag_start_point[1])
        if not drag.drag_inner_wall(self._points, walls, index, self._original_inner_wall,
                                    (current.start, current.end), delta):
            return False
        partitions.refresh_helpers(self._points, walls)
        self._inner_walls = walls
        return True

    def is_wall_moving(self, wall: InnerWall) -> bool:
        """True if *wall* touches the dragged boundary wall and that wall has moved."""
        if self._selected_wall_index == -1 or self._drag_start_point is None or self._snapshot is None:
            return False
        s, e = boundary.wall_endpoints(self._points, self._selected_wall_index)
        shared = any(points_equal(p, q, SHARED_POINT_EPS)
                     for p in (wall.start, wall.end) for q in (s, e))
        os_, oe = boundary.wall_endpoints(self._snapshot[0], self._selected_wall_index)
        moved = not (points_equal(s, os_, SHARED_POINT_EPS) and points_equal(e, oe, SHARED_POINT_EPS))
        return shared and moved

    def log_state(self, message: str = "") -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Walls state %s: points=%s thickness=%s complete=%s magnet=%s lengths=%s",
                         message, self._points, self._thickness, self._is_complete,
                         self._magnet_distance,
                         [round(w.length, 2) for w in self.get_wall_lengths()])
