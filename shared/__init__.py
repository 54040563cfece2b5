"""Shared types, geometry, and SVG utilities."""

from .types import (
    Point, Alignment, LineHit, ClosestPoint, Attachment, Attachments, Helper,
    InnerWall, Intersection, WallLength, NearestWall, OnWall, WallRegion, ThickWalls,
)
from .geometry import (
    GeometryError,
    distance, lerp, left_norm, off_pt, line_isect,
    line_intersection, point_to_line_distance, parametric_position, points_equal,
    signed_area, poly_area, point_in_polygon, segments_cross, polygon_self_intersects,
    fmt_length,
)
from .svg import make_svg_transform, bounds, svg_polygon, svg_line, W, H
