"""Shared type definitions for the room sketch wall engine."""
from typing import Literal, NamedTuple, Optional

Point = tuple[float, float]

Alignment = Literal["left", "center", "right"]

class LineHit(NamedTuple):
    """Intersection of two infinite lines, with the parameter along each."""
    x: float; y: float
    ua: float; ub: float
    on_line1: bool; on_line2: bool

class ClosestPoint(NamedTuple):
    distance: float
    point: Point
    param: float  # unclamped projection parameter

class Attachment(NamedTuple):
    """What a partition end is anchored to.

    wall_index indexes the boundary segments when is_outer, otherwise the
    partition list at the time the attachment was made.
    """
    point: Point
    wall_index: Optional[int]
    is_outer: bool
    is_point: bool
    t: float = 0.0
    is_junction: bool = False

class Attachments(NamedTuple):
    start: Optional[Attachment] = None
    end: Optional[Attachment] = None

class Helper(NamedTuple):
    x: float; y: float
    type: str = "intersection"

class InnerWall(NamedTuple):
    start: Point
    end: Point
    alignment: Alignment = "center"
    attachments: Attachments = Attachments()
    helpers: tuple[Helper, ...] = ()

class Intersection(NamedTuple):
    point: Point
    wall_index: int
    is_outer: bool
    param: float

class WallLength(NamedTuple):
    wall_index: int
    length: float
    start: Point
    end: Point

class NearestWall(NamedTuple):
    point: Optional[Point]
    distance: float
    angle: float
    wall_index: int

class OnWall(NamedTuple):
    wall_index: int
    param: float
    point: Point
    is_endpoint: bool

class WallRegion(NamedTuple):
    """Fillable band of one wall: centerline plus mitred offset line."""
    index: int
    fill: list[Point]           # start, end, outer_end, outer_start
    inner_line: tuple[Point, Point]
    outer_line: tuple[Point, Point]

class ThickWalls(NamedTuple):
    segments: list[WallRegion]
    is_complete: bool
