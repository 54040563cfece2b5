"""Pure geometry functions, polygon utilities, and formatting."""
import math
from typing import Optional
from .types import Point, LineHit, ClosestPoint

# Determinant threshold below which two lines are treated as parallel
PARALLEL_EPS = 1e-10

# ============================================================
# Error Type
# ============================================================
class GeometryError(ValueError):
    """Raised for impossible geometry operations."""

# ============================================================
# Geometry Utilities
# ============================================================
def distance(p1: Point, p2: Point) -> float:
    return math.hypot(p2[0]-p1[0], p2[1]-p1[1])

def lerp(a: Point, b: Point, t: float) -> Point:
    """Linear interpolation between two points."""
    return (a[0]+t*(b[0]-a[0]), a[1]+t*(b[1]-a[1]))

def left_norm(p1: Point, p2: Point) -> Point:
    """Unit normal to the left of the direction p1 → p2 (CCW perpendicular).

    Raises GeometryError for a zero-length direction.
    """
    dx = p2[0]-p1[0]; dy = p2[1]-p1[1]; Ln = math.sqrt(dx**2+dy**2)
    if Ln == 0:
        raise GeometryError(f"Zero-length segment at {p1}")
    return (-dy/Ln, dx/Ln)

def off_pt(p: Point, n: Point, d: float) -> Point:
    """Offset point p by distance d along unit direction n."""
    return (p[0]+d*n[0], p[1]+d*n[1])

def line_isect(p1: Point, d1: Point, p2: Point, d2: Point) -> Point:
    """Intersection of two lines (p1+t*d1) and (p2+s*d2). Raises GeometryError if parallel."""
    det = d1[0]*d2[1]-d1[1]*d2[0]
    if abs(det) < PARALLEL_EPS:
        raise GeometryError(f"Parallel lines: det={det:.2e}")
    t = ((p2[0]-p1[0])*d2[1]-(p2[1]-p1[1])*d2[0])/det
    return (p1[0]+t*d1[0], p1[1]+t*d1[1])

def line_intersection(p1: Point, p2: Point, p3: Point, p4: Point) -> Optional[LineHit]:
    """Intersection of line p1-p2 with line p3-p4.

    Returns None for parallel lines. ua/ub are the parameters along each
    line; on_line1/on_line2 tell whether the hit falls within each segment.
    """
    den = (p4[1]-p3[1])*(p2[0]-p1[0]) - (p4[0]-p3[0])*(p2[1]-p1[1])
    if abs(den) < PARALLEL_EPS:
        return None
    ua = ((p4[0]-p3[0])*(p1[1]-p3[1]) - (p4[1]-p3[1])*(p1[0]-p3[0]))/den
    ub = ((p2[0]-p1[0])*(p1[1]-p3[1]) - (p2[1]-p1[1])*(p1[0]-p3[0]))/den
    return LineHit(p1[0]+ua*(p2[0]-p1[0]), p1[1]+ua*(p2[1]-p1[1]),
                   ua, ub, 0 <= ua <= 1, 0 <= ub <= 1)

def point_to_line_distance(px: float, py: float,
                           x1: float, y1: float, x2: float, y2: float) -> ClosestPoint:
    """Distance from (px, py) to the segment (x1, y1)-(x2, y2).

    The closest point is clamped to the segment; param is left unclamped so
    callers can test 0 <= param <= 1. A zero-length segment is infinitely far.
    """
    C = x2-x1; D = y2-y1; len_sq = C*C+D*D
    if len_sq == 0:
        return ClosestPoint(math.inf, (x1, y1), -1.0)
    param = ((px-x1)*C+(py-y1)*D)/len_sq
    if param < 0:
        xx, yy = x1, y1
    elif param > 1:
        xx, yy = x2, y2
    else:
        xx, yy = x1+param*C, y1+param*D
    return ClosestPoint(math.hypot(px-xx, py-yy), (xx, yy), param)

def parametric_position(p: Point, a: Point, b: Point) -> float:
    """Projection parameter of p onto the line a-b (0 at a, 1 at b)."""
    dx = b[0]-a[0]; dy = b[1]-a[1]; len_sq = dx*dx+dy*dy
    if len_sq == 0:
        return 0.0
    return ((p[0]-a[0])*dx+(p[1]-a[1])*dy)/len_sq

def points_equal(p1: Point, p2: Point, eps: float = 1e-3) -> bool:
    return abs(p1[0]-p2[0]) < eps and abs(p1[1]-p2[1]) < eps

# ============================================================
# Polygon Utilities
# ============================================================
def signed_area(verts: list[Point]) -> float:
    """Shoelace area including the closing edge.

    Positive for clockwise winding in screen coordinates (y down).
    """
    n = len(verts); a = 0.0
    for i in range(n):
        j = (i+1)%n; a += verts[i][0]*verts[j][1]-verts[j][0]*verts[i][1]
    return a/2

def poly_area(verts: list[Point]) -> float:
    """Polygon area via the shoelace formula. Works for either winding order."""
    return abs(signed_area(verts))

def point_in_polygon(p: Point, poly: list[Point]) -> bool:
    """Even-odd ray cast test."""
    inside = False; j = len(poly)-1
    for i in range(len(poly)):
        xi, yi = poly[i]; xj, yj = poly[j]
        if (yi > p[1]) != (yj > p[1]) and p[0] < (xj-xi)*(p[1]-yi)/(yj-yi)+xi:
            inside = not inside
        j = i
    return inside

def segments_cross(p1: Point, p2: Point, p3: Point, p4: Point, eps: float = 1e-3) -> bool:
    """True if the segments cross strictly inside both (touching ends don't count)."""
    den = (p4[1]-p3[1])*(p2[0]-p1[0]) - (p4[0]-p3[0])*(p2[1]-p1[1])
    if abs(den) < eps:
        return False
    ua = ((p4[0]-p3[0])*(p1[1]-p3[1]) - (p4[1]-p3[1])*(p1[0]-p3[0]))/den
    ub = ((p2[0]-p1[0])*(p1[1]-p3[1]) - (p2[1]-p1[1])*(p1[0]-p3[0]))/den
    return eps < ua < 1-eps and eps < ub < 1-eps

def polygon_self_intersects(points: list[Point]) -> bool:
    """Check a closed point list (first point repeated last) for crossing edges.

    Adjacent edges share a vertex and are skipped.
    """
    n = len(points)-1
    for i in range(n):
        for j in range(i+2, n):
            if i == 0 and j == n-1:
                continue
            hit = line_intersection(points[i], points[i+1], points[j], points[j+1])
            if hit and hit.on_line1 and hit.on_line2:
                return True
    return False

# ============================================================
# Formatting Helpers
# ============================================================
def fmt_length(length: float) -> str:
    """Format a wall length for labels, e.g. '100.0'."""
    return f"{length:.1f}"
