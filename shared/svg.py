"""SVG transform factory, page constants and element helpers."""
from typing import Callable, Iterable
from .types import Point

# US Letter landscape at 72 dpi (11" x 8.5")
W, H = 792, 612

# Page margin around the fitted drawing, in SVG points
MARGIN = 36


def bounds(points: Iterable[Point]) -> tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) of a point cloud."""
    xs = []; ys = []
    for x, y in points:
        xs.append(x); ys.append(y)
    if not xs:
        return (0.0, 0.0, 0.0, 0.0)
    return (min(xs), min(ys), max(xs), max(ys))


def make_svg_transform(box: tuple[float, float, float, float],
                       width: float = W, height: float = H,
                       margin: float = MARGIN) -> Callable[[float, float], tuple[float, float]]:
    """Create to_svg closure fitting *box* onto the page, centred, aspect kept.

    Room coordinates are already screen-style (y down), so no flip is applied.
    """
    x0, y0, x1, y1 = box
    bw = max(x1 - x0, 1e-9); bh = max(y1 - y0, 1e-9)
    s = min((width - 2*margin) / bw, (height - 2*margin) / bh)
    ox = (width - bw*s) / 2 - x0*s
    oy = (height - bh*s) / 2 - y0*s
    def to_svg(x: float, y: float) -> tuple[float, float]:
        return (ox + x * s, oy + y * s)
    return to_svg


def svg_polygon(out: list[str], poly, to_svg, fill, stroke="#666", stroke_width="0.5"):
    """Render a polygon as an SVG element."""
    svg = " ".join(f"{to_svg(*p)[0]:.2f},{to_svg(*p)[1]:.2f}" for p in poly)
    out.append(f'<polygon points="{svg}" fill="{fill}" '
               f'stroke="{stroke}" stroke-width="{stroke_width}"/>')


def svg_line(out: list[str], a: Point, b: Point, to_svg, stroke="#333",
             stroke_width="0.75", dash=None):
    (x1, y1), (x2, y2) = to_svg(*a), to_svg(*b)
    extra = f' stroke-dasharray="{dash}"' if dash else ""
    out.append(f'<line x1="{x1:.2f}" y1="{y1:.2f}" x2="{x2:.2f}" y2="{y2:.2f}"'
               f' stroke="{stroke}" stroke-width="{stroke_width}"{extra}/>')
