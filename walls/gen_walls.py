"""Render a room's thick walls and partitions to SVG.

The room comes from a JSON file:

    {"points": [[x, y], ...], "thickness": 20,
     "inner_walls": [{"start": [x, y], "end": [x, y], "alignment": "center"}]}

Points are fed through the engine one click at a time, so they snap and
close exactly as they would when drawn by hand. Without a file a built-in
demo room is used. Outputs walls/walls.svg unless -o is given.
"""
import os, sys, json, argparse, logging
from typing import NamedTuple, Callable

# Ensure project root is on sys.path for package imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from shared.types import Point, InnerWall, ThickWalls, WallLength
from shared.geometry import fmt_length, poly_area
from shared.svg import make_svg_transform, bounds, svg_polygon, svg_line, W, H
from floorplan.furniture import Furniture, center_in, snap_to_wall
from walls.engine import Walls
from walls.constants import DEFAULT_THICKNESS

logger = logging.getLogger(__name__)

DEMO_ROOM = {
    "points": [[0, 0], [400, 0], [400, 300], [250, 300], [250, 220], [0, 220], [0, 0]],
    "thickness": DEFAULT_THICKNESS,
    "inner_walls": [
        {"start": [160, -10], "end": [160, 230], "alignment": "center"},
        {"start": [160, 120], "end": [400, 120], "alignment": "left"},
    ],
}


class RoomData(NamedTuple):
    walls: Walls
    thick: ThickWalls
    inner_regions: list[list[Point]]
    lengths: list[WallLength]
    sofa: Furniture
    to_svg: Callable[[float, float], tuple[float, float]]


# ============================================================
# Room construction
# ============================================================

def load_room(path: str) -> dict:
    with open(path, encoding="utf-8") as f:
        room = json.load(f)
    if not isinstance(room.get("points"), list) or len(room["points"]) < 3:
        raise ValueError(f"{path}: need at least 3 points")
    return room


def build_room(room: dict) -> Walls:
    """Replay a room description through a fresh engine."""
    walls = Walls(thickness=room.get("thickness", DEFAULT_THICKNESS))
    for x, y in room["points"]:
        if walls.add_point(x, y):
            break
    if not walls.is_complete:
        # Close explicitly on the first point
        first = walls.points[0]
        walls.add_point(*first)
    for iw in room.get("inner_walls", []):
        added = walls.add_inner_wall(tuple(iw["start"]), tuple(iw["end"]),
                                     iw.get("alignment", "center"))
        if not added:
            logger.warning("Inner wall %s -> %s not added", iw["start"], iw["end"])
    return walls


def build_room_data(walls: Walls) -> RoomData:
    thick = walls.generate_thick_walls()
    cloud = [p for region in thick.segments for p in region.fill] or walls.points
    sofa = center_in(Furniture(0, 0), walls.points)
    # Let the sofa settle against the nearest wall when it starts close to one
    sofa = snap_to_wall(walls, sofa, sofa.x, sofa.y)
    return RoomData(walls, thick, walls.inner_wall_regions(), walls.get_wall_lengths(),
                    sofa, make_svg_transform(bounds(cloud)))


# ============================================================
# SVG rendering
# ============================================================

def _label(out, p: Point, text: str, to_svg, size=8, fill="#333"):
    x, y = to_svg(*p)
    out.append(f'<text x="{x:.1f}" y="{y:.1f}" text-anchor="middle"'
               f' font-family="Arial" font-size="{size}" fill="{fill}">{text}</text>')


def _render_helpers(out, inner_walls: list[InnerWall], to_svg):
    for w in inner_walls:
        for h in w.helpers:
            x, y = to_svg(h.x, h.y)
            out.append(f'<circle cx="{x:.2f}" cy="{y:.2f}" r="2.5"'
                       f' fill="none" stroke="#c00" stroke-width="0.75"/>')


def render_walls_svg(data: RoomData, *, title="Room Walls") -> str:
    """Render the room SVG. Returns SVG string."""
    to_svg = data.to_svg
    WALL_FILL = "rgba(180,180,180,0.5)"
    IW_FILL = "rgba(160,160,160,0.35)"
    SOFA_FILL = "rgb(220,235,255)"

    out = []
    out.append(f'<svg xmlns="http://www.w3.org/2000/svg" width="{W}" height="{H}"'
               f' viewBox="0 0 {W} {H}">')
    out.append(f'<rect x="0" y="0" width="{W}" height="{H}" fill="white"/>')
    out.append(f'<text x="{W/2:.1f}" y="20" text-anchor="middle" font-family="Arial"'
               f' font-size="14" font-weight="bold">{title}</text>')

    # --- Boundary wall bands ---
    for region in data.thick.segments:
        svg_polygon(out, region.fill, to_svg, WALL_FILL, stroke="none")
        svg_line(out, *region.inner_line, to_svg)
        svg_line(out, *region.outer_line, to_svg, stroke="#666", stroke_width="0.5")

    # --- Partitions ---
    for poly in data.inner_regions:
        svg_polygon(out, poly, to_svg, IW_FILL)
    inner_walls = data.walls.inner_walls
    for w in inner_walls:
        svg_line(out, w.start, w.end, to_svg, stroke="#999", stroke_width="0.5", dash="3,2")
    _render_helpers(out, inner_walls, to_svg)

    # --- Furniture ---
    svg_polygon(out, data.sofa.corners(), to_svg, SOFA_FILL, stroke="#36c")

    # --- Wall length labels ---
    for wl in data.lengths:
        mid = ((wl.start[0]+wl.end[0])/2, (wl.start[1]+wl.end[1])/2)
        _label(out, mid, fmt_length(wl.length), to_svg)

    out.append('</svg>')
    return "\n".join(out)


def summarize(data: RoomData) -> list[str]:
    walls = data.walls
    lines = [f"Walls: {len(data.lengths)}  thickness: {walls.thickness}"
             f"  closed: {walls.is_complete}"]
    for wl in data.lengths:
        lines.append(f"  wall {wl.wall_index}: {fmt_length(wl.length)}")
    lines.append(f"Floor area: {poly_area(walls.points[:-1]):.1f}")
    lines.append(f"Inner walls: {len(walls.inner_walls)}")
    return lines


# ============================================================
# Main entry point
# ============================================================

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Render room walls to SVG")
    parser.add_argument("room", nargs="?", help="room JSON file (default: demo room)")
    parser.add_argument("-o", "--output", help="SVG output path")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    room = load_room(args.room) if args.room else DEMO_ROOM
    data = build_room_data(build_room(room))

    svg_path = args.output or os.path.join(os.path.dirname(os.path.abspath(__file__)),
                                           "walls.svg")
    with open(svg_path, "w", encoding="utf-8") as f:
        f.write(render_walls_svg(data))
    print(f"Wall drawing written to {svg_path}")
    for line in summarize(data):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
