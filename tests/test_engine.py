"""Tests for walls/engine.py: the Walls state machine end to end."""
import logging
import math
import pytest
from shared.types import InnerWall
from walls.engine import Walls
from walls.constants import DEFAULT_THICKNESS, DEFAULT_MAGNET_DISTANCE, MIN_SEGMENT_LENGTH


def _flat(pts):
    return [c for p in pts for c in p]


# ============================================================
# Boundary construction
# ============================================================

class TestConstruction:
    def test_defaults(self):
        w = Walls()
        assert w.thickness == DEFAULT_THICKNESS
        assert w.magnet_distance == DEFAULT_MAGNET_DISTANCE
        assert w.points == [] and not w.is_complete
        assert w.state == "idle"

    def test_invalid_constructor_values_fall_back(self):
        w = Walls(thickness=-3, magnet_distance="x")
        assert w.thickness == DEFAULT_THICKNESS
        assert w.magnet_distance == DEFAULT_MAGNET_DISTANCE

    def test_clicking_first_point_closes(self, room):
        assert room.is_complete
        assert len(room.points) == 5
        assert room.points[-1] == room.points[0]

    def test_click_near_first_point_closes_on_it(self):
        w = Walls()
        for x, y in [(0, 0), (100, 0), (100, 100), (0, 100)]:
            assert not w.add_point(x, y)
        assert w.add_point(4, -3)
        assert w.points[-1] == (0, 0)

    def test_points_after_close_ignored(self, room):
        assert not room.add_point(300, 300)
        assert len(room.points) == 5

    def test_points_is_a_copy(self, room):
        room.points.append((1, 1))
        assert len(room.points) == 5

    def test_click_snaps_to_existing_wall(self):
        w = Walls()
        w.add_point(0, 0); w.add_point(100, 0)
        w.add_point(60, 5)
        assert w.points[-1] == pytest.approx((60, 0))

    def test_ortho_click(self):
        w = Walls()
        w.add_point(0, 0)
        w.add_point(100, 4, use_ortho_snap=True)
        assert w.points[-1] == (100, 0)

    def test_click_on_earlier_vertex_ignored(self):
        w = Walls()
        w.add_point(0, 0); w.add_point(100, 0); w.add_point(100, 100)
        # Snaps onto (100, 0), which is not the first point
        assert not w.add_point(101, 1)
        assert w.points == [(0, 0), (100, 0), (100, 100)]

    def test_ortho_align_against_last_point(self):
        w = Walls()
        w.add_point(0, 0)
        assert w.ortho_align((100, 3)) == (100, 0)
        assert w.ortho_align((2, 100), start=(0, 50)) == (0, 100)

    def test_ortho_align_without_points(self):
        assert Walls().ortho_align((7, 9)) == (7, 9)

    def test_wall_lengths(self, room):
        assert [wl.length for wl in room.get_wall_lengths()] == pytest.approx([100]*4)

    def test_reset(self, partitioned_room):
        partitioned_room.select_wall(0)
        partitioned_room.reset()
        assert partitioned_room.points == [] and partitioned_room.inner_walls == []
        assert not partitioned_room.is_complete
        assert partitioned_room.state == "idle"


class TestSettings:
    def test_thickness_negative_string_rejected(self, room):
        assert not room.update_thickness("-5")
        assert room.thickness == DEFAULT_THICKNESS

    def test_thickness_string_accepted(self, room):
        assert room.update_thickness("35")
        assert room.thickness == 35

    def test_thickness_setter_ignores_bad_values(self, room):
        room.thickness = 0
        assert room.thickness == DEFAULT_THICKNESS
        room.thickness = 12.5
        assert room.thickness == 12.5

    def test_magnet_setter(self, room):
        room.magnet_distance = -1
        assert room.magnet_distance == DEFAULT_MAGNET_DISTANCE
        room.magnet_distance = 15
        assert room.magnet_distance == 15


# ============================================================
# Queries and derived geometry
# ============================================================

class TestQueries:
    def test_find_magnet_point(self, room):
        assert room.find_magnet_point(97, 41) == pytest.approx((100, 41))

    def test_magnet_point_idempotent(self, partitioned_room):
        once = partitioned_room.find_magnet_point(53, 70)
        assert once == pytest.approx((50, 70))
        assert partitioned_room.find_magnet_point(*once) == pytest.approx(once)

    def test_find_nearest_wall(self, room):
        assert room.find_nearest_wall(50, 90).wall_index == 2

    def test_find_nearest_wall_point(self, room):
        assert room.find_nearest_wall_point((50, 95)) == ((50, 100), 2)

    def test_find_nearest_polygon_point(self, room):
        assert room.find_nearest_polygon_point((98, 2))[0] == (100, 0)

    def test_is_point_on_wall_segment(self, room):
        assert room.is_point_on_wall_segment((50, 5), (0, 0), (100, 0))

    def test_get_parametric_position(self, room):
        assert room.get_parametric_position((25, 0), (0, 0), (100, 0)) == pytest.approx(0.25)

    def test_is_point_on_polygon_wall(self, room):
        assert room.is_point_on_polygon_wall((0, 60)).wall_index == 3

    def test_is_point_in_polygon(self, room):
        assert room.is_point_in_polygon((10, 10))
        assert not room.is_point_in_polygon((-10, 10))

    def test_find_all_intersections(self, room):
        assert len(room.find_all_intersections((-10, 50), (110, 50))) == 2

    def test_tangent_points(self, room):
        assert (50, 0) in room.find_tangent_points((50, 50))

    def test_hovered_wall(self, room):
        assert room.update_hovered_wall(50, -15) == 0
        assert room.hovered_wall_index == 0
        assert room.update_hovered_wall(50, 50) == -1

    def test_inner_wall_mode_disables_hover(self, room):
        room.inner_wall_mode = True
        assert room.update_hovered_wall(50, -15) == -1

    def test_thick_walls_closed(self, room):
        tw = room.generate_thick_walls()
        assert tw.is_complete and len(tw.segments) == 4

    def test_thick_walls_preview_is_open(self, room):
        tw = room.generate_thick_walls([(0, 0), (100, 0), (100, 100)])
        assert not tw.is_complete
        assert tw.segments[0].outer_line[0] == pytest.approx((0, -20))

    def test_inner_wall_regions(self, partitioned_room):
        regions = partitioned_room.inner_wall_regions()
        assert len(regions) == 3
        assert all(len(r) == 4 for r in regions)


# ============================================================
# Partitions
# ============================================================

class TestInnerWalls:
    def test_split_at_boundary(self, partitioned_room):
        a, b, c = partitioned_room.inner_walls
        assert a.attachments.start is None and a.attachments.end.is_outer
        assert b.attachments.start.is_outer and b.attachments.end.is_outer
        assert c.attachments.start.is_outer and c.attachments.end is None
        assert all(w.helpers == () for w in (a, b, c))

    def test_needs_closed_room(self):
        w = Walls()
        w.add_point(0, 0); w.add_point(100, 0)
        assert w.add_inner_wall((50, -10), (50, 10)) == []
        assert w.inner_walls == []

    def test_bad_alignment(self, room):
        assert room.add_inner_wall((50, 0), (50, 100), "diagonal") == []

    def test_split_preserves_length(self, partitioned_room):
        b = partitioned_room.inner_walls[1]
        first, second = partitioned_room.split_inner_wall_at_point(1, (50, 30))
        assert abs(first.start[1] - first.end[1]) + abs(second.start[1] - second.end[1]) \
            == pytest.approx(abs(b.start[1] - b.end[1]))
        assert len(partitioned_room.inner_walls) == 4

    def test_split_at_intersection(self, partitioned_room):
        assert partitioned_room.split_inner_wall_at_intersection(1, (50, 30)) is not None
        assert not partitioned_room.inner_walls[1].attachments.end.is_point

    def test_recalculate_helper_points(self, partitioned_room):
        helpers = partitioned_room.recalculate_helper_points(InnerWall((20, 50), (80, 50)))
        assert len(helpers) == 1

    def test_is_point_on_inner_wall(self, partitioned_room):
        on = partitioned_room.is_point_on_inner_wall((50, 40))
        assert on.wall_index == 1


# ============================================================
# Selection and dragging
# ============================================================

class TestBoundaryDrag:
    def test_state_transitions(self, room):
        assert room.select_wall(0)
        assert room.state == "wall-selected"
        room.start_dragging((50, 0))
        assert room.state == "dragging"
        room.stop_dragging()
        assert room.state == "wall-selected"
        room.deselect_wall()
        assert room.state == "idle"

    def test_select_out_of_range(self, room):
        assert not room.select_wall(4)
        assert room.selected_wall_index == -1

    def test_update_needs_drag(self, room):
        room.select_wall(0)
        assert not room.update_wall_position(50, -30)

    def test_normal_only_move(self, room):
        room.select_wall(0)
        room.start_dragging((50, 0))
        assert room.update_wall_position(30, -30)
        assert _flat(room.points) == pytest.approx(_flat(
            [(0, -30), (100, -30), (100, 100), (0, 100), (0, -30)]))

    def test_partitions_follow(self, partitioned_room):
        partitioned_room.select_wall(0)
        partitioned_room.start_dragging((50, 0))
        partitioned_room.update_wall_position(50, -30)
        a, b, c = partitioned_room.inner_walls
        assert b.start == pytest.approx((50, -30))
        assert a.end == pytest.approx((50, -30))
        assert c.start == pytest.approx((50, 100))

    def test_self_intersecting_move_rejected(self, concave_room, caplog):
        before = concave_room.points
        concave_room.select_wall(0)
        concave_room.start_dragging((50, 0))
        with caplog.at_level(logging.INFO, logger="walls.engine"):
            assert not concave_room.update_wall_position(50, 60)
        assert concave_room.points == before
        assert "self-intersect" in caplog.text

    def test_move_collapsing_partition_rejected(self, partitioned_room, caplog):
        before_points = partitioned_room.points
        before_walls = partitioned_room.inner_walls
        partitioned_room.select_wall(0)
        partitioned_room.start_dragging((50, 0))
        # The stub outside the room runs from (50, -10) to the wall
        with caplog.at_level(logging.INFO, logger="walls.engine"):
            assert not partitioned_room.update_wall_position(50, -10)
        assert partitioned_room.points == before_points
        assert partitioned_room.inner_walls == before_walls
        assert "collapse" in caplog.text

    def test_partitions_keep_min_length_after_move(self, partitioned_room):
        partitioned_room.select_wall(0)
        partitioned_room.start_dragging((50, 0))
        for y in (-5, -8, -9, -10, -11):
            partitioned_room.update_wall_position(50, y)
        lengths = [math.dist(w.start, w.end) for w in partitioned_room.inner_walls]
        assert min(lengths) >= MIN_SEGMENT_LENGTH

    def test_small_move_in_concave_room_accepted(self, concave_room):
        concave_room.select_wall(0)
        concave_room.start_dragging((50, 0))
        assert concave_room.update_wall_position(50, 20)
        assert concave_room.points[0] == pytest.approx((0, 20))

    def test_restore_snapshot(self, room):
        before = room.points
        room.select_wall(0)
        room.start_dragging((50, 0))
        room.update_wall_position(50, -30)
        assert room.restore_snapshot()
        assert room.points == before

    def test_restore_without_selection(self, room):
        assert not room.restore_snapshot()

    def test_is_wall_moving(self, room):
        corner = InnerWall((100, 0), (50, 50))
        room.select_wall(0)
        room.start_dragging((50, 0))
        assert not room.is_wall_moving(corner)
        room.update_wall_position(50, -30)
        moved_corner = InnerWall((100, -30), (50, 50))
        assert room.is_wall_moving(moved_corner)
        assert not room.is_wall_moving(InnerWall((10, 50), (90, 50)))


class TestInnerWallDrag:
    def test_select_deselects_boundary(self, partitioned_room):
        partitioned_room.select_wall(0)
        assert partitioned_room.select_inner_wall(1)
        assert partitioned_room.selected_wall_index == -1
        assert partitioned_room.selected_inner_wall_index == 1

    def test_select_out_of_range(self, partitioned_room):
        assert not partitioned_room.select_inner_wall(7)

    def test_drag_sideways(self, partitioned_room):
        partitioned_room.select_inner_wall(1)
        partitioned_room.start_dragging((50, 50))
        assert partitioned_room.update_inner_wall_position(70, 55)
        a, b, c = partitioned_room.inner_walls
        assert b.start == pytest.approx((70, 0)) and b.end == pytest.approx((70, 100))
        # Pieces that shared its ends come along
        assert a.end == pytest.approx((70, 0))
        assert c.start == pytest.approx((70, 100))

    def test_repeated_updates_use_total_delta(self, partitioned_room):
        partitioned_room.select_inner_wall(1)
        partitioned_room.start_dragging((50, 50))
        partitioned_room.update_inner_wall_position(60, 50)
        partitioned_room.update_inner_wall_position(70, 50)
        assert partitioned_room.inner_walls[1].start == pytest.approx((70, 0))

    def test_drag_out_of_room_rejected(self, partitioned_room):
        before = partitioned_room.inner_walls
        partitioned_room.select_inner_wall(1)
        partitioned_room.start_dragging((50, 50))
        assert not partitioned_room.update_inner_wall_position(150, 50)
        assert partitioned_room.inner_walls == before

    def test_deselect(self, partitioned_room):
        partitioned_room.select_inner_wall(1)
        partitioned_room.deselect_inner_wall()
        assert partitioned_room.state == "idle"


def test_log_state_debug(room, caplog):
    with caplog.at_level(logging.DEBUG, logger="walls.engine"):
        room.log_state("check")
    assert "Walls state check" in caplog.text
