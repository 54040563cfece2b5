"""Shared test fixtures for the wall engine tests."""
import pytest
from walls.engine import Walls

SQUARE = [(0, 0), (100, 0), (100, 100), (0, 100)]


def draw(walls: Walls, pts) -> Walls:
    """Click every point, then click the first one again to close."""
    for x, y in pts:
        walls.add_point(x, y)
    walls.add_point(*pts[0])
    return walls


@pytest.fixture
def square_points():
    """Closed square boundary point list (first point repeated)."""
    return SQUARE + [SQUARE[0]]


@pytest.fixture
def room():
    """Closed 100x100 square with default thickness and magnet."""
    return draw(Walls(), SQUARE)


@pytest.fixture
def partitioned_room(room):
    """Square split in half by a vertical partition drawn past both walls."""
    room.add_inner_wall((50, -10), (50, 110))
    return room


@pytest.fixture
def concave_room():
    """U-shaped room with a notch cut from the bottom edge."""
    return draw(Walls(), [(0, 0), (100, 0), (100, 100), (60, 100),
                          (60, 40), (40, 40), (40, 100), (0, 100)])


@pytest.fixture
def wide_room():
    """Closed 200x150 room, big enough to take the default sofa."""
    return draw(Walls(), [(0, 0), (200, 0), (200, 150), (0, 150)])
