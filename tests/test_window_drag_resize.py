"""Tests for the drag and resize protocols."""

import pytest

from linkos.core.window import ResizeDirection, Window, WindowConfig
from linkos.geometry.rect import Point, Size


@pytest.fixture
def window(viewport, scheduler):
    w = Window(viewport=viewport, scheduler=scheduler)
    w.show()
    return w


class TestDrag:
    """Tests for start_drag / drag_to / stop_drag."""

    def test_drag_moves_by_pointer_delta(self, window):
        """The window follows the pointer delta."""
        assert window.start_drag(Point(0, 0))
        assert window.is_dragging
        assert window.surface.cursor == "move"

        window.drag_to(Point(50, 30))
        assert window.position == Point(150, 130)

        assert window.stop_drag()
        assert not window.is_dragging
        assert window.surface.cursor == ""

    def test_drag_is_clamped_to_viewport(self, window):
        """The whole window stays inside the viewport."""
        window.start_drag(Point(0, 0))

        window.drag_to(Point(5000, 0))
        assert window.position == Point(1120, 100)

        window.drag_to(Point(-500, -500))
        assert window.position == Point(0, 0)

    def test_drag_refused_while_maximized(self, window):
        """Maximized windows cannot be dragged."""
        window.maximize()
        assert not window.start_drag(Point(0, 0))
        assert not window.pointer_move(Point(10, 10))

    def test_pointer_routing(self, window):
        """pointer_move follows the active drag; pointer_up ends it."""
        window.start_drag(Point(200, 200))
        assert window.pointer_move(Point(210, 220))
        assert window.position == Point(110, 120)

        window.pointer_up()
        assert not window.is_dragging
        assert not window.pointer_move(Point(400, 400))

    def test_drag_to_without_drag(self, window):
        """drag_to without start_drag does nothing."""
        assert not window.drag_to(Point(10, 10))
        assert window.position == Point(100, 100)

    def test_maximize_ends_drag(self, window):
        """Maximizing mid-drag drops the drag."""
        window.start_drag(Point(0, 0))
        window.maximize()
        assert not window.is_dragging


class TestResize:
    """Tests for start_resize / resize_to / stop_resize."""

    def test_east_handle(self, window):
        """The east handle only changes width."""
        window.start_resize(Point(0, 0), "e")
        window.resize_to(Point(100, 999))
        assert window.size == Size(900, 600)
        assert window.position == Point(100, 100)

    def test_north_west_handle(self, window):
        """The north-west handle keeps the south-east corner fixed."""
        assert window.start_resize(Point(0, 0), ResizeDirection.NW)
        window.resize_to(Point(50, 40))
        assert window.size == Size(750, 560)
        assert window.position == Point(150, 140)

    def test_north_west_clamped_to_min_size(self, window):
        """Shrinking past the minimum pins the size and the opposite edge."""
        window.start_resize(Point(0, 0), "nw")
        window.resize_to(Point(600, 500))
        assert window.size == Size(300, 200)
        assert window.position == Point(600, 500)
        assert window.rect.right == 900
        assert window.rect.bottom == 700

    def test_south_east_clamped_to_max_size(self, viewport, scheduler):
        """Growing past max_size stops at max_size."""
        window = Window(
            WindowConfig(max_size=Size(1000, 700)), viewport=viewport, scheduler=scheduler
        )
        window.start_resize(Point(0, 0), "se")
        window.resize_to(Point(1000, 1000))
        assert window.size == Size(1000, 700)

    def test_west_handle_past_max_size(self, viewport, scheduler):
        """The west edge moves by the clamped width change."""
        window = Window(
            WindowConfig(position=Point(100, 100), max_size=Size(1000, 700)),
            viewport=viewport,
            scheduler=scheduler,
        )
        window.start_resize(Point(0, 0), "w")
        window.resize_to(Point(-500, 0))
        assert window.size.width == 1000
        assert window.position.x == -100

    def test_resize_is_relative_to_start(self, window):
        """Each move is measured from the resize origin."""
        window.start_resize(Point(500, 500), "s")
        window.resize_to(Point(500, 550))
        window.resize_to(Point(500, 520))
        assert window.size == Size(800, 620)

    def test_unknown_direction(self, window, caplog):
        """Invalid handles are logged and refused."""
        assert not window.start_resize(Point(0, 0), "up")
        assert "Unknown resize direction" in caplog.text
        assert not window.is_resizing

    def test_resize_refused_while_maximized_or_dragging(self, window):
        """Resize needs a normal, idle window."""
        window.start_drag(Point(0, 0))
        assert not window.start_resize(Point(0, 0), "se")
        window.stop_drag()

        window.maximize()
        assert not window.start_resize(Point(0, 0), "se")

    def test_drag_refused_while_resizing(self, window):
        """A drag cannot start during a resize."""
        window.start_resize(Point(0, 0), "se")
        assert not window.start_drag(Point(0, 0))
        assert window.stop_resize()
        assert not window.stop_resize()

    @pytest.mark.parametrize(
        "direction,expected",
        [
            ("n", (True, False, False, False)),
            ("se", (False, True, True, False)),
            ("sw", (False, True, False, True)),
            ("w", (False, False, False, True)),
        ],
    )
    def test_direction_flags(self, direction, expected):
        """Each handle names the edges it moves (north, south, east, west)."""
        d = ResizeDirection(direction)
        assert (d.moves_north, d.moves_south, d.moves_east, d.moves_west) == expected
