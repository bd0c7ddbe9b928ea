"""Tests for WindowManager: creation, stacking, focus policy and bulk actions."""

import pytest

from linkos.config.settings import LinkOSSettings, ManagerSettings, WindowSettings
from linkos.core.keybinds import KeyEvent
from linkos.core.manager import WindowManager, WMEvent
from linkos.core.window import WindowConfig, WindowEvent
from linkos.geometry.rect import Point, Rect, Size
from linkos.geometry.viewport import Viewport


@pytest.fixture
def wm_events(wm):
    """(event, window id) for every manager event."""
    seen = []
    wm.on_all(lambda ev, window, manager: seen.append((ev, window.id if window else None)))
    return seen


def focus_changes(wm_events):
    return [wid for ev, wid in wm_events if ev is WMEvent.FOCUS_CHANGED]


class TestCreateWindow:
    """Tests for create_window and default placement."""

    def test_registers_and_opens(self, wm, wm_events):
        """A new window is tracked, stacked and announced."""
        window = wm.create_window({"title": "Notes", "app_id": "notes"})

        assert wm.get_window(window.id) is window
        assert wm.window_stack == [window.id]
        assert wm.count == 1
        assert (WMEvent.WINDOW_ADDED, window.id) in wm_events
        assert not window.is_visible

    def test_accepts_window_config(self, wm):
        """WindowConfig instances are copied, not mutated."""
        config = WindowConfig(title="Plain")
        window = wm.create_window(config)

        assert window.title == "Plain"
        assert config.position is None
        assert config.options is None

    def test_staggered_positions(self, wm):
        """Windows of one app cascade by 30px."""
        first = wm.create_window({"app_id": "terminal"})
        second = wm.create_window({"app_id": "terminal"})
        other = wm.create_window({"app_id": "finder"})

        assert first.position == Point(100, 100)
        assert second.position == Point(130, 130)
        assert other.position == Point(100, 100)

    def test_stagger_is_clamped_to_small_viewport(self, scheduler, settings):
        """The default position keeps room for the dock on small screens."""
        manager = WindowManager(Viewport(1000, 700), scheduler=scheduler, settings=settings)
        first = manager.create_window({"app_id": "terminal"})
        second = manager.create_window({"app_id": "terminal"})

        assert first.position == Point(100, 40)
        assert second.position == Point(130, 40)
        manager.shutdown()

    def test_explicit_position_is_kept(self, wm):
        """A given position is used as is."""
        window = wm.create_window({"position": (12, 34)})
        assert window.position == Point(12, 34)

    def test_mobile_windows_start_maximized(self, scheduler, settings):
        """On narrow viewports windows open at (0, 0) and maximize."""
        manager = WindowManager(Viewport(600, 800), scheduler=scheduler, settings=settings)
        window = manager.create_window({"title": "Phone"})

        assert window.position == Point(0, 0)
        assert window.start_maximized
        scheduler.advance(50)
        assert window.is_maximized
        assert window.rect == Rect(0, 0, 600, 800)
        manager.shutdown()

    def test_capacity_limit(self, wm, caplog):
        """The 21st window is refused."""
        for i in range(20):
            assert wm.create_window({"title": f"w{i}"}) is not None

        stack_before = wm.window_stack

        assert wm.create_window({"title": "one too many"}) is None
        assert wm.count == 20
        assert wm.window_stack == stack_before
        assert "Maximum window limit reached" in caplog.text

    def test_capacity_from_settings(self, scheduler, viewport):
        """max_windows comes from the settings."""
        settings = LinkOSSettings(manager=ManagerSettings(max_windows=2))
        manager = WindowManager(viewport, scheduler=scheduler, settings=settings)
        manager.create_window()
        manager.create_window()
        assert manager.create_window() is None
        manager.shutdown()

    def test_window_options_from_settings(self, scheduler, viewport):
        """Animation length and title bar height come from the window settings."""
        settings = LinkOSSettings(
            window=WindowSettings(animation_duration=100, titlebar_height=32)
        )
        manager = WindowManager(viewport, scheduler=scheduler, settings=settings)
        window = manager.create_window()
        assert window.titlebar_rect.h == 32
        window.show()
        window.close()

        scheduler.advance(100)
        assert window.is_destroyed
        manager.shutdown()

    def test_mapping_options_override(self, wm, scheduler):
        """Per-window options in the mapping override the settings."""
        window = wm.create_window({"options": {"animation_duration": 10}})
        assert window.options.animation_duration == 10
        assert window.options.minimize_combo == "meta+m"

    def test_duplicate_registration(self, wm):
        """A window cannot be registered twice."""
        window = wm.create_window()
        assert not wm.register_window(window)

    def test_duplicate_id_is_refused(self, wm, caplog):
        """create_window refuses an id that is already tracked."""
        first = wm.create_window({"id": "dup"})
        stack_before = wm.window_stack

        assert wm.create_window({"id": "dup"}) is None
        assert wm.get_window("dup") is first
        assert wm.count == 1
        assert wm.window_stack == stack_before
        assert "already registered" in caplog.text


class TestFocus:
    """Tests for the focus policy."""

    def test_single_focused_window(self, wm, make_window):
        """Only the most recently shown window is focused."""
        a = make_window("A")
        b = make_window("B")

        assert wm.focused_window is b
        assert b.is_focused
        assert not a.is_focused

    def test_focus_window_moves_to_top(self, wm, make_window):
        """focus_window raises the window in the stack and in z."""
        a, b, c = make_window("A"), make_window("B"), make_window("C")

        assert wm.focus_window(a.id)
        assert wm.window_stack == [b.id, c.id, a.id]
        assert wm.focused_window is a
        assert a.z_index > c.z_index > b.z_index

    def test_focus_unknown_window(self, wm):
        """Unknown ids are ignored."""
        assert not wm.focus_window("window_missing")

    def test_pointer_down_focuses(self, wm, make_window):
        """A press inside a window focuses it through the manager."""
        a, b = make_window("A"), make_window("B")
        a.pointer_down()

        assert wm.focused_window is a
        assert not b.is_focused
        assert wm.window_stack[-1] == a.id

    def test_focus_changed_events(self, wm, make_window, wm_events):
        """FOCUS_CHANGED is emitted once per change."""
        a = make_window("A")
        b = make_window("B")
        wm.focus_window(a.id)
        wm.focus_window(a.id)

        assert focus_changes(wm_events) == [a.id, b.id, a.id]

    def test_z_indices_strictly_increase(self, wm, make_window):
        """Every focus hands out a larger z-index."""
        windows = [make_window(f"w{i}") for i in range(5)]
        seen = [w.z_index for w in windows]
        for w in windows:
            wm.focus_window(w.id)
            seen.append(w.z_index)
        assert seen == sorted(set(seen))

    def test_blur_all(self, wm, make_window, wm_events):
        """Clicking the desktop clears focus once."""
        a = make_window("A")
        wm.pointer_down_desktop()
        wm.blur_all_windows()

        assert wm.focused_window is None
        assert not a.is_focused
        assert focus_changes(wm_events) == [a.id, None]

    def test_destroy_transfers_focus(self, wm, make_window):
        """Destroying the focused window focuses the next one in the stack."""
        a, b, c = make_window("A"), make_window("B"), make_window("C")
        c.destroy()

        assert wm.focused_window is b
        assert wm.get_window(c.id) is None
        assert c.id not in wm.window_stack

    def test_minimize_transfers_focus_by_stack_order(self, wm, make_window):
        """Focus goes to the most recently focused visible window."""
        a, b, c = make_window("A"), make_window("B"), make_window("C")
        wm.focus_window(b.id)
        wm.focus_window(a.id)
        assert wm.window_stack == [c.id, b.id, a.id]

        a.minimize()
        assert wm.focused_window is b
        assert not a.is_focused

    def test_hide_transfers_focus(self, wm, make_window):
        """Hiding the focused window hands focus on."""
        a, b = make_window("A"), make_window("B")
        b.hide()
        assert wm.focused_window is a

    def test_last_window_minimized(self, wm, make_window, wm_events):
        """With nothing left visible the focus is cleared."""
        a = make_window("A")
        a.minimize()

        assert wm.focused_window is None
        assert focus_changes(wm_events)[-1] is None

    def test_closing_window_is_skipped(self, wm, make_window, scheduler):
        """Focus never lands on a window that is closing."""
        a, b, c = make_window("A"), make_window("B"), make_window("C")
        b.close()
        c.destroy()

        assert wm.focused_window is a
        scheduler.advance(300)
        assert wm.focused_window is a

    def test_close_keeps_focus_until_destroyed(self, wm, make_window, scheduler):
        """Focus moves when the close animation ends."""
        a, b = make_window("A"), make_window("B")
        b.close()
        assert wm.focused_window is b

        scheduler.advance(300)
        assert wm.focused_window is a


class TestCycling:
    """Tests for cycle_windows and cycle_app_windows."""

    def test_cycle_wraps_around(self, wm, make_window):
        """Cycling walks visible windows in creation order."""
        a, b, c = make_window("A"), make_window("B"), make_window("C")

        wm.cycle_windows()
        assert wm.focused_window is a
        wm.cycle_windows()
        assert wm.focused_window is b

    def test_cycle_skips_hidden(self, wm, make_window):
        """Minimized windows are not part of the cycle."""
        a, b, c = make_window("A"), make_window("B"), make_window("C")
        a.minimize()

        wm.cycle_windows()
        assert wm.focused_window is b

    def test_cycle_skips_closing(self, wm, make_window):
        """A closing window is skipped and focus stays put."""
        a, b = make_window("A"), make_window("B")
        a.close()

        wm.cycle_windows()
        assert wm.focused_window is b
        assert b.is_focused
        assert not a.is_focused

    def test_focus_closing_window_keeps_focus(self, wm, make_window):
        """Focusing a closing window is refused without blurring the current one."""
        a, b = make_window("A"), make_window("B")
        a.close()

        assert not wm.focus_window(a.id)
        assert wm.focused_window is b
        assert b.is_focused

    def test_cycle_app_windows_skips_closing(self, wm, make_window):
        """Closing windows of the app are left out of the app cycle."""
        t1 = make_window("T1", "terminal")
        t2 = make_window("T2", "terminal")
        t3 = make_window("T3", "terminal")
        t1.close()

        wm.cycle_app_windows()
        assert wm.focused_window is t2
        wm.cycle_app_windows()
        assert wm.focused_window is t3

    def test_cycle_without_windows(self, wm):
        """Cycling an empty desktop does nothing."""
        wm.cycle_windows()
        assert wm.focused_window is None

    def test_cycle_app_windows(self, wm, make_window):
        """Only windows of the focused app take part."""
        t1 = make_window("T1", "terminal")
        make_window("F", "finder")
        t2 = make_window("T2", "terminal")

        wm.cycle_app_windows()
        assert wm.focused_window is t1
        wm.cycle_app_windows()
        assert wm.focused_window is t2

    def test_cycle_app_windows_single_window(self, wm, make_window):
        """A lone app window keeps focus."""
        make_window("T", "terminal")
        f = make_window("F", "finder")
        wm.cycle_app_windows()
        assert wm.focused_window is f


class TestBulkOperations:
    """Tests for close_all, hide_all and show_all."""

    def test_close_all(self, wm, make_window, scheduler, wm_events):
        """Every window closes; each app reports APP_CLOSED."""
        make_window("A", "terminal")
        make_window("B", "terminal")
        make_window("C", "finder")

        wm.close_all_windows()
        scheduler.advance(300)

        assert wm.count == 0
        assert wm.focused_window is None
        closed = [ev for ev, _ in wm_events if ev is WMEvent.APP_CLOSED]
        assert len(closed) == 2

    def test_hide_all(self, wm, make_window, wm_events):
        """Hiding everything clears focus with a single event."""
        a, b = make_window("A"), make_window("B")
        before = len(focus_changes(wm_events))

        wm.hide_all_windows()

        assert not a.is_visible and not b.is_visible
        assert wm.focused_window is None
        assert focus_changes(wm_events)[before:] == [None]

    def test_show_all_skips_minimized(self, wm, make_window):
        """show_all brings back hidden windows only."""
        a, b, c = make_window("A"), make_window("B"), make_window("C")
        wm.hide_all_windows()
        a.minimize()

        wm.show_all_windows()
        assert b.is_visible and c.is_visible
        assert not a.is_visible
        assert a.is_minimized

    def test_show_all_after_hide_all(self, wm, make_window):
        """The last shown window ends up focused."""
        a, b = make_window("A"), make_window("B")
        wm.hide_all_windows()
        wm.show_all_windows()

        assert a.is_visible and b.is_visible
        assert wm.focused_window is b


class TestAppRequests:
    """Tests for close_requested, close_app and force_quit."""

    def test_close_requested(self, wm, make_window, scheduler):
        """close_requested closes with the animation."""
        a = make_window("A")
        assert wm.close_requested(a.id)
        assert not wm.close_requested("nope")
        scheduler.advance(300)
        assert a.is_destroyed

    def test_close_app(self, wm, make_window, scheduler):
        """close_app closes every window of the app."""
        make_window("T1", "terminal")
        make_window("T2", "terminal")
        f = make_window("F", "finder")

        assert wm.close_app("terminal") == 2
        scheduler.advance(300)
        assert wm.windows == [f]

    def test_force_quit(self, wm, make_window, wm_events):
        """force_quit destroys at once and reports APP_CLOSED once."""
        make_window("T1", "terminal")
        t2 = make_window("T2", "terminal")

        assert wm.force_quit("terminal") == 2
        assert wm.count == 0
        closed = [wid for ev, wid in wm_events if ev is WMEvent.APP_CLOSED]
        assert closed == [t2.id]

    def test_window_removed_per_window(self, wm, make_window, wm_events):
        """WINDOW_REMOVED fires for every destroyed window."""
        a = make_window("A", "x")
        b = make_window("B", "x")
        a.destroy()

        assert (WMEvent.WINDOW_REMOVED, a.id) in wm_events
        assert not any(ev is WMEvent.APP_CLOSED for ev, _ in wm_events)
        b.destroy()
        assert (WMEvent.APP_CLOSED, b.id) in wm_events


class TestKeyboard:
    """Tests for key routing."""

    def test_focused_window_first(self, wm, make_window):
        """Meta+M goes to the focused window."""
        a = make_window("A")
        assert wm.handle_key(KeyEvent.from_combo("meta+m"))
        assert a.is_minimized

    def test_global_shortcuts(self, wm, make_window):
        """Unconsumed keys reach the manager's shortcuts."""
        a, b = make_window("A"), make_window("B")
        wm.shortcuts.register_combo("meta+tab", wm.cycle_windows, "Cycle")

        assert wm.handle_key(KeyEvent("Tab", meta=True))
        assert wm.focused_window is a

    def test_unhandled_key(self, wm, make_window):
        """Keys nobody binds are not consumed."""
        make_window("A")
        assert not wm.handle_key(KeyEvent("x"))

    def test_shortcuts_disabled_by_settings(self, viewport, scheduler):
        """keyboard_shortcuts=False disables the global shortcuts."""
        settings = LinkOSSettings(manager=ManagerSettings(keyboard_shortcuts=False))
        manager = WindowManager(viewport, scheduler=scheduler, settings=settings)
        calls = []
        manager.shortcuts.register_combo("meta+tab", lambda: calls.append(1))

        assert not manager.handle_key(KeyEvent.from_combo("meta+tab"))
        assert calls == []
        manager.shutdown()


class TestScreenResize:
    """Tests for viewport resize handling."""

    def test_windows_pulled_back_on_screen(self, wm, make_window, viewport):
        """Windows past the new edge move to fit."""
        window = make_window("A", position=(1100, 400))
        viewport.resize(1280, 720)
        assert window.position == Point(480, 120)

    def test_windows_inside_are_untouched(self, wm, make_window, viewport):
        """Windows that still fit keep their position."""
        window = make_window("A", position=(100, 100))
        viewport.resize(1280, 720)
        assert window.position == Point(100, 100)

    def test_oversized_window_sticks_to_origin(self, wm, make_window, viewport):
        """A window larger than the viewport goes to (0, 0)."""
        window = make_window("A", position=(300, 300))
        viewport.resize(640, 480)
        assert window.position == Point(0, 0)

    def test_maximized_window_refits(self, wm, make_window, viewport):
        """Maximized windows follow the viewport size."""
        window = make_window("A")
        window.maximize()
        viewport.resize(1280, 720)
        assert window.size == Size(1280, 720)


class TestObservers:
    """Tests for event relays, stats and shutdown."""

    def test_window_event_relay(self, wm, make_window):
        """on_window_event sees every lifecycle event."""
        seen = []
        wm.on_window_event(lambda ev, w, payload: seen.append(ev))
        make_window("A")

        assert seen == [WindowEvent.CREATED, WindowEvent.FOCUSED, WindowEvent.SHOWN]

    def test_window_event_unsubscribe(self, wm, make_window):
        """off_window_event stops the relay; unknown callbacks are ignored."""
        seen = []

        def listener(ev, w, payload):
            seen.append(ev)

        wm.on_window_event(listener)
        wm.off_window_event(listener)
        wm.off_window_event(listener)
        make_window("A")

        assert seen == []

    def test_failing_listener_is_logged(self, wm, make_window, caplog):
        """A broken manager subscriber does not break registration."""

        def boom(ev, window, manager):
            raise RuntimeError("boom")

        wm.on(WMEvent.WINDOW_ADDED, boom)
        window = make_window("A")
        assert wm.get_window(window.id) is window
        assert "Error in event callback" in caplog.text

    def test_stats(self, wm, make_window):
        """stats() summarises the manager."""
        a = make_window("A")
        b = make_window("B")
        a.minimize()

        stats = wm.stats()
        assert stats["total_windows"] == 2
        assert stats["visible_windows"] == 1
        assert stats["focused_window"] == b.id
        assert stats["window_stack"] == [a.id, b.id]

    def test_dump_state_marks_focus(self, wm, make_window):
        """dump_state lists the top of the stack first with a marker."""
        make_window("Bottom")
        make_window("Top")
        lines = wm.dump_state().splitlines()
        assert lines[3].startswith(" >> ")
        assert "'Top'" in lines[3]

    def test_shutdown(self, wm, make_window, scheduler, viewport):
        """shutdown destroys every window and stops listening."""
        a = make_window("A")
        a.hide()
        wm.shortcuts.register_combo("meta+tab", wm.cycle_windows)

        wm.shutdown()

        assert wm.count == 0
        assert a.is_destroyed
        assert wm.shortcuts.count == 0
        assert scheduler.pending_count == 0
        assert viewport.resize(800, 600)
