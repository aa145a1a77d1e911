"""Tests for the wheel state machine, driven by a ManualTickSource."""

import math

import pytest

from spinwheel.config import WheelConfig
from spinwheel.model.angle_math import nearest_wedge_index, normalize_shortest, snap_destination
from spinwheel.model.layout import SpinWheelDirection, StaticWedgeSource
from spinwheel.model.state import WheelStateMachine, WheelStatus
from spinwheel.model.ticks import ManualTickSource, TimerTickSource
from tests.conftest import CENTER, Recorder, rim

UP = math.pi / 2
QUARTER = math.pi / 2


def fling(wheel: WheelStateMachine, velocity: float, start: float = 1.0, dt: float = 0.1) -> None:
    """Drag along the rim so that the last two samples measure `velocity`."""
    assert wheel.begin_tracking(rim(start), 0.0)
    assert wheel.continue_tracking(rim(start - velocity * dt), dt)
    wheel.end_tracking(rim(start - velocity * dt), dt, tap_count=0)


def decelerate(wheel: WheelStateMachine, ticks: ManualTickSource) -> int:
    count = 0
    while wheel.status is WheelStatus.DECELERATING:
        ticks.tick()
        count += 1
    return count


def test_initial_state(wheel):
    assert wheel.status is WheelStatus.IDLE
    assert wheel.selected_index == 0
    assert wheel.layout.wedge_count == 4
    assert wheel.orientation == pytest.approx(-UP - QUARTER / 2)
    assert wheel.current_index() == 0


def test_touch_near_hub_is_ignored(wheel, recorder, ticks):
    assert wheel.begin_tracking((10.0, 10.0), 0.0) is False
    assert wheel.is_tracking is False
    assert wheel.continue_tracking(rim(0.5), 0.1) is False
    wheel.end_tracking(rim(0.5), 0.2, tap_count=1)
    assert wheel.status is WheelStatus.IDLE
    assert recorder.rotations == []
    assert ticks.active_count == 0


def test_drag_follows_finger(wheel, recorder):
    rest = wheel.orientation
    assert wheel.begin_tracking(rim(0.0), 0.0)
    wheel.continue_tracking(rim(0.3), 0.05)
    wheel.continue_tracking(rim(0.1), 0.10)
    assert recorder.rotations == [pytest.approx(0.3), pytest.approx(-0.2)]
    assert wheel.orientation == pytest.approx(rest + 0.1)
    assert wheel.status is WheelStatus.IDLE


def test_drag_across_seam_rotates_the_short_way(wheel, recorder):
    rest = wheel.orientation
    wheel.begin_tracking(rim(math.pi - 0.05), 0.0)
    wheel.continue_tracking(rim(-math.pi + 0.05), 0.05)
    assert recorder.rotations == [pytest.approx(0.1)]
    assert wheel.orientation == pytest.approx(rest + 0.1)


def test_moves_close_to_hub_are_skipped(wheel, recorder):
    wheel.begin_tracking(rim(0.0), 0.0)
    assert wheel.continue_tracking((5.0, 5.0), 0.05) is True
    assert recorder.rotations == []


def test_move_over_hub_advances_the_velocity_window(wheel):
    wheel.begin_tracking(rim(0.0), 0.0)
    wheel.continue_tracking(rim(-1.0), 0.1)
    wheel.continue_tracking((5.0, 5.0), 0.5)
    wheel.end_tracking(tap_count=0)
    assert wheel.velocity == pytest.approx(1.0 / 0.4)


def test_fling_end_to_end(wheel, recorder, ticks):
    fling(wheel, 5.0)
    assert wheel.status is WheelStatus.DECELERATING
    assert wheel.velocity == pytest.approx(5.0)

    steps = decelerate(wheel, ticks)
    assert steps <= math.ceil(math.log(0.1 / 5.0) / math.log(0.98)) + 1
    assert wheel.status is WheelStatus.SNAPPING
    expected = nearest_wedge_index(wheel.orientation, QUARTER, 4, UP)

    ticks.run_until_idle()
    assert wheel.status is WheelStatus.IDLE
    assert recorder.selections == [expected]
    assert recorder.value_changes == 1
    assert wheel.selected_index == expected
    assert ticks.active_count == 0
    landed = normalize_shortest(snap_destination(expected, QUARTER, UP) - wheel.orientation)
    assert landed == pytest.approx(0.0, abs=1e-9)
    assert recorder.statuses == [WheelStatus.DECELERATING, WheelStatus.SNAPPING, WheelStatus.IDLE]


def test_positive_velocity_turns_toward_decreasing_angle(wheel, ticks):
    fling(wheel, 5.0)
    before = wheel.orientation
    ticks.tick()
    assert wheel.orientation < before


def test_rotation_events_account_for_every_change(wheel, recorder, ticks):
    rest = wheel.orientation
    fling(wheel, -12.0)
    ticks.run_until_idle()
    assert sum(recorder.rotations) == pytest.approx(wheel.orientation - rest)


@pytest.mark.parametrize("velocity", [20.0, -20.0, 7.5, -1.5, 1.2])
def test_deceleration_terminates(wheel, ticks, velocity):
    fling(wheel, velocity)
    assert wheel.status is WheelStatus.DECELERATING
    bound = math.ceil(math.log(0.1 / abs(velocity)) / math.log(0.98))
    assert decelerate(wheel, ticks) <= bound + 1
    assert abs(wheel.velocity) <= 0.1


def test_velocity_is_clamped_on_release(wheel):
    wheel.begin_tracking(rim(0.0), 0.0)
    wheel.continue_tracking(rim(-1.5), 0.01)
    wheel.end_tracking(tap_count=0)
    assert wheel.velocity == 20.0


@pytest.mark.parametrize("index", [1, 2, 3])
def test_snap_converges_monotonically(wheel, ticks, index):
    wheel.select_wedge(index)
    assert wheel.status is WheelStatus.SNAPPING
    destination = wheel.snap_target.destination

    remaining = [abs(normalize_shortest(destination - wheel.orientation))]
    while wheel.status is WheelStatus.SNAPPING:
        ticks.tick()
        remaining.append(abs(normalize_shortest(destination - wheel.orientation)))
        assert len(remaining) < 500

    assert all(b < a for a, b in zip(remaining, remaining[1:]) if a > 0)
    assert remaining[-2] <= 0.001
    assert remaining[-1] == pytest.approx(0.0, abs=1e-12)
    assert wheel.selected_index == index


def test_snap_increment_is_a_fraction_of_what_is_left(wheel, ticks):
    wheel.select_wedge(1)
    before = normalize_shortest(wheel.snap_target.destination - wheel.orientation)
    ticks.tick()
    assert wheel.snap_target.increment_per_tick == pytest.approx(before / 10.0)


def test_select_current_wedge_is_a_no_op(wheel, recorder, ticks):
    wheel.select_wedge(0)
    assert wheel.status is WheelStatus.IDLE
    assert ticks.active_count == 0
    assert recorder.rotations == [] and recorder.selections == [] and recorder.statuses == []


def test_select_twice_is_idempotent(wheel, recorder, ticks):
    wheel.select_wedge(2)
    ticks.run_until_idle()
    emitted = (list(recorder.rotations), list(recorder.selections), list(recorder.statuses))

    wheel.select_wedge(2)
    assert wheel.status is WheelStatus.IDLE
    assert (recorder.rotations, recorder.selections, recorder.statuses) == emitted


def test_select_without_animation_jumps(wheel, recorder, ticks):
    wheel.select_wedge(3, animated=False)
    assert wheel.status is WheelStatus.IDLE
    assert recorder.statuses == []
    assert len(recorder.rotations) == 1
    assert recorder.selections == [3]
    assert ticks.active_count == 0
    assert wheel.current_index() == 3


def test_select_index_out_of_range_wraps(wheel, ticks):
    wheel.select_wedge(5)
    ticks.run_until_idle()
    assert wheel.selected_index == 1


def test_tap_goes_straight_to_snapping(wheel, recorder, ticks):
    assert wheel.begin_tracking(rim(0.2), 0.0)
    wheel.end_tracking(rim(0.2), 0.05, tap_count=1)
    assert wheel.status is WheelStatus.SNAPPING
    ticks.run_until_idle()
    assert recorder.selections == [0]
    assert WheelStatus.DECELERATING not in recorder.statuses


def test_tiny_drag_snaps_without_deceleration(wheel, recorder, ticks):
    wheel.begin_tracking(rim(0.2), 0.0)
    wheel.continue_tracking(rim(0.25), 0.1)
    wheel.end_tracking(rim(0.25), 0.1, tap_count=0)
    assert wheel.velocity == 0.0
    assert wheel.status is WheelStatus.SNAPPING
    ticks.run_until_idle()
    assert recorder.selections == [0]
    assert recorder.statuses == [WheelStatus.SNAPPING, WheelStatus.IDLE]


def test_slow_drag_resnaps_to_nearest(wheel, ticks):
    # drag just past the middle of wedge 0 toward wedge 1's destination
    wheel.begin_tracking(rim(0.0), 0.0)
    wheel.continue_tracking(rim(0.9), 10.0)
    wheel.continue_tracking(rim(0.9), 20.0)
    wheel.end_tracking(tap_count=0)
    assert wheel.status is WheelStatus.SNAPPING
    ticks.run_until_idle()
    assert wheel.selected_index == 1


def test_new_drag_interrupts_deceleration(wheel, recorder, ticks):
    fling(wheel, 15.0)
    ticks.tick(5)
    expected = nearest_wedge_index(wheel.orientation, QUARTER, 4, UP)
    orientation = wheel.orientation

    assert wheel.begin_tracking(rim(0.0), 1.0)
    assert wheel.status is WheelStatus.IDLE
    assert wheel.is_tracking
    assert recorder.selections == [expected]
    assert ticks.active_count == 0
    assert wheel.orientation == orientation

    assert ticks.tick(10) == 0


def test_new_drag_interrupts_snapping(wheel, recorder, ticks):
    wheel.select_wedge(1)
    ticks.tick(2)
    assert wheel.begin_tracking(rim(2.0), 1.0)
    assert wheel.status is WheelStatus.IDLE
    assert recorder.selections == [0]
    assert ticks.active_count == 0


@pytest.mark.parametrize("ticked, expected", [(1, 0), (25, 2)])
def test_interrupted_snap_reports_wedge_under_marker(wheel, recorder, ticks, ticked, expected):
    wheel.select_wedge(2)
    ticks.tick(ticked)
    orientation = wheel.orientation

    assert wheel.begin_tracking(rim(0.0), 1.0)
    assert wheel.orientation == orientation
    assert wheel.selected_index == wheel.current_index() == expected
    assert recorder.selections == [expected]


def test_select_during_drag_is_ignored(wheel, recorder, ticks):
    assert wheel.begin_tracking(rim(0.0), 0.0)
    wheel.select_wedge(2)
    assert wheel.is_tracking
    assert wheel.status is WheelStatus.IDLE
    assert ticks.active_count == 0
    assert recorder.selections == []

    wheel.end_tracking(rim(0.0), 0.0, tap_count=1)
    ticks.run_until_idle()
    wheel.select_wedge(2)
    ticks.run_until_idle()
    assert wheel.selected_index == 2


def test_injected_tick_rate_drives_deceleration():
    slow = ManualTickSource(ticks_per_second=30)
    wheel = WheelStateMachine(4, slow, center=CENTER)
    fling(wheel, 10.0)
    before = wheel.orientation
    slow.tick()
    assert abs(wheel.velocity) == pytest.approx(9.8)
    assert wheel.orientation - before == pytest.approx(-wheel.velocity / 30)


def test_default_tick_source_uses_configured_rate():
    wheel = WheelStateMachine(4, config=WheelConfig(ticks_per_second=24))
    assert isinstance(wheel.ticks, TimerTickSource)
    assert wheel.ticks.ticks_per_second == 24


def test_interrupted_drag_release_is_not_a_tap(wheel, ticks):
    wheel.select_wedge(2)
    ticks.tick()
    wheel.begin_tracking(rim(0.0), 1.0)
    wheel.end_tracking(tap_count=1)
    # re-snaps to the nearest wedge all the same
    assert wheel.status is WheelStatus.SNAPPING


def test_touch_near_hub_does_not_interrupt(wheel, ticks):
    fling(wheel, 10.0)
    assert wheel.begin_tracking((0.0, 1.0), 1.0) is False
    assert wheel.status is WheelStatus.DECELERATING
    assert ticks.active_count == 1


def test_only_one_subscription_at_a_time(wheel, ticks):
    fling(wheel, 10.0)
    assert ticks.active_count == 1
    wheel.select_wedge(2)
    assert wheel.status is WheelStatus.SNAPPING
    assert ticks.active_count == 1
    ticks.run_until_idle()
    assert wheel.selected_index == 2


def test_reload_resets_pose_and_keeps_selection(wheel, recorder, ticks):
    wheel.select_wedge(3)
    ticks.run_until_idle()
    fling(wheel, 8.0)
    ticks.tick(3)

    layouts = []
    wheel.layout_changed.connect(layouts.append)
    wheel.reload(6)

    assert wheel.status is WheelStatus.IDLE
    assert wheel.selected_index == 3
    assert wheel.layout.wedge_count == 6
    assert wheel.orientation == pytest.approx(-UP - (math.pi / 3) / 2)
    assert ticks.active_count == 0
    assert [layout.wedge_count for layout in layouts] == [6]

    before = wheel.orientation
    assert ticks.tick(10) == 0
    assert wheel.orientation == before


def test_reload_requeries_current_source(ticks):
    source = StaticWedgeSource(["a", "b", "c"])
    wheel = WheelStateMachine(source, ticks=ticks, center=CENTER)
    source.labels.append("d")
    wheel.reload()
    assert wheel.layout.wedge_count == 4
    assert wheel.wedge_label(3) == "d"


@pytest.mark.parametrize("source", [None, 0, 1, StaticWedgeSource(["only"])])
def test_invalid_layout_makes_every_motion_a_no_op(ticks, source):
    wheel = WheelStateMachine(source, ticks=ticks, center=CENTER)
    recorder = Recorder(wheel)
    assert wheel.layout is None
    assert wheel.current_index() is None

    assert wheel.begin_tracking(rim(0.0), 0.0) is False
    wheel.end_tracking(tap_count=1)
    wheel.select_wedge(1)
    wheel.select_wedge(1, animated=False)
    wheel.snap_to_nearest_wedge()

    assert wheel.status is WheelStatus.IDLE
    assert ticks.active_count == 0
    assert recorder.rotations == [] and recorder.selections == []

    wheel.reload(5)
    assert wheel.layout.wedge_count == 5
    assert wheel.begin_tracking(rim(0.0), 0.0) is True


def test_clear_stops_motion_and_empties_wheel(wheel, ticks):
    layouts = []
    wheel.layout_changed.connect(layouts.append)
    fling(wheel, 10.0)
    wheel.clear()
    assert wheel.layout is None
    assert wheel.status is WheelStatus.IDLE
    assert ticks.active_count == 0
    assert layouts == [None]
    assert wheel.begin_tracking(rim(0.0), 0.0) is False


def test_other_reference_direction(ticks):
    wheel = WheelStateMachine(4, ticks=ticks, reference=SpinWheelDirection.RIGHT)
    assert wheel.reference == 0.0
    assert wheel.orientation == pytest.approx(-QUARTER / 2)
    wheel.select_wedge(2)
    ticks.run_until_idle()
    assert wheel.selected_index == 2
    assert normalize_shortest(snap_destination(2, QUARTER, 0.0) - wheel.orientation) == pytest.approx(0.0, abs=1e-9)


def test_many_spins_keep_index_in_range(wheel, ticks):
    for i in range(6):
        fling(wheel, 20.0 if i % 2 == 0 else -20.0, start=0.3 * i)
        ticks.run_until_idle()
        assert 0 <= wheel.selected_index < 4
        assert wheel.current_index() == wheel.selected_index


def test_wedge_label_falls_back_to_index(ticks):
    class CountOnly:
        def wedge_count(self) -> int:
            return 3

    wheel = WheelStateMachine(CountOnly(), ticks=ticks)
    assert wheel.wedge_label(2) == "2"
