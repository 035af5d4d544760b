import numpy as np
import pytest

from bytefield.controller.animation import AnimationDriver
from bytefield.model.arrangements import ShapeMode, ShapeParameters, compute_all
from bytefield.model.geometry_primitives import Vector
from bytefield.model.state import AnimationClock, DataSequence, EngineState


@pytest.fixture
def driver():
    state = EngineState(clock=AnimationClock(speed=2.0))
    drv = AnimationDriver(state)
    drv.load_data(DataSequence.from_text("The quick brown fox"))
    drv.buffer.take_dirty()
    return drv


def test_load_data_allocates_and_fills_buffer(driver):
    assert driver.buffer.count == len("The quick brown fox")
    # Every instance has been placed (none left at the identity)
    assert not any(np.allclose(m, np.eye(4)) for m in driver.buffer.matrices)


def test_tick_advances_clock(driver):
    deltas = [0.016, 0.02, 0.5]
    expected = driver.state.clock.elapsed
    for d in deltas:
        driver.tick(d)
        expected += d * 2.0
    assert driver.state.clock.elapsed == expected


def test_static_tick_only_rotates_group(driver):
    before = driver.buffer.matrices.copy()
    passes = driver.passes
    driver.tick(1.0)
    assert driver.buffer.group_rotation == pytest.approx(1.0 * 0.05 * 2.0)
    assert np.array_equal(driver.buffer.matrices, before)
    assert driver.passes == passes
    assert not driver.buffer.dirty


def test_animated_tick_recomputes_every_frame(driver):
    driver.set_shape(ShapeMode.MOBIUS)
    driver.buffer.take_dirty()
    first = driver.buffer.matrices.copy()

    driver.tick(0.5)
    assert driver.buffer.take_dirty()
    assert not np.allclose(driver.buffer.matrices, first)
    assert driver.buffer.group_rotation == 0.0


def test_zero_speed_freezes_animation_but_allows_manual_recompute(driver):
    driver.set_shape(ShapeMode.TORUS_KNOT_HELIX)
    driver.set_speed(0.0)
    driver.tick(1.0)
    frozen = driver.buffer.matrices.copy()
    driver.tick(1.0)
    assert np.array_equal(driver.buffer.matrices, frozen)

    driver.set_parameters(ShapeParameters(knot_p=3, knot_q=7))
    assert not np.allclose(driver.buffer.matrices, frozen)


def test_shape_change_resets_group_rotation(driver):
    driver.tick(3.0)
    assert driver.buffer.group_rotation > 0.0
    driver.set_shape(ShapeMode.SPHERE)
    assert driver.buffer.group_rotation == 0.0


def test_recompute_is_idempotent(driver):
    driver.recompute()
    first_m = driver.buffer.matrices.copy()
    first_c = driver.buffer.colors.copy()
    driver.recompute()
    assert np.array_equal(driver.buffer.matrices, first_m)
    assert np.array_equal(driver.buffer.colors, first_c)


def test_recompute_with_explicit_snapshot(driver):
    driver.recompute(ShapeMode.KLEIN, ShapeParameters(spacing=2.0), time=0.0)
    # The explicit arguments do not leak into the state
    assert driver.state.shape is ShapeMode.GRID
    ys = driver.buffer.matrices[:, 1, 3]
    assert np.allclose(ys, 0.0)


def test_recompute_without_data_is_a_no_op():
    state = EngineState()
    drv = AnimationDriver(state)
    drv.recompute(ShapeMode.CIRCLE)
    drv.tick(0.1)
    assert drv.buffer.count == 0
    assert drv.passes == 0


def test_new_dataset_reallocates_buffer_but_keeps_clock(driver):
    driver.tick(1.0)
    elapsed = driver.state.clock.elapsed
    driver.load_data(DataSequence.from_text("ab"))
    assert driver.buffer.count == 2
    assert driver.state.clock.elapsed == elapsed


def test_pass_matches_per_index_computation(driver):
    driver.set_shape(ShapeMode.TORUS_KNOT_HELIX)
    state = driver.state
    reference = compute_all(
        state.data, state.shape, state.params, state.clock.elapsed,
        camera_position=state.camera_position, scene_origin=state.scene_origin
    )
    assert np.allclose(driver.buffer.matrices, np.array([r.matrix for r in reference]))
    assert np.allclose(driver.buffer.colors, np.array([r.color.to_rgb() for r in reference]))


def test_grid_follows_live_camera():
    camera = {"position": Vector(0.0, 50.0, 600.0)}
    state = EngineState()
    drv = AnimationDriver(state, camera_provider=lambda: camera["position"])
    drv.load_data(DataSequence.from_text("abcd"))
    before = drv.buffer.matrices.copy()

    # The user orbits to the side; the next pass reads the new position
    camera["position"] = Vector(600.0, 0.0, 0.0)
    drv.set_parameters(ShapeParameters(spacing=1.0))

    assert state.camera_position == Vector(600.0, 0.0, 0.0)
    assert not np.allclose(drv.buffer.matrices, before)
    for matrix in drv.buffer.matrices:
        to_camera = np.array([600.0, 0.0, 0.0]) - matrix[:3, 3]
        assert np.allclose(matrix[:3, 2], to_camera / np.linalg.norm(to_camera))


def test_without_camera_provider_the_configured_camera_is_kept(driver):
    position = driver.state.camera_position
    driver.set_shape(ShapeMode.GRID)
    assert driver.state.camera_position == position
