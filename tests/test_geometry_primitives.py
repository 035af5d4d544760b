import numpy as np
import pytest

from bytefield.model.geometry_primitives import (
    Vector, compose_transform, compose_transforms, look_at_rotation, look_at_rotations, normalize_rows
)


def test_vector_arithmetic():
    a = Vector(1.0, 2.0, 3.0)
    b = Vector(-1.0, 0.5, 2.0)
    assert a + b == Vector(0.0, 2.5, 5.0)
    assert a - b == Vector(2.0, 1.5, 1.0)
    assert a * 2 == Vector(2.0, 4.0, 6.0)
    assert 2 * a == a * 2
    assert -a == Vector(-1.0, -2.0, -3.0)
    assert a.dot(b) == pytest.approx(-1.0 + 1.0 + 6.0)


def test_cross_product_is_right_handed():
    x = Vector(1.0, 0.0, 0.0)
    y = Vector(0.0, 1.0, 0.0)
    assert x.cross(y) == Vector(0.0, 0.0, 1.0)


def test_normalize_zero_vector_returns_zero():
    assert Vector(0.0, 0.0, 0.0).normalize() == Vector(0.0, 0.0, 0.0)
    assert Vector(3.0, 4.0, 0.0).normalize().magnitude == pytest.approx(1.0)


def test_divide_by_zero_raises():
    with pytest.raises(ZeroDivisionError):
        Vector(1.0, 1.0, 1.0) / 0.0


def assert_orthonormal(rot):
    assert np.allclose(rot.T @ rot, np.eye(3), atol=1e-9)
    assert np.linalg.det(rot) == pytest.approx(1.0)


def test_look_at_points_local_z_at_target():
    position = Vector(200.0, 0.0, 0.0)
    rot = look_at_rotation(position, Vector(0.0, 0.0, 0.0))
    assert_orthonormal(rot)
    assert np.allclose(rot[:, 2], [-1.0, 0.0, 0.0])
    # Up stays up when the target is level
    assert np.allclose(rot[:, 1], [0.0, 1.0, 0.0])


def test_look_at_coincident_target_falls_back_to_plus_z():
    rot = look_at_rotation(Vector(1.0, 2.0, 3.0), Vector(1.0, 2.0, 3.0))
    assert_orthonormal(rot)
    assert np.allclose(rot[:, 2], [0.0, 0.0, 1.0])


def test_look_at_straight_up_is_still_a_rotation():
    rot = look_at_rotation(Vector(0.0, 0.0, 0.0), Vector(0.0, 10.0, 0.0))
    assert_orthonormal(rot)
    assert rot[1, 2] == pytest.approx(1.0, abs=1e-6)


def test_compose_transform_layout():
    rot = look_at_rotation(Vector(0.0, 0.0, 5.0), Vector(0.0, 0.0, 0.0))
    m = compose_transform(Vector(0.0, 0.0, 5.0), rot)
    assert m.shape == (4, 4)
    assert np.allclose(m[3], [0.0, 0.0, 0.0, 1.0])
    assert np.allclose(m[:3, 3], [0.0, 0.0, 5.0])
    assert np.allclose(m[:3, :3], rot)
    scaled = compose_transform(Vector(0.0, 0.0, 0.0), np.eye(3), scale=2.0)
    assert np.allclose(scaled[:3, :3], 2.0 * np.eye(3))


def test_normalize_rows_keeps_zero_rows():
    rows = normalize_rows(np.array([[3.0, 0.0, 4.0], [0.0, 0.0, 0.0]]))
    assert np.allclose(rows, [[0.6, 0.0, 0.8], [0.0, 0.0, 0.0]])


def test_look_at_rotations_match_single_rotations():
    positions = [
        Vector(0.0, 0.0, 5.0),      # ordinary
        Vector(1.0, 2.0, 3.0),      # coincident with its target
        Vector(0.0, -4.0, 0.0),     # target straight above
        Vector(-7.0, 1.0, 2.5),
    ]
    targets = [
        Vector(0.0, 0.0, 0.0),
        Vector(1.0, 2.0, 3.0),
        Vector(0.0, 6.0, 0.0),
        Vector(3.0, -2.0, 0.0),
    ]
    batch = look_at_rotations(
        np.array([p.to_array() for p in positions]),
        np.array([t.to_array() for t in targets])
    )
    for rot, p, t in zip(batch, positions, targets):
        assert np.allclose(rot, look_at_rotation(p, t))


def test_look_at_rotations_accept_a_shared_target():
    positions = np.array([[10.0, 0.0, 0.0], [0.0, 0.0, -10.0]])
    batch = look_at_rotations(positions, np.zeros(3))
    assert np.allclose(batch[:, :, 2], [[-1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])


def test_compose_transforms_match_single_transform():
    position = Vector(1.0, -2.0, 3.0)
    rot = look_at_rotation(position, Vector(0.0, 0.0, 0.0))
    batch = compose_transforms(np.array([position.to_array()] * 2), np.array([rot, rot]), scale=2.0)
    assert np.allclose(batch[1], compose_transform(position, rot, scale=2.0))
