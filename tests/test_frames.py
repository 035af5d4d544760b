import math

import numpy as np
import pytest

from bytefield.model.curves import TorusKnotCurve
from bytefield.model.frames import build_frame, build_frames


@pytest.fixture
def knot():
    return TorusKnotCurve(p=2, q=3, radius=100.0, tube_radius=40.0)


@pytest.mark.parametrize("u", [0.0, 0.5, 2.0, 4.4])
def test_frame_vectors_are_unit_length(knot, u):
    frame = build_frame(knot, u)
    assert frame.tangent.magnitude == pytest.approx(1.0)
    assert frame.normal.magnitude == pytest.approx(1.0)


@pytest.mark.parametrize("u", [0.0, 1.3, 3.9])
def test_binormal_is_cross_of_tangent_and_normal(knot, u):
    frame = build_frame(knot, u)
    expected = frame.tangent.cross(frame.normal)
    assert np.allclose(frame.binormal.to_array(), expected.to_array())
    assert frame.binormal.dot(frame.tangent) == pytest.approx(0.0, abs=1e-9)
    assert frame.binormal.dot(frame.normal) == pytest.approx(0.0, abs=1e-9)


def test_tangent_follows_the_curve(knot):
    u = 1.0
    frame = build_frame(knot, u)
    ahead = knot.point(u + 0.01) - knot.point(u)
    assert frame.tangent.dot(ahead.normalize()) > 0.999


def test_normal_points_out_of_the_tube(knot):
    u = 0.0
    frame = build_frame(knot, u)
    # At u=0 the knot sits on the outer equator, so "thicker tube" is +X
    assert np.allclose(frame.normal.to_array(), [1.0, 0.0, 0.0], atol=1e-6)


def test_frame_origin_is_curve_point(knot):
    frame = build_frame(knot, 0.7)
    assert frame.origin == knot.point(0.7)


def test_offset_stays_in_normal_plane(knot):
    frame = build_frame(knot, 2.2)
    angle = 0.8
    p = frame.offset(15.0 * math.cos(angle), 15.0 * math.sin(angle))
    d = p - frame.origin
    assert d.dot(frame.binormal) == pytest.approx(15.0 * math.sin(angle) * frame.binormal.dot(frame.binormal))


def test_build_frames_match_single_frames(knot):
    u = np.linspace(0.0, 2.0 * math.pi, 13)
    frames = build_frames(knot, u)
    for k, value in enumerate(u):
        frame = build_frame(knot, value)
        assert np.allclose(frames.origins[k], frame.origin.to_array())
        assert np.allclose(frames.tangents[k], frame.tangent.to_array())
        assert np.allclose(frames.normals[k], frame.normal.to_array())
        assert np.allclose(frames.binormals[k], frame.binormal.to_array())

    offsets = frames.offsets(np.full(13, 2.0), np.full(13, -1.0))
    assert np.allclose(offsets[4], build_frame(knot, u[4]).offset(2.0, -1.0).to_array())
