"""Test the cubic Bézier geometry kernel.

Tests for spline_engine.geometry:
    - De Casteljau evaluation: exact endpoints, midpoint, agreement with
      the Bernstein form
    - Bisection: halves share the split point and trace the same curve
    - Adaptive flattening: straight segments stay at 2 points, curved
      segments subdivide, tolerance shrinks → length converges
    - Depth cap: degenerate geometry terminates
    - Control-hull bbox and polyline length

Run:
    pytest tests/test_geometry.py -v
"""

import numpy as np
import pytest

from spline_engine import geometry


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def arch():
    """Arch from (0,0) to (1,0) with handles (0,1) and (1,1)."""
    return (
        np.array([0.0, 0.0]),
        np.array([0.0, 1.0]),
        np.array([1.0, 1.0]),
        np.array([1.0, 0.0]),
    )


@pytest.fixture
def straight():
    """Straight segment with handles at 1/3 and 2/3 of the chord."""
    return (
        np.array([0.0, 0.0]),
        np.array([1.0, 0.0]),
        np.array([2.0, 0.0]),
        np.array([3.0, 0.0]),
    )


def bernstein(p0, p1, p2, p3, t):
    u = 1.0 - t
    return u**3 * p0 + 3 * u**2 * t * p1 + 3 * u * t**2 * p2 + t**3 * p3


# ============================================================================
# EVALUATION
# ============================================================================

def test_eval_endpoints_exact(arch):
    """t=0 and t=1 return the anchors bit-for-bit."""
    p0, p1, p2, p3 = arch
    assert np.array_equal(geometry.bezier_cubic_eval(*arch, 0.0), p0)
    assert np.array_equal(geometry.bezier_cubic_eval(*arch, 1.0), p3)


def test_eval_endpoints_exact_irrational():
    """Endpoint exactness does not depend on nice coordinates."""
    rng = np.random.default_rng(7)
    for _ in range(50):
        ctrl = tuple(rng.uniform(-1e3, 1e3, size=2) for _ in range(4))
        assert np.array_equal(geometry.bezier_cubic_eval(*ctrl, 0.0), ctrl[0])
        assert np.array_equal(geometry.bezier_cubic_eval(*ctrl, 1.0), ctrl[3])


def test_eval_arch_midpoint(arch):
    mid = geometry.bezier_cubic_eval(*arch, 0.5)
    assert np.allclose(mid, [0.5, 0.75], atol=1e-12)


def test_eval_straight_midpoint(straight):
    mid = geometry.bezier_cubic_eval(*straight, 0.5)
    assert np.allclose(mid, [1.5, 0.0], atol=1e-12)


def test_eval_matches_bernstein(arch):
    for t in np.linspace(0.0, 1.0, 11):
        assert np.allclose(
            geometry.bezier_cubic_eval(*arch, t), bernstein(*arch, t), atol=1e-12
        )


def test_eval_not_clamped(straight):
    """t outside [0, 1] extrapolates along the polynomial."""
    p = geometry.bezier_cubic_eval(*straight, 2.0)
    assert np.allclose(p, [6.0, 0.0])


# ============================================================================
# SPLIT
# ============================================================================

def test_split_shares_midpoint(arch):
    left, right = geometry.bezier_cubic_split(*arch)
    assert np.array_equal(left[3], right[0])
    assert np.allclose(left[3], geometry.bezier_cubic_eval(*arch, 0.5))
    assert np.array_equal(left[0], arch[0])
    assert np.array_equal(right[3], arch[3])


def test_split_halves_trace_same_curve(arch):
    left, right = geometry.bezier_cubic_split(*arch)
    for s in np.linspace(0.0, 1.0, 9):
        assert np.allclose(
            geometry.bezier_cubic_eval(*left, s),
            geometry.bezier_cubic_eval(*arch, 0.5 * s),
            atol=1e-12,
        )
        assert np.allclose(
            geometry.bezier_cubic_eval(*right, s),
            geometry.bezier_cubic_eval(*arch, 0.5 + 0.5 * s),
            atol=1e-12,
        )


# ============================================================================
# FLATTENING
# ============================================================================

def test_flatness_zero_for_straight(straight):
    assert geometry.flatness_deviation(*straight) == 0.0


def test_polyline_straight_two_points(straight):
    """No false subdivisions on a straight, proportionally spaced segment."""
    pts = geometry.bezier_cubic_polyline(*straight, tolerance=0.01)
    assert pts.shape == (2, 2)
    assert np.array_equal(pts[0], [0.0, 0.0])
    assert np.array_equal(pts[1], [3.0, 0.0])


def test_polyline_arch_subdivides(arch):
    pts = geometry.bezier_cubic_polyline(*arch, tolerance=0.01)
    assert pts.shape[0] > 2
    assert np.array_equal(pts[0], arch[0])
    assert np.array_equal(pts[-1], arch[3])


def test_polyline_chords_within_tolerance(arch):
    """Every emitted chord's curve piece satisfied the flatness test."""
    tol = 0.01
    pts = geometry.bezier_cubic_polyline(*arch, tolerance=tol)
    # Chord midpoints lie close to the true curve
    ts = np.linspace(0.0, 1.0, 2001)
    curve = np.stack([geometry.bezier_cubic_eval(*arch, t) for t in ts])
    for a, b in zip(pts[:-1], pts[1:]):
        m = (a + b) * 0.5
        dist = np.min(np.linalg.norm(curve - m, axis=1))
        assert dist <= tol + 1e-3


def test_polyline_length_converges(arch):
    """Smaller tolerance → more points and a longer (converging) length."""
    lengths = []
    counts = []
    for tol in (0.1, 0.01, 0.001, 0.0001):
        pts = geometry.bezier_cubic_polyline(*arch, tolerance=tol)
        lengths.append(geometry.polyline_length(pts))
        counts.append(pts.shape[0])

    assert counts == sorted(counts)
    assert all(b >= a - 1e-12 for a, b in zip(lengths, lengths[1:]))
    assert abs(lengths[-1] - lengths[-2]) <= abs(lengths[1] - lengths[0])
    assert abs(lengths[-1] - lengths[-2]) < 1e-2


def test_polyline_rejects_bad_tolerance(arch):
    with pytest.raises(ValueError):
        geometry.bezier_cubic_polyline(*arch, tolerance=0.0)
    with pytest.raises(ValueError):
        geometry.bezier_cubic_polyline(*arch, tolerance=-1.0)
    with pytest.raises(ValueError):
        geometry.bezier_cubic_polyline(*arch, tolerance=float("nan"))


def test_subdivide_depth_cap_terminates():
    """An unreachable tolerance stops at the depth cap: 2**16 leaves."""
    ctrl = (
        np.array([0.0, 0.0]),
        np.array([0.0, 1e6]),
        np.array([1.0, 1e6]),
        np.array([1.0, 0.0]),
    )
    out = []
    capped = geometry.subdivide_cubic(*ctrl, 1e-300, out)
    assert len(out) == 2 ** geometry.MAX_SUBDIVISION_DEPTH
    assert capped > 0
    assert np.array_equal(out[-1], ctrl[3])


def test_subdivide_custom_depth():
    ctrl = (
        np.array([0.0, 0.0]),
        np.array([0.0, 1.0]),
        np.array([1.0, 1.0]),
        np.array([1.0, 0.0]),
    )
    out = []
    geometry.subdivide_cubic(*ctrl, 1e-300, out, max_depth=3)
    assert len(out) == 8


def test_subdivide_coincident_points():
    """All control points identical: flat immediately, one emission."""
    p = np.array([2.0, 2.0])
    out = []
    capped = geometry.subdivide_cubic(p, p, p, p, 0.01, out)
    assert capped == 0
    assert len(out) == 1


def test_subdivide_closed_loop_endpoints():
    """Identical endpoints with bulging handles still subdivide."""
    ctrl = (
        np.array([0.0, 0.0]),
        np.array([-1.0, 2.0]),
        np.array([1.0, 2.0]),
        np.array([0.0, 0.0]),
    )
    pts = geometry.bezier_cubic_polyline(*ctrl, tolerance=0.01)
    assert pts.shape[0] > 2
    assert np.array_equal(pts[-1], [0.0, 0.0])


# ============================================================================
# BOUNDS & LENGTH
# ============================================================================

def test_control_hull_bbox():
    pts = np.array([[0.0, 0.0], [2.0, 3.0], [3.0, -1.0], [5.0, 1.0]])
    assert geometry.control_hull_bbox(pts) == (0.0, -1.0, 5.0, 3.0)


def test_control_hull_bbox_single_point():
    assert geometry.control_hull_bbox(np.array([[1.5, -2.0]])) == (1.5, -2.0, 1.5, -2.0)


def test_control_hull_bbox_empty():
    with pytest.raises(ValueError):
        geometry.control_hull_bbox(np.zeros((0, 2)))


def test_control_hull_bbox_bad_shape():
    with pytest.raises(ValueError):
        geometry.control_hull_bbox(np.zeros((3, 3)))


def test_polyline_length():
    pts = np.array([[0.0, 0.0], [3.0, 4.0], [3.0, 0.0]])
    assert geometry.polyline_length(pts) == pytest.approx(9.0)


def test_polyline_length_degenerate():
    assert geometry.polyline_length(np.zeros((1, 2))) == 0.0
    assert geometry.polyline_length(np.zeros((0, 2))) == 0.0


def test_as_point():
    assert np.array_equal(geometry.as_point((1, 2)), np.array([1.0, 2.0]))
    with pytest.raises(ValueError):
        geometry.as_point((1, 2, 3))
