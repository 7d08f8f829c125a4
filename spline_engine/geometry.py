"""Cubic Bézier geometry kernel.

Provides:
    - De Casteljau evaluation of a single cubic segment
    - De Casteljau bisection into two sub-segments
    - Adaptive flattening with a midpoint-vs-chord flatness test
    - Axis-aligned bounding box over a control hull
    - Polyline length

Used by:
    - BezierCurve: per-segment evaluation, tessellation, bounds
    - Tests: convergence and degenerate-geometry checks

All functions are pure: control points come in as float64 arrays of shape
(2,) and nothing outside the caller-supplied output list is mutated.

Flattening stops when the distance between the curve midpoint and the chord
midpoint is within ``tolerance`` or when the recursion depth reaches
``MAX_SUBDIVISION_DEPTH`` (16), whichever comes first.
"""

from typing import List, Sequence, Tuple

import numpy as np

# Hard ceiling on subdivision recursion; termination guarantee for
# degenerate control polygons.
MAX_SUBDIVISION_DEPTH = 16


def as_point(p) -> np.ndarray:
    """Convert an (x, y) pair to a float64 array of shape (2,).

    Raises
    ------
    ValueError
        If ``p`` does not hold exactly two coordinates
    """
    arr = np.asarray(p, dtype=np.float64)
    if arr.shape != (2,):
        raise ValueError(f"Expected a 2-D point, got shape {arr.shape}")
    return arr


def bezier_cubic_eval(
    p0: np.ndarray,
    p1: np.ndarray,
    p2: np.ndarray,
    p3: np.ndarray,
    t: float
) -> np.ndarray:
    """Evaluate a cubic Bézier segment at parameter t (De Casteljau).

    Parameters
    ----------
    p0, p1, p2, p3 : np.ndarray
        Control points, shape (2,)
    t : float
        Curve parameter; nominally in [0, 1], not clamped

    Returns
    -------
    np.ndarray
        Point on the curve, shape (2,)

    Notes
    -----
    Three levels of linear interpolation collapse 4 points to 1. Each level
    computes ``u*a + t*b`` with ``u = 1 - t``, so t=0 returns p0 and t=1
    returns p3 bit-for-bit (no Bernstein round-off at the ends).
    """
    u = 1.0 - t

    q0 = u * p0 + t * p1
    q1 = u * p1 + t * p2
    q2 = u * p2 + t * p3

    r0 = u * q0 + t * q1
    r1 = u * q1 + t * q2

    return u * r0 + t * r1


def bezier_cubic_split(
    p0: np.ndarray,
    p1: np.ndarray,
    p2: np.ndarray,
    p3: np.ndarray
) -> Tuple[Tuple[np.ndarray, ...], Tuple[np.ndarray, ...]]:
    """Bisect a cubic segment at t=0.5.

    Returns
    -------
    left, right : tuple of np.ndarray
        Control points (4 each) of the two halves. ``left[3]`` and
        ``right[0]`` are the same split point.
    """
    q0 = (p0 + p1) * 0.5
    q1 = (p1 + p2) * 0.5
    q2 = (p2 + p3) * 0.5

    r0 = (q0 + q1) * 0.5
    r1 = (q1 + q2) * 0.5

    s = (r0 + r1) * 0.5

    return (p0, q0, r0, s), (s, r1, q2, p3)


def flatness_deviation(
    p0: np.ndarray,
    p1: np.ndarray,
    p2: np.ndarray,
    p3: np.ndarray
) -> float:
    """Distance between the curve midpoint and the chord midpoint."""
    mid = bezier_cubic_eval(p0, p1, p2, p3, 0.5)
    chord_mid = (p0 + p3) * 0.5
    d = mid - chord_mid
    return float(np.hypot(d[0], d[1]))


def subdivide_cubic(
    p0: np.ndarray,
    p1: np.ndarray,
    p2: np.ndarray,
    p3: np.ndarray,
    tolerance: float,
    out: List[np.ndarray],
    depth: int = 0,
    max_depth: int = MAX_SUBDIVISION_DEPTH
) -> int:
    """Append the flattened endpoints of one segment to ``out``.

    The segment start is NOT emitted; the caller owns it (curve start or
    the previous segment's last emission).

    Parameters
    ----------
    p0, p1, p2, p3 : np.ndarray
        Control points, shape (2,)
    tolerance : float
        Maximum midpoint deviation accepted as flat, > 0
    out : list of np.ndarray
        Receives the emitted points in curve order
    depth : int
        Current recursion depth (0 for a top-level segment)
    max_depth : int
        Recursion ceiling

    Returns
    -------
    int
        Number of leaves emitted because the depth cap was reached while
        the leaf was still not flat
    """
    deviation = flatness_deviation(p0, p1, p2, p3)

    if deviation <= tolerance or depth >= max_depth:
        out.append(p3)
        return 0 if deviation <= tolerance else 1

    left, right = bezier_cubic_split(p0, p1, p2, p3)
    capped = subdivide_cubic(*left, tolerance, out, depth + 1, max_depth)
    capped += subdivide_cubic(*right, tolerance, out, depth + 1, max_depth)
    return capped


def bezier_cubic_polyline(
    p0: np.ndarray,
    p1: np.ndarray,
    p2: np.ndarray,
    p3: np.ndarray,
    tolerance: float = 0.25,
    max_depth: int = MAX_SUBDIVISION_DEPTH
) -> np.ndarray:
    """Flatten one cubic segment to a polyline via adaptive subdivision.

    Parameters
    ----------
    p0, p1, p2, p3 : np.ndarray
        Control points, shape (2,)
    tolerance : float
        Maximum midpoint deviation, default 0.25
    max_depth : int
        Maximum recursion depth, default 16

    Returns
    -------
    np.ndarray
        Polyline vertices, shape (N, 2), N >= 2; first row is p0, last is p3

    Raises
    ------
    ValueError
        If tolerance is not a positive finite number
    """
    if not (np.isfinite(tolerance) and tolerance > 0.0):
        raise ValueError(f"tolerance must be > 0, got {tolerance}")

    p0, p1, p2, p3 = (as_point(p) for p in (p0, p1, p2, p3))
    points = [p0]
    subdivide_cubic(p0, p1, p2, p3, tolerance, points, 0, max_depth)
    return np.stack(points, axis=0)


def control_hull_bbox(points: np.ndarray) -> Tuple[float, float, float, float]:
    """Axis-aligned bounding box of a set of control points.

    Parameters
    ----------
    points : np.ndarray
        Shape (N, 2), N >= 1

    Returns
    -------
    Tuple[float, float, float, float]
        (xmin, ymin, xmax, ymax)

    Raises
    ------
    ValueError
        If ``points`` is empty

    Notes
    -----
    A Bézier curve lies inside the convex hull of its control points, so
    the box over anchors and handles always contains the curve. It is not
    the tight box of the curve itself.
    """
    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"Expected points of shape (N, 2), got {points.shape}")
    if points.shape[0] == 0:
        raise ValueError("Cannot compute bounds of an empty point set")

    xmin, ymin = points.min(axis=0)
    xmax, ymax = points.max(axis=0)
    return (float(xmin), float(ymin), float(xmax), float(ymax))


def polyline_length(points: Sequence) -> float:
    """Total length of a polyline (sum of chord lengths).

    Returns 0.0 for fewer than two vertices.
    """
    points = np.asarray(points, dtype=np.float64)
    if points.shape[0] < 2:
        return 0.0
    diffs = points[1:] - points[:-1]
    return float(np.linalg.norm(diffs, axis=1).sum())
