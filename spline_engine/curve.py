"""Cubic Bézier spline: an ordered chain of knots.

Segment ``i`` (0 <= i < N-1) is the cubic with control points
``knot[i].position, knot[i].hn, knot[i+1].hp, knot[i+1].position``.

Knot access is index-based. :meth:`BezierCurve.get_knot` hands out a copy;
writes go through :meth:`BezierCurve.set_knot` and the per-field setters.
No caller ever holds a reference into the curve's storage, so nothing can
dangle when knots are added or removed.

Usage::

    from spline_engine import BezierCurve, Continuity

    curve = BezierCurve()
    curve.add_knot(0.0, 0.0)
    curve.add_knot(1.0, 0.0)
    curve.set_handle_next(0, 0.0, 1.0)
    curve.set_handle_prev(1, 1.0, 1.0)

    mid = curve.eval(0, 0.5)
    points = curve.polyline(tolerance=0.01)
    xmin, ymin, xmax, ymax = curve.bounds()
"""

from __future__ import annotations

import logging
import math
from collections.abc import MutableSequence
from typing import Iterator, List, Optional, Tuple

import numpy as np

from . import continuity, geometry
from .exceptions import (
    AllocationError,
    InsufficientDataError,
    InvalidArgumentError,
    KnotIndexError,
    SegmentIndexError,
)
from .knot import Continuity, Knot, Point2

logger = logging.getLogger(__name__)


def _check_finite(name: str, *values: float) -> None:
    for v in values:
        try:
            finite = math.isfinite(v)
        except TypeError:
            raise InvalidArgumentError(f"{name} must be a number, got {v!r}") from None
        if not finite:
            raise InvalidArgumentError(f"{name} must be finite, got {v!r}")


class BezierCurve:
    """Owned, ordered sequence of knots with evaluation and tessellation.

    Not thread-safe; callers sharing a curve across threads must serialize
    access themselves.
    """

    def __init__(self) -> None:
        self._knots: List[Knot] = []

    # -- Lifecycle ----------------------------------------------------------

    def clone(self) -> BezierCurve:
        """Deep copy with independent knot storage."""
        dup = BezierCurve()
        dup._knots = [k.copy() for k in self._knots]
        return dup

    def __copy__(self) -> BezierCurve:
        return self.clone()

    def __deepcopy__(self, memo) -> BezierCurve:
        return self.clone()

    def __len__(self) -> int:
        return len(self._knots)

    def __iter__(self) -> Iterator[Knot]:
        return iter(self.knots())

    def __repr__(self) -> str:
        return f"BezierCurve(knots={len(self._knots)})"

    # -- Knot manipulation --------------------------------------------------

    def add_knot(self, x: float, y: float) -> int:
        """Append a knot at ``(x, y)`` and return its index.

        Both handles start on the anchor; continuity starts as SMOOTH.

        Raises
        ------
        InvalidArgumentError
            If a coordinate is NaN or infinite
        AllocationError
            If the knot list cannot grow
        """
        _check_finite("knot position", x, y)
        knot = Knot.at(float(x), float(y))
        try:
            self._knots.append(knot)
        except MemoryError as e:
            raise AllocationError("Knot storage could not grow") from e
        index = len(self._knots) - 1
        logger.debug("Added knot %d at (%g, %g)", index, x, y)
        return index

    def knot_count(self) -> int:
        return len(self._knots)

    def segment_count(self) -> int:
        return max(0, len(self._knots) - 1)

    def _check_index(self, index: int) -> None:
        if not isinstance(index, (int, np.integer)) or isinstance(index, bool):
            raise KnotIndexError(f"Knot index must be an integer, got {index!r}")
        if not 0 <= index < len(self._knots):
            raise KnotIndexError(
                f"Knot index {index} out of range [0, {len(self._knots)})"
            )

    def get_knot(self, index: int) -> Knot:
        """Copy of the knot at ``index``.

        Raises
        ------
        KnotIndexError
            If ``index`` is outside ``[0, knot_count)``
        """
        self._check_index(index)
        return self._knots[index].copy()

    def knots(self) -> List[Knot]:
        """Copies of all knots, in order."""
        return [k.copy() for k in self._knots]

    def set_knot(self, index: int, knot: Knot) -> None:
        """Replace the knot at ``index`` with a copy of ``knot``.

        The stored continuity label is taken from ``knot`` as-is; handles
        are not realigned.
        """
        self._check_index(index)
        if not isinstance(knot, Knot):
            raise InvalidArgumentError(f"Expected a Knot, got {type(knot).__name__}")
        if not isinstance(knot.continuity, Continuity):
            raise InvalidArgumentError(f"Unknown continuity mode: {knot.continuity!r}")
        _check_finite(
            "knot coordinates",
            knot.x, knot.y, knot.hp_x, knot.hp_y, knot.hn_x, knot.hn_y,
        )
        self._knots[index] = Knot(
            float(knot.x), float(knot.y),
            float(knot.hp_x), float(knot.hp_y),
            float(knot.hn_x), float(knot.hn_y),
            knot.continuity,
        )

    def set_position(self, index: int, x: float, y: float) -> None:
        """Move the anchor only; handles stay where they are."""
        self._check_index(index)
        _check_finite("knot position", x, y)
        k = self._knots[index]
        k.x, k.y = float(x), float(y)

    def set_handle_prev(self, index: int, x: float, y: float) -> None:
        """Move the incoming handle. Does not re-run continuity enforcement."""
        self._check_index(index)
        _check_finite("handle position", x, y)
        k = self._knots[index]
        k.hp_x, k.hp_y = float(x), float(y)

    def set_handle_next(self, index: int, x: float, y: float) -> None:
        """Move the outgoing handle. Does not re-run continuity enforcement."""
        self._check_index(index)
        _check_finite("handle position", x, y)
        k = self._knots[index]
        k.hn_x, k.hn_y = float(x), float(y)

    def remove_knot(self, index: int) -> None:
        """Remove the knot at ``index``, shifting later knots left."""
        self._check_index(index)
        del self._knots[index]
        logger.debug("Removed knot %d (%d left)", index, len(self._knots))

    def set_continuity(self, index: int, mode: Continuity) -> None:
        """Declare the continuity of a knot and realign its incoming handle.

        See :func:`spline_engine.continuity.enforce` for the rules. Index and
        mode are validated before any knot is touched.

        Raises
        ------
        KnotIndexError
            If ``index`` is outside ``[0, knot_count)``
        InvalidArgumentError
            If ``mode`` is not a :class:`Continuity` member
        """
        self._check_index(index)
        if not isinstance(mode, Continuity):
            raise InvalidArgumentError(f"Unknown continuity mode: {mode!r}")
        continuity.enforce(self._knots[index], mode)
        logger.debug("Knot %d continuity -> %s", index, mode.name)

    def hit_test(self, x: float, y: float, radius: float) -> Optional[int]:
        """Index of the anchor nearest to ``(x, y)`` within ``radius``.

        Only anchors strictly closer than ``radius`` count; ties keep the
        lower index. Returns None when nothing is in range.
        """
        _check_finite("hit-test point", x, y)
        _check_finite("radius", radius)
        if radius <= 0.0:
            raise InvalidArgumentError(f"radius must be > 0, got {radius!r}")

        best = radius
        hit = None
        for i, k in enumerate(self._knots):
            d = math.hypot(x - k.x, y - k.y)
            if d < best:
                best = d
                hit = i
        return hit

    # -- Geometry -----------------------------------------------------------

    def _require_segments(self) -> None:
        if len(self._knots) < 2:
            raise InsufficientDataError(
                f"Need at least 2 knots, curve has {len(self._knots)}"
            )

    def _segment_points(self, segment: int) -> Tuple[np.ndarray, ...]:
        k0 = self._knots[segment]
        k1 = self._knots[segment + 1]
        return (
            np.array([k0.x, k0.y]),
            np.array([k0.hn_x, k0.hn_y]),
            np.array([k1.hp_x, k1.hp_y]),
            np.array([k1.x, k1.y]),
        )

    def _check_segment(self, segment: int) -> None:
        self._require_segments()
        if not isinstance(segment, (int, np.integer)) or isinstance(segment, bool):
            raise SegmentIndexError(f"Segment index must be an integer, got {segment!r}")
        if not 0 <= segment < len(self._knots) - 1:
            raise SegmentIndexError(
                f"Segment {segment} out of range [0, {len(self._knots) - 2}]"
            )

    def segment_control_points(self, segment: int) -> np.ndarray:
        """Control points of ``segment`` as an array of shape (4, 2)."""
        self._check_segment(segment)
        return np.stack(self._segment_points(segment), axis=0)

    def eval(self, segment: int, t: float) -> Point2:
        """Point on ``segment`` at parameter ``t`` (De Casteljau).

        ``t`` is not clamped to [0, 1]. t=0 and t=1 return the segment's
        anchors exactly.

        Raises
        ------
        InsufficientDataError
            If the curve has fewer than 2 knots
        SegmentIndexError
            If ``segment`` is outside ``[0, knot_count - 2]``
        InvalidArgumentError
            If ``t`` is NaN or infinite
        """
        self._check_segment(segment)
        _check_finite("t", t)
        p = geometry.bezier_cubic_eval(*self._segment_points(segment), float(t))
        return Point2(float(p[0]), float(p[1]))

    def polyline(
        self,
        tolerance: float,
        out: Optional[MutableSequence] = None
    ) -> MutableSequence:
        """Flatten the whole curve into a polyline of :class:`Point2`.

        Parameters
        ----------
        tolerance : float
            Maximum midpoint-to-chord deviation per emitted chord, > 0
        out : MutableSequence, optional
            Sequence to append to; a new list is created when omitted

        Returns
        -------
        MutableSequence
            ``out`` (or the new list) with the first knot position followed
            by the flattened endpoints of every segment in order

        Raises
        ------
        InsufficientDataError
            If the curve has fewer than 2 knots
        InvalidArgumentError
            If ``tolerance`` is not a positive finite number, or ``out``
            cannot be appended to

        Notes
        -----
        Nothing is appended when an error is raised. Recursion depth is
        capped at ``geometry.MAX_SUBDIVISION_DEPTH``.
        """
        self._require_segments()
        _check_finite("tolerance", tolerance)
        if tolerance <= 0.0:
            raise InvalidArgumentError(f"tolerance must be > 0, got {tolerance!r}")
        if out is None:
            out = []
        elif not (hasattr(out, "append") and hasattr(out, "extend")):
            raise InvalidArgumentError(
                f"out must be a mutable sequence, got {type(out).__name__}"
            )

        first = self._knots[0]
        emitted = [np.array([first.x, first.y])]
        capped = 0
        for i in range(len(self._knots) - 1):
            capped += geometry.subdivide_cubic(
                *self._segment_points(i), float(tolerance), emitted
            )

        out.extend(Point2(float(p[0]), float(p[1])) for p in emitted)

        logger.debug(
            "Tessellated %d segment(s) at tolerance %g -> %d point(s)",
            len(self._knots) - 1, tolerance, len(emitted),
        )
        if capped:
            logger.debug(
                "%d chord(s) stopped at depth cap %d before reaching tolerance",
                capped, geometry.MAX_SUBDIVISION_DEPTH,
            )
        return out

    def control_hull(self) -> np.ndarray:
        """Anchor, handle-prev and handle-next of every knot, shape (3N, 2)."""
        rows = []
        for k in self._knots:
            rows.append((k.x, k.y))
            rows.append((k.hp_x, k.hp_y))
            rows.append((k.hn_x, k.hn_y))
        return np.array(rows, dtype=np.float64).reshape(-1, 2)

    def bounds(self) -> Tuple[float, float, float, float]:
        """Bounding box ``(min_x, min_y, max_x, max_y)`` of the control hull.

        Covers every anchor and both handles of every knot, so it always
        contains the curve. A single knot gives a valid, possibly degenerate,
        box.

        Raises
        ------
        InsufficientDataError
            If the curve has no knots
        """
        if not self._knots:
            raise InsufficientDataError("Cannot compute bounds of an empty curve")
        return geometry.control_hull_bbox(self.control_hull())
