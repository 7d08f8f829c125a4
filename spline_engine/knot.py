"""Knot and point primitives -- plain value types for the spline engine.

A *knot* is an on-curve anchor with two handles:

    - ``hp`` (handle-prev): shapes the segment that **ends** at this knot
    - ``hn`` (handle-next): shapes the segment that **starts** at this knot

Segment ``i`` of a curve is the cubic
``knot[i].position, knot[i].hn, knot[i+1].hp, knot[i+1].position``.

The types carry no behaviour beyond storage and small accessors; handle
constraints are applied by :mod:`spline_engine.continuity`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace

# ---------------------------------------------------------------------------
# Continuity
# ---------------------------------------------------------------------------


class Continuity(enum.Enum):
    """Constraint between the two handles of a knot."""

    SMOOTH = "smooth"
    """Colinear handles, independent lengths."""

    SYMMETRIC = "symmetric"
    """Colinear handles, equal lengths."""

    CORNER = "corner"
    """Fully independent handles."""


# ---------------------------------------------------------------------------
# Point2
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point2:
    """2-D point (value type)."""

    x: float
    y: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


# ---------------------------------------------------------------------------
# Knot
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class Knot:
    """Anchor position, incoming handle, outgoing handle, continuity.

    Stored by value inside :class:`~spline_engine.curve.BezierCurve`;
    callers receive copies and write back through the curve's index-based
    setters.
    """

    x: float
    y: float
    hp_x: float
    hp_y: float
    hn_x: float
    hn_y: float
    continuity: Continuity = Continuity.SMOOTH

    @classmethod
    def at(cls, x: float, y: float) -> Knot:
        """Knot at ``(x, y)`` with both handles collapsed onto the anchor."""
        return cls(x, y, x, y, x, y, Continuity.SMOOTH)

    @property
    def position(self) -> Point2:
        return Point2(self.x, self.y)

    @property
    def handle_prev(self) -> Point2:
        return Point2(self.hp_x, self.hp_y)

    @property
    def handle_next(self) -> Point2:
        return Point2(self.hn_x, self.hn_y)

    def copy(self) -> Knot:
        return replace(self)
