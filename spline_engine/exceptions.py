"""Exception hierarchy for the spline engine.

Every fallible operation validates its arguments before touching the curve,
so a raised exception always leaves the curve exactly as it was.

    CurveError
    ├── InvalidArgumentError (ValueError)
    │   ├── KnotIndexError (IndexError)
    │   └── SegmentIndexError (IndexError)
    ├── InsufficientDataError (ValueError)
    └── AllocationError (MemoryError)
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CurveError(Exception):
    """Base exception for all spline engine errors."""

    pass


class InvalidArgumentError(CurveError, ValueError):
    """Out-of-domain argument (non-positive tolerance, bad mode, NaN, ...)."""

    pass


class KnotIndexError(InvalidArgumentError, IndexError):
    """Knot index outside ``[0, knot_count)``."""

    pass


class SegmentIndexError(InvalidArgumentError, IndexError):
    """Segment index outside ``[0, knot_count - 2]``."""

    pass


class InsufficientDataError(CurveError, ValueError):
    """The curve has too few knots for the requested operation."""

    pass


class AllocationError(CurveError, MemoryError):
    """Knot storage could not grow."""

    pass
