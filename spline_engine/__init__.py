"""Cubic Bézier spline engine.

This package provides:
    - Knot / point primitives and continuity modes (knot)
    - Continuity enforcement between a knot's handles (continuity)
    - De Casteljau evaluation, bisection, adaptive flattening, bounds (geometry)
    - The knot chain with evaluation, tessellation and bounds (curve)
    - Exception hierarchy (exceptions)
    - YAML config schema and loader (config)
    - Root logger setup with context fields (logging_config)

No module here touches UI, input handling or persistence; the editor layer
calls into BezierCurve and renders what it returns.

Convenience imports:
    from spline_engine import BezierCurve, Continuity, Knot, Point2
    from spline_engine import geometry, config
"""

from . import config
from . import continuity
from . import exceptions
from . import geometry
from . import knot
from . import logging_config

from .curve import BezierCurve
from .exceptions import (
    AllocationError,
    CurveError,
    InsufficientDataError,
    InvalidArgumentError,
    KnotIndexError,
    SegmentIndexError,
)
from .knot import Continuity, Knot, Point2
from .logging_config import get_logger, push_context, setup_logging

__version__ = "0.1.0"

__all__ = [
    # Modules
    'config',
    'continuity',
    'exceptions',
    'geometry',
    'knot',
    'logging_config',
    # Types
    'BezierCurve',
    'Continuity',
    'Knot',
    'Point2',
    # Exceptions
    'AllocationError',
    'CurveError',
    'InsufficientDataError',
    'InvalidArgumentError',
    'KnotIndexError',
    'SegmentIndexError',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
