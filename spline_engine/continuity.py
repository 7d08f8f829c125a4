"""Continuity enforcement between the two handles of a knot.

The outgoing handle ``hn`` is authoritative; the incoming handle ``hp`` is
recomputed from it:

    CORNER     hp untouched
    SMOOTH     hp = pos - |hp - pos| * dir(hn - pos)
    SYMMETRIC  hp = pos - |hn - pos| * dir(hn - pos)

If ``hn`` sits on the anchor (``|hn - pos| < HANDLE_EPSILON``) there is no
direction to align to, and ``hp`` collapses onto the anchor.

Enforcement runs only when a mode is (re)declared. Moving a handle
afterwards does not re-run it; callers that edit handles directly must call
:func:`enforce` again to restore the declared relationship.
"""

from __future__ import annotations

import math

from .exceptions import InvalidArgumentError
from .knot import Continuity, Knot

# Below this handle length the direction is undefined.
HANDLE_EPSILON = 1e-12


def enforce(knot: Knot, mode: Continuity) -> None:
    """Set ``knot.continuity`` to ``mode`` and realign ``hp`` in place.

    Parameters
    ----------
    knot : Knot
        Knot to update; ``hn`` is never modified
    mode : Continuity
        New continuity mode

    Raises
    ------
    InvalidArgumentError
        If ``mode`` is not a :class:`Continuity` member
    """
    if not isinstance(mode, Continuity):
        raise InvalidArgumentError(f"Unknown continuity mode: {mode!r}")

    knot.continuity = mode

    if mode is Continuity.CORNER:
        return

    dnx = knot.hn_x - knot.x
    dny = knot.hn_y - knot.y
    mag_next = math.hypot(dnx, dny)

    if mag_next < HANDLE_EPSILON:
        knot.hp_x = knot.x
        knot.hp_y = knot.y
        return

    dir_x = dnx / mag_next
    dir_y = dny / mag_next

    if mode is Continuity.SMOOTH:
        mag = math.hypot(knot.hp_x - knot.x, knot.hp_y - knot.y)
    else:
        mag = mag_next

    knot.hp_x = knot.x - mag * dir_x
    knot.hp_y = knot.y - mag * dir_y
