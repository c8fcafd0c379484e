"""Slot geometry — fixed slot coordinates derived from the sun's centre."""

from __future__ import annotations

import math

from shapely.geometry import Point

from planit.config import LAYOUT_RULES, LayoutRules

from .models import Anchor, InvalidSlotIndex, InvalidViewport, Slot


def anchor_for_viewport(
    width: float, height: float,
    rules: LayoutRules = LAYOUT_RULES,
) -> Anchor:
    """Return the sun centre for a viewport of the given size.

    The sun hangs off the left edge and sits just above the bottom, so
    only the height moves it.
    """
    if width <= 0 or height <= 0:
        raise InvalidViewport(width, height)
    left = rules.sun_left_offset
    top = height - rules.sun_size - rules.sun_bottom_offset
    return Anchor(left + rules.sun_size / 2, top + rules.sun_size / 2)


def build_slots(
    anchor: Anchor, rules: LayoutRules = LAYOUT_RULES,
) -> tuple[Slot, ...]:
    """Lay out every slot of the static table around *anchor*.

    Indices run 1..N over orbits in declared order, then over each
    orbit's angles in declared order.
    """
    slots: list[Slot] = []
    index = 1
    for radius, angles in rules.orbit_slots:
        for angle in angles:
            slots.append(Slot(
                index=index,
                orbit_radius=radius,
                angle=angle,
                x=anchor.x + radius * math.cos(angle),
                y=anchor.y + radius * math.sin(angle),
            ))
            index += 1
    return tuple(slots)


class SlotGeometryProvider:
    """Current slot coordinates for one layout session.

    Geometry is refreshed when the anchor moves; slot indices never
    change, so occupancy keyed by index survives a resize.
    """

    def __init__(
        self, anchor: Anchor, rules: LayoutRules = LAYOUT_RULES,
    ) -> None:
        self.rules = rules
        self._anchor = anchor
        self._slots = build_slots(anchor, rules)

    @classmethod
    def for_viewport(
        cls, width: float, height: float,
        rules: LayoutRules = LAYOUT_RULES,
    ) -> SlotGeometryProvider:
        return cls(anchor_for_viewport(width, height, rules), rules)

    @property
    def anchor(self) -> Anchor:
        return self._anchor

    @property
    def slots(self) -> tuple[Slot, ...]:
        return self._slots

    @property
    def slot_count(self) -> int:
        return len(self._slots)

    def update(self, anchor: Anchor) -> bool:
        """Re-derive coordinates for a new anchor. Returns True if it moved."""
        if anchor == self._anchor:
            return False
        self._anchor = anchor
        self._slots = build_slots(anchor, self.rules)
        return True

    def slot(self, index: int) -> Slot:
        if not 1 <= index <= len(self._slots):
            raise InvalidSlotIndex(index, len(self._slots))
        return self._slots[index - 1]

    def position(self, index: int) -> tuple[float, float]:
        s = self.slot(index)
        return (s.x, s.y)

    def nearest_slot(self, x: float, y: float) -> int:
        """Index of the slot closest to (x, y); ties go to the lowest index."""
        p = Point(x, y)
        best_index = self._slots[0].index
        best_dist = math.inf
        for s in self._slots:
            d = p.distance(s.point)
            if d < best_dist:
                best_dist = d
                best_index = s.index
        return best_index

    def orbit_rings(self) -> tuple[float, ...]:
        """Distinct orbit radii, in declared order."""
        return tuple(dict.fromkeys(s.orbit_radius for s in self._slots))
