"""Legacy continuous placer — weighted orbit + rejection-sampled angle.

The layout before the slot grid existed: each planet gets an orbit once,
drawn with weight i+1 for the i-th candidate radius, then an angle is
sampled inside a fixed arc until it clears every planet already placed.
If no clear angle turns up within the attempt budget, the last attempt is
kept and flagged as overlapping.  There are no slots, so no drag & drop.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Iterable, Mapping

from planit.config import LAYOUT_RULES, LayoutRules

from .models import Anchor, Body


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegacyPlacement:
    """A planet placed in polar coordinates around the sun."""

    body: Body
    radius: float
    angle: float
    size: float
    attempts: int = 1
    overlapping: bool = False

    def xy(self, anchor: Anchor) -> tuple[float, float]:
        return (
            anchor.x + math.cos(self.angle) * self.radius,
            anchor.y + math.sin(self.angle) * self.radius,
        )


def chord_distance(r1: float, theta1: float, r2: float, theta2: float) -> float:
    """Distance between two polar points (law of cosines)."""
    sq = r1 * r1 + r2 * r2 - 2 * r1 * r2 * math.cos(theta1 - theta2)
    # Rounding can push coincident points slightly below zero.
    return math.sqrt(max(0.0, sq))


def required_separation(size1: float, size2: float, margin: float) -> float:
    """Centre distance two planets need: half of both sizes plus margin."""
    return (size1 + size2) / 2 + margin


def weighted_radius(radii: tuple[float, ...], rng: random.Random) -> float:
    """Pick a radius; the i-th (0-based) candidate has weight i+1."""
    weights = [i + 1 for i in range(len(radii))]
    total = sum(weights)
    roll = rng.random() * total
    cumulative = 0
    for radius, weight in zip(radii, weights):
        cumulative += weight
        if roll < cumulative:
            return radius
    return radii[-1]


class LegacyContinuousPlacer:
    """Grid-free placement with collision avoidance.

    The orbit for each body is drawn once and memoized, so a body keeps
    its orbit for the life of the placer.
    """

    def __init__(
        self,
        rules: LayoutRules = LAYOUT_RULES,
        rng: random.Random | None = None,
        preset_orbits: Mapping[Body, float] | None = None,
    ) -> None:
        self.rules = rules
        self.rng = rng if rng is not None else random.Random()
        self._orbits: dict[Body, float] = dict(preset_orbits or {})

    def orbit_radius(self, body: Body) -> float:
        if body not in self._orbits:
            self._orbits[body] = weighted_radius(
                self.rules.legacy_orbit_radii, self.rng)
        return self._orbits[body]

    def orbits(self) -> dict[Body, float]:
        return dict(self._orbits)

    def preset(self, orbits: Mapping[Body, float]) -> None:
        """Fix orbits for bodies that have not been given one yet."""
        for body, radius in orbits.items():
            self._orbits.setdefault(body, radius)

    def is_clear(
        self, radius: float, angle: float, size: float,
        placed: Iterable[LegacyPlacement],
    ) -> bool:
        """True if a planet at (radius, angle) keeps clear of all *placed*."""
        for other in placed:
            dist = chord_distance(radius, angle, other.radius, other.angle)
            if dist < required_separation(size, other.size, self.rules.planet_margin):
                return False
        return True

    def place(
        self, body: Body, size: float,
        placed: Iterable[LegacyPlacement] = (),
    ) -> LegacyPlacement:
        """Place one planet among the already *placed* ones."""
        others = list(placed)
        radius = self.orbit_radius(body)
        arc = self.rules.legacy_arc
        angle = 0.0
        attempts = 0
        while attempts < self.rules.legacy_max_attempts:
            angle = self.rng.random() * (2 * arc) - arc
            attempts += 1
            if self.is_clear(radius, angle, size, others):
                return LegacyPlacement(body, radius, angle, size, attempts)

        log.warning(
            "No clear angle for %s on orbit %.0f after %d attempts; "
            "keeping the last one (may overlap)", body, radius, attempts,
        )
        return LegacyPlacement(body, radius, angle, size, attempts, overlapping=True)

    def place_all(
        self,
        sizes: Mapping[Body, float],
        existing: Mapping[Body, LegacyPlacement] | None = None,
    ) -> dict[Body, LegacyPlacement]:
        """Place every body in *sizes* that is not already in *existing*.

        Existing placements are kept as they are; new bodies are placed
        in mapping order, each avoiding all planets placed before it.
        """
        result = dict(existing or {})
        for body, size in sizes.items():
            if body in result:
                continue
            result[body] = self.place(body, size, result.values())
        return result
