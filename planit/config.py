"""Static layout constants for the orbital view.

The sun, the orbit table and the planet-size bounds are shared by the
slot grid (canonical layout) and the legacy continuous placer.  Both read
their parameters from this single source of truth.

The slot table is configuration, not derived data: changing it changes
where every slot is, and slot indices follow its declared order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


# Orbit radius (px) -> slot angles (radians), in declared order.
# Slot indices are assigned 1..N by walking orbits, then angles.
DEFAULT_ORBIT_SLOTS: tuple[tuple[float, tuple[float, ...]], ...] = (
    (500.0, (-math.pi / 6, 0.0, math.pi / 6)),
    (750.0, (-3 * math.pi / 16, -math.pi / 16, math.pi / 16, 3 * math.pi / 16)),
    (1000.0, (-math.pi / 6, -math.pi / 12, 0.0, math.pi / 12, math.pi / 6)),
    (1250.0, (-math.pi / 10, 0.0, math.pi / 10)),
    (1500.0, (-math.pi / 12, 0.0, math.pi / 12)),
)


@dataclass(frozen=True)
class LayoutRules:
    """Geometry rules for the orbital layout.

    All distances are in screen pixels, all angles in radians measured
    from the positive x axis (screen y grows downwards).
    """

    sun_size: float = 800.0
    """Rendered diameter of the sun image."""

    sun_left_offset: float = -600.0
    """Left edge of the sun relative to the viewport (3/4 of it off-screen)."""

    sun_bottom_offset: float = 40.0
    """Gap between the sun's bottom edge and the viewport bottom."""

    orbit_slots: tuple[tuple[float, tuple[float, ...]], ...] = DEFAULT_ORBIT_SLOTS
    """Static slot table: (orbit radius, angles) per orbit."""

    min_planet_size: float = 80.0
    """Rendered diameter of a planet with no completed tasks."""

    max_planet_size: float = 150.0
    """Asymptotic rendered diameter of a very active planet."""

    planet_margin: float = 20.0
    """Extra gap kept between two planets' edges."""

    legacy_orbit_radii: tuple[float, ...] = (350.0, 500.0, 750.0, 1000.0, 1250.0)
    """Candidate radii for the legacy placer; later entries weigh more."""

    legacy_arc: float = math.pi / 12
    """Half-width of the arc (around angle 0) the legacy placer samples."""

    legacy_max_attempts: int = 100
    """Angle resamples before the legacy placer accepts an overlap."""

    # ── Derived helpers ────────────────────────────────────────────

    @property
    def slot_count(self) -> int:
        """Total number of slots across all orbits."""
        return sum(len(angles) for _, angles in self.orbit_slots)

    @property
    def orbit_radii(self) -> tuple[float, ...]:
        """Orbit radii in declared order."""
        return tuple(radius for radius, _ in self.orbit_slots)

    @property
    def min_separation(self) -> float:
        """Centre-to-centre distance two maximum-size planets need."""
        return self.max_planet_size + self.planet_margin


# Module-level singleton, importable everywhere.
LAYOUT_RULES = LayoutRules()
