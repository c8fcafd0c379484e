"""One layout session — geometry, occupancy, placement and drag wired together."""

from __future__ import annotations

import logging
import random
from typing import Callable, Iterable

from planit.config import LAYOUT_RULES, LayoutRules

from .drag import DragReassignmentController
from .geometry import SlotGeometryProvider, anchor_for_viewport
from .models import Body, DropResult, LayoutChanged, PositionMap, SyncResult
from .notifier import ChangeNotifier
from .placement import AutoPlacementResolver
from .registry import SlotRegistry


log = logging.getLogger(__name__)


class OrbitLayout:
    """The orbital view's layout state for one viewport.

    Constructed once per session and handed to every consumer.  The
    position map is never stored: it is read from the registry and the
    current geometry on demand, and consumers learn when to re-read it
    through on_change().
    """

    def __init__(
        self,
        width: float,
        height: float,
        *,
        rules: LayoutRules = LAYOUT_RULES,
        rng: random.Random | None = None,
    ) -> None:
        self.rules = rules
        self.viewport = (width, height)
        self.notifier = ChangeNotifier()
        self.geometry = SlotGeometryProvider.for_viewport(width, height, rules)
        self.registry = SlotRegistry(self.geometry.slot_count, self.notifier)
        self.resolver = AutoPlacementResolver(self.registry, rng)
        self.drag = DragReassignmentController(self.geometry, self.registry)

    def on_change(
        self, listener: Callable[[LayoutChanged], None],
    ) -> Callable[[], None]:
        return self.notifier.on_change(listener)

    # ── Inputs ─────────────────────────────────────────────────────

    def resize(self, width: float, height: float) -> bool:
        """Refresh slot coordinates for a new viewport.

        Occupancy is untouched.  Returns True (and notifies) only if the
        sun actually moved.
        """
        anchor = anchor_for_viewport(width, height, self.rules)
        self.viewport = (width, height)
        if not self.geometry.update(anchor):
            return False
        log.info("Viewport %gx%g, sun at (%.1f, %.1f)",
                 width, height, anchor.x, anchor.y)
        self.notifier.notify(LayoutChanged(
            "resize",
            tuple(self.registry.occupancy().values()),
            tuple(self.registry.occupancy()),
        ))
        return True

    def sync(self, bodies: Iterable[Body]) -> SyncResult:
        return self.resolver.sync(bodies)

    def place(self, body: Body) -> int:
        return self.resolver.place(body)

    def remove(self, body: Body) -> None:
        self.registry.release(body)

    def move(self, body: Body, slot_index: int) -> DropResult:
        """Reassign without a gesture; same swap rule as a drop."""
        current = self.registry.slot_of(body)
        displaced = self.registry.move(body, slot_index)
        return DropResult(body, current, slot_index, displaced)

    # ── Outputs ────────────────────────────────────────────────────

    def positions(self) -> PositionMap:
        """Body -> slot centre, for every placed body."""
        return {
            body: self.geometry.position(slot_index)
            for slot_index, body in self.registry.occupancy().items()
        }

    def render_positions(self) -> PositionMap:
        """positions(), with the dragged body following the pointer."""
        out = self.positions()
        state = self.drag.state
        if state is not None and state.body in out:
            out[state.body] = (state.live_x, state.live_y)
        return out

    def active_orbits(self) -> tuple[float, ...]:
        """Orbit radii that currently hold at least one body."""
        used = {
            self.geometry.slot(i).orbit_radius
            for i in self.registry.occupancy()
        }
        return tuple(r for r in self.geometry.orbit_rings() if r in used)
