"""Drag & drop reassignment — Idle -> Dragging -> Idle.

While dragging, the grabbed planet follows the pointer with a fixed grab
offset and the slot nearest to the planet is highlighted.  On release the
planet moves to that slot, swapping with whoever holds it.
"""

from __future__ import annotations

import logging

from .geometry import SlotGeometryProvider
from .models import (
    Body, DragNotActive, DragPhase, DragState, DropResult, SlotHighlight,
)
from .registry import SlotRegistry


log = logging.getLogger(__name__)


class DragReassignmentController:
    """Explicit state machine for one pointer's drag gestures.

    Highlighting is read-only; the registry is only touched on release.
    Cancelling (pointer lost, surface unmounted) is a release at the last
    known position, so a gesture never outlives its pointer.
    """

    def __init__(
        self, geometry: SlotGeometryProvider, registry: SlotRegistry,
    ) -> None:
        self.geometry = geometry
        self.registry = registry
        self._state: DragState | None = None

    @property
    def phase(self) -> DragPhase:
        return DragPhase.IDLE if self._state is None else DragPhase.DRAGGING

    @property
    def state(self) -> DragState | None:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return self._state is not None

    # ── Transitions ────────────────────────────────────────────────

    def pointer_down(self, body: Body, pointer_x: float, pointer_y: float) -> DragState:
        """Start dragging *body*, grabbed at the pointer position.

        A pointer-down during an active gesture first releases the old
        gesture where it was last seen.
        """
        if self._state is not None:
            log.warning("pointer-down on %s while dragging %s; "
                        "releasing the previous drag", body, self._state.body)
            self.pointer_up()

        origin = self.registry.require_slot(body)
        x0, y0 = self.geometry.position(origin)
        self._state = DragState(
            body=body,
            origin_slot=origin,
            offset_x=pointer_x - x0,
            offset_y=pointer_y - y0,
            live_x=x0,
            live_y=y0,
            nearest_slot=self.geometry.nearest_slot(x0, y0),
        )
        log.debug("Drag started: %s from slot %d", body, origin)
        return self._state

    def pointer_move(self, pointer_x: float, pointer_y: float) -> int:
        """Track the pointer. Returns the slot nearest to the dragged body."""
        state = self._state
        if state is None:
            raise DragNotActive()
        self._track(state, pointer_x, pointer_y)
        return state.nearest_slot

    def pointer_up(
        self, pointer_x: float | None = None, pointer_y: float | None = None,
    ) -> DropResult:
        """Drop the dragged body on the slot nearest to its release position.

        Without coordinates, the last known position is used.  Giving only
        one of the two is an error and leaves the drag running.
        """
        state = self._state
        if state is None:
            raise DragNotActive()
        if (pointer_x is None) != (pointer_y is None):
            raise ValueError("pointer_up needs both coordinates or neither")
        try:
            if pointer_x is not None and pointer_y is not None:
                self._track(state, pointer_x, pointer_y)
            else:
                # Geometry may have moved since the last pointer event.
                state.nearest_slot = self.geometry.nearest_slot(
                    state.live_x, state.live_y)
            return self._drop(state)
        finally:
            self._state = None

    def cancel(self) -> DropResult | None:
        """Pointer lost or drag surface gone: release at the last position."""
        if self._state is None:
            return None
        log.debug("Drag cancelled for %s", self._state.body)
        return self.pointer_up()

    # ── Read-only views ────────────────────────────────────────────

    def live_position(self) -> tuple[float, float] | None:
        if self._state is None:
            return None
        return (self._state.live_x, self._state.live_y)

    def highlights(self) -> dict[int, SlotHighlight]:
        """Per-slot affordance while dragging; empty when idle."""
        state = self._state
        if state is None:
            return {}
        out: dict[int, SlotHighlight] = {}
        for s in self.geometry.slots:
            if s.index == state.nearest_slot:
                out[s.index] = SlotHighlight.NEAREST
            elif self.registry.occupant(s.index) is not None:
                out[s.index] = SlotHighlight.OCCUPIED
            else:
                out[s.index] = SlotHighlight.FREE
        return out

    # ── Internals ──────────────────────────────────────────────────

    def _track(self, state: DragState, pointer_x: float, pointer_y: float) -> None:
        state.live_x = pointer_x - state.offset_x
        state.live_y = pointer_y - state.offset_y
        state.nearest_slot = self.geometry.nearest_slot(state.live_x, state.live_y)

    def _drop(self, state: DragState) -> DropResult:
        current = self.registry.slot_of(state.body)
        target = state.nearest_slot
        if current is None:
            # Body vanished from the layout mid-gesture.
            log.info("Dropped %s, which no longer holds a slot", state.body)
            return DropResult(state.body, None, None)
        if current == target:
            return DropResult(state.body, current, current)
        displaced = self.registry.move(state.body, target)
        log.info("Dropped %s on slot %d (from %d%s)", state.body, target, current,
                 f", swapped with {displaced}" if displaced else "")
        return DropResult(state.body, current, target, displaced)
