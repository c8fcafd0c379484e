"""Slot occupancy — which body holds which slot."""

from __future__ import annotations

import logging

from .models import (
    Body, LayoutChanged,
    SlotAlreadyOccupied, BodyAlreadyPlaced, InvalidSlotIndex, UnknownBody,
)
from .notifier import ChangeNotifier


log = logging.getLogger(__name__)


class SlotRegistry:
    """Partial injective mapping slot index -> body.

    Each slot holds at most one body and each body at most one slot.
    Every call that changes the mapping publishes exactly one
    LayoutChanged on the notifier, after both directions of the mapping
    are updated.  Calls that change nothing publish nothing.
    """

    def __init__(
        self, slot_count: int, notifier: ChangeNotifier | None = None,
    ) -> None:
        self.slot_count = slot_count
        self.notifier = notifier if notifier is not None else ChangeNotifier()
        self._by_slot: dict[int, Body] = {}
        self._by_body: dict[Body, int] = {}

    # ── Queries ────────────────────────────────────────────────────

    def _check_index(self, slot_index: int) -> None:
        if not 1 <= slot_index <= self.slot_count:
            raise InvalidSlotIndex(slot_index, self.slot_count)

    def occupant(self, slot_index: int) -> Body | None:
        self._check_index(slot_index)
        return self._by_slot.get(slot_index)

    def slot_of(self, body: Body) -> int | None:
        return self._by_body.get(body)

    def free_slots(self) -> set[int]:
        return {
            i for i in range(1, self.slot_count + 1)
            if i not in self._by_slot
        }

    def occupancy(self) -> dict[int, Body]:
        """Copy of the slot -> body mapping, ordered by slot index."""
        return dict(sorted(self._by_slot.items()))

    def bodies(self) -> set[Body]:
        return set(self._by_body)

    def __len__(self) -> int:
        return len(self._by_slot)

    def __contains__(self, body: object) -> bool:
        return body in self._by_body

    # ── Mutations ──────────────────────────────────────────────────

    def claim(self, body: Body, slot_index: int) -> None:
        """Put an unplaced body into a free slot."""
        self._check_index(slot_index)
        current = self._by_body.get(body)
        if current == slot_index:
            return
        occupant = self._by_slot.get(slot_index)
        if occupant is not None:
            raise SlotAlreadyOccupied(slot_index, body, occupant)
        if current is not None:
            raise BodyAlreadyPlaced(body, current, slot_index)

        self._by_slot[slot_index] = body
        self._by_body[body] = slot_index
        log.info("Claimed slot %d for %s", slot_index, body)
        self.notifier.notify(LayoutChanged("claim", (body,), (slot_index,)))

    def release(self, body: Body) -> None:
        """Free the body's slot, if it holds one."""
        slot_index = self._by_body.pop(body, None)
        if slot_index is None:
            return
        del self._by_slot[slot_index]
        log.info("Released slot %d from %s", slot_index, body)
        self.notifier.notify(LayoutChanged("release", (body,), (slot_index,)))

    def move(self, body: Body, target: int) -> Body | None:
        """Move *body* to *target*, swapping with its occupant if needed.

        Returns the displaced body when a swap happened, else None.  An
        unplaced body may move into a free slot, but cannot displace
        another body (there is no slot to send the occupant to).
        """
        self._check_index(target)
        current = self._by_body.get(body)
        if current == target:
            return None
        occupant = self._by_slot.get(target)

        if occupant is None:
            if current is not None:
                del self._by_slot[current]
            self._by_slot[target] = body
            self._by_body[body] = target
            slots = (target,) if current is None else (current, target)
            log.info("Moved %s from slot %s to slot %d", body, current, target)
            self.notifier.notify(LayoutChanged("move", (body,), slots))
            return None

        if current is None:
            raise SlotAlreadyOccupied(target, body, occupant)

        self._by_slot[target] = body
        self._by_slot[current] = occupant
        self._by_body[body] = target
        self._by_body[occupant] = current
        log.info("Swapped %s (slot %d) with %s (slot %d)",
                 body, current, occupant, target)
        self.notifier.notify(
            LayoutChanged("swap", (body, occupant), (current, target)))
        return occupant

    def require_slot(self, body: Body) -> int:
        """Slot held by *body*; raises UnknownBody if it holds none."""
        slot_index = self._by_body.get(body)
        if slot_index is None:
            raise UnknownBody(body)
        return slot_index
