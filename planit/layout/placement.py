"""Auto-placement — give newly seen bodies a random free slot."""

from __future__ import annotations

import logging
import random
from typing import Iterable

from .models import Body, GridFull, SyncResult
from .registry import SlotRegistry


log = logging.getLogger(__name__)


class AutoPlacementResolver:
    """Claims a free slot, chosen uniformly at random, for unplaced bodies.

    Bodies that already hold a slot are never touched, so re-running
    placement over a recomputed body set is stable.
    """

    def __init__(
        self, registry: SlotRegistry, rng: random.Random | None = None,
    ) -> None:
        self.registry = registry
        self.rng = rng if rng is not None else random.Random()

    def place(self, body: Body) -> int:
        """Return the body's slot, claiming one if it has none.

        Raises
        ------
        GridFull
            If the body is unplaced and every slot is taken.
        """
        current = self.registry.slot_of(body)
        if current is not None:
            return current
        free = sorted(self.registry.free_slots())
        if not free:
            raise GridFull(body, self.registry.slot_count)
        slot_index = self.rng.choice(free)
        self.registry.claim(body, slot_index)
        log.info("Auto-placed %s in slot %d (%d free left)",
                 body, slot_index, len(free) - 1)
        return slot_index

    def sync(self, bodies: Iterable[Body]) -> SyncResult:
        """Reconcile occupancy with the live body set.

        Bodies missing from *bodies* release their slots first, so the
        freed capacity is available to the new ones.  New bodies are
        placed in iteration order; a body that finds the grid full is
        reported in ``unplaced`` and picked up again by a later sync.
        """
        live = list(dict.fromkeys(bodies))
        live_set = set(live)
        result = SyncResult()

        for body in sorted(self.registry.bodies() - live_set):
            self.registry.release(body)
            result.released.append(body)

        for body in live:
            if body in self.registry:
                continue
            try:
                result.placed[body] = self.place(body)
            except GridFull as exc:
                log.warning("%s", exc)
                result.unplaced.append(body)

        return result
