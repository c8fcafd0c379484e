"""Layout serialization — JSON-safe views for the web layer and CLI."""

from __future__ import annotations

from typing import Mapping

from .engine import OrbitLayout
from .legacy import LegacyPlacement
from .models import Anchor, DragState, DropResult, SyncResult


def anchor_to_dict(anchor: Anchor) -> dict:
    return {"x": anchor.x, "y": anchor.y}


def layout_to_dict(
    layout: OrbitLayout, sizes: Mapping[str, float] | None = None,
) -> dict:
    """Serialize the current slots, occupancy, positions and drag state."""
    occupancy = layout.registry.occupancy()
    positions = layout.render_positions()
    highlights = layout.drag.highlights()
    width, height = layout.viewport
    return {
        "viewport": {"width": width, "height": height},
        "anchor": anchor_to_dict(layout.geometry.anchor),
        "orbits": list(layout.active_orbits()),
        "slots": [
            {
                "index": s.index,
                "orbit_radius": s.orbit_radius,
                "angle": s.angle,
                "x": s.x,
                "y": s.y,
                "occupant": occupancy.get(s.index),
                **({"highlight": highlights[s.index].value}
                   if s.index in highlights else {}),
            }
            for s in layout.geometry.slots
        ],
        "bodies": [
            {
                "body": body,
                "slot": slot_index,
                "x": positions[body][0],
                "y": positions[body][1],
                **({"size": sizes[body]} if sizes and body in sizes else {}),
            }
            for slot_index, body in occupancy.items()
        ],
        "drag": drag_to_dict(layout.drag.state),
    }


def drag_to_dict(state: DragState | None) -> dict | None:
    if state is None:
        return None
    return {
        "body": state.body,
        "origin_slot": state.origin_slot,
        "x": state.live_x,
        "y": state.live_y,
        "nearest_slot": state.nearest_slot,
    }


def drop_to_dict(result: DropResult | None) -> dict | None:
    if result is None:
        return None
    return {
        "body": result.body,
        "from_slot": result.from_slot,
        "to_slot": result.to_slot,
        "swapped_with": result.swapped_with,
        "moved": result.moved,
    }


def sync_to_dict(result: SyncResult) -> dict:
    return {
        "placed": dict(result.placed),
        "released": list(result.released),
        "unplaced": list(result.unplaced),
    }


def legacy_to_dict(
    placements: Mapping[str, LegacyPlacement], anchor: Anchor,
) -> dict:
    """Serialize legacy placements with their screen positions."""
    bodies = []
    for p in placements.values():
        x, y = p.xy(anchor)
        bodies.append({
            "body": p.body,
            "radius": p.radius,
            "angle": p.angle,
            "size": p.size,
            "x": x,
            "y": y,
            "attempts": p.attempts,
            "overlapping": p.overlapping,
        })
    return {
        "anchor": anchor_to_dict(anchor),
        "orbits": sorted({p.radius for p in placements.values()}),
        "bodies": bodies,
    }
