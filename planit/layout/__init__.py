"""Layout — positions every category planet around the sun.

Submodules:
  models        Dataclasses, enums and the engine's exceptions.
  geometry      Slot coordinates from the sun centre; nearest-slot search.
  notifier      Synchronous change notification.
  registry      Slot occupancy (uniqueness, capacity, swap).
  placement     Random free-slot assignment for new bodies.
  drag          Drag & drop state machine.
  legacy        Grid-free weighted-orbit placer with collision avoidance.
  engine        OrbitLayout, one wired-up layout session.
  serialization JSON conversion for the web layer and CLI.
"""

from .models import (
    Anchor, Slot, LayoutChanged, DragPhase, DragState, DropResult,
    SlotHighlight, SyncResult,
    LayoutError, SlotAlreadyOccupied, BodyAlreadyPlaced, GridFull,
    InvalidSlotIndex, UnknownBody, DragNotActive, InvalidViewport,
)
from .geometry import SlotGeometryProvider, anchor_for_viewport, build_slots
from .notifier import ChangeNotifier
from .registry import SlotRegistry
from .placement import AutoPlacementResolver
from .drag import DragReassignmentController
from .legacy import LegacyContinuousPlacer, LegacyPlacement, chord_distance
from .engine import OrbitLayout
from .serialization import layout_to_dict, legacy_to_dict

__all__ = [
    # Models
    "Anchor", "Slot", "LayoutChanged", "DragPhase", "DragState",
    "DropResult", "SlotHighlight", "SyncResult",
    # Errors
    "LayoutError", "SlotAlreadyOccupied", "BodyAlreadyPlaced", "GridFull",
    "InvalidSlotIndex", "UnknownBody", "DragNotActive", "InvalidViewport",
    # Components
    "SlotGeometryProvider", "anchor_for_viewport", "build_slots",
    "ChangeNotifier", "SlotRegistry", "AutoPlacementResolver",
    "DragReassignmentController",
    "LegacyContinuousPlacer", "LegacyPlacement", "chord_distance",
    "OrbitLayout",
    # Serialization
    "layout_to_dict", "legacy_to_dict",
]
