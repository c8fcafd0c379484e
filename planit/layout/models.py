"""Layout dataclasses, drag/highlight enums and the engine's exceptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from shapely.geometry import Point


# A body is the task category name.
Body = str

# Body -> (x, y) screen position.
PositionMap = dict[Body, tuple[float, float]]


# ── Geometry ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Anchor:
    """Centre of the sun, in viewport pixels."""

    x: float
    y: float


@dataclass(frozen=True)
class Slot:
    """One legal planet position around the sun."""

    index: int          # 1..N, stable across geometry refreshes
    orbit_radius: float
    angle: float        # radians
    x: float
    y: float

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


# ── Registry events ────────────────────────────────────────────────


@dataclass(frozen=True)
class LayoutChanged:
    """Published after a state change has been fully applied.

    reason is one of "claim", "release", "move", "swap" or "resize".
    """

    reason: str
    bodies: tuple[Body, ...] = ()
    slots: tuple[int, ...] = ()


# ── Drag & drop ────────────────────────────────────────────────────


class DragPhase(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class SlotHighlight(Enum):
    FREE = "free"
    OCCUPIED = "occupied"
    NEAREST = "nearest"


@dataclass
class DragState:
    """Transient state of one drag gesture."""

    body: Body
    origin_slot: int
    offset_x: float     # pointer minus body position at pointer-down
    offset_y: float
    live_x: float
    live_y: float
    nearest_slot: int


@dataclass
class DropResult:
    """Outcome of ending a drag gesture (or an explicit move)."""

    body: Body
    from_slot: int | None
    to_slot: int | None
    swapped_with: Body | None = None

    @property
    def moved(self) -> bool:
        return self.to_slot is not None and self.from_slot != self.to_slot


# ── Auto-placement ─────────────────────────────────────────────────


@dataclass
class SyncResult:
    """What changed when the live body set was reconciled with occupancy."""

    placed: dict[Body, int] = field(default_factory=dict)
    released: list[Body] = field(default_factory=list)
    unplaced: list[Body] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.placed or self.released)


# ── Errors ─────────────────────────────────────────────────────────


class LayoutError(Exception):
    """Base class for every error raised by the layout engine."""


class SlotAlreadyOccupied(LayoutError):
    """Raised when claiming a slot another body holds."""

    def __init__(self, slot_index: int, body: Body, occupant: Body) -> None:
        self.slot_index = slot_index
        self.body = body
        self.occupant = occupant
        super().__init__(
            f"Cannot claim slot {slot_index} for '{body}': "
            f"already occupied by '{occupant}'"
        )


class BodyAlreadyPlaced(LayoutError):
    """Raised when claiming a slot for a body that holds another one."""

    def __init__(self, body: Body, slot_index: int, requested: int) -> None:
        self.body = body
        self.slot_index = slot_index
        self.requested = requested
        super().__init__(
            f"Cannot claim slot {requested} for '{body}': "
            f"it already holds slot {slot_index} (release or move it first)"
        )


class GridFull(LayoutError):
    """Raised when a body needs a slot and none is free."""

    def __init__(self, body: Body, capacity: int) -> None:
        self.body = body
        self.capacity = capacity
        super().__init__(
            f"Cannot place '{body}': all {capacity} slots are occupied"
        )


class InvalidSlotIndex(LayoutError):
    """Raised for a slot index outside 1..N."""

    def __init__(self, slot_index: int, slot_count: int) -> None:
        self.slot_index = slot_index
        self.slot_count = slot_count
        super().__init__(
            f"Slot index {slot_index} is out of range (1..{slot_count})"
        )


class UnknownBody(LayoutError):
    """Raised when an operation needs a placed body and it holds no slot."""

    def __init__(self, body: Body) -> None:
        self.body = body
        super().__init__(f"Body '{body}' does not hold a slot")


class DragNotActive(LayoutError):
    """Raised for a pointer-move while no drag is in progress."""

    def __init__(self) -> None:
        super().__init__("No drag gesture is in progress")


class InvalidViewport(LayoutError):
    """Raised for a viewport with non-positive dimensions."""

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        super().__init__(f"Invalid viewport size {width}x{height}")
