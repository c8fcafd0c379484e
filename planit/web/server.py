"""
FastAPI web server — one in-process orbital layout session.

The browser owns rendering and pointer events; this service owns where
the planets are.  Every request runs under one lock, so each layout
operation completes before the next one starts.
"""

from __future__ import annotations

import logging
import os
import random
import threading
from dataclasses import replace
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, model_validator

from planit.bodies import (
    CompletedTask, Todo, collect_bodies, completed_counts, planet_size,
)
from planit.layout import (
    OrbitLayout, LegacyContinuousPlacer, LegacyPlacement,
    LayoutError, SlotAlreadyOccupied, BodyAlreadyPlaced, GridFull,
    InvalidSlotIndex, UnknownBody, DragNotActive, InvalidViewport,
    layout_to_dict, legacy_to_dict,
)
from planit.layout.serialization import (
    drag_to_dict, drop_to_dict, sync_to_dict,
)


log = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parents[2]


# ── .env loader ────────────────────────────────────────────────────

def _load_env():
    for name in (".env", ".env.local"):
        p = ROOT / name
        if p.exists():
            for line in p.read_text(encoding="utf-8").splitlines():
                line = line.strip()
                if line and "=" in line and not line.startswith("#"):
                    k, v = line.split("=", 1)
                    k = k.strip()
                    v = v.strip().strip('"').strip("'")
                    if k and k not in os.environ:
                        os.environ[k] = v

_load_env()


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    return float(raw) if raw else default


def _make_rng() -> random.Random:
    seed = os.environ.get("PLANIT_RANDOM_SEED")
    return random.Random(int(seed)) if seed else random.Random()


# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="Plan It")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_lock = threading.Lock()
_layout: OrbitLayout | None = None
_sizes: dict[str, float] = {}
_legacy_placer: LegacyContinuousPlacer | None = None
_legacy: dict[str, LegacyPlacement] = {}


def _new_layout() -> OrbitLayout:
    width = _env_float("PLANIT_VIEWPORT_WIDTH", 1280)
    height = _env_float("PLANIT_VIEWPORT_HEIGHT", 800)
    return OrbitLayout(width, height, rng=_make_rng())


def _session() -> OrbitLayout:
    global _layout
    if _layout is None:
        _layout = _new_layout()
    return _layout


def _http_error(exc: LayoutError) -> HTTPException:
    if isinstance(exc, (SlotAlreadyOccupied, BodyAlreadyPlaced, GridFull)):
        return HTTPException(409, str(exc))
    if isinstance(exc, (InvalidSlotIndex, UnknownBody)):
        return HTTPException(404, str(exc))
    # DragNotActive, InvalidViewport
    return HTTPException(400, str(exc))


def _snapshot(layout: OrbitLayout) -> dict:
    return layout_to_dict(layout, _sizes)


# ── Request models ─────────────────────────────────────────────────

class ViewportRequest(BaseModel):
    width: float
    height: float


class TodoIn(BaseModel):
    id: str
    text: str = ""
    category: str
    completed: bool = False


class CompletedTaskIn(BaseModel):
    id: str
    text: str = ""
    category: str


class BodiesRequest(BaseModel):
    categories: list[str] = Field(default_factory=list)
    todos: list[TodoIn] = Field(default_factory=list)
    completed: list[CompletedTaskIn] = Field(default_factory=list)


class MoveRequest(BaseModel):
    body: str
    slot: int


class DragStartRequest(BaseModel):
    body: str
    x: float
    y: float


class PointerRequest(BaseModel):
    x: float
    y: float


class DragEndRequest(BaseModel):
    x: float | None = None
    y: float | None = None

    @model_validator(mode="after")
    def _both_or_neither(self):
        if (self.x is None) != (self.y is None):
            raise ValueError("give both x and y, or neither")
        return self


class LegacyRequest(BodiesRequest):
    seed: int | None = None
    preset_orbits: dict[str, float] = Field(default_factory=dict)


def _task_state(req: BodiesRequest) -> tuple[list[str], dict[str, float]]:
    todos = [Todo(t.id, t.text, t.category, t.completed) for t in req.todos]
    done = [CompletedTask(t.id, t.text, t.category) for t in req.completed]
    bodies = collect_bodies(req.categories, todos, done)
    counts = completed_counts(done)
    sizes = {b: planet_size(counts.get(b, 0)) for b in bodies}
    return bodies, sizes


# ── Layout ─────────────────────────────────────────────────────────

@app.get("/api/layout")
def get_layout():
    with _lock:
        return _snapshot(_session())


@app.get("/api/orbits")
def get_orbits():
    with _lock:
        layout = _session()
        return {
            "anchor": {"x": layout.geometry.anchor.x, "y": layout.geometry.anchor.y},
            "all": list(layout.geometry.orbit_rings()),
            "active": list(layout.active_orbits()),
        }


@app.post("/api/reset")
def reset_layout():
    global _layout, _legacy_placer
    with _lock:
        if _layout is not None:
            _layout.drag.cancel()
        _layout = _new_layout()
        _sizes.clear()
        _legacy_placer = None
        _legacy.clear()
        return _snapshot(_layout)


@app.post("/api/viewport")
def set_viewport(req: ViewportRequest):
    with _lock:
        layout = _session()
        try:
            changed = layout.resize(req.width, req.height)
        except LayoutError as exc:
            raise _http_error(exc)
        return {"changed": changed, "layout": _snapshot(layout)}


@app.post("/api/bodies")
def set_bodies(req: BodiesRequest):
    with _lock:
        layout = _session()
        bodies, sizes = _task_state(req)
        result = layout.sync(bodies)
        _sizes.clear()
        _sizes.update(sizes)
        return {"sync": sync_to_dict(result), "layout": _snapshot(layout)}


@app.post("/api/slots/move")
def move_body(req: MoveRequest):
    with _lock:
        layout = _session()
        try:
            result = layout.move(req.body, req.slot)
        except LayoutError as exc:
            raise _http_error(exc)
        return {"drop": drop_to_dict(result), "layout": _snapshot(layout)}


# ── Drag & drop ────────────────────────────────────────────────────

@app.post("/api/drag/start")
def drag_start(req: DragStartRequest):
    with _lock:
        layout = _session()
        try:
            state = layout.drag.pointer_down(req.body, req.x, req.y)
        except LayoutError as exc:
            raise _http_error(exc)
        return {
            "drag": drag_to_dict(state),
            "highlights": {i: h.value for i, h in layout.drag.highlights().items()},
        }


@app.post("/api/drag/move")
def drag_move(req: PointerRequest):
    with _lock:
        layout = _session()
        try:
            layout.drag.pointer_move(req.x, req.y)
        except LayoutError as exc:
            raise _http_error(exc)
        return {
            "drag": drag_to_dict(layout.drag.state),
            "highlights": {i: h.value for i, h in layout.drag.highlights().items()},
        }


@app.post("/api/drag/end")
def drag_end(req: DragEndRequest | None = None):
    with _lock:
        layout = _session()
        x = req.x if req else None
        y = req.y if req else None
        try:
            result = layout.drag.pointer_up(x, y)
        except LayoutError as exc:
            raise _http_error(exc)
        return {"drop": drop_to_dict(result), "layout": _snapshot(layout)}


@app.post("/api/drag/cancel")
def drag_cancel():
    with _lock:
        layout = _session()
        result = layout.drag.cancel()
        return {"drop": drop_to_dict(result), "layout": _snapshot(layout)}


# ── Legacy continuous layout ───────────────────────────────────────

@app.post("/api/legacy/layout")
def legacy_layout(req: LegacyRequest):
    """Place new bodies; bodies placed by earlier calls keep their position.

    The placer lives until /api/reset, so ``seed`` only applies to the
    first call after a reset.  Sizes follow the current completed counts.
    """
    global _legacy_placer
    with _lock:
        layout = _session()
        bodies, sizes = _task_state(req)
        if _legacy_placer is None:
            rng = random.Random(req.seed) if req.seed is not None else _make_rng()
            _legacy_placer = LegacyContinuousPlacer(rng=rng)
        _legacy_placer.preset(req.preset_orbits)

        for body in [b for b in _legacy if b not in sizes]:
            del _legacy[body]
        existing = {b: replace(p, size=sizes[b]) for b, p in _legacy.items()}
        placements = _legacy_placer.place_all(
            {b: sizes[b] for b in bodies}, existing)

        _legacy.clear()
        _legacy.update(placements)
        ordered = {b: placements[b] for b in bodies}
        return legacy_to_dict(ordered, layout.geometry.anchor)


# ── Entry point ────────────────────────────────────────────────────

def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    log.info("Serving Plan It layout on %s:%d", host, port)
    uvicorn.run("planit.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
