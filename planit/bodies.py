"""Bodies from task state — which planets exist and how big they are."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from planit.config import LAYOUT_RULES, LayoutRules


@dataclass
class Todo:
    id: str
    text: str
    category: str
    completed: bool = False


@dataclass
class CompletedTask:
    id: str
    text: str
    category: str
    completed_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc))


def normalize_category(name: str | None) -> str:
    return (name or "").strip()


def collect_bodies(
    categories: Iterable[str] = (),
    todos: Iterable[Todo] = (),
    completed: Iterable[CompletedTask] = (),
) -> list[str]:
    """Every category in use, first-seen order, blanks dropped."""
    names = [normalize_category(c) for c in categories]
    names += [normalize_category(t.category) for t in todos]
    names += [normalize_category(t.category) for t in completed]
    return [n for n in dict.fromkeys(names) if n]


def completed_counts(completed: Iterable[CompletedTask]) -> dict[str, int]:
    """Number of completed tasks per category."""
    counts: dict[str, int] = {}
    for task in completed:
        name = normalize_category(task.category)
        if name:
            counts[name] = counts.get(name, 0) + 1
    return counts


def planet_size(count: int, rules: LayoutRules = LAYOUT_RULES) -> float:
    """Rendered diameter for a category with *count* completed tasks.

    Grows as 1 - e^-count towards max_planet_size, never below
    min_planet_size.
    """
    return max(
        rules.min_planet_size,
        rules.max_planet_size * (1 - math.exp(-count)),
    )
