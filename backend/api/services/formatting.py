# backend/api/services/formatting.py
"""
Turn raw provider numbers into the human-readable strings of the contract.
Pure functions, no I/O.
"""
from __future__ import annotations

import math

from models.directions import ProviderStep, RouteStep


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def format_duration(seconds: float) -> str:
    mins = _round_half_up(seconds / 60)
    if mins < 60:
        return f"{mins} min"
    h, m = divmod(mins, 60)
    return f"{h} hr {m} min"


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{_round_half_up(meters)} m"
    return f"{meters / 1000:.1f} km"


def format_step(step: ProviderStep) -> RouteStep:
    m = step.maneuver
    verb = (m.type or "continue").replace("_", " ")
    mod = f" {m.modifier.lower()}" if m.modifier else ""
    road = step.name or "road"
    return RouteStep(
        instruction=f"{verb}{mod} on {road}",
        distance=format_distance(step.distance),
        duration=format_duration(step.duration),
    )
