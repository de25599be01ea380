from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ResolvedLocation:
    lat: float
    lng: float
    method: str  # default_center | raw_coords | default_name_match | geocoded
    label: str = ""


@dataclass
class WorkflowContext:
    search_id: str
    request: Dict[str, Any]

    plan: Dict[str, Any] = field(default_factory=dict)
    location: Optional[ResolvedLocation] = None
    search_points: list = field(default_factory=list)
    raw_candidates: list = field(default_factory=list)

    accepted: list = field(default_factory=list)
    rejected: List[Dict[str, str]] = field(default_factory=list)
    results: list = field(default_factory=list)

    budget_usage: Dict[str, Any] = field(default_factory=dict)
    message: str = ""
    errors: List[str] = field(default_factory=list)
