from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Authenticated caller, passed explicitly into every service call."""

    user_id: int
