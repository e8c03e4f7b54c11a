from __future__ import annotations

from typing import Protocol

from ..models import Tier


class StatusExtractor(Protocol):
    """Raw page text in, Tier out.

    Implementations return Tier.UNKNOWN when nothing matches and never raise
    for a missing world.
    """

    def extract(self, html: str, target_name: str) -> Tier: ...
