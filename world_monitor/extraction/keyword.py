"""Best-effort tier extraction based on keyword adjacency.

The Lodestone world status page has no stable documented markup, so this
works on visible text rather than CSS selectors: find the world name, then
look for a tier keyword close to it.
"""

from __future__ import annotations

import re

import structlog
from bs4 import BeautifulSoup
from bs4.exceptions import ParserRejectedMarkup

from ..models import KNOWN_TIERS, Tier

logger = structlog.get_logger(__name__)

_TIER_ALTERNATION = r"Congested|Standard|Preferred\+?"


class KeywordAdjacencyExtractor:
    """Find a tier keyword next to the target world's name.

    Two passes run in order and the last successful match wins:

    1. Structural scan: every text node containing the name is followed up to
       ``max_depth`` ancestor elements until one of them mentions a tier.
    2. Whole-page pattern ``<name>\\s+<tier>`` on the flattened page text.
    """

    def __init__(self, max_depth: int = 3):
        self.max_depth = max(1, int(max_depth))

    def extract(self, html: str, target_name: str) -> Tier:
        name = (target_name or "").strip()
        if not name or not html:
            return Tier.UNKNOWN

        try:
            soup = BeautifulSoup(html, "html.parser")
        except ParserRejectedMarkup as e:
            logger.warning("Status page markup rejected, matching raw text", world=name, error=str(e))
            tier = _direct_match(html, name)
            if tier == Tier.UNKNOWN:
                logger.info("No tier found for world", world=name)
            return tier

        for tag in soup(["script", "style"]):
            tag.decompose()

        tier = Tier.UNKNOWN
        for text_node in soup.find_all(string=re.compile(re.escape(name))):
            found = self._scan_ancestors(text_node, name)
            if found != Tier.UNKNOWN:
                tier = found

        direct = _direct_match(soup.get_text(" ", strip=True), name)
        if direct != Tier.UNKNOWN:
            tier = direct

        if tier == Tier.UNKNOWN:
            logger.info("No tier found for world", world=name)
        return tier

    def _scan_ancestors(self, text_node, name: str) -> Tier:
        element = text_node.parent
        depth = 0
        while element is not None and depth < self.max_depth:
            context = element.get_text(" ", strip=True)
            # Drop the name itself so a world called e.g. "Standard" can't match itself.
            found = _first_tier_in(context.replace(name, " "))
            if found != Tier.UNKNOWN:
                return found
            element = element.parent
            depth += 1
        return Tier.UNKNOWN


def _first_tier_in(text: str) -> Tier:
    for tier in KNOWN_TIERS:
        if tier.value in text:
            return tier
    return Tier.UNKNOWN


def _direct_match(text: str, name: str) -> Tier:
    match = re.search(rf"{re.escape(name)}\s+({_TIER_ALTERNATION})", text, re.IGNORECASE)
    return Tier.from_label(match.group(1)) if match else Tier.UNKNOWN
