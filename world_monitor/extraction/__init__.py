"""Strategies for reading a world's tier out of the status page."""

from .base import StatusExtractor
from .keyword import KeywordAdjacencyExtractor

__all__ = ["KeywordAdjacencyExtractor", "StatusExtractor"]
