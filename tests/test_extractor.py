from __future__ import annotations

import pytest
from bs4.exceptions import ParserRejectedMarkup

from world_monitor.extraction import KeywordAdjacencyExtractor, keyword
from world_monitor.models import Tier

LODESTONE_LIKE_PAGE = """
<!doctype html>
<html><head><title>World Status</title>
<script>var tiers = ["Behemoth Congested"];</script>
</head>
<body>
<div class="world-dcgroup__item">
  <h2 class="world-dcgroup__header">Primal</h2>
  <ul>
    <li class="item-list">
      <div class="world-list__item">
        <div class="world-list__status_icon"><i class="world-ic__1" data-tooltip=" Online"></i></div>
        <div class="world-list__world_name"><p>Behemoth</p></div>
        <div class="world-list__world_category"><p>Preferred</p></div>
        <div class="world-list__create_character"><i data-tooltip="Creation of New Characters Available"></i></div>
      </div>
    </li>
    <li class="item-list">
      <div class="world-list__item">
        <div class="world-list__status_icon"><i class="world-ic__1" data-tooltip=" Online"></i></div>
        <div class="world-list__world_name"><p>Excalibur</p></div>
        <div class="world-list__world_category"><p>Congested</p></div>
      </div>
    </li>
  </ul>
</div>
</body></html>
"""


@pytest.fixture
def extractor() -> KeywordAdjacencyExtractor:
    return KeywordAdjacencyExtractor()


@pytest.mark.parametrize(
    ("text", "tier"),
    [
        ("... Behemoth Standard ...", Tier.STANDARD),
        ("... Behemoth Preferred+ ...", Tier.PREFERRED_PLUS),
        ("... Behemoth Preferred ...", Tier.PREFERRED),
        ("... Behemoth Congested ...", Tier.CONGESTED),
        ("... behemoth standard ...", Tier.STANDARD),
        ("no mention here", Tier.UNKNOWN),
    ],
)
def test_extract_plain_text(extractor: KeywordAdjacencyExtractor, text: str, tier: Tier) -> None:
    assert extractor.extract(text, "Behemoth") == tier


def test_extract_lodestone_markup(extractor: KeywordAdjacencyExtractor) -> None:
    assert extractor.extract(LODESTONE_LIKE_PAGE, "Behemoth") == Tier.PREFERRED
    assert extractor.extract(LODESTONE_LIKE_PAGE, "Excalibur") == Tier.CONGESTED


def test_extract_ignores_script_text(extractor: KeywordAdjacencyExtractor) -> None:
    html = "<html><head><script>var s = 'Behemoth Congested';</script></head><body><p>Nothing</p></body></html>"
    assert extractor.extract(html, "Behemoth") == Tier.UNKNOWN


def test_extract_structural_scan_without_direct_pattern(extractor: KeywordAdjacencyExtractor) -> None:
    # The tier precedes the name, so only the ancestor scan can find it.
    html = "<div><span>Standard</span><span>Behemoth</span></div>"
    assert extractor.extract(html, "Behemoth") == Tier.STANDARD


def test_direct_pattern_wins_over_structural_scan(extractor: KeywordAdjacencyExtractor) -> None:
    html = "<div><p>Congested</p><p>Behemoth</p><p>Preferred+</p></div>"
    # Ancestor scan sees "Congested" first by priority; the page-text pattern
    # "Behemoth Preferred+" runs afterwards and takes precedence.
    assert extractor.extract(html, "Behemoth") == Tier.PREFERRED_PLUS


def test_extract_returns_unknown_when_world_missing(extractor: KeywordAdjacencyExtractor) -> None:
    assert extractor.extract(LODESTONE_LIKE_PAGE, "Gilgamesh") == Tier.UNKNOWN
    assert extractor.extract("", "Behemoth") == Tier.UNKNOWN


def test_extract_is_idempotent(extractor: KeywordAdjacencyExtractor) -> None:
    first = extractor.extract(LODESTONE_LIKE_PAGE, "Behemoth")
    second = extractor.extract(LODESTONE_LIKE_PAGE, "Behemoth")
    assert first == second == Tier.PREFERRED


def test_rejected_markup_falls_back_to_raw_text(
    extractor: KeywordAdjacencyExtractor, monkeypatch: pytest.MonkeyPatch
) -> None:
    def reject(markup, features=None):
        raise ParserRejectedMarkup("unknown status keyword 'a ' in marked section")

    monkeypatch.setattr(keyword, "BeautifulSoup", reject)

    assert extractor.extract("<![a Behemoth Standard", "Behemoth") == Tier.STANDARD
    assert extractor.extract("<![a Excalibur Congested", "Behemoth") == Tier.UNKNOWN


@pytest.mark.parametrize("html", ["<![a Behemoth Standard", "<![CDATA[Behemoth", "<div><p>Behemoth</p"])
def test_malformed_markup_does_not_raise(extractor: KeywordAdjacencyExtractor, html: str) -> None:
    assert isinstance(extractor.extract(html, "Behemoth"), Tier)
