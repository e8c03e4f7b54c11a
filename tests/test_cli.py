from __future__ import annotations

from pathlib import Path

import pytest

from world_monitor import cli
from world_monitor.config import ENV_VARS
from world_monitor.errors import FetchError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for env_name in [*ENV_VARS.values(), "WORLD_MONITOR_CONFIG"]:
        monkeypatch.setenv(env_name, "")
        monkeypatch.delenv(env_name)
    monkeypatch.chdir(tmp_path)
    # structlog caches loggers once configured; keep the default config in tests.
    monkeypatch.setattr(cli, "configure_logging", lambda level="INFO": None)


class _FakeFetcher:
    page: str | Exception = ""

    def __init__(self, *args, **kwargs) -> None:
        self.closed = False

    async def fetch(self) -> str:
        if isinstance(self.page, Exception):
            raise self.page
        return self.page

    async def aclose(self) -> None:
        self.closed = True


def test_missing_config_exits_nonzero(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main([]) == 1
    captured = capsys.readouterr()
    assert "TELEGRAM_BOT_TOKEN" in captured.err
    assert "TELEGRAM_CLIENT_ID" in captured.err


def test_once_prints_current_tier(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(_FakeFetcher, "page", "<div><p>Behemoth</p><p>Congested</p></div>")
    monkeypatch.setattr(cli, "StatusPageFetcher", _FakeFetcher)

    assert cli.main(["--once"]) == 0
    assert "Behemoth: Congested (character creation unavailable)" in capsys.readouterr().out


def test_once_fetch_failure_exits_nonzero(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(_FakeFetcher, "page", FetchError("HTTP 503"))
    monkeypatch.setattr(cli, "StatusPageFetcher", _FakeFetcher)

    assert cli.main(["--once"]) == 1


def test_parser_overrides() -> None:
    args = cli.build_parser().parse_args(["--dev", "--interval", "2"])
    assert args.dev is True
    assert args.interval == 2.0
    assert args.once is False
