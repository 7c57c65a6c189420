# tests/test_app.py
"""
Application Wiring Tests - Container Construction and Entry Point

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- ratewatch.app (build_container, main)
- ratewatch.config.settings (Settings)
"""
from unittest.mock import patch

import pytest  # Testing framework for writing and running tests

from ratewatch.adapters.providers import ManualProvider
from ratewatch.app import build_container, main
from ratewatch.application import FetchMatrixCommand, GetLatestRateQuery
from ratewatch.config.settings import Settings
from ratewatch.domain import Pair
from ratewatch.shared.timeutil import today


@pytest.fixture
def manual_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("RATE_PROVIDER", "manual")
    monkeypatch.setenv("MANUAL_RATES", "CNY/JPY=20.0")
    monkeypatch.setenv("FETCH_CURRENCIES", "CNY,JPY")
    return Settings(_env_file=None)


class TestBuildContainer:
    def test_wires_components(self, manual_settings):
        container = build_container(manual_settings)
        assert isinstance(container.provider, ManualProvider)
        assert container.latest_rate.ttl_seconds == 300

    def test_end_to_end_fetch_then_query(self, manual_settings):
        container = build_container(manual_settings)
        report = container.fetch_matrix.handle(
            FetchMatrixCommand(codes=manual_settings.fetch_codes, start=today(), end=today())
        )
        assert report.success == 2

        response = container.latest_rate.handle(GetLatestRateQuery(Pair.parse("JPY/CNY")))
        assert response.rate == pytest.approx(0.05)


class TestMain:
    def test_main_runs_sweep(self, manual_settings):
        with patch("ratewatch.config.settings", manual_settings), \
                patch("ratewatch.app.setup_logging") as mock_logging:
            main()
        mock_logging.assert_called_once()

    def test_main_exits_on_failures(self, manual_settings, monkeypatch):
        monkeypatch.setattr(manual_settings, "fetch_currencies", "CNY,USD")
        with patch("ratewatch.config.settings", manual_settings), \
                patch("ratewatch.app.setup_logging"):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1
