# tests/test_settings.py
"""
Settings Tests - Unit Tests for Environment-driven Configuration

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- ratewatch.config.settings (Settings under test)
"""
import pytest  # Testing framework for writing and running tests
from pydantic import ValidationError as PydanticValidationError

from ratewatch.config.settings import Settings, is_valid_pair
from ratewatch.domain import Code


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    return monkeypatch


def load() -> Settings:
    return Settings(_env_file=None)


class TestSettings:
    def test_defaults(self, env):
        settings = load()
        assert settings.rate_provider == "unionpay"
        assert settings.http_timeout_seconds == 30
        assert settings.latest_cache_ttl_seconds == 300
        assert settings.fetch_codes == [Code.CNY, Code.JPY, Code.USD]
        assert settings.log_level == "INFO"
        assert settings.sqlite_path is None

    def test_fetch_currencies_normalized(self, env):
        env.setenv("FETCH_CURRENCIES", " eur , usd,gbp ")
        assert load().fetch_currencies == "EUR,USD,GBP"

    @pytest.mark.parametrize("value", ["CNY", "CNY,cny", "CNY,XYZ", ""])
    def test_fetch_currencies_rejected(self, env, value):
        env.setenv("FETCH_CURRENCIES", value)
        with pytest.raises(PydanticValidationError):
            load()

    def test_provider_validated(self, env):
        env.setenv("RATE_PROVIDER", " ECB ")
        assert load().rate_provider == "ecb"
        env.setenv("RATE_PROVIDER", "bloomberg")
        with pytest.raises(PydanticValidationError):
            load()

    def test_manual_rates(self, env):
        env.setenv("MANUAL_RATES", "CNY/JPY=20.5, USD-JPY=150")
        assert load().manual_rate_table == {"CNY/JPY": 20.5, "USD-JPY": 150.0}

    @pytest.mark.parametrize("value", ["CNY/JPY", "CNY/CNY=1", "CNY/JPY=abc", "CNY/JPY=-1"])
    def test_manual_rates_rejected(self, env, value):
        env.setenv("MANUAL_RATES", value)
        with pytest.raises(PydanticValidationError):
            load()

    def test_timeout_bounds(self, env):
        env.setenv("HTTP_TIMEOUT_SECONDS", "61")
        with pytest.raises(PydanticValidationError):
            load()

    def test_log_level(self, env):
        env.setenv("LOG_LEVEL", "debug")
        assert load().log_level == "DEBUG"
        env.setenv("LOG_LEVEL", "verbose")
        with pytest.raises(PydanticValidationError):
            load()

    def test_sqlite_directory_created(self, env, tmp_path):
        env.setenv("DATABASE_URL", "sqlite:///./var/db/rates.db")
        settings = load()
        assert str(settings.sqlite_path) == "var/db/rates.db"
        assert (tmp_path / "var" / "db").is_dir()


class TestIsValidPair:
    def test_valid_and_invalid(self):
        assert is_valid_pair("CNY/JPY")
        assert not is_valid_pair("CNY/CNY")
        assert not is_valid_pair("nonsense")
