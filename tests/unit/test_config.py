"""Unit tests for configuration validation."""

import pytest

from routekit.config import Config, load_providers_file
from routekit.models.doh_provider import FALLBACK_PROVIDERS, PROPAGATION_PROVIDERS


CONFIG_VARS = (
    "DOH_TIMEOUT_MS",
    "PROPAGATION_TIMEOUT_MS",
    "PROPAGATION_CONCURRENCY",
    "DOH_PROVIDERS_FILE",
    "VERBOSE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without RouteKit variables set."""
    for key in CONFIG_VARS:
        monkeypatch.delenv(key, raising=False)


def test_config_defaults():
    """Test defaults when nothing is set."""
    config = Config.from_env()

    assert config.doh_timeout_ms == 2000
    assert config.propagation_timeout_ms == 2000
    assert config.propagation_concurrency == 6
    assert config.fallback_providers == FALLBACK_PROVIDERS
    assert config.propagation_providers == PROPAGATION_PROVIDERS
    assert config.verbose is False


def test_config_from_env_valid(monkeypatch):
    """Test loading valid configuration from environment variables."""
    monkeypatch.setenv("DOH_TIMEOUT_MS", "5000")
    monkeypatch.setenv("PROPAGATION_TIMEOUT_MS", "3000")
    monkeypatch.setenv("PROPAGATION_CONCURRENCY", "2")
    monkeypatch.setenv("VERBOSE", "yes")

    config = Config.from_env()

    assert config.doh_timeout_ms == 5000
    assert config.propagation_timeout_ms == 3000
    assert config.propagation_concurrency == 2
    assert config.verbose is True


@pytest.mark.parametrize("value", ["99", "30001", "0"])
def test_config_timeout_out_of_range(monkeypatch, value):
    """Test that timeouts outside 100-30000 ms raise ValueError."""
    monkeypatch.setenv("DOH_TIMEOUT_MS", value)

    with pytest.raises(ValueError, match="DOH_TIMEOUT_MS must be between 100 and 30000"):
        Config.from_env()


def test_config_propagation_timeout_out_of_range(monkeypatch):
    monkeypatch.setenv("PROPAGATION_TIMEOUT_MS", "50")

    with pytest.raises(ValueError, match="PROPAGATION_TIMEOUT_MS must be between"):
        Config.from_env()


@pytest.mark.parametrize("value", ["0", "33"])
def test_config_concurrency_out_of_range(monkeypatch, value):
    """Test that concurrency outside 1-32 raises ValueError."""
    monkeypatch.setenv("PROPAGATION_CONCURRENCY", value)

    with pytest.raises(ValueError, match="PROPAGATION_CONCURRENCY must be between 1 and 32"):
        Config.from_env()


def test_config_non_integer(monkeypatch):
    """Test that a non-numeric value raises ValueError naming the variable."""
    monkeypatch.setenv("DOH_TIMEOUT_MS", "fast")

    with pytest.raises(ValueError, match="DOH_TIMEOUT_MS must be an integer"):
        Config.from_env()


def test_config_providers_file(monkeypatch, tmp_path):
    """Test that a providers file replaces the propagation panel only."""
    providers_file = tmp_path / "providers.yaml"
    providers_file.write_text(
        "propagation_providers:\n"
        "  - name: Quad9\n"
        "    endpoint_url: https://dns.quad9.net:5053/dns-query\n"
        "    location: Global\n"
        "    organization: Quad9 Foundation\n"
        "  - name: Internal\n"
        "    endpoint_url: https://doh.internal.example/dns-query\n"
    )
    monkeypatch.setenv("DOH_PROVIDERS_FILE", str(providers_file))

    config = Config.from_env()

    assert [p.name for p in config.propagation_providers] == ["Quad9", "Internal"]
    assert config.propagation_providers[0].organization == "Quad9 Foundation"
    assert config.propagation_providers[1].location == "Global"
    assert config.propagation_providers[1].organization == "Internal"
    assert config.fallback_providers == FALLBACK_PROVIDERS


def test_config_providers_file_missing(monkeypatch, tmp_path):
    monkeypatch.setenv("DOH_PROVIDERS_FILE", str(tmp_path / "missing.yaml"))

    with pytest.raises(ValueError, match="Cannot read DOH_PROVIDERS_FILE"):
        Config.from_env()


def test_providers_file_rejects_plain_http(tmp_path):
    """Test that non-HTTPS endpoints fail schema validation."""
    providers_file = tmp_path / "providers.yaml"
    providers_file.write_text(
        "fallback_providers:\n"
        "  - name: Plain\n"
        "    endpoint_url: http://resolver.example/dns-query\n"
    )

    with pytest.raises(ValueError, match="Invalid DOH_PROVIDERS_FILE"):
        load_providers_file(providers_file)


def test_providers_file_rejects_empty_list(tmp_path):
    providers_file = tmp_path / "providers.yaml"
    providers_file.write_text("fallback_providers: []\n")

    with pytest.raises(ValueError, match="Invalid DOH_PROVIDERS_FILE"):
        load_providers_file(providers_file)


def test_providers_file_rejects_unknown_key(tmp_path):
    providers_file = tmp_path / "providers.yaml"
    providers_file.write_text("resolvers: []\n")

    with pytest.raises(ValueError, match="Invalid DOH_PROVIDERS_FILE"):
        load_providers_file(providers_file)


def test_providers_file_empty_document(tmp_path):
    providers_file = tmp_path / "providers.yaml"
    providers_file.write_text("")

    assert load_providers_file(providers_file) == {}
