"""
Property-based tests for the configuration module.

Covers network resolution, JSON file round-trips and environment loading
through python-dotenv.
"""

import json
import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from agent_domains.config import (
    DEFAULT_BASE_URL,
    DEFAULT_NETWORK,
    NETWORK_MAP,
    ClientConfig,
    LoggingConfig,
    create_default_config,
    load_config_from_env,
    load_config_from_file,
    resolve_network,
    save_config_to_file,
)


ENV_VARS = [
    "AGENT_DOMAINS_BASE_URL",
    "AGENT_DOMAINS_NETWORK",
    "AGENT_DOMAINS_TIMEOUT",
    "AGENT_DOMAINS_LOG_LEVEL",
    "AGENT_DOMAINS_LOG_FORMAT",
    "AGENT_DOMAINS_AUDIT_KEY",
]


# Strategies for generating valid configuration objects

@st.composite
def logging_config_strategy(draw) -> LoggingConfig:
    """Generate valid LoggingConfig objects."""
    audit_key = draw(st.one_of(
        st.none(),
        st.text(alphabet="abcdef0123456789", min_size=16, max_size=64),
    ))
    return LoggingConfig(
        level=draw(st.sampled_from(["debug", "info", "warn", "error"])),
        audit_mode=audit_key is not None,
        audit_signing_key=audit_key,
        output_format=draw(st.sampled_from(["json", "text", "both"])),
    )


@st.composite
def client_config_strategy(draw) -> ClientConfig:
    """Generate valid ClientConfig objects."""
    host = draw(st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=3, max_size=20))
    return ClientConfig(
        base_url=f"https://{host}.example",
        network=draw(st.sampled_from(list(NETWORK_MAP))),
        timeout_seconds=draw(st.floats(min_value=0.5, max_value=300.0)),
        logging=draw(logging_config_strategy()),
    )


def _clear_env(monkeypatch) -> None:
    # setenv first so monkeypatch restores the original state on teardown
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class TestNetworkResolutionProperty:
    """Property-based tests for network name resolution."""

    def test_known_networks_map_to_caip2(self) -> None:
        assert resolve_network("base-mainnet") == "eip155:8453"
        assert resolve_network("base-sepolia") == "eip155:84532"

    @given(network=st.text(min_size=0, max_size=30))
    @settings(max_examples=100)
    def test_unknown_network_rejected_with_hint(self, network: str) -> None:
        """
        *For any* network name outside the supported set, resolution SHALL
        raise ValueError naming the network and the supported values.
        """
        if network in NETWORK_MAP:
            return
        with pytest.raises(ValueError) as exc_info:
            resolve_network(network)
        message = str(exc_info.value)
        assert message.startswith(f"Unknown network: {network}.")
        assert '"base-mainnet"' in message
        assert '"base-sepolia"' in message

    def test_default_config_targets_mainnet_production(self) -> None:
        config = create_default_config()
        assert config.base_url == DEFAULT_BASE_URL == "https://api.agentdomains.ai"
        assert config.network == DEFAULT_NETWORK == "base-mainnet"
        assert config.logging.audit_mode is False


class TestConfigurationRoundTripProperty:
    """Property-based tests for configuration file round-trips."""

    @given(config=client_config_strategy())
    @settings(max_examples=50)
    def test_config_round_trip_preserves_data(self, config: ClientConfig) -> None:
        """
        *For any* valid ClientConfig, saving to a JSON file and loading it
        back SHALL produce an equal ClientConfig.
        """
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "config.json"

            assert save_config_to_file(config, path)
            loaded = load_config_from_file(path)

        assert loaded == config

    @given(config=client_config_strategy())
    @settings(max_examples=50)
    def test_saved_config_is_valid_json(self, config: ClientConfig) -> None:
        """*For any* valid ClientConfig, the saved file SHALL be a JSON object with all sections."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            save_config_to_file(config, path)
            with open(path, "r", encoding="utf-8") as f:
                parsed = json.load(f)

        assert set(parsed.keys()) == {"base_url", "network", "timeout_seconds", "logging"}
        assert set(parsed["logging"].keys()) == {
            "level", "audit_mode", "audit_signing_key", "output_format",
        }

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert load_config_from_file(tmp_path / "absent.json") is None

    def test_malformed_file_returns_none(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_config_from_file(path) is None
        assert "Error loading config" in capsys.readouterr().err

    def test_partial_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"network": "base-sepolia"}), encoding="utf-8")

        config = load_config_from_file(path)

        assert config.network == "base-sepolia"
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout_seconds == 30.0
        assert config.logging == LoggingConfig()


class TestEnvironmentConfig:
    """Tests for environment and .env loading."""

    def test_defaults_without_environment(self, tmp_path: Path, monkeypatch) -> None:
        _clear_env(monkeypatch)

        config = load_config_from_env(dotenv_path=tmp_path / "absent.env")

        assert config == ClientConfig()

    def test_environment_overrides(self, tmp_path: Path, monkeypatch) -> None:
        _clear_env(monkeypatch)
        monkeypatch.setenv("AGENT_DOMAINS_BASE_URL", "http://localhost:8787")
        monkeypatch.setenv("AGENT_DOMAINS_NETWORK", "base-sepolia")
        monkeypatch.setenv("AGENT_DOMAINS_TIMEOUT", "12.5")
        monkeypatch.setenv("AGENT_DOMAINS_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("AGENT_DOMAINS_LOG_FORMAT", "json")
        monkeypatch.setenv("AGENT_DOMAINS_AUDIT_KEY", "audit-key-0123456789")

        config = load_config_from_env(dotenv_path=tmp_path / "absent.env")

        assert config.base_url == "http://localhost:8787"
        assert config.network == "base-sepolia"
        assert config.timeout_seconds == 12.5
        assert config.logging.level == "debug"
        assert config.logging.output_format == "json"
        assert config.logging.audit_mode is True
        assert config.logging.audit_signing_key == "audit-key-0123456789"

    def test_invalid_timeout_falls_back_to_default(self, tmp_path: Path, monkeypatch) -> None:
        _clear_env(monkeypatch)
        monkeypatch.setenv("AGENT_DOMAINS_TIMEOUT", "soon")

        config = load_config_from_env(dotenv_path=tmp_path / "absent.env")

        assert config.timeout_seconds == 30.0

    def test_dotenv_file_does_not_override_process_environment(
        self, tmp_path: Path, monkeypatch
    ) -> None:
        _clear_env(monkeypatch)
        dotenv = tmp_path / ".env"
        dotenv.write_text(
            "AGENT_DOMAINS_NETWORK=base-sepolia\n"
            "AGENT_DOMAINS_BASE_URL=https://from-dotenv.example\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("AGENT_DOMAINS_BASE_URL", "https://from-process.example")

        config = load_config_from_env(dotenv_path=dotenv)

        assert config.network == "base-sepolia"
        assert config.base_url == "https://from-process.example"
