"""
Configuration for the agent domains client.

This module defines the configuration dataclasses, the network mapping used
for x402 payments, and loaders for JSON config files and environment
variables (optionally from a .env file).
"""

import json
import os
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv


DEFAULT_BASE_URL = "https://api.agentdomains.ai"
DEFAULT_NETWORK = "base-mainnet"

# CAIP-2 identifiers of the supported payment networks
NETWORK_MAP: dict[str, str] = {
    "base-mainnet": "eip155:8453",
    "base-sepolia": "eip155:84532",
}

ENV_PREFIX = "AGENT_DOMAINS_"
PRIVATE_KEY_ENV = "AGENT_DOMAINS_PRIVATE_KEY"


@dataclass
class LoggingConfig:
    """Logging and audit configuration."""

    level: str = "info"
    audit_mode: bool = False
    audit_signing_key: Optional[str] = None
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class ClientConfig:
    """Main client configuration."""

    base_url: str = DEFAULT_BASE_URL
    network: str = DEFAULT_NETWORK
    timeout_seconds: float = 30.0
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def resolve_network(network: str) -> str:
    """
    Map a configured network name to its CAIP-2 identifier.

    Raises:
        ValueError: If the network is not supported
    """
    caip2 = NETWORK_MAP.get(network)
    if caip2 is None:
        raise ValueError(
            f'Unknown network: {network}. Use "base-mainnet" or "base-sepolia"'
        )
    return caip2


def create_default_config() -> ClientConfig:
    """Create a configuration with all defaults."""
    return ClientConfig()


def load_config_from_file(config_path: Path) -> Optional[ClientConfig]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        ClientConfig if successful, None otherwise
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        logging_data = data.get("logging", {})
        logging_config = LoggingConfig(
            level=logging_data.get("level", "info"),
            audit_mode=logging_data.get("audit_mode", False),
            audit_signing_key=logging_data.get("audit_signing_key"),
            output_format=logging_data.get("output_format", "text"),
        )

        return ClientConfig(
            base_url=data.get("base_url", DEFAULT_BASE_URL),
            network=data.get("network", DEFAULT_NETWORK),
            timeout_seconds=float(data.get("timeout_seconds", 30.0)),
            logging=logging_config,
        )

    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return None
    except FileNotFoundError:
        return None


def save_config_to_file(config: ClientConfig, config_path: Path) -> bool:
    """
    Save configuration to a JSON file.

    Args:
        config: ClientConfig to save
        config_path: Path to save the configuration

    Returns:
        True if written, False otherwise
    """
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(asdict(config), f, indent=2)
        return True
    except OSError as e:
        print(f"Error saving config: {e}", file=sys.stderr)
        return False


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def load_env_file(dotenv_path: Optional[Path] = None) -> bool:
    """
    Load variables from a .env file without overriding the process environment.

    Without a path, the nearest .env at or above the working directory is used.

    Returns:
        True if a file was found and loaded
    """
    path = dotenv_path or find_dotenv(usecwd=True)
    if not path:
        return False
    return load_dotenv(dotenv_path=path, override=False)


def load_config_from_env(dotenv_path: Optional[Path] = None) -> ClientConfig:
    """
    Build configuration from AGENT_DOMAINS_* environment variables.

    Variables from a .env file are loaded first without overriding the
    process environment.
    """
    load_env_file(dotenv_path)

    audit_key = os.getenv(f"{ENV_PREFIX}AUDIT_KEY") or None
    return ClientConfig(
        base_url=os.getenv(f"{ENV_PREFIX}BASE_URL", DEFAULT_BASE_URL),
        network=os.getenv(f"{ENV_PREFIX}NETWORK", DEFAULT_NETWORK),
        timeout_seconds=_float_env(f"{ENV_PREFIX}TIMEOUT", 30.0),
        logging=LoggingConfig(
            level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "info").lower(),
            audit_mode=audit_key is not None,
            audit_signing_key=audit_key,
            output_format=os.getenv(f"{ENV_PREFIX}LOG_FORMAT", "text").lower(),
        ),
    )
