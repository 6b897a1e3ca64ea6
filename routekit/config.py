"""Configuration module for RouteKit DoH.

Loads and validates environment variables, and optionally a YAML file that
replaces the built-in provider lists.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml
from jsonschema import ValidationError, validate

from routekit.models.doh_provider import (
    FALLBACK_PROVIDERS,
    PROPAGATION_PROVIDERS,
    DoHProvider,
)


PROVIDER_SCHEMA = {
    "type": "object",
    "required": ["name", "endpoint_url"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "endpoint_url": {"type": "string", "pattern": "^https://"},
        "location": {"type": "string"},
        "organization": {"type": "string"},
    },
    "additionalProperties": False,
}

PROVIDERS_FILE_SCHEMA = {
    "type": "object",
    "properties": {
        "fallback_providers": {
            "type": "array",
            "items": PROVIDER_SCHEMA,
            "minItems": 1,
        },
        "propagation_providers": {
            "type": "array",
            "items": PROVIDER_SCHEMA,
            "minItems": 1,
        },
    },
    "additionalProperties": False,
}


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # Query Configuration
    doh_timeout_ms: int
    propagation_timeout_ms: int
    propagation_concurrency: int

    # Provider Configuration
    fallback_providers: List[DoHProvider] = field(
        default_factory=lambda: list(FALLBACK_PROVIDERS)
    )
    propagation_providers: List[DoHProvider] = field(
        default_factory=lambda: list(PROPAGATION_PROVIDERS)
    )

    # Operational Configuration
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Raises:
            ValueError: If a variable is invalid or the providers file is
                unreadable or does not match the schema.

        Returns:
            Config: Validated configuration instance.
        """
        doh_timeout_ms = cls._get_int_env("DOH_TIMEOUT_MS", 2000)
        if not 100 <= doh_timeout_ms <= 30000:
            raise ValueError("DOH_TIMEOUT_MS must be between 100 and 30000 milliseconds")

        propagation_timeout_ms = cls._get_int_env("PROPAGATION_TIMEOUT_MS", 2000)
        if not 100 <= propagation_timeout_ms <= 30000:
            raise ValueError(
                "PROPAGATION_TIMEOUT_MS must be between 100 and 30000 milliseconds"
            )

        propagation_concurrency = cls._get_int_env("PROPAGATION_CONCURRENCY", 6)
        if not 1 <= propagation_concurrency <= 32:
            raise ValueError("PROPAGATION_CONCURRENCY must be between 1 and 32")

        fallback_providers = list(FALLBACK_PROVIDERS)
        propagation_providers = list(PROPAGATION_PROVIDERS)

        providers_file = os.getenv("DOH_PROVIDERS_FILE")
        if providers_file:
            overrides = load_providers_file(Path(providers_file))
            fallback_providers = overrides.get("fallback_providers", fallback_providers)
            propagation_providers = overrides.get(
                "propagation_providers", propagation_providers
            )

        verbose_str = os.getenv("VERBOSE", "false").lower()
        verbose = verbose_str in ("true", "1", "yes")

        return cls(
            doh_timeout_ms=doh_timeout_ms,
            propagation_timeout_ms=propagation_timeout_ms,
            propagation_concurrency=propagation_concurrency,
            fallback_providers=fallback_providers,
            propagation_providers=propagation_providers,
            verbose=verbose,
        )

    @staticmethod
    def _get_int_env(key: str, default: int) -> int:
        """Get an integer environment variable.

        Args:
            key: Environment variable name.
            default: Value used when the variable is unset or empty.

        Returns:
            int: Parsed value.

        Raises:
            ValueError: If the variable is set but not an integer.
        """
        value = os.getenv(key)
        if not value:
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{key} must be an integer, got {value!r}") from None


def load_providers_file(path: Path) -> dict:
    """Load provider list overrides from a YAML file.

    Args:
        path: Path to a YAML file with ``fallback_providers`` and/or
            ``propagation_providers`` lists.

    Returns:
        dict: Maps each list present in the file to its DoHProvider entries.

    Raises:
        ValueError: If the file cannot be read or fails schema validation.

    Example file::

        propagation_providers:
          - name: Quad9
            endpoint_url: https://dns.quad9.net:5053/dns-query
            location: Global
            organization: Quad9
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Cannot read DOH_PROVIDERS_FILE {path}: {e}") from e

    try:
        validate(instance=data, schema=PROVIDERS_FILE_SCHEMA)
    except ValidationError as e:
        raise ValueError(f"Invalid DOH_PROVIDERS_FILE {path}: {e.message}") from e

    return {
        key: [
            DoHProvider(
                name=entry["name"],
                endpoint_url=entry["endpoint_url"],
                location=entry.get("location", "Global"),
                organization=entry.get("organization", entry["name"]),
            )
            for entry in entries
        ]
        for key, entries in data.items()
    }
