"""
dupass Configuration Module
===========================

Centralized configuration management for the dupass framework.
Supports environment variables for sensitive data (API client credentials).

Design Decision:
- Configuration is a dataclass tree that can be passed through the pipeline
- Credentials are never required on the command line; the environment is
  consulted when they are not given explicitly
- Request pacing is a fixed delay, exposed here so runs can be tuned
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path


DEFAULT_BASE_URL = "https://api.crowdstrike.com"


@dataclass
class ApiConfig:
    """Configuration for the identity risk API.

    Attributes:
        client_id: OAuth2 API client ID (loaded from environment if not provided)
        client_secret: OAuth2 API client secret (loaded from environment if not provided)
        base_url: Base URL of the API cloud
        timeout: HTTP timeout in seconds for every request
    """
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    base_url: Optional[str] = None
    timeout: int = 30

    def __post_init__(self):
        """Load credentials from environment if not explicitly provided."""
        if self.client_id is None:
            self.client_id = os.environ.get("FALCON_CLIENT_ID")
        if self.client_secret is None:
            self.client_secret = os.environ.get("FALCON_CLIENT_SECRET")
        if self.base_url is None:
            self.base_url = os.environ.get("FALCON_BASE_URL", DEFAULT_BASE_URL)
        self.base_url = self.base_url.rstrip("/")

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)


@dataclass
class PaginationConfig:
    """Configuration for entity retrieval.

    Attributes:
        page_size: Number of entities requested per page
        request_delay: Fixed pause in seconds between page requests
        risk_factors: Risk factor types used to filter entities
        max_pages: Optional safety cap on the number of pages. None means the
            loop runs until the API reports no further pages.
    """
    page_size: int = 1000
    request_delay: float = 1.0
    risk_factors: list = field(default_factory=lambda: ["DUPLICATE_PASSWORD"])
    max_pages: Optional[int] = None


@dataclass
class OutputConfig:
    """Configuration for output and reporting.

    Attributes:
        output_dir: Directory for output files
        generate_json: Whether to write the JSON results file
    """
    output_dir: str = "output"
    generate_json: bool = False

    def __post_init__(self):
        """Ensure output directory exists when files will be written."""
        if self.generate_json:
            Path(self.output_dir).mkdir(parents=True, exist_ok=True)


@dataclass
class DupassConfig:
    """Main configuration container for dupass.

    Usage:
        config = DupassConfig()  # Uses all defaults and environment credentials
        config = DupassConfig(pagination=PaginationConfig(request_delay=0.5))
    """
    api: ApiConfig = field(default_factory=ApiConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    verbose: bool = True

    @classmethod
    def from_dict(cls, config_dict: dict) -> "DupassConfig":
        """Create configuration from a dictionary.

        Useful for loading from JSON files or CLI arguments.
        """
        return cls(
            api=ApiConfig(**config_dict.get("api", {})),
            pagination=PaginationConfig(**config_dict.get("pagination", {})),
            output=OutputConfig(**config_dict.get("output", {})),
            verbose=config_dict.get("verbose", True)
        )

    def to_dict(self) -> dict:
        """Convert configuration to dictionary for serialization.

        The client secret is masked.
        """
        from dataclasses import asdict
        data = asdict(self)
        if data["api"].get("client_secret"):
            data["api"]["client_secret"] = "********"
        return data


# Default global configuration instance
_default_config: Optional[DupassConfig] = None


def get_config() -> DupassConfig:
    """Get the global configuration instance."""
    global _default_config
    if _default_config is None:
        _default_config = DupassConfig()
    return _default_config


def set_config(config: DupassConfig) -> None:
    """Set the global configuration instance."""
    global _default_config
    _default_config = config
