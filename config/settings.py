"""
Configuration management for graphinspect.

Provides dataclasses for configuration and utilities
for loading settings from YAML files.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class SampleConfig:
    """Defaults for the adjacency and small-graph views."""
    adjacency_sample: int = 0
    small_graph: int = 0
    max_neighbors: int = 20


@dataclass
class SanityConfig:
    """Limits past which a raw graph file is assumed to be something else."""
    max_reasonable_degree: int = 10_000_000
    max_reasonable_nodes: int = 500_000_000


@dataclass
class LayoutConfig:
    """Layout constants that vary between index builds."""
    unified_metadata_size: int = 4096


@dataclass
class Settings:
    """
    Main settings container for graphinspect.

    Attributes:
        sample_config: Sampling defaults
        sanity_config: Raw graph plausibility limits
        layout_config: Layout constants
        log_level: Logging level
        log_file: Optional log file path
    """
    sample_config: SampleConfig = field(default_factory=SampleConfig)
    sanity_config: SanityConfig = field(default_factory=SanityConfig)
    layout_config: LayoutConfig = field(default_factory=LayoutConfig)

    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Create Settings from dictionary."""
        data = dict(data)
        sample_data = data.pop("sample_config", None) or {}
        sanity_data = data.pop("sanity_config", None) or {}
        layout_data = data.pop("layout_config", None) or {}

        return cls(
            sample_config=SampleConfig(**sample_data),
            sanity_config=SanityConfig(**sanity_data),
            layout_config=LayoutConfig(**layout_data),
            **data
        )

    def to_dict(self) -> dict:
        """Convert Settings to dictionary."""
        from dataclasses import asdict
        return asdict(self)


def get_default_config_path() -> Path:
    """Get path to default configuration file."""
    # Environment variable wins
    env_config = os.environ.get("GRAPHINSPECT_CONFIG")
    if env_config:
        return Path(env_config)

    # Check for config in current directory
    local_config = Path("./config/default_config.yaml")
    if local_config.exists():
        return local_config

    return Path(__file__).parent / "default_config.yaml"


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default.

    Returns:
        Settings object with loaded configuration

    Example:
        >>> settings = load_config()
        >>> settings = load_config("./my_config.yaml")
    """
    if config_path is None:
        path = get_default_config_path()
    else:
        path = Path(config_path)

    if not path.exists():
        # Return default settings if no config file
        return Settings()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Settings()

    return Settings.from_dict(data)
