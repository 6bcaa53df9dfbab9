"""
Configuration management for PGA-Sym.

Provides the configuration dataclass shared by the evaluation engine and the
closed-form routines, plus JSON load/save helpers.
"""

import json
from dataclasses import dataclass, field, asdict
from typing import Dict, Any
from pathlib import Path

import torch

from ..core.constants import (
    DEFAULT_CACHE_SIZE,
    DEFAULT_DTYPE,
    DEFAULT_LOG_EPS,
    DEFAULT_VALIDATE_BINDINGS,
)


@dataclass
class Config:
    """
    Configuration for PGA-Sym.

    Attributes:
        cache_size: Number of compiled programs kept by an engine
        log_epsilon: |<M>_0| threshold selecting the motor log branch
        dtype: Name of the torch dtype used for entities built from Python
               numbers ('float32' or 'float64')
        validate_bindings: Check bound id ranges for overlap before reducing
    """

    cache_size: int = DEFAULT_CACHE_SIZE
    log_epsilon: float = DEFAULT_LOG_EPS
    dtype: str = DEFAULT_DTYPE
    validate_bindings: bool = DEFAULT_VALIDATE_BINDINGS

    # Additional fields
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.cache_size < 0:
            raise ValueError(f"cache_size must be non-negative, got {self.cache_size}")
        if self.log_epsilon < 0:
            raise ValueError(f"log_epsilon must be non-negative, got {self.log_epsilon}")
        # Fail early on unknown dtype names
        self.torch_dtype

    @property
    def torch_dtype(self) -> torch.dtype:
        dtype = getattr(torch, self.dtype, None)
        if not isinstance(dtype, torch.dtype) or not dtype.is_floating_point:
            raise ValueError(f"Unknown floating point dtype: {self.dtype}")
        return dtype

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'Config':
        """Create config from dictionary."""
        # Extract known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        known_kwargs = {k: v for k, v in config_dict.items() if k in known_fields}
        extra_kwargs = {k: v for k, v in config_dict.items() if k not in known_fields}

        config = cls(**known_kwargs)
        config.extra.update(extra_kwargs)
        return config

    def update(self, **kwargs) -> 'Config':
        """Return a new config with updated values."""
        config_dict = self.to_dict()
        config_dict.update(kwargs)
        return Config.from_dict(config_dict)


_default_config = Config()


def get_default_config() -> Config:
    """Configuration used by module-level helpers when none is given."""
    return _default_config


def set_default_config(config: Config) -> None:
    global _default_config
    _default_config = config


def load_config(filepath: str) -> Config:
    """
    Load configuration from JSON file.

    Args:
        filepath: Path to JSON config file

    Returns:
        Config object
    """
    filepath = Path(filepath)
    with open(filepath, 'r') as f:
        config_dict = json.load(f)
    return Config.from_dict(config_dict)


def save_config(config: Config, filepath: str) -> None:
    """
    Save configuration to JSON file.

    Args:
        config: Config object to save
        filepath: Output file path
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)


def get_default_dtype(config: Config = None) -> torch.dtype:
    """Torch dtype for entities built from Python numbers."""
    if config is None:
        config = get_default_config()
    return config.torch_dtype
