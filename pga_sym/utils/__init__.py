"""
Utility functions for PGA-Sym.
"""

from .config import (
    Config,
    load_config,
    save_config,
    get_default_config,
    set_default_config,
    get_default_dtype,
)

__all__ = [
    "Config",
    "load_config",
    "save_config",
    "get_default_config",
    "set_default_config",
    "get_default_dtype",
]
