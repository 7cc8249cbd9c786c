"""Configuration loading and schema.

- YAML-first configuration under configs/*.yaml
- Strict ${ENV_VAR} expansion (missing/empty env vars are errors)
- An immutable ConfigDescriptor built from the merged mapping
"""

from __future__ import annotations

from chaincfg.config.errors import ChainCfgError, ConfigError
from chaincfg.config.loader import load_config, load_descriptor
from chaincfg.config.model import ConfigDescriptor, default_descriptor

__all__ = [
    "ChainCfgError",
    "ConfigDescriptor",
    "ConfigError",
    "default_descriptor",
    "load_config",
    "load_descriptor",
]
