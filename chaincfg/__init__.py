"""Declarative config for a smart-contract development toolchain."""

from __future__ import annotations

from chaincfg.config.model import ConfigDescriptor, default_descriptor

__all__ = ["ConfigDescriptor", "__version__", "default_descriptor"]

__version__ = "0.1.0"
