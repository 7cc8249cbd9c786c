from __future__ import annotations


class ChainCfgError(Exception):
    """Base exception for this project."""


class ConfigError(ChainCfgError):
    """Raised when a config file cannot be loaded or has the wrong shape."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
