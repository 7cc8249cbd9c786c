"""Typed descriptor for the contract toolchain config.

The descriptor is a plain value: it performs no validation and no I/O.
Whether the compiler version is installable, whether the test directory
exists, and whether a network profile makes sense is for the host framework
that consumes it to decide.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


DEFAULT_COMPILER_VERSION = "0.8.20"
DEFAULT_GAS_REPORTING = True
DEFAULT_TESTS_PATH = "./test"
DEFAULT_PLUGINS: tuple[str, ...] = ("@nomicfoundation/hardhat-toolbox",)


def _freeze(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return tuple(_freeze(v) for v in obj)
    return obj


def _thaw(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return {k: _thaw(v) for k, v in obj.items()}
    if isinstance(obj, tuple):
        return [_thaw(v) for v in obj]
    return obj


def _hashable(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return frozenset((k, _hashable(v)) for k, v in obj.items())
    if isinstance(obj, tuple):
        return tuple(_hashable(v) for v in obj)
    return obj


def _default_networks() -> Mapping[str, Mapping[str, Any]]:
    # Empty body: the host applies its own defaults.
    return {"hardhat": {}}


@dataclass(frozen=True, slots=True)
class GasReporterConfig:
    enabled: bool = DEFAULT_GAS_REPORTING


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Filesystem locations handed to the host.

    Only `tests` is always emitted; the others are left to the host's
    defaults unless set.
    """

    tests: str = DEFAULT_TESTS_PATH
    sources: str | None = None
    cache: str | None = None
    artifacts: str | None = None

    def to_host_config(self) -> dict[str, str]:
        out = {"tests": self.tests}
        for name in ("sources", "cache", "artifacts"):
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out


@dataclass(frozen=True, slots=True)
class ConfigDescriptor:
    compiler_version: str = DEFAULT_COMPILER_VERSION
    gas_reporter: GasReporterConfig = field(default_factory=GasReporterConfig)
    networks: Mapping[str, Mapping[str, Any]] = field(default_factory=_default_networks)
    paths: PathsConfig = field(default_factory=PathsConfig)
    plugins: tuple[str, ...] = DEFAULT_PLUGINS
    default_network: str | None = None

    def __post_init__(self) -> None:
        # Nested settings are held as read-only views.
        object.__setattr__(self, "networks", _freeze(self.networks))
        object.__setattr__(self, "plugins", tuple(self.plugins))

    def __hash__(self) -> int:
        return hash(
            (
                self.compiler_version,
                self.gas_reporter,
                _hashable(self.networks),
                self.paths,
                self.plugins,
                self.default_network,
            )
        )

    def network(self, name: str) -> Mapping[str, Any]:
        """Return the settings of a named network profile.

        Raises:
            KeyError: If no profile with that name is configured.
        """

        try:
            return self.networks[name]
        except KeyError:
            raise KeyError(f"Unknown network profile: {name!r}") from None

    def with_overrides(self, **changes: Any) -> ConfigDescriptor:
        return dataclasses.replace(self, **changes)

    def to_host_config(self) -> dict[str, Any]:
        """Return a fresh dict in the key layout the host framework reads."""

        out: dict[str, Any] = {
            "solidity": self.compiler_version,
            "gasReporter": {"enabled": self.gas_reporter.enabled},
            "networks": {name: _thaw(settings) for name, settings in self.networks.items()},
            "paths": self.paths.to_host_config(),
        }
        if self.default_network is not None:
            out["defaultNetwork"] = self.default_network
        return out

    def to_dict(self) -> dict[str, Any]:
        """Return the YAML-shaped (snake_case) form accepted by the loader."""

        out: dict[str, Any] = {
            "solidity": self.compiler_version,
            "gas_reporter": {"enabled": self.gas_reporter.enabled},
            "networks": {name: _thaw(settings) for name, settings in self.networks.items()},
            "paths": self.paths.to_host_config(),
            "plugins": list(self.plugins),
        }
        if self.default_network is not None:
            out["default_network"] = self.default_network
        return out


def default_descriptor() -> ConfigDescriptor:
    """Return the project's built-in descriptor."""

    return ConfigDescriptor(
        compiler_version=DEFAULT_COMPILER_VERSION,
        gas_reporter=GasReporterConfig(enabled=DEFAULT_GAS_REPORTING),
        networks={"hardhat": {}},
        paths=PathsConfig(tests=DEFAULT_TESTS_PATH),
        plugins=DEFAULT_PLUGINS,
    )
