from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Sequence

import yaml
from dotenv import load_dotenv

from chaincfg.config.errors import ConfigError
from chaincfg.config.model import (
    DEFAULT_COMPILER_VERSION,
    DEFAULT_GAS_REPORTING,
    DEFAULT_PLUGINS,
    DEFAULT_TESTS_PATH,
    ConfigDescriptor,
    GasReporterConfig,
    PathsConfig,
)


logger = logging.getLogger(__name__)

_ENV_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

_KNOWN_KEYS = frozenset(
    {"solidity", "gas_reporter", "networks", "paths", "plugins", "default_network"}
)


@dataclass(frozen=True, slots=True)
class _UnresolvedEnvRef:
    var_name: str
    source_file: str
    key_path: str
    reason: str  # "missing" | "empty"


def _deep_merge(base: MutableMapping[str, Any], overlay: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Overlay wins; nested mappings merge key by key."""

    for k, v in overlay.items():
        if isinstance(v, Mapping) and isinstance(base.get(k), Mapping):
            base[k] = _deep_merge(dict(base[k]), v)  # type: ignore[arg-type]
        else:
            base[k] = v
    return base


def _load_yaml(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    return yaml.safe_load(text)


def _expand_env_in_obj(
    obj: Any,
    *,
    source_file: str,
    key_path: str,
    unresolved: list[_UnresolvedEnvRef],
) -> Any:
    if isinstance(obj, str):
        def repl(match: re.Match[str]) -> str:
            name = match.group(1)
            value = os.getenv(name)
            if value is None or value == "":
                unresolved.append(
                    _UnresolvedEnvRef(
                        var_name=name,
                        source_file=source_file,
                        key_path=key_path,
                        reason="missing" if value is None else "empty",
                    )
                )
                return match.group(0)
            return value

        return _ENV_PLACEHOLDER_RE.sub(repl, obj)

    if isinstance(obj, Mapping):
        out: dict[Any, Any] = {}
        for k, v in obj.items():
            child_path = f"{key_path}.{k}" if key_path else str(k)
            out[k] = _expand_env_in_obj(
                v,
                source_file=source_file,
                key_path=child_path,
                unresolved=unresolved,
            )
        return out

    if isinstance(obj, list):
        return [
            _expand_env_in_obj(
                v,
                source_file=source_file,
                key_path=f"{key_path}[{i}]" if key_path else f"[{i}]",
                unresolved=unresolved,
            )
            for i, v in enumerate(obj)
        ]

    return obj


def load_config(
    paths: Path | Sequence[Path],
    *,
    load_dotenv_file: bool = True,
    dotenv_path: Path | None = None,
) -> dict[str, Any]:
    """Load YAML config files with strict ${ENV_VAR} expansion.

    Args:
        paths: One or more YAML files. When multiple are provided, they are merged
            (later files override earlier ones).
        load_dotenv_file: Whether to load a .env file before expansion.
        dotenv_path: Optional explicit .env path. When omitted, attempts to load
            a `.env` in the current working directory.

    Raises:
        ConfigError: If a file is missing, YAML is invalid, or env expansion is
            unresolved.
    """

    file_list: list[Path] = [paths] if isinstance(paths, Path) else list(paths)
    if not file_list:
        raise ConfigError("No config files provided")

    if load_dotenv_file:
        load_dotenv(dotenv_path or Path.cwd() / ".env", override=False)

    merged: dict[str, Any] = {}
    for p in file_list:
        if not p.exists():
            raise ConfigError("Config file not found", path=str(p))
        try:
            fragment = _load_yaml(p)
        except Exception as e:  # noqa: BLE001
            raise ConfigError(f"Failed to read YAML config: {p}: {e}") from e

        if fragment is None:
            fragment = {}

        if not isinstance(fragment, Mapping):
            raise ConfigError(f"Top-level YAML must be a mapping/dict: {p}")

        merged = _deep_merge(merged, fragment)  # type: ignore[arg-type]

    unresolved: list[_UnresolvedEnvRef] = []
    expanded = _expand_env_in_obj(
        merged,
        source_file=",".join(str(p) for p in file_list),
        key_path="",
        unresolved=unresolved,
    )

    if unresolved:
        lines: list[str] = ["Unresolved environment variables in config:"]
        for ref in unresolved:
            where = ref.key_path or "<root>"
            lines.append(f"- {ref.var_name} ({ref.reason}) at {where} in {ref.source_file}")
        raise ConfigError("\n".join(lines))

    return expanded


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError("must be a mapping", path=key)
    return value


def _optional_str(d: Mapping[str, Any], key: str, *, path: str) -> str | None:
    value = d.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"must be a string, got {type(value).__name__}", path=path)
    return value


def _parse_networks(raw: Mapping[str, Any]) -> dict[str, dict[str, Any]] | None:
    if "networks" not in raw:
        return None
    networks_raw = raw["networks"]
    if networks_raw is None:
        return {}
    if not isinstance(networks_raw, Mapping):
        raise ConfigError("must be a mapping of profile name -> settings", path="networks")

    networks: dict[str, dict[str, Any]] = {}
    for name, settings in networks_raw.items():
        if not isinstance(name, str) or not name:
            raise ConfigError("profile name must be a non-empty string", path="networks")
        # `hardhat:` with no body parses as None and means host defaults.
        if settings is None:
            settings = {}
        if not isinstance(settings, Mapping):
            raise ConfigError("profile settings must be a mapping", path=f"networks.{name}")
        _check_setting_keys(settings, key_path=f"networks.{name}")
        networks[name] = dict(settings)
    return networks


def _check_setting_keys(obj: Any, *, key_path: str) -> None:
    if isinstance(obj, Mapping):
        for k, v in obj.items():
            if not isinstance(k, str):
                raise ConfigError(f"setting keys must be strings, got {k!r}", path=key_path)
            _check_setting_keys(v, key_path=f"{key_path}.{k}")
    elif isinstance(obj, list):
        for i, v in enumerate(obj):
            _check_setting_keys(v, key_path=f"{key_path}[{i}]")


def descriptor_from_mapping(raw: Mapping[str, Any]) -> ConfigDescriptor:
    """Build a descriptor from a loaded config mapping.

    Only the shape is checked (types of known keys). Absent sections take the
    built-in defaults.

    Raises:
        ConfigError: With the offending key path when a value has the wrong type.
    """

    unknown = sorted(str(k) for k in raw if k not in _KNOWN_KEYS)
    if unknown:
        logger.warning("config_unknown_keys", extra={"keys": unknown})

    compiler_version = _optional_str(raw, "solidity", path="solidity")
    if compiler_version is None:
        compiler_version = DEFAULT_COMPILER_VERSION

    gas_raw = _section(raw, "gas_reporter")
    enabled = gas_raw.get("enabled", DEFAULT_GAS_REPORTING)
    if not isinstance(enabled, bool):
        raise ConfigError("must be a boolean", path="gas_reporter.enabled")

    paths_raw = _section(raw, "paths")
    tests = _optional_str(paths_raw, "tests", path="paths.tests")
    paths = PathsConfig(
        tests=DEFAULT_TESTS_PATH if tests is None else tests,
        sources=_optional_str(paths_raw, "sources", path="paths.sources"),
        cache=_optional_str(paths_raw, "cache", path="paths.cache"),
        artifacts=_optional_str(paths_raw, "artifacts", path="paths.artifacts"),
    )

    plugins_raw = raw.get("plugins", list(DEFAULT_PLUGINS))
    if plugins_raw is None:
        plugins_raw = []
    if not isinstance(plugins_raw, list) or not all(isinstance(x, str) for x in plugins_raw):
        raise ConfigError("must be a list of strings", path="plugins")

    kwargs: dict[str, Any] = {}
    networks = _parse_networks(raw)
    if networks is not None:
        kwargs["networks"] = networks

    return ConfigDescriptor(
        compiler_version=compiler_version,
        gas_reporter=GasReporterConfig(enabled=enabled),
        paths=paths,
        plugins=tuple(plugins_raw),
        default_network=_optional_str(raw, "default_network", path="default_network"),
        **kwargs,
    )


def load_descriptor(
    paths: Path | Sequence[Path],
    *,
    load_dotenv_file: bool = True,
    dotenv_path: Path | None = None,
) -> ConfigDescriptor:
    """Load YAML config file(s) and build the descriptor from them."""

    raw = load_config(paths, load_dotenv_file=load_dotenv_file, dotenv_path=dotenv_path)
    descriptor = descriptor_from_mapping(raw)
    logger.debug(
        "descriptor_built",
        extra={
            "compiler_version": descriptor.compiler_version,
            "network_profiles": sorted(descriptor.networks),
        },
    )
    return descriptor


def resolve_profile_configs(*, profile: str, configs_dir: Path) -> list[Path]:
    """Resolve config file list for a given profile.

    - profile=default -> [configs/project.yaml]
    - profile=ci -> [configs/project.yaml, configs/ci.yaml]
    """

    if profile == "default":
        return [configs_dir / "project.yaml"]
    if profile == "ci":
        return [configs_dir / "project.yaml", configs_dir / "ci.yaml"]
    raise ConfigError(f"Unknown profile: {profile}")
