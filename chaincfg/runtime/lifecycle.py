"""Command-line entry point (`chaincfg`).

Loads the descriptor once, then hands it to the selected command. The
descriptor is passed explicitly; nothing here keeps it in module state.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from chaincfg.config.errors import ConfigError
from chaincfg.config.loader import load_descriptor, resolve_profile_configs
from chaincfg.config.model import ConfigDescriptor, default_descriptor
from chaincfg.observability.logging import configure_logging


logger = logging.getLogger(__name__)

_COMMANDS = ("print-config", "networks")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chaincfg",
        description="Contract toolchain config: load, inspect and export the host config",
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=_LOG_LEVELS,
        help="Logging level (e.g. DEBUG, INFO, WARNING)",
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--config",
        type=Path,
        help="Path to a YAML config file (skips profile resolution)",
    )
    group.add_argument(
        "--profile",
        choices=["default", "ci"],
        default="default",
        help="Config profile under ./configs (default loads project.yaml; ci overlays ci.yaml)",
    )
    group.add_argument(
        "--builtin",
        action="store_true",
        help="Ignore config files and use the built-in descriptor",
    )

    sub = parser.add_subparsers(dest="command")

    print_p = sub.add_parser("print-config", help="Print the config in the host framework's shape (JSON)")
    print_p.set_defaults(command="print-config")

    net_p = sub.add_parser("networks", help="List network profile names")
    net_p.set_defaults(command="networks")

    return parser


def _resolve_descriptor(ns: argparse.Namespace, *, configs_dir: Path) -> ConfigDescriptor:
    if ns.builtin:
        return default_descriptor()

    if ns.config is not None:
        config_paths = [ns.config]
    else:
        config_paths = resolve_profile_configs(profile=ns.profile, configs_dir=configs_dir)

    descriptor = load_descriptor(config_paths)
    logger.info("config_loaded", extra={"config_files": [str(p) for p in config_paths]})
    return descriptor


def run_command(command: str, descriptor: ConfigDescriptor) -> int:
    if command == "networks":
        for name in descriptor.networks:
            sys.stdout.write(f"{name}\n")
        return 0

    sys.stdout.write(json.dumps(descriptor.to_host_config(), ensure_ascii=False, indent=2))
    sys.stdout.write("\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint referenced by pyproject.toml."""

    argv_list = list(argv) if argv is not None else sys.argv[1:]

    # Default to `print-config` when no subcommand is provided.
    if not any(a in _COMMANDS for a in argv_list) and not any(a in ("-h", "--help") for a in argv_list):
        argv_list = [*argv_list, "print-config"]

    parser = _build_parser()

    try:
        ns = parser.parse_args(argv_list)
    except SystemExit as e:
        # argparse has already printed help/usage to stdout/stderr.
        code = e.code
        return int(code) if isinstance(code, int) else 1

    configure_logging(level=ns.log_level)

    try:
        descriptor = _resolve_descriptor(ns, configs_dir=Path.cwd() / "configs")
        return run_command(ns.command, descriptor)

    except ConfigError as e:
        logger.error("config_error", extra={"error": str(e)})
        sys.stderr.write(f"ConfigError: {e}\n")
        return 2
    except Exception as e:  # noqa: BLE001
        logger.exception("fatal_error")
        sys.stderr.write(f"Fatal error: {e}\n")
        return 1
