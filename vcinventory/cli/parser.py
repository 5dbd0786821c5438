# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vcinventory/cli/parser.py
from __future__ import annotations

import argparse
import os
import sys
from typing import Any, Dict, Optional, Sequence, Tuple

from ..config.config_loader import Config
from ..core.exceptions import ConfigError
from ..core.logger import Log, c
from ..core.utils import U
from .commands import COMMANDS

YAML_EXAMPLE = """\
  # inventory.yaml
  url: https://vcenter.example.com/sdk
  username: administrator@vsphere.local
  password_env: VC_PASSWORD
  insecure: true
  cmd: vms
  with_tags: true
"""

ENV_HELP = """\
  GOVMOMI_URL        endpoint URL (https://host/sdk, user:pass@ allowed)
  GOVMOMI_USERNAME   username
  GOVMOMI_PASSWORD   password
  GOVMOMI_INSECURE   1/0: skip TLS certificate verification
"""


class HelpFormatter(argparse.RawDescriptionHelpFormatter, argparse.ArgumentDefaultsHelpFormatter):
    """Combines raw description formatting with default value display in help."""


def _build_epilog() -> str:
    return (
        c("Commands:\n", "cyan", ["bold"])
        + c("  " + ", ".join(COMMANDS) + "\n", "cyan")
        + c("\nYAML example:\n", "cyan", ["bold"])
        + c(YAML_EXAMPLE, "cyan")
        + c("\nEnvironment:\n", "cyan", ["bold"])
        + c(ENV_HELP, "cyan")
    )


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from .. import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file or directory (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged normalized config and exit.")
    p.add_argument("--dump-args", action="store_true", help="Print final parsed args and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -v, -vv, -vvv (trace)")
    p.add_argument("-q", "--quiet", action="count", default=0, help="Less logging: -q (warnings), -qq (errors)")
    p.add_argument("--log-file", dest="log_file", default=None, help="Write logs to file.")
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit logs as NDJSON on stderr.")
    p.add_argument("--no-color", dest="color", action="store_false", help="Disable colored log output.")


def _add_connection_knobs(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # vCenter / ESXi connection (falls back to GOVMOMI_* env)
    # ------------------------------------------------------------------
    p.add_argument("--url", default=None, help="Endpoint URL, e.g. https://vcenter/sdk (env GOVMOMI_URL)")
    p.add_argument("--username", default=None, help="Username (env GOVMOMI_USERNAME)")
    p.add_argument("--password", default=None, help="Password (env GOVMOMI_PASSWORD, or use --password-env)")
    p.add_argument("--password-env", dest="password_env", default=None, help="Env var containing the password")
    p.add_argument(
        "--insecure",
        dest="insecure",
        action="store_true",
        default=None,
        help="Do not verify the server certificate (env GOVMOMI_INSECURE)",
    )
    p.add_argument(
        "--secure", dest="insecure", action="store_false", default=None, help="Verify the server certificate."
    )
    p.add_argument("--timeout", type=float, default=None, help="Timeout in seconds for connecting and for each vSphere API request.")


def _add_scope_knobs(p: argparse.ArgumentParser) -> None:
    p.add_argument("--datacenter", default=None, help="Limit listings to this datacenter.")
    p.add_argument(
        "--default-datacenter",
        dest="default_datacenter",
        action="store_true",
        help="Limit listings to the only datacenter (fails if there are several).",
    )
    p.add_argument(
        "--default-cluster",
        dest="default_cluster",
        action="store_true",
        help="clusters: show only the one cluster in scope (fails if there are several).",
    )


def _add_output_knobs(p: argparse.ArgumentParser) -> None:
    p.add_argument("--json", action="store_true", help="Print a JSON payload instead of a table.")
    p.add_argument("--with-tags", dest="with_tags", action="store_true", help="vms: add a Tags column.")


def _add_command(p: argparse.ArgumentParser) -> None:
    # Positional, but YAML `cmd:` may supply it; validated after the full parse.
    p.add_argument("cmd", nargs="?", default=None, help="Listing to run: " + ", ".join(COMMANDS))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="vcinventory",
        description=c("vcinventory: vCenter / ESXi inventory listings", "green", ["bold"]),
        formatter_class=HelpFormatter,
        epilog=_build_epilog(),
    )
    _add_global_config_logging(p)
    _add_connection_knobs(p)
    _add_scope_knobs(p)
    _add_output_knobs(p)
    _add_command(p)
    return p


def _build_preparser() -> argparse.ArgumentParser:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", action="append", default=[])
    pre.add_argument("-v", "--verbose", action="count", default=0)
    pre.add_argument("-q", "--quiet", action="count", default=0)
    pre.add_argument("--log-file", dest="log_file", default=None)
    pre.add_argument("--json-logs", dest="json_logs", action="store_true")
    pre.add_argument("--no-color", dest="color", action="store_false")
    pre.add_argument("--dump-config", action="store_true")
    pre.add_argument("--dump-args", action="store_true")
    return pre


def _load_merged_config(logger: Any, cfgs: Sequence[str]) -> Dict[str, Any]:
    if not cfgs:
        return {}
    expanded = Config.expand_configs(logger, list(cfgs))
    return Config.load_many(logger, expanded)


def _require(v: Any) -> bool:
    """True if v is meaningfully present (treats empty/whitespace-only strings as missing)."""
    if v is None:
        return False
    if isinstance(v, str):
        return v.strip() != ""
    return True


def _merged_cmd(args: argparse.Namespace, conf: Dict[str, Any]) -> Optional[str]:
    for v in (getattr(args, "cmd", None), conf.get("cmd"), conf.get("command")):
        if _require(v):
            return str(v).strip()
    return None


def validate_args(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    cmd = _merged_cmd(args, conf)
    if cmd is None:
        raise ConfigError(msg="Missing command (give one of: " + ", ".join(COMMANDS) + ", or set `cmd:` in config)")
    if cmd not in COMMANDS:
        raise ConfigError(msg=f"Unknown command: {cmd!r} (want one of: {', '.join(COMMANDS)})")
    args.cmd = cmd

    if args.datacenter and args.default_datacenter:
        raise ConfigError(msg="--datacenter and --default-datacenter are mutually exclusive")
    if args.timeout is not None and args.timeout <= 0:
        raise ConfigError(msg=f"--timeout must be positive, got {args.timeout}")
    if _require(args.password_env) and not _require(args.password) and args.password_env not in os.environ:
        raise ConfigError(msg=f"--password-env names an unset variable: {args.password_env}")


def parse_args_with_config(
    argv: Optional[Sequence[str]] = None,
    logger: Any = None,
) -> Tuple[argparse.Namespace, Dict[str, Any], Any]:
    """
    Flow:
      Phase 0: parse ONLY global flags needed to locate config/logging
      Phase 1: load+merge config files
      Phase 2: apply config as defaults onto the parser
      Phase 3: full parse to get final args
      Phase 4: validate using merged config + args
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    parser = build_parser()

    pre = _build_preparser()
    args0, _rest = pre.parse_known_args(argv)

    if logger is None:
        logger = Log.setup(
            getattr(args0, "verbose", 0),
            getattr(args0, "log_file", None),
            quiet=getattr(args0, "quiet", 0),
            color=getattr(args0, "color", True),
            json_logs=getattr(args0, "json_logs", False),
        )

    conf = _load_merged_config(logger, getattr(args0, "config", None) or [])

    if getattr(args0, "dump_config", False):
        print(U.json_dump(Config.redacted(conf)))
        raise SystemExit(0)

    # Apply config as defaults so CLI can override.
    Config.apply_as_defaults(logger, parser, conf)

    args = parser.parse_args(argv)

    if getattr(args0, "dump_args", False):
        print(U.json_dump(Config.redacted(vars(args))))
        raise SystemExit(0)

    validate_args(args, conf)
    return args, conf, logger
