# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vcinventory/config/config_loader.py
"""
YAML/JSON config loading.

Config files carry the same keys as the CLI dests (url, username, password,
password_env, insecure, cmd, ...). Several files merge left to right, and the
merged mapping is pushed into argparse as defaults so explicit flags win.
"""
from __future__ import annotations

import argparse
import glob
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from ..core.exceptions import ConfigError, redact

_CONFIG_SUFFIXES = (".yaml", ".yml", ".json")

# Environment fallbacks for connection parameters (govc/govmomi naming).
ENV_URL = "GOVMOMI_URL"
ENV_USERNAME = "GOVMOMI_USERNAME"
ENV_PASSWORD = "GOVMOMI_PASSWORD"
ENV_INSECURE = "GOVMOMI_INSECURE"

_TRUTHY = {"1", "true", "yes", "on", "y"}
_FALSY = {"0", "false", "no", "off", "n", ""}


def parse_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in _TRUTHY:
        return True
    if s in _FALSY:
        return False
    raise ConfigError(msg=f"Not a boolean value: {v!r}")


class Config:
    @staticmethod
    def expand_configs(logger: logging.Logger, paths: Sequence[str]) -> List[Path]:
        """
        Expand globs and directories into a flat, ordered list of config files.
        Directory entries contribute their *.yaml/*.yml/*.json files sorted by name.
        """
        out: List[Path] = []
        for raw in paths:
            pattern = os.path.expanduser(str(raw))
            matches = sorted(glob.glob(pattern)) if glob.has_magic(pattern) else [pattern]
            if not matches:
                raise ConfigError(msg=f"Config pattern matched nothing: {raw}")
            for m in matches:
                p = Path(m)
                if p.is_dir():
                    children = sorted(x for x in p.iterdir() if x.suffix.lower() in _CONFIG_SUFFIXES)
                    logger.debug("Config dir %s -> %d file(s)", p, len(children))
                    out.extend(children)
                else:
                    out.append(p)
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: Path) -> Dict[str, Any]:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(msg=f"Cannot read config {path}: {e}", cause=e)

        try:
            if Path(path).suffix.lower() == ".json":
                data = json.loads(text) if text.strip() else {}
            else:
                data = yaml.safe_load(text) or {}
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigError(msg=f"Cannot parse config {path}: {e}", cause=e)

        if not isinstance(data, dict):
            raise ConfigError(msg=f"Config {path} must be a mapping at top level, got {type(data).__name__}")

        logger.debug("Loaded config %s (%d key(s))", path, len(data))
        return {str(k).replace("-", "_"): v for k, v in data.items()}

    @staticmethod
    def load_many(logger: logging.Logger, paths: Sequence[Path]) -> Dict[str, Any]:
        """Shallow merge; later files override earlier ones."""
        merged: Dict[str, Any] = {}
        for p in paths:
            merged.update(Config.load_one(logger, p))
        return merged

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        """
        Push config values into the parser as defaults.
        Unknown keys are kept in conf (commands may read them) but logged at debug.
        """
        known = {a.dest for a in parser._actions}
        defaults = {k: v for k, v in conf.items() if k in known}
        unknown = sorted(k for k in conf if k not in known)
        if unknown:
            logger.debug("Config keys with no matching flag: %s", ", ".join(unknown))
        if defaults:
            parser.set_defaults(**defaults)

    @staticmethod
    def redacted(conf: Mapping[str, Any]) -> Dict[str, Any]:
        """Copy that is safe to print (password-like keys masked)."""
        return redact(dict(conf))

    @staticmethod
    def env_defaults(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """Connection parameters taken from the environment (lowest precedence)."""
        env = os.environ if environ is None else environ
        out: Dict[str, Any] = {}
        if env.get(ENV_URL):
            out["url"] = env[ENV_URL]
        if env.get(ENV_USERNAME):
            out["username"] = env[ENV_USERNAME]
        if env.get(ENV_PASSWORD):
            out["password"] = env[ENV_PASSWORD]
        if ENV_INSECURE in env:
            out["insecure"] = parse_bool(env[ENV_INSECURE])
        return out
