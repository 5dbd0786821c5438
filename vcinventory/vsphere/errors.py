# SPDX-License-Identifier: LGPL-3.0-or-later
# vcinventory/vsphere/errors.py
# -*- coding: utf-8 -*-
"""Error classification and exit code handling for inventory commands"""
from __future__ import annotations

import errno
import socket
from enum import IntEnum

from ..core.exceptions import (
    AmbiguousScopeError,
    AuthError,
    BatchError,
    ConfigError,
    EndpointError,
    NetworkError,
    NotFoundError,
    VcInventoryError,
    VSphereError,
)


class ExitCode(IntEnum):
    OK = 0
    UNKNOWN = 1
    USAGE = 2

    AUTH = 10
    NOT_FOUND = 11
    NETWORK = 12
    AMBIGUOUS = 13
    BATCH = 14

    VSPHERE_API = 30

    INTERRUPTED = 130


def _is_usage_error(e: BaseException) -> bool:
    msg = str(e).lower()
    return (
        "unknown command" in msg
        or "unsupported inventory kind" in msg
        or "missing required arg" in msg
        or "usage:" in msg
    )


def _is_auth_error(e: BaseException) -> bool:
    msg = str(e).lower()
    needles = [
        "not authenticated",
        "unauthorized",
        "forbidden",
        "invalid login",
        "no permission",
        "cannot complete login",
        "incorrect user name or password",
    ]
    return any(n in msg for n in needles)


def _is_not_found_error(e: BaseException) -> bool:
    msg = str(e).lower()
    needles = [
        "not found",
        "does not exist",
        "managed object not found",
        "has already been deleted",
    ]
    return any(n in msg for n in needles)


def _is_network_error(e: BaseException) -> bool:
    if isinstance(e, (socket.timeout, TimeoutError, ConnectionError)):
        return True
    if isinstance(e, OSError) and e.errno in (
        errno.ECONNREFUSED,
        errno.ETIMEDOUT,
        errno.EHOSTUNREACH,
        errno.ENETUNREACH,
        errno.ECONNRESET,
    ):
        return True
    msg = str(e).lower()
    needles = [
        "timed out",
        "connection refused",
        "connection reset",
        "name or service not known",
        "temporary failure in name resolution",
        "certificate verify failed",
        "handshake",
    ]
    return any(n in msg for n in needles)


_TYPED = (
    (AuthError, ExitCode.AUTH),
    (NetworkError, ExitCode.NETWORK),
    (NotFoundError, ExitCode.NOT_FOUND),
    (AmbiguousScopeError, ExitCode.AMBIGUOUS),
    (BatchError, ExitCode.BATCH),
    (ConfigError, ExitCode.USAGE),
    (EndpointError, ExitCode.USAGE),
)


def classify_exit_code(e: BaseException) -> ExitCode:
    if isinstance(e, KeyboardInterrupt):
        return ExitCode.INTERRUPTED

    for typ, code in _TYPED:
        if isinstance(e, typ):
            return code

    # Untyped vSphere failures: fall back to message heuristics.
    if isinstance(e, VSphereError):
        if _is_auth_error(e):
            return ExitCode.AUTH
        if _is_not_found_error(e):
            return ExitCode.NOT_FOUND
        if _is_network_error(e):
            return ExitCode.NETWORK
        return ExitCode.VSPHERE_API

    if isinstance(e, VcInventoryError):
        if _is_usage_error(e):
            return ExitCode.USAGE
        try:
            return ExitCode(e.code)
        except ValueError:
            return ExitCode.UNKNOWN

    if _is_usage_error(e):
        return ExitCode.USAGE
    if _is_network_error(e):
        return ExitCode.NETWORK

    return ExitCode.UNKNOWN
