# SPDX-License-Identifier: LGPL-3.0-or-later
# vcinventory/core/exceptions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

REDACTED = "***REDACTED***"


def _safe_int(x: Any, default: int = 1) -> int:
    try:
        return int(x)
    except (TypeError, ValueError):
        return default


def _clamp_exit_code(code: int) -> int:
    if code < 0:
        return 1
    if code > 255:
        return 255
    return code


def _one_line(s: str, limit: int = 600) -> str:
    s = (s or "").strip().replace("\r", " ").replace("\n", " ")
    s = " ".join(s.split())
    return s if len(s) <= limit else (s[: limit - 3] + "...")


_SECRET_KEY_PARTS = (
    "pass",
    "secret",
    "token",
    "apikey",
    "api_key",
    "auth",
    "cookie",
    "session",
    "bearer",
)


def _is_secret_key(k: str) -> bool:
    ks = (k or "").lower()
    return any(p in ks for p in _SECRET_KEY_PARTS)


def redact(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ctx with secret-looking keys replaced (recurses into dicts)."""
    out: Dict[str, Any] = {}
    for k, v in ctx.items():
        if _is_secret_key(str(k)):
            out[k] = REDACTED
        elif isinstance(v, dict):
            out[k] = redact(v)
        else:
            out[k] = v
    return out


def _format_context_compact(ctx: Dict[str, Any]) -> str:
    safe = redact(ctx)
    return ", ".join(f"{k}={safe[k]!r}" for k in sorted(safe.keys()))


@dataclass(eq=False)
class VcInventoryError(Exception):
    """
    Base project error with:
      - stable fields for reporting/JSON
      - readable __str__ (what users see)
      - secrets redacted whenever context is rendered
    """
    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.code = _clamp_exit_code(_safe_int(self.code, default=1))
        self.msg = _one_line(self.msg) or self.__class__.__name__
        if self.context is None:
            self.context = {}
        super().__init__(self.msg)
        self.args = (self.msg,)

    def with_context(self, **ctx: Any) -> "VcInventoryError":
        self.context.update(ctx)
        return self

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        parts = [self.msg or self.__class__.__name__]

        if include_context and self.context:
            parts.append(f"[{_one_line(_format_context_compact(self.context))}]")

        if include_cause and self.cause is not None:
            parts.append(f"(cause: {type(self.cause).__name__}: {_one_line(str(self.cause))})")

        return " ".join(parts)

    def __str__(self) -> str:
        return self.user_message()

    def to_dict(self, *, include_cause: bool = False) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "code": self.code,
            "message": self.msg,
            "context": redact(self.context or {}),
        }
        if include_cause and self.cause is not None:
            d["cause"] = {"type": type(self.cause).__name__, "message": _one_line(str(self.cause))}
        return d


class Fatal(VcInventoryError):
    """
    User-facing fatal error (exit code should be honored by top-level main()).
    """


@dataclass(eq=False)
class ConfigError(Fatal):
    """Config file unreadable, not a mapping, or missing required connection settings."""
    code: int = 2


@dataclass(eq=False)
class EndpointError(VcInventoryError):
    """Server URL could not be parsed."""
    code: int = 2


@dataclass(eq=False)
class VSphereError(VcInventoryError):
    """
    vSphere/vCenter operation failed.
    Use for pyVmomi / REST / SDK faults that have no narrower class.
    """
    code: int = 30


@dataclass(eq=False)
class AuthError(VSphereError):
    """Credentials rejected or session not authorized."""
    code: int = 10


@dataclass(eq=False)
class NetworkError(VSphereError):
    """Endpoint unreachable, timed out, or TLS handshake failed."""
    code: int = 12


@dataclass(eq=False)
class NotFoundError(VSphereError):
    """Requested inventory object does not exist."""
    code: int = 11


@dataclass(eq=False)
class AmbiguousScopeError(VSphereError):
    """A default scope was requested but several candidates exist."""
    code: int = 13


@dataclass(eq=False)
class BatchError(VSphereError):
    """A batched property fetch failed; no partial results are returned."""
    code: int = 14


def wrap_vsphere(msg: str, exc: Optional[BaseException] = None, code: int = 30, **context: Any) -> VSphereError:
    return VSphereError(code=code, msg=msg, cause=exc, context=context or None)


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """
    One-liner output for CLI.

    verbose=0: just message
    verbose=1: message + compact context (if any)
    verbose>=2: message + context + cause
    """
    if isinstance(e, VcInventoryError):
        return e.user_message(include_context=(verbose >= 1), include_cause=(verbose >= 2))

    if verbose >= 2:
        return f"{type(e).__name__}: {_one_line(str(e))}"
    return _one_line(str(e)) or type(e).__name__
