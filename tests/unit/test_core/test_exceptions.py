# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for exception handling and secret redaction."""
from __future__ import annotations

import pytest
from vcinventory.core.exceptions import (
    REDACTED,
    AmbiguousScopeError,
    AuthError,
    BatchError,
    ConfigError,
    Fatal,
    NetworkError,
    NotFoundError,
    VcInventoryError,
    VSphereError,
    format_exception_for_cli,
    redact,
    wrap_vsphere,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    """Test exception class hierarchy and basic functionality."""

    def test_base_exception_creation(self):
        err = VcInventoryError(code=1, msg="Test error")

        assert err.code == 1
        assert err.msg == "Test error"
        assert err.cause is None
        assert err.context == {}

    def test_fatal_exception(self):
        err = Fatal(code=2, msg="Fatal error")

        assert isinstance(err, VcInventoryError)
        assert err.code == 2

    @pytest.mark.parametrize(
        "cls,code",
        [
            (ConfigError, 2),
            (VSphereError, 30),
            (AuthError, 10),
            (NotFoundError, 11),
            (NetworkError, 12),
            (AmbiguousScopeError, 13),
            (BatchError, 14),
        ],
    )
    def test_default_codes(self, cls, code):
        err = cls(msg="boom")
        assert err.code == code
        assert str(err) == "boom"

    def test_vsphere_subclasses(self):
        for cls in (AuthError, NetworkError, NotFoundError, AmbiguousScopeError, BatchError):
            assert issubclass(cls, VSphereError)

    def test_exception_with_context(self):
        err = VcInventoryError(code=1, msg="Error").with_context(kind="HostSystem", count=3)

        assert err.context["kind"] == "HostSystem"
        assert err.context["count"] == 3

    def test_exception_with_cause(self):
        cause = ValueError("Original error")
        err = VcInventoryError(code=1, msg="Wrapper", cause=cause)

        assert err.cause is cause
        assert "ValueError" in err.user_message(include_cause=True)

    def test_message_is_single_line(self):
        err = VcInventoryError(msg="line one\nline two")
        assert err.msg == "line one line two"

    def test_code_is_clamped(self):
        assert VcInventoryError(code=999, msg="x").code == 255
        assert VcInventoryError(code=-3, msg="x").code == 1
        assert VcInventoryError(code="nope", msg="x").code == 1

    def test_can_be_raised_and_caught(self):
        with pytest.raises(VSphereError) as ei:
            raise AuthError(msg="denied")
        assert ei.value.code == 10


@pytest.mark.unit
class TestSecretRedaction:
    def test_redact_top_level_and_nested(self):
        ctx = {"password": "hunter2", "endpoint": "vc", "inner": {"session_id": "abc", "kind": "VM"}}
        out = redact(ctx)

        assert out["password"] == REDACTED
        assert out["endpoint"] == "vc"
        assert out["inner"]["session_id"] == REDACTED
        assert out["inner"]["kind"] == "VM"
        assert ctx["password"] == "hunter2"

    def test_user_message_context_is_redacted(self):
        err = VcInventoryError(msg="login", context={"password": "hunter2", "host": "vc"})
        text = err.user_message(include_context=True)

        assert "hunter2" not in text
        assert "host='vc'" in text

    def test_to_dict(self):
        err = AuthError(msg="denied", context={"token": "t"}, cause=RuntimeError("x"))
        d = err.to_dict(include_cause=True)

        assert d["type"] == "AuthError"
        assert d["code"] == 10
        assert d["context"]["token"] == REDACTED
        assert d["cause"]["type"] == "RuntimeError"


@pytest.mark.unit
class TestCliFormatting:
    def test_verbosity_levels(self):
        err = NotFoundError(msg="datacenter not found", context={"name": "dc9"}, cause=KeyError("dc9"))

        assert format_exception_for_cli(err) == "datacenter not found"
        assert "name='dc9'" in format_exception_for_cli(err, verbose=1)
        assert "KeyError" in format_exception_for_cli(err, verbose=2)

    def test_foreign_exception(self):
        assert format_exception_for_cli(ValueError("bad")) == "bad"
        assert format_exception_for_cli(ValueError("bad"), verbose=2) == "ValueError: bad"

    def test_wrap_vsphere(self):
        cause = OSError("reset")
        err = wrap_vsphere("fetch failed", cause, kind="Datastore")

        assert isinstance(err, VSphereError)
        assert err.code == 30
        assert err.cause is cause
        assert err.context == {"kind": "Datastore"}
