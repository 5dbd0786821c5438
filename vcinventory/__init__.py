# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vcinventory/__init__.py
"""
vcinventory - vCenter / ESXi inventory client

Usage as a library:

    from vcinventory import Session, SessionParams, list_objects, fetch_properties

    params = SessionParams.build("https://vcenter/sdk", "user", "secret", insecure=True)
    with Session(params) as s:
        refs = list_objects(s, "HostSystem")
        props = fetch_properties(s, refs, ["name", "summary.quickStats"])

The `vcinventory` console script wraps the same calls (see `vcinventory --help`).
"""

__version__ = "0.1.0"

from .core.exceptions import (
    AmbiguousScopeError,
    AuthError,
    BatchError,
    NetworkError,
    NotFoundError,
    VcInventoryError,
    VSphereError,
)
from .vsphere.inventory import Scope, default_cluster, default_datacenter, list_objects
from .vsphere.kinds import MoRef
from .vsphere.properties import fetch_properties, retrieve
from .vsphere.session import Session, SessionParams

__all__ = [
    # Version
    "__version__",

    # Session
    "Session",
    "SessionParams",

    # Inventory
    "MoRef",
    "Scope",
    "default_datacenter",
    "default_cluster",
    "list_objects",
    "fetch_properties",
    "retrieve",

    # Errors
    "VcInventoryError",
    "VSphereError",
    "AuthError",
    "NetworkError",
    "NotFoundError",
    "AmbiguousScopeError",
    "BatchError",
]
