# SPDX-License-Identifier: LGPL-3.0-or-later
# vcinventory/vsphere/kinds.py
"""Inventory object kinds and the opaque managed object reference value."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Type

from pyVmomi import vim  # type: ignore

from ..core.exceptions import VcInventoryError

DATACENTER = "Datacenter"
CLUSTER = "ClusterComputeResource"
HOST = "HostSystem"
DATASTORE = "Datastore"
NETWORK = "Network"
SWITCH = "DistributedVirtualSwitch"
PORTGROUP = "DistributedVirtualPortgroup"
VM = "VirtualMachine"
FOLDER = "Folder"
RESOURCE_POOL = "ResourcePool"

# Kind name -> pyVmomi managed type. Container views filter by these; subtypes
# (VmwareDistributedVirtualSwitch, DistributedVirtualPortgroup as a Network)
# come back under their own wire names.
KINDS: Dict[str, Type[Any]] = {
    DATACENTER: vim.Datacenter,
    CLUSTER: vim.ClusterComputeResource,
    HOST: vim.HostSystem,
    DATASTORE: vim.Datastore,
    NETWORK: vim.Network,
    SWITCH: vim.DistributedVirtualSwitch,
    PORTGROUP: vim.dvs.DistributedVirtualPortgroup,
    VM: vim.VirtualMachine,
    FOLDER: vim.Folder,
    RESOURCE_POOL: vim.ResourcePool,
    "ComputeResource": vim.ComputeResource,
    "VmwareDistributedVirtualSwitch": vim.dvs.VmwareDistributedVirtualSwitch,
    "OpaqueNetwork": vim.OpaqueNetwork,
}


def vim_type(kind: str) -> Type[Any]:
    try:
        return KINDS[kind]
    except KeyError:
        raise VcInventoryError(code=2, msg=f"Unsupported inventory kind: {kind!r}") from None


@dataclass(frozen=True, order=True)
class MoRef:
    """
    Opaque managed object reference (kind + server-assigned value).
    The client never mutates the remote object; it only dereferences it.
    """
    kind: str
    value: str

    def __str__(self) -> str:
        return f"{self.kind}:{self.value}"

    @classmethod
    def of(cls, obj: Any) -> "MoRef":
        """Build from a pyVmomi managed object (uses its wire type name, not isinstance)."""
        return cls(str(obj._wsdlName), str(obj._moId))

    def to_vim(self, stub: Any = None) -> Any:
        """Re-materialize as a pyVmomi managed object bound to stub."""
        return vim_type(self.kind)(self.value, stub)
