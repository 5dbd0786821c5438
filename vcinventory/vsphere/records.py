# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vcinventory/vsphere/records.py
"""
Typed, immutable snapshots decoded from PropertyCollector property bags.

Each record class names the property paths it needs (PATHS), the table
columns it renders (COLUMNS) and how to build itself from one property bag.

Configuration objects that come in several wire variants (VLAN specs,
switch config) decode into a tagged union keyed by the wire type name
(`_wsdlName`), so callers switch on an explicit `kind` field.
"""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Tuple

from ..core.utils import U
from .kinds import MoRef


def _get(obj: Any, path: str, default: Any = None) -> Any:
    """Dotted getattr that tolerates unset intermediate data objects."""
    cur = obj
    for part in path.split("."):
        if cur is None:
            return default
        cur = getattr(cur, part, None)
    return default if cur is None else cur


def _wire_name(obj: Any) -> Optional[str]:
    return getattr(obj, "_wsdlName", None) if obj is not None else None


def _int(v: Any) -> Optional[int]:
    if v is None or v == "":
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def _s(v: Any) -> str:
    return "" if v is None else str(v)


def _plain(v: Any) -> Any:
    if isinstance(v, MoRef):
        return str(v)
    if isinstance(v, Enum):
        return v.value
    if isinstance(v, (_dt.datetime, _dt.date)):
        return v.isoformat()
    if is_dataclass(v) and not isinstance(v, type):
        return {f.name: _plain(getattr(v, f.name)) for f in fields(v)}
    if isinstance(v, (list, tuple)):
        return [_plain(x) for x in v]
    if isinstance(v, dict):
        return {str(k): _plain(x) for k, x in v.items()}
    return v


class _Record:
    PATHS: ClassVar[Tuple[str, ...]] = ()
    COLUMNS: ClassVar[Tuple[str, ...]] = ()

    def to_dict(self) -> Dict[str, Any]:
        return _plain(self)

    def cells(self) -> List[str]:
        raise NotImplementedError


# --------------------------------------------------------------------------------------
# VLAN spec: tagged union
# --------------------------------------------------------------------------------------


class VlanKind(str, Enum):
    NONE = "none"
    VLAN_ID = "vlan"
    TRUNK = "trunk"
    PVLAN = "pvlan"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class VlanSpec:
    kind: VlanKind
    vlan_id: Optional[int] = None
    ranges: Tuple[Tuple[int, int], ...] = ()
    pvlan_id: Optional[int] = None
    inherited: Optional[bool] = None
    wire_type: Optional[str] = None

    def describe(self) -> str:
        if self.kind is VlanKind.VLAN_ID:
            return _s(self.vlan_id)
        if self.kind is VlanKind.TRUNK:
            parts = [str(a) if a == b else f"{a}-{b}" for a, b in self.ranges]
            return "trunk " + ",".join(parts)
        if self.kind is VlanKind.PVLAN:
            return f"pvlan {_s(self.pvlan_id)}"
        if self.kind is VlanKind.UNKNOWN:
            return f"ignoring {self.wire_type}"
        return ""


def _vlan_id_spec(v: Any) -> VlanSpec:
    return VlanSpec(VlanKind.VLAN_ID, vlan_id=_int(v.vlanId), inherited=getattr(v, "inherited", None))


def _trunk_spec(v: Any) -> VlanSpec:
    ranges = tuple((int(r.start), int(r.end)) for r in (v.vlanId or []))
    return VlanSpec(VlanKind.TRUNK, ranges=ranges, inherited=getattr(v, "inherited", None))


def _pvlan_spec(v: Any) -> VlanSpec:
    return VlanSpec(VlanKind.PVLAN, pvlan_id=_int(v.pvlanId), inherited=getattr(v, "inherited", None))


_VLAN_DECODERS: Dict[str, Callable[[Any], VlanSpec]] = {
    "VmwareDistributedVirtualSwitchVlanIdSpec": _vlan_id_spec,
    "VmwareDistributedVirtualSwitchTrunkVlanSpec": _trunk_spec,
    "VmwareDistributedVirtualSwitchPvlanSpec": _pvlan_spec,
}


def decode_vlan(vlan: Any) -> VlanSpec:
    if vlan is None:
        return VlanSpec(VlanKind.NONE)
    wire = _wire_name(vlan)
    decoder = _VLAN_DECODERS.get(wire or "")
    if decoder is None:
        return VlanSpec(VlanKind.UNKNOWN, wire_type=wire or type(vlan).__name__)
    return decoder(vlan)


def decode_port_vlan(port_setting: Any) -> VlanSpec:
    """Only VMware port settings (VMwareDVSPortSetting) carry a vlan field."""
    if _wire_name(port_setting) != "VMwareDVSPortSetting":
        return VlanSpec(VlanKind.NONE)
    return decode_vlan(getattr(port_setting, "vlan", None))


# --------------------------------------------------------------------------------------
# Switch config: tagged union
# --------------------------------------------------------------------------------------


class SwitchKind(str, Enum):
    VMWARE = "vmware"
    GENERIC = "generic"


@dataclass(frozen=True)
class SwitchConfig:
    kind: SwitchKind
    name: str
    config_version: Optional[str] = None
    switch_ip: Optional[str] = None
    default_vlan: VlanSpec = VlanSpec(VlanKind.NONE)
    max_mtu: Optional[int] = None
    wire_type: Optional[str] = None


def _vmware_switch(cfg: Any) -> SwitchConfig:
    return SwitchConfig(
        kind=SwitchKind.VMWARE,
        name=_s(cfg.name),
        config_version=getattr(cfg, "configVersion", None),
        switch_ip=getattr(cfg, "switchIpAddress", None),
        default_vlan=decode_port_vlan(getattr(cfg, "defaultPortConfig", None)),
        max_mtu=_int(getattr(cfg, "maxMtu", None)),
        wire_type="VMwareDVSConfigInfo",
    )


def _generic_switch(cfg: Any) -> SwitchConfig:
    return SwitchConfig(
        kind=SwitchKind.GENERIC,
        name=_s(getattr(cfg, "name", None)),
        config_version=getattr(cfg, "configVersion", None),
        switch_ip=getattr(cfg, "switchIpAddress", None),
        wire_type=_wire_name(cfg),
    )


_SWITCH_DECODERS: Dict[str, Callable[[Any], SwitchConfig]] = {
    "VMwareDVSConfigInfo": _vmware_switch,
    "DVSConfigInfo": _generic_switch,
}


def decode_switch_config(cfg: Any) -> Optional[SwitchConfig]:
    if cfg is None:
        return None
    return _SWITCH_DECODERS.get(_wire_name(cfg) or "", _generic_switch)(cfg)


# --------------------------------------------------------------------------------------
# Inventory records
# --------------------------------------------------------------------------------------


@dataclass(frozen=True)
class HostUsage(_Record):
    PATHS: ClassVar[Tuple[str, ...]] = ("name", "summary.hardware", "summary.quickStats")
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "Name", "Used CPU", "Total CPU", "Free CPU", "Used Memory", "Total Memory", "Free Memory",
    )

    ref: MoRef
    name: str
    cpu_used_mhz: int
    cpu_total_mhz: int
    memory_used_bytes: int
    memory_total_bytes: int

    @property
    def cpu_free_mhz(self) -> int:
        return self.cpu_total_mhz - self.cpu_used_mhz

    @property
    def memory_free_bytes(self) -> int:
        return self.memory_total_bytes - self.memory_used_bytes

    @classmethod
    def from_props(cls, ref: MoRef, props: Mapping[str, Any]) -> "HostUsage":
        hw = props.get("summary.hardware")
        qs = props.get("summary.quickStats")
        return cls(
            ref=ref,
            name=_s(props.get("name")),
            cpu_used_mhz=_int(_get(qs, "overallCpuUsage")) or 0,
            cpu_total_mhz=(_int(_get(hw, "cpuMhz")) or 0) * (_int(_get(hw, "numCpuCores")) or 0),
            memory_used_bytes=U.mib_to_bytes(_int(_get(qs, "overallMemoryUsage")) or 0) or 0,
            memory_total_bytes=_int(_get(hw, "memorySize")) or 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        d = _plain(self)
        d["cpu_free_mhz"] = self.cpu_free_mhz
        d["memory_free_bytes"] = self.memory_free_bytes
        return d

    def cells(self) -> List[str]:
        return [
            self.name,
            f"{self.cpu_used_mhz} MHz",
            f"{self.cpu_total_mhz} MHz",
            f"{self.cpu_free_mhz} MHz",
            U.human_bytes(self.memory_used_bytes),
            U.human_bytes(self.memory_total_bytes),
            U.human_bytes(self.memory_free_bytes),
        ]


@dataclass(frozen=True)
class HostHardware(_Record):
    PATHS: ClassVar[Tuple[str, ...]] = ("name", "hardware.systemInfo", "hardware.pciDevice")
    COLUMNS: ClassVar[Tuple[str, ...]] = ("Name", "UUID", "Vendor", "Model", "PCI Devices")

    ref: MoRef
    name: str
    uuid: str
    vendor: str
    model: str
    pci_devices: int

    @classmethod
    def from_props(cls, ref: MoRef, props: Mapping[str, Any]) -> "HostHardware":
        si = props.get("hardware.systemInfo")
        return cls(
            ref=ref,
            name=_s(props.get("name")),
            uuid=_s(_get(si, "uuid")),
            vendor=_s(_get(si, "vendor")),
            model=_s(_get(si, "model")),
            pci_devices=len(props.get("hardware.pciDevice") or []),
        )

    def cells(self) -> List[str]:
        return [self.name, self.uuid, self.vendor, self.model, str(self.pci_devices)]


@dataclass(frozen=True)
class DatastoreInfo(_Record):
    PATHS: ClassVar[Tuple[str, ...]] = ("name", "summary")
    COLUMNS: ClassVar[Tuple[str, ...]] = ("Name", "Type", "Capacity", "Free")

    ref: MoRef
    name: str
    type: str
    capacity_bytes: Optional[int]
    free_bytes: Optional[int]
    accessible: Optional[bool] = None

    @classmethod
    def from_props(cls, ref: MoRef, props: Mapping[str, Any]) -> "DatastoreInfo":
        s = props.get("summary")
        return cls(
            ref=ref,
            name=_s(props.get("name") or _get(s, "name")),
            type=_s(_get(s, "type")),
            capacity_bytes=_int(_get(s, "capacity")),
            free_bytes=_int(_get(s, "freeSpace")),
            accessible=_get(s, "accessible"),
        )

    def cells(self) -> List[str]:
        return [self.name, self.type, U.human_bytes(self.capacity_bytes), U.human_bytes(self.free_bytes)]


@dataclass(frozen=True)
class NetworkInfo(_Record):
    PATHS: ClassVar[Tuple[str, ...]] = ("name",)
    COLUMNS: ClassVar[Tuple[str, ...]] = ("Name", "Type")

    ref: MoRef
    name: str

    @classmethod
    def from_props(cls, ref: MoRef, props: Mapping[str, Any]) -> "NetworkInfo":
        return cls(ref=ref, name=_s(props.get("name")))

    def cells(self) -> List[str]:
        return [self.name, self.ref.kind]


@dataclass(frozen=True)
class ClusterInfo(_Record):
    PATHS: ClassVar[Tuple[str, ...]] = ("name", "summary", "overallStatus")
    COLUMNS: ClassVar[Tuple[str, ...]] = ("Name", "Hosts", "Effective Hosts", "Total CPU", "Total Memory", "Status")

    ref: MoRef
    name: str
    num_hosts: Optional[int] = None
    num_effective_hosts: Optional[int] = None
    total_cpu_mhz: Optional[int] = None
    total_memory_bytes: Optional[int] = None
    overall_status: Optional[str] = None

    @classmethod
    def from_props(cls, ref: MoRef, props: Mapping[str, Any]) -> "ClusterInfo":
        s = props.get("summary")
        return cls(
            ref=ref,
            name=_s(props.get("name")),
            num_hosts=_int(_get(s, "numHosts")),
            num_effective_hosts=_int(_get(s, "numEffectiveHosts")),
            total_cpu_mhz=_int(_get(s, "totalCpu")),
            total_memory_bytes=_int(_get(s, "totalMemory")),
            overall_status=props.get("overallStatus"),
        )

    def cells(self) -> List[str]:
        cpu = f"{self.total_cpu_mhz} MHz" if self.total_cpu_mhz is not None else ""
        return [
            self.name,
            _s(self.num_hosts),
            _s(self.num_effective_hosts),
            cpu,
            U.human_bytes(self.total_memory_bytes),
            _s(self.overall_status),
        ]


@dataclass(frozen=True)
class DatacenterInfo(_Record):
    PATHS: ClassVar[Tuple[str, ...]] = ("name", "overallStatus")
    COLUMNS: ClassVar[Tuple[str, ...]] = ("Name", "Status")

    ref: MoRef
    name: str
    overall_status: Optional[str] = None

    @classmethod
    def from_props(cls, ref: MoRef, props: Mapping[str, Any]) -> "DatacenterInfo":
        return cls(ref=ref, name=_s(props.get("name")), overall_status=props.get("overallStatus"))

    def cells(self) -> List[str]:
        return [self.name, _s(self.overall_status)]


@dataclass(frozen=True)
class VMInfo(_Record):
    PATHS: ClassVar[Tuple[str, ...]] = ("summary",)
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "Name", "Guest", "CPU", "CPU Rsv", "Mem(MB)", "Mem Rsv", "State", "HW Version", "IP Address", "VM Path",
    )

    ref: MoRef
    name: str
    guest_id: str = ""
    guest_full_name: str = ""
    num_cpu: Optional[int] = None
    cpu_reservation: Optional[int] = None
    memory_mb: Optional[int] = None
    memory_reservation: Optional[int] = None
    power_state: str = ""
    hw_version: str = ""
    ip_address: str = ""
    vm_path: str = ""
    host: Optional[MoRef] = None

    @classmethod
    def from_props(cls, ref: MoRef, props: Mapping[str, Any]) -> "VMInfo":
        s = props.get("summary")
        host = _get(s, "runtime.host")
        return cls(
            ref=ref,
            name=_s(_get(s, "config.name")),
            guest_id=_s(_get(s, "guest.guestId") or _get(s, "config.guestId")),
            guest_full_name=_s(_get(s, "config.guestFullName") or _get(s, "guest.guestFullName")),
            num_cpu=_int(_get(s, "config.numCpu")),
            cpu_reservation=_int(_get(s, "config.cpuReservation")),
            memory_mb=_int(_get(s, "config.memorySizeMB")),
            memory_reservation=_int(_get(s, "config.memoryReservation")),
            power_state=_s(_get(s, "runtime.powerState")),
            hw_version=_s(_get(s, "guest.hwVersion")),
            ip_address=_s(_get(s, "guest.ipAddress")),
            vm_path=_s(_get(s, "config.vmPathName")),
            host=MoRef.of(host) if host is not None else None,
        )

    def cells(self) -> List[str]:
        return [
            self.name,
            self.guest_id,
            _s(self.num_cpu),
            _s(self.cpu_reservation),
            _s(self.memory_mb),
            _s(self.memory_reservation),
            self.power_state,
            self.hw_version,
            self.ip_address,
            self.vm_path,
        ]


@dataclass(frozen=True)
class SwitchInfo(_Record):
    PATHS: ClassVar[Tuple[str, ...]] = ("name", "configStatus", "overallStatus", "config")
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "Name", "Config Status", "Overall Status", "Config Version", "IP Address", "Default VLAN", "Inherited",
    )

    ref: MoRef
    name: str
    config_status: str = ""
    overall_status: str = ""
    config: Optional[SwitchConfig] = None

    @classmethod
    def from_props(cls, ref: MoRef, props: Mapping[str, Any]) -> "SwitchInfo":
        cfg = decode_switch_config(props.get("config"))
        return cls(
            ref=ref,
            name=_s(props.get("name") or (cfg.name if cfg else None)),
            config_status=_s(props.get("configStatus")),
            overall_status=_s(props.get("overallStatus")),
            config=cfg,
        )

    def cells(self) -> List[str]:
        cfg = self.config
        vlan = cfg.default_vlan if cfg is not None else VlanSpec(VlanKind.NONE)
        inherited = "" if vlan.inherited is None else str(bool(vlan.inherited)).lower()
        return [
            self.name,
            self.config_status,
            self.overall_status,
            _s(cfg.config_version if cfg else None),
            _s(cfg.switch_ip if cfg else None),
            vlan.describe(),
            inherited,
        ]


@dataclass(frozen=True)
class PortgroupInfo(_Record):
    PATHS: ClassVar[Tuple[str, ...]] = ("name", "config.defaultPortConfig")
    COLUMNS: ClassVar[Tuple[str, ...]] = ("Name", "VLAN", "VLAN Type")

    ref: MoRef
    name: str
    vlan: VlanSpec = VlanSpec(VlanKind.NONE)

    @classmethod
    def from_props(cls, ref: MoRef, props: Mapping[str, Any]) -> "PortgroupInfo":
        return cls(
            ref=ref,
            name=_s(props.get("name")),
            vlan=decode_port_vlan(props.get("config.defaultPortConfig")),
        )

    def cells(self) -> List[str]:
        return [self.name, self.vlan.describe(), self.vlan.kind.value]


@dataclass(frozen=True)
class TagInfo(_Record):
    COLUMNS: ClassVar[Tuple[str, ...]] = ("Name", "Category", "Description", "ID")

    id: str
    name: str
    description: str = ""
    category_id: str = ""
    category_name: str = ""

    @classmethod
    def from_rest(cls, body: Mapping[str, Any], category_name: str = "") -> "TagInfo":
        return cls(
            id=_s(body.get("id")),
            name=_s(body.get("name")),
            description=_s(body.get("description")),
            category_id=_s(body.get("category_id")),
            category_name=category_name,
        )

    def label(self) -> str:
        return f"{self.category_name}/{self.name}" if self.category_name else self.name

    def cells(self) -> List[str]:
        return [self.name, self.category_name, self.description, self.id]


@dataclass(frozen=True)
class FcdInfo(_Record):
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "Name", "ID", "Created", "Capacity(MB)", "Consumption", "Datastore", "File Path", "Backing ID",
        "Delta(MB)", "Provisioning",
    )

    id: str
    name: str
    create_time: Optional[_dt.datetime] = None
    capacity_mb: Optional[int] = None
    consumption_type: Tuple[str, ...] = ()
    datastore: Optional[MoRef] = None
    datastore_name: str = ""
    file_path: str = ""
    backing_object_id: str = ""
    delta_size_mb: Optional[int] = None
    provisioning_type: str = ""

    @classmethod
    def from_vstorage(cls, obj: Any, datastore_name: str = "") -> "FcdInfo":
        cfg = getattr(obj, "config", None)
        backing = _get(cfg, "backing")
        ds = _get(backing, "datastore")
        return cls(
            id=_s(_get(cfg, "id.id")),
            name=_s(_get(cfg, "name")),
            create_time=_get(cfg, "createTime"),
            capacity_mb=_int(_get(cfg, "capacityInMB")),
            consumption_type=tuple(str(x) for x in (_get(cfg, "consumptionType") or [])),
            datastore=MoRef.of(ds) if ds is not None else None,
            datastore_name=datastore_name,
            file_path=_s(_get(backing, "filePath")),
            backing_object_id=_s(_get(backing, "backingObjectId")),
            delta_size_mb=_int(_get(backing, "deltaSizeInMB")),
            provisioning_type=_s(_get(backing, "provisioningType")),
        )

    def cells(self) -> List[str]:
        created = self.create_time.isoformat() if self.create_time is not None else ""
        return [
            self.name,
            self.id,
            created,
            _s(self.capacity_mb),
            ",".join(self.consumption_type),
            self.datastore_name or _s(self.datastore),
            self.file_path,
            self.backing_object_id,
            _s(self.delta_size_mb),
            self.provisioning_type,
        ]
