# SPDX-License-Identifier: LGPL-3.0-or-later
# vcinventory/cli/commands.py
# -*- coding: utf-8 -*-
"""
Inventory command orchestration: one action per listing.
"""
from __future__ import annotations

import sys
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Type

from ..core.exceptions import VcInventoryError, VSphereError, format_exception_for_cli
from ..core.utils import U
from ..render.table import render
from ..vsphere import kinds
from ..vsphere.errors import ExitCode, classify_exit_code
from ..vsphere.fcd import list_all_fcds
from ..vsphere.inventory import Scope, default_cluster, list_objects, resolve_scope
from ..vsphere.properties import fetch_properties
from ..vsphere.records import (
    ClusterInfo,
    DatacenterInfo,
    DatastoreInfo,
    FcdInfo,
    HostHardware,
    HostUsage,
    NetworkInfo,
    PortgroupInfo,
    SwitchInfo,
    TagInfo,
    VMInfo,
)
from ..vsphere.session import Session, SessionParams
from ..vsphere.tags import TagClient

COMMANDS = (
    "login",
    "datacenters",
    "clusters",
    "hosts",
    "host-hardware",
    "datastores",
    "networks",
    "vms",
    "switches",
    "portgroups",
    "tags",
    "fcds",
    "overview",
)

# Kinds counted by `overview`, in display order.
_OVERVIEW_KINDS = (
    kinds.DATACENTER,
    kinds.CLUSTER,
    kinds.HOST,
    kinds.DATASTORE,
    kinds.NETWORK,
    kinds.SWITCH,
    kinds.VM,
)


class _Emitter:
    """
    Exactly one output style per action:
      - --json => print JSON payload only
      - non-json => print an aligned table on stdout
    """

    def __init__(self, args: Any, out: Any = None):
        self.args = args
        self.out = out

    def json_enabled(self) -> bool:
        return bool(getattr(self.args, "json", False))

    def _write(self, text: str) -> None:
        stream = self.out if self.out is not None else sys.stdout
        stream.write(text)

    def emit(self, payload: Any, *, columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> None:
        if self.json_enabled():
            self._write(U.json_dump(payload) + "\n")
            return
        self._write(render(columns, rows))


class InventoryCommands:
    def __init__(
        self,
        session: Session,
        args: Any,
        logger: Any,
        *,
        tag_client_factory: Callable[[Session], TagClient] = TagClient,
        out: Any = None,
    ):
        self.session = session
        self.args = args
        self.logger = logger
        self.emit = _Emitter(args, out)
        self.tag_client_factory = tag_client_factory
        self._scope: Optional[Scope] = None
        self._scope_resolved = False

    # ---- shared helpers ----

    @property
    def scope(self) -> Optional[Scope]:
        if not self._scope_resolved:
            self._scope = resolve_scope(
                self.session,
                getattr(self.args, "datacenter", None),
                use_default=bool(getattr(self.args, "default_datacenter", False)),
            )
            self._scope_resolved = True
            if self._scope is not None:
                self.logger.info("Scope: datacenter %s", self._scope.name)
        return self._scope

    def _records(self, kind: str, record_cls: Type[Any], scope: Optional[Scope] = None) -> List[Any]:
        refs = list_objects(self.session, kind, scope)
        props = fetch_properties(self.session, refs, record_cls.PATHS)
        return [record_cls.from_props(ref, p) for ref, p in props.items()]

    def _payload(self, items: Sequence[Any], scope: Optional[Scope]) -> Dict[str, Any]:
        return {
            "command": getattr(self.args, "cmd", None),
            "scope": str(scope.ref) if scope is not None else None,
            "count": len(items),
            "items": [x.to_dict() for x in items],
        }

    def _emit_records(self, records: Sequence[Any], record_cls: Type[Any], scope: Optional[Scope]) -> List[Any]:
        self.emit.emit(
            self._payload(records, scope),
            columns=record_cls.COLUMNS,
            rows=[r.cells() for r in records],
        )
        return list(records)

    def _scoped_listing(self, kind: str, record_cls: Type[Any]) -> List[Any]:
        scope = self.scope
        return self._emit_records(self._records(kind, record_cls, scope), record_cls, scope)

    # ---- actions ----

    def login(self) -> Dict[str, Any]:
        about = self.session.about()
        self.emit.emit(about, columns=("Field", "Value"), rows=[(k, v) for k, v in about.items()])
        return about

    def datacenters(self) -> List[DatacenterInfo]:
        # Datacenters are listed inventory-wide; the scope flags do not narrow them.
        return self._emit_records(self._records(kinds.DATACENTER, DatacenterInfo), DatacenterInfo, None)

    def clusters(self) -> List[ClusterInfo]:
        if not getattr(self.args, "default_cluster", False):
            return self._scoped_listing(kinds.CLUSTER, ClusterInfo)
        scope = self.scope
        cl = default_cluster(self.session, scope)
        self.logger.info("Default cluster: %s", cl.name)
        props = fetch_properties(self.session, [cl.ref], ClusterInfo.PATHS)
        recs = [ClusterInfo.from_props(ref, p) for ref, p in props.items()]
        return self._emit_records(recs, ClusterInfo, scope)

    def hosts(self) -> List[HostUsage]:
        return self._scoped_listing(kinds.HOST, HostUsage)

    def host_hardware(self) -> List[HostHardware]:
        recs = sorted(self._records(kinds.HOST, HostHardware, self.scope), key=lambda h: h.model)
        return self._emit_records(recs, HostHardware, self.scope)

    def datastores(self) -> List[DatastoreInfo]:
        return self._scoped_listing(kinds.DATASTORE, DatastoreInfo)

    def networks(self) -> List[NetworkInfo]:
        return self._scoped_listing(kinds.NETWORK, NetworkInfo)

    def switches(self) -> List[SwitchInfo]:
        return self._scoped_listing(kinds.SWITCH, SwitchInfo)

    def portgroups(self) -> List[PortgroupInfo]:
        return self._scoped_listing(kinds.PORTGROUP, PortgroupInfo)

    def _vm_tags(self, vms: Sequence[VMInfo]) -> Optional[Dict[Any, List[TagInfo]]]:
        """Tag labels per VM, or None when the tagging API is unavailable."""
        try:
            with self.tag_client_factory(self.session) as tags:
                return tags.attached_tags([v.ref for v in vms])
        except VSphereError as e:
            self.logger.warning("Tag lookup failed, Tags column left empty: %s", e)
            return None

    def vms(self) -> List[VMInfo]:
        recs = self._records(kinds.VM, VMInfo, self.scope)
        if not getattr(self.args, "with_tags", False):
            return self._emit_records(recs, VMInfo, self.scope)

        by_vm = self._vm_tags(recs) if recs else {}
        labels = {v.ref: [t.label() for t in (by_vm or {}).get(v.ref, [])] for v in recs}
        payload = self._payload(recs, self.scope)
        for item, v in zip(payload["items"], recs):
            item["tags"] = labels[v.ref] if by_vm is not None else None
        self.emit.emit(
            payload,
            columns=VMInfo.COLUMNS + ("Tags",),
            rows=[v.cells() + [", ".join(labels[v.ref])] for v in recs],
        )
        return recs

    def tags(self) -> List[TagInfo]:
        with self.tag_client_factory(self.session) as client:
            tags = client.list_tags()
            attached = client.attached_objects([t.id for t in tags])

        payload = {
            "command": getattr(self.args, "cmd", None),
            "count": len(tags),
            "items": [dict(t.to_dict(), objects=[str(r) for r in attached.get(t.id, [])]) for t in tags],
        }
        self.emit.emit(
            payload,
            columns=TagInfo.COLUMNS + ("Objects",),
            rows=[t.cells() + [", ".join(str(r) for r in attached.get(t.id, []))] for t in tags],
        )
        return tags

    def fcds(self) -> List[FcdInfo]:
        recs = list_all_fcds(self.session, self.scope)
        if not recs:
            self.logger.info("No first-class disks found")
        self.emit.emit(
            self._payload(recs, self.scope),
            columns=FcdInfo.COLUMNS,
            rows=[r.cells() for r in recs],
        )
        return recs

    def overview(self) -> Dict[str, int]:
        scope = self.scope
        counts: Dict[str, int] = {}
        for kind in _OVERVIEW_KINDS:
            where = None if kind == kinds.DATACENTER else scope
            counts[kind] = len(list_objects(self.session, kind, where))
        payload = {
            "command": getattr(self.args, "cmd", None),
            "endpoint": self.session.endpoint.base_url,
            "scope": str(scope.ref) if scope is not None else None,
            "counts": counts,
        }
        self.emit.emit(payload, columns=("Kind", "Count"), rows=[(k, n) for k, n in counts.items()])
        return counts


# Router


_ACTIONS: Dict[str, str] = {name: name.replace("-", "_") for name in COMMANDS}


def _get_action_or_raise(args: Any) -> str:
    action = getattr(args, "cmd", None)
    if not action:
        raise VcInventoryError(code=2, msg="Missing command (argparse validation should have caught this)")
    action = str(action)
    if action not in _ACTIONS:
        raise VcInventoryError(code=2, msg=f"unknown command: {action}")
    return action


def _session_params(args: Any, environ: Optional[Dict[str, str]] = None) -> SessionParams:
    cfg = {k: getattr(args, k, None) for k in ("url", "username", "password", "password_env", "insecure", "timeout")}
    return SessionParams.from_config(cfg, environ)


def run_inventory_command(
    args: Any,
    conf: Optional[Dict[str, Any]],
    logger: Any,
    *,
    session_factory: Callable[..., Session] = Session,
    **command_kwargs: Any,
) -> int:
    """
    Entry point for: vcinventory <cmd> ...
    Returns structured exit codes suitable for shell/CI.
    """
    verbose = int(getattr(args, "verbose", 0) or 0)
    try:
        action = _get_action_or_raise(args)
        params = _session_params(args)

        # A failed login raises here; nothing below runs without a session.
        with session_factory(params, logger) as session:
            cmd = InventoryCommands(session, args, logger, **command_kwargs)
            meth = getattr(cmd, _ACTIONS[action], None)
            if not callable(meth):
                raise VcInventoryError(code=2, msg=f"command not callable: {action}")
            meth()

        return int(ExitCode.OK)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user (Ctrl+C).")
        return int(ExitCode.INTERRUPTED)

    except VcInventoryError as e:
        code = classify_exit_code(e)
        logger.error("%s failed (%s): %s", getattr(args, "cmd", "command"), code.name, format_exception_for_cli(e, verbose=verbose))
        return int(code)

    except Exception as e:
        code = classify_exit_code(e)
        logger.exception("%s crashed (%s): %s", getattr(args, "cmd", "command"), code.name, e)
        return int(code)
