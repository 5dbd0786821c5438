# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vcinventory/vsphere/inventory.py

"""
Inventory lookup: container views over the whole inventory or one datacenter,
and "default" scope resolution (exactly one candidate or an error).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pyVmomi import vmodl  # type: ignore

from ..core.exceptions import AmbiguousScopeError, NotFoundError, VSphereError
from .kinds import CLUSTER, DATACENTER, MoRef, vim_type
from .session import Session

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scope:
    """A container that bounds later listings (normally a datacenter)."""
    ref: MoRef
    name: str
    obj: Any = field(default=None, compare=False, repr=False)  # live pyVmomi object

    def __str__(self) -> str:
        return f"{self.name} ({self.ref})"


def _view_objects(session: Session, kind: str, container: Any) -> List[Any]:
    content = session.content
    try:
        view = content.viewManager.CreateContainerView(container, [vim_type(kind)], True)
    except vmodl.MethodFault as e:
        raise VSphereError(msg=f"Could not create {kind} container view: {e.msg}", cause=e) from e
    try:
        return list(view.view or [])
    finally:
        try:
            view.Destroy()
        except vmodl.MethodFault as e:
            log.debug("Container view destroy failed (non-fatal): %s", e)


def _container(session: Session, scope: Optional[Scope]) -> Any:
    if scope is None:
        return session.content.rootFolder
    if scope.obj is not None:
        return scope.obj
    return scope.ref.to_vim(session.stub)


def list_objects(session: Session, kind: str, scope: Optional[Scope] = None) -> List[MoRef]:
    """
    References of every object of `kind` under scope (whole inventory when None),
    in server order. Re-running without server-side changes yields the same set.
    """
    objs = _view_objects(session, kind, _container(session, scope))
    refs = [MoRef.of(o) for o in objs]
    log.debug("Listed %d %s object(s) under %s", len(refs), kind, scope or "root")
    return refs


def _pick_single(kind_label: str, objs: List[Any], *, where: str) -> Any:
    if not objs:
        raise NotFoundError(msg=f"no default {kind_label} found in {where}")
    if len(objs) > 1:
        names = sorted(str(getattr(o, "name", "?")) for o in objs)
        raise AmbiguousScopeError(
            msg=f"default {kind_label} resolves to multiple instances in {where}, please specify one",
            context={"candidates": names},
        )
    return objs[0]


def _scope_of(obj: Any) -> Scope:
    return Scope(ref=MoRef.of(obj), name=str(getattr(obj, "name", "")), obj=obj)


def default_datacenter(session: Session) -> Scope:
    """The only datacenter in the inventory; fails when there are none or several."""
    dcs = _view_objects(session, DATACENTER, session.content.rootFolder)
    scope = _scope_of(_pick_single("datacenter", dcs, where="inventory"))
    log.info("Found default datacenter: %s", scope.name)
    return scope


def datacenter_by_name(session: Session, name: str) -> Scope:
    target = (name or "").strip()
    for dc in _view_objects(session, DATACENTER, session.content.rootFolder):
        if str(getattr(dc, "name", "")).strip() == target:
            return _scope_of(dc)
    raise NotFoundError(msg=f"datacenter not found: {target!r}")


def resolve_scope(session: Session, datacenter: Optional[str] = None, *, use_default: bool = False) -> Optional[Scope]:
    """
    Named datacenter if given, else the default datacenter if asked for,
    else None (whole inventory).
    """
    if datacenter:
        return datacenter_by_name(session, datacenter)
    if use_default:
        return default_datacenter(session)
    return None


def default_cluster(session: Session, scope: Optional[Scope] = None) -> Scope:
    clusters = _view_objects(session, CLUSTER, _container(session, scope))
    where = f"datacenter {scope.name}" if scope else "inventory"
    return _scope_of(_pick_single("cluster", clusters, where=where))
