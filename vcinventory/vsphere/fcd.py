# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vcinventory/vsphere/fcd.py
"""First-Class Disk listing through the VStorageObjectManager."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from pyVmomi import vmodl  # type: ignore

from ..core.exceptions import wrap_vsphere
from .inventory import Scope, list_objects
from .kinds import DATASTORE, MoRef
from .properties import fetch_properties
from .records import FcdInfo
from .session import Session

log = logging.getLogger(__name__)


def list_fcds(session: Session, datastore_refs: Sequence[MoRef]) -> List[FcdInfo]:
    """
    One FcdInfo per disk across the given datastores, datastore order first,
    then server order within a datastore.
    """
    if not datastore_refs:
        return []
    mgr = session.content.vStorageObjectManager
    names = {ref: str(p.get("name") or "") for ref, p in fetch_properties(session, datastore_refs, ["name"]).items()}

    out: List[FcdInfo] = []
    for ref in datastore_refs:
        ds = ref.to_vim(session.stub)
        try:
            ids = mgr.ListVStorageObject(datastore=ds) or []
        except vmodl.MethodFault as e:
            log.debug("No first-class disks on %s (%s): %s", names.get(ref) or ref, type(e).__name__, getattr(e, "msg", e))
            continue

        log.debug("Datastore %s has %d first-class disk(s)", names.get(ref) or ref, len(ids))
        for disk_id in ids:
            try:
                obj = mgr.RetrieveVStorageObject(id=disk_id, datastore=ds)
            except vmodl.MethodFault as e:
                disk = getattr(disk_id, "id", disk_id)
                raise wrap_vsphere(
                    f"Could not retrieve first-class disk {disk}: {getattr(e, 'msg', e)}", e, datastore=str(ref)
                ) from e
            out.append(FcdInfo.from_vstorage(obj, names.get(ref, "")))
    return out


def list_all_fcds(session: Session, scope: Optional[Scope] = None) -> List[FcdInfo]:
    return list_fcds(session, list_objects(session, DATASTORE, scope))
