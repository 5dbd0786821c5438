# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vcinventory/vsphere/properties.py
"""
Batched property retrieval through the PropertyCollector.

One logical call fetches a set of property paths for a set of references.
The server answers the batch as a whole: an invalid reference or property
path fails everything, and nothing partial is returned.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from pyVmomi import vim, vmodl  # type: ignore

from ..core.exceptions import BatchError
from .inventory import Scope, list_objects
from .kinds import MoRef, vim_type
from .session import Session

log = logging.getLogger(__name__)

PropertyMap = Dict[str, Any]

DEFAULT_PAGE_SIZE = 1000


def _parse_object_content(oc: Any) -> PropertyMap:
    return {p.name: p.val for p in (oc.propSet or [])}


def _raise_missing(oc: Any) -> None:
    """Per-property faults (missingSet) fail the batch like a top-level fault."""
    missing = list(getattr(oc, "missingSet", None) or [])
    if not missing:
        return
    first = missing[0]
    fault = getattr(first, "fault", None)
    reason = getattr(fault, "msg", None) or type(fault).__name__
    raise BatchError(
        msg=f"Property retrieval failed for {MoRef.of(oc.obj)}: {first.path}: {reason}",
        context={"object": str(MoRef.of(oc.obj)), "paths": [m.path for m in missing]},
    )


def _filter_spec(session: Session, refs: Sequence[MoRef], paths: Sequence[str]) -> Any:
    kinds = sorted({r.kind for r in refs})
    prop_specs = [
        vim.PropertyCollector.PropertySpec(type=vim_type(k), pathSet=list(paths), all=False)
        for k in kinds
    ]
    obj_specs = [
        vim.PropertyCollector.ObjectSpec(obj=r.to_vim(session.stub), skip=False)
        for r in refs
    ]
    return vim.PropertyCollector.FilterSpec(objectSet=obj_specs, propSet=prop_specs)


def fetch_properties(
    session: Session,
    refs: Sequence[MoRef],
    paths: Sequence[str],
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Dict[MoRef, PropertyMap]:
    """
    Fetch `paths` for every reference in one batch.

    Returns {ref: {path: value}} keyed in input order. Paths the server leaves
    unset are absent from the inner mapping. An empty ref list returns {}
    without a server call.
    """
    if not refs:
        return {}
    refs = list(dict.fromkeys(refs))
    pc = session.content.propertyCollector
    spec = _filter_spec(session, refs, paths)
    options = vim.PropertyCollector.RetrieveOptions(maxObjects=page_size)

    found: Dict[MoRef, PropertyMap] = {}
    token: Optional[str] = None
    try:
        result = pc.RetrievePropertiesEx(specSet=[spec], options=options)
        pages = 0
        while result is not None:
            pages += 1
            # Read before walking objects so a failing page can still be cancelled.
            token = getattr(result, "token", None)
            for oc in result.objects or []:
                _raise_missing(oc)
                found[MoRef.of(oc.obj)] = _parse_object_content(oc)
            if not token:
                break
            result = pc.ContinueRetrievePropertiesEx(token)
            token = None
    except vmodl.MethodFault as e:
        if token:
            _cancel(pc, token)
        ctx: Dict[str, Any] = {"objects": len(refs), "paths": list(paths)}
        bad = getattr(e, "obj", None)
        if bad is not None:
            ctx["object"] = str(MoRef.of(bad))
        raise BatchError(
            msg=f"Property retrieval failed: {getattr(e, 'msg', None) or type(e).__name__}",
            cause=e,
            context=ctx,
        ) from e
    except BatchError:
        if token:
            _cancel(pc, token)
        raise

    log.debug(
        "Fetched %d path(s) for %d object(s) in %d page(s)",
        len(paths),
        len(found),
        pages,
        extra={"ctx": {"kinds": ",".join(sorted({r.kind for r in refs}))}},
    )
    return {r: found.get(r, {}) for r in refs}


def _cancel(pc: Any, token: str) -> None:
    try:
        pc.CancelRetrievePropertiesEx(token)
    except vmodl.MethodFault as e:
        log.debug("CancelRetrievePropertiesEx failed (non-fatal): %s", e)


def retrieve(
    session: Session,
    kind: str,
    paths: Sequence[str],
    scope: Optional[Scope] = None,
) -> List[PropertyMap]:
    """
    List every object of `kind` under scope and fetch `paths` for all of them.
    Each returned mapping also carries the reference under the "_ref" key.
    """
    refs = list_objects(session, kind, scope)
    props = fetch_properties(session, refs, paths)
    out: List[PropertyMap] = []
    for ref, p in props.items():
        row = dict(p)
        row["_ref"] = ref
        out.append(row)
    return out
