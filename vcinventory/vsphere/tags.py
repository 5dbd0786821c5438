# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vcinventory/vsphere/tags.py
"""
Tag lookups through the vCenter REST tagging API (/rest/com/vmware/cis/...).

Tags are not reachable through the SOAP property collector, so this client
opens its own REST session with the same credentials and TLS setting as the
vSphere Session it is built from.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import requests
import urllib3

from ..core.exceptions import AuthError, NetworkError, NotFoundError, VSphereError
from .kinds import MoRef
from .records import TagInfo
from .session import Session

SESSION_PATH = "/rest/com/vmware/cis/session"
TAG_PATH = "/rest/com/vmware/cis/tagging/tag"
CATEGORY_PATH = "/rest/com/vmware/cis/tagging/category"
ASSOCIATION_PATH = "/rest/com/vmware/cis/tagging/tag-association"
SESSION_HEADER = "vmware-api-session-id"

DEFAULT_TIMEOUT = 30.0


class TagClient:
    """
    Usage:
        with TagClient(session) as tags:
            by_vm = tags.attached_tags(vm_refs)
    """

    def __init__(
        self,
        session: Session,
        *,
        http: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.params = session.params
        self.logger = logger or logging.getLogger(__name__)
        self.base_url = self.params.endpoint.base_url
        self.timeout = self.params.timeout or DEFAULT_TIMEOUT
        self.http = http if http is not None else self._create_http()
        self.session_id: Optional[str] = None
        self._tags: Dict[str, TagInfo] = {}
        self._categories: Dict[str, str] = {}

    def _create_http(self) -> requests.Session:
        http = requests.Session()
        http.verify = not self.params.insecure
        if self.params.insecure:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        return http

    def __enter__(self) -> "TagClient":
        self.login()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    # ------------------------------------------------------------------
    # transport
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        headers = dict(kwargs.pop("headers", None) or {})
        if self.session_id:
            headers[SESSION_HEADER] = self.session_id
        self.logger.debug("REST %s %s", method, path)
        try:
            response = self.http.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as e:
            raise _classify_http_error(e, method, path) from e
        except (requests.ConnectionError, requests.Timeout) as e:
            raise NetworkError(msg=f"REST {method} {path} failed: {e}", cause=e, context={"url": url}) from e
        except requests.RequestException as e:
            raise VSphereError(msg=f"REST {method} {path} failed: {e}", cause=e, context={"url": url}) from e

        if not response.content:
            return None
        try:
            return response.json().get("value")
        except ValueError as e:
            raise VSphereError(msg=f"REST {method} {path} returned non-JSON body", cause=e) from e

    def login(self) -> "TagClient":
        value = self._request("POST", SESSION_PATH, auth=(self.params.username, self.params.password))
        if not value:
            raise AuthError(msg="REST log in returned no session id")
        self.session_id = str(value)
        self.logger.debug("REST session opened on %s", self.base_url)
        return self

    def close(self) -> None:
        if not self.session_id:
            return
        try:
            self._request("DELETE", SESSION_PATH)
        except VSphereError as e:
            self.logger.warning("Error during REST logout: %s", e)
        finally:
            self.session_id = None

    # ------------------------------------------------------------------
    # tags / categories
    # ------------------------------------------------------------------

    def category_name(self, category_id: str) -> str:
        if not category_id:
            return ""
        if category_id not in self._categories:
            body = self._request("GET", f"{CATEGORY_PATH}/id:{category_id}") or {}
            self._categories[category_id] = str(body.get("name") or "")
        return self._categories[category_id]

    def get_tag(self, tag_id: str) -> TagInfo:
        if tag_id not in self._tags:
            body = self._request("GET", f"{TAG_PATH}/id:{tag_id}") or {}
            self._tags[tag_id] = TagInfo.from_rest(body, self.category_name(str(body.get("category_id") or "")))
        return self._tags[tag_id]

    def list_tag_ids(self) -> List[str]:
        return [str(t) for t in (self._request("GET", TAG_PATH) or [])]

    def list_tags(self) -> List[TagInfo]:
        return [self.get_tag(t) for t in self.list_tag_ids()]

    # ------------------------------------------------------------------
    # associations
    # ------------------------------------------------------------------

    def attached_tags(self, refs: Sequence[MoRef]) -> Dict[MoRef, List[TagInfo]]:
        """Tags attached to each reference, in one request; refs without tags map to []."""
        out: Dict[MoRef, List[TagInfo]] = {r: [] for r in refs}
        if not out:
            return out
        body = {"object_ids": [{"id": r.value, "type": r.kind} for r in out]}
        rows = self._request("POST", f"{ASSOCIATION_PATH}?~action=list-attached-tags-on-objects", json=body) or []
        for row in rows:
            ref = _object_ref(row.get("object_id") or {})
            if ref is None:
                continue
            out.setdefault(ref, []).extend(self.get_tag(str(t)) for t in (row.get("tag_ids") or []))
        return out

    def attached_objects(self, tag_ids: Iterable[str]) -> Dict[str, List[MoRef]]:
        ids = [str(t) for t in tag_ids]
        out: Dict[str, List[MoRef]] = {t: [] for t in ids}
        if not ids:
            return out
        body = {"tag_ids": ids}
        rows = self._request("POST", f"{ASSOCIATION_PATH}?~action=list-attached-objects-on-tags", json=body) or []
        for row in rows:
            tag_id = str(row.get("tag_id") or "")
            refs = [r for r in (_object_ref(o) for o in (row.get("object_ids") or [])) if r is not None]
            out.setdefault(tag_id, []).extend(refs)
        return out


def _object_ref(obj: Dict[str, Any]) -> Optional[MoRef]:
    kind, value = obj.get("type"), obj.get("id")
    if not kind or not value:
        return None
    return MoRef(str(kind), str(value))


def _classify_http_error(e: requests.HTTPError, method: str, path: str) -> VSphereError:
    status = getattr(e.response, "status_code", None)
    ctx = {"status": status, "path": path}
    if status in (401, 403):
        return AuthError(msg=f"REST {method} {path} rejected: HTTP {status}", cause=e, context=ctx)
    if status == 404:
        return NotFoundError(msg=f"REST {method} {path}: not found", cause=e, context=ctx)
    return VSphereError(msg=f"REST {method} {path} failed: HTTP {status}", cause=e, context=ctx)
