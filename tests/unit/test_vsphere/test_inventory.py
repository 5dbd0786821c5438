# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for container-view listing and default scope resolution."""
from __future__ import annotations

import pytest
from pyVmomi import vmodl

from vcinventory.core.exceptions import AmbiguousScopeError, NotFoundError, VSphereError
from vcinventory.vsphere.inventory import (
    datacenter_by_name,
    default_cluster,
    default_datacenter,
    list_objects,
    resolve_scope,
)
from vcinventory.vsphere.kinds import MoRef

from fakes.fake_vsphere import ROOT, make_content, make_session, mo

DC1 = mo("Datacenter", "datacenter-1", name="DC1")
DC2 = mo("Datacenter", "datacenter-2", name="DC2")
HOSTS = [mo("HostSystem", "host-1", name="esx01"), mo("HostSystem", "host-2", name="esx02")]
CL1 = mo("ClusterComputeResource", "domain-c1", name="Cluster-A")


def _session(objects):
    return make_session(make_content(objects))


@pytest.mark.unit
class TestListObjects:
    def test_whole_inventory(self):
        s = _session({ROOT: {"HostSystem": HOSTS}})
        refs = list_objects(s, "HostSystem")

        assert refs == [MoRef("HostSystem", "host-1"), MoRef("HostSystem", "host-2")]
        vm = s.content.viewManager
        assert vm.calls == [(ROOT, "HostSystem", True)]
        assert all(v.destroyed for v in vm.views)

    def test_is_repeatable(self):
        s = _session({ROOT: {"HostSystem": HOSTS}})
        assert list_objects(s, "HostSystem") == list_objects(s, "HostSystem")

    def test_scoped_to_datacenter(self):
        s = _session({ROOT: {"Datacenter": [DC1]}, "datacenter-1": {"HostSystem": HOSTS[:1]}})
        scope = default_datacenter(s)

        assert list_objects(s, "HostSystem", scope) == [MoRef("HostSystem", "host-1")]

    def test_empty(self):
        assert list_objects(_session({}), "VirtualMachine") == []

    def test_view_destroyed_when_listing_fails(self):
        s = _session({})

        class _BrokenView:
            destroyed = False

            @property
            def view(self):
                raise vmodl.fault.SystemError(msg="boom")

            def Destroy(self):
                self.destroyed = True

        broken = _BrokenView()
        s.content.viewManager.CreateContainerView = lambda *a: broken
        with pytest.raises(vmodl.fault.SystemError):
            list_objects(s, "HostSystem")
        assert broken.destroyed

    def test_view_creation_fault_is_wrapped(self):
        s = _session({})

        def _fail(*a):
            raise vmodl.fault.SystemError(msg="no views")

        s.content.viewManager.CreateContainerView = _fail
        with pytest.raises(VSphereError, match="container view"):
            list_objects(s, "HostSystem")


@pytest.mark.unit
class TestDefaultScope:
    def test_single_datacenter(self):
        scope = default_datacenter(_session({ROOT: {"Datacenter": [DC1]}}))
        assert scope.name == "DC1"
        assert scope.ref == MoRef("Datacenter", "datacenter-1")

    def test_no_datacenter(self):
        with pytest.raises(NotFoundError):
            default_datacenter(_session({}))

    def test_several_datacenters(self):
        with pytest.raises(AmbiguousScopeError) as ei:
            default_datacenter(_session({ROOT: {"Datacenter": [DC2, DC1]}}))
        assert ei.value.context["candidates"] == ["DC1", "DC2"]

    def test_by_name(self):
        s = _session({ROOT: {"Datacenter": [DC1, DC2]}})
        assert datacenter_by_name(s, "DC2").ref.value == "datacenter-2"
        with pytest.raises(NotFoundError):
            datacenter_by_name(s, "DC9")

    def test_default_cluster_in_datacenter(self):
        s = _session({ROOT: {"Datacenter": [DC1]}, "datacenter-1": {"ClusterComputeResource": [CL1]}})
        assert default_cluster(s, default_datacenter(s)).name == "Cluster-A"

    def test_default_cluster_ambiguous(self):
        cl2 = mo("ClusterComputeResource", "domain-c2", name="Cluster-B")
        with pytest.raises(AmbiguousScopeError):
            default_cluster(_session({ROOT: {"ClusterComputeResource": [CL1, cl2]}}))

    def test_resolve_scope(self):
        s = _session({ROOT: {"Datacenter": [DC1, DC2]}})
        assert resolve_scope(s) is None
        assert resolve_scope(s, "DC1").name == "DC1"
        with pytest.raises(AmbiguousScopeError):
            resolve_scope(s, use_default=True)
