# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import pytest
from pyVmomi import vim

from vcinventory.core.exceptions import VcInventoryError
from vcinventory.vsphere.kinds import HOST, KINDS, SWITCH, MoRef, vim_type


@pytest.mark.unit
class TestMoRef:
    def test_str(self):
        assert str(MoRef("HostSystem", "host-12")) == "HostSystem:host-12"

    def test_of_live_object(self):
        assert MoRef.of(vim.HostSystem("host-7")) == MoRef("HostSystem", "host-7")

    def test_to_vim_roundtrip(self):
        obj = MoRef("Datastore", "datastore-3").to_vim()
        assert isinstance(obj, vim.Datastore)
        assert obj._moId == "datastore-3"

    def test_hashable_and_ordered(self):
        refs = {MoRef("VirtualMachine", "vm-2"), MoRef("VirtualMachine", "vm-2"), MoRef("VirtualMachine", "vm-1")}
        assert sorted(refs) == [MoRef("VirtualMachine", "vm-1"), MoRef("VirtualMachine", "vm-2")]


@pytest.mark.unit
class TestKinds:
    def test_known(self):
        assert vim_type(HOST) is vim.HostSystem
        assert vim_type(SWITCH) is vim.DistributedVirtualSwitch

    def test_wire_names_match_keys(self):
        for name, typ in KINDS.items():
            assert typ._wsdlName == name

    def test_unknown(self):
        with pytest.raises(VcInventoryError, match="Unsupported inventory kind"):
            vim_type("Toaster")
