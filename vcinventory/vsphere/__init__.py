# SPDX-License-Identifier: LGPL-3.0-or-later
# vcinventory/vsphere/__init__.py
"""
vSphere access layer.

- session: login/logout (pyVmomi SmartConnect)
- inventory: container views and default datacenter/cluster
- properties: batched PropertyCollector fetch
- records: typed records and VLAN/switch-config variants
- tags: REST tagging API
- fcd: first-class disks
- errors: exit code classification
"""

__all__ = []
