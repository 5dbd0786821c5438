# SPDX-License-Identifier: LGPL-3.0-or-later
# vcinventory/cli/__init__.py
