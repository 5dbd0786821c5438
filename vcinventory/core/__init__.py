# vcinventory/core/__init__.py
