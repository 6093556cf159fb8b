"""Attribute catalogue loading (definitions as data, generation as code)."""

from .load import load_catalogue, loads_catalogue

__all__ = ["load_catalogue", "loads_catalogue"]
