"""attrgen - attribute table generator for compiler sources."""

__version__ = "0.1.0"
