"""Building blocks for keeping multi-cluster resource stores in sync."""

__version__ = "0.1.0"