"""Design token synchronisation and usage analytics."""

__version__ = "0.3.0"
