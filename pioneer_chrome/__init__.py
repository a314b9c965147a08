"""Pioneer Chrome: tab session manager for a host-driven browser shell."""

__version__ = "0.1.0"
