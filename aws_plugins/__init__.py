"""AWS monitoring check plugins."""

__version__ = "1.0.0"
