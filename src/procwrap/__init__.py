"""procwrap: single-instance process supervisor."""

__version__ = "0.2.0"
