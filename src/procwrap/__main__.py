"""Allow running procwrap as ``python -m procwrap``."""

from .cli import app

app()
