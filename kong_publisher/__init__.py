"""Kong publisher — sync an ASGI application's routes into Kong."""

__version__ = "0.1.0"
