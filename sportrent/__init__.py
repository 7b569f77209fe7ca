"""SportRent API - sport equipment rental backend."""

__version__ = "1.0.0"
