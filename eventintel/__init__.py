"""Event intelligence and notification targeting engine."""

__version__ = "1.0.0"
