"""Chat message intent detection and event scheduling for communities."""

__version__ = "0.1.0"
