"""bdsync - team meeting dashboard with session lifecycle and demo fallback."""

__version__ = "0.1.0"
