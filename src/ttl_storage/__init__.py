"""In-memory key-value storage with per-record TTL, served over HTTP."""

__version__ = "1.0.0"
