"""Signal planner application layer (CLI and HTTP API)."""

__version__ = "0.1.0"
