"""Build and release tooling: repository configuration, rollups, archives and statistics."""

__version__ = "0.1.0"