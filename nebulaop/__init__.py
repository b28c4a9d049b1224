"""Helpers for graph database clusters: flag-file merging, workload dicts, replica validation, conditions, resource kinds and webhook handler registration."""

__version__ = "0.1.0"

__all__ = [
    "codec",
    "condition",
    "config",
    "errors",
    "extender",
    "hashing",
    "maputil",
    "resource",
    "validation",
    "version",
    "webhook",
]