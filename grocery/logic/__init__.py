"""Core business logic layer.

Subpackages:
- shopping: item extraction, department classification, list building,
  the sync/mutation engine and exports
"""
__all__ = ["shopping"]
