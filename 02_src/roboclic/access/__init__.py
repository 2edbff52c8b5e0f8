"""Access control module."""

from .gate import AccessGate, AccessLevel, IAccessGate

__all__ = ["AccessGate", "AccessLevel", "IAccessGate"]
