"""Storage module."""

from .storage import IStorage, Storage, Transaction

__all__ = ["IStorage", "Storage", "Transaction"]
