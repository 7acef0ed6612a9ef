# Storage module
"""Persistence services for holdings and local table documents."""

from stockdemo.storage.storage import IStorageService, JsonFileStorage, MemoryStorage

__all__ = ["IStorageService", "JsonFileStorage", "MemoryStorage"]
