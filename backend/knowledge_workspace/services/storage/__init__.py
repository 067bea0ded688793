"""
File storage abstraction layer.
"""
from .base import FileStorageInterface
from .local_storage import LocalFileStorage

__all__ = [
    "FileStorageInterface",
    "LocalFileStorage",
]
