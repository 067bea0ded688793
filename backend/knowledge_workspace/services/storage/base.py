"""
Abstract base class for file storage adapters.
All storage implementations must inherit from this class.
"""
from abc import ABC, abstractmethod


class FileStorageInterface(ABC):
    """
    Abstract interface for file storage operations.
    All storage adapters must implement these methods.
    This allows plug-and-play storage support without changing business logic.
    """
    
    @abstractmethod
    async def save_bytes(self, content: bytes, file_path: str) -> str:
        """
        Save raw bytes to storage.
        
        Args:
            content: File content
            file_path: Path/key where file should be stored (relative path)
        
        Returns:
            Storage path/key where file was saved (for retrieval)
        """
        pass
    
    @abstractmethod
    async def get_file(self, file_path: str) -> bytes:
        """
        Retrieve a file from storage.
        
        Args:
            file_path: Storage path/key of the file
        
        Returns:
            File contents as bytes
        
        Raises:
            FileNotFoundError: If nothing is stored under the key
        """
        pass
    
    @abstractmethod
    async def delete_file(self, file_path: str) -> bool:
        """
        Delete a file from storage.
        
        Returns:
            True if file was deleted, False if not found
        """
        pass
    
    @abstractmethod
    async def file_exists(self, file_path: str) -> bool:
        """Check if a file exists in storage."""
        pass
    
    @abstractmethod
    async def initialize(self):
        """Initialize storage (create directories, verify connections, etc.)."""
        pass
    
    @abstractmethod
    async def close(self):
        """Close storage connection (cleanup, close clients, etc.)."""
        pass
