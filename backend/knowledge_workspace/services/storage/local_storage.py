"""
Local filesystem storage adapter implementing FileStorageInterface.
Stores files on the local filesystem - perfect for development and demos.
"""
import asyncio
from pathlib import Path
from typing import Optional

from .base import FileStorageInterface
from ...core.config import UPLOAD_DIR


class LocalFileStorage(FileStorageInterface):
    """
    Local filesystem storage adapter.
    Stores files in a local directory - perfect for development and demos.
    """
    
    def __init__(self, base_dir: Optional[Path] = None):
        """
        Initialize local file storage.
        
        Args:
            base_dir: Base directory for file storage (defaults to UPLOAD_DIR)
        """
        self.base_dir = Path(base_dir or UPLOAD_DIR).resolve()
    
    async def initialize(self):
        """Initialize storage - ensure base directory exists."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
    
    async def close(self):
        """Close storage (no-op for local filesystem)."""
        pass
    
    def _get_full_path(self, file_path: str) -> Path:
        """Get full filesystem path from storage path."""
        normalized = Path(file_path).as_posix().lstrip('/')
        full_path = (self.base_dir / normalized).resolve()
        # Prevent directory traversal
        if self.base_dir not in full_path.parents and full_path != self.base_dir:
            raise FileNotFoundError(f"File not found: {file_path}")
        return full_path
    
    async def save_bytes(self, content: bytes, file_path: str) -> str:
        """Save bytes to the local filesystem."""
        full_path = self._get_full_path(file_path)
        
        def _save():
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(content)
        
        # Run in executor to avoid blocking
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _save)
        
        return file_path
    
    async def get_file(self, file_path: str) -> bytes:
        """Retrieve a file from local filesystem."""
        full_path = self._get_full_path(file_path)
        
        if not full_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, full_path.read_bytes)
    
    async def delete_file(self, file_path: str) -> bool:
        """Delete a file from local filesystem."""
        full_path = self._get_full_path(file_path)
        
        if not full_path.exists():
            return False
        
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, full_path.unlink)
        return True
    
    async def file_exists(self, file_path: str) -> bool:
        """Check if a file exists in local filesystem."""
        try:
            return self._get_full_path(file_path).exists()
        except FileNotFoundError:
            return False
