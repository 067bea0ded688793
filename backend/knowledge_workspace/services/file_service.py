"""
File service implementation.
Handles file operations using plug-and-play storage adapters, and
downloads remotely hosted documents over HTTP.
"""
import re
from typing import Optional

import httpx

from .storage import FileStorageInterface
from ..api.exceptions import FileTooLargeError
from ..core.config import FILE_DOWNLOAD_TIMEOUT_SECONDS, MAX_UPLOAD_SIZE_MB
from ..core.logging_config import get_logger

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9._-]+')


def is_remote_url(file_url: str) -> bool:
    return file_url.startswith("http://") or file_url.startswith("https://")


def safe_file_name(file_name: str) -> str:
    """Strip directories and unsafe characters from an uploaded file name."""
    name = file_name.replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "upload"


class FileService:
    """
    File service implementation.
    Handles file operations - saving, reading, deleting files.
    Local keys go through the storage adapter; http(s) URLs are downloaded.
    """
    
    def __init__(
        self,
        storage: FileStorageInterface,
        download_timeout: float = FILE_DOWNLOAD_TIMEOUT_SECONDS,
        max_size_bytes: int = MAX_UPLOAD_SIZE_MB * 1024 * 1024,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            storage: Storage adapter for uploaded files
            download_timeout: Timeout (seconds) for remote downloads
            max_size_bytes: Largest file accepted for upload or download
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.storage = storage
        self.download_timeout = download_timeout
        self.max_size_bytes = max_size_bytes
        self._transport = transport
    
    async def save_upload(self, content: bytes, workspace_id: str, doc_id: str, file_name: str) -> str:
        """
        Store uploaded bytes under ``<workspace>/<doc>_<name>``.
        
        Returns:
            Storage key to persist as the document's file_url
        """
        if len(content) > self.max_size_bytes:
            raise FileTooLargeError(f"File exceeds the {self.max_size_bytes // (1024 * 1024)} MB limit")
        key = f"{workspace_id}/{doc_id}_{safe_file_name(file_name)}"
        await self.storage.save_bytes(content, key)
        logger.debug(f"Stored {len(content)} bytes at {key}")
        return key
    
    def _check_owned_key(self, file_url: str, workspace_id: str):
        """Local keys are only usable by the workspace they were stored under."""
        if not file_url.startswith(f"{workspace_id}/"):
            raise PermissionError(f"Storage key {file_url} is outside workspace {workspace_id}")
    
    async def read_file(self, file_url: str, workspace_id: str) -> bytes:
        """
        Load the bytes behind a document's file_url.
        
        Args:
            file_url: Storage key or http(s) URL
            workspace_id: Workspace of the document; local keys must live under it
        
        Returns:
            File content
        
        Raises:
            FileNotFoundError: If a local key does not exist
            PermissionError: If a local key belongs to another workspace
            FileTooLargeError: If a download exceeds max_size_bytes
            httpx.HTTPError: On download failures, timeouts and non-2xx responses
        """
        if not is_remote_url(file_url):
            self._check_owned_key(file_url, workspace_id)
            return await self.storage.get_file(file_url)
        return await self._download(file_url)
    
    async def _download(self, file_url: str) -> bytes:
        logger.info(f"Downloading file from {file_url}")
        async with httpx.AsyncClient(
            timeout=self.download_timeout,
            follow_redirects=True,
            transport=self._transport
        ) as client:
            async with client.stream("GET", file_url) as response:
                response.raise_for_status()
                content_length = response.headers.get("content-length")
                if content_length and content_length.isdigit() and int(content_length) > self.max_size_bytes:
                    raise FileTooLargeError(f"Remote file too large: {content_length} bytes")
                
                # content-length may be absent or wrong, so count what actually arrives
                content = bytearray()
                async for chunk in response.aiter_bytes():
                    content.extend(chunk)
                    if len(content) > self.max_size_bytes:
                        raise FileTooLargeError(
                            f"Remote file exceeds the {self.max_size_bytes // (1024 * 1024)} MB limit"
                        )
        logger.debug(f"Downloaded {len(content)} bytes from {file_url}")
        return bytes(content)
    
    async def delete_file(self, file_url: str, workspace_id: str) -> bool:
        """Delete a stored upload of this workspace. Remote URLs and foreign keys are left alone."""
        if is_remote_url(file_url):
            return False
        try:
            self._check_owned_key(file_url, workspace_id)
        except PermissionError as e:
            logger.warning(f"Refusing to delete file: {e}")
            return False
        return await self.storage.delete_file(file_url)
