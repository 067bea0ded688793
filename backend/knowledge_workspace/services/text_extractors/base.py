"""
Base Text Extractor Interface.

All text extractors must inherit from this base class and implement
the extract() method.
"""
from abc import ABC, abstractmethod
from typing import Tuple
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class BaseTextExtractor(ABC):
    """
    Abstract base class for text extractors.
    
    Each file format should have its own extractor class that inherits
    from this base class and implements the extract() method.

    Extraction is best-effort: parser failures are logged and turned into
    an empty string so uploads never fail because text mining did.
    """
    
    def __init__(self, file_extensions: Tuple[str, ...], type_markers: Tuple[str, ...], format_name: str):
        """
        Initialize the extractor.
        
        Args:
            file_extensions: File extensions handled (e.g., ('.pdf',))
            type_markers: Substrings of a declared MIME type that select this extractor
            format_name: Human-readable format name (e.g., 'PDF', 'DOCX')
        """
        self.file_extensions = tuple(ext.lower() for ext in file_extensions)
        self.type_markers = tuple(marker.lower() for marker in type_markers)
        self.format_name = format_name
    
    def matches(self, declared_type: str, file_name: str) -> bool:
        """
        Check whether this extractor handles the given type or file name.
        
        Args:
            declared_type: Declared MIME type (may be empty)
            file_name: Original file name
            
        Returns:
            True if either the type or the extension points at this format
        """
        declared_type = (declared_type or "").lower()
        file_name = (file_name or "").lower()
        if any(marker in declared_type for marker in self.type_markers):
            return True
        return file_name.endswith(self.file_extensions)
    
    def extract(self, file_bytes: bytes) -> str:
        """
        Extract text from file bytes.
        
        Args:
            file_bytes: Raw file content as bytes
            
        Returns:
            Extracted text content, or "" if the parser fails
        """
        try:
            return self._extract(file_bytes)
        except Exception as e:
            logger.warning(f"{self.format_name} extraction failed, returning empty text: {e}", exc_info=True)
            return ""
    
    @abstractmethod
    def _extract(self, file_bytes: bytes) -> str:
        """Parse the bytes. May raise; extract() absorbs the failure."""
        pass
