"""
Text Extractor Factory.

Manages registration and retrieval of text extractors for different file formats.
Uses the Factory pattern to provide plug-and-play text extraction.
"""
import asyncio
from typing import List
from .base import BaseTextExtractor
from .pdf_extractor import PDFExtractor
from .docx_extractor import DOCXExtractor
from .text_extractor import TextExtractor
from ...api.exceptions import EmptyFileError
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class TextExtractorFactory:
    """
    Factory for managing text extractors.
    
    Extractors are consulted in registration order; the first one that
    matches the declared type or file name wins. PDF is checked before
    Word, and anything unmatched is decoded as UTF-8.
    """
    
    _extractors: List[BaseTextExtractor] = []
    _fallback: BaseTextExtractor = TextExtractor()
    _initialized = False
    
    @classmethod
    def _initialize(cls):
        """Initialize default extractors."""
        if cls._initialized:
            return
        
        cls._extractors = [PDFExtractor(), DOCXExtractor()]
        cls._initialized = True
        logger.info(f"TextExtractorFactory initialized with {len(cls._extractors)} extractors")
    
    @classmethod
    def register(cls, extractor: BaseTextExtractor):
        """
        Register an extra extractor ahead of the defaults.
        
        Args:
            extractor: Text extractor instance to register
        """
        cls._initialize()
        cls._extractors.insert(0, extractor)
        logger.debug(f"Registered extractor: {extractor.format_name}")
    
    @classmethod
    def get_extractor(cls, declared_type: str, file_name: str) -> BaseTextExtractor:
        """
        Get the extractor for a declared type / file name pair.
        
        Args:
            declared_type: Declared MIME type
            file_name: Original file name
            
        Returns:
            Matching extractor, or the UTF-8 fallback
        """
        cls._initialize()
        for extractor in cls._extractors:
            if extractor.matches(declared_type, file_name):
                return extractor
        return cls._fallback
    
    @classmethod
    def extract_text(cls, file_bytes: bytes, declared_type: str, file_name: str) -> str:
        """
        Extract text from file bytes using the appropriate extractor.
        
        Args:
            file_bytes: File content as bytes
            declared_type: Declared MIME type
            file_name: Original file name (used for extension dispatch)
            
        Returns:
            Extracted text (untruncated). "" when the parser failed.
            
        Raises:
            EmptyFileError: If the buffer has no bytes at all
        """
        if not file_bytes:
            raise EmptyFileError(f"File '{file_name}' is empty")
        
        extractor = cls.get_extractor(declared_type, file_name)
        logger.debug(f"Extracting text from {file_name} using {extractor.format_name} extractor")
        text_content = extractor.extract(file_bytes)
        logger.info(f"Extracted {len(text_content)} characters from {file_name} ({extractor.format_name})")
        return text_content
    
    @classmethod
    async def extract_text_async(cls, file_bytes: bytes, declared_type: str, file_name: str) -> str:
        """Run extract_text in the default executor so parsing does not block the loop."""
        if not file_bytes:
            raise EmptyFileError(f"File '{file_name}' is empty")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, cls.extract_text, file_bytes, declared_type, file_name)
    
    @classmethod
    def get_supported_formats(cls) -> List[str]:
        cls._initialize()
        return [ext.format_name for ext in cls._extractors] + [cls._fallback.format_name]
