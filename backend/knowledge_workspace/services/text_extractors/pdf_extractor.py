"""
PDF Text Extractor.

Extracts text from PDF files using pypdf library.
"""
import io
from pypdf import PdfReader
from .base import BaseTextExtractor
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class PDFExtractor(BaseTextExtractor):
    """Extractor for PDF files."""
    
    def __init__(self):
        super().__init__((".pdf",), ("pdf",), "PDF")
    
    def _extract(self, file_bytes: bytes) -> str:
        """
        Extract text from PDF file.
        
        Args:
            file_bytes: PDF file content as bytes
            
        Returns:
            Text of every page, one page per line block
            
        Raises:
            pypdf errors for corrupt or encrypted files
        """
        reader = PdfReader(io.BytesIO(file_bytes))
        if reader.is_encrypted:
            raise ValueError("PDF is encrypted")
        
        text_content = ""
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_content += page_text + "\n"
        
        logger.debug(f"Extracted {len(text_content)} characters from {len(reader.pages)} PDF pages")
        return text_content
