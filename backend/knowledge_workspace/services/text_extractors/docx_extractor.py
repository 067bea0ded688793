"""
DOCX Text Extractor.

Extracts text from Word files using python-docx library.
"""
import io
from docx import Document as DocxDocument
from .base import BaseTextExtractor
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class DOCXExtractor(BaseTextExtractor):
    """Extractor for DOCX (and DOC-labelled) Word files."""
    
    def __init__(self):
        super().__init__((".docx", ".doc"), ("word", "docx"), "DOCX")
    
    def _extract(self, file_bytes: bytes) -> str:
        doc = DocxDocument(io.BytesIO(file_bytes))
        text_content = ""
        
        # Extract text from paragraphs
        for paragraph in doc.paragraphs:
            if paragraph.text.strip():
                text_content += paragraph.text + "\n"
        
        # Extract text from tables
        for table in doc.tables:
            for row in table.rows:
                row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if row_text:
                    text_content += " | ".join(row_text) + "\n"
        
        return text_content
