"""
Plain Text Extractor.

Decodes any other file as UTF-8 text.
"""
from .base import BaseTextExtractor


class TextExtractor(BaseTextExtractor):
    """Fallback extractor: raw UTF-8 decoding, undecodable bytes replaced."""
    
    def __init__(self):
        super().__init__((".txt", ".md", ".markdown"), ("text/",), "Text")
    
    def _extract(self, file_bytes: bytes) -> str:
        return file_bytes.decode("utf-8", errors="replace")
