"""
Document service: upload, linking, reads and the summarization pipeline.

Pipeline for ``summarize``:
    cached extracted_text
    -> fetch + extract file (text cached when long enough)
    -> title + description substitute
    -> "no content" error
    -> Summarizer (LLM with heuristic fallback, or heuristic only)
    -> summary persisted on the document
"""
from typing import Dict, List, Optional

import httpx

from .ai_service import MIN_CONTENT_LENGTH, Summarizer, SummaryResult
from .database import DatabaseInterface
from .file_service import FileService, is_remote_url
from .text_extractors import TextExtractorFactory
from .workspace_service import WorkspaceService
from ..api.exceptions import (
    DocumentNotFoundError,
    EmptyFileError,
    InvalidFileUrlError,
    MissingFieldsError,
    NoReadableContentError,
    PermissionDeniedError,
)
from ..core.logging_config import get_logger
from ..models.document import Document, DocumentSummary
from ..utils.tag_extractor import normalize_tags
from ..utils.validators import is_blank, new_id, validate_id

logger = get_logger(__name__)

# A description this long can stand in for unreadable file content
MIN_DESCRIPTION_FALLBACK = 50


class DocumentService:
    def __init__(
        self,
        db: DatabaseInterface,
        file_service: FileService,
        summarizer: Summarizer,
        workspaces: WorkspaceService
    ):
        self.db = db
        self.file_service = file_service
        self.summarizer = summarizer
        self.workspaces = workspaces
    
    async def upload(
        self,
        workspace_id: str,
        user_id: str,
        file_name: str,
        content_type: str,
        content: bytes,
        title: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[List[str]] = None
    ) -> Dict:
        """
        Store an uploaded file and register it as a document.
        
        Text extraction runs once here; if it yields nothing the upload
        still succeeds and ``extracted_text`` stays empty.
        
        Raises:
            EmptyFileError: If the upload has no bytes
        """
        await self.workspaces.get_for_user(workspace_id, user_id)
        if not content:
            raise EmptyFileError(f"File '{file_name}' is empty")
        
        doc_id = new_id()
        file_url = await self.file_service.save_upload(content, workspace_id, doc_id, file_name)
        extracted = await TextExtractorFactory.extract_text_async(content, content_type, file_name)
        
        document = Document(
            id=doc_id,
            title=(title or "").strip() or file_name,
            description=description,
            file_url=file_url,
            file_name=file_name,
            file_type=content_type or "application/octet-stream",
            file_size=len(content),
            extracted_text=extracted if not is_blank(extracted, MIN_CONTENT_LENGTH) else None,
            tags=normalize_tags(tags),
            workspace_id=workspace_id,
            author_id=user_id
        )
        created = await self.db.create_document(document.model_dump())
        logger.info(
            f"Document uploaded: {doc_id} ({file_name}, {len(content)} bytes, "
            f"{len(extracted)} chars extracted)"
        )
        return created
    
    async def link(
        self,
        workspace_id: str,
        user_id: str,
        title: str,
        file_url: str,
        file_name: str,
        file_type: str,
        file_size: int = 0,
        description: Optional[str] = None,
        tags: Optional[List[str]] = None
    ) -> Dict:
        """Register a remotely hosted file. Its text is extracted lazily."""
        await self.workspaces.get_for_user(workspace_id, user_id)
        if is_blank(title) or is_blank(file_url) or is_blank(file_name):
            raise MissingFieldsError("title, file_url and file_name are required")
        if not is_remote_url(file_url.strip()):
            raise InvalidFileUrlError()
        document = Document(
            id=new_id(),
            title=title.strip(),
            description=description,
            file_url=file_url.strip(),
            file_name=file_name,
            file_type=file_type or "application/octet-stream",
            file_size=file_size,
            tags=normalize_tags(tags),
            workspace_id=workspace_id,
            author_id=user_id
        )
        return await self.db.create_document(document.model_dump())
    
    async def _accessible(self, doc_id: str, user_id: str) -> Dict:
        """Load a document, enforcing workspace access (400 / 404 / 403)."""
        validate_id(doc_id, "document ID")
        doc = await self.db.get_document(doc_id)
        if not doc:
            raise DocumentNotFoundError()
        await self.workspaces.get_for_user(doc["workspace_id"], user_id)
        return doc
    
    async def get(self, doc_id: str, user_id: str) -> Dict:
        doc = await self._accessible(doc_id, user_id)
        doc["view_count"] = await self.db.increment_document_counter(doc_id, "view_count", 1)
        return doc
    
    async def list_for_workspace(self, workspace_id: str, user_id: str) -> List[Dict]:
        await self.workspaces.get_for_user(workspace_id, user_id)
        return await self.db.list_documents(workspace_id)
    
    async def delete(self, doc_id: str, user_id: str) -> None:
        doc = await self._accessible(doc_id, user_id)
        workspace = await self.db.get_workspace(doc["workspace_id"])
        if doc["author_id"] != user_id and (not workspace or workspace["owner_id"] != user_id):
            raise PermissionDeniedError("Only the author or workspace owner can delete this document")
        await self.db.delete_document(doc_id)
        try:
            await self.file_service.delete_file(doc["file_url"], doc["workspace_id"])
        except OSError as e:
            logger.warning(f"Could not delete file for document {doc_id}: {e}")
        logger.info(f"Document deleted: {doc_id}")
    
    async def resolve_content(self, doc: Dict) -> str:
        """
        Find text to summarize for a document.
        
        Returns:
            Text with at least MIN_CONTENT_LENGTH non-blank characters
        
        Raises:
            EmptyFileError: If the stored file is empty and nothing can substitute
            NoReadableContentError: If no readable content is available
        """
        content = doc.get("extracted_text") or ""
        empty_file_error: Optional[EmptyFileError] = None
        
        if is_blank(content, MIN_CONTENT_LENGTH):
            try:
                file_bytes = await self.file_service.read_file(doc["file_url"], doc["workspace_id"])
                content = await TextExtractorFactory.extract_text_async(file_bytes, doc["file_type"], doc["file_name"])
                if not is_blank(content, MIN_CONTENT_LENGTH):
                    await self.db.update_document(doc["id"], {"extracted_text": content})
                    logger.info(f"Cached {len(content)} extracted characters for document {doc['id']}")
                else:
                    logger.warning(f"Extraction for document {doc['id']} produced {len(content)} characters")
            except EmptyFileError as e:
                empty_file_error = e
                logger.warning(f"Stored file for document {doc['id']} is empty")
            except (OSError, ValueError, httpx.HTTPError) as e:
                logger.warning(f"Could not fetch file for document {doc['id']}: {e}", exc_info=True)
        
        if is_blank(content, MIN_CONTENT_LENGTH):
            description = doc.get("description") or ""
            if len(description) >= MIN_DESCRIPTION_FALLBACK:
                logger.info(f"Using title and description as content for document {doc['id']}")
                content = f"{doc['title']}\n\n{description}"
        
        if is_blank(content, MIN_CONTENT_LENGTH):
            if empty_file_error is not None:
                raise empty_file_error
            raise NoReadableContentError(
                f"Unable to extract text from {doc.get('file_type') or 'this'} file. "
                "The file may be empty, corrupted, or in an unsupported format."
            )
        return content
    
    async def summarize(self, doc_id: str, user_id: str) -> SummaryResult:
        """
        Summarize a document and persist the result.
        
        Raises:
            InvalidIdError, DocumentNotFoundError, PermissionDeniedError,
            EmptyFileError, NoReadableContentError, AIServiceUnavailableError
        """
        doc = await self._accessible(doc_id, user_id)
        content = await self.resolve_content(doc)
        
        result = await self.summarizer.summarize(content, doc["title"])
        summary = DocumentSummary(content=result.summary, key_points=result.points, topics=result.keywords)
        await self.db.update_document(doc_id, {"summary": summary.model_dump()})
        logger.info(
            f"Summarized document {doc_id} via {result.source} "
            f"({len(result.points)} points, {len(result.keywords)} keywords)"
        )
        return result
