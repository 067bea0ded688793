"""
Documents Router - Document reads, deletion and summarization.

Architecture:
- Router handles HTTP request/response only
- DocumentService owns access checks and the summarization pipeline

Example Usage:
    GET /documents/{doc_id} - Get a document (counts a view)
    DELETE /documents/{doc_id} - Delete a document
    POST /documents/{doc_id}/summarize - Summarize with AI (heuristic fallback)
"""
from typing import Dict

from fastapi import APIRouter, Depends, Request

from .dependencies import ServiceContainer, get_current_user, get_services
from ..api.dto import SummarizeResponse
from ..middleware.rate_limit import ai_rate_limit

router = APIRouter(prefix="/documents")


@router.get("/{doc_id}")
async def get_document(
    doc_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    """
    Get a single document by its unique ID.
    
    Raises:
        400 if the ID is malformed, 404 if the document does not exist,
        403 if the caller has no access to its workspace
    """
    document = await services.documents.get(doc_id, user["id"])
    return {"success": True, "data": document}


@router.delete("/{doc_id}")
async def delete_document(
    doc_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    """Delete a document and its stored file (author or workspace owner)."""
    await services.documents.delete(doc_id, user["id"])
    return {"success": True, "message": "Document deleted successfully"}


@router.post("/{doc_id}/summarize", response_model=SummarizeResponse)
@ai_rate_limit
async def summarize_document(
    request: Request,
    doc_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    """
    Summarize a document.
    
    Content comes from the cached extracted text, then the stored file,
    then title plus description (when the description has at least 50
    characters). The result is persisted on the document.
    
    Example Response:
        {
            "success": true,
            "summary": "Quarterly results improved...",
            "points": ["Revenue must grow...", "..."],
            "keywords": ["revenue", "quarter", "growth"]
        }
    
    Status Codes:
        200: Success (LLM or heuristic)
        400: Malformed ID, empty file or no readable content
        401: Missing or invalid token
        403: No access to the document's workspace
        404: Document not found
        503: AI is required but not configured
    """
    result = await services.documents.summarize(doc_id, user["id"])
    return SummarizeResponse(summary=result.summary, points=result.points, keywords=result.keywords)
