import logging
from typing import List, Optional

from application.rest.schemas.input.search_input import SearchRequest
from application.rest.schemas.output.common_output import ErrorResponse
from application.rest.schemas.output.search_output import SearchHitResponse
from domain.entities.file_types import FileType
from domain.entities.search import SearchCriteria
from domain.services.search_service import SearchError, SearchService
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from utils.dependencies import get_db, get_search_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    path="/search",
    description="Hierarchical search across the library with tag inheritance. "
    "Text, tags and file type are combined with AND; results are collapsed "
    "to their enclosing Model folders.",
    response_model=List[SearchHitResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": List[SearchHitResponse],
            "description": "Matching items in discovery order.",
        },
        422: {
            "description": "Invalid fileType value.",
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - a store lookup failed.",
            "content": {
                "application/json": {"example": {"detail": "Search failed"}}
            },
        },
    },
)
async def search_library(
    query: Optional[str] = Query(default=None, description="Free-text query"),
    tags: List[str] = Query(default=[], description="Required tag, repeatable"),
    tag: List[str] = Query(default=[], description="Alias of tags, repeatable"),
    file_type: Optional[FileType] = Query(
        default=None, alias="fileType", description="Required type label"
    ),
    db: Session = Depends(get_db),
    search_service: SearchService = Depends(get_search_service),
) -> List[SearchHitResponse]:
    """Search the library by text, tags and file type.

    Args:
        query (Optional[str]): Case-insensitive substring of name, description or notes.
        tags (List[str]): Tags that must all apply, directly or through a tagged folder.
        tag (List[str]): Same as tags; both lists are merged.
        file_type (Optional[FileType]): Type label results must have.
        db (Session): Fresh database session for this request.
        search_service (SearchService): Domain service with injected repositories.

    Returns:
        List[SearchHitResponse]: Presentable results; empty if no criteria given.

    Raises:
        HTTPException: 500 if the search fails.

    Example:
        >>> hits = await search_library(tags=["32mm"], db=db, search_service=service)
        >>> print([hit.path for hit in hits])
        ['Pub/Coll/Dragon']
    """
    request = SearchRequest(query=query, tags=tags + tag, file_type=file_type)

    if not request.has_search_criteria():
        return []

    try:
        criteria = SearchCriteria.from_search_request(request)
        result = await search_service.search(db, criteria)
    except SearchError as e:
        logger.error(f"Search request failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Search failed",
        ) from e

    return [SearchHitResponse.from_entity(hit) for hit in result.hits]
