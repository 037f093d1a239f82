import logging
from typing import List

from application.converters.tag_converter import TagConverter
from application.rest.schemas.input.tag_input import TagCreate
from application.rest.schemas.output.common_output import ErrorResponse
from application.rest.schemas.output.tag_output import TagResponse
from domain.services.tag_service import (
    TagAlreadyExistsError,
    TagInUseError,
    TagNotFoundError,
    TagService,
)
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from utils.dependencies import get_db, get_tag_service

logger = logging.getLogger(__name__)

router = APIRouter()

# Checked in order; the first matching class decides the status code.
_ERROR_STATUS = (
    (TagNotFoundError, status.HTTP_404_NOT_FOUND),
    (TagInUseError, status.HTTP_409_CONFLICT),
    (TagAlreadyExistsError, status.HTTP_400_BAD_REQUEST),
    (ValueError, status.HTTP_400_BAD_REQUEST),
)


def _error(description: str) -> dict:
    return {"model": ErrorResponse, "description": description}


def _http_error(e: Exception, action: str) -> HTTPException:
    """Map a tag service exception to the HTTP error returned for it."""
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(e, error_type):
            return HTTPException(status_code=status_code, detail=str(e))
    logger.error(f"Failed to {action}: {str(e)}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}",
    )


@router.get(
    path="/tags",
    description="Retrieve all known tags, sorted by name.",
    response_model=List[TagResponse],
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: _error("Tag lookup failed.")},
)
async def get_tags(
    db: Session = Depends(get_db), tag_service: TagService = Depends(get_tag_service)
) -> List[TagResponse]:
    try:
        return TagConverter.entities_to_responses(await tag_service.get_all_tags(db))
    except Exception as e:
        raise _http_error(e, "retrieve tags") from e


@router.post(
    path="/tags",
    description="Create a tag before any item carries it.",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: _error("Blank name, or the name is taken."),
        status.HTTP_500_INTERNAL_SERVER_ERROR: _error("Tag creation failed."),
    },
)
async def create_tag(
    tag_create: TagCreate,
    db: Session = Depends(get_db),
    tag_service: TagService = Depends(get_tag_service),
) -> TagResponse:
    """Create a tag.

    Names are unique ignoring case, so "32MM" is rejected once "32mm" exists.
    """
    try:
        created = await tag_service.create_tag(db, tag_create.name)
        return TagConverter.entity_to_response(created)
    except Exception as e:
        raise _http_error(e, "create tag") from e


@router.get(
    path="/tags/{tag_id}",
    response_model=TagResponse,
    responses={
        status.HTTP_404_NOT_FOUND: _error("Tag not found."),
        status.HTTP_500_INTERNAL_SERVER_ERROR: _error("Tag lookup failed."),
    },
)
async def get_tag_by_id(
    tag_id: int,
    db: Session = Depends(get_db),
    tag_service: TagService = Depends(get_tag_service),
) -> TagResponse:
    try:
        return TagConverter.entity_to_response(
            await tag_service.get_tag_by_id(db, tag_id)
        )
    except Exception as e:
        raise _http_error(e, "retrieve tag") from e


@router.delete(
    path="/tags/{tag_id}",
    description="Delete a tag that no item carries.",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        status.HTTP_404_NOT_FOUND: _error("Tag not found."),
        status.HTTP_409_CONFLICT: _error("Items still carry the tag."),
        status.HTTP_500_INTERNAL_SERVER_ERROR: _error("Tag deletion failed."),
    },
)
async def delete_tag(
    tag_id: int,
    db: Session = Depends(get_db),
    tag_service: TagService = Depends(get_tag_service),
) -> None:
    try:
        deleted = await tag_service.delete_tag(db, tag_id)
    except Exception as e:
        raise _http_error(e, "delete tag") from e

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tag with ID {tag_id} not found",
        )
