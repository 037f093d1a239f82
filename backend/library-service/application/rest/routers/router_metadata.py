import logging
from typing import List, Optional

from application.converters.item_converter import ItemConverter
from application.rest.schemas.input.metadata_input import (
    MetadataBatchRequest,
    MetadataCreate,
    MetadataUpdate,
)
from application.rest.schemas.output.common_output import ErrorResponse
from application.rest.schemas.output.item_output import (
    HierarchyEntryResponse,
    ItemMetadataResponse,
    MetadataBatchResponse,
)
from domain.entities.file_types import FileType
from domain.services.item_service import ItemNotFoundError, ItemService
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from utils.dependencies import get_db, get_item_service

logger = logging.getLogger(__name__)

router = APIRouter()

_NOT_FOUND_RESPONSE = {
    "model": ErrorResponse,
    "description": "No item stored at this path.",
    "content": {
        "application/json": {
            "example": {"detail": "No metadata found for Pub/Coll/Dragon"}
        }
    },
}

_SAVE_RESPONSES = {
    status.HTTP_200_OK: {
        "model": ItemMetadataResponse,
        "description": "Metadata saved successfully.",
    },
    status.HTTP_400_BAD_REQUEST: {
        "model": ErrorResponse,
        "description": "Invalid path, name or category.",
        "content": {
            "application/json": {"example": {"detail": "Item path cannot be empty"}}
        },
    },
    status.HTTP_500_INTERNAL_SERVER_ERROR: {
        "model": ErrorResponse,
        "description": "Internal server error - metadata could not be saved.",
        "content": {
            "application/json": {"example": {"detail": "Failed to save metadata"}}
        },
    },
}


@router.get(
    path="/metadata",
    description="List stored metadata filtered by tag, category, text and folder.",
    response_model=List[ItemMetadataResponse],
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - metadata query failed.",
        },
    },
)
async def query_metadata(
    tag: List[str] = Query(default=[]),
    category: Optional[FileType] = Query(default=None),
    search: Optional[str] = Query(default=None),
    parent_folder: Optional[str] = Query(default=None, alias="parentFolder"),
    db: Session = Depends(get_db),
    item_service: ItemService = Depends(get_item_service),
) -> List[ItemMetadataResponse]:
    """List items matching every given filter, ordered by name.

    Args:
        tag (List[str]): Repeatable; items tagged with any of these names match.
        category (FileType, optional): Type label to keep.
        search (str, optional): Substring of the name or description.
        parent_folder (str, optional): Keep only direct children of this folder.

    Raises:
        HTTPException: 500 if internal server errors occur.
    """
    try:
        items = await item_service.query_metadata(
            db,
            tags=tag,
            category=category.value if category else None,
            search=search,
            parent_folder=parent_folder,
        )
        return ItemConverter.entities_to_responses(items)
    except Exception as e:
        logger.error(f"Failed to query metadata: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve metadata",
        ) from e


@router.post(
    path="/metadata/batch",
    description="Apply one metadata update to many items.",
    response_model=MetadataBatchResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - batch operation failed.",
        },
    },
)
async def batch_update_metadata(
    batch: MetadataBatchRequest,
    db: Session = Depends(get_db),
    item_service: ItemService = Depends(get_item_service),
) -> MetadataBatchResponse:
    """Save the same metadata on every listed item.

    Items that lack a path or name, or fail to save, are counted in
    ``errorCount`` without stopping the others.

    Raises:
        HTTPException: 500 if the batch cannot run at all.
    """
    try:
        items, updates = ItemConverter.batch_input_to_arguments(batch)
        result = await item_service.save_metadata_batch(db, items, updates)
        return ItemConverter.batch_result_to_response(result)
    except Exception as e:
        logger.error(f"Batch metadata update failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Batch operation failed",
        ) from e


@router.get(
    path="/metadata/{path:path}",
    description="Retrieve the metadata of a library file or folder.",
    response_model=ItemMetadataResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": ItemMetadataResponse,
            "description": "Metadata of the item.",
        },
        status.HTTP_404_NOT_FOUND: _NOT_FOUND_RESPONSE,
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - metadata lookup failed.",
            "content": {
                "application/json": {
                    "example": {"detail": "Failed to retrieve metadata"}
                }
            },
        },
    },
)
async def get_metadata(
    path: str,
    db: Session = Depends(get_db),
    item_service: ItemService = Depends(get_item_service),
) -> ItemMetadataResponse:
    """Get the metadata of the item at a path.

    Args:
        path (str): Item path relative to the library root.
        db (Session): Fresh database session for this request.
        item_service (ItemService): Domain service with injected repositories.

    Returns:
        ItemMetadataResponse: The item's metadata and tags.

    Raises:
        HTTPException: 404 if no item is stored at the path.
        HTTPException: 500 if internal server errors occur.
    """
    try:
        item = await item_service.get_metadata(db, path)
        return ItemConverter.entity_to_response(item)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Failed to retrieve metadata for {path}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve metadata",
        ) from e


@router.put(
    path="/metadata/{path:path}",
    description="Create or update the metadata of the item at a path.",
    response_model=ItemMetadataResponse,
    status_code=status.HTTP_200_OK,
    responses=_SAVE_RESPONSES,
)
async def update_metadata(
    path: str,
    metadata: MetadataUpdate,
    db: Session = Depends(get_db),
    item_service: ItemService = Depends(get_item_service),
) -> ItemMetadataResponse:
    """Create or update the metadata of the item at a path.

    Args:
        path (str): Item path relative to the library root.
        metadata (MetadataUpdate): New metadata; the tag list replaces the current one.
        db (Session): Fresh database session for this request.
        item_service (ItemService): Domain service with injected repositories.

    Returns:
        ItemMetadataResponse: The saved metadata.

    Raises:
        HTTPException: 400 if the input is invalid.
        HTTPException: 500 if internal server errors occur.

    Example:
        >>> body = MetadataUpdate(category="Model", tags=["32mm"])
        >>> saved = await update_metadata("Pub/Coll/Dragon", body, db, item_service)
        >>> print(saved.tags)
        ['32mm']
    """
    return await _save(db, item_service, path, metadata)


@router.post(
    path="/metadata",
    description="Create or update metadata, with the item path in the request body.",
    response_model=ItemMetadataResponse,
    status_code=status.HTTP_200_OK,
    responses=_SAVE_RESPONSES,
)
async def create_metadata(
    metadata: MetadataCreate,
    db: Session = Depends(get_db),
    item_service: ItemService = Depends(get_item_service),
) -> ItemMetadataResponse:
    """Create or update metadata for the item named in the body.

    Args:
        metadata (MetadataCreate): Metadata including the item path.
        db (Session): Fresh database session for this request.
        item_service (ItemService): Domain service with injected repositories.

    Returns:
        ItemMetadataResponse: The saved metadata.
    """
    return await _save(db, item_service, metadata.file_path, metadata)


async def _save(
    db: Session, item_service: ItemService, path: str, metadata: MetadataUpdate
) -> ItemMetadataResponse:
    try:
        item = await item_service.save_metadata(
            db, path, **ItemConverter.update_input_to_kwargs(metadata)
        )
        return ItemConverter.entity_to_response(item)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save metadata",
        ) from e


@router.get(
    path="/hierarchy/{path:path}",
    description="Retrieve the folders enclosing an item, from the root down.",
    response_model=List[HierarchyEntryResponse],
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": List[HierarchyEntryResponse],
            "description": "Ancestor chain, root first.",
        },
        status.HTTP_404_NOT_FOUND: _NOT_FOUND_RESPONSE,
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - hierarchy lookup failed.",
        },
    },
)
async def get_hierarchy(
    path: str,
    db: Session = Depends(get_db),
    item_service: ItemService = Depends(get_item_service),
) -> List[HierarchyEntryResponse]:
    """Get the ancestor chain of the item at a path.

    Raises:
        HTTPException: 404 if no item is stored at the path.
        HTTPException: 500 if internal server errors occur.
    """
    try:
        ancestors = await item_service.get_hierarchy(db, path)
        return ItemConverter.entities_to_hierarchy(ancestors)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve hierarchy",
        ) from e


@router.get(
    path="/file-types",
    description="List the distinct type labels currently stored.",
    response_model=List[str],
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - database connection failed.",
        },
    },
)
async def get_file_types(
    db: Session = Depends(get_db),
    item_service: ItemService = Depends(get_item_service),
) -> List[str]:
    try:
        return await item_service.get_all_file_types(db)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve file types",
        ) from e
