"""Item output schemas for API responses.

This module contains Pydantic models for the metadata of library files and
folders and for their ancestor chain. Responses use camelCase keys.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from domain.entities.item import BatchSaveResult, Item, PrintSettings


class PrintSettingsResponse(BaseModel):
    """Schema for structured print parameters in API responses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    exposure_time: Optional[float] = None
    bottom_exposure_time: Optional[float] = None
    bottom_layers: Optional[int] = None
    lift_height: Optional[float] = None
    lift_speed: Optional[float] = None

    @classmethod
    def from_entity(cls, settings: PrintSettings) -> PrintSettingsResponse:
        return cls(**settings.to_dict())


class ItemMetadataResponse(BaseModel):
    """Schema for the metadata of one library item.

    Attributes:
        id (int): Identifier of the item.
        file_path (str): Path relative to the library root.
        file_name (str): Display name.
        file_type (str): Type label.
        parent_folder_id (int, optional): Identifier of the enclosing folder.
        description (str, optional): Free-text description.
        date_added (datetime, optional): When the item was first recorded.
        last_modified (datetime, optional): When the metadata last changed.
        tags (List[str]): Tags attached directly to the item.
        resin (str, optional): Resin used for printing.
        layer_height (float, optional): Layer height in millimetres.
        supports_needed (bool): Whether supports are needed.
        notes (str, optional): Free-text notes.
        print_settings (PrintSettingsResponse, optional): Print parameters.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    file_path: str
    file_name: str
    file_type: str
    parent_folder_id: Optional[int] = None
    description: Optional[str] = None
    date_added: Optional[datetime] = None
    last_modified: Optional[datetime] = None
    tags: List[str] = []
    resin: Optional[str] = None
    layer_height: Optional[float] = None
    supports_needed: bool = False
    notes: Optional[str] = None
    print_settings: Optional[PrintSettingsResponse] = None

    @classmethod
    def from_entity(cls, item: Item) -> ItemMetadataResponse:
        """Create ItemMetadataResponse from an Item domain entity."""
        return cls(
            id=item.id,
            file_path=item.path,
            file_name=item.name,
            file_type=item.type.value,
            parent_folder_id=item.parent_id,
            description=item.description,
            date_added=item.date_added,
            last_modified=item.last_modified,
            tags=list(item.tags),
            resin=item.resin,
            layer_height=item.layer_height,
            supports_needed=item.supports_needed,
            notes=item.notes,
            print_settings=(
                PrintSettingsResponse.from_entity(item.print_settings)
                if item.print_settings
                else None
            ),
        )


class HierarchyEntryResponse(BaseModel):
    """Schema for one folder in an item's ancestor chain."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    path: str
    file_type: str


class MetadataBatchResponse(BaseModel):
    """Schema for the outcome of a batch metadata update.

    Attributes:
        success (bool): Whether the batch itself ran; individual items may
            still have failed.
        total_processed (int): Number of items in the request.
        success_count (int): Items saved.
        error_count (int): Items skipped.
        failed_paths (List[str]): Paths of the skipped items, when known.
        message (str): Human-readable summary.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    total_processed: int
    success_count: int
    error_count: int
    failed_paths: List[str] = []
    message: str

    @classmethod
    def from_entity(cls, result: BatchSaveResult) -> MetadataBatchResponse:
        return cls(
            total_processed=result.total_processed,
            success_count=result.success_count,
            error_count=result.error_count,
            failed_paths=result.failed_paths,
            message=(
                f"Processed {result.success_count} items successfully, "
                f"{result.error_count} items failed"
            ),
        )
