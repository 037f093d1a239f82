"""Metadata input schemas for API requests.

This module contains Pydantic models for creating and updating the
metadata of library files and folders. Field names are accepted in
camelCase as sent by the library frontend, or in snake_case.
"""

from datetime import datetime
from typing import List, Optional

from domain.entities.file_types import FileType
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PrintSettingsInput(BaseModel):
    """Schema for the structured print parameters of an item.

    Example:
        >>> settings = PrintSettingsInput(exposureTime=2.5, bottomLayers=6)
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    exposure_time: Optional[float] = Field(default=None, ge=0)
    bottom_exposure_time: Optional[float] = Field(default=None, ge=0)
    bottom_layers: Optional[int] = Field(default=None, ge=0)
    lift_height: Optional[float] = Field(default=None, ge=0)
    lift_speed: Optional[float] = Field(default=None, ge=0)


class MetadataUpdate(BaseModel):
    """Schema for updating the metadata of the item at a known path.

    Omitted optional fields are stored as empty; the tag list replaces the
    item's current tags.

    Attributes:
        file_name (str, optional): Display name, defaults to the last path segment.
        category (FileType, optional): Type label, inferred from the path when omitted.
        is_directory (bool): Whether the item is a folder, used for type inference.
        description (str, optional): Free-text description.
        tags (List[str]): Tag names to attach.
        resin (str, optional): Resin used for printing.
        layer_height (float, optional): Layer height in millimetres.
        supports_needed (bool): Whether supports are needed.
        notes (str, optional): Free-text notes.
        print_settings (PrintSettingsInput, optional): Structured print parameters.

    Example:
        >>> update = MetadataUpdate(fileName="Dragon", category="Model", tags=["32mm"])
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_name: Optional[str] = Field(default=None, max_length=255)
    category: Optional[FileType] = Field(
        default=None, validation_alias=AliasChoices("category", "fileType")
    )
    is_directory: bool = False
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    resin: Optional[str] = None
    layer_height: Optional[float] = Field(default=None, gt=0)
    supports_needed: bool = False
    notes: Optional[str] = None
    print_settings: Optional[PrintSettingsInput] = None
    date_added: Optional[datetime] = None
    last_modified: Optional[datetime] = None

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v):
        """Accept a missing tag list as empty."""
        return v if isinstance(v, list) else []


class MetadataCreate(MetadataUpdate):
    """Schema for creating or updating metadata with the path in the body.

    Example:
        >>> create = MetadataCreate(filePath="Pub/Coll/Dragon", category="Model")
    """

    file_path: str = Field(..., min_length=1)


class BatchItemInput(BaseModel):
    """One target of a batch update.

    Entries missing a path or name are accepted here and counted as failed
    by the batch operation.
    """

    path: Optional[str] = None
    name: Optional[str] = None


class MetadataBatchRequest(BaseModel):
    """Schema for applying one metadata update to many items.

    Attributes:
        items (List[BatchItemInput]): Items to update, each with a path and name.
        updates (MetadataUpdate): Metadata applied to every item. The item's
            own name always wins over ``updates.file_name``.

    Example:
        >>> batch = MetadataBatchRequest(
        ...     items=[{"path": "Pub/Coll/Dragon", "name": "Dragon"}],
        ...     updates={"category": "Model", "tags": ["32mm"]},
        ... )
    """

    items: List[BatchItemInput]
    updates: MetadataUpdate
