"""Search output schemas for the model library.

This module contains Pydantic models for search response output serialization.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from domain.entities.search import SearchHit


class SearchHitResponse(BaseModel):
    """Response model for one search result.

    Folder results carry ``itemCount`` and ``previewPath``; file results carry
    ``extension``, ``size`` and ``modified``. Keys that do not apply are left
    out of the serialized response.

    Attributes:
        name: Display name of the item
        path: Item path relative to the library root
        type: "folder" or "file"
        item_count: Number of direct children (folders only)
        preview_path: First image inside the folder (folders only)
        extension: File extension (files only)
        size: File size in bytes (files only)
        modified: Last modification time (files only)
        match_reason: Which criteria this result matched
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    path: str
    type: Literal["folder", "file"]
    item_count: Optional[int] = None
    preview_path: Optional[str] = None
    extension: Optional[str] = None
    size: Optional[int] = None
    modified: Optional[datetime] = None
    match_reason: str = ""

    @classmethod
    def from_entity(cls, hit: SearchHit) -> SearchHitResponse:
        """Convert a domain SearchHit to its API representation.

        Args:
            hit: Domain search hit.

        Returns:
            SearchHitResponse: The result record as returned to clients.
        """
        if hit.is_folder():
            return cls(
                name=hit.name,
                path=hit.path,
                type="folder",
                item_count=hit.item_count or 0,
                preview_path=hit.preview_path,
                match_reason=hit.match_reason,
            )

        return cls(
            name=hit.name,
            path=hit.path,
            type="file",
            extension=hit.extension or "",
            size=hit.size or 0,
            modified=hit.modified,
            match_reason=hit.match_reason,
        )
