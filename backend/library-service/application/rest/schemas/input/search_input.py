"""Search input schemas for the model library.

This module contains Pydantic models for search request input validation.
"""

from typing import List, Optional

from domain.entities.file_types import FileType
from pydantic import BaseModel, Field, field_validator


class SearchRequest(BaseModel):
    """Pydantic model for search request input.

    Every field is optional; a request with no usable criterion is valid and
    simply produces no results.

    Attributes:
        query: Free-text query matched against name, description and notes
        tags: Tag names an item must carry, directly or inherited
        file_type: Type label an item must have, one of the fixed labels
    """

    query: Optional[str] = Field(
        default=None, description="Case-insensitive substring to search for"
    )

    tags: List[str] = Field(
        default_factory=list, description="Tag names that must all apply"
    )

    file_type: Optional[FileType] = Field(
        default=None, description="Type label results must have"
    )

    @field_validator("query")
    @classmethod
    def validate_query(cls, v):
        """Treat an empty query as absent; any other text is matched literally."""
        return v or None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        """Drop blank tag names and surrounding whitespace."""
        return [tag.strip() for tag in v if tag and tag.strip()]

    def has_search_criteria(self) -> bool:
        """Check if the request has any search criteria.

        Returns:
            True if a query, tags or a file type are provided, False otherwise
        """
        return bool(self.query) or bool(self.tags) or self.file_type is not None
