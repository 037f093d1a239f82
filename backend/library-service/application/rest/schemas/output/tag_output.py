"""Tag output schemas for API responses.

This module contains Pydantic models for tag-related API responses.
"""

from pydantic import BaseModel


class TagResponse(BaseModel):
    """Schema for tag data in API responses.

    Attributes:
        id (int): Identifier of the tag.
        name (str): The name of the tag.

    Example:
        >>> tag_response = TagResponse(id=1, name="32mm")
    """

    id: int
    name: str
