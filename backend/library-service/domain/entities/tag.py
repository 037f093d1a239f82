"""Tag domain entity.

This module contains the Tag domain entity that represents
a tag label attached to library items.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TagEntity:
    """Domain entity representing a tag.

    Tags are deduplicated labels. A tag is created lazily the first time an
    item is tagged with an unseen name and is shared by every item that
    carries the same name.

    Attributes:
        id (Optional[int]): Unique identifier for the tag. None for new tags.
        name (str): The display name of the tag.

    Example:
        >>> tag = TagEntity(id=None, name="32mm")
        >>> print(tag.name)
        "32mm"

    Business Rules:
        - Tag name must be non-empty and stripped of whitespace
        - Tag names are unique (enforced at repository level)
        - A tag is never deleted while an item references it
    """

    id: Optional[int]
    name: str

    def __post_init__(self) -> None:
        """Validate tag entity after initialization.

        Raises:
            ValueError: If tag name is empty or contains only whitespace.
        """
        if not self.name or not self.name.strip():
            raise ValueError("Tag name cannot be empty or whitespace")

        object.__setattr__(self, "name", self.name.strip())

    def is_new(self) -> bool:
        """Check if this is a new tag (not yet persisted).

        Returns:
            bool: True if the tag has no ID (new), False otherwise.
        """
        return self.id is None

    def with_id(self, tag_id: int) -> "TagEntity":
        """Create a new TagEntity with the specified ID.

        Args:
            tag_id (int): The identifier assigned by the store.

        Returns:
            TagEntity: A new TagEntity instance with the specified ID.
        """
        return TagEntity(id=tag_id, name=self.name)
