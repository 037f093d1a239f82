"""Tag repository interface.

This module defines the abstract interface for the tag store: the
deduplicated tag names and their many-to-many association with items.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy.orm import Session

from ..entities.item import Item
from ..entities.tag import TagEntity


class TagRepositoryInterface(ABC):
    """Abstract interface for tag repository operations.

    This interface defines the contract for tag data access
    without coupling to specific database implementations.

    NOTE: All methods receive a fresh database session to ensure
    proper transaction management and avoid session leaks.
    """

    @abstractmethod
    async def get_all(self, db_session: Session) -> List[TagEntity]:
        """Retrieve all tags from the repository.

        Args:
            db_session (Session): Fresh database session for this operation.

        Returns:
            List[TagEntity]: List of all available tag entities.
        """
        pass

    @abstractmethod
    async def get_by_id(self, db_session: Session, tag_id: int) -> Optional[TagEntity]:
        """Retrieve a tag by its unique identifier.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_id (int): The unique identifier of the tag to retrieve.

        Returns:
            Optional[TagEntity]: The tag entity if found, None otherwise.
        """
        pass

    @abstractmethod
    async def get_by_name(self, db_session: Session, name: str) -> Optional[TagEntity]:
        """Retrieve a tag by its name.

        Args:
            db_session (Session): Fresh database session for this operation.
            name (str): The name of the tag to retrieve.

        Returns:
            Optional[TagEntity]: The tag entity if found, None otherwise.
        """
        pass

    @abstractmethod
    async def get_or_create(self, db_session: Session, name: str) -> TagEntity:
        """Retrieve a tag by exact name, creating it when unseen.

        Args:
            db_session (Session): Fresh database session for this operation.
            name (str): The tag name.

        Returns:
            TagEntity: The existing or newly created tag.
        """
        pass

    @abstractmethod
    async def save(self, db_session: Session, tag: TagEntity) -> TagEntity:
        """Save a tag entity to the repository.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag (TagEntity): The tag entity to save.

        Returns:
            TagEntity: The saved tag entity with populated ID.
        """
        pass

    @abstractmethod
    async def delete(self, db_session: Session, tag_id: int) -> bool:
        """Delete a tag from the repository.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_id (int): The unique identifier of the tag to delete.

        Returns:
            bool: True if the tag was deleted, False if not found.
        """
        pass

    @abstractmethod
    async def count_usages(self, db_session: Session, tag_id: int) -> int:
        """Count the items directly associated with a tag.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_id (int): The unique identifier of the tag.

        Returns:
            int: Number of item associations.
        """
        pass

    @abstractmethod
    async def set_item_tags(
        self, db_session: Session, item_id: int, names: List[str]
    ) -> List[str]:
        """Replace the set of tags directly attached to an item.

        Unseen names create new tags. Repeated names collapse to a single
        association.

        Args:
            db_session (Session): Fresh database session for this operation.
            item_id (int): Identity of the item.
            names (List[str]): Tag names to attach.

        Returns:
            List[str]: The item's tag names after the update.
        """
        pass

    @abstractmethod
    async def find_items_directly_tagged(
        self, db_session: Session, name: str
    ) -> List[Item]:
        """Retrieve the items that carry a tag directly (no inheritance).

        Args:
            db_session (Session): Fresh database session for this operation.
            name (str): Exact tag name.

        Returns:
            List[Item]: Directly tagged items, empty for unknown tags.
        """
        pass
