"""Tag domain service.

This module contains the TagService that implements business logic
for tag operations, orchestrating between entities and repositories.
"""

import logging
from typing import List

from domain.entities.tag import TagEntity
from domain.repositories.tag_repository import TagRepositoryInterface
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class TagService:
    """Domain service for tag business operations.

    This service contains the business logic for tag operations,
    coordinating between domain entities and repository interfaces.
    Tags are normally created lazily when items are tagged; this service
    covers explicit management of the tag vocabulary.

    Attributes:
        _tag_repository (TagRepositoryInterface): Repository for tag data access.

    Example:
        >>> service = TagService(tag_repository)
        >>> with get_db_session() as db:
        ...     tags = await service.get_all_tags(db)
        ...     print(len(tags))
        5
    """

    def __init__(self, tag_repository: TagRepositoryInterface) -> None:
        """Initialize the tag service with required dependencies.

        Args:
            tag_repository (TagRepositoryInterface): Repository implementation for tag data access.
        """
        self._tag_repository = tag_repository

    async def get_all_tags(self, db_session: Session) -> List[TagEntity]:
        """Retrieve all available tags.

        Args:
            db_session (Session): Fresh database session for this operation.

        Returns:
            List[TagEntity]: List of all available tag entities sorted by name.

        Example:
            >>> with get_db_session() as db:
            ...     tags = await service.get_all_tags(db)
            ...     print([tag.name for tag in tags])
            ['28mm', '32mm', 'dragon']
        """
        tags = await self._tag_repository.get_all(db_session)
        return sorted(tags, key=lambda tag: tag.name.lower())

    async def get_tag_by_id(self, db_session: Session, tag_id: int) -> TagEntity:
        """Retrieve a tag by its identifier.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_id (int): The identifier of the tag to retrieve.

        Returns:
            TagEntity: The requested tag entity.

        Raises:
            TagNotFoundError: If the tag with the specified ID does not exist.
        """
        tag = await self._tag_repository.get_by_id(db_session, tag_id)
        if not tag:
            raise TagNotFoundError(f"Tag with ID {tag_id} not found")
        return tag

    async def create_tag(self, db_session: Session, name: str) -> TagEntity:
        """Create a new tag with the specified name.

        Args:
            db_session (Session): Fresh database session for this operation.
            name (str): The name for the new tag.

        Returns:
            TagEntity: The created tag entity with assigned ID.

        Raises:
            TagAlreadyExistsError: If a tag with the same name already exists.
            ValueError: If the tag name is invalid.

        Example:
            >>> with get_db_session() as db:
            ...     tag = await service.create_tag(db, "32mm")
            ...     print(tag.id)
            1
        """
        # Validation happens in the entity constructor
        new_tag = TagEntity(id=None, name=name)

        # Tag names are unique regardless of case
        existing_tag = await self._tag_repository.get_by_name(db_session, new_tag.name)
        if existing_tag:
            raise TagAlreadyExistsError(f"Tag with name '{new_tag.name}' already exists")

        try:
            created = await self._tag_repository.save(db_session, new_tag)
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

        logger.info(f"Created tag '{created.name}' with ID {created.id}")
        return created

    async def delete_tag(self, db_session: Session, tag_id: int) -> bool:
        """Delete a tag that no item references.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_id (int): The identifier of the tag to delete.

        Returns:
            bool: True if the tag was deleted, False if not found.

        Raises:
            TagInUseError: If at least one item still carries the tag.
        """
        usages = await self._tag_repository.count_usages(db_session, tag_id)
        if usages:
            raise TagInUseError(f"Tag with ID {tag_id} is used by {usages} items")

        try:
            deleted = await self._tag_repository.delete(db_session, tag_id)
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

        if deleted:
            logger.info(f"Deleted tag with ID {tag_id}")
        return deleted


class TagNotFoundError(Exception):
    """Exception raised when a requested tag is not found."""

    pass


class TagAlreadyExistsError(Exception):
    """Exception raised when trying to create a tag that already exists."""

    pass


class TagInUseError(Exception):
    """Exception raised when deleting a tag that items still reference."""

    pass
