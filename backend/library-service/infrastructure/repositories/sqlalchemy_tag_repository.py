"""SQLAlchemy implementation of the tag repository.

This module contains the concrete implementation of TagRepositoryInterface
using SQLAlchemy for database operations and entity mapping.
"""

from typing import List, Optional

from domain.entities.file_types import FileType
from domain.entities.item import Item
from domain.entities.tag import TagEntity
from domain.repositories.tag_repository import TagRepositoryInterface
from sqlalchemy import func
from sqlalchemy.orm import Session

from infrastructure.models.associations import item_tags
from infrastructure.models.item_orm import ItemORM
from infrastructure.models.tag_orm import TagORM


class SqlAlchemyTagRepository(TagRepositoryInterface):
    """SQLAlchemy implementation of the tag repository.

    This class implements the TagRepositoryInterface using SQLAlchemy
    for database operations. It handles the conversion between domain
    entities and SQLAlchemy models.

    NOTE: This repository does not store the session internally.
    Each method receives a fresh session to ensure proper transaction management
    and avoid session leaks.

    Example:
        >>> repository = SqlAlchemyTagRepository()
        >>> with get_db_session() as db:
        ...     items = await repository.find_items_directly_tagged(db, "32mm")
        ...     print([item.path for item in items])
        ['Pub/Coll/Dragon']
    """

    async def get_all(self, db_session: Session) -> List[TagEntity]:
        """Retrieve all tags from the database.

        Args:
            db_session (Session): Fresh SQLAlchemy database session for this operation.

        Returns:
            List[TagEntity]: List of all available tag entities.
        """
        tag_models = db_session.query(TagORM).order_by(TagORM.id).all()
        return [self._model_to_entity(model) for model in tag_models]

    async def get_by_id(self, db_session: Session, tag_id: int) -> Optional[TagEntity]:
        tag_model = db_session.query(TagORM).filter(TagORM.id == tag_id).first()
        return self._model_to_entity(tag_model) if tag_model else None

    async def get_by_name(self, db_session: Session, name: str) -> Optional[TagEntity]:
        """Retrieve a tag by its name (case-insensitive).

        Args:
            db_session (Session): Fresh SQLAlchemy database session for this operation.
            name (str): The name of the tag to retrieve.

        Returns:
            Optional[TagEntity]: The tag entity if found, None otherwise.
        """
        tag_model = (
            db_session.query(TagORM)
            .filter(func.lower(TagORM.name) == name.strip().lower())
            .first()
        )
        return self._model_to_entity(tag_model) if tag_model else None

    async def get_or_create(self, db_session: Session, name: str) -> TagEntity:
        return self._model_to_entity(self._get_or_create_model(db_session, name))

    async def save(self, db_session: Session, tag: TagEntity) -> TagEntity:
        """Save a tag entity to the database.

        For new tags (id is None), this will create a new record.
        For existing tags, this will update the existing record.

        Args:
            db_session (Session): Fresh SQLAlchemy database session for this operation.
            tag (TagEntity): The tag entity to save.

        Returns:
            TagEntity: The saved tag entity with populated ID.
        """
        if tag.is_new():
            tag_model = TagORM(name=tag.name)
            db_session.add(tag_model)
            db_session.flush()  # Flush to get the generated ID
            return self._model_to_entity(tag_model)

        tag_model = db_session.query(TagORM).filter(TagORM.id == tag.id).first()
        if tag_model:
            tag_model.name = tag.name
        else:
            tag_model = TagORM(id=tag.id, name=tag.name)
            db_session.add(tag_model)
        db_session.flush()
        return self._model_to_entity(tag_model)

    async def delete(self, db_session: Session, tag_id: int) -> bool:
        tag_model = db_session.query(TagORM).filter(TagORM.id == tag_id).first()
        if tag_model:
            db_session.delete(tag_model)
            db_session.flush()
            return True
        return False

    async def count_usages(self, db_session: Session, tag_id: int) -> int:
        return (
            db_session.query(func.count(item_tags.c.item_id))
            .filter(item_tags.c.tag_id == tag_id)
            .scalar()
            or 0
        )

    async def set_item_tags(
        self, db_session: Session, item_id: int, names: List[str]
    ) -> List[str]:
        """Replace the set of tags directly attached to an item.

        Args:
            db_session (Session): Fresh SQLAlchemy database session for this operation.
            item_id (int): Identity of the item.
            names (List[str]): Tag names to attach; blanks are skipped.

        Returns:
            List[str]: The item's tag names after the update.
        """
        item_model = db_session.query(ItemORM).filter(ItemORM.id == item_id).first()
        if item_model is None:
            raise ValueError(f"Item with ID {item_id} not found")

        tag_models = []
        seen = set()
        for name in names:
            tag_name = (name or "").strip()
            if not tag_name or tag_name in seen:
                continue
            seen.add(tag_name)
            tag_models.append(self._get_or_create_model(db_session, tag_name))

        item_model.tags = tag_models
        db_session.flush()
        return sorted(tag.name for tag in tag_models)

    async def find_items_directly_tagged(
        self, db_session: Session, name: str
    ) -> List[Item]:
        item_models = (
            db_session.query(ItemORM)
            .join(item_tags, ItemORM.id == item_tags.c.item_id)
            .join(TagORM, TagORM.id == item_tags.c.tag_id)
            .filter(TagORM.name == name)
            .order_by(ItemORM.id)
            .all()
        )
        return [self._item_model_to_entity(model) for model in item_models]

    def _get_or_create_model(self, db_session: Session, name: str) -> TagORM:
        tag_model = db_session.query(TagORM).filter(TagORM.name == name).first()
        if tag_model is None:
            tag_model = TagORM(name=name)
            db_session.add(tag_model)
            db_session.flush()
        return tag_model

    def _model_to_entity(self, tag_model: TagORM) -> TagEntity:
        """Convert SQLAlchemy model to domain entity.

        Args:
            tag_model (TagORM): SQLAlchemy tag model instance.

        Returns:
            TagEntity: Corresponding domain entity.
        """
        return TagEntity(id=tag_model.id, name=tag_model.name)

    def _item_model_to_entity(self, item_model: ItemORM) -> Item:
        try:
            item_type = FileType(item_model.item_type or FileType.UNKNOWN.value)
        except ValueError:
            item_type = FileType.UNKNOWN
        return Item(
            id=item_model.id,
            path=item_model.path,
            name=item_model.name,
            type=item_type,
            parent_id=item_model.parent_id,
        )
