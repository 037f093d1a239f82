"""SQLAlchemy ORM model for Tag entity.

This module contains the TagORM class that defines the database schema
for tags and handles tag data persistence.

Classes:
    TagORM: SQLAlchemy model for item tags.

Architecture:
    This ORM model is part of the Infrastructure layer and should only be used by:
    - SqlAlchemyTagRepository implementation
    - Database initialisation
    - Other infrastructure-specific code

    Domain code should use TagEntity instead of this ORM model.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from infrastructure.models.base import Base


class TagORM(Base):
    """SQLAlchemy ORM model for tags attached to library items.

    Attributes:
        id (int): Primary key, auto-incremented.
        name (str): Tag name, unique across all tags.
        items (List[ItemORM]): Many-to-many relationship with items.

    Table Schema:
        - Table name: 'tags'
        - Primary key: id (Integer)
        - Unique constraint: name

    Relationships:
        - items: Many-to-many with ItemORM through item_tags association table

    Example:
        >>> tag_orm = TagORM(name="32mm")
        >>> db.add(tag_orm)
        >>> db.commit()
        >>> print(f"Created tag: {tag_orm.id}")
    """

    __tablename__ = "tags"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Primary key, auto-incremented",
    )

    name = Column(
        String(100),
        unique=True,
        nullable=False,
        comment="Tag name, must be unique across all tags",
    )

    # Resolved by name through the item_tags association table
    items = relationship(
        "ItemORM", secondary="item_tags", back_populates="tags", lazy="select"
    )

    def __repr__(self) -> str:
        """String representation for debugging.

        Returns:
            str: Human-readable representation of the tag.
        """
        return f"<TagORM(id={self.id}, name='{self.name}')>"

    def __str__(self) -> str:
        """User-friendly string representation.

        Returns:
            str: Tag name for display purposes.
        """
        return self.name
