"""SQLAlchemy ORM model for Item entity.

This module contains the ItemORM class that defines the database schema
for library files and folders and their parent/child hierarchy.

Classes:
    ItemORM: SQLAlchemy model for items with metadata and relationships.

Architecture:
    This ORM model is part of the Infrastructure layer and should only be used by:
    - SqlAlchemyItemRepository / SqlAlchemyTagRepository implementations
    - Database initialisation
    - Tests that seed the store directly

    Domain code should use the Item entity instead of this ORM model.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from infrastructure.models.base import Base


class ItemORM(Base):
    """SQLAlchemy ORM model for files and folders of the model library.

    Attributes:
        id (int): Primary key, auto-incremented.
        path (str): Unique path relative to the library root.
        name (str): Display name.
        item_type (str): Classification label (Model, STL File, ...).
        parent_id (int): Foreign key to the enclosing folder's row.
        description (str): Free-text description.
        date_added (datetime): Timestamp when the item was first recorded.
        last_modified (datetime): Timestamp when the metadata last changed.
        resin (str): Resin used for printing.
        layer_height (float): Layer height in millimetres.
        supports_needed (bool): Whether supports are required.
        notes (str): Free-text notes.
        print_settings (str): JSON object with numeric print parameters.
        parent (ItemORM): Many-to-one relationship to the enclosing folder.
        children (List[ItemORM]): One-to-many relationship to contained items.
        tags (List[TagORM]): Many-to-many relationship with tags.

    Table Schema:
        - Table name: 'items'
        - Primary key: id (Integer)
        - Unique constraint: path
        - Foreign key: parent_id -> items.id (ON DELETE CASCADE)
        - Indexes: path, parent_id, item_type

    Example:
        >>> folder = ItemORM(path="Pub/Coll/Dragon", name="Dragon", item_type="Model")
        >>> db.add(folder)
        >>> db.commit()
    """

    __tablename__ = "items"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Primary key, auto-incremented",
    )

    path = Column(
        String(1024),
        unique=True,
        nullable=False,
        index=True,
        comment="Path relative to the library root, unique across items",
    )

    name = Column(String(255), nullable=False, comment="Display name")

    item_type = Column(
        String(50),
        nullable=True,
        index=True,
        comment="Classification label: Publisher, Collection, Model, STL File, ...",
    )

    # Reference to the enclosing folder
    parent_id = Column(
        Integer,
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        comment="Enclosing folder item, NULL for root-level items",
    )

    description = Column(Text, nullable=True, comment="Free-text description")

    date_added = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        comment="Timestamp when the item was first recorded",
    )

    last_modified = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        comment="Timestamp when the metadata last changed",
    )

    # Print settings
    resin = Column(String(255), nullable=True, comment="Resin used for printing")
    layer_height = Column(Float, nullable=True, comment="Layer height in mm")
    supports_needed = Column(
        Boolean, default=False, nullable=False, comment="Whether supports are needed"
    )
    notes = Column(Text, nullable=True, comment="Free-text notes")
    print_settings = Column(
        Text, nullable=True, comment="JSON object with numeric print parameters"
    )

    parent = relationship(
        "ItemORM", remote_side=[id], back_populates="children", lazy="select"
    )
    children = relationship(
        "ItemORM",
        back_populates="parent",
        passive_deletes=True,
        lazy="select",
    )

    # Resolved by name through the item_tags association table
    tags = relationship(
        "TagORM", secondary="item_tags", back_populates="items", lazy="select"
    )

    def __repr__(self) -> str:
        """String representation for debugging.

        Returns:
            str: Human-readable representation of the item.
        """
        return (
            f"<ItemORM(id={self.id}, path='{self.path}', type='{self.item_type}', "
            f"parent_id={self.parent_id})>"
        )

    def __str__(self) -> str:
        return self.path
