"""Association tables for many-to-many relationships in SQLAlchemy ORM.

Tables:
    item_tags: Associates library items with tags (many-to-many relationship)

Architecture:
    These association tables are part of the Infrastructure layer and are used
    by SQLAlchemy to manage many-to-many relationships automatically.
"""

from infrastructure.models.base import Base
from sqlalchemy import Column, ForeignKey, Integer, Table

item_tags = Table(
    "item_tags",
    Base.metadata,
    Column(
        "item_id",
        Integer,
        ForeignKey("items.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
    comment="Association table for many-to-many relationship between items and tags",
)
