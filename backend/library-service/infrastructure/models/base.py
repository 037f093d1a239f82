"""Declarative base shared by the library ORM models.

``Base.metadata`` holds the ``items``, ``tags`` and ``item_tags`` tables once
their modules are imported; ``utils.dependencies.init_db`` creates them.
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
