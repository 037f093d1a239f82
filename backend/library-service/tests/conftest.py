"""Shared fixtures for library-service tests.

Every test gets its own in-memory SQLite database seeded with a small
library tree:

    Pub                                   Publisher
    Pub/Coll                              Collection   tagged "fantasy"
    Pub/Coll/Dragon                       Model        tagged "32mm"
    Pub/Coll/Dragon/body.stl              STL File
    Pub/Coll/Dragon/head.stl              STL File
    Pub/Coll/Dragon/Supported             Variant
    Pub/Coll/Dragon/Supported/body_supported.stl
    Pub/Coll/Dragon/Supported/render.png  Image
    Pub/Coll/Dragon/dragon.png            Image
    Pub/Coll/Goblin                       Model
    Pub/Coll/Goblin/goblin.lys            Slicer File
    Pub/readme.pdf                        Document
"""

import pytest
from domain.entities.file_types import FileType
from fastapi.testclient import TestClient
from infrastructure.models.base import Base
from infrastructure.models.item_orm import ItemORM
from infrastructure.models.tag_orm import TagORM
from infrastructure.repositories.sqlalchemy_item_repository import (
    SqlAlchemyItemRepository,
)
from infrastructure.repositories.sqlalchemy_tag_repository import (
    SqlAlchemyTagRepository,
)
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from utils.dependencies import enable_sqlite_foreign_keys, get_db

LIBRARY_TREE = [
    ("Pub", FileType.PUBLISHER, {}),
    ("Pub/Coll", FileType.COLLECTION, {}),
    ("Pub/Coll/Dragon", FileType.MODEL, {"description": "Red dragon with wings"}),
    ("Pub/Coll/Dragon/body.stl", FileType.STL, {}),
    ("Pub/Coll/Dragon/head.stl", FileType.STL, {}),
    ("Pub/Coll/Dragon/Supported", FileType.VARIANT, {}),
    ("Pub/Coll/Dragon/Supported/body_supported.stl", FileType.STL, {}),
    ("Pub/Coll/Dragon/Supported/render.png", FileType.IMAGE, {}),
    ("Pub/Coll/Dragon/dragon.png", FileType.IMAGE, {}),
    (
        "Pub/Coll/Goblin",
        FileType.MODEL,
        {"description": "Goblin pack 102", "notes": "Scaled to 100%"},
    ),
    ("Pub/Coll/Goblin/goblin.lys", FileType.SLICER, {}),
    ("Pub/readme.pdf", FileType.DOCUMENT, {"description": "Read me first"}),
]

LIBRARY_TAGS = {"Pub/Coll/Dragon": ["32mm"], "Pub/Coll": ["fantasy"]}


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


def add_item(session, path, item_type, **fields):
    """Insert one item below its already stored parent."""
    parent_path = path.rsplit("/", 1)[0] if "/" in path else None
    parent = (
        session.query(ItemORM).filter(ItemORM.path == parent_path).first()
        if parent_path
        else None
    )
    item = ItemORM(
        path=path,
        name=path.rsplit("/", 1)[-1],
        item_type=item_type.value,
        parent_id=parent.id if parent else None,
        **fields,
    )
    session.add(item)
    session.flush()
    return item


@pytest.fixture
def library(db_session):
    """Seed the library tree and return a mapping of path to item ID."""
    items = {}
    for path, item_type, fields in LIBRARY_TREE:
        items[path] = add_item(db_session, path, item_type, **fields)

    tags = {}
    for path, names in LIBRARY_TAGS.items():
        for name in names:
            tag = tags.setdefault(name, TagORM(name=name))
            items[path].tags.append(tag)

    db_session.commit()
    return {path: item.id for path, item in items.items()}


@pytest.fixture
def item_repository():
    return SqlAlchemyItemRepository()


@pytest.fixture
def tag_repository():
    return SqlAlchemyTagRepository()


@pytest.fixture
def client(db_session, library):
    """Test client whose requests all use the seeded test session."""
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
