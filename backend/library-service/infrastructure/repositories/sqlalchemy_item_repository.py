"""SQLAlchemy implementation of the item repository.

This module contains the concrete implementation of ItemRepositoryInterface
using SQLAlchemy. Descendant and ancestor walks are expressed as recursive
common table expressions so the whole traversal runs inside the database.
"""

import logging
from typing import List, Optional

from domain.entities.file_types import IMAGE_EXTENSIONS, FileType
from domain.entities.item import DisplayInfo, Item, PrintSettings, normalize_path
from domain.repositories.item_repository import ItemRepositoryInterface
from sqlalchemy import Integer, func, literal, or_, select
from sqlalchemy.orm import Session, aliased

from infrastructure.models.associations import item_tags
from infrastructure.models.item_orm import ItemORM
from infrastructure.models.tag_orm import TagORM

logger = logging.getLogger(__name__)

# Upper bound on ancestor walks; guards against corrupted parent links.
MAX_TREE_DEPTH = 256


class SqlAlchemyItemRepository(ItemRepositoryInterface):
    """SQLAlchemy implementation of the item repository.

    NOTE: This repository does not store the session internally.
    Each method receives a fresh session to ensure proper transaction management
    and avoid session leaks. Writes are flushed, never committed; the calling
    service owns the transaction.

    Example:
        >>> repository = SqlAlchemyItemRepository()
        >>> with get_db_session() as db:
        ...     item = await repository.find_item_by_path(db, "Pub/Coll/Dragon")
        ...     print(item.type)
        FileType.MODEL
    """

    async def find_item_by_path(self, db_session: Session, path: str) -> Optional[Item]:
        item_model = (
            db_session.query(ItemORM)
            .filter(ItemORM.path == normalize_path(path))
            .first()
        )
        return self._model_to_entity(item_model, with_tags=True) if item_model else None

    async def find_items_by_parent(self, db_session: Session, item_id: int) -> List[Item]:
        item_models = (
            db_session.query(ItemORM)
            .filter(ItemORM.parent_id == item_id)
            .order_by(ItemORM.id)
            .all()
        )
        return [self._model_to_entity(model) for model in item_models]

    async def find_descendants(self, db_session: Session, item_id: int) -> List[Item]:
        """Retrieve every item nested under an item via a recursive query.

        The recursive term uses UNION rather than UNION ALL, so each item is
        produced once and a corrupted cycle cannot recurse forever.

        Args:
            db_session (Session): Fresh SQLAlchemy database session for this operation.
            item_id (int): Identity of the folder to expand.

        Returns:
            List[Item]: All descendants ordered by identity.
        """
        descendants = (
            select(ItemORM.id)
            .where(ItemORM.parent_id == item_id)
            .cte(name="descendants", recursive=True)
        )
        previous = descendants.alias()
        child = aliased(ItemORM)
        descendants = descendants.union(
            select(child.id).where(child.parent_id == previous.c.id)
        )

        item_models = (
            db_session.query(ItemORM)
            .join(descendants, ItemORM.id == descendants.c.id)
            .filter(ItemORM.id != item_id)
            .order_by(ItemORM.id)
            .all()
        )
        return [self._model_to_entity(model) for model in item_models]

    async def find_ancestors(self, db_session: Session, path: str) -> List[Item]:
        return self._query_ancestors(db_session, path, None)

    async def find_ancestors_of_type(
        self, db_session: Session, path: str, item_type: str
    ) -> List[Item]:
        return self._query_ancestors(db_session, path, item_type)

    async def count_children(self, db_session: Session, path: str) -> int:
        parent_ids = select(ItemORM.id).where(ItemORM.path == normalize_path(path))
        return (
            db_session.query(func.count(ItemORM.id))
            .filter(ItemORM.parent_id.in_(parent_ids))
            .scalar()
            or 0
        )

    async def find_paths_by_text(self, db_session: Session, query: str) -> List[str]:
        """Find item paths whose name, description or notes contain a query.

        The query is auto-escaped so LIKE wildcards in it match literally.

        Args:
            db_session (Session): Fresh SQLAlchemy database session for this operation.
            query (str): Text to look for.

        Returns:
            List[str]: Matching paths ordered by identity.
        """
        condition = or_(
            ItemORM.name.icontains(query, autoescape=True),
            ItemORM.description.icontains(query, autoescape=True),
            ItemORM.notes.icontains(query, autoescape=True),
        )
        rows = (
            db_session.query(ItemORM.path).filter(condition).order_by(ItemORM.id).all()
        )
        return [row.path for row in rows]

    async def find_paths_by_type(self, db_session: Session, item_type: str) -> List[str]:
        rows = (
            db_session.query(ItemORM.path)
            .filter(ItemORM.item_type == item_type)
            .order_by(ItemORM.id)
            .all()
        )
        return [row.path for row in rows]

    async def get_display_info(
        self, db_session: Session, path: str
    ) -> Optional[DisplayInfo]:
        """Retrieve presentation metadata for a search result.

        Args:
            db_session (Session): Fresh SQLAlchemy database session for this operation.
            path (str): Item path.

        Returns:
            Optional[DisplayInfo]: Display metadata, None if the path is unknown.
        """
        item_model = (
            db_session.query(ItemORM)
            .filter(ItemORM.path == normalize_path(path))
            .first()
        )
        if not item_model:
            return None

        item = self._model_to_entity(item_model)
        if not item.is_folder():
            return DisplayInfo(
                name=item.name,
                path=item.path,
                is_folder=False,
                item_count=0,
                extension=item.extension,
                modified=item.last_modified,
            )

        item_count = (
            db_session.query(func.count(ItemORM.id))
            .filter(ItemORM.parent_id == item_model.id)
            .scalar()
            or 0
        )
        return DisplayInfo(
            name=item.name,
            path=item.path,
            is_folder=True,
            item_count=item_count,
            preview_path=self._find_preview_path(db_session, item_model.id),
        )

    async def get_all_file_types(self, db_session: Session) -> List[str]:
        rows = (
            db_session.query(ItemORM.item_type)
            .filter(ItemORM.item_type.isnot(None))
            .distinct()
            .order_by(ItemORM.item_type)
            .all()
        )
        return [row[0] for row in rows]

    async def query_items(
        self,
        db_session: Session,
        tags: Optional[List[str]] = None,
        item_type: Optional[str] = None,
        search: Optional[str] = None,
        parent_path: Optional[str] = None,
    ) -> List[Item]:
        """Retrieve items matching all of the given filters.

        Args:
            db_session (Session): Fresh SQLAlchemy database session for this operation.
            tags (List[str], optional): Any-of tag names, matched exactly.
            item_type (str, optional): Type label.
            search (str, optional): Literal substring of the name or description.
            parent_path (str, optional): Path of the enclosing folder.

        Returns:
            List[Item]: Matching items ordered by name, then identity.
        """
        query = db_session.query(ItemORM)
        if tags:
            tagged_ids = (
                select(item_tags.c.item_id)
                .join(TagORM, TagORM.id == item_tags.c.tag_id)
                .where(TagORM.name.in_(tags))
            )
            query = query.filter(ItemORM.id.in_(tagged_ids))
        if item_type:
            query = query.filter(ItemORM.item_type == item_type)
        if search:
            query = query.filter(
                or_(
                    ItemORM.name.icontains(search, autoescape=True),
                    ItemORM.description.icontains(search, autoescape=True),
                )
            )
        if parent_path is not None:
            parent_ids = select(ItemORM.id).where(
                ItemORM.path == normalize_path(parent_path)
            )
            query = query.filter(ItemORM.parent_id.in_(parent_ids))

        item_models = query.order_by(ItemORM.name, ItemORM.id).all()
        return [self._model_to_entity(model, with_tags=True) for model in item_models]

    async def save(self, db_session: Session, item: Item) -> Item:
        """Create or update an item keyed by its path.

        Args:
            db_session (Session): Fresh SQLAlchemy database session for this operation.
            item (Item): The item to persist.

        Returns:
            Item: The persisted item with populated identity.
        """
        item_model = db_session.query(ItemORM).filter(ItemORM.path == item.path).first()
        if item_model is None:
            item_model = ItemORM(path=item.path)
            db_session.add(item_model)

        item_model.name = item.name
        item_model.item_type = item.type.value
        item_model.parent_id = item.parent_id
        item_model.description = item.description
        item_model.resin = item.resin
        item_model.layer_height = item.layer_height
        item_model.supports_needed = bool(item.supports_needed)
        item_model.notes = item.notes
        item_model.print_settings = (
            item.print_settings.to_json()
            if item.print_settings and not item.print_settings.is_empty()
            else None
        )
        if item.date_added is not None:
            item_model.date_added = item.date_added
        if item.last_modified is not None:
            item_model.last_modified = item.last_modified

        db_session.flush()
        return self._model_to_entity(item_model, with_tags=True)

    async def link_orphans(self, db_session: Session, folder: Item) -> int:
        prefix = f"{folder.path}/"
        candidates = (
            db_session.query(ItemORM)
            .filter(
                ItemORM.parent_id.is_(None),
                ItemORM.path.startswith(prefix, autoescape=True),
            )
            .all()
        )

        linked = 0
        for item_model in candidates:
            if "/" in item_model.path[len(prefix) :]:
                continue
            item_model.parent_id = folder.id
            linked += 1

        if linked:
            db_session.flush()
        return linked

    def _query_ancestors(
        self, db_session: Session, path: str, item_type: Optional[str]
    ) -> List[Item]:
        """Walk root-ward from the item at a path using a recursive query.

        Args:
            db_session (Session): Database session for this operation.
            path (str): Path of the starting item.
            item_type (Optional[str]): Restrict results to this type label.

        Returns:
            List[Item]: Ancestors ordered nearest first, without duplicates.
        """
        ancestors = (
            select(
                ItemORM.id,
                ItemORM.parent_id,
                literal(0, type_=Integer).label("depth"),
            )
            .where(ItemORM.path == normalize_path(path))
            .cte(name="ancestors", recursive=True)
        )
        previous = ancestors.alias()
        parent = aliased(ItemORM)
        ancestors = ancestors.union_all(
            select(parent.id, parent.parent_id, previous.c.depth + 1).where(
                parent.id == previous.c.parent_id,
                previous.c.depth < MAX_TREE_DEPTH,
            )
        )

        query = (
            db_session.query(ItemORM)
            .join(ancestors, ItemORM.id == ancestors.c.id)
            .filter(ancestors.c.depth > 0)
        )
        if item_type is not None:
            query = query.filter(ItemORM.item_type == item_type)

        seen = set()
        result = []
        for item_model in query.order_by(ancestors.c.depth).all():
            if item_model.id in seen:
                continue
            seen.add(item_model.id)
            result.append(self._model_to_entity(item_model))
        return result

    def _find_preview_path(self, db_session: Session, folder_id: int) -> Optional[str]:
        """Find the first image inside a folder, nearest level first."""
        descendants = (
            select(ItemORM.id, literal(1, type_=Integer).label("depth"))
            .where(ItemORM.parent_id == folder_id)
            .cte(name="preview_candidates", recursive=True)
        )
        previous = descendants.alias()
        child = aliased(ItemORM)
        descendants = descendants.union_all(
            select(child.id, previous.c.depth + 1).where(
                child.parent_id == previous.c.id,
                previous.c.depth < MAX_TREE_DEPTH,
            )
        )

        is_image = or_(
            ItemORM.item_type == FileType.IMAGE.value,
            *[
                func.lower(ItemORM.path).endswith(f".{extension}")
                for extension in sorted(IMAGE_EXTENSIONS)
            ],
        )
        row = (
            db_session.query(ItemORM.path)
            .join(descendants, ItemORM.id == descendants.c.id)
            .filter(is_image)
            .order_by(descendants.c.depth, ItemORM.path)
            .first()
        )
        return row.path if row else None

    def _model_to_entity(self, item_model: ItemORM, with_tags: bool = False) -> Item:
        """Convert SQLAlchemy model to domain entity.

        Args:
            item_model (ItemORM): SQLAlchemy item model instance.
            with_tags (bool): Load the item's tag names as well.

        Returns:
            Item: Corresponding domain entity.
        """
        try:
            item_type = FileType(item_model.item_type or FileType.UNKNOWN.value)
        except ValueError:
            logger.warning(
                f"Unrecognized type '{item_model.item_type}' for {item_model.path}"
            )
            item_type = FileType.UNKNOWN

        return Item(
            id=item_model.id,
            path=item_model.path,
            name=item_model.name,
            type=item_type,
            parent_id=item_model.parent_id,
            description=item_model.description,
            date_added=item_model.date_added,
            last_modified=item_model.last_modified,
            resin=item_model.resin,
            layer_height=item_model.layer_height,
            supports_needed=bool(item_model.supports_needed),
            notes=item_model.notes,
            print_settings=PrintSettings.from_json(item_model.print_settings),
            tags=sorted(tag.name for tag in item_model.tags) if with_tags else [],
        )

