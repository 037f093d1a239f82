"""Item metadata domain service for the model library.

This module contains the ItemService that reads and writes the metadata
attached to library files and folders, keeping the parent/child hierarchy
and the tag associations consistent.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from domain.entities.file_types import FileType, determine_file_type
from domain.entities.item import (
    BatchSaveResult,
    Item,
    PrintSettings,
    last_segment,
    normalize_path,
)

if TYPE_CHECKING:
    from domain.repositories.item_repository import ItemRepositoryInterface
    from domain.repositories.tag_repository import TagRepositoryInterface
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class ItemError(Exception):
    """Base exception for item-related errors."""

    pass


class ItemNotFoundError(ItemError):
    """Exception raised when no item exists at a path."""

    pass


class ItemService:
    """Domain service for handling item metadata operations.

    This service encapsulates the rules for saving metadata: the parent
    reference is always derived from the item's path, the type falls back to
    the path-based classification, and the tag set is replaced as a whole.
    """

    def __init__(
        self,
        item_repository: "ItemRepositoryInterface",
        tag_repository: "TagRepositoryInterface",
    ):
        """Initialize the item service with dependencies.

        Args:
            item_repository: Repository for the hierarchy store
            tag_repository: Repository for the tag store
        """
        self._item_repository = item_repository
        self._tag_repository = tag_repository

    async def get_metadata(self, db_session: "Session", path: str) -> Item:
        """Get the metadata of the item at a path.

        Args:
            db_session: Database session for this operation
            path: Item path relative to the library root

        Returns:
            Item: The item with its tags

        Raises:
            ItemNotFoundError: If no item exists at the path
        """
        item = await self._item_repository.find_item_by_path(db_session, path)
        if item is None:
            raise ItemNotFoundError(f"No metadata found for {normalize_path(path)}")
        return item

    async def save_metadata(
        self,
        db_session: "Session",
        path: str,
        name: Optional[str] = None,
        item_type: Optional[str] = None,
        is_directory: bool = False,
        description: Optional[str] = None,
        tags: Optional[List[str]] = None,
        resin: Optional[str] = None,
        layer_height: Optional[float] = None,
        supports_needed: bool = False,
        notes: Optional[str] = None,
        print_settings: Optional[PrintSettings] = None,
        date_added: Optional[datetime] = None,
        last_modified: Optional[datetime] = None,
    ) -> Item:
        """Create or update the metadata of the item at a path.

        Args:
            db_session: Database session for this operation
            path: Item path relative to the library root
            name: Display name, defaults to the last path segment
            item_type: Type label, inferred from the path when omitted
            is_directory: Whether the item is a folder, used for inference
            description: Free-text description
            tags: Tag names to attach, replacing the current set
            resin: Resin used for printing
            layer_height: Layer height in millimetres
            supports_needed: Whether supports are needed
            notes: Free-text notes
            print_settings: Structured print parameters
            date_added: Creation time; kept from the stored item on update
            last_modified: Modification time, defaults to now

        Returns:
            Item: The saved item with its tags

        Raises:
            ValueError: If the path, name or type label is invalid
            ItemError: If persisting fails
        """
        normalized = normalize_path(path)
        if not normalized:
            raise ValueError("Item path cannot be empty")

        existing = await self._item_repository.find_item_by_path(db_session, normalized)
        now = datetime.utcnow()

        if item_type:
            resolved_type = FileType(item_type)
        elif existing is not None:
            resolved_type = existing.type
        else:
            file_name = last_segment(normalized)
            extension = file_name.rsplit(".", 1)[-1] if "." in file_name else None
            resolved_type = determine_file_type(normalized, is_directory, extension)

        parent_id = None
        parent_path = normalized.rsplit("/", 1)[0] if "/" in normalized else None
        if parent_path is not None:
            parent = await self._item_repository.find_item_by_path(db_session, parent_path)
            if parent is not None:
                parent_id = parent.id
            else:
                logger.debug(f"No parent item stored for {normalized}")

        item = Item(
            id=existing.id if existing else None,
            path=normalized,
            name=name or last_segment(normalized),
            type=resolved_type,
            parent_id=parent_id,
            description=description,
            date_added=(existing.date_added if existing else None) or date_added or now,
            last_modified=last_modified or now,
            resin=resin,
            layer_height=layer_height,
            supports_needed=supports_needed,
            notes=notes,
            print_settings=print_settings,
        )

        logger.info(
            f"Saving metadata for {normalized} ({resolved_type.value}) "
            f"with {len(tags or [])} tags"
        )

        try:
            saved = await self._item_repository.save(db_session, item)
            if saved.is_folder():
                adopted = await self._item_repository.link_orphans(db_session, saved)
                if adopted:
                    logger.info(f"Linked {adopted} orphaned items under {normalized}")
            saved.tags = await self._tag_repository.set_item_tags(
                db_session, saved.id, tags or []
            )
            db_session.commit()
        except Exception as e:
            db_session.rollback()
            logger.error(f"Failed to save metadata for {normalized}: {str(e)}")
            raise ItemError(f"Failed to save metadata: {str(e)}") from e

        return saved

    async def save_metadata_batch(
        self,
        db_session: "Session",
        items: List[Dict[str, Optional[str]]],
        updates: Dict[str, Any],
    ) -> BatchSaveResult:
        """Apply one metadata update to many items.

        Every item is saved in its own transaction. An item without a path
        or name, or one that fails to save, is counted and skipped; the rest
        of the batch still goes through.

        Args:
            db_session: Database session for this operation
            items: Entries with a "path" and a "name"
            updates: save_metadata keyword arguments shared by every item,
                without the name

        Returns:
            BatchSaveResult: Counts, saved items and skipped paths
        """
        result = BatchSaveResult(total_processed=len(items))
        logger.info(f"Processing batch metadata update for {len(items)} items")

        for entry in items:
            path = entry.get("path")
            name = entry.get("name")
            if not path or not name:
                logger.warning(f"Skipping batch entry without path or name: {entry}")
                result.error_count += 1
                if path:
                    result.failed_paths.append(path)
                continue

            try:
                saved = await self.save_metadata(db_session, path, name=name, **updates)
            except Exception as e:
                db_session.rollback()
                logger.error(f"Error processing batch item {path}: {str(e)}")
                result.error_count += 1
                result.failed_paths.append(path)
                continue

            result.saved.append(saved)
            result.success_count += 1

        logger.info(
            f"Batch processed: {result.success_count} saved, "
            f"{result.error_count} failed"
        )
        return result

    async def query_metadata(
        self,
        db_session: "Session",
        tags: Optional[List[str]] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        parent_folder: Optional[str] = None,
    ) -> List[Item]:
        """List stored items filtered by tag, type, text and parent folder.

        Filters that are empty or omitted are ignored, so a call without
        filters returns every item.

        Args:
            db_session: Database session for this operation
            tags: Keep items directly tagged with any of these names
            category: Type label to keep
            search: Case-insensitive substring of the name or description
            parent_folder: Path of the folder whose direct children to keep

        Returns:
            List[Item]: Matching items ordered by name
        """
        tag_names = [tag for tag in (tags or []) if tag]
        logger.info(
            f"Querying metadata: tags={tag_names}, category={category}, "
            f"search={search!r}, parent_folder={parent_folder}"
        )
        return await self._item_repository.query_items(
            db_session,
            tags=tag_names,
            item_type=category or None,
            search=search or None,
            parent_path=parent_folder or None,
        )

    async def get_hierarchy(self, db_session: "Session", path: str) -> List[Item]:
        """Get the folders enclosing an item, from the root down.

        Args:
            db_session: Database session for this operation
            path: Item path relative to the library root

        Returns:
            List[Item]: Ancestors ordered root first, immediate parent last

        Raises:
            ItemNotFoundError: If no item exists at the path
        """
        await self.get_metadata(db_session, path)
        ancestors = await self._item_repository.find_ancestors(db_session, path)
        return list(reversed(ancestors))

    async def get_all_file_types(self, db_session: "Session") -> List[str]:
        """Get the distinct type labels currently in use."""
        return await self._item_repository.get_all_file_types(db_session)
