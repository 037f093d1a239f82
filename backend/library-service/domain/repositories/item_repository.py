"""Item repository interface for the model library.

This module defines the repository interface for the hierarchy store:
the table of files and folders and the parent/child relation between them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from domain.entities.item import DisplayInfo, Item
    from sqlalchemy.orm import Session


class ItemRepositoryInterface(ABC):
    """Abstract repository interface for hierarchy store operations.

    This interface defines the contract for item repositories, allowing
    different implementations (recursive SQL queries, in-memory adjacency
    maps, ...) while keeping the domain layer independent of storage.

    NOTE: All methods receive the request's database session. Item
    collections are returned in ascending identity order unless stated
    otherwise.
    """

    @abstractmethod
    async def find_item_by_path(self, db_session: Session, path: str) -> Optional[Item]:
        """Retrieve an item by its path.

        Args:
            db_session (Session): Database session for this operation.
            path (str): Item path relative to the library root.

        Returns:
            Optional[Item]: The item with its tags if found, None otherwise.
        """
        pass

    @abstractmethod
    async def find_items_by_parent(self, db_session: Session, item_id: int) -> List[Item]:
        """Retrieve the direct children of an item.

        Args:
            db_session (Session): Database session for this operation.
            item_id (int): Identity of the parent folder.

        Returns:
            List[Item]: Items whose parent is the given item.
        """
        pass

    @abstractmethod
    async def find_descendants(self, db_session: Session, item_id: int) -> List[Item]:
        """Retrieve every item nested under an item, at any depth.

        Args:
            db_session (Session): Database session for this operation.
            item_id (int): Identity of the folder to expand.

        Returns:
            List[Item]: Transitive closure of the children relation,
                excluding the item itself.
        """
        pass

    @abstractmethod
    async def find_ancestors(self, db_session: Session, path: str) -> List[Item]:
        """Retrieve the enclosing folders of an item.

        Args:
            db_session (Session): Database session for this operation.
            path (str): Path of the item whose ancestors are wanted.

        Returns:
            List[Item]: Ancestors ordered nearest first, excluding the item
                itself. Empty when the item is unknown or root-level.
        """
        pass

    @abstractmethod
    async def find_ancestors_of_type(
        self, db_session: Session, path: str, item_type: str
    ) -> List[Item]:
        """Retrieve the enclosing folders of an item that have a given type.

        Args:
            db_session (Session): Database session for this operation.
            path (str): Path of the item whose ancestors are wanted.
            item_type (str): Type label the ancestors must have.

        Returns:
            List[Item]: Matching ancestors ordered nearest first.
        """
        pass

    @abstractmethod
    async def count_children(self, db_session: Session, path: str) -> int:
        """Count the direct children of the item at a path.

        Args:
            db_session (Session): Database session for this operation.
            path (str): Path of the folder.

        Returns:
            int: Number of direct children, 0 for unknown paths.
        """
        pass

    @abstractmethod
    async def find_paths_by_text(self, db_session: Session, query: str) -> List[str]:
        """Find the paths of items whose name, description or notes contain a query.

        The query is matched case-insensitively as a literal substring.

        Args:
            db_session (Session): Database session for this operation.
            query (str): Non-empty text to look for.

        Returns:
            List[str]: Matching paths.
        """
        pass

    @abstractmethod
    async def find_paths_by_type(self, db_session: Session, item_type: str) -> List[str]:
        """Find the paths of items whose type equals a label.

        Args:
            db_session (Session): Database session for this operation.
            item_type (str): Type label to compare against.

        Returns:
            List[str]: Matching paths, empty for unknown labels.
        """
        pass

    @abstractmethod
    async def get_display_info(
        self, db_session: Session, path: str
    ) -> Optional[DisplayInfo]:
        """Retrieve the presentation metadata of the item at a path.

        Args:
            db_session (Session): Database session for this operation.
            path (str): Item path.

        Returns:
            Optional[DisplayInfo]: Name, child count and preview image for
                folders; extension and modification time for files. None
                if no item has the path.
        """
        pass

    @abstractmethod
    async def get_all_file_types(self, db_session: Session) -> List[str]:
        """Retrieve the distinct type labels currently stored.

        Args:
            db_session (Session): Database session for this operation.

        Returns:
            List[str]: Sorted distinct type labels.
        """
        pass

    @abstractmethod
    async def query_items(
        self,
        db_session: Session,
        tags: Optional[List[str]] = None,
        item_type: Optional[str] = None,
        search: Optional[str] = None,
        parent_path: Optional[str] = None,
    ) -> List[Item]:
        """Retrieve stored items matching every given filter.

        Args:
            db_session (Session): Database session for this operation.
            tags (List[str], optional): Keep items carrying any of these tags.
            item_type (str, optional): Keep items with this type label.
            search (str, optional): Case-insensitive substring of the name
                or description.
            parent_path (str, optional): Keep direct children of this folder.

        Returns:
            List[Item]: Distinct matching items with their tags, ordered by name.
        """
        pass

    @abstractmethod
    async def save(self, db_session: Session, item: Item) -> Item:
        """Create or update an item, keyed by its path.

        Tags are not written by this method; see the tag repository.

        Args:
            db_session (Session): Database session for this operation.
            item (Item): The item to persist.

        Returns:
            Item: The persisted item with its identity populated.
        """
        pass

    @abstractmethod
    async def link_orphans(self, db_session: Session, folder: Item) -> int:
        """Attach parentless items stored directly under a folder's path.

        Items saved before their enclosing folder have no parent reference;
        once the folder exists they are linked to it.

        Args:
            db_session (Session): Database session for this operation.
            folder (Item): The persisted folder.

        Returns:
            int: Number of items that were linked.
        """
        pass
