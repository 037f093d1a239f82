"""Search domain service for the model library.

This module contains the SearchService that orchestrates hierarchical
search: it gathers the match set of every supplied criterion, intersects
them, collapses the candidates to their enclosing Model folders and
assembles presentable hits.
"""

import logging
import os
from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Optional

from domain.entities.file_types import FileType
from domain.entities.item import last_segment
from domain.entities.search import SearchCriteria, SearchHit, SearchResult
from domain.repositories.item_repository import ItemRepositoryInterface
from domain.repositories.tag_repository import TagRepositoryInterface
from domain.services.criteria_matchers import CriteriaMatcher, intersect_match_sets
from sqlalchemy.exc import SQLAlchemyError

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class SearchError(Exception):
    """Exception raised when search operations fail."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        """Initialize search error.

        Args:
            message (str): Human-readable error message.
            original_error (Optional[Exception]): Original exception that caused this error.
        """
        super().__init__(message)
        self.original_error = original_error


class SearchService:
    """Domain service for handling library search operations.

    The search is a single read-only computation per request:

    1. Skip everything when no criterion was supplied
    2. Compute one match set per supplied criterion
    3. Intersect the match sets (AND semantics)
    4. Replace each candidate by its nearest enclosing Model folder
    5. Fetch display metadata and a match reason for every resolved path
    """

    def __init__(
        self,
        item_repository: ItemRepositoryInterface,
        tag_repository: TagRepositoryInterface,
        library_root: Optional[str] = None,
    ):
        """Initialize the search service with dependencies.

        Args:
            item_repository (ItemRepositoryInterface): Hierarchy store access.
            tag_repository (TagRepositoryInterface): Tag store access.
            library_root (Optional[str]): Directory holding the library files,
                used to report file sizes. Sizes are 0 when omitted.
        """
        self._item_repository = item_repository
        self._matcher = CriteriaMatcher(item_repository, tag_repository)
        self._library_root = library_root

    async def search(
        self, db_session: "Session", criteria: SearchCriteria
    ) -> SearchResult:
        """Search the library for items matching the criteria.

        Args:
            db_session (Session): SQLAlchemy database session for this operation.
            criteria (SearchCriteria): The search criteria.

        Returns:
            SearchResult: Presentable hits in discovery order.

        Raises:
            SearchError: If a store lookup fails.
        """
        if criteria.is_empty():
            logger.info("Search skipped: no criteria supplied")
            return SearchResult(
                hits=[], criteria=criteria, search_timestamp=datetime.utcnow()
            )

        logger.info(
            f"Performing search with query '{criteria.query}', "
            f"tags {criteria.tags} and file type '{criteria.file_type}'"
        )

        try:
            match_sets = await self.collect_match_sets(db_session, criteria)
            candidates = intersect_match_sets(list(match_sets.values()))
            logger.info(f"Found {len(candidates)} matching paths")

            resolved = await self.resolve_model_folders(db_session, candidates)
        except SQLAlchemyError as e:
            logger.error(f"Search operation failed: {str(e)}")
            raise SearchError("Search failed", original_error=e) from e

        hits = await self.assemble_hits(db_session, resolved, criteria, match_sets)

        logger.info(f"Search completed: returning {len(hits)} results")
        return SearchResult(
            hits=hits, criteria=criteria, search_timestamp=datetime.utcnow()
        )

    async def collect_match_sets(
        self, db_session: "Session", criteria: SearchCriteria
    ) -> Dict[str, List[str]]:
        """Compute the match set of every supplied criterion.

        Args:
            db_session (Session): Database session for this operation.
            criteria (SearchCriteria): The search criteria.

        Returns:
            Dict[str, List[str]]: Match sets keyed by criterion name
                ("text", "tags", "type"), only for supplied criteria.
        """
        match_sets = {}
        if criteria.has_text_search():
            match_sets["text"] = await self._matcher.match_text(
                db_session, criteria.query
            )
        if criteria.has_tag_filter():
            match_sets["tags"] = await self._matcher.match_tags(
                db_session, criteria.tags
            )
        if criteria.has_file_type_filter():
            match_sets["type"] = await self._matcher.match_file_type(
                db_session, criteria.file_type
            )
        return match_sets

    async def resolve_model_folder(self, db_session: "Session", path: str) -> str:
        """Find the presentable path for a single candidate.

        Args:
            db_session (Session): Database session for this operation.
            path (str): Candidate item path.

        Returns:
            str: The path itself if it is a Model folder, else its nearest
                Model ancestor, else the path unchanged.
        """
        item = await self._item_repository.find_item_by_path(db_session, path)
        if item is not None and item.type == FileType.MODEL:
            return path

        models = await self._item_repository.find_ancestors_of_type(
            db_session, path, FileType.MODEL.value
        )
        if models:
            return models[0].path
        return path

    async def resolve_model_folders(
        self, db_session: "Session", candidates: List[str]
    ) -> List[str]:
        """Collapse candidates to their Model folders, without duplicates.

        Args:
            db_session (Session): Database session for this operation.
            candidates (List[str]): Candidate paths in discovery order.

        Returns:
            List[str]: Resolved paths, first occurrence wins.
        """
        resolved = {}
        for path in candidates:
            resolved[await self.resolve_model_folder(db_session, path)] = None
        return list(resolved)

    async def assemble_hits(
        self,
        db_session: "Session",
        paths: List[str],
        criteria: SearchCriteria,
        match_sets: Dict[str, List[str]],
    ) -> List[SearchHit]:
        """Build presentable hits for the resolved paths.

        A missing or failing metadata lookup never drops the hit; a minimal
        folder record named after the last path segment is used instead.

        Args:
            db_session (Session): Database session for this operation.
            paths (List[str]): Resolved paths in discovery order.
            criteria (SearchCriteria): The search criteria.
            match_sets (Dict[str, List[str]]): Match set of each supplied criterion.

        Returns:
            List[SearchHit]: One hit per path.
        """
        members = {name: set(paths_) for name, paths_ in match_sets.items()}
        hits = []

        for path in paths:
            reason = build_match_reason(path, criteria, members)

            try:
                info = await self._item_repository.get_display_info(db_session, path)
            except SQLAlchemyError as e:
                logger.warning(f"Falling back to minimal record for {path}: {str(e)}")
                info = None

            if info is None:
                hits.append(
                    SearchHit(
                        name=last_segment(path),
                        path=path,
                        kind="folder",
                        match_reason=reason,
                        item_count=0,
                    )
                )
            elif info.is_folder:
                hits.append(
                    SearchHit(
                        name=info.name,
                        path=info.path,
                        kind="folder",
                        match_reason=reason,
                        item_count=info.item_count,
                        preview_path=info.preview_path,
                    )
                )
            else:
                hits.append(
                    SearchHit(
                        name=info.name,
                        path=info.path,
                        kind="file",
                        match_reason=reason,
                        extension=info.extension or "",
                        size=self._file_size(info.path),
                        modified=info.modified,
                    )
                )

        return hits

    def _file_size(self, path: str) -> int:
        if not self._library_root:
            return 0
        try:
            return os.path.getsize(os.path.join(self._library_root, path))
        except OSError as e:
            logger.debug(f"Could not read size of {path}: {str(e)}")
            return 0


def build_match_reason(
    path: str, criteria: SearchCriteria, members: Dict[str, set]
) -> str:
    """Summarize which supplied criteria a presented path matched itself.

    Args:
        path (str): The presented path.
        criteria (SearchCriteria): The search criteria.
        members (Dict[str, set]): Match set of each supplied criterion.

    Returns:
        str: e.g. 'Matches "dragon", Has tags: 32mm, Type: Model'.

    Example:
        >>> criteria = SearchCriteria(query="dragon", tags=["32mm"])
        >>> build_match_reason("Pub/Dragon", criteria, {"text": {"Pub/Dragon"}, "tags": set()})
        'Matches "dragon"'
    """
    reasons = []
    if criteria.has_text_search() and path in members.get("text", ()):
        reasons.append(f'Matches "{criteria.query}"')
    if criteria.has_tag_filter() and path in members.get("tags", ()):
        reasons.append(f"Has tags: {', '.join(criteria.tags)}")
    if criteria.has_file_type_filter() and path in members.get("type", ()):
        reasons.append(f"Type: {criteria.file_type}")
    return ", ".join(reasons)
