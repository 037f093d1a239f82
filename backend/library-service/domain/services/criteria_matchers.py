"""Criterion matchers for library search.

This module contains the CriteriaMatcher that turns each independent search
criterion (free text, required tags, file type) into a match set: the
duplicate-free list of item paths satisfying that criterion alone.

Tag matching applies inheritance: a tag attached to a folder applies to
every item nested under that folder, at any depth.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List

from sqlalchemy.exc import SQLAlchemyError

if TYPE_CHECKING:
    from domain.repositories.item_repository import ItemRepositoryInterface
    from domain.repositories.tag_repository import TagRepositoryInterface
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def unique_paths(paths: Iterable[str]) -> List[str]:
    """Drop repeated paths, keeping the first occurrence order."""
    return list(dict.fromkeys(paths))


def intersect_match_sets(match_sets: List[List[str]]) -> List[str]:
    """Intersect match sets, keeping the order of the first one.

    Args:
        match_sets (List[List[str]]): One match set per active criterion.

    Returns:
        List[str]: Paths present in every match set. A single match set is
            returned unchanged; no match sets yield an empty list.

    Example:
        >>> intersect_match_sets([["a", "b", "c"], ["c", "a"]])
        ['a', 'c']
    """
    if not match_sets:
        return []

    result = unique_paths(match_sets[0])
    for other in match_sets[1:]:
        members = set(other)
        result = [path for path in result if path in members]
    return result


class CriteriaMatcher:
    """Domain service computing the match set of each search criterion.

    The three lookups are independent read-only queries against the
    hierarchy and tag stores. Callers only invoke the matchers for criteria
    that were actually supplied.

    Attributes:
        _item_repository (ItemRepositoryInterface): Hierarchy store access.
        _tag_repository (TagRepositoryInterface): Tag store access.
    """

    def __init__(
        self,
        item_repository: "ItemRepositoryInterface",
        tag_repository: "TagRepositoryInterface",
    ):
        self._item_repository = item_repository
        self._tag_repository = tag_repository

    async def match_text(self, db_session: "Session", query: str) -> List[str]:
        """Find items whose name, description or notes contain the query.

        Args:
            db_session: Database session for this operation
            query: Non-empty text, matched case-insensitively and literally

        Returns:
            List[str]: Paths of the matching items
        """
        paths = await self._item_repository.find_paths_by_text(db_session, query)
        logger.debug(f"Text '{query}' matched {len(paths)} items")
        return unique_paths(paths)

    async def match_file_type(self, db_session: "Session", file_type: str) -> List[str]:
        """Find items whose type equals the given label exactly.

        Unknown labels are not an error; they simply match nothing.

        Args:
            db_session: Database session for this operation
            file_type: Type label to look for

        Returns:
            List[str]: Paths of the matching items
        """
        paths = await self._item_repository.find_paths_by_type(db_session, file_type)
        logger.debug(f"Type '{file_type}' matched {len(paths)} items")
        return unique_paths(paths)

    async def match_tags(self, db_session: "Session", tags: List[str]) -> List[str]:
        """Find items that carry every requested tag, directly or inherited.

        Each tag yields its own match set; the result is their intersection,
        so an item must satisfy all tags, not just one of them.

        Args:
            db_session: Database session for this operation
            tags: Non-empty ordered list of tag names

        Returns:
            List[str]: Paths of the items satisfying all tags
        """
        per_tag_matches = []
        for tag in tags:
            matches = await self.match_single_tag(db_session, tag)
            logger.debug(f"Tag '{tag}' matched {len(matches)} items with inheritance")
            per_tag_matches.append(matches)

        return intersect_match_sets(per_tag_matches)

    async def match_single_tag(self, db_session: "Session", tag: str) -> List[str]:
        """Compute the match set of a single tag with inheritance.

        Every directly tagged item matches, and so does everything nested
        under it. Each descendant lookup runs in its own savepoint. When
        one lookup fails, only that item's descendants are left out and the
        enclosing transaction stays usable for the remaining items.

        Args:
            db_session: Database session for this operation
            tag: Exact tag name

        Returns:
            List[str]: Paths of the items carrying the tag
        """
        matches = {}
        tagged_items = await self._tag_repository.find_items_directly_tagged(
            db_session, tag
        )

        for item in tagged_items:
            matches[item.path] = None

            try:
                with db_session.begin_nested():
                    descendants = await self._item_repository.find_descendants(
                        db_session, item.id
                    )
            except SQLAlchemyError as e:
                logger.warning(
                    f"Skipping descendants of {item.path} for tag '{tag}': {str(e)}"
                )
                continue

            for descendant in descendants:
                matches[descendant.path] = None

        return list(matches)
