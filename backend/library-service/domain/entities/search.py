"""Search domain entities for the model library.

This module contains the domain entities for search functionality: the
validated criteria of a search request, the presentable hits it produces
and the overall result envelope.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


def _normalize_tags(tags: Optional[List[str]]) -> List[str]:
    seen = set()
    normalized = []
    for tag in tags or []:
        name = (tag or "").strip()
        if name and name not in seen:
            seen.add(name)
            normalized.append(name)
    return normalized


@dataclass
class SearchCriteria:
    """Domain entity representing the criteria of a library search.

    Every field is optional. Only the criteria actually supplied take part
    in the search; a criteria object with nothing supplied yields no results.

    Attributes:
        query: Free-text query matched against name, description and notes
        tags: Ordered tag names an item must carry (directly or inherited)
        file_type: Type label an item must have
    """

    query: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    file_type: Optional[str] = None

    def __post_init__(self):
        """Normalize criteria after initialization."""
        if self.query is not None:
            self.query = self.query or None
        self.tags = _normalize_tags(self.tags)
        if self.file_type is not None:
            self.file_type = str(getattr(self.file_type, "value", self.file_type))
            self.file_type = self.file_type.strip() or None

    def has_text_search(self) -> bool:
        """Check if this criteria includes text search."""
        return self.query is not None

    def has_tag_filter(self) -> bool:
        """Check if this criteria includes tag filtering."""
        return len(self.tags) > 0

    def has_file_type_filter(self) -> bool:
        """Check if this criteria includes a file type filter."""
        return self.file_type is not None

    def is_empty(self) -> bool:
        """Check if no criterion was supplied at all."""
        return not (
            self.has_text_search()
            or self.has_tag_filter()
            or self.has_file_type_filter()
        )

    @classmethod
    def from_search_request(cls, request) -> "SearchCriteria":
        """Create SearchCriteria from a validated search request.

        Args:
            request: Search request with query, tags and file_type attributes

        Returns:
            SearchCriteria: Domain entity representing the search criteria
        """
        return cls(
            query=request.query,
            tags=list(request.tags or []),
            file_type=request.file_type,
        )


@dataclass
class SearchHit:
    """Domain entity representing one presentable search result.

    Attributes:
        name: Display name of the item
        path: Item path, used as the external key
        kind: "folder" or "file"
        match_reason: Human-readable summary of the criteria this path matched
        item_count: Number of direct children (folders only)
        preview_path: First image found inside the folder (folders only)
        extension: File extension (files only)
        size: File size in bytes (files only)
        modified: Last modification time (files only)
    """

    name: str
    path: str
    kind: str
    match_reason: str = ""
    item_count: Optional[int] = None
    preview_path: Optional[str] = None
    extension: Optional[str] = None
    size: Optional[int] = None
    modified: Optional[datetime] = None

    def is_folder(self) -> bool:
        return self.kind == "folder"


@dataclass
class SearchResult:
    """Domain entity representing the outcome of a search operation.

    Attributes:
        hits: Presentable results, in discovery order
        criteria: The search criteria that produced these results
        search_timestamp: When the search was performed
    """

    hits: List[SearchHit]
    criteria: SearchCriteria
    search_timestamp: datetime

    @property
    def hits_count(self) -> int:
        """Get the number of hits in this result."""
        return len(self.hits)

    def is_empty(self) -> bool:
        """Check if the search result is empty."""
        return len(self.hits) == 0
