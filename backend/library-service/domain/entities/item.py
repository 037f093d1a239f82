"""Item domain entities for the model library.

This module contains the Item entity representing a single file or folder
in the library tree, the PrintSettings value object stored alongside it,
and the DisplayInfo record used when presenting search results.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from domain.entities.file_types import FileType, is_folder_type

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Normalize an item path to forward slashes without outer slashes.

    Args:
        path (str): Raw path relative to the library root.

    Returns:
        str: Normalized path, e.g. "Pub/Coll/Dragon".
    """
    parts = [part for part in path.strip().replace("\\", "/").split("/") if part]
    return "/".join(parts)


def parent_path_of(path: str) -> Optional[str]:
    """Return the path one segment shorter, or None for root-level paths."""
    normalized = normalize_path(path)
    if "/" not in normalized:
        return None
    return normalized.rsplit("/", 1)[0]


def last_segment(path: str) -> str:
    """Return the final segment of a path."""
    return normalize_path(path).rsplit("/", 1)[-1]


@dataclass
class PrintSettings:
    """Value object holding numeric resin print parameters.

    Attributes:
        exposure_time (Optional[float]): Normal layer exposure in seconds.
        bottom_exposure_time (Optional[float]): Bottom layer exposure in seconds.
        bottom_layers (Optional[int]): Number of bottom layers.
        lift_height (Optional[float]): Lift distance in millimetres.
        lift_speed (Optional[float]): Lift speed in millimetres per minute.
    """

    exposure_time: Optional[float] = None
    bottom_exposure_time: Optional[float] = None
    bottom_layers: Optional[int] = None
    lift_height: Optional[float] = None
    lift_speed: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the settings, omitting unset values."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def is_empty(self) -> bool:
        return not self.to_dict()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrintSettings":
        """Build settings from a mapping, ignoring unknown keys.

        Args:
            data (Dict[str, Any]): Mapping of setting names to values.

        Returns:
            PrintSettings: Settings populated from the known keys.
        """
        known = {key: data[key] for key in cls.__dataclass_fields__ if key in data}
        return cls(**known)

    @classmethod
    def from_json(cls, raw: Optional[str]) -> Optional["PrintSettings"]:
        """Parse settings stored as a JSON object.

        Malformed JSON is logged and treated as absent settings.

        Args:
            raw (Optional[str]): JSON text as stored in the database.

        Returns:
            Optional[PrintSettings]: Parsed settings, or None.
        """
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Ignoring malformed print settings JSON: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring print settings that are not a JSON object")
            return None
        return cls.from_dict(data)


@dataclass
class Item:
    """Domain entity representing one file or folder in the library tree.

    Attributes:
        id (Optional[int]): Stable identity, None until persisted.
        path (str): Unique location relative to the library root.
        name (str): Display name, usually the last path segment.
        type (FileType): Classification label of the item.
        parent_id (Optional[int]): Identity of the enclosing folder item.
        description (Optional[str]): Free-text description.
        date_added (Optional[datetime]): When the item was first recorded.
        last_modified (Optional[datetime]): When the metadata last changed.
        resin (Optional[str]): Resin used for printing.
        layer_height (Optional[float]): Layer height in millimetres.
        supports_needed (bool): Whether the model needs supports.
        notes (Optional[str]): Free-text notes.
        print_settings (Optional[PrintSettings]): Structured print parameters.
        tags (List[str]): Names of the tags directly attached to the item.
    """

    id: Optional[int]
    path: str
    name: str
    type: FileType = FileType.UNKNOWN
    parent_id: Optional[int] = None
    description: Optional[str] = None
    date_added: Optional[datetime] = None
    last_modified: Optional[datetime] = None
    resin: Optional[str] = None
    layer_height: Optional[float] = None
    supports_needed: bool = False
    notes: Optional[str] = None
    print_settings: Optional[PrintSettings] = None
    tags: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate and normalize the item after initialization.

        Raises:
            ValueError: If the path or name is empty.
        """
        if not self.path or not normalize_path(self.path):
            raise ValueError("Item path cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("Item name cannot be empty")

        self.path = normalize_path(self.path)
        self.name = self.name.strip()
        if not isinstance(self.type, FileType):
            self.type = FileType(self.type)

    def is_folder(self) -> bool:
        return is_folder_type(self.type)

    @property
    def parent_path(self) -> Optional[str]:
        return parent_path_of(self.path)

    @property
    def depth(self) -> int:
        return self.path.count("/") + 1

    @property
    def extension(self) -> str:
        """File extension without the dot, empty for folders and bare names."""
        if self.is_folder() or "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[-1].lower()


@dataclass
class DisplayInfo:
    """Presentation metadata for one item in a search result.

    Attributes:
        name (str): Display name.
        path (str): Item path.
        is_folder (bool): Whether the item is folder-like.
        item_count (int): Number of direct children.
        preview_path (Optional[str]): First image found inside the folder.
        extension (Optional[str]): File extension, files only.
        modified (Optional[datetime]): Last modification time, files only.
    """

    name: str
    path: str
    is_folder: bool
    item_count: int = 0
    preview_path: Optional[str] = None
    extension: Optional[str] = None
    modified: Optional[datetime] = None


@dataclass
class BatchSaveResult:
    """Outcome of applying one metadata update to many items.

    Attributes:
        total_processed (int): Number of items in the request.
        success_count (int): Items saved.
        error_count (int): Items skipped because they were invalid or failed.
        saved (List[Item]): The saved items, in request order.
        failed_paths (List[str]): Paths of the skipped items, when known.
    """

    total_processed: int = 0
    success_count: int = 0
    error_count: int = 0
    saved: List["Item"] = field(default_factory=list)
    failed_paths: List[str] = field(default_factory=list)
