"""File type vocabulary for items in the model library.

This module contains the fixed classification labels assigned to every
file and folder in the library tree, plus the rules used to guess a label
from an item's position and extension when none is supplied.
"""

from enum import Enum
from typing import Optional


class FileType(str, Enum):
    """Enumeration of the item classification labels.

    Folder-like labels describe the structural levels of the library
    (publisher, collection, model, variant). File-like labels describe
    the content files found inside model folders.
    """

    ROOT = "Root"
    PUBLISHER = "Publisher"
    COLLECTION = "Collection"
    MODEL = "Model"
    VARIANT = "Variant"

    STL = "STL File"
    SLICER = "Slicer File"
    IMAGE = "Image"
    DOCUMENT = "Document"
    UNKNOWN = "Unknown"


FOLDER_TYPES = frozenset(
    {
        FileType.ROOT,
        FileType.PUBLISHER,
        FileType.COLLECTION,
        FileType.MODEL,
        FileType.VARIANT,
    }
)

VARIANT_FOLDER_NAMES = frozenset({"Supported", "Unsupported", "Parts", "Split"})

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp"})

_EXTENSION_TYPES = {
    "stl": FileType.STL,
    "lys": FileType.SLICER,
    "pdf": FileType.DOCUMENT,
    "txt": FileType.DOCUMENT,
    "md": FileType.DOCUMENT,
}
_EXTENSION_TYPES.update({ext: FileType.IMAGE for ext in IMAGE_EXTENSIONS})


def is_folder_type(label: str) -> bool:
    """Check whether a type label describes a folder.

    Args:
        label (str): A type label, either a FileType or its string value.

    Returns:
        bool: True for Root, Publisher, Collection, Model and Variant.

    Example:
        >>> is_folder_type("Model")
        True
        >>> is_folder_type("STL File")
        False
    """
    try:
        return FileType(label) in FOLDER_TYPES
    except ValueError:
        return False


def determine_file_type(
    path: str, is_directory: bool, extension: Optional[str] = None
) -> FileType:
    """Guess the type label of an item from its path.

    Directories are classified by depth below the library root, with a few
    well-known folder names always treated as variants. Files are
    classified by extension.

    Args:
        path (str): Item path relative to the library root.
        is_directory (bool): Whether the item is a folder.
        extension (Optional[str]): File extension, with or without a leading dot.

    Returns:
        FileType: The inferred classification.

    Example:
        >>> determine_file_type("Pub/Coll/Dragon", True)
        <FileType.MODEL: 'Model'>
        >>> determine_file_type("Pub/Coll/Dragon/body.stl", False, "stl")
        <FileType.STL: 'STL File'>
    """
    parts = [part for part in path.replace("\\", "/").split("/") if part]
    depth = len(parts)

    if is_directory:
        if depth == 0:
            return FileType.ROOT
        if depth == 1:
            return FileType.PUBLISHER
        if depth == 2:
            return FileType.COLLECTION
        if parts[-1] in VARIANT_FOLDER_NAMES:
            return FileType.VARIANT
        if depth == 3:
            return FileType.MODEL
        return FileType.VARIANT

    if not extension:
        return FileType.UNKNOWN

    return _EXTENSION_TYPES.get(extension.lower().lstrip("."), FileType.UNKNOWN)
