"""Item converters for transforming between Pydantic schemas and domain objects.

This module contains converter functions for item metadata, turning
request schemas into the arguments of the metadata service and domain
entities into response schemas.
"""

from typing import Any, Dict, List, Optional, Tuple

from domain.entities.item import BatchSaveResult, Item, PrintSettings

from application.rest.schemas.input.metadata_input import (
    MetadataBatchRequest,
    MetadataUpdate,
    PrintSettingsInput,
)
from application.rest.schemas.output.item_output import (
    HierarchyEntryResponse,
    ItemMetadataResponse,
    MetadataBatchResponse,
)


class ItemConverter:
    """Converter class for item metadata transformations between layers.

    Example:
        >>> kwargs = ItemConverter.update_input_to_kwargs(MetadataUpdate(tags=["32mm"]))
        >>> item = await item_service.save_metadata(db, "Pub/Coll/Dragon", **kwargs)
        >>> response = ItemConverter.entity_to_response(item)
    """

    @staticmethod
    def print_settings_input_to_entity(
        settings: Optional[PrintSettingsInput],
    ) -> Optional[PrintSettings]:
        if settings is None:
            return None
        return PrintSettings.from_dict(settings.model_dump(exclude_none=True))

    @staticmethod
    def update_input_to_kwargs(metadata: MetadataUpdate) -> Dict[str, Any]:
        """Convert a metadata request into ItemService.save_metadata arguments.

        Args:
            metadata (MetadataUpdate): Validated request body.

        Returns:
            Dict[str, Any]: Keyword arguments for save_metadata, without the path.
        """
        return {
            "name": metadata.file_name,
            "item_type": metadata.category.value if metadata.category else None,
            "is_directory": metadata.is_directory,
            "description": metadata.description,
            "tags": metadata.tags,
            "resin": metadata.resin,
            "layer_height": metadata.layer_height,
            "supports_needed": metadata.supports_needed,
            "notes": metadata.notes,
            "print_settings": ItemConverter.print_settings_input_to_entity(
                metadata.print_settings
            ),
            "date_added": metadata.date_added,
            "last_modified": metadata.last_modified,
        }

    @staticmethod
    def batch_input_to_arguments(
        batch: MetadataBatchRequest,
    ) -> Tuple[List[Dict[str, Optional[str]]], Dict[str, Any]]:
        """Split a batch request into item entries and shared save arguments."""
        updates = ItemConverter.update_input_to_kwargs(batch.updates)
        updates.pop("name")
        return [entry.model_dump() for entry in batch.items], updates

    @staticmethod
    def entity_to_response(item: Item) -> ItemMetadataResponse:
        return ItemMetadataResponse.from_entity(item)

    @staticmethod
    def entities_to_responses(items: List[Item]) -> List[ItemMetadataResponse]:
        return [ItemMetadataResponse.from_entity(item) for item in items]

    @staticmethod
    def batch_result_to_response(result: BatchSaveResult) -> MetadataBatchResponse:
        return MetadataBatchResponse.from_entity(result)

    @staticmethod
    def entities_to_hierarchy(items: List[Item]) -> List[HierarchyEntryResponse]:
        """Convert an ancestor chain into hierarchy response entries.

        Args:
            items (List[Item]): Ancestors ordered root first.

        Returns:
            List[HierarchyEntryResponse]: Entries in the same order.
        """
        return [
            HierarchyEntryResponse(
                id=item.id, name=item.name, path=item.path, file_type=item.type.value
            )
            for item in items
        ]
