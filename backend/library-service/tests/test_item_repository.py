"""Tests for the SQLAlchemy hierarchy store."""

import pytest
from domain.entities.file_types import FileType
from domain.entities.item import Item
from infrastructure.models.item_orm import ItemORM

from conftest import add_item


class TestTraversal:
    @pytest.mark.asyncio
    async def test_find_descendants_is_transitive(
        self, db_session, library, item_repository
    ):
        descendants = await item_repository.find_descendants(
            db_session, library["Pub/Coll/Dragon"]
        )

        assert [item.path for item in descendants] == [
            "Pub/Coll/Dragon/body.stl",
            "Pub/Coll/Dragon/head.stl",
            "Pub/Coll/Dragon/Supported",
            "Pub/Coll/Dragon/Supported/body_supported.stl",
            "Pub/Coll/Dragon/Supported/render.png",
            "Pub/Coll/Dragon/dragon.png",
        ]

    @pytest.mark.asyncio
    async def test_find_descendants_of_leaf(self, db_session, library, item_repository):
        assert await item_repository.find_descendants(
            db_session, library["Pub/readme.pdf"]
        ) == []

    @pytest.mark.asyncio
    async def test_find_items_by_parent(self, db_session, library, item_repository):
        children = await item_repository.find_items_by_parent(
            db_session, library["Pub/Coll"]
        )
        assert [item.path for item in children] == ["Pub/Coll/Dragon", "Pub/Coll/Goblin"]

    @pytest.mark.asyncio
    async def test_find_ancestors_nearest_first(
        self, db_session, library, item_repository
    ):
        ancestors = await item_repository.find_ancestors(
            db_session, "Pub/Coll/Dragon/Supported/render.png"
        )

        assert [item.path for item in ancestors] == [
            "Pub/Coll/Dragon/Supported",
            "Pub/Coll/Dragon",
            "Pub/Coll",
            "Pub",
        ]

    @pytest.mark.asyncio
    async def test_find_ancestors_of_type(self, db_session, library, item_repository):
        models = await item_repository.find_ancestors_of_type(
            db_session, "Pub/Coll/Dragon/Supported/render.png", "Model"
        )
        assert [item.path for item in models] == ["Pub/Coll/Dragon"]

        assert await item_repository.find_ancestors_of_type(
            db_session, "Pub/readme.pdf", "Model"
        ) == []

    @pytest.mark.asyncio
    async def test_ancestors_of_unknown_path(self, db_session, library, item_repository):
        assert await item_repository.find_ancestors(db_session, "Nope/Nothing") == []

    @pytest.mark.asyncio
    async def test_count_children(self, db_session, library, item_repository):
        assert await item_repository.count_children(db_session, "Pub/Coll/Dragon") == 4
        assert await item_repository.count_children(db_session, "Pub/readme.pdf") == 0
        assert await item_repository.count_children(db_session, "Missing") == 0


class TestMatching:
    @pytest.mark.asyncio
    async def test_text_is_case_insensitive(self, db_session, library, item_repository):
        paths = await item_repository.find_paths_by_text(db_session, "DRAGON")
        assert paths == ["Pub/Coll/Dragon", "Pub/Coll/Dragon/dragon.png"]

    @pytest.mark.asyncio
    async def test_text_searches_description_and_notes(
        self, db_session, library, item_repository
    ):
        assert await item_repository.find_paths_by_text(db_session, "read me") == [
            "Pub/readme.pdf"
        ]
        assert await item_repository.find_paths_by_text(db_session, "scaled") == [
            "Pub/Coll/Goblin"
        ]

    @pytest.mark.asyncio
    async def test_like_wildcards_match_literally(
        self, db_session, library, item_repository
    ):
        assert await item_repository.find_paths_by_text(db_session, "%") == [
            "Pub/Coll/Goblin"
        ]
        assert await item_repository.find_paths_by_text(db_session, "1_2") == []
        assert await item_repository.find_paths_by_text(db_session, "102") == [
            "Pub/Coll/Goblin"
        ]

    @pytest.mark.asyncio
    async def test_type_is_exact(self, db_session, library, item_repository):
        assert await item_repository.find_paths_by_type(db_session, "STL File") == [
            "Pub/Coll/Dragon/body.stl",
            "Pub/Coll/Dragon/head.stl",
            "Pub/Coll/Dragon/Supported/body_supported.stl",
        ]
        assert await item_repository.find_paths_by_type(db_session, "stl file") == []
        assert await item_repository.find_paths_by_type(db_session, "Spaceship") == []


class TestDisplayInfo:
    @pytest.mark.asyncio
    async def test_folder_info_with_nearest_preview(
        self, db_session, library, item_repository
    ):
        info = await item_repository.get_display_info(db_session, "Pub/Coll/Dragon")

        assert info.is_folder
        assert info.name == "Dragon"
        assert info.item_count == 4
        assert info.preview_path == "Pub/Coll/Dragon/dragon.png"

    @pytest.mark.asyncio
    async def test_preview_found_at_any_depth(
        self, db_session, library, item_repository
    ):
        info = await item_repository.get_display_info(db_session, "Pub/Coll")
        assert info.preview_path == "Pub/Coll/Dragon/dragon.png"

    @pytest.mark.asyncio
    async def test_folder_without_images(self, db_session, library, item_repository):
        info = await item_repository.get_display_info(db_session, "Pub/Coll/Goblin")
        assert info.item_count == 1
        assert info.preview_path is None

    @pytest.mark.asyncio
    async def test_file_info(self, db_session, library, item_repository):
        info = await item_repository.get_display_info(db_session, "Pub/readme.pdf")

        assert not info.is_folder
        assert info.extension == "pdf"
        assert info.modified is not None

    @pytest.mark.asyncio
    async def test_unknown_path(self, db_session, library, item_repository):
        assert await item_repository.get_display_info(db_session, "Missing") is None


class TestPersistence:
    @pytest.mark.asyncio
    async def test_save_creates_then_updates_by_path(
        self, db_session, library, item_repository
    ):
        created = await item_repository.save(
            db_session,
            Item(
                id=None,
                path="Pub/Coll/Orc",
                name="Orc",
                type=FileType.MODEL,
                parent_id=library["Pub/Coll"],
            ),
        )
        updated = await item_repository.save(
            db_session,
            Item(
                id=None,
                path="Pub/Coll/Orc",
                name="Orc Warboss",
                type=FileType.MODEL,
                parent_id=library["Pub/Coll"],
            ),
        )

        assert updated.id == created.id
        assert updated.name == "Orc Warboss"
        assert db_session.query(ItemORM).filter(ItemORM.path == "Pub/Coll/Orc").count() == 1

    @pytest.mark.asyncio
    async def test_link_orphans_only_adopts_direct_children(
        self, db_session, library, item_repository
    ):
        child = add_item(db_session, "Pub/Coll/Orc/orc.stl", FileType.STL)
        grandchild = add_item(db_session, "Pub/Coll/Orc/Parts/arm.stl", FileType.STL)
        assert child.parent_id is None

        folder = await item_repository.save(
            db_session, Item(id=None, path="Pub/Coll/Orc", name="Orc", type=FileType.MODEL)
        )
        linked = await item_repository.link_orphans(db_session, folder)

        assert linked == 1
        assert child.parent_id == folder.id
        assert grandchild.parent_id is None

    @pytest.mark.asyncio
    @pytest.mark.filterwarnings("error::sqlalchemy.exc.SAWarning")
    async def test_file_types_are_distinct_and_sorted(
        self, db_session, library, item_repository
    ):
        assert await item_repository.get_all_file_types(db_session) == [
            "Collection",
            "Document",
            "Image",
            "Model",
            "Publisher",
            "STL File",
            "Slicer File",
            "Variant",
        ]

    @pytest.mark.asyncio
    async def test_unrecognized_stored_type_reads_as_unknown(
        self, db_session, library, item_repository
    ):
        db_session.add(ItemORM(path="Pub/odd.bin", name="odd.bin", item_type="Blob"))
        db_session.flush()

        item = await item_repository.find_item_by_path(db_session, "Pub/odd.bin")
        assert item.type == FileType.UNKNOWN

    @pytest.mark.asyncio
    async def test_find_item_by_path_includes_tags(
        self, db_session, library, item_repository
    ):
        item = await item_repository.find_item_by_path(db_session, "/Pub/Coll/Dragon/")
        assert item.tags == ["32mm"]
