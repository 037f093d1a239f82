"""Tests for the per-criterion matchers and the set combiner."""

from unittest.mock import patch

import pytest
from domain.entities.search import SearchCriteria
from domain.services.criteria_matchers import (
    CriteriaMatcher,
    intersect_match_sets,
    unique_paths,
)
from domain.services.search_service import SearchService
from infrastructure.models.item_orm import ItemORM
from infrastructure.models.tag_orm import TagORM
from infrastructure.repositories.sqlalchemy_item_repository import (
    SqlAlchemyItemRepository,
)
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

DRAGON_SUBTREE = [
    "Pub/Coll/Dragon",
    "Pub/Coll/Dragon/body.stl",
    "Pub/Coll/Dragon/head.stl",
    "Pub/Coll/Dragon/Supported",
    "Pub/Coll/Dragon/Supported/body_supported.stl",
    "Pub/Coll/Dragon/Supported/render.png",
    "Pub/Coll/Dragon/dragon.png",
]


class FlakyItemRepository(SqlAlchemyItemRepository):
    """Item repository whose descendant lookup fails for chosen items."""

    def __init__(self, failing_ids):
        self.failing_ids = set(failing_ids)

    async def find_descendants(self, db_session, item_id):
        if item_id in self.failing_ids:
            raise OperationalError("SELECT", {}, Exception("database is locked"))
        return await super().find_descendants(db_session, item_id)


class BrokenStatementItemRepository(SqlAlchemyItemRepository):
    """Item repository whose first lookup for an item writes, then runs invalid SQL."""

    def __init__(self, failing_ids):
        self.failing_ids = set(failing_ids)

    async def find_descendants(self, db_session, item_id):
        if item_id in self.failing_ids:
            self.failing_ids.discard(item_id)
            db_session.add(TagORM(name="half-written"))
            db_session.flush()
            db_session.execute(text("SELECT id FROM missing_table"))
        return await super().find_descendants(db_session, item_id)


@pytest.fixture
def matcher(item_repository, tag_repository):
    return CriteriaMatcher(item_repository, tag_repository)


def tag_item(db_session, path, name):
    item = db_session.query(ItemORM).filter(ItemORM.path == path).one()
    tag = db_session.query(TagORM).filter(TagORM.name == name).first() or TagORM(
        name=name
    )
    item.tags.append(tag)
    db_session.flush()


class TestSetCombiner:
    def test_single_set_unchanged(self):
        assert intersect_match_sets([["b", "a"]]) == ["b", "a"]

    def test_keeps_first_set_order(self):
        assert intersect_match_sets([["a", "b", "c"], ["c", "a"], ["a", "c", "d"]]) == [
            "a",
            "c",
        ]

    def test_no_sets(self):
        assert intersect_match_sets([]) == []

    def test_unique_paths(self):
        assert unique_paths(["a", "b", "a"]) == ["a", "b"]


class TestTagMatching:
    @pytest.mark.asyncio
    async def test_inheritance_reaches_every_depth(self, db_session, library, matcher):
        assert await matcher.match_single_tag(db_session, "32mm") == DRAGON_SUBTREE

    @pytest.mark.asyncio
    async def test_tag_on_collection_covers_all_models(
        self, db_session, library, matcher
    ):
        matches = await matcher.match_single_tag(db_session, "fantasy")

        assert matches[0] == "Pub/Coll"
        assert set(DRAGON_SUBTREE) <= set(matches)
        assert "Pub/Coll/Goblin/goblin.lys" in matches
        assert "Pub/readme.pdf" not in matches

    @pytest.mark.asyncio
    async def test_multiple_tags_intersect(self, db_session, library, matcher):
        both = await matcher.match_tags(db_session, ["32mm", "fantasy"])
        only_32mm = await matcher.match_tags(db_session, ["32mm"])
        only_fantasy = await matcher.match_tags(db_session, ["fantasy"])

        assert both == DRAGON_SUBTREE
        assert set(both) == set(only_32mm) & set(only_fantasy)

    @pytest.mark.asyncio
    async def test_tag_names_are_exact(self, db_session, library, matcher):
        assert await matcher.match_single_tag(db_session, "32MM") == []
        assert await matcher.match_tags(db_session, ["32mm", "missing"]) == []

    @pytest.mark.asyncio
    async def test_duplicate_coverage_collapses(self, db_session, library, matcher):
        tag_item(db_session, "Pub/Coll/Dragon/Supported", "32mm")

        matches = await matcher.match_single_tag(db_session, "32mm")
        assert matches == DRAGON_SUBTREE

    @pytest.mark.asyncio
    async def test_failed_descendant_lookup_skips_only_that_item(
        self, db_session, library, tag_repository
    ):
        tag_item(db_session, "Pub/Coll", "painted")
        tag_item(db_session, "Pub/Coll/Goblin", "painted")
        flaky = FlakyItemRepository(failing_ids=[library["Pub/Coll"]])
        matcher = CriteriaMatcher(flaky, tag_repository)

        matches = await matcher.match_single_tag(db_session, "painted")

        assert matches == [
            "Pub/Coll",
            "Pub/Coll/Goblin",
            "Pub/Coll/Goblin/goblin.lys",
        ]


class TestTextAndTypeMatching:
    @pytest.mark.asyncio
    async def test_match_text(self, db_session, library, matcher):
        assert await matcher.match_text(db_session, "dragon") == [
            "Pub/Coll/Dragon",
            "Pub/Coll/Dragon/dragon.png",
        ]

    @pytest.mark.asyncio
    async def test_unknown_type_matches_nothing(self, db_session, library, matcher):
        assert await matcher.match_file_type(db_session, "Spaceship") == []


class TestTagLookupSavepoints:
    @pytest.mark.asyncio
    async def test_failed_lookup_rolls_back_to_its_savepoint(
        self, db_session, library, tag_repository
    ):
        tag_item(db_session, "Pub/Coll", "painted")
        tag_item(db_session, "Pub/Coll/Goblin", "painted")
        repository = BrokenStatementItemRepository(failing_ids=[library["Pub/Coll"]])
        matcher = CriteriaMatcher(repository, tag_repository)

        with patch.object(
            db_session, "begin_nested", wraps=db_session.begin_nested
        ) as begin_nested:
            matches = await matcher.match_tags(db_session, ["painted", "fantasy"])

        assert matches == [
            "Pub/Coll",
            "Pub/Coll/Goblin",
            "Pub/Coll/Goblin/goblin.lys",
        ]
        assert begin_nested.call_count == 3

        # Work from before the failure survives; the failed lookup's write does not.
        assert db_session.query(TagORM).filter(TagORM.name == "painted").count() == 1
        assert (
            db_session.query(TagORM).filter(TagORM.name == "half-written").count() == 0
        )

    @pytest.mark.asyncio
    async def test_search_continues_after_failed_lookup(
        self, db_session, library, tag_repository
    ):
        repository = BrokenStatementItemRepository(
            failing_ids=[library["Pub/Coll/Dragon"]]
        )
        service = SearchService(repository, tag_repository)

        result = await service.search(
            db_session, SearchCriteria(tags=["32mm", "fantasy"])
        )

        assert [hit.path for hit in result.hits] == ["Pub/Coll/Dragon"]
        assert db_session.in_transaction()
