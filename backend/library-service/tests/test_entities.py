"""Tests for domain entities."""

from datetime import datetime

import pytest
from domain.entities.file_types import FileType
from domain.entities.item import Item, PrintSettings, normalize_path, parent_path_of
from domain.entities.search import SearchCriteria, SearchHit, SearchResult
from domain.entities.tag import TagEntity


class TestPaths:
    def test_normalize_path(self):
        assert normalize_path("/Pub\\Coll//Dragon/") == "Pub/Coll/Dragon"

    def test_parent_path_of(self):
        assert parent_path_of("Pub/Coll/Dragon") == "Pub/Coll"
        assert parent_path_of("Pub") is None


class TestItem:
    def test_item_is_normalized(self):
        item = Item(id=None, path="/Pub/Coll/Dragon/", name=" Dragon ", type="Model")

        assert item.path == "Pub/Coll/Dragon"
        assert item.name == "Dragon"
        assert item.type == FileType.MODEL
        assert item.is_folder()
        assert item.parent_path == "Pub/Coll"
        assert item.depth == 3

    def test_file_extension(self):
        item = Item(id=1, path="Pub/body.STL", name="body.STL", type=FileType.STL)
        assert item.extension == "stl"
        assert not item.is_folder()

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError, match="path"):
            Item(id=None, path=" / ", name="x")

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="name"):
            Item(id=None, path="Pub", name="   ")

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            Item(id=None, path="Pub", name="Pub", type="Spaceship")


class TestPrintSettings:
    def test_json_keeps_only_set_values(self):
        settings = PrintSettings(exposure_time=2.5, bottom_layers=6)
        assert PrintSettings.from_json(settings.to_json()) == settings
        assert settings.to_dict() == {"exposure_time": 2.5, "bottom_layers": 6}

    def test_unknown_keys_ignored(self):
        settings = PrintSettings.from_dict({"lift_speed": 60, "colour": "grey"})
        assert settings == PrintSettings(lift_speed=60)

    def test_malformed_json_is_absent(self):
        assert PrintSettings.from_json("{not json") is None
        assert PrintSettings.from_json("[1, 2]") is None
        assert PrintSettings.from_json(None) is None

    def test_is_empty(self):
        assert PrintSettings().is_empty()


class TestTagEntity:
    def test_name_is_stripped(self):
        assert TagEntity(id=None, name=" 32mm ").name == "32mm"

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError):
            TagEntity(id=None, name="  ")

    def test_with_id(self):
        tag = TagEntity(id=None, name="32mm")
        assert tag.is_new()
        assert tag.with_id(3) == TagEntity(id=3, name="32mm")


class TestSearchCriteria:
    def test_normalization(self):
        criteria = SearchCriteria(
            query=" dragon ", tags=[" 32mm", "", "32mm", "fantasy"], file_type=" "
        )

        assert criteria.query == " dragon "
        assert criteria.tags == ["32mm", "fantasy"]
        assert criteria.file_type is None

    def test_blank_criteria_are_empty(self):
        assert SearchCriteria(query="", tags=["", "  "]).is_empty()
        assert SearchCriteria().is_empty()

    def test_whitespace_query_is_an_active_criterion(self):
        criteria = SearchCriteria(query=" ")

        assert criteria.has_text_search()
        assert not criteria.is_empty()

    def test_enum_file_type(self):
        criteria = SearchCriteria(file_type=FileType.STL)
        assert criteria.file_type == "STL File"
        assert criteria.has_file_type_filter()
        assert not criteria.has_text_search()


class TestSearchResult:
    def test_counts(self):
        hit = SearchHit(name="Dragon", path="Pub/Coll/Dragon", kind="folder")
        result = SearchResult(
            hits=[hit], criteria=SearchCriteria(tags=["32mm"]), search_timestamp=datetime.utcnow()
        )

        assert result.hits_count == 1
        assert not result.is_empty()
        assert hit.is_folder()
