"""Unit tests for Entity."""

import pytest

from redisearch_mapper.entity import Entity
from redisearch_mapper.errors import TypeMismatchError, UnknownFieldError
from redisearch_mapper.schema import Point
from tests.data import A_DATE, A_DATE_ISO


@pytest.mark.unit
class TestEntity:
    def test_generates_id_and_key(self, hash_schema):
        entity = Entity(hash_schema)

        assert entity.entity_id == "generated"
        assert entity.key == "HashEntity:generated"

    def test_explicit_id_and_key(self, hash_schema):
        entity = Entity(hash_schema, "abc", key="custom:abc")

        assert entity.entity_id == "abc"
        assert entity.key == "custom:abc"

    def test_initial_data_is_validated(self, hash_schema, full_entity_data):
        entity = Entity(hash_schema, "abc", full_entity_data)

        assert entity.entity_data == full_entity_data

        with pytest.raises(TypeMismatchError):
            Entity(hash_schema, "abc", {"aNumber": "many"})

    def test_unset_fields_read_as_none(self, hash_schema):
        entity = Entity(hash_schema, "abc")

        assert entity.get("aString") is None
        assert entity["aNumber"] is None
        assert "aNumber" not in entity

    def test_falsy_values_are_stored(self, hash_schema):
        entity = Entity(hash_schema, "abc", {"aNumber": 0, "aString": "", "aBoolean": False, "anArray": []})

        assert entity.entity_data == {"aNumber": 0, "aString": "", "aBoolean": False, "anArray": []}

    def test_none_unsets(self, hash_schema):
        entity = Entity(hash_schema, "abc", {"aNumber": 1, "aString": "x"})

        entity["aNumber"] = None
        del entity["aString"]

        assert entity.entity_data == {}

    def test_values_are_normalized(self, hash_schema):
        entity = Entity(hash_schema, "abc")

        entity.set("aDate", A_DATE_ISO)
        entity["aPoint"] = {"longitude": 1, "latitude": 2}
        entity["aString"] = 42

        assert entity["aDate"] == A_DATE
        assert entity["aPoint"] == Point(longitude=1, latitude=2)
        assert entity["aString"] == "42"

    def test_unknown_fields(self, hash_schema):
        entity = Entity(hash_schema, "abc")

        with pytest.raises(UnknownFieldError, match="'nope' is not part of the schema"):
            entity.get("nope")
        with pytest.raises(UnknownFieldError):
            entity["nope"] = 1

    def test_entity_data_is_a_copy(self, hash_schema):
        entity = Entity(hash_schema, "abc", {"aNumber": 1})

        entity.entity_data["aNumber"] = 2

        assert entity["aNumber"] == 1

    def test_to_dict_and_iteration(self, hash_schema):
        entity = Entity(hash_schema, "abc", {"aNumber": 1, "aBoolean": True})

        assert entity.to_dict() == {"entity_id": "abc", "aNumber": 1, "aBoolean": True}
        assert sorted(entity) == ["aBoolean", "aNumber"]

    def test_equality(self, hash_schema, json_schema):
        assert Entity(hash_schema, "abc", {"aNumber": 1}) == Entity(hash_schema, "abc", {"aNumber": 1})
        assert Entity(hash_schema, "abc", {"aNumber": 1}) != Entity(hash_schema, "abc", {"aNumber": 2})
        assert Entity(hash_schema, "abc") != Entity(json_schema, "abc")
