"""Shared test fixtures and configuration."""

import os

import pytest

from redisearch_mapper.config import reset_settings
from redisearch_mapper.schema import Schema
from tests.data import A_DATE, A_POINT, AN_ARRAY, build_definition


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Drop any REDISEARCH_MAPPER_* variables and cached settings around each test."""
    for key in list(os.environ):
        if key.upper().startswith("REDISEARCH_MAPPER_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def hash_schema():
    return Schema("HashEntity", build_definition(), data_structure="HASH", id_strategy=lambda: "generated")


@pytest.fixture
def json_schema():
    return Schema("JsonEntity", build_definition(), data_structure="JSON", id_strategy=lambda: "generated")


@pytest.fixture
def full_entity_data():
    return {
        "aString": "foo",
        "someText": "the quick brown fox",
        "aNumber": 42,
        "aBoolean": False,
        "aPoint": A_POINT,
        "aDate": A_DATE,
        "anArray": list(AN_ARRAY),
    }
