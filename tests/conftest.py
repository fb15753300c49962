"""Shared test fixtures for concept-editor."""

import pytest

from concept_editor import ConceptStore


@pytest.fixture
def store():
    """An empty in-memory store."""
    return ConceptStore()


@pytest.fixture
def store_with_animals(store):
    """Store with dog (id=1) and animal (id=2); dog has a SUPERSET relation."""
    dog = store.create_concept("dog", "NOUN")
    animal = store.create_concept("animal", "NOUN")
    relation = store.add_relation(dog, "SUPERSET", ["animal"])
    return store, dog, animal, relation


@pytest.fixture
def colors(store):
    """Store with base concepts red, green and blue."""
    red = store.create_concept("red", "ADJECTIVE")
    green = store.create_concept("green", "ADJECTIVE")
    blue = store.create_concept("blue", "ADJECTIVE")
    return store, red, green, blue
