"""Tests for training a store from a related-word source."""

import pytest

from concept_editor import ConceptStore, RelationKind
from concept_editor.sources import WordRelationship
from concept_editor.training import Trainer


class FakeSource:
    """Serves related words from a dict and records every lookup."""

    def __init__(self, related):
        self.related = related
        self.calls = []

    def related_words(self, word):
        self.calls.append(word)
        return [
            WordRelationship(kind, tuple(words))
            for kind, words in self.related.get(word, {}).items()
        ]


@pytest.fixture
def source():
    return FakeSource({
        "dog": {
            "synonym": ["hound"],
            "hypernym": ["animal"],
            "same-context": ["pet"],
        },
        "hound": {"synonym": ["dog"]},
        "animal": {"hyponym": ["dog", "cat"]},
    })


def _edges(store):
    return {
        (c.name, r.kind, store.concept_by_id(r.targets[0]).name)
        for c in store
        for r in c.relations
    }


class TestTrain:

    def test_depth_two(self, store, source):
        trainer = Trainer(store, source)

        dog = trainer.train("dog", 2)

        assert dog.name == "dog"
        assert [c.name for c in store] == ["dog", "hound", "anim"]
        assert _edges(store) == {
            ("hound", RelationKind.SYNONYM, "dog"),
            ("dog", RelationKind.SYNONYM, "hound"),
            ("anim", RelationKind.SUPERSET, "dog"),
            ("dog", RelationKind.SUBSET, "anim"),
        }
        assert trainer.relations_added == 4
        assert source.calls == ["dog", "hound", "animal"]

    def test_depth_one_only_creates_word(self, store, source):
        trainer = Trainer(store, source)

        trainer.train("dog", 1)

        assert [c.name for c in store] == ["dog"]
        assert store.find_concept("dog").relations == []
        assert trainer.relations_added == 0

    def test_depth_zero_does_nothing(self, store, source):
        assert Trainer(store, source).train("dog", 0) is None
        assert len(store) == 0
        assert source.calls == []

    def test_ignored_categories(self, store, source):
        Trainer(store, source).train("dog", 3)
        assert store.find_concept("pet") is None

    def test_existing_words_are_related_without_training(self, store, source):
        store.create_concept("hound")
        store.create_concept("animal")

        Trainer(store, source).train("dog", 1)

        assert source.calls == ["dog"]
        assert _edges(store) == {
            ("dog", RelationKind.SYNONYM, "hound"),
            ("dog", RelationKind.SUBSET, "anim"),
        }

    def test_existing_base_concept_is_reused(self, store, source):
        dog = store.create_concept("dog", "NOUN")
        assert Trainer(store, source).train("dogs", 1) is dog
        assert len(store) == 1

    def test_skips_self_and_repeats(self, store):
        source = FakeSource({
            "dog": {"synonym": ["dogs", "hound", "hounds"]},
            "hound": {},
        })
        trainer = Trainer(store, source)

        trainer.train("dog", 2)

        dog = store.find_concept("dog")
        assert len(dog.relations) == 1
        assert trainer.relations_added == 1

    def test_blank_related_words_skipped(self, store):
        source = FakeSource({
            "dog": {"synonym": ["", "  ", "hound"]},
            "hound": {},
        })
        trainer = Trainer(store, source)

        trainer.train("dog", 2)

        assert [c.name for c in store] == ["dog", "hound"]
        assert trainer.relations_added == 1
        assert source.calls == ["dog", "hound"]

    def test_saves_after_each_relation(self, store, source, tmp_path):
        path = tmp_path / "training.json"
        saves = []
        original_save = store.save

        def save(p):
            saves.append(p)
            original_save(p)

        store.save = save
        Trainer(store, source, snapshot_path=path).train("dog", 2)

        assert len(saves) == 4
        assert len(ConceptStore.load(path)) == 3

    def test_delay_before_each_request(self, store, source, monkeypatch):
        sleeps = []
        monkeypatch.setattr("concept_editor.training.time.sleep", sleeps.append)

        Trainer(store, source, delay=0.75).train("dog", 2)

        assert sleeps == [0.75, 0.75, 0.75]
