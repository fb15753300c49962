"""Tests for the graph validation engine."""

from concept_editor import ConceptStore, Relation, RelationKind, Snapshot, validate_store
from concept_editor.validator import validate_concept


def _rule_ids(results):
    return {r.rule_id for r in results}


class TestValidateClean:

    def test_empty_store(self, store):
        assert validate_store(store) == []

    def test_clean_graph(self, store_with_animals):
        store, *_ = store_with_animals
        assert validate_store(store) == []


class TestShadowedName:

    def test_second_duplicate_reported(self, store):
        first = store.create_concept("dog")
        second = store.create_concept("dogs")
        results = validate_store(store)

        assert len(results) == 1
        assert results[0].rule_id == "VAL-CON-001"
        assert results[0].severity == "WARNING"
        assert results[0].entity_id == second.id
        assert results[0].details == {"shadowed_by": first.id}


class TestDanglingTarget:

    def test_removed_target_reported(self, store_with_animals):
        store, dog, animal, relation = store_with_animals
        store.remove_concept(animal)
        results = validate_store(store)

        assert _rule_ids(results) == {"VAL-REL-001"}
        assert results[0].entity_id == relation.id
        assert results[0].details["owner"] == dog.id
        assert results[0].details["missing"] == [animal.id]


class TestCycle:

    def test_self_union(self, colors):
        store, red, *_ = colors
        store.add_relation(red, "UNION", ["red"])
        results = validate_store(store)
        assert [(r.rule_id, r.entity_id) for r in results] == [("VAL-REL-002", red.id)]

    def test_every_member_of_cycle_reported(self, colors):
        store, red, green, blue = colors
        store.add_relation(red, "UNION", ["green"])
        store.add_relation(green, "EXAMPLE", ["red", "blue"])
        cyclic = {r.entity_id for r in validate_store(store) if r.rule_id == "VAL-REL-002"}
        assert cyclic == {red.id, green.id}

    def test_descriptive_cycle_ignored(self, colors):
        store, red, green, _ = colors
        store.add_relation(red, "SYNONYM", ["green"])
        store.add_relation(green, "SYNONYM", ["red"])
        assert validate_store(store) == []

    def test_diamond_not_reported(self, colors):
        store, red, green, blue = colors
        store.add_relation(red, "UNION", ["green", "blue"])
        store.add_relation(green, "UNION", ["blue"])
        assert validate_store(store) == []


class TestEmptyTargets:

    def test_restored_relation_without_targets(self):
        store = ConceptStore()
        red = store.create_concept("red")
        red.relations.append(Relation(id=1, kind=RelationKind.UNION, targets=()))
        snapshot = store.snapshot()
        store.restore(Snapshot(
            version=snapshot.version,
            max_concept_id=snapshot.max_concept_id,
            max_relation_id=1,
            concepts=snapshot.concepts,
        ))

        results = validate_store(store)

        assert _rule_ids(results) == {"VAL-REL-003"}
        assert results[0].severity == "ERROR"


class TestValidateConcept:

    def test_only_owned_findings(self, colors):
        store, red, green, blue = colors
        store.add_relation(red, "UNION", ["blue"])
        store.add_relation(green, "UNION", ["blue"])
        store.remove_concept(blue)

        results = validate_concept(store, red)

        assert len(results) == 1
        assert results[0].details["owner"] == red.id

    def test_concept_findings(self, colors):
        store, red, *_ = colors
        store.add_relation(red, "UNION", ["red"])
        assert _rule_ids(validate_concept(store, red)) == {"VAL-REL-002"}
