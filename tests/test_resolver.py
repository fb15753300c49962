"""Tests for UNION/EXAMPLE resolution and phrase description."""

import pytest

from concept_editor import RelationResolver, UnmatchedPhraseError


@pytest.fixture
def palette(colors):
    """colors plus warm = UNION(red, green) and cool = UNION(green, blue)."""
    store, red, green, blue = colors
    warm = store.create_concept("warm")
    cool = store.create_concept("cool")
    store.add_relation(warm, "UNION", ["red", "green"])
    store.add_relation(cool, "UNION", ["green", "blue"])
    return store, red, green, blue, warm, cool


class TestResolve:

    def test_base_concept_stands_for_itself(self, colors):
        store, red, *_ = colors
        assert RelationResolver(store).resolve(red) == {red}

    def test_descriptive_relations_are_inert(self, store_with_animals):
        store, dog, animal, _ = store_with_animals
        store.add_relation(dog, "SYNONYM", ["animal"])
        assert store.resolve(dog) == {dog}

    def test_union(self, palette):
        store, red, green, blue, warm, cool = palette
        assert store.resolve(warm) == {red, green}

    def test_nested_union(self, palette):
        store, red, green, blue, warm, cool = palette
        every = store.create_concept("every")
        store.add_relation(every, "UNION", ["warm", "cool"])
        assert store.resolve(every) == {red, green, blue}

    def test_example_is_intersection(self, palette):
        store, red, green, blue, warm, cool = palette
        shared = store.create_concept("share")
        store.add_relation(shared, "EXAMPLE", ["warm", "cool"])
        assert store.resolve(shared) == {green}

    def test_example_with_nothing_in_common(self, colors):
        store, red, green, blue = colors
        mixed = store.create_concept("mix")
        store.add_relation(mixed, "EXAMPLE", ["red", "blue"])
        assert store.resolve(mixed) == set()

    def test_union_keeps_duplicates_once(self, colors):
        store, red, *_ = colors
        echo = store.create_concept("echo")
        store.add_relation(echo, "UNION", ["red", "red"])
        assert store.resolve(echo) == {red}

    def test_combinator_hides_concept_itself(self, palette):
        store, red, green, blue, warm, cool = palette
        assert warm not in store.resolve(warm)

    def test_several_combinators_are_unioned(self, palette):
        store, red, green, blue, warm, cool = palette
        store.add_relation(warm, "EXAMPLE", ["blue"])
        assert store.resolve(warm) == {red, green, blue}

    def test_resolve_by_selector(self, palette):
        store, red, green, *_ = palette
        assert store.resolve("warm") == {red, green}


class TestDanglingAndCycles:

    def test_removed_union_target_contributes_nothing(self, palette):
        store, red, green, blue, warm, cool = palette
        store.remove_concept(red)
        assert store.resolve(warm) == {green}

    def test_removed_example_target_empties_intersection(self, palette):
        store, red, green, blue, warm, cool = palette
        shared = store.create_concept("share")
        store.add_relation(shared, "EXAMPLE", ["warm", "cool"])
        store.remove_concept(cool)
        assert store.resolve(shared) == set()

    def test_self_cycle(self, store):
        loop = store.create_concept("loop")
        store.add_relation(loop, "UNION", ["loop"])
        assert store.resolve(loop) == set()

    def test_two_concept_cycle_terminates(self, colors):
        store, red, *_ = colors
        a = store.create_concept("foo")
        b = store.create_concept("bar")
        store.add_relation(a, "UNION", ["bar", "red"])
        store.add_relation(b, "UNION", ["foo"])
        assert store.resolve(a) == {red}
        assert store.resolve(b) == {red}

    def test_diamond_is_not_a_cycle(self, palette):
        store, red, green, blue, warm, cool = palette
        top = store.create_concept("top")
        store.add_relation(top, "EXAMPLE", ["warm", "cool"])
        store.add_relation(top, "UNION", ["green", "warm"])
        assert store.resolve(top) == {red, green}


class TestDescribe:

    def test_describe_unions_every_concept(self, palette):
        store, red, green, blue, warm, cool = palette
        assert store.describe("warm blue") == {red, green, blue}

    def test_describe_base_concepts(self, store_with_animals):
        store, dog, animal, _ = store_with_animals
        assert store.describe("dogs animal") == {dog, animal}

    def test_describe_blank_phrase(self, colors):
        store, *_ = colors
        assert store.describe("") == set()

    def test_describe_unmatched(self, store_with_animals):
        store, *_ = store_with_animals
        with pytest.raises(UnmatchedPhraseError) as exc_info:
            store.describe("cat")
        assert exc_info.value.remainder == "cat"

    def test_resolver_describe_takes_concepts(self, palette):
        store, red, green, blue, warm, cool = palette
        resolver = RelationResolver(store)
        assert resolver.describe([warm, cool]) == {red, green, blue}
        assert resolver.describe([]) == set()
