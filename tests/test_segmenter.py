"""Tests for greedy phrase segmentation."""

import pytest

from concept_editor import PhraseSegmenter, UnmatchedPhraseError, normalize


@pytest.fixture
def foo_bar(store):
    """Store holding foo, bar, "foo bar" and "bar qux"."""
    foo = store.create_concept("foo")
    bar = store.create_concept("bar")
    foo_bar = store.create_concept("foo bar")
    bar_qux = store.create_concept("bar qux")
    return store, foo, bar, foo_bar, bar_qux


class TestSegment:

    def test_single_word(self, store_with_animals):
        store, dog, _, _ = store_with_animals
        assert PhraseSegmenter(store).segment("dog") == [dog]

    def test_words_in_order(self, colors):
        store, red, green, blue = colors
        assert store.segment("blue red green") == [blue, red, green]

    def test_repeated_words(self, colors):
        store, red, *_ = colors
        assert store.segment("red red") == [red, red]

    def test_longest_prefix_wins(self, foo_bar):
        store, foo, bar, foo_bar_, _ = foo_bar
        assert store.segment("foo bar") == [foo_bar_]

    def test_no_backtracking(self, foo_bar):
        # "foo" + "bar qux" would cover the phrase, the greedy pick does not
        store, foo, bar, foo_bar_, bar_qux = foo_bar
        with pytest.raises(UnmatchedPhraseError) as exc_info:
            store.segment("foo bar qux")
        assert exc_info.value.words == ("qux",)

    def test_shorter_prefix_when_longer_missing(self, foo_bar):
        store, foo, bar, foo_bar_, bar_qux = foo_bar
        assert store.segment("bar foo") == [bar, foo]
        assert store.segment("foo foo bar") == [foo, foo_bar_]
        assert store.segment("bar qux foo") == [bar_qux, foo]

    def test_inflections_match(self, store_with_animals):
        store, dog, animal, _ = store_with_animals
        assert store.segment("Dogs ANIMALS") == [dog, animal]

    def test_extra_whitespace(self, colors):
        store, red, green, _ = colors
        assert store.segment("  red \t green ") == [red, green]

    def test_blank_phrase(self, colors):
        store, *_ = colors
        assert store.segment("") == []
        assert store.segment("   ") == []

    def test_id_as_word(self, colors):
        store, red, green, blue = colors
        assert store.segment("3 red") == [blue, red]


class TestUnmatched:

    def test_unknown_word(self, store_with_animals):
        store, *_ = store_with_animals
        with pytest.raises(UnmatchedPhraseError) as exc_info:
            store.segment("cat")
        assert exc_info.value.remainder == "cat"

    def test_remainder_keeps_rest_of_phrase(self, store_with_animals):
        store, *_ = store_with_animals
        with pytest.raises(UnmatchedPhraseError) as exc_info:
            store.segment("dog cats animals")
        assert exc_info.value.words == (normalize("cats"), normalize("animals"))

    def test_message_names_remainder(self, store):
        with pytest.raises(UnmatchedPhraseError, match="qux"):
            store.segment("qux")
