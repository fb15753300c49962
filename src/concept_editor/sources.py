"""Word-relationship sources used to train a concept store."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

WORDNIK_API_URL = "https://api.wordnik.com/v4"
WORDNIK_API_KEY_ENV = "WORDNIK_API_KEY"

TransientHttpError = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


@dataclass(frozen=True, slots=True)
class WordRelationship:
    """Words standing in one category of relationship to a word."""

    relationship_type: str
    words: tuple[str, ...]


class RelatedWordsSource(Protocol):
    """Anything that can list the words related to a word."""

    def related_words(self, word: str) -> list[WordRelationship]: ...


def transient_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1.0, min=1.0, max=5.0),
        retry=retry_if_exception_type(TransientHttpError),
    )


class WordnikSource:
    """Related words from the Wordnik ``relatedWords`` endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        limit_per_type: int = 10,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key or os.environ.get(WORDNIK_API_KEY_ENV)
        self.limit_per_type = limit_per_type
        self._client = client or httpx.Client(
            base_url=WORDNIK_API_URL,
            timeout=timeout,
            follow_redirects=True,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> WordnikSource:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def related_words(self, word: str) -> list[WordRelationship]:
        response = self._get_related(word)
        if response.status_code == 404:
            return []
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, list):
            logger.warning("Unexpected Wordnik payload for %r: %r", word, data)
            return []
        return [
            WordRelationship(
                relationship_type=str(item.get("relationshipType", "")),
                words=tuple(str(w) for w in item.get("words", [])),
            )
            for item in data
            if isinstance(item, dict)
        ]

    @transient_retry()
    def _get_related(self, word: str) -> httpx.Response:
        params: dict[str, Any] = {
            "useCanonical": "true",
            "limitPerRelationshipType": self.limit_per_type,
        }
        if self.api_key:
            params["api_key"] = self.api_key
        return self._client.get(f"/word.json/{word}/relatedWords", params=params)


class WordnetSource:
    """Related words from a WordNet installed locally through ``wn``.

    Categories produced: ``synonym`` (other lemmas of the word's synsets),
    ``antonym`` (antonym senses), ``variant`` (non-lemma written forms),
    ``hypernym`` and ``hyponym`` (lemmas of related synsets).
    """

    def __init__(
        self,
        lexicon: str | None = None,
        *,
        wordnet: Any = None,
        limit_per_type: int = 10,
    ) -> None:
        self._lexicon = lexicon
        self._wordnet = wordnet
        self.limit_per_type = limit_per_type

    @property
    def wordnet(self) -> Any:
        if self._wordnet is None:
            import wn

            self._wordnet = wn.Wordnet(lexicon=self._lexicon)
        return self._wordnet

    def related_words(self, word: str) -> list[WordRelationship]:
        found: dict[str, list[str]] = {
            "synonym": [],
            "antonym": [],
            "variant": [],
            "hypernym": [],
            "hyponym": [],
        }
        key = word.casefold()

        for w in self.wordnet.words(word):
            forms = [str(f) for f in w.forms()]
            found["variant"].extend(forms[1:])
            for sense in w.senses():
                for antonym in sense.get_related("antonym"):
                    found["antonym"].append(str(antonym.word().lemma()))

        for synset in self.wordnet.synsets(word):
            found["synonym"].extend(str(lemma) for lemma in synset.lemmas())
            for hypernym in synset.hypernyms():
                found["hypernym"].extend(str(lemma) for lemma in hypernym.lemmas())
            for hyponym in synset.hyponyms():
                found["hyponym"].extend(str(lemma) for lemma in hyponym.lemmas())

        relationships = []
        for relationship_type, words in found.items():
            unique = [
                w for w in dict.fromkeys(words) if w.casefold() != key
            ][: self.limit_per_type]
            if unique:
                relationships.append(
                    WordRelationship(relationship_type, tuple(unique))
                )
        return relationships
