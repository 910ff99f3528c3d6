"""Tests for the quote store."""

from __future__ import annotations

import json

import pytest

from quotesync.errors import ValidationError
from quotesync.models import Quote
from quotesync.quote_store import DEFAULT_QUOTES, QuoteStore
from quotesync.storage import QUOTES_KEY


class TestLoad:
    def test_defaults_when_nothing_stored(self, storage):
        store = QuoteStore(storage)
        assert store.load() == list(DEFAULT_QUOTES)
        assert len(store) == 3

    def test_defaults_on_invalid_json(self, storage):
        storage.set(QUOTES_KEY, "{not json")
        store = QuoteStore(storage)
        assert store.load() == list(DEFAULT_QUOTES)

    def test_defaults_when_stored_value_is_not_a_list(self, storage):
        storage.set(QUOTES_KEY, json.dumps({"text": "A", "category": "X"}))
        store = QuoteStore(storage)
        assert store.load() == list(DEFAULT_QUOTES)

    def test_reads_stored_quotes(self, storage):
        storage.set(QUOTES_KEY, json.dumps([{"text": "A", "category": "X"}]))
        store = QuoteStore(storage)
        assert store.load() == [Quote("A", "X")]

    def test_empty_array_is_a_valid_collection(self, empty_store):
        assert len(empty_store) == 0


class TestAdd:
    def test_add_appends_and_persists(self, quote_store, storage):
        before = len(quote_store)
        quote = quote_store.add("Carpe diem.", "Latin")

        assert len(quote_store) == before + 1
        assert quote_store.get(-1) == Quote("Carpe diem.", "Latin")
        assert quote == Quote("Carpe diem.", "Latin")

        reloaded = QuoteStore(storage)
        reloaded.load()
        assert reloaded.quotes == quote_store.quotes

    def test_add_trims_whitespace(self, quote_store):
        quote = quote_store.add("  Be here now.  ", "\tZen ")
        assert quote == Quote("Be here now.", "Zen")

    @pytest.mark.parametrize("text,category", [
        ("", "x"),
        ("x", ""),
        ("", ""),
        ("   ", "x"),
        ("x", "  \n"),
    ])
    def test_add_rejects_empty_fields(self, quote_store, text, category):
        before = quote_store.quotes
        with pytest.raises(ValidationError):
            quote_store.add(text, category)
        assert quote_store.quotes == before


class TestReplaceAt:
    def test_replace_in_range(self, quote_store, storage):
        quote_store.replace_at(1, Quote("New", "Y"))
        assert quote_store.get(1) == Quote("New", "Y")

        reloaded = QuoteStore(storage)
        reloaded.load()
        assert reloaded.get(1) == Quote("New", "Y")

    @pytest.mark.parametrize("index", [3, 10, -1])
    def test_replace_out_of_range(self, quote_store, index):
        before = quote_store.quotes
        with pytest.raises(IndexError):
            quote_store.replace_at(index, Quote("New", "Y"))
        assert quote_store.quotes == before


class TestMergeAppend:
    def test_appends_without_dedup(self, empty_store):
        empty_store.merge_append([Quote("A", "X"), Quote("A", "X")])
        assert empty_store.quotes == [Quote("A", "X"), Quote("A", "X")]

    def test_converts_quote_shaped_dicts(self, empty_store):
        count = empty_store.merge_append([{"text": "A", "category": "X"}])
        assert count == 1
        assert empty_store.quotes == [Quote("A", "X")]

    def test_keeps_malformed_records_as_is(self, empty_store, storage):
        empty_store.merge_append([{"text": "only text"}, 42])
        assert empty_store.quotes == [{"text": "only text"}, 42]

        assert json.loads(storage.get(QUOTES_KEY)) == [{"text": "only text"}, 42]

    def test_extra_fields_are_not_dropped(self, empty_store, storage):
        record = {"text": "A", "category": "X", "author": "Someone"}
        empty_store.merge_append([record])

        assert empty_store.quotes == [record]
        assert json.loads(storage.get(QUOTES_KEY)) == [record]


class TestFindIndex:
    def test_exact_match_only(self, empty_store):
        empty_store.merge_append([Quote("A", "X"), Quote("a", "Y"), Quote("A", "Z")])
        assert empty_store.find_index("A") == 0
        assert empty_store.find_index("a") == 1
        assert empty_store.find_index("A ") is None
