"""Shared fixtures for quotesync tests."""

from __future__ import annotations

import random

import pytest

from quotesync.categories import CategoryIndex
from quotesync.errors import RemoteError
from quotesync.import_export import ImportExport
from quotesync.models import Quote
from quotesync.quote_store import QuoteStore
from quotesync.selector import Selector
from quotesync.storage import PersistentStore, SessionStore, QUOTES_KEY


class FakeRemote:
    """Stands in for RemoteQuoteSource; serves a fixed list or raises."""

    def __init__(self, quotes=None, error=None):
        self.quotes = list(quotes or [])
        self.error = error
        self.fetch_calls = 0
        self.posted = []

    def fetch_quotes(self):
        self.fetch_calls += 1
        if self.error is not None:
            raise self.error
        return list(self.quotes)

    def post_quote(self, quote):
        if self.error is not None:
            raise RemoteError(str(self.error))
        self.posted.append(quote)
        return {"id": 101, **quote.to_dict()}


class FakeTimer:
    def __init__(self, clock, interval, function):
        self.clock = clock
        self.interval = interval
        self.function = function
        self.next_fire = None
        self.cancelled = False

    def start(self):
        self.next_fire = self.clock.now + self.interval

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Simulated time driving FakeTimers, used as a SyncEngine timer_factory."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def __call__(self, interval, function):
        timer = FakeTimer(self, interval, function)
        self.timers.append(timer)
        return timer

    @property
    def active(self):
        return [t for t in self.timers if not t.cancelled and t.next_fire is not None]

    def advance(self, seconds):
        end = self.now + seconds
        while True:
            due = [t for t in self.active if t.next_fire <= end]
            if not due:
                break
            timer = min(due, key=lambda t: t.next_fire)
            self.now = timer.next_fire
            timer.next_fire += timer.interval
            timer.function()
        self.now = end


@pytest.fixture
def storage(tmp_path):
    return PersistentStore(tmp_path / "state.db")


@pytest.fixture
def session():
    return SessionStore()


@pytest.fixture
def quote_store(storage):
    store = QuoteStore(storage)
    store.load()
    return store


@pytest.fixture
def empty_store(storage):
    storage.set(QUOTES_KEY, "[]")
    store = QuoteStore(storage)
    store.load()
    return store


@pytest.fixture
def category_index(quote_store, storage):
    return CategoryIndex(quote_store, storage)


@pytest.fixture
def selector(quote_store, category_index, session):
    return Selector(quote_store, category_index, session, rng=random.Random(1234))


@pytest.fixture
def import_export(quote_store, category_index):
    return ImportExport(quote_store, category_index)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sample_quotes():
    return [
        Quote("A", "X"),
        Quote("B", "Y"),
        Quote("C", "X"),
    ]
