"""
Tests for the treasure catalog state.

Run with: python -m pytest tests/test_catalog.py
"""

import asyncio

import pytest

from conftest import GOLD_COIN
from logic.catalog import CatalogState


@pytest.mark.asyncio
async def test_load_populates_catalog(store, notifier, catalog):
    state = CatalogState(store, notifier)
    assert state.loading is True

    assert await state.load() is True

    assert state.treasures == catalog
    assert state.loading is False
    assert state.get(GOLD_COIN.id) == GOLD_COIN
    assert state.get("missing") is None
    assert notifier.pending() == []


@pytest.mark.asyncio
async def test_failed_load_leaves_empty_catalog(store, notifier):
    store.fail.add("list_treasures")
    state = CatalogState(store, notifier)

    assert await state.load() is False

    assert state.treasures == []
    assert state.loading is False
    [notification] = notifier.pending()
    assert notification.title == "Error"
    assert notification.description == "Failed to load treasures"
    assert notification.variant == "destructive"


@pytest.mark.asyncio
async def test_result_after_close_is_discarded(store, notifier):
    gate = asyncio.Event()
    store.gates["list_treasures"] = gate
    state = CatalogState(store, notifier)

    task = asyncio.ensure_future(state.load())
    await asyncio.sleep(0)
    state.close()
    gate.set()

    assert await task is False
    assert state.treasures == []


@pytest.mark.asyncio
async def test_failure_after_close_is_silent(store, notifier):
    gate = asyncio.Event()
    store.gates["list_treasures"] = gate
    store.fail.add("list_treasures")
    state = CatalogState(store, notifier)

    task = asyncio.ensure_future(state.load())
    await asyncio.sleep(0)
    state.close()
    gate.set()

    assert await task is False
    assert notifier.pending() == []
