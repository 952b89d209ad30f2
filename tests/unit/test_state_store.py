"""Tests for the in-memory state store."""

import pytest

from questline.core.state_store import InMemoryStateStore
from questline.domain import GameState, Task


@pytest.mark.unit
async def test_load_missing_user_raises(in_memory_store: InMemoryStateStore) -> None:
    with pytest.raises(KeyError, match="No state stored"):
        await in_memory_store.load("ghost")


@pytest.mark.unit
async def test_save_and_load_are_isolated_copies(in_memory_store: InMemoryStateStore) -> None:
    """Test callers cannot mutate stored snapshots by reference."""
    state = GameState(tasks=[Task(id="t1", title="Original")])
    await in_memory_store.save("u1", state)
    state.tasks[0].title = "Changed after save"

    loaded = await in_memory_store.load("u1")
    loaded.tasks[0].title = "Changed after load"

    assert (await in_memory_store.load("u1")).tasks[0].title == "Original"
    assert await in_memory_store.list_user_ids() == ["u1"]
