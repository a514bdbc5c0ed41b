from datetime import timedelta

import pytest

from raillovable.database import close_db, create_engine_for, create_session_factory, init_db
from raillovable.schemas.project import Attachment, Project, Turn, TurnRole
from raillovable.store import InMemoryProjectStore, ProjectNotFoundError, SqlProjectStore


def _sample_project(name="Landing page"):
    project = Project(name=name)
    project.turns = [
        Turn(
            role=TurnRole.USER,
            text="Copy this layout",
            attachments=[Attachment(name="a.png", mime_type="image/png", size_bytes=3, data="AAAA")],
        ),
        Turn(role=TurnRole.ASSISTANT, text="```tsx:App.tsx\nx\n```"),
    ]
    project.files = {"/App.tsx": "x"}
    return project


async def _exercise_store(store):
    """Behaviour every store backend shares."""
    first = _sample_project("first")
    second = _sample_project("second")
    second.updated_at = first.updated_at + timedelta(seconds=5)

    await store.replace(first)
    await store.replace(second)

    loaded = await store.get(first.id)
    assert loaded == first
    assert await store.get("missing") is None
    assert [p.name for p in await store.list()] == ["second", "first"]

    loaded.turns.append(Turn(role=TurnRole.USER, text="unsaved"))
    assert len((await store.get(first.id)).turns) == 2

    loaded.name = "renamed"
    await store.replace(loaded)
    assert (await store.get(first.id)).name == "renamed"
    assert len((await store.get(first.id)).turns) == 3

    assert await store.delete(first.id) is True
    assert await store.delete(first.id) is False
    with pytest.raises(ProjectNotFoundError):
        await store.require(first.id)


@pytest.mark.asyncio
async def test_memory_store():
    await _exercise_store(InMemoryProjectStore())


@pytest.mark.asyncio
async def test_sql_store(tmp_path):
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'projects.db'}")
    await init_db(engine)
    try:
        await _exercise_store(SqlProjectStore(create_session_factory(engine)))
    finally:
        await close_db(engine)


@pytest.mark.asyncio
async def test_sql_store_keeps_utc_timestamps(tmp_path):
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'projects.db'}")
    await init_db(engine)
    try:
        store = SqlProjectStore(create_session_factory(engine))
        project = _sample_project()
        await store.replace(project)

        loaded = await store.get(project.id)
        assert loaded.created_at == project.created_at
        assert loaded.updated_at.tzinfo is not None
    finally:
        await close_db(engine)
