"""Integration tests for the dev seeding helper."""

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from manualbot.app.db.engine import create_session_factory
from manualbot.app.db.seed_dev import SAMPLE_MANUALS, seed_sample_manuals
from manualbot.app.db.sql_repositories import SqlCorpus
from manualbot.app.models.common import PermissionLevel


def test_sample_ids_are_unique() -> None:
    ids = [m.id for m in SAMPLE_MANUALS]
    assert len(ids) == len(set(ids))


def test_samples_cover_every_level() -> None:
    assert {m.required_permission for m in SAMPLE_MANUALS} == set(PermissionLevel)


@pytest.mark.asyncio
async def test_seeding_is_idempotent(sqlite_engine: AsyncEngine) -> None:
    assert await seed_sample_manuals(sqlite_engine) == len(SAMPLE_MANUALS)
    assert await seed_sample_manuals(sqlite_engine) == 0

    manuals = await SqlCorpus(create_session_factory(sqlite_engine)).all_active()

    assert [m.id for m in manuals] == [m.id for m in SAMPLE_MANUALS]
    assert manuals[0].tags == SAMPLE_MANUALS[0].tags
    assert manuals[2].required_permission == PermissionLevel.general_affairs
