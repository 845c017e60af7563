"""Unit tests for database session helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from seo_engine.core.database import _ensure_sqlite_directory, get_session_context


class _FakeSession:
    def __init__(self) -> None:
        self.commit_calls = 0
        self.rollback_calls = 0

    async def commit(self) -> None:
        self.commit_calls += 1

    async def rollback(self) -> None:
        self.rollback_calls += 1


class _FakeSessionContextManager:
    def __init__(self, session: _FakeSession) -> None:
        self._session = session

    async def __aenter__(self) -> _FakeSession:
        return self._session

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        return None


@pytest.mark.asyncio
async def test_session_context_commits_on_success(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession()
    monkeypatch.setattr(
        "seo_engine.core.database.async_session_maker",
        lambda: _FakeSessionContextManager(session),
    )

    async with get_session_context():
        pass

    assert session.commit_calls == 1
    assert session.rollback_calls == 0


@pytest.mark.asyncio
async def test_session_context_rolls_back_and_reraises(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession()
    monkeypatch.setattr(
        "seo_engine.core.database.async_session_maker",
        lambda: _FakeSessionContextManager(session),
    )

    with pytest.raises(RuntimeError):
        async with get_session_context():
            raise RuntimeError("boom")

    assert session.commit_calls == 0
    assert session.rollback_calls == 1


@pytest.mark.asyncio
async def test_session_context_can_skip_commit(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession()
    monkeypatch.setattr(
        "seo_engine.core.database.async_session_maker",
        lambda: _FakeSessionContextManager(session),
    )

    async with get_session_context(commit_on_exit=False):
        pass

    assert session.commit_calls == 0


def test_ensure_sqlite_directory_creates_parent(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "seo.db"

    _ensure_sqlite_directory(f"sqlite+aiosqlite:///{target}")

    assert target.parent.is_dir()


def test_ensure_sqlite_directory_ignores_memory_and_postgres() -> None:
    _ensure_sqlite_directory("sqlite+aiosqlite://")
    _ensure_sqlite_directory("sqlite+aiosqlite:///:memory:")
    _ensure_sqlite_directory("postgresql+asyncpg://u:p@db/seo")
