"""Shared fixtures for the memo assistant tests."""

import os

# Settings are read at import time; provide the required values up front.
os.environ.setdefault("APP_SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("APP_SUPABASE_ANON_KEY", "anon-key")
os.environ.setdefault("APP_SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
os.environ.setdefault("APP_OPENAI_API_KEY", "sk-test")

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from memo_assistant.core.models.memo import Memo
from memo_assistant.core.repositories.memo_repository import MemoRepository
from memo_assistant.core.schemas.auth import AuthUser
from memo_assistant.dependencies import get_current_user, get_llm_client, get_memo_repository
from memo_assistant.main import create_app

USER_EMAIL = "owner@example.com"
OTHER_EMAIL = "someone-else@example.com"
NOW = datetime(2025, 3, 15, 12, 0, tzinfo=UTC)


class FakeMemoRepository(MemoRepository):
    """In-memory stand-in for the Supabase repository."""

    def __init__(self, memos=None, search_error=None):
        self.memos = {m.id: m for m in (memos or [])}
        self.search_error = search_error
        self.search_calls = []

    async def create(self, memo):
        self.memos[memo.id] = memo
        return memo

    async def get(self, memo_id):
        return self.memos.get(memo_id)

    async def list(self, *, user_email, limit=None):
        owned = [m for m in self.memos.values() if m.user_email == user_email]
        owned.sort(key=lambda m: m.created_at, reverse=True)
        return owned if limit is None else owned[:limit]

    async def update_fields(self, memo_id, changes):
        memo = self.memos.get(memo_id)
        if memo is None:
            return None
        updated = memo.model_copy(update={**changes, "updated_at": NOW})
        self.memos[memo_id] = updated
        return updated

    async def delete(self, memo_id):
        return self.memos.pop(memo_id, None) is not None

    async def full_text_search(self, *, user_email, query):
        self.search_calls.append((user_email, query))
        if self.search_error is not None:
            raise self.search_error
        owned = await self.list(user_email=user_email)
        return [m for m in owned if query in m.content]


@pytest.fixture
def make_memo():
    """Factory for memos owned by USER_EMAIL, `age_days` before NOW."""

    def _make(title="Memo", content="Some content", tags=(), age_days=0.0, user_email=USER_EMAIL):
        created = NOW - timedelta(days=age_days)
        return Memo(
            id=uuid4(),
            user_email=user_email,
            title=title,
            content=content,
            tags=list(tags),
            created_at=created,
            updated_at=created,
        )

    return _make


@pytest.fixture
def repo():
    return FakeMemoRepository()


def completion(text):
    """Shape of a non-streamed chat completion."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def stream_chunk(text):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


class FakeStream:
    """Async iterator over streamed completion chunks."""

    def __init__(self, pieces, error=None):
        self._chunks = [stream_chunk(p) for p in pieces]
        self._error = error

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error


@pytest.fixture
def llm():
    """MagicMock OpenAI client; set `llm.reply(...)` or `llm.fail(...)` per test."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion("work, idea"))

    def reply(text):
        client.chat.completions.create.return_value = completion(text)
        client.chat.completions.create.side_effect = None

    def fail(error):
        client.chat.completions.create.side_effect = error

    def stream(pieces, error=None):
        client.chat.completions.create.return_value = FakeStream(pieces, error=error)
        client.chat.completions.create.side_effect = None

    client.reply = reply
    client.fail = fail
    client.stream = stream
    return client


@pytest.fixture
def current_user():
    return AuthUser(id=uuid4(), email=USER_EMAIL)


@pytest.fixture
def api(repo, llm, current_user):
    """TestClient with auth, storage and the model client replaced by fakes."""
    app = create_app()
    app.dependency_overrides[get_current_user] = lambda: current_user
    app.dependency_overrides[get_memo_repository] = lambda: repo
    app.dependency_overrides[get_llm_client] = lambda: llm
    with TestClient(app) as client:
        yield client
