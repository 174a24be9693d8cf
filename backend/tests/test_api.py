import json
from unittest.mock import MagicMock
from uuid import uuid4

from conftest import OTHER_EMAIL, FakeMemoRepository
from fastapi.testclient import TestClient

from memo_assistant.dependencies import get_current_user, get_llm_client, get_memo_repository
from memo_assistant.main import create_app

MEMOS = "/api/v1/memos/"


def _create(api, **body):
    payload = {"title": "Groceries", "content": "Milk and eggs", "tags": ["shopping"]}
    payload.update(body)
    return api.post(MEMOS, json=payload)


def test_health(api):
    resp = api.get("/api/v1/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


def test_readiness_reports_database_error(api, monkeypatch):
    broken = MagicMock()
    broken.table.side_effect = RuntimeError("no route")
    monkeypatch.setattr("memo_assistant.api.v1.endpoints.health.get_supabase_admin_client", lambda: broken)

    resp = api.get("/api/v1/health/ready")

    assert resp.status_code == 200
    assert resp.json()["database"] == "error: RuntimeError"


def test_requires_bearer_token(repo, llm):
    app = create_app()
    app.dependency_overrides[get_memo_repository] = lambda: repo
    app.dependency_overrides[get_llm_client] = lambda: llm
    with TestClient(app) as client:
        assert client.get(MEMOS).status_code == 401
        resp = client.get(MEMOS, headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid token format"


def test_create_memo_as_given(api, llm):
    resp = _create(api)

    assert resp.status_code == 201
    body = resp.json()
    assert body["title"] == "Groceries"
    assert body["tags"] == ["shopping"]
    assert body["user_email"] == "owner@example.com"
    llm.chat.completions.create.assert_not_awaited()


def test_create_memo_generates_title_and_tag(api, llm):
    llm.reply("work, idea")

    body = api.post(MEMOS, json={"content": "Sketch the new onboarding flow"}).json()

    assert body["title"] == "work, idea"
    assert body["tags"] == ["work"]


def test_create_memo_validation_errors(api):
    resp = _create(api, content="   ")
    assert resp.status_code == 400
    assert "Memo content is required" in resp.json()["detail"]

    resp = _create(api, tags=["a", "b", "c", "d"])
    assert resp.status_code == 400
    assert "at most 3 tags" in resp.json()["detail"]


def test_list_get_update_delete(api):
    memo_id = _create(api).json()["id"]
    _create(api, title="Second")

    listed = api.get(MEMOS).json()
    assert len(listed) == 2
    assert len(api.get(MEMOS, params={"limit": 1}).json()) == 1

    assert api.get(f"{MEMOS}{memo_id}").json()["title"] == "Groceries"

    resp = api.patch(f"{MEMOS}{memo_id}", json={"title": "Shopping list"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "Shopping list"
    assert resp.json()["content"] == "Milk and eggs"

    assert api.patch(f"{MEMOS}{memo_id}", json={"content": " "}).status_code == 400

    assert api.delete(f"{MEMOS}{memo_id}").status_code == 204
    assert api.get(f"{MEMOS}{memo_id}").status_code == 404
    assert api.delete(f"{MEMOS}{memo_id}").status_code == 404


def test_other_users_memo_is_not_found(api, repo, make_memo):
    theirs = make_memo(user_email=OTHER_EMAIL)
    repo.memos[theirs.id] = theirs

    assert api.get(f"{MEMOS}{theirs.id}").status_code == 404
    assert api.patch(f"{MEMOS}{theirs.id}", json={"title": "mine now"}).status_code == 404
    assert api.delete(f"{MEMOS}{theirs.id}").status_code == 404
    assert api.get(f"{MEMOS}{uuid4()}").status_code == 404


def test_malformed_memo_id_is_rejected(api):
    assert api.get(f"{MEMOS}not-a-uuid").status_code == 400


def test_delete_failure_returns_500(api, repo):
    memo_id = _create(api).json()["id"]

    async def broken_delete(memo_id):
        raise RuntimeError("database unavailable")

    repo.delete = broken_delete

    resp = api.delete(f"{MEMOS}{memo_id}")
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to delete memo"


def test_stats(api):
    _create(api, tags=["home"])
    _create(api, tags=["home", "work"])

    stats = api.get(f"{MEMOS}stats").json()

    assert stats["total_memos"] == 2
    assert stats["tag_frequency"][0] == {"tag": "home", "count": 2}


def test_search_falls_back_when_full_text_fails(llm, current_user, make_memo):
    memo = make_memo(title="Dentist", content="Monday 10am")
    repo = FakeMemoRepository([memo], search_error=RuntimeError("rpc missing"))
    app = create_app()
    app.dependency_overrides[get_current_user] = lambda: current_user
    app.dependency_overrides[get_memo_repository] = lambda: repo
    app.dependency_overrides[get_llm_client] = lambda: llm
    with TestClient(app) as client:
        resp = client.post(f"{MEMOS}search", json={"query": " dentist "})
        assert resp.status_code == 200
        assert [m["id"] for m in resp.json()] == [str(memo.id)]

        assert client.post(f"{MEMOS}search", json={"query": "  "}).status_code == 400


def test_ai_tags_and_title(api, llm):
    llm.reply("travel, packing")
    assert api.post("/api/v1/ai/tags", json={"content": "Pack for the Lisbon trip"}).json() == {
        "tags": ["travel", "packing"]
    }

    llm.reply("Lisbon trip")
    assert api.post("/api/v1/ai/title", json={"content": "Pack for the Lisbon trip"}).json() == {
        "title": "Lisbon trip"
    }

    assert api.post("/api/v1/ai/tags", json={"content": ""}).status_code == 400


def test_ai_suggestions(api, llm):
    resp = api.post("/api/v1/ai/suggestions")
    assert resp.json()["suggestions"][0]["title"] == "Getting started"

    _create(api)
    llm.reply(json.dumps({"suggestions": [{"title": "Shopping habit", "body": "You shop weekly."}]}))
    resp = api.post("/api/v1/ai/suggestions")
    assert resp.json() == {"suggestions": [{"title": "Shopping habit", "body": "You shop weekly."}]}


def test_chat_stream(api, llm):
    llm.stream(["Hello", " there"])

    resp = api.post(
        "/api/v1/chat/stream",
        json={"message": "hi", "chat_history": [{"role": "ai", "message": "Welcome back"}]},
    )

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "Hello there"
    messages = llm.chat.completions.create.await_args.kwargs["messages"]
    assert messages[1] == {"role": "assistant", "content": "Welcome back"}


def test_chat_stream_errors(api, llm):
    assert api.post("/api/v1/chat/stream", json={"message": "   "}).status_code == 400

    llm.fail(RuntimeError("invalid api key"))
    resp = api.post("/api/v1/chat/stream", json={"message": "hi"})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to process chat request"


def test_visualization(api):
    first = _create(api, tags=["home", "work"]).json()
    _create(api, tags=["home"])

    chart = api.get("/api/v1/visualization/chart").json()
    assert chart["total_memos"] == 2
    assert chart["slices"][0]["label"] == "home"
    assert chart["slices"][0]["percentage"] == 66.7

    graph = api.get("/api/v1/visualization/graph", params={"selected_tag": "work"}).json()
    assert graph["selected_tag"] == "work"
    assert [e["target"] for e in graph["edges"]] == [f"memo-{first['id']}"]


def test_list_limit_must_be_positive(api):
    resp = api.get(MEMOS, params={"limit": 0})
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("query.limit")


def test_chat_stream_accepts_any_history_role(api, llm):
    llm.stream(["ok"])

    resp = api.post(
        "/api/v1/chat/stream",
        json={"message": "hi", "chat_history": [{"role": "bot", "message": "earlier"}]},
    )

    assert resp.status_code == 200
    assert resp.text == "ok"
    messages = llm.chat.completions.create.await_args.kwargs["messages"]
    assert messages[1] == {"role": "assistant", "content": "earlier"}
