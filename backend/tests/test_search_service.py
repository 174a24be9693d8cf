from conftest import USER_EMAIL, FakeMemoRepository

from memo_assistant.core.services.search_service import SearchService, filter_memos


def test_filter_matches_title_content_and_tags(make_memo):
    by_title = make_memo(title="Dentist visit", content="monday")
    by_content = make_memo(title="Errands", content="call the DENTIST")
    by_tag = make_memo(title="x", content="y", tags=["dentistry"])
    miss = make_memo(title="Groceries", content="milk")

    assert filter_memos([by_title, by_content, by_tag, miss], "dentist") == [by_title, by_content, by_tag]


async def test_uses_full_text_search(make_memo):
    memo = make_memo(content="budget review")
    repo = FakeMemoRepository([memo])

    results = await SearchService(repo).search_memos(user_email=USER_EMAIL, query="budget")

    assert results == [memo]
    assert repo.search_calls == [(USER_EMAIL, "budget")]


async def test_falls_back_to_filter_when_full_text_fails(make_memo):
    memo = make_memo(title="Budget", content="quarterly numbers")
    repo = FakeMemoRepository([memo, make_memo(content="unrelated")], search_error=RuntimeError("rpc missing"))

    results = await SearchService(repo).search_memos(user_email=USER_EMAIL, query="budget")

    assert results == [memo]
