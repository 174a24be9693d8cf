import asyncio

from memo_assistant.config import settings
from memo_assistant.core.services.tag_service import (
    TagService,
    extract_keywords_fallback,
    parse_tag_reply,
    preprocess_text,
)


def test_preprocess_keeps_hangul_letters_and_digits():
    assert preprocess_text("Hello,   world!! 안녕 #42") == "Hello world 안녕 42"


def test_fallback_weights_earlier_words_and_repeats():
    assert extract_keywords_fallback("python python java rust go") == ["python", "java", "rust"]


def test_fallback_drops_stopwords_and_single_letters():
    assert extract_keywords_fallback("the cat and a dog x") == ["cat", "dog"]


def test_fallback_placeholder_when_nothing_left():
    assert extract_keywords_fallback("the and or") == [settings.placeholder_tag]
    assert extract_keywords_fallback("!!", placeholder="misc") == ["misc"]


def test_parse_tag_reply_caps_at_three():
    assert parse_tag_reply("work, idea meeting,, extra") == ["work", "idea", "meeting"]
    assert parse_tag_reply(" , ") == []


async def test_short_content_uses_fallback_without_model(llm):
    service = TagService(llm)
    assert await service.generate_tags("gym") == ["gym"]
    llm.chat.completions.create.assert_not_awaited()


async def test_model_tags_are_parsed(llm):
    llm.reply("work, idea")
    service = TagService(llm)
    assert await service.generate_tags("Team sync about the new idea") == ["work", "idea"]
    kwargs = llm.chat.completions.create.await_args.kwargs
    assert kwargs["timeout"] == settings.tag_request_timeout


async def test_model_failure_uses_fallback(llm):
    llm.fail(RuntimeError("rate limited"))
    service = TagService(llm)
    assert await service.generate_tags("budget budget review meeting") == ["budget", "review", "meeting"]


async def test_unparsable_reply_uses_fallback(llm):
    llm.reply(", ,")
    service = TagService(llm)
    assert await service.generate_tags("garden tomatoes planted") == ["garden", "tomatoes", "planted"]


async def test_deadline_uses_fallback(llm, monkeypatch):
    async def never_answers(**kwargs):
        await asyncio.sleep(5)

    llm.chat.completions.create.side_effect = never_answers
    monkeypatch.setattr(settings, "tag_deadline", 0.01)

    service = TagService(llm)
    assert await service.generate_tags("reading list books") == ["reading", "list", "books"]
