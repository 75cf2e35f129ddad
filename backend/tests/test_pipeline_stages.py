import json

import pytest

from fakes import LONG_TEXT, ScriptedAIProvider
from talkpdf.api.exceptions import ExtractionError
from talkpdf.services.ai_service import AIService
from talkpdf.services.extraction_service import (
    SIMPLE_EXTRACTION_PROMPT,
    ExtractionService,
    parse_pages,
)
from talkpdf.services.summarization_service import FALLBACK_SUMMARY_CHARS, SummarizationService
from talkpdf.services.translation_service import TranslationService

PDF_BYTES = b"%PDF-1.4 test document"

GOOD_SUMMARY = json.dumps({
    "summary": "Photosynthesis turns light into chemical energy stored in sugars, in two linked stages.",
    "study_prompts": [
        {"topic": "Light reactions", "prompt": "Where do the light reactions take place?"},
        {"topic": "", "prompt": "Dropped because the topic is empty"},
        "not an object",
        {"topic": "Calvin cycle", "prompt": "What does the Calvin cycle produce?"},
    ],
})


def service(provider, cls):
    return cls(AIService(provider=provider))


# Extraction

@pytest.mark.asyncio
async def test_free_plan_uses_simple_extraction(free_plan):
    provider = ScriptedAIProvider(read_responses=[LONG_TEXT])

    result = await service(provider, ExtractionService).extract(PDF_BYTES, "bio.pdf", "application/pdf", free_plan)

    assert result.text == LONG_TEXT.strip()
    assert not result.used_page_extraction
    assert result.page_count == 0
    assert len(provider.read_calls) == 1
    assert provider.read_calls[0]["system_prompt"] == SIMPLE_EXTRACTION_PROMPT


@pytest.mark.asyncio
async def test_short_extraction_is_fatal(free_plan):
    provider = ScriptedAIProvider(read_responses=["x" * 49])

    with pytest.raises(ExtractionError):
        await service(provider, ExtractionService).extract(PDF_BYTES, "scan.pdf", "application/pdf", free_plan)


@pytest.mark.asyncio
async def test_provider_failure_during_extraction_is_fatal(free_plan):
    provider = ScriptedAIProvider(read_responses=[RuntimeError("gateway down")])

    with pytest.raises(ExtractionError):
        await service(provider, ExtractionService).extract(PDF_BYTES, "bio.pdf", "application/pdf", free_plan)


@pytest.mark.asyncio
async def test_paid_plan_extracts_pages(plus_plan):
    pages_json = json.dumps({
        "pages": [
            {"page": 1, "text": "Chapter one introduces cells and their structure in detail.", "chapter": "Cells"},
            {"text": "Second page continues with membranes and transport proteins."},
        ],
        "full_text": LONG_TEXT,
    })
    provider = ScriptedAIProvider(read_responses=["```json\n" + pages_json + "\n```"])

    result = await service(provider, ExtractionService).extract(PDF_BYTES, "bio.pdf", "application/pdf", plus_plan)

    assert result.used_page_extraction
    assert result.text == LONG_TEXT.strip()
    assert [(p.page_number, p.chapter) for p in result.page_contents] == [(1, "Cells"), (2, None)]
    assert len(provider.read_calls) == 1


@pytest.mark.asyncio
async def test_page_text_is_joined_when_full_text_missing(plus_plan):
    page_text = "A page with plenty of readable text about the nitrogen cycle."
    provider = ScriptedAIProvider(read_responses=[json.dumps({"pages": [{"page": 1, "text": page_text}] * 2})])

    result = await service(provider, ExtractionService).extract(PDF_BYTES, "bio.pdf", "application/pdf", plus_plan)

    assert result.text == f"{page_text}\n\n{page_text}"


@pytest.mark.asyncio
async def test_invalid_page_json_falls_back_to_simple_extraction(plus_plan):
    provider = ScriptedAIProvider(read_responses=["I could not format this as JSON", LONG_TEXT])

    result = await service(provider, ExtractionService).extract(PDF_BYTES, "bio.pdf", "application/pdf", plus_plan)

    assert not result.used_page_extraction
    assert result.text == LONG_TEXT.strip()
    assert len(provider.read_calls) == 2


@pytest.mark.asyncio
async def test_word_documents_keep_their_mime_type(free_plan):
    provider = ScriptedAIProvider()
    mime = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    await service(provider, ExtractionService).extract(b"PK..", "notes.docx", mime, free_plan)

    assert provider.read_calls[0]["mime_type"] == mime


def test_parse_pages_caps_and_validates():
    raw = [{"page": 3, "text": "a"}, "junk", {"page": -1, "text": "b"}, {"page": 9, "text": "c"}]

    pages = parse_pages(raw, max_pages=3)

    assert [(p.page_number, p.text) for p in pages] == [(3, "a"), (3, "b")]
    assert parse_pages("not a list", 5) == []


# Summarization

@pytest.mark.asyncio
async def test_summary_and_valid_prompts(free_plan):
    provider = ScriptedAIProvider(text_responses=[GOOD_SUMMARY])

    result = await service(provider, SummarizationService).summarize(LONG_TEXT, free_plan)

    assert not result.degraded
    assert result.summary.startswith("Photosynthesis turns light")
    assert [p.topic for p in result.study_prompts] == ["Light reactions", "Calvin cycle"]
    call = provider.text_calls[0]
    assert call["max_tokens"] == free_plan.summary_max_tokens
    assert call["temperature"] == 0.3
    assert free_plan.summary_words in call["system_prompt"]


@pytest.mark.asyncio
async def test_summary_input_is_capped_by_plan(free_plan):
    provider = ScriptedAIProvider(text_responses=[GOOD_SUMMARY])
    extracted = "word " * 3000

    await service(provider, SummarizationService).summarize(extracted, free_plan)

    assert provider.text_calls[0]["user_content"] == extracted[:free_plan.analysis_chars]


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", [
    "Sorry, I cannot help with that.",
    json.dumps({"summary": "Too short."}),
    json.dumps({"summary": 42}),
    RuntimeError("gateway down"),
])
async def test_unusable_summary_falls_back_to_extracted_text(free_plan, raw):
    provider = ScriptedAIProvider(text_responses=[raw])
    extracted = "The mitochondria is the powerhouse of the cell. " * 100

    result = await service(provider, SummarizationService).summarize(extracted, free_plan)

    assert result.degraded
    assert result.summary == extracted[:FALLBACK_SUMMARY_CHARS].strip()


# Translation

@pytest.mark.asyncio
async def test_english_is_never_translated(free_plan):
    provider = ScriptedAIProvider()

    result = await service(provider, TranslationService).translate("Summary text", "en", free_plan)

    assert not result.applied
    assert result.text == "Summary text"
    assert provider.text_calls == []


@pytest.mark.asyncio
async def test_translation_applied(free_plan):
    translated = "Photosynthesis jẹ ọna ti awọn eweko fi n ṣe ounjẹ wọn."
    provider = ScriptedAIProvider(text_responses=[f"  {translated}\n"])
    summary = "x" * 5000

    result = await service(provider, TranslationService).translate(summary, "yo", free_plan)

    assert result.applied
    assert result.text == translated
    call = provider.text_calls[0]
    assert "Yoruba" in call["system_prompt"]
    assert call["user_content"] == summary[:free_plan.max_tts_chars]
    assert call["max_tokens"] == free_plan.max_tts_chars // 2


@pytest.mark.asyncio
async def test_short_translation_keeps_original(free_plan):
    provider = ScriptedAIProvider(text_responses=["abcdefgh"])

    result = await service(provider, TranslationService).translate("Original summary text", "ha", free_plan)

    assert not result.applied
    assert result.reason == "output too short"
    assert result.text == "Original summary text"


@pytest.mark.asyncio
@pytest.mark.parametrize("length,applied", [(20, False), (21, True)])
async def test_translation_length_threshold(free_plan, length, applied):
    provider = ScriptedAIProvider(text_responses=["t" * length])

    result = await service(provider, TranslationService).translate("Original summary text", "ig", free_plan)

    assert result.applied is applied


@pytest.mark.asyncio
async def test_translation_provider_error_keeps_original(free_plan):
    provider = ScriptedAIProvider(text_responses=[RuntimeError("gateway down")])

    result = await service(provider, TranslationService).translate("Original summary text", "pcm", free_plan)

    assert not result.applied
    assert result.reason == "provider error"
    assert result.text == "Original summary text"
