from datetime import datetime, timezone

import pytest

from talkpdf.api.exceptions import DocumentNotFoundError
from talkpdf.models.document import PageContent, StudyPrompt
from talkpdf.services.persistence_service import (
    PersistenceService,
    PipelineOutput,
    audio_storage_path,
    estimate_duration_seconds,
)
from talkpdf.services.tts import TTSResult
from talkpdf.services.usage_service import UsageService

NOW = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)
SCRIPT = " ".join(["word"] * 150)


class FailingStorage:
    async def save_bytes(self, content, file_path, content_type):
        raise ConnectionError("bucket unreachable")


def make_output(tts: TTSResult, **overrides) -> PipelineOutput:
    values = dict(
        document_id="doc-1",
        user_id="alice",
        language="en",
        file_type="pdf",
        summary="A summary long enough to be useful for revision.",
        study_prompts=[StudyPrompt(topic="Cells", prompt="What is a cell?")],
        page_contents=[],
        script=SCRIPT,
        translation_applied=False,
        tts=tts,
        plan_name="free",
        plan_limits_version="2025-01",
    )
    values.update(overrides)
    return PipelineOutput(**values)


def make_service(db, storage):
    usage = UsageService(db, clock=lambda: NOW)
    return PersistenceService(db, storage, usage, clock=lambda: NOW)


def test_duration_is_word_count_over_speech_rate():
    assert estimate_duration_seconds(SCRIPT) == 60
    assert estimate_duration_seconds("") == 0


def test_audio_path_layout():
    assert audio_storage_path("alice", "doc-1", "wav") == "alice/doc-1/audio.wav"


@pytest.mark.asyncio
async def test_stores_audio_and_marks_ready(db, storage):
    await db.create_document({"id": "doc-1", "user_id": "alice", "file_name": "bio.pdf"})
    await storage.initialize()
    tts = TTSResult(
        audio=b"\x02" * 4096, provider="yarngpt", voice="Femi",
        audio_format="mp3", content_type="audio/mpeg", chunks_generated=1,
        failed_providers=[],
    )

    record = await make_service(db, storage).finalize(make_output(tts))

    assert record["status"] == "ready"
    assert record["audio_url"] == "alice/doc-1/audio.mp3"
    assert record["audio_duration_seconds"] == 60
    assert record["audio_language"] == "en"
    assert record["page_count"] is None
    assert record["study_prompts"] == [{"topic": "Cells", "prompt": "What is a cell?"}]
    assert await storage.get_file("alice/doc-1/audio.mp3") == b"\x02" * 4096

    metadata = record["tts_metadata"]
    assert metadata["tts_provider"] == "yarngpt"
    assert metadata["voice_used"] == "Femi"
    assert metadata["audio_size_bytes"] == 4096
    assert metadata["tts_text_length"] == len(SCRIPT)
    assert metadata["tts_text_preview"] == SCRIPT[:100]
    assert metadata["processed_at"] == NOW.isoformat()

    events = await db.list_usage_events("alice", "2026-10-16", "2026-10-17")
    assert sorted(e["action_type"] for e in events) == ["audio_conversion", "pdf_upload"]
    audio_event = next(e for e in events if e["action_type"] == "audio_conversion")
    assert audio_event["audio_minutes_used"] == 1.0
    assert audio_event["metadata"] == {"tts_provider": "yarngpt", "document_id": "doc-1"}

    summary = await db.get_daily_summary("alice", "2026-10-16")
    assert summary["pdfs_uploaded"] == 1
    assert summary["audio_minutes_used"] == 1.0


@pytest.mark.asyncio
async def test_wav_audio_keeps_wav_extension(db, storage):
    await db.create_document({"id": "doc-1", "user_id": "alice", "file_name": "bio.pdf"})
    tts = TTSResult(audio=b"RIFF" + b"\x00" * 4000, provider="gemini", audio_format="wav", content_type="audio/wav")

    record = await make_service(db, storage).finalize(make_output(tts))

    assert record["audio_url"] == "alice/doc-1/audio.wav"


@pytest.mark.asyncio
async def test_zero_length_narration_is_not_billed_as_audio(db, storage):
    await db.create_document({"id": "doc-1", "user_id": "alice", "file_name": "bio.pdf"})
    tts = TTSResult(audio=b"\x02" * 4096, provider="yarngpt", audio_format="mp3", content_type="audio/mpeg")

    record = await make_service(db, storage).finalize(make_output(tts, script="Hi"))

    assert record["audio_url"] == "alice/doc-1/audio.mp3"
    assert record["audio_duration_seconds"] == 0
    events = await db.list_usage_events("alice", "2026-10-16", "2026-10-17")
    assert [e["action_type"] for e in events] == ["pdf_upload"]


@pytest.mark.asyncio
async def test_ready_without_audio(db, storage):
    await db.create_document({"id": "doc-1", "user_id": "alice", "file_name": "bio.pdf"})
    tts = TTSResult(failed_providers=["yarngpt (503)", "gemini (no audio data)"])
    pages = [PageContent(page_number=1, text="one"), PageContent(page_number=2, text="two")]

    record = await make_service(db, storage).finalize(make_output(tts, page_contents=pages))

    assert record["status"] == "ready"
    assert record["audio_url"] is None
    assert record["audio_duration_seconds"] is None
    assert record["page_count"] == 2
    assert record["tts_metadata"]["tts_provider"] == "none"
    assert record["tts_metadata"]["failed_providers"] == ["yarngpt (503)", "gemini (no audio data)"]

    events = await db.list_usage_events("alice", "2026-10-16", "2026-10-17")
    assert [e["action_type"] for e in events] == ["pdf_upload"]


@pytest.mark.asyncio
async def test_upload_failure_is_recorded_not_fatal(db):
    await db.create_document({"id": "doc-1", "user_id": "alice", "file_name": "bio.pdf"})
    tts = TTSResult(audio=b"\x02" * 4096, provider="yarngpt", audio_format="mp3", content_type="audio/mpeg")

    record = await make_service(db, FailingStorage()).finalize(make_output(tts))

    assert record["status"] == "ready"
    assert record["audio_url"] is None
    assert record["tts_metadata"]["pipeline_warnings"] == ["audio upload failed: ConnectionError"]
    events = await db.list_usage_events("alice", "2026-10-16", "2026-10-17")
    assert [e["action_type"] for e in events] == ["pdf_upload"]


@pytest.mark.asyncio
async def test_document_of_another_user_is_not_written(db, storage):
    await db.create_document({"id": "doc-1", "user_id": "bob", "file_name": "bio.pdf"})

    with pytest.raises(DocumentNotFoundError):
        await make_service(db, storage).finalize(make_output(TTSResult()))

    assert (await db.get_owned_document("doc-1", "bob"))["status"] == "uploaded"
