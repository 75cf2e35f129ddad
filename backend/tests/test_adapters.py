import io
from types import SimpleNamespace

import pytest
from botocore.exceptions import ClientError

from talkpdf.domain import Document, content_type_for, infer_file_type
from talkpdf.services.auth_service import (
    StaticTokenAuthService,
    SupabaseAuthService,
    create_auth_service,
    parse_static_tokens,
)
from talkpdf.services.database import DatabaseFactory
from talkpdf.services.storage.s3_storage import S3FileStorage


# Memory database

@pytest.mark.asyncio
async def test_documents_are_owner_scoped(db):
    await db.create_document({"id": "doc-1", "user_id": "alice", "file_name": "bio.pdf"})

    assert await db.get_owned_document("doc-1", "bob") is None
    assert await db.update_owned_document("doc-1", "bob", {"status": "error"}) is None
    assert (await db.get_owned_document("doc-1", "alice"))["status"] == "uploaded"

    updated = await db.update_owned_document("doc-1", "alice", {"status": "processing"})
    assert updated["status"] == "processing"


@pytest.mark.asyncio
async def test_status_guarded_update(db):
    await db.create_document({"id": "doc-1", "user_id": "alice", "file_name": "bio.pdf", "status": "ready"})

    assert await db.update_document_in_status("doc-1", "processing", {"status": "error"}) is None
    assert await db.update_document_in_status("missing", "processing", {"status": "error"}) is None

    await db.update_owned_document("doc-1", "alice", {"status": "processing"})
    updated = await db.update_document_in_status("doc-1", "processing", {"status": "error"})
    assert updated["status"] == "error"


@pytest.mark.asyncio
async def test_returned_records_are_copies(db):
    await db.create_document({"id": "doc-1", "user_id": "alice", "file_name": "bio.pdf"})

    record = await db.get_owned_document("doc-1", "alice")
    record["status"] = "ready"

    assert (await db.get_owned_document("doc-1", "alice"))["status"] == "uploaded"


@pytest.mark.asyncio
async def test_create_requires_owner(db):
    with pytest.raises(ValueError):
        await db.create_document({"id": "doc-1", "file_name": "bio.pdf"})


@pytest.mark.asyncio
async def test_usage_event_range_is_half_open(db):
    for created_at in ("2026-10-15T23:59:59+00:00", "2026-10-16T00:00:00+00:00", "2026-10-17T00:00:00+00:00"):
        await db.create_usage_event({"user_id": "alice", "action_type": "pdf_upload", "created_at": created_at})

    events = await db.list_usage_events("alice", "2026-10-16T00:00:00+00:00", "2026-10-17T00:00:00+00:00")

    assert [e["created_at"] for e in events] == ["2026-10-16T00:00:00+00:00"]


@pytest.mark.asyncio
async def test_daily_summary_upsert_replaces(db):
    await db.upsert_daily_summary({"user_id": "alice", "date": "2026-10-16", "pdfs_uploaded": 1})
    await db.upsert_daily_summary({"user_id": "alice", "date": "2026-10-16", "pdfs_uploaded": 2})

    assert (await db.get_daily_summary("alice", "2026-10-16"))["pdfs_uploaded"] == 2
    assert await db.get_daily_summary("alice", "2026-10-17") is None


def test_database_factory_rejects_unknown_type():
    with pytest.raises(ValueError):
        DatabaseFactory.create("json")


# Local storage

@pytest.mark.asyncio
async def test_local_storage_round_trip(storage):
    await storage.initialize()

    path = await storage.save_bytes(b"audio", "alice/doc-1/audio.mp3", "audio/mpeg")

    assert path == "alice/doc-1/audio.mp3"
    assert await storage.get_file(path) == b"audio"
    await storage.save_bytes(b"newer", path, "audio/mpeg")
    assert await storage.get_file(path) == b"newer"


@pytest.mark.asyncio
async def test_local_storage_missing_file(storage):
    with pytest.raises(FileNotFoundError):
        await storage.get_file("alice/nothing.pdf")


@pytest.mark.asyncio
async def test_local_storage_rejects_traversal(storage):
    with pytest.raises(ValueError):
        await storage.get_file("../../etc/passwd")


# Domain helpers

def test_file_type_inference():
    assert infer_file_type("Notes.DOCX") == "word"
    assert infer_file_type("old.doc") == "word"
    assert infer_file_type("book.pdf") == "pdf"
    assert infer_file_type(None) == "pdf"
    assert content_type_for("book.pdf") == "application/pdf"
    assert content_type_for("old.doc") == "application/msword"


def test_document_from_record():
    document = Document.from_record({"id": "doc-1", "user_id": "alice", "file_name": "a.docx", "status": "ready"})

    assert document.status == "ready"
    assert document.content_type == "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    assert document.file_type == "word"


# Auth

def test_parse_static_tokens_ignores_malformed_entries():
    assert parse_static_tokens("a:u1, b:u2,broken,:nouser,notoken:") == {"a": "u1", "b": "u2"}
    assert parse_static_tokens("") == {}


@pytest.mark.asyncio
async def test_static_token_auth():
    auth = StaticTokenAuthService({"secret": "alice"})

    assert await auth.get_user_id("secret") == "alice"
    assert await auth.get_user_id("wrong") is None


class FakeSupabaseAuth:
    def __init__(self, user_id=None, error=None):
        self.user_id = user_id
        self.error = error

    def get_user(self, jwt):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(user=SimpleNamespace(id=self.user_id) if self.user_id else None)


@pytest.mark.asyncio
async def test_supabase_auth_resolves_user():
    auth = SupabaseAuthService(client=SimpleNamespace(auth=FakeSupabaseAuth(user_id="alice")))

    assert await auth.get_user_id("jwt") == "alice"


@pytest.mark.asyncio
async def test_supabase_auth_rejections():
    missing = SupabaseAuthService(client=SimpleNamespace(auth=FakeSupabaseAuth()))
    failing = SupabaseAuthService(client=SimpleNamespace(auth=FakeSupabaseAuth(error=RuntimeError("expired"))))

    assert await missing.get_user_id("jwt") is None
    assert await failing.get_user_id("jwt") is None


def test_unknown_auth_provider():
    with pytest.raises(ValueError):
        create_auth_service("ldap")


# S3 storage

class FakeS3Client:
    def __init__(self):
        self.objects = {}

    def _missing(self, operation):
        return ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, operation)

    def put_object(self, Bucket, Key, Body, ContentType):
        self.objects[(Bucket, Key)] = (Body, ContentType)

    def get_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise self._missing("GetObject")
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)][0])}


@pytest.mark.asyncio
async def test_s3_storage_uses_prefixed_keys():
    client = FakeS3Client()
    storage = S3FileStorage("audio-bucket", key_prefix="talkpdf/", client=client)

    await storage.save_bytes(b"mp3", "alice/doc-1/audio.mp3", "audio/mpeg")

    assert client.objects[("audio-bucket", "talkpdf/alice/doc-1/audio.mp3")] == (b"mp3", "audio/mpeg")
    assert await storage.get_file("alice/doc-1/audio.mp3") == b"mp3"
    with pytest.raises(FileNotFoundError):
        await storage.get_file("alice/doc-1/other.mp3")
