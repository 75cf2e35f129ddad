import base64
import json

import httpx
import pytest

from talkpdf.services.tts import (
    ElevenLabsProvider,
    GeminiTTSProvider,
    SpeechProviderFactory,
    YarnGPTProvider,
)
from talkpdf.services.tts.audio_utils import WAV_HEADER_SIZE


def client_for(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_yarngpt_sends_voice_for_language():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, content=b"\xff" * 4096, headers={"content-type": "audio/mpeg"})

    async with client_for(handler) as client:
        result = await YarnGPTProvider("yarn-key", http_client=client).synthesize("Bawo ni", "yo")

    assert result.ok
    assert len(result.audio) == 4096
    assert seen["auth"] == "Bearer yarn-key"
    assert seen["body"] == {"text": "Bawo ni", "voice": "Adaora", "response_format": "mp3"}


@pytest.mark.asyncio
async def test_yarngpt_reports_status_code():
    async with client_for(lambda request: httpx.Response(503, text="busy")) as client:
        result = await YarnGPTProvider("yarn-key", http_client=client).synthesize("Hello", "en")

    assert result.error == "503"
    assert result.audio is None


@pytest.mark.asyncio
async def test_yarngpt_rejects_non_audio_body():
    def handler(request):
        return httpx.Response(200, json={"error": "quota"})

    async with client_for(handler) as client:
        result = await YarnGPTProvider("yarn-key", http_client=client).synthesize("Hello", "en")

    assert result.error == "unexpected content-type application/json"


@pytest.mark.asyncio
async def test_transport_failure_becomes_reason():
    def handler(request):
        raise httpx.ConnectTimeout("timed out")

    async with client_for(handler) as client:
        result = await YarnGPTProvider("yarn-key", http_client=client).synthesize("Hello", "en")

    assert result.error == "transport error: ConnectTimeout"


@pytest.mark.asyncio
async def test_gemini_wraps_pcm_in_wav():
    pcm = b"\x10\x00" * 3000
    seen = {}

    def handler(request):
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "candidates": [{"content": {"parts": [{"inlineData": {"data": base64.b64encode(pcm).decode()}}]}}]
        })

    async with client_for(handler) as client:
        result = await GeminiTTSProvider("gem-key", http_client=client).synthesize("Sannu", "ha")

    assert result.ok
    assert result.audio[:4] == b"RIFF"
    assert len(result.audio) == WAV_HEADER_SIZE + len(pcm)
    assert result.audio[WAV_HEADER_SIZE:] == pcm
    assert seen["key"] == "gem-key"
    voice = seen["body"]["generationConfig"]["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]["voiceName"]
    assert voice == "Kore"


@pytest.mark.asyncio
async def test_gemini_without_audio_data():
    async with client_for(lambda request: httpx.Response(200, json={"candidates": []})) as client:
        result = await GeminiTTSProvider("gem-key", http_client=client).synthesize("Hello", "en")

    assert result.error == "no audio data"


@pytest.mark.asyncio
async def test_elevenlabs_request_shape():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["format"] = request.url.params["output_format"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, content=b"\x00" * 2048, headers={"content-type": "audio/mpeg"})

    provider = ElevenLabsProvider("eleven-key")
    async with client_for(handler) as client:
        provider._http_client = client
        result = await provider.synthesize("x" * 6000, "en")

    assert result.ok
    assert seen["path"].endswith(f"/text-to-speech/{provider.voice_for('en')}")
    assert seen["format"] == "mp3_44100_128"
    assert len(seen["body"]["text"]) == 5000


def test_elevenlabs_has_no_local_language_voices():
    provider = ElevenLabsProvider("eleven-key")

    assert provider.supports_language("en")
    for language in ("yo", "ha", "ig", "pcm"):
        assert not provider.supports_language(language)


def test_only_yarngpt_chunks():
    assert YarnGPTProvider("k").supports_chunking
    assert not GeminiTTSProvider("k").supports_chunking
    assert not ElevenLabsProvider("k").supports_chunking


def test_factory_follows_order_and_skips_missing_keys():
    providers = SpeechProviderFactory.create_providers(
        order=["elevenlabs", "unknown", "gemini", "yarngpt"],
        api_keys={"yarngpt": "y", "gemini": None, "elevenlabs": "e"}
    )

    assert [p.name for p in providers] == ["elevenlabs", "yarngpt"]


def test_factory_default_order():
    providers = SpeechProviderFactory.create_providers(
        api_keys={"yarngpt": "y", "gemini": "g", "elevenlabs": "e"}
    )

    assert [p.name for p in providers] == ["yarngpt", "gemini", "elevenlabs"]
