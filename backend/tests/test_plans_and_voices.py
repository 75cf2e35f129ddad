import pytest

from talkpdf.core.plans import DEFAULT_PLAN, PLAN_LIMITS, resolve_plan
from talkpdf.core.voices import (
    ELEVENLABS_VOICES,
    GEMINI_VOICES,
    LOCAL_LANGUAGES,
    SUPPORTED_LANGUAGES,
    YARNGPT_VOICES,
    language_label,
)


@pytest.mark.parametrize("name", ["free", "plus", "pro"])
def test_known_plans_resolve(name):
    assert resolve_plan(name) is PLAN_LIMITS[name]


def test_plan_names_are_normalized():
    assert resolve_plan(" PRO ").name == "pro"


@pytest.mark.parametrize("name", [None, "", "enterprise"])
def test_unknown_plans_fall_back_to_free(name):
    assert resolve_plan(name).name == DEFAULT_PLAN


def test_tiers_grow_monotonically():
    free, plus, pro = PLAN_LIMITS["free"], PLAN_LIMITS["plus"], PLAN_LIMITS["pro"]
    assert free.max_tts_chars < plus.max_tts_chars < pro.max_tts_chars
    assert free.max_chunks < plus.max_chunks < pro.max_chunks
    assert not free.page_extraction_enabled
    assert plus.page_extraction_enabled and pro.page_extraction_enabled


def test_every_language_has_a_voice_on_multilingual_providers():
    for language in SUPPORTED_LANGUAGES:
        assert YARNGPT_VOICES.voice_for(language)
        assert GEMINI_VOICES.voice_for(language)


def test_voice_lookup_uses_default_for_unknown_language():
    assert YARNGPT_VOICES.voice_for("yo") == "Adaora"
    assert YARNGPT_VOICES.voice_for("fr") == YARNGPT_VOICES.default_voice
    assert ELEVENLABS_VOICES.voice_for("en") == ELEVENLABS_VOICES.default_voice


def test_language_labels():
    assert language_label("pcm") == "Nigerian Pidgin"
    assert language_label("xx") == "English"
    assert "en" not in LOCAL_LANGUAGES
