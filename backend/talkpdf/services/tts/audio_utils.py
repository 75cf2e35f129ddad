"""
Audio helpers for the TTS engine: script normalization, sentence-aware
chunking, byte concatenation and WAV wrapping of raw PCM.
"""
import re
import struct
from typing import List, Sequence

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
_WHITESPACE = re.compile(r"\s+")

WAV_HEADER_SIZE = 44


def normalize_script(text: str, max_chars: int) -> str:
    """Collapse whitespace runs to single spaces and cap the length."""
    return _WHITESPACE.sub(" ", text or "").strip()[:max_chars]


def split_into_chunks(text: str, max_length: int) -> List[str]:
    """
    Split text into chunks of at most max_length characters.

    Sentences are kept whole and packed greedily. A sentence longer than
    max_length is split on word boundaries; a single word longer than
    max_length becomes its own (oversized) chunk.

    Args:
        text: Script to split
        max_length: Per-chunk character limit

    Returns:
        Ordered list of non-empty chunks
    """
    if max_length <= 0:
        raise ValueError("max_length must be positive")

    chunks: List[str] = []
    current = ""

    def flush():
        nonlocal current
        if current.strip():
            chunks.append(current.strip())
        current = ""

    for sentence in _SENTENCE_BOUNDARY.split(text.strip()):
        if not sentence:
            continue
        candidate = f"{current} {sentence}" if current else sentence
        if len(candidate) <= max_length:
            current = candidate
            continue

        flush()
        if len(sentence) <= max_length:
            current = sentence
            continue

        for word in sentence.split():
            candidate = f"{current} {word}" if current else word
            if len(candidate) <= max_length:
                current = candidate
            else:
                flush()
                current = word

    flush()
    return chunks


def concatenate_audio(buffers: Sequence[bytes]) -> bytes:
    """Join chunk payloads in order; chunk i starts at the sum of the earlier sizes."""
    return b"".join(buffers)


def add_wav_header(
    pcm: bytes,
    sample_rate: int = 24000,
    channels: int = 1,
    bits_per_sample: int = 16
) -> bytes:
    """
    Wrap headerless little-endian PCM samples in a 44-byte RIFF/WAVE header.

    Args:
        pcm: Raw sample bytes
        sample_rate: Samples per second
        channels: Channel count
        bits_per_sample: Sample width in bits

    Returns:
        Playable WAV bytes (header + pcm)
    """
    block_align = channels * bits_per_sample // 8
    byte_rate = sample_rate * block_align
    header = struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        36 + len(pcm),
        b"WAVE",
        b"fmt ",
        16,                 # fmt chunk size
        1,                  # PCM
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        b"data",
        len(pcm),
    )
    return header + pcm
