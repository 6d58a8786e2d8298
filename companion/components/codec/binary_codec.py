"""
Binary transcoding helpers.

Covers the boundary between transport strings (base64, data URIs) and the raw
bytes used everywhere else, plus the RIFF/WAVE container for mono 16-bit PCM
returned by the speech model.
"""

from __future__ import annotations

import base64
import binascii
import struct
from typing import NamedTuple

from companion.entities.errors import DecodeError
from companion.entities.media import MediaPayload

WAV_HEADER_SIZE = 44
_PCM_FORMAT = 1
_CHANNELS = 1
_BITS_PER_SAMPLE = 16


class WavHeader(NamedTuple):
    sample_rate: int
    channels: int
    bits_per_sample: int
    data_length: int


def encode_wav(pcm: bytes, sample_rate: int) -> bytes:
    """Wrap raw mono s16le PCM samples in a 44-byte WAV header."""
    block_align = _CHANNELS * _BITS_PER_SAMPLE // 8
    byte_rate = sample_rate * block_align
    data_size = len(pcm)
    return b"".join(
        [
            b"RIFF",
            struct.pack("<I", 36 + data_size),
            b"WAVE",
            b"fmt ",
            struct.pack("<I", 16),  # fmt chunk size
            struct.pack("<H", _PCM_FORMAT),
            struct.pack("<H", _CHANNELS),
            struct.pack("<I", sample_rate),
            struct.pack("<I", byte_rate),
            struct.pack("<H", block_align),
            struct.pack("<H", _BITS_PER_SAMPLE),
            b"data",
            struct.pack("<I", data_size),
            bytes(pcm),
        ]
    )


def decode_wav_header(wav: bytes) -> WavHeader:
    """
    Read the format fields back from a WAV produced by encode_wav.

    Raises:
        DecodeError: If the buffer is too short or the chunk ids do not match.
    """
    if len(wav) < WAV_HEADER_SIZE:
        raise DecodeError(f"WAV buffer too short: {len(wav)} bytes")
    if wav[0:4] != b"RIFF" or wav[8:12] != b"WAVE":
        raise DecodeError("Missing RIFF/WAVE signature")
    if wav[12:16] != b"fmt " or wav[36:40] != b"data":
        raise DecodeError("Unexpected chunk layout")

    (
        _fmt_size,
        _audio_format,
        channels,
        sample_rate,
        _byte_rate,
        _block_align,
        bits_per_sample,
    ) = struct.unpack("<IHHIIHH", wav[16:36])
    (data_length,) = struct.unpack("<I", wav[40:44])
    return WavHeader(sample_rate, channels, bits_per_sample, data_length)


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def decode_base64(value: str) -> bytes:
    """
    Decode standard base64, tolerating a leading ``data:<mime>;base64,`` prefix.

    Raises:
        DecodeError: If the payload is not valid base64.
    """
    if "," in value:
        value = value.split(",", 1)[1]
    payload = "".join(value.split())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Malformed base64 payload: {e}") from e


def parse_data_uri(uri: str) -> MediaPayload:
    """
    Split a ``data:<mime>;base64,<payload>`` URI into bytes and mime type.

    Raises:
        DecodeError: If the URI has no header/payload separator or no mime type.
    """
    if not uri.startswith("data:") or "," not in uri:
        raise DecodeError("Not a data URI")

    header, payload = uri.split(",", 1)
    mime_type = header[len("data:") :].split(";", 1)[0].strip()
    if not mime_type:
        raise DecodeError("Data URI has no mime type")

    return MediaPayload(data=decode_base64(payload), mime_type=mime_type)


def as_bytes(data: bytes | str | None) -> bytes:
    """Normalise an inline payload from the SDK, which may arrive as base64 text."""
    if data is None:
        return b""
    if isinstance(data, str):
        return decode_base64(data)
    return bytes(data)
