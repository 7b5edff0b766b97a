import base64
import binascii
import io
import re
from typing import Iterable, Tuple

import numpy as np
import soundfile as sf

DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[\w.+-]+=[\w.+-]+)*)(?P<b64>;base64)?,(?P<data>.*)$", re.DOTALL)

def encode_wav(frames: Iterable[np.ndarray], sample_rate: int) -> bytes:
    """Encode float PCM chunks in [-1, 1] as 16-bit mono WAV."""
    chunks = [np.asarray(frame, dtype=np.float32).reshape(-1) for frame in frames]
    samples = np.concatenate(chunks) if chunks else np.zeros(0, dtype=np.float32)
    samples = np.clip(samples, -1.0, 1.0)

    buffer = io.BytesIO()
    sf.write(buffer, samples, sample_rate, format="WAV", subtype="PCM_16")
    return buffer.getvalue()

def wav_duration_seconds(data: bytes) -> float:
    info = sf.info(io.BytesIO(data))
    if not info.samplerate:
        return 0.0
    return info.frames / float(info.samplerate)

def to_data_uri(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"

def is_data_uri(value: str) -> bool:
    return value.startswith("data:")

def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """Split a base64 data URI into (mime_type, raw bytes)."""
    match = DATA_URI_RE.match(uri.strip())
    if not match or not match.group("b64"):
        raise ValueError("Audio payload must be a base64 data URI")

    mime_type = match.group("mime") or "application/octet-stream"
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Audio payload is not valid base64: {e}")
    if not data:
        raise ValueError("Audio payload is empty")
    return mime_type, data
