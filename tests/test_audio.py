
import numpy as np
import pytest

from services.audio import encode_wav, is_data_uri, parse_data_uri, to_data_uri, wav_duration_seconds

def test_encode_wav_header_and_duration():
    frames = [np.zeros(8000, dtype=np.float32), np.full(8000, 2.0, dtype=np.float32)]
    data = encode_wav(frames, 16000)
    assert data[:4] == b"RIFF" and data[8:12] == b"WAVE"
    assert wav_duration_seconds(data) == pytest.approx(1.0)

def test_data_uri_with_codec_params():
    uri = to_data_uri(b"abc", "audio/webm")
    assert is_data_uri(uri)
    mime, data = parse_data_uri(uri.replace("audio/webm", "audio/webm;codecs=opus"))
    assert mime == "audio/webm"
    assert data == b"abc"

@pytest.mark.parametrize("uri", [
    "not a uri",
    "data:audio/wav,plain",
    "data:audio/wav;base64,@@@",
    "data:audio/wav;base64,",
])
def test_parse_data_uri_rejects_malformed(uri):
    with pytest.raises(ValueError):
        parse_data_uri(uri)
