
import numpy as np
import pytest

from services.capture import (
    MICROPHONE_NOTICE,
    NOT_AUDIO_NOTICE,
    CaptureMode,
    CaptureSession,
)
from services.errors import CaptureError, MicrophoneUnavailableError, UnsupportedMediaError

class FakeMicrophone:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True

def denied_microphone():
    raise MicrophoneUnavailableError("Permission denied")

def test_live_transcript_accumulates_final_and_interim():
    s = CaptureSession()
    s.start_listening()
    assert s.on_recognition_result([("Hello ", True), ("wor", False)]) == "Hello wor"
    assert s.on_recognition_result([("Hello ", True), ("world.", True)], result_index=1) == "Hello world."
    s.stop_listening()
    assert s.speech_sample().kind == "transcript"
    assert s.speech_sample().value == "Hello world."

def test_recoverable_recognition_errors_are_ignored():
    s = CaptureSession()
    s.start_listening()
    for code in ("no-speech", "network", "aborted"):
        s.on_recognition_error(code)
    assert s.is_listening
    assert s.notices == []

def test_fatal_recognition_error_stops_and_notifies():
    s = CaptureSession()
    s.start_listening()
    s.on_recognition_error("not-allowed")
    assert not s.is_listening
    assert s.notices == ["Speech recognition error: not-allowed"]

def test_listening_requires_support():
    s = CaptureSession(recognition_supported=False)
    assert not s.can_start_listening
    with pytest.raises(CaptureError):
        s.start_listening()

def test_transcript_read_only_while_listening():
    s = CaptureSession()
    s.start_listening()
    with pytest.raises(CaptureError):
        s.set_transcript("typed")
    s.on_recognition_end()
    s.set_transcript("typed")
    assert s.transcript == "typed"

def test_recording_produces_wav_and_releases_microphone():
    s = CaptureSession(sample_rate=8000)
    s.switch_mode(CaptureMode.RECORD)
    mic = FakeMicrophone()
    s.start_recording(lambda: mic)
    assert s.is_recording and not s.can_start_recording
    s.push_frames(np.zeros(4000))
    s.push_frames(np.zeros(4000))
    clip = s.stop_recording()
    assert mic.closed
    assert clip.mime_type == "audio/wav"
    assert clip.duration_seconds == pytest.approx(1.0)
    assert s.speech_sample().value.startswith("data:audio/wav;base64,")

def test_empty_recording_yields_no_clip():
    s = CaptureSession()
    s.switch_mode(CaptureMode.RECORD)
    s.start_recording(FakeMicrophone)
    assert s.stop_recording() is None
    assert s.speech_sample().is_empty()

def test_microphone_denied_disables_recording():
    s = CaptureSession()
    s.switch_mode(CaptureMode.RECORD)
    s.start_recording(denied_microphone)
    assert not s.is_recording
    assert s.record_disabled and not s.can_start_recording
    assert s.notices == [MICROPHONE_NOTICE]

def test_only_one_path_active_at_a_time():
    s = CaptureSession()
    s.start_listening()
    assert not s.can_start_recording
    with pytest.raises(CaptureError):
        s.start_recording(FakeMicrophone)

def test_recording_only_in_record_mode():
    s = CaptureSession()
    with pytest.raises(CaptureError):
        s.start_recording(FakeMicrophone)

@pytest.mark.parametrize("target", list(CaptureMode))
def test_switching_mode_clears_state(target):
    s = CaptureSession()
    s.start_listening()
    s.on_recognition_result([("words", True)])
    s.switch_mode(CaptureMode.UPLOAD)
    assert s.transcript == "" and not s.is_listening
    s.accept_upload("talk.wav", "audio/wav", b"RIFF....")
    assert s.audio_clip is not None

    s.switch_mode(target)
    assert s.transcript == ""
    assert s.audio_clip is None
    assert s.speech_sample().is_empty()

def test_switching_mode_stops_recording():
    s = CaptureSession()
    s.switch_mode(CaptureMode.RECORD)
    mic = FakeMicrophone()
    s.start_recording(lambda: mic)
    s.push_frames(np.ones(100) * 0.1)
    s.switch_mode(CaptureMode.LIVE)
    assert not s.is_recording and mic.closed
    assert s.audio_clip is None

def test_upload_rejects_non_audio():
    s = CaptureSession()
    with pytest.raises(UnsupportedMediaError):
        s.accept_upload("notes.txt", "text/plain", b"hello")
    assert s.notices == [NOT_AUDIO_NOTICE]
    assert s.mode == CaptureMode.UPLOAD
    assert s.audio_clip is None

def test_upload_guesses_type_from_filename():
    s = CaptureSession()
    clip = s.accept_upload("talk.mp3", "application/octet-stream", b"ID3data")
    assert clip.mime_type == "audio/mpeg"
    assert s.speech_sample().kind == "audio"

def test_upload_size_limits():
    s = CaptureSession(max_file_size=4)
    with pytest.raises(UnsupportedMediaError):
        s.accept_upload("a.wav", "audio/wav", b"")
    with pytest.raises(UnsupportedMediaError):
        s.accept_upload("a.wav", "audio/wav", b"12345")
