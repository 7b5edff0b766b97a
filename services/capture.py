import logging
import mimetypes
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np

from config import Config
from services.audio import encode_wav, to_data_uri, wav_duration_seconds
from services.errors import CaptureError, MicrophoneUnavailableError, UnsupportedMediaError

logger = logging.getLogger(__name__)

MICROPHONE_NOTICE = "Could not access microphone. Please check permissions."
NOT_AUDIO_NOTICE = "Please select an audio file."

class CaptureMode(str, Enum):
    LIVE = "live"
    RECORD = "record"
    UPLOAD = "upload"

@dataclass
class AudioClip:
    data: bytes
    mime_type: str
    filename: str
    duration_seconds: Optional[float] = None

    def data_uri(self) -> str:
        return to_data_uri(self.data, self.mime_type)

@dataclass
class SpeechSample:
    kind: str  # "transcript" or "audio"
    value: str

    def is_empty(self) -> bool:
        return not self.value.strip()

class CaptureSession:
    """
    Acquisition state for one user: live transcription, microphone recording
    or file upload. Only one mode holds data at a time and only one of
    listening/recording can be active.
    """

    def __init__(self,
                 recognition_supported: bool = True,
                 sample_rate: int = Config.RECORD_SAMPLE_RATE,
                 max_file_size: int = Config.MAX_FILE_SIZE):
        self.recognition_supported = recognition_supported
        self.sample_rate = sample_rate
        self.max_file_size = max_file_size

        self.mode = CaptureMode.LIVE
        self.transcript = ""
        self.audio_clip: Optional[AudioClip] = None
        self.is_listening = False
        self.is_recording = False
        self.record_disabled = False
        self.notices: List[str] = []

        self._final_transcript = ""
        self._frames: List[np.ndarray] = []
        self._microphone: Any = None

    # Mode handling

    def switch_mode(self, mode: CaptureMode) -> None:
        """Change acquisition mode, dropping everything captured so far."""
        mode = CaptureMode(mode)
        if self.is_listening:
            self.stop_listening()
        self.clear_audio()
        self.transcript = ""
        self._final_transcript = ""
        self.record_disabled = False
        self.mode = mode

    @property
    def can_start_listening(self) -> bool:
        return (self.mode == CaptureMode.LIVE
                and self.recognition_supported
                and not self.is_listening
                and not self.is_recording)

    @property
    def can_start_recording(self) -> bool:
        return (self.mode == CaptureMode.RECORD
                and not self.record_disabled
                and not self.is_recording
                and not self.is_listening)

    def _notify(self, message: str) -> None:
        logger.warning(f"[capture] {message}")
        self.notices.append(message)

    # Live transcription

    def start_listening(self) -> None:
        if not self.can_start_listening:
            raise CaptureError("Live transcription cannot start now")
        self.transcript = ""
        self._final_transcript = ""
        self.is_listening = True
        logger.debug(f"[capture] listening started lang={Config.RECOGNITION_LANG}")

    def stop_listening(self) -> None:
        self.is_listening = False

    def set_transcript(self, text: str) -> None:
        """Manual edit of the transcript; not allowed while listening."""
        if self.is_listening:
            raise CaptureError("Transcript is read-only while listening")
        self.transcript = text
        self._final_transcript = text

    def on_recognition_result(self, results: Sequence[Tuple[str, bool]], result_index: int = 0) -> str:
        """
        Apply one recognition event. `results` holds (text, is_final) pairs;
        entries before `result_index` were already delivered.
        """
        if not self.is_listening:
            return self.transcript
        interim = ""
        for text, is_final in results[result_index:]:
            if is_final:
                self._final_transcript += text
            else:
                interim += text
        self.transcript = self._final_transcript + interim
        return self.transcript

    def on_recognition_error(self, code: str) -> None:
        if code in Config.RECOVERABLE_RECOGNITION_ERRORS:
            logger.debug(f"[capture] ignoring recoverable recognition error: {code}")
            return
        self.stop_listening()
        self._notify(f"Speech recognition error: {code}")

    def on_recognition_end(self) -> None:
        self.is_listening = False

    # Microphone recording

    def start_recording(self, open_microphone: Callable[[], Any]) -> None:
        """
        Open the microphone and start buffering frames. `open_microphone`
        returns a handle with a close() method or raises
        MicrophoneUnavailableError.
        """
        if not self.can_start_recording:
            raise CaptureError("Recording cannot start now")
        self.clear_audio()
        try:
            self._microphone = open_microphone()
        except MicrophoneUnavailableError as e:
            logger.error(f"[capture] microphone access denied: {e}")
            self.record_disabled = True
            self._notify(MICROPHONE_NOTICE)
            return
        self._frames = []
        self.is_recording = True

    def push_frames(self, frames: np.ndarray) -> None:
        if not self.is_recording:
            raise CaptureError("Not recording")
        self._frames.append(np.asarray(frames, dtype=np.float32))

    def stop_recording(self) -> Optional[AudioClip]:
        """Finalize buffered frames into a WAV clip and release the microphone."""
        if not self.is_recording:
            return self.audio_clip
        self.is_recording = False
        self._release_microphone()

        frames, self._frames = self._frames, []
        if not frames or sum(f.size for f in frames) == 0:
            logger.info("[capture] recording stopped with no audio")
            return None

        data = encode_wav(frames, self.sample_rate)
        self.audio_clip = AudioClip(
            data=data,
            mime_type="audio/wav",
            filename="recording.wav",
            duration_seconds=round(wav_duration_seconds(data), 2),
        )
        logger.info(f"[capture] recording finalized ({len(data)} bytes)")
        return self.audio_clip

    def _release_microphone(self) -> None:
        if self._microphone is not None:
            self._microphone.close()
            self._microphone = None

    # Upload

    def accept_upload(self, filename: str, content_type: Optional[str], data: bytes) -> AudioClip:
        if self.mode != CaptureMode.UPLOAD:
            self.switch_mode(CaptureMode.UPLOAD)
        else:
            self.clear_audio()

        mime_type = content_type
        if not mime_type or mime_type == "application/octet-stream":
            mime_type = mimetypes.guess_type(filename or "")[0]
        if not mime_type or not mime_type.startswith("audio/"):
            self._notify(NOT_AUDIO_NOTICE)
            raise UnsupportedMediaError(f"Unsupported file type: {mime_type or 'unknown'}")
        if len(data) == 0:
            raise UnsupportedMediaError("Empty file")
        if len(data) > self.max_file_size:
            raise UnsupportedMediaError("File too large")

        self.audio_clip = AudioClip(data=data, mime_type=mime_type, filename=filename or "upload")
        return self.audio_clip

    def clear_audio(self) -> None:
        if self.is_recording:
            self.is_recording = False
            self._release_microphone()
        self._frames = []
        self.audio_clip = None

    # Output

    def speech_sample(self) -> SpeechSample:
        if self.mode == CaptureMode.LIVE:
            return SpeechSample(kind="transcript", value=self.transcript)
        value = self.audio_clip.data_uri() if self.audio_clip else ""
        return SpeechSample(kind="audio", value=value)
