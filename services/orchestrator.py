import logging
import threading
import uuid
from typing import Optional

from models import AnalysisMode, AnalysisRequest, AnalysisResult
from services.audio import is_data_uri, parse_data_uri
from services.capture import SpeechSample
from services.errors import AnalysisFailedError, AnalysisInProgressError, AnalysisValidationError

logger = logging.getLogger(__name__)

MISSING_TRANSCRIPT = "No transcription provided."
MISSING_AUDIO = "No audio provided."
MISSING_QUESTION = "Please enter an interview question."
MISSING_REFERENCE_ANSWER = "Please enter both question and perfect answer."
AMBIGUOUS_SAMPLE = "Provide either a transcription or audio, not both."
INVALID_AUDIO = "Audio payload must be a base64 data URI"
FAILURE_NOTICE = "Analysis failed. Something went wrong. Please try again."

def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()

class AnalysisOrchestrator:
    """
    Validates analysis input, runs a single inference call at a time and
    keeps the last result (or failure notice) for rendering.
    """

    def __init__(self, analyzer, lock: Optional[threading.Lock] = None):
        self.analyzer = analyzer
        self.result: Optional[AnalysisResult] = None
        self.notice: Optional[str] = None
        # A shared lock keeps one analysis in flight across instances
        self._lock = lock if lock is not None else threading.Lock()

    @property
    def pending(self) -> bool:
        return self._lock.locked()

    def validate(self,
                 mode: AnalysisMode,
                 sample: SpeechSample,
                 question: Optional[str] = None,
                 reference_answer: Optional[str] = None) -> AnalysisRequest:
        """Build a request from captured input, failing before any network call."""
        mode = AnalysisMode(mode)
        if sample.is_empty():
            raise AnalysisValidationError(MISSING_TRANSCRIPT if sample.kind == "transcript" else MISSING_AUDIO)

        request = AnalysisRequest(
            mode=mode,
            transcription=sample.value if sample.kind == "transcript" else None,
            audio_payload=sample.value if sample.kind == "audio" else None,
            question=question,
            reference_answer=reference_answer,
        )
        return self.request_from_payload(request)

    def request_from_payload(self, request: AnalysisRequest) -> AnalysisRequest:
        has_transcript = not _blank(request.transcription)
        has_audio = not _blank(request.audio_payload)

        if has_transcript and has_audio:
            raise AnalysisValidationError(AMBIGUOUS_SAMPLE)
        if not has_transcript and not has_audio:
            # Audio field present but empty means the audio path was used
            raise AnalysisValidationError(MISSING_AUDIO if request.audio_payload is not None else MISSING_TRANSCRIPT)
        if has_audio:
            if not is_data_uri(request.audio_payload.strip()):
                raise AnalysisValidationError(INVALID_AUDIO)
            try:
                parse_data_uri(request.audio_payload)
            except ValueError as e:
                raise AnalysisValidationError(str(e)) from e

        if request.mode in (AnalysisMode.INTERVIEW, AnalysisMode.PRACTICE) and _blank(request.question):
            raise AnalysisValidationError(MISSING_QUESTION)
        if request.mode == AnalysisMode.PRACTICE and _blank(request.reference_answer):
            raise AnalysisValidationError(MISSING_REFERENCE_ANSWER)

        return request.model_copy(update={
            "transcription": request.transcription if has_transcript else None,
            "audio_payload": request.audio_payload if has_audio else None,
            "question": None if request.mode == AnalysisMode.PRESENTATION else request.question,
            "reference_answer": request.reference_answer if request.mode == AnalysisMode.PRACTICE else None,
        })

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        request = self.request_from_payload(request)
        if not self._lock.acquire(blocking=False):
            raise AnalysisInProgressError("An analysis is already in progress")

        request_id = str(uuid.uuid4())[:8]
        self.result = None
        self.notice = None
        try:
            logger.info(f"[{request_id}] Starting {request.mode.value} analysis")
            result = self.analyzer.analyze(request)
        except Exception as e:
            logger.error(f"[{request_id}] Analysis failed: {e}")
            self.notice = FAILURE_NOTICE
            if isinstance(e, AnalysisFailedError):
                raise
            raise AnalysisFailedError(str(e)) from e
        finally:
            self._lock.release()

        self.result = result
        logger.info(f"[{request_id}] Analysis finished: total score {result.total_score.score}/10")
        return result
