import logging
from typing import Optional

import google.generativeai as genai
from pydantic import ValidationError

from config import Config
from models import AnalysisRequest, AnalysisResult
from services.errors import AnalysisFailedError
from services.highlighting import highlight_transcription
from services.prompt_builder import build_prompt

logger = logging.getLogger(__name__)

class SpeechAnalyzer:
    def __init__(self, model_name: Optional[str] = None, temperature: Optional[float] = None):
        # Configure the Gemini API with your key
        genai.configure(api_key=Config.GEMINI_API_KEY)
        self.model_name = model_name or Config.GEMINI_MODEL
        self.temperature = Config.GEMINI_TEMPERATURE if temperature is None else temperature

    def _model(self, system_prompt: str):
        return genai.GenerativeModel(self.model_name, system_instruction=system_prompt)

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Run one structured analysis call and validate the JSON it returns."""
        try:
            system_prompt, parts = build_prompt(request)
        except ValueError as e:
            raise AnalysisFailedError(f"Could not build prompt: {e}") from e

        logger.info(f"Sending {request.mode.value} analysis to {self.model_name} "
                    f"({'audio' if request.audio_payload else 'transcript'} input)")
        try:
            response = self._model(system_prompt).generate_content(
                parts,
                generation_config={
                    "response_mime_type": "application/json",
                    "temperature": self.temperature,
                },
            )
            raw_text = response.text
        except Exception as e:
            logger.error(f"Error calling Gemini API: {e}", exc_info=True)
            raise AnalysisFailedError(f"Inference call failed: {e}") from e

        return self.parse_response(raw_text)

    def parse_response(self, raw_text: Optional[str]) -> AnalysisResult:
        if not raw_text or not raw_text.strip():
            raise AnalysisFailedError("Analysis failed: no output from model.")

        try:
            result = AnalysisResult.model_validate_json(raw_text.strip())
        except ValidationError as e:
            logger.error(f"Model output failed schema validation: {e.error_count()} errors")
            raise AnalysisFailedError(f"Model output failed schema validation: {e}") from e

        if result.highlighted_segments and result.transcription:
            if not result.segments_match_transcription():
                logger.error("Model output segments do not reconstruct the transcription")
                raise AnalysisFailedError("Highlighted segments do not match the transcription")
        elif not result.highlighted_segments and result.transcription:
            result.highlighted_segments = highlight_transcription(result.transcription)
        elif result.highlighted_segments and not result.transcription:
            result.transcription = result.full_transcription()
        return result
