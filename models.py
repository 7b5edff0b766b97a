from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal, Optional, Tuple

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class AnalysisMode(str, Enum):
    PRESENTATION = "presentation"
    INTERVIEW = "interview"
    PRACTICE = "practice"

class AnalysisRequest(CamelModel):
    mode: AnalysisMode = AnalysisMode.PRESENTATION
    transcription: Optional[str] = None
    audio_payload: Optional[str] = None
    question: Optional[str] = None
    reference_answer: Optional[str] = None

class EvaluationCriterion(CamelModel):
    score: int = Field(ge=0, le=10)
    evaluation: str
    feedback: str
    comparison: Optional[str] = None

class Metadata(CamelModel):
    word_count: int = Field(ge=0)
    filler_word_count: int = Field(ge=0)
    speech_rate_wpm: float = Field(ge=0, alias="speechRateWPM")
    average_pause_duration_ms: float = Field(ge=0)
    pitch_variance: float = Field(ge=0)
    audio_duration_seconds: Optional[float] = Field(default=None, ge=0)
    pace_score: float = Field(ge=0, le=100)
    clarity_score: float = Field(ge=0, le=100)
    pause_percentage: float = Field(ge=0, le=100)

class DeliveryCriteria(CamelModel):
    fluency: EvaluationCriterion
    pacing: EvaluationCriterion
    clarity: EvaluationCriterion
    confidence: EvaluationCriterion
    emotional_tone: EvaluationCriterion

class LanguageCriteria(CamelModel):
    grammar: EvaluationCriterion
    vocabulary: EvaluationCriterion
    word_choice: EvaluationCriterion
    conciseness: EvaluationCriterion
    filler_words: EvaluationCriterion

class ContentCriteria(CamelModel):
    relevance: EvaluationCriterion
    organization: EvaluationCriterion
    accuracy: EvaluationCriterion
    depth: EvaluationCriterion
    persuasiveness: EvaluationCriterion

class HighlightedSegment(CamelModel):
    text: str
    kind: Literal["default", "filler", "pause"] = "default"

# Category name -> (result attribute, [(criterion attribute, display name)])
CRITERIA_CATEGORIES: Dict[str, Tuple[str, List[Tuple[str, str]]]] = {
    "Delivery": ("delivery", [
        ("fluency", "Fluency"),
        ("pacing", "Pacing"),
        ("clarity", "Clarity"),
        ("confidence", "Confidence"),
        ("emotional_tone", "Emotional Tone"),
    ]),
    "Language": ("language", [
        ("grammar", "Grammar"),
        ("vocabulary", "Vocabulary"),
        ("word_choice", "Word Choice"),
        ("conciseness", "Conciseness"),
        ("filler_words", "Filler Words"),
    ]),
    "Content": ("content", [
        ("relevance", "Relevance"),
        ("organization", "Organization"),
        ("accuracy", "Accuracy"),
        ("depth", "Depth"),
        ("persuasiveness", "Persuasiveness"),
    ]),
}

class AnalysisResult(CamelModel):
    metadata: Metadata
    total_score: EvaluationCriterion
    delivery: DeliveryCriteria
    language: LanguageCriteria
    content: ContentCriteria
    transcription: Optional[str] = None
    highlighted_segments: List[HighlightedSegment] = Field(default_factory=list)
    suggested_speech: Optional[str] = None

    def criteria_by_category(self) -> Dict[str, List[Tuple[str, EvaluationCriterion]]]:
        """Criteria grouped per category, in display order."""
        grouped = {}
        for category, (attr, criteria) in CRITERIA_CATEGORIES.items():
            group = getattr(self, attr)
            grouped[category] = [(name, getattr(group, key)) for key, name in criteria]
        return grouped

    def full_transcription(self) -> str:
        if self.transcription:
            return self.transcription
        return "".join(segment.text for segment in self.highlighted_segments)

    def segments_match_transcription(self) -> bool:
        """True when the joined segments read the same as the transcription, ignoring whitespace runs."""
        if not self.highlighted_segments or self.transcription is None:
            return True
        joined = "".join(segment.text for segment in self.highlighted_segments)
        return joined.split() == self.transcription.split()
