from typing import List, Optional

from pydantic import Field

from models import AnalysisResult, CamelModel, EvaluationCriterion, HighlightedSegment

class CriterionCard(CamelModel):
    criterion: str
    score: int
    tone: str
    evaluation: str
    feedback: str
    comparison: Optional[str] = None

class CategorySection(CamelModel):
    category: str
    cards: List[CriterionCard]

class MetricTile(CamelModel):
    title: str
    value: str
    unit: Optional[str] = None

class DashboardView(CamelModel):
    overall: CriterionCard
    metrics: List[MetricTile]
    categories: List[CategorySection]
    segments: List[HighlightedSegment] = Field(default_factory=list)
    transcription: str = ""
    suggested_speech: Optional[str] = None

def score_tone(score: int) -> str:
    """Colour band of a 0-10 score: low below 5, medium below 8."""
    if score < 5:
        return "low"
    if score < 8:
        return "medium"
    return "high"

def _card(name: str, criterion: EvaluationCriterion) -> CriterionCard:
    score = max(0, min(criterion.score, 10))
    return CriterionCard(
        criterion=name,
        score=score,
        tone=score_tone(score),
        evaluation=criterion.evaluation,
        feedback=criterion.feedback,
        comparison=criterion.comparison,
    )

def _number(value: float, digits: int = 0) -> str:
    return f"{value:.{digits}f}"

def build_metrics(result: AnalysisResult) -> List[MetricTile]:
    meta = result.metadata
    tiles = [
        MetricTile(title="Word Count", value=str(meta.word_count)),
        MetricTile(title="Filler Words", value=str(meta.filler_word_count)),
        MetricTile(title="Speech Rate", value=_number(meta.speech_rate_wpm), unit="WPM"),
        MetricTile(title="Avg. Pause", value=_number(meta.average_pause_duration_ms), unit="ms"),
        MetricTile(title="Pitch Variance", value=_number(meta.pitch_variance, 2)),
        MetricTile(title="Pace Score", value=_number(meta.pace_score), unit="/100"),
        MetricTile(title="Clarity Score", value=_number(meta.clarity_score), unit="/100"),
        MetricTile(title="Pause Time", value=_number(meta.pause_percentage, 1), unit="%"),
    ]
    if meta.audio_duration_seconds:
        tiles.append(MetricTile(title="Audio Duration", value=_number(meta.audio_duration_seconds, 2), unit="s"))
    return tiles

def build_dashboard(result: AnalysisResult) -> DashboardView:
    categories = [
        CategorySection(category=category, cards=[_card(name, criterion) for name, criterion in criteria])
        for category, criteria in result.criteria_by_category().items()
    ]
    return DashboardView(
        overall=_card("Total Score", result.total_score),
        metrics=build_metrics(result),
        categories=categories,
        segments=result.highlighted_segments,
        transcription=result.full_transcription(),
        suggested_speech=result.suggested_speech,
    )
