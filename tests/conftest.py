import copy
import json
import os

# Config refuses to load without a key
os.environ.setdefault("GEMINI_API_KEY", "test-key")

import pytest

def _criterion(score, label):
    return {
        "score": score,
        "evaluation": f"{label} was handled reasonably well.",
        "feedback": f"Keep practising {label.lower()}.",
    }

RESULT_PAYLOAD = {
    "metadata": {
        "wordCount": 12,
        "fillerWordCount": 2,
        "speechRateWPM": 132.5,
        "averagePauseDurationMs": 450,
        "pitchVariance": 12.5,
        "audioDurationSeconds": 5.4,
        "paceScore": 78,
        "clarityScore": 85,
        "pausePercentage": 9.5,
    },
    "totalScore": _criterion(7, "Overall delivery"),
    "delivery": {
        "fluency": _criterion(8, "Fluency"),
        "pacing": _criterion(7, "Pacing"),
        "clarity": _criterion(9, "Clarity"),
        "confidence": _criterion(6, "Confidence"),
        "emotionalTone": _criterion(7, "Emotional tone"),
    },
    "language": {
        "grammar": _criterion(8, "Grammar"),
        "vocabulary": _criterion(7, "Vocabulary"),
        "wordChoice": _criterion(6, "Word choice"),
        "conciseness": _criterion(5, "Conciseness"),
        "fillerWords": _criterion(4, "Filler words"),
    },
    "content": {
        "relevance": _criterion(9, "Relevance"),
        "organization": _criterion(7, "Organization"),
        "accuracy": _criterion(8, "Accuracy"),
        "depth": _criterion(3, "Depth"),
        "persuasiveness": _criterion(6, "Persuasiveness"),
    },
    "transcription": "Hello everyone, um, today I want to talk about, like, our roadmap.",
    "highlightedSegments": [
        {"text": "Hello ", "kind": "default"},
        {"text": "everyone, ", "kind": "default"},
        {"text": "um, ", "kind": "filler"},
        {"text": "today ", "kind": "default"},
        {"text": "I ", "kind": "default"},
        {"text": "want ", "kind": "default"},
        {"text": "to ", "kind": "default"},
        {"text": "talk ", "kind": "default"},
        {"text": "about, ", "kind": "default"},
        {"text": "like, ", "kind": "filler"},
        {"text": "our ", "kind": "default"},
        {"text": "roadmap.", "kind": "default"},
    ],
    "suggestedSpeech": "Hello everyone. Today I will walk you through our roadmap.",
}

@pytest.fixture
def result_payload():
    return copy.deepcopy(RESULT_PAYLOAD)

@pytest.fixture
def result_json(result_payload):
    return json.dumps(result_payload)

@pytest.fixture
def analysis_result(result_payload):
    from models import AnalysisResult
    return AnalysisResult.model_validate(result_payload)
