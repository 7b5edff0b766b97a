
import json

from models import AnalysisMode, AnalysisRequest
from services.audio import to_data_uri
from services.prompt_builder import build_expected_json, build_prompt, build_prompt_parts, build_system_prompt

def test_expected_json_lists_all_criteria():
    expected = build_expected_json()
    assert set(expected["delivery"]) == {"fluency", "pacing", "clarity", "confidence", "emotionalTone"}
    assert set(expected["language"]) == {"grammar", "vocabulary", "wordChoice", "conciseness", "fillerWords"}
    assert set(expected["content"]) == {"relevance", "organization", "accuracy", "depth", "persuasiveness"}
    assert "comparison" not in expected["totalScore"]
    assert "comparison" in build_expected_json(practice=True)["delivery"]["fluency"]

def test_presentation_prompt():
    req = AnalysisRequest(mode=AnalysisMode.PRESENTATION, transcription="Hello all")
    system, parts = build_prompt(req)
    assert "Presentation Mode" in system
    assert "speech coach" in system
    assert parts == ["Context: Presentation Mode", 'Speech Sample (Transcription): "Hello all"']

def test_interview_prompt_includes_question():
    req = AnalysisRequest(mode=AnalysisMode.INTERVIEW, transcription="I led a team", question="Tell me about yourself")
    system = build_system_prompt(req)
    assert 'Interview Mode". The user was answering the question: "Tell me about yourself"' in system
    assert "Question: Tell me about yourself" in build_prompt_parts(req)[0]

def test_practice_prompt_includes_reference_answer():
    req = AnalysisRequest(
        mode=AnalysisMode.PRACTICE,
        transcription="Because.",
        question="Why?",
        reference_answer="Because it scales.",
    )
    system, parts = build_prompt(req)
    assert "exam evaluator" in system
    assert 'Perfect Answer: "Because it scales."' in system
    assert '"comparison"' in system
    assert "Perfect Answer: Because it scales." in parts[0]

def test_audio_payload_becomes_inline_blob():
    req = AnalysisRequest(audio_payload=to_data_uri(b"RIFFdata", "audio/wav"))
    parts = build_prompt_parts(req)
    assert parts[1] == {"mime_type": "audio/wav", "data": b"RIFFdata"}

def test_system_prompt_embeds_parseable_skeleton():
    system = build_system_prompt(AnalysisRequest(transcription="x"))
    skeleton = system[system.index("{"):]
    assert json.loads(skeleton) == build_expected_json()
