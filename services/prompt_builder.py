import json
from typing import Any, Dict, List, Tuple, Union

from pydantic.alias_generators import to_camel

from models import AnalysisMode, AnalysisRequest, CRITERIA_CATEGORIES
from services.audio import parse_data_uri

PromptPart = Union[str, Dict[str, Any]]

def _criterion_skeleton(practice: bool) -> Dict[str, Any]:
    skeleton = {"score": 0, "evaluation": "", "feedback": ""}
    if practice:
        skeleton["comparison"] = ""
    return skeleton

def build_expected_json(practice: bool = False) -> Dict[str, Any]:
    """Skeleton of the JSON object the model must return."""
    expected: Dict[str, Any] = {
        "metadata": {
            "wordCount": 0,
            "fillerWordCount": 0,
            "speechRateWPM": 0,
            "averagePauseDurationMs": 0,
            "pitchVariance": 0,
            "audioDurationSeconds": 0,
            "paceScore": 0,
            "clarityScore": 0,
            "pausePercentage": 0,
        },
        "totalScore": _criterion_skeleton(practice),
    }
    for _category, (attr, criteria) in CRITERIA_CATEGORIES.items():
        expected[attr] = {}
        for key, _name in criteria:
            expected[attr][to_camel(key)] = _criterion_skeleton(practice)
    expected["transcription"] = ""
    expected["highlightedSegments"] = [{"text": "", "kind": "default"}]
    expected["suggestedSpeech"] = ""
    return expected

def build_system_prompt(request: AnalysisRequest) -> str:
    practice = request.mode == AnalysisMode.PRACTICE

    if practice:
        intro = (
            "You are a professional exam evaluator. Evaluate the candidate's answer "
            "against the perfect answer on the 15 criteria below."
        )
    else:
        intro = (
            "You are a professional speech coach. Analyze the user's speech sample "
            "and give constructive feedback."
        )

    criteria_lines = []
    for category, (_attr, criteria) in CRITERIA_CATEGORIES.items():
        names = ", ".join(name for _key, name in criteria)
        criteria_lines.append(f"- {category}: {names}")

    if request.mode == AnalysisMode.INTERVIEW:
        mode_section = f"""
You are in "Interview Mode". The user was answering the question: "{request.question}"
All evaluations must be in the context of this question."""
    elif practice:
        mode_section = f"""
You are in "Practice Mode". The user was answering the question: "{request.question}"
Their goal is to match the following perfect answer in content and meaning.
Perfect Answer: "{request.reference_answer}"
Score the content criteria (Relevance, Organization, Accuracy, Depth, Persuasiveness)
on how closely the answer matches the perfect answer.
For every criterion, also fill "comparison" with how the answer compares with the perfect answer."""
    else:
        mode_section = """
You are in "Presentation Mode". Evaluate the speech as a general presentation."""

    prompt = f"""
{intro}

The speech is provided either as a transcription or as audio. If audio is provided,
transcribe it first, put the transcription in "transcription", and base the analysis on it.
{mode_section}

Evaluate ALL 15 criteria, grouped by category:
{chr(10).join(criteria_lines)}

For each criterion give:
- "score": an integer from 0 to 10, where 10 is excellent.
- "evaluation": a brief assessment of the performance.
- "feedback": specific, actionable suggestions for improvement.

"totalScore" is a holistic criterion for the whole performance, with the same fields
and the same 0-10 score range.

Metadata:
- wordCount, fillerWordCount, speechRateWPM, averagePauseDurationMs and pitchVariance
  are calculated or estimated from the speech.
- audioDurationSeconds is the audio length when audio was provided.
- paceScore and clarityScore are scores from 0 to 100. Ideal pace is 140-160 WPM.
- pausePercentage is the estimated percentage of total time spent pausing (0-100).

"highlightedSegments": segment the entire transcription, one segment per word or pause.
Use kind "filler" only for a single filler word (um, ah, like), kind "pause" for
significant silences written as "[PAUSE: 1.2s]", and kind "default" for everything else.
Keep the trailing space of each word inside its segment so that concatenating all
"text" fields reconstructs the full transcription exactly.

"suggestedSpeech": a concise (1-3 sentences) rephrasing that models ideal delivery
for the user's context.

Return ONLY one JSON object, without Markdown and without extra text,
following exactly this structure:

{json.dumps(build_expected_json(practice), indent=2)}
"""
    return prompt.strip()

def build_prompt_parts(request: AnalysisRequest) -> List[PromptPart]:
    """Context text followed by the speech sample (text or inline audio)."""
    context = f"Context: {request.mode.value.title()} Mode"
    if request.question:
        context += f"\nQuestion: {request.question}"
    if request.reference_answer and request.mode == AnalysisMode.PRACTICE:
        context += f"\nPerfect Answer: {request.reference_answer}"

    parts: List[PromptPart] = [context]
    if request.audio_payload:
        mime_type, data = parse_data_uri(request.audio_payload)
        parts.append({"mime_type": mime_type, "data": data})
    else:
        parts.append(f'Speech Sample (Transcription): "{request.transcription}"')
    return parts

def build_prompt(request: AnalysisRequest) -> Tuple[str, List[PromptPart]]:
    return build_system_prompt(request), build_prompt_parts(request)
