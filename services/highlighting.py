import re
from typing import List

from models import HighlightedSegment

FILLER_WORDS = {"um", "umm", "uh", "uhm", "ah", "er", "erm", "hmm", "mm", "like"}
FILLER_PHRASES = {"you know"}

TOKEN_RE = re.compile(r"\[pause[^\]\n]{0,40}\]\s*|\byou know\b\S*\s*|\S+\s*", re.IGNORECASE)
PAUSE_RE = re.compile(r"^\[pause[^\]\n]{0,40}\]$", re.IGNORECASE)
PUNCT_RE = re.compile(r"^\W+|\W+$")

def _kind(token: str) -> str:
    stripped = token.strip()
    if PAUSE_RE.match(stripped):
        return "pause"
    bare = PUNCT_RE.sub("", stripped).lower()
    if bare in FILLER_WORDS or bare in FILLER_PHRASES:
        return "filler"
    return "default"

def highlight_transcription(text: str) -> List[HighlightedSegment]:
    """
    Split a transcript into highlight segments.

    Trailing whitespace stays attached to each segment, so joining the
    segment texts gives back the input unchanged.
    """
    segments: List[HighlightedSegment] = []
    if not text:
        return segments

    leading = len(text) - len(text.lstrip())
    if leading:
        segments.append(HighlightedSegment(text=text[:leading], kind="default"))

    for match in TOKEN_RE.finditer(text, leading):
        token = match.group(0)
        segments.append(HighlightedSegment(text=token, kind=_kind(token)))
    return segments

def count_fillers(text: str) -> int:
    return sum(1 for segment in highlight_transcription(text) if segment.kind == "filler")
