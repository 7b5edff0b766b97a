from typing import List

from fpdf import FPDF

from config import Config
from models import AnalysisResult

TITLE = "Verbal Insights: Speech Analysis Report"
FONT = "Helvetica"

_REPLACEMENTS = {
    "\u2018": "'", "\u2019": "'", "\u201c": '"', "\u201d": '"',
    "\u2013": "-", "\u2014": "-", "\u2026": "...", "\u00a0": " ",
}

def to_latin1(text: str) -> str:
    """Core PDF fonts only cover Latin-1; substitute everything else."""
    for src, dst in _REPLACEMENTS.items():
        text = text.replace(src, dst)
    return text.encode("latin-1", "replace").decode("latin-1")

class ReportWriter:
    """Top-down PDF layout with a running y cursor; lines that would cross the bottom margin start a new page."""

    def __init__(self):
        self.pdf = FPDF(orientation="P", unit="mm", format="A4")
        self.pdf.set_auto_page_break(False)
        self.pdf.add_page()
        self.margin = Config.PDF_MARGIN
        self.line_height = Config.PDF_LINE_HEIGHT
        self.page_width = self.pdf.w
        self.page_height = self.pdf.h
        self.y = 20.0

    @property
    def text_width(self) -> float:
        return self.page_width - self.margin * 2

    def check_y(self, increment: float = 0) -> None:
        if self.y + increment > self.page_height - self.margin:
            self.pdf.add_page()
            self.y = self.margin

    def font(self, style: str, size: int) -> None:
        self.pdf.set_font(FONT, style, size)

    def split_text(self, text: str, width: float) -> List[str]:
        """Greedy word wrap to `width`; words wider than a line are split by character."""
        lines: List[str] = []
        for paragraph in to_latin1(text).split("\n"):
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}" if current else word
                if self.pdf.get_string_width(candidate) <= width:
                    current = candidate
                    continue
                if current:
                    lines.append(current)
                pieces = self._break_word(word, width)
                lines.extend(pieces[:-1])
                current = pieces[-1]
            lines.append(current)
        return lines

    def _break_word(self, word: str, width: float) -> List[str]:
        pieces = [""]
        used = 0.0
        for char in word:
            char_width = self.pdf.get_string_width(char)
            if pieces[-1] and used + char_width > width:
                pieces.append("")
                used = 0.0
            pieces[-1] += char
            used += char_width
        return pieces

    def line(self, text: str, x: float) -> None:
        self.check_y()
        if text:
            self.pdf.text(x, self.y, to_latin1(text))
        self.y += self.line_height

    def paragraph(self, text: str, indent: float = 0) -> None:
        for line in self.split_text(text, self.text_width - indent):
            self.line(line, self.margin + indent)

    def heading(self, text: str) -> None:
        self.check_y(self.line_height * 3)
        self.font("B", 16)
        self.pdf.text(self.margin, self.y, to_latin1(text))
        self.y += self.line_height
        self.pdf.set_draw_color(200)
        self.pdf.line(self.margin, self.y, self.page_width - self.margin, self.y)
        self.y += self.line_height

    def title(self, text: str) -> None:
        self.font("B", 22)
        width = self.pdf.get_string_width(text)
        self.pdf.text((self.page_width - width) / 2, self.y, text)
        self.y += self.line_height * 2

    def output(self) -> bytes:
        return bytes(self.pdf.output())

def render_report(result: AnalysisResult) -> ReportWriter:
    writer = ReportWriter()
    lh = writer.line_height
    meta = result.metadata

    writer.title(TITLE)

    writer.heading("Overall Assessment")
    writer.font("", 12)
    writer.line(f"Total Score: {result.total_score.score}/10", writer.margin)
    writer.paragraph(result.total_score.evaluation)
    writer.paragraph(f"Feedback: {result.total_score.feedback}")
    writer.y += lh

    transcription = result.full_transcription()
    if transcription:
        writer.heading("Full Transcription")
        writer.font("", 10)
        writer.paragraph(transcription)
        writer.y += lh

    writer.heading("Key Metrics")
    writer.font("", 12)
    metrics = [
        f"Word Count: {meta.word_count}",
        f"Filler Words: {meta.filler_word_count}",
        f"Speech Rate (WPM): {meta.speech_rate_wpm:g}",
        f"Pitch Variance: {meta.pitch_variance:.2f}",
        f"Average Pause (ms): {meta.average_pause_duration_ms:g}",
        f"Pace Score: {meta.pace_score:g}/100",
        f"Clarity Score: {meta.clarity_score:g}/100",
        f"Pause Time: {meta.pause_percentage:.1f}%",
    ]
    if meta.audio_duration_seconds:
        metrics.append(f"Audio Duration (s): {meta.audio_duration_seconds:.2f}")
    for metric in metrics:
        writer.line(metric, writer.margin)
    writer.y += lh

    writer.heading("Detailed Feedback")
    for category, criteria in result.criteria_by_category().items():
        writer.check_y(lh * 2)
        writer.font("B", 14)
        writer.line(category, writer.margin)

        for name, criterion in criteria:
            writer.check_y(lh * 5)
            writer.font("B", 12)
            writer.line(f"{name} - Score: {criterion.score}/10", writer.margin + 5)
            writer.font("", 11)
            writer.paragraph(f"Evaluation: {criterion.evaluation}", indent=5)
            if criterion.comparison:
                writer.paragraph(f"Comparison: {criterion.comparison}", indent=5)
            writer.paragraph(f"Feedback: {criterion.feedback}", indent=5)
            writer.y += lh / 2

    if result.suggested_speech:
        writer.heading("Suggested Delivery Example")
        writer.font("I", 12)
        writer.paragraph(result.suggested_speech)

    return writer

def generate_pdf_report(result: AnalysisResult) -> bytes:
    return render_report(result).output()
