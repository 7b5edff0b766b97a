from dotenv import load_dotenv
import os

load_dotenv()

# Configuration class for the application
class Config:
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")

    if GEMINI_API_KEY is None:
        raise ValueError("GEMINI_API_KEY environment variable is required for speech analysis")

    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", "0.2"))
    GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")

    # File size limits
    MAX_FILE_SIZE = 25 * 1024 * 1024  # 25MB

    # Capture settings
    RECOGNITION_LANG = os.getenv("RECOGNITION_LANG", "en-US")
    RECORD_SAMPLE_RATE = int(os.getenv("RECORD_SAMPLE_RATE", "16000"))
    RECOVERABLE_RECOGNITION_ERRORS = {"no-speech", "network", "aborted"}

    # Report layout (millimetres)
    PDF_MARGIN = 15
    PDF_LINE_HEIGHT = 7
    REPORT_FILENAME = "verbal-insights-report.pdf"

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
