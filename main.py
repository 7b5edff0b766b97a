import logging
import threading
import uuid
import httpx
from typing import Optional
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from config import Config
from models import AnalysisMode, AnalysisRequest, AnalysisResult
from services.capture import CaptureMode, CaptureSession
from services.dashboard import DashboardView, build_dashboard
from services.errors import (
    AnalysisFailedError,
    AnalysisInProgressError,
    AnalysisValidationError,
    UnsupportedMediaError,
)
from services.orchestrator import FAILURE_NOTICE, AnalysisOrchestrator
from services.report import generate_pdf_report
from services.speech_analyzer import SpeechAnalyzer

# Configure logging
logging.basicConfig(level=Config.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')

app = FastAPI(title="Verbal Insights Speech Coach", version="1.0.0")

# Initialize services
speech_analyzer = SpeechAnalyzer()
analysis_lock = threading.Lock()

def _orchestrator() -> AnalysisOrchestrator:
    # Results travel in the response body; only the in-flight guard is process-wide
    return AnalysisOrchestrator(speech_analyzer, lock=analysis_lock)

def _run_analysis(request_id: str, request: AnalysisRequest) -> AnalysisResult:
    try:
        return _orchestrator().analyze(request)
    except AnalysisValidationError as e:
        logging.info(f"[{request_id}] Rejected analysis request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except AnalysisInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except AnalysisFailedError as e:
        logging.error(f"[{request_id}] Analysis failed: {e}")
        raise HTTPException(status_code=502, detail=FAILURE_NOTICE)

@app.post("/analyze", response_model=AnalysisResult)
def analyze(request: AnalysisRequest):
    """
    Analyze a transcript or an audio data URI in the selected mode.
    """
    request_id = str(uuid.uuid4())[:8]
    logging.info(f"[{request_id}] Received {request.mode.value} analysis request")
    return _run_analysis(request_id, request)

@app.post("/analyze/upload", response_model=AnalysisResult)
def analyze_upload(
    file: UploadFile = File(...),
    mode: AnalysisMode = Form(AnalysisMode.PRESENTATION),
    question: Optional[str] = Form(None),
    reference_answer: Optional[str] = Form(None, alias="referenceAnswer"),
):
    """
    Receives an audio file, validates it and analyzes it as an audio sample.
    """
    request_id = str(uuid.uuid4())[:8]
    logging.info(f"[{request_id}] Received upload: {file.filename} ({file.content_type})")

    session = CaptureSession()
    session.switch_mode(CaptureMode.UPLOAD)
    try:
        session.accept_upload(file.filename, file.content_type, file.file.read())
    except UnsupportedMediaError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        request = _orchestrator().validate(mode, session.speech_sample(), question, reference_answer)
    except AnalysisValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _run_analysis(request_id, request)

@app.post("/dashboard", response_model=DashboardView)
def dashboard(result: AnalysisResult):
    """Render-ready view of an analysis result."""
    return build_dashboard(result)

@app.post("/report")
def report(result: AnalysisResult):
    """Export an analysis result as a PDF report."""
    try:
        pdf = generate_pdf_report(result)
    except Exception as e:
        logging.error(f"Report generation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to generate report")
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{Config.REPORT_FILENAME}"'},
    )

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "message": "Speech coach is running",
        "analysis_pending": analysis_lock.locked(),
    }

@app.get("/health/gemini")
async def gemini_health_check():
    """Check Gemini API connectivity"""
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(
                f"{Config.GEMINI_API_BASE}/models/{Config.GEMINI_MODEL}",
                params={"key": Config.GEMINI_API_KEY},
            )

            if response.status_code in [400, 401, 403]:
                return {"status": "error", "message": "Invalid API key"}
            elif response.status_code == 429:
                return {"status": "warning", "message": "Rate limited"}
            elif response.status_code == 404:
                return {"status": "error", "message": f"Model {Config.GEMINI_MODEL} not found"}
            elif response.status_code == 200:
                return {"status": "healthy", "message": "Gemini is reachable"}
            else:
                return {"status": "error", "message": f"Unexpected status: {response.status_code}"}

    except httpx.TimeoutException:
        return {"status": "error", "message": "Connection timeout"}
    except httpx.HTTPError as e:
        return {"status": "error", "message": f"Network connectivity issue: {e}"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
