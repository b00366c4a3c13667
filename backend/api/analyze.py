"""POST /api/analyze — semantic DBML analysis via the local LLM."""
import logging
from fastapi import APIRouter, HTTPException

from config import settings
from core.errors import AnalysisError
from core.schema_analyzer import analyze_schema
from integrations.ollama_client import OllamaClient
from models.analysis import AnalyzeRequest, AnalyzeResponse

router = APIRouter()
logger = logging.getLogger(__name__)


def run_analysis(req: AnalyzeRequest) -> AnalyzeResponse:
    return analyze_schema(req, OllamaClient())


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(req: AnalyzeRequest):
    if not settings.AI_ANALYSIS_ENABLED:
        raise HTTPException(400, detail="AI analysis is disabled. Set AI_ANALYSIS_ENABLED to use it.")
    try:
        return run_analysis(req)
    except AnalysisError as e:
        raise HTTPException(502, detail=str(e))
