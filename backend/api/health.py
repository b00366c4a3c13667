"""GET /api/health — system dependency check."""
import logging
import httpx
from fastapi import APIRouter
from config import settings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check():
    ollama_status = _check_ollama()
    ucode_status  = _check_ucode()
    overall = "ok" if ollama_status["status"] == "up" and ucode_status["status"] == "up" else "degraded"
    return {
        "status": overall,
        "ai_analysis_enabled": settings.AI_ANALYSIS_ENABLED,
        "services": {
            "ollama": ollama_status,
            "ucode":  ucode_status,
        },
    }


def _check_ollama() -> dict:
    try:
        resp = httpx.get(f"{settings.OLLAMA_HOST}/api/version", timeout=5)
        resp.raise_for_status()
        return {"status": "up", "model": settings.OLLAMA_MODEL, "url": settings.OLLAMA_HOST}
    except httpx.HTTPError as e:
        return {"status": "down", "error": str(e)}


def _check_ucode() -> dict:
    # Any HTTP answer means the host is reachable; /v1/chart needs a project id
    try:
        httpx.get(settings.UCODE_BASE_URL, timeout=5)
        return {"status": "up", "url": settings.UCODE_BASE_URL}
    except httpx.HTTPError as e:
        return {"status": "down", "error": str(e)}
