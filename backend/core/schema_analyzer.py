"""
Semantic schema analysis.
Sends the DBML to the LLM, pulls the JSON answer out of the reply and
validates it into an AnalysisResult.
"""
import json
import logging

from pydantic import ValidationError

from core.errors import AnalysisError
from integrations.ollama_client import OllamaClient
from models.analysis import AnalysisResult, AnalyzeRequest, AnalyzeResponse
from prompts.analysis import ANALYSIS_SYSTEM_PROMPT, analysis_prompt

logger = logging.getLogger(__name__)


def extract_json(text: str) -> str:
    """Strip a ```json (or bare ```) fence around the reply, if any."""
    idx = text.find("```json")
    if idx != -1:
        text = text[idx + 7:]
        end = text.find("```")
        if end != -1:
            text = text[:end]
    else:
        idx = text.find("```")
        if idx != -1:
            text = text[idx + 3:]
            end = text.find("```")
            if end != -1:
                text = text[:end]
    return text.strip()


def _parse_llm_output(raw: str) -> AnalysisResult:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        try:
            data = json.loads(extract_json(raw))
        except json.JSONDecodeError as e:
            raise AnalysisError("AI returned invalid JSON") from e

    if not isinstance(data, dict):
        raise AnalysisError("AI returned invalid JSON")
    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        raise AnalysisError(f"AI analysis has an unexpected shape: {e.error_count()} error(s)") from e


def analyze_schema(req: AnalyzeRequest, ollama: OllamaClient) -> AnalyzeResponse:
    """Run the semantic analysis for one DBML document."""
    messages = [
        {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
        {"role": "user", "content": analysis_prompt.format(dbml=req.dbml)},
    ]
    try:
        raw = ollama.chat(messages, json_mode=True)
    except RuntimeError as e:
        raise AnalysisError(f"AI analysis failed: {e}") from e

    analysis = _parse_llm_output(raw)
    logger.info(
        "Analysis: %d domains, %d auth tables, %d skipped",
        len(analysis.domains), len(analysis.auth_tables), len(analysis.skip_tables),
    )
    return AnalyzeResponse(analysis=analysis, model=ollama.model, provider=ollama.provider)
