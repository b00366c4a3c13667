"""POST /api/collections/* — stateless Postman collection generation from DBML."""
import logging
from fastapi import APIRouter, HTTPException

from core.ai_collection_builder import build_ai_collection
from core.collection_builder import build_collection
from core.dbml_parser import parse_dbml
from models.imports import AIGenerateRequest, GenerateRequest
from models.schema import Schema

router = APIRouter()
logger = logging.getLogger(__name__)


def _parse_or_400(dbml: str) -> Schema:
    schema = parse_dbml(dbml)
    if not schema.tables:
        raise HTTPException(400, detail="No tables found in the DBML content")
    return schema


@router.post("/collections/standard")
def standard_collection(req: GenerateRequest):
    schema = _parse_or_400(req.dbml)
    collection = build_collection(schema, req.project_id, req.environment_id, req.api_key, req.base_url)
    return collection.to_dict()


@router.post("/collections/ai")
def ai_collection(req: AIGenerateRequest):
    schema = _parse_or_400(req.dbml)
    selection = set(req.selected_tables) if req.selected_tables is not None else None
    collection = build_ai_collection(
        schema,
        req.analysis,
        req.project_id,
        req.environment_id,
        req.api_key,
        req.base_url,
        selection=selection,
    )
    return collection.to_dict()
