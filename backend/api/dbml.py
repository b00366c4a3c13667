"""POST /api/dbml/parse — parse DBML text into tables and references."""
from fastapi import APIRouter

from core.dbml_parser import parse_dbml
from models.imports import DBMLPasteRequest
from models.schema import Schema

router = APIRouter()


@router.post("/dbml/parse", response_model=Schema)
def parse(req: DBMLPasteRequest):
    return parse_dbml(req.dbml)
