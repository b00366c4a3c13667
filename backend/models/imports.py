"""Pydantic schemas for the collection import flow."""
from typing import Literal, Optional
from pydantic import BaseModel, Field

from models.analysis import AnalysisResult

ImportStep = Literal["config", "preview", "ai-preview"]


class ImportSessionCreate(BaseModel):
    project_id: str = ""
    environment_id: str = ""
    api_key: str = ""
    base_url: Optional[str] = Field(None, description="Defaults to UCODE_BASE_URL")
    ai_enabled: bool = False


class DBMLPasteRequest(BaseModel):
    dbml: str


class ToggleRequest(BaseModel):
    table_name: str


class FilterRequest(BaseModel):
    search: str = ""


class TablePreview(BaseModel):
    name: str
    selected: bool
    is_auth: bool = False
    is_skipped: bool = False
    is_essential: bool = False


class ImportSessionState(BaseModel):
    session_id: str
    step: ImportStep
    ai_enabled: bool
    error: Optional[str] = None
    tables_count: int = 0
    table_names: list[str] = []
    project_summary: Optional[str] = None
    model: Optional[str] = None
    selected_count: int = 0
    selected_tables: list[str] = []
    search_filter: str = ""


class GenerateRequest(BaseModel):
    """Stateless generation from DBML text."""
    dbml: str
    project_id: str = ""
    environment_id: str = ""
    api_key: str = ""
    base_url: Optional[str] = None


class AIGenerateRequest(GenerateRequest):
    analysis: AnalysisResult
    selected_tables: Optional[list[str]] = None   # None = use the analysis skip list

