"""Pydantic schemas for the semantic schema analysis."""
from typing import Any, Optional
from pydantic import BaseModel, Field


class AnalysisTable(BaseModel):
    name: str
    essential: bool = False
    purpose: str = ""
    auth_type: Optional[str] = None


class AnalysisDomain(BaseModel):
    name: str
    icon: str = "📂"
    description: str = ""
    tables: list[AnalysisTable] = Field(default_factory=list)


class AuthTableSpec(BaseModel):
    table_name: str
    auth_type: Optional[str] = "user"
    login_fields: list[str] = Field(default_factory=list)
    register_fields: dict[str, Any] = Field(default_factory=dict)
    login_body: dict[str, Any] = Field(default_factory=dict)
    has_roles: bool = False
    client_type_table: Optional[str] = None


class AnalysisResult(BaseModel):
    project_summary: str = ""
    domains: list[AnalysisDomain] = Field(default_factory=list)
    auth_tables: list[AuthTableSpec] = Field(default_factory=list)
    skip_tables: list[str] = Field(default_factory=list)
    table_count_total: int = 0
    table_count_essential: int = 0
    table_count_skipped: int = 0

    def auth_table_names(self) -> set[str]:
        return {a.table_name for a in self.auth_tables}

    def domain_table_names(self) -> set[str]:
        return {t.name for d in self.domains for t in d.tables}

    def essential_table_names(self) -> set[str]:
        return {t.name for d in self.domains for t in d.tables if t.essential}


class AnalyzeRequest(BaseModel):
    dbml: str = Field(..., min_length=1)
    project_id: str = ""
    environment_id: str = ""
    base_url: str = ""
    ucode_api_key: str = ""


class AnalyzeResponse(BaseModel):
    analysis: AnalysisResult
    model: str
    provider: str = "ollama"
