"""Pydantic schemas for parsed DBML: tables, columns and references."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Column(BaseModel):
    name: str
    type: str = "VARCHAR"      # raw type string, modifiers included


class Table(BaseModel):
    name: str
    columns: list[Column] = Field(default_factory=list)


class Reference(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_table: str = Field(..., alias="fromTable")
    from_column: str = Field(..., alias="fromColumn")
    to_table: str = Field(..., alias="toTable")
    to_column: str = Field(..., alias="toColumn")


class Schema(BaseModel):
    tables: list[Table] = Field(default_factory=list)
    refs: list[Reference] = Field(default_factory=list)   # parsed, not consumed by the builders

    def table_names(self) -> list[str]:
        return [t.name for t in self.tables]

    def get_table(self, name: str) -> Optional[Table]:
        return next((t for t in self.tables if t.name == name), None)
