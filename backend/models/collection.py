"""Pydantic schemas for Postman v2.1 collections."""
from __future__ import annotations

from typing import Any, Optional, Union
from pydantic import BaseModel, Field

POSTMAN_SCHEMA_URL = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"


class Header(BaseModel):
    key: str
    value: str
    disabled: bool = False


class QueryParam(BaseModel):
    key: str
    value: str
    disabled: bool = False


class Url(BaseModel):
    raw: str
    protocol: Optional[str] = None
    host: Optional[list[str]] = None
    port: Optional[str] = None
    path: Optional[list[str]] = None
    query: Optional[list[QueryParam]] = None


class FormField(BaseModel):
    key: str
    type: str                       # "file" | "text"
    value: Optional[str] = None
    src: Optional[str] = None


class Body(BaseModel):
    mode: str                       # "raw" | "formdata"
    raw: Optional[str] = None
    formdata: Optional[list[FormField]] = None
    options: Optional[dict[str, Any]] = None


class Request(BaseModel):
    method: str
    header: list[Header] = Field(default_factory=list)
    url: Url
    body: Optional[Body] = None


class RequestLeaf(BaseModel):
    name: str
    request: Request


class Folder(BaseModel):
    name: str
    item: list[Union[Folder, RequestLeaf]] = Field(default_factory=list)


class Variable(BaseModel):
    key: str
    value: str
    type: str = "string"


class CollectionInfo(BaseModel):
    name: str
    description: str = ""
    schema_url: str = Field(POSTMAN_SCHEMA_URL, serialization_alias="schema")


class PostmanCollection(BaseModel):
    info: CollectionInfo
    item: list[Union[Folder, RequestLeaf]] = Field(default_factory=list)
    variable: list[Variable] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True, by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True, by_alias=True, indent=2)


Folder.model_rebuild()
