"""
Standard collection builder.
Turns a parsed DBML schema into a Postman v2.1 collection: an Authentication
folder, a Files folder, then one CRUD folder per table in schema order.
The request helpers here are shared with the AI-organized builder.
"""
import json
import logging
from typing import Any, Optional
from urllib.parse import quote, urlsplit

from config import settings
from core.sample_values import NIL_UUID, iso_now, sample_body
from models.collection import (
    Body, CollectionInfo, Folder, FormField, Header, PostmanCollection,
    QueryParam, Request, RequestLeaf, Url, Variable,
)
from models.schema import Schema, Table

logger = logging.getLogger(__name__)

FROM_OFS = ("from-ofs", "true")
WITH_RELATIONS = json.dumps({"with_relations": True}, separators=(",", ":"))


# ── Low-level request pieces ──────────────────────────────────────────────────

def json_header() -> Header:
    return Header(key="Content-Type", value="application/json")


def key_headers(api_key: str) -> list[Header]:
    return [
        Header(key="authorization", value="API-KEY"),
        Header(key="x-api-key", value=api_key or "{{api_key}}"),
    ]


def auth_headers(api_key: str) -> list[Header]:
    """The three-header block carried by every key-authenticated request."""
    return key_headers(api_key) + [json_header()]


def _encode_query_value(value: str) -> str:
    # {{placeholders}} stay literal for the environment resolver
    if "{{" in value:
        return value
    return quote(value, safe="")


def make_url(base_url: str, path: list[str], query: Optional[list[tuple[str, str]]] = None) -> Url:
    base_url = base_url.rstrip("/")
    raw = f"{base_url}/{'/'.join(path)}"
    if query:
        raw += "?" + "&".join(f"{k}={_encode_query_value(v)}" for k, v in query)

    parts = urlsplit(base_url)
    base_path = [p for p in parts.path.split("/") if p]
    # netloc keeps the host as written; the port is its own Url field
    host, _, port = parts.netloc.rpartition("@")[2].partition(":")
    return Url(
        raw=raw,
        protocol=parts.scheme or None,
        host=host.split(".") if host else None,
        port=port or None,
        path=base_path + path,
        query=[QueryParam(key=k, value=v) for k, v in query] if query else None,
    )


def json_body(payload: Any) -> Body:
    return Body(
        mode="raw",
        raw=json.dumps(payload, indent=2, ensure_ascii=False),
        options={"raw": {"language": "json"}},
    )


def leaf(name: str, method: str, headers: list[Header], url: Url, body: Optional[Body] = None) -> RequestLeaf:
    return RequestLeaf(
        name=name,
        request=Request(method=method, header=list(headers), url=url, body=body),
    )


def resolve_base_url(base_url: Optional[str]) -> str:
    return (base_url or settings.UCODE_BASE_URL).strip().rstrip("/")


# ── Folders ───────────────────────────────────────────────────────────────────

def build_auth_requests(project_id: str, api_key: str, base_url: str) -> list[RequestLeaf]:
    """The five fixed authentication requests of the standard collection."""
    pid = project_id or "{{project_id}}"
    plain = [json_header()]
    return [
        leaf("Register", "POST", plain,
             make_url(base_url, ["v2", "register"], [("project-id", pid)]),
             json_body({
                 "login": "user@example.com",
                 "password": "password123",
                 "name": "John Doe",
                 "phone": "+1234567890",
             })),
        leaf("Login", "POST", plain,
             make_url(base_url, ["v2", "login"]),
             json_body({"login": "user@example.com", "password": "password123", "project_id": pid})),
        leaf("Login with Options", "POST", plain,
             make_url(base_url, ["v2", "login", "with-option"], [("project-id", pid)]),
             json_body({"login": "user@example.com", "password": "password123"})),
        leaf("Send OTP Code", "POST", plain,
             make_url(base_url, ["v2", "send-code"]),
             json_body({"phone": "+1234567890", "project_id": pid})),
        leaf("Reset Password", "PUT", auth_headers(api_key),
             make_url(base_url, ["v2", "reset-password"]),
             json_body({"login": "user@example.com", "new_password": "new_password123", "code": "123456"})),
    ]


def build_files_folder(api_key: str, base_url: str) -> Folder:
    upload_body = Body(
        mode="formdata",
        formdata=[
            FormField(key="file", type="file", src=""),
            FormField(key="title", type="text", value="My File"),
        ],
    )
    return Folder(
        name="📁 Files",
        item=[
            # multipart: key headers only, the client sets Content-Type
            leaf("Upload File", "POST", key_headers(api_key),
                 make_url(base_url, ["v2", "files"]), upload_body),
            leaf("Delete File", "DELETE", auth_headers(api_key),
                 make_url(base_url, ["v2", "files", "{{file_id}}"])),
        ],
    )


def build_table_requests(table: Table, api_key: str, base_url: str) -> list[RequestLeaf]:
    """The nine CRUD requests for one table, in fixed order."""
    slug = table.name
    headers = auth_headers(api_key)
    sample_create = sample_body(table, exclude_fields=["guid"])
    sample_update = sample_body(table)
    first_two = dict(list(sample_create.items())[:2])
    page = [FROM_OFS, ("offset", "0"), ("limit", "10")]
    items_path = ["v2", "items", slug]

    return [
        leaf(f"List {slug}", "GET", headers, make_url(base_url, items_path, page)),
        leaf(f"List {slug} (with relations)", "GET", headers,
             make_url(base_url, items_path, page + [("data", WITH_RELATIONS)])),
        leaf(f"Get {slug} by ID", "GET", headers,
             make_url(base_url, items_path + ["{{guid}}"], [FROM_OFS])),
        leaf(f"Create {slug}", "POST", headers, make_url(base_url, items_path, [FROM_OFS]),
             json_body({"data": sample_create, "disable_faas": True})),
        leaf(f"Update {slug}", "PUT", headers, make_url(base_url, items_path, [FROM_OFS]),
             json_body({"data": sample_update, "disable_faas": True})),
        leaf(f"Update Multiple {slug}", "PATCH", headers, make_url(base_url, items_path, [FROM_OFS]),
             json_body({
                 "data": {
                     "objects": [
                         {"guid": "{{guid_1}}", **first_two},
                         {"guid": "{{guid_2}}", **first_two},
                     ],
                 },
                 "disable_faas": True,
             })),
        leaf(f"Delete {slug}", "DELETE", headers,
             make_url(base_url, items_path + ["{{guid}}"], [FROM_OFS])),
        leaf(f"Delete Multiple {slug}", "DELETE", headers, make_url(base_url, items_path, [FROM_OFS]),
             json_body({"ids": ["{{guid_1}}", "{{guid_2}}"]})),
        leaf(f"Aggregate {slug}", "POST", headers, make_url(base_url, items_path + ["aggregation"]),
             json_body({"data": {"pipeline": [{"$group": {"_id": None, "count": {"$sum": 1}}}]}})),
    ]


def collection_variables(base_url: str, api_key: str, project_id: str, environment_id: str) -> list[Variable]:
    return [
        Variable(key="base_url", value=base_url),
        Variable(key="api_key", value=api_key),
        Variable(key="project_id", value=project_id),
        Variable(key="environment_id", value=environment_id),
        Variable(key="guid", value=NIL_UUID),
        Variable(key="guid_1", value="00000000-0000-0000-0000-000000000001"),
        Variable(key="guid_2", value="00000000-0000-0000-0000-000000000002"),
        Variable(key="file_id", value=""),
    ]


def collection_title(project_id: str) -> str:
    return f"UCode Project ({project_id[:8]}...)"


# ── Entry point ───────────────────────────────────────────────────────────────

def build_collection(
    schema: Schema,
    project_id: str,
    environment_id: str,
    api_key: str = "",
    base_url: Optional[str] = None,
) -> PostmanCollection:
    """Generate the standard CRUD collection for every table in the schema."""
    base_url = resolve_base_url(base_url)

    items: list = [Folder(name="🔐 Authentication", item=build_auth_requests(project_id, api_key, base_url))]
    items.append(build_files_folder(api_key, base_url))
    for table in schema.tables:
        items.append(Folder(name=f"📋 {table.name}", item=build_table_requests(table, api_key, base_url)))

    description = (
        "Auto-generated CRUD collection for UCode project.\n"
        f"Project ID: {project_id}\n"
        f"Environment ID: {environment_id}\n"
        f"Tables: {len(schema.tables)}\n"
        f"Generated at: {iso_now()}"
    )
    logger.info("Built standard collection: %d tables, %d top-level folders", len(schema.tables), len(items))
    return PostmanCollection(
        info=CollectionInfo(name=collection_title(project_id), description=description),
        item=items,
        variable=collection_variables(base_url, api_key, project_id, environment_id),
    )
