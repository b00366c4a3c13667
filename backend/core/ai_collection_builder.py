"""
AI-organized collection builder.
Reorganizes the standard CRUD synthesis around a semantic analysis: one auth
flow folder per detected auth table, one folder per domain, and a trailing
"Other Tables" bucket for tables the analysis did not place anywhere.

Every schema table ends up in exactly one of: an auth folder, a domain
folder, the Other Tables folder, or nowhere (skipped / deselected).
"""
import logging
from collections.abc import Set
from typing import Optional

from core.collection_builder import (
    auth_headers, build_files_folder, build_table_requests, collection_title,
    collection_variables, json_body, json_header, leaf, make_url, resolve_base_url,
)
from core.sample_values import iso_now
from models.analysis import AnalysisResult, AuthTableSpec
from models.collection import CollectionInfo, Folder, PostmanCollection
from models.schema import Schema

logger = logging.getLogger(__name__)

DEFAULT_LOGIN_BODY = {"login": "", "password": ""}


def effective_skip_set(schema: Schema, analysis: AnalysisResult, selection: Optional[Set[str]]) -> set[str]:
    """Tables to leave out: everything deselected, or the analysis skip list when there is no selection."""
    if selection is not None:
        return {name for name in schema.table_names() if name not in selection}
    return set(analysis.skip_tables)


def _auth_folder_name(spec: AuthTableSpec) -> str:
    kind = spec.auth_type or "user"
    return f"🔐 {kind[:1].upper() + kind[1:]} Auth ({spec.table_name})"


def build_auth_flow(spec: AuthTableSpec, schema: Schema, project_id: str, api_key: str, base_url: str) -> Folder:
    pid = project_id or "{{project_id}}"
    plain = [json_header()]
    login_body = spec.login_body or DEFAULT_LOGIN_BODY
    kind = spec.auth_type or "user"

    items = [
        leaf(f"Register ({kind})", "POST", plain,
             make_url(base_url, ["v2", "register"], [("project-id", pid)]),
             json_body(spec.register_fields)),
        leaf(f"Login ({kind})", "POST", plain,
             make_url(base_url, ["v2", "login"]),
             json_body({**login_body, "project_id": pid})),
        leaf(f"Login with Options ({kind})", "POST", plain,
             make_url(base_url, ["v2", "login", "with-option"], [("project-id", pid)]),
             json_body(login_body)),
        leaf(f"Send OTP ({kind})", "POST", plain,
             make_url(base_url, ["v2", "send-code"]),
             json_body({"phone": "+1234567890", "project_id": pid})),
        leaf(f"Reset Password ({kind})", "PUT", auth_headers(api_key),
             make_url(base_url, ["v2", "reset-password"]),
             json_body({"login": "", "new_password": "", "code": "123456"})),
    ]

    table = schema.get_table(spec.table_name)
    if table is not None:
        items.extend(build_table_requests(table, api_key, base_url))

    return Folder(name=_auth_folder_name(spec), item=items)


def build_ai_collection(
    schema: Schema,
    analysis: AnalysisResult,
    project_id: str,
    environment_id: str,
    api_key: str = "",
    base_url: Optional[str] = None,
    selection: Optional[Set[str]] = None,
) -> PostmanCollection:
    """
    Generate a domain-organized collection from a schema and its analysis.

    When `selection` is given it overrides the analysis skip list: every
    schema table outside it is skipped, auth tables included.
    """
    base_url = resolve_base_url(base_url)
    skip = effective_skip_set(schema, analysis, selection)
    emitted: set[str] = set()
    items: list = []

    # 1. Auth flows; one per table, first spec wins
    auth_names: set[str] = set()
    for spec in analysis.auth_tables:
        if spec.table_name in auth_names:
            logger.warning("Duplicate auth spec for table '%s' ignored", spec.table_name)
            continue
        auth_names.add(spec.table_name)
        if selection is not None and spec.table_name not in selection:
            continue
        items.append(build_auth_flow(spec, schema, project_id, api_key, base_url))
        emitted.add(spec.table_name)

    # 2. Files
    items.append(build_files_folder(api_key, base_url))

    # 3. Domains
    for domain in analysis.domains:
        domain_items = []
        for info in domain.tables:
            if info.name in skip or info.name in auth_names or info.name in emitted:
                continue
            table = schema.get_table(info.name)
            if table is None:
                continue
            marker = "⭐" if info.essential else "📋"
            domain_items.append(Folder(
                name=f"{marker} {info.name}",
                item=build_table_requests(table, api_key, base_url),
            ))
            emitted.add(info.name)
        if domain_items:
            items.append(Folder(name=f"{domain.icon} {domain.name}", item=domain_items))

    # 4. Orphans
    claimed = auth_names | analysis.domain_table_names()
    orphans = [
        t for t in schema.tables
        if t.name not in emitted and t.name not in claimed and t.name not in skip
    ]
    if orphans:
        logger.info("%d table(s) not covered by the analysis: %s", len(orphans), ", ".join(t.name for t in orphans))
        items.append(Folder(
            name="📦 Other Tables",
            item=[
                Folder(name=f"📋 {t.name}", item=build_table_requests(t, api_key, base_url))
                for t in orphans
            ],
        ))

    description = (
        "AI-organized CRUD collection.\n"
        f"{analysis.project_summary}\n"
        f"Project ID: {project_id}\n"
        f"Environment ID: {environment_id}\n"
        f"Total: {analysis.table_count_total} tables | "
        f"Essential: {analysis.table_count_essential} | "
        f"Skipped: {analysis.table_count_skipped}\n"
        f"Generated at: {iso_now()}"
    )
    logger.info(
        "Built AI collection: %d tables emitted, %d skipped, %d orphaned",
        len(emitted) + len(orphans), len(skip), len(orphans),
    )
    return PostmanCollection(
        info=CollectionInfo(name=f"{collection_title(project_id)} - AI Organized", description=description),
        item=items,
        variable=collection_variables(base_url, api_key, project_id, environment_id),
    )
