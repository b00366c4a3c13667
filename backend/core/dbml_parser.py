"""
DBML parser.
Reads the subset of DBML used by project schemas (Table blocks with one
column per line, plus Ref lines) into a Schema. Never raises: malformed
fragments are skipped and whatever well-formed tables remain are returned.
"""
import logging
import re
from typing import Optional

from models.schema import Column, Reference, Schema, Table

logger = logging.getLogger(__name__)

_TABLE_HEADER = re.compile(r"^Table\s+(\S+?)\s*(\{.*)?$")
_REF_LINE = re.compile(r"Ref:\s*(\S+)\.(\S+)\s*>\s*(\S+)\.(\S+)")

DEFAULT_COLUMN_TYPE = "VARCHAR"


def _parse_column(line: str) -> Optional[Column]:
    trimmed = line.strip()
    if not trimmed or trimmed.startswith("//") or trimmed.startswith("Note"):
        return None
    parts = trimmed.split(None, 1)
    col_type = parts[1].strip() if len(parts) > 1 else ""
    return Column(name=parts[0], type=col_type or DEFAULT_COLUMN_TYPE)


def _parse_refs(text: str) -> list[Reference]:
    refs = []
    for line in text.splitlines():
        m = _REF_LINE.search(line)
        if m:
            refs.append(Reference(
                from_table=m.group(1),
                from_column=m.group(2),
                to_table=m.group(3),
                to_column=m.group(4),
            ))
    return refs


def parse_dbml(text: str) -> Schema:
    """Parse DBML text into tables (source order) and references."""
    if not text:
        return Schema()

    tables: list[Table] = []
    current: Optional[Table] = None
    pending_name: Optional[str] = None   # "Table x" seen, waiting for "{"

    for raw_line in text.splitlines():
        line = raw_line.strip()

        if current is None:
            if pending_name is not None and line.startswith("{"):
                current, pending_name = Table(name=pending_name), None
                line = line[1:]
            else:
                m = _TABLE_HEADER.match(line)
                if not m:
                    pending_name = None
                    continue
                if m.group(2) is None:
                    pending_name = m.group(1).rstrip("{")
                    continue
                current = Table(name=m.group(1))
                line = m.group(2)[1:]

        # Inside a table body
        if line.startswith("//"):
            continue
        if "}" in line:
            head = line.split("}", 1)[0]
            col = _parse_column(head)
            if col:
                current.columns.append(col)
            tables.append(current)
            current = None
            continue

        col = _parse_column(line)
        if col:
            current.columns.append(col)

    if current is not None:
        logger.debug("Dropping unterminated table block '%s'", current.name)

    schema = Schema(tables=tables, refs=_parse_refs(text))
    logger.debug("Parsed DBML: %d tables, %d refs", len(schema.tables), len(schema.refs))
    return schema
