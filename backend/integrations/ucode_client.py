"""
U-Code project schema client.
Fetches a project's DBML from the /v1/chart endpoint.
"""
import logging
from typing import Optional
import httpx

from config import settings
from core.errors import SchemaFetchError

logger = logging.getLogger(__name__)


class UCodeClient:
    """Thin wrapper around the U-Code schema endpoint."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        self.base = (base_url or settings.UCODE_BASE_URL).strip().rstrip("/")
        self.client = httpx.Client(timeout=timeout or settings.UCODE_TIMEOUT_SECONDS)

    def fetch_dbml(self, project_id: str, environment_id: str, api_key: str = "") -> str:
        """Return the project's DBML text or raise SchemaFetchError."""
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers.update({"authorization": "API-KEY", "x-api-key": api_key})
        params = {"project-id": project_id.strip(), "environment-id": environment_id.strip()}

        try:
            resp = self.client.get(f"{self.base}/v1/chart", params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Schema fetch from %s failed: %s", self.base, e)
            raise SchemaFetchError(
                "Network error: Unable to reach the server. Try using the direct DBML paste option."
            ) from e

        if resp.is_error:
            raise SchemaFetchError(f"HTTP {resp.status_code}: {resp.reason_phrase}")

        try:
            data = resp.json()
        except ValueError as e:
            raise SchemaFetchError("Failed to fetch project schema") from e

        if not isinstance(data, dict):
            raise SchemaFetchError("Failed to fetch project schema")
        dbml = (data.get("data") or {}).get("dbml")
        if data.get("status") != "OK" or not dbml:
            raise SchemaFetchError(data.get("description") or "Failed to fetch project schema")

        logger.info("Fetched DBML for project %s (%d chars)", project_id, len(dbml))
        return dbml

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()
