"""
Import flow — one DBML → collection import, from config to final JSON.

    config ──load_dbml──▶ preview       (standard collection, ready to import)
           └─(ai)──────▶ ai-preview    (analysis + editable table selection)
    ai-preview / failed analysis ──fallback_to_standard──▶ preview

Failures are recorded on the session (`error`) before being raised, so the
caller can always show the message and offer a retry or the standard path.
"""
import logging
from typing import Callable, Optional

from core.ai_collection_builder import build_ai_collection
from core.collection_builder import build_collection
from core.dbml_parser import parse_dbml
from core.errors import AnalysisError, EmptySchemaError, ImportFlowError, SchemaFetchError
from core.selection import TableSelection
from integrations.ucode_client import UCodeClient
from models.analysis import AnalysisResult, AnalyzeRequest, AnalyzeResponse
from models.collection import PostmanCollection
from models.imports import ImportSessionCreate, ImportSessionState, TablePreview
from models.schema import Schema

logger = logging.getLogger(__name__)

Analyzer = Callable[[AnalyzeRequest], AnalyzeResponse]


class ImportSession:
    """State of a single import; discarded on reset or after import."""

    def __init__(self, session_id: str, config: ImportSessionCreate):
        self.session_id = session_id
        self.config = config
        self._clear()

    def _clear(self) -> None:
        self.step = "config"
        self.error: Optional[str] = None
        self.raw_dbml = ""
        self.schema: Optional[Schema] = None
        self.analysis: Optional[AnalysisResult] = None
        self.model: Optional[str] = None
        self.selection: Optional[TableSelection] = None
        self._collection: Optional[PostmanCollection] = None

    @property
    def project_id(self) -> str:
        return self.config.project_id.strip()

    @property
    def environment_id(self) -> str:
        return self.config.environment_id.strip()

    @property
    def api_key(self) -> str:
        return self.config.api_key.strip()

    # ── Loading ───────────────────────────────────────────────────────────────

    def fetch_and_load(self, client: UCodeClient, analyzer: Optional[Analyzer] = None) -> None:
        """Fetch the project's DBML from the remote schema endpoint, then load it."""
        if not self.project_id or not self.environment_id:
            self.error = "Project ID and Environment ID are required"
            raise ImportFlowError(self.error)
        try:
            dbml = client.fetch_dbml(self.project_id, self.environment_id, self.api_key)
        except SchemaFetchError as e:
            self.error = str(e)
            raise
        self.load_dbml(dbml, analyzer)

    def load_dbml(self, dbml: str, analyzer: Optional[Analyzer] = None) -> None:
        """Parse DBML and build the preview; runs the analysis when AI is enabled."""
        # A reload never inherits the previous schema, analysis or preview
        self._clear()
        if not dbml or not dbml.strip():
            self.error = "Please paste the DBML content"
            raise EmptySchemaError(self.error)

        schema = parse_dbml(dbml)
        if not schema.tables:
            self.error = "No tables found in the DBML content"
            raise EmptySchemaError(self.error)

        self.raw_dbml = dbml
        self.schema = schema

        if self.config.ai_enabled and analyzer is not None:
            self._run_analysis(analyzer)
        else:
            self._build_standard()

    def _run_analysis(self, analyzer: Analyzer) -> None:
        req = AnalyzeRequest(
            dbml=self.raw_dbml,
            project_id=self.project_id,
            environment_id=self.environment_id,
            base_url=self.config.base_url or "",
            ucode_api_key=self.api_key,
        )
        try:
            result = analyzer(req)
        except AnalysisError as e:
            logger.warning("Analysis failed for session %s: %s", self.session_id, e)
            self.error = f"{e}. You can try again or use the standard collection."
            raise

        self.analysis = result.analysis
        self.model = result.model
        self.selection = TableSelection.from_analysis(self.schema.table_names(), result.analysis)
        self._collection = None
        self.step = "ai-preview"

    def _build_standard(self) -> None:
        self._collection = build_collection(
            self.schema,
            self.project_id,
            self.environment_id,
            self.api_key,
            self.config.base_url,
        )
        self.analysis = None
        self.selection = None
        self.step = "preview"

    def fallback_to_standard(self) -> None:
        """Discard the analysis and build the standard collection from the cached schema."""
        if self.schema is None:
            raise ImportFlowError("No schema loaded; fetch or paste DBML first")
        self.error = None
        self._build_standard()

    # ── Selection ─────────────────────────────────────────────────────────────

    def _require_selection(self) -> TableSelection:
        if self.step != "ai-preview" or self.selection is None:
            raise ImportFlowError("Table selection is only available in the AI preview step")
        return self.selection

    def select_all(self) -> None:
        self.selection = self._require_selection().select_all()

    def deselect_all(self) -> None:
        self.selection = self._require_selection().deselect_all()

    def toggle(self, table_name: str) -> None:
        self.selection = self._require_selection().toggle(table_name)

    def set_filter(self, text: str) -> None:
        self.selection = self._require_selection().set_filter(text)

    def preview_tables(self) -> list[TablePreview]:
        """Visible tables with their selection state and analysis badges."""
        if self.step == "preview" and self.schema is not None:
            return [TablePreview(name=n, selected=True) for n in self.schema.table_names()]

        selection = self._require_selection()
        auth = self.analysis.auth_table_names()
        skipped = set(self.analysis.skip_tables)
        essential = self.analysis.essential_table_names()
        return [
            TablePreview(
                name=name,
                selected=selection.is_selected(name),
                is_auth=name in auth,
                is_skipped=name in skipped,
                is_essential=name in essential,
            )
            for name in selection.visible_tables()
        ]

    # ── Output ────────────────────────────────────────────────────────────────

    def collection(self) -> PostmanCollection:
        if self.step == "ai-preview":
            # Regenerated so the current selection is applied
            return build_ai_collection(
                self.schema,
                self.analysis,
                self.project_id,
                self.environment_id,
                self.api_key,
                self.config.base_url,
                selection=self.selection.selected,
            )
        if self.step == "preview" and self._collection is not None:
            return self._collection
        raise ImportFlowError("Nothing to import yet; fetch or paste DBML first")

    def collection_json(self) -> str:
        return self.collection().to_json()

    def reset(self) -> None:
        self._clear()

    def state(self) -> ImportSessionState:
        selected = self.selection.selected_names() if self.selection else []
        return ImportSessionState(
            session_id=self.session_id,
            step=self.step,
            ai_enabled=self.config.ai_enabled,
            error=self.error,
            tables_count=len(self.schema.tables) if self.schema else 0,
            table_names=self.schema.table_names() if self.schema else [],
            project_summary=self.analysis.project_summary if self.analysis else None,
            model=self.model,
            selected_count=len(selected),
            selected_tables=selected,
            search_filter=self.selection.search_filter if self.selection else "",
        )
