"""/api/imports — stateful DBML import sessions (fetch or paste, AI preview, selection, import)."""
import logging
import uuid
from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from api.analyze import run_analysis
from config import settings
from core.errors import AnalysisError, EmptySchemaError, ImportFlowError, SchemaFetchError
from core.import_flow import ImportSession
from integrations.ucode_client import UCodeClient
from models.imports import (
    DBMLPasteRequest, FilterRequest, ImportSessionCreate, ImportSessionState,
    TablePreview, ToggleRequest,
)

router = APIRouter(prefix="/imports", tags=["imports"])
logger = logging.getLogger(__name__)

# In-memory registry: session_id → ImportSession
_sessions: dict[str, ImportSession] = {}


def get_session(session_id: str) -> ImportSession:
    if session_id not in _sessions:
        raise HTTPException(404, detail=f"Import session '{session_id}' not found.")
    return _sessions[session_id]


def _analyzer():
    return run_analysis if settings.AI_ANALYSIS_ENABLED else None


def _load(session: ImportSession, action) -> ImportSessionState:
    try:
        action()
    except (EmptySchemaError, ImportFlowError) as e:
        raise HTTPException(400, detail=str(e))
    except SchemaFetchError as e:
        raise HTTPException(502, detail=str(e))
    except AnalysisError:
        # Schema stays cached on the session; the client may POST /fallback
        raise HTTPException(502, detail=session.error)
    return session.state()


@router.post("", response_model=ImportSessionState, status_code=201)
def create_session(req: ImportSessionCreate):
    session = ImportSession(uuid.uuid4().hex, req)
    _sessions[session.session_id] = session
    logger.info("Import session %s created (ai=%s)", session.session_id, req.ai_enabled)
    return session.state()


@router.get("/{session_id}", response_model=ImportSessionState)
def get_state(session_id: str):
    return get_session(session_id).state()


@router.post("/{session_id}/fetch", response_model=ImportSessionState)
def fetch(session_id: str):
    session = get_session(session_id)

    def action():
        with UCodeClient(session.config.base_url) as client:
            session.fetch_and_load(client, _analyzer())

    return _load(session, action)


@router.post("/{session_id}/paste", response_model=ImportSessionState)
def paste(session_id: str, req: DBMLPasteRequest):
    session = get_session(session_id)
    return _load(session, lambda: session.load_dbml(req.dbml, _analyzer()))


@router.post("/{session_id}/fallback", response_model=ImportSessionState)
def fallback(session_id: str):
    session = get_session(session_id)
    return _load(session, session.fallback_to_standard)


@router.get("/{session_id}/tables", response_model=list[TablePreview])
def tables(session_id: str):
    session = get_session(session_id)
    try:
        return session.preview_tables()
    except ImportFlowError as e:
        raise HTTPException(409, detail=str(e))


def _edit_selection(session: ImportSession, action) -> ImportSessionState:
    try:
        action()
    except ImportFlowError as e:
        raise HTTPException(409, detail=str(e))
    return session.state()


@router.post("/{session_id}/selection/select-all", response_model=ImportSessionState)
def select_all(session_id: str):
    session = get_session(session_id)
    return _edit_selection(session, session.select_all)


@router.post("/{session_id}/selection/deselect-all", response_model=ImportSessionState)
def deselect_all(session_id: str):
    session = get_session(session_id)
    return _edit_selection(session, session.deselect_all)


@router.post("/{session_id}/selection/toggle", response_model=ImportSessionState)
def toggle(session_id: str, req: ToggleRequest):
    session = get_session(session_id)
    return _edit_selection(session, lambda: session.toggle(req.table_name))


@router.post("/{session_id}/selection/filter", response_model=ImportSessionState)
def set_filter(session_id: str, req: FilterRequest):
    session = get_session(session_id)
    return _edit_selection(session, lambda: session.set_filter(req.search))


@router.get("/{session_id}/collection")
def collection(session_id: str):
    """Final collection JSON; the session is discarded once it is handed out."""
    session = get_session(session_id)
    try:
        body = session.collection_json()
    except ImportFlowError as e:
        raise HTTPException(409, detail=str(e))
    del _sessions[session_id]
    return Response(content=body, media_type="application/json")


@router.delete("/{session_id}")
def reset(session_id: str):
    session = get_session(session_id)
    session.reset()
    del _sessions[session_id]
    return {"message": f"Import session '{session_id}' reset."}
