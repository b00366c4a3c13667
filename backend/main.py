"""
DBML Collection Studio — schema-to-API-collection synthesis service.
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import analyze, dbml, generate, health, imports
from config import settings

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger("collection_studio")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Collection Studio starting up…")
    yield
    logger.info("Collection Studio shutting down.")


# ── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="DBML Collection Studio",
    description="Generates Postman collections (CRUD, auth and file flows) from DBML schemas.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(health.router,   prefix="/api")
app.include_router(dbml.router,     prefix="/api")
app.include_router(generate.router, prefix="/api")
app.include_router(analyze.router,  prefix="/api")
app.include_router(imports.router,  prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.API_HOST, port=settings.API_PORT)
