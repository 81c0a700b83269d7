"""FastAPI application for the concept mastery graph."""
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root so CONCEPT_CATALOG_PATH etc. work when set locally
load_dotenv(Path(__file__).resolve().parent / ".env")

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from concept_engine import catalog as concept_catalog
from mastery import get_catalog, router as mastery_router


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def load_active_catalog():
    """Catalog for this process: the JSON file named by CONCEPT_CATALOG_PATH, else the built-in one.

    Raises ValueError if the file is unreadable, or if it has a prerequisite
    cycle and CONCEPT_CATALOG_STRICT is set.
    """
    path = os.getenv("CONCEPT_CATALOG_PATH", "").strip()
    cat = concept_catalog.load_catalog_file(path) if path else concept_catalog.CATALOG
    concept_catalog.validate_catalog(cat, strict=_env_flag("CONCEPT_CATALOG_STRICT"))
    return cat


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: load and validate the concept catalog once; it is never mutated afterwards."""
    app.state.catalog = load_active_catalog()
    logger.info("Concept catalog ready: %d topics", len(app.state.catalog))
    yield


app = FastAPI(title="Concept Mastery Graph", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(mastery_router, prefix="/api/concepts", tags=["concepts"])


@app.get("/health")
def health(cat=Depends(get_catalog)):
    """Health check: topic count and whether the prerequisite graph is acyclic."""
    _, cyclic = concept_catalog.topological_order(cat)
    return {
        "status": "healthy",
        "topics": len(cat),
        "acyclic": not cyclic,
    }
