import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spellseeker.api import health_router, translate_router
from spellseeker.compiler.consistency import check_mapping_tags
from spellseeker.config import settings
from spellseeker.db.database import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    drift = check_mapping_tags()
    if drift:
        logger.warning("MAPPING_TABLES_DRIFTED", extra={"entries": len(drift)})
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("spellseeker"),
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(translate_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
