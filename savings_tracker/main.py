"""
Savings Tracker — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from savings_tracker import __version__
from savings_tracker.api.router_meta import router as meta_router
from savings_tracker.api.router_savings import router as savings_router
from savings_tracker.config import DATA_DIR, LOG_FORMAT, LOG_LEVEL, STATIC_DIR
from savings_tracker.data.store import SavingsStore
from savings_tracker.errors import SavingsError

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Root logging setup; ParseWarnings are routed into the log as well."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.captureWarnings(True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load both CSVs once, before the first request is served."""
    if getattr(app.state, "store", None) is None:
        data_dir: Path = app.state.data_dir
        logger.info("SAVINGS_DATA_DIR = %s (exists = %s)", data_dir, data_dir.is_dir())
        app.state.store = SavingsStore.load(data_dir)

    store: SavingsStore = app.state.store
    if store.device_count() > 0:
        logger.info(
            "Savings Tracker ready — %s devices, %s records",
            f"{store.device_count():,}", f"{store.record_count():,}",
        )
    else:
        logger.warning("Savings Tracker ready — no device data loaded, serving empty datasets")
    yield


async def savings_error_handler(request: Request, exc: SavingsError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app(
    store: SavingsStore | None = None,
    data_dir: Path = DATA_DIR,
    static_dir: Path = STATIC_DIR,
) -> FastAPI:
    """Build the API. Passing a store skips CSV loading at startup."""
    configure_logging()

    app = FastAPI(
        title="Savings Tracker API",
        description="Device carbon and fuel savings, filtered by device-local date ranges",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.data_dir = data_dir

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SavingsError, savings_error_handler)

    app.include_router(meta_router)
    app.include_router(savings_router)

    if static_dir.is_dir():
        index_html = static_dir / "index.html"
        if index_html.is_file():
            # no-cache so browsers always pick up a fresh chart script
            @app.get("/", include_in_schema=False)
            async def serve_index():
                return FileResponse(
                    index_html,
                    headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
                )

        app.mount("/", StaticFiles(directory=str(static_dir)), name="static")

    return app


app = create_app()
