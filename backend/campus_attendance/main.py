"""
Point d'entrée principal de l'API de présences du campus.
Démarrage : uvicorn campus_attendance.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import campus_attendance.models  # noqa: F401 — enregistre tous les modèles dans Base.metadata avant les routers
from campus_attendance.config import settings
from campus_attendance.routers import gate, scan
from campus_attendance.scheduler import start_scheduler, stop_scheduler

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie de l'application : démarre et arrête le scheduler APScheduler."""
    start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(
    title="Campus Attendance API",
    description="Enregistrement des présences par scan de cartes NFC (portails et cours)",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS ouvert : le scan est appelé depuis les postes de sécurité et les terminaux.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


app.include_router(scan.router)
app.include_router(gate.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Sur /api/scan, un corps absent ou invalide est un invalid_request (400)
    dans l'enveloppe {"ok": false}. Ailleurs, réponse 422 standard de FastAPI.
    """
    if request.url.path == scan.SCAN_PATH:
        logger.info("Scan invalide : %s", exc.errors())
        return scan.error_response("invalid_request", 400)
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées et renvoie internal_server_error (500).
    Ce handler s'exécute dans ServerErrorMiddleware, en dehors de CORSMiddleware :
    les headers CORS sont ajoutés par error_response elle-même.
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return scan.error_response("internal_server_error", 500)


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "Campus Attendance API", "version": "0.1.0"}
