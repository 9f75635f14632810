"""
api.main
========

HTTP layer over the club engine.  Engine errors are translated to status
codes by the exception handlers registered below; routers never catch
them.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tsfclub.errors import (
    ClubError,
    DuplicateEntity,
    InvalidStateTransition,
    NotFound,
    StaleEntity,
    ValidationError,
)
from tsfclub.settings import settings

from .accounts import router as accounts_router
from .chapters import router as chapters_router
from .colleges import router as colleges_router
from .dashboard import router as dashboard_router
from .meetings import router as meetings_router
from .memberships import router as memberships_router
from .points import router as points_router

logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title="TSF Club API",
    version="0.1.0",
    description="Colleges, chapters, memberships, meetings, points and certificates.",
)

# --- CORS ----------------------------------------------------------
# Dev front‑end origins; tighten for deployment.
origins = [
    "http://localhost:5173",    # Vite dev server default port
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

# --- Error mapping ----------------------------------------------------
# most specific first; anything else derived from ClubError is a 400
STATUS_FOR_ERROR = [
    (NotFound, 404),
    (StaleEntity, 409),
    (InvalidStateTransition, 409),
    (DuplicateEntity, 409),
    (ValidationError, 422),
]


@app.exception_handler(ClubError)
async def club_error_handler(request: Request, exc: ClubError) -> JSONResponse:
    status = next((code for cls, code in STATUS_FOR_ERROR if isinstance(exc, cls)), 400)
    if status != 404:
        logger.warning(f"{request.method} {request.url.path} → {status}: {exc}")
    return JSONResponse(
        status_code=status,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


# --- Include Routers ----------------------------------------------------------
app.include_router(colleges_router)
app.include_router(chapters_router)
app.include_router(memberships_router)
app.include_router(points_router)
app.include_router(meetings_router)
app.include_router(accounts_router)
app.include_router(dashboard_router)


# ---------- health-check ----------
@app.get("/")
def root():
    return {"status": "ok", "msg": "TSF Club API is alive"}
