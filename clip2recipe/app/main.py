from __future__ import annotations

import logging
import sys

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from clip2recipe import __version__
from clip2recipe.app.config import settings
from clip2recipe.app.deps import get_orchestrator
from clip2recipe.app.routers.errors import error_response
from clip2recipe.app.routers.jobs import router as jobs_router
from clip2recipe.app.routers.uploads import router as uploads_router

# Plain stdout logging (works for dev and containers)
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

app = FastAPI(title="clip2recipe API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(uploads_router)
app.include_router(jobs_router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return error_response(status.HTTP_400_BAD_REQUEST, "invalid_request", message)


@app.on_event("startup")
async def startup() -> None:
    await get_orchestrator().start()


@app.on_event("shutdown")
async def shutdown() -> None:
    await get_orchestrator().stop()


@app.get("/health")
def health():
    return {"ok": True}
